"""Authorization capability over a loaded staff permission set"""

from typing import Dict, List, Optional, Tuple

from tableside.models.staff import ADMIN_COMPONENTS, AdminComponent, StaffRole


def _value(obj):
    return obj.value if hasattr(obj, "value") else obj


class AccessControl:
    """
    Single place every gated action consults.

    Built from a staff profile (ORM row or ``StaffProfileResponse``). With no
    profile every check is False. Components with no permission row read as
    no access.
    """

    def __init__(self, profile=None):
        self.profile = profile
        self._flags: Dict[str, Tuple[bool, bool]] = {}
        if profile is not None:
            for permission in profile.permissions or []:
                self._flags[_value(permission.component)] = (
                    bool(permission.can_view),
                    bool(permission.can_manage),
                )

    @property
    def active(self) -> bool:
        return bool(self.profile is not None and self.profile.active)

    @property
    def role(self) -> Optional[str]:
        if self.profile is None:
            return None
        return _value(self.profile.role)

    @property
    def is_owner(self) -> bool:
        return self.role == StaffRole.OWNER.value

    def can_view(self, component) -> bool:
        if not self.active:
            return False
        component = _value(component)
        if self.is_owner and component == AdminComponent.STAFF.value:
            return True
        return self._flags.get(component, (False, False))[0]

    def can_manage(self, component) -> bool:
        if not self.active:
            return False
        component = _value(component)
        # Owners implicitly manage staff
        if self.is_owner and component == AdminComponent.STAFF.value:
            return True
        return self._flags.get(component, (False, False))[1]

    @property
    def accessible_components(self) -> List[AdminComponent]:
        return [component for component in ADMIN_COMPONENTS if self.can_view(component)]
