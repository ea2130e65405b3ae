"""HTTP gateway from the storefront to the Tableside API"""

from typing import Any, List, Optional
from uuid import UUID

import httpx
import structlog

from tableside.models.order import OrderStatus
from tableside.schemas.auth import Token
from tableside.schemas.menu import CategoryResponse, MenuItemResponse
from tableside.schemas.order import (
    OrderCreate,
    OrderCreated,
    OrderListResponse,
    OrderResponse,
    OrderStatusLookup,
)
from tableside.schemas.site import PaymentMethodResponse, SiteSettings
from tableside.schemas.staff import StaffProfileResponse

logger = structlog.get_logger()


class PlatformError(Exception):
    """Non-success response from the API; ``detail`` is the server's text"""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
        if isinstance(detail, str):
            return detail
        # Request validation errors come back as a list
        if isinstance(detail, list):
            return "; ".join(str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail)
        return str(detail)
    return response.text


class StorefrontClient:
    """
    Async client for the storefront and admin panel.

    Holds one ``httpx.AsyncClient``. Pass ``transport`` to run against an
    in-process app. A bearer ``token`` is attached to every request once set.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self._http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            detail = _detail(response)
            logger.debug("API request failed", method=method, path=path, status=response.status_code, detail=detail)
            raise PlatformError(response.status_code, detail)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Authentication

    async def login(self, email: str, password: str) -> Token:
        data = await self._request("POST", "/auth/login", data={"username": email, "password": password})
        token = Token.model_validate(data)
        self.token = token.access_token
        return token

    async def me(self) -> StaffProfileResponse:
        return StaffProfileResponse.model_validate(await self._request("GET", "/auth/me"))

    # Catalog

    async def fetch_categories(self) -> List[CategoryResponse]:
        data = await self._request("GET", "/categories")
        return [CategoryResponse.model_validate(row) for row in data]

    async def fetch_menu_items(self, category: Optional[str] = None) -> List[MenuItemResponse]:
        params = {"category": category} if category else None
        data = await self._request("GET", "/menu_items", params=params)
        return [MenuItemResponse.model_validate(row) for row in data]

    async def fetch_payment_methods(self) -> List[PaymentMethodResponse]:
        data = await self._request("GET", "/payment_methods")
        return [PaymentMethodResponse.model_validate(row) for row in data]

    async def fetch_site_settings(self) -> SiteSettings:
        return SiteSettings.model_validate(await self._request("GET", "/site_settings"))

    # Orders

    async def create_order(self, order: OrderCreate) -> OrderCreated:
        data = await self._request("POST", "/orders", json=order.model_dump(mode="json"))
        return OrderCreated.model_validate(data)

    async def set_messenger_payload(self, order_id: UUID, order_code: str, payload: str) -> None:
        await self._request(
            "PUT",
            f"/orders/{order_id}/messenger_payload",
            json={"order_code": order_code, "messenger_payload": payload},
        )

    async def get_order_status(self, order_code: str) -> Optional[OrderStatusLookup]:
        data = await self._request("POST", "/rpc/get_order_status", json={"p_order_code": order_code})
        if data is None:
            return None
        return OrderStatusLookup.model_validate(data)

    async def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        page: int = 1,
        page_size: int = 200,
    ) -> OrderListResponse:
        params = {"page": page, "page_size": page_size}
        if status:
            params["status"] = OrderStatus(status).value
        return OrderListResponse.model_validate(await self._request("GET", "/orders", params=params))

    async def update_order_status(self, order_id: UUID, status: OrderStatus) -> OrderResponse:
        data = await self._request(
            "PUT",
            f"/orders/{order_id}/status",
            json={"status": OrderStatus(status).value},
        )
        return OrderResponse.model_validate(data)

    async def delete_order(self, order_id: UUID) -> None:
        await self._request("DELETE", f"/orders/{order_id}")
