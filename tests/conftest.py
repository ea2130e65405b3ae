"""Test configuration and fixtures"""

from datetime import datetime, timedelta
from typing import NamedTuple
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from tableside.main import app
from tableside.database import Base, get_db
from tableside.models.menu import AddOn, Category, MenuItem, Variation
from tableside.models.site import PaymentMethod, SiteSetting
from tableside.models.staff import StaffRole
from tableside.models.user import User
from tableside.security import create_access_token, get_password_hash
from tableside.services import staff as staff_service
from tableside.storefront.client import StorefrontClient


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class StaffAccount(NamedTuple):
    user_id: UUID
    profile_id: UUID
    email: str
    password: str
    token: str


async def create_account(db: AsyncSession, email: str, role: StaffRole, password: str = "secret123") -> StaffAccount:
    """Login credential plus linked profile with the role's default permissions"""
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        display_name=email.split("@")[0].title(),
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    profile = await staff_service.create_profile(
        db,
        email=email,
        display_name=user.display_name,
        role=role,
        auth_user_id=user.id,
    )
    return StaffAccount(
        user_id=user.id,
        profile_id=profile.id,
        email=email,
        password=password,
        token=create_access_token(user),
    )


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def override_db(test_db):
    """Route the app's database dependency to the test session"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    yield test_db
    app.dependency_overrides.clear()


@pytest.fixture
async def client(override_db):
    """Anonymous test client"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def owner(test_db):
    return await create_account(test_db, "owner@example.com", StaffRole.OWNER)


@pytest.fixture
async def manager(test_db):
    return await create_account(test_db, "manager@example.com", StaffRole.MANAGER)


@pytest.fixture
async def staff_member(test_db):
    return await create_account(test_db, "staff@example.com", StaffRole.STAFF)


@pytest.fixture
async def owner_client(override_db, owner):
    """Client authenticated as the owner"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {owner.token}"},
    ) as client:
        yield client


@pytest.fixture
async def staff_client(override_db, staff_member):
    """Client authenticated as a plain staff member"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {staff_member.token}"},
    ) as client:
        yield client


@pytest.fixture
async def storefront(override_db):
    """Anonymous storefront gateway over the in-process app"""
    async with StorefrontClient(base_url="http://test", transport=ASGITransport(app=app)) as gateway:
        yield gateway


@pytest.fixture
async def test_menu(test_db):
    """Two categories, four items; returns item ids by name"""
    test_db.add_all([
        Category(id="cocktails", name="Cocktails", icon="🍸", sort_order=1, active=True),
        Category(id="coffee", name="Coffee", icon="☕", sort_order=2, active=True),
        Category(id="seasonal", name="Seasonal", sort_order=3, active=False),
    ])
    await test_db.flush()

    now = datetime.utcnow()
    mojito = MenuItem(
        name="Mojito",
        description="Rum, lime, mint",
        base_price_cents=15000,
        category_id="cocktails",
        popular=True,
        available=True,
    )
    latte = MenuItem(
        name="Spanish Latte",
        description="Espresso with sweetened milk",
        base_price_cents=12000,
        category_id="coffee",
        available=True,
        variations=[
            Variation(name="Regular", price_cents=0, sort_order=1),
            Variation(name="Large", price_cents=3000, sort_order=2),
        ],
        add_ons=[
            AddOn(name="Extra shot", price_cents=4000, category="extras"),
            AddOn(name="Oat milk", price_cents=2500, category="milk"),
        ],
    )
    happy_hour = MenuItem(
        name="Negroni",
        description="Gin, vermouth, campari",
        base_price_cents=30000,
        category_id="cocktails",
        available=True,
        discount_price_cents=20000,
        discount_active=True,
        discount_start_date=now - timedelta(hours=1),
        discount_end_date=now + timedelta(hours=1),
    )
    sold_out = MenuItem(
        name="Pumpkin Spice",
        base_price_cents=16000,
        category_id="coffee",
        available=False,
    )
    test_db.add_all([mojito, latte, happy_hour, sold_out])
    await test_db.commit()

    return {
        "Mojito": mojito.id,
        "Spanish Latte": latte.id,
        "Negroni": happy_hour.id,
        "Pumpkin Spice": sold_out.id,
    }


@pytest.fixture
async def test_payment_methods(test_db):
    test_db.add_all([
        PaymentMethod(
            id="gcash",
            name="GCash",
            account_number="0917 000 0000",
            account_name="Tableside Bar",
            qr_code_url="https://example.com/gcash.png",
            active=True,
            sort_order=1,
        ),
        PaymentMethod(
            id="retired",
            name="Old Wallet",
            account_number="0000",
            account_name="Tableside Bar",
            qr_code_url="https://example.com/old.png",
            active=False,
            sort_order=2,
        ),
    ])
    await test_db.commit()
    return ["gcash"]


@pytest.fixture
async def small_cart_limit(test_db):
    """Site configured with a cart limit of 5"""
    test_db.add(SiteSetting(id="cart_item_limit", value="5", type="number"))
    await test_db.commit()
    return 5


@pytest.fixture
async def messenger_page(test_db):
    test_db.add(SiteSetting(id="messenger_page", value="tablesidebar", type="text"))
    await test_db.commit()
    return "tablesidebar"


def build_order_payload(item_id, quantity=1, unit_price_cents=15000, **overrides):
    """Minimal valid order body"""
    payload = {
        "customer_name": "Juan dela Cruz",
        "contact_number": "09171234567",
        "service_type": "pickup",
        "payment_method": "gcash",
        "items": [
            {
                "id": str(item_id),
                "name": "Mojito",
                "quantity": quantity,
                "total_price_cents": unit_price_cents,
            }
        ],
        "tip_cents": 0,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def order_payload():
    return build_order_payload
