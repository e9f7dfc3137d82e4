"""
Pytest configuration and shared fixtures.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.main import app
from app.models import Base, Listing, get_db
from app.services.auth import create_token, create_user


@pytest.fixture
def rental_draft_data() -> dict:
    """Accumulated draft fields for a complete rental submission."""
    return {
        "property_type": "Apartment",
        "bhk_type": "2BHK",
        "built_up_area": 1100,
        "state": "Maharashtra",
        "city": "Pune",
        "locality": "Baner",
        "expected_rent": 25000,
        "amenities": ["lift", "parking"],
        "images": ["/media/a.jpg"],
    }


@pytest.fixture
def sale_step_payloads() -> dict[int, dict]:
    """Raw camelCase wizard payloads for a resale flat, keyed by step."""
    return {
        1: {
            "propertyType": "Apartment",
            "bhkType": "3BHK",
            "builtUpArea": 1450,
            "floorNo": 4,
            "totalFloors": 12,
        },
        2: {"state": "Telangana", "city": "Hyderabad", "locality": "Gachibowli"},
        3: {"expectedPrice": 12500000, "priceNegotiable": True},
        4: {"lift": "Yes", "parking": "Car", "powerBackup": None},
        5: {"images": ["/media/front.jpg", {"name": "pending.png"}], "video": None},
        6: {"availability": "weekends", "startTime": "10:00"},
    }


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def api(session_factory):
    """HTTP client for the app, backed by the in-memory database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_token(user.id)}"}


@pytest.fixture
async def owner(db):
    return await create_user(db, "owner@example.com", "Ravi Kumar", "secret123", phone="+919876543210")


@pytest.fixture
async def buyer(db):
    return await create_user(db, "buyer@example.com", "Anita Shah", "secret123")


@pytest.fixture
async def admin(db):
    return await create_user(db, "admin@homehni.com", "Admin", "secret123", is_admin=True)


@pytest.fixture
def owner_headers(owner) -> dict[str, str]:
    return auth_headers(owner)


@pytest.fixture
def buyer_headers(buyer) -> dict[str, str]:
    return auth_headers(buyer)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def make_listing(db):
    """Factory that stores a listing (approved unless told otherwise)."""

    async def _make(owner=None, **overrides) -> Listing:
        fields = {
            "title": "2BHK Apartment near IT Hub",
            "property_type": "Apartment/Flat",
            "intent": "buy",
            "price_inr": 7500000,
            "state": "Maharashtra",
            "city": "Pune",
            "bedrooms": 2,
            "media": ["/media/flat.jpg"],
            "badges": ["Metro Nearby"],
            "details": {},
            "status": "approved",
        }
        fields.update(overrides)
        listing = Listing(owner_id=owner.id if owner else None, **fields)
        db.add(listing)
        await db.commit()
        await db.refresh(listing)
        return listing

    return _make


@pytest.fixture
async def approved_listing(make_listing, owner) -> Listing:
    return await make_listing(owner)


@pytest.fixture
async def pending_listing(make_listing, owner) -> Listing:
    return await make_listing(
        owner, title="Villa awaiting review", city="Bangalore", state="Karnataka", status="pending"
    )
