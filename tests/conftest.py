"""
Pytest configuration and shared fixtures.

Every test gets a fresh in-memory SQLite database built from the model
metadata, seeded with the default roles and permission catalogue.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret"

from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models.models  # noqa: F401
from core.get_db import Base
from core.settings import settings
from models.enums import ListingType
from models.utils import today
from repos.property_repo import PropertyRepo
from repos.role_repo import RoleRepo
from repos.user_repo import UserRepo
from services.role_service import RoleService


@pytest_asyncio.fixture
async def engine():
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
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db):
    await RoleService(db).seed()
    return db


@pytest.fixture
def make_user(seeded):
    counter = {"n": 0}

    async def _make(role_name: str, **overrides):
        counter["n"] += 1
        role = await RoleRepo(seeded).get_by_name(role_name)
        data = {
            "email": f"{role_name.lower()}{counter['n']}@example.com",
            "first_name": role_name.title(),
            "last_name": f"User{counter['n']}",
            "role_id": role.id,
        }
        data.update(overrides)
        return await UserRepo(seeded).create(data)

    return _make


@pytest.fixture
def make_listing(seeded):
    async def _make(owner, listing_type: ListingType, price=Decimal("250000.00")):
        repo = PropertyRepo(seeded)
        prop = await repo.create(
            {
                "owner_id": owner.id,
                "title": f"{listing_type.value.title()} flat",
                "address": "12 Marina Road",
            }
        )
        listing = await repo.create_listing(
            {
                "property_id": prop.id,
                "listed_by_id": owner.id,
                "listing_type": listing_type,
                "price": price,
            }
        )
        return prop, listing

    return _make


@pytest_asyncio.fixture
async def buyer(make_user):
    return await make_user("BUYER")


@pytest_asyncio.fixture
async def seller(make_user):
    return await make_user("SELLER")


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("ADMIN")


@pytest_asyncio.fixture
async def super_admin(make_user):
    return await make_user(settings.SUPER_ADMIN_ROLE)


@pytest_asyncio.fixture
async def rental(make_listing, seller):
    return await make_listing(seller, ListingType.FOR_RENT)


@pytest_asyncio.fixture
async def sale(make_listing, seller):
    return await make_listing(seller, ListingType.FOR_SALE)


@pytest.fixture
def days():
    def _days(n: int) -> str:
        return (today() + timedelta(days=n)).isoformat()

    return _days


@pytest.fixture
def strict_transitions(monkeypatch):
    monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", True)


@pytest.fixture
def relaxed_transitions(monkeypatch):
    monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", False)
