"""
Pytest fixtures for the inventory service test suite.

Provides:
- A throwaway SQLite database per test (aiosqlite, file under tmp_path)
- Tenant contexts for each role
- Seed helpers for products, locations, balances and plans
- Captured structured logs
"""

import json
import logging
from io import StringIO
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from inventra.core.logging_config import LogContext, StructuredFormatter, configure_logging, reset_logging
from inventra.core.tenancy import Role, TenantContext
from inventra.db.init_db import create_tables
from inventra.db.models.locations import Location
from inventra.db.models.organizations import Organization
from inventra.db.models.plans import Plan, TenantSubscription
from inventra.db.models.products import Product
from inventra.db.models.profiles import Profile
from inventra.db.repositories.inventory_balances import set_balance


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventra logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            assert any(r["message"] == "stock_adjustment_created" for r in captured_logs())
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventra")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'inventra_test.db'}"


@pytest.fixture
async def engine(database_url):
    test_engine = create_async_engine(database_url, poolclass=NullPool)
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# =============================================================================
# Tenant fixtures
# =============================================================================


async def make_tenant(db: AsyncSession, name: str = "Acme", email: str | None = None) -> Organization:
    org = Organization(id=uuid4(), name=name, email=email)
    db.add(org)
    await db.commit()
    db.expunge(org)
    return org


async def make_member(
    db: AsyncSession,
    org: Organization,
    role: Role,
    email: str | None = None,
) -> TenantContext:
    profile = Profile(id=uuid4(), tenant_id=org.id, role=role.value, email=email)
    db.add(profile)
    await db.commit()
    return TenantContext(tenant_id=org.id, actor_id=profile.id, role=role)


@pytest.fixture
async def org(db):
    return await make_tenant(db, email="ops@acme.test")


@pytest.fixture
async def ctx(db, org):
    """A manager of the default tenant."""
    return await make_member(db, org, Role.MANAGER)


@pytest.fixture
async def other_ctx(db):
    """A manager of a second, unrelated tenant."""
    other = await make_tenant(db, name="Globex")
    return await make_member(db, other, Role.MANAGER)


# =============================================================================
# Seed helpers
# =============================================================================

# Seeded rows are detached after commit so a later rollback in the same
# session cannot expire them.


async def seed_product(
    db: AsyncSession,
    ctx: TenantContext,
    sku: str = "P1",
    quantity: int = 0,
    low_stock_threshold: int = 0,
) -> Product:
    product = Product(
        tenant_id=ctx.tenant_id,
        sku=sku,
        name=f"Product {sku}",
        quantity=quantity,
        unit_price=0,
        low_stock_threshold=low_stock_threshold,
    )
    db.add(product)
    await db.commit()
    db.expunge(product)
    return product


async def seed_location(db: AsyncSession, ctx: TenantContext, name: str) -> Location:
    location = Location(tenant_id=ctx.tenant_id, name=name)
    db.add(location)
    await db.commit()
    db.expunge(location)
    return location


async def seed_balance(db: AsyncSession, ctx: TenantContext, product, location, quantity: int) -> None:
    await set_balance(db, ctx, product.id, location.id, quantity)
    await db.commit()


async def subscribe(db: AsyncSession, ctx: TenantContext, limits: dict, name: str = "Starter") -> Plan:
    plan = Plan(id=uuid4(), name=f"{name}-{uuid4().hex[:6]}", limits=limits)
    db.add(plan)
    db.add(TenantSubscription(tenant_id=ctx.tenant_id, plan_id=plan.id, status="active"))
    await db.commit()
    return plan
