from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.tenancy import TenantContext
from inventra.db.models.inventory_balances import InventoryBalance
from inventra.db.models.locations import Location
from inventra.db.models.products import Product

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_BALANCE_KEY = ["tenant_id", "product_id", "location_id"]


def _upsert(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    try:
        return _UPSERT_DIALECTS[dialect]
    except KeyError:
        raise NotImplementedError(f"balance upsert is not supported on {dialect}") from None


async def get_balance(
    db: AsyncSession,
    ctx: TenantContext,
    product_id: UUID,
    location_id: UUID,
) -> int:
    result = await db.execute(
        select(InventoryBalance.quantity).where(
            InventoryBalance.tenant_id == ctx.tenant_id,
            InventoryBalance.product_id == product_id,
            InventoryBalance.location_id == location_id,
        )
    )
    quantity = result.scalar_one_or_none()
    return quantity or 0


async def withdraw(
    db: AsyncSession,
    ctx: TenantContext,
    product_id: UUID,
    location_id: UUID,
    quantity: int,
) -> bool:
    """Take ``quantity`` out of a balance only if that leaves it non-negative.

    Returns False when the balance is missing or too small; nothing is
    written in that case.
    """
    result = await db.execute(
        update(InventoryBalance)
        .where(
            InventoryBalance.tenant_id == ctx.tenant_id,
            InventoryBalance.product_id == product_id,
            InventoryBalance.location_id == location_id,
            InventoryBalance.quantity >= quantity,
        )
        .values(quantity=InventoryBalance.quantity - quantity, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def deposit(
    db: AsyncSession,
    ctx: TenantContext,
    product_id: UUID,
    location_id: UUID,
    quantity: int,
) -> None:
    insert = _upsert(db)
    stmt = insert(InventoryBalance).values(
        id=uuid4(),
        tenant_id=ctx.tenant_id,
        product_id=product_id,
        location_id=location_id,
        quantity=quantity,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=_BALANCE_KEY,
        set_={"quantity": InventoryBalance.quantity + stmt.excluded.quantity, "updated_at": func.now()},
    )
    await db.execute(stmt)


async def set_balance(
    db: AsyncSession,
    ctx: TenantContext,
    product_id: UUID,
    location_id: UUID,
    quantity: int,
) -> None:
    insert = _upsert(db)
    stmt = insert(InventoryBalance).values(
        id=uuid4(),
        tenant_id=ctx.tenant_id,
        product_id=product_id,
        location_id=location_id,
        quantity=quantity,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=_BALANCE_KEY,
        set_={"quantity": stmt.excluded.quantity, "updated_at": func.now()},
    )
    await db.execute(stmt)


async def list_balances(
    db: AsyncSession,
    ctx: TenantContext,
    product_id: Optional[UUID] = None,
) -> List[tuple]:
    """(sku, product name, location name, quantity) rows."""
    stmt = (
        select(Product.sku, Product.name, Location.name, InventoryBalance.quantity)
        .join(Product, Product.id == InventoryBalance.product_id)
        .join(Location, Location.id == InventoryBalance.location_id)
        .where(InventoryBalance.tenant_id == ctx.tenant_id)
        .order_by(Product.name, Location.name)
    )
    if product_id is not None:
        stmt = stmt.where(InventoryBalance.product_id == product_id)
    result = await db.execute(stmt)
    return list(result.all())
