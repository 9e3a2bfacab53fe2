from sqlalchemy.ext.asyncio import AsyncEngine

from inventra.db.base import Base

# Importing the model modules registers their tables on Base.metadata.
from inventra.db.models import (  # noqa: F401
    audit_logs,
    categories,
    customers,
    inventory_balances,
    locations,
    organizations,
    plans,
    products,
    profiles,
    purchase_orders,
    sales_orders,
    stock_adjustments,
    stock_transfers,
    suppliers,
)


async def create_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
