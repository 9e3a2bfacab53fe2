from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from inventra.core.tenancy import TenantContext
from inventra.db.models.locations import Location
from inventra.db.models.products import Product
from inventra.db.models.stock_transfers import StockTransfer


async def list_transfers_with_names(db: AsyncSession, ctx: TenantContext) -> List[tuple]:
    """(StockTransfer, sku, product name, from location, to location) rows, newest first."""
    source = aliased(Location)
    destination = aliased(Location)
    result = await db.execute(
        select(StockTransfer, Product.sku, Product.name, source.name, destination.name)
        .join(Product, Product.id == StockTransfer.product_id)
        .join(source, source.id == StockTransfer.from_location_id)
        .join(destination, destination.id == StockTransfer.to_location_id)
        .where(StockTransfer.tenant_id == ctx.tenant_id)
        .order_by(StockTransfer.created_at.desc())
    )
    return list(result.all())
