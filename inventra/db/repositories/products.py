from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import ProductNotFoundError
from inventra.core.tenancy import TenantContext
from inventra.db.models.categories import Category
from inventra.db.models.products import Product


async def get_product_by_sku(
    db: AsyncSession,
    ctx: TenantContext,
    sku: str,
) -> Optional[Product]:
    result = await db.execute(
        select(Product)
        .where(Product.tenant_id == ctx.tenant_id, Product.sku == sku)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_product_by_id(
    db: AsyncSession,
    ctx: TenantContext,
    product_id: UUID,
) -> Optional[Product]:
    result = await db.execute(
        select(Product)
        .where(Product.tenant_id == ctx.tenant_id, Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_products_with_category(db: AsyncSession, ctx: TenantContext) -> List[tuple]:
    """(Product, category name or None) pairs ordered by product name."""
    result = await db.execute(
        select(Product, Category.name)
        .outerjoin(Category, Category.id == Product.category_id)
        .where(Product.tenant_id == ctx.tenant_id)
        .order_by(Product.name)
        .execution_options(populate_existing=True)
    )
    return list(result.all())


async def get_quantity(db: AsyncSession, ctx: TenantContext, product_id: UUID) -> int:
    result = await db.execute(
        select(Product.quantity).where(Product.tenant_id == ctx.tenant_id, Product.id == product_id)
    )
    quantity = result.scalar_one_or_none()
    if quantity is None:
        raise ProductNotFoundError(product_id=product_id)
    return quantity


async def apply_quantity_delta(
    db: AsyncSession,
    ctx: TenantContext,
    product_id: UUID,
    delta: int,
) -> None:
    """Add ``delta`` to the on-hand quantity in one statement.

    The arithmetic happens in the database, so concurrent callers serialize
    on the row lock instead of overwriting each other's result.
    """
    result = await db.execute(
        update(Product)
        .where(Product.tenant_id == ctx.tenant_id, Product.id == product_id)
        .values(quantity=Product.quantity + delta, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise ProductNotFoundError(product_id=product_id)


async def find_low_stock_products(db: AsyncSession) -> List[Product]:
    """Products at or below their threshold across all tenants (batch job only)."""
    result = await db.execute(
        select(Product)
        .where(Product.quantity <= Product.low_stock_threshold)
        .order_by(Product.tenant_id, Product.name)
    )
    return list(result.scalars().all())
