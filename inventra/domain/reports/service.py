# inventra/domain/reports/service.py
"""Tenant reports: the stock summary every plan gets and the plan-gated advanced report."""
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import FeatureUnavailableError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import TenantContext
from inventra.db.models.categories import Category
from inventra.db.models.customers import Customer
from inventra.db.models.products import Product
from inventra.db.models.suppliers import Supplier
from inventra.db.repositories.plans import count_tenant_rows
from inventra.db.repositories.products import list_products_with_category
from inventra.db.repositories.reports import list_adjustment_movements
from inventra.domain.billing.service import get_tenant_plan, is_feature_enabled
from .schemas import AdvancedReport, AgingItem, CategoryValuation, DailyMovement, LowStockItem, ReportSummary

logger = get_logger("reports")

REPORTS_FEATURE = "reports"
UNCATEGORIZED = "Uncategorized"
MOVEMENT_WINDOW = timedelta(days=30)
AGING_DAYS = 30
AGING_LIMIT = 10


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps; they are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _stock_value(product: Product) -> Decimal:
    return (product.quantity or 0) * Decimal(product.unit_price or 0)


async def build_summary(db: AsyncSession, ctx: TenantContext) -> ReportSummary:
    rows = await list_products_with_category(db, ctx)
    low_stock_items = [
        LowStockItem(
            sku=product.sku,
            name=product.name,
            on_hand=product.quantity,
            unit_price=product.unit_price,
            low_stock_threshold=product.low_stock_threshold,
        )
        for product, _ in rows
        if product.quantity <= product.low_stock_threshold
    ]
    return ReportSummary(
        products=len(rows),
        categories=await count_tenant_rows(db, ctx.tenant_id, Category),
        suppliers=await count_tenant_rows(db, ctx.tenant_id, Supplier),
        customers=await count_tenant_rows(db, ctx.tenant_id, Customer),
        low_stock=len(low_stock_items),
        total_stock_value=sum((_stock_value(product) for product, _ in rows), Decimal("0")),
        low_stock_items=low_stock_items,
    )


async def build_advanced_report(
    db: AsyncSession,
    ctx: TenantContext,
    now: Optional[datetime] = None,
) -> AdvancedReport:
    """Valuation by category, daily adjustment totals and slow movers.

    Raises FeatureUnavailableError when the tenant's plan turns reports off.
    """
    plan = await get_tenant_plan(db, ctx)
    if not is_feature_enabled(plan, REPORTS_FEATURE):
        logger.info("advanced_report_blocked", extra={"plan": plan.name})
        raise FeatureUnavailableError(REPORTS_FEATURE, "Reports are not available on your plan.")

    now = now or datetime.now(timezone.utc)
    cutoff = now - MOVEMENT_WINDOW

    latest_movement: Dict[UUID, datetime] = {}
    daily = defaultdict(int)
    for product_id, delta, created_at in await list_adjustment_movements(db, ctx):
        created_at = _as_utc(created_at)
        if product_id not in latest_movement or created_at > latest_movement[product_id]:
            latest_movement[product_id] = created_at
        if created_at >= cutoff:
            daily[created_at.date()] += delta or 0

    valuation = defaultdict(lambda: Decimal("0"))
    aging = []
    for product, category_name in await list_products_with_category(db, ctx):
        category = category_name or UNCATEGORIZED
        valuation[category] += _stock_value(product)
        last_movement = latest_movement.get(product.id) or _as_utc(product.created_at)
        days_since = (now - last_movement).days
        if days_since >= AGING_DAYS:
            aging.append(
                AgingItem(
                    id=product.id,
                    sku=product.sku,
                    name=product.name,
                    category=category,
                    on_hand=product.quantity,
                    unit_price=product.unit_price,
                    last_movement_at=last_movement,
                    days_since_movement=days_since,
                )
            )

    aging.sort(key=lambda item: item.days_since_movement, reverse=True)
    return AdvancedReport(
        valuation=sorted(
            (CategoryValuation(category=name, value=value) for name, value in valuation.items()),
            key=lambda row: row.value,
            reverse=True,
        ),
        movement_last_30=[DailyMovement(date=day, quantity=total) for day, total in sorted(daily.items())],
        aging=aging[:AGING_LIMIT],
    )
