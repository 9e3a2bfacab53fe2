# inventra/domain/billing/service.py
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import LimitExceededError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import TenantContext
from inventra.db.models.categories import Category
from inventra.db.models.customers import Customer
from inventra.db.models.locations import Location
from inventra.db.models.products import Product
from inventra.db.models.profiles import Profile
from inventra.db.models.purchase_orders import PurchaseOrder
from inventra.db.models.sales_orders import SalesOrder
from inventra.db.models.stock_adjustments import StockAdjustment
from inventra.db.models.suppliers import Supplier
from inventra.db.repositories.plans import count_tenant_rows, get_subscription_with_plan

logger = get_logger("billing")

Number = Union[int, float]
PlanLimits = Dict[str, Union[Number, bool]]

# Gated resource key -> the tenant-scoped table it counts.
USAGE_MODELS = {
    "products": Product,
    "categories": Category,
    "suppliers": Supplier,
    "customers": Customer,
    "locations": Location,
    "purchase_orders": PurchaseOrder,
    "sales_orders": SalesOrder,
    "stock_adjustments": StockAdjustment,
    "users": Profile,
}


@dataclass(frozen=True)
class TenantPlan:
    id: Optional[str]
    name: str
    status: str
    limits: PlanLimits = field(default_factory=dict)
    cancel_at_period_end: bool = False


DEFAULT_PLAN = TenantPlan(
    id=None,
    name="Free",
    status="free",
    limits={
        "users": 3,
        "products": 50,
        "categories": 20,
        "suppliers": 20,
        "customers": 50,
        "locations": 2,
        "purchase_orders": 50,
        "sales_orders": 50,
        "stock_adjustments": 200,
        "reports": False,
    },
)


@dataclass(frozen=True)
class LimitCheck:
    ok: bool
    plan: TenantPlan
    limit: Optional[Number] = None
    current: Optional[int] = None


def numeric_limit(limits: PlanLimits, resource_key: str) -> Optional[Number]:
    """The numeric cap for ``resource_key``, or None when it is unlimited.

    Booleans are feature flags, not caps, even though bool is an int.
    Whole floats (JSON ``5.0``) come back as ints.
    """
    value = limits.get(resource_key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def is_feature_enabled(plan: TenantPlan, feature_key: str) -> bool:
    """A boolean flag is honoured as-is; any other value leaves the feature on."""
    value = plan.limits.get(feature_key)
    if isinstance(value, bool):
        return value
    return True


async def get_tenant_plan(db: AsyncSession, ctx: TenantContext) -> TenantPlan:
    row = await get_subscription_with_plan(db, ctx.tenant_id)
    if row is None:
        return DEFAULT_PLAN

    subscription, plan = row
    return TenantPlan(
        id=str(plan.id),
        name=plan.name or DEFAULT_PLAN.name,
        status=subscription.status or DEFAULT_PLAN.status,
        limits=plan.limits if plan.limits is not None else DEFAULT_PLAN.limits,
        cancel_at_period_end=bool(subscription.cancel_at_period_end),
    )


async def count_resource(db: AsyncSession, ctx: TenantContext, resource_key: str) -> int:
    model = USAGE_MODELS.get(resource_key)
    if model is None:
        return 0
    return await count_tenant_rows(db, ctx.tenant_id, model)


async def check_limit(db: AsyncSession, ctx: TenantContext, resource_key: str) -> LimitCheck:
    plan = await get_tenant_plan(db, ctx)
    limit = numeric_limit(plan.limits, resource_key)
    if limit is None:
        return LimitCheck(ok=True, plan=plan)

    current = await count_resource(db, ctx, resource_key)
    return LimitCheck(ok=current < limit, plan=plan, limit=limit, current=current)


async def enforce_limit(db: AsyncSession, ctx: TenantContext, resource_key: str) -> LimitCheck:
    """Raise LimitExceededError unless one more ``resource_key`` row fits the plan."""
    check = await check_limit(db, ctx, resource_key)
    if not check.ok:
        logger.info(
            "plan_limit_reached",
            extra={"resource_key": resource_key, "limit": check.limit, "current": check.current, "plan": check.plan.name},
        )
        raise LimitExceededError(check.plan.name, resource_key, check.limit, check.current)
    return check


async def get_usage(db: AsyncSession, ctx: TenantContext) -> Dict[str, int]:
    return {key: await count_resource(db, ctx, key) for key in USAGE_MODELS}
