# inventra/domain/orders/service.py
"""Purchase and sales orders and their one-way approval decision."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import ForbiddenError, InvalidTransitionError, OrderNotFoundError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import Role, TenantContext
from inventra.db.base import transaction
from inventra.db.models.approval import ApprovalStatus
from inventra.db.models.customers import Customer
from inventra.db.models.purchase_orders import PurchaseOrder
from inventra.db.models.sales_orders import SalesOrder
from inventra.db.models.suppliers import Supplier
from inventra.db.repositories.orders import get_order, list_orders_with_party
from inventra.domain.audit.service import record_audit
from inventra.domain.billing.service import enforce_limit
from inventra.domain.catalog.service import find_or_create
from inventra.domain.notifications.recipients import resolve_recipients
from inventra.domain.notifications.sender import OutgoingEmail
from inventra.domain.notifications.templates import build_approval_email
from .schemas import (
    ApprovalAction,
    OrderCreate,
    OrderOut,
    OrderUpdate,
    PurchaseOrderCreate,
    PurchaseOrderUpdate,
    SalesOrderCreate,
    SalesOrderUpdate,
)

logger = get_logger("orders")

APPROVER_ROLE = Role.MANAGER


@dataclass(frozen=True)
class OrderKind:
    key: str
    title: str
    model: type
    party_model: type
    party_kind: str
    party_attr: str
    create_schema: type
    update_schema: type


PURCHASE_ORDERS = OrderKind(
    "purchase_orders", "Purchase Order", PurchaseOrder, Supplier, "suppliers", "supplier_id",
    PurchaseOrderCreate, PurchaseOrderUpdate,
)
SALES_ORDERS = OrderKind(
    "sales_orders", "Sales Order", SalesOrder, Customer, "customers", "customer_id",
    SalesOrderCreate, SalesOrderUpdate,
)

ORDER_KINDS = {kind.key: kind for kind in (PURCHASE_ORDERS, SALES_ORDERS)}

_TARGET_STATUS = {
    ApprovalAction.APPROVE: ApprovalStatus.APPROVED,
    ApprovalAction.REJECT: ApprovalStatus.REJECTED,
}


@dataclass
class ApprovalOutcome:
    order: OrderOut
    notification: Optional[OutgoingEmail]


def _entity_type(kind: OrderKind) -> str:
    return kind.key[:-1]


def _out(order, party_name: Optional[str]) -> OrderOut:
    out = OrderOut.model_validate(order)
    out.party_name = party_name or ""
    return out


async def create_order(db: AsyncSession, ctx: TenantContext, kind: OrderKind, data: OrderCreate) -> OrderOut:
    party_name = (data.party_name or "").strip()
    async with transaction(db):
        await enforce_limit(db, ctx, kind.key)
        order = kind.model(
            tenant_id=ctx.tenant_id,
            reference=data.reference,
            status=data.status or "draft",
            total_amount=data.total_amount,
            approval_status=ApprovalStatus.PENDING,
        )
        if party_name:
            party = await find_or_create(db, ctx, kind.party_kind, party_name)
            setattr(order, kind.party_attr, party.id)
        db.add(order)

    await db.refresh(order)
    logger.info(f"{_entity_type(kind)}_created", extra={"order_id": order.id, "reference": order.reference})
    await record_audit(db, ctx, _entity_type(kind), order.id, "create", {"reference": order.reference})
    return _out(order, party_name)


async def list_orders(db: AsyncSession, ctx: TenantContext, kind: OrderKind) -> List[OrderOut]:
    rows = await list_orders_with_party(
        db, ctx, kind.model, kind.party_model, getattr(kind.model, kind.party_attr)
    )
    return [_out(order, party_name) for order, party_name in rows]


async def get_order_detail(db: AsyncSession, ctx: TenantContext, kind: OrderKind, order_id: UUID) -> OrderOut:
    rows = await list_orders_with_party(
        db, ctx, kind.model, kind.party_model, getattr(kind.model, kind.party_attr), order_id=order_id
    )
    if not rows:
        raise OrderNotFoundError(_entity_type(kind), order_id)
    order, party_name = rows[0]
    return _out(order, party_name)


async def update_order(
    db: AsyncSession,
    ctx: TenantContext,
    kind: OrderKind,
    order_id: UUID,
    data: OrderUpdate,
) -> OrderOut:
    """Edit reference, status, amount or party. An empty party name clears the party."""
    changes = data.model_dump(exclude_unset=True)
    party_changed = data.party_field is not None and data.party_field in changes
    party_name = (changes.pop(data.party_field) or "").strip() if party_changed else ""

    async with transaction(db):
        order = await get_order(db, ctx, kind.model, order_id, for_update=True)
        if order is None:
            raise OrderNotFoundError(_entity_type(kind), order_id)
        if party_changed:
            party_id = None
            if party_name:
                party_id = (await find_or_create(db, ctx, kind.party_kind, party_name)).id
            setattr(order, kind.party_attr, party_id)
        for attr, value in changes.items():
            if value is not None:
                setattr(order, attr, value)

    fields = sorted(data.model_dump(exclude_unset=True))
    logger.info(f"{_entity_type(kind)}_updated", extra={"order_id": order_id, "fields": fields})
    await record_audit(db, ctx, _entity_type(kind), order_id, "update", {"fields": fields})
    return await get_order_detail(db, ctx, kind, order_id)


async def delete_order(db: AsyncSession, ctx: TenantContext, kind: OrderKind, order_id: UUID) -> UUID:
    async with transaction(db):
        order = await get_order(db, ctx, kind.model, order_id, for_update=True)
        if order is None:
            raise OrderNotFoundError(_entity_type(kind), order_id)
        reference = order.reference
        await db.delete(order)

    logger.info(f"{_entity_type(kind)}_deleted", extra={"order_id": order_id, "reference": reference})
    await record_audit(db, ctx, _entity_type(kind), order_id, "delete", {"reference": reference})
    return order_id


async def decide_approval(
    db: AsyncSession,
    ctx: TenantContext,
    kind: OrderKind,
    order_id: UUID,
    action: ApprovalAction,
) -> ApprovalOutcome:
    """Move a pending order to approved or rejected.

    The decision is final. The notification is prepared here but delivered by
    the caller after the response, and failing to prepare it does not affect
    the decision.
    """
    if not ctx.can(APPROVER_ROLE):
        raise ForbiddenError()

    target = _TARGET_STATUS[action]
    async with transaction(db):
        order = await get_order(db, ctx, kind.model, order_id, for_update=True)
        if order is None:
            raise OrderNotFoundError(_entity_type(kind), order_id)
        if order.approval_status != ApprovalStatus.PENDING:
            raise InvalidTransitionError(ApprovalStatus(order.approval_status).value, target.value)

        order.approval_status = target
        order.approved_by = ctx.actor_id
        order.approved_at = datetime.now(timezone.utc)

    await db.refresh(order)
    logger.info(
        "order_approval_decided",
        extra={"order_kind": kind.key, "order_id": order_id, "approval_status": target.value},
    )
    await record_audit(db, ctx, _entity_type(kind), order_id, action.value, {"reference": order.reference})

    return ApprovalOutcome(
        order=_out(order, None),
        notification=await _approval_notification(db, ctx, kind, order, target),
    )


async def _approval_notification(
    db: AsyncSession,
    ctx: TenantContext,
    kind: OrderKind,
    order,
    target: ApprovalStatus,
) -> Optional[OutgoingEmail]:
    try:
        recipients = await resolve_recipients(db, ctx.tenant_id)
    except SQLAlchemyError:
        logger.warning("approval_recipients_unavailable", exc_info=True, extra={"order_id": order.id})
        return None

    if not recipients.emails:
        return None
    reference = order.reference or str(order.id)
    return OutgoingEmail(
        recipients=recipients.emails,
        subject=f"{kind.title} {reference} {target.value}",
        html=build_approval_email(
            recipients.org_name,
            recipients.org_logo_url,
            f"{kind.title} Update",
            reference,
            target.value,
        ),
    )
