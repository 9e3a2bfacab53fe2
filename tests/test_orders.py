"""Orders and the pending -> approved|rejected decision."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from inventra.core.errors import ForbiddenError, InvalidTransitionError, LimitExceededError, OrderNotFoundError
from inventra.core.tenancy import Role
from inventra.db.models.approval import ApprovalStatus
from inventra.db.models.audit_logs import AuditLog
from inventra.domain.catalog.service import list_named
from inventra.domain.orders.schemas import (
    ApprovalAction,
    PurchaseOrderCreate,
    PurchaseOrderUpdate,
    SalesOrderCreate,
    SalesOrderUpdate,
)
from inventra.domain.orders.service import (
    PURCHASE_ORDERS,
    SALES_ORDERS,
    create_order,
    decide_approval,
    delete_order,
    get_order_detail,
    list_orders,
    update_order,
)

from conftest import make_member, make_tenant, subscribe


@pytest.fixture
async def po(db, ctx):
    return await create_order(
        db, ctx, PURCHASE_ORDERS, PurchaseOrderCreate(reference="PO-1", supplier_name="Acme Supply", total_amount="120.00")
    )


class TestCreate:
    async def test_purchase_order_starts_pending(self, db, ctx, po):
        assert po.approval_status == ApprovalStatus.PENDING
        assert po.status == "draft"
        assert po.party_name == "Acme Supply"
        assert po.approved_by is None

    async def test_supplier_is_found_or_created(self, db, ctx, po):
        await create_order(db, ctx, PURCHASE_ORDERS, PurchaseOrderCreate(reference="PO-2", supplier_name="Acme Supply"))

        suppliers = await list_named(db, ctx, "suppliers")
        assert [s.name for s in suppliers] == ["Acme Supply"]

    async def test_sales_order_with_customer(self, db, ctx):
        order = await create_order(db, ctx, SALES_ORDERS, SalesOrderCreate(reference="SO-1", customer_name="Bob"))

        detail = await get_order_detail(db, ctx, SALES_ORDERS, order.id)
        assert detail.party_name == "Bob"
        assert [c.name for c in await list_named(db, ctx, "customers")] == ["Bob"]

    async def test_order_without_party(self, db, ctx):
        order = await create_order(db, ctx, SALES_ORDERS, SalesOrderCreate(reference="SO-2"))

        assert order.party_name == ""

    async def test_gated(self, db, ctx):
        await subscribe(db, ctx, {"sales_orders": 0})

        with pytest.raises(LimitExceededError):
            await create_order(db, ctx, SALES_ORDERS, SalesOrderCreate(reference="SO-3"))

    async def test_list_is_tenant_scoped(self, db, ctx, other_ctx, po):
        assert [o.reference for o in await list_orders(db, ctx, PURCHASE_ORDERS)] == ["PO-1"]
        assert await list_orders(db, other_ctx, PURCHASE_ORDERS) == []
        with pytest.raises(OrderNotFoundError):
            await get_order_detail(db, other_ctx, PURCHASE_ORDERS, po.id)


class TestUpdateAndDelete:
    async def test_update_fields_and_supplier(self, db, ctx, po):
        updated = await update_order(
            db, ctx, PURCHASE_ORDERS, po.id,
            PurchaseOrderUpdate(reference="PO-1b", total_amount="99.50", supplier_name="Beta Supply"),
        )

        assert (updated.reference, updated.total_amount, updated.party_name) == ("PO-1b", Decimal("99.50"), "Beta Supply")
        assert updated.status == "draft"
        assert updated.approval_status == ApprovalStatus.PENDING
        assert sorted(s.name for s in await list_named(db, ctx, "suppliers")) == ["Acme Supply", "Beta Supply"]

    async def test_missing_supplier_is_left_alone_and_empty_clears_it(self, db, ctx, po):
        kept = await update_order(db, ctx, PURCHASE_ORDERS, po.id, PurchaseOrderUpdate(status="sent"))
        assert (kept.status, kept.party_name) == ("sent", "Acme Supply")

        cleared = await update_order(db, ctx, PURCHASE_ORDERS, po.id, PurchaseOrderUpdate(supplier_name=""))
        assert cleared.party_name == ""

    async def test_update_does_not_reopen_a_decision(self, db, ctx, po):
        await decide_approval(db, ctx, PURCHASE_ORDERS, po.id, ApprovalAction.REJECT)

        updated = await update_order(db, ctx, PURCHASE_ORDERS, po.id, PurchaseOrderUpdate(reference="PO-1c"))

        assert updated.approval_status == ApprovalStatus.REJECTED

    async def test_sales_order_customer_update(self, db, ctx):
        order = await create_order(db, ctx, SALES_ORDERS, SalesOrderCreate(reference="SO-1"))

        updated = await update_order(db, ctx, SALES_ORDERS, order.id, SalesOrderUpdate(customer_name="Bob"))

        assert updated.party_name == "Bob"

    async def test_delete(self, db, ctx, po):
        assert await delete_order(db, ctx, PURCHASE_ORDERS, po.id) == po.id

        assert await list_orders(db, ctx, PURCHASE_ORDERS) == []
        with pytest.raises(OrderNotFoundError):
            await delete_order(db, ctx, PURCHASE_ORDERS, po.id)

    async def test_other_tenant_cannot_update_or_delete(self, db, ctx, other_ctx, po):
        with pytest.raises(OrderNotFoundError):
            await update_order(db, other_ctx, PURCHASE_ORDERS, po.id, PurchaseOrderUpdate(reference="X"))
        with pytest.raises(OrderNotFoundError):
            await delete_order(db, other_ctx, PURCHASE_ORDERS, po.id)

        assert (await get_order_detail(db, ctx, PURCHASE_ORDERS, po.id)).reference == "PO-1"


class TestApproval:
    async def test_approve(self, db, ctx, po):
        outcome = await decide_approval(db, ctx, PURCHASE_ORDERS, po.id, ApprovalAction.APPROVE)

        assert outcome.order.approval_status == ApprovalStatus.APPROVED
        assert outcome.order.approved_by == ctx.actor_id
        assert outcome.order.approved_at is not None

    async def test_reject(self, db, ctx, po):
        outcome = await decide_approval(db, ctx, PURCHASE_ORDERS, po.id, ApprovalAction.REJECT)

        assert outcome.order.approval_status == ApprovalStatus.REJECTED

    @pytest.mark.parametrize("second", [ApprovalAction.APPROVE, ApprovalAction.REJECT])
    async def test_decision_is_final(self, db, ctx, po, second):
        await decide_approval(db, ctx, PURCHASE_ORDERS, po.id, ApprovalAction.APPROVE)

        with pytest.raises(InvalidTransitionError) as exc_info:
            await decide_approval(db, ctx, PURCHASE_ORDERS, po.id, second)

        assert exc_info.value.current == "approved"
        detail = await get_order_detail(db, ctx, PURCHASE_ORDERS, po.id)
        assert detail.approval_status == ApprovalStatus.APPROVED

    async def test_staff_cannot_decide(self, db, org, ctx, po):
        staff = await make_member(db, org, Role.STAFF)

        with pytest.raises(ForbiddenError):
            await decide_approval(db, staff, PURCHASE_ORDERS, po.id, ApprovalAction.APPROVE)

        detail = await get_order_detail(db, ctx, PURCHASE_ORDERS, po.id)
        assert detail.approval_status == ApprovalStatus.PENDING

    async def test_other_tenant_gets_not_found(self, db, other_ctx, po):
        with pytest.raises(OrderNotFoundError):
            await decide_approval(db, other_ctx, PURCHASE_ORDERS, po.id, ApprovalAction.APPROVE)

    async def test_audit_records_action(self, db, ctx, po):
        await decide_approval(db, ctx, PURCHASE_ORDERS, po.id, ApprovalAction.REJECT)

        result = await db.execute(
            select(AuditLog.action).where(AuditLog.entity_id == str(po.id)).order_by(AuditLog.created_at)
        )
        assert set(result.scalars().all()) == {"create", "reject"}


class TestApprovalNotification:
    async def test_recipients_are_owner_admin_and_org_email(self, db, org, ctx, po):
        await make_member(db, org, Role.OWNER, email="a-owner@acme.test")
        await make_member(db, org, Role.ADMIN, email="b-admin@acme.test")
        await make_member(db, org, Role.STAFF, email="c-staff@acme.test")
        # same address as the organization contact
        await make_member(db, org, Role.ADMIN, email="ops@acme.test")

        outcome = await decide_approval(db, ctx, PURCHASE_ORDERS, po.id, ApprovalAction.APPROVE)

        email = outcome.notification
        assert email is not None
        assert sorted(email.recipients) == ["a-owner@acme.test", "b-admin@acme.test", "ops@acme.test"]
        assert email.subject == "Purchase Order PO-1 approved"
        assert "APPROVED" in email.html
        assert "PO-1" in email.html

    async def test_no_recipients_means_no_notification(self, db):
        bare = await make_tenant(db, name="Quiet")
        manager = await make_member(db, bare, Role.MANAGER)
        order = await create_order(db, manager, SALES_ORDERS, SalesOrderCreate(reference="SO-9"))

        outcome = await decide_approval(db, manager, SALES_ORDERS, order.id, ApprovalAction.APPROVE)

        assert outcome.order.approval_status == ApprovalStatus.APPROVED
        assert outcome.notification is None
