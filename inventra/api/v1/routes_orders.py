# inventra/api/v1/routes_orders.py
from fastapi import APIRouter, BackgroundTasks, Depends
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import editor, reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.notifications.sender import deliver
from inventra.domain.orders.schemas import ApprovalDecision, OrderOut
from inventra.domain.orders.service import (
    ORDER_KINDS,
    OrderKind,
    create_order,
    decide_approval,
    delete_order,
    get_order_detail,
    list_orders,
    update_order,
)


def build_order_router(kind: OrderKind) -> APIRouter:
    path = kind.key.replace("_", "-")
    router = APIRouter(prefix=f"/api/v1/{path}", tags=[path])
    create_schema = kind.create_schema
    update_schema = kind.update_schema

    @router.post("", response_model=OrderOut)
    async def create_order_endpoint(
        payload: create_schema,
        ctx: TenantContext = Depends(editor),
        db: AsyncSession = Depends(get_db),
    ):
        return await create_order(db, ctx, kind, payload)

    @router.get("", response_model=List[OrderOut])
    async def list_orders_endpoint(
        ctx: TenantContext = Depends(reader),
        db: AsyncSession = Depends(get_db),
    ):
        return await list_orders(db, ctx, kind)

    @router.get("/{order_id}", response_model=OrderOut)
    async def get_order_endpoint(
        order_id: UUID,
        ctx: TenantContext = Depends(reader),
        db: AsyncSession = Depends(get_db),
    ):
        return await get_order_detail(db, ctx, kind, order_id)

    @router.put("/{order_id}", response_model=OrderOut)
    async def update_order_endpoint(
        order_id: UUID,
        payload: update_schema,
        ctx: TenantContext = Depends(editor),
        db: AsyncSession = Depends(get_db),
    ):
        return await update_order(db, ctx, kind, order_id, payload)

    @router.delete("/{order_id}")
    async def delete_order_endpoint(
        order_id: UUID,
        ctx: TenantContext = Depends(editor),
        db: AsyncSession = Depends(get_db),
    ):
        return {"id": await delete_order(db, ctx, kind, order_id)}

    @router.post("/{order_id}/approval", response_model=OrderOut)
    async def decide_approval_endpoint(
        order_id: UUID,
        payload: ApprovalDecision,
        background_tasks: BackgroundTasks,
        ctx: TenantContext = Depends(editor),
        db: AsyncSession = Depends(get_db),
    ):
        outcome = await decide_approval(db, ctx, kind, order_id, payload.action)
        if outcome.notification is not None:
            # sent after the response; delivery problems are only logged
            background_tasks.add_task(deliver, outcome.notification)
        return outcome.order

    return router


routers = [build_order_router(kind) for kind in ORDER_KINDS.values()]
