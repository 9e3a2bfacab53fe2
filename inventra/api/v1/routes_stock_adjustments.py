# inventra/api/v1/routes_stock_adjustments.py
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import editor, reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.stock.adjustments import (
    create_adjustment,
    delete_adjustment,
    get_adjustment_detail,
    list_adjustments,
    update_adjustment,
)
from inventra.domain.stock.schemas import AdjustmentDetail, AdjustmentIn, AdjustmentOut


router = APIRouter(prefix="/api/v1/stock-adjustments", tags=["stock-adjustments"])


@router.post("", response_model=AdjustmentOut)
async def create_adjustment_endpoint(
    payload: AdjustmentIn,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    return await create_adjustment(db, ctx, payload)

@router.get("", response_model=List[AdjustmentDetail])
async def list_adjustments_endpoint(
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await list_adjustments(db, ctx)

@router.get("/{adjustment_id}", response_model=AdjustmentDetail)
async def get_adjustment_endpoint(
    adjustment_id: UUID,
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await get_adjustment_detail(db, ctx, adjustment_id)

@router.put("/{adjustment_id}", response_model=AdjustmentOut)
async def update_adjustment_endpoint(
    adjustment_id: UUID,
    payload: AdjustmentIn,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    return await update_adjustment(db, ctx, adjustment_id, payload)

@router.delete("/{adjustment_id}")
async def delete_adjustment_endpoint(
    adjustment_id: UUID,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    deleted = await delete_adjustment(db, ctx, adjustment_id)
    return {"id": deleted}
