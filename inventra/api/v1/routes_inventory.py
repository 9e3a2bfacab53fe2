# inventra/api/v1/routes_inventory.py
from fastapi import APIRouter, Depends
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import editor, reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.catalog.schemas import BalanceRow, BalanceSet, InventoryRow
from inventra.domain.catalog.service import list_inventory, list_location_balances, set_opening_balance


router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


@router.get("", response_model=List[InventoryRow])
async def list_inventory_endpoint(
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await list_inventory(db, ctx)

@router.get("/balances", response_model=List[BalanceRow])
async def list_balances_endpoint(
    product_sku: Optional[str] = None,
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await list_location_balances(db, ctx, product_sku)

@router.put("/balances", response_model=BalanceRow)
async def set_balance_endpoint(
    payload: BalanceSet,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    return await set_opening_balance(db, ctx, payload)
