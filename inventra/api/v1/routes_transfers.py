# inventra/api/v1/routes_transfers.py
from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import editor, reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.stock.schemas import TransferCreate, TransferDetail, TransferOut
from inventra.domain.stock.transfers import create_transfer, list_transfers


router = APIRouter(prefix="/api/v1/transfers", tags=["transfers"])


@router.post("", response_model=TransferOut)
async def create_transfer_endpoint(
    payload: TransferCreate,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    return await create_transfer(db, ctx, payload)

@router.get("", response_model=List[TransferDetail])
async def list_transfers_endpoint(
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await list_transfers(db, ctx)
