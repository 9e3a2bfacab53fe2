# inventra/api/v1/routes_products.py
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import editor, reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.catalog.schemas import ProductCreate, ProductOut, ProductUpdate
from inventra.domain.catalog.service import create_product, delete_product, get_product, list_products, update_product


router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.post("", response_model=ProductOut)
async def create_product_endpoint(
    payload: ProductCreate,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    return await create_product(db, ctx, payload)

@router.get("", response_model=List[ProductOut])
async def list_products_endpoint(
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await list_products(db, ctx)

@router.get("/{product_id}", response_model=ProductOut)
async def get_product_endpoint(
    product_id: UUID,
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await get_product(db, ctx, product_id)

@router.put("/{product_id}", response_model=ProductOut)
async def update_product_endpoint(
    product_id: UUID,
    payload: ProductUpdate,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    return await update_product(db, ctx, product_id, payload)

@router.delete("/{product_id}")
async def delete_product_endpoint(
    product_id: UUID,
    ctx: TenantContext = Depends(editor),
    db: AsyncSession = Depends(get_db),
):
    deleted = await delete_product(db, ctx, product_id)
    return {"id": deleted}
