# inventra/api/v1/routes_catalog.py
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import editor, reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.catalog.schemas import NamedEntityCreate, NamedEntityOut, NamedEntityUpdate
from inventra.domain.catalog.service import NAMED_KINDS, create_named, delete_named, list_named, update_named


def build_named_router(kind: str) -> APIRouter:
    """CRUD endpoints for one name-addressed entity (categories, suppliers...)."""
    router = APIRouter(prefix=f"/api/v1/{kind}", tags=[kind])

    @router.post("", response_model=NamedEntityOut)
    async def create_endpoint(
        payload: NamedEntityCreate,
        ctx: TenantContext = Depends(editor),
        db: AsyncSession = Depends(get_db),
    ):
        return await create_named(db, ctx, kind, payload)

    @router.get("", response_model=List[NamedEntityOut])
    async def list_endpoint(
        ctx: TenantContext = Depends(reader),
        db: AsyncSession = Depends(get_db),
    ):
        return await list_named(db, ctx, kind)

    @router.put("/{entity_id}", response_model=NamedEntityOut)
    async def update_endpoint(
        entity_id: UUID,
        payload: NamedEntityUpdate,
        ctx: TenantContext = Depends(editor),
        db: AsyncSession = Depends(get_db),
    ):
        return await update_named(db, ctx, kind, entity_id, payload)

    @router.delete("/{entity_id}")
    async def delete_endpoint(
        entity_id: UUID,
        ctx: TenantContext = Depends(editor),
        db: AsyncSession = Depends(get_db),
    ):
        return {"id": await delete_named(db, ctx, kind, entity_id)}

    return router


routers = [build_named_router(kind) for kind in NAMED_KINDS]
