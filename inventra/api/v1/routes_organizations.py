# inventra/api/v1/routes_organizations.py
from fastapi import APIRouter, Depends
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import administrator, get_current_user_id
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.organizations.schemas import OrganizationCreate, OrganizationOut, OrganizationUpdate
from inventra.domain.organizations.service import create_organization, get_user_organization, update_organization


router = APIRouter(prefix="/api/v1/orgs", tags=["organizations"])


@router.get("", response_model=Optional[OrganizationOut])
async def get_organization_endpoint(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await get_user_organization(db, user_id)

@router.post("", response_model=OrganizationOut)
async def create_organization_endpoint(
    payload: OrganizationCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await create_organization(db, user_id, payload)

@router.put("", response_model=OrganizationOut)
async def update_organization_endpoint(
    payload: OrganizationUpdate,
    ctx: TenantContext = Depends(administrator),
    db: AsyncSession = Depends(get_db),
):
    return await update_organization(db, ctx, payload)
