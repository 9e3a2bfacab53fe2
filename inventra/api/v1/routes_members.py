# inventra/api/v1/routes_members.py
from fastapi import APIRouter, Depends, Header
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import administrator
from inventra.core.auth import SupabaseAuth, get_auth_provider
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.members.schemas import MemberInvite, MemberOut, MemberUpdate
from inventra.domain.members.service import invite_member, list_members, update_member


router = APIRouter(prefix="/api/v1/members", tags=["members"])


@router.get("", response_model=List[MemberOut])
async def list_members_endpoint(
    ctx: TenantContext = Depends(administrator),
    db: AsyncSession = Depends(get_db),
):
    return await list_members(db, ctx)

@router.post("/invite", response_model=MemberOut)
async def invite_member_endpoint(
    payload: MemberInvite,
    origin: Optional[str] = Header(default=None),
    ctx: TenantContext = Depends(administrator),
    db: AsyncSession = Depends(get_db),
    provider: SupabaseAuth = Depends(get_auth_provider),
):
    redirect_to = f"{origin}/login" if origin else None
    return await invite_member(db, ctx, provider, payload, redirect_to)

@router.patch("/{member_id}", response_model=MemberOut)
async def update_member_endpoint(
    member_id: UUID,
    payload: MemberUpdate,
    ctx: TenantContext = Depends(administrator),
    db: AsyncSession = Depends(get_db),
    provider: SupabaseAuth = Depends(get_auth_provider),
):
    return await update_member(db, ctx, provider, member_id, payload)
