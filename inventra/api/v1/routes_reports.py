# inventra/api/v1/routes_reports.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.domain.reports.schemas import AdvancedReport, ReportSummary
from inventra.domain.reports.service import build_advanced_report, build_summary


router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("", response_model=ReportSummary)
async def summary_endpoint(
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await build_summary(db, ctx)

@router.get("/advanced", response_model=AdvancedReport)
async def advanced_report_endpoint(
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    return await build_advanced_report(db, ctx)
