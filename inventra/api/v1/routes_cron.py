# inventra/api/v1/routes_cron.py
import hmac

from fastapi import APIRouter, BackgroundTasks, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.config import settings
from inventra.core.errors import UnauthorizedError
from inventra.db.base import get_db
from inventra.domain.notifications.low_stock import build_low_stock_alerts
from inventra.domain.notifications.sender import deliver


router = APIRouter(prefix="/api/v1/cron", tags=["cron"])


def require_cron_secret(x_cron_secret: str = Header(default="")) -> None:
    if not settings.CRON_SECRET or not hmac.compare_digest(x_cron_secret, settings.CRON_SECRET):
        raise UnauthorizedError()


@router.get("/low-stock", dependencies=[Depends(require_cron_secret)])
async def low_stock_endpoint(
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    alerts = await build_low_stock_alerts(db)
    for alert in alerts:
        background_tasks.add_task(deliver, alert)
    return {"sent": len(alerts)}
