# inventra/domain/notifications/low_stock.py
from collections import OrderedDict
from typing import Dict, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.logging_config import get_logger
from inventra.db.models.products import Product
from inventra.db.repositories.products import find_low_stock_products
from .recipients import resolve_recipients
from .sender import OutgoingEmail
from .templates import build_low_stock_email

logger = get_logger("notifications.low_stock")


async def find_low_stock(db: AsyncSession) -> Dict[UUID, List[Product]]:
    """Products at or below their threshold, grouped by tenant."""
    by_tenant: Dict[UUID, List[Product]] = OrderedDict()
    for product in await find_low_stock_products(db):
        by_tenant.setdefault(product.tenant_id, []).append(product)
    return by_tenant


async def build_low_stock_alerts(db: AsyncSession) -> List[OutgoingEmail]:
    """One alert per tenant that has low-stock products and someone to tell."""
    alerts = []
    for tenant_id, products in (await find_low_stock(db)).items():
        recipients = await resolve_recipients(db, tenant_id)
        if not recipients.emails:
            logger.info("low_stock_no_recipients", extra={"tenant_id_checked": tenant_id, "products": len(products)})
            continue
        alerts.append(
            OutgoingEmail(
                recipients=recipients.emails,
                subject="Low Stock Alert",
                html=build_low_stock_email(recipients.org_name, recipients.org_logo_url, products),
            )
        )
    return alerts
