# inventra/domain/stock/transfers.py
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import InsufficientStockError, LocationNotFoundError, ProductNotFoundError, ValidationError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import TenantContext
from inventra.db.base import transaction
from inventra.db.models.locations import Location
from inventra.db.models.stock_transfers import StockTransfer, TransferStatus
from inventra.db.repositories.inventory_balances import deposit, get_balance, withdraw
from inventra.db.repositories.named_entities import get_many_by_name
from inventra.db.repositories.products import get_product_by_sku
from inventra.db.repositories.stock_transfers import list_transfers_with_names
from inventra.domain.audit.service import record_audit
from .schemas import TransferCreate, TransferDetail

logger = get_logger("stock.transfers")


async def create_transfer(
    db: AsyncSession,
    ctx: TenantContext,
    data: TransferCreate,
) -> StockTransfer:
    """Move ``quantity`` of one product between two existing locations.

    Only the per-location balances change; ``products.quantity`` is the
    adjustment ledger's aggregate and is left alone. The withdrawal, the
    deposit and the transfer record commit together.
    """
    if data.from_location == data.to_location:
        raise ValidationError("From and To locations must differ", field="to_location")

    async with transaction(db):
        product = await get_product_by_sku(db, ctx, data.product_sku)
        if product is None:
            raise ProductNotFoundError(sku=data.product_sku)

        locations = await get_many_by_name(db, ctx, Location, [data.from_location, data.to_location])
        missing = [name for name in (data.from_location, data.to_location) if name not in locations]
        if missing:
            raise LocationNotFoundError(missing)
        source = locations[data.from_location]
        destination = locations[data.to_location]

        if not await withdraw(db, ctx, product.id, source.id, data.quantity):
            available = await get_balance(db, ctx, product.id, source.id)
            raise InsufficientStockError(available=available, requested=data.quantity)
        await deposit(db, ctx, product.id, destination.id, data.quantity)

        transfer = StockTransfer(
            tenant_id=ctx.tenant_id,
            reference=data.reference or None,
            product_id=product.id,
            from_location_id=source.id,
            to_location_id=destination.id,
            quantity=data.quantity,
            status=TransferStatus.COMPLETED,
        )
        db.add(transfer)

    await db.refresh(transfer)
    logger.info(
        "stock_transfer_created",
        extra={
            "transfer_id": transfer.id,
            "product_id": product.id,
            "from_location_id": source.id,
            "to_location_id": destination.id,
            "quantity": data.quantity,
        },
    )
    await record_audit(
        db, ctx, "stock_transfer", transfer.id, "create",
        {
            "product_sku": data.product_sku,
            "from_location": data.from_location,
            "to_location": data.to_location,
            "quantity": data.quantity,
        },
    )
    return transfer


async def list_transfers(db: AsyncSession, ctx: TenantContext) -> List[TransferDetail]:
    rows = await list_transfers_with_names(db, ctx)
    return [
        TransferDetail(
            id=transfer.id,
            reference=transfer.reference or "",
            quantity=transfer.quantity,
            status=transfer.status.value,
            created_at=transfer.created_at,
            product_sku=sku or "",
            product_name=product_name or "",
            from_location=from_name or "",
            to_location=to_name or "",
        )
        for transfer, sku, product_name, from_name, to_name in rows
    ]
