# inventra/domain/catalog/service.py
"""Products and the name-addressed reference entities around them.

Categories, suppliers, customers and locations are looked up by name and,
where a parent record references a name that does not exist yet, created on
the fly through ``find_or_create``. That creation passes its own usage gate.
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import ConflictError, LocationNotFoundError, NotFoundError, ProductNotFoundError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import TenantContext
from inventra.db.base import transaction
from inventra.db.models.categories import Category
from inventra.db.models.customers import Customer
from inventra.db.models.locations import Location
from inventra.db.models.products import Product
from inventra.db.models.suppliers import Supplier
from inventra.db.repositories.inventory_balances import list_balances, set_balance
from inventra.db.repositories.named_entities import get_by_id, get_by_name, list_by_name
from inventra.db.repositories.products import (
    get_product_by_id,
    get_product_by_sku,
    list_products_with_category,
)
from inventra.domain.audit.service import record_audit
from inventra.domain.billing.service import enforce_limit
from .schemas import (
    BalanceRow,
    BalanceSet,
    InventoryRow,
    NamedEntityCreate,
    NamedEntityUpdate,
    ProductCreate,
    ProductOut,
    ProductUpdate,
)

logger = get_logger("catalog")

# kind -> (model, usage gate key, audit entity type)
NAMED_KINDS = {
    "categories": (Category, "categories", "category"),
    "suppliers": (Supplier, "suppliers", "supplier"),
    "customers": (Customer, "customers", "customer"),
    "locations": (Location, "locations", "location"),
}


async def find_or_create(db: AsyncSession, ctx: TenantContext, kind: str, name: str):
    """Resolve a named entity, creating it (after its own limit check) when missing.

    Runs inside the caller's transaction: the new row is flushed, not committed.
    """
    model, gate_key, _ = NAMED_KINDS[kind]
    name = name.strip()
    existing = await get_by_name(db, ctx, model, name)
    if existing is not None:
        return existing

    await enforce_limit(db, ctx, gate_key)
    entity = model(tenant_id=ctx.tenant_id, name=name)
    db.add(entity)
    await db.flush()
    logger.info(f"{kind}_auto_created", extra={"entity_id": entity.id, "entity_name": name})
    return entity


def _apply_details(model, entity, values: dict) -> None:
    for attr in ("description", "email", "phone"):
        if attr in values and hasattr(model, attr):
            setattr(entity, attr, values[attr])


async def create_named(db: AsyncSession, ctx: TenantContext, kind: str, data: NamedEntityCreate):
    model, gate_key, entity_type = NAMED_KINDS[kind]
    try:
        async with transaction(db):
            await enforce_limit(db, ctx, gate_key)
            if await get_by_name(db, ctx, model, data.name) is not None:
                raise ConflictError(f"{entity_type.capitalize()} '{data.name}' already exists")
            entity = model(tenant_id=ctx.tenant_id, name=data.name)
            _apply_details(model, entity, data.model_dump(exclude_none=True))
            db.add(entity)
    except IntegrityError as exc:
        raise ConflictError(f"{entity_type.capitalize()} '{data.name}' already exists") from exc

    await record_audit(db, ctx, entity_type, entity.id, "create", {"name": data.name})
    return entity


async def update_named(db: AsyncSession, ctx: TenantContext, kind: str, entity_id: UUID, data: NamedEntityUpdate):
    """Rename and/or edit the contact details of one named entity.

    A rename onto a name the tenant already uses is a conflict.
    """
    model, _, entity_type = NAMED_KINDS[kind]
    changes = data.model_dump(exclude_unset=True)
    new_name = changes.pop("name", None)
    try:
        async with transaction(db):
            entity = await get_by_id(db, ctx, model, entity_id, for_update=True)
            if entity is None:
                raise NotFoundError(f"{entity_type.capitalize()} not found")
            if new_name is not None and new_name != entity.name:
                if await get_by_name(db, ctx, model, new_name) is not None:
                    raise ConflictError(f"{entity_type.capitalize()} '{new_name}' already exists")
                entity.name = new_name
            _apply_details(model, entity, changes)
    except IntegrityError as exc:
        if new_name is not None:
            raise ConflictError(f"{entity_type.capitalize()} '{new_name}' already exists") from exc
        raise ConflictError(f"{entity_type.capitalize()} update conflicts with an existing record") from exc

    await db.refresh(entity)
    logger.info(f"{entity_type}_updated", extra={"entity_id": entity.id, "entity_name": entity.name})
    await record_audit(db, ctx, entity_type, entity.id, "update", {"name": entity.name})
    return entity


async def delete_named(db: AsyncSession, ctx: TenantContext, kind: str, entity_id: UUID) -> UUID:
    model, _, entity_type = NAMED_KINDS[kind]
    name = None
    try:
        async with transaction(db):
            entity = await get_by_id(db, ctx, model, entity_id, for_update=True)
            if entity is None:
                raise NotFoundError(f"{entity_type.capitalize()} not found")
            name = entity.name
            await db.delete(entity)
    except IntegrityError as exc:
        raise ConflictError(f"{entity_type.capitalize()} '{name}' is still in use") from exc

    logger.info(f"{entity_type}_deleted", extra={"entity_id": entity_id, "entity_name": name})
    await record_audit(db, ctx, entity_type, entity_id, "delete", {"name": name})
    return entity_id


async def list_named(db: AsyncSession, ctx: TenantContext, kind: str) -> List:
    model, _, _ = NAMED_KINDS[kind]
    return await list_by_name(db, ctx, model)


async def _category_name(db: AsyncSession, ctx: TenantContext, category_id: Optional[UUID]) -> str:
    if category_id is None:
        return ""
    category = await get_by_id(db, ctx, Category, category_id)
    return category.name if category is not None else ""


async def _product_out(db: AsyncSession, ctx: TenantContext, product: Product) -> ProductOut:
    out = ProductOut.model_validate(product)
    out.category_name = await _category_name(db, ctx, product.category_id)
    return out


async def create_product(db: AsyncSession, ctx: TenantContext, data: ProductCreate) -> ProductOut:
    try:
        async with transaction(db):
            await enforce_limit(db, ctx, "products")
            if await get_product_by_sku(db, ctx, data.sku) is not None:
                raise ConflictError(f"SKU '{data.sku}' already exists")
            category_id = None
            if data.category_name and data.category_name.strip():
                category = await find_or_create(db, ctx, "categories", data.category_name)
                category_id = category.id
            product = Product(
                tenant_id=ctx.tenant_id,
                sku=data.sku,
                name=data.name,
                description=data.description or None,
                category_id=category_id,
                quantity=data.quantity,
                unit_price=data.unit_price,
                low_stock_threshold=data.low_stock_threshold,
            )
            db.add(product)
    except IntegrityError as exc:
        raise ConflictError(f"SKU '{data.sku}' already exists") from exc

    await db.refresh(product)
    logger.info("product_created", extra={"product_id": product.id, "sku": product.sku})
    await record_audit(db, ctx, "product", product.id, "create", {"sku": product.sku})
    return await _product_out(db, ctx, product)


async def update_product(db: AsyncSession, ctx: TenantContext, product_id: UUID, data: ProductUpdate) -> ProductOut:
    changes = data.model_dump(exclude_unset=True)
    try:
        async with transaction(db):
            product = await get_product_by_id(db, ctx, product_id)
            if product is None:
                raise ProductNotFoundError(product_id=product_id)
            if "category_name" in changes:
                category_name = (changes.pop("category_name") or "").strip()
                if category_name:
                    product.category_id = (await find_or_create(db, ctx, "categories", category_name)).id
                else:
                    product.category_id = None
            for attr, value in changes.items():
                if value is not None or attr == "description":
                    setattr(product, attr, value)
    except IntegrityError as exc:
        if data.sku is not None:
            raise ConflictError(f"SKU '{data.sku}' already exists") from exc
        raise ConflictError("Product update conflicts with an existing record") from exc

    await db.refresh(product)
    await record_audit(db, ctx, "product", product.id, "update", {"fields": sorted(data.model_dump(exclude_unset=True))})
    return await _product_out(db, ctx, product)


async def delete_product(db: AsyncSession, ctx: TenantContext, product_id: UUID) -> UUID:
    async with transaction(db):
        product = await get_product_by_id(db, ctx, product_id)
        if product is None:
            raise ProductNotFoundError(product_id=product_id)
        sku = product.sku
        await db.delete(product)

    logger.info("product_deleted", extra={"product_id": product_id, "sku": sku})
    await record_audit(db, ctx, "product", product_id, "delete", {"sku": sku})
    return product_id


async def get_product(db: AsyncSession, ctx: TenantContext, product_id: UUID) -> ProductOut:
    product = await get_product_by_id(db, ctx, product_id)
    if product is None:
        raise ProductNotFoundError(product_id=product_id)
    return await _product_out(db, ctx, product)


async def list_products(db: AsyncSession, ctx: TenantContext) -> List[ProductOut]:
    rows = await list_products_with_category(db, ctx)
    out = []
    for product, category_name in rows:
        item = ProductOut.model_validate(product)
        item.category_name = category_name or ""
        out.append(item)
    return out


async def list_inventory(db: AsyncSession, ctx: TenantContext) -> List[InventoryRow]:
    rows = await list_products_with_category(db, ctx)
    return [
        InventoryRow(
            sku=product.sku,
            name=product.name,
            category_name=category_name or "",
            unit_price=product.unit_price,
            low_stock_threshold=product.low_stock_threshold,
            on_hand=product.quantity,
        )
        for product, category_name in rows
    ]


async def set_opening_balance(db: AsyncSession, ctx: TenantContext, data: BalanceSet) -> BalanceRow:
    """Set the absolute balance of a product at an existing location."""
    async with transaction(db):
        product = await get_product_by_sku(db, ctx, data.product_sku)
        if product is None:
            raise ProductNotFoundError(sku=data.product_sku)
        location = await get_by_name(db, ctx, Location, data.location_name)
        if location is None:
            raise LocationNotFoundError([data.location_name])
        await set_balance(db, ctx, product.id, location.id, data.quantity)

    logger.info(
        "balance_set",
        extra={"product_id": product.id, "location_id": location.id, "quantity": data.quantity},
    )
    await record_audit(
        db, ctx, "inventory_balance", f"{product.id}:{location.id}", "update",
        {"product_sku": data.product_sku, "location_name": data.location_name, "quantity": data.quantity},
    )
    return BalanceRow(
        product_sku=product.sku,
        product_name=product.name,
        location_name=location.name,
        quantity=data.quantity,
    )


async def list_location_balances(
    db: AsyncSession,
    ctx: TenantContext,
    product_sku: Optional[str] = None,
) -> List[BalanceRow]:
    product_id = None
    if product_sku:
        product = await get_product_by_sku(db, ctx, product_sku)
        if product is None:
            raise ProductNotFoundError(sku=product_sku)
        product_id = product.id
    rows = await list_balances(db, ctx, product_id)
    return [
        BalanceRow(product_sku=sku, product_name=name, location_name=location_name, quantity=quantity)
        for sku, name, location_name, quantity in rows
    ]
