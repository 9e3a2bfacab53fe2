from uuid import uuid4

from fastapi import FastAPI, Request

from inventra.api.errors import register_exception_handlers
from inventra.api.v1 import routes_catalog, routes_orders
from inventra.api.v1.routes_account import router as account_router
from inventra.api.v1.routes_cron import router as cron_router
from inventra.api.v1.routes_inventory import router as inventory_router
from inventra.api.v1.routes_members import router as members_router
from inventra.api.v1.routes_organizations import router as organizations_router
from inventra.api.v1.routes_products import router as products_router
from inventra.api.v1.routes_reports import router as reports_router
from inventra.api.v1.routes_stock_adjustments import router as adjustments_router
from inventra.api.v1.routes_transfers import router as transfers_router
from inventra.core.config import settings
from inventra.core.logging_config import LogContext, configure_logging

configure_logging(level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)

app = FastAPI(title="Inventra")

register_exception_handlers(app)

app.include_router(account_router)
app.include_router(organizations_router)
app.include_router(members_router)
app.include_router(products_router)
app.include_router(inventory_router)
app.include_router(adjustments_router)
app.include_router(transfers_router)
app.include_router(reports_router)
for router in routes_catalog.routers + routes_orders.routers:
    app.include_router(router)
app.include_router(cron_router)


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    LogContext.clear()
    request_id = request.headers.get("x-request-id") or uuid4().hex
    LogContext.set(request_id=request_id)
    response = await call_next(request)
    response.headers["x-request-id"] = request_id
    return response

@app.get("/health")
async def health():
    return {"status": "ok"}
