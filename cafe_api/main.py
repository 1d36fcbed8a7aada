import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from cafe_api.core.db import init_db, close_db
from cafe_api.api.v1.orders import router as orders_router
from cafe_api.api.v1.products import router as products_router
from cafe_api.api.v1.inventory import router as inventory_router
from cafe_api.api.v1.suppliers import router as suppliers_router
from cafe_api.api.v1.notifications import router as notifications_router
from cafe_api.api.v1.reports import dashboard_router, router as reports_router
from cafe_api.api.v1.auth import router as auth_router, users_router
from cafe_api.core.config import PROJECT_NAME, VERSION, LOG_LEVEL, FRONTEND_URL, REORDER_ENABLED
from cafe_api.core.exception_handlers import setup_exception_handlers
from cafe_api.workers.reorder_poller import run_reorder_poller

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db()  # Connect to DB and generate schemas
    reorder_task = asyncio.create_task(run_reorder_poller()) if REORDER_ENABLED else None
    yield
    if reorder_task:
        reorder_task.cancel()
        with suppress(asyncio.CancelledError):
            await reorder_task
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    # Configure API documentation and paths
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers for modular API structure
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(users_router, prefix="/api/v1/users", tags=["Users"])
app.include_router(orders_router, prefix="/api/v1/orders", tags=["Order Management"])
app.include_router(products_router, prefix="/api/v1/products", tags=["Menu"])
app.include_router(inventory_router, prefix="/api/v1/inventory", tags=["Inventory"])
app.include_router(suppliers_router, prefix="/api/v1/suppliers", tags=["Suppliers"])
app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])
app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])


setup_exception_handlers(app)

@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
