import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, EstateSessionLocal, estate_engine
from shared.exception_handler import setup_exception_handlers
from shared.models import users
from .models.space_sites import owners, shops
from .models.leasing_tenants import (
    lease_settlements, leases, payments, rent_adjustments, rent_invoices, tenants
)
from .models.financials import bank_deposits, expenses
from .models.system import app_settings, deletion_logs
from .crud.system.users_crud import seed_super_admin
from .router.system import (
    auth_router, deletion_logs_router, search_router, settings_router, users_router
)
from .router.space_sites import owners_router, shops_router
from .router.leasing_tenants import (
    invoices_router, leases_router, payments_router, tenants_router
)
from .router.financials import bank_deposits_router, expenses_router, reports_router
from .router.overview import dashboard_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Create all tables
Base.metadata.create_all(bind=estate_engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = EstateSessionLocal()
    try:
        seed_super_admin(db)
    finally:
        db.close()
    logger.info("Estate service started")
    yield


app = FastAPI(title="Estate Service API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
setup_exception_handlers(app)

# Include routers
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(owners_router.router)
app.include_router(shops_router.router)
app.include_router(tenants_router.router)
app.include_router(leases_router.router)
app.include_router(invoices_router.router)
app.include_router(payments_router.router)
app.include_router(expenses_router.router)
app.include_router(bank_deposits_router.router)
app.include_router(reports_router.router)
app.include_router(dashboard_router.router)
app.include_router(settings_router.router)
app.include_router(deletion_logs_router.router)
app.include_router(search_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
