"""
DigiStore API - FastAPI Application
Digital goods storefront with vouchers and affiliate commission
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.config import settings
from storefront.core.database import get_database_url, get_engine, init_db
from storefront.middleware.referral import capture_referral
from storefront.utils.responses import error_response
from storefront.utils.schema_diagnostics import diagnose_schema_error, find_missing_tables

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
    yield


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="API toko produk digital dengan voucher dan program affiliate",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


def _cors_headers(request: Request) -> dict:
    # Error responses bypass CORSMiddleware
    origin = request.headers.get("origin", "*")
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "*",
        "Access-Control-Allow-Headers": "*",
    }


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Schema drift gets a 503 with the SQL that fixes it, anything else a 500"""
    issue = diagnose_schema_error(exc)
    if issue is not None:
        return error_response(
            error="Database schema mismatch",
            detail=issue.as_dict(),
            status_code=503,
            headers=_cors_headers(request)
        )

    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return error_response(
        error="Database error",
        detail=str(exc) if settings.DEBUG else None,
        status_code=500,
        headers=_cors_headers(request)
    )


# Global Exception Handler to ensure CORS headers are always present on 500 errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "Internal Server Error", "detail": f"Global Error: {str(exc)}"},
        headers=_cors_headers(request)
    )


app.middleware("http")(capture_referral)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - health check"""
    return {
        "ok": True,
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": "1.0.0",
        "environment": settings.APP_ENV
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "environment": settings.APP_ENV
    }


@app.get("/health/db", tags=["Health"])
async def db_health_check():
    """Database connection and schema health check"""
    result = {
        "database_url_set": False,
        "database_url_pattern": "",
        "connection_test": False,
        "missing_tables": [],
        "error": None
    }

    try:
        db_url = get_database_url()
        result["database_url_set"] = bool(db_url)
        if db_url:
            if "@" in db_url:
                prefix = db_url.split("@")[0].split(":")[0]  # driver
                suffix = db_url.split("@")[1]  # host info
                result["database_url_pattern"] = f"{prefix}:***@{suffix}"
            else:
                result["database_url_pattern"] = db_url[:10] + "..."

        engine = get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            result["connection_test"] = True

        result["missing_tables"] = find_missing_tables(engine)
    except SQLAlchemyError as e:
        result["error"] = str(e)
        issue = diagnose_schema_error(e)
        if issue is not None:
            result["schema_issue"] = issue.as_dict()
    except ValueError as e:
        result["error"] = str(e)

    return result


# Import routers
from storefront.api import (  # noqa: E402
    auth, users, referrals, commissions, withdrawals, products, checkout, settings as store_settings,
    admin_products, admin_vouchers, admin_orders, admin_affiliates, admin_dashboard
)

# Include routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/v1", tags=["Users"])
app.include_router(referrals.router, prefix="/api/v1", tags=["Referrals"])
app.include_router(commissions.router, prefix="/api/v1", tags=["Commissions"])
app.include_router(withdrawals.router, prefix="/api/v1", tags=["Withdrawals"])
app.include_router(products.router, prefix="/api/v1", tags=["Products"])
app.include_router(checkout.router, prefix="/api/v1", tags=["Checkout"])
app.include_router(store_settings.router, prefix="/api/v1", tags=["Settings"])
app.include_router(admin_products.router, prefix="/api/v1", tags=["Admin"])
app.include_router(admin_vouchers.router, prefix="/api/v1", tags=["Admin"])
app.include_router(admin_orders.router, prefix="/api/v1", tags=["Admin"])
app.include_router(admin_affiliates.router, prefix="/api/v1", tags=["Admin"])
app.include_router(admin_dashboard.router, prefix="/api/v1", tags=["Admin"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
