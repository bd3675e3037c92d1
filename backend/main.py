"""
Main application entry point for Fixing Maritime backend.
Configures FastAPI app and wires up all route modules.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from config import (
    APP_TITLE, APP_VERSION, ALLOWED_ORIGINS, DEMO_ADMIN_EMAIL, DEMO_ADMIN_PASSWORD
)
from database import Store, init_store
from errors import AppError, InternalError
from models.enums import UserRole
from models.schemas import User
from routes import (
    auth_routes,
    user_routes,
    quote_routes,
    order_routes,
    invoice_routes,
    registration_routes,
    truck_request_routes,
    content_routes,
    service_routes,
    stats_routes,
)
from services.auth_service import hash_password
from services.content_service import seed_default_content
from services.service_catalog_service import seed_default_services
from services.verification_store import build_verification_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def create_default_admin(store: Store):
    """Create the demo super admin account if it doesn't exist"""
    existing_admin = await store.find_one("users", {"email": DEMO_ADMIN_EMAIL})
    if existing_admin:
        logger.info(f"Default admin account already exists: {DEMO_ADMIN_EMAIL}")
        return

    admin = User(
        name="Admin User",
        email=DEMO_ADMIN_EMAIL,
        password_hash=hash_password(DEMO_ADMIN_PASSWORD),
        role=UserRole.super_admin,
        email_verified=True,
    )
    await store.insert_one("users", admin.model_dump())
    logger.info(f"Created default admin account: {DEMO_ADMIN_EMAIL}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    logger.info("Starting up Fixing Maritime API...")
    store = getattr(app.state, "store", None)
    owned = store is None
    if owned:
        store = await init_store()
        app.state.store = store
        if store.demo:
            await create_default_admin(store)
            await seed_default_content(store)
            await seed_default_services(store)
    app.state.verification_store = build_verification_store(store)
    yield
    # Shutdown
    logger.info("Shutting down Fixing Maritime API...")
    if owned:
        await store.close()
        app.state.store = None


# Create FastAPI app
app = FastAPI(title=APP_TITLE, version=APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============ ERROR HANDLERS ============

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"detail": "Invalid request"})
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"detail": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=InternalError.status_code, content={"detail": InternalError.default_message}
    )


# Include all route modules with /api prefix
app.include_router(auth_routes.router, prefix="/api", tags=["Authentication"])
app.include_router(user_routes.router, prefix="/api", tags=["Users"])
app.include_router(quote_routes.router, prefix="/api", tags=["Quotes"])
app.include_router(order_routes.router, prefix="/api", tags=["Orders"])
app.include_router(invoice_routes.router, prefix="/api", tags=["Invoices"])
app.include_router(registration_routes.router, prefix="/api", tags=["Registrations"])
app.include_router(truck_request_routes.router, prefix="/api", tags=["Truck Requests"])
app.include_router(content_routes.router, prefix="/api", tags=["Content"])
app.include_router(service_routes.router, prefix="/api", tags=["Services"])
app.include_router(stats_routes.router, prefix="/api", tags=["Stats"])


# Health check endpoint
@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    store = getattr(request.app.state, "store", None)
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "database": "demo" if store is not None and store.demo else (
            "connected" if store is not None and store.available else "unavailable"
        ),
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Fixing Maritime API",
        "version": APP_VERSION,
        "docs": "/docs"
    }


# This block is only used for local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
