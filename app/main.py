"""
Main FastAPI application for the Painting Gateway API.

This module contains the main FastAPI application instance, the error
mapping and the root endpoints.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.exceptions import AppError
from app.database import create_tables
from app.dependencies.auth import get_session_codec
from app.middleware.request_gate import RequestGate, RequestGateMiddleware
from app.routers.admin import router as admin_router
from app.routers.auth import router as auth_router
from app.routers.generate import router as generate_router
from app.routers.models import router as models_router
from app.routers.providers import router as providers_router
from app.routers.users import router as users_router
from app.utils.logging_config import setup_logging, get_logger
from app.utils.rate_limit import limiter

# Import all models to ensure SQLAlchemy relationships are properly configured
import app.models  # noqa: F401

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Refuses to start without a signing secret.

    Note: Database tables are managed through Alembic migrations.
    Run `alembic upgrade head` to create/update database tables.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"{settings.PROJECT_NAME} - Application starting up")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API prefix: {settings.API_PREFIX}")
    logger.info(f"Database: {settings.SQLALCHEMY_DATABASE_URI.split('://')[0]}")
    logger.info(f"User key policy: {settings.USER_KEY_POLICY}")
    logger.info("=" * 60)

    get_session_codec()

    if settings.DEBUG:
        await create_tables()
        logger.info("DEBUG: database tables created")
    else:
        logger.warning("Remember to run 'alembic upgrade head' to apply database migrations")

    yield

    # Shutdown
    logger.info("=" * 60)
    logger.info(f"{settings.PROJECT_NAME} - Application shutting down")
    logger.info("=" * 60)


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Credential-gated gateway in front of Gemini-style image generation providers",
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Map application errors to ``{"error": message}``."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and path parameters are client errors (400)."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        details.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "Invalid request"
    if details:
        message = f"{message}: {'; '.join(details)}"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal error"})


# Added before CORS, so CORS wraps the gate
app.add_middleware(
    RequestGateMiddleware,
    gate=RequestGate(settings.API_PREFIX, settings.USER_SESSION_COOKIE, settings.ADMIN_SESSION_COOKIE),
    codec_factory=get_session_codec,
)

# Set up CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/")
async def root():
    """
    Root endpoint returning API information.
    """
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint.
    """
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)
app.include_router(providers_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(models_router, prefix=settings.API_PREFIX)
app.include_router(generate_router, prefix=settings.API_PREFIX)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    description = """
## Painting Gateway API

Issues access keys to end users and forwards their image generation requests
to upstream Gemini-style providers configured by the admin.

### 🔐 Authentication

- **Users** log in with their access key at `POST /api/auth/login`
- **The admin** logs in with the admin password at `POST /api/admin/login`
  (the very first login sets the password)

Both logins return a session token and set a session cookie. Send the token as
`Authorization: Bearer <token>` or rely on the cookie.
    """

    openapi_schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "HTTPBearer": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Session token from a user or admin login",
        }
    }

    openapi_schema["tags"] = [
        {"name": "authentication", "description": "End-user login with an access key"},
        {"name": "admin", "description": "Admin login, password, providers and user keys"},
        {"name": "models", "description": "Models available to the logged-in user"},
        {"name": "generation", "description": "Image generation"},
    ]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
