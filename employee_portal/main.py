"""
ASGI application: API routers, middleware, error handlers and probes.

Run with `uvicorn employee_portal.main:app`.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import BaseModel

from employee_portal.api.errors import register_exception_handlers
from employee_portal.api.v1 import api_router
from employee_portal.core.config import settings
from employee_portal.core.logging_config import setup_logging
from employee_portal.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from employee_portal.core.rate_limiter import limiter
from employee_portal.db.session import check_db_connection, create_tables, engine

setup_logging()
logger = logging.getLogger("employee_portal")


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    checks: dict[str, bool]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} {settings.VERSION} ({settings.ENVIRONMENT})")
    if settings.DB_AUTO_CREATE:
        await create_tables()
        logger.info("Database tables created")
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Shut down cleanly")


app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Token-authenticated employee management API",
    version=settings.VERSION,
    # Interactive docs only while debugging
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
register_exception_handlers(app)

# add_middleware wraps, so the last one added runs first
app.add_middleware(SecurityHeadersMiddleware, api_prefix=settings.API_PREFIX)
# Tokens travel in the Authorization header, never in cookies
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["X-Request-ID", "Retry-After"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router, prefix=settings.API_PREFIX)

# /metrics is only served when ENABLE_METRICS=true
Instrumentator(
    should_respect_env_var=True,
    should_group_status_codes=False,
    excluded_handlers=["/health", "/metrics"],
).instrument(app).expose(app, include_in_schema=False)


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Liveness plus database reachability; 503 when the database is down."""
    database_ok = await check_db_connection()
    body = HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        service="employee-portal",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        checks={"database": database_ok},
    )
    if database_ok:
        return body

    logger.warning("Health check failed: database unreachable")
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())


@app.get("/", include_in_schema=False)
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}
