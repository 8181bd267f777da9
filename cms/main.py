# cms/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from cms.api.dependencies import close_clients
from cms.api.middleware import (
    AuditTriggerMiddleware,
    CorrelationIdMiddleware,
    UserContextMiddleware,
)
from cms.api.routers import flash, health, metrics, records
from cms.api.url_generator import RouteNotFoundError
from cms.application.exceptions import (
    ApplicationError,
    ContentNotFoundError,
    PersistenceFailureError,
)
from cms.config.logging import configure_logging
from cms.config.settings import get_settings
from cms.domain.exceptions import (
    ContentTypeNotFoundError,
    DomainError,
    DomainValidationError,
)
from cms.infrastructure.database.session import dispose_engine
from cms.security.exceptions import SecurityError

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_clients()
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> UserContext -> AuditTrigger.
app.add_middleware(AuditTriggerMiddleware)
app.add_middleware(UserContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(ContentTypeNotFoundError)
async def contenttype_not_found_handler(request, exc: ContentTypeNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(SecurityError)
async def security_error_handler(request, exc: SecurityError):
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(ContentNotFoundError)
async def content_not_found_handler(request, exc: ContentNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(PersistenceFailureError)
async def persistence_failure_handler(request, exc: PersistenceFailureError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(RouteNotFoundError)
async def route_not_found_handler(request, exc: RouteNotFoundError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /metrics, {backend_prefix}/editcontent, {backend_prefix}/flash
app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(records.router, prefix=settings.backend_prefix)
app.include_router(flash.router, prefix=settings.backend_prefix)
