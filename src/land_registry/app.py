"""FastAPI application factory for the land registry."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from land_registry.common.config import get_settings
from land_registry.common.exceptions import RegistryError
from land_registry.common.logging import setup_logging
from land_registry.common.schemas import HealthResponse

logger = logging.getLogger(__name__)


def _install_error_handlers(app: FastAPI) -> None:
    """Every error leaves as ``{"message": ...}`` with its HTTP status."""

    @app.exception_handler(RegistryError)
    async def registry_error(request: Request, exc: RegistryError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "message": "Validation error",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception(
            "unhandled error", extra={"path": request.url.path, "method": request.method}
        )
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from land_registry.deps import get_db
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from land_registry.users.router import router as users_router
    from land_registry.lands.router import router as lands_router
    from land_registry.transactions.router import router as transactions_router
    from land_registry.verification.router import router as verification_router
    from land_registry.system.router import router as system_router

    prefix = settings.api_prefix
    app.include_router(users_router, prefix=prefix, tags=["users"])
    app.include_router(lands_router, prefix=prefix, tags=["lands"])
    app.include_router(transactions_router, prefix=prefix, tags=["transactions"])
    app.include_router(verification_router, prefix=prefix, tags=["verification"])
    app.include_router(system_router, prefix=prefix, tags=["system"])

    return app
