import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .api import links
from .config import Settings, settings as default_settings
from .core.errors import LinkError
from .database import build_engine
from .middleware.logging import RequestLoggingMiddleware, configure_logging
from .services.link_store import LinkStore

logger = logging.getLogger(__name__)


async def link_error_handler(request: Request, exc: LinkError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """
    Report unreadable request bodies in the same shape as other bad input.

    The only body the API accepts is a new link, so a broken body means the
    target could not be read.
    """
    message = "Invalid URL"
    for error in exc.errors():
        if "code" in error.get("loc", ()):
            message = "Invalid custom code format"
            break
    return JSONResponse(status_code=400, content={"error": message})


def create_app(settings: Optional[Settings] = None, store: Optional[LinkStore] = None) -> FastAPI:
    """
    Build the application.

    The link store is constructed here (or passed in) and attached to
    ``app.state``; request handlers receive it through a dependency.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    if store is None:
        store = LinkStore(build_engine(settings))
        store.create_schema()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        store.dispose()

    app = FastAPI(
        title="TinyLink API",
        description="URL shortening service",
        version="1.0.0",
        docs_url="/api-docs",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store
    app.state.started_at = time.monotonic()

    app.add_exception_handler(LinkError, link_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "DELETE", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Include routers
    app.include_router(links.router, prefix=settings.API_PREFIX)
    app.include_router(links.redirect_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "TinyLink API running..."

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": settings.SERVICE_NAME}

    logger.info("%s ready, API docs at /api-docs", settings.SERVICE_NAME)
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host=default_settings.HOST, port=default_settings.PORT)
