from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from dopeflix import __version__
from dopeflix.infrastructure.config import AppConfig
from dopeflix.interfaces.app_state import AppState
from dopeflix.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def build_app(config: AppConfig) -> FastAPI:
    """Build the FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, site adapter, use cases) are created in lifespan().
    """
    app = FastAPI(
        title="DopeFlix",
        description="Episode and video resolver for DopeBox/SFlix mirrors",
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from dopeflix.interfaces.api import router as api_router

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/healthz")
    async def healthz() -> dict[str, str | list[str]]:
        """Liveness probe."""
        registry = getattr(app.state, "extractor_registry", None)
        return {
            "status": "ok",
            "domain": config.source.domain,
            "extractors": registry.supported_families if registry else [],
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
