"""
Signal Gateway - FastAPI Application
Main entry point for the smart money signal proxy.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from signal_gateway.core.config import Settings, get_settings
from signal_gateway.core.exceptions import APIException
from signal_gateway.api.router import api_router, AVAILABLE_ENDPOINTS
from signal_gateway.keys import KeyRotator, KeyStore, build_secret_provider
from signal_gateway.schemas.analysis import HealthResponse, NotFoundResponse
from signal_gateway.services.analysis import AnalysisOrchestrator, LimitPredicate, SymbolAnalyzer
from signal_gateway.services.smart_money import SmartMoneyAnalyzer
from signal_gateway.services.throttle import RequestThrottle

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.value,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_orchestrator(
    settings: Settings,
    key_store: Optional[KeyStore] = None,
    analyzer: Optional[SymbolAnalyzer] = None,
    is_limit_error: Optional[LimitPredicate] = None
) -> AnalysisOrchestrator:
    """Wire key store, rotator and analyzer into an orchestrator"""
    if key_store is None:
        key_store = KeyStore.from_provider(build_secret_provider(settings))
    if analyzer is None:
        analyzer = SmartMoneyAnalyzer(
            timeout_seconds=settings.analyzer_timeout_seconds,
            min_candles=settings.analyzer_min_candles
        )
    return AnalysisOrchestrator(
        key_store=key_store,
        rotator=KeyRotator(key_store),
        analyzer=analyzer,
        is_limit_error=is_limit_error
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.service_name} v{settings.service_version}...")

    if getattr(app.state, "orchestrator", None) is None:
        app.state.orchestrator = build_orchestrator(settings, is_limit_error=app.state.is_limit_error)

    key_store = app.state.orchestrator.key_store
    logger.info(f"Serving {len(key_store)} pairs across providers: {', '.join(key_store.hosts())}")
    logger.info(f"Request cooldown: {app.state.throttle.cooldown_ms} ms")
    logger.info(f"Available endpoints: {', '.join(AVAILABLE_ENDPOINTS)}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.service_name}...")
    orchestrator = getattr(app.state, "orchestrator", None)
    close = getattr(getattr(orchestrator, "analyzer", None), "close", None)
    if close is not None:
        await close()
        logger.info("Analyzer HTTP session closed")


# Create FastAPI app
def create_app(
    settings: Optional[Settings] = None,
    key_store: Optional[KeyStore] = None,
    analyzer: Optional[SymbolAnalyzer] = None,
    clock: Optional[Callable[[], float]] = None,
    is_limit_error: Optional[LimitPredicate] = None
) -> FastAPI:
    """
    Build the application

    Components not passed in are created from settings; the key store is
    then loaded from the configured secret source at startup.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Signal Gateway",
        description="Smart money trading signals with per-pair API key rotation",
        version=settings.service_version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    app.state.settings = settings
    throttle_kwargs: Dict[str, Any] = {"cooldown_ms": settings.request_cooldown_ms}
    if clock is not None:
        throttle_kwargs["clock"] = clock
    app.state.throttle = RequestThrottle(**throttle_kwargs)
    app.state.is_limit_error = is_limit_error
    app.state.orchestrator = None
    if key_store is not None or analyzer is not None:
        app.state.orchestrator = build_orchestrator(settings, key_store, analyzer, is_limit_error)

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add exception handlers
    @app.exception_handler(APIException)
    async def api_exception_handler(request, exc: APIException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        # Unmatched method on a known path is answered like an unknown route
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content=NotFoundResponse(
                    error="Endpoint not found",
                    availableEndpoints=AVAILABLE_ENDPOINTS,
                    timestamp=_utc_now()
                ).model_dump()
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request, exc: Exception):
        logger.error(f"Unhandled error: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc),
                "timestamp": _utc_now()
            }
        )

    # Health check endpoint
    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint"""
        return HealthResponse(
            status="online",
            timestamp=_utc_now(),
            service=settings.service_name,
            version=settings.service_version
        )

    # Include API router; the bare path is kept for older clients
    app.include_router(api_router, prefix="/api")
    app.include_router(api_router, include_in_schema=False)

    return app


# Create app instance
app = create_app()


def run():
    """Console entry point"""
    settings = get_settings()
    uvicorn.run(
        "signal_gateway.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower()
    )


if __name__ == "__main__":
    run()
