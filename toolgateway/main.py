"""
File: toolgateway/main.py
Purpose: FastAPI application entry point -- creates the app, builds the gateway from the vendor
    config files, registers the REST, streaming and connectivity routers, configures CORS, and
    provides health/info endpoints.
When Used: Loaded by Uvicorn ('uvicorn toolgateway.main:app'), run directly with
    'python -m toolgateway.main', or through the 'toolgateway' console script. Tests call
    create_app() with a gateway built from stub plugins.
Why Created: Single composition root that serves one tool catalogue over two protocol surfaces
    (JSON-RPC over SSE and plain REST) from one dispatcher.

Endpoints:
- GET  /sse, POST /messages: streaming JSON-RPC surface
- GET  /tools, GET /categories, POST /call-tool: REST surface
- GET  /health: liveness plus configured instances, no backend traffic
- GET  /connectivity: concurrent health check of every instance
"""
import sys
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from toolgateway.config import Settings, get_settings
from toolgateway.errors import ConfigError
from toolgateway.gateway.engine import Gateway
from toolgateway.routers import connectivity, rest, streaming
from toolgateway.services.jsonrpc import JsonRpcHandler
from toolgateway.services.sessions import SessionManager

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _attach_gateway(app: FastAPI, gateway: Gateway, settings: Settings) -> None:
    app.state.gateway = gateway
    app.state.rpc = JsonRpcHandler(gateway, settings.app_name, settings.app_version)


def create_app(gateway: Optional[Gateway] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; without a gateway one is loaded from config at startup"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        # Startup
        configure_logging(settings.log_level)
        if app.state.gateway is None:
            _attach_gateway(app, Gateway.from_settings(settings), settings)
        gw: Gateway = app.state.gateway
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Serving {len(gw.catalogue)} tools for {', '.join(gw.vendor_names())}")
        yield
        # Shutdown
        logger.info("Shutting down...")
        await app.state.sessions.close_all()
        await gw.aclose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=__doc__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.sessions = SessionManager()
    app.state.gateway = None
    if gateway is not None:
        _attach_gateway(app, gateway, settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================================
    # Root endpoints
    # ========================================================================

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "sse": "/sse",
            "tools": "/tools",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint; reports configuration only, never contacts a backend"""
        gw: Gateway = app.state.gateway
        return {
            "status": "ok",
            "version": settings.app_version,
            "vendors": gw.vendor_names(),
            "instances": gw.instance_names(),
        }

    # ========================================================================
    # Include routers
    # ========================================================================

    app.include_router(streaming.router)
    app.include_router(rest.router)
    app.include_router(connectivity.router)

    # ========================================================================
    # Error handlers
    # ========================================================================

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler"""
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Internal server error",
                "detail": str(exc) if settings.debug else None,
            },
        )

    return app


app = create_app()


def run() -> None:
    """Console entry point: load config up front so a bad file exits non-zero before binding"""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        gateway = Gateway.from_settings(settings)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    uvicorn.run(create_app(gateway, settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
