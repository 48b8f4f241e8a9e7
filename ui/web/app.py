"""
FastAPI Application - Main web application setup
================================================

This module creates and configures the FastAPI application that exposes
the responder over HTTP.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from core.config import Config, load_config
from core.exceptions import RuleSetError
from core.logging import setup_logging, get_logger
from services.responder import ElizaResponder

logger = get_logger("web.app")


def create_app(
    config: Optional[Config] = None,
    responder: Optional[ElizaResponder] = None,
    debug: bool = False
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration
        responder: Responder instance (built from config when omitted)
        debug: Enable debug mode

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = load_config()

    setup_logging(
        log_dir=config.log_dir,
        log_level="DEBUG" if debug else "INFO",
        console_output=True
    )

    if responder is None:
        responder = ElizaResponder.from_config(config)

    app = FastAPI(
        title=config.app_name,
        description="HTTP interface for the ELIZA responder",
        version=config.version,
        debug=debug or config.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.responder = responder

    from .routes import router as main_router
    app.include_router(main_router, prefix="")

    @app.exception_handler(RuleSetError)
    async def ruleset_exception_handler(request: Request, exc: RuleSetError):
        logger.error(f"Rule set error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Rule set configuration error", "detail": exc.message}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc) if debug else "An error occurred"}
        )

    logger.info("Web application created")

    return app


def run_app(
    host: str = "127.0.0.1",
    port: int = 8080,
    debug: bool = False,
    config: Optional[Config] = None
) -> None:
    """
    Run the web application server.

    Args:
        host: Host address to bind
        port: Port to listen on
        debug: Enable debug mode
        config: Application configuration
    """
    if config is None:
        config = load_config()

    app = create_app(config=config, debug=debug)

    logger.info(f"Starting web server on {host}:{port}")

    import uvicorn
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if debug else "info"
    )
