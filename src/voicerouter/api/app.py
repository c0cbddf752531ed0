from __future__ import annotations

import logging

from fastapi import FastAPI

from voicerouter.api import __version__
from voicerouter.api.config import load_config
from voicerouter.api.middlewares.error_handler import install_error_handlers
from voicerouter.api.middlewares.request_context import RequestContextMiddleware
from voicerouter.api.routes import api_router
from voicerouter.utils.logger import configure_logging, get_logger, level_from_name

logger = get_logger("voicerouter")


def create_app() -> FastAPI:
    cfg = load_config()

    app = FastAPI(
        title="VoiceRouter API",
        version=__version__,
    )

    app.add_middleware(RequestContextMiddleware, header_name="X-Request-Id")

    install_error_handlers(app)

    app.include_router(api_router)

    @app.on_event("startup")
    async def _startup() -> None:
        configure_logging(
            logger_name="voicerouter",
            console_level=level_from_name(cfg.log_level),
            file_level=logging.DEBUG,
            log_path=(cfg.log_path or None),
        )
        logger.info("API_STARTUP")

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        logger.info("API_SHUTDOWN")

    return app


app = create_app()
