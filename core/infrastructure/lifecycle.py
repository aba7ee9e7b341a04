import asyncio
import contextlib
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from config.app_config import AppConfig, get_api_key
from config.logging_config import setup_logging
from core.metadata import SERVICE_NAME, VERSION
from services.session_manager import remove_expired_sessions

logger = structlog.get_logger(__name__)

STARTUP_BANNER = """
╔══════════════════════════════════════════════╗
║  {service} v{version}
║  Python {python} | env: {env} | {log_level}
╚══════════════════════════════════════════════╝"""

SHUTDOWN_BANNER = """
╔══════════════════════════════════════════════╗
║  {service} v{version} shutting down
╚══════════════════════════════════════════════╝"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    python_version = sys.version.split()[0]
    print(
        STARTUP_BANNER.format(
            service=SERVICE_NAME,
            version=VERSION,
            python=python_version,
            env=AppConfig.ENVIRONMENT,
            log_level=AppConfig.LOG_LEVEL,
        )
    )
    logger.info(
        "Service started",
        service=SERVICE_NAME,
        version=VERSION,
        python=python_version,
        environment=AppConfig.ENVIRONMENT,
        log_level=AppConfig.LOG_LEVEL,
        model=AppConfig.GEMINI_MODEL,
    )
    if not get_api_key():
        # not fatal: every submission will report the failure instead
        logger.warning("Gemini API key not set", component="genai")

    sweeper = asyncio.create_task(remove_expired_sessions())
    app.state.session_sweeper = sweeper
    try:
        yield
    finally:
        print(SHUTDOWN_BANNER.format(service=SERVICE_NAME, version=VERSION))
        logger.info("Service shutting down", service=SERVICE_NAME, version=VERSION)
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        logger.info("Session sweeper stopped", component="sessions")
