# coding: utf-8
"""
Sentry configuration for error monitoring
"""
import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.aiohttp import AioHttpIntegration
from loguru import logger

from config.config import SENTRY_DSN, ENVIRONMENT, IS_PRODUCTION, BOT_NAME, BOT_VERSION


def init_sentry() -> bool:
    """
    Initialize Sentry SDK

    Returns:
        True if Sentry was initialized, False if no DSN is configured
    """
    if not SENTRY_DSN:
        logger.warning("SENTRY_DSN not configured - error monitoring disabled")
        return False

    try:
        sentry_sdk.init(
            dsn=SENTRY_DSN,
            environment=ENVIRONMENT,
            release=f"{BOT_NAME}@{BOT_VERSION}",
            integrations=[
                AsyncioIntegration(),
                SqlalchemyIntegration(),
                AioHttpIntegration(),
            ],
            traces_sample_rate=0.1 if IS_PRODUCTION else 1.0,
            sample_rate=1.0,
            attach_stacktrace=True,
            send_default_pii=False,
            max_breadcrumbs=50,
            before_send=before_send_hook,
        )
        logger.info(f"Sentry initialized successfully (Environment: {ENVIRONMENT})")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def before_send_hook(event, hint):
    """
    Drop shutdown noise and scrub the bot token from outgoing events
    """
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        if isinstance(exc_value, (KeyboardInterrupt, SystemExit)):
            return None

    # Telegram API urls embed the bot token
    request = event.get("request")
    if request and "/bot" in str(request.get("url", "")):
        request["url"] = "[Filtered]"

    return event
