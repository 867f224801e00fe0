"""
Halskey signals bot - Main Bot Entry Point
"""

import asyncio
import sys
from typing import Optional

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.types import BotCommand
from loguru import logger

from api_server import RUNNING_TEXT, create_server
from config.config import (
    ACTIVE_BOT_TOKEN,
    ADMIN_IDS,
    BOT_NAME,
    IS_PRODUCTION,
    POSTING_CHANNEL_ID,
    validate_config,
)
from config.logging import setup_logging
from config.sentry import init_sentry
from src.database.engine import check_connection, dispose_engine, get_session_maker
from src.bot.handlers import (
    start,
    help_cmd,
    signal,
    result,
    reports,
    admin,
    broadcast,
    manual,
    common,
)
from src.bot.middleware import AdminMiddleware, DatabaseMiddleware, LoggingMiddleware
from src.services.channel_publisher import ChannelPublisher
from src.services.conversation_store import ConversationStore
from src.services.session_closer import SessionCloser
from src.services.watermark_service import WatermarkService
from src.tasks.cron_scheduler import ChannelCronScheduler

# Background tasks references
_health_task: Optional[asyncio.Task] = None
_health_server = None


async def setup_bot_commands(bot: Bot) -> None:
    """
    Setup bot commands menu

    Args:
        bot: Bot instance
    """
    commands = [
        BotCommand(command="start", description="👋 Start the bot"),
        BotCommand(command="signal", description="📡 Post a new signal"),
        BotCommand(command="result", description="🏁 Post the latest result"),
        BotCommand(command="endsession", description="📝 End the current session"),
        BotCommand(command="endday", description="🧾 Post the daily report"),
        BotCommand(command="reportweek", description="📈 Post the weekly report"),
        BotCommand(command="stats", description="📊 Performance stats"),
        BotCommand(command="milestone", description="🏆 Milestone status"),
        BotCommand(command="broadcast", description="📢 Send an announcement"),
        BotCommand(command="manual", description="📋 Send a scheduled post now"),
        BotCommand(command="info", description="💡 Bot guide"),
    ]

    await bot.set_my_commands(commands)
    logger.info("Bot commands menu initialized successfully")


async def on_startup(bot: Bot, cron_scheduler: ChannelCronScheduler, **kwargs) -> None:
    """Actions to perform on bot startup"""
    global _health_task, _health_server

    logger.info(f"Starting {BOT_NAME}...")

    # NOTE: Database tables managed by Alembic migrations
    # Run: alembic upgrade head
    if not await check_connection():
        logger.warning("Database is not reachable, signals will fail until it is")

    await setup_bot_commands(bot)

    await cron_scheduler.load()
    cron_scheduler.start()

    _health_server = create_server()
    _health_task = asyncio.create_task(_health_server.serve())
    logger.info(RUNNING_TEXT)

    bot_info = await bot.get_me()
    logger.info(f"Bot started: @{bot_info.username} (ID: {bot_info.id})")


async def on_shutdown(
    bot: Bot, cron_scheduler: ChannelCronScheduler, closer: SessionCloser, **kwargs
) -> None:
    """Actions to perform on bot shutdown"""
    logger.info(f"Shutting down {BOT_NAME}...")

    await closer.shutdown()

    cron_scheduler.stop()

    if _health_server is not None:
        _health_server.should_exit = True
    if _health_task is not None:
        try:
            await _health_task
        except asyncio.CancelledError:
            pass
        logger.info("Liveness server stopped")

    # Close database connections
    await dispose_engine()
    logger.info("Database connections closed")

    # Close bot session
    await bot.session.close()
    logger.info("Bot session closed")


async def main() -> None:
    """Main bot function"""

    setup_logging()

    # Initialize Sentry error monitoring
    init_sentry()

    try:
        validate_config()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info("Configuration validated successfully")
    logger.info(
        f"Mode: {'PRODUCTION' if IS_PRODUCTION else 'DEVELOPMENT'}, "
        f"posting to channel {POSTING_CHANNEL_ID}"
    )

    bot = Bot(
        token=ACTIVE_BOT_TOKEN,
        default=DefaultBotProperties(
            parse_mode=ParseMode.HTML, link_preview_is_disabled=True
        ),
    )

    session_maker = get_session_maker()
    conversations = ConversationStore(ADMIN_IDS)
    publisher = ChannelPublisher(bot, POSTING_CHANNEL_ID, conversations)
    closer = SessionCloser(publisher, session_maker)
    cron_scheduler = ChannelCronScheduler(publisher, closer, conversations, session_maker)

    # Services are injected into handlers by parameter name
    dp = Dispatcher(
        conversations=conversations,
        publisher=publisher,
        closer=closer,
        watermark=WatermarkService(),
        cron_scheduler=cron_scheduler,
    )

    # Register middleware (order matters!)
    # 1. Logging middleware (first to log everything)
    dp.message.middleware(LoggingMiddleware())
    dp.callback_query.middleware(LoggingMiddleware())

    # 2. Admin middleware (rejects everyone else before any work is done)
    dp.message.middleware(AdminMiddleware())
    dp.callback_query.middleware(AdminMiddleware())

    # 3. Database middleware (provides session to handlers)
    dp.message.middleware(DatabaseMiddleware(session_maker))
    dp.callback_query.middleware(DatabaseMiddleware(session_maker))

    dp.include_router(start.router)
    dp.include_router(help_cmd.router)
    dp.include_router(signal.router)
    dp.include_router(result.router)
    dp.include_router(reports.router)
    dp.include_router(admin.router)
    dp.include_router(broadcast.router)
    dp.include_router(manual.router)
    dp.include_router(common.router)

    # Register startup/shutdown handlers
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    try:
        logger.info("Starting bot polling...")
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types(),
            drop_pending_updates=True,  # Skip old updates on startup
        )
    except Exception as e:
        logger.exception(f"Critical error during bot operation: {e}")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)
