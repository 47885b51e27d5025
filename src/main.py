"""Main entry point for the habit streak bot"""
import logging
import asyncio
from src.config import validate_config, LOG_LEVEL
from src.db.connection import db
from src.bot import create_bot_application
from src.services import get_container

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Start the store, the bot and the reminder loop; tear them down in reverse"""
    app = None
    reminders = None
    try:
        validate_config()

        logger.info("Opening database pool and applying schema...")
        await db.init_pool()
        await db.init_schema()

        app = create_bot_application()
        await app.initialize()
        await app.start()

        # Daily reminder jobs on the application's JobQueue
        reminders = get_container().reminder_manager
        if reminders:
            reminders.run_reminder_loop()

        await app.updater.start_polling()
        logger.info("Habit streak bot is running. Press Ctrl+C to stop.")

        await asyncio.Event().wait()

    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
    finally:
        if reminders:
            reminders.stop()

        if app:
            if app.updater and app.updater.running:
                await app.updater.stop()
            if app.running:
                await app.stop()
            await app.shutdown()

        await db.close_pool()
        logger.info("Shutdown complete")


def run() -> None:
    """Console script entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
