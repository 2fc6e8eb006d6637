"""moodlog Telegram bot."""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from telegram import Update, Bot
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    MessageHandler,
    filters,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .adapters.firestore import FirestoreMoodStore
from .config import Config, load_config
from .ports.mood_store import MoodStore, StoreError
from .telegram_handlers import (
    start_handler,
    help_handler,
    log_handler,
    entries_handler,
    cancel_handler,
    note_handler,
    click_handler,
    is_authorized,
)

logger = logging.getLogger(__name__)

REMINDER_TEXT = "How are you feeling today?\n\nUse /log to record your mood."


class AuthFilter(filters.BaseFilter):
    """Only pass updates from users on the allowlist."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        return is_authorized(update, self.allowed_users)


async def unauthorized_handler(update: Update, context):
    """Turn away messages from users outside the allowlist."""
    user = update.effective_user
    logger.warning(f"Rejected update from user {user.id} ({user.username})")
    await update.message.reply_text(
        "This mood journal is private.\n"
        f"Your Telegram user ID is {user.id}; add it to TELEGRAM_ALLOWED_USERS in moodlog.conf to get access."
    )


def create_application(config: Config | None = None, store: MoodStore | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to moodlog.conf"
        )

    if store is None:
        store = FirestoreMoodStore.from_config(config)

    app = Application.builder().token(config.telegram_bot_token).build()
    app.bot_data["store"] = store
    app.bot_data["config"] = config
    app.bot_data["allowed_users"] = config.telegram_allowed_users

    auth_filter = AuthFilter(config.telegram_allowed_users)

    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))
    app.add_handler(CommandHandler("log", log_handler, filters=auth_filter))
    app.add_handler(CommandHandler("entries", entries_handler, filters=auth_filter))
    app.add_handler(CommandHandler("cancel", cancel_handler, filters=auth_filter))
    app.add_handler(CallbackQueryHandler(click_handler))
    app.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND & auth_filter, note_handler)
    )

    if config.telegram_allowed_users:
        app.add_handler(
            MessageHandler(~auth_filter & filters.ALL, unauthorized_handler)
        )

    return app


def setup_scheduler(app: Application, config: Config | None = None) -> AsyncIOScheduler:
    """Set up the daily check-in reminder."""
    if config is None:
        config = load_config()

    scheduler = AsyncIOScheduler(timezone=config.timezone or "UTC")

    if config.telegram_reminder_time and config.telegram_allowed_users:
        try:
            hour, minute = map(int, config.telegram_reminder_time.split(":"))
            scheduler.add_job(
                send_checkin_reminder,
                CronTrigger(hour=hour, minute=minute),
                args=[app.bot, config.telegram_allowed_users, app.bot_data["store"], config.timezone],
                id="checkin_reminder",
            )
            logger.info(f"Scheduled check-in reminder at {hour:02d}:{minute:02d}")
        except ValueError:
            logger.warning(f"Invalid reminder time format: {config.telegram_reminder_time}")

    return scheduler


async def has_entry_today(store: MoodStore, timezone: str = "UTC") -> bool:
    """Whether the newest entry was written today in the local zone."""
    entries = await store.list_ordered()
    if not entries or entries[0].timestamp is None:
        return False
    tz = ZoneInfo(timezone)
    return entries[0].timestamp.astimezone(tz).date() == datetime.now(tz).date()


async def send_checkin_reminder(bot: Bot, user_ids: list[int], store: MoodStore, timezone: str = "UTC"):
    """Nudge users to log a mood if today has no entry yet."""
    try:
        logged_today = await has_entry_today(store, timezone)
    except StoreError as e:
        logger.warning(f"Could not check today's entries: {e}")
        logged_today = False

    if not logged_today:
        logger.info(f"Sending check-in reminder to {len(user_ids)} user(s)")
        for user_id in user_ids:
            try:
                await bot.send_message(chat_id=user_id, text=REMINDER_TEXT)
            except Exception as e:
                logger.error(f"Failed to send check-in reminder to user {user_id}: {e}")
    else:
        logger.info("Mood already logged today, skipping reminder")


def run_bot(config: Config | None = None):
    """Poll Telegram until interrupted, with the check-in scheduler running."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = config or load_config()
    app = create_application(config)
    scheduler = setup_scheduler(app, config)

    async def start_scheduler(application: Application) -> None:
        scheduler.start()
        logger.info(f"Check-in scheduler running ({len(scheduler.get_jobs())} job(s), {config.timezone})")

    app.post_init = start_scheduler

    if not config.telegram_allowed_users:
        logger.warning("TELEGRAM_ALLOWED_USERS is empty, any Telegram user can read and delete entries")

    logger.info(f"moodlog bot polling, collection {config.firestore_collection!r}")
    app.run_polling(allowed_updates=Update.ALL_TYPES)
