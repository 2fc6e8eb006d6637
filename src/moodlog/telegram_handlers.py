"""Telegram command and button handlers."""

import logging

from telegram import Update
from telegram.ext import ContextTypes

from .page import MoodJournalPage, create_page
from .telegram_format import (
    delete_modal_keyboard,
    entries_keyboard,
    entries_markdown,
    mood_keyboard,
    mood_modal_keyboard,
    send_markdown,
)

logger = logging.getLogger(__name__)

FORM_PROMPT = "*How are you feeling?*\n\nPick a mood, then send a note or tap Save."
DELETE_PROMPT = "Delete this entry? This cannot be undone."
MOOD_WARNING = "Please select a mood before saving."
DIALOG_BUSY = "Finish or /cancel the open dialog first."


def is_authorized(update: Update, allowed_users: list[int]) -> bool:
    """An empty allowlist lets everyone in."""
    if not allowed_users:
        return True
    user = update.effective_user
    return user is not None and user.id in allowed_users


def get_page(context: ContextTypes.DEFAULT_TYPE) -> MoodJournalPage:
    """The journaling page for this chat, created on first use."""
    page = context.chat_data.get("page")
    if page is None:
        page = create_page(context.bot_data["store"], context.bot_data["config"])
        context.chat_data["page"] = page
    return page


async def flush_alerts(page: MoodJournalPage, message) -> None:
    """Send any alerts the page queued while handling an update."""
    for alert in page.drain_alerts():
        await message.reply_text(alert)


async def send_entries(page: MoodJournalPage, message) -> None:
    """Refresh the list and send it with its delete buttons."""
    await page.repository.refresh()
    region = page.repository.region
    await send_markdown(message, entries_markdown(region), reply_markup=entries_keyboard(region))


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hi! I'm your mood journal.\n\n"
        "Commands:\n"
        "/log - Record how you feel\n"
        "/entries - List your entries\n"
        "/cancel - Close the open dialog\n"
        "/help - Show all commands"
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*Mood Journal Commands*\n\n"
        "/log - Pick a mood, then send a note or tap Save\n"
        "/entries - Newest entries first, tap one to delete it\n"
        "/cancel - Close the open dialog\n",
        parse_mode="Markdown",
    )


async def log_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /log command - show the mood form."""
    page = get_page(context)
    await send_markdown(update.message, FORM_PROMPT, reply_markup=mood_keyboard(page.selector))


async def entries_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /entries command - list entries newest first."""
    page = get_page(context)
    await send_entries(page, update.message)


async def cancel_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /cancel command - the Escape key of the chat."""
    page = get_page(context)
    if page.handle_key("Escape"):
        await update.message.reply_text("Dialog closed.")
    else:
        await update.message.reply_text("Nothing to cancel.")


# ============== Form ==============


async def note_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle a plain text message: it is the note, and submits the form."""
    page = get_page(context)
    text = update.message.text.strip()
    await _submit(page, update.message, note=text)


async def _submit(page: MoodJournalPage, message, note: str | None = None) -> None:
    saved = await page.submit(note)
    if saved:
        await message.reply_text("Saved.")
        region = page.repository.region
        await send_markdown(message, entries_markdown(region), reply_markup=entries_keyboard(region))
    elif page.workflow.mood_modal.is_open:
        await message.reply_text(MOOD_WARNING, reply_markup=mood_modal_keyboard())
    await flush_alerts(page, message)


# ============== Buttons ==============


async def click_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Route every inline button through the page's click dispatcher."""
    query = update.callback_query
    if not is_authorized(update, context.bot_data.get("allowed_users") or []):
        await query.answer("Unauthorized.")
        return

    await query.answer()
    page = get_page(context)
    target = query.data or ""
    action = target.partition(":")[0]
    message = query.message

    if action == "save":
        await _submit(page, message)
        return

    handled = await page.handle_click(target)

    match action:
        case "mood":
            if handled:
                await query.edit_message_reply_markup(reply_markup=mood_keyboard(page.selector))
        case "delete":
            if handled:
                await message.reply_text(DELETE_PROMPT, reply_markup=delete_modal_keyboard())
            else:
                await message.reply_text(DIALOG_BUSY)
        case "confirm-delete":
            if handled:
                await query.edit_message_text("Entry deleted.")
                region = page.repository.region
                await send_markdown(
                    message, entries_markdown(region), reply_markup=entries_keyboard(region)
                )
            else:
                await query.edit_message_text("Entry not deleted.")
        case "cancel-delete":
            await query.edit_message_text("Delete cancelled.")
        case "ok-mood":
            await query.edit_message_reply_markup(reply_markup=None)

    await flush_alerts(page, message)
