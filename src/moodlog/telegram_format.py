"""Telegram message formatting utilities."""

import telegramify_markdown
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from .core.entries import mood_label
from .core.selector import MoodSelector
from .repository import ListRegion

MOODS_PER_ROW = 3


async def send_markdown(bot_or_msg, text: str, *, chat_id: int | None = None, reply_markup=None):
    """Send markdown text to Telegram, converting to MarkdownV2.

    bot_or_msg: a Bot instance (pass chat_id) or an Update.message (calls reply_text).
    The keyboard, if any, is attached to the last chunk.
    """
    converted = telegramify_markdown.markdownify(text)
    chunks = [converted[i : i + 4000] for i in range(0, len(converted), 4000)]
    for n, chunk in enumerate(chunks):
        markup = reply_markup if n == len(chunks) - 1 else None
        if chat_id is not None:
            await bot_or_msg.send_message(
                chat_id=chat_id, text=chunk, parse_mode="MarkdownV2", reply_markup=markup
            )
        else:
            await bot_or_msg.reply_text(chunk, parse_mode="MarkdownV2", reply_markup=markup)


def mood_keyboard(selector: MoodSelector) -> InlineKeyboardMarkup:
    """Mood buttons, the selected one ticked, plus a save button."""
    buttons = []
    for mood in selector.moods:
        label = mood_label(mood)
        if selector.is_selected(mood):
            label = f"✅ {label}"
        buttons.append(InlineKeyboardButton(label, callback_data=f"mood:{mood}"))
    rows = [buttons[i : i + MOODS_PER_ROW] for i in range(0, len(buttons), MOODS_PER_ROW)]
    rows.append([InlineKeyboardButton("💾 Save", callback_data="save")])
    return InlineKeyboardMarkup(rows)


def entries_markdown(region: ListRegion) -> str:
    """The entry list as markdown, or its placeholder in italics."""
    if region.placeholder:
        return f"*Your entries*\n\n_{region.placeholder}_"
    lines = [f"- {item.text} ({item.when})" for item in region.items]
    return "*Your entries*\n\n" + "\n".join(lines)


def entries_keyboard(region: ListRegion) -> InlineKeyboardMarkup | None:
    """One delete button per rendered entry, keyed by entry id."""
    if not region.items:
        return None
    rows = [
        [InlineKeyboardButton(f"🗑️ {item.text[:40]}", callback_data=f"delete:{item.entry_id}")]
        for item in region.items
    ]
    return InlineKeyboardMarkup(rows)


def delete_modal_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton("Delete", callback_data="confirm-delete"),
                InlineKeyboardButton("Cancel", callback_data="cancel-delete"),
            ]
        ]
    )


def mood_modal_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton("OK", callback_data="ok-mood")]])
