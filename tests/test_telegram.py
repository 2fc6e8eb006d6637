"""Tests for the Telegram front end."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import ANY, AsyncMock, MagicMock

import pytest

from moodlog.config import Config
from moodlog.core.entries import EMPTY_PLACEHOLDER, MoodEntry, RenderedEntry
from moodlog.core.selector import MoodSelector
from moodlog.repository import ListRegion, RegionState
from moodlog.telegram_bot import (
    create_application,
    has_entry_today,
    send_checkin_reminder,
    unauthorized_handler,
)
from moodlog.telegram_format import entries_keyboard, entries_markdown, mood_keyboard
from moodlog.telegram_handlers import (
    DELETE_PROMPT,
    DIALOG_BUSY,
    MOOD_WARNING,
    click_handler,
    is_authorized,
    note_handler,
)


class TestFormat:
    def test_mood_keyboard_marks_selection(self):
        selector = MoodSelector(["Happy", "Sad", "Calm", "Angry"])
        selector.select("Sad")
        rows = mood_keyboard(selector).inline_keyboard

        assert [len(r) for r in rows] == [3, 1, 1]
        assert rows[0][1].text == "✅ 😢 Sad"
        assert rows[0][1].callback_data == "mood:Sad"
        assert rows[-1][0].callback_data == "save"

    def test_entries_keyboard_keyed_by_id(self):
        region = ListRegion()
        region.show(RegionState.ENTRIES, [RenderedEntry("abc123", "Sad - rough day", "2025-01-15 10:00")])
        rows = entries_keyboard(region).inline_keyboard
        assert rows[0][0].callback_data == "delete:abc123"
        assert "Sad - rough day (2025-01-15 10:00)" in entries_markdown(region)

    def test_placeholder(self):
        region = ListRegion()
        region.show(RegionState.EMPTY)
        assert entries_keyboard(region) is None
        assert EMPTY_PLACEHOLDER in entries_markdown(region)


def _context(store, **config):
    context = MagicMock()
    context.chat_data = {}
    context.bot_data = {
        "store": store,
        "config": Config(modal_appear_delay=0, modal_dismiss_delay=0, **config),
        "allowed_users": [],
    }
    return context


def _text_update(text):
    update = MagicMock()
    update.message.text = text
    update.message.reply_text = AsyncMock()
    return update


def _click_update(data, user_id=1):
    update = MagicMock()
    update.effective_user.id = user_id
    query = update.callback_query
    query.data = data
    query.answer = AsyncMock()
    query.edit_message_text = AsyncMock()
    query.edit_message_reply_markup = AsyncMock()
    query.message.reply_text = AsyncMock()
    return update


class TestHandlers:
    def test_note_without_mood_shows_warning(self, store):
        context = _context(store)
        update = _text_update("rough day")

        asyncio.run(note_handler(update, context))

        assert store.inserted == []
        update.message.reply_text.assert_any_call(MOOD_WARNING, reply_markup=ANY)

    def test_mood_click_then_note_saves(self, store):
        context = _context(store)

        async def scenario():
            await click_handler(_click_update("mood:Sad"), context)
            update = _text_update("rough day")
            await note_handler(update, context)
            return update

        update = asyncio.run(scenario())
        assert store.inserted == [{"mood": "Sad", "note": "rough day"}]
        update.message.reply_text.assert_any_call("Saved.")

    def test_delete_confirm_flow(self, store):
        asyncio.run(store.insert("Happy", ""))
        context = _context(store)

        async def scenario():
            delete = _click_update("delete:id1")
            await click_handler(delete, context)
            await asyncio.sleep(0.01)
            confirm = _click_update("confirm-delete")
            await click_handler(confirm, context)
            return delete, confirm

        delete, confirm = asyncio.run(scenario())
        assert delete.callback_query.message.reply_text.await_count == 1
        confirm.callback_query.edit_message_text.assert_awaited_once_with("Entry deleted.")
        assert store.deleted == ["id1"]

    def test_second_delete_while_dialog_open(self, store):
        asyncio.run(store.insert("Happy", ""))
        asyncio.run(store.insert("Sad", ""))
        context = _context(store)

        async def scenario():
            first = _click_update("delete:id1")
            await click_handler(first, context)
            second = _click_update("delete:id2")
            await click_handler(second, context)
            return first, second

        first, second = asyncio.run(scenario())
        first.callback_query.message.reply_text.assert_awaited_once_with(DELETE_PROMPT, reply_markup=ANY)
        second.callback_query.message.reply_text.assert_awaited_once_with(DIALOG_BUSY)
        assert context.chat_data["page"].workflow.delete_modal.payload == "id1"
        assert store.deleted == []

    def test_unauthorized_click(self, store):
        context = _context(store)
        context.bot_data["allowed_users"] = [42]
        update = _click_update("mood:Happy", user_id=7)

        asyncio.run(click_handler(update, context))

        update.callback_query.answer.assert_awaited_once_with("Unauthorized.")
        assert context.chat_data == {}


class TestReminder:
    def test_has_entry_today(self, store):
        store.entries.append(MoodEntry(id="t", mood="Happy", timestamp=datetime.now(timezone.utc)))
        assert asyncio.run(has_entry_today(store)) is True

    def test_no_entry_today(self, store):
        old = datetime.now(timezone.utc) - timedelta(days=2)
        store.entries.append(MoodEntry(id="t", mood="Happy", timestamp=old))
        assert asyncio.run(has_entry_today(store)) is False
        assert asyncio.run(has_entry_today(type(store)())) is False

    def test_sends_when_nothing_logged(self, store):
        bot = MagicMock()
        bot.send_message = AsyncMock()
        asyncio.run(send_checkin_reminder(bot, [1, 2], store))
        assert bot.send_message.await_count == 2

    def test_skips_when_logged(self, store):
        store.entries.append(MoodEntry(id="t", mood="Happy", timestamp=datetime.now(timezone.utc)))
        bot = MagicMock()
        bot.send_message = AsyncMock()
        asyncio.run(send_checkin_reminder(bot, [1], store))
        bot.send_message.assert_not_awaited()

    def test_sends_when_store_fails(self, store):
        store.fail_list = True
        bot = MagicMock()
        bot.send_message = AsyncMock()
        asyncio.run(send_checkin_reminder(bot, [1], store))
        bot.send_message.assert_awaited_once()


def test_create_application_requires_token(store):
    with pytest.raises(ValueError, match="TELEGRAM_BOT_TOKEN"):
        create_application(Config(), store=store)


class TestAuth:
    def test_empty_allowlist_lets_everyone_in(self):
        assert is_authorized(_click_update("save", user_id=7), []) is True

    def test_allowlist(self):
        assert is_authorized(_click_update("save", user_id=42), [42]) is True
        assert is_authorized(_click_update("save", user_id=7), [42]) is False

    def test_unauthorized_reply_names_user_id(self):
        update = _text_update("hello")
        update.effective_user.id = 7

        asyncio.run(unauthorized_handler(update, MagicMock()))

        text = update.message.reply_text.await_args.args[0]
        assert "private" in text
        assert "7" in text
