"""
Tests for the channel publisher, conversation store and watermark service
"""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from aiogram.exceptions import TelegramBadRequest

from src.services.channel_publisher import OutgoingPost, parse_reply_markup
from src.services.conversation_store import ConversationStore
from src.services.watermark_service import ImageProcessingError, WatermarkService

from conftest import ADMIN_ID, CHANNEL_ID


def test_parse_reply_markup():
    """Test stored button rows become an inline keyboard"""
    markup = parse_reply_markup(
        {"inline_keyboard": [[{"text": "Broker", "url": "https://example.com"}], [{"text": "Help", "url": "https://t.me/x"}]]}
    )

    assert [[b.text for b in row] for row in markup.inline_keyboard] == [["Broker"], ["Help"]]
    assert parse_reply_markup(None) is None
    assert parse_reply_markup({"inline_keyboard": []}) is None
    assert parse_reply_markup({"inline_keyboard": [[{"bogus": 1}]]}) is None


def test_last_admin_fallback():
    store = ConversationStore([5, 6])
    assert store.last_admin == 5

    store.set_last_admin(6)
    assert store.last_admin == 6

    assert ConversationStore().last_admin is None


@pytest.mark.asyncio
async def test_send_tracked_remembers_message(publisher, conversations):
    sent = await publisher.send_tracked(ADMIN_ID, "hello")

    assert conversations.get(ADMIN_ID).last_bot_message_id == sent.message_id


@pytest.mark.asyncio
async def test_delete_and_send_new(publisher, conversations, bot):
    """Test the previous live message is replaced"""
    first = await publisher.send_tracked(ADMIN_ID, "one")

    second = await publisher.delete_and_send_new(ADMIN_ID, "two")

    bot.delete_message.assert_awaited_once_with(chat_id=ADMIN_ID, message_id=first.message_id)
    assert conversations.get(ADMIN_ID).last_bot_message_id == second.message_id


@pytest.mark.asyncio
async def test_edit_text_not_modified(publisher, bot):
    bot.edit_message_text.side_effect = TelegramBadRequest(
        method=MagicMock(), message="Bad Request: message is not modified"
    )

    assert await publisher.edit_text(ADMIN_ID, 1, "same") is False


@pytest.mark.asyncio
async def test_send_to_channel_failure_notifies_admin(publisher, bot, sent_texts):
    def _fail_for_channel(*args, **kwargs):
        if kwargs["chat_id"] == CHANNEL_ID:
            raise TelegramBadRequest(method=MagicMock(), message="Bad Request: chat not found")
        return MagicMock(message_id=1)

    bot.send_message.side_effect = _fail_for_channel

    assert await publisher.send_to_channel("signal", ADMIN_ID, "done") is False
    assert sent_texts(ADMIN_ID) == ["Could not post to the channel, please try again."]


@pytest.mark.asyncio
async def test_send_message_by_type_video(publisher, bot, tmp_path):
    post = OutgoingPost(id="intro", text="Watch", video=publisher.instruction_video())

    assert await publisher.send_message_by_type(post) is True

    kwargs = bot.send_video.call_args.kwargs
    assert kwargs["chat_id"] == CHANNEL_ID
    assert kwargs["width"] == 622
    assert kwargs["height"] == 1280


@pytest.mark.asyncio
async def test_send_message_by_type_empty(publisher, bot):
    assert await publisher.send_message_by_type(OutgoingPost(id="empty")) is False
    bot.send_message.assert_not_awaited()


def test_watermark_params():
    service = WatermarkService(mark_image_url="https://example.com/mark.png")

    params = service.watermark_params("https://example.com/shot.jpg")

    assert params["mainImageUrl"] == "https://example.com/shot.jpg"
    assert params["markImageUrl"] == "https://example.com/mark.png"
    assert params["position"] == "center"


@pytest.mark.asyncio
async def test_watermark_compose_saves_image(tmp_path):
    service = WatermarkService(media_dir=tmp_path)
    service._download = AsyncMock(return_value=b"\x89PNG")

    path = await service.compose("https://example.com/shot.jpg", filename="result.png")

    assert path == tmp_path / "imgs" / "result.png"
    assert path.read_bytes() == b"\x89PNG"


@pytest.mark.asyncio
async def test_watermark_compose_failure(tmp_path):
    service = WatermarkService(media_dir=tmp_path)
    service._download = AsyncMock(side_effect=aiohttp.ClientError("down"))

    with pytest.raises(ImageProcessingError):
        await service.compose("https://example.com/shot.jpg")
