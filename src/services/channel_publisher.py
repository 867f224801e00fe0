# coding: utf-8
"""
Channel publisher - thin layer over the aiogram Bot

Sends posts to the channel and keeps each admin's chat tidy (one live bot
message per admin). Telegram failures are logged and reported as False,
they never propagate to the caller.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from aiogram.types import FSInputFile, InlineKeyboardButton, InlineKeyboardMarkup, Message
from loguru import logger

from config.catalog import INSTRUCTION_VIDEO
from config.config import MEDIA_DIR
from src.services.conversation_store import ConversationStore


@dataclass
class OutgoingPost:
    """A scheduled or manual post resolved to local media."""

    id: str
    name: str = ""
    text: Optional[str] = None
    image_path: Optional[Path] = None
    video: Optional[Dict[str, Any]] = None
    reply_markup: Optional[Dict[str, Any]] = None


def parse_reply_markup(markup: Optional[Dict[str, Any]]) -> Optional[InlineKeyboardMarkup]:
    """
    Build an inline keyboard from stored markup

    Format: {"inline_keyboard": [[{"text": "Button 1", "url": "https://..."}], [...]]}
    """
    if not markup:
        return None

    try:
        keyboard = []
        for row in markup.get("inline_keyboard", []):
            keyboard.append([InlineKeyboardButton(**button) for button in row])
        return InlineKeyboardMarkup(inline_keyboard=keyboard) if keyboard else None
    except (TypeError, ValueError, AttributeError) as ex:
        logger.error(f"Failed to parse reply markup: {ex}")
        return None


def url_keyboard(rows: Sequence[Tuple[str, str]]) -> InlineKeyboardMarkup:
    """One url button per row."""
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text=text, url=url)] for text, url in rows]
    )


class ChannelPublisher:
    """
    Posts to the channel and manages the admin-side message trail

    Args:
        bot: aiogram Bot
        channel_id: Channel every post goes to
        conversations: Store holding each admin's last bot message id
        media_dir: Root of brand images, videos and saved results
    """

    def __init__(
        self,
        bot: Bot,
        channel_id: int,
        conversations: ConversationStore,
        media_dir: Path = MEDIA_DIR,
    ):
        self.bot = bot
        self.channel_id = channel_id
        self.conversations = conversations
        self.media_dir = Path(media_dir)

    # ===========================
    # ADMIN CHAT
    # ===========================

    async def delete_message(self, chat_id: int, message_id: Optional[int]) -> bool:
        if not message_id:
            return False
        try:
            await self.bot.delete_message(chat_id=chat_id, message_id=message_id)
            return True
        except TelegramAPIError as e:
            logger.warning(f"Could not delete message {message_id} in {chat_id}: {e}")
            return False

    async def send_tracked(
        self,
        chat_id: int,
        text: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
    ) -> Optional[Message]:
        """Send to an admin and remember it as their last bot message."""
        try:
            sent = await self.bot.send_message(chat_id=chat_id, text=text, reply_markup=reply_markup)
        except TelegramAPIError as e:
            logger.error(f"Failed to send message to {chat_id}: {e}")
            return None
        self.conversations.set_last_bot_message(chat_id, sent.message_id)
        return sent

    async def notify(self, chat_id: int, text: str) -> Optional[Message]:
        """Send a one-off note to an admin without tracking it."""
        try:
            return await self.bot.send_message(chat_id=chat_id, text=text)
        except TelegramAPIError as e:
            logger.error(f"Failed to notify {chat_id}: {e}")
            return None

    async def delete_and_send_new(
        self,
        chat_id: int,
        text: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
        fallback_message_id: Optional[int] = None,
    ) -> Optional[Message]:
        """Replace the admin's last bot message (or `fallback_message_id`) with a new one."""
        last_id = self.conversations.get(chat_id).last_bot_message_id or fallback_message_id
        await self.delete_message(chat_id, last_id)
        return await self.send_tracked(chat_id, text, reply_markup)

    async def edit_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
    ) -> bool:
        try:
            await self.bot.edit_message_text(
                text=text, chat_id=chat_id, message_id=message_id, reply_markup=reply_markup
            )
            return True
        except TelegramBadRequest as e:
            if "message is not modified" in str(e):
                return False
            logger.error(f"Failed to edit message {message_id} in {chat_id}: {e}")
            return False
        except TelegramAPIError as e:
            logger.error(f"Failed to edit message {message_id} in {chat_id}: {e}")
            return False

    # ===========================
    # CHANNEL
    # ===========================

    async def send_to_channel(
        self,
        text: str,
        admin_id: int,
        success_message: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
    ) -> bool:
        """
        Post text to the channel on behalf of an admin

        Removes the admin's last bot message first and confirms with
        `success_message` once the post is out.
        """
        await self.delete_message(admin_id, self.conversations.get(admin_id).last_bot_message_id)
        self.conversations.set_last_bot_message(admin_id, None)

        try:
            await self.bot.send_message(chat_id=self.channel_id, text=text, reply_markup=reply_markup)
        except TelegramAPIError as e:
            logger.error(f"Failed to post to channel {self.channel_id}: {e}")
            await self.notify(admin_id, "Could not post to the channel, please try again.")
            return False

        await self.notify(admin_id, success_message)
        return True

    async def post_to_channel(
        self, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None
    ) -> Optional[Message]:
        """Post text to the channel without touching any admin chat."""
        try:
            return await self.bot.send_message(chat_id=self.channel_id, text=text, reply_markup=reply_markup)
        except TelegramAPIError as e:
            logger.error(f"Failed to post to channel {self.channel_id}: {e}")
            return None

    async def send_photo_to_channel(
        self,
        image_path: Path | str,
        caption: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
    ) -> bool:
        try:
            await self.bot.send_photo(
                chat_id=self.channel_id,
                photo=FSInputFile(image_path),
                caption=caption,
                reply_markup=reply_markup,
            )
            return True
        except TelegramAPIError as e:
            logger.error(f"Failed to post photo {image_path} to channel: {e}")
            return False

    async def send_message_by_type(self, post: OutgoingPost, chat_id: Optional[int] = None) -> bool:
        """
        Send a template post as video, photo or text, each with optional buttons

        Returns:
            True if sent, False on failure or when there is nothing to send
        """
        chat_id = chat_id or self.channel_id
        reply_markup = parse_reply_markup(post.reply_markup)

        try:
            if post.video:
                video_path = self.media_dir / "videos" / post.video["path"]
                await self.bot.send_video(
                    chat_id=chat_id,
                    video=FSInputFile(video_path),
                    caption=post.text,
                    width=post.video.get("width"),
                    height=post.video.get("height"),
                    reply_markup=reply_markup,
                )
            elif post.image_path:
                await self.bot.send_photo(
                    chat_id=chat_id,
                    photo=FSInputFile(post.image_path),
                    caption=post.text,
                    reply_markup=reply_markup,
                )
            elif post.text:
                await self.bot.send_message(chat_id=chat_id, text=post.text, reply_markup=reply_markup)
            else:
                logger.warning(f"Post {post.id} has no content to send")
                return False

            logger.info(f"Post {post.id} sent to {chat_id}")
            return True

        except TelegramAPIError as e:
            logger.error(f"Error sending post {post.id} to {chat_id}: {e}")
            return False
        except OSError as e:
            logger.error(f"Media for post {post.id} could not be read: {e}")
            return False

    def brand_image(self, filename: str) -> Path:
        return self.media_dir / "imgs" / "brand" / filename

    @staticmethod
    def instruction_video() -> Dict[str, Any]:
        return dict(INSTRUCTION_VIDEO)


