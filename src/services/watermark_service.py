# coding: utf-8
"""
Watermark service

Stamps the channel watermark on a result screenshot through the quickchart
watermark API and saves the composed image under MEDIA_DIR/imgs.
"""
import asyncio
import uuid
from pathlib import Path
from typing import Optional

import aiohttp
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from loguru import logger
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from config.config import (
    IMAGE_DOWNLOAD_TIMEOUT,
    MEDIA_DIR,
    WATERMARK_IMAGE_URL,
    WATERMARK_SERVICE_URL,
)


class ImageProcessingError(Exception):
    """Raised when a result image cannot be downloaded, composed or saved"""
    pass


class WatermarkService:
    """
    Compose result screenshots with the channel watermark

    Args:
        service_url: Watermark API endpoint
        mark_image_url: Public URL of the watermark image
        media_dir: Root media directory, images land in `<media_dir>/imgs`
    """

    MARK_RATIO = "0.6"
    POSITION = "center"
    OPACITY = "0.65"

    def __init__(
        self,
        service_url: str = WATERMARK_SERVICE_URL,
        mark_image_url: str = WATERMARK_IMAGE_URL,
        media_dir: Path = MEDIA_DIR,
        timeout: int = IMAGE_DOWNLOAD_TIMEOUT,
    ):
        self.service_url = service_url
        self.mark_image_url = mark_image_url
        self.output_dir = Path(media_dir) / "imgs"
        self.timeout = timeout

    def watermark_params(self, main_image_url: str) -> dict:
        return {
            "mainImageUrl": main_image_url,
            "markImageUrl": self.mark_image_url,
            "markRatio": self.MARK_RATIO,
            "position": self.POSITION,
            "opacity": self.OPACITY,
        }

    async def telegram_file_url(self, bot: Bot, file_id: str) -> str:
        """Direct download URL of an uploaded Telegram file"""
        try:
            file = await bot.get_file(file_id)
        except TelegramAPIError as e:
            raise ImageProcessingError(f"Could not resolve Telegram file {file_id}: {e}") from e

        if not file.file_path:
            raise ImageProcessingError(f"Telegram file {file_id} has no path")
        return bot.session.api.file_url(bot.token, file.file_path)

    @retry(
        retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    async def _download(self, params: dict) -> bytes:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                self.service_url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                response.raise_for_status()
                return await response.read()

    async def compose(self, main_image_url: str, filename: Optional[str] = None) -> Path:
        """
        Download the watermarked version of `main_image_url` and save it

        Returns:
            Path of the saved PNG

        Raises:
            ImageProcessingError: on any download or write failure
        """
        try:
            data = await self._download(self.watermark_params(main_image_url))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ImageProcessingError(f"Watermark download failed: {e}") from e

        if not data:
            raise ImageProcessingError("Watermark service returned an empty image")

        path = self.output_dir / (filename or f"{uuid.uuid4()}.png")
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise ImageProcessingError(f"Could not save image to {path}: {e}") from e

        logger.info(f"Watermarked result image saved: {path.name}")
        return path

    async def watermark_telegram_photo(self, bot: Bot, file_id: str) -> Path:
        """Watermark a photo the operator uploaded and return the saved path"""
        return await self.compose(await self.telegram_file_url(bot, file_id))
