"""OpenAI DALL-E image provider adapter (generative, highest fidelity).

POSTs the derived visual prompt to the images/generations endpoint with
aiohttp. Results are model-synthesized, so they carry generated=True and no
real-world attribution.
"""

from typing import Optional

import aiohttp

from recipe_generation.models.models import ImageAttribution, ImageResult, ImageSource
from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import TransportError
from recipe_generation.utils.logger import logger

DALLE_URL = "https://api.openai.com/v1/images/generations"


class DalleImageProvider:
    """ImageProvider backed by OpenAI image generation."""

    name = "dalle"

    def __init__(
        self,
        api_key: str,
        model: str = "dall-e-3",
        size: str = "1024x1024",
        quality: str = "standard",
        timeout_seconds: float = 30,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.size = size
        self.quality = quality
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config: Config) -> "DalleImageProvider":
        return cls(
            api_key=config.OPENAI_API_KEY,
            model=config.OPENAI_IMAGE_MODEL,
            size=config.OPENAI_IMAGE_SIZE,
            quality=config.OPENAI_IMAGE_QUALITY,
            timeout_seconds=config.GENERATIVE_IMAGE_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "prompt": prompt,
            "n": 1,
            "size": self.size,
            "quality": self.quality,
        }

    async def try_generate(self, prompt: str, subject_name: str) -> Optional[ImageResult]:
        """Generate one image from the visual prompt.

        Returns:
            ImageResult with generated=True, or None if the API returned no image.

        Raises:
            TransportError: On network failure or non-2xx response.
        """
        logger.info(f"Generating DALL-E image for: {subject_name}")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(DALLE_URL, json=self._build_payload(prompt), headers=headers) as response:
                    if response.status >= 300:
                        try:
                            error_data = await response.json()
                            detail = (error_data.get("error") or {}).get("message") or response.reason
                        except (aiohttp.ContentTypeError, ValueError):
                            detail = response.reason
                        raise TransportError(
                            f"DALL-E API error: {response.status} {detail}",
                            provider=self.name,
                            status=response.status,
                        )
                    data = await response.json()
        except aiohttp.ClientError as e:
            raise TransportError(f"DALL-E request failed: {e}", provider=self.name) from e

        images = data.get("data") or []
        if not images or not images[0].get("url"):
            logger.info(f"DALL-E returned no image for: {subject_name}")
            return None

        url = images[0]["url"]
        return ImageResult(
            image_url=url,
            thumbnail_url=url,
            generated=True,
            attribution=ImageAttribution(source=ImageSource.DALLE),
        )
