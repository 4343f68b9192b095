"""Freepik image provider adapter (stock photo search).

Searches Freepik resources for "<dish> food" and maps the first hit to an
ImageResult with generated=False and author/license attribution. Uses the
dish name rather than the derived visual prompt, since search works on
short keyword queries.
"""

import re
from typing import Optional

import aiohttp

from recipe_generation.models.models import ImageAttribution, ImageResult, ImageSource
from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import TransportError
from recipe_generation.utils.logger import logger

FREEPIK_URL = "https://api.freepik.com/v1/resources"
FREEPIK_LICENSE = "Freepik License"


def build_search_query(subject_name: str) -> str:
    """Lowercase, drop non-alphanumerics, collapse whitespace, append "food"."""
    query = re.sub(r"[^a-z0-9\s]", "", subject_name.lower())
    query = re.sub(r"\s+", " ", query).strip()
    return f"{query} food".strip()


def _nested(data: dict, *keys: str) -> Optional[str]:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data if isinstance(data, str) and data else None


def resource_to_image(resource: dict) -> Optional[ImageResult]:
    """Map one Freepik resource to an ImageResult (None if it has no usable URL)."""
    image_url = _nested(resource, "image", "source", "url") or _nested(resource, "thumbnails", "large", "url")
    if not image_url:
        return None
    thumbnail_url = _nested(resource, "thumbnails", "medium", "url") or _nested(resource, "thumbnails", "small", "url")
    return ImageResult(
        image_url=image_url,
        thumbnail_url=thumbnail_url,
        generated=False,
        attribution=ImageAttribution(
            source=ImageSource.FREEPIK,
            author=_nested(resource, "author", "username") or "Freepik",
            author_url=_nested(resource, "author", "url"),
            source_url=_nested(resource, "url"),
            license=FREEPIK_LICENSE,
        ),
    )


class FreepikImageProvider:
    """ImageProvider backed by the Freepik resources search API."""

    name = "freepik"

    def __init__(self, api_key: str, timeout_seconds: float = 15) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config: Config) -> "FreepikImageProvider":
        return cls(api_key=config.FREEPIK_API_KEY, timeout_seconds=config.SEARCH_IMAGE_TIMEOUT_SECONDS)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def try_generate(self, prompt: str, subject_name: str) -> Optional[ImageResult]:
        """Search for a stock photo of the dish.

        Returns:
            ImageResult with attribution, or None when the search has no hits.

        Raises:
            TransportError: On network failure or non-2xx response.
        """
        params = {
            "locale": "en-US",
            "page": "1",
            "limit": "1",
            "order": "latest",
            "term": build_search_query(subject_name),
        }
        headers = {
            "X-Freepik-API-Key": self.api_key,
            "Content-Type": "application/json",
        }
        logger.info(f"Fetching image from Freepik for: {subject_name}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(FREEPIK_URL, params=params, headers=headers) as response:
                    if response.status >= 300:
                        raise TransportError(
                            f"Freepik API error: {response.status} {response.reason}",
                            provider=self.name,
                            status=response.status,
                        )
                    data = await response.json()
        except aiohttp.ClientError as e:
            raise TransportError(f"Freepik request failed: {e}", provider=self.name) from e

        for resource in data.get("data") or []:
            result = resource_to_image(resource)
            if result:
                logger.info(f"Image found on Freepik for: {subject_name}")
                return result

        logger.info(f"No image found on Freepik for: {subject_name}")
        return None
