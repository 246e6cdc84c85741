from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..config import http_client_options, settings

logger = logging.getLogger(__name__)


def first_definition(data: Any) -> Optional[str]:
    """
    Pull the first definition of the first meaning of the first entry
    out of a dictionaryapi.dev payload. Returns None if any level is missing.
    """
    try:
        text = data[0]["meanings"][0]["definitions"][0]["definition"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text


class DictionaryClient:
    """Definition lookup against the free dictionary API."""

    def __init__(
        self,
        url_template: str | None = None,
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url_template = url_template or settings.dictionary_api_url
        self.timeout_sec = timeout_sec if timeout_sec is not None else settings.http_timeout_sec
        self.transport = transport

    def url_for(self, word: str) -> str:
        return self.url_template.format(word=quote(word, safe=""))

    async def fetch_meaning(self, word: str) -> Optional[str]:
        """
        Returns the first definition for `word`, or None on any failure.
        Never raises; callers treat None as "not found".
        """
        if not word or not word.strip():
            return None

        url = self.url_for(word.strip())
        try:
            async with httpx.AsyncClient(transport=self.transport, **http_client_options(self.timeout_sec)) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("dictionary lookup for %r failed: %s", word, exc)
            return None

        if not resp.is_success:
            logger.info("dictionary has no entry for %r (HTTP %s)", word, resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("dictionary returned invalid JSON for %r", word)
            return None

        meaning = first_definition(data)
        if meaning is None:
            logger.info("dictionary payload for %r has no definition", word)
        return meaning
