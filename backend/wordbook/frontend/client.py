from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..config import http_client_options, settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A call to the JSON API failed. `message` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def _word_path(word: str) -> str:
    return quote(word, safe="")


class ApiClient:
    """
    Thin wrapper over the word API's JSON contract.
    The web front-end only talks to the backend through this class.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            resp = await self.client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError("Could not reach the server. Please check if it is running.") from exc

        if resp.is_error:
            message = None
            try:
                body = resp.json()
                if isinstance(body, dict):
                    message = body.get("error")
            except ValueError:
                pass
            raise ApiError(message or f"Request failed: {resp.status_code} {resp.reason_phrase}", resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise ApiError("The server sent an unreadable response.", resp.status_code) from exc

    async def list_words(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/words")

    async def get_word(self, word: str) -> Dict[str, Any]:
        return await self._request("GET", f"/words/{_word_path(word)}")

    async def create_word(self, word: str, meaning: Optional[str] = None) -> Dict[str, Any]:
        return await self._request("POST", "/words", json={"word": word, "meaning": meaning or None})

    async def update_meaning(self, word: str, meaning: str) -> Dict[str, Any]:
        return await self._request("PUT", f"/words/{_word_path(word)}", json={"meaning": meaning})

    async def delete_word(self, word: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/words/{_word_path(word)}")

    async def lookup(self, word: str) -> Dict[str, Any]:
        return await self._request("GET", f"/lookup/{_word_path(word)}")

    async def learn(self) -> Dict[str, Any]:
        return await self._request("GET", "/learn")


# FastAPI dependency
async def get_api_client():
    async with httpx.AsyncClient(base_url=settings.backend_url(), **http_client_options(settings.http_timeout_sec)) as client:
        yield ApiClient(client)
