"""AnkiConnect client for deck names, deck stats, and card lookups.

Requests go through a `requests.Session`; each public coroutine runs the
blocking call in a worker thread so callers stay on the event loop.
"""

from __future__ import annotations

import asyncio
from typing import Any

import requests
from loguru import logger

from .errors import CollaboratorUnavailable, MalformedResponse

API_VERSION = 6
SERVICE_NAME = "AnkiConnect"


def due_cards_query(deck_name: str) -> str:
    """Search query for cards that are due, new, or in review in one deck."""
    escaped = deck_name.replace('"', '\\"')
    return f'deck:"{escaped}" (is:due or is:new or is:review)'


class AnkiConnectClient:
    """Thin wrapper around the AnkiConnect v6 JSON API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        logger.debug("Initialized AnkiConnect client: url={}, timeout={}s", base_url, timeout)

    def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """Run one action and return its `result`.

        Raises:
            CollaboratorUnavailable: on transport failures, non-2xx statuses,
                non-JSON bodies, or a non-null `error` in the reply.
        """
        payload: dict[str, Any] = {"action": action, "version": API_VERSION}
        if params is not None:
            payload["params"] = params
        logger.debug("AnkiConnect request: action={}, params={}", action, _loggable(params))

        try:
            response = self.session.post(self.base_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise CollaboratorUnavailable(SERVICE_NAME, f"{action} failed: {exc}") from exc
        except ValueError as exc:
            raise CollaboratorUnavailable(SERVICE_NAME, f"{action} returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise CollaboratorUnavailable(SERVICE_NAME, f"{action} returned an unexpected payload")
        if data.get("error"):
            raise CollaboratorUnavailable(SERVICE_NAME, f"{action} error: {data['error']}")
        return data.get("result")

    async def deck_names_and_ids(self) -> dict[str, int]:
        result = await asyncio.to_thread(self.invoke, "deckNamesAndIds")
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise MalformedResponse(f"deckNamesAndIds returned {type(result).__name__}, expected an object")
        try:
            return {str(name): int(deck_id) for name, deck_id in result.items()}
        except (TypeError, ValueError) as exc:
            raise MalformedResponse(f"deckNamesAndIds returned a non-integer deck id: {exc}") from exc

    async def deck_stats(self, deck_names: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch stats for all names in one request, keyed by deck id."""
        result = await asyncio.to_thread(self.invoke, "getDeckStats", {"decks": list(deck_names)})
        return {str(deck_id): stats for deck_id, stats in (result or {}).items()}

    async def find_cards(self, query: str) -> list[int]:
        result = await asyncio.to_thread(self.invoke, "findCards", {"query": query})
        return [int(card_id) for card_id in result or []]

    async def cards_info(self, card_ids: list[int]) -> list[dict[str, Any]]:
        result = await asyncio.to_thread(self.invoke, "cardsInfo", {"cards": list(card_ids)})
        return list(result or [])

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()


def _loggable(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Shorten long list parameters for debug logging."""
    if not params:
        return params
    return {
        key: f"[{len(value)} items]" if isinstance(value, list) and len(value) > 10 else value
        for key, value in params.items()
    }
