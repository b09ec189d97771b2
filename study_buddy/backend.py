"""Async HTTP client for the Study Buddy chat endpoint."""

from __future__ import annotations

from collections.abc import Sequence
import json
import logging
from typing import Any

import httpx

from .exceptions import (
    BackendConnectionError,
    BackendResponseError,
    BackendStatusError,
    BackendTransportError,
)
from .logging_utils import log_event

LOGGER = logging.getLogger(__name__)

DEFAULT_REPLY_FIELDS: tuple[str, ...] = ("reply", "response")
PLACEHOLDER_REPLY = "No response from server."


def extract_reply(
    payload: Any,
    reply_fields: Sequence[str] = DEFAULT_REPLY_FIELDS,
    placeholder: str = PLACEHOLDER_REPLY,
) -> str:
    """Return the first non-empty reply field of a decoded response body.

    Raises ``BackendResponseError`` when the body is not a JSON object.
    Missing, empty, or non-string fields fall through to ``placeholder``.
    """
    if not isinstance(payload, dict):
        raise BackendResponseError(
            f"Expected a JSON object from the chat endpoint, got {type(payload).__name__}."
        )
    for field_name in reply_fields:
        value = payload.get(field_name)
        if isinstance(value, str) and value.strip():
            return value
    return placeholder


class ChatBackend:
    """Single-call request/response client for ``POST /api/chat``."""

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        chat_path: str = "/api/chat",
        reply_fields: Sequence[str] = DEFAULT_REPLY_FIELDS,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.chat_path = chat_path if chat_path.startswith("/") else f"/{chat_path}"
        self.reply_fields = tuple(reply_fields) or DEFAULT_REPLY_FIELDS
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url, timeout=httpx.Timeout(timeout)
        )

    @classmethod
    def from_config(
        cls, backend_config: dict[str, Any], client: httpx.AsyncClient | None = None
    ) -> ChatBackend:
        """Build a backend from the ``[backend]`` config section."""
        return cls(
            base_url=str(backend_config.get("base_url", "http://localhost:3001")),
            chat_path=str(backend_config.get("chat_path", "/api/chat")),
            reply_fields=backend_config.get("reply_fields") or DEFAULT_REPLY_FIELDS,
            timeout=backend_config.get("timeout_seconds"),
            client=client,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.chat_path}"

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this backend created it."""
        if self._owns_client:
            await self._client.aclose()

    def _map_exception(self, exc: Exception) -> BackendTransportError:
        if isinstance(exc, BackendTransportError):
            return exc
        if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError)):
            return BackendConnectionError(
                f"Unable to connect to chat backend {self.base_url}."
            )
        if isinstance(exc, httpx.HTTPStatusError):
            return BackendStatusError(exc.response.status_code)
        if isinstance(exc, (json.JSONDecodeError, UnicodeDecodeError)):
            return BackendResponseError(
                f"Chat backend at {self.endpoint} returned a malformed body."
            )
        if isinstance(exc, httpx.HTTPError):
            return BackendConnectionError(
                f"Request to chat backend {self.endpoint} failed: {exc}"
            )
        return BackendTransportError(
            f"Unexpected failure talking to {self.endpoint}: {exc}"
        )

    async def request_reply(self, message: str) -> str:
        """Send one user turn and return the assistant reply text.

        Every failure is raised as a ``BackendTransportError`` subclass; the
        call is never retried here.
        """
        log_event(
            LOGGER,
            logging.INFO,
            "backend.request.start",
            endpoint=self.endpoint,
            chars=len(message),
        )
        try:
            response = await self._client.post(
                self.endpoint,
                json={"message": message},
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            payload = response.json()
            reply = extract_reply(payload, self.reply_fields)
        except Exception as exc:  # noqa: BLE001 - remote service can fail in many ways.
            mapped_exc = self._map_exception(exc)
            log_event(
                LOGGER,
                logging.WARNING,
                "backend.request.failed",
                endpoint=self.endpoint,
                error_type=mapped_exc.__class__.__name__,
            )
            raise mapped_exc from exc

        log_event(
            LOGGER,
            logging.INFO,
            "backend.request.complete",
            status_code=response.status_code,
            placeholder=reply == PLACEHOLDER_REPLY,
        )
        return reply
