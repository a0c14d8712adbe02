"""HTTP client for the FlashFinance backend.

A thin wrapper over ``httpx.Client``: every endpoint is a JSON ``POST`` that
returns the decoded body unchanged. Interpreting that body is the job of
:mod:`flashfinance.normalizers`; this module only turns transport and HTTP
failures into :class:`ApiError` with the most useful message it can find in
the error payload.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from .config import Settings, load_settings
from .logging_setup import get_logger

_logger = get_logger("flashfinance.client")

# Keys that carry a human-readable message in backend error bodies.
_ERROR_MESSAGE_KEYS = ("error", "message", "err")


class ApiError(Exception):
    """A request to the backend failed.

    ``status_code`` is ``None`` for transport-level failures (timeouts,
    connection errors, undecodable bodies).
    """

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def extract_error_message(payload: Any, *, status_code: int, reason: str) -> str:
    """Pick the message to surface from an HTTP error body."""

    extracted: str | None = None
    if isinstance(payload, str):
        extracted = payload.strip() or None
    elif isinstance(payload, dict):
        for key in _ERROR_MESSAGE_KEYS:
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                extracted = value
                break
        if extracted is None and payload:
            try:
                extracted = json.dumps(payload, default=str)
            except (TypeError, ValueError):
                extracted = str(payload)
    elif payload is not None:
        extracted = str(payload)
    return extracted or f"HTTP {status_code}: {reason}"


class ApiClient:
    """JSON-over-POST client bound to one backend base URL.

    Usage
    -----
    with ApiClient() as client:
        raw = client.post("/Transaction/list_all", {})
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = settings or load_settings()
        self.base_url = (base_url or settings.api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def post(self, endpoint: str, payload: Any) -> Any:
        """POST ``payload`` as JSON to ``endpoint`` and return the decoded body.

        Raises:
            ApiError: On transport failures and non-2xx responses.
        """

        try:
            response = self._client.post(endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise ApiError(f"{endpoint}: timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ApiError(f"{endpoint}: {e}") from e

        body = _decode_body(response)
        if response.is_error:
            message = extract_error_message(
                body, status_code=response.status_code, reason=response.reason_phrase
            )
            _logger.error("server error payload from %s: %r", endpoint, body)
            raise ApiError(message, status_code=response.status_code, payload=body)

        _logger.debug("%s: HTTP %d", endpoint, response.status_code)
        return body

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["ApiClient", "ApiError", "extract_error_message"]
