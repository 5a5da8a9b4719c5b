"""Async HTTP transport for the GraphRAG backend."""

from __future__ import annotations

import json
from typing import Any, Literal, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from graphrag_console.config import Settings
from graphrag_console.utils.exceptions import (
    ApiConnectionError,
    ApiError,
    ApiTimeoutError,
    ResponseParsingError,
    TransportError,
)
from graphrag_console.utils.logging import get_logger

logger = get_logger(__name__)

HttpMethod = Literal["GET", "POST"]
ModelT = TypeVar("ModelT", bound=BaseModel)


class Transport:
    """Issues JSON requests against the backend base URL.

    Holds no connection state between calls: each call opens its own
    ``httpx.AsyncClient``, so one instance can be shared by concurrent
    operations and across event loops.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> Transport:
        return cls(settings.API_BASE_URL, timeout=settings.REQUEST_TIMEOUT)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def call(
        self,
        endpoint: str,
        method: HttpMethod = "GET",
        body: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base_url}{endpoint}"
        headers = {"Content-Type": "application/json"}
        content = json.dumps(body) if body is not None else None

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, url, content=content, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("backend_timeout", url=url, method=method, timeout=self._timeout)
            raise ApiTimeoutError(self._base_url, self._timeout) from exc
        except httpx.TransportError as exc:
            logger.warning("backend_unreachable", url=url, method=method, error=str(exc))
            raise ApiConnectionError(self._base_url) from exc
        except httpx.DecodingError as exc:
            logger.warning("backend_body_undecodable", url=url, method=method, error=str(exc))
            raise ResponseParsingError(f"{method} {endpoint} returned an undecodable body") from exc
        except httpx.RequestError as exc:
            logger.warning("backend_request_failed", url=url, method=method, error=str(exc))
            raise TransportError(f"{method} {endpoint} failed: {exc}") from exc

        if not resp.is_success:
            message = _error_message(resp)
            logger.warning(
                "backend_error_status",
                url=url,
                method=method,
                status=resp.status_code,
                error=message,
            )
            raise ApiError(message, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ResponseParsingError(f"{method} {endpoint} returned a non-JSON body") from exc

        logger.debug("backend_call_ok", url=url, method=method, status=resp.status_code)
        return data


def _error_message(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return f"HTTP {resp.status_code}"


def parse_response(model: type[ModelT], payload: Any, endpoint: str) -> ModelT:
    """Validate a decoded JSON body against ``model``."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        logger.warning(
            "response_shape_invalid",
            endpoint=endpoint,
            model=model.__name__,
            errors=exc.error_count(),
        )
        raise ResponseParsingError(
            f"Unexpected response from {endpoint}: {exc.errors()[0]['msg']}"
        ) from exc


def unwrap(payload: Any, key: str, endpoint: str) -> Any:
    """Return ``payload[key]`` for envelope responses like ``{"data": ...}``."""
    if not isinstance(payload, dict) or key not in payload:
        raise ResponseParsingError(f"Unexpected response from {endpoint}: missing '{key}'")
    return payload[key]
