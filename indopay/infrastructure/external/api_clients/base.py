"""
REST API client base.

Single-shot authenticated JSON requests over httpx:
- default + auth + per-call header merging (per-call wins)
- JSON decoding regardless of status code
- non-2xx responses raised as APIError
- request/response debug logging without credentials

No retries are performed; callers own retry and backoff decisions.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

import httpx

from indopay.core.logging_config import get_logger
from indopay.domain.common.exceptions import APIError

logger = get_logger(__name__)

_SENSITIVE_HEADERS = {"authorization"}


class HTTPMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass
class APIResponse:
    """Decoded API response"""
    status_code: int
    headers: Dict[str, str]
    data: Any
    elapsed_ms: float
    reason_phrase: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def extract_error_message(data: Any, fallback: str) -> str:
    """First of: ``message``, first ``error_messages`` entry, fallback."""
    if isinstance(data, dict):
        message = data.get("message")
        if message:
            return str(message)
        errors = data.get("error_messages")
        if isinstance(errors, list) and errors:
            return str(errors[0])
    return fallback


class BaseAPIClient:
    """
    REST API client base.

    Subclasses provide ``base_url`` and auth headers; an injected
    ``http_client`` is used as-is and never closed here.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Union[httpx.Timeout, float, None] = 30.0,
        headers: Optional[Dict[str, str]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        self.default_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if headers:
            self.default_headers.update(headers)

        self._client = http_client
        self._owns_client = http_client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _build_url(self, endpoint: str) -> str:
        # Absolute URLs target a sibling host (e.g. a separate status API)
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        endpoint = endpoint.lstrip('/')
        return f"{self.base_url}/{endpoint}"

    @staticmethod
    def _redact(headers: Dict[str, str]) -> Dict[str, str]:
        return {k: v for k, v in headers.items() if k.lower() not in _SENSITIVE_HEADERS}

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None

    async def request(
        self,
        method: Union[str, HTTPMethod],
        endpoint: str,
        *,
        json_data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> APIResponse:
        """
        Send one HTTP request.

        Raises:
            APIError: non-2xx status (message, status code and decoded body)
                or a transport failure (no status code).
        """
        if isinstance(method, HTTPMethod):
            method = method.value

        url = self._build_url(endpoint)

        request_headers = {**self.default_headers}
        if headers:
            request_headers.update(headers)

        logger.debug(
            "api_request",
            method=method,
            url=url,
            json=json_data,
            headers=self._redact(request_headers),
        )

        start_time = datetime.now()
        try:
            response = await self.client.request(
                method=method,
                url=url,
                json=json_data,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("api_request_failed", method=method, url=url, error=str(exc))
            raise APIError(f"Network error: {exc}") from exc
        elapsed = (datetime.now() - start_time).total_seconds() * 1000

        api_response = APIResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            data=self._decode(response),
            elapsed_ms=elapsed,
            reason_phrase=response.reason_phrase,
        )

        logger.debug(
            "api_response",
            url=url,
            status_code=api_response.status_code,
            elapsed_ms=round(api_response.elapsed_ms, 2),
        )

        if not api_response.is_success:
            fallback = api_response.reason_phrase or f"HTTP {api_response.status_code}"
            raise APIError(
                extract_error_message(api_response.data, fallback),
                status_code=api_response.status_code,
                response=api_response.data,
            )

        return api_response

    async def get(self, endpoint: str, **kwargs) -> APIResponse:
        return await self.request(HTTPMethod.GET, endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> APIResponse:
        return await self.request(HTTPMethod.POST, endpoint, **kwargs)
