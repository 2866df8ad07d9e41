"""
Base payment client implementing shared concerns: configuration, transport,
status mapping, webhook signature comparison and logging.

Concrete providers subclass and implement the payload builders/parsers;
create_invoice/get_status/verify_webhook are written once here against them.
"""
from __future__ import annotations

import hmac
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

import httpx

from indopay.application.dtos.payments import (
    CreateInvoiceParams,
    Invoice,
    PaymentStatusResponse,
    WebhookNotification,
)
from indopay.application.ports.payment_gateway import PaymentGateway
from indopay.core.logging_config import get_logger
from indopay.core.settings import PaymentTimeouts
from indopay.domain.common.exceptions import ConfigurationError
from indopay.domain.payment.entity import Environment, PaymentStatus
from indopay.infrastructure.external.api_clients import APIResponse, BaseAPIClient, HTTPMethod
from indopay.shared.codes.payment_codes import DEFAULT_INTERNAL_STATUS, PROVIDER_STATUS_TO_INTERNAL


logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_timeout(timeouts: Optional[PaymentTimeouts] = None) -> httpx.Timeout:
    cfg = timeouts or PaymentTimeouts()
    return httpx.Timeout(
        connect=cfg.connect,
        read=cfg.read,
        write=cfg.write,
        timeout=cfg.total,
    )


class BasePaymentClient(PaymentGateway):
    provider: str = "base"
    production_url: str = ""
    sandbox_url: str = ""
    invoice_endpoint: str = ""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        environment: Union[Environment, str, None] = Environment.SANDBOX,
        timeout: Union[httpx.Timeout, float, None] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("API key is required", details={"provider": self.provider})
        try:
            self.environment = Environment(environment or Environment.SANDBOX)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unsupported environment: {environment}",
                details={"provider": self.provider},
            ) from exc
        self._api_key = api_key
        self._http = BaseAPIClient(
            self.base_url,
            timeout=timeout if timeout is not None else build_timeout(),
            headers=self.auth_headers(),
            http_client=http_client,
        )

    @property
    def base_url(self) -> str:
        if self.environment == Environment.PRODUCTION:
            return self.production_url
        return self.sandbox_url

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this adapter created it."""
        await self._http.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def _request(
        self,
        method: HTTPMethod,
        endpoint: str,
        *,
        json_data: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> APIResponse:
        return await self._http.request(method, endpoint, json_data=json_data, headers=headers)

    # Provider hooks; default implementations raise to force override
    def auth_headers(self) -> dict[str, str]:
        raise NotImplementedError

    def build_invoice_request(self, params: CreateInvoiceParams, *, now: datetime) -> dict[str, Any]:
        raise NotImplementedError

    def parse_invoice_response(self, raw: Any, params: CreateInvoiceParams, *, now: datetime) -> Invoice:
        raise NotImplementedError

    def build_status_request(self, order_id: str) -> tuple[HTTPMethod, str]:
        raise NotImplementedError

    def parse_status_response(self, raw: Any, order_id: str) -> PaymentStatusResponse:
        raise NotImplementedError

    def compute_webhook_signature(self, body: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def extract_webhook_signature(
        self, body: Mapping[str, Any], headers: Optional[Mapping[str, Any]] = None
    ) -> Optional[str]:
        raise NotImplementedError

    def parse_webhook(self, body: Mapping[str, Any]) -> WebhookNotification:  # type: ignore[override]
        raise NotImplementedError

    # Operations
    async def create_invoice(self, params: CreateInvoiceParams) -> Invoice:  # type: ignore[override]
        now = _now()
        payload = self.build_invoice_request(params, now=now)
        self._log("invoice_create_request", order_id=params.order_id)
        response = await self._request(HTTPMethod.POST, self.invoice_endpoint, json_data=payload)
        invoice = self.parse_invoice_response(response.data, params, now=now)
        self._log("invoice_created", order_id=invoice.order_id, invoice_id=invoice.id)
        return invoice

    async def get_status(self, order_id: str) -> PaymentStatusResponse:  # type: ignore[override]
        method, endpoint = self.build_status_request(order_id)
        response = await self._request(method, endpoint)
        status = self.parse_status_response(response.data, order_id)
        self._log("status_fetched", order_id=status.order_id, status=status.status.value)
        return status

    def verify_webhook(  # type: ignore[override]
        self, body: Mapping[str, Any], headers: Optional[Mapping[str, Any]] = None
    ) -> bool:
        provided = self.extract_webhook_signature(body, headers)
        if not provided:
            return False
        expected = self.compute_webhook_signature(body)
        return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))

    # Helpers
    def _map_status(self, provider_status: Optional[str]) -> PaymentStatus:
        mapping = PROVIDER_STATUS_TO_INTERNAL.get(self.provider, {})
        return PaymentStatus(mapping.get(provider_status or "", DEFAULT_INTERNAL_STATUS))

    def _log(self, event: str, **kwargs) -> None:
        logger.info(
            event,
            provider=self.provider,
            environment=self.environment.value,
            **kwargs,
        )
