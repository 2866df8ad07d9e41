"""
Midtrans adapter: Snap API for invoice creation, Core API for status lookups.

Notes on the gateway:
- Both APIs authenticate with HTTP Basic, server key as username and an
  empty password.
- Snap and Core API live on different hosts; each has a sandbox twin.
- The status endpoint reports "no payment attempt yet" as a 200 response
  carrying ``status_code`` "404" (or "401") in the body.
- Notifications are signed with SHA-512 over
  order_id + status_code + gross_amount + server_key.
"""
from __future__ import annotations

import base64
import hashlib
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from indopay.application.dtos.payments import (
    CreateInvoiceParams,
    Invoice,
    PaymentStatusResponse,
    WebhookNotification,
)
from indopay.core.logging_config import get_logger
from indopay.core.settings import MidtransOptions, PaymentSettings, get_payment_settings
from indopay.domain.common.exceptions import APIError
from indopay.domain.payment.entity import Environment, PaymentStatus
from indopay.infrastructure.external.api_clients import HTTPMethod
from indopay.infrastructure.external.payments.base import BasePaymentClient, build_timeout
from indopay.infrastructure.external.payments.midtrans_schemas import (
    Callbacks,
    CustomerDetails,
    Expiry,
    ItemDetails,
    SnapRequest,
    TransactionDetails,
)


logger = get_logger(__name__)

# Midtrans expects local Jakarta time (WIB) in request timestamps
WIB = timezone(timedelta(hours=7), "WIB")
EXPIRY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S +0700"
GATEWAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_EXPIRY_MINUTES = 60
NOT_FOUND_STATUS_CODES = {"404", "401"}


def format_expiry_time(moment: datetime) -> str:
    return moment.astimezone(WIB).strftime(EXPIRY_TIME_FORMAT)


def parse_gateway_time(value: Any) -> Optional[datetime]:
    """Parse a Midtrans timestamp (WIB, no offset) into an aware datetime."""
    if not value:
        return None
    text = str(value).strip()
    try:
        return datetime.strptime(text, GATEWAY_TIME_FORMAT).replace(tzinfo=WIB)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("midtrans_time_unparseable", value=text)
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=WIB)


def parse_amount(value: Any) -> Decimal:
    """Numeric parse of a gross_amount field; 0 when absent or malformed."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def to_wire_number(amount: Decimal) -> Union[int, float]:
    # JSON integer when integral (IDR has no minor unit), decimal otherwise
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def _signature_part(value: Any) -> str:
    return "" if value is None else str(value)


class MidtransClient(BasePaymentClient):
    provider = "midtrans"
    production_url = "https://app.midtrans.com"
    sandbox_url = "https://app.sandbox.midtrans.com"
    core_api_production_url = "https://api.midtrans.com"
    core_api_sandbox_url = "https://api.sandbox.midtrans.com"
    invoice_endpoint = "/snap/v1/transactions"

    def __init__(
        self,
        server_key: Optional[str],
        *,
        client_key: Optional[str] = None,
        environment: Union[Environment, str, None] = Environment.SANDBOX,
        options: Optional[MidtransOptions] = None,
        timeout: Union[httpx.Timeout, float, None] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(
            api_key=server_key,
            environment=environment,
            timeout=timeout,
            http_client=http_client,
        )
        self.client_key = client_key
        self.options = options or MidtransOptions()

    @classmethod
    def from_settings(cls, settings: Optional[PaymentSettings] = None, **kwargs) -> "MidtransClient":
        settings = settings or get_payment_settings()
        cfg = settings.midtrans
        overrides = {
            "client_key": cfg.client_key,
            "environment": cfg.environment,
            "options": cfg.options,
            "timeout": build_timeout(settings.timeouts),
        }
        overrides.update(kwargs)
        return cls(cfg.server_key, **overrides)

    @property
    def core_api_url(self) -> str:
        if self.environment == Environment.PRODUCTION:
            return self.core_api_production_url
        return self.core_api_sandbox_url

    def auth_headers(self) -> dict[str, str]:
        token = base64.b64encode(f"{self._api_key}:".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    # Invoice
    def build_invoice_request(self, params: CreateInvoiceParams, *, now: datetime) -> dict[str, Any]:
        request = SnapRequest(
            transaction_details=TransactionDetails(
                order_id=params.order_id,
                gross_amount=to_wire_number(params.amount),
            ),
            customer_details=CustomerDetails(
                first_name=params.customer.name,
                email=params.customer.email,
                phone=params.customer.phone,
            ),
        )

        if params.items:
            request.item_details = [
                ItemDetails(
                    id=item.id or f"item-{index}",
                    name=item.name,
                    price=to_wire_number(item.price),
                    quantity=item.quantity,
                )
                for index, item in enumerate(params.items)
            ]

        if self.options.enabled_payments:
            request.enabled_payments = list(self.options.enabled_payments)

        if self.options.credit_card:
            request.credit_card = self.options.credit_card.model_dump(exclude_none=True)

        if params.expires_in:
            request.expiry = Expiry(
                start_time=format_expiry_time(now),
                unit="minute",
                duration=params.expires_in,
            )

        if params.success_url:
            request.callbacks = Callbacks(finish=params.success_url)

        return request.to_payload()

    def parse_invoice_response(self, raw: Any, params: CreateInvoiceParams, *, now: datetime) -> Invoice:
        data = raw if isinstance(raw, dict) else {}
        token = data.get("token") or ""
        redirect_url = data.get("redirect_url") or ""
        if not token or not redirect_url:
            logger.warning("midtrans_snap_response_incomplete", order_id=params.order_id, keys=sorted(data))

        # Local estimate; the gateway enforces its own expiry clock
        expires_at = now + timedelta(minutes=params.expires_in or DEFAULT_EXPIRY_MINUTES)
        return Invoice(
            id=str(token),
            order_id=params.order_id,
            amount=params.amount,
            currency=params.currency,
            status=PaymentStatus.PENDING,
            payment_url=str(redirect_url),
            expires_at=expires_at,
            created_at=now,
            metadata=params.metadata,
        )

    # Status
    def build_status_request(self, order_id: str) -> tuple[HTTPMethod, str]:
        return HTTPMethod.GET, f"{self.core_api_url}/v2/{quote(order_id, safe='')}/status"

    def parse_status_response(self, raw: Any, order_id: str) -> PaymentStatusResponse:
        data = raw if isinstance(raw, dict) else {}
        logger.debug("midtrans_status_raw", order_id=order_id, raw=data)

        if str(data.get("status_code", "")) in NOT_FOUND_STATUS_CODES:
            logger.info("midtrans_status_no_payment_yet", order_id=order_id, status_code=data.get("status_code"))
            return PaymentStatusResponse(
                id="",
                order_id=order_id,
                status=PaymentStatus.PENDING,
                amount=Decimal("0"),
                metadata={"raw": raw},
            )

        return PaymentStatusResponse(
            id=str(data.get("transaction_id") or ""),
            order_id=str(data.get("order_id") or order_id),
            status=self._map_status(data.get("transaction_status")),
            amount=parse_amount(data.get("gross_amount")),
            paid_at=parse_gateway_time(data.get("settlement_time")),
            payment_method=data.get("payment_type"),
            metadata={"raw": raw},
        )

    async def get_status(self, order_id: str) -> PaymentStatusResponse:  # type: ignore[override]
        try:
            return await super().get_status(order_id)
        except APIError as exc:
            # Same quirk surfaced at HTTP level: still "not paid yet", not a failure
            body = exc.response
            if isinstance(body, dict) and str(body.get("status_code", "")) in NOT_FOUND_STATUS_CODES:
                return self.parse_status_response(body, order_id)
            raise

    # Webhooks
    def compute_webhook_signature(self, body: Mapping[str, Any]) -> str:
        payload = (
            _signature_part(body.get("order_id"))
            + _signature_part(body.get("status_code"))
            + _signature_part(body.get("gross_amount"))
            + self._api_key
        )
        return hashlib.sha512(payload.encode("utf-8")).hexdigest()

    def extract_webhook_signature(
        self, body: Mapping[str, Any], headers: Optional[Mapping[str, Any]] = None
    ) -> Optional[str]:
        # Midtrans signs in the body; headers are not part of the scheme
        signature = body.get("signature_key")
        return str(signature) if signature else None

    def parse_webhook(self, body: Mapping[str, Any]) -> WebhookNotification:  # type: ignore[override]
        return WebhookNotification(
            order_id=str(body.get("order_id") or ""),
            status=self._map_status(body.get("transaction_status")),
            amount=parse_amount(body.get("gross_amount")),
            paid_at=parse_gateway_time(body.get("settlement_time")),
            payment_method=body.get("payment_type"),
            raw_data=body,
        )
