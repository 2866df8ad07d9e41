"""
Application service wrapping a payment gateway.

Depends only on the PaymentGateway port and DTOs. Adds structured logging
around each call and a strict verify-then-parse webhook path.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from indopay.application.dtos.payments import (
    CreateInvoiceParams,
    Invoice,
    PaymentStatusResponse,
    WebhookNotification,
)
from indopay.application.ports.payment_gateway import PaymentGateway
from indopay.core.logging_config import get_logger
from indopay.domain.common.exceptions import WebhookError


logger = get_logger(__name__)


class PaymentService:
    def __init__(self, gateway: PaymentGateway) -> None:
        self.gateway = gateway

    async def create_invoice(self, params: CreateInvoiceParams) -> Invoice:
        logger.info(
            "payment_create_request",
            order_id=params.order_id,
            provider=self.gateway.provider,
            amount=str(params.amount),
            currency=params.currency.value,
        )
        invoice = await self.gateway.create_invoice(params)
        logger.info(
            "payment_create_response",
            order_id=invoice.order_id,
            provider=self.gateway.provider,
            invoice_id=invoice.id,
            expires_at=invoice.expires_at.isoformat(),
        )
        return invoice

    async def get_status(self, order_id: str) -> PaymentStatusResponse:
        logger.info("payment_query_request", order_id=order_id, provider=self.gateway.provider)
        status = await self.gateway.get_status(order_id)
        logger.info("payment_query_response", order_id=order_id, status=status.status.value)
        return status

    def handle_webhook(
        self, body: Mapping[str, Any], headers: Optional[Mapping[str, Any]] = None
    ) -> WebhookNotification:
        """Verify then parse a notification.

        Raises:
            WebhookError: ``reason`` is ``missing_signature`` when the payload
                is unsigned and ``invalid_signature`` on a digest mismatch.
        """
        if not self.gateway.extract_webhook_signature(body, headers):
            logger.warning("payment_webhook_unsigned", provider=self.gateway.provider)
            raise WebhookError(
                "Webhook signature is missing",
                reason="missing_signature",
                provider=self.gateway.provider,
            )
        if not self.gateway.verify_webhook(body, headers):
            logger.warning(
                "payment_webhook_rejected",
                provider=self.gateway.provider,
                order_id=body.get("order_id"),
            )
            raise WebhookError(
                "Webhook signature mismatch",
                reason="invalid_signature",
                provider=self.gateway.provider,
            )
        notification = self.gateway.parse_webhook(body)
        logger.info(
            "payment_webhook_parsed",
            provider=self.gateway.provider,
            order_id=notification.order_id,
            status=notification.status.value,
        )
        return notification

    async def aclose(self) -> None:
        close = getattr(self.gateway, "aclose", None)
        if callable(close):
            await close()
