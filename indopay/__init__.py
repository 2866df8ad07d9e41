"""
indopay - provider-agnostic client for Indonesian payment gateways.
"""
from indopay.application.dtos.payments import (
    CreateInvoiceParams,
    CustomerInfo,
    Invoice,
    InvoiceItem,
    PaymentStatusResponse,
    WebhookNotification,
)
from indopay.application.ports.payment_gateway import PaymentGateway
from indopay.application.services.payment_service import PaymentService
from indopay.core.settings import CreditCardOptions, InstallmentOptions, MidtransOptions
from indopay.domain.common.exceptions import APIError, ConfigurationError, PaymentError, WebhookError
from indopay.domain.payment.entity import Currency, Environment, PaymentStatus
from indopay.infrastructure.external.payments import get_payment_gateway
from indopay.infrastructure.external.payments.midtrans_client import MidtransClient

__version__ = "0.1.0"

__all__ = [
    # Models
    "CreateInvoiceParams",
    "CustomerInfo",
    "Invoice",
    "InvoiceItem",
    "PaymentStatusResponse",
    "WebhookNotification",
    "Currency",
    "Environment",
    "PaymentStatus",
    # Gateways
    "PaymentGateway",
    "PaymentService",
    "MidtransClient",
    "MidtransOptions",
    "CreditCardOptions",
    "InstallmentOptions",
    "get_payment_gateway",
    # Errors
    "PaymentError",
    "ConfigurationError",
    "APIError",
    "WebhookError",
]
