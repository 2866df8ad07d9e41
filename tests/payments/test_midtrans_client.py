import base64
from datetime import timedelta
from decimal import Decimal

import pytest

from indopay import (
    APIError,
    ConfigurationError,
    CreateInvoiceParams,
    CreditCardOptions,
    MidtransClient,
    MidtransOptions,
    PaymentStatus,
)
from indopay.shared.codes import PaymentCode


SNAP_RESPONSE = {
    "token": "test-token-123",
    "redirect_url": "https://app.sandbox.midtrans.com/snap/v2/vtweb/test-token-123",
}


def _params(**overrides) -> CreateInvoiceParams:
    data = {
        "amount": 100000,
        "currency": "IDR",
        "order_id": "ORDER-123",
        "customer": {
            "name": "Budi Santoso",
            "email": "budi@example.com",
            "phone": "081234567890",
        },
    }
    data.update(overrides)
    return CreateInvoiceParams(**data)


# Construction

def test_init_with_valid_config(server_key):
    client = MidtransClient(server_key, environment="sandbox")
    assert client.provider == "midtrans"
    assert client.base_url == "https://app.sandbox.midtrans.com"


def test_empty_server_key_raises_configuration_error():
    with pytest.raises(ConfigurationError, match="API key is required") as exc_info:
        MidtransClient("", environment="sandbox")
    assert exc_info.value.error_type == "ConfigurationError"
    assert exc_info.value.code == PaymentCode.CONFIG_ERROR


def test_missing_server_key_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        MidtransClient(None)


def test_unknown_environment_is_a_configuration_error(server_key):
    with pytest.raises(ConfigurationError):
        MidtransClient(server_key, environment="staging")


def test_defaults_to_sandbox(server_key):
    client = MidtransClient(server_key)
    assert client.environment.value == "sandbox"
    assert client.core_api_url == "https://api.sandbox.midtrans.com"


def test_production_urls(server_key):
    client = MidtransClient(server_key, environment="production")
    assert client.base_url == "https://app.midtrans.com"
    assert client.core_api_url == "https://api.midtrans.com"


def test_auth_header_is_basic_with_empty_password(server_key):
    client = MidtransClient(server_key)
    header = client.auth_headers()["Authorization"]
    assert header.startswith("Basic ")
    assert base64.b64decode(header[len("Basic "):]).decode() == f"{server_key}:"


# create_invoice

@pytest.mark.asyncio
async def test_create_invoice_with_valid_params(server_key, stub_gateway, fixed_now):
    http, recorder = stub_gateway(body=SNAP_RESPONSE)
    client = MidtransClient(server_key, environment="sandbox", http_client=http)

    invoice = await client.create_invoice(_params())

    assert invoice.id == "test-token-123"
    assert invoice.order_id == "ORDER-123"
    assert invoice.amount == 100000
    assert invoice.currency == "IDR"
    assert invoice.status == PaymentStatus.PENDING
    assert "test-token-123" in invoice.payment_url
    assert invoice.created_at == fixed_now
    assert invoice.expires_at == fixed_now + timedelta(minutes=60)

    request = recorder.last
    assert request.method == "POST"
    assert str(request.url) == "https://app.sandbox.midtrans.com/snap/v1/transactions"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"].startswith("Basic ")


@pytest.mark.asyncio
async def test_create_invoice_payload_shape(server_key, stub_gateway, fixed_now):
    http, recorder = stub_gateway(body=SNAP_RESPONSE)
    client = MidtransClient(server_key, http_client=http)

    await client.create_invoice(_params())
    body = recorder.last_json()

    assert body["transaction_details"] == {"order_id": "ORDER-123", "gross_amount": 100000}
    assert body["customer_details"] == {
        "first_name": "Budi Santoso",
        "email": "budi@example.com",
        "phone": "081234567890",
    }
    for absent in ("item_details", "enabled_payments", "credit_card", "expiry", "callbacks"):
        assert absent not in body


@pytest.mark.asyncio
async def test_empty_items_are_omitted(server_key, stub_gateway, fixed_now):
    http, recorder = stub_gateway(body=SNAP_RESPONSE)
    client = MidtransClient(server_key, http_client=http)

    await client.create_invoice(_params(items=[]))
    assert "item_details" not in recorder.last_json()


@pytest.mark.asyncio
async def test_items_are_mapped_with_positional_ids(server_key, stub_gateway, fixed_now):
    http, recorder = stub_gateway(body=SNAP_RESPONSE)
    client = MidtransClient(server_key, http_client=http)

    await client.create_invoice(
        _params(
            amount=250000,
            items=[
                {"id": "SKU-1", "name": "Product A", "price": 100000, "quantity": 1},
                {"name": "Product B", "price": 50000, "quantity": 2, "description": "not sent"},
                {"name": "Product C", "price": 50000, "quantity": 1},
            ],
        )
    )
    items = recorder.last_json()["item_details"]

    assert [item["id"] for item in items] == ["SKU-1", "item-1", "item-2"]
    assert items[1] == {"id": "item-1", "name": "Product B", "price": 50000, "quantity": 2}
    assert len({item["id"] for item in items}) == 3


@pytest.mark.asyncio
async def test_options_expiry_and_callbacks(server_key, stub_gateway, fixed_now):
    http, recorder = stub_gateway(body=SNAP_RESPONSE)
    options = MidtransOptions(
        enabled_payments=["gopay", "qris"],
        credit_card=CreditCardOptions(secure=True),
    )
    client = MidtransClient(server_key, options=options, http_client=http)

    invoice = await client.create_invoice(
        _params(expires_in=30, success_url="https://shop.example.com/thanks")
    )
    body = recorder.last_json()

    assert body["enabled_payments"] == ["gopay", "qris"]
    assert body["credit_card"] == {"secure": True}
    # 03:00 UTC is 10:00 in Jakarta
    assert body["expiry"] == {"start_time": "2024-01-15 10:00:00 +0700", "unit": "minute", "duration": 30}
    assert body["callbacks"] == {"finish": "https://shop.example.com/thanks"}
    assert invoice.expires_at == fixed_now + timedelta(minutes=30)


@pytest.mark.asyncio
async def test_create_invoice_is_pending_whatever_the_gateway_says(server_key, stub_gateway, fixed_now):
    http, _ = stub_gateway(body={**SNAP_RESPONSE, "transaction_status": "settlement"})
    client = MidtransClient(server_key, http_client=http)

    invoice = await client.create_invoice(_params(metadata={"cart": "c-1"}))
    assert invoice.status == PaymentStatus.PENDING
    assert invoice.metadata == {"cart": "c-1"}


@pytest.mark.asyncio
async def test_create_invoice_accepts_camel_case_params(server_key, stub_gateway, fixed_now):
    http, recorder = stub_gateway(body=SNAP_RESPONSE)
    client = MidtransClient(server_key, http_client=http)
    params = CreateInvoiceParams.model_validate({
        "amount": 100000,
        "currency": "IDR",
        "orderId": "ORDER-CAMEL",
        "customer": {"name": "Budi", "email": "b@example.com", "phone": "0812"},
        "expiresIn": 15,
        "successUrl": "https://shop.example.com/ok",
    })

    invoice = await client.create_invoice(params)
    body = recorder.last_json()
    assert invoice.order_id == "ORDER-CAMEL"
    assert body["expiry"]["duration"] == 15
    assert body["callbacks"]["finish"] == "https://shop.example.com/ok"


@pytest.mark.asyncio
async def test_create_invoice_surfaces_gateway_rejection(server_key, stub_gateway):
    http, _ = stub_gateway(
        status_code=400,
        body={"error_messages": ["transaction_details.gross_amount is required"]},
    )
    client = MidtransClient(server_key, http_client=http)

    with pytest.raises(APIError) as exc_info:
        await client.create_invoice(_params())
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "transaction_details.gross_amount is required"
    assert exc_info.value.response == {"error_messages": ["transaction_details.gross_amount is required"]}


# get_status

@pytest.mark.asyncio
async def test_get_status_maps_settlement(server_key, stub_gateway):
    raw = {
        "transaction_id": "txn-123",
        "order_id": "ORDER-123",
        "transaction_status": "settlement",
        "gross_amount": "100000.00",
        "payment_type": "gopay",
        "settlement_time": "2024-01-15 10:00:00",
    }
    http, recorder = stub_gateway(body=raw)
    client = MidtransClient(server_key, http_client=http)

    status = await client.get_status("ORDER-123")

    assert status.id == "txn-123"
    assert status.order_id == "ORDER-123"
    assert status.status == PaymentStatus.PAID
    assert status.amount == 100000
    assert status.payment_method == "gopay"
    assert status.paid_at is not None
    assert status.paid_at.utcoffset() == timedelta(hours=7)
    assert (status.paid_at.year, status.paid_at.hour) == (2024, 10)
    assert status.metadata == {"raw": raw}

    assert recorder.last.method == "GET"
    assert str(recorder.last.url) == "https://api.sandbox.midtrans.com/v2/ORDER-123/status"


@pytest.mark.parametrize("code", ["404", "401"])
@pytest.mark.asyncio
async def test_get_status_normalizes_missing_payment(server_key, stub_gateway, code):
    raw = {"status_code": code, "status_message": "Transaction doesn't exist."}
    http, _ = stub_gateway(body=raw)
    client = MidtransClient(server_key, http_client=http)

    status = await client.get_status("ORDER-404")

    assert status.id == ""
    assert status.order_id == "ORDER-404"
    assert status.status == PaymentStatus.PENDING
    assert status.amount == 0
    assert status.metadata == {"raw": raw}


@pytest.mark.asyncio
async def test_get_status_normalizes_http_level_not_found(server_key, stub_gateway):
    raw = {"status_code": "404", "status_message": "Transaction doesn't exist."}
    http, _ = stub_gateway(status_code=404, body=raw)
    client = MidtransClient(server_key, http_client=http)

    status = await client.get_status("ORDER-404")
    assert status.status == PaymentStatus.PENDING
    assert status.metadata == {"raw": raw}


@pytest.mark.asyncio
async def test_get_status_propagates_other_failures(server_key, stub_gateway):
    http, _ = stub_gateway(status_code=500, body={"status_code": "500", "message": "boom"})
    client = MidtransClient(server_key, http_client=http)

    with pytest.raises(APIError) as exc_info:
        await client.get_status("ORDER-1")
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "boom"


@pytest.mark.asyncio
async def test_get_status_fallbacks(server_key, stub_gateway):
    http, _ = stub_gateway(body={"transaction_status": "mystery", "gross_amount": "n/a"})
    client = MidtransClient(server_key, http_client=http)

    status = await client.get_status("ORDER-9")
    assert status.id == ""
    assert status.order_id == "ORDER-9"
    assert status.status == PaymentStatus.PENDING
    assert status.amount == Decimal("0")
    assert status.paid_at is None
    assert status.payment_method is None


@pytest.mark.asyncio
async def test_get_status_quotes_order_id(server_key, stub_gateway):
    http, recorder = stub_gateway(body={"status_code": "404"})
    client = MidtransClient(server_key, environment="production", http_client=http)

    await client.get_status("ORDER 1/2")
    assert recorder.last.url.raw_path == b"/v2/ORDER%201%2F2/status"
    assert recorder.last.url.host == "api.midtrans.com"


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(server_key, stub_gateway):
    http, _ = stub_gateway(body=SNAP_RESPONSE)
    async with MidtransClient(server_key, http_client=http):
        pass
    assert not http.is_closed
    await http.aclose()
