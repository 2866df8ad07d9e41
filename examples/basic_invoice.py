"""Create a Snap invoice in sandbox, then check its status a few seconds later.

Requires MIDTRANS__SERVER_KEY in the environment or a .env file.
"""
from __future__ import annotations

import asyncio
import time

from indopay import (
    CreateInvoiceParams,
    CustomerInfo,
    InvoiceItem,
    MidtransOptions,
    PaymentError,
    get_payment_gateway,
)
from indopay.core.logging_config import configure_logging


async def main() -> None:
    configure_logging(debug=True)
    midtrans = get_payment_gateway(
        "midtrans",
        options=MidtransOptions(enabled_payments=["gopay", "qris", "bank_transfer"]),
    )

    async with midtrans:
        try:
            invoice = await midtrans.create_invoice(
                CreateInvoiceParams(
                    amount=100000,
                    currency="IDR",
                    order_id=f"ORDER-{int(time.time() * 1000)}",
                    customer=CustomerInfo(
                        name="Budi Santoso",
                        email="budi@example.com",
                        phone="081234567890",
                    ),
                    items=[InvoiceItem(name="Product A", price=100000, quantity=1)],
                    expires_in=60,
                )
            )
        except PaymentError as exc:
            print(f"Invoice creation failed: {exc}")
            return

        print("Invoice created")
        print("Payment URL:", invoice.payment_url)
        print("Order ID:", invoice.order_id)
        print("Status:", invoice.status.value)
        print("Expires At:", invoice.expires_at.isoformat())

        print("\nChecking payment status in 5 seconds...")
        await asyncio.sleep(5)
        status = await midtrans.get_status(invoice.order_id)
        print("Payment status:", status.status.value)


if __name__ == "__main__":
    asyncio.run(main())
