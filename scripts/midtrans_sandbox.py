#!/usr/bin/env python3
"""Manual end-to-end check against the Midtrans sandbox.

Creates an invoice, opens the payment page, waits for you to pay with the
sandbox simulator, then prints the resulting status.

    MIDTRANS__SERVER_KEY=SB-Mid-server-xxxxx python scripts/midtrans_sandbox.py
"""
from __future__ import annotations

import argparse
import asyncio
import sys
import time
import webbrowser

from indopay import (
    CreateInvoiceParams,
    CustomerInfo,
    InvoiceItem,
    MidtransClient,
    MidtransOptions,
    PaymentError,
)
from indopay.core.logging_config import configure_logging
from indopay.core.settings import get_payment_settings

SIMULATOR_URL = "https://simulator.sandbox.midtrans.com/"
DEFAULT_METHODS = "gopay,qris,bank_transfer,bca_va,bni_va,bri_va"


def _rupiah(amount) -> str:
    return f"Rp {int(amount):,}".replace(",", ".")


async def run(args: argparse.Namespace) -> int:
    settings = get_payment_settings()
    server_key = settings.midtrans.server_key
    if not server_key:
        print("Error: MIDTRANS__SERVER_KEY not found in environment or .env", file=sys.stderr)
        print("\nCreate a .env file containing:\nMIDTRANS__SERVER_KEY=SB-Mid-server-xxxxx", file=sys.stderr)
        return 1

    print("=" * 50)
    print("indopay - Midtrans sandbox check")
    print("=" * 50)
    print("\nEnvironment: sandbox")
    print("Server Key:", server_key[:20] + "...")

    methods = [m.strip() for m in args.methods.split(",") if m.strip()]
    order_id = args.order_id or f"TEST-{int(time.time() * 1000)}"

    async with MidtransClient.from_settings(
        settings,
        environment="sandbox",
        options=MidtransOptions(enabled_payments=methods or None),
    ) as midtrans:
        try:
            print("\n[1/3] Creating invoice...")
            print("Order ID:", order_id)
            invoice = await midtrans.create_invoice(
                CreateInvoiceParams(
                    amount=args.amount,
                    currency="IDR",
                    order_id=order_id,
                    customer=CustomerInfo(
                        name="Budi Santoso",
                        email="budi@example.com",
                        phone="081234567890",
                    ),
                    items=[
                        InvoiceItem(id="ITEM-001", name="Test Product", price=args.amount, quantity=1),
                    ],
                    expires_in=args.expires_in,
                )
            )

            print("\n[2/3] Invoice created")
            print("-" * 50)
            print("Invoice ID:", invoice.id)
            print("Order ID:", invoice.order_id)
            print("Amount:", _rupiah(invoice.amount))
            print("Status:", invoice.status.value)
            print("Expires At:", invoice.expires_at.isoformat())
            print("\nPayment URL:")
            print(invoice.payment_url)
            print("-" * 50)

            if not args.no_browser:
                print("\nOpening browser...")
                webbrowser.open(invoice.payment_url)

            print("\n[3/3] Complete the payment in the browser")
            print(f"     Use the Midtrans simulator: {SIMULATOR_URL}\n")
            await asyncio.to_thread(input, "Press ENTER once paid...")

            print("\nChecking payment status...\n")
            status = await midtrans.get_status(order_id)
        except PaymentError as exc:
            print(f"\nError: {exc}", file=sys.stderr)
            return 1

    print("Payment Status:")
    print("-" * 50)
    print("Transaction ID:", status.id or "(none yet)")
    print("Order ID:", status.order_id)
    print("Status:", status.status.value)
    print("Amount:", _rupiah(status.amount) if status.amount else "(none yet)")
    if status.payment_method:
        print("Payment Method:", status.payment_method)
    if status.paid_at:
        print("Paid At:", status.paid_at.isoformat())
    print("-" * 50)
    print("\nDone.")
    return 0


def main() -> None:
    ap = argparse.ArgumentParser(description="Midtrans sandbox round trip")
    ap.add_argument("--amount", type=int, default=50000)
    ap.add_argument("--expires-in", type=int, default=60, help="Minutes until the invoice expires")
    ap.add_argument("--order-id", default=None)
    ap.add_argument("--methods", default=DEFAULT_METHODS, help="Comma-separated enabled payments")
    ap.add_argument("--no-browser", action="store_true")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args()

    configure_logging(debug=args.debug)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
