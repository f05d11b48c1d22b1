"""Command-line entry point: pricing previews and an in-memory checkout demo."""

import argparse
import asyncio
from decimal import Decimal, InvalidOperation
from pathlib import Path

from .adapters.memory import InMemoryCartRepository, InMemoryInventory, LogNotifier, StaticIdentityProvider
from .cart.commands import AddItem
from .checkout.forms import ShippingInfo
from .config import BusinessConfig
from .errors import CartError
from .invoice.renderer import format_invoice_text, format_money
from .log import configure_logging
from .ports import Identity
from .pricing.packaging import compute
from .pricing.shipping import format_weight
from .session import CartSession

DEMO_CATALOG = [
    AddItem("64b7f0c2a1e4d5f6a7b8c9d0", 1, 3, 10, Decimal("100"), Decimal("40"), name="Blue Mist Granite Step"),
    AddItem("64b7f0c2a1e4d5f6a7b8c9d1", 2, 0, 8, Decimal("250"), Decimal("55"), name="Royal Grey Cobble"),
]


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from e


def run_quote(args, config: BusinessConfig) -> int:
    pricing = compute(args.crates, args.pieces, args.per_crate, args.price, args.weight, config.filler_rate)
    print(f"Total pieces:   {pricing.total_pieces}")
    print(f"Crates:         {pricing.total_crates}")
    print(f"Filler pieces:  {pricing.filler_pieces}")
    print(f"Subtotal:       {format_money(pricing.subtotal)}")
    print(f"Filler charges: {format_money(pricing.filler_charges)}")
    print(f"Weight:         {format_weight(pricing.weight)}")
    return 0


async def run_demo(args, config: BusinessConfig) -> int:
    identity = Identity(
        user_id=args.user,
        tier=args.tier,
        name="Demo Customer",
        email="customer@example.com",
        phone="9876543210",
        address="456 Customer Address",
    )
    session = CartSession(
        StaticIdentityProvider(identity),
        InMemoryCartRepository(),
        InMemoryInventory(),
        LogNotifier(),
        config,
    )

    await session.load()
    for cmd in DEMO_CATALOG:
        await session.add_item(cmd)
    await session.reserve()

    shipping = ShippingInfo.from_identity(identity, city="Delhi", state="Delhi", pincode="110001")
    invoice = await session.complete_checkout(
        shipping_info=shipping,
        pickup_acknowledged=session.calculation.shipping.force_pickup,
    )

    output = Path(args.output)
    output.write_text(session.render_invoice(invoice), encoding="utf-8")
    print(format_invoice_text(invoice))
    print(f"\nInvoice written to: {output}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="stonecart", description="Stone products cart and checkout engine")
    parser.add_argument("--log-level", default=None, help="Log level (default: STONECART_LOG_LEVEL or INFO)")
    parser.add_argument("--console-logs", action="store_true", help="Render logs for humans instead of JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    quote = sub.add_parser("quote", help="Preview pricing for one product line")
    quote.add_argument("--crates", type=int, default=0, help="Number of full crates")
    quote.add_argument("--pieces", type=int, default=0, help="Additional loose pieces")
    quote.add_argument("--per-crate", type=int, required=True, help="Pieces per crate")
    quote.add_argument("--price", type=_decimal, required=True, help="Unit price per piece")
    quote.add_argument("--weight", type=_decimal, default=Decimal("0"), help="Weight per piece (lbs)")

    demo = sub.add_parser("demo", help="Run an in-memory checkout and write the invoice HTML")
    demo.add_argument("--user", default="demo-user", help="Customer id")
    demo.add_argument("--tier", default="Tier2", help="Customer tier (Tier1, Tier2, Tier3)")
    demo.add_argument("--output", default="invoice.html", help="Where to write the invoice HTML")

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_output=False if args.console_logs else None)

    try:
        config = BusinessConfig.from_env()
        if args.command == "quote":
            return run_quote(args, config)
        return asyncio.run(run_demo(args, config))
    except CartError as e:
        parser.exit(2, f"error: {e}\n")
