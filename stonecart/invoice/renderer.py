"""Invoice rendering: printable HTML and a plain-text summary.

Rendering reads an Invoice and returns a string; it never touches the
snapshot, so a failed render can simply be retried.
"""

from decimal import Decimal
from html import escape

from ..pricing.shipping import format_weight
from .models import Invoice

CURRENCY = "₹"


def format_money(amount: Decimal) -> str:
    return f"{CURRENCY}{amount:,.2f}"


def _party_block(title: str, party) -> str:
    rows = [f"<p><strong>{escape(party.name)}</strong></p>"]
    rows += [f"<p>{escape(line)}</p>" for line in party.address_lines()]
    if party.phone:
        rows.append(f"<p>Phone: {escape(party.phone)}</p>")
    if party.email:
        rows.append(f"<p>Email: {escape(party.email)}</p>")
    if party.tax_id:
        rows.append(f"<p>GSTIN: {escape(party.tax_id)}</p>")
    return f'<div class="party"><h3>{escape(title)}</h3>{"".join(rows)}</div>'


def _line_rows(invoice: Invoice) -> str:
    rows = []
    for line in invoice.lines:
        cells = [
            escape(line.name),
            str(line.crate_qty),
            str(line.piece_qty),
            str(line.total_pieces),
            str(line.filler_pieces),
            escape(format_money(line.unit_price)),
            escape(format_money(line.filler_charges)),
            escape(format_weight(line.weight)),
            escape(format_money(line.line_total)),
        ]
        rows.append("<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>")
    return "\n".join(rows)


def _totals_rows(invoice: Invoice) -> str:
    totals = invoice.totals
    rows = [("Subtotal", format_money(totals.subtotal))]
    if totals.discount_amount:
        rows.append((f"Discount ({totals.discount_percent}%)", "-" + format_money(totals.discount_amount)))
    rows.append(("Filler charges", format_money(totals.total_filler_charges)))
    if invoice.pickup_required:
        rows.append(("Shipping", "Pickup required"))
    else:
        rows.append(("Shipping", format_money(totals.shipping_fee)))
    if invoice.tax_rate:
        rows.append((f"Tax ({(invoice.tax_rate * 100).normalize():f}%)", format_money(invoice.tax_amount)))
    rows.append(("Total due", format_money(invoice.total_due)))
    return "\n".join(
        f"<tr><th>{escape(label)}</th><td>{escape(value)}</td></tr>" for label, value in rows
    )


def render_invoice_html(invoice: Invoice) -> str:
    """Render a self-contained printable HTML document."""
    number = escape(invoice.invoice_number)
    meta = [
        f"<p>Invoice #: {number}</p>",
        f"<p>Date: {invoice.issue_date.isoformat()}</p>",
        f"<p>Due Date: {invoice.due_date.isoformat()}</p>",
    ]
    if invoice.order_id:
        meta.append(f"<p>Order: {escape(invoice.order_id)}</p>")
    shipping_note = ""
    if invoice.shipping_message:
        shipping_note = f'<p class="shipping-note">{escape(invoice.shipping_message)}</p>'
    terms = "".join(f"<li>{escape(term)}</li>" for term in invoice.terms)

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Invoice {number}</title>
</head>
<body>
<header>
<h1>{escape(invoice.seller.name)}</h1>
<h2>PRO-FORMA INVOICE</h2>
{"".join(meta)}
</header>
<section class="parties">
{_party_block("Bill From", invoice.seller)}
{_party_block("Bill To", invoice.buyer)}
</section>
<table class="lines">
<thead><tr><th>Product</th><th>Crates</th><th>Pieces</th><th>Total Pieces</th><th>Filler Pieces</th><th>Unit Price</th><th>Filler Charges</th><th>Weight</th><th>Line Total</th></tr></thead>
<tbody>
{_line_rows(invoice)}
</tbody>
</table>
<table class="totals">
{_totals_rows(invoice)}
</table>
{shipping_note}
<h3>Terms &amp; Conditions</h3>
<ul>{terms}</ul>
<footer>
<p>Thank you for your business!</p>
<p>This is a computer-generated invoice and does not require a signature.</p>
</footer>
</body>
</html>
"""


def format_invoice_text(invoice: Invoice) -> str:
    """Format a human-readable invoice summary."""
    totals = invoice.totals
    lines = []

    lines.append("=" * 48)
    lines.append(f"  INVOICE {invoice.invoice_number}")
    lines.append("=" * 48)
    lines.append(f"Date: {invoice.issue_date.isoformat()}   Due: {invoice.due_date.isoformat()}")
    lines.append(f"Bill to: {invoice.buyer.name}")
    lines.append("-" * 48)

    for line in invoice.lines:
        lines.append(
            f"{line.total_pieces} pcs x {line.name} @ {format_money(line.unit_price)} = {format_money(line.line_total)}"
        )
        if line.filler_pieces:
            lines.append(f"  + {line.filler_pieces} filler pcs: {format_money(line.filler_charges)}")

    lines.append("-" * 48)
    lines.append(f"Subtotal:        {format_money(totals.subtotal)}")
    if totals.discount_amount:
        lines.append(f"Discount ({totals.discount_percent}%): -{format_money(totals.discount_amount)}")
    lines.append(f"Filler charges:  {format_money(totals.total_filler_charges)}")
    if invoice.pickup_required:
        lines.append("Shipping:        pickup required")
    else:
        lines.append(f"Shipping:        {format_money(totals.shipping_fee)}")
    if invoice.tax_amount:
        lines.append(f"Tax:             {format_money(invoice.tax_amount)}")
    lines.append("-" * 48)
    lines.append(f"TOTAL DUE:       {format_money(invoice.total_due)}")
    lines.append(f"Weight:          {format_weight(totals.total_weight)}")
    lines.append("=" * 48)

    return "\n".join(lines)
