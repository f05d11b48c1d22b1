"""Invoice snapshot, materialization and rendering."""

from .materializer import InvoiceMaterializer, InvoiceNumberGenerator
from .models import Invoice, InvoiceLine
from .renderer import format_invoice_text, format_money, render_invoice_html

__all__ = [
    "Invoice",
    "InvoiceLine",
    "InvoiceMaterializer",
    "InvoiceNumberGenerator",
    "format_invoice_text",
    "format_money",
    "render_invoice_html",
]
