"""Componentes de UI para CLI (Rich).

Separa los detalles visuales de la lógica de comandos; las tablas se reutilizan
en varios comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dodopayments.core.domain.enums import PriceType, enum_value
from dodopayments.core.domain.models import Payment, Product, ProductListItem, WebhookDetails

# Monedas sin decimales (el importe ya viene en unidades).
_ZERO_DECIMAL = {"JPY"}

_PRICE_LABELS = {
    PriceType.ONE_TIME_PRICE: "one-time",
    PriceType.RECURRING_PRICE: "recurring",
    PriceType.USAGE_BASED_PRICE: "usage-based",
}


def format_amount(amount: int | None, currency: object | None) -> str:
    """Formatea un importe en unidad mínima (céntimos) como `12.34 USD`."""

    if amount is None:
        return "-"
    code = str(enum_value(currency)) if currency is not None else ""
    if code in _ZERO_DECIMAL:
        text = f"{amount}"
    else:
        text = f"{amount / 100:.2f}"
    return f"{text} {code}".strip()


def _text(value: object | None) -> str:
    if value is None:
        return "-"
    return str(enum_value(value))


def print_banner(console: Console, *, environment: str, base_url: str) -> None:
    title = Text("Dodo Payments", style="bold cyan")
    subtitle = Text(f"{environment} • {base_url}", style="dim")
    console.print(Panel(Text.assemble(title, "\n", subtitle), border_style="cyan", padding=(0, 2)))


def build_products_table(items: Iterable[ProductListItem]) -> Table:
    table = Table(title="Products")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Recurring", style="magenta")
    table.add_column("Tax category", style="dim")
    for item in items:
        table.add_row(
            item.product_id,
            item.name or "-",
            format_amount(item.price, item.currency),
            "yes" if item.is_recurring else "no",
            _text(item.tax_category),
        )
    return table


def build_payments_table(items: Iterable[Payment]) -> Table:
    table = Table(title="Payments")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Total", style="green", justify="right")
    table.add_column("Customer", style="magenta")
    table.add_column("Created", style="dim")
    for item in items:
        table.add_row(
            item.payment_id,
            _text(item.status),
            format_amount(item.total_amount, item.currency),
            item.customer.email,
            item.created_at.isoformat(),
        )
    return table


def build_webhooks_table(items: Iterable[WebhookDetails]) -> Table:
    table = Table(title="Webhooks")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("URL", style="white")
    table.add_column("Events", style="magenta")
    table.add_column("Disabled", style="red")
    for item in items:
        events = ", ".join(_text(e) for e in item.filter_types or []) or "all"
        table.add_row(item.id, item.url, events, "yes" if item.disabled else "no")
    return table


def build_product_panel(product: Product) -> Panel:
    """Panel con el detalle de un producto."""

    price = product.price
    amount = getattr(price, "price", None)
    if amount is None:
        amount = getattr(price, "fixed_price", None)

    kind = _PRICE_LABELS[PriceType(price.type)]

    body = Text()
    body.append(f"{product.name or product.product_id}\n", style="bold")
    if product.description:
        body.append(product.description.strip() + "\n\n")
    body.append(f"Price: {format_amount(amount, price.currency)} ({kind})\n")
    body.append(f"Tax category: {_text(product.tax_category)}\n")
    body.append(f"Recurring: {'yes' if product.is_recurring else 'no'}\n")
    body.append(f"License keys: {'enabled' if product.license_key_enabled else 'disabled'}\n")
    body.append(f"\nUpdated: {product.updated_at.isoformat()}", style="dim")
    return Panel(body, title=Text(product.product_id, style="bold yellow"), border_style="yellow")
