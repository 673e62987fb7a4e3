"""CLI `dodopayments` (Typer + Rich).

La CLI solo orquesta: construye el cliente, llama a los servicios y pinta
resultados. Toda la lógica HTTP vive en el cliente.
"""

from __future__ import annotations

import itertools
from typing import Any, Iterable, Optional

import typer
from rich.console import Console

from dodopayments._version import __version__
from dodopayments.cli import doctor
from dodopayments.cli.ui_components import (
    build_payments_table,
    build_product_panel,
    build_products_table,
    build_webhooks_table,
)
from dodopayments.client import DodoPayments
from dodopayments.core.domain.base import SdkModel
from dodopayments.core.errors import DodoPaymentsError
from dodopayments.core.logs import configure_logging

app = typer.Typer(no_args_is_help=True, help="Command line client for the Dodo Payments API.")
products_app = typer.Typer(no_args_is_help=True, help="Products.")
payments_app = typer.Typer(no_args_is_help=True, help="Payments.")
webhooks_app = typer.Typer(no_args_is_help=True, help="Webhook endpoints.")

app.add_typer(products_app, name="products")
app.add_typer(payments_app, name="payments")
app.add_typer(webhooks_app, name="webhooks")
app.command(name="doctor")(doctor.run)
app.command(name="setup")(doctor.setup)

console = Console()
err_console = Console(stderr=True)


def get_client() -> DodoPayments:
    """Cliente configurado desde el entorno (se sustituye en tests)."""

    return DodoPayments()


def _take(items: Iterable[Any], limit: int | None) -> list[Any]:
    if limit is None:
        return list(items)
    return list(itertools.islice(items, limit))


def _print_json(items: Iterable[SdkModel] | SdkModel) -> None:
    if isinstance(items, SdkModel):
        console.print_json(data=items.to_dict())
        return
    console.print_json(data=[item.to_dict() for item in items])


def _fail(exc: DodoPaymentsError) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {exc}")
    return typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"dodopayments {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP activity (DEBUG)."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    if verbose:
        configure_logging("debug", console=err_console)


@products_app.command("list")
def products_list(
    page_size: int = typer.Option(10, "--page-size", min=1, max=100, help="Items per request."),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Stop after N items."),
    archived: bool = typer.Option(False, "--archived", help="List archived products."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """List products (follows pagination)."""

    try:
        with get_client() as client:
            page = client.products.list(page_size=page_size, archived=archived or None)
            items = _take(page, limit)
    except DodoPaymentsError as exc:
        raise _fail(exc) from exc

    if as_json:
        _print_json(items)
    else:
        console.print(build_products_table(items))


@products_app.command("get")
def products_get(
    product_id: str = typer.Argument(..., help="Product ID."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a panel."),
) -> None:
    """Show one product."""

    try:
        with get_client() as client:
            product = client.products.retrieve(product_id)
    except DodoPaymentsError as exc:
        raise _fail(exc) from exc

    if as_json:
        _print_json(product)
    else:
        console.print(build_product_panel(product))


@payments_app.command("list")
def payments_list(
    page_size: int = typer.Option(10, "--page-size", min=1, max=100, help="Items per request."),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Stop after N items."),
    status: Optional[str] = typer.Option(None, "--status", help="Filter by payment status."),
    customer_id: Optional[str] = typer.Option(None, "--customer", help="Filter by customer ID."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """List payments (follows pagination)."""

    try:
        with get_client() as client:
            page = client.payments.list(page_size=page_size, status=status, customer_id=customer_id)
            items = _take(page, limit)
    except DodoPaymentsError as exc:
        raise _fail(exc) from exc

    if as_json:
        _print_json(items)
    else:
        console.print(build_payments_table(items))


@webhooks_app.command("list")
def webhooks_list(
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Items per request."),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Stop after N items."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """List webhook endpoints (follows the cursor)."""

    try:
        with get_client() as client:
            page = client.webhooks.list(limit=page_size)
            items = _take(page, limit)
    except DodoPaymentsError as exc:
        raise _fail(exc) from exc

    if as_json:
        _print_json(items)
    else:
        console.print(build_webhooks_table(items))


def run() -> None:
    app()
