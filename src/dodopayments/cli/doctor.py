"""Doctor command for environment diagnostics."""

from __future__ import annotations

import httpx
import typer
from rich.console import Console
from rich.table import Table

from dodopayments.adapters.http_client import build_http_client
from dodopayments.cli.ui_components import print_banner
from dodopayments.client import DodoPayments
from dodopayments.core.config import ENV_PREFIX, ClientSettings, Environment, write_user_env_vars
from dodopayments.core.errors import DodoPaymentsError

_console = Console()


def _check_http(settings: ClientSettings) -> tuple[bool, str]:
    """Connectivity only: any HTTP answer from the base URL counts as reachable."""

    try:
        with build_http_client(settings) as client:
            response = client.get(settings.resolved_base_url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


def _check_auth(settings: ClientSettings) -> tuple[bool, str]:
    try:
        with DodoPayments(settings=settings) as client:
            page = client.products.list(page_size=1, request_options={"max_retries": 0})
        return True, f"authenticated ({len(page.items)} product(s) on first page)"
    except DodoPaymentsError as exc:
        return False, str(exc)


def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = ClientSettings()
    print_banner(_console, environment=settings.environment.value, base_url=settings.resolved_base_url)

    table = Table(title="Dodo Payments Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    has_key = bool(settings.api_key)
    if has_key:
        table.add_row("API key", "OK", f"{ENV_PREFIX}API_KEY is set")
    else:
        table.add_row("API key", "MISSING", f"Set {ENV_PREFIX}API_KEY or run `dodopayments setup`")
    table.add_row("Environment", "OK", settings.environment.value)
    table.add_row("Base URL", "OK", settings.resolved_base_url)
    table.add_row("Timeout / retries", "OK", f"{settings.timeout_seconds:g}s / {settings.max_retries}")

    # Connectivity (best-effort)
    ok_http, detail_http = _check_http(settings)
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    if has_key and ok_http:
        ok_auth, detail_auth = _check_auth(settings)
        table.add_row("API access", "OK" if ok_auth else "FAIL", detail_auth)

    _console.print(table)

    if not has_key:
        _console.print("\n[yellow]Note:[/yellow] API calls will fail with HTTP 401 until an API key is configured.")


def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    environment = typer.prompt(
        "Environment (live_mode/test_mode)",
        default=Environment.TEST_MODE.value,
        show_default=True,
    ).strip().lower()
    try:
        Environment(environment)
    except ValueError as exc:
        raise typer.BadParameter("environment must be live_mode or test_mode") from exc

    api_key = typer.prompt("API key", hide_input=True, confirmation_prompt=False).strip()
    if not api_key:
        raise typer.BadParameter("api key is required")

    env_path = write_user_env_vars(
        {
            f"{ENV_PREFIX}ENVIRONMENT": environment,
            f"{ENV_PREFIX}API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
