"""Logging de la librería.

La librería no instala handlers por su cuenta: solo lo hace si el usuario lo
pide (`DODO_PAYMENTS_LOG` o `--verbose` en la CLI).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "dodopayments"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_SENSITIVE_HEADERS = {"authorization", "x-api-key", "cookie"}


def parse_level(value: str | None) -> int | None:
    if not value:
        return None
    return _LEVELS.get(value.strip().lower())


def configure_logging(level: str | int | None, *, console: Console | None = None) -> logging.Logger:
    """Adjunta un `RichHandler` al logger `dodopayments` (una sola vez)."""

    logger = logging.getLogger(LOGGER_NAME)
    resolved = level if isinstance(level, int) else parse_level(level)
    if resolved is None:
        return logger

    logger.setLevel(resolved)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Copia de los headers apta para logs (sin credenciales)."""

    return {k: ("<redacted>" if k.lower() in _SENSITIVE_HEADERS else v) for k, v in headers.items()}
