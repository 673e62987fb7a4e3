"""Wrapper de httpx.

- Estandariza timeouts y headers para todas las llamadas.
- Facilita testeo: se puede inyectar un `httpx.BaseTransport` (p.ej.
  `httpx.MockTransport`) sin tocar el resto del cliente.
"""

from __future__ import annotations

import httpx

from dodopayments.core.config import ClientSettings


def default_headers(settings: ClientSettings) -> dict[str, str]:
    return {
        "Accept": "application/json",
        "User-Agent": settings.user_agent,
    }


def build_http_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con defaults seguros.

    Los reintentos no se delegan en httpx: los gestiona `HttpxTransport`.
    """

    settings = settings or ClientSettings()
    headers = default_headers(settings)
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.timeout_seconds),
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )
