"""Contrato del transporte HTTP.

Protocol: contrato estructural (duck typing) sin herencia rígida; en tests
basta con cualquier objeto que tenga `send`, `with_settings` y `close`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx

from dodopayments.core.config import ClientSettings
from dodopayments.core.request import FinalRequest, RequestOptions


@runtime_checkable
class Transport(Protocol):
    """Ejecuta una petición ya construida.

    Reglas de diseño:
    - Los reintentos y la cancelación viven aquí, no en quien llama.
    - Devuelve la última respuesta aunque no sea 2xx; interpretarla es cosa
      del unmarshaller.
    """

    def send(self, request: FinalRequest, options: RequestOptions) -> httpx.Response:
        ...

    def with_settings(self, settings: ClientSettings) -> Transport:
        """Devuelve un transporte equivalente que aplica `settings` (clave, reintentos, timeout)."""
        ...

    def close(self) -> None:
        ...
