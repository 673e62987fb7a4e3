"""Servicios por recurso (productos, clientes, pagos, reembolsos, webhooks).

Cada servicio traduce una operación de la API a `client.request(...)`; no
contiene lógica HTTP propia.
"""

from dodopayments.core.services.customers import CustomersService
from dodopayments.core.services.payments import PaymentsService
from dodopayments.core.services.products import ProductsService
from dodopayments.core.services.refunds import RefundsService
from dodopayments.core.services.webhooks import WebhooksService

__all__ = [
    "CustomersService",
    "PaymentsService",
    "ProductsService",
    "RefundsService",
    "WebhooksService",
]
