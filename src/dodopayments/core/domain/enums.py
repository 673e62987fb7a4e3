"""Vocabularios controlados de la API (enums abiertos).

Reglas:
- En el cable el valor es siempre el string subyacente.
- En memoria un valor conocido es un miembro del enum; un valor desconocido
  se conserva como `str` tal cual llega (la API puede añadir valores nuevos).
- Usar `OpenEnum[MiEnum]` como anotación de campo para obtener ese
  comportamiento con Pydantic.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, TypeVar, Union

from pydantic import Field

E = TypeVar("E", bound=Enum)

# Primero se intenta el enum y, si el valor no es conocido, se acepta el string.
OpenEnum = Annotated[Union[E, str], Field(union_mode="left_to_right")]


def enum_value(value: Any) -> Any:
    """Devuelve el valor de cable de un miembro de enum (o el valor sin tocar)."""

    if isinstance(value, Enum):
        return value.value
    return value


class Currency(str, Enum):
    """ISO 4217 currency codes accepted by the API (subset)."""

    AED = "AED"
    AUD = "AUD"
    BRL = "BRL"
    CAD = "CAD"
    CHF = "CHF"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    JPY = "JPY"
    MXN = "MXN"
    SGD = "SGD"
    USD = "USD"


class CountryCode(str, Enum):
    """ISO 3166-1 alpha-2 country codes (subset)."""

    AU = "AU"
    BR = "BR"
    CA = "CA"
    DE = "DE"
    ES = "ES"
    FR = "FR"
    GB = "GB"
    IN = "IN"
    JP = "JP"
    MX = "MX"
    SG = "SG"
    US = "US"


class TaxCategory(str, Enum):
    DIGITAL_PRODUCTS = "digital_products"
    SAAS = "saas"
    E_BOOK = "e_book"
    EDTECH = "edtech"


class TimeInterval(str, Enum):
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"


class PriceType(str, Enum):
    ONE_TIME_PRICE = "one_time_price"
    RECURRING_PRICE = "recurring_price"
    USAGE_BASED_PRICE = "usage_based_price"


class PaymentStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    PROCESSING = "processing"
    REQUIRES_CUSTOMER_ACTION = "requires_customer_action"
    REQUIRES_MERCHANT_ACTION = "requires_merchant_action"
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_CAPTURE = "requires_capture"
    PARTIALLY_CAPTURED = "partially_captured"
    PARTIALLY_CAPTURED_AND_CAPTURABLE = "partially_captured_and_capturable"


class RefundStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    PENDING = "pending"
    REVIEW = "review"


class WebhookEventType(str, Enum):
    """Event types a webhook endpoint can subscribe to."""

    PAYMENT_SUCCEEDED = "payment.succeeded"
    PAYMENT_FAILED = "payment.failed"
    PAYMENT_PROCESSING = "payment.processing"
    PAYMENT_CANCELLED = "payment.cancelled"
    REFUND_SUCCEEDED = "refund.succeeded"
    REFUND_FAILED = "refund.failed"
    DISPUTE_OPENED = "dispute.opened"
    DISPUTE_EXPIRED = "dispute.expired"
    DISPUTE_ACCEPTED = "dispute.accepted"
    DISPUTE_CANCELLED = "dispute.cancelled"
    DISPUTE_CHALLENGED = "dispute.challenged"
    DISPUTE_WON = "dispute.won"
    DISPUTE_LOST = "dispute.lost"
    SUBSCRIPTION_ACTIVE = "subscription.active"
    SUBSCRIPTION_RENEWED = "subscription.renewed"
    SUBSCRIPTION_ON_HOLD = "subscription.on_hold"
    SUBSCRIPTION_CANCELLED = "subscription.cancelled"
    SUBSCRIPTION_FAILED = "subscription.failed"
    SUBSCRIPTION_EXPIRED = "subscription.expired"
    SUBSCRIPTION_PLAN_CHANGED = "subscription.plan_changed"
    SUBSCRIPTION_UPDATED = "subscription.updated"
    LICENSE_KEY_CREATED = "license_key.created"
