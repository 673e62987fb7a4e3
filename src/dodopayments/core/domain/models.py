"""Modelos de respuesta de la API (Pydantic v2).

Nota:
- Estos modelos describen *qué* devuelve la API, no *cómo* se obtiene.
- Los campos opcionales usan `default=None`; si la API no los envía quedan
  "no enviados" y tampoco se re-emiten al serializar.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field

from dodopayments.core.domain.base import SdkModel
from dodopayments.core.domain.enums import (
    CountryCode,
    Currency,
    OpenEnum,
    PaymentStatus,
    RefundStatus,
    TaxCategory,
    TimeInterval,
    WebhookEventType,
)


class OneTimePrice(SdkModel):
    """Precio de pago único."""

    type: Literal["one_time_price"] = "one_time_price"
    currency: OpenEnum[Currency] = Field(..., description="Moneda del cobro.")
    price: int = Field(
        ...,
        ge=0,
        description="Importe en la unidad mínima de la moneda (p.ej. céntimos).",
    )
    discount: int = Field(..., ge=0, le=100, description="Descuento en porcentaje (0..100).")
    purchasing_power_parity: bool
    pay_what_you_want: bool | None = Field(
        default=None,
        description="Si es `true`, `price` es el mínimo que paga el cliente.",
    )
    suggested_price: int | None = Field(default=None)
    tax_inclusive: bool | None = Field(default=None)


class RecurringPrice(SdkModel):
    """Precio recurrente (suscripciones)."""

    type: Literal["recurring_price"] = "recurring_price"
    currency: OpenEnum[Currency]
    price: int = Field(..., ge=0)
    payment_frequency_count: int = Field(..., ge=1)
    payment_frequency_interval: OpenEnum[TimeInterval]
    subscription_period_count: int = Field(..., ge=1)
    subscription_period_interval: OpenEnum[TimeInterval]
    discount: int = Field(..., ge=0, le=100)
    purchasing_power_parity: bool
    tax_inclusive: bool | None = Field(default=None)
    trial_period_days: int | None = Field(default=None, ge=0)


class UsageMeter(SdkModel):
    meter_id: str
    price_per_unit: str | None = Field(default=None, description="Precio decimal por unidad, como string.")
    free_threshold: int | None = Field(default=None, ge=0)


class UsageBasedPrice(SdkModel):
    """Precio por uso (medidores)."""

    type: Literal["usage_based_price"] = "usage_based_price"
    currency: OpenEnum[Currency]
    fixed_price: int = Field(..., ge=0)
    payment_frequency_count: int = Field(..., ge=1)
    payment_frequency_interval: OpenEnum[TimeInterval]
    subscription_period_count: int = Field(..., ge=1)
    subscription_period_interval: OpenEnum[TimeInterval]
    discount: int = Field(..., ge=0, le=100)
    purchasing_power_parity: bool
    meters: list[UsageMeter] | None = Field(default=None)
    tax_inclusive: bool | None = Field(default=None)


Price = Annotated[Union[OneTimePrice, RecurringPrice, UsageBasedPrice], Field(discriminator="type")]


class LicenseKeyDuration(SdkModel):
    count: int = Field(..., ge=1)
    interval: OpenEnum[TimeInterval]


class Product(SdkModel):
    """Producto completo (`GET /products/{id}`)."""

    product_id: str
    brand_id: str
    business_id: str
    created_at: datetime
    updated_at: datetime
    is_recurring: bool
    license_key_enabled: bool
    metadata: dict[str, str]
    price: Price
    tax_category: OpenEnum[TaxCategory]
    name: str | None = Field(default=None)
    description: str | None = Field(default=None)
    image: str | None = Field(default=None)
    addons: list[str] | None = Field(default=None)
    license_key_activation_message: str | None = Field(default=None)
    license_key_activations_limit: int | None = Field(default=None)
    license_key_duration: LicenseKeyDuration | None = Field(default=None)


class ProductListItem(SdkModel):
    """Resumen de producto tal como aparece en los listados."""

    product_id: str
    business_id: str
    created_at: datetime
    updated_at: datetime
    is_recurring: bool
    tax_category: OpenEnum[TaxCategory]
    metadata: dict[str, str]
    name: str | None = Field(default=None)
    description: str | None = Field(default=None)
    image: str | None = Field(default=None)
    currency: OpenEnum[Currency] | None = Field(default=None)
    price: int | None = Field(default=None)
    price_detail: Price | None = Field(default=None)
    tax_inclusive: bool | None = Field(default=None)


class Customer(SdkModel):
    customer_id: str
    business_id: str
    created_at: datetime
    email: str
    name: str
    phone_number: str | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)


class CustomerLimitedDetails(SdkModel):
    customer_id: str
    email: str
    name: str
    phone_number: str | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)


class BillingAddress(SdkModel):
    """Dirección de facturación."""

    city: str
    country: OpenEnum[CountryCode]
    state: str
    street: str
    zipcode: str


class AttachExistingCustomer(SdkModel):
    customer_id: str


class NewCustomer(SdkModel):
    email: str
    name: str | None = Field(default=None)
    phone_number: str | None = Field(default=None)
    create_new_customer: bool | None = Field(default=None)


CustomerRequest = Union[AttachExistingCustomer, NewCustomer]


class OneTimeProductCartItem(SdkModel):
    product_id: str
    quantity: int = Field(..., ge=0)
    amount: int | None = Field(default=None, description="Importe para productos 'pay what you want'.")


class PaymentRefundSummary(SdkModel):
    refund_id: str
    payment_id: str
    business_id: str
    created_at: datetime
    is_partial: bool
    status: OpenEnum[RefundStatus]
    amount: int | None = Field(default=None)
    currency: OpenEnum[Currency] | None = Field(default=None)
    reason: str | None = Field(default=None)


class Payment(SdkModel):
    """Pago (`GET /payments/{id}` y listados)."""

    payment_id: str
    business_id: str
    brand_id: str | None = Field(default=None)
    created_at: datetime
    updated_at: datetime | None = Field(default=None)
    currency: OpenEnum[Currency]
    total_amount: int
    tax: int | None = Field(default=None)
    settlement_amount: int | None = Field(default=None)
    settlement_currency: OpenEnum[Currency] | None = Field(default=None)
    status: OpenEnum[PaymentStatus] | None = Field(default=None)
    customer: CustomerLimitedDetails
    billing: BillingAddress | None = Field(default=None)
    metadata: dict[str, str]
    payment_method: str | None = Field(default=None)
    payment_link: str | None = Field(default=None)
    subscription_id: str | None = Field(default=None)
    discount_id: str | None = Field(default=None)
    error_code: str | None = Field(default=None)
    error_message: str | None = Field(default=None)
    product_cart: list[OneTimeProductCartItem] | None = Field(default=None)
    refunds: list[PaymentRefundSummary] = Field(default_factory=list)


class PaymentCreateResponse(SdkModel):
    """Respuesta de `POST /payments`."""

    payment_id: str
    client_secret: str
    customer: CustomerLimitedDetails
    metadata: dict[str, str]
    total_amount: int
    discount_id: str | None = Field(default=None)
    expires_on: datetime | None = Field(default=None)
    payment_link: str | None = Field(default=None)
    product_cart: list[OneTimeProductCartItem] | None = Field(default=None)


class Refund(SdkModel):
    refund_id: str
    payment_id: str
    business_id: str
    created_at: datetime
    is_partial: bool
    status: OpenEnum[RefundStatus]
    customer: CustomerLimitedDetails | None = Field(default=None)
    amount: int | None = Field(default=None)
    currency: OpenEnum[Currency] | None = Field(default=None)
    reason: str | None = Field(default=None)


class WebhookDetails(SdkModel):
    """Endpoint de webhook registrado."""

    id: str
    url: str
    description: str
    created_at: str
    updated_at: str
    metadata: dict[str, str]
    disabled: bool | None = Field(default=None)
    filter_types: list[OpenEnum[WebhookEventType]] | None = Field(default=None)
    rate_limit: int | None = Field(default=None)


class WebhookSecret(SdkModel):
    secret: str
