"""Parámetros de los endpoints soportados.

Cada clase declara qué campos van a la ruta y cuáles a la query; el resto es
cuerpo JSON. Los opcionales que no se pasan no se envían.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from dodopayments.core.domain.base import BaseParams
from dodopayments.core.domain.enums import Currency, OpenEnum, PaymentStatus, TaxCategory, WebhookEventType
from dodopayments.core.domain.models import (
    BillingAddress,
    CustomerRequest,
    LicenseKeyDuration,
    OneTimeProductCartItem,
    Price,
)


class PageNumberParams(BaseParams):
    """Paginación por número de página (la API empieza en 0)."""

    query_fields: ClassVar[tuple[str, ...]] = ("page_number", "page_size")
    has_body: ClassVar[bool] = False

    page_number: int | None = Field(default=None, ge=0)
    page_size: int | None = Field(default=None, ge=1, le=100)


class CursorParams(BaseParams):
    """Paginación por cursor (`iterator` opaco + `limit`)."""

    query_fields: ClassVar[tuple[str, ...]] = ("iterator", "limit")
    has_body: ClassVar[bool] = False

    iterator: str | None = Field(default=None)
    limit: int | None = Field(default=None, ge=1)


class ProductCreateParams(BaseParams):
    price: Price
    tax_category: OpenEnum[TaxCategory]
    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    addons: list[str] | None = Field(default=None)
    brand_id: str | None = Field(default=None)
    license_key_activation_message: str | None = Field(default=None)
    license_key_activations_limit: int | None = Field(default=None, ge=0)
    license_key_duration: LicenseKeyDuration | None = Field(default=None)
    license_key_enabled: bool | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)


class ProductUpdateParams(BaseParams):
    path_fields: ClassVar[tuple[str, ...]] = ("id",)

    id: str = Field(..., min_length=1)
    price: Price | None = Field(default=None)
    tax_category: OpenEnum[TaxCategory] | None = Field(default=None)
    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    addons: list[str] | None = Field(default=None)
    brand_id: str | None = Field(default=None)
    image_id: str | None = Field(default=None)
    license_key_activation_message: str | None = Field(default=None)
    license_key_activations_limit: int | None = Field(default=None, ge=0)
    license_key_duration: LicenseKeyDuration | None = Field(default=None)
    license_key_enabled: bool | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)


class ProductListParams(PageNumberParams):
    query_fields: ClassVar[tuple[str, ...]] = ("page_number", "page_size", "archived", "brand_id", "recurring")

    archived: bool | None = Field(default=None)
    brand_id: str | None = Field(default=None)
    recurring: bool | None = Field(default=None)


class CustomerCreateParams(BaseParams):
    email: str = Field(..., min_length=3)
    name: str = Field(..., min_length=1)
    phone_number: str | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)


class CustomerUpdateParams(BaseParams):
    path_fields: ClassVar[tuple[str, ...]] = ("customer_id",)

    customer_id: str = Field(..., min_length=1)
    name: str | None = Field(default=None)
    phone_number: str | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)


class CustomerListParams(PageNumberParams):
    query_fields: ClassVar[tuple[str, ...]] = ("page_number", "page_size", "email")

    email: str | None = Field(default=None)


class PaymentCreateParams(BaseParams):
    billing: BillingAddress
    customer: CustomerRequest
    product_cart: list[OneTimeProductCartItem] = Field(..., min_length=1)
    allowed_payment_method_types: list[str] | None = Field(default=None)
    billing_currency: OpenEnum[Currency] | None = Field(default=None)
    discount_code: str | None = Field(default=None)
    force_3ds: bool | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)
    payment_link: bool | None = Field(default=None)
    return_url: str | None = Field(default=None)
    show_saved_payment_methods: bool | None = Field(default=None)
    tax_id: str | None = Field(default=None)


class PaymentListParams(PageNumberParams):
    query_fields: ClassVar[tuple[str, ...]] = (
        "page_number",
        "page_size",
        "brand_id",
        "created_at_gte",
        "created_at_lte",
        "customer_id",
        "product_id",
        "status",
        "subscription_id",
    )

    brand_id: str | None = Field(default=None)
    created_at_gte: datetime | None = Field(default=None)
    created_at_lte: datetime | None = Field(default=None)
    customer_id: str | None = Field(default=None)
    product_id: str | None = Field(default=None)
    status: OpenEnum[PaymentStatus] | None = Field(default=None)
    subscription_id: str | None = Field(default=None)


class RefundItem(BaseParams):
    item_id: str
    amount: int | None = Field(default=None, ge=0)
    tax_inclusive: bool | None = Field(default=None)


class RefundCreateParams(BaseParams):
    payment_id: str = Field(..., min_length=1)
    items: list[RefundItem] | None = Field(default=None)
    reason: str | None = Field(default=None, max_length=3000)


class RefundListParams(PageNumberParams):
    query_fields: ClassVar[tuple[str, ...]] = (
        "page_number",
        "page_size",
        "created_at_gte",
        "created_at_lte",
        "customer_id",
        "status",
    )

    created_at_gte: datetime | None = Field(default=None)
    created_at_lte: datetime | None = Field(default=None)
    customer_id: str | None = Field(default=None)
    status: str | None = Field(default=None)


class WebhookCreateParams(BaseParams):
    url: str = Field(..., min_length=1)
    description: str | None = Field(default=None)
    disabled: bool | None = Field(default=None)
    filter_types: list[OpenEnum[WebhookEventType]] | None = Field(default=None)
    headers: dict[str, str] | None = Field(default=None)
    idempotency_key: str | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)
    rate_limit: int | None = Field(default=None, ge=0)


class WebhookUpdateParams(BaseParams):
    path_fields: ClassVar[tuple[str, ...]] = ("webhook_id",)

    webhook_id: str = Field(..., min_length=1)
    description: str | None = Field(default=None)
    disabled: bool | None = Field(default=None)
    filter_types: list[OpenEnum[WebhookEventType]] | None = Field(default=None)
    metadata: dict[str, str] | None = Field(default=None)
    rate_limit: int | None = Field(default=None, ge=0)
    url: str | None = Field(default=None)


class WebhookListParams(CursorParams):
    pass
