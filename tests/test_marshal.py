"""Tests for the model marshaller (serialize / deserialize / errors)."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from conftest import payment_json, product_json
from dodopayments.core.domain.base import SdkModel
from dodopayments.core.domain.enums import Currency, OpenEnum, TaxCategory
from dodopayments.core.domain.models import (
    AttachExistingCustomer,
    NewCustomer,
    OneTimePrice,
    Payment,
    Product,
    RecurringPrice,
)
from dodopayments.core.domain.omit import OMIT
from dodopayments.core.domain.params import PaymentCreateParams, ProductCreateParams
from dodopayments.core.errors import MissingField, TypeMismatch, ValidationError
from dodopayments.core.marshal import deserialize, format_path, serialize, to_jsonable


class Widget(SdkModel):
    name: str
    description: str | None = Field(default=None)
    tax_category: OpenEnum[TaxCategory]


class TestSerialize:
    """Model -> JSON structure."""

    def test_widget_example(self):
        """Unset optionals are left out of the JSON."""
        widget = Widget(name="Widget", tax_category="saas")

        assert serialize(widget) == {"name": "Widget", "tax_category": "saas"}
        assert widget.to_json() == '{"name":"Widget","tax_category":"saas"}'

    def test_widget_example_roundtrip_keeps_description_unset(self):
        widget = deserialize({"name": "Widget", "tax_category": "saas"}, Widget)

        assert widget.name == "Widget"
        assert widget.tax_category is TaxCategory.SAAS
        assert not widget.is_set("description")
        assert widget == Widget(name="Widget", tax_category=TaxCategory.SAAS)

    def test_explicit_none_is_emitted_as_null(self):
        widget = Widget(name="Widget", tax_category="saas", description=None)

        assert serialize(widget) == {"name": "Widget", "description": None, "tax_category": "saas"}

    def test_omit_sentinel_means_unset(self):
        widget = Widget(name="Widget", tax_category="saas", description=OMIT)

        assert "description" not in serialize(widget)
        assert not widget.is_set("description")

    def test_key_order_follows_declaration(self):
        widget = Widget(tax_category="saas", description="d", name="Widget")

        assert list(serialize(widget)) == ["name", "description", "tax_category"]

    def test_discriminator_is_always_emitted(self):
        price = OneTimePrice(currency="USD", price=100, discount=0, purchasing_power_parity=False)

        assert serialize(price)["type"] == "one_time_price"

    def test_datetimes_are_rfc3339(self):
        payment = Payment.from_dict(payment_json())

        assert serialize(payment)["created_at"] == "2024-05-01T10:00:00Z"

    def test_missing_required_field_on_bypassed_model(self):
        """A model built without validation still refuses to serialize."""
        widget = Widget.model_construct(tax_category="saas")

        with pytest.raises(MissingField) as excinfo:
            serialize(widget)
        assert excinfo.value.path == "name"
        assert excinfo.value.model == "Widget"


class TestDeserialize:
    """JSON structure -> model."""

    def test_product_roundtrip(self):
        product = Product.from_dict(product_json(description=None))

        again = deserialize(serialize(product), Product)

        assert again == product
        assert again.model_fields_set == product.model_fields_set
        assert isinstance(again.price, OneTimePrice)
        assert again.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_discriminated_price_selects_branch(self):
        data = product_json(
            price={
                "type": "recurring_price",
                "currency": "EUR",
                "price": 900,
                "discount": 10,
                "purchasing_power_parity": True,
                "payment_frequency_count": 1,
                "payment_frequency_interval": "Month",
                "subscription_period_count": 12,
                "subscription_period_interval": "Month",
            }
        )

        product = Product.from_dict(data)

        assert isinstance(product.price, RecurringPrice)
        assert product.price.currency is Currency.EUR

    def test_unknown_keys_are_ignored(self):
        widget = deserialize({"name": "Widget", "tax_category": "saas", "color": "red"}, Widget)

        assert serialize(widget) == {"name": "Widget", "tax_category": "saas"}

    def test_unknown_enum_value_is_kept_as_string(self):
        widget = deserialize({"name": "Widget", "tax_category": "space_goods"}, Widget)

        assert widget.tax_category == "space_goods"
        assert not isinstance(widget.tax_category, TaxCategory)
        assert serialize(widget)["tax_category"] == "space_goods"

    def test_missing_required_field(self):
        with pytest.raises(MissingField) as excinfo:
            deserialize({"tax_category": "saas"}, Widget)

        assert excinfo.value.path == "name"
        assert excinfo.value.model == "Widget"

    def test_missing_nested_field_reports_dotted_path(self):
        data = payment_json()
        del data["customer"]["email"]

        with pytest.raises(MissingField) as excinfo:
            deserialize(data, Payment)

        assert excinfo.value.path == "customer.email"
        assert excinfo.value.model == "Payment"

    def test_missing_field_inside_tagged_union_skips_the_tag(self):
        data = product_json()
        del data["price"]["currency"]

        with pytest.raises(MissingField) as excinfo:
            deserialize(data, Product)

        assert excinfo.value.path == "price.currency"

    def test_wrong_shape_is_type_mismatch(self):
        with pytest.raises(TypeMismatch) as excinfo:
            deserialize({"name": ["not", "a", "string"], "tax_category": "saas"}, Widget)

        assert excinfo.value.path == "name"

    def test_array_where_object_expected(self):
        with pytest.raises(TypeMismatch):
            deserialize([{"name": "Widget"}], Widget)

    def test_list_of_models(self):
        widgets = deserialize(
            [{"name": "a", "tax_category": "saas"}, {"name": "b", "tax_category": "edtech"}],
            list[Widget],
        )

        assert [w.name for w in widgets] == ["a", "b"]

    def test_list_item_error_path_has_index(self):
        with pytest.raises(MissingField) as excinfo:
            deserialize([{"name": "a", "tax_category": "saas"}, {"tax_category": "saas"}], list[Widget])

        assert excinfo.value.path == "[1].name"

    def test_constraint_failure_is_plain_validation_error(self):
        with pytest.raises(ValidationError) as excinfo:
            OneTimePrice(currency="USD", price=-1, discount=0, purchasing_power_parity=False)

        assert type(excinfo.value) is ValidationError
        assert excinfo.value.path == "price"
        assert excinfo.value.model == "OneTimePrice"


class TestModelHelpers:
    """Copy-on-write helpers and params parsing."""

    def test_with_fields_returns_a_copy(self):
        widget = Widget(name="Widget", tax_category="saas")

        changed = widget.with_fields(description="Blue")

        assert changed.description == "Blue"
        assert widget.description is None
        assert not widget.is_set("description")

    def test_with_fields_omit_unsets(self):
        widget = Widget(name="Widget", tax_category="saas", description="Blue")

        assert not widget.with_fields(description=OMIT).is_set("description")

    def test_with_fields_rejects_unknown_names(self):
        widget = Widget(name="Widget", tax_category="saas")

        with pytest.raises(ValidationError) as excinfo:
            widget.with_fields(colour="red")
        assert excinfo.value.path == "colour"

    def test_models_are_frozen(self):
        widget = Widget(name="Widget", tax_category="saas")

        with pytest.raises(PydanticValidationError):
            widget.name = "Other"  # type: ignore[misc]

    def test_params_reject_unknown_keys(self):
        price = {"type": "one_time_price", "currency": "USD", "price": 1, "discount": 0, "purchasing_power_parity": False}

        with pytest.raises(ValidationError) as excinfo:
            ProductCreateParams.parse({"tax_category": "saas", "price": price, "colour": "red"})

        assert type(excinfo.value) is ValidationError
        assert excinfo.value.path == "colour"

    def test_params_mapping_and_typed_resolve_to_same_instance(self):
        price = OneTimePrice(currency="USD", price=100, discount=0, purchasing_power_parity=False)

        typed = ProductCreateParams.parse(ProductCreateParams(price=price, tax_category="saas"), name="W")
        raw = ProductCreateParams.parse({"price": serialize(price), "tax_category": "saas", "name": "W"})

        assert typed.split() == raw.split()


class TestHelpers:
    def test_format_path(self):
        assert format_path(("items", 0, "price")) == "items[0].price"
        assert format_path(("tax_category", "str")) == "tax_category"

    def test_to_jsonable_drops_omit_and_keeps_none(self):
        value = {"a": OMIT, "b": None, "c": TaxCategory.SAAS, "d": (1, 2)}

        assert to_jsonable(value) == {"b": None, "c": "saas", "d": [1, 2]}

    def test_to_jsonable_datetime(self):
        when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        assert to_jsonable({"at": when}) == {"at": "2024-01-02T03:04:05Z"}


BILLING = {"city": "Madrid", "country": "ES", "state": "MD", "street": "Gran Via 1", "zipcode": "28013"}
CART = [{"product_id": "pdt_1", "quantity": 1}]


class TestUnionFields:
    """Plain unions of models try every branch, also when built from code."""

    def test_existing_customer_branch(self):
        params = PaymentCreateParams.parse({"billing": BILLING, "customer": {"customer_id": "cus_1"}, "product_cart": CART})

        assert isinstance(params.customer, AttachExistingCustomer)
        assert params.split().body["customer"] == {"customer_id": "cus_1"}

    def test_new_customer_branch(self):
        params = PaymentCreateParams(billing=BILLING, customer={"email": "ana@example.com", "name": "Ana"}, product_cart=CART)

        assert isinstance(params.customer, NewCustomer)
        assert params.customer.email == "ana@example.com"

    def test_no_branch_matches(self):
        with pytest.raises(MissingField) as excinfo:
            PaymentCreateParams.parse({"billing": BILLING, "customer": {}, "product_cart": CART})

        assert excinfo.value.path in {"customer.customer_id", "customer.email"}
        assert excinfo.value.model == "PaymentCreateParams"

    def test_nested_error_keeps_full_path_when_built_from_code(self):
        billing = {key: value for key, value in BILLING.items() if key != "zipcode"}

        with pytest.raises(MissingField) as excinfo:
            PaymentCreateParams(billing=billing, customer={"customer_id": "cus_1"}, product_cart=CART)

        assert excinfo.value.path == "billing.zipcode"
        assert excinfo.value.model == "PaymentCreateParams"
