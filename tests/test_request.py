"""Tests for the request builder."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from dodopayments.core.domain.enums import TaxCategory
from dodopayments.core.domain.params import ProductListParams, ProductUpdateParams, WebhookListParams
from dodopayments.core.errors import ValidationError
from dodopayments.core.request import (
    CancelToken,
    RequestOptions,
    RequestSpec,
    build_request,
    encode_query,
    render_path,
)

BASE = "https://api.test"


class TestPaths:
    def test_literal_path(self):
        assert render_path("products") == "products"

    def test_arguments_are_fully_escaped(self):
        assert render_path(("products/%s", "a/b c?")) == "products/a%2Fb%20c%3F"

    def test_multiple_arguments(self):
        assert render_path(("customers/%s/wallets/%s", "cus_1", "USD")) == "customers/cus_1/wallets/USD"

    def test_argument_count_mismatch(self):
        with pytest.raises(ValidationError):
            render_path(("products/%s/%s", "only-one"))


class TestQuery:
    def test_none_is_dropped_and_bools_are_lowercase(self):
        pairs = encode_query({"archived": True, "recurring": False, "brand_id": None})

        assert pairs == [("archived", "true"), ("recurring", "false")]

    def test_lists_repeat_the_key(self):
        assert encode_query({"status": ["succeeded", "failed"]}) == [("status", "succeeded"), ("status", "failed")]

    def test_enums_and_datetimes(self):
        when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        pairs = encode_query({"tax_category": TaxCategory.SAAS, "created_at_gte": when})

        assert pairs == [("tax_category", "saas"), ("created_at_gte", "2024-01-02T03:04:05Z")]


class TestBuildRequest:
    """End-to-end construction of the final request."""

    def test_get_with_query(self):
        spec = RequestSpec("get", "products", query={"page_size": 5, "archived": True, "brand_id": None})

        request = build_request(spec, base_url=BASE + "/")

        assert request.method == "GET"
        assert request.url == "https://api.test/products"
        assert request.params == (("page_size", "5"), ("archived", "true"))
        assert request.full_url == "https://api.test/products?page_size=5&archived=true"
        assert request.content is None
        assert "Content-Type" not in request.headers

    def test_post_body_is_compact_json(self):
        spec = RequestSpec("POST", "products", body={"name": "Widget", "tax_category": TaxCategory.SAAS})

        request = build_request(spec, base_url=BASE)

        assert request.content == b'{"name":"Widget","tax_category":"saas"}'
        assert request.headers["Content-Type"] == "application/json"

    def test_header_order_and_idempotency_key(self):
        spec = RequestSpec("POST", "payments", body={})
        options = RequestOptions(idempotency_key="idem-1")

        request = build_request(spec, base_url=BASE, options=options, default_headers={"User-Agent": "ua/1"})

        assert list(request.headers) == ["Accept", "User-Agent", "Content-Type", "Idempotency-Key"]
        assert request.headers["Idempotency-Key"] == "idem-1"

    def test_extra_headers_override_and_remove(self):
        spec = RequestSpec("GET", "products")
        options = RequestOptions(extra_headers={"accept": "text/plain", "User-Agent": None, "X-Trace": "t"})

        request = build_request(spec, base_url=BASE, options=options, default_headers={"User-Agent": "ua/1"})

        assert request.headers == {"accept": "text/plain", "X-Trace": "t"}

    def test_extra_query_and_extra_body_are_merged_last(self):
        spec = RequestSpec("POST", "refunds", query={"a": "1"}, body={"payment_id": "pay_1", "reason": "x"})
        options = RequestOptions(extra_query={"a": "2", "b": "3"}, extra_body={"reason": "y", "debug": True})

        request = build_request(spec, base_url=BASE, options=options)

        assert request.params == (("a", "2"), ("b", "3"))
        assert json.loads(request.content) == {"payment_id": "pay_1", "reason": "y", "debug": True}

    def test_extra_body_without_body_creates_one(self):
        request = build_request(RequestSpec("POST", "x"), base_url=BASE, options=RequestOptions(extra_body={"k": 1}))

        assert request.content == b'{"k":1}'

    def test_reserved_characters_in_query_are_encoded_by_httpx(self):
        spec = RequestSpec("GET", "customers", query={"email": "a+b@x.com", "name": "Ana & Bo", "tags": ["x y", "z"]})

        request = build_request(spec, base_url=BASE)
        sent = httpx.URL(request.full_url)

        assert sent.path == "/customers"
        assert sent.params["email"] == "a+b@x.com"
        assert sent.params["name"] == "Ana & Bo"
        assert sent.params.get_list("tags") == ["x y", "z"]

    def test_url_without_query_is_unchanged(self):
        request = build_request(RequestSpec("GET", "products"), base_url=BASE)

        assert request.params == ()
        assert request.full_url == "https://api.test/products"

    def test_idempotency(self):
        assert build_request(RequestSpec("GET", "p"), base_url=BASE).idempotent
        assert build_request(RequestSpec("DELETE", "p"), base_url=BASE).idempotent
        assert not build_request(RequestSpec("POST", "p", body={}), base_url=BASE).idempotent
        keyed = build_request(RequestSpec("POST", "p", body={}), base_url=BASE, options=RequestOptions(idempotency_key="k"))
        assert keyed.idempotent


class TestRequestOptions:
    def test_parse_variants(self):
        assert RequestOptions.parse(None) == RequestOptions()
        options = RequestOptions(max_retries=1)
        assert RequestOptions.parse(options) is options
        assert RequestOptions.parse({"timeout": 3.0}).timeout == 3.0

    def test_parse_rejects_unknown_keys(self):
        with pytest.raises(ValidationError) as excinfo:
            RequestOptions.parse({"retries": 3})
        assert excinfo.value.path == "retries"

    def test_cancel_token(self):
        token = CancelToken()
        assert not token.cancelled
        token.cancel()
        assert token.cancelled
        assert token.wait(10) is True

    def test_on_cancel_callbacks(self):
        token = CancelToken()
        calls = []
        token.on_cancel(lambda: calls.append("a"))
        unregister = token.on_cancel(lambda: calls.append("b"))
        unregister()

        token.cancel()
        token.cancel()

        assert calls == ["a"]

    def test_on_cancel_after_cancel_runs_immediately(self):
        token = CancelToken()
        token.cancel()
        calls = []

        token.on_cancel(lambda: calls.append("late"))

        assert calls == ["late"]


class TestParamsSplit:
    """Params objects split themselves into path, query and body."""

    def test_update_params(self):
        parts = ProductUpdateParams(id="pdt_1", name="New", description=None).split()

        assert parts.path == ("pdt_1",)
        assert parts.query == {}
        assert parts.body == {"name": "New", "description": None}

    def test_list_params_have_no_body(self):
        parts = ProductListParams(page_size=5, archived=True).split()

        assert parts.query == {"page_size": 5, "archived": True}
        assert parts.body is None

    def test_cursor_params(self):
        parts = WebhookListParams(limit=20).split()

        assert parts.query == {"limit": 20}

    def test_page_size_is_bounded(self):
        with pytest.raises(ValidationError):
            ProductListParams(page_size=0)
