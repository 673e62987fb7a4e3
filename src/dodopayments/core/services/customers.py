"""Clientes (customers)."""

from __future__ import annotations

from typing import Any, Mapping

from dodopayments.core.domain.models import Customer
from dodopayments.core.domain.params import CustomerCreateParams, CustomerListParams, CustomerUpdateParams
from dodopayments.core.pagination import PageNumberPage
from dodopayments.core.services.base import BaseService, Options


class CustomersService(BaseService):
    def create(
        self,
        params: CustomerCreateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> Customer:
        parts = CustomerCreateParams.parse(params, **fields).split()
        return self._request("POST", "customers", body=parts.body, options=request_options, cast_to=Customer)

    def retrieve(self, customer_id: str, *, request_options: Options = None) -> Customer:
        return self._request("GET", ("customers/%s", customer_id), options=request_options, cast_to=Customer)

    def update(
        self,
        customer_id: str,
        params: CustomerUpdateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> Customer:
        parts = CustomerUpdateParams.parse(params, customer_id=customer_id, **fields).split()
        return self._request(
            "PATCH",
            ("customers/%s", *parts.path),
            body=parts.body,
            options=request_options,
            cast_to=Customer,
        )

    def list(
        self,
        params: CustomerListParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> PageNumberPage[Customer]:
        parts = CustomerListParams.parse(params, **fields).split()
        return self._request(
            "GET",
            "customers",
            query=parts.query,
            options=request_options,
            cast_to=Customer,
            page=PageNumberPage,
        )
