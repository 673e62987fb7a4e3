"""Reembolsos."""

from __future__ import annotations

from typing import Any, Mapping

from dodopayments.core.domain.models import Refund
from dodopayments.core.domain.params import RefundCreateParams, RefundListParams
from dodopayments.core.pagination import PageNumberPage
from dodopayments.core.services.base import BaseService, Options


class RefundsService(BaseService):
    def create(
        self,
        params: RefundCreateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> Refund:
        parts = RefundCreateParams.parse(params, **fields).split()
        return self._request("POST", "refunds", body=parts.body, options=request_options, cast_to=Refund)

    def retrieve(self, refund_id: str, *, request_options: Options = None) -> Refund:
        return self._request("GET", ("refunds/%s", refund_id), options=request_options, cast_to=Refund)

    def list(
        self,
        params: RefundListParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> PageNumberPage[Refund]:
        parts = RefundListParams.parse(params, **fields).split()
        return self._request(
            "GET",
            "refunds",
            query=parts.query,
            options=request_options,
            cast_to=Refund,
            page=PageNumberPage,
        )
