"""Pagos.

`create` admite `request_options={"idempotency_key": ...}` para que un
reintento no duplique el cobro.
"""

from __future__ import annotations

from typing import Any, Mapping

from dodopayments.core.domain.models import Payment, PaymentCreateResponse
from dodopayments.core.domain.params import PaymentCreateParams, PaymentListParams
from dodopayments.core.pagination import PageNumberPage
from dodopayments.core.services.base import BaseService, Options


class PaymentsService(BaseService):
    def create(
        self,
        params: PaymentCreateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> PaymentCreateResponse:
        parts = PaymentCreateParams.parse(params, **fields).split()
        return self._request(
            "POST",
            "payments",
            body=parts.body,
            options=request_options,
            cast_to=PaymentCreateResponse,
        )

    def retrieve(self, payment_id: str, *, request_options: Options = None) -> Payment:
        return self._request("GET", ("payments/%s", payment_id), options=request_options, cast_to=Payment)

    def list(
        self,
        params: PaymentListParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> PageNumberPage[Payment]:
        parts = PaymentListParams.parse(params, **fields).split()
        return self._request(
            "GET",
            "payments",
            query=parts.query,
            options=request_options,
            cast_to=Payment,
            page=PageNumberPage,
        )
