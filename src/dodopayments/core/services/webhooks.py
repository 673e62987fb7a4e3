"""Endpoints de webhook (listado paginado por cursor)."""

from __future__ import annotations

from typing import Any, Mapping

from dodopayments.core.domain.models import WebhookDetails, WebhookSecret
from dodopayments.core.domain.params import WebhookCreateParams, WebhookListParams, WebhookUpdateParams
from dodopayments.core.pagination import CursorPage
from dodopayments.core.services.base import BaseService, Options


class WebhooksService(BaseService):
    def create(
        self,
        params: WebhookCreateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> WebhookDetails:
        parts = WebhookCreateParams.parse(params, **fields).split()
        return self._request("POST", "webhooks", body=parts.body, options=request_options, cast_to=WebhookDetails)

    def retrieve(self, webhook_id: str, *, request_options: Options = None) -> WebhookDetails:
        return self._request("GET", ("webhooks/%s", webhook_id), options=request_options, cast_to=WebhookDetails)

    def update(
        self,
        webhook_id: str,
        params: WebhookUpdateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> WebhookDetails:
        parts = WebhookUpdateParams.parse(params, webhook_id=webhook_id, **fields).split()
        return self._request(
            "PATCH",
            ("webhooks/%s", *parts.path),
            body=parts.body,
            options=request_options,
            cast_to=WebhookDetails,
        )

    def list(
        self,
        params: WebhookListParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> CursorPage[WebhookDetails]:
        parts = WebhookListParams.parse(params, **fields).split()
        return self._request(
            "GET",
            "webhooks",
            query=parts.query,
            options=request_options,
            cast_to=WebhookDetails,
            page=CursorPage,
        )

    def delete(self, webhook_id: str, *, request_options: Options = None) -> None:
        return self._request("DELETE", ("webhooks/%s", webhook_id), options=request_options)

    def retrieve_secret(self, webhook_id: str, *, request_options: Options = None) -> WebhookSecret:
        return self._request(
            "GET",
            ("webhooks/%s/secret", webhook_id),
            options=request_options,
            cast_to=WebhookSecret,
        )
