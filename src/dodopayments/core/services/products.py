"""Productos: alta, consulta, edición, listado y archivado."""

from __future__ import annotations

from typing import Any, Mapping

from dodopayments.core.domain.models import Product, ProductListItem
from dodopayments.core.domain.params import ProductCreateParams, ProductListParams, ProductUpdateParams
from dodopayments.core.pagination import PageNumberPage
from dodopayments.core.services.base import BaseService, Options


class ProductsService(BaseService):
    def create(
        self,
        params: ProductCreateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> Product:
        parts = ProductCreateParams.parse(params, **fields).split()
        return self._request("POST", "products", body=parts.body, options=request_options, cast_to=Product)

    def retrieve(self, id: str, *, request_options: Options = None) -> Product:
        return self._request("GET", ("products/%s", id), options=request_options, cast_to=Product)

    def update(
        self,
        id: str,
        params: ProductUpdateParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> None:
        """Actualiza un producto; la API responde sin contenido."""

        parts = ProductUpdateParams.parse(params, id=id, **fields).split()
        return self._request("PATCH", ("products/%s", *parts.path), body=parts.body, options=request_options)

    def list(
        self,
        params: ProductListParams | Mapping[str, Any] | None = None,
        /,
        *,
        request_options: Options = None,
        **fields: Any,
    ) -> PageNumberPage[ProductListItem]:
        parts = ProductListParams.parse(params, **fields).split()
        return self._request(
            "GET",
            "products",
            query=parts.query,
            options=request_options,
            cast_to=ProductListItem,
            page=PageNumberPage,
        )

    def archive(self, id: str, *, request_options: Options = None) -> None:
        return self._request("DELETE", ("products/%s", id), options=request_options)

    def unarchive(self, id: str, *, request_options: Options = None) -> None:
        return self._request("POST", ("products/%s/unarchive", id), options=request_options)
