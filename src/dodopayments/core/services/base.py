"""Base común de los servicios."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, TypeVar

from dodopayments.core.request import PathSpec, RequestOptions

if TYPE_CHECKING:
    from dodopayments.client import DodoPayments

S = TypeVar("S", bound="BaseService")

Options = RequestOptions | Mapping[str, Any] | None


class BaseService:
    def __init__(self, client: DodoPayments, *, raw: bool = False) -> None:
        self._client = client
        self._raw = raw

    @property
    def with_raw_response(self: S) -> S:
        """Mismo servicio, pero cada operación devuelve un `ApiResponse` sin interpretar."""

        return type(self)(self._client, raw=True)

    def _request(
        self,
        method: str,
        path: PathSpec,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        options: Options = None,
        cast_to: Any = None,
        page: Any = None,
    ) -> Any:
        return self._client.request(
            method,
            path,
            query=query,
            body=body,
            options=options,
            cast_to=cast_to,
            page=page,
            raw=self._raw,
        )
