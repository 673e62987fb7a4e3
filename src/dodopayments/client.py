"""Cliente de la API de Dodo Payments.

Une las piezas del core: construir la petición -> enviarla (con reintentos)
-> interpretar la respuesta -> (opcionalmente) envolverla en una página.

El cliente no guarda estado mutable por llamada: se puede compartir entre
hilos. Las páginas que devuelve, no.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from dodopayments.adapters.http_client import build_http_client
from dodopayments.adapters.transport import HttpxTransport
from dodopayments.core.config import ClientSettings, Environment
from dodopayments.core.interfaces.transport import Transport
from dodopayments.core.logs import configure_logging
from dodopayments.core.pagination import BasePage, PageT
from dodopayments.core.request import PathSpec, RequestOptions, RequestSpec, build_request
from dodopayments.core.response import ApiResponse, parse_response, raise_for_status
from dodopayments.core.services import (
    CustomersService,
    PaymentsService,
    ProductsService,
    RefundsService,
    WebhooksService,
)


class DodoPayments:
    """Cliente síncrono.

    Los argumentos explícitos ganan sobre las variables `DODO_PAYMENTS_*`, y
    éstas sobre los defaults de `ClientSettings`.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        environment: Environment | str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        default_headers: Mapping[str, str] | None = None,
        settings: ClientSettings | None = None,
        http_client: httpx.Client | None = None,
        transport: Transport | None = None,
    ) -> None:
        overrides = _explicit(
            api_key=api_key,
            environment=environment,
            base_url=base_url,
            timeout_seconds=timeout,
            max_retries=max_retries,
        )
        if settings is None:
            settings = ClientSettings(**overrides)
        elif overrides:
            settings = ClientSettings(**{**settings.model_dump(), **overrides})
        self.settings = settings

        if settings.log:
            configure_logging(settings.log)

        self._custom_headers = dict(default_headers or {})
        self._default_headers = {"User-Agent": settings.user_agent, **self._custom_headers}
        self._owns_http_client = http_client is None and transport is None
        self._http_client = http_client
        if transport is None:
            self._http_client = http_client or build_http_client(settings)
            transport = HttpxTransport(settings, http_client=self._http_client)
        self._transport = transport

        self.products = ProductsService(self)
        self.customers = CustomersService(self)
        self.payments = PaymentsService(self)
        self.refunds = RefundsService(self)
        self.webhooks = WebhooksService(self)

    @property
    def base_url(self) -> str:
        return self.settings.resolved_base_url

    @property
    def transport(self) -> Transport:
        return self._transport

    def with_options(
        self,
        *,
        default_headers: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> DodoPayments:
        """Copia del cliente con otra configuración; reutiliza el pool de conexiones.

        Acepta los mismos nombres que el constructor (`api_key`, `timeout`, ...)
        y cualquier campo de `ClientSettings`.
        """

        renamed = {"timeout_seconds" if key == "timeout" else key: value for key, value in overrides.items()}
        settings = ClientSettings(**{**self.settings.model_dump(), **_explicit(**renamed)})
        headers = {**self._custom_headers, **dict(default_headers or {})}
        if self._http_client is not None:
            return DodoPayments(settings=settings, default_headers=headers, http_client=self._http_client)
        return DodoPayments(
            settings=settings,
            default_headers=headers,
            transport=self._transport.with_settings(settings),
        )

    def request(
        self,
        method: str,
        path: PathSpec,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
        cast_to: Any = None,
        page: type[BasePage[Any]] | None = None,
        raw: bool = False,
    ) -> Any:
        """Ejecuta una operación lógica.

        - `cast_to=None` y sin `page`: respuesta sin contenido (`None`).
        - `page`: `cast_to` es el tipo de cada item y se devuelve la primera página.
        - `raw=True`: se devuelve un `ApiResponse`; la interpretación se difiere
          a `ApiResponse.parse()`.
        """

        opts = RequestOptions.parse(options)
        spec = RequestSpec(method=method, path=path, query=dict(query or {}), body=body)
        response = self._send(spec, opts)
        if raw:
            return ApiResponse(response, parser=lambda r: self._process(r, spec, opts, cast_to, page))
        return self._process(response, spec, opts, cast_to, page)

    def request_page(
        self,
        spec: RequestSpec,
        *,
        page: type[PageT],
        item_type: Any,
        options: RequestOptions | None = None,
    ) -> PageT:
        opts = options or RequestOptions()
        response = self._send(spec, opts)
        return self._process(response, spec, opts, item_type, page)

    def _send(self, spec: RequestSpec, options: RequestOptions) -> httpx.Response:
        final = build_request(
            spec,
            base_url=self.base_url,
            options=options,
            default_headers=self._default_headers,
        )
        return self._transport.send(final, options)

    def _process(
        self,
        response: httpx.Response,
        spec: RequestSpec,
        options: RequestOptions,
        cast_to: Any,
        page: type[BasePage[Any]] | None,
    ) -> Any:
        if page is None:
            return parse_response(response, cast_to)
        raise_for_status(response)
        return page.from_response(response, spec=spec, options=options, item_type=cast_to, fetcher=self)

    def close(self) -> None:
        if self._owns_http_client and self._http_client is not None:
            self._http_client.close()

    def __enter__(self) -> DodoPayments:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<DodoPayments base_url={self.base_url!r}>"


def _explicit(**values: Any) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}
