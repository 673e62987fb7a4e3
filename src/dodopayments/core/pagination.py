"""Paginación: recorre un listado multi-página como una sola secuencia.

Dos estilos:
- `PageNumberPage`: query `page_number`/`page_size`, items en `items`. Se
  considera agotado cuando una página llega vacía o con menos elementos que
  el tamaño pedido (heurística: una última página llena cuesta una petición
  extra que vuelve vacía).
- `CursorPage`: query `iterator`/`limit`, items en `data`. Se agota cuando la
  respuesta no trae un token siguiente (o trae `done: true`).

Las páginas son inmutables; avanzar crea una página nueva. La secuencia es
perezosa, solo hacia delante y no se puede reiniciar.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, ClassVar, Generic, Iterator, Mapping, Protocol, TypeVar

import httpx

from dodopayments.core.errors import DecodeError
from dodopayments.core.request import RequestOptions, RequestSpec
from dodopayments.core.response import decode_as, decode_json

logger = logging.getLogger(__name__)

T = TypeVar("T")
PageT = TypeVar("PageT", bound="BasePage[Any]")

DEFAULT_PAGE_SIZE = 10
FIRST_PAGE_NUMBER = 0


class PageFetcher(Protocol):
    """Lo mínimo que una página necesita del cliente para pedir la siguiente."""

    def request_page(
        self,
        spec: RequestSpec,
        *,
        page: type[PageT],
        item_type: Any,
        options: RequestOptions | None = None,
    ) -> PageT:
        ...


class BasePage(Generic[T]):
    items_key: ClassVar[str] = "items"

    def __init__(
        self,
        *,
        items: list[T],
        raw: Mapping[str, Any],
        spec: RequestSpec,
        options: RequestOptions,
        item_type: Any,
        fetcher: PageFetcher | None,
    ) -> None:
        self.items = items
        self.raw = dict(raw)
        self.spec = spec
        self.options = options
        self.item_type = item_type
        self._fetcher = fetcher

    @classmethod
    def from_response(
        cls: type[PageT],
        response: httpx.Response,
        *,
        spec: RequestSpec,
        options: RequestOptions,
        item_type: Any,
        fetcher: PageFetcher | None = None,
    ) -> PageT:
        data = decode_json(response)
        if not isinstance(data, dict):
            raise DecodeError(
                f"HTTP {response.status_code}: expected a JSON object for {cls.__name__}",
                status_code=response.status_code,
                body=response.text,
            )
        raw_items = data.get(cls.items_key)
        items = decode_as(raw_items or [], list[item_type], response=response)
        return cls(items=items, raw=data, spec=spec, options=options, item_type=item_type, fetcher=fetcher)

    def next_page_request(self) -> RequestSpec | None:
        raise NotImplementedError

    def has_next_page(self) -> bool:
        return self.next_page_request() is not None

    def get_next_page(self: PageT) -> PageT:
        spec = self.next_page_request()
        if spec is None:
            raise RuntimeError("no next page: check has_next_page() first")
        if self._fetcher is None:
            raise RuntimeError(f"{type(self).__name__} was built without a client; cannot fetch more pages")
        return self._fetcher.request_page(spec, page=type(self), item_type=self.item_type, options=self.options)

    def iter_pages(self: PageT) -> Iterator[PageT]:
        page = self
        yield page
        while page.has_next_page():
            page = page.get_next_page()
            yield page

    def __iter__(self) -> Iterator[T]:
        for page in self.iter_pages():
            yield from page.items

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} items={len(self.items)} has_next={self.has_next_page()}>"


class PageNumberPage(BasePage[T]):
    items_key: ClassVar[str] = "items"

    @property
    def page_number(self) -> int:
        value = self.spec.query.get("page_number")
        return FIRST_PAGE_NUMBER if value is None else int(value)

    @property
    def page_size(self) -> int:
        value = self.spec.query.get("page_size")
        return DEFAULT_PAGE_SIZE if value is None else int(value)

    def next_page_request(self) -> RequestSpec | None:
        if not self.items or len(self.items) < self.page_size:
            return None
        return self.spec.with_query(page_number=self.page_number + 1)


class CursorPage(BasePage[T]):
    items_key: ClassVar[str] = "data"

    @property
    def next_iterator(self) -> str | None:
        token = self.raw.get("next_iterator") or self.raw.get("iterator")
        return str(token) if token else None

    @property
    def done(self) -> bool:
        return self.raw.get("done") is True

    def next_page_request(self) -> RequestSpec | None:
        if self.done:
            return None
        token = self.next_iterator
        if token is None or token == self.spec.query.get("iterator"):
            return None
        return self.spec.with_query(iterator=token)


class PageState(str, enum.Enum):
    HAS_CURRENT_PAGE = "has_current_page"
    EXHAUSTED = "exhausted"


class PageIterator(Generic[T]):
    """Máquina de estados explícita sobre un listado paginado.

    - `current_page_items()`: items de la página en memoria.
    - `advance()`: pide la siguiente página; devuelve `False` (y pasa a
      `EXHAUSTED`) cuando no hay más.

    Un error en `advance()` se propaga tal cual; tras un error no se debe
    seguir iterando. No es seguro compartirlo entre hilos.
    """

    def __init__(self, first_page: BasePage[T]) -> None:
        self._page = first_page
        self._state = PageState.HAS_CURRENT_PAGE
        self._started = False

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def page(self) -> BasePage[T]:
        return self._page

    def current_page_items(self) -> list[T]:
        if self._state is PageState.EXHAUSTED:
            return []
        return list(self._page.items)

    def advance(self) -> bool:
        if self._state is PageState.EXHAUSTED:
            return False
        if not self._page.has_next_page():
            self._state = PageState.EXHAUSTED
            return False
        self._page = self._page.get_next_page()
        logger.debug("advanced to next page (%d items)", len(self._page.items))
        return True

    def __iter__(self) -> Iterator[T]:
        if self._started:
            raise RuntimeError("PageIterator is forward-only and cannot be restarted")
        self._started = True
        return self._items()

    def _items(self) -> Iterator[T]:
        while self._state is PageState.HAS_CURRENT_PAGE:
            yield from self._page.items
            if not self.advance():
                return
