"""Construcción de peticiones HTTP a partir de una operación lógica.

Entrada: método, plantilla de ruta + argumentos, query, cuerpo y opciones.
Salida: `FinalRequest` (URL final, método, headers y cuerpo ya serializado).

Convenciones fijas:
- Las plantillas usan `%s` posicional; cada argumento se escapa completo
  (`/` incluido).
- Las listas en la query se emiten como claves repetidas (`a=1&a=2`).
- Los valores `None` no viajan en la query.
- `extra_headers` gana sobre todo; un valor `None` elimina el header.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Mapping, Sequence, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from dodopayments.core.domain.omit import Omit
from dodopayments.core.errors import ValidationError
from dodopayments.core.marshal import serialize, to_jsonable

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})
IDEMPOTENCY_HEADER = "Idempotency-Key"

PathSpec = Union[str, Sequence[Any]]


class CancelToken:
    """Señal de cancelación compartida entre quien llama y el transporte."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Registra `callback` para cuando se cancele; devuelve la función que lo desregistra.

        Si el token ya está cancelado, `callback` se ejecuta en el acto.
        """

        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._discard(callback)
        callback()
        return lambda: None

    def _discard(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Espera hasta `timeout` segundos; devuelve `True` si se canceló antes."""

        return self._event.wait(timeout)


@dataclass(frozen=True)
class RequestOptions:
    """Ajustes por llamada que pisan la configuración del cliente."""

    timeout: float | None = None
    max_retries: int | None = None
    extra_headers: Mapping[str, str | None] = field(default_factory=dict)
    extra_query: Mapping[str, Any] = field(default_factory=dict)
    extra_body: Mapping[str, Any] = field(default_factory=dict)
    idempotency_key: str | None = None
    cancel: CancelToken | None = None

    @classmethod
    def parse(cls, value: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            known = {f.name for f in fields(cls)}
            unknown = sorted(set(value) - known)
            if unknown:
                raise ValidationError(
                    f"RequestOptions: unknown option(s) {', '.join(unknown)}",
                    path=unknown[0],
                    model="RequestOptions",
                )
            return cls(**value)
        raise ValidationError(
            f"RequestOptions: expected a mapping or RequestOptions, got {type(value).__name__}",
            model="RequestOptions",
        )


@dataclass(frozen=True)
class RequestSpec:
    """Operación lógica (antes de resolver URL y headers); sirve para re-emitir páginas."""

    method: str
    path: PathSpec
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None

    def with_query(self, **changes: Any) -> RequestSpec:
        return replace(self, query={**self.query, **changes})


@dataclass(frozen=True)
class FinalRequest:
    method: str
    url: str
    headers: dict[str, str]
    content: bytes | None = None
    params: tuple[tuple[str, str], ...] = ()

    @property
    def full_url(self) -> str:
        """URL con la query codificada por httpx, tal como sale a la red."""

        if not self.params:
            return self.url
        return str(httpx.URL(self.url, params=list(self.params)))

    @property
    def idempotent(self) -> bool:
        """Seguro de reintentar: método idempotente o marcado con clave de idempotencia."""

        if self.method in IDEMPOTENT_METHODS:
            return True
        return any(name.lower() == IDEMPOTENCY_HEADER.lower() for name in self.headers)


def render_path(path: PathSpec) -> str:
    """Sustituye los `%s` de la plantilla por los argumentos escapados."""

    if isinstance(path, str):
        return path
    template, *args = path
    escaped = tuple(quote(str(_scalar(arg)), safe="") for arg in args)
    try:
        return str(template) % escaped
    except TypeError as exc:
        raise ValidationError(
            f"path template {template!r} expects a different number of arguments ({len(args)} given)",
            model="RequestSpec",
        ) from exc


def _scalar(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return to_jsonable(value)
    return value


def encode_query(query: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Aplana la query en pares `(clave, valor)`; las listas repiten la clave."""

    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        if value is None or isinstance(value, Omit):
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            for item in value:
                if item is None:
                    continue
                pairs.append((key, str(_scalar(item))))
            continue
        pairs.append((key, str(_scalar(value))))
    return pairs


def encode_body(body: Any, extra_body: Mapping[str, Any]) -> bytes | None:
    if body is None and not extra_body:
        return None
    if isinstance(body, BaseModel):
        payload: Any = serialize(body)
    else:
        payload = to_jsonable(body) if body is not None else {}
    if extra_body:
        if not isinstance(payload, dict):
            raise ValidationError("extra_body requires a JSON object body", model="RequestOptions")
        payload = {**payload, **to_jsonable(extra_body)}
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def build_request(
    spec: RequestSpec,
    *,
    base_url: str,
    options: RequestOptions | None = None,
    default_headers: Mapping[str, str] | None = None,
) -> FinalRequest:
    """Resuelve un `RequestSpec` a la petición que viaja por la red."""

    options = options or RequestOptions()
    method = spec.method.upper()

    url = f"{base_url.rstrip('/')}/{render_path(spec.path).lstrip('/')}"
    params = tuple(encode_query({**spec.query, **options.extra_query}))

    content = encode_body(spec.body, options.extra_body)

    headers: dict[str, str] = {"Accept": "application/json"}
    headers.update(default_headers or {})
    if content is not None:
        headers["Content-Type"] = "application/json"
    if options.idempotency_key:
        headers[IDEMPOTENCY_HEADER] = options.idempotency_key
    for name, value in options.extra_headers.items():
        for existing in [key for key in headers if key.lower() == name.lower()]:
            del headers[existing]
        if value is not None:
            headers[name] = value

    return FinalRequest(method=method, url=url, headers=headers, content=content, params=params)
