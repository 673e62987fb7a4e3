"""Unmarshaller de respuestas.

Clasifica una respuesta HTTP cruda:
- 2xx sin tipo esperado: sin contenido (el cuerpo se ignora).
- 2xx con tipo esperado: JSON -> modelo; si no encaja, `DecodeError`.
- resto: envelope de error -> subclase de `APIStatusError` según el status.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Generic, TypeVar

import httpx

from dodopayments.core.errors import APIStatusError, DecodeError, ValidationError, status_error_class
from dodopayments.core.marshal import deserialize, type_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _as_details(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def error_from_response(response: httpx.Response) -> APIStatusError:
    """Construye el error tipado a partir de una respuesta no-2xx (best effort)."""

    text = response.text
    data: Any = None
    if text:
        try:
            data = json.loads(text)
        except ValueError:
            data = None

    message: str | None = None
    code: str | None = None
    details: list[Any] = []
    if isinstance(data, dict):
        raw_message = data.get("message") or data.get("error")
        if isinstance(raw_message, str):
            message = raw_message
        elif isinstance(raw_message, dict):
            message = raw_message.get("message") if isinstance(raw_message.get("message"), str) else None
        raw_code = data.get("code") or data.get("error_code")
        code = str(raw_code) if raw_code is not None else None
        details = _as_details(data.get("detail", data.get("errors")))

    if not message:
        message = text.strip() or response.reason_phrase or "unknown error"

    cls = status_error_class(response.status_code)
    return cls(
        message,
        status_code=response.status_code,
        code=code,
        details=details,
        body=text,
        headers=dict(response.headers),
    )


def raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    raise error_from_response(response)


def decode_json(response: httpx.Response) -> Any:
    try:
        return json.loads(response.content)
    except ValueError as exc:
        raise DecodeError(
            f"HTTP {response.status_code}: response body is not valid JSON",
            status_code=response.status_code,
            body=response.text,
        ) from exc


def decode_as(data: Any, cast_to: Any, *, response: httpx.Response) -> Any:
    try:
        return deserialize(data, cast_to)
    except ValidationError as exc:
        logger.debug("response body does not match %s at %r", type_name(cast_to), exc.path)
        raise DecodeError(
            f"HTTP {response.status_code}: response does not match {type_name(cast_to)}: {exc}",
            status_code=response.status_code,
            body=response.text,
        ) from exc


def parse_response(response: httpx.Response, cast_to: Any = None) -> Any:
    """Convierte la respuesta en el valor tipado (o `None`) o lanza el error que toca."""

    raise_for_status(response)
    if cast_to is None:
        return None
    return decode_as(decode_json(response), cast_to, response=response)


class ApiResponse(Generic[T]):
    """Respuesta cruda con acceso perezoso al valor tipado.

    `parse()` se evalúa una sola vez; los errores de status/decodificación
    salen en ese momento, no al recibir la respuesta.
    """

    def __init__(self, http_response: httpx.Response, *, parser: Any) -> None:
        self.http_response = http_response
        self._parser = parser
        self._parsed: T | None = None
        self._is_parsed = False

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.http_response.headers

    @property
    def text(self) -> str:
        return self.http_response.text

    @property
    def content(self) -> bytes:
        return self.http_response.content

    def json(self) -> Any:
        return decode_json(self.http_response)

    def parse(self) -> T:
        if not self._is_parsed:
            self._parsed = self._parser(self.http_response)
            self._is_parsed = True
        return self._parsed  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"<ApiResponse [{self.status_code}] {self.http_response.request.method} {self.http_response.request.url}>"
