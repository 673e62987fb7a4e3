"""Taxonomía de errores del cliente.

Reglas:
- Todo error que sale de una operación pública hereda de `DodoPaymentsError`.
- `ValidationError` es del lado cliente (antes de tocar la red o al leer una
  forma que no encaja); `MissingField` y `TypeMismatch` se distinguen para
  saber si un campo "nunca llegó" o "llegó con otra forma".
- `TransportError` cubre fallos de conexión; `APIStatusError` respuestas no-2xx;
  `DecodeError` un cuerpo 2xx que no respeta el contrato; `Cancelled` una
  llamada abortada por quien la hizo.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

__all__ = [
    "DodoPaymentsError",
    "ValidationError",
    "MissingField",
    "TypeMismatch",
    "TransportError",
    "APIConnectionError",
    "APITimeoutError",
    "APIStatusError",
    "APIError",
    "BadRequestError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableEntityError",
    "RateLimitError",
    "InternalServerError",
    "DecodeError",
    "Cancelled",
    "status_error_class",
]


class DodoPaymentsError(Exception):
    """Base de todos los errores de la librería."""


class ValidationError(DodoPaymentsError):
    """Un valor no cumple la forma o las restricciones declaradas del modelo."""

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        model: str | None = None,
        issues: Sequence[Mapping[str, Any]] = (),
    ) -> None:
        self.path = path
        self.model = model
        self.issues = list(issues)
        super().__init__(message)


class MissingField(ValidationError):
    """Falta un campo requerido."""


class TypeMismatch(ValidationError):
    """Un campo llegó con un tipo/forma distinto al declarado."""


class TransportError(DodoPaymentsError):
    """Fallo a nivel conexión (DNS, TCP, TLS, timeout)."""

    def __init__(self, message: str, *, method: str | None = None, url: str | None = None) -> None:
        self.method = method
        self.url = url
        super().__init__(message)


class APIConnectionError(TransportError):
    pass


class APITimeoutError(TransportError):
    pass


class APIStatusError(DodoPaymentsError):
    """La API respondió con un status fuera del rango 2xx."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        code: str | None = None,
        details: list[Any] | None = None,
        body: str = "",
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or []
        self.body = body
        self.headers = dict(headers or {})
        super().__init__(f"HTTP {status_code}: {message}")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


APIError = APIStatusError


class BadRequestError(APIStatusError):
    pass


class AuthenticationError(APIStatusError):
    pass


class PermissionDeniedError(APIStatusError):
    pass


class NotFoundError(APIStatusError):
    pass


class ConflictError(APIStatusError):
    pass


class UnprocessableEntityError(APIStatusError):
    pass


class RateLimitError(APIStatusError):
    pass


class InternalServerError(APIStatusError):
    pass


class DecodeError(DodoPaymentsError):
    """El cuerpo de una respuesta 2xx no se pudo interpretar con el tipo esperado."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class Cancelled(DodoPaymentsError):
    """La llamada se abortó antes de completarse."""


_STATUS_ERRORS: dict[int, type[APIStatusError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    429: RateLimitError,
}


def status_error_class(status_code: int) -> type[APIStatusError]:
    """Subclase de `APIStatusError` correspondiente a un status HTTP."""

    if status_code >= 500:
        return InternalServerError
    return _STATUS_ERRORS.get(status_code, APIStatusError)
