"""Cliente Python para la API de Dodo Payments."""

from dodopayments._version import __version__
from dodopayments.client import DodoPayments
from dodopayments.core.config import ClientSettings, Environment
from dodopayments.core.domain.omit import OMIT, Omit
from dodopayments.core.errors import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    Cancelled,
    ConflictError,
    DecodeError,
    DodoPaymentsError,
    InternalServerError,
    MissingField,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    TransportError,
    TypeMismatch,
    UnprocessableEntityError,
    ValidationError,
)
from dodopayments.core.pagination import CursorPage, PageIterator, PageNumberPage
from dodopayments.core.request import CancelToken, RequestOptions
from dodopayments.core.response import ApiResponse

__all__ = [
    "__version__",
    "DodoPayments",
    "ClientSettings",
    "Environment",
    "OMIT",
    "Omit",
    "RequestOptions",
    "CancelToken",
    "ApiResponse",
    "PageNumberPage",
    "CursorPage",
    "PageIterator",
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
]
