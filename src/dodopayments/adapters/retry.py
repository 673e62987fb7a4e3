"""Política de reintentos del transporte.

Decide *si* reintentar y *cuánto* esperar; no duerme ni hace I/O.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Mapping

from dodopayments.core.config import ClientSettings

RETRYABLE_STATUSES = frozenset({408, 429})
RETRY_AFTER_STATUSES = frozenset({429, 503})


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        value = headers.get(name.title())
    return value


def parse_retry_after(
    headers: Mapping[str, str],
    *,
    now: Callable[[], datetime] | None = None,
) -> float | None:
    """Segundos que pide el servidor (`retry-after-ms`, `Retry-After` en segundos o fecha HTTP)."""

    millis = _header(headers, "retry-after-ms")
    if millis:
        try:
            return max(0.0, float(millis) / 1000.0)
        except ValueError:
            pass

    value = _header(headers, "retry-after")
    if not value:
        return None
    value = value.strip()
    try:
        return max(0.0, float(value))
    except ValueError:
        pass

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    current = (now or (lambda: datetime.now(timezone.utc)))()
    return max(0.0, (when - current).total_seconds())


def should_retry_flag(headers: Mapping[str, str]) -> bool | None:
    """Lee `x-should-retry`; `None` si el servidor no opina."""

    value = _header(headers, "x-should-retry")
    if value is None:
        return None
    value = value.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    return None


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 2
    initial_delay: float = 0.5
    max_delay: float = 8.0
    jitter: float = 0.25
    retry_after_cap: float = 60.0

    @classmethod
    def from_settings(cls, settings: ClientSettings, *, max_retries: int | None = None) -> RetryPolicy:
        return cls(
            max_retries=settings.max_retries if max_retries is None else max_retries,
            initial_delay=settings.backoff_initial_seconds,
            max_delay=settings.backoff_max_seconds,
            jitter=settings.backoff_jitter_seconds,
            retry_after_cap=settings.retry_after_cap_seconds,
        )

    def can_retry(self, attempt: int) -> bool:
        """`attempt` empieza en 0 (el primer intento)."""

        return attempt < self.max_retries

    def should_retry_status(self, status_code: int, headers: Mapping[str, str], *, idempotent: bool) -> bool:
        flag = should_retry_flag(headers)
        if flag is not None:
            return flag
        if idempotent:
            return status_code in RETRYABLE_STATUSES or status_code >= 500
        # Sin idempotencia solo se reintenta si el servidor pide esperar.
        return status_code in RETRY_AFTER_STATUSES and parse_retry_after(headers) is not None

    def backoff(self, attempt: int, *, uniform: Callable[[float, float], float] = random.uniform) -> float:
        base = min(self.initial_delay * (2**attempt), self.max_delay)
        if self.jitter <= 0:
            return base
        return base + uniform(0.0, self.jitter)

    def delay(
        self,
        attempt: int,
        *,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
        uniform: Callable[[float, float], float] = random.uniform,
    ) -> float:
        if status_code in RETRY_AFTER_STATUSES and headers is not None:
            hinted = parse_retry_after(headers)
            if hinted is not None:
                return min(hinted, self.retry_after_cap)
        return self.backoff(attempt, uniform=uniform)
