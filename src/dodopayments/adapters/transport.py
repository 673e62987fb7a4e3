"""Transporte HTTP con reintentos y cancelación.

Responsabilidad:
- Aplicar la autenticación (`Authorization: Bearer ...`).
- Ejecutar la petición con httpx y reintentar fallos transitorios según
  `RetryPolicy`.
- Respetar el `CancelToken` de las opciones: antes de cada intento, durante
  la pausa entre intentos y con la petición en vuelo (el intercambio corre en
  un hilo aparte y se abandona al cancelar).
"""

from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import Future
from typing import Callable

import httpx

from dodopayments.adapters.http_client import build_http_client
from dodopayments.adapters.retry import RetryPolicy
from dodopayments.core.config import ClientSettings
from dodopayments.core.errors import APIConnectionError, APITimeoutError, Cancelled, TransportError
from dodopayments.core.logs import redact_headers
from dodopayments.core.request import CancelToken, FinalRequest, RequestOptions

logger = logging.getLogger(__name__)

_DECODED_BODY_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


class HttpxTransport:
    """Implementación de `Transport` sobre `httpx.Client` (síncrono)."""

    def __init__(
        self,
        settings: ClientSettings,
        *,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
        uniform: Callable[[float, float], float] = random.uniform,
    ) -> None:
        self._settings = settings
        self._owns_client = http_client is None
        self._client = http_client or build_http_client(settings)
        self._sleep = sleep
        self._uniform = uniform

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def with_settings(self, settings: ClientSettings) -> HttpxTransport:
        """Copia con otra configuración sobre el mismo `httpx.Client` (que no pasa a ser suyo)."""

        return HttpxTransport(settings, http_client=self._client, sleep=self._sleep, uniform=self._uniform)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def send(self, request: FinalRequest, options: RequestOptions) -> httpx.Response:
        policy = RetryPolicy.from_settings(self._settings, max_retries=options.max_retries)
        timeout = options.timeout if options.timeout is not None else self._settings.timeout_seconds
        headers = self._with_auth(request.headers)
        cancel = options.cancel

        attempt = 0
        while True:
            _check_cancelled(cancel)
            logger.debug(
                "%s %s (attempt %d) headers=%s",
                request.method,
                request.full_url,
                attempt + 1,
                redact_headers(headers),
            )
            try:
                response = self._send_once(request, headers, timeout, cancel)
            except httpx.TransportError as exc:
                error = _translate_transport_error(exc, request)
                if not (request.idempotent and policy.can_retry(attempt)):
                    logger.warning("%s %s failed after %d attempt(s): %s", request.method, request.full_url, attempt + 1, error)
                    raise error from exc
                delay = policy.delay(attempt, uniform=self._uniform)
                logger.info("retrying %s %s in %.2fs after %s", request.method, request.full_url, delay, type(error).__name__)
                self._wait(delay, cancel)
                attempt += 1
                continue

            status = response.status_code
            if response.is_success:
                logger.debug("%s %s -> %d", request.method, request.full_url, status)
                return response

            retry = policy.can_retry(attempt) and policy.should_retry_status(
                status,
                response.headers,
                idempotent=request.idempotent,
            )
            if not retry:
                logger.warning("%s %s -> HTTP %d", request.method, request.full_url, status)
                return response

            delay = policy.delay(attempt, status_code=status, headers=response.headers, uniform=self._uniform)
            logger.info("retrying %s %s in %.2fs after HTTP %d", request.method, request.full_url, delay, status)
            self._wait(delay, cancel)
            attempt += 1

    def _with_auth(self, headers: dict[str, str]) -> dict[str, str]:
        out = dict(headers)
        if any(name.lower() == "authorization" for name in out):
            return out
        if self._settings.api_key:
            out["Authorization"] = f"Bearer {self._settings.api_key}"
        return out

    def _send_once(
        self,
        request: FinalRequest,
        headers: dict[str, str],
        timeout: float,
        cancel: CancelToken | None,
    ) -> httpx.Response:
        if cancel is None:
            return self._exchange(request, headers, timeout, None)
        return _run_cancellable(lambda: self._exchange(request, headers, timeout, cancel), cancel)

    def _exchange(
        self,
        request: FinalRequest,
        headers: dict[str, str],
        timeout: float,
        cancel: CancelToken | None,
    ) -> httpx.Response:
        http_request = self._client.build_request(
            request.method,
            request.url,
            params=list(request.params),
            headers=headers,
            content=request.content,
            timeout=httpx.Timeout(timeout),
        )
        response = self._client.send(http_request, stream=True)
        try:
            chunks: list[bytes] = []
            for chunk in response.iter_bytes():
                _check_cancelled(cancel)
                chunks.append(chunk)
        finally:
            response.close()

        # El cuerpo ya viene decodificado; sus headers de codificación ya no aplican.
        kept = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _DECODED_BODY_HEADERS
        ]
        return httpx.Response(
            status_code=response.status_code,
            headers=kept,
            content=b"".join(chunks),
            request=http_request,
            extensions=response.extensions,
        )

    def _wait(self, delay: float, cancel: CancelToken | None) -> None:
        if delay <= 0:
            _check_cancelled(cancel)
            return
        if cancel is None:
            self._sleep(delay)
            return
        if cancel.wait(delay):
            raise Cancelled("request cancelled while waiting to retry")


def _run_cancellable(exchange: Callable[[], httpx.Response], cancel: CancelToken) -> httpx.Response:
    """Ejecuta el intercambio en un hilo aparte y vuelve en cuanto termina o se cancela.

    Si se cancela primero, el hilo queda huérfano: su respuesta se descarta y
    la conexión se libera al cerrarse el stream.
    """

    future: Future[httpx.Response] = Future()
    finished = threading.Event()
    future.add_done_callback(lambda _: finished.set())
    unregister = cancel.on_cancel(finished.set)

    def worker() -> None:
        try:
            future.set_result(exchange())
        except Exception as exc:
            future.set_exception(exc)

    if not cancel.cancelled:
        threading.Thread(target=worker, name="dodopayments-send", daemon=True).start()
    try:
        finished.wait()
    finally:
        unregister()
    if future.done():
        return future.result()
    raise Cancelled("request cancelled while waiting for the server")


def _check_cancelled(cancel: CancelToken | None) -> None:
    if cancel is not None and cancel.cancelled:
        raise Cancelled("request cancelled")


def _translate_transport_error(exc: httpx.TransportError, request: FinalRequest) -> TransportError:
    if isinstance(exc, httpx.TimeoutException):
        return APITimeoutError(
            f"request timed out: {request.method} {request.full_url}",
            method=request.method,
            url=request.full_url,
        )
    return APIConnectionError(
        f"connection error: {request.method} {request.full_url}: {exc}",
        method=request.method,
        url=request.full_url,
    )
