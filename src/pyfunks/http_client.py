"""HTTP client factory with per-host connection limits."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator

import httpx

from pyfunks._errors import ERR_MSG_INVALID_MAX_CONNS, InvalidClientOptionError
from pyfunks.duration import Duration

logger = logging.getLogger(__name__)

HostKey = tuple[str, str, int | None]


class _HostSlotStream(httpx.SyncByteStream):
    """Response body stream that gives back its host slot when closed."""

    def __init__(self, stream: httpx.SyncByteStream, release: Callable[[], None]) -> None:
        self._stream = stream
        self._release = release
        self._released = False
        self._lock = threading.Lock()

    def __iter__(self) -> Iterator[bytes]:
        yield from self._stream

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            with self._lock:
                if not self._released:
                    self._released = True
                    self._release()


class HostLimitedTransport(httpx.BaseTransport):
    """``httpx.HTTPTransport`` wrapper capping in-flight requests per host.

    With ``max_conns_per_host`` set to zero requests pass straight
    through. Otherwise each request holds a slot for its scheme, host and
    port from send until its response body is closed; further requests
    to that host wait up to the pool timeout for a free slot.
    """

    def __init__(self, *, verify: bool = True, max_conns_per_host: int = 0) -> None:
        self.verify = verify
        self.max_conns_per_host = max_conns_per_host
        self._transport = httpx.HTTPTransport(verify=verify)
        self._slots: dict[HostKey, threading.BoundedSemaphore] = {}
        self._slots_lock = threading.Lock()

    def _slot(self, url: httpx.URL) -> threading.BoundedSemaphore:
        key = (url.scheme, url.host, url.port)
        with self._slots_lock:
            slot = self._slots.get(key)
            if slot is None:
                slot = threading.BoundedSemaphore(self.max_conns_per_host)
                self._slots[key] = slot
            return slot

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if self.max_conns_per_host <= 0:
            return self._transport.handle_request(request)

        slot = self._slot(request.url)
        pool_timeout = request.extensions.get("timeout", {}).get("pool")
        if not slot.acquire(timeout=pool_timeout):
            raise httpx.PoolTimeout(
                f"no free connection slot for {request.url.host} "
                f"(max {self.max_conns_per_host} per host)",
                request=request,
            )

        try:
            response = self._transport.handle_request(request)
        except BaseException:
            slot.release()
            raise

        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=_HostSlotStream(response.stream, slot.release),
            extensions=response.extensions,
        )

    def close(self) -> None:
        self._transport.close()


def create_http_client(
    timeout: Duration,
    insecure_skip_verify: bool,
    max_conns_per_host: int = 0,
) -> httpx.Client:
    """Create an HTTP client.

    Args:
        timeout: Request timeout. Zero or negative disables the timeout.
        insecure_skip_verify: Skip TLS certificate verification.
        max_conns_per_host: Maximum concurrent requests per host; zero
            means unlimited.

    Returns:
        A ready-to-use ``httpx.Client``.

    Raises:
        InvalidClientOptionError: If ``max_conns_per_host`` is negative.
    """
    if max_conns_per_host < 0:
        raise InvalidClientOptionError(
            ERR_MSG_INVALID_MAX_CONNS,
            f"max_conns_per_host must be >= 0, got {max_conns_per_host}",
        )

    if insecure_skip_verify:
        logger.warning("TLS certificate verification is disabled for a new HTTP client")

    seconds = timeout.seconds() if timeout.nanoseconds > 0 else None
    transport = HostLimitedTransport(
        verify=not insecure_skip_verify,
        max_conns_per_host=max_conns_per_host,
    )
    logger.debug(
        "created HTTP client (timeout=%s, max_conns_per_host=%d)",
        timeout,
        max_conns_per_host,
    )
    return httpx.Client(transport=transport, timeout=httpx.Timeout(seconds))
