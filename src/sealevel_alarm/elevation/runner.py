"""Single-slot HTTP GET runner with manual redirect handling."""

import asyncio
import itertools
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from urllib.parse import urljoin

import requests

from sealevel_alarm.config import DEFAULT_MAX_WORKERS
from sealevel_alarm.exceptions import (
    RequestSupersededError,
    TooManyRedirectsError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 5
DEFAULT_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class _Attempt:
    attempt_id: int
    url: str
    started_at: float


class HttpRequestRunner:
    """Runs one elevation GET at a time without blocking the event loop.

    Blocking ``requests`` calls are pushed onto a thread pool. Each call to
    :meth:`execute` takes over the current-attempt slot; an older attempt
    that is still on the wire is discarded when its response arrives.
    """

    def __init__(
        self,
        *,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._max_redirects = max_redirects
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._executor = (
            executor if executor is not None else ThreadPoolExecutor(max_workers=DEFAULT_MAX_WORKERS)
        )
        self._attempt_ids = itertools.count(1)
        self._current: _Attempt | None = None

    @property
    def in_flight(self) -> bool:
        """Whether an attempt currently owns the slot."""
        return self._current is not None

    async def execute(self, url: str) -> bytes:
        """GET a URL, following redirects, and return the final body.

        Args:
            url: Absolute URL to fetch.

        Returns:
            The body of the final, non-redirect response.

        Raises:
            RequestSupersededError: If another ``execute`` call started meanwhile.
            TooManyRedirectsError: If the redirect chain exceeds the cap.
            TransportError: On connection errors, timeouts or non-2xx statuses.
        """
        attempt = _Attempt(next(self._attempt_ids), url, time.monotonic())
        self._current = attempt
        logger.info("Starting request", extra={"url": url, "attempt": attempt.attempt_id})

        try:
            return await self._follow(attempt)
        finally:
            if self._current is attempt:
                self._current = None

    async def _follow(self, attempt: _Attempt) -> bytes:
        loop = asyncio.get_running_loop()
        current_url = attempt.url

        for _ in range(self._max_redirects + 1):
            try:
                response = await loop.run_in_executor(self._executor, self._get, current_url)
            except requests.exceptions.RequestException as exc:
                self._ensure_current(attempt)
                raise TransportError(
                    f"Request to {current_url} failed: {exc}",
                    url=current_url,
                ) from exc
            self._ensure_current(attempt)

            if response.is_redirect:
                target = urljoin(current_url, response.headers["location"])
                logger.info(
                    "Following redirect",
                    extra={"url": current_url, "target": target, "status_code": response.status_code},
                )
                current_url = target
                continue

            if not 200 <= response.status_code < 300:
                raise TransportError(
                    f"Request to {current_url} returned HTTP {response.status_code}",
                    url=current_url,
                    status_code=response.status_code,
                )

            elapsed_ms = (time.monotonic() - attempt.started_at) * 1000
            logger.info(
                "Request finished",
                extra={"url": current_url, "elapsed_ms": round(elapsed_ms, 1)},
            )
            return response.content

        raise TooManyRedirectsError(attempt.url, self._max_redirects)

    def _get(self, url: str) -> requests.Response:
        return self._session.get(url, allow_redirects=False, timeout=self._timeout)

    def _ensure_current(self, attempt: _Attempt) -> None:
        if self._current is not attempt:
            logger.info(
                "Discarding superseded response",
                extra={"url": attempt.url, "attempt": attempt.attempt_id},
            )
            raise RequestSupersededError(attempt.url)

    def close(self) -> None:
        """Close the HTTP session and shut down the thread pool."""
        self._current = None
        self._session.close()
        self._executor.shutdown(wait=False)
