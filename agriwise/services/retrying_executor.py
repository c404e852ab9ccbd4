import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol

import httpx
from google.genai import errors as genai_errors

from agriwise.core.config import settings
from agriwise.core.exceptions import (
    AdvisoryError,
    ErrorKind,
    FatalUpstreamError,
    NetworkError,
    RateLimited,
    UpstreamUnavailable,
)
from agriwise.models.request_spec import RequestSpec
from agriwise.models.result import UpstreamResponse

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Upstream(Protocol):
    async def generate(self, spec: RequestSpec) -> UpstreamResponse: ...


@dataclass
class RetryState:
    attempt: int = 0
    last_error_kind: Optional[ErrorKind] = None
    delay: float = 0.0


def _status_code(exc: Exception) -> Optional[int]:
    if isinstance(exc, genai_errors.APIError):
        return exc.code
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def classify_error(exc: Exception) -> AdvisoryError:
    """Map any upstream failure onto the advisory error taxonomy."""
    if isinstance(exc, AdvisoryError):
        return exc
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return NetworkError("Upstream request timed out.")
    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return NetworkError(f"Could not reach the AI service: {exc}")

    status_code = _status_code(exc)
    detail = str(exc) or type(exc).__name__
    if status_code == 429:
        return RateLimited(detail, status_code=status_code)
    if status_code is not None and 500 <= status_code < 600:
        return UpstreamUnavailable(detail, status_code=status_code)
    return FatalUpstreamError(detail, status_code=status_code)


class RetryingExecutor:
    """Runs a RequestSpec against the upstream service.

    Rate limits and 5xx responses are retried up to ``max_retries`` times with
    exponential backoff and jitter; every other failure is raised right away.
    """

    def __init__(
        self,
        upstream: Upstream,
        *,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        jitter_ratio: Optional[float] = None,
        attempt_timeout: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self.upstream = upstream
        self.max_retries = settings.MAX_RETRIES if max_retries is None else max_retries
        self.base_delay = (
            settings.RETRY_BASE_DELAY_SECONDS if base_delay is None else base_delay
        )
        self.jitter_ratio = (
            settings.RETRY_JITTER_RATIO if jitter_ratio is None else jitter_ratio
        )
        self.attempt_timeout = (
            settings.ATTEMPT_TIMEOUT_SECONDS if attempt_timeout is None else attempt_timeout
        )
        self._sleep = sleep
        self._rand = rand

    def backoff_delay(self, retry_number: int) -> float:
        base = self.base_delay * (2 ** (retry_number - 1))
        return base * (1 + self.jitter_ratio * self._rand())

    async def _attempt(self, spec: RequestSpec) -> UpstreamResponse:
        if self.attempt_timeout and self.attempt_timeout > 0:
            return await asyncio.wait_for(
                self.upstream.generate(spec), timeout=self.attempt_timeout
            )
        return await self.upstream.generate(spec)

    async def execute(self, spec: RequestSpec) -> UpstreamResponse:
        state = RetryState()
        while True:
            state.attempt += 1
            try:
                return await self._attempt(spec)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                error = classify_error(exc)
                if error is not exc:
                    error.__cause__ = exc

            state.last_error_kind = error.kind
            if not error.retryable:
                logger.warning(
                    "%s request failed with %s on attempt %d: %s",
                    spec.task_kind.value,
                    error.kind.value,
                    state.attempt,
                    error.detail,
                )
                raise error
            if state.attempt > self.max_retries:
                logger.error(
                    "%s request gave up after %d attempts, last error %s",
                    spec.task_kind.value,
                    state.attempt,
                    error.kind.value,
                )
                raise error

            state.delay = self.backoff_delay(state.attempt)
            logger.warning(
                "%s request hit %s (attempt %d/%d), retrying in %.2fs",
                spec.task_kind.value,
                error.kind.value,
                state.attempt,
                self.max_retries + 1,
                state.delay,
            )
            await self._sleep(state.delay)
