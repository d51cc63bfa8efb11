# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Resilience utilities (timeouts, startup retries)."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, TypeVar

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from arcade_auth.shared.config import ResilienceConfig
from arcade_auth.shared.logging import logger

T = TypeVar("T")


class CallTimeoutError(Exception):
    """Raised when a bounded call does not finish within its deadline."""

    def __init__(self, name: str, timeout: float) -> None:
        super().__init__(f"{name} did not finish within {timeout:.2f}s")
        self.name = name
        self.timeout = timeout


class BoundedExecutor:
    """Runs blocking calls on a worker pool so callers can stop waiting after a deadline.

    The worker keeps running after a timeout; only the caller is released.
    """

    def __init__(self, max_workers: int = 8, *, thread_name_prefix: str = "store") -> None:
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )

    def call(self, func: Callable[..., T], *args: Any, timeout: float | None = None, **kwargs: Any) -> T:
        if timeout is None:
            return func(*args, **kwargs)
        future = self._pool.submit(func, *args, **kwargs)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            name = getattr(func, "__name__", "call")
            logger.warning(f"resilience: {name} exceeded {timeout:.2f}s")
            raise CallTimeoutError(name, timeout) from exc

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False, cancel_futures=True)


def call_with_retries(
    func: Callable[..., T],
    *args: Any,
    config: ResilienceConfig,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """Retry ``func`` with exponential back-off; used for startup work only."""

    retry = Retrying(
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait_exponential(multiplier=config.backoff_base, max=config.backoff_cap),
        retry=retry_if_exception_type(retry_on),
        reraise=True,
    )
    for attempt in retry:
        with attempt:
            logger.debug(
                f"resilience: attempt={attempt.retry_state.attempt_number} "
                f"func={getattr(func, '__name__', 'call')}"
            )
            return func(*args, **kwargs)
    raise RuntimeError("resilience: reached unexpected branch")


__all__ = ["BoundedExecutor", "CallTimeoutError", "call_with_retries"]
