"""Bounded wait-until-true loop shared by every readiness check."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

import httpx

from core.errors import ReadinessTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Connection refused while the server boots means "not ready yet".
NOT_READY_ERRORS: tuple[type[BaseException], ...] = (httpx.ConnectError,)


def wait_until(
    check: Callable[[], T],
    *,
    timeout: float,
    interval: float,
    description: str,
    ignore: tuple[type[BaseException], ...] = NOT_READY_ERRORS,
    initial_delay: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Call `check` until it returns something truthy, or raise `ReadinessTimeout`.

    Exceptions listed in `ignore` count as a failed attempt. Anything else
    propagates straight away. The last observed value (or ignored error) is
    attached to the timeout so the caller can see what the server said.
    """

    deadline = clock() + timeout
    last_observed: Any = None
    attempts = 0

    if initial_delay:
        sleep(initial_delay)

    while True:
        attempts += 1
        try:
            result = check()
        except ignore as exc:
            logger.debug("%s: not ready (%s)", description, exc)
            last_observed = exc
        else:
            if result:
                logger.debug("%s: ready after %d attempt(s)", description, attempts)
                return result
            last_observed = result

        if clock() >= deadline:
            raise ReadinessTimeout(description, timeout, last_observed)
        logger.info("Waiting for %s ...", description)
        sleep(interval)
