"""Bounded-retry, fixed-interval polling against eventually consistent state."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rosa_lifecycle.lib.errors import OperationCancelledError, PollError, PollTimeoutError
from rosa_lifecycle.lib.result import Err, Ok, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PollProfile:
    """Attempt budget and interval (seconds) for one kind of wait."""

    attempts: int
    interval: float


CLUSTER_READY_CLASSIC = PollProfile(attempts=120, interval=60.0)
CLUSTER_READY_HOSTED = PollProfile(attempts=30, interval=60.0)
CLUSTER_DELETED = PollProfile(attempts=30, interval=60.0)
# 10 minutes at 30s, queried against the cluster's own API
NODES_READY = PollProfile(attempts=20, interval=30.0)


def poll_until(
    predicate: Callable[[], Result[bool, Any]],
    *,
    resource: str,
    attempts: int,
    interval: float,
    cancel: threading.Event | None = None,
) -> Result[int, PollError]:
    """Call `predicate` until it returns Ok(True), at most `attempts` times.

    Ok(False) and Err(...) both consume an attempt: a failed lookup counts as
    "not yet". Sleeps `interval` between attempts (not after the last one).
    Returns the attempt number that succeeded.
    """
    last_observation = "n/a"
    for attempt in range(1, attempts + 1):
        if cancel is not None and cancel.is_set():
            return Err(OperationCancelledError(f"wait for {resource}"))

        match predicate():
            case Ok(True):
                logger.info("%s satisfied after %d/%d attempts", resource, attempt, attempts)
                return Ok(attempt)
            case Ok(_):
                last_observation = "not satisfied"
            case Err(error):
                last_observation = str(error)

        logger.info("%d/%d : %s not yet satisfied (%s)", attempt, attempts, resource, last_observation)

        if attempt < attempts and interval > 0:
            if cancel is not None:
                if cancel.wait(interval):
                    return Err(OperationCancelledError(f"wait for {resource}"))
            else:
                time.sleep(interval)

    return Err(PollTimeoutError(resource, attempts, last_observation))
