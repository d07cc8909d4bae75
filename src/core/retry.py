"""
Bounded retry for registry operations.

Pulls and pushes are retried a fixed number of times with increasing
wait intervals between attempts. The wait list is reused from its last
entry once it runs out.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_WAIT_TIMES
from core.exceptions import RetryExhaustedException, ValidationException
from utils.docker_utils import CommandResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry budget for one operation.

    Attributes:
        max_attempts: Hard ceiling on attempts (including the first)
        wait_times: Seconds to wait after failed attempt 1, 2, ...
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    wait_times: tuple[float, ...] = DEFAULT_RETRY_WAIT_TIMES

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValidationException(
                f"must be at least 1, got {self.max_attempts}", "max_attempts"
            )
        if any(wait < 0 for wait in self.wait_times):
            raise ValidationException("wait times cannot be negative", "wait_times")

    def wait_before_attempt(self, attempt: int) -> float:
        """
        Seconds to wait after failed attempt number `attempt` (1-based).
        """
        if not self.wait_times:
            return 0
        index = attempt - 1
        if index < len(self.wait_times):
            return self.wait_times[index]
        return self.wait_times[-1]

    @classmethod
    def from_string(cls, max_attempts: int, wait_times: str) -> "RetryPolicy":
        """Build a policy from a space or comma separated wait list ("30 60 300")."""
        try:
            waits = tuple(float(w) for w in wait_times.replace(",", " ").split())
        except ValueError as e:
            raise ValidationException(f"invalid wait list '{wait_times}'", "wait_times") from e
        return cls(max_attempts=max_attempts, wait_times=waits)


def run_with_retry(
    operation: Callable[[], CommandResult],
    description: str,
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Run an operation until it succeeds or the attempt budget is spent.

    Args:
        operation: Callable returning a CommandResult
        description: Name used in log lines (e.g. "docker pull nginx@sha256:...")
        policy: Retry budget
        sleep: Sleep function (patched in tests)

    Returns:
        Number of attempts used

    Raises:
        RetryExhaustedException: If every attempt failed
    """
    last_error = ""
    for attempt in range(1, policy.max_attempts + 1):
        logger.info(f"   ⏳ Attempt {attempt}/{policy.max_attempts}: {description}")
        result = operation()
        if result.success:
            logger.info("   ✓ Command executed successfully.")
            return attempt

        last_error = (result.stderr or result.stdout or "").strip()
        if attempt == policy.max_attempts:
            logger.error(f"   ✗ Command failed after {policy.max_attempts} attempts.")
            break

        wait_time = policy.wait_before_attempt(attempt)
        logger.warning(
            f"   ⚠️ Command failed: {last_error or 'no output'}. "
            f"Waiting {wait_time:g}s before next attempt..."
        )
        sleep(wait_time)

    raise RetryExhaustedException(description, policy.max_attempts, last_error)
