"""Error taxonomy for cleanup runs.

Per-item failures (any of these raised while deleting a single resource) are
logged and suppressed by the cleaners. Kind-level failures end the run, except
TLS faults, which restart it.
"""

from __future__ import annotations

import ssl
from typing import Optional


class CleanupError(Exception):
    """Base class for all cleanup errors."""


class TransportError(CleanupError):
    """Network or HTTP failure while talking to the platform or UAA.

    Attributes:
        status_code: HTTP status code if the server answered, None otherwise
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TLSHandshakeError(TransportError):
    """Transport failure caused by the TLS layer."""


class JobFailed(CleanupError):
    """Remote asynchronous job finished in the failed state."""

    def __init__(self, job_id: str, reason: str) -> None:
        super().__init__(f"Job {job_id} failed: {reason}")
        self.job_id = job_id
        self.reason = reason


class JobTimeout(CleanupError):
    """Remote asynchronous job did not reach a terminal state in time."""

    def __init__(self, job_id: str, timeout: float) -> None:
        super().__init__(f"Job {job_id} did not complete within {timeout:g}s")
        self.job_id = job_id
        self.timeout = timeout


class DeadlineExceeded(CleanupError):
    """The whole cleanup run exceeded its wall-clock budget."""

    def __init__(self, deadline: float) -> None:
        super().__init__(f"Cleanup did not complete within {deadline:g}s")
        self.deadline = deadline


class RetryBudgetExhausted(CleanupError):
    """Every allowed attempt of the cleanup run failed with a retryable fault."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Cleanup failed after {attempts} attempts")
        self.attempts = attempts


def is_tls_fault(exc: BaseException) -> bool:
    """Check whether an exception, or anything in its cause chain, is an SSL error.

    Args:
        exc: Exception to inspect

    Returns:
        True if the failure originated in the TLS layer
    """
    seen = set()
    current: Optional[BaseException] = exc

    while current is not None and id(current) not in seen:
        if isinstance(current, (ssl.SSLError, TLSHandshakeError)):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__

    return False


def is_retryable(exc: BaseException) -> bool:
    """Whole-run retry predicate: only TLS faults qualify."""
    return isinstance(exc, TLSHandshakeError)
