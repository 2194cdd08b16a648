"""
Deadline

Time budget for one entity-service operation. The service calls check()
before every database round trip, so an expired budget stops the operation
at the next suspend point and the enclosing transaction is rolled back.
"""

import time
from typing import Optional

from app.buisness.core.errors import DeadlineExceeded


class Deadline:
    """Monotonic-clock deadline; timeout=None means unbounded"""

    def __init__(self, timeout: Optional[float] = None, clock=time.monotonic):
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must be non-negative")
        self._clock = clock
        self.timeout = timeout
        self.expires_at = None if timeout is None else clock() + timeout

    @classmethod
    def unbounded(cls) -> 'Deadline':
        return cls(None)

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when unbounded"""
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and self._clock() >= self.expires_at

    def check(self, step: str) -> None:
        """
        Raise DeadlineExceeded if the budget is spent.

        Args:
            step: Name of the round trip about to run, used in the error message
        """
        if self.expired:
            raise DeadlineExceeded(step)

    def __repr__(self):
        return f'<Deadline timeout={self.timeout}>'
