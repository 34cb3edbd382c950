import math
import time
from typing import Callable, Optional

from limits import RateLimitItemPerMinute
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter


class LoginAttemptStore:
    """Fixed-window counter of login attempts per key (normally the email).

    Backed by a ``limits`` fixed-window limiter over in-process memory
    storage, so expired windows are dropped by the storage itself. Every
    attempt counts, refused ones included.
    """

    namespace = "login"

    def __init__(
        self,
        window_minutes: int = 15,
        max_attempts: int = 5,
        clock: Callable[[], float] = time.time,
    ):
        self.item = RateLimitItemPerMinute(max_attempts, window_minutes)
        self.limiter = FixedWindowRateLimiter(MemoryStorage())
        self.clock = clock

    def hit(self, key: str) -> Optional[int]:
        """Register one attempt. Returns None if allowed, else minutes to wait."""
        if self.limiter.hit(self.item, self.namespace, key):
            return None
        reset_time, _ = self.limiter.get_window_stats(self.item, self.namespace, key)
        return minutes_until(reset_time, self.clock())

    def reset(self, key: str) -> None:
        self.limiter.clear(self.item, self.namespace, key)


def minutes_until(reset_time: float, now: float) -> int:
    """Whole minutes until ``reset_time``, rounded up and never below one."""
    return max(1, math.ceil((reset_time - now) / 60))
