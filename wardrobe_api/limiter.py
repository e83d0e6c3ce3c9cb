import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request


class RateLimiter:
    # token bucket per client ip
    def __init__(self, per_min: int, burst: int, clock: Callable[[], float] = time.time) -> None:
        self.per_min = per_min
        self.burst = burst
        self.clock = clock
        self._buckets: Dict[str, Tuple[float, float]] = {}
        self._lock = threading.Lock()

    def __call__(self, request: Request) -> None:
        if self.per_min <= 0:
            return
        ident = request.client.host if request.client else "anon"
        if not self.allow(ident):
            raise HTTPException(status_code=429, detail="Too Many Requests")

    def allow(self, ident: str) -> bool:
        with self._lock:
            now = self.clock()
            tokens, last = self._buckets.get(ident, (float(self.burst), now))
            # refill
            elapsed_min = max(0.0, (now - last) / 60.0)
            tokens = min(float(self.burst), tokens + elapsed_min * self.per_min)
            if tokens < 1.0:
                self._buckets[ident] = (tokens, now)
                return False
            self._buckets[ident] = (tokens - 1.0, now)
            return True
