"""
Rate Limiting

Sliding-window request counters keyed by (client address, limit class).

A request is checked against every class that applies to its endpoint in
one step: if any class is exhausted nothing is recorded, otherwise every
class records the hit.
"""

import re
import secrets
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Protocol, Sequence, Tuple

from django.core.cache import cache as default_cache

GENERAL = "general"
WRITE = "write"
POPULATE = "populate"

DEFAULT_LIMITS = {
    GENERAL: "100/15m",
    WRITE: "50/15m",
    POPULATE: "10/h",
}

DEFAULT_MESSAGES = {
    GENERAL: "Too many requests from this IP, please try again later.",
    WRITE: "Too many write requests from this IP, please try again later.",
    POPULATE: "Too many populate requests. Please try again later.",
}

PERIOD_MAP = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}

LIMIT_PATTERN = re.compile(r"^\s*(\d+)\s*/\s*(\d*)\s*([smhd])\s*$")


@dataclass(frozen=True)
class LimitClass:
    name: str
    max_requests: int
    window: int
    message: str


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit_class: LimitClass
    remaining: int
    reset_after: int

    @property
    def limit(self) -> int:
        return self.limit_class.max_requests


class Counter(NamedTuple):
    """One sliding window to check: storage key, window length, capacity."""

    key: str
    period: int
    max_requests: int


def parse_limit(limit_str: str) -> Tuple[int, int]:
    """
    Parse a limit string into ``(count, period_seconds)``.

    Accepts ``"5/m"``, ``"100/15m"``, ``"10/h"``. A bare number means per hour.
    """
    limit_str = str(limit_str)
    if "/" not in limit_str:
        return int(limit_str), PERIOD_MAP["h"]

    match = LIMIT_PATTERN.match(limit_str)
    if not match:
        raise ValueError(f"Invalid rate limit: {limit_str!r}")

    count, multiplier, unit = match.groups()
    return int(count), int(multiplier or 1) * PERIOD_MAP[unit]


def build_limit_classes(
    limits: Optional[Dict[str, str]] = None,
    messages: Optional[Dict[str, str]] = None,
) -> Dict[str, LimitClass]:
    merged_limits = dict(DEFAULT_LIMITS)
    merged_limits.update(limits or {})
    merged_messages = dict(DEFAULT_MESSAGES)
    merged_messages.update(messages or {})

    classes = {}
    for name, limit_str in merged_limits.items():
        count, period = parse_limit(limit_str)
        classes[name] = LimitClass(
            name=name,
            max_requests=count,
            window=period,
            message=merged_messages.get(name, DEFAULT_MESSAGES[GENERAL]),
        )
    return classes


class CounterStore(Protocol):
    def acquire(self, counters: Sequence[Counter], now: float) -> Tuple[bool, List[List[float]]]:
        """
        Trim every counter to its window, then record ``now`` in all of them
        if each has room, or in none.

        Returns:
            Whether the hit was recorded, and each counter's timestamps as
            they were before recording
        """
        ...


class MemoryCounterStore:
    """
    Per-process store. Each key holds the timestamps inside its window;
    keys whose window empties are dropped.
    """

    SWEEP_EVERY = 1000

    def __init__(self) -> None:
        self._hits: Dict[str, deque] = {}
        self._periods: Dict[str, int] = {}
        self._calls = 0
        self._lock = threading.Lock()

    def _trim(self, key: str, period: int, now: float) -> List[float]:
        hits = self._hits.get(key)
        if hits is None:
            return []

        cutoff = now - period
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if not hits:
            del self._hits[key]
            del self._periods[key]
        return list(hits)

    def _sweep(self, now: float) -> None:
        # Addresses that never come back would otherwise stay forever
        for key in list(self._hits):
            self._trim(key, self._periods[key], now)

    def acquire(self, counters: Sequence[Counter], now: float) -> Tuple[bool, List[List[float]]]:
        with self._lock:
            self._calls += 1
            if self._calls % self.SWEEP_EVERY == 0:
                self._sweep(now)

            windows = [self._trim(c.key, c.period, now) for c in counters]
            allowed = all(len(hits) < c.max_requests for c, hits in zip(counters, windows))

            if allowed:
                for c in counters:
                    self._hits.setdefault(c.key, deque()).append(now)
                    self._periods[c.key] = c.period

            return allowed, windows

    def __len__(self) -> int:
        return len(self._hits)


class CacheCounterStore:
    """
    Store backed by the Django cache framework.

    The cache API has no multi-key atomic update, so check-and-record is
    serialized by a lock shared by every instance in the process. With the
    default ``locmem`` cache the counters themselves are per process; use
    the ``redis`` backend when several worker processes must share them.
    """

    _lock = threading.Lock()

    def __init__(self, cache=None, prefix: str = "rate_limit") -> None:
        self.cache = cache or default_cache
        self.prefix = prefix

    def _cache_key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def _window(self, key: str, period: int, now: float) -> List[float]:
        cutoff = now - period
        requests = self.cache.get(self._cache_key(key), [])
        return [req_time for req_time in requests if req_time > cutoff]

    def acquire(self, counters: Sequence[Counter], now: float) -> Tuple[bool, List[List[float]]]:
        with self._lock:
            windows = [self._window(c.key, c.period, now) for c in counters]
            allowed = all(len(hits) < c.max_requests for c, hits in zip(counters, windows))

            if allowed:
                for c, hits in zip(counters, windows):
                    self.cache.set(self._cache_key(c.key), hits + [now], c.period)

            return allowed, windows


# KEYS: one sorted set per counter
# ARGV: now, member, then (cutoff, max_requests, period) per key
ACQUIRE_SCRIPT = """
local now = ARGV[1]
local member = ARGV[2]
local windows = {}
local allowed = 1

for i, key in ipairs(KEYS) do
    local base = 3 * i
    redis.call('ZREMRANGEBYSCORE', key, '-inf', ARGV[base])
    local hits = redis.call('ZRANGE', key, 0, -1, 'WITHSCORES')
    windows[i] = hits
    if #hits / 2 >= tonumber(ARGV[base + 1]) then
        allowed = 0
    end
end

if allowed == 1 then
    for i, key in ipairs(KEYS) do
        redis.call('ZADD', key, now, member)
        redis.call('EXPIRE', key, ARGV[3 * i + 2])
    end
end

return {allowed, windows}
"""


class RedisCounterStore:
    """
    Store backed by Redis sorted sets, shared across worker processes.

    Check-and-record runs as one Lua script, so concurrent workers can never
    both take the last slot of a window.
    """

    def __init__(self, client, prefix: str = "rate_limit") -> None:
        self.client = client
        self.prefix = prefix
        self._acquire = client.register_script(ACQUIRE_SCRIPT)

    @classmethod
    def from_url(cls, url: str) -> "RedisCounterStore":
        import redis

        return cls(redis.from_url(url, decode_responses=True))

    def _redis_key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def acquire(self, counters: Sequence[Counter], now: float) -> Tuple[bool, List[List[float]]]:
        args = [repr(now), f"{now!r}:{secrets.token_hex(4)}"]
        for c in counters:
            args.extend([repr(now - c.period), c.max_requests, c.period])

        allowed, windows = self._acquire(
            keys=[self._redis_key(c.key) for c in counters], args=args
        )
        # ZRANGE WITHSCORES replies member, score, member, score, ...
        return bool(allowed), [[float(score) for score in flat[1::2]] for flat in windows]


class RateLimiter:
    """
    Multi-class sliding window limiter.

    Args:
        store: Counter store holding request timestamps
        classes: Limit classes by name
        clock: Callable returning the current time in seconds
    """

    def __init__(
        self,
        store: CounterStore,
        classes: Optional[Dict[str, LimitClass]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.classes = classes if classes is not None else build_limit_classes()
        self.clock = clock

    @staticmethod
    def key_for(address: str, limit_class: LimitClass) -> str:
        return f"{limit_class.name}:{address}"

    def resolve(self, names: Iterable[str]) -> List[LimitClass]:
        resolved = []
        for name in names:
            if name not in self.classes:
                raise KeyError(f"Unknown rate limit class: {name}")
            resolved.append(self.classes[name])
        return resolved

    def hit(self, address: str, names: Iterable[str]) -> RateLimitDecision:
        """Check every named class for ``address`` and record the hit if all have room."""
        limit_classes = self.resolve(names)
        if not limit_classes:
            raise ValueError("At least one rate limit class is required")

        now = self.clock()
        counters = [
            Counter(self.key_for(address, c), c.window, c.max_requests) for c in limit_classes
        ]
        allowed, windows = self.store.acquire(counters, now)

        usage = [
            (limit_class, len(hits), self._reset_after(hits, limit_class, now))
            for limit_class, hits in zip(limit_classes, windows)
        ]

        if not allowed:
            limit_class, _, reset_after = next(
                item for item in usage if item[1] >= item[0].max_requests
            )
            return RateLimitDecision(
                allowed=False,
                limit_class=limit_class,
                remaining=0,
                reset_after=reset_after,
            )

        # Report the class closest to exhaustion
        limit_class, count, reset_after = min(
            usage, key=lambda item: item[0].max_requests - item[1]
        )
        return RateLimitDecision(
            allowed=True,
            limit_class=limit_class,
            remaining=limit_class.max_requests - count - 1,
            reset_after=reset_after,
        )

    @staticmethod
    def _reset_after(hits: List[float], limit_class: LimitClass, now: float) -> int:
        if not hits:
            return limit_class.window
        return max(0, int(round(min(hits) + limit_class.window - now)))


def build_store(rate_config: Dict) -> CounterStore:
    """Instantiate the counter store named by ``RATE_LIMITING['BACKEND']``."""
    backend = rate_config.get("BACKEND", "cache")

    if backend == "memory":
        return MemoryCounterStore()

    if backend == "redis":
        from django.conf import settings

        url = rate_config.get("REDIS_URL") or getattr(settings, "REDIS_URL", None)
        if not url:
            raise ValueError("RATE_LIMITING['BACKEND'] is 'redis' but no REDIS_URL is configured")
        return RedisCounterStore.from_url(url)

    if backend == "cache":
        return CacheCounterStore()

    raise ValueError(f"Unknown rate limiting backend: {backend}")


def build_rate_limiter(rate_config: Dict, clock: Callable[[], float] = time.time) -> RateLimiter:
    return RateLimiter(
        store=build_store(rate_config),
        classes=build_limit_classes(
            rate_config.get("LIMITS"), rate_config.get("MESSAGES")
        ),
        clock=clock,
    )
