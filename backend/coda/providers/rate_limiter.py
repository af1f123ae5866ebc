"""Per-provider token buckets throttling outbound vendor calls."""

import asyncio
import logging
import time

logger = logging.getLogger(__name__)

# (max_tokens, refill tokens per second), tuned to the vendors' published limits.
DEFAULT_LIMITS: dict[str, tuple[float, float]] = {
    "openai": (60, 1.0),  # 60 requests per minute
    "anthropic": (50, 0.83),  # ~50 per minute
    "google": (60, 1.0),
    "xai": (60, 1.0),
    "local": (1000, 100.0),  # effectively unlimited
}
_FALLBACK_LIMIT = (60, 1.0)

# Re-check interval for a bucket that never refills on its own (only reset() refills it).
_IDLE_POLL_SECONDS = 0.5


class TokenBucket:
    def __init__(self, max_tokens: float, refill_rate: float) -> None:
        if max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")
        if refill_rate < 0:
            raise ValueError("refill_rate must not be negative")
        self.max_tokens = float(max_tokens)
        self.refill_rate = float(refill_rate)
        self.tokens = self.max_tokens
        self.last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_refill
        if elapsed > 0:
            self.tokens = min(self.max_tokens, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    async def wait_for_token(self) -> None:
        """Consume one token, sleeping until one has accumulated if the bucket is empty.

        Waiters are served one at a time in arrival order; nobody leaves
        without a token being debited.
        """
        async with self._lock:
            self._refill()
            while self.tokens < 1:
                if self.refill_rate > 0:
                    wait = (1 - self.tokens) / self.refill_rate
                else:
                    wait = _IDLE_POLL_SECONDS
                logger.debug("Rate limit reached, waiting %.2fs for a token", wait)
                await asyncio.sleep(wait)
                self._refill()
            self.tokens -= 1

    def reset(self) -> None:
        self.tokens = self.max_tokens
        self.last_refill = time.monotonic()


class RateLimiterRegistry:
    """Lazily creates one bucket per provider name and keeps it for the process lifetime."""

    def __init__(self, limits: dict[str, tuple[float, float]] | None = None) -> None:
        self._limits = dict(DEFAULT_LIMITS if limits is None else limits)
        self._buckets: dict[str, TokenBucket] = {}

    def get(self, provider: str) -> TokenBucket:
        bucket = self._buckets.get(provider)
        if bucket is None:
            max_tokens, rate = self._limits.get(provider, _FALLBACK_LIMIT)
            bucket = TokenBucket(max_tokens, rate)
            self._buckets[provider] = bucket
        return bucket

    def reset(self) -> None:
        for bucket in self._buckets.values():
            bucket.reset()
