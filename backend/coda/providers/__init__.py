from coda.providers.base import AIProvider, AIRequest, AIResponse, ChatMessage, ProviderConfig, Usage
from coda.providers.factory import ProviderFactory
from coda.providers.rate_limiter import RateLimiterRegistry, TokenBucket

__all__ = [
    "AIProvider",
    "AIRequest",
    "AIResponse",
    "ChatMessage",
    "ProviderConfig",
    "Usage",
    "ProviderFactory",
    "RateLimiterRegistry",
    "TokenBucket",
]
