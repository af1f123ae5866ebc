from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable

Role = Literal["system", "user", "assistant"]


@dataclass
class ChatMessage:
    role: Role
    content: str


@dataclass
class AIRequest:
    messages: list[ChatMessage]
    temperature: float = 0.7
    max_tokens: int | None = None
    stream: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


@dataclass
class Usage:
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class AIResponse:
    content: str
    model: str
    provider: str
    usage: Usage | None = None  # None when the vendor reports no token counts


@dataclass
class ProviderConfig:
    model: str
    api_key: str | None = None
    base_url: str | None = None  # endpoint for local / xAI
    timeout: float | None = 60.0
    extra: dict = field(default_factory=dict)


@runtime_checkable
class AIProvider(Protocol):
    """Capability set every vendor adapter implements."""

    name: str
    model: str

    def is_available(self) -> bool:
        """True when the credentials or endpoint the vendor needs are configured.

        Pure function of configuration; never touches the network.
        """
        ...  # pragma: no cover

    async def generate(self, request: AIRequest) -> AIResponse:
        """Send one non-streaming completion request."""
        ...  # pragma: no cover

    def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        """Yield incremental text fragments as the vendor produces them.

        The iterator is finite and single-use; closing it early releases the
        underlying HTTP connection.
        """
        ...  # pragma: no cover
