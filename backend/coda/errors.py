"""Error hierarchy shared by the provider, generator and HTTP layers.

Every *operational* failure (bad input, missing configuration, a vendor
refusing a call) is a ``CodaError`` carrying a machine-readable ``code`` and
the HTTP status the API should answer with. Anything else is a bug and is
reported to clients as a generic internal error.
"""

from typing import Any


class CodaError(Exception):
    def __init__(self, message: str, code: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class ValidationError(CodaError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "VALIDATION_ERROR", 400)


class ConfigurationError(CodaError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR", 400)


class ProviderError(CodaError):
    """A vendor call failed: non-2xx status, network failure or unusable body."""

    def __init__(
        self,
        message: str,
        provider: str,
        vendor_status: int | None = None,
        code: str = "PROVIDER_ERROR",
    ) -> None:
        super().__init__(message, code, 400)
        self.provider = provider
        self.vendor_status = vendor_status


class ProviderTimeoutError(ProviderError):
    def __init__(self, provider: str, timeout: float) -> None:
        super().__init__(
            f"{provider} request timed out after {timeout:g}s",
            provider,
            code="PROVIDER_TIMEOUT",
        )
        self.timeout = timeout


class GenerationError(CodaError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "GENERATION_ERROR", 500)


def is_operational_error(exc: BaseException) -> bool:
    return isinstance(exc, CodaError)


def format_error_response(exc: BaseException) -> dict[str, Any]:
    if isinstance(exc, CodaError):
        return {"error": exc.message, "code": exc.code, "statusCode": exc.status_code}
    # Never leak internals of unexpected failures.
    return {"error": "Internal server error", "code": "INTERNAL_ERROR", "statusCode": 500}
