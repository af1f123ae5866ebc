from coda.errors import (
    CodaError,
    ConfigurationError,
    GenerationError,
    ProviderError,
    ProviderTimeoutError,
    ValidationError,
    format_error_response,
    is_operational_error,
)


def test_error_codes_and_statuses():
    cases = [
        (ValidationError("bad"), "VALIDATION_ERROR", 400),
        (ConfigurationError("missing"), "CONFIGURATION_ERROR", 400),
        (ProviderError("down", "openai"), "PROVIDER_ERROR", 400),
        (ProviderTimeoutError("openai", 1.5), "PROVIDER_TIMEOUT", 400),
        (GenerationError("broken"), "GENERATION_ERROR", 500),
    ]
    for exc, code, status in cases:
        assert isinstance(exc, CodaError)
        assert exc.code == code
        assert exc.status_code == status


def test_provider_errors_carry_vendor_details():
    exc = ProviderError("boom", "anthropic", vendor_status=529)
    timeout = ProviderTimeoutError("google", 30)

    assert exc.provider == "anthropic"
    assert exc.vendor_status == 529
    assert str(exc) == "boom"
    assert isinstance(timeout, ProviderError)
    assert timeout.message == "google request timed out after 30s"


def test_format_operational_error():
    assert format_error_response(ConfigurationError("no key")) == {
        "error": "no key",
        "code": "CONFIGURATION_ERROR",
        "statusCode": 400,
    }
    assert is_operational_error(ValidationError("x"))


def test_format_unexpected_error_hides_details():
    body = format_error_response(KeyError("secret internals"))

    assert body == {"error": "Internal server error", "code": "INTERNAL_ERROR", "statusCode": 500}
    assert not is_operational_error(RuntimeError("x"))
