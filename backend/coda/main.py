import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coda import __version__
from coda.api import api_router
from coda.config import Settings
from coda.errors import CodaError, format_error_response
from coda.log_buffer import configure_logging
from coda.providers.factory import ProviderFactory
from coda.schemas.system import ErrorResponse
from coda.utils.validation import validate_api_key

logger = logging.getLogger(__name__)


def _log_startup(settings: Settings) -> None:
    enabled = settings.enabled_providers()
    logger.info("Coda Protocol API %s on http://%s:%s", __version__, settings.host, settings.port)
    logger.info("Solana network: %s (%s)", settings.solana_network, settings.solana_rpc_url)
    if enabled:
        logger.info("AI providers: %s", ", ".join(enabled))
    else:
        logger.warning("No AI providers configured")
    for name, key in (("openai", settings.openai_api_key), ("anthropic", settings.anthropic_api_key)):
        if key and not validate_api_key(key, name):
            logger.warning("The configured %s API key does not look like a valid key", name)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(settings: Settings | None = None, factory: ProviderFactory | None = None) -> FastAPI:
    """Build the application around an explicit settings / provider-factory context."""
    settings = settings or Settings()
    configure_logging(settings.python_log_level)
    factory = factory or ProviderFactory(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _log_startup(settings)
        yield
        await factory.aclose()

    app = FastAPI(
        title="Coda Protocol API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.factory = factory

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.0fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(CodaError)
    async def handle_coda_error(request: Request, exc: CodaError) -> JSONResponse:
        logger.warning("%s %s failed: [%s] %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message, code=exc.code).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=_validation_message(exc), code="VALIDATION_ERROR").model_dump(),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = format_error_response(exc)
        return JSONResponse(
            status_code=500, content=ErrorResponse(error=body["error"], code=body["code"]).model_dump()
        )

    # ── Routes ────────────────────────────────────────────────────────────────

    app.include_router(api_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"name": "Coda Protocol API", "version": __version__, "documentation": "/api/health"}

    return app
