"""Code generation endpoints.

POST /generate         - run a generation and return the parsed project
POST /generate/stream  - same, relayed as Server-Sent Events:
                         start → chunk* → complete | error
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from coda.api.deps import get_factory
from coda.errors import CodaError, format_error_response
from coda.generators import CodeGenerator, get_generator
from coda.providers.base import AIProvider
from coda.providers.factory import ProviderFactory
from coda.schemas.generation import GenerateBody, GenerateResponse, GenerationMetadata
from coda.schemas.system import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate", tags=["generate"])

_ERROR_RESPONSES: dict = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _sse(event: dict) -> str:
    return f"data: {json.dumps(event)}\n\n"


@router.post("", response_model=GenerateResponse, responses=_ERROR_RESPONSES)
async def generate(body: GenerateBody, factory: ProviderFactory = Depends(get_factory)) -> GenerateResponse:
    provider = factory.resolve(body.provider)
    generator = get_generator(body.project_type)

    result = await generator.generate(body, provider)

    return GenerateResponse(
        result=result,
        metadata=GenerationMetadata(
            provider=provider.name,
            project_type=body.project_type,
            generated_at=datetime.now(UTC),
        ),
    )


async def _stream_events(body: GenerateBody, provider: AIProvider, generator: CodeGenerator) -> AsyncIterator[str]:
    yield _sse({"type": "start", "provider": provider.name, "projectType": body.project_type})

    chunks: list[str] = []
    try:
        async with aclosing(generator.stream(body, provider)) as fragments:
            async for fragment in fragments:
                chunks.append(fragment)
                yield _sse({"type": "chunk", "content": fragment})
        result = generator.build_result("".join(chunks))
    except CodaError as exc:
        logger.warning("Stream generation failed: %s", exc.message)
        yield _sse({"type": "error", "error": exc.message, "code": exc.code})
        return
    except Exception as exc:
        # Headers are already sent, so the failure can only be reported in-band.
        logger.exception("Unexpected error during stream generation")
        payload = format_error_response(exc)
        yield _sse({"type": "error", "error": payload["error"], "code": payload["code"]})
        return

    yield _sse({"type": "complete", "result": result.model_dump(mode="json", by_alias=True)})


@router.post("/stream", responses=_ERROR_RESPONSES)
async def generate_stream(body: GenerateBody, factory: ProviderFactory = Depends(get_factory)) -> StreamingResponse:
    # Resolved before streaming starts so configuration problems are plain 400 responses.
    provider = factory.resolve(body.provider)
    generator = get_generator(body.project_type)

    return StreamingResponse(
        _stream_events(body, provider, generator),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
