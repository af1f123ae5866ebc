from coda.schemas.generation import (
    GenerateBody,
    GeneratedFile,
    GenerateResponse,
    GenerationMetadata,
    GenerationRequest,
    GenerationResult,
    Language,
    ProjectType,
)
from coda.schemas.system import ErrorResponse, HealthResponse, LogEntryOut, ProviderInfo, ProvidersResponse

__all__ = [
    "GenerateBody",
    "GeneratedFile",
    "GenerateResponse",
    "GenerationMetadata",
    "GenerationRequest",
    "GenerationResult",
    "Language",
    "ProjectType",
    "ErrorResponse",
    "HealthResponse",
    "LogEntryOut",
    "ProviderInfo",
    "ProvidersResponse",
]
