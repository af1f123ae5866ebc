from pydantic import BaseModel

from coda.schemas.generation import CamelModel


class ProviderInfo(BaseModel):
    name: str
    available: bool
    model: str | None = None


class ProvidersResponse(BaseModel):
    providers: list[ProviderInfo]


class HealthResponse(CamelModel):
    status: str
    version: str
    enabled_providers: list[str]
    solana_network: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str


class LogEntryOut(BaseModel):
    ts: str
    level: str
    logger: str
    message: str
