from fastapi import APIRouter, Depends

from coda import __version__
from coda.api.deps import get_settings
from coda.config import Settings
from coda.schemas.system import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        enabled_providers=settings.enabled_providers(),
        solana_network=settings.solana_network,
    )
