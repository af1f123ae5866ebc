"""Provider discovery.

GET /providers            - every configured provider with its model
GET /providers/available  - only providers that can serve requests right now
"""

from fastapi import APIRouter, Depends

from coda.api.deps import get_factory
from coda.providers.factory import ProviderFactory
from coda.schemas.system import ProviderInfo, ProvidersResponse

router = APIRouter(prefix="/providers", tags=["providers"])


@router.get("", response_model=ProvidersResponse, response_model_exclude_none=True)
async def list_providers(factory: ProviderFactory = Depends(get_factory)) -> ProvidersResponse:
    providers = []
    for name in factory.settings.enabled_providers():
        provider = factory.create_provider(name)
        providers.append(ProviderInfo(name=name, available=provider.is_available(), model=provider.model))
    return ProvidersResponse(providers=providers)


@router.get("/available", response_model=ProvidersResponse, response_model_exclude_none=True)
async def list_available_providers(factory: ProviderFactory = Depends(get_factory)) -> ProvidersResponse:
    return ProvidersResponse(
        providers=[ProviderInfo(name=p.name, available=p.is_available()) for p in factory.get_available_providers()]
    )
