from fastapi import APIRouter

from coda.api.generate import router as generate_router
from coda.api.health import router as health_router
from coda.api.logs import router as logs_router
from coda.api.providers import router as providers_router

api_router = APIRouter(prefix="/api")
api_router.include_router(health_router)
api_router.include_router(providers_router)
api_router.include_router(generate_router)
api_router.include_router(logs_router)
