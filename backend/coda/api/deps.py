from fastapi import Request

from coda.config import Settings
from coda.providers.factory import ProviderFactory


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_factory(request: Request) -> ProviderFactory:
    return request.app.state.factory
