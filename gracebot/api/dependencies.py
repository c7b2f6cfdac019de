"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from gracebot.api.container import ServiceContainer
from gracebot.core.config import Settings
from gracebot.services.bot import BotEngine
from gracebot.services.channels import ChannelAdapter
from gracebot.storage import PersistenceManager, RecordStore


def get_services(request: Request) -> ServiceContainer:
    """Get the service container built at startup."""
    return request.app.state.services


ServicesDep = Annotated[ServiceContainer, Depends(get_services)]


def get_settings_dep(services: ServicesDep) -> Settings:
    return services.settings


def get_store(services: ServicesDep) -> RecordStore:
    return services.store


def get_persistence(services: ServicesDep) -> PersistenceManager:
    return services.persistence


def get_engine(services: ServicesDep) -> BotEngine:
    return services.engine


def get_channel(services: ServicesDep) -> ChannelAdapter:
    return services.channel


# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
StoreDep = Annotated[RecordStore, Depends(get_store)]
PersistenceDep = Annotated[PersistenceManager, Depends(get_persistence)]
EngineDep = Annotated[BotEngine, Depends(get_engine)]
ChannelDep = Annotated[ChannelAdapter, Depends(get_channel)]
