# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# The gateway is built once from Settings; services are cheap wrappers
# created per request.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import Settings, get_settings
from core.services import DirectoryService, ModerationService
from lib.supabase_client import SupabaseGateway


@lru_cache
def get_gateway() -> SupabaseGateway:
    """
    Get the shared Data Access Gateway.

    Only the client handle is shared; no entity data is cached.
    """
    return SupabaseGateway(get_settings())


def get_moderation_service(
    gateway: SupabaseGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> ModerationService:
    return ModerationService(gateway, settings)


def get_directory_service(
    gateway: SupabaseGateway = Depends(get_gateway),
) -> DirectoryService:
    return DirectoryService(gateway)


# Type aliases for dependency injection
GatewayDep = Annotated[SupabaseGateway, Depends(get_gateway)]
ModerationDep = Annotated[ModerationService, Depends(get_moderation_service)]
DirectoryDep = Annotated[DirectoryService, Depends(get_directory_service)]
