"""
Dependency injection containers using dependency-injector.

Container wires the API side (services and controllers that do not need a
request-scoped session). ClientContainer wires the client synchronization
layer: HTTP client, gateway, cache, store, protocol and state service.
"""

from dependency_injector import containers, providers

from agency.client.cache import LocalCache
from agency.client.gateway import RemotePersistenceGateway
from agency.client.state import AgencyState
from agency.client.store import EntityStore
from agency.client.sync import SyncProtocol
from agency.controllers.health_controller import HealthController
from agency.core.config import settings
from agency.core.integrations.http.http_client import HttpClient
from agency.services.health_service import HealthService


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"} if token else {}


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    config = providers.Configuration()

    # Services
    health_service = providers.Singleton(
        HealthService,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


class ClientContainer(containers.DeclarativeContainer):
    """Client-side object graph; one AgencyState per container."""

    config = providers.Configuration()

    http_client = providers.Singleton(
        HttpClient,
        base_url=config.api_base_url,
        timeout=config.request_timeout,
        headers=providers.Callable(_auth_headers, config.api_token),
    )

    gateway = providers.Singleton(
        RemotePersistenceGateway,
        http_client=http_client,
    )

    cache = providers.Singleton(
        LocalCache,
        path=config.cache_path,
        namespace=config.cache_namespace,
        legacy_namespaces=config.legacy_cache_namespaces,
        session_keys=config.session_cache_keys,
    )

    store = providers.Singleton(
        EntityStore,
    )

    sync = providers.Singleton(
        SyncProtocol,
        store=store,
        cache=cache,
    )

    state = providers.Singleton(
        AgencyState,
        store=store,
        cache=cache,
        gateway=gateway,
        sync=sync,
    )


def create_client_container(**overrides) -> ClientContainer:
    """Build a ClientContainer configured from settings, with optional overrides."""
    container = ClientContainer()
    config = {
        "api_base_url": settings.AGENCY_API_BASE_URL,
        "api_token": settings.AGENCY_API_TOKEN,
        "request_timeout": settings.CLIENT_REQUEST_TIMEOUT,
        "cache_path": settings.CLIENT_CACHE_PATH,
        "cache_namespace": settings.CLIENT_CACHE_NAMESPACE,
        "legacy_cache_namespaces": settings.CLIENT_LEGACY_CACHE_NAMESPACES,
        "session_cache_keys": settings.CLIENT_SESSION_CACHE_KEYS,
    }
    config.update(overrides)
    container.config.from_dict(config)
    return container


# Global container instance
_container: Container = None


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = Container()
        _container.config.from_dict({
            "database_url": settings.DATABASE_URL,
        })
    return _container
