"""
Dependency injection wiring tests.
"""

import pytest

from agency.client.state import AgencyState
from agency.deps.di_container import create_client_container, get_container


def test_client_container_shares_one_store():
    container = create_client_container(api_token="client-token", cache_path="")

    state = container.state()

    assert isinstance(state, AgencyState)
    assert state.store is container.store()
    assert state.sync.store is state.store
    assert state.sync.on_session_expired == state._handle_session_expired
    assert container.http_client().headers == {"Authorization": "Bearer client-token"}


def test_client_container_without_token_sends_no_auth_header():
    container = create_client_container(api_token="")

    assert container.http_client().headers == {}


@pytest.mark.asyncio
async def test_health_controller_from_container():
    controller = get_container().health_controller()

    health = await controller.get_health()

    assert health.status in ("ok", "degraded")
