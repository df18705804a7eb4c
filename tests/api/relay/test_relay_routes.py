from typing import Iterator

import pytest
from httpx import ASGITransport, AsyncClient

from core.connections import DeliveryStatus
from core.exceptions import ConfigurationError
from features.relay.dependencies import build_relay_handlers, get_relay_handlers
from main import app
from tests.helpers import InMemoryMembershipStore, ScriptedChannelFactory, make_event


@pytest.fixture(autouse=True)
def reset_dependency_overrides() -> Iterator[None]:
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def _override(store: InMemoryMembershipStore, factory: ScriptedChannelFactory) -> None:
    handlers = build_relay_handlers(store=store, channel_factory=factory)
    app.dependency_overrides[get_relay_handlers] = lambda: handlers


@pytest.mark.anyio
async def test_health_check() -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "healthy"


@pytest.mark.anyio
async def test_gateway_events_are_forwarded_to_handlers() -> None:
    store = InMemoryMembershipStore(["peer"])
    factory = ScriptedChannelFactory({"peer": DeliveryStatus.GONE})
    _override(store, factory)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        connected = await client.post("/relay/$connect", json=make_event("abc"))
        sent = await client.post(
            "/relay/sendmessage", json=make_event("abc", body={"data": {"x": 1}})
        )
        rejected = await client.post("/relay/sendmessage", json=make_event("abc", body={}))

    assert (connected.status_code, connected.text) == (200, "Connected.")
    assert (sent.status_code, sent.text) == (200, "Data sent to 1 connection")
    assert rejected.status_code == 400
    assert list(store.items) == ["abc"]


@pytest.mark.anyio
async def test_unknown_route_returns_404_envelope() -> None:
    _override(InMemoryMembershipStore(), ScriptedChannelFactory())

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/relay/teleport", json=make_event())

    assert response.status_code == 404
    payload = response.json()
    assert payload["success"] is False
    assert payload["data"] == {"route": "teleport"}


@pytest.mark.anyio
async def test_configuration_error_is_rendered_as_500_envelope() -> None:
    def misconfigured():
        raise ConfigurationError("TABLE_NAME must be configured", key="TABLE_NAME")

    app.dependency_overrides[get_relay_handlers] = misconfigured

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/relay/connect", json=make_event())

    assert response.status_code == 500
    assert response.json()["data"] == {"key": "TABLE_NAME"}
