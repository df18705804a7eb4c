from typing import Any

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from core.connections import DeliveryStatus, DestinationEndpoint
from infrastructure.aws import delivery
from infrastructure.aws.delivery import ApiGatewayDeliveryChannel, build_delivery_channel

ENDPOINT = DestinationEndpoint(domain="abc.execute-api.us-east-1.amazonaws.com", stage="prod")


class DummyManagementClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._error = error

    def post_to_connection(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return {}


def _client_error(code: str, status: int) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        "PostToConnection",
    )


pytestmark = pytest.mark.anyio


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


async def test_send_posts_payload_and_reports_ok():
    client = DummyManagementClient()
    channel = ApiGatewayDeliveryChannel(ENDPOINT, client=client)

    result = await channel.send("abc", b'{"x":1}')

    assert result.status is DeliveryStatus.OK
    assert client.calls == [{"ConnectionId": "abc", "Data": b'{"x":1}'}]


@pytest.mark.parametrize(
    "error",
    [_client_error("GoneException", 410), _client_error("SomethingElse", 410)],
)
async def test_gone_responses_are_tagged_gone(error):
    channel = ApiGatewayDeliveryChannel(ENDPOINT, client=DummyManagementClient(error))

    result = await channel.send("abc", b"hi")

    assert result.status is DeliveryStatus.GONE
    assert result.connection_id == "abc"


async def test_other_failures_are_tagged_error_without_raising():
    throttled = ApiGatewayDeliveryChannel(
        ENDPOINT, client=DummyManagementClient(_client_error("LimitExceededException", 429))
    )
    unreachable = ApiGatewayDeliveryChannel(
        ENDPOINT, client=DummyManagementClient(EndpointConnectionError(endpoint_url=ENDPOINT.url))
    )

    throttled_result = await throttled.send("abc", b"hi")
    unreachable_result = await unreachable.send("abc", b"hi")

    assert throttled_result.status is DeliveryStatus.ERROR
    assert "LimitExceededException" in (throttled_result.detail or "")
    assert unreachable_result.status is DeliveryStatus.ERROR


def test_factory_binds_client_to_endpoint_url(monkeypatch):
    requested: list[tuple[str, float | None]] = []

    def fake_client(endpoint_url: str, *, timeout: float | None = None) -> DummyManagementClient:
        requested.append((endpoint_url, timeout))
        return DummyManagementClient()

    monkeypatch.setattr(delivery, "get_management_api_client", fake_client)

    channel = build_delivery_channel(ENDPOINT)
    bounded = build_delivery_channel(ENDPOINT, timeout=1.5)

    assert isinstance(channel, ApiGatewayDeliveryChannel)
    assert channel.endpoint == ENDPOINT
    assert isinstance(bounded, ApiGatewayDeliveryChannel)
    assert requested == [
        ("https://abc.execute-api.us-east-1.amazonaws.com/prod", None),
        ("https://abc.execute-api.us-east-1.amazonaws.com/prod", 1.5),
    ]
