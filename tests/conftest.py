import json
from collections.abc import Callable
from decimal import Decimal
from urllib.parse import parse_qs

import httpx
import pytest

from notifier.domain.entities import Product
from notifier.domain.ports import FailedMessageRecord, FailureLogSink
from notifier.gateway import GatewayCatalog, GatewayConfiguration, field_map_builder
from notifier.infrastructure.adapters import InMemoryProductLookup


class RecordingSink(FailureLogSink):
    def __init__(self) -> None:
        self.records: list[FailedMessageRecord] = []

    async def record(self, entry: FailedMessageRecord) -> None:
        self.records.append(entry)


class GatewayStub:
    """Mock gateway that records every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def request_params(request: httpx.Request) -> dict[str, str]:
    """Decode form, JSON or query parameters of a captured request."""
    if request.method == "GET":
        return dict(request.url.params)
    content_type = request.headers.get("content-type", "")
    if "json" in content_type:
        return json.loads(request.content)
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def numbered_catalog(count: int) -> GatewayCatalog:
    """Catalog of `count` form-encoded entries at https://gw.test/c0 .. c{count-1}."""
    return GatewayCatalog(
        entries=tuple(
            GatewayConfiguration(
                name=f"config-{i}",
                endpoint_url=f"https://gw.test/c{i}",
                parameter_builder=field_map_builder(
                    credential_key="apikey",
                    recipient_key="numbers",
                    message_key="message",
                ),
            )
            for i in range(count)
        )
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def products() -> InMemoryProductLookup:
    return InMemoryProductLookup(
        [
            Product(id="p1", name="Desk Lamp", price=Decimal("1200.00"), discounted_price=Decimal("999.50")),
            Product(id="p2", name="Notebook", price=Decimal("150"), description="A5 ruled"),
            Product(id="p3", name="Pen Set", price=Decimal("75.25"), content="Pack of 3"),
        ]
    )
