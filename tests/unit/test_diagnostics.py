import httpx
import pytest

from conftest import GatewayStub
from notifier.domain import ConfigurationError, TransientGatewayError
from notifier.gateway import GatewayDiagnostics


class TestGatewayDiagnostics:
    @pytest.mark.asyncio
    async def test_finds_working_parameter(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/balance.php" and request.url.params.get("apikey") == "k":
                return httpx.Response(200, json={"credits": 120})
            return httpx.Response(200, json={"status": 401, "message": "Unauthorized"})

        stub = GatewayStub(handler)
        async with stub.client() as client:
            diagnostics = GatewayDiagnostics("https://gw.test/api", http_client=client)
            result = await diagnostics.probe_credentials("k")

        assert result.authenticated is True
        assert result.parameter_name == "apikey"
        assert result.response == {"credits": 120}
        assert stub.paths == ["/api/get/credits", "/api/balance.php"]
        assert all(r.method == "GET" for r in stub.requests)

    @pytest.mark.asyncio
    async def test_no_probe_accepted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/status":
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"status": "error"})

        stub = GatewayStub(handler)
        async with stub.client() as client:
            diagnostics = GatewayDiagnostics("https://gw.test/api", http_client=client)
            result = await diagnostics.probe_credentials("k")

        assert result.authenticated is False
        assert len(result.trace) == 5
        assert "ConnectError" in result.trace[-1].error_message

    @pytest.mark.asyncio
    async def test_check_credits(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "success", "credits": 42})

        stub = GatewayStub(handler)
        async with stub.client() as client:
            diagnostics = GatewayDiagnostics("https://gw.test/api", http_client=client)
            credits = await diagnostics.check_credits("k")

        assert credits == {"status": "success", "credits": 42}
        assert stub.requests[0].url.params["secret"] == "k"

    @pytest.mark.asyncio
    async def test_check_credits_rejected(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={})

        async with GatewayStub(handler).client() as client:
            diagnostics = GatewayDiagnostics("https://gw.test/api", http_client=client)
            with pytest.raises(TransientGatewayError):
                await diagnostics.check_credits("k")

    @pytest.mark.asyncio
    async def test_blank_credential(self):
        diagnostics = GatewayDiagnostics("https://gw.test/api")

        with pytest.raises(ConfigurationError):
            await diagnostics.probe_credentials(" ")
