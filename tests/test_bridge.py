"""
Tests for the HTTP bridge client.

The bridge is simulated with httpx.MockTransport in front of the
in-memory sandbox services.
"""
import json

import httpx
import pytest

from dappdeploy import deploy_contract
from dappdeploy.config import read_generated_config
from dappdeploy.errors import RemoteCallError, UnresolvedReferenceError
from dappdeploy.services import (
    InMemoryExecutionService,
    InMemoryRegistry,
    InMemoryWallet,
    RemoteHandle,
)
from dappdeploy.services.bridge import (
    BridgeClient,
    BridgeConfig,
    BridgeExecutionService,
    decode_value,
    encode_value,
)


class FakeBridge:
    """Routes bridge requests to sandbox services."""

    def __init__(self):
        self.execution = InMemoryExecutionService(expected_keywords=["Tip"])
        self.registry = InMemoryRegistry()
        self.wallet = InMemoryWallet.with_petnames("moola", "simolean")
        self.requests: list[tuple[str, str]] = []
        self._targets = {
            "zoe-1": {
                "install": self.execution.install,
                "makeInstance": self.execution.make_instance,
            },
            "registry-1": {"register": self.registry.register},
            "wallet-1": {"getIssuers": self._get_issuers},
        }

    async def _get_issuers(self):
        return [list(pair) for pair in await self.wallet.get_issuers()]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == "/references":
            self.requests.append(("home", "references"))
            return httpx.Response(200, json={
                "execution": {"@handle": "zoe-1", "kind": "execution"},
                "registry": {"@handle": "registry-1", "kind": "registry"},
                "wallet": {"@handle": "wallet-1", "kind": "wallet"},
                "timer_service": {"@handle": "timer-1", "kind": "timer"},
            })

        body = json.loads(request.content)
        self.requests.append((body["target"], body["method"]))
        method = self._targets.get(body["target"], {}).get(body["method"])
        if method is None:
            return httpx.Response(404, json={"error": "no such method"})

        try:
            result = await method(*decode_value(body["args"]))
        except RemoteCallError as e:
            return httpx.Response(200, json={"error": e.args[0]})

        if hasattr(result, "instance"):
            result = {"instance": result.instance, "adminInvite": True}
        return httpx.Response(200, json={"result": encode_value(result)})


@pytest.fixture
def bridge():
    return FakeBridge()


@pytest.fixture
def client(bridge):
    return BridgeClient(
        BridgeConfig(base_url="http://bridge.test"),
        transport=httpx.MockTransport(bridge.handle),
    )


class TestWireEncoding:
    """Tests for handle encoding."""

    def test_encode_nested(self):
        handle = RemoteHandle(id="h1", kind="issuer")

        encoded = encode_value({"Tip": handle, "list": [handle, 1]})

        assert encoded == {
            "Tip": {"@handle": "h1", "kind": "issuer"},
            "list": [{"@handle": "h1", "kind": "issuer"}, 1],
        }

    def test_decode_nested(self):
        decoded = decode_value([["moola", {"@handle": "h1", "kind": "issuer"}]])

        assert decoded == [["moola", RemoteHandle(id="h1", kind="issuer")]]


class TestBridgeClient:
    """Tests for BridgeClient calls."""

    @pytest.mark.asyncio
    async def test_fetch_references(self, client):
        async with client:
            refs = await client.fetch_references()

        assert refs.execution.handle.id == "zoe-1"
        assert refs.timer_service == RemoteHandle(id="timer-1", kind="timer")

    @pytest.mark.asyncio
    async def test_wallet_pairs(self, client):
        async with client:
            refs = await client.fetch_references()
            pairs = await refs.wallet.get_issuers()

        assert [name for name, _ in pairs] == ["moola", "simolean"]
        assert all(isinstance(issuer, RemoteHandle) for _, issuer in pairs)

    @pytest.mark.asyncio
    async def test_remote_rejection_raises(self, client):
        async with client:
            refs = await client.fetch_references()
            with pytest.raises(RemoteCallError, match="Unsupported module format") as exc_info:
                await refs.execution.install("source", "commonjs")

        assert exc_info.value.method == "install"

    @pytest.mark.asyncio
    async def test_http_error_raises(self, client):
        async with client:
            with pytest.raises(RemoteCallError) as exc_info:
                await client.call(RemoteHandle(id="nobody"), "ping")

        assert exc_info.value.status_code == 404
        assert "no such method" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_not_retried(self):
        attempts = []

        def _refuse(request):
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = BridgeClient(transport=httpx.MockTransport(_refuse))

        async with client:
            with pytest.raises(RemoteCallError, match="Transport error"):
                await client.call(RemoteHandle(id="zoe-1", kind="execution"), "install", "s", "f")

        assert len(attempts) == 1

    @pytest.mark.asyncio
    async def test_unreachable_bridge_is_unresolved_reference(self):
        def _refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = BridgeClient(transport=httpx.MockTransport(_refuse))

        async with client:
            with pytest.raises(UnresolvedReferenceError):
                await client.fetch_references()

    @pytest.mark.asyncio
    async def test_incomplete_references(self):
        def _partial(request):
            return httpx.Response(200, json={"execution": {"@handle": "zoe-1"}})

        client = BridgeClient(transport=httpx.MockTransport(_partial))

        async with client:
            with pytest.raises(UnresolvedReferenceError, match="registry, wallet"):
                await client.fetch_references()

    @pytest.mark.asyncio
    async def test_instance_config_uses_remote_key_names(self):
        bodies = []

        def _capture(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(
                200, json={"result": {"instance": {"@handle": "i-1", "kind": "instance"}}}
            )

        client = BridgeClient(transport=httpx.MockTransport(_capture))
        execution = BridgeExecutionService(client, RemoteHandle(id="zoe-1", kind="execution"))
        timer = RemoteHandle(id="t", kind="timer")

        async with client:
            invite = await execution.make_instance(
                RemoteHandle(id="inst-1", kind="installation"),
                {"Tip": RemoteHandle(id="moola-1", kind="issuer")},
                {"timer_service": timer},
            )

        assert invite.instance == RemoteHandle(id="i-1", kind="instance")
        assert bodies[0]["method"] == "makeInstance"
        assert bodies[0]["args"][2] == {"timerService": {"@handle": "t", "kind": "timer"}}

    @pytest.mark.asyncio
    async def test_request_logging(self, bridge, caplog):
        client = BridgeClient(
            BridgeConfig(base_url="http://bridge.test", log_requests=True),
            transport=httpx.MockTransport(bridge.handle),
        )

        with caplog.at_level("DEBUG", logger="dappdeploy.services.bridge"):
            async with client:
                await client.fetch_references()

        assert "GET /references" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_result_raises(self):
        client = BridgeClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))

        async with client:
            with pytest.raises(RemoteCallError, match="no result"):
                await client.call(RemoteHandle(id="registry-1"), "register", "x", "y")


class TestDeployOverBridge:
    """Full deployment through the bridge transport."""

    @pytest.mark.asyncio
    async def test_deploy(self, bridge, client, settings):
        async with client:
            outcome = await deploy_contract(client.fetch_references(), settings)

        assert bridge.registry.get(outcome.registry_key) == outcome.installation
        assert bridge.execution.instance_count == 1
        assert read_generated_config(settings.config_file).INSTALLATION_REG_KEY == outcome.registry_key
        assert [method for _, method in bridge.requests] == [
            "references",
            "install",
            "getIssuers",
            "makeInstance",
            "register",
        ]
