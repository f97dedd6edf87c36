"""
HTTP Bridge Client for dappdeploy.

Talks to the local bridge process that proxies calls to the remote
execution service, registry and wallet.

Wire Protocol:
    GET  /references
        -> {"execution": {"@handle": ...}, "registry": ..., "wallet": ...,
            "timer_service": ...}

    POST /rpc  {"target": <handle id>, "method": "install", "args": [...]}
        -> {"result": ...} | {"error": "..."}

    Handles travel as {"@handle": id, "kind": kind}. Keyed containers the
    remote side cannot transmit (the wallet's issuer set) come back as an
    ordered array of [name, value] pairs.

Usage:
    async with BridgeClient(BridgeConfig(base_url="http://127.0.0.1:8000")) as client:
        refs = await client.fetch_references()
        handle = await refs.execution.install(source, "nestedEvaluate")

No call is ever retried: install, make_instance and register all have
remote side effects that are not safe to repeat blindly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from ..errors import RemoteCallError, UnresolvedReferenceError
from ..references import ReferenceBundle
from .base import AdminInvite, RemoteHandle

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Configuration for the bridge client."""

    base_url: str = "http://127.0.0.1:8000"
    # None waits indefinitely
    timeout: float | None = None
    log_requests: bool = False


# =============================================================================
# Wire encoding
# =============================================================================


def encode_value(value: Any) -> Any:
    """Encode handles and containers for the wire."""
    if isinstance(value, RemoteHandle):
        return value.to_wire()
    if isinstance(value, _RemoteProxy):
        return value.handle.to_wire()
    if isinstance(value, Mapping):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def decode_value(value: Any) -> Any:
    """Decode handles found anywhere in a wire value."""
    if RemoteHandle.is_wire(value):
        return RemoteHandle.from_wire(value)
    if isinstance(value, Mapping):
        return {k: decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [decode_value(v) for v in value]
    return value


# =============================================================================
# Client
# =============================================================================


class BridgeClient:
    """
    Async client for the local bridge.

    Handles:
    - HTTP client lifecycle (lazy creation, close)
    - Wire encoding of handles
    - Error mapping to RemoteCallError
    """

    def __init__(
        self,
        config: BridgeConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            config: Bridge configuration
            transport: Custom httpx transport (used by tests)
        """
        self.config = config or BridgeConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "bridge"

    async def __aenter__(self) -> BridgeClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_references(self) -> ReferenceBundle:
        """
        Fetch the reference bundle from the bridge.

        Raises:
            UnresolvedReferenceError: If the bridge is unreachable or the
                bundle is incomplete
        """
        try:
            data = await self._send("GET", "/references", "home", "references")
        except RemoteCallError as e:
            raise UnresolvedReferenceError(f"Could not fetch references: {e}") from e

        if not isinstance(data, Mapping):
            raise UnresolvedReferenceError("Bridge returned a malformed reference bundle")

        refs: dict[str, Any] = {}
        for name, proxy_cls in (
            ("execution", BridgeExecutionService),
            ("registry", BridgeRegistryService),
            ("wallet", BridgeWalletService),
        ):
            raw = data.get(name)
            if RemoteHandle.is_wire(raw):
                refs[name] = proxy_cls(self, RemoteHandle.from_wire(raw))

        timer = data.get("timer_service")
        if RemoteHandle.is_wire(timer):
            refs["timer_service"] = RemoteHandle.from_wire(timer)

        return ReferenceBundle.from_mapping(refs)

    async def call(self, target: RemoteHandle, method: str, *args: Any) -> Any:
        """
        Invoke a method on a remote object.

        Args:
            target: Handle of the remote object
            method: Method name
            *args: Positional arguments (handles are encoded)

        Returns:
            Decoded result

        Raises:
            RemoteCallError: On transport failure, HTTP error or remote rejection
        """
        body = {"target": target.id, "method": method, "args": encode_value(list(args))}
        result = await self._send("POST", "/rpc", target.kind or target.id, method, json=body)
        return decode_value(result)

    async def _send(
        self,
        http_method: str,
        path: str,
        target: str,
        method: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> Any:
        client = await self._get_client()

        if self.config.log_requests:
            logger.debug(f"[{self.name}] {http_method} {path} body={json}")

        try:
            response = await client.request(http_method, path, json=json)
        except httpx.TimeoutException as e:
            raise RemoteCallError(f"Request timeout: {e}", target, method) from e
        except httpx.HTTPError as e:
            raise RemoteCallError(f"Transport error: {e}", target, method) from e

        if not response.is_success:
            raise RemoteCallError(
                _error_message(response),
                target,
                method,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteCallError("Bridge returned invalid JSON", target, method) from e

        if isinstance(payload, Mapping) and payload.get("error") is not None:
            raise RemoteCallError(str(payload["error"]), target, method)

        if http_method == "GET":
            return payload
        if not isinstance(payload, Mapping) or "result" not in payload:
            raise RemoteCallError("Bridge response has no result", target, method)
        return payload["result"]


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
        if isinstance(data, Mapping) and data.get("error"):
            return str(data["error"])
    except ValueError:
        pass
    return response.text[:200] or response.reason_phrase


# =============================================================================
# Service proxies
# =============================================================================


class _RemoteProxy:
    def __init__(self, client: BridgeClient, handle: RemoteHandle):
        self._client = client
        self.handle = handle

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.handle!r})"


# Instance config keys as the remote execution service spells them
INSTANCE_CONFIG_WIRE_KEYS = {"timer_service": "timerService"}


class BridgeExecutionService(_RemoteProxy):
    """Execution-install service reached through the bridge."""

    async def install(self, source: str, module_format: str) -> RemoteHandle:
        result = await self._client.call(self.handle, "install", source, module_format)
        if not isinstance(result, RemoteHandle):
            raise RemoteCallError("install did not return a handle", "execution", "install")
        return result

    async def make_instance(
        self,
        installation: RemoteHandle,
        issuer_keyword_record: Mapping[str, RemoteHandle],
        config: Mapping[str, Any],
    ) -> AdminInvite:
        result = await self._client.call(
            self.handle,
            "makeInstance",
            installation,
            dict(issuer_keyword_record),
            {INSTANCE_CONFIG_WIRE_KEYS.get(k, k): v for k, v in config.items()},
        )
        if isinstance(result, RemoteHandle):
            return AdminInvite(instance=result, installation=installation)
        if isinstance(result, Mapping) and isinstance(result.get("instance"), RemoteHandle):
            details = {k: v for k, v in result.items() if k != "instance"}
            return AdminInvite(
                instance=result["instance"], installation=installation, details=details
            )
        raise RemoteCallError(
            "makeInstance did not return an admin invite", "execution", "make_instance"
        )


class BridgeRegistryService(_RemoteProxy):
    """Public registry reached through the bridge."""

    async def register(self, base_name: str, handle: RemoteHandle) -> str:
        result = await self._client.call(self.handle, "register", base_name, handle)
        if not isinstance(result, str) or not result:
            raise RemoteCallError("register did not return a key", "registry", "register")
        return result


class BridgeWalletService(_RemoteProxy):
    """Local wallet reached through the bridge."""

    async def get_issuers(self) -> list[tuple[str, RemoteHandle]]:
        result = await self._client.call(self.handle, "getIssuers")
        if not isinstance(result, list):
            raise RemoteCallError("getIssuers did not return a list", "wallet", "get_issuers")

        pairs: list[tuple[str, RemoteHandle]] = []
        for entry in result:
            if not (isinstance(entry, list) and len(entry) == 2):
                raise RemoteCallError(
                    f"Malformed issuer entry: {entry!r}", "wallet", "get_issuers"
                )
            pairs.append((str(entry[0]), entry[1]))
        return pairs
