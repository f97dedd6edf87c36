"""
Remote Service Protocols for dappdeploy.

Defines the interfaces the orchestrator needs from the remote
execution-install service, the public registry and the local wallet.
Any object with matching async methods satisfies them: the HTTP bridge
clients and the in-memory sandbox services both do.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class RemoteHandle:
    """
    Opaque reference to an object living behind the remote boundary.

    The orchestrator never looks inside a handle; it only passes it back
    to the service that issued it.

    Attributes:
        id: Identifier assigned by the remote side
        kind: Informational tag (e.g. "installation", "issuer")
    """

    id: str
    kind: str = ""

    def to_wire(self) -> dict[str, str]:
        return {"@handle": self.id, "kind": self.kind}

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> RemoteHandle:
        return cls(id=str(data["@handle"]), kind=str(data.get("kind", "")))

    @staticmethod
    def is_wire(data: Any) -> bool:
        return isinstance(data, Mapping) and "@handle" in data

    def __repr__(self) -> str:
        return f"RemoteHandle({self.kind or 'object'}:{self.id})"


@dataclass(frozen=True, slots=True)
class AdminInvite:
    """
    Control over a freshly created instance.

    Only used to confirm instantiation succeeded.
    """

    instance: RemoteHandle
    installation: RemoteHandle
    details: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ExecutionService(Protocol):
    """Remote execution-install service."""

    async def install(self, source: str, module_format: str) -> RemoteHandle:
        """Install bundled code, returning an installation handle."""
        ...

    async def make_instance(
        self,
        installation: RemoteHandle,
        issuer_keyword_record: Mapping[str, RemoteHandle],
        config: Mapping[str, Any],
    ) -> AdminInvite:
        """Create a live instance from an installation."""
        ...


@runtime_checkable
class RegistryService(Protocol):
    """Shared registry mapping unique string keys to objects."""

    async def register(self, base_name: str, handle: RemoteHandle) -> str:
        """Register a handle, returning a fresh unique key derived from base_name."""
        ...


@runtime_checkable
class WalletService(Protocol):
    """Local wallet holding the known issuers."""

    async def get_issuers(self) -> Sequence[tuple[str, RemoteHandle]]:
        """Return (petname, issuer) pairs in wallet order."""
        ...
