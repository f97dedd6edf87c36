"""
In-memory sandbox services.

Implementations of the remote service protocols that keep all state in
process. `dappdeploy deploy --sandbox` uses them to rehearse a deployment
without a bridge, and the test suite uses them as fakes.

Usage:
    wallet = InMemoryWallet([("moola", RemoteHandle("issuer-1", "issuer"))])
    refs = ReferenceBundle(
        execution=InMemoryExecutionService(),
        registry=InMemoryRegistry(),
        wallet=wallet,
    )
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Iterable, Mapping
from typing import Any
from uuid import uuid4

from ..errors import RemoteCallError
from .base import AdminInvite, RemoteHandle

logger = logging.getLogger(__name__)

SUPPORTED_MODULE_FORMATS = frozenset({"nestedEvaluate", "getExport", "endoZipBase64"})


class InMemoryExecutionService:
    """
    Sandbox execution-install service.

    Rejects empty sources and unknown module formats on install, and
    rejects foreign handles or unexpected keywords on make_instance.
    """

    def __init__(self, expected_keywords: Iterable[str] | None = None):
        """
        Args:
            expected_keywords: Keywords every installation requires
                (None accepts any keyword record)
        """
        self._expected = frozenset(expected_keywords) if expected_keywords is not None else None
        self._installations: dict[str, tuple[str, str]] = {}
        self._instances: dict[str, RemoteHandle] = {}

    @property
    def installations(self) -> list[RemoteHandle]:
        return [RemoteHandle(id=i, kind="installation") for i in self._installations]

    @property
    def instance_count(self) -> int:
        return len(self._instances)

    async def install(self, source: str, module_format: str) -> RemoteHandle:
        if not source.strip():
            raise RemoteCallError("Bundle source is empty", "execution", "install")
        if module_format not in SUPPORTED_MODULE_FORMATS:
            raise RemoteCallError(
                f"Unsupported module format '{module_format}'", "execution", "install"
            )

        handle = RemoteHandle(id=f"installation-{uuid4().hex}", kind="installation")
        self._installations[handle.id] = (source, module_format)
        logger.debug(f"[sandbox] installed {handle!r} ({len(source)} chars)")
        return handle

    async def make_instance(
        self,
        installation: RemoteHandle,
        issuer_keyword_record: Mapping[str, RemoteHandle],
        config: Mapping[str, Any],
    ) -> AdminInvite:
        if installation.id not in self._installations:
            raise RemoteCallError(
                f"Unknown installation {installation!r}", "execution", "make_instance"
            )
        keywords = set(issuer_keyword_record)
        if self._expected is not None and keywords != self._expected:
            raise RemoteCallError(
                f"Keywords {sorted(keywords)} do not match expected {sorted(self._expected)}",
                "execution",
                "make_instance",
            )

        instance = RemoteHandle(id=f"instance-{uuid4().hex}", kind="instance")
        self._instances[instance.id] = installation
        return AdminInvite(
            instance=instance,
            installation=installation,
            details={"keywords": sorted(keywords), "config": dict(config)},
        )


class InMemoryRegistry:
    """Sandbox registry that appends a random numeric suffix to each base name."""

    def __init__(self, suffix_space: int = 10_000):
        """
        Args:
            suffix_space: Number of distinct suffixes available per base name
        """
        self._suffix_space = suffix_space
        self._width = len(str(suffix_space - 1))
        self._entries: dict[str, RemoteHandle] = {}
        self._taken: dict[str, int] = {}

    def get(self, key: str) -> RemoteHandle | None:
        return self._entries.get(key)

    def __len__(self) -> int:
        return len(self._entries)

    async def register(self, base_name: str, handle: RemoteHandle) -> str:
        if not base_name:
            raise RemoteCallError("Base name must not be empty", "registry", "register")

        if self._taken.get(base_name, 0) >= self._suffix_space:
            raise RemoteCallError(
                f"No free keys left for '{base_name}'", "registry", "register"
            )

        key = self._draw_key(base_name)
        while key in self._entries:
            key = self._draw_key(base_name)

        self._entries[key] = handle
        self._taken[base_name] = self._taken.get(base_name, 0) + 1
        return key

    def _draw_key(self, base_name: str) -> str:
        return f"{base_name}_{secrets.randbelow(self._suffix_space):0{self._width}d}"


class InMemoryWallet:
    """Sandbox wallet with a fixed, ordered issuer list."""

    def __init__(self, issuers: Iterable[tuple[str, RemoteHandle]] = ()):
        self._issuers = list(issuers)

    @classmethod
    def with_petnames(cls, *petnames: str) -> InMemoryWallet:
        """Create a wallet with one fresh issuer per petname."""
        return cls(
            (name, RemoteHandle(id=f"issuer-{name}-{uuid4().hex[:8]}", kind="issuer"))
            for name in petnames
        )

    async def get_issuers(self) -> list[tuple[str, RemoteHandle]]:
        return list(self._issuers)
