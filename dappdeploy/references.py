"""
Reference bundle resolution.

A deployment starts with a pending set of remote references: the
execution-install service, the registry, the wallet and (optionally) a
timer service. The bundle may still be settling when the orchestrator
starts, so it arrives as an awaitable and is resolved exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import UnresolvedReferenceError
from .services.base import ExecutionService, RegistryService, WalletService

logger = logging.getLogger(__name__)

REQUIRED_REFERENCES = ("execution", "registry", "wallet")


@dataclass(frozen=True, slots=True)
class ReferenceBundle:
    """
    Immutable set of remote handles used by a deployment run.

    Attributes:
        execution: Execution-install service
        registry: Public registry
        wallet: Local wallet
        timer_service: Timer reference handed to new instances (optional)
    """

    execution: ExecutionService
    registry: RegistryService
    wallet: WalletService
    timer_service: Any = None

    @classmethod
    def from_mapping(cls, refs: Mapping[str, Any]) -> ReferenceBundle:
        """
        Build a bundle from a logical-name mapping.

        Raises:
            UnresolvedReferenceError: If a required reference is missing
        """
        missing = [name for name in REQUIRED_REFERENCES if refs.get(name) is None]
        if missing:
            raise UnresolvedReferenceError(
                f"Reference bundle is missing: {', '.join(missing)}"
            )
        return cls(
            execution=refs["execution"],
            registry=refs["registry"],
            wallet=refs["wallet"],
            timer_service=refs.get("timer_service"),
        )

    def names(self) -> list[str]:
        names = list(REQUIRED_REFERENCES)
        if self.timer_service is not None:
            names.append("timer_service")
        return names


async def resolve_references(
    pending: Awaitable[ReferenceBundle | Mapping[str, Any]],
) -> ReferenceBundle:
    """
    Wait for the pending reference bundle.

    Args:
        pending: Awaitable yielding a ReferenceBundle or a logical-name mapping

    Returns:
        The resolved ReferenceBundle

    Raises:
        UnresolvedReferenceError: If the awaitable fails or the bundle is incomplete
    """
    try:
        refs = await pending
    except Exception as e:
        logger.error(f"Reference bundle failed to resolve: {e}")
        raise UnresolvedReferenceError(f"Reference bundle failed to resolve: {e}") from e

    if isinstance(refs, ReferenceBundle):
        bundle = refs
    elif isinstance(refs, Mapping):
        bundle = ReferenceBundle.from_mapping(refs)
    else:
        raise UnresolvedReferenceError(
            f"Reference bundle resolved to unsupported type {type(refs).__name__}"
        )

    logger.info(f"Resolved references: {bundle.names()}")
    return bundle
