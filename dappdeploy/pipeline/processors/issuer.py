"""
Issuer Processor for dappdeploy.

Selects the wallet issuer that parameterizes the new instance.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from dappdeploy.errors import NotFoundError, RemoteCallError

from ..processor import Processor

if TYPE_CHECKING:
    from dappdeploy.services.base import RemoteHandle, WalletService

    from ..context import DeployContext
    from ..frames import Frame

logger = logging.getLogger(__name__)

# Keyword the installed contract expects its issuer under
TIP_KEYWORD = "Tip"


def issuers_from_pairs(pairs: Iterable[tuple[str, "RemoteHandle"]]) -> dict[str, "RemoteHandle"]:
    """
    Rebuild the wallet's issuer mapping from its wire form.

    The wallet cannot send a keyed container, so it sends ordered
    (petname, issuer) pairs. A repeated petname keeps its last issuer.
    """
    try:
        return dict(pairs)
    except (TypeError, ValueError) as e:
        raise RemoteCallError(
            f"Malformed issuer list: {e}", "wallet", "get_issuers"
        ) from e


async def resolve_issuer(wallet: "WalletService", petname: str) -> "RemoteHandle":
    """
    Look up an issuer by petname.

    Raises:
        NotFoundError: If the wallet has no issuer with that petname
        RemoteCallError: If the wallet call fails
    """
    issuers = issuers_from_pairs(await wallet.get_issuers())
    issuer = issuers.get(petname)
    if issuer is None:
        raise NotFoundError(petname, list(issuers))
    return issuer


def make_keyword_record(issuer: "RemoteHandle") -> Mapping[str, "RemoteHandle"]:
    """Build the read-only keyword record for instantiation."""
    return MappingProxyType({TIP_KEYWORD: issuer})


class IssuerProcessor(Processor):
    """
    Resolves the configured tip issuer.

    Input: InstallationFrame
    Output: IssuerFrame
    """

    @property
    def name(self) -> str:
        return "issuer"

    async def process(self, frame: "Frame", ctx: "DeployContext") -> "Frame":
        from ..frames import InstallationFrame, IssuerFrame

        installed = self.expect(frame, InstallationFrame)
        petname = ctx.settings.tip_issuer_petname

        issuer = await resolve_issuer(ctx.references.wallet, petname)
        logger.info(f"Using issuer '{petname}': {issuer!r}")

        return IssuerFrame(
            installation=installed.installation,
            issuer_petname=petname,
            issuer_keyword_record=make_keyword_record(issuer),
            contract_name=installed.contract_name,
            source_frame_id=installed.id,
        )
