"""
Install Processor for dappdeploy.

Submits the bundle to the execution-install service.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..processor import Processor

if TYPE_CHECKING:
    from ..context import DeployContext
    from ..frames import Frame

logger = logging.getLogger(__name__)


class InstallProcessor(Processor):
    """
    Installs the bundled code.

    Input: BundleFrame
    Output: InstallationFrame

    Installation is not idempotent on the remote side, so a failure is
    never retried.
    """

    @property
    def name(self) -> str:
        return "install"

    async def process(self, frame: "Frame", ctx: "DeployContext") -> "Frame":
        from ..frames import BundleFrame, InstallationFrame

        bundle = self.expect(frame, BundleFrame)

        installation = await ctx.references.execution.install(
            bundle.source, bundle.module_format
        )
        ctx.installation = installation

        logger.info(f"Installed contract code: {installation!r}")

        return InstallationFrame(
            installation=installation,
            contract_name=bundle.contract_name,
            source_frame_id=bundle.id,
        )
