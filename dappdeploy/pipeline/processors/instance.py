"""
Instance Processor for dappdeploy.

Creates a live instance from this run's installation.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...errors import ForeignHandleError
from ..processor import Processor

if TYPE_CHECKING:
    from ..context import DeployContext
    from ..frames import Frame

logger = logging.getLogger(__name__)


class InstanceProcessor(Processor):
    """
    Instantiates the installation with its issuer keyword record.

    Input: IssuerFrame
    Output: InstanceFrame
    """

    @property
    def name(self) -> str:
        return "instance"

    async def process(self, frame: "Frame", ctx: "DeployContext") -> "Frame":
        from ..frames import InstanceFrame, IssuerFrame

        resolved = self.expect(frame, IssuerFrame)
        if ctx.installation is None or resolved.installation != ctx.installation:
            raise ForeignHandleError(resolved.installation, "instantiate")

        instance_config = {"timer_service": ctx.references.timer_service}
        admin_invite = await ctx.references.execution.make_instance(
            resolved.installation,
            resolved.issuer_keyword_record,
            instance_config,
        )
        ctx.admin_invite = admin_invite

        logger.info(f"Created instance {admin_invite.instance!r}")

        return InstanceFrame(
            installation=resolved.installation,
            admin_invite=admin_invite,
            contract_name=resolved.contract_name,
            source_frame_id=resolved.id,
        )
