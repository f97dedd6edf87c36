"""
Publish Processor for dappdeploy.

Makes the installation discoverable by registering it in the shared
registry.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...errors import ForeignHandleError, RemoteCallError
from ..processor import Processor

if TYPE_CHECKING:
    from ..context import DeployContext
    from ..frames import Frame

logger = logging.getLogger(__name__)


class PublishProcessor(Processor):
    """
    Registers the installation handle.

    Input: InstanceFrame
    Output: RegistrationFrame

    The registry appends its own uniqueness suffix to the base name, so
    every call yields a fresh key.
    """

    @property
    def name(self) -> str:
        return "publish"

    async def process(self, frame: "Frame", ctx: "DeployContext") -> "Frame":
        from ..frames import InstanceFrame, RegistrationFrame

        instantiated = self.expect(frame, InstanceFrame)
        if ctx.installation is None or instantiated.installation != ctx.installation:
            raise ForeignHandleError(instantiated.installation, "register")

        base_name = ctx.settings.installation_base_name
        registry_key = await ctx.references.registry.register(
            base_name, instantiated.installation
        )
        if not registry_key or registry_key == base_name:
            raise RemoteCallError(
                f"Registry returned a non-unique key: {registry_key!r}", "registry", "register"
            )
        ctx.registry_key = registry_key

        logger.info(f"Registered installation as {registry_key}")

        return RegistrationFrame(
            installation=instantiated.installation,
            registry_key=registry_key,
            contract_name=instantiated.contract_name,
            source_frame_id=instantiated.id,
        )
