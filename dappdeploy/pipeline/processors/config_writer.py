"""
Config Writer Processor for dappdeploy.

Publishes the deployment's identifiers to the UI and API layers.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from dappdeploy.config.generated import write_generated_config
from dappdeploy.config.schemas import GeneratedConfig

from ..processor import Processor

if TYPE_CHECKING:
    from ..context import DeployContext
    from ..frames import Frame

logger = logging.getLogger(__name__)


class ConfigWriterProcessor(Processor):
    """
    Writes the generated config file.

    Input: RegistrationFrame
    Output: ConfigWrittenFrame
    """

    def __init__(self, generated_from: str | Path | None = None):
        """
        Args:
            generated_from: Provenance recorded in the file header
                (defaults to the deploy module)
        """
        self._generated_from = generated_from

    @property
    def name(self) -> str:
        return "write_config"

    async def process(self, frame: "Frame", ctx: "DeployContext") -> "Frame":
        from ..frames import ConfigWrittenFrame, RegistrationFrame

        registered = self.expect(frame, RegistrationFrame)
        settings = ctx.settings

        config = GeneratedConfig(
            CONTRACT_NAME=registered.contract_name or settings.contract_name,
            INSTALLATION_REG_KEY=registered.registry_key,
            BRIDGE_URL=settings.bridge_url,
            API_URL=settings.api_url,
        )

        path = settings.config_file
        logger.info(f"writing {path}")
        await write_generated_config(
            config,
            path,
            generated_from=self._generated_from or _default_provenance(),
            fmt=settings.config_format,
        )

        return ConfigWrittenFrame(
            installation=registered.installation,
            config=config,
            config_path=path,
            source_frame_id=registered.id,
        )


def _default_provenance() -> Path:
    from dappdeploy import deploy

    return Path(deploy.__file__).resolve()
