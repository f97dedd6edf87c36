"""
Bundle Processor for dappdeploy.

Reads the contract source from local storage and packages it for the
execution service.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from dappdeploy.errors import DeployIOError

from ..processor import Processor

if TYPE_CHECKING:
    from ..context import DeployContext
    from ..frames import Frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BundleDescriptor:
    """Portable bundle: source text plus a module format tag."""

    source: str
    module_format: str


async def load_bundle(path: str | Path, module_format: str) -> BundleDescriptor:
    """
    Read a source file into a bundle descriptor.

    Raises:
        DeployIOError: If the file does not exist or cannot be read
    """
    path = Path(path)
    try:
        source = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        reason = getattr(e, "strerror", None) or str(e)
        raise DeployIOError(f"Cannot read contract source: {reason}", str(path)) from e
    return BundleDescriptor(source=source, module_format=module_format)


class BundleProcessor(Processor):
    """
    Packages the contract source.

    Input: DeployRequestFrame
    Output: BundleFrame
    """

    @property
    def name(self) -> str:
        return "bundle"

    async def process(self, frame: "Frame", ctx: "DeployContext") -> "Frame":
        from ..frames import BundleFrame, DeployRequestFrame

        request = self.expect(frame, DeployRequestFrame)
        bundle = await load_bundle(request.source_path, request.module_format)

        logger.info(
            f"Bundled {request.source_path} "
            f"({len(bundle.source)} chars, format={bundle.module_format})"
        )

        return BundleFrame(
            source=bundle.source,
            module_format=bundle.module_format,
            contract_name=request.contract_name,
            source_frame_id=request.id,
        )
