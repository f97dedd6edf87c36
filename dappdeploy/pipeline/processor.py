"""
Processor abstraction for the deployment pipeline.

Each deployment step is a processor: it receives the previous step's
frame and the run context, performs its (usually remote) work, and
returns the next frame.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from .context import DeployContext
    from .frames import Frame

logger = logging.getLogger(__name__)

F = TypeVar("F", bound="Frame")


class Processor(ABC):
    """
    Base class for all deployment steps.

    Processors:
    - Receive a frame and context
    - Return the next frame
    - Raise on failure (the pipeline stops at the first error)

    Subclasses must implement:
    - name: Unique processor identifier
    - process(): The step logic
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this processor, used in logging and timings."""
        ...

    @abstractmethod
    async def process(
        self,
        frame: Frame,
        ctx: DeployContext,
    ) -> Frame:
        """
        Run this step.

        Args:
            frame: Output of the previous step
            ctx: Run context with references and settings

        Returns:
            Frame for the next step

        Raises:
            Exception: Any failure; the pipeline stops and records it
        """
        ...

    def expect(self, frame: Frame, frame_type: type[F]) -> F:
        """Check the incoming frame has the type this step consumes."""
        if not isinstance(frame, frame_type):
            raise TypeError(
                f"Processor '{self.name}' expects {frame_type.__name__}, "
                f"got {frame.frame_type}"
            )
        return frame

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
