"""
Pipeline Executor for dappdeploy.

Runs the deployment steps strictly in order. Each step's output frame is
the next step's input. The first failure stops the run: there is no
retry and no rollback of remote side effects already performed.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from .context import DeployContext, PipelineResult
from .frames import ErrorFrame, Frame

if TYPE_CHECKING:
    from .processor import Processor

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Pipeline orchestrates sequential deployment steps.

    Execution Model:
    - One frame flows through the processors in order
    - Each processor returns exactly one frame
    - An exception becomes a fatal ErrorFrame and ends the run

    Example:
        pipeline = Pipeline([
            BundleProcessor(),
            InstallProcessor(),
            IssuerProcessor(),
            InstanceProcessor(),
            PublishProcessor(),
            ConfigWriterProcessor(),
        ])

        result = await pipeline.execute(
            initial_frame=DeployRequestFrame(source_path=...),
            ctx=DeployContext(references=refs, settings=settings),
        )
    """

    def __init__(self, processors: list["Processor"]):
        """
        Initialize pipeline with ordered list of processors.

        Args:
            processors: List of processors in execution order
        """
        if not processors:
            raise ValueError("Pipeline must have at least one processor")
        self.processors = processors

    @property
    def processor_names(self) -> list[str]:
        """Get names of all processors in order."""
        return [p.name for p in self.processors]

    async def execute(self, initial_frame: Frame, ctx: DeployContext) -> PipelineResult:
        """
        Execute the pipeline on an initial frame.

        Args:
            initial_frame: The starting frame
            ctx: Run context

        Returns:
            PipelineResult with the final frame or the failure
        """
        logger.info(
            f"Pipeline starting: execution_id={str(ctx.execution_id)[:8]}..., "
            f"processors={self.processor_names}"
        )

        result = PipelineResult(context=ctx)
        frame = initial_frame

        for processor in self.processors:
            ctx.record_frame(frame.to_dict(), processor.name)
            start_time = time.perf_counter()

            try:
                output = await processor.process(frame, ctx)
            except Exception as e:
                logger.error(f"Processor '{processor.name}' failed: {e}")
                error_frame = ErrorFrame.from_exception(
                    exc=e,
                    processor_name=processor.name,
                    source_frame=frame,
                )
                ctx.record_frame(error_frame.to_dict(), processor.name)
                result.output_frames = [error_frame]
                result.success = False
                result.error = error_frame.error_message
                result.error_frame = error_frame
                result.exception = e
                self._warn_orphans(ctx, processor.name)
                return result
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                ctx.record_timing(processor.name, duration_ms)

            logger.debug(
                f"Processor '{processor.name}': "
                f"{frame.frame_type} -> {output.frame_type}, time={duration_ms:.1f}ms"
            )
            frame = output

        result.output_frames = [frame]

        logger.info(
            f"Pipeline complete: execution_id={str(ctx.execution_id)[:8]}..., "
            f"duration={ctx.elapsed_ms:.1f}ms"
        )
        return result

    def _warn_orphans(self, ctx: DeployContext, failed_step: str) -> None:
        effects = ctx.remote_side_effects()
        if effects:
            logger.warning(
                f"Step '{failed_step}' failed after remote side effects; "
                f"left in place: {', '.join(effects)}"
            )

    def __repr__(self) -> str:
        return f"Pipeline(processors={self.processor_names})"


class PipelineBuilder:
    """
    Builder for constructing pipelines with fluent API.

    Example:
        pipeline = (
            PipelineBuilder()
            .add(BundleProcessor())
            .add(InstallProcessor())
            .build()
        )
    """

    def __init__(self) -> None:
        self._processors: list["Processor"] = []

    def add(self, processor: "Processor") -> "PipelineBuilder":
        """Add a processor to the pipeline."""
        self._processors.append(processor)
        return self

    def add_if(self, condition: bool, processor: "Processor") -> "PipelineBuilder":
        """Conditionally add a processor."""
        if condition:
            self._processors.append(processor)
        return self

    def build(self) -> Pipeline:
        """Build and return the pipeline."""
        return Pipeline(self._processors)
