"""
dappdeploy Pipeline

Sequential deployment steps over immutable frames.

Core Components:
- Frame: Immutable data containers passed between steps
- Processor: One deployment step
- Pipeline: Fail-fast sequential executor
- DeployContext: Run-scoped references, settings and audit trail
"""

from .builder import create_deploy_pipeline
from .context import DeployContext, PipelineResult
from .executor import Pipeline, PipelineBuilder
from .processor import Processor

__all__ = [
    "Pipeline",
    "PipelineBuilder",
    "DeployContext",
    "PipelineResult",
    "Processor",
    "create_deploy_pipeline",
]
