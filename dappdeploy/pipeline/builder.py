"""
Pipeline factory for dappdeploy.
"""
from __future__ import annotations

from pathlib import Path

from .executor import Pipeline, PipelineBuilder
from .processors import (
    BundleProcessor,
    ConfigWriterProcessor,
    InstallProcessor,
    InstanceProcessor,
    IssuerProcessor,
    PublishProcessor,
)


def create_deploy_pipeline(
    *,
    write_config: bool = True,
    generated_from: str | Path | None = None,
) -> Pipeline:
    """
    Create the deployment pipeline.

    Pipeline flow:
    1. BundleProcessor: read contract source → BundleFrame
    2. InstallProcessor: install bundle → InstallationFrame
    3. IssuerProcessor: select tip issuer → IssuerFrame
    4. InstanceProcessor: make instance → InstanceFrame
    5. PublishProcessor: register installation → RegistrationFrame
    6. ConfigWriterProcessor: write generated config → ConfigWrittenFrame

    Args:
        write_config: Include the config writer step
        generated_from: Provenance recorded in the generated config header
    """
    return (
        PipelineBuilder()
        .add(BundleProcessor())
        .add(InstallProcessor())
        .add(IssuerProcessor())
        .add(InstanceProcessor())
        .add(PublishProcessor())
        .add_if(write_config, ConfigWriterProcessor(generated_from=generated_from))
        .build()
    )
