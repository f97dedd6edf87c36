"""
Contract deployment entry point.

Installs the contract code on the execution service, creates an
instance of it, publishes the installation in the registry so others
can find it, and writes the generated config for the UI and API.

Usage:
    outcome = await deploy_contract(bridge.fetch_references(), settings)
    print(outcome.registry_key)

Every step runs once. A failure aborts the run and is re-raised; remote
objects created before the failure are left in place.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config.schemas import DeploySettings, GeneratedConfig
from .pipeline import DeployContext, create_deploy_pipeline
from .pipeline.frames import ConfigWrittenFrame, DeployRequestFrame, RegistrationFrame
from .references import ReferenceBundle, resolve_references
from .services.base import RemoteHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeployOutcome:
    """What a successful deployment produced."""

    contract_name: str
    registry_key: str
    installation: RemoteHandle
    config: GeneratedConfig | None = None
    config_path: Path | None = None

    def summary_lines(self) -> list[str]:
        lines = [
            "- SUCCESS! contract code installed",
            f"-- Contract Name: {self.contract_name}",
            f"-- InstallationHandle Register Key: {self.registry_key}",
        ]
        if self.config_path is not None:
            lines.append(f"-- Config written to {self.config_path}")
        return lines


async def deploy_contract(
    pending_references: Awaitable[ReferenceBundle | Mapping[str, Any]],
    settings: DeploySettings,
    *,
    write_config: bool = True,
    echo: Callable[[str], None] | None = None,
) -> DeployOutcome:
    """
    Deploy the contract described by settings.

    Args:
        pending_references: Awaitable yielding the reference bundle
        settings: Deployment settings
        write_config: Write the generated config file
        echo: Operator console output (None to stay silent)

    Returns:
        DeployOutcome with the registry key and generated config

    Raises:
        UnresolvedReferenceError: If the references never resolve
        DeployIOError: If the contract source or config file cannot be accessed
        RemoteCallError: If a remote service rejects a call
        NotFoundError: If the configured issuer petname is unknown
    """
    references = await resolve_references(pending_references)

    ctx = DeployContext(references=references, settings=settings)
    pipeline = create_deploy_pipeline(write_config=write_config)
    request = DeployRequestFrame(
        source_path=settings.contract_file,
        module_format=settings.module_format,
        contract_name=settings.contract_name,
    )

    result = await pipeline.execute(request, ctx)
    logger.debug(f"Deployment audit: {ctx.to_audit_dict()}")

    if not result.success:
        logger.error(
            f"Deployment of '{settings.contract_name}' failed at "
            f"'{result.error_frame.processor_name if result.error_frame else '?'}': {result.error}"
        )
        if result.exception is not None:
            raise result.exception
        raise RuntimeError(result.error or "Deployment failed")

    written = result.get_frame(ConfigWrittenFrame)
    registered = written or result.get_frame(RegistrationFrame)
    outcome = DeployOutcome(
        contract_name=settings.contract_name,
        registry_key=ctx.registry_key or "",
        installation=registered.installation,
        config=written.config if written else None,
        config_path=written.config_path if written else None,
    )

    if echo is not None:
        for line in outcome.summary_lines():
            echo(line)

    return outcome
