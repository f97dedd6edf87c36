"""
dappdeploy command line.

    dappdeploy deploy [--sandbox] [--contract PATH] ...
    dappdeploy show-config [PATH]
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from .config import DeploySettings, build_settings, read_generated_config
from .deploy import DeployOutcome, deploy_contract
from .errors import DeployError
from .pipeline.processors import TIP_KEYWORD
from .references import ReferenceBundle
from .services import (
    InMemoryExecutionService,
    InMemoryRegistry,
    InMemoryWallet,
    RemoteHandle,
)
from .services.bridge import BridgeClient, BridgeConfig

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _describe_invalid_settings(error: ValidationError) -> str:
    problems = [
        f"{'.'.join(str(loc) for loc in item['loc'])}: {item['msg']}"
        for item in error.errors()
    ]
    return "Invalid settings: " + "; ".join(problems)


async def sandbox_references(settings: DeploySettings) -> ReferenceBundle:
    """In-process references for a rehearsal run."""
    return ReferenceBundle(
        execution=InMemoryExecutionService(expected_keywords=[TIP_KEYWORD]),
        registry=InMemoryRegistry(),
        wallet=InMemoryWallet.with_petnames(settings.tip_issuer_petname),
        timer_service=RemoteHandle(id="sandbox-timer", kind="timer"),
    )


async def _run_deploy(
    settings: DeploySettings,
    *,
    sandbox: bool,
    write_config: bool,
    verbose: bool = False,
) -> DeployOutcome:
    if sandbox:
        return await deploy_contract(
            sandbox_references(settings),
            settings,
            write_config=write_config,
            echo=click.echo,
        )

    config = BridgeConfig(
        base_url=settings.bridge_url,
        timeout=settings.request_timeout,
        log_requests=verbose,
    )
    async with BridgeClient(config) as client:
        return await deploy_contract(
            client.fetch_references(),
            settings,
            write_config=write_config,
            echo=click.echo,
        )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="dappdeploy")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Install, instantiate and publish a contract."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@cli.command("deploy")
@click.option(
    "--project-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory relative paths resolve against (default: cwd).",
)
@click.option("--contract", "contract_path", help="Contract source file.")
@click.option("--contract-name", help="Name the installation is published under.")
@click.option("--module-format", help="Bundle format tag for the execution service.")
@click.option("--config-path", help="Generated config destination.")
@click.option("--config-format", type=click.Choice(["js", "py"]), help="Generated config format.")
@click.option("--bridge-url", help="Local bridge URL (also written to the config).")
@click.option("--api-url", help="API URL written to the config.")
@click.option("--timeout", "request_timeout", type=float, help="Bridge request timeout in seconds.")
@click.option("--sandbox", is_flag=True, help="Rehearse against in-memory services.")
@click.option(
    "--write-config/--no-write-config",
    default=None,
    help="Write the generated config (default: on, off with --sandbox).",
)
@click.pass_context
def deploy_cmd(
    ctx: click.Context,
    project_dir: Path | None,
    contract_path: str | None,
    contract_name: str | None,
    module_format: str | None,
    config_path: str | None,
    config_format: str | None,
    bridge_url: str | None,
    api_url: str | None,
    request_timeout: float | None,
    sandbox: bool,
    write_config: bool | None,
) -> None:
    """Deploy the contract and write the generated config."""
    try:
        settings = build_settings(
            project_dir=project_dir,
            contract_path=contract_path,
            contract_name=contract_name,
            module_format=module_format,
            config_path=config_path,
            config_format=config_format,
            bridge_url=bridge_url,
            api_url=api_url,
            request_timeout=request_timeout,
        )
    except ValidationError as e:
        raise click.ClickException(_describe_invalid_settings(e)) from e

    if write_config is None:
        write_config = not sandbox

    try:
        asyncio.run(
            _run_deploy(
                settings,
                sandbox=sandbox,
                write_config=write_config,
                verbose=ctx.obj.get("verbose", False),
            )
        )
    except DeployError as e:
        raise click.ClickException(str(e)) from e


@cli.command("show-config")
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
def show_config_cmd(path: Path | None) -> None:
    """Print a generated config file as JSON."""
    if path is None:
        path = build_settings().config_file

    try:
        config = read_generated_config(path)
    except DeployError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps(config.model_dump(), indent=2))


def main() -> None:
    cli()
