"""
dappdeploy - Contract deployment orchestrator.

Installs a contract's code on a remote execution service, creates an
instance bound to a wallet issuer, publishes the installation in the
shared registry, and writes a generated config for the UI and API:

- **Reference Resolution**: Await the pending bundle of remote services
- **Pipeline Architecture**: One fail-fast processor per deployment step
- **Frame-Based Data Flow**: Immutable frames carry each step's output
- **Bridge Transport**: httpx client for the local bridge, plus an
  in-memory sandbox

Quick Start:
    >>> from dappdeploy import deploy_contract, get_settings
    >>> from dappdeploy.services.bridge import BridgeClient
    >>>
    >>> async with BridgeClient() as client:
    ...     outcome = await deploy_contract(client.fetch_references(), get_settings())
    >>> outcome.registry_key
"""

__version__ = "0.1.0"

from dappdeploy.config import DeploySettings, GeneratedConfig, get_settings
from dappdeploy.deploy import DeployOutcome, deploy_contract
from dappdeploy.errors import (
    ConfigFormatError,
    DeployError,
    DeployIOError,
    ForeignHandleError,
    NotFoundError,
    RemoteCallError,
    UnresolvedReferenceError,
)
from dappdeploy.references import ReferenceBundle, resolve_references

__all__ = [
    "__version__",
    # Entry point
    "deploy_contract",
    "DeployOutcome",
    # References
    "ReferenceBundle",
    "resolve_references",
    # Config
    "DeploySettings",
    "GeneratedConfig",
    "get_settings",
    # Errors
    "DeployError",
    "UnresolvedReferenceError",
    "DeployIOError",
    "RemoteCallError",
    "NotFoundError",
    "ForeignHandleError",
    "ConfigFormatError",
]
