"""
Configuration Schemas for dappdeploy.

Pydantic models for the deployment settings and for the generated
config record consumed by the UI and API layers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_TIP_ISSUER_PETNAME = "moola"


class DeploySettings(BaseModel):
    """
    Settings for one deployment run.

    Built once at startup (see `get_settings`) and passed explicitly to
    the orchestrator. Relative paths resolve against `project_dir`.
    """

    # Contract
    contract_name: str = Field("time-release", min_length=1, description="Human-chosen contract name")
    contract_path: str = Field("src/contracts/proxy.js", description="Contract source file")
    module_format: str = Field("nestedEvaluate", description="Bundle format tag for the execution service")

    # Issuer selection (TIP_ISSUER_PETNAME)
    tip_issuer_petname: str = Field(DEFAULT_TIP_ISSUER_PETNAME, min_length=1)

    # Endpoints published to the UI/API
    bridge_url: str = "http://127.0.0.1:8000"
    api_url: str = "http://127.0.0.1:8000"

    # Generated config output
    project_dir: Path = Field(default_factory=Path.cwd)
    config_path: str = Field("../ui/public/conf/defaults.js", description="Generated config file")
    config_format: Literal["js", "py"] = "js"

    # Transport (None waits indefinitely)
    request_timeout: float | None = Field(None, gt=0)

    class Config:
        extra = "forbid"

    @field_validator("bridge_url", "api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def installation_base_name(self) -> str:
        """Base name the installation is registered under."""
        return f"{self.contract_name}installation"

    def resolve_path(self, path: str | Path) -> Path:
        """Resolve a path relative to the project directory."""
        return (self.project_dir / path).resolve()

    @property
    def contract_file(self) -> Path:
        return self.resolve_path(self.contract_path)

    @property
    def config_file(self) -> Path:
        return self.resolve_path(self.config_path)


class GeneratedConfig(BaseModel):
    """
    Constants published for the UI and API layers.

    These four fields are the whole contract between the deployer and
    its consumers.
    """

    CONTRACT_NAME: str
    INSTALLATION_REG_KEY: str
    BRIDGE_URL: str
    API_URL: str

    class Config:
        extra = "forbid"
        frozen = True
