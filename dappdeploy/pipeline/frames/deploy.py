"""
Deployment frames.

One frame per pipeline step. Every frame after installation carries the
installation handle forward, so the registered handle is always the one
installed earlier in the same run.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ...config.schemas import GeneratedConfig
from ...services.base import AdminInvite, RemoteHandle
from .base import Frame


@dataclass(frozen=True, kw_only=True, slots=True)
class DeployRequestFrame(Frame):
    """
    Initial frame: what to deploy.

    Attributes:
        source_path: Contract source file
        module_format: Bundle format tag for the execution service
        contract_name: Human-chosen contract name
    """

    source_path: Path
    module_format: str = "nestedEvaluate"
    contract_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update({
            "source_path": str(self.source_path),
            "module_format": self.module_format,
            "contract_name": self.contract_name,
        })
        return base


@dataclass(frozen=True, kw_only=True, slots=True)
class BundleFrame(Frame):
    """Bundle descriptor ready for installation."""

    source: str
    module_format: str
    contract_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update({
            "source_length": len(self.source),
            "module_format": self.module_format,
            "contract_name": self.contract_name,
        })
        return base


@dataclass(frozen=True, kw_only=True, slots=True)
class InstallationFrame(Frame):
    """Installed code, identified by its installation handle."""

    installation: RemoteHandle
    contract_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update({
            "installation": repr(self.installation),
            "contract_name": self.contract_name,
        })
        return base


@dataclass(frozen=True, kw_only=True, slots=True)
class IssuerFrame(Frame):
    """
    Installation plus the resources it will be instantiated with.

    Attributes:
        issuer_petname: Wallet petname the issuer was selected by
        issuer_keyword_record: Read-only keyword -> issuer mapping
    """

    installation: RemoteHandle
    issuer_petname: str
    issuer_keyword_record: Mapping[str, RemoteHandle] = field(
        default_factory=lambda: MappingProxyType({})
    )
    contract_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update({
            "installation": repr(self.installation),
            "issuer_petname": self.issuer_petname,
            "keywords": sorted(self.issuer_keyword_record),
        })
        return base


@dataclass(frozen=True, kw_only=True, slots=True)
class InstanceFrame(Frame):
    """A live instance was created from the installation."""

    installation: RemoteHandle
    admin_invite: AdminInvite
    contract_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update({
            "installation": repr(self.installation),
            "instance": repr(self.admin_invite.instance),
        })
        return base


@dataclass(frozen=True, kw_only=True, slots=True)
class RegistrationFrame(Frame):
    """The installation is published under a unique registry key."""

    installation: RemoteHandle
    registry_key: str
    contract_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update({
            "installation": repr(self.installation),
            "registry_key": self.registry_key,
            "contract_name": self.contract_name,
        })
        return base


@dataclass(frozen=True, kw_only=True, slots=True)
class ConfigWrittenFrame(Frame):
    """Terminal frame: the generated config is on disk."""

    installation: RemoteHandle
    config: GeneratedConfig
    config_path: Path

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update({
            "config_path": str(self.config_path),
            "config": self.config.model_dump(),
        })
        return base
