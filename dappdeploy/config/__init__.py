"""
dappdeploy Configuration

Deployment settings and the generated config artifact.
"""

from .generated import (
    parse_generated_config,
    read_generated_config,
    render_generated_config,
    write_generated_config,
)
from .schemas import DeploySettings, GeneratedConfig
from .settings import build_settings, get_settings

__all__ = [
    "DeploySettings",
    "GeneratedConfig",
    "get_settings",
    "build_settings",
    "render_generated_config",
    "write_generated_config",
    "parse_generated_config",
    "read_generated_config",
]
