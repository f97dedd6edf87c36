"""
Deployment Pipeline Frames

Frames are immutable data containers that flow through the pipeline.
Each frame type represents the output of one deployment step.
"""

from .base import ErrorFrame, ErrorType, Frame
from .deploy import (
    BundleFrame,
    ConfigWrittenFrame,
    DeployRequestFrame,
    InstallationFrame,
    InstanceFrame,
    IssuerFrame,
    RegistrationFrame,
)

__all__ = [
    # Base
    "Frame",
    "ErrorFrame",
    "ErrorType",
    # Deployment steps
    "DeployRequestFrame",
    "BundleFrame",
    "InstallationFrame",
    "IssuerFrame",
    "InstanceFrame",
    "RegistrationFrame",
    "ConfigWrittenFrame",
]
