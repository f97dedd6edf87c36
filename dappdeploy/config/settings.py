"""
Settings loading for dappdeploy.

The process environment contributes one option, TIP_ISSUER_PETNAME,
which selects the wallet issuer used to parameterize the instance.
Everything else comes from command-line options layered on top.
"""
from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any

from .schemas import DEFAULT_TIP_ISSUER_PETNAME, DeploySettings

logger = logging.getLogger(__name__)

TIP_ISSUER_PETNAME_ENV = "TIP_ISSUER_PETNAME"


@lru_cache()
def get_settings() -> DeploySettings:
    """
    Get deployment settings from the environment.

    Uses lru_cache for singleton pattern.
    """
    return DeploySettings(
        tip_issuer_petname=os.getenv(TIP_ISSUER_PETNAME_ENV) or DEFAULT_TIP_ISSUER_PETNAME,
    )


def build_settings(**overrides: Any) -> DeploySettings:
    """
    Layer explicit overrides on the environment settings.

    None values are ignored so unset command-line options keep their defaults.
    """
    update = {k: v for k, v in overrides.items() if v is not None}
    settings = get_settings()
    if not update:
        return settings
    merged = DeploySettings.model_validate({**settings.model_dump(), **update})
    logger.debug(f"Settings overrides applied: {sorted(update)}")
    return merged
