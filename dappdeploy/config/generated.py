"""
Generated config artifact.

After a successful deployment the deployer writes the contract name,
installation registry key and network endpoints to a small module that
the UI (JavaScript) or API (Python) can import directly:

    // GENERATED FROM /path/to/dappdeploy/deploy.py
    export default {
      "CONTRACT_NAME": "time-release",
      ...
    };

The file is replaced on every run.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ..errors import ConfigFormatError, DeployIOError
from .schemas import GeneratedConfig

logger = logging.getLogger(__name__)

PY_EXPORT_NAME = "DAPP_CONSTANTS"


def render_generated_config(
    config: GeneratedConfig,
    generated_from: str | Path,
    fmt: str = "js",
) -> str:
    """
    Render the config as an importable module.

    Args:
        config: Record to serialize
        generated_from: Provenance written into the header comment
        fmt: "js" (ES module default export) or "py" (module constant)
    """
    body = json.dumps(config.model_dump(), indent=2)
    if fmt == "js":
        return f"// GENERATED FROM {generated_from}\nexport default {body};\n"
    if fmt == "py":
        return f"# GENERATED FROM {generated_from}\n{PY_EXPORT_NAME} = {body}\n"
    raise ValueError(f"Unknown config format: {fmt}")


async def write_generated_config(
    config: GeneratedConfig,
    path: str | Path,
    generated_from: str | Path,
    fmt: str = "js",
) -> Path:
    """
    Write the generated config, replacing any previous content.

    The parent directory must already exist.

    Raises:
        DeployIOError: If the file cannot be written
    """
    path = Path(path)
    contents = render_generated_config(config, generated_from, fmt)
    try:
        await asyncio.to_thread(path.write_text, contents, encoding="utf-8")
    except OSError as e:
        raise DeployIOError(f"Cannot write generated config: {e.strerror or e}", str(path)) from e

    logger.info(f"Wrote generated config to {path} ({len(contents)} bytes)")
    return path


def parse_generated_config(text: str) -> GeneratedConfig:
    """
    Parse the contents of a generated config file (either format).

    Raises:
        ConfigFormatError: If the text is not a generated config
    """
    lines = [
        line
        for line in text.splitlines()
        if not line.lstrip().startswith(("//", "#"))
    ]
    joined = "\n".join(lines)
    start, end = joined.find("{"), joined.rfind("}")
    if start == -1 or end < start:
        raise ConfigFormatError("Generated config contains no object literal")

    try:
        data = json.loads(joined[start : end + 1])
    except json.JSONDecodeError as e:
        raise ConfigFormatError(f"Generated config is not valid JSON: {e}") from e

    try:
        return GeneratedConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigFormatError(f"Generated config has unexpected fields: {e}") from e


def read_generated_config(path: str | Path) -> GeneratedConfig:
    """
    Read a generated config file back into a GeneratedConfig.

    Raises:
        DeployIOError: If the file cannot be read
        ConfigFormatError: If the contents are malformed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeployIOError(f"Cannot read generated config: {e.strerror or e}", str(path)) from e
    return parse_generated_config(text)
