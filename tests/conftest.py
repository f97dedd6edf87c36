"""
Pytest configuration and fixtures for dappdeploy tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from dappdeploy.pipeline import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from dappdeploy.config import DeploySettings  # noqa: E402
from dappdeploy.config.settings import get_settings  # noqa: E402
from dappdeploy.references import ReferenceBundle  # noqa: E402
from dappdeploy.services import (  # noqa: E402
    InMemoryExecutionService,
    InMemoryRegistry,
    InMemoryWallet,
    RemoteHandle,
)

CONTRACT_SOURCE = "export const start = zcf => harden({ creatorFacet: {} });\n"


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def project_dir(tmp_path):
    """Project layout with a contract source and a UI config directory."""
    project = tmp_path / "contract"
    (project / "src" / "contracts").mkdir(parents=True)
    (project / "src" / "contracts" / "proxy.js").write_text(CONTRACT_SOURCE)
    (tmp_path / "ui" / "public" / "conf").mkdir(parents=True)
    return project


@pytest.fixture
def settings(project_dir):
    return DeploySettings(project_dir=project_dir)


@pytest.fixture
def moola_issuer():
    return RemoteHandle(id="issuer-moola", kind="issuer")


@pytest.fixture
def wallet(moola_issuer):
    return InMemoryWallet([
        ("simolean", RemoteHandle(id="issuer-simolean", kind="issuer")),
        ("moola", moola_issuer),
    ])


@pytest.fixture
def execution():
    return InMemoryExecutionService(expected_keywords=["Tip"])


@pytest.fixture
def registry():
    return InMemoryRegistry()


@pytest.fixture
def timer():
    return RemoteHandle(id="timer-1", kind="timer")


@pytest.fixture
def references(execution, registry, wallet, timer):
    return ReferenceBundle(
        execution=execution,
        registry=registry,
        wallet=wallet,
        timer_service=timer,
    )


@pytest.fixture
def pending(references):
    """Factory for a fresh awaitable resolving to the reference bundle."""

    async def _resolve():
        return references

    return _resolve


@pytest.fixture
def contract_source():
    return CONTRACT_SOURCE
