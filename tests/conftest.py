# ABOUTME: Pytest fixtures and configuration for argocd-appgen tests
# ABOUTME: Provides shared configs, settings isolation and a CLI runner

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from argocd_appgen.manifest import ApplicationManifest, build_manifest
from argocd_appgen.utils.logging import clear_render_context
from argocd_appgen.utils.validation import ProjectConfig

SETTINGS_ENV_VARS = (
    "APPGEN_DEFAULT_BASE_DOMAIN",
    "APPGEN_HOST_VARIANT",
    "APPGEN_OUTPUT_FORMAT",
    "APPGEN_LOG_LEVEL",
    "APPGEN_LOG_JSON",
    "APPGEN_ENV_FILE",
)


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the developer's APPGEN_* environment and logging config out of the tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    clear_render_context()
    structlog.reset_defaults()


@pytest.fixture
def acme_config() -> ProjectConfig:
    """Create a validated config for the acme project."""
    return ProjectConfig(project="acme", base_domain="example.com")


@pytest.fixture
def colenio_config() -> ProjectConfig:
    """Create a validated config for the colenio project."""
    return ProjectConfig(project="colenio", base_domain="cloud.example.dev")


@pytest.fixture
def colenio_manifest(colenio_config: ProjectConfig) -> ApplicationManifest:
    """Build the manifest for the colenio project."""
    return build_manifest(colenio_config)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a click CLI runner."""
    return CliRunner()


@pytest.fixture
def values_file(tmp_path: Path) -> Path:
    """Write a values file for the colenio project."""
    path = tmp_path / "values.yaml"
    path.write_text("project: colenio\nbaseDomain: cloud.example.dev\n")
    return path
