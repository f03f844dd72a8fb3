# ABOUTME: Configuration management for argocd-appgen
# ABOUTME: Handles environment variables, the default base domain and output settings

"""
Configuration management using pydantic-settings.

=============================================================================
WHAT IS THIS FILE?
=============================================================================

The manifest builder itself is a pure function and reads nothing from the
environment. The surrounding tool (the CLI) does need a few knobs, and this
module is the single place they are defined:

1. READS environment variables (like APPGEN_DEFAULT_BASE_DOMAIN)
2. VALIDATES them (log level names, host variant values, domain shape)
3. PROVIDES typed access to settings for the CLI

The CLI passes the resolved values into the validator and builder as plain
arguments, so library callers never depend on process environment.

=============================================================================
ENVIRONMENT VARIABLE MAPPING
=============================================================================

    APPGEN_DEFAULT_BASE_DOMAIN -> baseDomain used when a config omits it
    APPGEN_HOST_VARIANT        -> "project" or "single-tenant"
    APPGEN_OUTPUT_FORMAT       -> "yaml" or "json"
    APPGEN_LOG_LEVEL           -> DEBUG, INFO, WARNING, ERROR, CRITICAL
    APPGEN_LOG_JSON            -> Emit JSON log lines on stderr
    APPGEN_ENV_FILE            -> Optional .env file read by load_settings()
"""

from __future__ import annotations

import os
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from argocd_appgen.manifest import HostVariant
from argocd_appgen.utils.validation import DEFAULT_BASE_DOMAIN

# =============================================================================
# GENERATOR SETTINGS
# =============================================================================


class GeneratorSettings(BaseSettings):
    """
    Settings for the manifest generator tool.

    USAGE:
    ------
        settings = load_settings()
        settings.default_base_domain  # "cloud.example.dev" unless overridden
        settings.host_variant         # HostVariant.PROJECT

    Every field has a default, so an empty environment yields a working
    configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="APPGEN_",
        # Field "log_level" reads from APPGEN_LOG_LEVEL, and so on.
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # RENDERING DEFAULTS
    # -------------------------------------------------------------------------

    default_base_domain: str = Field(
        default=DEFAULT_BASE_DOMAIN,
        description="Base domain applied when a project config omits baseDomain",
    )
    # This is the ONE place the fallback domain can be changed. The validator
    # receives it as an argument rather than reaching for a global.

    host_variant: HostVariant = Field(
        default=HostVariant.PROJECT,
        description="Ingress host layout (project or single-tenant)",
    )
    # project:       podinfo.<project>.<baseDomain>
    # single-tenant: podinfo.<baseDomain>

    output_format: Literal["yaml", "json"] = Field(
        default="yaml",
        description="Serialization format for rendered manifests",
    )

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------

    log_level: Annotated[str, Field(pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")] = Field(
        default="WARNING",
        description="Logging level",
    )
    # WARNING by default: a render is a one-shot command and should stay quiet
    # unless something goes wrong. Logs always go to stderr.

    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    # -------------------------------------------------------------------------
    # CUSTOM VALIDATORS
    # -------------------------------------------------------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lowercase level names ("debug" -> "DEBUG")."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("default_base_domain")
    @classmethod
    def validate_base_domain(cls, v: str) -> str:
        """
        Strip whitespace and edge dots from the default domain.

        ".cloud.example.dev." becomes "cloud.example.dev". An empty result is
        rejected because every rendered host would then lose its domain.
        """
        v = v.strip().strip(".")
        if not v:
            raise ValueError("default_base_domain must not be empty")
        return v


# =============================================================================
# SETTINGS LOADER
# =============================================================================


def load_settings() -> GeneratorSettings:
    """
    Load settings from environment with validation.

    If APPGEN_ENV_FILE is set, additional variables are read from that file.

    Raises:
        pydantic.ValidationError: If configuration is invalid.
    """
    return GeneratorSettings(
        _env_file=os.environ.get("APPGEN_ENV_FILE"),
    )
