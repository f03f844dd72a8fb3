# ABOUTME: Project configuration validation for argocd-appgen
# ABOUTME: Resolves defaults and reports missing or mistyped fields as error values

"""Project configuration validation with errors returned as values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = structlog.get_logger(__name__)

DEFAULT_BASE_DOMAIN = "cloud.example.dev"

PROJECT_KEY = "project"
BASE_DOMAIN_KEY = "baseDomain"


class ProjectConfig(BaseModel):
    """Validated project configuration with defaults resolved."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    project: str = Field(min_length=1, description="Project identifier")
    base_domain: str = Field(alias=BASE_DOMAIN_KEY, description="Base DNS domain")

    @field_validator("project")
    @classmethod
    def validate_project(cls, v: str) -> str:
        """Reject projects that would contribute no host label ("   ", "...")."""
        if _is_blank(v):
            raise ValueError("project must not be blank")
        return v

    def to_values(self) -> dict[str, str]:
        """Return the config as a values mapping (``project``, ``baseDomain``)."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class MissingRequiredFieldError:
    """A required field is absent or empty."""

    field: str

    @property
    def reason(self) -> str:
        return f"required field '{self.field}' is missing or empty"

    def format_message(self) -> str:
        """Format error for a single stderr line."""
        return f"VALIDATION FAILED: {self.reason}"


@dataclass(frozen=True)
class TypeMismatchError:
    """A field is present but holds a value of the wrong type."""

    field: str
    expected: str
    actual: str

    @property
    def reason(self) -> str:
        return f"field '{self.field}' must be a {self.expected}, got {self.actual}"

    def format_message(self) -> str:
        """Format error for a single stderr line."""
        return f"VALIDATION FAILED: {self.reason}"


ConfigError = MissingRequiredFieldError | TypeMismatchError


class ConfigValidationError(Exception):
    """Raised by the raising helpers when a config fails validation."""

    def __init__(self, error: ConfigError) -> None:
        self.error = error
        super().__init__(error.reason)

    @property
    def field(self) -> str:
        return self.error.field


def validate_config(
    config: Mapping[str, Any] | ProjectConfig,
    default_base_domain: str = DEFAULT_BASE_DOMAIN,
) -> ProjectConfig | ConfigError:
    """Validate a project config and resolve its optional fields.

    Args:
        config: Raw values mapping, possibly partial, or an already
            validated ProjectConfig
        default_base_domain: Domain used when ``baseDomain`` is absent or null

    Returns:
        ProjectConfig on success, otherwise the first error found
        (``project`` is checked before ``baseDomain``)
    """
    if isinstance(config, ProjectConfig):
        # Re-checked through its values; model_construct() skips validators
        config = config.to_values()

    project = config.get(PROJECT_KEY)
    if project is not None and not isinstance(project, str):
        return _reject(TypeMismatchError(PROJECT_KEY, "str", type(project).__name__))
    if project is None or _is_blank(project):
        return _reject(MissingRequiredFieldError(PROJECT_KEY))

    base_domain = config.get(BASE_DOMAIN_KEY)
    if base_domain is None:
        base_domain = default_base_domain
    elif not isinstance(base_domain, str):
        return _reject(TypeMismatchError(BASE_DOMAIN_KEY, "str", type(base_domain).__name__))

    return ProjectConfig(project=project, base_domain=base_domain)


def require_valid_config(
    config: Mapping[str, Any] | ProjectConfig,
    default_base_domain: str = DEFAULT_BASE_DOMAIN,
) -> ProjectConfig:
    """Validate a config, raising ConfigValidationError on failure."""
    result = validate_config(config, default_base_domain)
    if isinstance(result, ProjectConfig):
        return result
    raise ConfigValidationError(result)


def _is_blank(value: str) -> bool:
    return not value.strip().strip(".")


def _reject(error: ConfigError) -> ConfigError:
    logger.info("Config rejected", field=error.field, reason=error.reason)
    return error
