# ABOUTME: Unit tests for project config validation
# ABOUTME: Tests required-field enforcement, type checks, defaults and idempotence

import pydantic
import pytest

from argocd_appgen.utils.validation import (
    DEFAULT_BASE_DOMAIN,
    ConfigValidationError,
    MissingRequiredFieldError,
    ProjectConfig,
    TypeMismatchError,
    require_valid_config,
    validate_config,
)


@pytest.mark.unit
class TestValidateConfig:
    """Tests for validate_config."""

    @pytest.mark.parametrize(
        "values",
        [
            {},
            {"project": ""},
            {"project": "   "},
            {"project": None},
            {"baseDomain": "example.com"},
        ],
    )
    def test_missing_project_rejected(self, values):
        """Test that absent or empty project yields MissingRequiredFieldError."""
        result = validate_config(values)

        assert isinstance(result, MissingRequiredFieldError)
        assert result.field == "project"

    def test_project_accepted(self):
        """Test that a non-empty project validates."""
        result = validate_config({"project": "acme", "baseDomain": "example.com"})

        assert isinstance(result, ProjectConfig)
        assert result.project == "acme"
        assert result.base_domain == "example.com"

    def test_default_base_domain_applied(self):
        """Test that missing baseDomain falls back to the default."""
        result = validate_config({"project": "acme"})

        assert isinstance(result, ProjectConfig)
        assert result.base_domain == DEFAULT_BASE_DOMAIN

    def test_null_base_domain_uses_default(self):
        """Test that an explicit null baseDomain is treated as absent."""
        result = validate_config({"project": "acme", "baseDomain": None})

        assert isinstance(result, ProjectConfig)
        assert result.base_domain == DEFAULT_BASE_DOMAIN

    def test_custom_default_base_domain(self):
        """Test that the default domain is a parameter, not a hidden literal."""
        result = validate_config({"project": "acme"}, default_base_domain="apps.internal")

        assert isinstance(result, ProjectConfig)
        assert result.base_domain == "apps.internal"

    def test_base_domain_used_verbatim(self):
        """Test that a provided baseDomain is not rewritten."""
        result = validate_config({"project": "acme", "baseDomain": "Example.COM."})

        assert isinstance(result, ProjectConfig)
        assert result.base_domain == "Example.COM."

    def test_project_type_mismatch(self):
        """Test that a non-string project yields TypeMismatchError."""
        result = validate_config({"project": 42})

        assert isinstance(result, TypeMismatchError)
        assert result.field == "project"
        assert result.expected == "str"
        assert result.actual == "int"

    def test_base_domain_type_mismatch(self):
        """Test that a non-string baseDomain yields TypeMismatchError."""
        result = validate_config({"project": "acme", "baseDomain": ["example.com"]})

        assert isinstance(result, TypeMismatchError)
        assert result.field == "baseDomain"
        assert result.actual == "list"

    def test_unknown_keys_ignored(self):
        """Test that extra keys in the values mapping are ignored."""
        result = validate_config({"project": "acme", "replicas": 3})

        assert isinstance(result, ProjectConfig)

    def test_idempotent_on_validated_config(self, acme_config: ProjectConfig):
        """Test that validating a ProjectConfig returns an equal config."""
        assert validate_config(acme_config) == acme_config

    def test_idempotent_on_resolved_values(self):
        """Test that validating resolved values yields the same config."""
        first = validate_config({"project": "acme"})
        assert isinstance(first, ProjectConfig)

        second = validate_config(first.to_values(), default_base_domain="other.example")

        assert second == first

    @pytest.mark.parametrize("project", ["...", " . "])
    def test_dots_only_project_rejected(self, project):
        """Test that a project contributing no host label counts as missing."""
        result = validate_config({"project": project})

        assert isinstance(result, MissingRequiredFieldError)
        assert result.field == "project"

    def test_unvalidated_project_config_rechecked(self):
        """Test that a ProjectConfig built without validation is not trusted."""
        config = ProjectConfig.model_construct(project="   ", base_domain="example.com")

        result = validate_config(config)

        assert isinstance(result, MissingRequiredFieldError)
        assert result.field == "project"


@pytest.mark.unit
class TestProjectConfig:
    """Tests for the ProjectConfig model."""

    def test_to_values_uses_aliases(self, acme_config: ProjectConfig):
        """Test that to_values emits the camelCase key."""
        assert acme_config.to_values() == {"project": "acme", "baseDomain": "example.com"}

    def test_frozen(self, acme_config: ProjectConfig):
        """Test that a validated config cannot be mutated."""
        with pytest.raises(pydantic.ValidationError):
            acme_config.project = "other"  # type: ignore[misc]

    @pytest.mark.parametrize("project", ["   ", "...", "."])
    def test_blank_project_rejected(self, project):
        """Test that whitespace-only or dots-only projects cannot be constructed."""
        with pytest.raises(pydantic.ValidationError):
            ProjectConfig(project=project, base_domain="example.com")

    def test_populate_by_alias(self):
        """Test construction with the camelCase alias."""
        config = ProjectConfig(project="acme", baseDomain="example.com")
        assert config.base_domain == "example.com"


@pytest.mark.unit
class TestRequireValidConfig:
    """Tests for the raising helper."""

    def test_returns_config(self):
        """Test that valid values return a ProjectConfig."""
        config = require_valid_config({"project": "acme"})
        assert config.project == "acme"

    def test_raises_with_error_value(self):
        """Test that invalid values raise ConfigValidationError naming the field."""
        with pytest.raises(ConfigValidationError) as exc_info:
            require_valid_config({})

        assert exc_info.value.field == "project"
        assert isinstance(exc_info.value.error, MissingRequiredFieldError)
        assert "project" in str(exc_info.value)


@pytest.mark.unit
class TestErrorMessages:
    """Tests for error value formatting."""

    def test_missing_field_message(self):
        """Test message formatting for a missing field."""
        message = MissingRequiredFieldError("project").format_message()

        assert "VALIDATION FAILED" in message
        assert "'project'" in message
        assert "\n" not in message

    def test_type_mismatch_message(self):
        """Test message formatting for a type mismatch."""
        message = TypeMismatchError("baseDomain", "str", "int").format_message()

        assert "'baseDomain'" in message
        assert "must be a str, got int" in message
