# ABOUTME: Command line interface and main entry point for argocd-appgen
# ABOUTME: Reads values files and --set pairs, renders manifests to stdout or a file

"""argocd-appgen command line interface."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import click
import pydantic
import structlog
import yaml

from argocd_appgen import __version__
from argocd_appgen.config import GeneratorSettings, load_settings
from argocd_appgen.manifest import HostVariant, build_manifest, derive_ingress_host
from argocd_appgen.utils.logging import bind_render_context, clear_render_context, configure_logging
from argocd_appgen.utils.validation import ProjectConfig, validate_config

logger = structlog.get_logger(__name__)

HOST_VARIANTS = [variant.value for variant in HostVariant]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ValuesFileError(Exception):
    """A values file could not be read or does not hold a mapping."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Invalid values file '{self.path}': {self.message}"


# =============================================================================
# VALUES LOADING
# =============================================================================


def load_values_file(path: Path) -> dict[str, Any]:
    """Load one YAML values file. An empty file yields an empty mapping."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValuesFileError(path, e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise ValuesFileError(path, f"not valid YAML ({e})") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValuesFileError(path, f"expected a mapping, got {type(data).__name__}")
    return data


def merge_values(
    files: Iterable[Path],
    overrides: Iterable[tuple[str, str]],
) -> dict[str, Any]:
    """Merge values files in order, then apply --set overrides on top."""
    values: dict[str, Any] = {}
    for path in files:
        values.update(load_values_file(path))
    for key, value in overrides:
        values[key] = value
    return values


def _parse_set(
    _ctx: click.Context, _param: click.Parameter, pairs: tuple[str, ...]
) -> list[tuple[str, str]]:
    parsed = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'")
        parsed.append((key.strip(), value))
    return parsed


def _resolve(
    ctx: click.Context,
    files: tuple[Path, ...],
    overrides: list[tuple[str, str]],
    host_variant: str | None,
    default_base_domain: str | None,
) -> tuple[ProjectConfig, HostVariant]:
    """Load values, validate them and pick the host variant.

    Exits with status 1 when validation fails.
    """
    settings: GeneratorSettings = ctx.obj
    try:
        values = merge_values(files, overrides)
    except ValuesFileError as e:
        raise click.UsageError(str(e), ctx=ctx) from e

    variant = HostVariant(host_variant) if host_variant else settings.host_variant
    bind_render_context(
        project=values.get("project"),
        variant=variant.value,
        files=[str(path) for path in files],
    )
    result = validate_config(values, default_base_domain or settings.default_base_domain)
    if not isinstance(result, ProjectConfig):
        click.echo(result.format_message(), err=True)
        ctx.exit(1)
    return result, variant


values_option = click.option(
    "-f",
    "--values",
    "files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML values file (repeatable, later files win).",
)
set_option = click.option(
    "--set",
    "overrides",
    multiple=True,
    callback=_parse_set,
    metavar="KEY=VALUE",
    help="Set a value, overriding values files (repeatable).",
)
domain_option = click.option(
    "--default-base-domain",
    default=None,
    help="Base domain used when the config has no baseDomain.",
)
variant_option = click.option(
    "--host-variant",
    type=click.Choice(HOST_VARIANTS),
    default=None,
    help="Ingress host layout.",
)


# =============================================================================
# COMMANDS
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="argocd-appgen")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (logs go to stderr).",
)
@click.option("--log-json", is_flag=True, help="JSON log lines on stderr.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_json: bool) -> None:
    """Generate Argo CD Application manifests from project config."""
    try:
        settings = load_settings()
    except pydantic.ValidationError as e:
        raise click.ClickException(f"Invalid settings: {e}") from e

    overrides: dict[str, Any] = {}
    if log_level is not None:
        overrides["log_level"] = log_level.upper()
    if log_json:
        overrides["log_json"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(level=settings.log_level, json_output=settings.log_json)
    clear_render_context()
    ctx.obj = settings


@cli.command()
@values_option
@set_option
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the manifest to a file instead of stdout.",
)
@click.option("--format", "output_format", type=click.Choice(["yaml", "json"]), default=None)
@variant_option
@domain_option
@click.pass_context
def render(
    ctx: click.Context,
    files: tuple[Path, ...],
    overrides: list[tuple[str, str]],
    output: Path | None,
    output_format: str | None,
    host_variant: str | None,
    default_base_domain: str | None,
) -> None:
    """Render the Application manifest."""
    settings: GeneratorSettings = ctx.obj
    config, variant = _resolve(ctx, files, overrides, host_variant, default_base_domain)

    text = build_manifest(config, variant).serialize(output_format or settings.output_format)

    if output is None:
        click.echo(text, nl=False)
    else:
        try:
            output.write_text(text, encoding="utf-8")
        except OSError as e:
            raise click.FileError(str(output), hint=e.strerror or str(e)) from e
        logger.info("Manifest written", path=str(output))


@cli.command()
@values_option
@set_option
@variant_option
@domain_option
@click.pass_context
def validate(
    ctx: click.Context,
    files: tuple[Path, ...],
    overrides: list[tuple[str, str]],
    host_variant: str | None,
    default_base_domain: str | None,
) -> None:
    """Validate config and print the resolved values."""
    config, variant = _resolve(ctx, files, overrides, host_variant, default_base_domain)

    resolved = {**config.to_values(), "ingressHost": derive_ingress_host(config, variant)}
    click.echo(yaml.safe_dump(resolved, sort_keys=False), nl=False)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def main() -> None:
    """Run the argocd-appgen CLI."""
    cli()


if __name__ == "__main__":
    main()
