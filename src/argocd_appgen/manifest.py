# ABOUTME: Argo CD Application manifest builder for argocd-appgen
# ABOUTME: Derives the ingress host and assembles a fixed-shape, immutable Application document

"""
Argo CD Application manifest builder.

=============================================================================
WHAT IS THIS FILE?
=============================================================================

This module turns a validated ProjectConfig into an Argo CD ``Application``:

    ProjectConfig(project="acme", base_domain="example.com")
        |
        v  derive_ingress_host()
    "podinfo.acme.example.com"
        |
        v  build_manifest()
    ApplicationManifest (frozen pydantic model tree)
        |
        v  to_yaml() / to_json()
    text handed to kubectl apply or written to a file

=============================================================================
WHY PYDANTIC MODELS FOR THE DOCUMENT?
=============================================================================

Argo CD reads the document as a map, so key order does not matter to the
controller. It DOES matter to humans diffing rendered output in Git. Pydantic
dumps fields in declaration order, so the order below IS the document order,
and ``frozen=True`` makes a built manifest immutable.

Field names follow the Kubernetes camelCase spelling directly (apiVersion,
repoURL, selfHeal...) so the models read like the YAML they produce.

=============================================================================
FIXED TEMPLATE VALUES
=============================================================================

Only the ingress host varies between projects. Everything else is a constant
tied to the chart version below; changing any of them changes the rendered
output for every project.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict

from argocd_appgen.utils.validation import (
    DEFAULT_BASE_DOMAIN,
    ConfigError,
    ProjectConfig,
    require_valid_config,
    validate_config,
)

logger = structlog.get_logger(__name__)

# =============================================================================
# TEMPLATE CONSTANTS
# =============================================================================

API_VERSION = "argoproj.io/v1alpha1"
KIND = "Application"

APP_NAME = "podinfo"
# Short name of the deployed application. Also the first ingress host label.

ARGOCD_NAMESPACE = "argocd"
# Namespace the Application resource itself lives in (where Argo CD runs).

ARGOCD_PROJECT = "default"

CHART_NAME = "podinfo"
CHART_REPO_URL = "https://stefanprodan.github.io/podinfo"
CHART_VERSION = "6.9.0"

DESTINATION_SERVER = "https://kubernetes.default.svc"
# The cluster Argo CD itself runs in.

DESTINATION_NAMESPACE = "podinfo"

SYNC_OPTIONS = ("CreateNamespace=true", "PruneLast=true")
# Order is preserved in the output even though Argo CD does not care.

INGRESS_PATH = "/"
INGRESS_PATH_TYPE = "ImplementationSpecific"


class HostVariant(str, Enum):
    """Ingress host layouts.

    PROJECT:       <app>.<project>.<baseDomain>   (one subdomain per project)
    SINGLE_TENANT: <app>.<baseDomain>             (project segment omitted)
    """

    PROJECT = "project"
    SINGLE_TENANT = "single-tenant"


# =============================================================================
# DOCUMENT SCHEMA
# =============================================================================


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Metadata(_Node):
    name: str
    namespace: str


class Automated(_Node):
    prune: bool
    selfHeal: bool


class SyncPolicy(_Node):
    automated: Automated
    syncOptions: tuple[str, ...]


class IngressPath(_Node):
    path: str
    pathType: str


class IngressHost(_Node):
    host: str
    paths: tuple[IngressPath, ...]


class IngressValues(_Node):
    enabled: bool
    hosts: tuple[IngressHost, ...]


class ChartValues(_Node):
    ingress: IngressValues


class HelmSource(_Node):
    valuesObject: ChartValues


class Source(_Node):
    chart: str
    repoURL: str
    targetRevision: str
    helm: HelmSource


class Destination(_Node):
    server: str
    namespace: str


class ApplicationSpec(_Node):
    project: str
    syncPolicy: SyncPolicy
    source: Source
    destination: Destination


class ApplicationManifest(_Node):
    """
    An Argo CD Application document.

    Top-level keys are exactly apiVersion, kind, metadata and spec, in that
    order. Use the serializers below rather than ``model_dump`` directly so
    tuples come out as plain lists.
    """

    apiVersion: str
    kind: str
    metadata: Metadata
    spec: ApplicationSpec

    @property
    def ingress_host(self) -> str:
        """The derived host embedded in the chart values."""
        return self.spec.source.helm.valuesObject.ingress.hosts[0].host

    def to_dict(self) -> dict[str, Any]:
        """Return a fresh plain dict/list tree (safe for the caller to mutate)."""
        return self.model_dump(mode="json")

    def to_yaml(self) -> str:
        """Serialize as a single YAML document, keys in schema order."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)

    def to_json(self) -> str:
        """Serialize as indented JSON with a trailing newline."""
        return json.dumps(self.to_dict(), indent=2) + "\n"

    def serialize(self, output_format: str = "yaml") -> str:
        """Serialize in the named format ("yaml" or "json")."""
        if output_format == "yaml":
            return self.to_yaml()
        if output_format == "json":
            return self.to_json()
        raise ValueError(f"Unsupported output format '{output_format}'")


# =============================================================================
# DERIVATION
# =============================================================================


def derive_ingress_host(
    config: ProjectConfig,
    variant: HostVariant = HostVariant.PROJECT,
) -> str:
    """
    Compute the ingress host for a project.

    Segments are joined in a fixed order: app name, project (PROJECT variant
    only), base domain. Edge dots are stripped from each segment and empty
    segments are dropped, so the result never has a leading or trailing dot
    or an empty label:

        ("acme", "example.com")   -> podinfo.acme.example.com
        ("acme", ".example.com.") -> podinfo.acme.example.com
        ("acme", "")              -> podinfo.acme
    """
    variant = HostVariant(variant)
    segments = [APP_NAME]
    if variant is HostVariant.PROJECT:
        segments.append(config.project)
    segments.append(config.base_domain)

    labels = (segment.strip().strip(".") for segment in segments)
    return ".".join(label for label in labels if label)


# =============================================================================
# BUILDER
# =============================================================================


def build_manifest(
    config: ProjectConfig,
    variant: HostVariant = HostVariant.PROJECT,
) -> ApplicationManifest:
    """
    Build the Application manifest for a validated config.

    Cannot fail: every field is either a constant or derived from fields a
    ProjectConfig is guaranteed to carry.
    """
    variant = HostVariant(variant)
    host = derive_ingress_host(config, variant)

    manifest = ApplicationManifest(
        apiVersion=API_VERSION,
        kind=KIND,
        metadata=Metadata(name=APP_NAME, namespace=ARGOCD_NAMESPACE),
        spec=ApplicationSpec(
            project=ARGOCD_PROJECT,
            syncPolicy=SyncPolicy(
                automated=Automated(prune=True, selfHeal=True),
                syncOptions=SYNC_OPTIONS,
            ),
            source=Source(
                chart=CHART_NAME,
                repoURL=CHART_REPO_URL,
                targetRevision=CHART_VERSION,
                helm=HelmSource(
                    valuesObject=ChartValues(
                        ingress=IngressValues(
                            enabled=True,
                            hosts=(
                                IngressHost(
                                    host=host,
                                    paths=(IngressPath(path=INGRESS_PATH, pathType=INGRESS_PATH_TYPE),),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
            destination=Destination(
                server=DESTINATION_SERVER,
                namespace=DESTINATION_NAMESPACE,
            ),
        ),
    )

    logger.debug("Manifest built", project=config.project, variant=variant.value, host=host)
    return manifest


def render(
    values: Mapping[str, Any] | ProjectConfig,
    variant: HostVariant = HostVariant.PROJECT,
    default_base_domain: str = DEFAULT_BASE_DOMAIN,
) -> ApplicationManifest:
    """
    Validate raw values and build the manifest in one step.

    Raises:
        ConfigValidationError: If the values fail validation. No manifest is
            produced in that case.
    """
    config = require_valid_config(values, default_base_domain)
    return build_manifest(config, variant)


def render_many(
    configs: Iterable[Mapping[str, Any] | ProjectConfig],
    variant: HostVariant = HostVariant.PROJECT,
    default_base_domain: str = DEFAULT_BASE_DOMAIN,
) -> list[ApplicationManifest | ConfigError]:
    """
    Render a batch of configs independently.

    Returns one entry per input, in input order: the manifest, or the error
    value for a config that failed validation. A bad config never prevents
    the others from rendering.
    """
    results: list[ApplicationManifest | ConfigError] = []
    for values in configs:
        result = validate_config(values, default_base_domain)
        if isinstance(result, ProjectConfig):
            results.append(build_manifest(result, variant))
        else:
            results.append(result)
    return results
