# ABOUTME: argocd-appgen package initialization
# ABOUTME: Exposes version information and the render entry points

"""
argocd-appgen - Deterministic Argo CD Application manifests from project config.

=============================================================================
WHAT IS THIS PACKAGE?
=============================================================================

Given a tiny per-project configuration:

    project: colenio
    baseDomain: cloud.example.dev

this package produces an Argo CD ``Application`` resource that deploys the
podinfo Helm chart with an ingress host derived from that configuration:

    apiVersion: argoproj.io/v1alpha1
    kind: Application
    metadata:
      name: podinfo
      namespace: argocd
    spec:
      ...
      source:
        chart: podinfo
        helm:
          valuesObject:
            ingress:
              hosts:
              - host: podinfo.colenio.cloud.example.dev

The transformation is PURE: no cluster access, no network, no files. The CLI
(``argocd-appgen render``) is the only part that reads values files and writes
output.

=============================================================================
PACKAGE STRUCTURE OVERVIEW
=============================================================================

argocd_appgen/
├── __init__.py          <- YOU ARE HERE: Package entry point
├── config.py            <- Settings (env vars, defaults)
├── manifest.py          <- Manifest builder and Application schema
├── cli.py               <- click command line interface
└── utils/
    ├── __init__.py      <- Utils subpackage marker
    ├── logging.py       <- structlog configuration (stderr)
    └── validation.py    <- Config validator and error values
"""

from argocd_appgen.manifest import (
    ApplicationManifest,
    HostVariant,
    build_manifest,
    render,
    render_many,
)
from argocd_appgen.utils.validation import (
    ConfigValidationError,
    MissingRequiredFieldError,
    ProjectConfig,
    TypeMismatchError,
    validate_config,
)

__version__ = "0.1.0"

__all__ = [
    "ApplicationManifest",
    "ConfigValidationError",
    "HostVariant",
    "MissingRequiredFieldError",
    "ProjectConfig",
    "TypeMismatchError",
    "__version__",
    "build_manifest",
    "render",
    "render_many",
    "validate_config",
]
