# ABOUTME: Structured logging for argocd-appgen
# ABOUTME: Configures structlog on stderr and binds per-render context

"""
Structured logging on stderr with per-render context.

=============================================================================
WHAT IS THIS FILE?
=============================================================================

This module configures structlog for the CLI. Two things are specific to a
manifest generator:

1. STDERR ONLY: stdout carries the rendered manifest, which is commonly piped
   straight into ``kubectl apply -f -``. A single log line on stdout would
   corrupt that document, so every log line goes to stderr.

2. RENDER CONTEXT: when several projects are rendered in one process, each
   log line should say which project it belongs to. ``bind_render_context``
   stores fields in structlog's contextvars, and the ``merge_contextvars``
   processor copies them into every event:

    {"event": "Config rejected", "project": "acme", "field": "baseDomain", ...}
    {"event": "Manifest built", "project": "colenio", "host": "...", ...}

=============================================================================
PROCESSOR PIPELINE
=============================================================================

1. merge_contextvars: Adds fields bound with bind_render_context()
2. add_log_level: Adds "level" field
3. TimeStamper: Adds ISO-format timestamp
4. Renderer: JSON lines or colored console output
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


def configure_logging(
    level: str = "WARNING",
    json_output: bool = False,
) -> None:
    """
    Configure structured logging on stderr.

    Call it ONCE at startup. Calling it again reconfigures logging.

    Args:
        level: Logging level name ("DEBUG", "INFO", "WARNING", "ERROR",
               "CRITICAL"). Unknown names fall back to WARNING.
        json_output: If True, output JSON lines (for CI logs and aggregators).
                    If False, output colored text (for terminals).
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        # No colors when stderr is redirected to a file
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Not cached: tests and the CLI reconfigure between invocations
        cache_logger_on_first_use=False,
    )


# =============================================================================
# RENDER CONTEXT
# =============================================================================


def bind_render_context(**fields: Any) -> None:
    """
    Bind fields to every log line emitted until clear_render_context().

    None values are skipped so callers can pass optional fields directly.

    Example:
        bind_render_context(project="acme", variant="project")
        logger.info("Rendering")  # includes project=acme variant=project
    """
    structlog.contextvars.bind_contextvars(
        **{key: value for key, value in fields.items() if value is not None}
    )


def clear_render_context() -> None:
    """Remove all fields bound by bind_render_context()."""
    structlog.contextvars.clear_contextvars()
