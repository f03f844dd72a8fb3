# ABOUTME: Utilities package initialization for argocd-appgen
# ABOUTME: Contains shared utilities for validation and logging

"""
argocd-appgen Utilities Package

Shared utilities:
    - validation.py: Project config validation and error values
    - logging.py: structlog configuration and per-render context
"""
