"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Iterable

from loguru import logger

CONTEXT_PREFIX = "[template]"


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating helpers


def log_config_loaded(template_id: str, config_path: Path, from_cache: bool) -> None:
    """Log where a template config came from."""
    if from_cache:
        _log_debug(f"Config cache hit: {template_id}")
    else:
        _log_info(f"Loaded template config: {template_id}")
        _log_debug(f"  Path: {config_path}")


def log_injection_summary(template_id: str, adapter_name: str, unresolved: Iterable[str]) -> None:
    """Log which adapter populated a template and what it left behind."""
    unresolved = list(unresolved)
    _log_info(f"Injected resume data into {template_id} with '{adapter_name}' adapter")
    if unresolved:
        shown = ", ".join(unresolved[:10])
        more = f" (+{len(unresolved) - 10} more)" if len(unresolved) > 10 else ""
        _log_warning(f"PlaceholderUnresolved: {len(unresolved)} tokens left: {shown}{more}")


def log_customization_plan(template_id: str, operations: list) -> None:
    """Log the ordered customization operations for a render."""
    if not operations:
        _log_debug(f"No customizations for {template_id}")
        return
    _log_info(f"Applying {len(operations)} customizations to {template_id}")
    for i, op in enumerate(operations, 1):
        _log_debug(f"  {i}. {op}")
