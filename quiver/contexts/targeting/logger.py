"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from quiver.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Path, config_path: Optional[Path] = None) -> Path:
    """
    Setup logger for targeting context.

    Args:
        log_dir: Directory for this targeting session
        config_path: Tailoring config override, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="target", log_dir=log_dir, config_path=config_path)


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [target] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_selection_options(options) -> None:
    """Log the thresholds a selection run is about to apply."""
    _log_info(
        f"Filtering items: min_score={options.min_score}, "
        f"min={options.min_items}, max={options.max_items}"
    )
    _log_info(
        f"Special rules: min_work={options.min_work_items}, "
        f"max_education={options.max_education_items}, "
        f"education_threshold={options.education_min_score}"
    )


def log_selection_metrics(metrics) -> None:
    """
    Log the outcome of a selection run.

    Args:
        metrics: SelectionMetrics from select()
    """
    _log_info(
        f"Selected {metrics.items_selected} of {metrics.total_items_scored} items "
        f"({metrics.items_rejected} rejected): {metrics.selection_by_category}"
    )
    _log_info(
        f"Score range: {metrics.min_score:g}-{metrics.max_score:g} "
        f"(avg: {metrics.avg_score:.1f})"
    )
