"""
Tailoring context logger.

Provides logging interface for tailoring context with automatic [tailor] prefix.
All tailoring modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from quiver.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[tailor]"


def setup_tailoring_logger(
    log_dir: Path, provider_name: Optional[str] = None, config_path: Optional[Path] = None
) -> Path:
    """
    Setup logger for tailoring context.

    Args:
        log_dir: Directory for this tailoring session
        provider_name: LLM provider/model recorded in the provenance header
        config_path: Tailoring config override, recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from quiver.contexts.tailoring.logger import setup_tailoring_logger, _log_info

        log_file = setup_tailoring_logger(log_dir, provider_name="openai/gpt-4o-mini")
        _log_info("Starting tailoring...")
    """
    return _setup_logger(
        context_name="tailor",
        log_dir=log_dir,
        config_path=config_path,
        extra_provenance={"LLM provider": provider_name or "unknown"},
    )


# Wrapper functions with automatic [tailor] prefix


def _log_info(message: str) -> None:
    """Log info message with [tailor] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [tailor] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [tailor] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [tailor] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [tailor] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level tailoring-specific logging helpers


def log_pipeline_start(job_description: str, resume_yaml: str) -> None:
    """Log start of a pipeline run with input sizes."""
    _log_info("=== Starting 4-stage resume tailoring pipeline ===")
    _log_debug(f"Job description length: {len(job_description)} chars")
    _log_debug(f"Base resume YAML size: {len(resume_yaml)} bytes")


def log_stage_start(stage: str) -> None:
    _log_info(f"Stage {stage}: started")


def log_stage_result(stage: str, elapsed_time: float) -> None:
    _log_success(f"Stage {stage}: completed in {elapsed_time:.2f}s")


def log_pipeline_result(result) -> None:
    """
    Log pipeline outcome with the per-stage timing summary.

    Args:
        result: TailoringResult from run_tailoring_pipeline()
    """
    if not result.success:
        _log_warning(f"Pipeline failed: {result.error}")
        return

    timings = result.timings
    _log_success(
        f"=== Pipeline completed in {timings.total:.2f}s "
        f"(S1: {timings.keywords:.1f}s | S2: {timings.scoring:.1f}s | "
        f"S3: {timings.selection:.1f}s | S4: {timings.optimization:.1f}s) ==="
    )
    _log_info(f"Selected {result.items_selected} items (scores: {result.score_range})")
