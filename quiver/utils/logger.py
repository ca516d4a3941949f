"""
Session logging for QUIVER entry points.

Each CLI run gets its own directory holding a DEBUG-level log file. Console
output goes to stderr, because stdout carries the tailored or filtered resume
YAML and must stay clean for piping.

Context-specific wrappers live in contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

import quiver

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Path,
    config_path: Optional[Path] = None,
    extra_provenance: Optional[Dict[str, str]] = None,
) -> Path:
    """
    Route loguru output to a session log file and stderr, then write a provenance header.

    Library modules never call this. Only entry points (scripts/) configure sinks.

    Args:
        context_name: Context identifier, also the log file stem ("target", "tailor")
        log_dir: Directory for this session (created if missing)
        config_path: Tailoring config override in effect, if any
        extra_provenance: Additional key-value pairs for the header

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(config_path, extra_provenance)
    return log_file


def describe_config_source(config_path: Optional[Path] = None) -> str:
    """Where tailoring settings come from: explicit file, TAILORING_CONFIG_PATH, or defaults."""
    if config_path is not None:
        return str(config_path)
    if os.getenv("TAILORING_CONFIG_PATH"):
        return f"{os.getenv('TAILORING_CONFIG_PATH')} (TAILORING_CONFIG_PATH)"
    return "built-in defaults"


def log_provenance(
    config_path: Optional[Path] = None, extra_context: Optional[Dict[str, str]] = None
) -> None:
    """Log the run's command line, versions and settings source."""
    logger.info("=" * 80)
    logger.info(f"QUIVER {quiver.__version__} (Python {sys.version.split()[0]})")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Config: {describe_config_source(config_path)}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
