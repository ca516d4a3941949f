"""
Tailoring Configuration

Structured defaults for the tailoring pipeline, optionally overridden by a YAML
file. Overrides are validated against the structured schema, so unknown keys
and wrongly typed values are rejected at load time.

Examples:
    # Defaults only
    >>> config = load_tailoring_config()

    # Explicit override file
    >>> config = load_tailoring_config(Path("configs/tailoring.yaml"))
    >>> config.selection.max_items
    15
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from quiver.contexts.targeting.selection import SelectionOptions

load_dotenv()


@dataclass
class StageOptions:
    """
    LLM stage settings.

    Attributes:
        json_max_retries: Extra attempts when a JSON stage returns unusable output
        json_temperature: Temperature for keyword extraction and scoring
        optimization_temperature: Temperature for wording optimization
        single_prompt_temperature: Temperature for the single-prompt fallback rewrite
        skills_limit: Number of top-scored skill keywords to keep
    """

    json_max_retries: int = 2
    json_temperature: float = 0.3
    optimization_temperature: float = 0.8
    single_prompt_temperature: float = 0.5
    skills_limit: int = 20


@dataclass
class TailoringConfig:
    """
    Complete pipeline configuration.

    Attributes:
        selection: Selection engine thresholds and quotas
        stages: LLM stage settings
        target_language: ISO 639-1 code of the language to write in
        concurrent_analysis: Run keyword extraction and scoring concurrently
    """

    selection: SelectionOptions = field(default_factory=SelectionOptions)
    stages: StageOptions = field(default_factory=StageOptions)
    target_language: str = "en"
    concurrent_analysis: bool = False


def load_tailoring_config(config_path: Optional[Path] = None) -> TailoringConfig:
    """
    Load tailoring configuration.

    Args:
        config_path: YAML override file (defaults to TAILORING_CONFIG_PATH env
            variable; built-in defaults when neither is set)

    Returns:
        TailoringConfig with overrides applied

    Raises:
        omegaconf.errors.ValidationError: If an override has the wrong type
        omegaconf.errors.ConfigKeyError: If an override names an unknown key
    """
    if config_path is None and os.getenv("TAILORING_CONFIG_PATH"):
        config_path = Path(os.getenv("TAILORING_CONFIG_PATH"))

    config = OmegaConf.structured(TailoringConfig)
    if config_path is not None:
        config = OmegaConf.merge(config, OmegaConf.load(config_path))

    return OmegaConf.to_object(config)
