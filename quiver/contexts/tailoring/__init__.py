"""
Tailoring Context

Responsibilities:
- Extracts target keywords from a job description (LLM)
- Scores every resume item for relevance (LLM)
- Runs the targeting context to select content and filter the resume
- Rephrases the filtered resume toward the job's terminology (LLM)
- Falls back to a single-prompt rewrite, then to the original resume

Owns: Prompts, stage orchestration, timings, fallback chain
Never: Implements selection rules (delegates to targeting)
"""

from quiver.contexts.tailoring.config import StageOptions, TailoringConfig, load_tailoring_config
from quiver.contexts.tailoring.exceptions import InvalidLLMResponseError, StageFailure
from quiver.contexts.tailoring.pipeline import (
    StageTimings,
    TailoringResult,
    run_tailoring_pipeline,
    select_resume_content,
    tailor_resume,
)
from quiver.contexts.tailoring.stages import (
    JobKeywords,
    chat_with_json_validation,
    extract_job_keywords,
    optimize_resume_keywords,
    rewrite_resume_single_prompt,
    score_resume_for_job,
)

__all__ = [
    # Entry points
    "tailor_resume",
    "run_tailoring_pipeline",
    # Stages
    "extract_job_keywords",
    "score_resume_for_job",
    "select_resume_content",
    "optimize_resume_keywords",
    "rewrite_resume_single_prompt",
    "chat_with_json_validation",
    # Configuration
    "TailoringConfig",
    "StageOptions",
    "load_tailoring_config",
    # Data structures
    "JobKeywords",
    "StageTimings",
    "TailoringResult",
    # Errors
    "InvalidLLMResponseError",
    "StageFailure",
]
