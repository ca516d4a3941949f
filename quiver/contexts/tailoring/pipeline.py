"""
Resume Tailoring Pipeline

Four ordered stages, each timed:
1. Extract keywords from the job description (LLM)
2. Score all resume items by relevance (LLM)
3. Select items and build the filtered resume (targeting context, no LLM)
4. Optimize wording of the filtered resume (LLM, degrades to stage 3 output)

A failure in stages 1-3 aborts the run and returns the original resume with
success=False. tailor_resume() wraps the pipeline in the full fallback chain:
pipeline, then single-prompt rewrite, then the untouched original.
"""

import asyncio
import time
from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from quiver.contexts.tailoring.config import TailoringConfig
from quiver.contexts.tailoring.exceptions import StageFailure
from quiver.contexts.tailoring.logger import (
    _log_info,
    _log_success,
    _log_warning,
    log_pipeline_result,
    log_pipeline_start,
    log_stage_result,
    log_stage_start,
)
from quiver.contexts.tailoring.prompts import language_name
from quiver.contexts.tailoring.stages import (
    extract_job_keywords,
    optimize_resume_keywords,
    rewrite_resume_single_prompt,
    score_resume_for_job,
)
from quiver.contexts.targeting import (
    SelectionMetrics,
    build_filtered_document,
    get_top_skills,
    load_document,
    materialize,
    parse_scores,
    render_document,
    select,
)
from quiver.utils.llm import LLMClient

T = TypeVar("T")

STAGE_KEYWORDS = "1 (keyword extraction)"
STAGE_SCORING = "2 (relevance scoring)"
STAGE_SELECTION = "3 (selection)"
STAGE_OPTIMIZATION = "4 (wording optimization)"


@dataclass(frozen=True)
class StageTimings:
    """
    Stage durations in seconds.

    total is wall-clock time for the whole run. With sequential analysis it equals
    the sum of the stages (up to bookkeeping overhead); with concurrent analysis
    stages 1 and 2 overlap.
    """

    keywords: float
    scoring: float
    selection: float
    optimization: float
    total: float


@dataclass(frozen=True)
class TailoringResult:
    """
    Outcome of one pipeline run.

    Attributes:
        success: Whether stages 1-3 completed
        tailored_yaml: Final resume, or the original resume on failure
        timings: Stage durations (success only)
        items_selected: Number of non-skill items kept (success only)
        score_range: "min-max" of kept item scores (success only)
        error: Failure description (failure only)
    """

    success: bool
    tailored_yaml: str
    timings: Optional[StageTimings] = None
    items_selected: Optional[int] = None
    score_range: Optional[str] = None
    error: Optional[str] = None


async def _run_stage(stage: str, operation: Awaitable[T]) -> Tuple[T, float]:
    """Await one stage, timing it and converting any error into StageFailure."""
    log_stage_start(stage)
    start = time.perf_counter()
    try:
        result = await operation
    except Exception as e:
        raise StageFailure(stage, e) from e
    elapsed = time.perf_counter() - start
    log_stage_result(stage, elapsed)
    return result, elapsed


async def _run_concurrently(*operations: Awaitable):
    """Gather stages; if one fails, cancel the others and wait for them before re-raising."""
    tasks = [asyncio.ensure_future(operation) for operation in operations]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Collects every sibling's outcome so no task exception goes unretrieved
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def select_resume_content(
    resume_yaml: str, scores_json: str, config: TailoringConfig
) -> Tuple[str, SelectionMetrics]:
    """
    Stage 3: parse scores, select items and skills, and render the filtered resume.

    Args:
        resume_yaml: Base resume YAML
        scores_json: Score document from stage 2
        config: Pipeline configuration

    Returns:
        Tuple of (filtered resume YAML, selection metrics)
    """
    document = load_document(resume_yaml)
    raw_scores = parse_scores(scores_json)
    scored_items = materialize(raw_scores, document)

    selection = select(scored_items, config.selection)
    selected_skills = get_top_skills(scored_items, limit=config.stages.skills_limit)

    filtered = build_filtered_document(document, selection.items, selected_skills)
    return render_document(filtered), selection.metrics


async def _selection_stage(resume_yaml: str, scores_json: str, config: TailoringConfig):
    return select_resume_content(resume_yaml, scores_json, config)


async def run_tailoring_pipeline(
    llm: LLMClient,
    resume_yaml: str,
    job_description: str,
    config: Optional[TailoringConfig] = None,
) -> TailoringResult:
    """
    Execute the 4-stage resume tailoring pipeline.

    Args:
        llm: LLM client for stages 1, 2 and 4
        resume_yaml: Base resume YAML (returned unchanged on failure)
        job_description: Job description text
        config: Pipeline configuration (defaults if omitted)

    Returns:
        TailoringResult; never raises for stage failures
    """
    config = config or TailoringConfig()
    stage_options = config.stages
    target_language = language_name(config.target_language)

    log_pipeline_start(job_description, resume_yaml)
    started = time.perf_counter()

    keyword_stage = partial(
        extract_job_keywords,
        llm,
        job_description,
        temperature=stage_options.json_temperature,
        max_retries=stage_options.json_max_retries,
    )
    scoring_stage = partial(
        score_resume_for_job,
        llm,
        job_description,
        resume_yaml,
        temperature=stage_options.json_temperature,
        max_retries=stage_options.json_max_retries,
    )

    try:
        if config.concurrent_analysis:
            (keywords, keywords_time), (scores_json, scoring_time) = await _run_concurrently(
                _run_stage(STAGE_KEYWORDS, keyword_stage()),
                _run_stage(STAGE_SCORING, scoring_stage()),
            )
        else:
            keywords, keywords_time = await _run_stage(STAGE_KEYWORDS, keyword_stage())
            scores_json, scoring_time = await _run_stage(STAGE_SCORING, scoring_stage())

        (filtered_yaml, metrics), selection_time = await _run_stage(
            STAGE_SELECTION, _selection_stage(resume_yaml, scores_json, config)
        )
    except StageFailure as e:
        result = TailoringResult(success=False, tailored_yaml=resume_yaml, error=str(e))
        log_pipeline_result(result)
        return result

    # Stage 4 degrades to the filtered resume instead of failing
    optimized_yaml, optimization_time = await _run_stage(
        STAGE_OPTIMIZATION,
        optimize_resume_keywords(
            llm,
            job_description,
            filtered_yaml,
            keywords,
            target_language=target_language,
            temperature=stage_options.optimization_temperature,
        ),
    )

    result = TailoringResult(
        success=True,
        tailored_yaml=optimized_yaml,
        timings=StageTimings(
            keywords=keywords_time,
            scoring=scoring_time,
            selection=selection_time,
            optimization=optimization_time,
            total=time.perf_counter() - started,
        ),
        items_selected=metrics.items_selected,
        score_range=metrics.score_range,
    )
    log_pipeline_result(result)
    return result


# =============================================================================
# FALLBACK CHAIN
# =============================================================================


@dataclass(frozen=True)
class TailoringStrategy:
    """One rung of the fallback chain: a name and a coroutine factory."""

    name: str
    run: Callable[[], Awaitable[str]]


async def _pipeline_strategy(
    llm: LLMClient, resume_yaml: str, job_description: str, config: TailoringConfig
) -> str:
    result = await run_tailoring_pipeline(llm, resume_yaml, job_description, config)
    if not result.success:
        raise RuntimeError(result.error)
    return result.tailored_yaml


def build_strategies(
    llm: LLMClient,
    resume_yaml: str,
    job_description: str,
    config: TailoringConfig,
) -> List[TailoringStrategy]:
    """Tailoring strategies in decreasing order of sophistication."""
    return [
        TailoringStrategy(
            name="4-stage pipeline",
            run=partial(_pipeline_strategy, llm, resume_yaml, job_description, config),
        ),
        TailoringStrategy(
            name="single-prompt rewrite",
            run=partial(
                rewrite_resume_single_prompt,
                llm,
                job_description,
                resume_yaml,
                target_language=language_name(config.target_language),
                temperature=config.stages.single_prompt_temperature,
            ),
        ),
    ]


async def tailor_resume(
    llm: LLMClient,
    resume_yaml: str,
    job_description: str,
    config: Optional[TailoringConfig] = None,
) -> str:
    """
    Tailor a resume, always returning some valid document.

    Tries each strategy from build_strategies() in turn; if all fail, returns the
    original resume verbatim.

    Args:
        llm: LLM client
        resume_yaml: Base resume YAML
        job_description: Job description text
        config: Pipeline configuration (defaults if omitted)

    Returns:
        Tailored resume YAML (or the original)
    """
    config = config or TailoringConfig()

    for strategy in build_strategies(llm, resume_yaml, job_description, config):
        try:
            tailored = await strategy.run()
        except Exception as e:
            _log_warning(f"{strategy.name} failed ({e}), falling back")
            continue
        _log_success(f"Resume tailored with {strategy.name}")
        return tailored

    _log_info("All tailoring strategies failed, returning original resume")
    return resume_yaml
