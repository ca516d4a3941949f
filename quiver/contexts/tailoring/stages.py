"""
LLM-backed tailoring stages.

Each function makes the language model calls for one pipeline stage:
- extract_job_keywords: Stage 1, JSON with four keyword lists
- score_resume_for_job: Stage 2, JSON relevance scores for every resume item
- optimize_resume_keywords: Stage 4, reworded resume YAML (degrades, never raises)
- rewrite_resume_single_prompt: fallback strategy, one-shot tailored resume YAML

LLM call failures are retried by the client itself. The JSON stages additionally
re-ask the model when its answer cannot be parsed or validated.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from quiver.contexts.tailoring.exceptions import InvalidLLMResponseError
from quiver.contexts.tailoring.logger import _log_debug, _log_info, _log_warning
from quiver.contexts.tailoring.prompts import (
    KEYWORD_CATEGORIES,
    KEYWORD_EXTRACTION_TEMPLATE,
    KEYWORD_OPTIMIZATION_TEMPLATE,
    RESUME_SCORING_TEMPLATE,
    SINGLE_PROMPT_TAILORING_TEMPLATE,
)
from quiver.contexts.targeting import parse_scores
from quiver.utils.llm import ChatMessage, LLMClient, parse_json_object, strip_code_fence


@dataclass
class JobKeywords:
    """Deduplicated target terms extracted from a job description."""

    technical_skills: List[str] = field(default_factory=list)
    soft_skills: List[str] = field(default_factory=list)
    domain_terms: List[str] = field(default_factory=list)
    action_verbs: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(getattr(self, name)) for name in KEYWORD_CATEGORIES)

    def format_for_prompt(self) -> str:
        """One labelled line per category, e.g. 'Technical Skills: Python, AWS'."""
        return "\n".join(
            f"{name.replace('_', ' ').title()}: {', '.join(getattr(self, name))}"
            for name in KEYWORD_CATEGORIES
        )


def _user_prompt(prompt: str) -> List[ChatMessage]:
    return [ChatMessage(role="user", content=prompt)]


async def chat_with_json_validation(
    llm: LLMClient,
    prompt: str,
    validator: Callable[[Dict[str, Any]], bool],
    temperature: float = 0.3,
    max_retries: int = 2,
) -> Dict[str, Any]:
    """
    Ask for a JSON object, re-asking while the answer is unparseable or invalid.

    Args:
        llm: LLM client
        prompt: User prompt
        validator: Returns True when the parsed object has the expected shape
        temperature: Sampling temperature
        max_retries: Extra attempts after the first

    Returns:
        Parsed JSON object

    Raises:
        InvalidLLMResponseError: If no attempt produced a valid object
        LLMCallError: If the client itself gave up
    """
    attempts = max_retries + 1
    last_error = None

    for attempt in range(attempts):
        response = await llm.complete(_user_prompt(prompt), temperature)
        try:
            parsed = parse_json_object(response)
            if not validator(parsed):
                raise ValueError("response failed validation")
            return parsed
        except ValueError as e:
            last_error = e
            _log_warning(f"JSON attempt {attempt + 1}/{attempts} failed: {e}")

    raise InvalidLLMResponseError(attempts, last_error)


def _has_keyword_lists(parsed: Dict[str, Any]) -> bool:
    return all(isinstance(parsed.get(name), list) for name in KEYWORD_CATEGORIES)


async def extract_job_keywords(
    llm: LLMClient,
    job_description: str,
    temperature: float = 0.3,
    max_retries: int = 2,
) -> JobKeywords:
    """
    Stage 1: extract target keywords from the job description.

    Returns:
        JobKeywords with each list deduplicated (first occurrence kept)
    """
    _log_info("Extracting keywords from job description")

    prompt = KEYWORD_EXTRACTION_TEMPLATE.format(job_description=job_description)
    parsed = await chat_with_json_validation(
        llm, prompt, _has_keyword_lists, temperature=temperature, max_retries=max_retries
    )

    keywords = JobKeywords(
        **{
            name: list(dict.fromkeys(str(term) for term in parsed[name]))
            for name in KEYWORD_CATEGORIES
        }
    )

    _log_info(
        f"Extracted {keywords.total} keywords: {len(keywords.technical_skills)} technical, "
        f"{len(keywords.soft_skills)} soft skills"
    )
    return keywords


def _is_score_document(parsed: Dict[str, Any]) -> bool:
    # Raises MalformedScoreDocumentError (a ValueError) on any defect
    parse_scores(json.dumps(parsed))
    return True


async def score_resume_for_job(
    llm: LLMClient,
    job_description: str,
    resume_yaml: str,
    temperature: float = 0.3,
    max_retries: int = 2,
) -> str:
    """
    Stage 2: score every resume item for relevance.

    The answer is validated with the targeting context's parse_scores(), so a
    malformed score document is re-asked here rather than failing stage 3.

    Returns:
        Score document as JSON text
    """
    _log_info("Scoring resume items for job relevance")

    prompt = RESUME_SCORING_TEMPLATE.format(
        job_description=job_description, resume_yaml=resume_yaml
    )
    parsed = await chat_with_json_validation(
        llm, prompt, _is_score_document, temperature=temperature, max_retries=max_retries
    )

    _log_info("Resume scoring completed")
    return json.dumps(parsed)


async def optimize_resume_keywords(
    llm: LLMClient,
    job_description: str,
    filtered_yaml: str,
    keywords: JobKeywords,
    target_language: str = "English",
    temperature: float = 0.8,
) -> str:
    """
    Stage 4: rephrase the filtered resume toward the job's terminology.

    Degrades instead of failing: any error (or an empty answer) returns the
    filtered resume unchanged.

    Returns:
        Optimized resume YAML, or filtered_yaml on failure
    """
    _log_info(f"Optimizing resume keywords (target language: {target_language})")

    prompt = KEYWORD_OPTIMIZATION_TEMPLATE.format(
        target_language=target_language,
        job_description=job_description,
        filtered_yaml=filtered_yaml,
        extracted_keywords=keywords.format_for_prompt() if keywords.total else "(none)",
    )

    try:
        response = await llm.complete(_user_prompt(prompt), temperature)
    except Exception as e:
        _log_warning(f"Keyword optimization failed: {e}")
        return filtered_yaml

    optimized = strip_code_fence(response)
    if not optimized.strip():
        _log_warning("Keyword optimization returned an empty resume, keeping filtered version")
        return filtered_yaml

    return optimized


async def rewrite_resume_single_prompt(
    llm: LLMClient,
    job_description: str,
    resume_yaml: str,
    target_language: str = "English",
    temperature: float = 0.5,
) -> str:
    """
    Fallback strategy: tailor the whole resume with a single prompt.

    Raises:
        ValueError: If the model answers with an empty resume
        LLMCallError: If the client gave up
    """
    _log_info(f"Using single-prompt tailoring (target language: {target_language})")

    prompt = SINGLE_PROMPT_TAILORING_TEMPLATE.format(
        target_language=target_language,
        job_description=job_description,
        resume_yaml=resume_yaml,
    )
    response = await llm.complete(_user_prompt(prompt), temperature)

    tailored = strip_code_fence(response)
    if not tailored.strip():
        raise ValueError("single-prompt tailoring returned an empty resume")

    _log_debug(f"Single-prompt tailored YAML: {len(tailored)} bytes")
    return tailored
