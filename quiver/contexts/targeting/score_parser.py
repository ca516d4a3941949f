"""
Score Document Parser

Validates and normalizes the model's raw relevance-score JSON into RawScores.

This is a hard failure boundary: either the whole document is usable or
MalformedScoreDocumentError is raised. Retrying is the caller's decision.
"""

import json
import math
from typing import Any

from quiver.contexts.targeting.exceptions import MalformedScoreDocumentError
from quiver.contexts.targeting.logger import _log_debug, _log_error, _log_warning
from quiver.contexts.targeting.scored_items import Category, RawScoreItem, RawScores
from quiver.utils.llm import strip_code_fence

_CATEGORY_VALUES = {category.value for category in Category}


def _is_number(value: Any) -> bool:
    # bool is an int subclass but JSON true/false is not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # Overflowing literals such as 1e400 parse to inf
    return not isinstance(value, float) or math.isfinite(value)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


def _parse_item(category: Category, entry: Any, raw_text: str) -> RawScoreItem:
    """Validate a single score entry. Any defect fails the whole document."""
    if not isinstance(entry, dict) or not (
        _is_number(entry.get("index")) and _is_number(entry.get("score"))
    ):
        raise MalformedScoreDocumentError(
            f"Item in '{category.value}' missing 'index' or 'score' field: {json.dumps(entry)}",
            raw_text,
        )

    reasoning = entry.get("reasoning")
    name = entry.get("name")
    return RawScoreItem(
        index=entry["index"],
        score=entry["score"],
        reasoning=str(reasoning) if reasoning is not None else None,
        name=str(name) if name is not None else None,
    )


def parse_scores(raw_text: str) -> RawScores:
    """
    Parse the model's score document.

    Strips an optional markdown code block wrapper, parses JSON, fills missing
    categories with empty lists, and validates every item.

    Args:
        raw_text: Model response text

    Returns:
        RawScores with all five categories present

    Raises:
        MalformedScoreDocumentError: If the text is not a JSON object, a category is
            not a list, or any item lacks a numeric index/score

    Example:
        >>> scores = parse_scores('```json\\n{"work": [{"index": 0, "score": 80}]}\\n```')
        >>> scores.work[0].score
        80
        >>> scores.skills
        []
    """
    cleaned = strip_code_fence(raw_text).strip()

    try:
        document = json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError as e:
        _log_error(f"Failed to parse scores JSON: {e}")
        _log_debug(f"Raw JSON: {raw_text[:500]}...")
        raise MalformedScoreDocumentError(f"Score document is not valid JSON: {e}", raw_text) from e

    if not isinstance(document, dict):
        _log_error(f"Score document is a {type(document).__name__}, expected an object")
        raise MalformedScoreDocumentError(
            f"Score document must be a JSON object, got {type(document).__name__}", raw_text
        )

    unknown = [key for key in document if key not in _CATEGORY_VALUES]
    if unknown:
        _log_warning(f"Ignoring unknown score categories: {unknown}")

    raw_scores = RawScores()
    for category in Category:
        entries = document.get(category.value)

        if entries is None:
            _log_warning(f"Category '{category.value}' missing from scores, using empty list")
            continue

        if not isinstance(entries, list):
            raise MalformedScoreDocumentError(
                f"Category '{category.value}' must be a list, got {type(entries).__name__}",
                raw_text,
            )

        raw_scores.for_category(category).extend(
            _parse_item(category, entry, raw_text) for entry in entries
        )

    return raw_scores
