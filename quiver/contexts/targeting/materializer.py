"""
Item Materializer

Binds each raw score entry back to the resume entry it refers to, by category
and index. Bad references are a per-item condition: logged and skipped.
"""

import math
from typing import Any, Dict, List

from quiver.contexts.targeting.logger import _log_debug, _log_warning
from quiver.contexts.targeting.scored_items import (
    DEFAULT_REASONING,
    EXEMPT_SKILL_GROUP,
    Category,
    RawScores,
    ScoredItem,
)


def flatten_skill_keywords(document: Dict[str, Any]) -> List[Any]:
    """
    Concatenate keywords of every skill group except Languages, in document order.

    This flattened list is what the model's skills indices refer to.
    """
    keywords: List[Any] = []
    for group in document.get("skills") or []:
        if not isinstance(group, dict):
            continue
        if group.get("name") == EXEMPT_SKILL_GROUP:
            continue
        keywords.extend(group.get("keywords") or [])
    return keywords


def original_items(document: Dict[str, Any], category: Category) -> List[Any]:
    """Ordered source items that a category's score indices refer to."""
    if category is Category.SKILLS:
        return flatten_skill_keywords(document)

    items = document.get(category.value)
    return items if isinstance(items, list) else []


def _snapshot(item: Any) -> Dict[str, Any]:
    if isinstance(item, dict):
        return dict(item)
    return {"value": item}


def materialize(raw_scores: RawScores, document: Dict[str, Any]) -> List[ScoredItem]:
    """
    Convert raw scores to ScoredItem objects bound to the original resume data.

    Args:
        raw_scores: Validated score document from parse_scores()
        document: Resume document (as loaded from YAML)

    Returns:
        ScoredItems in category order, then score-document order
    """
    scored_items: List[ScoredItem] = []

    for category in Category:
        sources = original_items(document, category)

        for raw in raw_scores.for_category(category):
            index = raw.index

            # Ints are compared exactly; huge ones do not fit in a float
            if isinstance(index, float) and not (math.isfinite(index) and index.is_integer()):
                _log_warning(f"Index {index} for '{category.value}' is not an integer, skipping")
                continue

            index = int(index)
            if not 0 <= index < len(sources):
                _log_warning(
                    f"Index {index} out of range for '{category.value}' "
                    f"(max: {len(sources) - 1}), skipping"
                )
                continue

            scored_items.append(
                ScoredItem(
                    category=category,
                    index=index,
                    score=raw.score,
                    reasoning=raw.reasoning or DEFAULT_REASONING,
                    original_data=_snapshot(sources[index]),
                    name=raw.name if category is Category.SKILLS else None,
                )
            )

    _log_debug(f"Materialized {len(scored_items)} scored items")
    return scored_items
