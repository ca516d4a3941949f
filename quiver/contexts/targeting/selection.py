"""
Selection Engine

Decides which scored resume items survive. Pure: no I/O beyond logging, never
mutates its inputs.

Rule order (each step sees the output of the previous one):
1. Education is selected separately, chronologically first
2. Remaining items are split at the score threshold
3. Minimum work-item floor
4. Minimum total floor
5. Maximum total cap with proportional allocation per category

Changing the order changes which items survive under capacity pressure.
"""

import heapq
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from quiver.contexts.targeting.logger import (
    _log_debug,
    _log_info,
    _log_warning,
    log_selection_metrics,
    log_selection_options,
)
from quiver.contexts.targeting.scored_items import (
    Category,
    ScoredItem,
    SelectionMetrics,
    SelectionResult,
)

DEFAULT_PROPORTIONS = {"work": 0.65, "projects": 0.30, "certificates": 0.05}

# End dates meaning "not finished yet"; these sort as the far future
IN_PROGRESS_MARKERS = {"present", "current", "ongoing"}

# Accepted education end date formats, tried in order
END_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m", "%Y", "%b %Y", "%B %Y", "%m/%Y")


@dataclass
class SelectionOptions:
    """
    Thresholds and quotas for select().

    Attributes:
        min_score: Admission threshold for work, projects, and certificates
        min_items: Lower bound on total selected items (education included)
        max_items: Upper bound on total selected items (education included)
        proportions: Share of capped slots per category value
        min_work_items: Work items to keep even when below threshold
        max_education_items: Upper bound on education items
        education_min_score: Education threshold (applied after the first item)
    """

    min_score: float = 40
    min_items: int = 10
    max_items: int = 15
    proportions: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_PROPORTIONS))
    min_work_items: int = 2
    max_education_items: int = 5
    education_min_score: float = 50


def _by_score(items: Sequence[ScoredItem]) -> List[ScoredItem]:
    """Descending score; equal scores keep their input order."""
    return sorted(items, key=lambda item: item.score, reverse=True)


def _education_end_date(item: ScoredItem) -> date:
    """
    Infer an education item's end date for chronological ordering.

    Raises:
        ValueError: If the end date is present but in no known format
    """
    value = item.original_data.get("endDate")
    text = "" if value is None else str(value).strip()

    if not text or text.lower() in IN_PROGRESS_MARKERS:
        return date.max

    for fmt in END_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"unrecognized end date {value!r}")


def select_education(
    items: Sequence[ScoredItem], max_items: int, min_score: float
) -> List[ScoredItem]:
    """
    Select education items, newest first, stopping at the score threshold.

    The threshold only stops the walk once one item has been kept. If no item
    reaches min_score, the single highest-scored item is kept, so education is
    never emptied when it existed.
    """
    if not items:
        _log_debug("No education items to filter")
        return []

    if all(item.score < min_score for item in items):
        best = _by_score(items)[0]
        _log_info(
            f"All education below threshold, keeping highest-scored item (score={best.score})"
        )
        return [best]

    try:
        ordered = sorted(items, key=_education_end_date, reverse=True)
        _log_debug("Education sorted chronologically (newest first)")
    except ValueError as e:
        _log_debug(f"Could not sort education by date ({e}), using score-based order")
        ordered = _by_score(items)

    selected: List[ScoredItem] = []
    for item in ordered:
        if len(selected) >= max_items:
            _log_debug(f"Reached max {max_items} education items")
            break

        if item.score < min_score and selected:
            _log_debug(f"Education item score {item.score} below threshold {min_score}, stopping")
            break

        selected.append(item)
        _log_debug(f"Keeping education item (index={item.index}, score={item.score})")

    if not selected:
        selected.append(ordered[0])
        _log_info(f"Education cap is {max_items}, keeping newest item anyway")

    return selected


def _resolve_proportions(proportions: Dict[str, float]) -> Dict[Category, float]:
    """Map configured category names onto the Category enum."""
    resolved = {}
    for name, share in proportions.items():
        try:
            resolved[Category(name)] = share
        except ValueError:
            raise ValueError(
                f"Unknown category '{name}' in proportions. "
                f"Use one of: {[category.value for category in Category]}"
            ) from None
    return resolved


def allocate_proportionally(
    items: Sequence[ScoredItem], max_items: int, proportions: Dict[Category, float]
) -> List[ScoredItem]:
    """
    Cap items at max_items, sharing slots between categories.

    Each category in proportions first gets floor(max_items * share) slots, limited
    to what it has. Leftover slots go one at a time to whichever category's next
    untaken item scores highest. Ties go to the category that appeared first in items.

    Args:
        items: Candidate items
        max_items: Slot budget
        proportions: Share per category (categories absent here only get leftovers)

    Returns:
        At most max_items items, best-scored first within each category
    """
    by_category: Dict[Category, List[ScoredItem]] = {}
    for item in items:
        by_category.setdefault(item.category, []).append(item)
    for group in by_category.values():
        group.sort(key=lambda item: item.score, reverse=True)

    allocations: Dict[Category, int] = {category: 0 for category in by_category}
    remaining = max_items

    for category, share in proportions.items():
        if category not in by_category:
            continue
        slots = min(math.floor(max_items * share), len(by_category[category]), remaining)
        allocations[category] = max(slots, 0)
        remaining -= allocations[category]

    # One heap entry per category, keyed on its next untaken item
    heap = [
        (-group[allocations[category]].score, position, category)
        for position, (category, group) in enumerate(by_category.items())
        if allocations[category] < len(group)
    ]
    heapq.heapify(heap)

    while remaining > 0 and heap:
        _, position, category = heapq.heappop(heap)
        allocations[category] += 1
        remaining -= 1

        group = by_category[category]
        if allocations[category] < len(group):
            heapq.heappush(heap, (-group[allocations[category]].score, position, category))

    summary = {category.value: count for category, count in allocations.items()}
    _log_debug(f"Proportional allocation: {summary}")

    selected: List[ScoredItem] = []
    for category, group in by_category.items():
        selected.extend(group[: allocations[category]])
    return selected


def select(
    items: Sequence[ScoredItem], options: Optional[SelectionOptions] = None
) -> SelectionResult:
    """
    Select resume items using thresholds, floors, and proportional allocation.

    Skills are ignored here (see get_top_skills()).

    Args:
        items: Scored items from materialize()
        options: Thresholds and quotas (defaults if omitted)

    Returns:
        SelectionResult with the kept items and their metrics

    Example:
        >>> result = select(scored_items, SelectionOptions(max_items=12))
        >>> result.metrics.items_selected <= 12
        True
    """
    options = options or SelectionOptions()
    proportions = _resolve_proportions(options.proportions)
    log_selection_options(options)

    non_skill_items = [item for item in items if item.category is not Category.SKILLS]
    education_items = [item for item in non_skill_items if item.category is Category.EDUCATION]
    other_items = [item for item in non_skill_items if item.category is not Category.EDUCATION]

    # Step 1: Education, chronological + score-based
    selected_education = select_education(
        education_items, options.max_education_items, options.education_min_score
    )
    _log_info(f"Selected {len(selected_education)} education items (chronological + score-based)")

    # Step 2: Threshold split
    other_sorted = _by_score(other_items)
    above_threshold = [item for item in other_sorted if item.score >= options.min_score]
    below_threshold = [item for item in other_sorted if item.score < options.min_score]

    _log_debug(f"Non-education items above threshold ({options.min_score}): {len(above_threshold)}")
    _log_debug(f"Non-education items below threshold: {len(below_threshold)}")

    # Step 3: Minimum work items (graceful degradation)
    work_above = sum(1 for item in above_threshold if item.category is Category.WORK)
    work_below = [item for item in below_threshold if item.category is Category.WORK]
    work_total = work_above + len(work_below)

    if work_above < options.min_work_items <= work_total:
        deficit = options.min_work_items - work_above
        _log_info(
            f"Enforcing min {options.min_work_items} work items: "
            f"adding {deficit} below-threshold items"
        )
        forced = work_below[:deficit]
        forced_ids = {id(item) for item in forced}
        above_threshold.extend(forced)
        below_threshold = [item for item in below_threshold if id(item) not in forced_ids]
    elif work_total < options.min_work_items:
        _log_warning(
            f"Only {work_total} work items available, cannot reach min "
            f"{options.min_work_items} - using all available"
        )

    # Step 4: Minimum total (education counts toward it)
    target_min = options.min_items - len(selected_education)
    if len(above_threshold) < target_min:
        deficit = target_min - len(above_threshold)
        _log_info(f"Need {deficit} more items to reach minimum of {options.min_items} total")
        selected_items = above_threshold + below_threshold[:deficit]
    else:
        selected_items = above_threshold

    # Step 5: Maximum total with proportional allocation
    target_max = max(options.max_items - len(selected_education), 0)
    if len(selected_items) > target_max:
        _log_info(f"Applying proportional allocation to limit to {target_max} non-education items")
        selected_items = allocate_proportionally(selected_items, target_max, proportions)

    all_selected = selected_items + selected_education
    metrics = compute_metrics(all_selected, total_scored=len(non_skill_items))
    log_selection_metrics(metrics)

    return SelectionResult(items=all_selected, metrics=metrics)


def compute_metrics(selected: Sequence[ScoredItem], total_scored: int) -> SelectionMetrics:
    """Summarize a selection; score statistics are 0 for an empty selection."""
    scores = [item.score for item in selected]
    return SelectionMetrics(
        total_items_scored=total_scored,
        items_selected=len(selected),
        items_rejected=total_scored - len(selected),
        min_score=min(scores) if scores else 0,
        max_score=max(scores) if scores else 0,
        avg_score=sum(scores) / len(scores) if scores else 0,
        selection_by_category=dict(Counter(item.category.value for item in selected)),
    )


def get_top_skills(items: Sequence[ScoredItem], limit: int = 20) -> List[ScoredItem]:
    """
    Select the top-scored skill keywords.

    Args:
        items: Scored items (non-skill items are ignored)
        limit: Maximum number of skills to keep

    Returns:
        Up to limit skill items, highest score first
    """
    selected = _by_score([item for item in items if item.category is Category.SKILLS])[:limit]

    _log_info(f"Selected top {len(selected)} skills (limit: {limit})")
    if selected:
        _log_debug(f"Skill score range: {selected[-1].score}-{selected[0].score}")

    return selected
