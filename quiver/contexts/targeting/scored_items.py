"""
Scored Item Data Structures

Defines the resume categories eligible for scoring and the data classes that
carry relevance scores through parsing, materialization, and selection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Category(str, Enum):
    """Resume sections that the model scores."""

    WORK = "work"
    PROJECTS = "projects"
    EDUCATION = "education"
    CERTIFICATES = "certificates"
    SKILLS = "skills"


# Top-level sections whose entries are kept or dropped as whole items
ENTRY_CATEGORIES = (
    Category.WORK,
    Category.PROJECTS,
    Category.EDUCATION,
    Category.CERTIFICATES,
)

# Skill group that is never scored or filtered
EXEMPT_SKILL_GROUP = "Languages"

DEFAULT_REASONING = "No reasoning provided"


@dataclass
class RawScoreItem:
    """
    One entry of the model's score document.

    Attributes:
        index: Position of the item within its category (as reported by the model)
        score: Relevance score, nominally 0-100
        reasoning: Optional justification text
        name: Keyword text, only reported for skills
    """

    index: float
    score: float
    reasoning: Optional[str] = None
    name: Optional[str] = None


@dataclass
class RawScores:
    """Validated score document: one ordered list of raw scores per category."""

    work: List[RawScoreItem] = field(default_factory=list)
    projects: List[RawScoreItem] = field(default_factory=list)
    education: List[RawScoreItem] = field(default_factory=list)
    certificates: List[RawScoreItem] = field(default_factory=list)
    skills: List[RawScoreItem] = field(default_factory=list)

    def for_category(self, category: Category) -> List[RawScoreItem]:
        return getattr(self, category.value)


@dataclass
class ScoredItem:
    """
    A resume entry annotated with its relevance score.

    Attributes:
        category: Resume section the item belongs to
        index: 0-based position within the category's original sequence
            (for skills: position in the flattened non-Languages keyword list)
        score: Relevance score as reported by the model
        reasoning: Model's justification
        original_data: Shallow snapshot of the source item; bare values (skill
            keywords) are wrapped as {"value": ...}
        name: Keyword text for skills, None otherwise
    """

    category: Category
    index: int
    score: float
    reasoning: str = DEFAULT_REASONING
    original_data: Dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None

    @property
    def skill_name(self) -> str:
        """Text used to match a skill keyword back to the document."""
        if self.name:
            return self.name
        value = self.original_data.get("value")
        return "" if value is None else str(value)


@dataclass
class SelectionMetrics:
    """
    Summary of one selection run (derived, never persisted).

    Attributes:
        total_items_scored: Non-skill items that entered selection
        items_selected: Items kept (education included)
        items_rejected: total_items_scored - items_selected
        min_score: Lowest selected score (0 if nothing selected)
        max_score: Highest selected score (0 if nothing selected)
        avg_score: Mean selected score (0 if nothing selected)
        selection_by_category: Selected count per category value
    """

    total_items_scored: int
    items_selected: int
    items_rejected: int
    min_score: float
    max_score: float
    avg_score: float
    selection_by_category: Dict[str, int] = field(default_factory=dict)

    @property
    def score_range(self) -> str:
        return f"{self.min_score:g}-{self.max_score:g}"


@dataclass
class SelectionResult:
    """Items chosen by select() with their metrics."""

    items: List[ScoredItem]
    metrics: SelectionMetrics
