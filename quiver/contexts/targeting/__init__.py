"""
Targeting Context

Responsibilities:
- Parses the model's relevance scores for resume items
- Binds scores back to the original resume entries
- Selects which content to keep (thresholds, floors, caps, category quotas)
- Rebuilds a filtered resume document from the selection

Owns: Score validation, selection algorithm, resume filtering
Never: Calls a language model or touches the filesystem
"""

from quiver.contexts.targeting.document_filter import (
    build_filtered_document,
    filter_resume_yaml,
    load_document,
    render_document,
)
from quiver.contexts.targeting.exceptions import (
    InvalidResumeDocumentError,
    MalformedScoreDocumentError,
)
from quiver.contexts.targeting.materializer import materialize
from quiver.contexts.targeting.score_parser import parse_scores
from quiver.contexts.targeting.scored_items import (
    Category,
    RawScoreItem,
    RawScores,
    ScoredItem,
    SelectionMetrics,
    SelectionResult,
)
from quiver.contexts.targeting.selection import SelectionOptions, get_top_skills, select

__all__ = [
    # Pipeline steps, in order
    "parse_scores",
    "materialize",
    "select",
    "get_top_skills",
    "build_filtered_document",
    # YAML helpers
    "load_document",
    "render_document",
    "filter_resume_yaml",
    # Data structures
    "Category",
    "RawScoreItem",
    "RawScores",
    "ScoredItem",
    "SelectionMetrics",
    "SelectionOptions",
    "SelectionResult",
    # Errors
    "InvalidResumeDocumentError",
    "MalformedScoreDocumentError",
]
