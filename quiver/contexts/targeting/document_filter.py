"""
Document Filter

Rebuilds a resume document that keeps only the selected items, plus YAML
load/render helpers for resume documents.

The input document is never modified: filtering works on a deep copy.
"""

import copy
from typing import Any, Dict, Iterable, Set

from omegaconf import DictConfig, OmegaConf

from quiver.contexts.targeting.exceptions import InvalidResumeDocumentError
from quiver.contexts.targeting.logger import _log_debug, _log_info
from quiver.contexts.targeting.scored_items import (
    ENTRY_CATEGORIES,
    EXEMPT_SKILL_GROUP,
    Category,
    ScoredItem,
)


def load_document(yaml_text: str) -> Dict[str, Any]:
    """
    Load resume YAML into a plain dict.

    Dates stay strings and ${...} text is left unresolved.

    Raises:
        InvalidResumeDocumentError: If the text is not YAML or not a mapping
    """
    try:
        conf = OmegaConf.create(yaml_text)
    except Exception as e:
        raise InvalidResumeDocumentError(f"Resume is not valid YAML: {e}") from e

    if not isinstance(conf, DictConfig):
        raise InvalidResumeDocumentError("Resume YAML must be a mapping at the top level")

    return OmegaConf.to_container(conf, resolve=False)


def render_document(document: Dict[str, Any]) -> str:
    """Dump a resume document back to YAML, keeping key order."""
    return OmegaConf.to_yaml(OmegaConf.create(document))


def build_filtered_document(
    original: Dict[str, Any],
    selected_items: Iterable[ScoredItem],
    selected_skills: Iterable[ScoredItem],
) -> Dict[str, Any]:
    """
    Construct a copy of the resume containing only the selected items.

    Entry sections (work, projects, education, certificates) keep their selected
    entries in original document order, and become empty lists when nothing was
    selected. Skill groups other than Languages keep only selected keywords. When
    no skills are selected the skills section is left as is.

    Args:
        original: Resume document (not modified)
        selected_items: Items chosen by select()
        selected_skills: Skills chosen by get_top_skills()

    Returns:
        New resume document
    """
    filtered = copy.deepcopy(original)

    selected_indices: Dict[Category, Set[int]] = {}
    for item in selected_items:
        selected_indices.setdefault(item.category, set()).add(item.index)

    for category in ENTRY_CATEGORIES:
        entries = filtered.get(category.value)
        entries = entries if isinstance(entries, list) else []
        indices = selected_indices.get(category)

        if indices:
            kept = [entry for i, entry in enumerate(entries) if i in indices]
            _log_debug(f"Filtered '{category.value}': {len(entries)} → {len(kept)} items")
        else:
            kept = []
            _log_debug(f"No items selected from '{category.value}'")

        filtered[category.value] = kept

    skill_names = {item.skill_name for item in selected_skills}
    if skill_names and filtered.get("skills"):
        for group in filtered["skills"]:
            if not isinstance(group, dict) or group.get("name") == EXEMPT_SKILL_GROUP:
                continue
            if "keywords" in group:
                group["keywords"] = [
                    keyword for keyword in group["keywords"] or [] if str(keyword) in skill_names
                ]
        _log_debug(f"Filtered skills: {len(skill_names)} keywords")

    return filtered


def filter_resume_yaml(
    resume_yaml: str,
    selected_items: Iterable[ScoredItem],
    selected_skills: Iterable[ScoredItem],
) -> str:
    """YAML-in, YAML-out wrapper around build_filtered_document()."""
    filtered_yaml = render_document(
        build_filtered_document(load_document(resume_yaml), selected_items, selected_skills)
    )
    _log_info(f"Filtered YAML generated: {len(filtered_yaml)} bytes")
    return filtered_yaml
