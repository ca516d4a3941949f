"""Unit tests for building filtered resume documents."""

import copy

import pytest

from quiver.contexts.targeting import (
    Category,
    InvalidResumeDocumentError,
    ScoredItem,
    build_filtered_document,
    filter_resume_yaml,
    load_document,
    render_document,
)


def selected(category, *indices):
    return [ScoredItem(category=Category(category), index=i, score=50) for i in indices]


def skill(name):
    return ScoredItem(category=Category.SKILLS, index=0, score=50, name=name)


@pytest.mark.unit
def test_filter_preserves_document_order(resume_document):
    """Test kept entries follow document order, not selection order."""
    items = selected("work", 2, 0)

    filtered = build_filtered_document(resume_document, items, [])

    assert [entry["name"] for entry in filtered["work"]] == [
        "Planet Express",
        "Applied Cryogenics",
    ]


@pytest.mark.unit
def test_filter_empties_unselected_categories_but_keeps_keys(resume_document):
    """Test categories with nothing selected become empty lists."""
    filtered = build_filtered_document(resume_document, selected("projects", 1), [])

    assert filtered["work"] == []
    assert filtered["education"] == []
    assert filtered["certificates"] == []
    assert [entry["name"] for entry in filtered["projects"]] == ["Slurm Factory Tour"]


@pytest.mark.unit
def test_filter_missing_category_becomes_empty_list():
    """Test an absent entry section is present and empty afterwards."""
    filtered = build_filtered_document({"work": [{"name": "Planet Express"}]}, [], [])
    assert filtered["certificates"] == []


@pytest.mark.unit
def test_filter_skills_keeps_languages_untouched(resume_document):
    """Test skill keywords are filtered except in the Languages group."""
    filtered = build_filtered_document(resume_document, [], [skill("Python"), skill("Leadership")])

    groups = {group["name"]: group["keywords"] for group in filtered["skills"]}
    assert groups["Technical"] == ["Python"]
    assert groups["Soft"] == ["Leadership"]
    assert groups["Languages"] == ["English", "Alien Language 1"]


@pytest.mark.unit
def test_filter_skills_by_original_value():
    """Test skills without a reported name match on their keyword value."""
    document = {"skills": [{"name": "Technical", "keywords": ["Python", "Go"]}]}
    go = ScoredItem(category=Category.SKILLS, index=1, score=80, original_data={"value": "Go"})

    filtered = build_filtered_document(document, [], [go])

    assert filtered["skills"][0]["keywords"] == ["Go"]


@pytest.mark.unit
def test_filter_without_selected_skills_leaves_skills(resume_document):
    """Test the skills section passes through when no skill was selected."""
    filtered = build_filtered_document(resume_document, [], [])
    assert filtered["skills"] == resume_document["skills"]


@pytest.mark.unit
def test_filter_leaves_other_fields_and_input_untouched(resume_document):
    """Test non-scored fields survive and the original is not modified."""
    original = copy.deepcopy(resume_document)

    filtered = build_filtered_document(resume_document, selected("work", 0), [skill("Docker")])

    assert filtered["basics"] == original["basics"]
    assert resume_document == original


@pytest.mark.unit
def test_filter_is_idempotent(resume_document):
    """Test the same selection gives identical output twice."""
    items = selected("work", 1) + selected("education", 0)
    skills = [skill("Docker")]

    assert build_filtered_document(resume_document, items, skills) == build_filtered_document(
        resume_document, items, skills
    )


@pytest.mark.unit
def test_filter_resume_yaml_round_trip():
    """Test YAML in, filtered YAML out."""
    resume_yaml = """\
basics:
  name: Turanga Leela
work:
- name: Planet Express
  startDate: 3000-01
- name: Cookieville Orphanarium
education: []
skills:
- name: Languages
  keywords:
  - English
"""

    filtered_yaml = filter_resume_yaml(resume_yaml, selected("work", 1), [])
    document = load_document(filtered_yaml)

    assert document["basics"] == {"name": "Turanga Leela"}
    assert document["work"] == [{"name": "Cookieville Orphanarium"}]
    assert document["skills"][0]["keywords"] == ["English"]


@pytest.mark.unit
def test_load_document_keeps_date_strings():
    """Test date-like values are not converted to date objects."""
    document = load_document("education:\n- endDate: 2019-05-01\n")
    assert document["education"][0]["endDate"] == "2019-05-01"


@pytest.mark.unit
def test_load_document_rejects_top_level_list():
    """Test a YAML sequence is not a resume."""
    with pytest.raises(InvalidResumeDocumentError):
        load_document("- work\n- projects\n")


@pytest.mark.unit
def test_render_document_keeps_key_order():
    """Test rendering keeps insertion order of keys."""
    rendered = render_document({"work": [], "basics": {"name": "Bender"}})
    assert rendered.index("work") < rendered.index("basics")
