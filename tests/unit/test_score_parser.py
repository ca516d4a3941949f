"""Unit tests for score document parsing."""

import json

import pytest

from quiver.contexts.targeting import MalformedScoreDocumentError, parse_scores


@pytest.mark.unit
def test_parse_fenced_document_with_missing_categories(log_messages):
    """Test fenced JSON parses and absent categories default to empty lists."""
    raw = '```json\n{"work":[{"index":0,"score":80}]}\n```'

    scores = parse_scores(raw)

    assert len(scores.work) == 1
    assert scores.work[0].index == 0
    assert scores.work[0].score == 80
    assert scores.skills == []
    assert scores.projects == []
    assert any("Category 'skills' missing from scores" in m for m in log_messages)


@pytest.mark.unit
def test_parse_unfenced_document_keeps_item_fields():
    """Test plain JSON with reasoning and skill names."""
    raw = json.dumps(
        {
            "work": [{"index": 1, "score": 72.5, "reasoning": "Relevant stack"}],
            "projects": [],
            "education": [],
            "certificates": [],
            "skills": [{"index": 0, "score": 95, "name": "Python"}],
        }
    )

    scores = parse_scores(raw)

    assert scores.work[0].score == 72.5
    assert scores.work[0].reasoning == "Relevant stack"
    assert scores.work[0].name is None
    assert scores.skills[0].name == "Python"


@pytest.mark.unit
def test_parse_bare_fence_without_language_tag():
    """Test a ``` fence with no language tag is stripped too."""
    scores = parse_scores('```\n{"projects": [{"index": 2, "score": 10}]}\n```')
    assert scores.projects[0].index == 2


@pytest.mark.unit
def test_parse_null_category_treated_as_missing():
    """Test a null category is defaulted like an absent one."""
    scores = parse_scores('{"work": null}')
    assert scores.work == []


@pytest.mark.unit
def test_parse_invalid_json_raises():
    """Test non-JSON text fails the whole document."""
    with pytest.raises(MalformedScoreDocumentError) as exc_info:
        parse_scores("Here are your scores: work is great")

    assert exc_info.value.raw_snippet == "Here are your scores: work is great"


@pytest.mark.unit
def test_parse_top_level_array_raises():
    """Test a JSON array is rejected."""
    with pytest.raises(MalformedScoreDocumentError):
        parse_scores('[{"index": 0, "score": 50}]')


@pytest.mark.unit
def test_parse_non_list_category_raises():
    """Test a category that is an object instead of a list is rejected."""
    with pytest.raises(MalformedScoreDocumentError):
        parse_scores('{"work": {"index": 0, "score": 50}}')


@pytest.mark.unit
@pytest.mark.parametrize(
    "entry",
    [
        {"score": 50},
        {"index": 0},
        {"index": "0", "score": 50},
        {"index": 0, "score": "high"},
        {"index": 0, "score": True},
        "work[0]",
    ],
)
def test_parse_item_without_numeric_index_or_score_raises(entry):
    """Test one bad item fails the whole document."""
    raw = json.dumps({"work": [{"index": 0, "score": 90}, entry]})

    with pytest.raises(MalformedScoreDocumentError, match="missing 'index' or 'score'"):
        parse_scores(raw)


@pytest.mark.unit
def test_parse_unknown_category_ignored_with_warning(log_messages):
    """Test keys outside the five categories are ignored."""
    scores = parse_scores('{"work": [], "awards": [{"index": 0, "score": 99}]}')

    assert scores.work == []
    assert any("unknown score categories" in m and "awards" in m for m in log_messages)


@pytest.mark.unit
def test_raw_snippet_truncated_to_500_chars():
    """Test long responses are truncated in the error."""
    raw = "x" * 800

    with pytest.raises(MalformedScoreDocumentError) as exc_info:
        parse_scores(raw)

    assert exc_info.value.raw_snippet == "x" * 500 + "..."


@pytest.mark.unit
@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_parse_non_json_number_constants_raise(constant):
    """Test NaN and Infinity literals are not accepted as scores."""
    with pytest.raises(MalformedScoreDocumentError, match="not valid JSON"):
        parse_scores('{"work": [{"index": 0, "score": %s}]}' % constant)


@pytest.mark.unit
def test_parse_overflowing_score_raises():
    """Test a score literal that overflows to infinity is rejected."""
    with pytest.raises(MalformedScoreDocumentError, match="missing 'index' or 'score'"):
        parse_scores('{"work": [{"index": 0, "score": 1e400}]}')


@pytest.mark.unit
def test_parse_accepts_huge_integer_index():
    """Test integer indices of any size pass parsing (range is checked later)."""
    scores = parse_scores('{"work": [{"index": 1' + "0" * 400 + ', "score": 80}]}')
    assert scores.work[0].index == 10**400
