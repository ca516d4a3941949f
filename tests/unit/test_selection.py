"""Unit tests for the selection engine."""

import pytest

from quiver.contexts.targeting import Category, ScoredItem, SelectionOptions, get_top_skills, select
from quiver.contexts.targeting.selection import allocate_proportionally, select_education


def make_item(category, index, score, **original_data):
    return ScoredItem(
        category=Category(category), index=index, score=score, original_data=original_data
    )


def scores_of(items, category=None):
    return [item.score for item in items if category is None or item.category.value == category]


@pytest.mark.unit
def test_padding_includes_below_threshold_when_below_minimum():
    """Test [90, 55, 20] work scores all survive when fewer items exist than min_items."""
    items = [make_item("work", i, score) for i, score in enumerate([90, 55, 20])]

    result = select(items, SelectionOptions(min_score=40, min_work_items=2, min_items=10))

    assert sorted(scores_of(result.items), reverse=True) == [90, 55, 20]
    assert result.metrics.items_selected == 3
    assert result.metrics.items_rejected == 0


@pytest.mark.unit
def test_work_floor_promotes_best_below_threshold_work():
    """Test the work floor pulls the highest-scoring missing work items."""
    items = [
        make_item("projects", 0, 80),
        make_item("work", 0, 30),
        make_item("work", 1, 10),
        make_item("work", 2, 20),
    ]

    result = select(items, SelectionOptions(min_items=0, min_work_items=2))

    assert sorted(scores_of(result.items, "work"), reverse=True) == [30, 20]
    assert scores_of(result.items, "projects") == [80]


@pytest.mark.unit
def test_work_floor_shortfall_is_logged_not_fatal(log_messages):
    """Test too few work items in total only logs a warning."""
    items = [make_item("work", 0, 10), make_item("projects", 0, 90)]

    result = select(items, SelectionOptions(min_items=0, min_work_items=2))

    assert scores_of(result.items) == [90]
    assert any("Only 1 work items available" in m for m in log_messages)


@pytest.mark.unit
def test_minimum_counts_education():
    """Test selected education counts toward min_items."""
    items = [
        make_item("education", 0, 90, endDate="2020"),
        make_item("education", 1, 85, endDate="2016"),
        make_item("work", 0, 80),
        make_item("projects", 0, 30),
        make_item("projects", 1, 20),
    ]

    result = select(items, SelectionOptions(min_items=4))

    assert result.metrics.items_selected == 4
    assert scores_of(result.items, "projects") == [30]


@pytest.mark.unit
def test_cap_applies_proportional_allocation():
    """Test the cap splits slots by proportion, leftovers going to best scores."""
    work = [make_item("work", i, 90 - i) for i in range(10)]
    projects = [make_item("projects", i, 80 - i) for i in range(10)]
    certificates = [make_item("certificates", i, 95 - i) for i in range(3)]

    result = select(work + projects + certificates, SelectionOptions(max_items=10, min_items=0))

    by_category = result.metrics.selection_by_category
    # floor(10 * .65) = 6 work, floor(10 * .30) = 3 projects, floor(10 * .05) = 0
    # certificates; the leftover slot goes to the 95 certificate
    assert by_category == {"work": 6, "projects": 3, "certificates": 1}
    assert scores_of(result.items, "certificates") == [95]
    assert result.metrics.items_selected == 10


@pytest.mark.unit
def test_output_size_within_bounds():
    """Test selection size lands in [min_items, max_items] when enough items exist."""
    items = [make_item("work", i, score) for i, score in enumerate(range(5, 100, 5))]
    options = SelectionOptions(min_items=10, max_items=15)

    result = select(items, options)

    assert options.min_items <= result.metrics.items_selected <= options.max_items


@pytest.mark.unit
def test_skills_are_ignored_by_select():
    """Test skills never count as selected or scored items."""
    items = [make_item("skills", 0, 99, value="Python"), make_item("work", 0, 70)]

    result = select(items, SelectionOptions(min_items=0))

    assert [item.category for item in result.items] == [Category.WORK]
    assert result.metrics.total_items_scored == 1


@pytest.mark.unit
def test_empty_input_gives_zero_metrics():
    """Test an empty selection reports zero score statistics."""
    result = select([])

    assert result.items == []
    assert result.metrics.items_selected == 0
    assert result.metrics.score_range == "0-0"
    assert result.metrics.avg_score == 0


@pytest.mark.unit
def test_unknown_proportion_category_raises():
    """Test a misspelled proportion key is rejected."""
    with pytest.raises(ValueError, match="Unknown category 'experience'"):
        select([], SelectionOptions(proportions={"experience": 1.0}))


@pytest.mark.unit
def test_select_does_not_mutate_input():
    """Test the input list is left as given."""
    items = [make_item("work", i, score) for i, score in enumerate([20, 90, 55])]
    snapshot = list(items)

    select(items, SelectionOptions(min_items=0, max_items=1))

    assert items == snapshot


# Education


@pytest.mark.unit
def test_education_newest_first_and_stops_at_threshold():
    """Test education walks newest first and stops at the first low score."""
    items = [
        make_item("education", 0, 90, endDate="2010-05"),
        make_item("education", 1, 80, endDate="Present"),
        make_item("education", 2, 30, endDate="2015"),
    ]

    selected = select_education(items, max_items=5, min_score=50)

    # Present (80) first, then 2015 (30) stops the walk before 2010 (90)
    assert [item.index for item in selected] == [1]


@pytest.mark.unit
def test_education_first_item_kept_even_below_threshold():
    """Test the threshold only stops once an item has been accepted."""
    items = [
        make_item("education", 0, 40, endDate="2022"),
        make_item("education", 1, 90, endDate="2018"),
        make_item("education", 2, 20, endDate="2014"),
    ]

    selected = select_education(items, max_items=5, min_score=50)

    assert [item.index for item in selected] == [0, 1]


@pytest.mark.unit
def test_education_all_below_threshold_keeps_highest():
    """Test education is never emptied when every item is below threshold."""
    items = [
        make_item("education", 0, 10, endDate="2022"),
        make_item("education", 1, 45, endDate="2012"),
    ]

    selected = select_education(items, max_items=5, min_score=50)

    assert [item.index for item in selected] == [1]


@pytest.mark.unit
def test_education_unparseable_date_falls_back_to_score_order():
    """Test an unknown date format switches to descending score order."""
    items = [
        make_item("education", 0, 60, endDate="sometime soon"),
        make_item("education", 1, 95, endDate="2001"),
        make_item("education", 2, 75),
    ]

    selected = select_education(items, max_items=2, min_score=50)

    assert [item.score for item in selected] == [95, 75]


@pytest.mark.unit
def test_education_respects_cap():
    """Test max_education_items is honored."""
    items = [make_item("education", i, 90, endDate=str(2020 - i)) for i in range(4)]

    result = select(items, SelectionOptions(max_education_items=2, min_items=0))

    assert sorted(item.index for item in result.items) == [0, 1]


# Allocation


@pytest.mark.unit
def test_allocation_never_exceeds_budget():
    """Test proportions summing above 1 cannot overfill the budget."""
    items = [make_item("work", i, 50) for i in range(5)] + [
        make_item("projects", i, 50) for i in range(5)
    ]
    proportions = {Category.WORK: 0.8, Category.PROJECTS: 0.8}

    selected = allocate_proportionally(items, 5, proportions)

    assert len(selected) == 5


@pytest.mark.unit
def test_allocation_leftovers_follow_next_best_item():
    """Test leftover slots are awarded one at a time to the best next item."""
    items = [
        make_item("work", 0, 90),
        make_item("work", 1, 50),
        make_item("projects", 0, 70),
        make_item("projects", 1, 60),
    ]

    selected = allocate_proportionally(items, 3, {})

    assert sorted(scores_of(selected), reverse=True) == [90, 70, 60]


# Skills


@pytest.mark.unit
def test_get_top_skills_limits_and_orders():
    """Test top skills are sorted descending and truncated."""
    items = [make_item("skills", i, score, value=f"s{i}") for i, score in enumerate([40, 95, 70])]
    items.append(make_item("work", 0, 100))

    top = get_top_skills(items, limit=2)

    assert [item.score for item in top] == [95, 70]
