"""Sort selection per entity vocabulary."""

from tutorsearch.services.search.sort_strategy import (
    DISTANCE,
    JOB_SORTS,
    LATEST,
    LATEST_TERMS,
    TEACHER_SORTS,
    SortTerm,
    select_sort,
)


class TestSelectSort:
    def test_default_is_distance_with_origin(self):
        plan = select_sort(TEACHER_SORTS, None, has_origin=True)
        assert plan.key == DISTANCE
        assert plan.by_distance is True
        assert plan.terms == ()

    def test_default_is_latest_without_origin(self):
        plan = select_sort(TEACHER_SORTS, None, has_origin=False)
        assert plan.key == LATEST
        assert plan.terms == LATEST_TERMS

    def test_distance_without_origin_falls_back_to_latest(self):
        plan = select_sort(JOB_SORTS, "distance", has_origin=False)
        assert plan.key == LATEST
        assert not plan.by_distance

    def test_unknown_key_uses_default(self):
        assert select_sort(TEACHER_SORTS, "cheapest", has_origin=True).key == DISTANCE
        assert select_sort(TEACHER_SORTS, "cheapest", has_origin=False).key == LATEST

    def test_vocabularies_are_per_entity(self):
        # budget-high exists for jobs only; price-low for teachers only
        assert select_sort(TEACHER_SORTS, "budget-high", has_origin=False).key == LATEST
        assert select_sort(JOB_SORTS, "price-low", has_origin=False).key == LATEST
        assert select_sort(JOB_SORTS, "budget-high", has_origin=False).key == "budget-high"

    def test_explicit_sort_replaces_distance(self):
        plan = select_sort(TEACHER_SORTS, "rating", has_origin=True)
        assert plan.by_distance is False
        assert plan.terms == (
            SortTerm("rating_average", descending=True),
            SortTerm("rating_count", descending=True),
        )

    def test_key_is_case_insensitive(self):
        assert select_sort(TEACHER_SORTS, " Price-High ", has_origin=False).key == "price-high"


class TestUrgencyRanks:
    def test_rank_map(self):
        term = JOB_SORTS["urgency"][0]
        assert term.rank_of("immediate") == 1
        assert term.rank_of("within-week") == 2
        assert term.rank_of("within-month") == 3
        assert term.rank_of("flexible") == 4
        assert term.rank_of("someday") == 5
        assert term.rank_of(None) == 5

    def test_plain_terms_sort_on_raw_value(self):
        assert SortTerm("budget_min").key_of(300) == 300
