"""Tests for the milestone ladder."""

from datetime import date

import pytest
from config import MILESTONES
from milestones import evaluate_milestones, milestone_statuses, next_milestone, progress_percentage, sort_catalog
from schemas import Milestone


def _make_catalog(*days):
    return [Milestone(days_required=d, title=f"{d} days") for d in days]


class TestNextMilestone:
    def test_first_milestone_progress_is_from_zero(self):
        nxt = next_milestone(0, _make_catalog(7, 30))
        assert nxt.days_required == 7
        assert nxt.days_until == 7
        assert nxt.progress_percentage == 0
        assert nxt.previous_days == 0

    def test_progress_within_first_span(self):
        nxt = next_milestone(3, _make_catalog(7, 30))
        # round(100 * 3 / 7) = 42.86 -> 43
        assert nxt.progress_percentage == 43

    def test_progress_from_previous_achieved(self):
        nxt = next_milestone(45, _make_catalog(30, 60))
        assert nxt.days_required == 60
        assert nxt.progress_percentage == 50
        assert nxt.previous_days == 30
        assert nxt.days_until == 15

    def test_half_rounds_up(self):
        assert progress_percentage(1, 0, 8) == 13

    def test_all_achieved_is_none(self):
        assert next_milestone(4000, _make_catalog(1, 7, 3650)) is None

    def test_negative_elapsed_is_clamped(self):
        nxt = next_milestone(-5, _make_catalog(7))
        assert nxt.days_until == 7
        assert nxt.progress_percentage == 0


class TestStatuses:
    def test_achieved_flags_and_target_dates(self):
        statuses = milestone_statuses(10, _make_catalog(30, 7), start_date=date(2025, 1, 1))
        assert [s.days_required for s in statuses] == [7, 30]
        assert [s.achieved for s in statuses] == [True, False]
        assert [s.days_until for s in statuses] == [0, 20]
        assert statuses[1].target_date == date(2025, 1, 31)

    def test_threshold_day_counts_as_achieved(self):
        statuses = milestone_statuses(30, _make_catalog(30))
        assert statuses[0].achieved is True
        assert statuses[0].target_date is None

    def test_duplicate_thresholds_keep_catalog_order(self):
        catalog = [
            Milestone(days_required=30, title="B"),
            Milestone(days_required=7, title="A"),
            Milestone(days_required=30, title="C"),
        ]
        assert [m.title for m in sort_catalog(catalog)] == ["A", "B", "C"]
        assert next_milestone(10, catalog).title == "B"


class TestEvaluate:
    def test_default_catalog_is_ascending(self):
        days = [m.days_required for m in MILESTONES]
        assert days == sorted(days)
        assert days[0] == 1 and days[-1] == 3650

    def test_progress_summary(self):
        progress = evaluate_milestones(100, MILESTONES)
        assert [m.days_required for m in progress.achieved] == [1, 7, 14, 30, 60, 90]
        assert progress.next_milestone.days_required == 180
        assert progress.all_achieved is False

    def test_everything_achieved(self):
        progress = evaluate_milestones(5000, MILESTONES)
        assert progress.next_milestone is None
        assert progress.all_achieved is True
        assert len(progress.achieved) == len(MILESTONES)

    def test_empty_catalog(self):
        progress = evaluate_milestones(10, [])
        assert progress.milestones == []
        assert progress.next_milestone is None

    @pytest.mark.parametrize("earlier,later", [(0, 1), (6, 7), (29, 400), (364, 365)])
    def test_never_unachieved_as_time_passes(self, earlier, later):
        before = {m.days_required for m in evaluate_milestones(earlier, MILESTONES).achieved}
        after = {m.days_required for m in evaluate_milestones(later, MILESTONES).achieved}
        assert before <= after
