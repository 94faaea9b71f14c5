from datetime import date, datetime, timedelta, timezone

import pytest

from staffplan.capacity.schemas import WorklogEntry
from staffplan.capacity.summary import TeamCapacitySummary, summarize_team
from staffplan.capacity.worklogs import UNKNOWN_ACCOUNT, hours_by_account, merge_hours


def _entry(account_id, started, seconds):
    return WorklogEntry(account_id=account_id, started=started, time_spent_seconds=seconds)


class TestHoursByAccount:

    def test_sums_per_account_within_range(self):
        entries = [
            _entry("acc-1", datetime(2026, 3, 2, 9, 0), 3600 * 3),
            _entry("acc-1", datetime(2026, 3, 6, 14, 30), 1800),
            _entry("acc-2", datetime(2026, 3, 4, 10, 0), 3600 * 8),
        ]

        assert hours_by_account(entries, date(2026, 3, 2), date(2026, 3, 8)) == {
            "acc-1": 3.5,
            "acc-2": 8.0,
        }

    def test_entries_outside_range_are_ignored(self):
        entries = [
            _entry("acc-1", datetime(2026, 3, 1, 23, 59), 3600),
            _entry("acc-1", datetime(2026, 3, 9, 0, 0), 3600),
            _entry("acc-1", datetime(2026, 3, 8, 23, 0), 3600),
        ]

        assert hours_by_account(entries, date(2026, 3, 2), date(2026, 3, 8)) == {"acc-1": 1.0}

    def test_timestamp_date_is_taken_as_written(self):
        # Late Sunday evening in UTC-8 is already Monday in UTC
        started = datetime(2026, 3, 8, 22, 0, tzinfo=timezone(timedelta(hours=-8)))
        entries = [_entry("acc-1", started, 7200)]

        assert hours_by_account(entries, date(2026, 3, 2), date(2026, 3, 8)) == {"acc-1": 2.0}

    def test_missing_author_is_bucketed(self):
        entries = [_entry(None, datetime(2026, 3, 3, 9, 0), 3600)]

        assert hours_by_account(entries, date(2026, 3, 2), date(2026, 3, 8)) == {UNKNOWN_ACCOUNT: 1.0}

    def test_no_entries(self):
        assert hours_by_account([], date(2026, 3, 2), date(2026, 3, 8)) == {}


def test_merge_hours_adds_overlapping_accounts():
    merged = merge_hours({"acc-1": 10.0, "acc-2": 2.5}, {"acc-1": 4.0, "acc-3": 1.0}, {})

    assert merged == {"acc-1": 14.0, "acc-2": 2.5, "acc-3": 1.0}


def test_negative_worklog_duration_rejected():
    with pytest.raises(ValueError):
        WorklogEntry(account_id="acc-1", started=datetime(2026, 3, 2, 9, 0), time_spent_seconds=-1)


class TestSummarizeTeam:

    def _row(self, status, available, actual, utilization):
        return {
            "account_id": "x",
            "display_name": "X",
            "avatar_url": None,
            "planned_allocation": 100.0,
            "available_hours": available,
            "actual_hours": actual,
            "utilization_percent": utilization,
            "status": status,
        }

    def test_empty_team(self):
        assert summarize_team([]) == TeamCapacitySummary()

    def test_totals_and_counts(self):
        rows = [
            self._row("at-risk", 40.0, 40.0, 100.0),
            self._row("overloaded", 20.0, 30.0, 150.0),
            self._row("underloaded", 40.0, 8.0, 20.0),
            self._row("optimal", 32.0, 24.0, 75.0),
            self._row("optimal", 40.0, 30.0, 75.0),
        ]

        summary = summarize_team(rows)

        assert summary.member_count == 5
        assert summary.total_capacity_hours == 172.0
        assert summary.total_actual_hours == 132.0
        assert summary.average_utilization_percent == 84.0
        assert summary.overloaded_count == 1
        assert summary.at_risk_count == 1
        assert summary.underloaded_count == 1
        assert summary.optimal_count == 2
