from datetime import date

from rules.availability import unavailable_for
from rules.fairness import FairnessLedger


def make_ledger(counts, **kwargs):
    ledger = FairnessLedger(lambda month, year: counts, shadow_code="xx", **kwargs)
    return ledger


def test_absences_are_lowercased_and_deduplicated():
    ledger = make_ledger({})
    ledger.ensure(date(2026, 10, 5))
    assert unavailable_for(date(2026, 10, 5), ledger, ["AB", "ab", "cd", "Ab"]) == ["ab", "cd"]


def test_overloaded_and_absent_merge_without_duplicates():
    ledger = make_ledger({"a": (2, 0), "b": (0, 0)}, max_days=2)
    ledger.ensure(date(2026, 10, 5))
    result = unavailable_for(date(2026, 10, 5), ledger, ["A", "c"])
    assert result == ["a", "c"]
    assert len(result) == len(set(result))


def test_person_already_on_duty_that_day_is_not_overloaded_for_it():
    ledger = make_ledger({"a": (2, 0)}, max_days=2)
    ledger.ensure(date(2026, 10, 5))
    assert unavailable_for(date(2026, 10, 5), ledger, [], assigned_today="A") == []


def test_absence_still_applies_to_person_on_duty():
    ledger = make_ledger({"a": (2, 0)}, max_days=2)
    ledger.ensure(date(2026, 10, 5))
    assert unavailable_for(date(2026, 10, 5), ledger, ["a"], assigned_today="a") == ["a"]


def test_weekend_limit_only_on_weekends():
    ledger = make_ledger({"a": (0, 1)}, max_weekends=1)
    ledger.ensure(date(2026, 10, 9))
    assert unavailable_for(date(2026, 10, 9), ledger, []) == []
    assert unavailable_for(date(2026, 10, 10), ledger, []) == ["a"]
