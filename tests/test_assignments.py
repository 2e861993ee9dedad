from datetime import date

import pytest

from domain.assignments import DayAssignmentSet
from domain.models import DayAssignment, Person

AB = Person("ab", 0)
CD = Person("cd", 1)


def test_iterates_in_date_order():
    days = DayAssignmentSet()
    days.assign(date(2026, 10, 7), AB)
    days.assign(date(2026, 10, 5), CD)
    assert list(days) == [date(2026, 10, 5), date(2026, 10, 7)]
    assert days.last_before(date(2026, 10, 6)).assignee == CD
    assert days.last_before(date(2026, 10, 5)) is None


def test_fixed_day_cannot_be_reassigned():
    days = DayAssignmentSet([DayAssignment(date(2026, 10, 5), AB, fixed=True)])
    assert days.is_fixed(date(2026, 10, 5))
    with pytest.raises(ValueError):
        days.assign(date(2026, 10, 5), CD)
    assert days.assignee_on(date(2026, 10, 5)) == AB


def test_key_must_match_record_date():
    days = DayAssignmentSet()
    with pytest.raises(ValueError):
        days[date(2026, 10, 6)] = DayAssignment(date(2026, 10, 5), AB)
