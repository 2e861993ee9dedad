import random
from itertools import combinations

from conftest import make_roster
from domain.models import Person
from rules.rotor import RotationSelector, select_next


def test_never_selects_unavailable_person():
    roster = make_roster("a", "b", "c", "d")
    codes = roster.codes()
    for size in range(len(codes)):
        for blocked in combinations(codes, size):
            for last in roster:
                for workday in (True, False):
                    chosen = select_next(roster, blocked, last, workday, rng=1)
                    assert chosen.code not in blocked
                    assert chosen.in_rotation


def test_everyone_unavailable_yields_shadow():
    roster = make_roster("a", "b", "c")
    for last in list(roster) + [roster.shadow]:
        assert select_next(roster, ["a", "B", "c"], last, True) == roster.shadow


def test_unavailable_outsiders_do_not_trigger_shadow():
    roster = make_roster("a", "b", "c")
    chosen = select_next(roster, ["b", "c", "zz"], roster.by_code("c"), True)
    assert chosen.code == "a"


def test_round_robin_visits_everyone_once():
    roster = make_roster("a", "b", "c", "d")
    selector = RotationSelector(roster)
    last = roster.by_order(0)
    seen = []
    for k in range(roster.size()):
        last = selector.select_next([], last, True)
        assert last == roster.by_order((k + 1) % roster.size())
        seen.append(last.code)
    assert sorted(seen) == sorted(roster.codes())


def test_holiday_repeats_previous_assignee():
    roster = make_roster("a", "b", "c")
    for person in roster:
        assert select_next(roster, [], person, False) == person


def test_holiday_with_previous_assignee_unavailable_moves_on():
    roster = make_roster("a", "b", "c")
    assert select_next(roster, ["a"], roster.by_code("a"), False).code == "b"


def test_skips_unavailable_in_order():
    roster = make_roster("a", "b", "c", "d")
    assert select_next(roster, ["b", "c"], roster.by_code("a"), True).code == "d"
    assert select_next(roster, ["d", "a"], roster.by_code("c"), True).code == "b"


def test_random_start_is_seedable():
    roster = make_roster("a", "b", "c", "d", "e")
    first = [RotationSelector(roster, 42).select_next([], roster.shadow, True) for _ in range(3)]
    again = [RotationSelector(roster, random.Random(42)).select_next([], roster.shadow, True) for _ in range(3)]
    assert first == again
    expected = roster.by_order((random.Random(42).randrange(5) + 1) % 5)
    assert first[0] == expected


def test_unknown_anchor_starts_randomly():
    roster = make_roster("a", "b", "c")
    chosen = RotationSelector(roster, 7).select_next([], Person(code="zz"), True)
    expected = roster.by_order((random.Random(7).randrange(3) + 1) % 3)
    assert chosen == expected
