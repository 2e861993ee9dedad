"""Ordered roster of on-call people."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from .errors import ConfigurationError
from .models import Person

DEFAULT_SHADOW_CODE = "xx"


class Roster:
    """Rotation order indexed by position and by code.

    Codes are stored lower-cased; lookups are case-insensitive.
    """

    def __init__(self, persons: Iterable[Person], *, shadow_code: str = DEFAULT_SHADOW_CODE) -> None:
        people = list(persons)
        if not people:
            raise ConfigurationError("Oncallers is empty: nobody to rotate")

        by_order: Dict[int, Person] = {}
        by_code: Dict[str, Person] = {}
        for person in people:
            code = (person.code or "").strip().lower()
            if not code:
                raise ConfigurationError(f"Oncaller at order {person.order} has no code")
            if person.order is None:
                raise ConfigurationError(f"Oncaller {code} has no order")
            if person.order in by_order:
                raise ConfigurationError(
                    f"Duplicate order {person.order}: {by_order[person.order].code} and {code}"
                )
            if code in by_code:
                raise ConfigurationError(f"Duplicate oncaller code {code}")
            normalised = Person(
                code=code,
                order=int(person.order),
                email=person.email,
                calendar_email=person.calendar_email,
                slack_id=person.slack_id,
            )
            by_order[normalised.order] = normalised
            by_code[code] = normalised

        missing = [n for n in range(len(people)) if n not in by_order]
        if missing:
            raise ConfigurationError(
                f"Oncaller orders must cover 0..{len(people) - 1}; missing {missing}"
            )

        shadow = (shadow_code or DEFAULT_SHADOW_CODE).strip().lower()
        if shadow in by_code:
            raise ConfigurationError(f"Shadow oncaller {shadow} is also in the roster")

        self._by_order = by_order
        self._by_code = by_code
        self._shadow = Person(code=shadow)

    # ------------------------------------------------------------------
    def by_order(self, order: int) -> Person:
        return self._by_order[order]

    def by_code(self, code: str) -> Person:
        return self._by_code[code.lower()]

    def size(self) -> int:
        return len(self._by_order)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Person]:
        for order in range(len(self._by_order)):
            yield self._by_order[order]

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.lower() in self._by_code

    @property
    def shadow(self) -> Person:
        return self._shadow

    def codes(self) -> List[str]:
        return [person.code for person in self]

    def is_shadow(self, person: Person) -> bool:
        return person.code == self._shadow.code

    def resolve(self, code: str) -> Person:
        """Map a calendar code onto a person.

        Codes unknown to the roster become out-of-rotation people so the
        day set still records who the calendar names.
        """
        key = (code or "").strip().lower()
        if not key or key == self._shadow.code:
            return self._shadow
        person = self._by_code.get(key)
        if person is not None:
            return person
        return Person(code=key)


__all__ = ["Roster", "DEFAULT_SHADOW_CODE"]
