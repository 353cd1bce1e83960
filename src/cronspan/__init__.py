from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

from ._civil import CivilTime, from_civil, is_fold, is_gap, resolve_zone, to_civil
from ._display import display
from ._error import CronError, CronErrorKind, Span
from ._eval import MAX_PROBES, MAX_SEARCH_YEARS, search
from ._eval import matches as _matches
from ._eval import next_from as _next_from
from ._eval import next_n_from as _next_n_from
from ._eval import previous_from as _previous_from
from ._field import parse_field
from ._model import Direction, FieldKind, FieldSpec, MonthName, ScheduleData, Weekday
from ._parser import parse
from ._sequence import EvaluationRange, generate
from ._table import VECTOR_SIZE, CronBindData, CronTableFunction, cron


class Schedule:
    _data: ScheduleData

    def __init__(self, data: ScheduleData) -> None:
        self._data = data

    @classmethod
    def parse(cls, input_text: str) -> Schedule:
        return cls(parse(input_text))

    @classmethod
    def validate(cls, input_text: str) -> bool:
        try:
            parse(input_text)
            return True
        except CronError:
            return False

    def next_from(self, now: datetime, timezone: str | None = None) -> datetime | None:
        return _next_from(self._data, now, resolve_zone(timezone))

    def previous_from(self, now: datetime, timezone: str | None = None) -> datetime | None:
        return _previous_from(self._data, now, resolve_zone(timezone))

    def next_n_from(self, now: datetime, n: int, timezone: str | None = None) -> list[datetime]:
        return _next_n_from(self._data, now, resolve_zone(timezone), n)

    def matches(self, dt: datetime, timezone: str | None = None) -> bool:
        return _matches(self._data, dt, resolve_zone(timezone))

    def occurrences(self, start: datetime, timezone: str | None = None) -> Iterator[datetime]:
        """Returns a lazy iterator of occurrences at or after `start`.

        The iterator is unbounded for satisfiable patterns (will iterate forever unless
        limited) and ends when no occurrence exists within the search window.
        """
        return generate(self._data, EvaluationRange(start=start, timezone=timezone))

    def between(
        self, start: datetime, until: datetime, timezone: str | None = None
    ) -> Iterator[datetime]:
        """Returns a bounded iterator of occurrences where `start <= occurrence < until`."""
        return generate(self._data, EvaluationRange(start=start, until=until, timezone=timezone))

    def __str__(self) -> str:
        return display(self._data)

    def __repr__(self) -> str:
        return f"Schedule({display(self._data)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> tuple[bool, tuple[FieldSpec, ...]]:
        return (self._data.has_seconds, self._data.fields)

    @property
    def has_seconds(self) -> bool:
        return self._data.has_seconds

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return self._data.fields

    @property
    def data(self) -> ScheduleData:
        return self._data


__all__ = [
    "Schedule",
    "CronError",
    "CronErrorKind",
    "Span",
    "ScheduleData",
    "FieldKind",
    "FieldSpec",
    "Weekday",
    "MonthName",
    "Direction",
    "CivilTime",
    "EvaluationRange",
    "CronTableFunction",
    "CronBindData",
    "MAX_SEARCH_YEARS",
    "MAX_PROBES",
    "VECTOR_SIZE",
    "parse",
    "parse_field",
    "search",
    "generate",
    "to_civil",
    "from_civil",
    "is_gap",
    "is_fold",
    "resolve_zone",
    "cron",
]
