from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum


class Weekday(Enum):
    SUNDAY = "sun"
    MONDAY = "mon"
    TUESDAY = "tue"
    WEDNESDAY = "wed"
    THURSDAY = "thu"
    FRIDAY = "fri"
    SATURDAY = "sat"

    @property
    def cron_dow(self) -> int:
        """Cron DOW number: Sunday=0, Monday=1, ..., Saturday=6."""
        return _CRON_DOW[self]

    @classmethod
    def try_parse(cls, s: str) -> Weekday | None:
        return _WEEKDAY_PARSE.get(s.lower())

    def __str__(self) -> str:
        return self.value


_CRON_DOW = {
    Weekday.SUNDAY: 0,
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
}

_WEEKDAY_PARSE: dict[str, Weekday] = {
    "monday": Weekday.MONDAY,
    "mon": Weekday.MONDAY,
    "tuesday": Weekday.TUESDAY,
    "tue": Weekday.TUESDAY,
    "wednesday": Weekday.WEDNESDAY,
    "wed": Weekday.WEDNESDAY,
    "thursday": Weekday.THURSDAY,
    "thu": Weekday.THURSDAY,
    "friday": Weekday.FRIDAY,
    "fri": Weekday.FRIDAY,
    "saturday": Weekday.SATURDAY,
    "sat": Weekday.SATURDAY,
    "sunday": Weekday.SUNDAY,
    "sun": Weekday.SUNDAY,
}


class MonthName(Enum):
    JAN = "jan"
    FEB = "feb"
    MAR = "mar"
    APR = "apr"
    MAY = "may"
    JUN = "jun"
    JUL = "jul"
    AUG = "aug"
    SEP = "sep"
    OCT = "oct"
    NOV = "nov"
    DEC = "dec"

    @property
    def number(self) -> int:
        return _MONTH_NUMBERS[self]

    @classmethod
    def try_parse(cls, s: str) -> MonthName | None:
        return _MONTH_PARSE.get(s.lower())

    def __str__(self) -> str:
        return self.value


_MONTH_NUMBERS = {
    MonthName.JAN: 1,
    MonthName.FEB: 2,
    MonthName.MAR: 3,
    MonthName.APR: 4,
    MonthName.MAY: 5,
    MonthName.JUN: 6,
    MonthName.JUL: 7,
    MonthName.AUG: 8,
    MonthName.SEP: 9,
    MonthName.OCT: 10,
    MonthName.NOV: 11,
    MonthName.DEC: 12,
}

_MONTH_PARSE: dict[str, MonthName] = {
    "january": MonthName.JAN,
    "jan": MonthName.JAN,
    "february": MonthName.FEB,
    "feb": MonthName.FEB,
    "march": MonthName.MAR,
    "mar": MonthName.MAR,
    "april": MonthName.APR,
    "apr": MonthName.APR,
    "may": MonthName.MAY,
    "june": MonthName.JUN,
    "jun": MonthName.JUN,
    "july": MonthName.JUL,
    "jul": MonthName.JUL,
    "august": MonthName.AUG,
    "aug": MonthName.AUG,
    "september": MonthName.SEP,
    "sep": MonthName.SEP,
    "october": MonthName.OCT,
    "oct": MonthName.OCT,
    "november": MonthName.NOV,
    "nov": MonthName.NOV,
    "december": MonthName.DEC,
    "dec": MonthName.DEC,
}


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    def __str__(self) -> str:
        return self.value


# --- Fields ---


class FieldKind(Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "day-of-month"
    MONTH = "month"
    DAY_OF_WEEK = "day-of-week"

    @property
    def minimum(self) -> int:
        return _FIELD_BOUNDS[self][0]

    @property
    def maximum(self) -> int:
        """Largest literal the field accepts (7 for day-of-week, an alias of Sunday)."""
        return _FIELD_BOUNDS[self][1]

    @property
    def has_names(self) -> bool:
        return self in (FieldKind.MONTH, FieldKind.DAY_OF_WEEK)

    def lookup_name(self, token: str) -> int | None:
        if self == FieldKind.MONTH:
            month = MonthName.try_parse(token)
            return month.number if month else None
        if self == FieldKind.DAY_OF_WEEK:
            weekday = Weekday.try_parse(token)
            return weekday.cron_dow if weekday else None
        return None

    def __str__(self) -> str:
        return self.value


_FIELD_BOUNDS: dict[FieldKind, tuple[int, int]] = {
    FieldKind.SECOND: (0, 59),
    FieldKind.MINUTE: (0, 59),
    FieldKind.HOUR: (0, 23),
    FieldKind.DAY_OF_MONTH: (1, 31),
    FieldKind.MONTH: (1, 12),
    FieldKind.DAY_OF_WEEK: (0, 7),
}


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """The accepted values of one cron field, sorted ascending and de-duplicated."""

    kind: FieldKind
    values: tuple[int, ...]
    is_wildcard: bool = False

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError(f"{self.kind} field accepts no values")
        lo, hi = self.kind.minimum, self.kind.maximum
        if any(v < lo or v > hi for v in self.values):
            raise ValueError(f"{self.kind} values must lie in {lo}-{hi}")
        if list(self.values) != sorted(set(self.values)):
            raise ValueError(f"{self.kind} values must be sorted and unique")

    @classmethod
    def every(cls, kind: FieldKind) -> FieldSpec:
        hi = 6 if kind == FieldKind.DAY_OF_WEEK else kind.maximum
        return cls(kind, tuple(range(kind.minimum, hi + 1)), is_wildcard=True)

    @classmethod
    def only(cls, kind: FieldKind, value: int) -> FieldSpec:
        return cls(kind, (value,))

    @property
    def first(self) -> int:
        return self.values[0]

    @property
    def last(self) -> int:
        return self.values[-1]

    def contains(self, value: int) -> bool:
        i = bisect_left(self.values, value)
        return i < len(self.values) and self.values[i] == value

    def next_at_or_after(self, value: int) -> int | None:
        i = bisect_left(self.values, value)
        return self.values[i] if i < len(self.values) else None

    def prev_at_or_before(self, value: int) -> int | None:
        i = bisect_right(self.values, value)
        return self.values[i - 1] if i > 0 else None


# --- Schedule ---


@dataclass(frozen=True, slots=True)
class ScheduleData:
    second: FieldSpec
    minute: FieldSpec
    hour: FieldSpec
    day_of_month: FieldSpec
    month: FieldSpec
    day_of_week: FieldSpec
    has_seconds: bool
    source: str = ""
    day_restricted: bool = field(init=False)

    def __post_init__(self) -> None:
        # Both day fields restricted: a day matches when either one does.
        restricted = not self.day_of_month.is_wildcard and not self.day_of_week.is_wildcard
        object.__setattr__(self, "day_restricted", restricted)

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return (
            self.second,
            self.minute,
            self.hour,
            self.day_of_month,
            self.month,
            self.day_of_week,
        )

    def matches_day(self, day: int, weekday: int) -> bool:
        """Day rule over an existing calendar day; `weekday` is the cron number (Sunday=0)."""
        dom_ok = self.day_of_month.contains(day)
        dow_ok = self.day_of_week.contains(weekday)
        if self.day_restricted:
            return dom_ok or dow_ok
        return dom_ok and dow_ok
