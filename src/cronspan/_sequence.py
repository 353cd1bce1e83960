from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from ._civil import as_aware, resolve_zone
from ._error import CronError
from ._eval import MAX_SEARCH_YEARS, search
from ._model import Direction, ScheduleData

logger = logging.getLogger(__name__)

_ONE_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True, slots=True)
class EvaluationRange:
    """Bounds of one evaluation: `start` inclusive, `until` exclusive.

    Either bound may be omitted. Naive datetimes are read as UTC. The zone
    name is resolved eagerly so that an unknown zone fails before any
    instant is produced.
    """

    start: datetime | None = None
    until: datetime | None = None
    timezone: str | None = None

    def __post_init__(self) -> None:
        resolve_zone(self.timezone)
        if self.start is not None and self.until is not None:
            if as_aware(self.start) > as_aware(self.until):
                raise CronError.inverted_evaluation_range(
                    f"start ({self.start.isoformat()}) is after until ({self.until.isoformat()})"
                )

    @property
    def zone(self) -> ZoneInfo:
        return resolve_zone(self.timezone)


def generate(
    schedule: ScheduleData,
    range_: EvaluationRange,
    direction: Direction = Direction.FORWARD,
    *,
    max_years: int = MAX_SEARCH_YEARS,
) -> Iterator[datetime]:
    """Lazily yield the occurrences of `schedule` inside `range_`.

    FORWARD walks up from `start` (a matching `start` is yielded first) and
    stops before `until`. BACKWARD walks down from just before `until` and
    stops before passing `start`. A search that finds nothing within
    `max_years` ends the sequence. Every call starts a fresh, independent
    walk.
    """
    tz = range_.zone
    start = as_aware(range_.start) if range_.start is not None else None
    until = as_aware(range_.until) if range_.until is not None else None

    if direction == Direction.FORWARD:
        if start is None:
            raise CronError.invalid_parameter("a forward evaluation needs a start instant")
        return _walk_forward(schedule, start, until, tz, max_years)
    if until is None:
        raise CronError.invalid_parameter("a backward evaluation needs an until instant")
    return _walk_backward(schedule, start, until, tz, max_years)


def _walk_forward(
    schedule: ScheduleData,
    start: datetime,
    until: datetime | None,
    tz: ZoneInfo,
    max_years: int,
) -> Iterator[datetime]:
    # Searching from just before `start` makes `start` itself a candidate.
    current = search(
        schedule, start - _ONE_MICROSECOND, tz, Direction.FORWARD, max_years=max_years
    )
    while current is not None:
        if until is not None and current >= until:
            return
        yield current
        current = search(schedule, current, tz, Direction.FORWARD, max_years=max_years)
    logger.debug(
        "no occurrence of %r within %d years, ending sequence", schedule.source, max_years
    )


def _walk_backward(
    schedule: ScheduleData,
    start: datetime | None,
    until: datetime,
    tz: ZoneInfo,
    max_years: int,
) -> Iterator[datetime]:
    current = search(schedule, until, tz, Direction.BACKWARD, max_years=max_years)
    while current is not None:
        if start is not None and current < start:
            return
        yield current
        current = search(schedule, current, tz, Direction.BACKWARD, max_years=max_years)
    logger.debug(
        "no occurrence of %r within %d years, ending sequence", schedule.source, max_years
    )
