"""Table-function adapter: the `cron(pattern, start=, until=, timezone=)` surface.

The adapter follows the lifecycle of a SQL table function. `bind` validates
the positional pattern and the named parameters into an immutable
`CronBindData`, `init` creates the per-scan state, and each `func` call fills
one output chunk of at most `vector_size` rows of the single `cron` column.

Parameter conventions:

- `start` (inclusive) defaults to the current instant, `until` (exclusive)
  to unbounded, `timezone` to the session zone.
- Timestamps may be datetimes (naive values are UTC), dates (midnight UTC)
  or ISO-8601 text.
- Output values are naive UTC datetimes, second precision, the SQL
  `TIMESTAMP` convention.

Direction is decided here and handed to the sequence generator: the scan
walks backward from `until` only when `start` is omitted and `until` lies in
the past; every other combination walks forward.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, timezone
from itertools import islice

from ._error import CronError
from ._model import Direction, ScheduleData
from ._parser import parse
from ._sequence import EvaluationRange, generate

logger = logging.getLogger(__name__)

VECTOR_SIZE = 2048
COLUMN_NAME = "cron"
COLUMN_TYPE = "TIMESTAMP"
NAMED_PARAMETERS = ("start", "until", "timezone", "limit")

Row = tuple[datetime]


@dataclass(frozen=True, slots=True)
class CronBindData:
    schedule: ScheduleData
    range: EvaluationRange
    direction: Direction
    limit: int | None = None


@dataclass(slots=True)
class CronInitData:
    rows: Iterator[datetime]
    emitted: int = 0
    done: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CronTableFunction:
    name = "cron"

    def __init__(
        self,
        session_timezone: str = "UTC",
        *,
        vector_size: int = VECTOR_SIZE,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if vector_size < 1:
            raise ValueError("vector_size must be positive")
        self.session_timezone = session_timezone
        self.vector_size = vector_size
        self._clock = clock

    def bind(self, pattern: object, **named: object) -> CronBindData:
        unknown = sorted(set(named) - set(NAMED_PARAMETERS))
        if unknown:
            raise CronError.invalid_parameter(
                f"unknown named parameter(s) for {self.name}: {', '.join(unknown)}"
            )
        if not isinstance(pattern, str):
            raise CronError.invalid_parameter("the cron pattern must be text")

        schedule = parse(pattern)
        tz_name = _to_zone_name(named.get("timezone"), self.session_timezone)
        start = _to_instant(named.get("start"), "start")
        until = _to_instant(named.get("until"), "until")
        limit = _to_limit(named.get("limit"))

        now = self._clock()
        if start is None and until is not None and until < now:
            direction = Direction.BACKWARD
        else:
            direction = Direction.FORWARD
            if start is None:
                start = now

        range_ = EvaluationRange(start=start, until=until, timezone=tz_name)
        logger.debug(
            "bound %s(%r): direction=%s start=%s until=%s timezone=%s limit=%s",
            self.name,
            schedule.source,
            direction,
            start,
            until,
            tz_name,
            limit,
        )
        return CronBindData(schedule=schedule, range=range_, direction=direction, limit=limit)

    def init(self, bind_data: CronBindData) -> CronInitData:
        rows = generate(bind_data.schedule, bind_data.range, bind_data.direction)
        return CronInitData(rows=rows)

    def func(self, bind_data: CronBindData, init_data: CronInitData) -> list[Row]:
        """Produce the next output chunk; an empty chunk ends the scan."""
        if init_data.done:
            return []
        budget = self.vector_size
        if bind_data.limit is not None:
            budget = min(budget, bind_data.limit - init_data.emitted)
        chunk = [(_to_timestamp(dt),) for dt in islice(init_data.rows, budget)]
        init_data.emitted += len(chunk)
        # A short chunk means the sequence ran out.
        if len(chunk) < budget or init_data.emitted == bind_data.limit:
            init_data.done = True
        return chunk

    def scan(self, pattern: object, **named: object) -> Iterator[list[Row]]:
        bind_data = self.bind(pattern, **named)
        init_data = self.init(bind_data)
        while True:
            chunk = self.func(bind_data, init_data)
            if not chunk:
                return
            yield chunk


def cron(
    pattern: str,
    *,
    start: datetime | date | str | None = None,
    until: datetime | date | str | None = None,
    timezone: str | None = None,
    limit: int | None = None,
) -> list[datetime]:
    """Materialize the `cron` column for one call.

    Requires `until` or `limit`: an unbounded forward scan never ends.
    """
    if until is None and limit is None:
        raise CronError.invalid_parameter("cron() without until needs a limit")
    named: dict[str, object] = {
        k: v
        for k, v in (("start", start), ("until", until), ("timezone", timezone), ("limit", limit))
        if v is not None
    }
    return [row[0] for chunk in CronTableFunction().scan(pattern, **named) for row in chunk]


# --- Parameter coercion ---


def _to_zone_name(value: object, default: str) -> str:
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise CronError.invalid_parameter("timezone must be text")
    return value


def _to_instant(value: object, name: str) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            raise CronError.invalid_parameter(f"invalid {name} timestamp: {value!r}") from None
    else:
        raise CronError.invalid_parameter(f"{name} must be a timestamp")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _to_limit(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CronError.invalid_parameter("limit must be a non-negative integer")
    return value


def _to_timestamp(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc).replace(tzinfo=None, microsecond=0)
