from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, datetime, timedelta
from zoneinfo import ZoneInfo

from ._civil import CivilTime, as_aware, from_civil, latest_civil_at_or_before, to_civil
from ._model import Direction, ScheduleData

# =============================================================================
# Iteration Safety Limits
# =============================================================================
# MAX_SEARCH_YEARS (8): a search gives up once the candidate has moved this
# many calendar years away from the reference. Eight years is the longest
# distance between two February 29ths (e.g. 2096 -> 2104), so every
# satisfiable pattern is found within the window.
#
# MAX_PROBES (100_000): hard cap on loop iterations for a single search.
# A satisfiable pattern needs at most a few thousand probes: one per
# calendar day scanned, plus a few per matching day, plus one per second
# rejected inside a DST fold.
# =============================================================================

MAX_SEARCH_YEARS = 8
MAX_PROBES = 100_000

_ONE_SECOND = timedelta(seconds=1)


def _days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _weekday(year: int, month: int, day: int) -> int:
    # calendar.weekday: Monday=0 ... Sunday=6; cron: Sunday=0
    return (calendar.weekday(year, month, day) + 1) % 7


def _last_second_before(instant: datetime) -> datetime:
    floor = instant.replace(microsecond=0)
    return floor if instant.microsecond else floor - _ONE_SECOND


# --- Public API ---


def search(
    schedule: ScheduleData,
    from_instant: datetime,
    tz: ZoneInfo,
    direction: Direction,
    *,
    max_years: int = MAX_SEARCH_YEARS,
) -> datetime | None:
    """Nearest occurrence strictly after (FORWARD) or before (BACKWARD) `from_instant`.

    Returns None when nothing matches within `max_years` of the reference.
    """
    ref = as_aware(from_instant)
    if direction == Direction.FORWARD:
        return _search_forward(schedule, ref, tz, max_years)
    return _search_backward(schedule, ref, tz, max_years)


def next_from(
    schedule: ScheduleData,
    now: datetime,
    tz: ZoneInfo,
    *,
    max_years: int = MAX_SEARCH_YEARS,
) -> datetime | None:
    return search(schedule, now, tz, Direction.FORWARD, max_years=max_years)


def previous_from(
    schedule: ScheduleData,
    now: datetime,
    tz: ZoneInfo,
    *,
    max_years: int = MAX_SEARCH_YEARS,
) -> datetime | None:
    return search(schedule, now, tz, Direction.BACKWARD, max_years=max_years)


def next_n_from(schedule: ScheduleData, now: datetime, tz: ZoneInfo, n: int) -> list[datetime]:
    results: list[datetime] = []
    current = now
    for _ in range(n):
        nxt = next_from(schedule, current, tz)
        if nxt is None:
            break
        current = nxt
        results.append(nxt)
    return results


def matches(schedule: ScheduleData, dt: datetime, tz: ZoneInfo) -> bool:
    """Whether `dt` is itself an occurrence, under the same DST resolution as `search`."""
    instant = as_aware(dt)
    if instant.microsecond:
        return False
    found = search(schedule, instant - _ONE_SECOND, tz, Direction.FORWARD, max_years=1)
    # Inter-zone == is always False for an instant inside a fold, so compare in UTC.
    return found is not None and as_aware(found) == instant


# --- Search loops ---


def _search_forward(
    schedule: ScheduleData,
    ref: datetime,
    tz: ZoneInfo,
    max_years: int,
) -> datetime | None:
    # Step in wall time so that wall times swallowed by a DST gap are still visited.
    c = CivilTime.from_naive(to_civil(ref, tz).to_naive() + _ONE_SECOND)
    year, month, day = c.year, c.month, c.day
    hour, minute, second = c.hour, c.minute, c.second
    limit_year = min(year + max_years, MAXYEAR - 1)

    first_hour = schedule.hour.first
    first_minute = schedule.minute.first
    first_second = schedule.second.first

    for _ in range(MAX_PROBES):
        if year > limit_year:
            return None

        m = schedule.month.next_at_or_after(month)
        if m is None:
            year, month, day = year + 1, schedule.month.first, 1
            hour, minute, second = first_hour, first_minute, first_second
            continue
        if m != month:
            month, day = m, 1
            hour, minute, second = first_hour, first_minute, first_second

        if day > _days_in_month(year, month):
            year, month = (year + 1, 1) if month == 12 else (year, month + 1)
            day = 1
            hour, minute, second = first_hour, first_minute, first_second
            continue

        if not schedule.matches_day(day, _weekday(year, month, day)):
            day += 1
            hour, minute, second = first_hour, first_minute, first_second
            continue

        h = schedule.hour.next_at_or_after(hour)
        if h is None:
            day += 1
            hour, minute, second = first_hour, first_minute, first_second
            continue
        if h != hour:
            hour, minute, second = h, first_minute, first_second

        mi = schedule.minute.next_at_or_after(minute)
        if mi is None:
            hour += 1
            minute, second = first_minute, first_second
            continue
        if mi != minute:
            minute, second = mi, first_second

        s = schedule.second.next_at_or_after(second)
        if s is None:
            minute += 1
            second = first_second
            continue
        second = s

        candidate = from_civil(CivilTime(year, month, day, hour, minute, second), tz)
        if candidate > ref:
            return candidate
        # Wall time resolved to an instant at or before the reference (DST fold).
        second += 1

    return None


def _search_backward(
    schedule: ScheduleData,
    ref: datetime,
    tz: ZoneInfo,
    max_years: int,
) -> datetime | None:
    c = latest_civil_at_or_before(_last_second_before(ref), tz)
    year, month, day = c.year, c.month, c.day
    hour, minute, second = c.hour, c.minute, c.second
    limit_year = max(year - max_years, MINYEAR + 1)

    last_hour = schedule.hour.last
    last_minute = schedule.minute.last
    last_second = schedule.second.last

    for _ in range(MAX_PROBES):
        if year < limit_year:
            return None

        m = schedule.month.prev_at_or_before(month)
        if m is None:
            year, month = year - 1, schedule.month.last
            day = _days_in_month(year, month)
            hour, minute, second = last_hour, last_minute, last_second
            continue
        if m != month:
            month = m
            day = _days_in_month(year, month)
            hour, minute, second = last_hour, last_minute, last_second

        if day < 1:
            year, month = (year - 1, 12) if month == 1 else (year, month - 1)
            day = _days_in_month(year, month)
            hour, minute, second = last_hour, last_minute, last_second
            continue

        if not schedule.matches_day(day, _weekday(year, month, day)):
            day -= 1
            hour, minute, second = last_hour, last_minute, last_second
            continue

        h = schedule.hour.prev_at_or_before(hour)
        if h is None:
            day -= 1
            hour, minute, second = last_hour, last_minute, last_second
            continue
        if h != hour:
            hour, minute, second = h, last_minute, last_second

        mi = schedule.minute.prev_at_or_before(minute)
        if mi is None:
            hour -= 1
            minute, second = last_minute, last_second
            continue
        if mi != minute:
            minute, second = mi, last_second

        s = schedule.second.prev_at_or_before(second)
        if s is None:
            minute -= 1
            second = last_second
            continue
        second = s

        candidate = from_civil(CivilTime(year, month, day, hour, minute, second), tz)
        if candidate < ref:
            return candidate
        # Wall time fell in a DST gap and resolved forward past the reference.
        second -= 1

    return None
