from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ._error import CronError

# =============================================================================
# DST (Daylight Saving Time) Handling
# =============================================================================
# When resolving a wall-clock time to an instant:
#
# 1. DST Gap (Spring Forward):
#    - Time doesn't exist (e.g., 2:30 AM during spring forward)
#    - Solution: resolve to the transition instant, the first wall time
#      that exists after the gap
#    - Example: 2:30 AM -> 3:00 AM (America/New_York)
#
# 2. DST Fold (Fall Back):
#    - Time is ambiguous (e.g., 1:30 AM occurs twice)
#    - Solution: Use first occurrence (fold=0 / pre-transition time)
#    - The second pass through the fold never produces an occurrence
# =============================================================================

_UTC = ZoneInfo("UTC")


@dataclass(frozen=True, slots=True)
class CivilTime:
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @property
    def weekday(self) -> int:
        """Cron DOW number: Sunday=0, Monday=1, ..., Saturday=6."""
        return date(self.year, self.month, self.day).isoweekday() % 7

    @classmethod
    def from_naive(cls, dt: datetime) -> CivilTime:
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    def to_naive(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def __str__(self) -> str:
        return self.to_naive().isoformat(sep=" ")


def resolve_zone(tz_name: str | None) -> ZoneInfo:
    """Resolve an IANA zone name, defaulting to UTC."""
    if not tz_name:
        return _UTC
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise CronError.unknown_timezone(f"unknown time zone: {tz_name}") from exc


def as_aware(instant: datetime) -> datetime:
    """Normalize to UTC. Naive datetimes are read as UTC, matching SQL TIMESTAMP semantics.

    Same-zone datetime comparison and arithmetic run on wall time and ignore
    `fold`, so every instant is moved to UTC before it is compared or shifted.
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def to_civil(instant: datetime, tz: ZoneInfo) -> CivilTime:
    return CivilTime.from_naive(as_aware(instant).astimezone(tz))


def latest_civil_at_or_before(instant: datetime, tz: ZoneInfo) -> CivilTime:
    """Latest wall time that resolves to an instant at or before `instant`.

    This is the wall time of `instant` itself, except on the second pass
    through a fold: every wall time of the repeated interval resolves to its
    first pass, which lies before `instant`.
    """
    local = as_aware(instant).astimezone(tz)
    naive = local.replace(tzinfo=None)
    if local.fold and is_fold(naive, tz):
        first_pass = int(naive.replace(tzinfo=tz, fold=0).timestamp())
        end = _transition(first_pass, int(local.timestamp()), tz)
        return CivilTime.from_naive(datetime.fromtimestamp(end - 1, tz=tz).replace(tzinfo=None))
    return CivilTime.from_naive(naive)


def from_civil(civil: CivilTime, tz: ZoneInfo) -> datetime:
    naive = civil.to_naive()
    # fold=0 is the earlier of the two instants when the wall time is ambiguous
    aware = naive.replace(tzinfo=tz, fold=0)
    if _exists(aware):
        return datetime.fromtimestamp(int(aware.timestamp()), tz=tz)
    return _gap_end(naive, tz)


def is_gap(naive: datetime, tz: ZoneInfo) -> bool:
    return not _exists(naive.replace(tzinfo=tz, fold=0))


def is_fold(naive: datetime, tz: ZoneInfo) -> bool:
    early = naive.replace(tzinfo=tz, fold=0)
    late = naive.replace(tzinfo=tz, fold=1)
    return _exists(early) and early.utcoffset() != late.utcoffset()


def _exists(aware: datetime) -> bool:
    round_trip = aware.astimezone(timezone.utc).astimezone(aware.tzinfo)
    return round_trip.replace(tzinfo=None) == aware.replace(tzinfo=None)


def _offset_at(ts: int, tz: ZoneInfo) -> timedelta | None:
    return datetime.fromtimestamp(ts, tz=tz).utcoffset()


def _gap_end(naive: datetime, tz: ZoneInfo) -> datetime:
    """First instant after the transition that swallowed `naive`."""
    # Inside a gap fold=1 applies the post-transition offset, which places the
    # instant before the transition; fold=0 places it after.
    lo = int(naive.replace(tzinfo=tz, fold=1).timestamp())
    hi = int(naive.replace(tzinfo=tz, fold=0).timestamp())
    return datetime.fromtimestamp(_transition(lo, hi, tz), tz=tz)


def _transition(lo: int, hi: int, tz: ZoneInfo) -> int:
    """First second in (lo, hi] whose UTC offset differs from the offset at `lo`."""
    before = _offset_at(lo, tz)
    while hi - lo > 1:
        mid = (lo + hi) // 2
        if _offset_at(mid, tz) == before:
            lo = mid
        else:
            hi = mid
    return hi
