from __future__ import annotations

from ._model import FieldKind, FieldSpec, ScheduleData


def display(schedule: ScheduleData) -> str:
    """Render a schedule as a normalized cron pattern.

    Parsing the result yields an equivalent schedule, including which day
    fields count as wildcards for the day-of-month/day-of-week OR rule.
    """
    fields = schedule.fields if schedule.has_seconds else schedule.fields[1:]
    return " ".join(_display_field(f) for f in fields)


def _display_field(spec: FieldSpec) -> str:
    if spec.is_wildcard:
        return "*"
    step = _uniform_step(spec)
    if step is not None:
        return f"*/{step}"
    return ",".join(_display_run(lo, hi) for lo, hi in _runs(spec.values))


def _open_max(kind: FieldKind) -> int:
    return 6 if kind == FieldKind.DAY_OF_WEEK else kind.maximum


def _uniform_step(spec: FieldSpec) -> int | None:
    """The S of `*/S` when the values are exactly every S-th value from the minimum.

    Two values stay a plain list, so months 1 and 7 render as `1,7` rather than `*/6`.
    """
    values = spec.values
    if len(values) < 3 or values[0] != spec.kind.minimum:
        return None
    step = values[1] - values[0]
    if step < 2:
        return None
    expected = tuple(range(spec.kind.minimum, _open_max(spec.kind) + 1, step))
    return step if values == expected else None


def _runs(values: tuple[int, ...]) -> list[tuple[int, int]]:
    runs: list[tuple[int, int]] = []
    for v in values:
        if runs and runs[-1][1] == v - 1:
            runs[-1] = (runs[-1][0], v)
        else:
            runs.append((v, v))
    return runs


def _display_run(lo: int, hi: int) -> str:
    if lo == hi:
        return str(lo)
    return f"{lo}-{hi}"
