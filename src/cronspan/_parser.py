from __future__ import annotations

import re
from dataclasses import replace

from ._error import CronError, Span
from ._field import parse_field
from ._model import FieldKind, FieldSpec, ScheduleData

_FIELD = re.compile(r"\S+")

_FIVE_FIELDS = (
    FieldKind.MINUTE,
    FieldKind.HOUR,
    FieldKind.DAY_OF_MONTH,
    FieldKind.MONTH,
    FieldKind.DAY_OF_WEEK,
)
_SIX_FIELDS = (FieldKind.SECOND, *_FIVE_FIELDS)

_SHORTCUTS: dict[str, str] = {
    "@yearly": "0 0 1 1 *",
    "@annually": "0 0 1 1 *",
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@midnight": "0 0 * * *",
    "@hourly": "0 * * * *",
}


def parse(input_text: str, *, sunday_is_seven: bool = True) -> ScheduleData:
    """Compile a 5-field or 6-field cron pattern (or an @ shortcut) into a ScheduleData."""
    trimmed = input_text.strip()

    if trimmed.startswith("@"):
        return _parse_shortcut(input_text, trimmed)

    matches = list(_FIELD.finditer(input_text))
    if len(matches) == 5:
        kinds = _FIVE_FIELDS
    elif len(matches) == 6:
        kinds = _SIX_FIELDS
    else:
        raise CronError.wrong_field_count(
            f"expected 5 or 6 cron fields, got {len(matches)}", input_text
        )

    specs: dict[FieldKind, FieldSpec] = {}
    for kind, m in zip(kinds, matches):
        specs[kind] = parse_field(
            m.group(),
            kind,
            offset=m.start(),
            input_text=input_text,
            sunday_is_seven=sunday_is_seven,
        )

    has_seconds = FieldKind.SECOND in specs
    return ScheduleData(
        second=specs.get(FieldKind.SECOND, FieldSpec.only(FieldKind.SECOND, 0)),
        minute=specs[FieldKind.MINUTE],
        hour=specs[FieldKind.HOUR],
        day_of_month=specs[FieldKind.DAY_OF_MONTH],
        month=specs[FieldKind.MONTH],
        day_of_week=specs[FieldKind.DAY_OF_WEEK],
        has_seconds=has_seconds,
        source=trimmed,
    )


def _parse_shortcut(input_text: str, trimmed: str) -> ScheduleData:
    expansion = _SHORTCUTS.get(trimmed.lower())
    if expansion is None:
        start = input_text.index(trimmed)
        raise CronError.malformed_field(
            f"unknown @ shortcut: {trimmed}",
            Span(start, start + len(trimmed)),
            input_text,
        )
    return replace(parse(expansion), source=trimmed)
