from __future__ import annotations

import re

from ._error import CronError, Span
from ._model import FieldKind, FieldSpec

_NUMBER = re.compile(r"[0-9]+")
_NEGATIVE = re.compile(r"-[0-9]+")
_NAME = re.compile(r"[A-Za-z]+")

_WILDCARDS = ("*", "?")


def parse_field(
    text: str,
    kind: FieldKind,
    *,
    offset: int = 0,
    input_text: str | None = None,
    sunday_is_seven: bool = True,
) -> FieldSpec:
    """Expand one cron field into the set of values it accepts.

    `offset` is the position of `text` inside `input_text`, so that errors
    point at the offending substring of the whole pattern.
    """
    parser = _FieldParser(kind, input_text if input_text is not None else text, sunday_is_seven)
    values: set[int] = set()
    pos = offset
    for term in text.split(","):
        values.update(parser.term(term, pos))
        pos += len(term) + 1
    return FieldSpec(kind, tuple(sorted(values)), is_wildcard=text in _WILDCARDS)


class _FieldParser:
    def __init__(self, kind: FieldKind, input_text: str, sunday_is_seven: bool) -> None:
        self._kind = kind
        self._input = input_text
        self._sunday_is_seven = sunday_is_seven

    @property
    def _literal_max(self) -> int:
        if self._kind == FieldKind.DAY_OF_WEEK and not self._sunday_is_seven:
            return 6
        return self._kind.maximum

    @property
    def _open_max(self) -> int:
        # Open-ended steps on day-of-week stop at Saturday; 7 only as a literal.
        if self._kind == FieldKind.DAY_OF_WEEK:
            return 6
        return self._kind.maximum

    def _span(self, start: int, text: str) -> Span:
        return Span(start, start + len(text))

    def term(self, term: str, start: int) -> set[int]:
        if not term:
            raise CronError.malformed_field(
                f"empty list item in {self._kind} field", Span(start, start), self._input
            )
        if term.count("/") > 1:
            raise CronError.malformed_field(
                f"invalid {self._kind} expression: {term}", self._span(start, term), self._input
            )

        base, sep, step_text = term.partition("/")
        step = 1
        if sep:
            step = self.step(step_text, start + len(base) + 1)

        if base in _WILDCARDS:
            lo, hi = self._kind.minimum, self._open_max
        elif "-" in base:
            a_text, _, b_text = base.partition("-")
            b_start = start + len(a_text) + 1
            if not a_text or "-" in b_text:
                raise CronError.malformed_field(
                    f"invalid {self._kind} range: {base}", self._span(start, base), self._input
                )
            lo = self.value(a_text, start)
            hi = self.value(b_text, b_start)
            if lo > hi:
                raise CronError.inverted_range(
                    f"{self._kind} range start must be <= end: {base}",
                    self._span(start, base),
                    self._input,
                )
        else:
            lo = self.value(base, start)
            if not sep:
                return {self._normalize(lo)}
            hi = max(self._open_max, lo)

        return {self._normalize(v) for v in range(lo, hi + 1, step)}

    def step(self, text: str, start: int) -> int:
        span = self._span(start, text)
        if _NUMBER.fullmatch(text):
            step = int(text)
            if step == 0:
                raise CronError.invalid_step("step cannot be 0", span, self._input)
            return step
        if _NEGATIVE.fullmatch(text):
            raise CronError.invalid_step(f"step must be positive, got {text}", span, self._input)
        raise CronError.malformed_field(f"invalid step value: {text!r}", span, self._input)

    def value(self, text: str, start: int) -> int:
        span = self._span(start, text)
        if _NUMBER.fullmatch(text):
            n = int(text)
            lo, hi = self._kind.minimum, self._literal_max
            if n < lo or n > hi:
                raise CronError.out_of_range(
                    f"{self._kind} must be {lo}-{hi}, got {n}", span, self._input
                )
            return n
        if _NAME.fullmatch(text):
            if not self._kind.has_names:
                raise CronError.malformed_field(
                    f"names are not allowed in the {self._kind} field: {text}", span, self._input
                )
            n = self._kind.lookup_name(text)
            if n is None:
                raise CronError.unknown_name(
                    f"unknown {self._kind} name: {text}", span, self._input
                )
            return n
        raise CronError.malformed_field(
            f"invalid {self._kind} value: {text!r}", span, self._input
        )

    def _normalize(self, n: int) -> int:
        if self._kind == FieldKind.DAY_OF_WEEK:
            return n % 7
        return n
