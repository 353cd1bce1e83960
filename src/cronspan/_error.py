from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class Span:
    start: int
    end: int


CronErrorKind = Literal[
    "malformed_field",
    "unknown_name",
    "out_of_range",
    "inverted_range",
    "invalid_step",
    "wrong_field_count",
    "unknown_timezone",
    "inverted_evaluation_range",
    "invalid_parameter",
]

_PARSE_KINDS = frozenset(
    {
        "malformed_field",
        "unknown_name",
        "out_of_range",
        "inverted_range",
        "invalid_step",
        "wrong_field_count",
    }
)


class CronError(Exception):
    kind: CronErrorKind
    span: Span | None
    input_text: str | None

    def __init__(
        self,
        kind: CronErrorKind,
        message: str,
        span: Span | None = None,
        input_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.span = span
        self.input_text = input_text

    @property
    def is_parse_error(self) -> bool:
        return self.kind in _PARSE_KINDS

    @classmethod
    def malformed_field(
        cls, message: str, span: Span | None = None, input_text: str | None = None
    ) -> CronError:
        return cls("malformed_field", message, span, input_text)

    @classmethod
    def unknown_name(cls, message: str, span: Span, input_text: str | None) -> CronError:
        return cls("unknown_name", message, span, input_text)

    @classmethod
    def out_of_range(cls, message: str, span: Span, input_text: str | None) -> CronError:
        return cls("out_of_range", message, span, input_text)

    @classmethod
    def inverted_range(cls, message: str, span: Span, input_text: str | None) -> CronError:
        return cls("inverted_range", message, span, input_text)

    @classmethod
    def invalid_step(cls, message: str, span: Span, input_text: str | None) -> CronError:
        return cls("invalid_step", message, span, input_text)

    @classmethod
    def wrong_field_count(cls, message: str, input_text: str) -> CronError:
        return cls("wrong_field_count", message, Span(0, len(input_text)), input_text)

    @classmethod
    def unknown_timezone(cls, message: str) -> CronError:
        return cls("unknown_timezone", message)

    @classmethod
    def inverted_evaluation_range(cls, message: str) -> CronError:
        return cls("inverted_evaluation_range", message)

    @classmethod
    def invalid_parameter(cls, message: str) -> CronError:
        return cls("invalid_parameter", message)

    def display_rich(self) -> str:
        if self.is_parse_error and self.span and self.input_text:
            out = f"error: {self}\n"
            out += f"  {self.input_text}\n"
            padding = " " * (self.span.start + 2)
            underline = "^" * max(self.span.end - self.span.start, 1)
            out += padding + underline
            return out
        return f"error: {self}"
