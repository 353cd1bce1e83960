"""Field grammar and pattern compiler tests."""

from __future__ import annotations

import pytest

from cronspan import CronError, FieldKind, FieldSpec, Span, parse, parse_field


def _values(text: str, kind: FieldKind) -> tuple[int, ...]:
    return parse_field(text, kind).values


class TestFieldExpansion:
    def test_range_with_step(self) -> None:
        assert _values("1-5/2", FieldKind.MINUTE) == (1, 3, 5)

    def test_bare_step_starts_at_minimum(self) -> None:
        assert _values("*/20", FieldKind.MINUTE) == (0, 20, 40)
        assert _values("*/10", FieldKind.DAY_OF_MONTH) == (1, 11, 21, 31)
        assert _values("*/4", FieldKind.MONTH) == (1, 5, 9)

    def test_start_step_runs_to_maximum(self) -> None:
        assert _values("20/15", FieldKind.HOUR) == (20,)
        assert _values("5/20", FieldKind.SECOND) == (5, 25, 45)

    def test_list_is_union(self) -> None:
        assert _values("1,10-12,11,*/30", FieldKind.MINUTE) == (0, 1, 10, 11, 12, 30)

    def test_wildcards(self) -> None:
        for text in ("*", "?"):
            spec = parse_field(text, FieldKind.HOUR)
            assert spec.values == tuple(range(24))
            assert spec.is_wildcard

    def test_full_range_is_not_a_wildcard(self) -> None:
        spec = parse_field("0-23", FieldKind.HOUR)
        assert spec.values == tuple(range(24))
        assert not spec.is_wildcard

    def test_stepped_wildcard_is_not_a_wildcard(self) -> None:
        assert not parse_field("*/1", FieldKind.DAY_OF_MONTH).is_wildcard

    def test_month_names(self) -> None:
        assert _values("JAN,mar-May", FieldKind.MONTH) == (1, 3, 4, 5)
        assert _values("september", FieldKind.MONTH) == (9,)

    def test_weekday_names(self) -> None:
        assert _values("Mon-Fri", FieldKind.DAY_OF_WEEK) == (1, 2, 3, 4, 5)
        assert _values("sunday,SAT", FieldKind.DAY_OF_WEEK) == (0, 6)

    def test_weekday_seven_is_sunday(self) -> None:
        assert _values("7", FieldKind.DAY_OF_WEEK) == (0,)
        assert _values("0,7", FieldKind.DAY_OF_WEEK) == (0,)
        assert _values("0-7", FieldKind.DAY_OF_WEEK) == tuple(range(7))

    def test_weekday_wildcard_step_stops_at_saturday(self) -> None:
        assert _values("*/3", FieldKind.DAY_OF_WEEK) == (0, 3, 6)
        assert _values("1/2", FieldKind.DAY_OF_WEEK) == (1, 3, 5)

    def test_weekday_seven_rejected_when_disabled(self) -> None:
        with pytest.raises(CronError) as exc_info:
            parse_field("7", FieldKind.DAY_OF_WEEK, sunday_is_seven=False)
        assert exc_info.value.kind == "out_of_range"
        assert parse_field("6", FieldKind.DAY_OF_WEEK, sunday_is_seven=False).values == (6,)


class TestFieldErrors:
    @pytest.mark.parametrize(
        "text,kind,error",
        [
            ("61", FieldKind.SECOND, "out_of_range"),
            ("0", FieldKind.MONTH, "out_of_range"),
            ("32", FieldKind.DAY_OF_MONTH, "out_of_range"),
            ("10-70", FieldKind.MINUTE, "out_of_range"),
            ("9-3", FieldKind.HOUR, "inverted_range"),
            ("dec-jan", FieldKind.MONTH, "inverted_range"),
            ("1-5/0", FieldKind.MINUTE, "invalid_step"),
            ("*/-1", FieldKind.MINUTE, "invalid_step"),
            ("smarch", FieldKind.MONTH, "unknown_name"),
            ("mon", FieldKind.HOUR, "malformed_field"),
            ("", FieldKind.MINUTE, "malformed_field"),
            ("1,", FieldKind.MINUTE, "malformed_field"),
            ("-5", FieldKind.MINUTE, "malformed_field"),
            ("5-", FieldKind.MINUTE, "malformed_field"),
            ("*/", FieldKind.MINUTE, "malformed_field"),
            ("L", FieldKind.DAY_OF_MONTH, "malformed_field"),
            ("1#2", FieldKind.DAY_OF_WEEK, "malformed_field"),
            ("٣", FieldKind.MINUTE, "malformed_field"),
            ("1-٥", FieldKind.HOUR, "malformed_field"),
            ("*/٢", FieldKind.MINUTE, "malformed_field"),
        ],
    )
    def test_error_kind(self, text: str, kind: FieldKind, error: str) -> None:
        with pytest.raises(CronError) as exc_info:
            parse_field(text, kind)
        assert exc_info.value.kind == error

    def test_span_points_at_offending_value(self) -> None:
        with pytest.raises(CronError) as exc_info:
            parse("0 5 * 13 *")
        assert exc_info.value.span == Span(6, 8)
        assert exc_info.value.input_text == "0 5 * 13 *"

    def test_span_points_inside_a_list(self) -> None:
        with pytest.raises(CronError) as exc_info:
            parse("1,2,99 * * * *")
        assert exc_info.value.span == Span(4, 6)

    def test_span_points_at_step(self) -> None:
        with pytest.raises(CronError) as exc_info:
            parse("* */0 * * *")
        assert exc_info.value.kind == "invalid_step"
        assert exc_info.value.span == Span(4, 5)

    def test_display_rich_underlines_the_field(self) -> None:
        with pytest.raises(CronError) as exc_info:
            parse("0 5 * 13 *")
        rendered = exc_info.value.display_rich()
        assert rendered.splitlines() == [
            "error: month must be 1-12, got 13",
            "  0 5 * 13 *",
            "        ^^",
        ]


class TestPatternCompiler:
    def test_five_fields_default_second_zero(self) -> None:
        data = parse("0 5 * * *")
        assert not data.has_seconds
        assert data.second == FieldSpec.only(FieldKind.SECOND, 0)
        assert data.minute.values == (0,)
        assert data.hour.values == (5,)

    def test_six_fields_leading_seconds(self) -> None:
        data = parse("*/3 0 5 * * *")
        assert data.has_seconds
        assert data.second.values == tuple(range(0, 60, 3))
        assert data.minute.values == (0,)
        assert data.hour.values == (5,)

    def test_day_restricted_needs_both_day_fields(self) -> None:
        assert parse("0 0 1 * Mon").day_restricted
        assert not parse("0 0 1 * *").day_restricted
        assert not parse("0 0 ? * Mon").day_restricted
        assert not parse("0 0 * * *").day_restricted

    def test_wrong_field_count_message(self) -> None:
        with pytest.raises(CronError) as exc_info:
            parse("* * *")
        assert exc_info.value.kind == "wrong_field_count"
        assert "got 3" in str(exc_info.value)

    def test_source_is_kept(self) -> None:
        assert parse("  @Daily ").source == "@Daily"
        assert parse(" 0 5 * * * ").source == "0 5 * * *"

    def test_schedule_is_immutable(self) -> None:
        data = parse("0 5 * * *")
        with pytest.raises(AttributeError):
            data.has_seconds = True  # type: ignore[misc]


class TestFieldSpec:
    def test_neighbours(self) -> None:
        spec = parse_field("10,20,30", FieldKind.MINUTE)
        assert spec.next_at_or_after(10) == 10
        assert spec.next_at_or_after(11) == 20
        assert spec.next_at_or_after(31) is None
        assert spec.prev_at_or_before(29) == 20
        assert spec.prev_at_or_before(9) is None
        assert spec.first == 10
        assert spec.last == 30

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError):
            FieldSpec(FieldKind.MINUTE, ())

    def test_rejects_out_of_bounds(self) -> None:
        with pytest.raises(ValueError):
            FieldSpec(FieldKind.HOUR, (24,))
