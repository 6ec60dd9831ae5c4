"""Tests for the document tool argument types and handlers."""

from __future__ import annotations

import re

import pytest

from docwright.ai.tools.base import DISABLED_MESSAGE, Location, ToolResult, coerce_int, coerce_location
from docwright.ai.tools.errors import (
    ErrorCode,
    InvalidParameterError,
    MissingParameterError,
    PatternInvalidError,
)
from docwright.ai.tools.insert_heading import InsertHeadingArgs, insert_heading
from docwright.ai.tools.insert_image import InsertImageArgs, insert_image
from docwright.ai.tools.insert_table import InsertTableArgs, fill_grid, insert_table, normalize_table_data
from docwright.ai.tools.insert_text import InsertTextArgs, insert_text
from docwright.ai.tools.replace_text import ReplaceTextArgs, replace_text, split_slash_pattern
from tests.helpers import RecordingSurface


# =============================================================================
# ToolResult
# =============================================================================


class TestToolResult:
    def test_success_flattens_data(self) -> None:
        assert ToolResult.success({"inserted": "text"}).to_dict() == {"ok": True, "inserted": "text"}

    def test_failure_carries_code(self) -> None:
        result = ToolResult.failure("boom", code=ErrorCode.INVALID_PARAMETER)
        assert result.to_dict() == {"ok": False, "error": "boom", "code": "invalid_parameter"}

    def test_disabled_result(self) -> None:
        payload = ToolResult.disabled().to_dict()
        assert payload == {"ok": False, "error": DISABLED_MESSAGE, "code": "edits_disabled"}


class TestCoercion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(3, 3), (3.9, 3), ("4", 4), (" 5 ", 5), ("abc", None), (None, None), (True, None)],
    )
    def test_coerce_int(self, raw, expected) -> None:
        assert coerce_int(raw) == expected

    def test_unknown_location_falls_back(self) -> None:
        assert coerce_location("middle", Location.END) is Location.END
        assert coerce_location("START", Location.END) is Location.START


# =============================================================================
# insert_text
# =============================================================================


class TestInsertText:
    def test_defaults_to_cursor(self) -> None:
        args = InsertTextArgs.from_arguments({"text": "Hello"})
        assert args.location is Location.CURSOR

    def test_missing_text_is_rejected(self) -> None:
        with pytest.raises(MissingParameterError) as excinfo:
            InsertTextArgs.from_arguments({})
        assert excinfo.value.parameter == "text"

    def test_handler_inserts_and_saves(self) -> None:
        surface = RecordingSurface()
        args = InsertTextArgs.from_arguments({"text": "one\ntwo", "location": "end"})

        data = insert_text(surface, args)

        assert data == {"inserted": "text", "characters": 7, "location": "end"}
        assert surface.paragraphs == ["one", "two"]
        assert surface.saves == 1


# =============================================================================
# insert_heading
# =============================================================================


class TestInsertHeading:
    @pytest.mark.parametrize(("level", "expected"), [(9, 6), (-3, 1), (0, 1), (4, 4), ("3", 3)])
    def test_level_is_clamped(self, level, expected) -> None:
        args = InsertHeadingArgs.from_arguments({"text": "Intro", "level": level})
        assert args.level == expected

    def test_non_numeric_level_uses_default(self) -> None:
        assert InsertHeadingArgs.from_arguments({"text": "Intro", "level": "big"}).level == 2
        assert InsertHeadingArgs.from_arguments({"text": "Intro"}).level == 2

    def test_handler_reports_level(self) -> None:
        surface = RecordingSurface()
        data = insert_heading(surface, InsertHeadingArgs.from_arguments({"text": "Intro", "level": 9}))

        assert data["level"] == 6
        assert surface.calls == [("insert_heading", {"text": "Intro", "level": 6, "location": Location.CURSOR})]


# =============================================================================
# replace_text
# =============================================================================


class TestReplaceText:
    def test_slash_pattern_is_split(self) -> None:
        assert split_slash_pattern("/foo(bar)?/") == ("foo(bar)?", 0)
        assert split_slash_pattern("/colou?r/gi") == ("colou?r", re.IGNORECASE)
        assert split_slash_pattern("foo") is None
        assert split_slash_pattern("a/b") is None

    def test_slash_wrapped_find_is_treated_as_regex(self) -> None:
        surface = RecordingSurface(["foo and foobar"])
        args = ReplaceTextArgs.from_arguments({"find": "/foo(bar)?/", "replace": "X"})

        data = replace_text(surface, args)

        assert data == {"mode": "regex", "pattern": "foo(bar)?", "replacements": None}
        assert surface.paragraphs == ["X and X"]

    def test_literal_replace_reports_count(self) -> None:
        surface = RecordingSurface(["a.b a.b", "xa.b"])
        data = replace_text(surface, ReplaceTextArgs.from_arguments({"find": "a.b", "replace": "c"}))

        assert data == {"mode": "literal", "replacements": 3}
        assert surface.paragraphs == ["c c", "xc"]

    def test_use_regex_flag(self) -> None:
        args = ReplaceTextArgs.from_arguments({"find": r"\d+", "replace": "#", "useRegex": True})
        pattern = args.resolve_pattern()
        assert pattern is not None and pattern.pattern == r"\d+"

    def test_missing_replace_defaults_to_empty(self) -> None:
        assert ReplaceTextArgs.from_arguments({"find": "x"}).replace == ""

    def test_invalid_pattern_raises(self) -> None:
        args = ReplaceTextArgs.from_arguments({"find": "/(unclosed/"})
        with pytest.raises(PatternInvalidError):
            args.resolve_pattern()


# =============================================================================
# insert_image_from_url
# =============================================================================


class TestInsertImage:
    def test_defaults_and_ignored_sizes(self) -> None:
        args = InsertImageArgs.from_arguments(
            {"url": "https://img.example/cat.png", "width": -5, "height": "abc"}
        )
        assert args.location is Location.END
        assert args.width is None
        assert args.height is None

    @pytest.mark.parametrize("url", ["ftp://img.example/cat.png", "cat.png", "https://"])
    def test_rejects_non_http_urls(self, url: str) -> None:
        with pytest.raises(InvalidParameterError):
            InsertImageArgs.from_arguments({"url": url})

    def test_handler_passes_alt_text(self) -> None:
        surface = RecordingSurface()
        args = InsertImageArgs.from_arguments(
            {"url": "https://img.example/cat.png", "altText": "A cat", "width": 120}
        )

        data = insert_image(surface, args)

        assert data == {
            "inserted": "image",
            "url": "https://img.example/cat.png",
            "location": "end",
            "width": 120.0,
        }
        _, call = surface.calls[0]
        assert call["alt_text"] == "A cat"


# =============================================================================
# insert_table
# =============================================================================


class TestInsertTable:
    def test_grid_is_padded_and_truncated(self) -> None:
        assert fill_grid(2, 2, [["a", "b", "c"]]) == (("a", "b"), ("", ""))

    def test_none_cells_become_empty(self) -> None:
        assert normalize_table_data([["a", None], "solo"]) == (("a", ""), ("solo",))

    def test_dimensions_inferred_from_data(self) -> None:
        args = InsertTableArgs.from_arguments({"data": [["a", "b"], ["c"]]})
        assert (args.rows, args.cols) == (2, 2)
        assert args.data == (("a", "b"), ("c", ""))

    def test_dimensions_clamped_to_one(self) -> None:
        args = InsertTableArgs.from_arguments({"rows": 0, "cols": -2})
        assert (args.rows, args.cols) == (1, 1)

    def test_missing_dimensions_without_data(self) -> None:
        with pytest.raises(MissingParameterError):
            InsertTableArgs.from_arguments({})

    def test_data_must_be_a_list(self) -> None:
        with pytest.raises(InvalidParameterError):
            InsertTableArgs.from_arguments({"rows": 1, "cols": 1, "data": "a,b"})

    def test_handler_reports_shape(self) -> None:
        surface = RecordingSurface()
        data = insert_table(surface, InsertTableArgs.from_arguments({"rows": 2, "cols": 3}))

        assert data == {"inserted": "table", "rows": 2, "cols": 3, "location": "end"}
        assert surface.saves == 1
