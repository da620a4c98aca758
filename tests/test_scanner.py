"""Tests for the top-level JSON object scanner."""

import orjson
import pytest

from cdda_harvest.errors import MalformedObjectError
from cdda_harvest.game_data import ObjectScanner, SourceSpan, scan_objects


class TestObjectBoundaries:
    """Test that objects are cut out where they start and end."""

    def test_two_objects_on_separate_lines(self) -> None:
        """Objects on consecutive lines get one-line spans."""
        text = '{"a":1}\n{"b":{"c":"}"}}\n'
        scanned = scan_objects(text)

        assert [s.obj for s in scanned] == [{"a": 1}, {"b": {"c": "}"}}]
        assert [s.span for s in scanned] == [SourceSpan(1, 1), SourceSpan(2, 2)]

    def test_brace_inside_string_is_ignored(self) -> None:
        """A closing brace inside a string does not end the object."""
        scanned = scan_objects('{"name":"a}b"}')

        assert len(scanned) == 1
        assert scanned[0].obj == {"name": "a}b"}

    def test_array_of_multiline_objects(self) -> None:
        """Objects inside a top-level array carry their own line ranges."""
        text = '[\n  {\n    "id": "x"\n  },\n  { "id": "y" }\n]\n'
        scanned = scan_objects(text)

        assert [s.obj["id"] for s in scanned] == ["x", "y"]
        assert scanned[0].span == SourceSpan(2, 4)
        assert scanned[1].span == SourceSpan(5, 5)

    def test_offsets_round_trip(self) -> None:
        """Each object's text slice parses back to the same object."""
        text = '[ {"a": [1, 2]},\n{"b": "{\\"}"}, {"c": {"d": {}}} ]'
        scanned = scan_objects(text)

        assert len(scanned) == 3
        for s in scanned:
            assert orjson.loads(text[s.start:s.end]) == s.obj

    def test_spans_are_non_decreasing(self) -> None:
        """Spans come out in document order."""
        text = "\n".join('{"n": %d}' % i for i in range(10))
        scanned = scan_objects(text)

        starts = [s.span.start_line for s in scanned]
        assert starts == sorted(starts)
        assert starts == list(range(1, 11))

    def test_empty_input(self) -> None:
        """Text without objects yields nothing."""
        assert scan_objects("") == []
        assert scan_objects("[]\n") == []

    def test_scanner_is_reusable(self) -> None:
        """A scanner instance keeps no state between calls."""
        scanner = ObjectScanner()
        first = scanner.scan('{"a": 1}')
        second = scanner.scan('\n{"a": 1}')

        assert first[0].span == SourceSpan(1, 1)
        assert second[0].span == SourceSpan(2, 2)


class TestEscapes:
    """Test string escape handling."""

    def test_escaped_quote_does_not_close_string(self) -> None:
        """An escaped quote keeps the scanner inside the string."""
        scanned = scan_objects('{"a": "x\\"}"}')

        assert scanned[0].obj == {"a": 'x"}'}

    def test_escaped_backslash_before_quote(self) -> None:
        """A doubled backslash does not escape the closing quote."""
        scanned = scan_objects('{"a": "\\\\"}{"b": 2}')

        assert [s.obj for s in scanned] == [{"a": "\\"}, {"b": 2}]

    def test_unicode_escape(self) -> None:
        """Escapes of non-significant characters are passed through."""
        scanned = scan_objects('{"a": "\\u007d\\n"}')

        assert scanned[0].obj == {"a": "}\n"}

    def test_escaped_raw_newline_is_not_counted(self) -> None:
        """A backslash-escaped line feed does not advance the line counter."""
        with pytest.raises(MalformedObjectError) as exc_info:
            scan_objects('"a\\\nb"\n}')

        assert exc_info.value.line == 2


class TestMalformedInput:
    """Test that malformed text raises MalformedObjectError."""

    def test_unbalanced_close(self) -> None:
        """A stray closing brace is reported with its line."""
        with pytest.raises(MalformedObjectError) as exc_info:
            scan_objects('{"a": 1}\n\n}')

        assert exc_info.value.line == 3

    def test_unclosed_object(self) -> None:
        """Input ending inside an object is rejected."""
        with pytest.raises(MalformedObjectError) as exc_info:
            scan_objects('{"a": 1}\n{"b": {')

        assert exc_info.value.line == 2

    def test_unterminated_string(self) -> None:
        """Input ending inside a string literal is rejected."""
        with pytest.raises(MalformedObjectError):
            scan_objects('{"a": "oops}')

    def test_invalid_json_object(self) -> None:
        """Balanced braces around invalid JSON are rejected."""
        with pytest.raises(MalformedObjectError):
            scan_objects('{"a": }')

    def test_offset_is_in_bytes(self) -> None:
        """The reported offset counts UTF-8 bytes, not characters."""
        with pytest.raises(MalformedObjectError) as exc_info:
            scan_objects('"é"\n}')

        assert exc_info.value.offset == 5
        assert exc_info.value.line == 2

    def test_with_path(self) -> None:
        """Errors can be attributed to a file."""
        error = MalformedObjectError("bad", offset=3, line=2).with_path("data/json/x.json")

        assert error.path == "data/json/x.json"
        assert str(error) == "data/json/x.json:2 (byte 3): bad"
