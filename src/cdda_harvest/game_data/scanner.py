"""
Boundary-tracking scanner for CDDA JSON files.

CDDA data files are usually one JSON array of objects, but some are bare
objects or several objects in a row. Rather than parsing the whole document,
the scanner cuts out every top-level ``{...}`` object on its own so that each
one can carry the line range it came from.
"""

import logging
import re
from enum import Enum
from typing import List

import orjson

from ..errors import MalformedObjectError
from .models import ScannedObject, SourceSpan

logger = logging.getLogger(__name__)

# Only these characters can change the scanner state
_SIGNIFICANT = re.compile(r'[{}"\\\n]')


class ScanState(Enum):
    """Lexical state of the scanner between significant characters."""

    OUTSIDE_STRING = "outside"
    IN_STRING = "string"
    IN_STRING_ESCAPED = "escaped"


def _byte_offset(text: str, index: int) -> int:
    return len(text[:index].encode("utf-8", errors="surrogatepass"))


class ObjectScanner:
    """Splits raw text into top-level JSON objects with line spans.

    The scanner is a small state machine (``ScanState``) crossed with a brace
    depth counter. It visits each significant character once, left to right.
    A scanner instance holds no state between ``scan`` calls.
    """

    def scan(self, text: str) -> List[ScannedObject]:
        """Scan text and return its top-level objects in document order.

        Args:
            text: JSON-superset text with zero or more top-level objects

        Returns:
            List of scanned objects with spans and character offsets

        Raises:
            MalformedObjectError: on unbalanced braces, an unterminated
                string, or an object that is not valid JSON
        """
        results: List[ScannedObject] = []
        state = ScanState.OUTSIDE_STRING
        depth = 0
        line = 1
        start = -1
        start_line = -1
        escape_at = -1

        for match in _SIGNIFICANT.finditer(text):
            pos = match.start()
            char = match.group()

            if state is ScanState.IN_STRING_ESCAPED:
                state = ScanState.IN_STRING
                if pos == escape_at + 1:
                    # This character is the escaped one, a raw newline included
                    continue

            if char == "\n":
                line += 1
                continue

            if state is ScanState.IN_STRING:
                if char == "\\":
                    state = ScanState.IN_STRING_ESCAPED
                    escape_at = pos
                elif char == '"':
                    state = ScanState.OUTSIDE_STRING
                continue

            # Outside of any string literal
            if char == '"':
                state = ScanState.IN_STRING
            elif char == "{":
                if depth == 0:
                    start = pos
                    start_line = line
                depth += 1
            elif char == "}":
                if depth == 0:
                    raise MalformedObjectError(
                        "unbalanced '}' outside of any object",
                        _byte_offset(text, pos),
                        line,
                    )
                depth -= 1
                if depth == 0:
                    results.append(
                        self._parse_object(text, start, pos + 1, start_line, line)
                    )
            # A backslash outside a string is left to the JSON parser

        if state is not ScanState.OUTSIDE_STRING:
            raise MalformedObjectError(
                "unterminated string literal", _byte_offset(text, len(text)), line
            )
        if depth > 0:
            raise MalformedObjectError(
                f"unbalanced '{{' opened on line {start_line}",
                _byte_offset(text, start),
                start_line,
            )

        return results

    @staticmethod
    def _parse_object(
        text: str, start: int, end: int, start_line: int, end_line: int
    ) -> ScannedObject:
        try:
            obj = orjson.loads(text[start:end])
        except orjson.JSONDecodeError as e:
            error_line = start_line + max(getattr(e, "lineno", 1) - 1, 0)
            raise MalformedObjectError(
                f"invalid JSON object: {e}", _byte_offset(text, start), error_line
            ) from e

        if not isinstance(obj, dict):
            raise MalformedObjectError(
                "scanned text is not a JSON object",
                _byte_offset(text, start),
                start_line,
            )

        return ScannedObject(
            obj=obj,
            span=SourceSpan(start_line, end_line),
            start=start,
            end=end,
        )


def scan_objects(text: str) -> List[ScannedObject]:
    """Scan text with a fresh ``ObjectScanner``."""
    return ObjectScanner().scan(text)
