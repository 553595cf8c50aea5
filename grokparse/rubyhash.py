"""Parser for Ruby hash literals such as ``{:status=>500, :path=>"/x"}``."""

from __future__ import annotations

import re
from typing import Any

_NUMERIC = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
_WHITESPACE = frozenset(" \t\n\r")
_TERMINATORS = frozenset(",}] \t\n\r")
_QUOTES = frozenset("\"'")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
_KEYWORDS: dict[str, Any] = {"true": True, "false": False, "nil": None}
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class RubyHashError(ValueError):
    """Raised when text is not a well-formed Ruby hash."""


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def _scan_identifier(text: str, pos: int) -> int:
    while pos < len(text) and _is_identifier_char(text[pos]):
        pos += 1
    return pos


def _parse_quoted(text: str, pos: int) -> tuple[str, int]:
    if pos >= len(text):
        raise RubyHashError("unexpected end of input while parsing string")
    quote = text[pos]
    pos += 1
    chars: list[str] = []
    while pos < len(text) and text[pos] != quote:
        if text[pos] == "\\" and pos + 1 < len(text):
            pos += 1
            chars.append(_ESCAPES.get(text[pos], text[pos]))
            pos += 1
            continue
        chars.append(text[pos])
        pos += 1
    if pos >= len(text):
        raise RubyHashError("unterminated string")
    return "".join(chars), pos + 1


def _parse_key(text: str, pos: int) -> tuple[str, int]:
    if pos >= len(text):
        raise RubyHashError("unexpected end of input while parsing key")
    if text[pos] == ":":
        start = pos + 1
        end = _scan_identifier(text, start)
        if end == start:
            raise RubyHashError(f"empty symbol key at position {end}")
        return text[start:end], end
    if text[pos] in _QUOTES:
        return _parse_quoted(text, pos)
    end = _scan_identifier(text, pos)
    if end == pos:
        raise RubyHashError(f"empty key at position {end}")
    return text[pos:end], end


def _find_matching_brace(text: str, start: int) -> int:
    if start >= len(text) or text[start] != "{":
        raise RubyHashError("expected opening brace")
    depth = 1
    pos = start + 1
    quote: str | None = None
    while pos < len(text) and depth > 0:
        char = text[pos]
        if char in _QUOTES and text[pos - 1] != "\\":
            if quote is None:
                quote = char
            elif char == quote:
                quote = None
            pos += 1
            continue
        if quote is not None:
            pos += 1
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        pos += 1
    if depth != 0:
        raise RubyHashError("unmatched braces")
    return pos - 1


def _convert_literal(literal: str) -> Any:
    if literal in _KEYWORDS:
        return _KEYWORDS[literal]
    if _NUMERIC.fullmatch(literal):
        if "." in literal:
            return float(literal)
        number = int(literal)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    return literal


class RubyHashParser:
    """Turns Ruby hash syntax into nested Python dictionaries and lists."""

    def parse(self, text: str) -> dict[str, Any]:
        """Parse ``text`` as a Ruby hash and return it as a dictionary."""
        text = text.strip()
        if not text.startswith("{"):
            raise RubyHashError("input must be enclosed in braces {}")
        return self._parse_hash(text)

    def _parse_hash(self, text: str) -> dict[str, Any]:
        if not (text.startswith("{") and text.endswith("}")) or len(text) < 2:
            raise RubyHashError("input must be enclosed in braces {}")
        content = text[1:-1]
        result: dict[str, Any] = {}
        pos = 0
        while pos < len(content):
            pos = _skip_whitespace(content, pos)
            if pos >= len(content):
                break

            try:
                key, pos_after = _parse_key(content, pos)
            except RubyHashError as exc:
                raise RubyHashError(f"key parse error at position {pos}: {exc}") from exc
            pos = _skip_whitespace(content, pos_after)

            if content[pos:pos + 2] != "=>":
                raise RubyHashError(f"expected => at position {pos}")
            pos = _skip_whitespace(content, pos + 2)

            try:
                value, pos_after = self._parse_value(content, pos)
            except RubyHashError as exc:
                raise RubyHashError(f"value parse error at position {pos}: {exc}") from exc
            result[key] = value

            pos = _skip_whitespace(content, pos_after)
            if pos < len(content) and content[pos] == ",":
                pos += 1
        return result

    def _parse_value(self, text: str, pos: int) -> tuple[Any, int]:
        if pos >= len(text):
            raise RubyHashError("unexpected end of input while parsing value")
        char = text[pos]
        if char == "{":
            end = _find_matching_brace(text, pos)
            return self._parse_hash(text[pos:end + 1]), end + 1
        if char in _QUOTES:
            return _parse_quoted(text, pos)
        if char == ":":
            start = pos + 1
            end = _scan_identifier(text, start)
            if end == start:
                raise RubyHashError(f"empty symbol at position {end}")
            return text[start:end], end
        if char == "[":
            return self._parse_array(text, pos)

        end = pos
        while end < len(text) and text[end] not in _TERMINATORS:
            end += 1
        if end == pos:
            raise RubyHashError(f"empty value at position {pos}")
        return _convert_literal(text[pos:end].strip()), end

    def _parse_array(self, text: str, start: int) -> tuple[list[Any], int]:
        if start >= len(text) or text[start] != "[":
            raise RubyHashError("expected opening bracket for array")
        pos = start + 1
        items: list[Any] = []
        while pos < len(text) and text[pos] != "]":
            pos = _skip_whitespace(text, pos)
            if pos >= len(text):
                raise RubyHashError("unterminated array")
            if text[pos] == "]":
                break
            value, pos = self._parse_value(text, pos)
            items.append(value)
            pos = _skip_whitespace(text, pos)
            if pos < len(text) and text[pos] == ",":
                pos += 1
        if pos >= len(text) or text[pos] != "]":
            raise RubyHashError("unterminated array")
        return items, pos + 1