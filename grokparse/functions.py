"""Helpers for parsing grok type hints such as ``array("[]", ",")``."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

_DELIMITER = re.compile(r"[ ,;]")
_INT = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_QUOTES = "\"'"


@dataclass
class ParseFunction:
    """A function call found in a hint: its name and raw arguments."""

    name: str
    args: list[str] = field(default_factory=list)


@dataclass
class KeyValueOptions:
    """Settings for the ``keyvalue`` conversion."""

    separator: str = "="
    character_allow_list: str = ""
    quoting: str = ""
    delimiter: str = " ,;"


def split_args_by_comma(text: str) -> list[str]:
    """Split on commas that are not inside single or double quotes."""
    parts: list[str] = []
    current: list[str] = []
    quote: str | None = None
    for char in text:
        if char in _QUOTES and quote in (None, char):
            quote = char if quote is None else None
            current.append(char)
        elif char == "," and quote is None:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def parse_function(text: str) -> ParseFunction | None:
    """Parse ``name(arg, ...)``; return None when ``text`` is not a call."""
    open_at = text.find("(")
    if open_at == -1:
        return None
    name = text[:open_at].strip()
    rest = text[open_at:]

    depth = 0
    in_quotes = False
    args_start: int | None = None
    args_end: int | None = None
    chars = iter(enumerate(rest))
    for index, char in chars:
        if char == "\\" and index + 1 < len(rest):
            next(chars, None)
            continue
        if char == '"':
            in_quotes = not in_quotes
        elif char == "(" and not in_quotes:
            depth += 1
            if depth == 1:
                args_start = index + 1
        elif char == ")" and not in_quotes:
            depth -= 1
            if depth == 0:
                args_end = index
                break

    if args_start is None or args_end is None or args_start > args_end:
        return None
    return ParseFunction(name=name, args=split_args_by_comma(rest[args_start:args_end]))


def unquote_string(text: str) -> str:
    """Strip surrounding whitespace and one pair of matching quotes."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        return text[1:-1]
    return text


def split_by_colon_outside_parentheses(text: str) -> list[str]:
    """Split on colons outside parentheses and double quotes.

    A trailing empty part is dropped; escaped quotes and backslashes are kept.
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    in_quotes = False
    skip_next = False
    for index, char in enumerate(text):
        if skip_next:
            skip_next = False
            continue
        if char == "\\" and text[index + 1:index + 2] in ('"', "\\"):
            current.append(text[index:index + 2])
            skip_next = True
            continue
        if char == "(" and not in_quotes:
            depth += 1
            current.append(char)
        elif char == ")" and not in_quotes:
            depth -= 1
            current.append(char)
        elif char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == ":" and depth == 0 and not in_quotes:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if current:
        parts.append("".join(current))
    return parts


def extract_between_tags(text: str, start_tag: str, end_tag: str) -> str:
    """Return the text between the first ``start_tag`` and the next ``end_tag``."""
    start = text.find(start_tag)
    if start == -1:
        return ""
    start += len(start_tag)
    end = text.find(end_tag, start)
    if end == -1:
        return ""
    return text[start:end]


def parse_key_value_args(args: list[str]) -> KeyValueOptions:
    """Build options from positional ``keyvalue`` arguments; empty ones keep defaults."""
    options = KeyValueOptions()
    names = ("separator", "character_allow_list", "quoting", "delimiter")
    for name, value in zip(names, args):
        if value:
            setattr(options, name, unquote_string(value))
    return options


def split_string_to_pairs(text: str, options: KeyValueOptions) -> list[str]:
    """Split text into ``key<sep>value`` chunks, joining values split by spaces."""
    separator = options.separator.strip()
    pairs: list[str] = []
    current = ""
    for segment in _DELIMITER.split(text):
        if current.endswith(separator) and segment:
            current = f"{current} {segment}"
        elif current:
            pairs.append(current)
            current = segment
        else:
            current = segment
    if current:
        pairs.append(current)
    return pairs


def _split_once(text: str, separator: str) -> list[str]:
    if separator:
        return text.split(separator, 1)
    if not text:
        return []
    return [text[:1], text[1:]] if len(text) > 1 else [text]


def parse_key_value_pairs(pairs: list[str], separator: str) -> dict[str, str]:
    """Split each pair on ``separator`` into a dictionary of trimmed strings.

    Raises ValueError listing every pair that could not be split.
    """
    parsed: dict[str, str] = {}
    problems: list[str] = []
    for pair in pairs:
        pieces = _split_once(pair, separator)
        if len(pieces) != 2:
            problems.append(
                f'cannot split "{pair}" into 2 items, got {len(pieces)} item(s)'
            )
            continue
        key, value = pieces
        parsed[key.strip()] = value.strip()
    if problems:
        raise ValueError("\n".join(problems))
    return parsed


def parse_string_to_number(text: str) -> int | float:
    """Parse a 64-bit decimal integer, falling back to a float."""
    if _INT.fullmatch(text):
        number = int(text)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    if _FLOAT.fullmatch(text):
        value = float(text)
        if not math.isinf(value) or "inf" in text.lower():
            return value
    raise ValueError(f'failed to parse "{text}"')