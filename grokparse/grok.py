"""Grok expressions: named, reusable regular expression patterns with typed captures."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Mapping, TypeVar
from urllib.parse import parse_qsl

import regex

from grokparse.dates import (
    create_regex_pattern_from_format,
    parse_date_string,
    time_to_epoch_millis,
)
from grokparse.functions import (
    extract_between_tags,
    parse_function,
    parse_key_value_args,
    parse_key_value_pairs,
    parse_string_to_number,
    split_by_colon_outside_parentheses,
    split_string_to_pairs,
    unquote_string,
)
from grokparse.rubyhash import RubyHashParser

_log = logging.getLogger(__name__)

DOT_SEP = "___"
FLAT_TO_ROOT = "FLAT_TO_ROOT"
_MAX_EXPANSIONS = 1000

# %{SYNTAX}, %{SYNTAX:ID} or %{SYNTAX:ID:TYPE}
_REUSE_PATTERN = re.compile(
    r'%{((?:\w+|(?:\w+\("(?:[^"]|\\")*"(?:,\s*"[^"]*")?)\))'
    r"(?::[\w+.]*(?::(?:\w+|\w+\([^)]*\)))?)?)}",
    re.ASCII,
)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_BOOLS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}
_FLAT_HINTS = ("json", "keyvalue", "rubyhash")

_PATTERN_ALIASES = {
    "notSpace": "NOTSPACE",
    "word": "WORD",
    "quotedString": "QUOTEDSTRING",
    "uuid": "UUID",
    "mac": "MAC",
    "ipv4": "IPV4",
    "ipv6": "IPV6",
    "ip": "IP",
    "hostname": "HOSTNAME",
    "ipOrHost": "IPORHOST",
    "number": "NUMBER",
    "numberStr": "NUMBER",
    "numberExt": "BASE10NUM",
    "numberExtStr": "BASE10NUM",
    "integer": "INT",
    "integerStr": "INT",
    "integerExt": "INT",
    "integerExtStr": "INT",
    "doubleQuotedString": "QUOTEDSTRING",
    "singleQuotedString": "QUOTEDSTRING",
    "boolean": "BOOL",
    "port": "POSINT",
    "data": "GREEDYDATA",
}

T = TypeVar("T")


class GrokError(Exception):
    """Base class for grok errors."""


class ParseFailureError(GrokError):
    """Raised when a pattern cannot be expanded or a value cannot be converted."""


class TypeNotProvidedError(GrokError):
    """Raised when a capture carries a type hint that is not known."""


class UnsupportedNameError(GrokError, ValueError):
    """Raised when a pattern name contains ':'."""

    def __init__(self, message: str = "name contains unsupported character ':'") -> None:
        super().__init__(message)


def _go_split(text: str, separator: str) -> list[str]:
    if not separator:
        return list(text)
    return text.split(separator)


def _to_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f'invalid integer "{text}"')
    return int(text)


def _to_bool(text: str) -> bool:
    try:
        return _BOOLS[text]
    except KeyError:
        raise ValueError(f'invalid boolean "{text}"') from None


def _parse_query(text: str) -> dict[str, str]:
    query = text[1:] if text.startswith("?") else text
    if ";" in query:
        raise ValueError("invalid semicolon separator in query")
    result: dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True, separator="&"):
        result.setdefault(key, value)
    return result


def _parse_json(text: str) -> dict[str, Any] | None:
    value = json.loads(text, parse_int=float)
    if value is not None and not isinstance(value, dict):
        raise ValueError("JSON value is not an object")
    return value


class Grok:
    """A set of named patterns and one compiled grok expression."""

    def __init__(self, *args: Mapping[str, str]) -> None:
        self._definitions: dict[str, str] = {}
        self._compiled: regex.Pattern | None = None
        self._hints: dict[str, list[str]] = {}
        self._ruby = RubyHashParser()
        for definitions in args:
            self.add_patterns(definitions)

    def add_pattern(self, name: str, definition: str) -> None:
        """Add or replace one named pattern."""
        if ":" in name:
            raise UnsupportedNameError()
        self._definitions[name] = definition

    def add_patterns(self, definitions: Mapping[str, str]) -> None:
        """Add or replace several named patterns."""
        for name, definition in definitions.items():
            self.add_pattern(name, definition)

    def has_capture_groups(self) -> bool:
        """True when the compiled expression has at least one named group."""
        return self._compiled is not None and bool(self._compiled.groupindex)

    def compile(self, pattern: str, named_captures_only: bool) -> None:
        """Expand ``pattern`` and compile it as the active expression."""
        expanded, hints = self._expand(pattern, named_captures_only)
        try:
            compiled = regex.compile(expanded, regex.ASCII)
        except regex.error as exc:
            raise GrokError(f"invalid expression: {exc}") from exc
        self._compiled = compiled
        self._hints = hints

    def match(self, text: str | bytes) -> bool:
        """True when the expression matches somewhere in ``text``."""
        return self._pattern().search(self._text(text)) is not None

    def parse(self, text: str | bytes) -> dict[str, Any]:
        """Return named captures as raw strings (or bytes for bytes input)."""
        if isinstance(text, bytes):
            return self._capture(
                self._text(text),
                lambda value, _name: value.encode("utf-8", "surrogateescape"),
            )
        return self._capture(text, lambda value, _name: value)

    def parse_typed(self, text: str | bytes) -> dict[str, Any]:
        """Return named captures converted according to their type hints."""
        return self._capture(self._text(text), self._convert_all)

    @staticmethod
    def _text(text: str | bytes) -> str:
        if isinstance(text, bytes):
            return text.decode("utf-8", "surrogateescape")
        return text

    def _pattern(self) -> regex.Pattern:
        if self._compiled is None:
            raise GrokError("no expression has been compiled")
        return self._compiled

    def _capture(self, text: str, convert: Callable[[str, str], T]) -> dict[str, Any]:
        compiled = self._pattern()
        found = compiled.search(text)
        captures: dict[str, Any] = {}
        if found is None:
            return captures
        for name, index in sorted(compiled.groupindex.items(), key=lambda item: item[1]):
            value = found.group(index)
            if not value:
                continue
            converted = convert(value, name)
            if converted is None:
                continue
            if name == FLAT_TO_ROOT:
                if not isinstance(converted, dict):
                    raise ParseFailureError("failed to merge capture maps: parsing failed")
                captures.update(converted)
            else:
                captures[name.replace(DOT_SEP, ".")] = converted
        return captures

    def _convert_all(self, value: str, name: str) -> Any:
        hints = self._hints.get(name)
        if not hints:
            return value
        result: Any = None
        for hint in hints:
            try:
                result = self._convert(value, hint, name)
            except GrokError:
                raise
            except ValueError as exc:
                raise ParseFailureError(f"cannot convert {name}: {exc}") from exc
        return result

    def _convert(self, value: str, hint: str, name: str) -> Any:
        if hint == "string":
            return value
        if hint in ("double", "float", "number"):
            return float(value)
        if hint in ("int", "long", "integer"):
            return _to_int(value)
        if hint in ("bool", "boolean"):
            return _to_bool(value)
        if hint == "json":
            return _parse_json(value)
        if hint == "querystring":
            return _parse_query(value)
        if hint == "rubyhash":
            return self._ruby.parse(value)

        call = parse_function(hint)
        unknown = TypeNotProvidedError(f"invalid type for {name}: type not specified")
        if call is None:
            raise unknown
        args = call.args
        if call.name == "array":
            if len(args) == 1:
                return _go_split(value, unquote_string(args[0]))
            if len(args) == 2:
                tags = unquote_string(args[0])
                if len(tags) < 2:
                    raise ValueError(f"array needs an opening and closing tag, got {tags!r}")
                content = extract_between_tags(value, tags[0], tags[1])
                return _go_split(content, unquote_string(args[1]))
            raise ValueError(f"invalid arguments 'array' func: {' '.join(args)}")
        if call.name == "nullIf":
            return None if value == unquote_string(args[0]) else value
        if call.name == "dateformat":
            zone = unquote_string(args[1]) if len(args) == 2 else ""
            try:
                moment = parse_date_string(value, unquote_string(args[0]), zone)
            except ValueError as exc:
                _log.warning("Error parsing date: %s", exc)
                return value
            return time_to_epoch_millis(moment)
        if call.name == "keyvalue":
            options = parse_key_value_args(args)
            pairs = split_string_to_pairs(value, options)
            return parse_key_value_pairs(pairs, options.separator.strip())
        if call.name == "scale":
            factor = parse_string_to_number(args[0])
            number = parse_string_to_number(value)
            if isinstance(factor, int) and isinstance(number, int):
                return number * factor
            return float(number) * float(factor)
        raise unknown

    def _lookup(self, grok_id: str) -> tuple[str, str] | None:
        if grok_id in self._definitions:
            return self._definitions[grok_id], ""
        call = parse_function(grok_id)
        if call is None:
            return None
        if call.name == "date":
            if not call.args:
                return None
            pattern, layout = create_regex_pattern_from_format(unquote_string(call.args[0]))
            hint = f'dateformat("{layout}")'
            if len(call.args) == 2:
                hint = f'dateformat("{layout}", "{unquote_string(call.args[1])}")'
            return pattern, hint
        if call.name == "regex":
            return unquote_string(call.args[0]).replace("\\\\", "\\"), ""
        return None

    def _expand(self, pattern: str, named_captures_only: bool) -> tuple[str, dict[str, list[str]]]:
        hints: dict[str, list[str]] = {}
        expanded = pattern
        for _ in range(_MAX_EXPANSIONS):
            found = _REUSE_PATTERN.findall(expanded)
            if not found:
                break
            for inner in found:
                parts = split_by_colon_outside_parentheses(inner)
                grok_id = _PATTERN_ALIASES.get(parts[0], parts[0])
                if len(parts) > 1:
                    if parts[1] == "":
                        if len(parts) == 3 and parts[2].startswith(_FLAT_HINTS):
                            target = FLAT_TO_ROOT
                        else:
                            raise ParseFailureError("target id is empty: parsing failed")
                    else:
                        target = parts[1].replace(".", DOT_SEP)
                    if grok_id == "NUMBER" and parts[0] != "numberStr":
                        hints.setdefault(target, []).append("double")
                    elif grok_id in ("INT", "INTEGER") and parts[0] != "integerStr":
                        hints.setdefault(target, []).append("int")
                else:
                    target = grok_id
                if len(parts) == 3:
                    hints.setdefault(target, []).append(parts[2])

                known = self._lookup(grok_id)
                if known is None:
                    raise ParseFailureError(
                        f'pattern definition "{grok_id}" unknown: parsing failed'
                    )
                definition, lookup_hint = known
                if lookup_hint:
                    hints.setdefault(target, []).append(lookup_hint)

                if named_captures_only and len(parts) == 1:
                    replacement = f"({definition})"
                else:
                    replacement = f"(?P<{target}>{definition})"
                expanded = expanded.replace("%{" + inner + "}", replacement)
        return expanded, hints