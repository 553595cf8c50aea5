"""Date handling for the grok ``date("...")`` pattern function.

Date formats use the familiar ``yyyy-MM-dd HH:mm:ss`` letters. They are
turned into a regular expression for matching, and into a reference layout
built from the reference moment ``Mon Jan 2 15:04:05 MST 2006``. That layout
is what :func:`parse_date_string` reads.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# (format token, regular expression, reference-layout element)
_DATE_REPLACEMENTS: tuple[tuple[str, str, str], ...] = (
    ("yyyy", r"\d{4}", "2006"),
    ("YYYY", r"\d{4}", "2006"),
    ("yy", r"\d{2}", "06"),
    ("MMMM", r"(?:January|February|March|April|May|June|July|August|September|October|November|December)", "January"),
    ("MMM", r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)", "Jan"),
    ("MM", r"(?:0[1-9]|1[0-2])", "01"),
    ("M", r"(?:[1-9]|1[0-2])", "1"),
    ("dd", r"(?:0[1-9]|[12][0-9]|3[01])", "02"),
    ("d", r"(?:[1-9]|[12][0-9]|3[01])", "2"),
    ("DD", r"(?:0[1-9]|[12][0-9]|3[01])", "02"),
    ("EEE", r"(?:Sun|Mon|Tue|Wed|Thu|Fri|Sat)", "Mon"),
    ("HH", r"(?:[01][0-9]|2[0-3])", "15"),
    ("H", r"(?:[0-9]|1[0-9]|2[0-3])", "15"),
    ("hh", r"(?:0[1-9]|1[0-2])", "03"),
    ("h", r"(?:[1-9]|1[0-2])", "3"),
    ("K", r"(?:[0-9]|1[01])", "3"),
    ("mm", r"[0-5][0-9]", "04"),
    ("m", r"(?:[0-9]|[1-5][0-9])", "4"),
    ("ss", r"[0-5][0-9]", "05"),
    ("s", r"(?:[0-9]|[1-5][0-9])", "5"),
    ("SSS", r"\d{3}", "000"),
    ("SSSSSS", r"\d{6}", "000000"),
    ("SSSSSSS", r"\d{7}", "0000000"),
    ("Z", "%{ISO8601_TIMEZONE}", "Z0700"),
    ("ZZ", "%{ISO8601_TIMEZONE}", "Z07:00"),
    ("z", "%{TZ}", "MST"),
    ("a", "(?:AM|PM)", "PM"),
)

_REGEX_FOR = {token: regex for token, regex, _ in _DATE_REPLACEMENTS}
_LAYOUT_FOR = {token: layout for token, _, layout in _DATE_REPLACEMENTS}

# Longest first; the order decides which token wins at a position.
_FORMAT_TOKENS = (
    "YYYY", "yyyy", "MMMM", "SSSSSS", "SSSSSSS", "EEE",
    "yyy", "MMM", "SSS",
    "yy", "MM", "DD", "dd", "HH", "hh", "mm", "ss", "ZZ",
    "y", "M", "d", "K", "H", "h", "m", "s", "Z", "z", "A", "a",
)

_LAYOUT_ELEMENTS = (
    ("January", "long_month"),
    ("Jan", "month"),
    ("Monday", "long_weekday"),
    ("Mon", "weekday"),
    ("MST", "tz"),
    ("2006", "year"),
    ("01", "zero_month"),
    ("02", "zero_day"),
    ("03", "zero_hour12"),
    ("04", "zero_minute"),
    ("05", "zero_second"),
    ("06", "year2"),
    ("15", "hour"),
    ("1", "num_month"),
    ("2", "day"),
    ("3", "hour12"),
    ("4", "minute"),
    ("5", "second"),
    ("PM", "PM"),
    ("pm", "pm"),
    ("Z07:00", "iso_colon"),
    ("Z0700", "iso"),
    ("-07:00", "num_colon"),
    ("-0700", "num"),
)

_MONTHS = ("January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December")
_DAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
_OFFSET = re.compile(r"[+-][0-9]+")


def tokenize_format(fmt: str) -> list[str]:
    """Split a date format into known tokens and single literal characters."""
    tokens: list[str] = []
    pos = 0
    while pos < len(fmt):
        token = next((t for t in _FORMAT_TOKENS if fmt.startswith(t, pos)), fmt[pos])
        tokens.append(token)
        pos += len(token)
    return tokens


def create_regex_pattern_from_format(fmt: str) -> tuple[str, str]:
    """Return the matching regular expression and reference layout for ``fmt``."""
    cleaned = fmt.replace("'T'", "T").replace("'", "")
    tokens = tokenize_format(cleaned)
    regex = "".join(_REGEX_FOR.get(token, token) for token in tokens)
    layout = "".join(_LAYOUT_FOR.get(token, token) for token in tokens)
    return regex, layout


@dataclass(frozen=True)
class _Element:
    kind: str | None  # None for literal text
    text: str = ""
    digits: int = 0


def _layout_elements(layout: str) -> list[_Element]:
    elements: list[_Element] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            elements.append(_Element(None, "".join(literal)))
            literal.clear()

    pos = 0
    while pos < len(layout):
        char = layout[pos]
        if char in ".," and layout[pos + 1:pos + 2] in ("0", "9"):
            digit = layout[pos + 1]
            end = pos + 1
            while end < len(layout) and layout[end] == digit:
                end += 1
            if not layout[end:end + 1].isdigit():
                flush()
                kind = "frac0" if digit == "0" else "frac9"
                elements.append(_Element(kind, layout[pos:end], end - pos - 1))
                pos = end
                continue
        match = None
        for prefix, kind in _LAYOUT_ELEMENTS:
            if not layout.startswith(prefix, pos):
                continue
            if prefix == "2006" or prefix[0] != "0" or prefix[1] in "123456":
                match = (prefix, kind)
                break
        if match is None:
            literal.append(char)
            pos += 1
            continue
        flush()
        elements.append(_Element(match[1], match[0]))
        pos += len(match[0])
    flush()
    return elements


def _skip_literal(value: str, prefix: str) -> str:
    while prefix:
        if prefix[0] == " ":
            if value and value[0] != " ":
                raise ValueError("literal text does not match")
            prefix = prefix.lstrip(" ")
            value = value.lstrip(" ")
            continue
        if not value or value[0] != prefix[0]:
            raise ValueError("literal text does not match")
        prefix = prefix[1:]
        value = value[1:]
    return value


def _getnum(value: str, fixed: bool) -> tuple[int, str]:
    if not value[:1].isdigit() or not value[:1].isascii():
        raise ValueError("expected a number")
    if not (value[1:2].isdigit() and value[1:2].isascii()):
        if fixed:
            raise ValueError("expected two digits")
        return int(value[0]), value[1:]
    return int(value[:2]), value[2:]


def _lookup(names: tuple[str, ...], value: str, length: int | None) -> tuple[int, str]:
    for index, name in enumerate(names):
        candidate = name if length is None else name[:length]
        if value[:len(candidate)].lower() == candidate.lower():
            return index, value[len(candidate):]
    raise ValueError("unknown name")


def _zone_length(value: str) -> int:
    if len(value) < 3:
        raise ValueError("bad time zone")
    if value[:4] in ("ChST", "MeST"):
        return 4
    if value[:3] == "GMT":
        match = _OFFSET.match(value, 3)
        return match.end() if match else 3
    upper = 0
    while upper < len(value) and "A" <= value[upper] <= "Z":
        upper += 1
    if upper == 5 and value[4] == "T":
        return 5
    if upper == 4 and (value[3] == "T" or value[:4] == "WITA"):
        return 4
    if upper == 3:
        return 3
    raise ValueError("bad time zone")


def _skip_offset(value: str, colon: bool, allow_z: bool) -> str:
    if allow_z and value[:1] == "Z":
        return value[1:]
    width = 6 if colon else 5
    chunk = value[:width]
    if len(chunk) < width or chunk[0] not in "+-":
        raise ValueError("bad time zone offset")
    digits = chunk[1:3] + (chunk[4:6] if colon else chunk[3:5])
    if (colon and chunk[3] != ":") or not (digits.isdigit() and digits.isascii()):
        raise ValueError("bad time zone offset")
    if int(digits[:2]) > 24 or int(digits[2:]) > 60:
        raise ValueError("time zone offset out of range")
    return value[width:]


def _parse_fraction(value: str, width: int) -> tuple[int, str]:
    chunk = value[:width]
    if len(chunk) < width or chunk[0] not in ".," or not (chunk[1:].isdigit() and chunk[1:].isascii()):
        raise ValueError("bad fractional second")
    digits = chunk[1:10]
    return int(digits.ljust(9, "0")), value[width:]


def _days_in(month: int, year: int) -> int:
    if month == 2:
        leap = year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
        return 29 if leap else 28
    return 30 if month in (4, 6, 9, 11) else 31


def _parse_wall_clock(layout: str, value: str) -> tuple[int, int, int, int, int, int, int]:
    original = value
    year, month, day = 0, -1, -1
    hour = minute = second = nanos = 0
    pm = am = False
    elements = _layout_elements(layout)
    for index, element in enumerate(elements):
        kind = element.kind
        if kind is None:
            value = _skip_literal(value, element.text)
        elif kind == "year":
            if len(value) < 4 or not (value[:4].isdigit() and value[:4].isascii()):
                raise ValueError("bad year")
            year, value = int(value[:4]), value[4:]
        elif kind == "year2":
            if len(value) < 2 or not (value[:2].isdigit() and value[:2].isascii()):
                raise ValueError("bad year")
            year, value = int(value[:2]), value[2:]
            year += 1900 if year >= 69 else 2000
        elif kind in ("month", "long_month"):
            found, value = _lookup(_MONTHS, value, 3 if kind == "month" else None)
            month = found + 1
        elif kind in ("num_month", "zero_month"):
            month, value = _getnum(value, kind == "zero_month")
            if not 1 <= month <= 12:
                raise ValueError("month out of range")
        elif kind in ("weekday", "long_weekday"):
            _, value = _lookup(_DAYS, value, 3 if kind == "weekday" else None)
        elif kind in ("day", "zero_day"):
            day, value = _getnum(value, kind == "zero_day")
        elif kind == "hour":
            hour, value = _getnum(value, False)
            if hour > 23:
                raise ValueError("hour out of range")
        elif kind in ("hour12", "zero_hour12"):
            hour, value = _getnum(value, kind == "zero_hour12")
            if hour > 12:
                raise ValueError("hour out of range")
        elif kind in ("minute", "zero_minute"):
            minute, value = _getnum(value, kind == "zero_minute")
            if minute > 59:
                raise ValueError("minute out of range")
        elif kind in ("second", "zero_second"):
            second, value = _getnum(value, kind == "zero_second")
            if second > 59:
                raise ValueError("second out of range")
            upcoming = next((e.kind for e in elements[index + 1:] if e.kind), None)
            if (len(value) >= 2 and value[0] in ".," and value[1].isdigit()
                    and upcoming not in ("frac0", "frac9")):
                width = 2
                while width < len(value) and value[width].isdigit():
                    width += 1
                nanos, value = _parse_fraction(value, width)
        elif kind in ("PM", "pm"):
            marker = value[:2]
            if kind == "pm":
                marker = marker.upper() if marker in ("am", "pm") else ""
            if marker == "PM":
                pm = True
            elif marker == "AM":
                am = True
            else:
                raise ValueError("bad AM/PM marker")
            value = value[2:]
        elif kind in ("iso", "iso_colon"):
            value = _skip_offset(value, kind == "iso_colon", allow_z=True)
        elif kind in ("num", "num_colon"):
            value = _skip_offset(value, kind == "num_colon", allow_z=False)
        elif kind == "tz":
            value = value[_zone_length(value):]
        elif kind == "frac0":
            nanos, value = _parse_fraction(value, element.digits + 1)
        elif kind == "frac9":
            if len(value) >= 2 and value[0] in ".," and value[1].isdigit():
                width = 1
                while width < min(len(value), 10) and value[width].isdigit():
                    width += 1
                nanos, value = _parse_fraction(value, width)
    if value:
        raise ValueError(f'extra text "{value}" after parsing "{original}"')
    if pm and hour < 12:
        hour += 12
    elif am and hour == 12:
        hour = 0
    if month < 0:
        month = 1
    if day < 0:
        day = 1
    if day < 1 or day > _days_in(month, year):
        raise ValueError("day out of range")
    return year, month, day, hour, minute, second, nanos


def _location(name: str) -> tzinfo:
    if name in ("", "Z", "UTC"):
        return dt_timezone.utc
    if name.startswith(("+", "-")):
        if not _OFFSET.fullmatch(name):
            raise ValueError(f"invalid timezone offset: {name}")
        try:
            return dt_timezone(timedelta(hours=int(name)), "Custom")
        except ValueError as exc:
            raise ValueError(f"invalid timezone offset: {name}") from exc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValueError(f"unknown timezone: {name}") from exc


def parse_date_string(date_str: str, layout: str, timezone: str) -> datetime:
    """Read ``date_str`` by ``layout`` as wall-clock time in ``timezone``.

    Offsets and zone names in the text are checked but not applied; a missing
    year becomes 1970. Raises ValueError when the text does not fit.
    """
    loc = _location(timezone)
    year, month, day, hour, minute, second, nanos = _parse_wall_clock(layout, date_str)
    if year == 0:
        year = 1970
    start = datetime(year, month, 1, hour, minute, second, nanos // 1000, tzinfo=loc)
    return start + timedelta(days=day - 1)


def time_to_epoch_millis(moment: datetime) -> int:
    """Milliseconds since the Unix epoch, truncated toward zero."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=dt_timezone.utc)
    epoch = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)
    micros = (moment - epoch) // timedelta(microseconds=1)
    return micros // 1000 if micros >= 0 else -((-micros) // 1000)