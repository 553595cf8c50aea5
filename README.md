# grokparse

grokparse compiles grok expressions into regular expressions. It matches
them against text and returns the named fields, either as strings or as
typed values.

A grok expression is ordinary regex syntax that may also contain references
of these forms:

- `%{SYNTAX}` expands a named pattern.
- `%{SYNTAX:field}` expands it and captures the match as `field`.
- `%{SYNTAX:field:type}` captures it and converts the value.

A dot in a field name (`destination.ip`) is kept in the returned key.

## Installation

```
pip install grokparse
```

## Usage

`Grok` starts with no named patterns. You supply every pattern an
expression refers to, either to the constructor (one or more mappings) or
through `add_pattern` / `add_patterns`:

```python
from grokparse.grok import Grok

g = Grok({
    "IPV4": r"\d{1,3}(?:\.\d{1,3}){3}",
    "NOTSPACE": r"\S+",
    "NUMBER": r"\d+",
    "NGINX_HOST": r"(?:%{IPV4:destination.ip}|%{NOTSPACE:destination.domain})"
                  r"(:%{NUMBER:destination.port:int})?",
})
g.compile("%{NGINX_HOST}", True)

g.match("127.0.0.1:1234")        # True
g.parse("127.0.0.1:1234")        # {'destination.ip': '127.0.0.1', 'destination.port': '1234'}
g.parse_typed("127.0.0.1:1234")  # {'destination.ip': '127.0.0.1', 'destination.port': 1234}
```

The second argument of `compile` is `named_captures_only`. With `False`,
every bare `%{SYNTAX}` reference is also captured under its own name.
`has_capture_groups()` reports whether the compiled expression has any
named group.

`match`, `parse` and `parse_typed` accept `str` or `bytes`. `parse` returns
`bytes` values when it is given `bytes`. When the text does not match, the
result is an empty dict. Calling them before `compile` raises `GrokError`.

### Conversions

The third part of a reference selects a conversion:

| Type | Result |
| --- | --- |
| `string` | the text unchanged |
| `int`, `long`, `integer` | integer |
| `float`, `double`, `number` | float |
| `bool`, `boolean` | boolean (`true`, `false`, `1`, `0`, `t`, `f`, ...) |
| `json` | parsed JSON object (numbers become floats) |
| `querystring` | dict with the first value of each parameter |
| `rubyhash` | dict parsed from Ruby hash syntax (`{:a=>1}`) |
| `scale(n)` | number multiplied by `n` |
| `nullIf("x")` | field dropped when the text equals `x` |
| `array(",")`, `array("[]", ",")` | list split on the separator, optionally from the text between the two bracket characters |
| `keyvalue("=")` | dict built from `key=value` pairs |

A named reference to a pattern called `NUMBER` is converted to a float. A
named reference to `INT` or `INTEGER` is converted to an integer. Use the
`numberStr` and `integerStr` aliases to keep the text as it is.

Several lower-case aliases are resolved to upper-case pattern names before
lookup. For example, `data` resolves to `GREEDYDATA`, `number` to `NUMBER`,
`integer` to `INT`, `notSpace` to `NOTSPACE`, `word` to `WORD` and `port` to
`POSINT`. The target pattern must still be defined.

When the field name is left empty and the type is `json`, `keyvalue` or
`rubyhash`, the resulting keys are merged into the top level:

```python
g = Grok({"GREEDYDATA": ".*"})
g.compile('%{data::keyvalue(": ")}', True)
g.parse_typed("user: john id: 123")  # {'user': 'john', 'id': '123'}
```

### Dates and inline regexes

`%{date("format")}` and `%{date("format", "timezone")}` build a pattern from
a Java-style date format such as `yyyy-MM-dd'T'HH:mm:ss.SSSZ`. The match is
converted to milliseconds since the epoch. The timezone may be empty, `Z` or
`UTC`, a fixed hour offset such as `+3`, or a zone name such as
`Europe/Paris`. Offsets and zone names inside the matched text are checked
but not applied. The `Z`/`ZZ` tokens refer to an `ISO8601_TIMEZONE` pattern
and `z` refers to a `TZ` pattern, so define those when you use them. If a
date cannot be read, a warning is logged and the raw text is returned.

`%{regex("...")}` inserts a regular expression inline.

```python
g = Grok({"ISO8601_TIMEZONE": r"Z|[+-]\d{2}:?\d{2}"})
g.compile('%{date("dd/MMM/yyyy:HH:mm:ss Z"):ts} %{regex("[a-z]+"):word}', True)
g.parse_typed("06/Mar/2013:01:36:30 +0900 hello")
# {'ts': 1362533790000, 'word': 'hello'}
```

The helpers behind this live in `grokparse.dates`:
`create_regex_pattern_from_format`, `tokenize_format`, `parse_date_string`
and `time_to_epoch_millis`.

### Errors

- `UnsupportedNameError` is raised for a pattern name that contains `:`.
- `ParseFailureError` is raised for an unknown pattern, an empty field name
  outside the merge cases, or a value that cannot be converted.
- `TypeNotProvidedError` is raised for an unknown conversion.
- `GrokError` is the base class of all three. It is also raised when the
  expanded expression is not a valid regular expression.

### Ruby hashes

The Ruby hash parser can be used on its own. It raises `RubyHashError`
(a `ValueError`) on malformed input.

```python
from grokparse.rubyhash import RubyHashParser

RubyHashParser().parse('{:status=>500, :path=>"/x"}')  # {'status': 500, 'path': '/x'}
```

## What this package does not do

- It ships no library of predefined patterns. Names such as `IP`, `NUMBER`,
  `WORD` or `GREEDYDATA` work only after you define them.
- It provides no command-line tool. It is used as a library.