import pytest

from grokparse.functions import (
    KeyValueOptions,
    ParseFunction,
    extract_between_tags,
    parse_function,
    parse_key_value_args,
    parse_key_value_pairs,
    parse_string_to_number,
    split_args_by_comma,
    split_by_colon_outside_parentheses,
    split_string_to_pairs,
    unquote_string,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ('array("[]",",")', ParseFunction("array", ['"[]"', '","'])),
        ('array(",")', ParseFunction("array", ['","'])),
        ('nullIf("-")', ParseFunction("nullIf", ['"-"'])),
        ("scale(1000)", ParseFunction("scale", ["1000"])),
        ('keyvalue(": ")', ParseFunction("keyvalue", ['": "'])),
        ('keyvalue("=","/:")', ParseFunction("keyvalue", ['"="', '"/:"'])),
        (
            'date("EEE MMM dd HH:mm:ss yyyy","+3")',
            ParseFunction("date", ['"EEE MMM dd HH:mm:ss yyyy"', '"+3"']),
        ),
        ('regex("[^,)]+")', ParseFunction("regex", ['"[^,)]+"'])),
        (r'regex("[^\\\"]*")', ParseFunction("regex", [r'"[^\\\"]*"'])),
        ("empty()", ParseFunction("empty", [""])),
    ],
)
def test_parse_function(text, expected):
    assert parse_function(text) == expected


@pytest.mark.parametrize("text", ["string", "foo(", "bar(a(b)"])
def test_parse_function_rejects_non_calls(text):
    assert parse_function(text) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a,b,c", ["a", "b", "c"]),
        ('"a,b",c', ['"a,b"', "c"]),
        ("'x,y', \"z\"", ["'x,y'", ' "z"']),
        ('"it\'s, ok",x', ['"it\'s, ok"', "x"]),
        ("", [""]),
    ],
)
def test_split_args_by_comma(text, expected):
    assert split_args_by_comma(text) == expected


@pytest.mark.parametrize("text", ["a,b", '"a,b",c', "'x,y',,z", ",,"])
def test_split_args_by_comma_rejoins(text):
    assert ",".join(split_args_by_comma(text)) == text


@pytest.mark.parametrize(
    "text, expected",
    [
        ('"abc"', "abc"),
        ("'x'", "x"),
        ('  "a b"  ', "a b"),
        ('"', '"'),
        ("abc", "abc"),
        ('"a\'', '"a\''),
        ('""', ""),
    ],
)
def test_unquote_string(text, expected):
    assert unquote_string(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("NUMBER", ["NUMBER"]),
        ("NUMBER:MY_AGE:int", ["NUMBER", "MY_AGE", "int"]),
        ("data::json", ["data", "", "json"]),
        ('data:users:array("[]",",")', ["data", "users", 'array("[]",",")']),
        ('date("HH:mm:ss"):date', ['date("HH:mm:ss")', "date"]),
        (
            'date("EEE MMM dd HH:mm:ss yyyy","+3"):date',
            ['date("EEE MMM dd HH:mm:ss yyyy","+3")', "date"],
        ),
        (r'regex("\\d+\\.\\d+"):http.version', [r'regex("\\d+\\.\\d+")', "http.version"]),
        ("a:", ["a"]),
    ],
)
def test_split_by_colon_outside_parentheses(text, expected):
    assert split_by_colon_outside_parentheses(text) == expected


def test_extract_between_tags():
    assert extract_between_tags("[John, Oliver, Marc, Tom]", "[", "]") == "John, Oliver, Marc, Tom"
    assert extract_between_tags("x<a>y", "<", ">") == "a"
    assert extract_between_tags("no tags", "[", "]") == ""
    assert extract_between_tags("[open", "[", "]") == ""


def test_array_style_split():
    content = extract_between_tags("[John, Oliver, Marc, Tom]", "[", "]")
    assert content.split(",") == ["John", " Oliver", " Marc", " Tom"]


def test_parse_key_value_args_defaults():
    assert parse_key_value_args([]) == KeyValueOptions("=", "", "", " ,;")


def test_parse_key_value_args_positional():
    options = parse_key_value_args(['"="', '"/:"'])
    assert options.separator == "="
    assert options.character_allow_list == "/:"
    assert options.delimiter == " ,;"


def test_parse_key_value_args_empty_keeps_default():
    options = parse_key_value_args(["", "'x'", "'q'", "';'"])
    assert options == KeyValueOptions("=", "x", "q", ";")


def test_split_pairs_with_colon_space():
    options = parse_key_value_args(['": "'])
    text = "user: john connect_date: 11/08/2017 id: 123 action: click"
    assert split_string_to_pairs(text, options) == [
        "user: john",
        "connect_date: 11/08/2017",
        "id: 123",
        "action: click",
    ]


def test_keyvalue_colon_space_end_to_end():
    options = parse_key_value_args(['": "'])
    pairs = split_string_to_pairs(
        "user: john connect_date: 11/08/2017 id: 123 action: click", options
    )
    assert parse_key_value_pairs(pairs, options.separator.strip()) == {
        "user": "john",
        "connect_date": "11/08/2017",
        "id": "123",
        "action": "click",
    }


def test_keyvalue_equals_space_end_to_end():
    options = parse_key_value_args(['"= "'])
    pairs = split_string_to_pairs(
        "user= john connect_date= 11/08/2017 id= 123 action= click", options
    )
    assert parse_key_value_pairs(pairs, options.separator.strip()) == {
        "user": "john",
        "connect_date": "11/08/2017",
        "id": "123",
        "action": "click",
    }


def test_keyvalue_url_value():
    options = parse_key_value_args(['"="', '"/:"'])
    pairs = split_string_to_pairs(
        "url=https://app.datadoghq.com/event/stream user=john", options
    )
    assert parse_key_value_pairs(pairs, "=") == {
        "url": "https://app.datadoghq.com/event/stream",
        "user": "john",
    }


def test_split_pairs_double_space():
    assert split_string_to_pairs("a=  b", KeyValueOptions()) == ["a=", "b"]


def test_parse_key_value_pairs_error():
    with pytest.raises(ValueError, match='cannot split "novalue" into 2 items, got 1 item'):
        parse_key_value_pairs(["a=1", "novalue"], "=")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000", 1000),
        ("+5", 5),
        ("-42", -42),
        ("24.3", 24.3),
        ("1e3", 1000.0),
        ("9223372036854775808", 9223372036854775808.0),
    ],
)
def test_parse_string_to_number(text, expected):
    result = parse_string_to_number(text)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize("text", ["abc", "1_000", " 5", "", "1e400", "12a"])
def test_parse_string_to_number_rejects(text):
    with pytest.raises(ValueError, match="failed to parse"):
        parse_string_to_number(text)