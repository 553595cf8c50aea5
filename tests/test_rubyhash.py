import pytest

from grokparse.rubyhash import RubyHashError, RubyHashParser


@pytest.fixture
def parser():
    return RubyHashParser()


def test_symbol_hash_from_logs(parser):
    text = (
        '{:status=>500, :request_method=>"GET", :path_info=>"/_node/stats", '
        ':query_string=>"", :http_version=>"HTTP/1.1", :http_accept=>"*/*"}'
    )
    assert parser.parse(text) == {
        "http_accept": "*/*",
        "http_version": "HTTP/1.1",
        "path_info": "/_node/stats",
        "query_string": "",
        "request_method": "GET",
        "status": 500,
    }


def test_status_is_integer(parser):
    result = parser.parse("{:status=>500}")
    assert result["status"] == 500
    assert isinstance(result["status"], int)


def test_single_path_entry(parser):
    text = '{:path=>"/usr/share/logstash/vendor/GeoLite2-City.mmdb"}'
    assert parser.parse(text) == {"path": "/usr/share/logstash/vendor/GeoLite2-City.mmdb"}


def test_nested_hash(parser):
    text = '{name => "John", "job" => {"company" => "Big Company", "title" => "CTO"}}'
    assert parser.parse(text) == {
        "name": "John",
        "job": {"company": "Big Company", "title": "CTO"},
    }


def test_empty_hash(parser):
    assert parser.parse("{}") == {}
    assert parser.parse("  {   }  ") == {}


def test_literals(parser):
    text = "{:a=>true, :b=>false, :c=>nil, :d=>1.5, :e=>-3, :f=>hello}"
    assert parser.parse(text) == {
        "a": True,
        "b": False,
        "c": None,
        "d": 1.5,
        "e": -3,
        "f": "hello",
    }


def test_symbol_value(parser):
    assert parser.parse("{:kind=>:error}") == {"kind": "error"}


def test_array_value(parser):
    assert parser.parse('{:items=>[1, "x", nil, true, [2]]}') == {
        "items": [1, "x", None, True, [2]]
    }


def test_escape_sequences(parser):
    assert parser.parse(r'{"k"=>"a\"b\n\tc"}') == {"k": 'a"b\n\tc'}


def test_single_quoted_strings(parser):
    assert parser.parse("{'k'=>'it\\'s'}") == {"k": "it's"}


def test_nested_brace_inside_string(parser):
    assert parser.parse('{:a=>{:b=>"}"}}') == {"a": {"b": "}"}}


def test_huge_integer_stays_string(parser):
    assert parser.parse("{:n=>99999999999999999999}") == {"n": "99999999999999999999"}


@pytest.mark.parametrize(
    "text",
    [
        "not a hash",
        "{:a=>1",
        "{:a 1}",
        '{"a=>1}',
        "{:=>1}",
        "{:a=>{:b=>1}",
        "{:a=>[1, 2}",
        "{:a=>}",
    ],
)
def test_malformed_input_raises(parser, text):
    with pytest.raises(RubyHashError):
        parser.parse(text)


def test_missing_arrow_message(parser):
    with pytest.raises(RubyHashError, match="expected =>"):
        parser.parse("{:a 1}")


def test_error_is_value_error(parser):
    with pytest.raises(ValueError, match="braces"):
        parser.parse("[1, 2]")