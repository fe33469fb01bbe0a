"""
Unit tests for `nuvalidate.grammar`.
"""

import codecs

from pytest import mark, raises

from nuvalidate.grammar import (
    Charset,
    Parser,
    UnknownParserError,
    charset_name,
    parse_parser,
)


@mark.parametrize(
    "name", ("xml", "xmldtd", "html", "html5", "html4", "html4tr")
)
def test_parse_parser_name(name):
    """Test lookup of a grammar by its service name."""
    parser = parse_parser(name)
    assert isinstance(parser, Parser)
    assert parser.value == name


@mark.parametrize("parser", tuple(Parser))
def test_parse_parser_member(parser):
    """Test whether a Parser member is returned as-is."""
    assert parse_parser(parser) is parser


@mark.parametrize("name", ("xhtml", "Html5", "", None, 5))
def test_parse_parser_unknown(name):
    """Test whether unknown grammars raise UnknownParserError."""
    with raises(UnknownParserError, match="Unknown parser"):
        parse_parser(name)


def test_unknown_parser_is_value_error():
    """Test whether callers can catch UnknownParserError as ValueError."""
    assert issubclass(UnknownParserError, ValueError)


@mark.parametrize(
    "parser, mime_type",
    (
        (Parser.XML, "application/xml"),
        (Parser.XMLDTD, "application/xml-dtd"),
        (Parser.HTML, "text/html"),
        (Parser.HTML5, "text/html"),
        (Parser.HTML4, "text/html"),
        (Parser.HTML4TR, "text/html"),
    ),
)
def test_mime_type(parser, mime_type):
    """Test the media type used for each grammar."""
    assert parser.mime_type == mime_type
    assert parser.is_xml == mime_type.startswith("application/")


@mark.parametrize("charset", tuple(Charset))
def test_charset_python_codec(charset):
    """Test whether Python can encode documents in every listed charset."""
    codecs.lookup(charset.value)


def test_charset_name():
    """Test conversion of charsets to plain strings."""
    assert charset_name(Charset.WINDOWS_1252) == "windows-1252"
    assert charset_name("x-custom") == "x-custom"
    assert str(Charset.SHIFT_JIS) == "shift_jis"
    assert type(charset_name(Charset.UTF_8)) is str
