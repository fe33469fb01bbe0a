# SPDX-License-Identifier: BSD-3-Clause

"""
Wraps markup fragments in standalone documents.

The checker only accepts complete documents. To check a fragment,
L{wrap} embeds it in the smallest document that is valid for the
selected grammar.

Line and column numbers reported by the checker refer to the wrapped
document, so they are offset from the positions in the fragment.
"""

from __future__ import annotations

from nuvalidate.grammar import (
    Charset,
    CharsetT,
    Parser,
    ParserT,
    charset_name,
    parse_parser,
)

_HTML4_DOCTYPES = {
    Parser.HTML4: '<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01//EN" '
    '"http://www.w3.org/TR/html4/strict.dtd">',
    Parser.HTML4TR: '<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01 Transitional//EN" '
    '"http://www.w3.org/TR/html4/loose.dtd">',
}

_TITLE = "<title>Validation document</title>"


def _wrap_xml(fragment: str, charset: str) -> str:
    return "\n".join(
        (
            f'<?xml version="1.0" encoding="{charset.upper()}"?>',
            f"<root>{fragment}</root>",
        )
    )


def _wrap_html(doctype: str, meta: str, fragment: str) -> str:
    return "\n".join(
        (
            doctype,
            "<html><head>",
            meta,
            _TITLE,
            f"</head><body>{fragment}</body></html>",
        )
    )


def wrap(parser: ParserT, fragment: str, charset: CharsetT | None = None) -> str:
    """
    Embed a markup fragment in a minimal standalone document.

    The fragment is inserted as-is: it is neither escaped nor checked.

    @param parser:
        Grammar the document will be checked with.
    @param fragment:
        The markup to wrap.
    @param charset:
        Character set to declare in the document; UTF-8 if omitted.
        XML declarations use the upper case name, HTML documents
        the lower case name.
    @return:
        The complete document.
    @raise UnknownParserError:
        If C{parser} is not a known grammar.
    """
    grammar = parse_parser(parser)
    name = charset_name(charset or Charset.UTF_8)

    if grammar.is_xml:
        return _wrap_xml(fragment, name)
    if grammar in (Parser.HTML, Parser.HTML5):
        meta = f'<meta charset="{name.lower()}">'
        return _wrap_html("<!DOCTYPE html>", meta, fragment)
    meta = (
        '<meta http-equiv="Content-Type" '
        f'content="text/html; charset={name.lower()}">'
    )
    return _wrap_html(_HTML4_DOCTYPES[grammar], meta, fragment)
