# SPDX-License-Identifier: BSD-3-Clause

"""
Grammars and character sets understood by the checker.

The checker parses a document according to a L{Parser} grammar,
which is sent to the service as the C{parser} query parameter.
L{Charset} lists the character sets that can be used to encode
the documents sent to the service.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class UnknownParserError(ValueError):
    """Raised when a parser grammar is not one of the L{Parser} values."""


class Parser(Enum):
    """The grammars the checker can parse a document as.

    The value of each member is the name the checker service uses
    for that grammar.
    """

    XML = "xml"
    """XML, without loading external entities."""

    XMLDTD = "xmldtd"
    """XML, loading external entities and validating against the DTD."""

    HTML = "html"
    """HTML, using the HTML5 parsing algorithm."""

    HTML5 = "html5"
    """HTML5; identical to L{HTML}."""

    HTML4 = "html4"
    """HTML 4.01 Strict."""

    HTML4TR = "html4tr"
    """HTML 4.01 Transitional."""

    @property
    def mime_type(self) -> str:
        """Media type used when sending a document for this grammar."""
        return _MIME_TYPES.get(self, "text/html")

    @property
    def is_xml(self) -> bool:
        """C{True} iff this grammar parses documents as XML."""
        return self in _MIME_TYPES


_MIME_TYPES = {
    Parser.XML: "application/xml",
    Parser.XMLDTD: "application/xml-dtd",
}


class Charset(str, Enum):
    """Character sets a document can be sent in."""

    UTF_8 = "utf-8"
    UTF_16 = "utf-16"
    US_ASCII = "us-ascii"
    ISO_8859_1 = "iso-8859-1"
    ISO_8859_2 = "iso-8859-2"
    ISO_8859_3 = "iso-8859-3"
    ISO_8859_4 = "iso-8859-4"
    ISO_8859_5 = "iso-8859-5"
    ISO_8859_6 = "iso-8859-6"
    ISO_8859_7 = "iso-8859-7"
    ISO_8859_8 = "iso-8859-8"
    ISO_8859_9 = "iso-8859-9"
    ISO_8859_10 = "iso-8859-10"
    ISO_8859_11 = "iso-8859-11"
    ISO_8859_13 = "iso-8859-13"
    ISO_8859_14 = "iso-8859-14"
    ISO_8859_15 = "iso-8859-15"
    WINDOWS_1250 = "windows-1250"
    WINDOWS_1251 = "windows-1251"
    WINDOWS_1252 = "windows-1252"
    WINDOWS_1253 = "windows-1253"
    WINDOWS_1254 = "windows-1254"
    WINDOWS_1255 = "windows-1255"
    WINDOWS_1256 = "windows-1256"
    WINDOWS_1257 = "windows-1257"
    WINDOWS_1258 = "windows-1258"
    KOI8_R = "koi8-r"
    TIS_620 = "tis-620"
    BIG5 = "big5"
    GB2312 = "gb2312"
    GB18030 = "gb18030"
    EUC_JP = "euc-jp"
    EUC_KR = "euc-kr"
    ISO_2022_JP = "iso-2022-jp"
    ISO_2022_KR = "iso-2022-kr"
    SHIFT_JIS = "shift_jis"

    def __str__(self) -> str:
        return self.value


ParserT = Union[Parser, str]
CharsetT = Union[Charset, str]


def parse_parser(parser: ParserT) -> Parser:
    """
    Look up a grammar by its L{Parser} member or its service name.

    @raise UnknownParserError:
        If C{parser} does not name a known grammar.
    """
    if isinstance(parser, Parser):
        return parser
    try:
        return Parser(parser)
    except ValueError:
        raise UnknownParserError(f'Unknown parser "{parser}"') from None


def charset_name(charset: CharsetT) -> str:
    """Returns the name of a character set as a plain string."""
    return charset.value if isinstance(charset, Charset) else str(charset)
