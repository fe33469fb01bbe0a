# SPDX-License-Identifier: BSD-3-Clause

"""
Messages reported by the checker.

A L{Message} holds one entry from the C{messages} list in the checker's
U{JSON output<https://github.com/validator/validator/wiki/Output-%C2%BB-JSON>}
and can present it as plain text or as HTML.
"""

from __future__ import annotations

from html import escape
from html.entities import codepoint2name
from typing import Any, Callable, Mapping, Optional
import re

Highlighter = Callable[[str, int, int], str]
"""
Function that marks up the highlighted part of an extract.

It is called with the extract and the start offset and length of
the highlighted part, and returns the HTML to present.
"""

_RE_EOLN = re.compile(r"\r\n|\r|\n")

_RE_NON_ASCII = re.compile(r"[^\x00-\x7f]")


def _entity(match: re.Match[str]) -> str:
    codepoint = ord(match.group())
    name = codepoint2name.get(codepoint)
    return f"&#{codepoint:d};" if name is None else f"&{name};"


def escape_entities(text: str) -> str:
    """
    Escape text for use as HTML character data.

    Besides the characters that are special in HTML, double quotes and
    all non-ASCII characters are replaced by entities: named ones where
    HTML defines a name, numeric ones otherwise.
    """
    text = escape(text, quote=False).replace('"', "&quot;")
    return _RE_NON_ASCII.sub(_entity, text)


def highlight(extract: str, start: int, length: int, class_name: str) -> str:
    """
    Escape an extract for HTML and wrap its highlighted part in
    a C{span} element of the given class.
    """
    end = start + length
    before, marked, after = (
        escape_entities(part)
        for part in (extract[:start], extract[start:end], extract[end:])
    )
    return f'{before}<span class="{escape(class_name)}">{marked}</span>{after}'


class Message:
    """A single error, warning or informational message."""

    def __init__(self, info: Mapping[str, Any]):
        """
        Initialize a message from a decoded JSON message object.

        @param info:
            Message object from the checker's JSON output.
            The C{type} key is required; missing integer fields
            default to 0 and missing text fields to the empty string.
            If C{firstLine} is missing, it is taken to be equal
            to C{lastLine}.
        @raise KeyError:
            If C{info} has no C{type}.
        """
        self.type: str = info["type"]
        self.subtype: Optional[str] = info.get("subtype")
        self.last_line: int = info.get("lastLine", 0)
        self.first_line: int = info.get("firstLine", self.last_line)
        self.first_column: int = info.get("firstColumn", 0)
        self.last_column: int = info.get("lastColumn", 0)
        self.highlight_start: int = info.get("hiliteStart", 0)
        self.highlight_length: int = info.get("hiliteLength", 0)
        self.text: str = info.get("message", "")
        self.extract: str = info.get("extract", "")

        self.highlight_class_name = "highlight"
        """CSS class of the element wrapping the highlighted part of
        the extract in HTML output, when no custom highlighter is set."""

        self._highlighter: Optional[Highlighter] = None

    def __repr__(self) -> str:
        return (
            f"Message({self.type!r}, line {self.first_line}-{self.last_line}: "
            f"{self.text!r})"
        )

    def __str__(self) -> str:
        return self.format()

    @property
    def highlighter(self) -> Optional[Highlighter]:
        """Custom highlighter used for HTML output, or C{None} to use
        the default one."""
        return self._highlighter

    @highlighter.setter
    def highlighter(self, highlighter: Optional[Highlighter]) -> None:
        if highlighter is not None and not callable(highlighter):
            raise TypeError(
                f"highlighter must be callable, not {type(highlighter).__name__}"
            )
        self._highlighter = highlighter

    def _highlighted_extract(self) -> str:
        highlighter = self._highlighter
        if highlighter is None:
            return highlight(
                self.extract,
                self.highlight_start,
                self.highlight_length,
                str(self.highlight_class_name),
            )
        return highlighter(self.extract, self.highlight_start, self.highlight_length)

    def format(self, html: bool = False) -> str:
        """
        Present this message as text.

        The first line contains the type and the text of the message,
        the second line the position in the document (omitted if the
        checker did not report a position) and the last line the
        extract.

        @param html:
            If C{True}, the type is shown in bold, the text is escaped,
            the extract is escaped and highlighted and every line break
            is preceded by a C{<br>} tag.
        """
        if html:
            text = escape_entities(self.text)
            lines = [f"<strong>{escape(self.type)}</strong>: {text}"]
        else:
            lines = [f"{self.type}: {self.text}"]
        if self.last_line > 0:
            lines.append(
                f"From line {self.first_line}, column {self.first_column}; "
                f"to line {self.last_line}, column {self.last_column}"
            )
        if not html:
            lines.append(self.extract)
            return "\n".join(lines)

        lines.append(self._highlighted_extract())
        return _RE_EOLN.sub(lambda match: "<br>" + match.group(), "\n".join(lines))

    def to_html(self) -> str:
        """Present this message as HTML."""
        return self.format(True)
