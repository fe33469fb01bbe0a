# SPDX-License-Identifier: BSD-3-Clause

"""
Checker replies.

A L{Response} is created from the HTTP response of the checker service.
It checks that the service actually produced a report and then parses
the report into L{Message} objects.
"""

from __future__ import annotations

from email.message import Message as Headers
from logging import getLogger
from typing import Any, Iterator, List, Optional
import json

from nuvalidate.message import Message
from nuvalidate.transport import HeadersT, TransportResponse

_LOG = getLogger(__name__)


def _header(headers: HeadersT, name: str) -> str:
    """Look up a header by case-insensitive name in any mapping."""
    value = headers.get(name)
    if value is None:
        lname = name.lower()
        value = next(
            (val for key, val in headers.items() if key.lower() == lname), ""
        )
    return str(value)


def _content_charset(content_type: str) -> str:
    """Returns the charset parameter of a content type, UTF-8 if absent."""
    parsed = Headers()
    parsed["Content-Type"] = content_type
    return parsed.get_content_charset("utf-8")


ERROR_TYPES = ("error", "non-document-error")
"""Message types that count as errors."""

WARNING_TYPES = ("warning",)
"""Message types that count as warnings."""


class ServerError(Exception):
    """
    Raised when the checker service could not be reached or did not
    reply with a usable report.
    """

    msg = property(
        lambda self: self.args[0],  # pylint: disable=unsubscriptable-object
        doc="""Error message.""",
    )

    status = property(
        lambda self: self.args[1],  # pylint: disable=unsubscriptable-object
        doc="""HTTP status code, or C{None} if the problem was not
        an unexpected status.""",
    )

    def __init__(self, msg: str, status: Optional[int] = None):
        super().__init__(msg, status)

    def __str__(self) -> str:
        msg, status = self.args
        return msg if status is None else f"{msg} ({status:d})"


def _parse_messages(data: Any) -> Iterator[Message]:
    if not isinstance(data, dict):
        raise ServerError("Server response is not a JSON object")
    messages = data.get("messages")
    if not isinstance(messages, list):
        raise ServerError('Server response does not contain a "messages" list')
    for info in messages:
        if not isinstance(info, dict) or "type" not in info:
            raise ServerError(f"Malformed message in server response: {info!r}")
        yield Message(info)


class Response:
    """
    Messages reported by the checker for a single document.

    Besides all L{messages} in the order the checker reported them,
    the L{errors} and L{warnings} are available separately.
    Informational messages are only included in L{messages}.
    """

    def __init__(self, response: TransportResponse):
        """
        Parse an HTTP response from the checker service.

        @param response:
            The complete HTTP response.
        @raise ServerError:
            If the status is not 200, the content type is not JSON
            or the body is not a well-formed report.
        """
        status = response.status
        if status != 200:
            raise ServerError("Server responded with HTTP status", status)

        content_type = _header(response.headers, "Content-Type")
        if "application/json" not in content_type:
            raise ServerError(
                "Server did not respond with the expected content-type "
                "(application/json)"
            )

        charset = _content_charset(content_type)
        try:
            data = json.loads(response.body.decode(charset))
        except (LookupError, ValueError) as ex:
            raise ServerError(f"Invalid JSON in server response: {ex}") from ex

        self.messages = tuple(_parse_messages(data))
        """All messages, in the order they were reported."""

        self.errors = tuple(msg for msg in self.messages if msg.type in ERROR_TYPES)
        """Messages of type C{error} or C{non-document-error}."""

        self.warnings = tuple(
            msg for msg in self.messages if msg.type in WARNING_TYPES
        )
        """Messages of type C{warning}."""

        _LOG.debug(
            "Checker reported %d messages: %d errors, %d warnings",
            len(self.messages),
            len(self.errors),
            len(self.warnings),
        )

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __str__(self) -> str:
        return self.format()

    def has_errors(self) -> bool:
        """Returns C{True} iff the checker reported any errors."""
        return bool(self.errors)

    def has_warnings(self) -> bool:
        """Returns C{True} iff the checker reported any warnings."""
        return bool(self.warnings)

    def has_messages(self) -> bool:
        """Returns C{True} iff the checker reported any messages at all."""
        return bool(self.messages)

    def format(self, html: bool = False) -> str:
        """
        Present all messages, separated by blank lines.

        @param html:
            If C{True}, every message is formatted as HTML,
            see L{Message.format}.
        """
        formatted: List[str] = [msg.format(html) for msg in self.messages]
        return "\n\n".join(formatted)

    def to_html(self) -> str:
        """Present all messages as HTML."""
        return self.format(True)
