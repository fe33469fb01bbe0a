# SPDX-License-Identifier: BSD-3-Clause

"""
Client for the web service of the Nu Html Checker (v.Nu).

L{ValidatorClient} sends documents, fragments or URLs to the checker
and returns its findings as a L{Response<nuvalidate.response.Response>}.

You can find the checker itself at U{https://validator.github.io/}
"""

from __future__ import annotations

from http.client import HTTPException
from logging import getLogger
from typing import Any, Dict, Optional, Union

from nuvalidate.grammar import (
    Charset,
    CharsetT,
    Parser,
    ParserT,
    charset_name,
    parse_parser,
)
from nuvalidate.response import Response, ServerError
from nuvalidate.transport import HTTPTransport, Transport, TransportResponse
from nuvalidate.version import VERSION_STRING
from nuvalidate.wrapper import wrap

DEFAULT_SERVICE_URL = "https://validator.nu/"
"""Public instance of the checker web service."""

USER_AGENT = f"nuvalidate/{VERSION_STRING}"

_LOG = getLogger(__name__)


class ValidatorClient:
    """
    Sends validation requests to the checker web service.

    The grammar the checker uses is selected by the L{parser} property
    and the character set used for documents that don't specify their
    own by the L{charset} property. Both can be changed between requests.

    The client can be used as the context manager in a C{with} statement,
    which closes its transport on exit.
    """

    def __init__(
        self,
        service_url: str = DEFAULT_SERVICE_URL,
        parser: ParserT = Parser.HTML5,
        charset: CharsetT = Charset.UTF_8,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize a client for the checker web service at C{service_url}.

        @param service_url:
            URL of the checker web service.
        @param parser:
            Grammar to check documents with.
        @param charset:
            Default character set for documents.
        @param transport:
            Transport to make HTTP requests with;
            if C{None}, a new L{HTTPTransport} is used.
        @raise UnknownParserError:
            If C{parser} is not a known grammar.
        """
        self.service_url = service_url
        self.transport: Transport = HTTPTransport() if transport is None else transport
        self._parser = parse_parser(parser)
        self._charset = charset_name(charset)

    def __enter__(self) -> ValidatorClient:
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.close()

    def close(self) -> None:
        """Closes the transport."""
        self.transport.close()

    @property
    def parser(self) -> Parser:
        """
        Grammar the checker will use.

        Can be set to a L{Parser} member or the name of one.
        Setting an unknown grammar raises L{UnknownParserError} and leaves
        the current grammar in place.
        """
        return self._parser

    @parser.setter
    def parser(self, parser: ParserT) -> None:
        self._parser = parse_parser(parser)

    @property
    def charset(self) -> str:
        """Character set used when a request does not specify one."""
        return self._charset

    @charset.setter
    def charset(self, charset: CharsetT) -> None:
        self._charset = charset_name(charset)

    def _query(self, **extra: str) -> Dict[str, str]:
        query = {"out": "json", "parser": self._parser.value}
        query.update(extra)
        return query

    def _send(
        self,
        method: str,
        headers: Dict[str, str],
        body: Optional[bytes],
        query: Dict[str, str],
    ) -> Response:
        headers["User-Agent"] = USER_AGENT
        try:
            reply: TransportResponse = self.transport.send(
                method, self.service_url, headers, body, query
            )
        except (HTTPException, OSError) as ex:
            _LOG.info("Request to checker service failed: %s", ex)
            raise ServerError(str(ex)) from ex
        return Response(reply)

    def validate_document(
        self, document: Union[str, bytes], charset: Optional[CharsetT] = None
    ) -> Response:
        """
        Check a complete document.

        @param document:
            The document to check. A string will be encoded using
            the character set.
        @param charset:
            Character set of the document;
            if C{None}, the client's L{charset} is used.
        @raise ServerError:
            If the request fails or the service does not reply with
            a report.
        @raise LookupError:
            If C{document} is a string and there is no Python codec
            for the character set.
        """
        name = self._charset if charset is None else charset_name(charset)
        body = document.encode(name) if isinstance(document, str) else document
        headers = {
            "Content-Type": f"{self._parser.mime_type}; charset={name.lower()}",
        }
        _LOG.debug(
            "Checking %d byte document as %s", len(body), self._parser.value
        )
        return self._send("POST", headers, body, self._query())

    def validate(
        self, document: Union[str, bytes], charset: Optional[CharsetT] = None
    ) -> Response:
        """Check a complete document; same as L{validate_document}."""
        return self.validate_document(document, charset)

    def validate_url(self, url: str, check_error_pages: bool = False) -> Response:
        """
        Have the checker fetch and check the document at C{url}.

        @param url:
            Location of the document to check; must be reachable
            for the checker service.
        @param check_error_pages:
            If C{True}, the checker will check the document even if
            it was served with an error status, instead of reporting
            that it could not be fetched.
        @raise ServerError:
            If the request fails or the service does not reply with
            a report.
        """
        query = self._query(doc=url)
        if check_error_pages:
            query["checkerrorpages"] = "true"
        _LOG.debug("Checking %s as %s", url, self._parser.value)
        return self._send("GET", {}, None, query)

    def validate_nodes(
        self, fragment: str, charset: Optional[CharsetT] = None
    ) -> Response:
        """
        Check a markup fragment.

        The fragment is wrapped in a minimal document for the current
        grammar, see L{nuvalidate.wrapper.wrap}. The line and column
        numbers in the response refer to the wrapped document.

        @param fragment:
            The markup to check.
        @param charset:
            Character set of the document;
            if C{None}, the client's L{charset} is used.
        @raise ServerError:
            If the request fails or the service does not reply with
            a report.
        """
        name = self._charset if charset is None else charset_name(charset)
        return self.validate_document(wrap(self._parser, fragment, name), name)
