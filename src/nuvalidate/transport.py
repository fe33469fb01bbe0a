# SPDX-License-Identifier: BSD-3-Clause

"""
HTTP transport used to talk to the checker web service.

L{ValidatorClient<nuvalidate.client.ValidatorClient>} does not make
HTTP requests itself: it hands them to a L{Transport}.
L{HTTPTransport} is the implementation that talks to a real server;
tests or applications with their own HTTP stack can substitute
any other implementation of the L{Transport} interface.
"""

from __future__ import annotations

from email.message import Message as Headers
from gzip import GzipFile
from http.client import HTTPConnection, HTTPException, HTTPSConnection
from io import BytesIO
from logging import getLogger
from time import sleep
from typing import Any, Mapping, NamedTuple, Optional, Tuple, Union
from urllib.parse import urlencode, urljoin, urlsplit

_LOG = getLogger(__name__)

HeadersT = Union[Headers, Mapping[str, str]]


class RedirectError(HTTPException):
    """Raised when a redirect status from the service cannot be handled."""

    msg = property(
        lambda self: self.args[0],  # pylint: disable=unsubscriptable-object
        doc="""Error message.""",
    )

    url = property(
        lambda self: self.args[1],  # pylint: disable=unsubscriptable-object
        doc="""URL that we were redirected from.""",
    )

    def __init__(self, msg: str, url: str):
        super().__init__(msg, url)

    def __str__(self) -> str:
        return "%s at %s" % self.args


class TransportResponse(NamedTuple):
    """A completed HTTP response."""

    status: int
    """HTTP status code."""

    headers: HeadersT
    """Response headers. L{HTTPTransport} returns an C{email.message.Message},
    on which lookups are case-insensitive; other transports may return
    any mapping of header names to values."""

    body: bytes
    """Response body, with any content encoding already removed."""


class Transport:
    """
    Transport interface: sends a single HTTP request and returns
    the response.

    Transports are context managers that call L{close} on exit.
    """

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.close()

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        query: Mapping[str, str],
    ) -> TransportResponse:
        """
        Make an HTTP request.

        @param method:
            HTTP method, such as C{"GET"} or C{"POST"}.
        @param url:
            URL to send the request to, possibly containing a query.
        @param headers:
            Request headers.
        @param body:
            Request body, or C{None} if the request has no body.
        @param query:
            Query parameters to add to the URL.
        @return:
            The response, whatever its status code.
        @raise OSError:
            When an unrecoverable low-level I/O error occurs.
        @raise http.client.HTTPException:
            When an unrecoverable HTTP error occurs.
        """
        raise NotImplementedError

    def close(self) -> None:
        """
        Release any resources held by this transport.

        The default implementation does nothing.
        """


def build_url(url: str, query: Mapping[str, str]) -> str:
    """Returns C{url} with the given query parameters appended."""
    if not query:
        return url
    separator = "&" if urlsplit(url).query else "?"
    return url + separator + urlencode(query)


class HTTPTransport(Transport):
    """
    Transport that makes requests using C{http.client}.

    A connection will be opened on demand and re-used for later requests
    to the same host. It has to be closed explicitly, either by calling
    the L{close} method or by using the transport as the context manager
    in a C{with} statement. A transport with a closed connection can be
    used again: the connection will be re-opened.
    """

    max_refused = 20
    """Number of refused connections after which we give up."""

    max_retries = 3
    """Number of failed requests after which we give up."""

    max_redirects = 12
    """Maximum length of a redirect chain."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize a transport.

        @param timeout:
            Timeout in seconds for blocking operations on the connection,
            or C{None} to use the global default socket timeout.
        """
        self.timeout = timeout
        self._connection: Optional[HTTPConnection] = None
        self._remote: Optional[Tuple[str, str]] = None

    def __connect(self, url: str) -> HTTPConnection:
        """Returns an HTTPConnection instance for the given URL string.
        Raises InvalidURL if the URL string cannot be parsed.
        Raises OSError if the URL uses an unsupported scheme.
        """
        url_parts = urlsplit(url)
        scheme = url_parts.scheme
        netloc = url_parts.netloc

        if self._connection is not None:
            if self._remote == (scheme, netloc):
                # Re-use existing connection.
                return self._connection
            self.close()

        connection_factory: type[HTTPConnection]
        if scheme == "http":
            connection_factory = HTTPConnection
        elif scheme == "https":
            connection_factory = HTTPSConnection
        elif scheme:
            raise OSError(f"Unsupported URL scheme: {scheme}")
        else:
            raise OSError(f'URL "{url}" lacks a scheme (such as "http:")')

        if self.timeout is None:
            connection = connection_factory(netloc)
        else:
            connection = connection_factory(netloc, timeout=self.timeout)
        self._connection = connection
        self._remote = (scheme, netloc)
        return connection

    def close(self) -> None:
        """
        Closes the current connection.

        Does nothing if there is no open connection.
        """
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self._remote = None

    def __request_with_retries(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: Optional[bytes],
    ) -> TransportResponse:
        """Make a request and retry if it doesn't succeed the first time.
        For example, the connection may have timed out.
        """
        url_parts = urlsplit(url)
        request = url_parts.path or "/"
        if url_parts.query:
            request += "?" + url_parts.query

        all_headers = dict(headers)

        # Compression is worthwhile when using an actual network.
        if url_parts.hostname not in ("localhost", "127.0.0.1", "::1"):
            all_headers["Accept-Encoding"] = "gzip"
            if data is not None:
                all_headers["Content-Encoding"] = "gzip"
                with BytesIO() as buf:
                    with GzipFile(None, "wb", 6, buf) as zfile:
                        zfile.write(data)
                    data = buf.getvalue()
        else:
            all_headers["Accept-Encoding"] = "identity, gzip;q=0.5"

        refused_count = 0
        retry_count = 0
        while True:
            try:
                connection = self.__connect(url)
                _LOG.debug("%s %s", method, url)
                connection.request(method, request, data, all_headers)
                response = connection.getresponse()
                encoding = response.getheader("Content-Encoding", "identity")
                if encoding.lower() in ("gzip", "x-gzip"):
                    with GzipFile(fileobj=response) as zfile:
                        response_body = zfile.read()
                else:
                    response_body = response.read()
                response.close()
                return TransportResponse(
                    response.status, response.msg, response_body
                )
            except ConnectionRefusedError:
                self.close()
                refused_count += 1
                if refused_count >= self.max_refused:
                    # Service is unlikely to appear anymore; give up.
                    raise
                # Wait for service to start up.
                _LOG.info(
                    "Checker service refuses connection; trying again in 1 second"
                )
                sleep(1)
            except (HTTPException, OSError) as ex:
                self.close()
                retry_count += 1
                if retry_count >= self.max_retries:
                    # Problem is probably not transient; give up.
                    raise
                _LOG.info("Request to checker service failed, retrying: %s", ex)

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        query: Mapping[str, str],
    ) -> TransportResponse:
        url = build_url(url, query)
        redirect_count = 0
        while True:
            response = self.__request_with_retries(method, url, headers, body)

            status = response.status
            if status not in (301, 302, 307):
                return response

            # Note: RFC 7231 states that we MAY handle redirects
            #       automatically, unlike the obsolete RFC 2616.

            # Find new URL.
            location = response.headers.get("Location")
            if location is None:
                raise RedirectError(f"Redirect ({status:d}) without Location", url)
            new_url = urljoin(url, location)
            if new_url == url:
                raise RedirectError("Redirect loop", url)
            _LOG.debug("Redirected (%d) to %s", status, new_url)
            url = new_url

            # Guard against infinite or excessive redirect chains.
            redirect_count += 1
            if redirect_count > self.max_redirects:
                raise RedirectError("Maximum redirect count exceeded", url)
