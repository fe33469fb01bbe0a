# SPDX-License-Identifier: BSD-3-Clause

"""Command line interface."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser
from pathlib import Path
from urllib.parse import urlparse

from nuvalidate.client import DEFAULT_SERVICE_URL, ValidatorClient
from nuvalidate.grammar import Charset, Parser
from nuvalidate.response import Response, ServerError
from nuvalidate.version import VERSION_STRING

_LOG = logging.getLogger(__name__)


def detect_target(arg: str) -> str | None:
    """
    Returns the URL if a command line argument is a web address,
    or C{None} if it should be treated as a file path.
    """
    url = urlparse(arg)
    if url.scheme in ("http", "https") and url.netloc:
        return arg
    return None


def _read_input(arg: str) -> bytes:
    if arg == "-":
        return sys.stdin.buffer.read()
    return Path(arg).read_bytes()


def run(
    client: ValidatorClient,
    target: str,
    fragment: bool = False,
    check_error_pages: bool = False,
    html: bool = False,
) -> int:
    """
    Check a single document and print the checker's findings.

    @param client:
        Client to check the document with.
    @param target:
        URL, file path or C{"-"} for standard input.
    @param fragment:
        If C{True}, the input is a markup fragment that should be
        wrapped in a document before checking.
    @param check_error_pages:
        If C{True}, a URL is checked even if it is served with
        an error status.
    @param html:
        Print HTML instead of plain text.
    @return:
        0 if no errors were found, 1 if errors were found,
        2 if the document could not be checked.
    """
    response: Response
    try:
        url = detect_target(target)
        if url is not None:
            response = client.validate_url(url, check_error_pages)
        else:
            try:
                data = _read_input(target)
            except OSError as ex:
                _LOG.error('Failed to read "%s": %s', target, ex)
                return 2
            if fragment:
                try:
                    text = data.decode(client.charset)
                except (LookupError, ValueError) as ex:
                    _LOG.error('Failed to decode "%s": %s', target, ex)
                    return 2
                response = client.validate_nodes(text)
            else:
                response = client.validate_document(data)
    except ServerError as ex:
        _LOG.error("Checking failed: %s", ex)
        return 2
    finally:
        client.close()

    if response.has_messages():
        print(response.format(html))
    return 1 if response.has_errors() else 0


def main() -> int:
    """
    Parse command line arguments and call L{run} with the results.

    This is the entry point that gets called by the wrapper script.
    """

    parser = ArgumentParser(
        description="Check HTML and XML documents using the Nu Html Checker "
        "web service",
    )
    parser.add_argument(
        "target",
        metavar="URL|PATH|-",
        help="document to check: a web address, a file or - for standard input",
    )
    parser.add_argument(
        "--service",
        metavar="URL",
        default=DEFAULT_SERVICE_URL,
        help=f"URL of the checker web service (default: {DEFAULT_SERVICE_URL})",
    )
    parser.add_argument(
        "--parser",
        type=str,
        choices=tuple(member.value for member in Parser),
        default=Parser.HTML5.value,
        help="grammar to check the document with (default: html5)",
    )
    parser.add_argument(
        "--charset",
        type=str,
        default=Charset.UTF_8.value,
        help="character set of the document (default: utf-8)",
    )
    parser.add_argument(
        "--fragment",
        action="store_true",
        help="wrap the input in a minimal document before checking",
    )
    parser.add_argument(
        "--check-error-pages",
        action="store_true",
        help="check a URL even if it is served with an error status",
    )
    parser.add_argument(
        "--html", action="store_true", help="output HTML instead of plain text"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase amount of logging, can be passed multiple times",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"nuvalidate {VERSION_STRING}"
    )

    args = parser.parse_args()

    level_map = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}
    level = level_map.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    client = ValidatorClient(args.service, args.parser, args.charset)
    return run(client, args.target, args.fragment, args.check_error_pages, args.html)
