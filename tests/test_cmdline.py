"""
Unit tests for `nuvalidate.cmdline`.
"""

from logging import ERROR

from pytest import mark

from nuvalidate import cmdline
from nuvalidate.client import ValidatorClient
from nuvalidate.cmdline import detect_target, main, run
from nuvalidate.grammar import Parser

from utils import FakeTransport, make_response, report

ERROR_MESSAGE = {
    "type": "error",
    "lastLine": 1,
    "firstColumn": 1,
    "lastColumn": 4,
    "hiliteStart": 0,
    "hiliteLength": 4,
    "message": "Stray end tag “p”.",
    "extract": "</p>",
}

WARNING_MESSAGE = {
    "type": "warning",
    "message": "Consider adding a “lang” attribute.",
}


def make_client(*replies, **kwargs):
    transport = FakeTransport(*replies)
    client = ValidatorClient("http://localhost/", transport=transport, **kwargs)
    return client, transport


@mark.parametrize(
    "arg, expected",
    (
        ("http://example.com/", "http://example.com/"),
        ("https://example.com/a?b=c", "https://example.com/a?b=c"),
        ("index.html", None),
        ("/var/www/index.html", None),
        ("-", None),
        ("file:///var/www/index.html", None),
    ),
)
def test_detect_target(arg, expected):
    """Test telling URLs apart from file paths."""
    assert detect_target(arg) == expected


def test_run_url(capsys):
    """Test checking a URL."""
    client, transport = make_client(report(ERROR_MESSAGE))
    assert run(client, "https://example.com/", check_error_pages=True) == 1
    method, url_, headers_, body_, query = transport.last_request
    assert method == "GET"
    assert query["doc"] == "https://example.com/"
    assert query["checkerrorpages"] == "true"
    assert transport.closed
    assert capsys.readouterr().out == (
        "error: Stray end tag “p”.\n"
        "From line 1, column 1; to line 1, column 4\n"
        "</p>\n"
    )


def test_run_file(tmp_path, capsys):
    """Test checking a document stored in a file."""
    path = tmp_path / "page.html"
    path.write_bytes(b"<!DOCTYPE html><title>x</title>")
    client, transport = make_client(report(WARNING_MESSAGE))
    assert run(client, str(path), html=True) == 0
    method, url_, headers_, body, query_ = transport.last_request
    assert method == "POST"
    assert body == b"<!DOCTYPE html><title>x</title>"
    assert capsys.readouterr().out.startswith("<strong>warning</strong>: ")


def test_run_fragment(tmp_path, capsys):
    """Test checking a fragment stored in a file."""
    path = tmp_path / "fragment.xml"
    path.write_text("<a>1</a>", encoding="utf-8")
    client, transport = make_client(parser=Parser.XML)
    assert run(client, str(path), fragment=True) == 0
    body = transport.last_request[3]
    assert body == b'<?xml version="1.0" encoding="UTF-8"?>\n<root><a>1</a></root>'
    assert capsys.readouterr().out == ""


def test_run_missing_file(tmp_path, caplog):
    """Test whether an unreadable input file is reported."""
    client, transport = make_client()
    with caplog.at_level(ERROR, logger="nuvalidate.cmdline"):
        assert run(client, str(tmp_path / "missing.html")) == 2
    assert not transport.requests
    assert "Failed to read" in caplog.text


def test_run_server_error(caplog):
    """Test whether a failed check is reported."""
    client, transport_ = make_client(make_response(b"", status=502))
    with caplog.at_level(ERROR, logger="nuvalidate.cmdline"):
        assert run(client, "http://example.com/") == 2
    assert "Checking failed" in caplog.text
    assert "502" in caplog.text


def test_main(monkeypatch, tmp_path, capsys):
    """Test whether command line options end up in the client."""
    path = tmp_path / "page.html"
    path.write_bytes("<p>Blåbær</p>".encode("iso-8859-1"))
    transport = FakeTransport(report(ERROR_MESSAGE))
    clients = []

    def create_client(*args):
        client = ValidatorClient(*args, transport=transport)
        clients.append(client)
        return client

    monkeypatch.setattr(cmdline, "ValidatorClient", create_client)
    monkeypatch.setattr(
        "sys.argv",
        [
            "nuvalidate",
            "--service",
            "http://localhost:8888/",
            "--parser",
            "html4tr",
            "--charset",
            "iso-8859-1",
            "--fragment",
            str(path),
        ],
    )
    assert main() == 1

    (client,) = clients
    assert client.service_url == "http://localhost:8888/"
    assert client.parser is Parser.HTML4TR
    assert client.charset == "iso-8859-1"
    method_, url, headers, body, query = transport.last_request
    assert url == "http://localhost:8888/"
    assert headers["Content-Type"] == "text/html; charset=iso-8859-1"
    assert "<p>Blåbær</p>".encode("iso-8859-1") in body
    assert query == {"out": "json", "parser": "html4tr"}
    assert capsys.readouterr().out.startswith("error: ")
