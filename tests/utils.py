from email import message_from_string
import json
import logging

from nuvalidate.transport import Transport, TransportResponse


class _NoLogHandler(logging.Handler):
    """Log handler that asserts if anything is logged."""

    LOGGING_FORMAT = "%(levelname)s: %(message)s"

    def __init__(self, logger, level):
        logging.Handler.__init__(self, level)
        self.setFormatter(logging.Formatter(self.LOGGING_FORMAT))
        self.logger = logger

    def __enter__(self):
        self.logger.addHandler(self)

    def __exit__(self, exc_type, exc_value, traceback):
        self.logger.removeHandler(self)

    def emit(self, record):
        message = self.format(record)
        assert False, "Unexpected logging: %s" % message


def no_log(logger, level=logging.INFO):
    """Return a context manager that asserts if anything at or above
    the given level is emitted on the given logger.
    """
    return _NoLogHandler(logger, level)


def make_response(
    body, status=200, content_type="application/json; charset=utf-8"
):
    """Build a transport response.
    A `body` that is not `bytes` is serialized to JSON first.
    """
    if not isinstance(body, bytes):
        body = json.dumps(body).encode("utf-8")
    headers = message_from_string(f"Content-Type: {content_type}\n")
    return TransportResponse(status, headers, body)


def report(*messages):
    """Build a successful checker reply containing the given messages."""
    return make_response({"url": "about:blank", "messages": list(messages)})


class FakeTransport(Transport):
    """Transport that records requests and replies from a script."""

    def __init__(self, *replies):
        self.replies = list(replies) or [report()]
        self.requests = []
        self.closed = False

    def send(self, method, url, headers, body, query):
        self.requests.append((method, url, dict(headers), body, dict(query)))
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self):
        self.closed = True

    @property
    def last_request(self):
        return self.requests[-1]
