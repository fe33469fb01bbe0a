"""Client library for the Nu Html Checker (v.Nu) web service.

What follows here is a quick tour of the code.

Overview
========

The checker is a web service: documents are sent to it over HTTP and it
replies with a list of messages in JSON format. This package takes care
of both ends of that conversation.

`nuvalidate.client.ValidatorClient` sends requests. It can check
a complete document, a markup fragment or a document that the checker
fetches itself from a URL. The grammar the checker uses is selected from
`nuvalidate.grammar.Parser`.

Fragments are wrapped in a minimal document by `nuvalidate.wrapper.wrap`
before they are sent, since the checker only accepts complete documents.

The reply is parsed into a `nuvalidate.response.Response`, which holds
`nuvalidate.message.Message` objects that can be presented as plain text
or as HTML.

HTTP Transport
==============

The client does not make HTTP requests itself: it hands them to
a `nuvalidate.transport.Transport`. By default that is an
`nuvalidate.transport.HTTPTransport`, which keeps a connection open
between requests and retries requests that fail for transient reasons.
Any other implementation can be passed to the client instead.

Errors
======

A grammar that the checker does not know is rejected with
`nuvalidate.grammar.UnknownParserError`. Any failure to obtain a report
from the service, whether the request itself failed or the reply was
not a report, raises `nuvalidate.response.ServerError`.

Command Line
============

`nuvalidate.cmdline.main` is the entry point of the C{nuvalidate}
command, which checks a single document and prints the messages.
"""
