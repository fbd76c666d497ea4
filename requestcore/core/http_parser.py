"""
Push-style HTTP request parser using httptools.

This module provides an incremental parser for servers that receive
request bytes in chunks (for example asyncio.Protocol.data_received):
- llhttp does the HTTP/1.x framing and tokenizing
- RequestBuilder applies the same decoding rules as the stream parsers
- Size limits from ParserConfig are enforced while data arrives

llhttp enforces the HTTP/1.x grammar, so request lines must carry a
version and lines must end with CRLF.
"""

import logging
import time
from typing import Callable, List, Optional

import httptools

from .config import DEFAULT_CONFIG, ParserConfig
from .errors import (
    MalformedHeaderLineError, MalformedRequestLineError, RequestParseError,
    RequestTooLargeError, UnknownMethodError
)
from .http_request import HttpHeaders, HttpMethod, HttpRequest
from .request_parser import RequestBuilder, decode_text, log_parsed, log_rejected
from .session import SessionStore

logger = logging.getLogger(__name__)


class HTTPParser:
    """Feeds raw bytes to httptools.HttpRequestParser and builds requests.

    Implements the httptools callback protocol. Each completed message
    is appended to ``requests`` and passed to ``on_request`` if given.
    """

    def __init__(self,
                 config: Optional[ParserConfig] = None,
                 session_store: Optional[SessionStore] = None,
                 on_request: Optional[Callable[[HttpRequest], None]] = None):
        self.config = config or DEFAULT_CONFIG
        self.session_store = session_store
        self.on_request = on_request
        self.requests: List[HttpRequest] = []
        self._line = b""
        self._line_done = False
        try:
            self.parser = httptools.HttpRequestParser(self)
        except Exception as e:
            raise RequestParseError(f"Failed to initialize parser: {e}")
        self.reset()

    def reset(self) -> None:
        """Reset per-message state before a new request."""
        self._builder = RequestBuilder(self.config)
        self._url = b""
        self._headers_complete = False
        self._delivered = False
        self._body = bytearray()
        self._started = time.perf_counter()

    def on_message_begin(self) -> None:
        self.reset()

    def on_url(self, url: bytes) -> None:
        if len(self._url) + len(url) > self.config.max_line_size:
            raise RequestTooLargeError("URL too long")
        self._url += url

    def on_header(self, name: bytes, value: bytes) -> None:
        if len(name) + len(value) > self.config.max_line_size:
            raise RequestTooLargeError("Header too long")
        self._builder.add_header(
            decode_text(name, self.config.encoding).strip(),
            decode_text(value, self.config.encoding).strip(),
        )

    def on_headers_complete(self) -> None:
        self._headers_complete = True
        method = self.parser.get_method().decode("ascii")
        url = decode_text(self._url, self.config.encoding)
        self._builder.request_line(f"{method} {url} HTTP/{self.parser.get_http_version()}")

    def on_body(self, body: bytes) -> None:
        if len(self._body) + len(body) > self.config.max_body_size:
            raise RequestTooLargeError("Request body too large")
        self._body.extend(body)

    def on_message_complete(self) -> None:
        if self._delivered:
            return
        self._delivered = True
        # Next message starts with a new request line
        self._line = b""
        self._line_done = False

        if HttpHeaders.CONTENT_LENGTH in self._builder.headers:
            self._builder.set_body(decode_text(bytes(self._body), self.config.encoding))
        request = self._builder.build(self.session_store)
        log_parsed(request, self._started)

        self.requests.append(request)
        if self.on_request is not None:
            self.on_request(request)

    def feed_data(self, data: bytes) -> None:
        """Feed raw request data to the parser.

        Args:
            data: Raw HTTP request data as bytes

        Raises:
            RequestParseError: If the data is not a valid request
        """
        try:
            if not self._line_done:
                end = data.find(b"\n")
                if end == -1:
                    self._line += data
                    self._feed(data)
                    return
                self._line += data[:end + 1]
                self._feed(data[:end + 1])
                self._line_done = True
                data = data[end + 1:]
            if data:
                self._feed(data)
        except RequestParseError as e:
            log_rejected(e)
            raise

    def _feed(self, data: bytes) -> None:
        try:
            self.parser.feed_data(data)
        except httptools.HttpParserUpgrade:
            # CONNECT and Upgrade requests stop the parser after the headers
            logger.debug("upgrade requested, parser paused")
            if self._headers_complete:
                self.on_message_complete()
        except RequestParseError:
            raise
        except httptools.HttpParserError as e:
            raise self._translate(e) from e

    def _translate(self, error: Exception) -> RequestParseError:
        """Map an httptools error onto the parse error taxonomy."""
        original = error.__context__
        if isinstance(original, RequestParseError):
            return original

        if isinstance(error, httptools.HttpParserInvalidMethodError):
            method_token = self._line.split(b" ", 1)[0].strip().decode("latin-1")
            if method_token in HttpMethod.__members__:
                return MalformedRequestLineError(f"Invalid request line: {self._line!r}")
            return UnknownMethodError(f"Unknown method: {method_token!r}")
        if not self._line_done:
            return MalformedRequestLineError(f"Invalid request line: {error}")
        if not self._headers_complete:
            return MalformedHeaderLineError(f"Invalid header: {error}")
        return RequestParseError(f"Parser error: {error}")

    @property
    def is_complete(self) -> bool:
        """Check if the current message has been fully parsed"""
        return self._delivered

    def close(self) -> None:
        """Explicitly cleanup parser resources"""
        self.parser = None
