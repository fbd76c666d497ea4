"""
Blocking HTTP/1.x request parser.

Reads the request line, header lines and an optional Content-Length
body from a readable stream and builds an immutable HttpRequest:
- Request line split on single spaces, target percent-decoded as UTF-8
- Query string and form-urlencoded body merged into parameters
- Cookie header decoded into cookies
- Line, header count and body size limits from ParserConfig

The parsing rules live in RequestBuilder, which does no I/O, so the
async reader and the httptools push parser build requests the same way.
"""

import logging
import re
import time
from typing import Dict, Optional, Union

from ..features.metrics import record_error, record_parsed
from .config import DEFAULT_CONFIG, ParserConfig
from .decoders import parse_cookies, parse_form_body, parse_query_string, percent_decode
from .errors import (
    EncodingError, IncompleteBodyError, InvalidContentLengthError,
    MalformedHeaderLineError, MalformedRequestLineError, RequestParseError,
    RequestTooLargeError, UnknownMethodError
)
from .http_request import ContentType, HttpHeaders, HttpMethod, HttpRequest
from .session import SessionStore

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


def decode_text(raw: Union[str, bytes], encoding: str) -> str:
    """Return ``raw`` as text, decoding bytes with ``encoding``."""
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise EncodingError(f"Invalid {encoding} in request: {e.reason}")


def strip_line_terminator(line: str) -> str:
    """Remove a trailing LF or CRLF."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def log_parsed(request: HttpRequest, started: float) -> None:
    record_parsed(request.method.value, time.perf_counter() - started)
    logger.debug("method=%s, path=%s", request.method.value, request.path)
    logger.debug("parameters : %s", dict(request.parameters))
    logger.debug("headers : %s", dict(request.headers))
    if not request.cookies:
        logger.debug("empty cookies")


def log_rejected(error: RequestParseError) -> None:
    record_error(error)
    logger.warning("Rejected request (%s): %s", type(error).__name__, error)


class RequestBuilder:
    """Accumulates the parts of one request and applies the parsing rules.

    Feed it the request line, then header lines (or name/value pairs),
    then the body if ``content_length`` is not None, and call build().
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.method: Optional[HttpMethod] = None
        self.path: Optional[str] = None
        self.version: Optional[str] = None
        self.parameters: Dict[str, str] = {}
        self.headers: Dict[str, str] = {}
        self.body: Optional[str] = None

    def request_line(self, line: str) -> None:
        """Handle ``<METHOD> <REQUEST-URI> [<VERSION>]``.

        Raises:
            MalformedRequestLineError: If fewer than two tokens are present
            UnknownMethodError: If the method is not an HttpMethod
            EncodingError: If the target cannot be percent-decoded
        """
        tokens = line.split(" ")
        if len(tokens) < 2:
            raise MalformedRequestLineError(f"Invalid request line: {line!r}")

        method_token = tokens[0].strip()
        try:
            self.method = HttpMethod[method_token]
        except KeyError:
            raise UnknownMethodError(f"Unknown method: {method_token!r}")

        target = percent_decode(tokens[1], self.config.encoding)
        if len(tokens) > 2:
            self.version = tokens[2].strip()

        self.path, _, query = target.partition("?")
        # Target is already decoded; the query is split as-is
        self.parameters.update(parse_query_string(
            query, decode=False, malformed=self.config.malformed_parameters
        ))

    def header_line(self, line: str) -> None:
        if ":" not in line:
            raise MalformedHeaderLineError(f"Header line without ':': {line!r}")
        name, value = line.split(":", 1)
        self.add_header(name.strip(), value.strip())

    def add_header(self, name: str, value: str) -> None:
        if name not in self.headers and len(self.headers) >= self.config.max_headers:
            raise RequestTooLargeError("Too many headers")
        self.headers[name] = value

    @property
    def content_length(self) -> Optional[int]:
        """Declared body length, or None without a Content-Length header.

        Raises:
            InvalidContentLengthError: If the value is not a decimal integer
            RequestTooLargeError: If it exceeds max_body_size
        """
        value = self.headers.get(HttpHeaders.CONTENT_LENGTH)
        if value is None:
            return None
        if not _DIGITS.fullmatch(value):
            raise InvalidContentLengthError(f"Invalid Content-Length: {value!r}")
        length = int(value)
        if length > self.config.max_body_size:
            raise RequestTooLargeError(f"Request body too large: {length}")
        return length

    def set_body(self, body: str) -> None:
        self.body = body

    def build(self, session_store: Optional[SessionStore] = None) -> HttpRequest:
        if self.method is None:
            raise MalformedRequestLineError("Missing request line")

        parameters = dict(self.parameters)
        content_type = self.headers.get(HttpHeaders.CONTENT_TYPE)
        if self.body is not None and content_type == ContentType.APPLICATION_FORM_URLENCODED:
            parameters.update(parse_form_body(
                self.body,
                encoding=self.config.encoding,
                malformed=self.config.malformed_parameters,
            ))

        cookie_header = self.headers.get(HttpHeaders.COOKIE)
        cookies = parse_cookies(cookie_header) if cookie_header is not None else {}

        return HttpRequest(
            method=self.method,
            path=self.path,
            parameters=parameters,
            headers=self.headers,
            cookies=cookies,
            body=self.body,
            version=self.version,
            session_store=session_store,
            session_cookie_name=self.config.session_cookie_name,
        )


class HttpRequestParser:
    """Parses one request from a blocking stream.

    The stream may yield str (text mode) or bytes (binary mode). In
    binary mode Content-Length counts bytes, in text mode characters.
    The parser never closes the stream and reads nothing past the
    header block unless a body is declared.
    """

    def __init__(self, config: Optional[ParserConfig] = None, session_store: Optional[SessionStore] = None):
        self.config = config or DEFAULT_CONFIG
        self.session_store = session_store

    def parse(self, stream) -> HttpRequest:
        """Parse a request from ``stream``.

        Raises:
            RequestParseError: Any parsing failure (see errors module)
            OSError: If reading the stream fails
        """
        started = time.perf_counter()
        try:
            request = self._parse(stream)
        except RequestParseError as e:
            log_rejected(e)
            raise
        log_parsed(request, started)
        return request

    def _parse(self, stream) -> HttpRequest:
        builder = RequestBuilder(self.config)

        first_line = self._read_line(stream)
        if not first_line:
            raise MalformedRequestLineError("Empty request line")
        builder.request_line(first_line)

        while True:
            line = self._read_line(stream)
            if not line:
                break
            builder.header_line(line)

        length = builder.content_length
        if length is not None:
            builder.set_body(self._read_body(stream, length))

        return builder.build(self.session_store)

    def _read_line(self, stream) -> Optional[str]:
        """Read one line without its terminator; None at end of stream."""
        limit = self.config.max_line_size + 2
        raw = stream.readline(limit)
        if not raw:
            return None

        newline = b"\n" if isinstance(raw, bytes) else "\n"
        if not raw.endswith(newline) and len(raw) >= limit:
            raise RequestTooLargeError("Request line or header too long")

        line = strip_line_terminator(decode_text(raw, self.config.encoding))
        if len(line) > self.config.max_line_size:
            raise RequestTooLargeError("Request line or header too long")
        return line

    def _read_body(self, stream, length: int) -> str:
        chunks = []
        remaining = length
        while remaining > 0:
            chunk = stream.read(remaining)
            if not chunk:
                raise IncompleteBodyError(
                    f"Expected {length} body units, got {length - remaining}"
                )
            chunks.append(chunk)
            remaining -= len(chunk)

        if not chunks:
            return ""
        return decode_text(chunks[0][:0].join(chunks), self.config.encoding)


def parse_request(stream,
                  config: Optional[ParserConfig] = None,
                  session_store: Optional[SessionStore] = None) -> HttpRequest:
    """Parse one request from a blocking stream."""
    return HttpRequestParser(config, session_store).parse(stream)
