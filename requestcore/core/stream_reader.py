"""
Request reader for asyncio streams.

Reads one request from an asyncio.StreamReader with a per-read timeout
and applies the same rules as the blocking parser. Intended for servers
that parse each connection in its own task.
"""

import asyncio
import time
from typing import Optional

from .config import DEFAULT_CONFIG, ParserConfig
from .errors import (
    IncompleteBodyError, MalformedRequestLineError, RequestParseError,
    RequestTimeoutError, RequestTooLargeError
)
from .http_request import HttpRequest
from .request_parser import (
    RequestBuilder, decode_text, log_parsed, log_rejected, strip_line_terminator
)
from .session import SessionStore


class AsyncRequestReader:
    """Reads and parses a single request from a StreamReader."""

    def __init__(self, config: Optional[ParserConfig] = None, session_store: Optional[SessionStore] = None):
        self.config = config or DEFAULT_CONFIG
        self.session_store = session_store

    async def read(self, reader: asyncio.StreamReader) -> HttpRequest:
        """Read one request.

        Args:
            reader: StreamReader positioned at the start of a request

        Returns:
            The parsed request; the reader is left right after it

        Raises:
            RequestParseError: Any parsing failure, including timeouts
            ConnectionError: If the transport fails
        """
        started = time.perf_counter()
        try:
            request = await self._read(reader)
        except RequestParseError as e:
            log_rejected(e)
            raise
        log_parsed(request, started)
        return request

    async def _read(self, reader: asyncio.StreamReader) -> HttpRequest:
        builder = RequestBuilder(self.config)

        first_line = await self._read_line(reader)
        if not first_line:
            raise MalformedRequestLineError("Empty request line")
        builder.request_line(first_line)

        while True:
            line = await self._read_line(reader)
            if not line:
                break
            builder.header_line(line)

        length = builder.content_length
        if length is not None:
            builder.set_body(await self._read_body(reader, length))

        return builder.build(self.session_store)

    async def _read_line(self, reader: asyncio.StreamReader) -> Optional[str]:
        try:
            raw = await asyncio.wait_for(reader.readline(), timeout=self.config.read_timeout)
        except asyncio.TimeoutError:
            raise RequestTimeoutError("Request timeout")
        except ValueError:
            # StreamReader raises ValueError when a line exceeds its buffer limit
            raise RequestTooLargeError("Request line or header too long")

        if not raw:
            return None
        line = strip_line_terminator(decode_text(raw, self.config.encoding))
        if len(line) > self.config.max_line_size:
            raise RequestTooLargeError("Request line or header too long")
        return line

    async def _read_body(self, reader: asyncio.StreamReader, length: int) -> str:
        try:
            data = await asyncio.wait_for(reader.readexactly(length), timeout=self.config.read_timeout)
        except asyncio.TimeoutError:
            raise RequestTimeoutError("Request timeout")
        except asyncio.IncompleteReadError as e:
            raise IncompleteBodyError(f"Expected {length} body bytes, got {len(e.partial)}")
        return decode_text(data, self.config.encoding)


async def read_request(reader: asyncio.StreamReader,
                       config: Optional[ParserConfig] = None,
                       session_store: Optional[SessionStore] = None) -> HttpRequest:
    """Read and parse one request from an asyncio stream."""
    return await AsyncRequestReader(config, session_store).read(reader)
