from .core import (
    HttpRequestParser, AsyncRequestReader, HTTPParser, HttpRequest, HttpMethod,
    HttpSession, InMemorySessionStore, SessionStore, ParserConfig,
    parse_request, read_request, configure_logging
)
from .core.errors import RequestParseError, SessionError

__version__ = '1.0.0'

__all__ = [
    # Parsers
    'HttpRequestParser',
    'AsyncRequestReader',
    'HTTPParser',
    'parse_request',
    'read_request',

    # Request and sessions
    'HttpRequest',
    'HttpMethod',
    'HttpSession',
    'InMemorySessionStore',
    'SessionStore',

    # Configuration
    'ParserConfig',
    'configure_logging',

    # Errors
    'RequestParseError',
    'SessionError'
]
