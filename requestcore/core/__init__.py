"""
Core parsing components
"""

from .config import ParserConfig, SESSION_COOKIE_NAME
from .decoders import parse_cookies, parse_form_body, parse_query_string, percent_decode
from .errors import (
    EncodingError, IncompleteBodyError, InvalidContentLengthError,
    InvalidSessionIdError, MalformedHeaderLineError, MalformedParameterError,
    MalformedRequestLineError, RequestParseError, RequestTimeoutError,
    RequestTooLargeError, SessionError, SessionStoreUnavailableError,
    UnknownMethodError
)
from .http_parser import HTTPParser
from .http_request import ContentType, HttpHeaders, HttpMethod, HttpRequest
from .logging_utils import configure_logging
from .request_parser import HttpRequestParser, RequestBuilder, parse_request
from .session import HttpSession, InMemorySessionStore, SessionStore
from .stream_reader import AsyncRequestReader, read_request

# Expose public interface
__all__ = [
    "ParserConfig", "SESSION_COOKIE_NAME",
    "parse_cookies", "parse_form_body", "parse_query_string", "percent_decode",
    "HTTPParser", "HttpRequestParser", "RequestBuilder", "parse_request",
    "AsyncRequestReader", "read_request",
    "ContentType", "HttpHeaders", "HttpMethod", "HttpRequest",
    "HttpSession", "InMemorySessionStore", "SessionStore",
    "configure_logging",
    "RequestParseError", "MalformedRequestLineError", "UnknownMethodError",
    "EncodingError", "MalformedHeaderLineError", "MalformedParameterError",
    "InvalidContentLengthError", "IncompleteBodyError", "RequestTooLargeError",
    "RequestTimeoutError", "SessionError", "InvalidSessionIdError",
    "SessionStoreUnavailableError",
]
