"""
Exception hierarchy for request parsing and session resolution.

Every parse failure derives from RequestParseError and carries a
``status_code`` hint that the request-handling layer can turn into an
error response. Session failures derive from SessionError.
"""


class RequestParseError(Exception):
    """Base class for request parsing errors"""
    status_code = 400


class MalformedRequestLineError(RequestParseError):
    """Request line is missing or has fewer than two tokens"""
    pass


class UnknownMethodError(RequestParseError):
    """Method token is not a recognized HTTP verb"""
    status_code = 501


class EncodingError(RequestParseError):
    """Percent-decoding or character decoding failed"""
    pass


class MalformedHeaderLineError(RequestParseError):
    """Header line without a colon"""
    pass


class MalformedParameterError(RequestParseError):
    """Parameter token without '=' under the strict policy"""
    pass


class InvalidContentLengthError(RequestParseError):
    """Content-Length is not a non-negative decimal integer"""
    pass


class IncompleteBodyError(RequestParseError):
    """Stream ended before Content-Length units were read"""
    pass


class RequestTooLargeError(RequestParseError):
    """A line, the header count or the body exceeded a configured limit"""
    status_code = 413


class RequestTimeoutError(RequestParseError):
    """Reading from an async stream timed out"""
    status_code = 408


class SessionError(Exception):
    """Base class for session resolution errors"""
    pass


class InvalidSessionIdError(SessionError):
    """Session cookie value is not a valid UUID"""
    pass


class SessionStoreUnavailableError(SessionError):
    """No session store was injected or supplied"""
    pass
