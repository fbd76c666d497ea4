"""
Parser configuration settings.

Limits default to the same values the request parser has always enforced:
8KB per line, 100 headers and a 10MB body.
"""

import codecs
from dataclasses import dataclass

SESSION_COOKIE_NAME = "SESSIONID"

MALFORMED_SKIP = "skip"
MALFORMED_FAIL = "fail"


@dataclass(frozen=True)
class ParserConfig:
    """Settings shared by the sync, async and push parsers."""
    encoding: str = "utf-8"
    max_line_size: int = 8192       # 8KB per line
    max_headers: int = 100          # Maximum number of headers
    max_body_size: int = 10485760   # 10MB limit
    malformed_parameters: str = MALFORMED_SKIP
    session_cookie_name: str = SESSION_COOKIE_NAME
    read_timeout: float = 30.0      # async reads only

    def __post_init__(self):
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {self.encoding}")
        if self.max_line_size < 1:
            raise ValueError("max_line_size must be at least 1")
        if self.max_headers < 0:
            raise ValueError("max_headers must not be negative")
        if self.max_body_size < 0:
            raise ValueError("max_body_size must not be negative")
        if self.malformed_parameters not in (MALFORMED_SKIP, MALFORMED_FAIL):
            raise ValueError(
                f"malformed_parameters must be '{MALFORMED_SKIP}' or '{MALFORMED_FAIL}'"
            )
        if not self.session_cookie_name:
            raise ValueError("session_cookie_name must not be empty")
        if self.read_timeout <= 0:
            raise ValueError("read_timeout must be positive")


DEFAULT_CONFIG = ParserConfig()
