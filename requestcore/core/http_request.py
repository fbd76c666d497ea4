"""
Parsed HTTP request value and the constants the parser recognizes.

HttpRequest is immutable once built: its mappings are read-only views
over dicts owned by the request. Session lookup is lazy and delegated
to an injected SessionStore.
"""

import enum
import logging
import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from ..features.metrics import record_session_created
from .config import SESSION_COOKIE_NAME
from .errors import InvalidSessionIdError, SessionStoreUnavailableError
from .session import HttpSession, SessionStore

logger = logging.getLogger(__name__)


class HttpMethod(enum.Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


class HttpHeaders:
    CONTENT_LENGTH = "Content-Length"
    CONTENT_TYPE = "Content-Type"
    COOKIE = "Cookie"


class ContentType:
    APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class HttpRequest:
    """A single parsed HTTP/1.x request."""
    method: HttpMethod
    path: str
    parameters: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    version: Optional[str] = None
    session_store: Optional[SessionStore] = field(default=None, compare=False, repr=False)
    session_cookie_name: str = field(default=SESSION_COOKIE_NAME, compare=False, repr=False)

    def __post_init__(self):
        # Copy into request-owned dicts so callers keep no mutable alias
        for name in ("parameters", "headers", "cookies"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def get_parameter(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.parameters.get(name, default)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a header by its name exactly as received."""
        return self.headers.get(name, default)

    def get_cookie(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.cookies.get(name, default)

    def session_id(self) -> Optional[uuid.UUID]:
        """Return the session id carried by the session cookie.

        Returns:
            The id, or None when the cookie is absent

        Raises:
            InvalidSessionIdError: If the cookie value is not a UUID
        """
        value = self.cookies.get(self.session_cookie_name)
        if value is None:
            return None
        try:
            return uuid.UUID(value)
        except ValueError:
            raise InvalidSessionIdError(f"Invalid session id: {value!r}")

    def session(self, store: Optional[SessionStore] = None) -> Optional[HttpSession]:
        """Resolve the session for this request.

        Without a session cookie a new session is created and put into
        the store. Otherwise the store is asked for the id, which may
        yield None for an unknown or expired session.

        Args:
            store: Store to use instead of the one injected at parse time

        Raises:
            SessionStoreUnavailableError: If no store is available
            InvalidSessionIdError: If the session cookie is not a UUID
        """
        store = store if store is not None else self.session_store
        if store is None:
            raise SessionStoreUnavailableError("No session store configured")

        session_id = self.session_id()
        if session_id is None:
            session = HttpSession()
            store.put(session)
            record_session_created()
            logger.debug("created session %s", session.id)
            return session

        return store.get(session_id)
