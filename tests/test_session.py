#!/usr/bin/env python3
"""
Test suite for session resolution and the in-memory session store
"""
import io
import threading
import unittest
import uuid

from prometheus_client import REGISTRY

from requestcore.core.config import ParserConfig
from requestcore.core.errors import InvalidSessionIdError, SessionStoreUnavailableError
from requestcore.core.request_parser import parse_request
from requestcore.core.session import HttpSession, InMemorySessionStore


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class RecordingStore:
    """Minimal store exposing only put/get."""

    def __init__(self):
        self.sessions = {}
        self.puts = []

    def put(self, session):
        self.puts.append(session)
        self.sessions[session.id] = session

    def get(self, session_id):
        return self.sessions.get(session_id)


def request_with_cookie(cookie=None, store=None, config=None):
    lines = "GET / HTTP/1.1\r\n"
    if cookie is not None:
        lines += f"Cookie: {cookie}\r\n"
    return parse_request(io.BytesIO((lines + "\r\n").encode()), config, store)


class TestSessionId(unittest.TestCase):
    def test_no_cookie_header(self):
        """Test no Cookie header means no session id"""
        self.assertIsNone(request_with_cookie().session_id())

    def test_other_cookies_only(self):
        """Test cookies without the session cookie"""
        self.assertIsNone(request_with_cookie("theme=dark").session_id())

    def test_valid_session_cookie(self):
        """Test a UUID session cookie is parsed"""
        sid = uuid.uuid4()
        request = request_with_cookie(f"theme=dark; SESSIONID={sid}")
        self.assertEqual(request.session_id(), sid)

    def test_invalid_session_cookie(self):
        """Test a non-UUID session cookie"""
        request = request_with_cookie("SESSIONID=not-a-uuid")
        with self.assertRaises(InvalidSessionIdError):
            request.session_id()

    def test_custom_cookie_name(self):
        """Test the session cookie name comes from the config"""
        sid = uuid.uuid4()
        config = ParserConfig(session_cookie_name="sid")
        request = request_with_cookie(f"sid={sid}; SESSIONID=junk", config=config)
        self.assertEqual(request.session_id(), sid)


class TestSessionResolution(unittest.TestCase):
    def setUp(self):
        self.store = RecordingStore()

    def test_new_session_created(self):
        """Test a request without session cookie creates and stores a session"""
        before = REGISTRY.get_sample_value("requestcore_sessions_created_total") or 0.0
        request = request_with_cookie(store=self.store)

        session = request.session()

        self.assertIsInstance(session, HttpSession)
        self.assertIsInstance(session.id, uuid.UUID)
        self.assertEqual(self.store.puts, [session])
        after = REGISTRY.get_sample_value("requestcore_sessions_created_total")
        self.assertEqual(after, before + 1)

    def test_each_call_without_cookie_creates_session(self):
        """Test the request keeps no session state of its own"""
        request = request_with_cookie(store=self.store)
        first = request.session()
        second = request.session()
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(self.store.puts), 2)

    def test_existing_session_looked_up(self):
        """Test a known session id returns the stored session"""
        session = HttpSession()
        self.store.put(session)
        request = request_with_cookie(f"SESSIONID={session.id}", self.store)
        self.assertIs(request.session(), session)
        self.assertEqual(len(self.store.puts), 1)

    def test_unknown_session_returns_none(self):
        """Test a valid but unknown id yields None without creating"""
        request = request_with_cookie(f"SESSIONID={uuid.uuid4()}", self.store)
        self.assertIsNone(request.session())
        self.assertEqual(self.store.puts, [])

    def test_invalid_session_cookie(self):
        """Test session() propagates an invalid id"""
        request = request_with_cookie("SESSIONID=bogus", self.store)
        with self.assertRaises(InvalidSessionIdError):
            request.session()

    def test_store_argument_overrides(self):
        """Test a store passed to session() is used"""
        request = request_with_cookie()
        session = request.session(self.store)
        self.assertIs(self.store.get(session.id), session)

    def test_no_store(self):
        """Test session() without any store"""
        with self.assertRaises(SessionStoreUnavailableError):
            request_with_cookie().session()

    def test_store_not_part_of_equality(self):
        """Test requests with different stores still compare equal"""
        self.assertEqual(request_with_cookie(store=self.store), request_with_cookie())


class TestHttpSession(unittest.TestCase):
    def test_attributes(self):
        """Test attribute get/set/remove"""
        session = HttpSession()
        session.set_attribute("user", "alice")
        self.assertEqual(session.get_attribute("user"), "alice")
        session.remove_attribute("user")
        self.assertIsNone(session.get_attribute("user"))
        self.assertEqual(session.get_attribute("user", "nobody"), "nobody")

    def test_invalidate(self):
        """Test invalidate clears attributes"""
        session = HttpSession()
        session.set_attribute("user", "alice")
        session.invalidate()
        self.assertFalse(session.valid)
        self.assertIsNone(session.get_attribute("user"))

    def test_touch(self):
        """Test touch updates last access time"""
        clock = FakeClock()
        session = HttpSession(clock=clock)
        clock.now += 5
        session.touch()
        self.assertEqual(session.last_accessed, session.created_at + 5)


class TestInMemorySessionStore(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.store = InMemorySessionStore(ttl=60, max_entries=3, clock=self.clock)

    def test_put_and_get(self):
        """Test stored sessions are returned by id"""
        session = HttpSession()
        self.store.put(session)
        self.assertIs(self.store.get(session.id), session)
        self.assertIsNone(self.store.get(uuid.uuid4()))

    def test_idle_expiry(self):
        """Test sessions expire after ttl without access"""
        session = HttpSession()
        self.store.put(session)
        self.clock.now += 61
        self.assertIsNone(self.store.get(session.id))
        self.assertEqual(len(self.store), 0)

    def test_access_extends_lifetime(self):
        """Test get() refreshes the idle timer"""
        session = HttpSession()
        self.store.put(session)
        self.clock.now += 40
        self.assertIsNotNone(self.store.get(session.id))
        self.clock.now += 40
        self.assertIs(self.store.get(session.id), session)

    def test_invalidated_session_dropped(self):
        """Test invalidated sessions are not returned"""
        session = HttpSession()
        self.store.put(session)
        session.invalidate()
        self.assertIsNone(self.store.get(session.id))

    def test_max_entries_evicts_oldest(self):
        """Test the least recently accessed session is evicted"""
        sessions = []
        for _ in range(3):
            session = HttpSession()
            self.store.put(session)
            sessions.append(session)
            self.clock.now += 1

        self.store.get(sessions[0].id)
        self.clock.now += 1
        newest = HttpSession()
        self.store.put(newest)

        self.assertEqual(len(self.store), 3)
        self.assertIsNone(self.store.get(sessions[1].id))
        self.assertIs(self.store.get(sessions[0].id), sessions[0])
        self.assertIs(self.store.get(newest.id), newest)

    def test_remove(self):
        """Test explicit removal"""
        session = HttpSession()
        self.store.put(session)
        self.store.remove(session.id)
        self.assertIsNone(self.store.get(session.id))

    def test_invalid_settings(self):
        """Test constructor validation"""
        with self.assertRaises(ValueError):
            InMemorySessionStore(ttl=0)
        with self.assertRaises(ValueError):
            InMemorySessionStore(max_entries=0)

    def test_no_ttl(self):
        """Test ttl=None keeps sessions indefinitely"""
        store = InMemorySessionStore(ttl=None, clock=self.clock)
        session = HttpSession()
        store.put(session)
        self.clock.now += 10 ** 6
        self.assertIs(store.get(session.id), session)

    def test_concurrent_puts(self):
        """Test puts from many threads are all kept"""
        store = InMemorySessionStore(max_entries=1000)
        sessions = [HttpSession() for _ in range(200)]

        def worker(chunk):
            for session in chunk:
                store.put(session)

        threads = [threading.Thread(target=worker, args=(sessions[i::4],)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(store), 200)
        for session in sessions:
            self.assertIs(store.get(session.id), session)


if __name__ == '__main__':
    unittest.main()
