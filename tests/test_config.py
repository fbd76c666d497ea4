#!/usr/bin/env python3
"""
Test suite for parser configuration
"""
import unittest

from requestcore.core.config import SESSION_COOKIE_NAME, ParserConfig


class TestParserConfig(unittest.TestCase):
    def test_default_initialization(self):
        """Test config initializes with default values"""
        config = ParserConfig()
        self.assertEqual(config.encoding, "utf-8")
        self.assertEqual(config.max_line_size, 8192)
        self.assertEqual(config.max_headers, 100)
        self.assertEqual(config.max_body_size, 10485760)
        self.assertEqual(config.malformed_parameters, "skip")
        self.assertEqual(config.session_cookie_name, SESSION_COOKIE_NAME)
        self.assertEqual(config.read_timeout, 30.0)

    def test_custom_initialization(self):
        """Test config with custom values"""
        config = ParserConfig(
            encoding="latin-1",
            max_line_size=1024,
            max_headers=10,
            max_body_size=0,
            malformed_parameters="fail",
            session_cookie_name="sid",
            read_timeout=1.5,
        )
        self.assertEqual(config.encoding, "latin-1")
        self.assertEqual(config.max_body_size, 0)
        self.assertEqual(config.malformed_parameters, "fail")
        self.assertEqual(config.session_cookie_name, "sid")

    def test_invalid_values(self):
        """Test validation of each setting"""
        invalid = [
            {"encoding": "no-such-codec"},
            {"max_line_size": 0},
            {"max_headers": -1},
            {"max_body_size": -1},
            {"malformed_parameters": "ignore"},
            {"session_cookie_name": ""},
            {"read_timeout": 0},
        ]
        for kwargs in invalid:
            with self.subTest(**kwargs):
                with self.assertRaises(ValueError):
                    ParserConfig(**kwargs)

    def test_frozen(self):
        """Test config cannot be modified after creation"""
        config = ParserConfig()
        with self.assertRaises(AttributeError):
            config.max_headers = 1


if __name__ == '__main__':
    unittest.main()
