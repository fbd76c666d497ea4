"""
Decoders for URL-encoded strings and Cookie header values.

All functions here are pure: they take a string and return a new dict,
with duplicate keys resolved last-write-wins.
"""

import re
from typing import Dict
from urllib.parse import unquote_plus

from .config import MALFORMED_FAIL, MALFORMED_SKIP
from .errors import EncodingError, MalformedParameterError

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def percent_decode(text: str, encoding: str = "utf-8") -> str:
    """Decode percent-escapes and '+' as space.

    Args:
        text: Encoded string
        encoding: Charset the escaped octets are decoded with

    Raises:
        EncodingError: On an incomplete escape, octets that are not valid
            in ``encoding``, or an unsupported encoding
    """
    match = _BAD_ESCAPE.search(text)
    if match:
        raise EncodingError(f"Incomplete escape sequence at index {match.start()}")
    try:
        return unquote_plus(text, encoding=encoding, errors="strict")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Invalid {encoding} sequence: {e.reason}")
    except LookupError:
        raise EncodingError(f"Unsupported encoding: {encoding}")


def parse_query_string(text: str,
                       decode: bool = False,
                       encoding: str = "utf-8",
                       malformed: str = MALFORMED_SKIP) -> Dict[str, str]:
    """Split ``key=value&key=value`` into a dict.

    Each token is split at its first '='. Empty tokens are ignored.
    A non-empty token without '=' is skipped, or raises
    MalformedParameterError when ``malformed`` is "fail".

    Args:
        text: Encoded pairs without a leading '?'
        decode: Percent-decode keys and values
        encoding: Charset used when decoding
        malformed: "skip" or "fail"
    """
    params: Dict[str, str] = {}
    if not text:
        return params

    for token in text.split("&"):
        if not token:
            continue
        if "=" not in token:
            if malformed == MALFORMED_FAIL:
                raise MalformedParameterError(f"Parameter without '=': {token!r}")
            continue

        key, value = token.split("=", 1)
        if decode:
            key = percent_decode(key, encoding)
            value = percent_decode(value, encoding)
        params[key] = value

    return params


def parse_form_body(body: str,
                    encoding: str = "utf-8",
                    malformed: str = MALFORMED_SKIP) -> Dict[str, str]:
    """Decode an application/x-www-form-urlencoded body."""
    return parse_query_string(body, decode=True, encoding=encoding, malformed=malformed)


def parse_cookies(header_value: str) -> Dict[str, str]:
    """Split a Cookie header value into a dict.

    Pairs are separated by ';' with optional surrounding whitespace.
    Pairs without '=' or with an empty name are ignored. Values are
    returned as sent.
    """
    cookies: Dict[str, str] = {}
    for pair in header_value.split(";"):
        pair = pair.strip()
        if "=" not in pair:
            continue
        name, value = pair.split("=", 1)
        name = name.strip()
        if not name:
            continue
        cookies[name] = value.strip()
    return cookies
