"""
Optional features layered on the parser
"""

from .metrics import record_error, record_parsed, record_session_created, render_latest

__all__ = ["record_error", "record_parsed", "record_session_created", "render_latest"]
