"""Security and validation module.

Contains the SELECT-only sanitization policy.
"""

from .sanitizer import SELECT_ONLY_MESSAGE, check_select_only, is_select_statement, strip_terminator

__all__ = [
    "SELECT_ONLY_MESSAGE",
    "check_select_only",
    "is_select_statement",
    "strip_terminator",
]
