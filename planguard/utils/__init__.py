"""Shared utility functions and helpers"""
from planguard.utils.responses import format_success_response, get_or_404, not_found

__all__ = [
    "format_success_response",
    "get_or_404",
    "not_found",
]
