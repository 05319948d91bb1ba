"""Errors raised by the entity extraction core.

All of them are recoverable by the caller: the core never logs, retries or
exits, and no partial entity model is handed back when one is raised.
"""

from __future__ import annotations


class EntityError(ValueError):
    """Base exception for entity extraction errors."""
    pass


class MalformedTree(EntityError):
    """Raised when a parser tree violates containment or ordering."""
    pass


class InvalidBounds(EntityError):
    """Raised when a link interval is out of range, empty, unsorted or overlapping."""
    pass


class RecursionLimitExceeded(EntityError):
    """Raised when a tree is nested deeper than the configured limit."""

    def __init__(self, max_depth: int):
        super().__init__(f"tree nesting exceeds max depth {max_depth}")
        self.max_depth = max_depth
