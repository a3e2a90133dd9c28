"""
errors.py
=========
Exception types raised by the case progression engine.

Only conditions the caller must react to are exceptions. An incomplete
accusation is a normal outcome and is reported through DeductionResult
instead (see deduction.py).
"""

from __future__ import annotations


class CaseError(Exception):
    """Base class for every engine error."""


class NotFound(CaseError):
    """
    A clue, suspect, question, or case id is absent from the catalog.

    Attributes:
        kind:    What was looked up ("clue", "suspect", "question", "case", ...).
        item_id: The id that could not be resolved.
    """

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} not found: {item_id!r}")
        self.kind    = kind
        self.item_id = item_id


class PersistenceUnavailable(CaseError):
    """The storage medium failed to read, write, or decode a save blob."""


class CaseLoadError(CaseError):
    """A case file exists but could not be parsed or validated."""
