"""Exception hierarchy for reconciliation failures."""

from __future__ import annotations

from typing import Mapping, Optional


class ReconcileError(Exception):
    """Base class for every error raised by ltr_reconcile."""


class MalformedInputError(ReconcileError):
    """Input annotation cannot be used for scoring or grouping."""

    def __init__(self, message: str, *, line_no: Optional[int] = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


class InvariantViolation(ReconcileError):
    """The resolver reached a state its decision rule cannot produce."""

    def __init__(
        self,
        message: str,
        *,
        scores: Optional[Mapping] = None,
        similarities: Optional[Mapping] = None,
    ) -> None:
        super().__init__(message)
        self.scores = dict(scores or {})
        self.similarities = dict(similarities or {})


class MissingRegionError(InvariantViolation):
    """A region expected in one of the owning sets was not found."""
