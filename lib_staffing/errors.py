"""Error types raised by the staffing analytics core."""

from __future__ import annotations


class ProfileValidationError(ValueError):
    """A TeamProfile failed the validity check and cannot be analysed."""


class UpstreamScoringError(RuntimeError):
    """The remote match-scoring service was unreachable or errored."""
