"""
Error types raised by the ingestion pipeline.
"""
from __future__ import annotations


class RecordRejected(ValueError):
    """A raw record failed amount or date parsing. Never leaves the normalizer."""


class SourceLoadFailed(RuntimeError):
    """A non-optional source could not be read or parsed."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load source '{source}': {reason}")
