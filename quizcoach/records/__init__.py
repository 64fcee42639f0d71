"""Attempt history persistence."""

from .record_store import AttemptRecord, RecordStore

__all__ = ["AttemptRecord", "RecordStore"]
