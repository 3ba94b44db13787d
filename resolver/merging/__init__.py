"""Merging of validated candidates into canonical records."""

from .service import MERGEABLE_FIELDS, RecordMerger, is_present

__all__ = ["MERGEABLE_FIELDS", "RecordMerger", "is_present"]
