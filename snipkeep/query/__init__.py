"""Filtering over in-memory snippet collections."""

from .filters import filter_by_language, filter_by_tag, filter_in_date_range, filter_snippets

__all__ = ["filter_by_language", "filter_by_tag", "filter_in_date_range", "filter_snippets"]
