"""Snippet record model and its lifecycle helpers."""

from .model import BOX, Snippet, as_utc, split_tags, utcnow

__all__ = ["BOX", "Snippet", "as_utc", "split_tags", "utcnow"]
