from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .language import DEFAULT_LANGUAGES, LanguageTable, load_languages
from .render.highlight import DEFAULT_THEME

logger = logging.getLogger("snipkeep")

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(slots=True)
class Settings:
    """Runtime configuration, read from ``SNIPKEEP_*`` environment variables."""

    redis_url: str = "redis://127.0.0.1:6379/0"
    key_prefix: str = "snipkeep:"
    theme: str = DEFAULT_THEME
    languages_file: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        log_level = os.getenv("SNIPKEEP_LOG_LEVEL", "INFO").upper()
        if log_level not in _LOG_LEVELS:
            logger.warning("Invalid log level for SNIPKEEP_LOG_LEVEL: %s", log_level)
            log_level = "INFO"

        return cls(
            redis_url=os.getenv("SNIPKEEP_REDIS_URL", "redis://127.0.0.1:6379/0"),
            key_prefix=os.getenv("SNIPKEEP_KEY_PREFIX", "snipkeep:"),
            theme=os.getenv("SNIPKEEP_THEME") or DEFAULT_THEME,
            languages_file=os.getenv("SNIPKEEP_LANGUAGES_FILE") or None,
            log_level=log_level,
        )

    def load_languages(self) -> LanguageTable:
        """The built-in table, extended by ``languages_file`` when it loads."""
        if not self.languages_file:
            return DEFAULT_LANGUAGES
        try:
            return load_languages(self.languages_file)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring language table %s: %s", self.languages_file, exc)
            return DEFAULT_LANGUAGES


__all__ = ["Settings"]
