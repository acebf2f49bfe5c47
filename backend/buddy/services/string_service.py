# /buddy/services/string_service.py

import logging
from typing import Dict, Optional
from buddy.config import strings as default_strings
from buddy.config.settings import settings

logger = logging.getLogger(__name__)


def normalize_language(language: Optional[str]) -> str:
    """Maps any caller-supplied language value onto a supported one."""
    if isinstance(language, str):
        candidate = language.strip().lower()
        if candidate in default_strings.SUPPORTED_LANGUAGES:
            return candidate
    return settings.default_language


class StringService:
    """Renders localized message templates. Pure lookups, no I/O."""

    def __init__(self, messages: Optional[Dict[str, Dict[str, str]]] = None):
        self._messages: Dict[str, Dict[str, str]] = messages or default_strings.MESSAGES
        logger.debug("StringService initialized with %d templates.", len(self._messages))

    def get_template(self, key: str, language: Optional[str] = None) -> str:
        variants = self._messages[key]
        lang = normalize_language(language)
        if lang in variants:
            return variants[lang]
        return variants[default_strings.DEFAULT_LANGUAGE]

    def render(self, key: str, language: Optional[str] = None, **kwargs) -> str:
        """Formats the template for `key` in `language`, falling back to hinglish."""
        template = self.get_template(key, language)
        return template.format(**kwargs) if kwargs else template

    def has(self, key: str) -> bool:
        return key in self._messages


# Globally accessible instance
string_service = StringService()
