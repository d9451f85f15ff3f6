# app/i18n/translator.py
"""
Translation lookup for CareConnect24.

Supports German (de, default) and Slovenian (sl). Locale files are JSON
documents shipped next to this module; keys are dotted paths into them,
e.g. "lead.customer.success".
"""

import json
import logging
from pathlib import Path
from typing import Any, Literal, get_args

from fastapi import Request

from app.core.config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)

Language = Literal["de", "sl"]
SUPPORTED_LANGUAGES: tuple[str, ...] = get_args(Language)

LOCALES_DIR = Path(__file__).resolve().parent / "locales"


class Translator:
    """
    Loads locale mappings once per language and resolves dotted keys.

    A language that cannot be loaded (unsupported, missing file, bad JSON)
    gets the default language's mapping instead; if that fails as well the
    mapping is empty and every lookup returns the key itself.
    """

    def __init__(
        self,
        locales_dir: Path = LOCALES_DIR,
        default_language: str | None = None,
    ):
        self.locales_dir = locales_dir
        self.default_language = default_language or settings.DEFAULT_LANGUAGE
        self._cache: dict[str, dict[str, Any]] = {}

    def load(self, language: str) -> dict[str, Any]:
        """
        Return the mapping for `language`, loading it on first use.

        Unsupported languages resolve to the default language; only
        supported languages are ever cached.
        """
        if language not in SUPPORTED_LANGUAGES:
            language = self.default_language

        cached = self._cache.get(language)
        if cached is not None:
            return cached

        try:
            mapping = self._read(language)
        except (OSError, ValueError) as exc:
            logger.error("Error loading translations for %s: %s", language, exc)
            if language != self.default_language:
                mapping = self.load(self.default_language)
            else:
                mapping = {}

        if language in SUPPORTED_LANGUAGES:
            self._cache[language] = mapping
        return mapping

    def resolve(self, key: str, language: str | None = None) -> str:
        """
        Look up a dotted key. Never raises; unknown keys come back verbatim.
        """
        language = language or self.default_language
        value: Any = self.load(language)

        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                logger.warning("Translation key not found: %s (lang: %s)", key, language)
                return key

        return value if isinstance(value, str) else key

    def is_loaded(self, language: str) -> bool:
        return language in self._cache

    def _read(self, language: str) -> dict[str, Any]:
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        path = self.locales_dir / f"{language}.json"
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{path.name} is not a JSON object")
        return data


class LanguageContext:
    """
    The process-wide language selection.

    Created once at startup and handed to whoever needs it; the choice is
    written to a small JSON state file so it survives restarts.
    """

    def __init__(self, translator: Translator, state_file: Path | str | None = None):
        self.translator = translator
        self.state_file = Path(state_file or settings.LANGUAGE_STATE_FILE)
        self.language: str = self._read_stored() or translator.default_language
        self.translator.load(self.language)

    def set_language(self, language: str) -> str:
        """
        Switch the current language and persist it.

        Raises:
            ValueError: if `language` is not supported.
        """
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language
        self._write_stored(language)
        self.translator.load(language)
        return language

    def t(self, key: str, language: str | None = None) -> str:
        return self.translator.resolve(key, language or self.language)

    def _read_stored(self) -> str | None:
        try:
            with self.state_file.open(encoding="utf-8") as fh:
                stored = json.load(fh).get("language")
        except (OSError, ValueError, AttributeError):
            return None
        if stored in SUPPORTED_LANGUAGES:
            return stored
        return None

    def _write_stored(self, language: str) -> None:
        try:
            self.state_file.write_text(json.dumps({"language": language}), encoding="utf-8")
        except OSError as exc:
            # Selection still applies for this process.
            logger.warning("Could not persist language to %s: %s", self.state_file, exc)


def get_language_context(request: Request) -> LanguageContext:
    """FastAPI dependency: the LanguageContext created at startup."""
    return request.app.state.language_context
