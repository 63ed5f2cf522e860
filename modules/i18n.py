"""
Internationalization (i18n) Module

Translates operator-facing messages (errors, confirmations) returned by the
JSON endpoints.

Supported languages:
- English (en)
- Arabic (ar)

Usage in Python:
    from modules.i18n import translate
    message = translate('messages.basket_cleared', lang='ar')
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional

from logging_config import get_logger

logger = get_logger(__name__)

# Supported languages
SUPPORTED_LANGUAGES = {
    'en': {'name': 'English', 'direction': 'ltr'},
    'ar': {'name': 'العربية', 'direction': 'rtl'},
}

DEFAULT_LANGUAGE = 'en'

# Translation cache
_translations: Dict[str, Dict[str, Any]] = {}


class I18nManager:
    """Manages internationalization and translation loading."""

    def __init__(self, translations_dir: Optional[Path] = None):
        """
        Initialize i18n manager.

        Args:
            translations_dir: Path to translations directory.
                            Defaults to ./translations in the project root.
        """
        if translations_dir is None:
            translations_dir = Path(__file__).parent.parent / 'translations'

        self.translations_dir = translations_dir
        self._load_all_translations()

    def _load_all_translations(self) -> None:
        """Load all translation files from translations directory."""
        if not self.translations_dir.exists():
            logger.warning(f"Translations directory not found: {self.translations_dir}")
            return

        for lang_code in SUPPORTED_LANGUAGES.keys():
            self._load_translation(lang_code)

    def _load_translation(self, lang_code: str) -> None:
        """Load translation file for a specific language."""
        translation_file = self.translations_dir / f'{lang_code}.json'

        if not translation_file.exists():
            logger.warning(
                f"Translation file not found: {translation_file}. "
                f"Using empty translations for {lang_code}."
            )
            _translations[lang_code] = {}
            return

        try:
            with open(translation_file, 'r', encoding='utf-8') as f:
                _translations[lang_code] = json.load(f)
            logger.info(
                f"Loaded {len(_translations[lang_code])} translation sections "
                f"for language: {lang_code}"
            )
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load translation file {translation_file}: {e}")
            _translations[lang_code] = {}

    def lookup(self, key: str, lang: str = DEFAULT_LANGUAGE) -> Optional[str]:
        """Raw translation for a dotted key, or None."""
        if lang not in _translations:
            lang = DEFAULT_LANGUAGE

        value: Any = _translations.get(lang, {})
        for k in key.split('.'):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return None
        return value if isinstance(value, str) else None

    def get_translation(self, key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
        """
        Get translated string for a key.

        Supports nested keys using dot notation and variable substitution:
        translate('messages.added', drug_name='Amoxicillin').

        Returns:
            Translated string, or key if translation not found
        """
        value = self.lookup(key, lang)
        if value is None:
            logger.debug(f"Translation key not found: {key} (lang: {lang})")
            return key

        if kwargs:
            try:
                return value.format(**kwargs)
            except KeyError as e:
                logger.warning(f"Missing variable in translation: {e} (key: {key}, lang: {lang})")
                return value
        return value

    def get_all_languages(self) -> Dict[str, Dict[str, str]]:
        return SUPPORTED_LANGUAGES


# Global i18n manager instance
i18n_manager = I18nManager()


def translate(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Translate a key to the specified language.

    Example:
        >>> translate('messages.basket_cleared', lang='en')
        'Basket cleared successfully'
    """
    return i18n_manager.get_translation(key, lang, **kwargs)


def translate_error(error, lang: str = DEFAULT_LANGUAGE) -> str:
    """
    Translate a LabelPrintError using its code ("errors.<code>").

    List-valued details are joined with ", " before substitution. Falls back
    to the exception's own English message.
    """
    template = i18n_manager.lookup(f"errors.{error.code}", lang)
    if template is None:
        return error.message

    values = {
        name: ", ".join(str(v) for v in value) if isinstance(value, (list, tuple)) else value
        for name, value in error.details.items()
    }
    try:
        return template.format(**values)
    except (KeyError, IndexError):
        return error.message


def get_supported_languages() -> Dict[str, Dict[str, str]]:
    return i18n_manager.get_all_languages()
