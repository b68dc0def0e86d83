"""Message catalog for localized error messages."""

import json
from functools import lru_cache
from pathlib import Path

from .config import get_settings_instance

TRANSLATIONS_DIR = Path(__file__).resolve().parent.parent / "translations"


class I18nService:
    """Resolves dot-notation message keys against per-locale JSON catalogs."""

    def __init__(self, translations_dir: Path = TRANSLATIONS_DIR, default_locale: str = "en"):
        self.translations_dir = translations_dir
        self.default_locale = default_locale
        self.translations: dict[str, dict] = {}
        self._load_translations()

    def _load_translations(self) -> None:
        if not self.translations_dir.is_dir():
            return
        for lang_dir in sorted(self.translations_dir.iterdir()):
            lang_file = lang_dir / "messages.json"
            if lang_file.is_file():
                with open(lang_file, encoding="utf-8") as f:
                    self.translations[lang_dir.name] = json.load(f)

    def t(self, message_key: str, /, lang: str | None = None, **kwargs) -> str:
        """Translate a dot-notation key.

        Args:
            message_key: Dot-notation key (e.g., 'errors.api.settings.problemFindingSetting')
            lang: Language code; defaults to the configured locale
            **kwargs: Variables to interpolate into ``{{name}}`` placeholders

        Returns:
            Translated string, or the key itself if no translation exists

        """
        lang = lang or self.default_locale
        value = self._get_translation(message_key, lang)
        if value is None and lang != "en":
            value = self._get_translation(message_key, "en")
        if value is None:
            return message_key

        for param_key, param_value in kwargs.items():
            value = value.replace(f"{{{{{param_key}}}}}", str(param_value))
        return value

    def _get_translation(self, key: str, lang: str) -> str | None:
        value = self.translations.get(lang, {})
        for part in key.split("."):
            if not isinstance(value, dict):
                return None
            value = value.get(part)
            if value is None:
                return None
        return value if isinstance(value, str) else None


@lru_cache
def get_i18n_service() -> I18nService:
    """Get cached i18n service instance."""
    return I18nService(default_locale=get_settings_instance().default_locale)


def t(message_key: str, /, **kwargs) -> str:
    """Translate ``message_key`` with the process-wide catalog."""
    return get_i18n_service().t(message_key, **kwargs)
