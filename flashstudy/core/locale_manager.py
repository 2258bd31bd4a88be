# core/locale_manager.py

import json
from typing import Dict, Any
import importlib.resources as pkg_resources
from nicegui import app
from flashstudy.core.log_manager import logger

I18N_PACKAGE_REF = pkg_resources.files('flashstudy') / 'i18n'

FALLBACK_LOCALE = 'en'

class LocaleManager:
    """
    Resolves UI strings from flashstudy/i18n/<locale>.json for the locale
    stored in the NiceGUI user session ('ui_language').
    """

    def __init__(self):
        self._translations: Dict[str, Dict[str, str]] = {}
        for path in I18N_PACKAGE_REF.iterdir():
            if path.name.endswith('.json'):
                self._translations[path.name[:-len('.json')]] = self._load(path)
        logger.info(f"Locales loaded: {list(self._translations)}")

    def _load(self, path) -> Dict[str, str]:
        try:
            with path.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid translation file '{path.name}': {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Translation file '{path.name}' must hold a JSON object.")
            return {}
        return data

    def T(self, key: str, use_fallback=False, **kwargs: Any) -> str:
        """
        Translates `key` for the current user's locale, falling back to
        English and finally to '!! key !!'. `use_fallback` skips the session
        lookup for calls made outside a page context.
        """
        locale = FALLBACK_LOCALE if use_fallback else app.storage.user.get('ui_language', FALLBACK_LOCALE)

        translated_string = self._translations.get(locale, {}).get(key)
        if translated_string is None:
            translated_string = self._translations.get(FALLBACK_LOCALE, {}).get(key)
        if translated_string is None:
            logger.warning(f"Missing translation key '{key}'.")
            return f"!! {key} !!"

        if kwargs:
            try:
                return translated_string.format(**kwargs)
            except (KeyError, IndexError, ValueError) as e:
                logger.error(f"Formatting failed for key '{key}' in locale '{locale}': {e}")
        return translated_string

global_locale_manager = LocaleManager()

# Short alias for translation in UI files
T = global_locale_manager.T
