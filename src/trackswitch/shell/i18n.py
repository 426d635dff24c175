"""Localization service.

A ``Localizer`` is built once and handed to whatever renders text; nothing
here keeps module-level language state.
"""

from importlib import resources
from typing import Any, Iterable, Optional

import yaml

from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)

BUNDLE_PACKAGE = "trackswitch.locales"
DEFAULT_LANGUAGE = "zh"


def load_bundle(language: str) -> dict[str, Any]:
    """Load a packaged translation bundle.

    Raises:
        FileNotFoundError: If no bundle exists for ``language``
    """
    resource = resources.files(BUNDLE_PACKAGE).joinpath(f"{language}.yaml")
    if not resource.is_file():
        raise FileNotFoundError(f"No translation bundle for language: {language}")
    with resource.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _lookup(bundle: dict[str, Any], key: str) -> Optional[str]:
    node: Any = bundle
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


class Localizer:
    """Translate dotted message keys into the current language."""

    def __init__(
        self,
        bundles: dict[str, dict[str, Any]],
        language: str = DEFAULT_LANGUAGE,
        fallback_language: str = DEFAULT_LANGUAGE,
    ):
        """Initialize localizer.

        Args:
            bundles: Translation trees keyed by language code
            language: Language used for lookups
            fallback_language: Language consulted when a key is missing

        Raises:
            ValueError: If either language has no bundle
        """
        for code in (language, fallback_language):
            if code not in bundles:
                raise ValueError(f"Unsupported language: {code}")
        self._bundles = bundles
        self._language = language
        self.fallback_language = fallback_language

    @classmethod
    def load(
        cls,
        language: str = DEFAULT_LANGUAGE,
        fallback_language: str = DEFAULT_LANGUAGE,
        languages: Iterable[str] = ("en", "zh"),
    ) -> "Localizer":
        """Build a localizer from the packaged bundles."""
        codes = set(languages) | {language, fallback_language}
        bundles = {code: load_bundle(code) for code in codes}
        return cls(bundles, language, fallback_language)

    @property
    def language(self) -> str:
        return self._language

    @property
    def available_languages(self) -> list[str]:
        return sorted(self._bundles)

    def set_language(self, language: str) -> None:
        """Switch the current language.

        Raises:
            ValueError: If no bundle is loaded for ``language``
        """
        if language not in self._bundles:
            raise ValueError(f"Unsupported language: {language}")
        self._language = language

    def translate(self, key: str, **params: Any) -> str:
        """Return the message for ``key`` with ``params`` interpolated.

        Missing keys fall back to the fallback language, then to the key itself.
        """
        template = _lookup(self._bundles[self._language], key)
        if template is None:
            template = _lookup(self._bundles[self.fallback_language], key)
        if template is None:
            logger.warning("Missing translation", key=key, language=self._language)
            return key

        try:
            return template.format(**params)
        except (KeyError, IndexError) as e:
            logger.warning("Bad translation parameters", key=key, error=str(e))
            return template

    t = translate
