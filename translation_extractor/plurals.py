"""Cardinal plural categories per language, from Babel's CLDR data."""
from __future__ import annotations

from typing import Dict, Iterable, List

from babel import Locale, UnknownLocaleError

# CLDR order; "other" is always present
CATEGORY_ORDER = ("zero", "one", "two", "few", "many", "other")
DEFAULT_CATEGORIES = ["other"]


def categories_for(language: str) -> List[str]:
    """Return the ordered plural categories of ``language``.

    Unknown or malformed tags fall back to ``["other"]``.
    """
    try:
        locale = Locale.parse(str(language).replace("-", "_"))
    except (UnknownLocaleError, ValueError, TypeError):
        return list(DEFAULT_CATEGORIES)
    tags = set(locale.plural_form.tags) | {"other"}
    return [category for category in CATEGORY_ORDER if category in tags]


def plural_categories(languages: Iterable[str]) -> Dict[str, List[str]]:
    return {language: categories_for(language) for language in languages}
