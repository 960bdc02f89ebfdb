from typing import Mapping, Optional

from agroplan.models.farming_plan import Language, LocalizedText

NEUTRAL_LANGUAGE = Language.EN

_LANGUAGE_ALIASES = {
    "en": Language.EN,
    "hi": Language.HI,
    "hn": Language.HI,
    "bn": Language.BN,
}


def normalize_language(language: Optional[str]) -> Language:
    """Coerce any language code to a supported one. Unknown codes map to English."""
    if isinstance(language, Language):
        return language
    raw = (language or "").strip().lower()
    return _LANGUAGE_ALIASES.get(raw, NEUTRAL_LANGUAGE)


def _entry(text: LocalizedText, language: Language) -> Optional[str]:
    value = getattr(text, language.value, None)
    if value and value.strip():
        return value
    return None


def resolve(text: Optional[LocalizedText], language: Optional[str]) -> Optional[str]:
    """Requested language, then English, then whichever entry is populated."""
    if text is None:
        return None
    lang = normalize_language(language)
    for candidate in (lang, NEUTRAL_LANGUAGE, *Language):
        value = _entry(text, candidate)
        if value:
            return value
    return None


def resolve_with_heuristic_fallback(
    text: Optional[LocalizedText],
    neutral_key: Optional[str],
    language: Optional[str],
    phrases: Mapping[str, LocalizedText],
) -> Optional[str]:
    """
    Resolve localized text, falling back to the canned phrase table.

    Older plans only store the neutral English phrase; the phrase table
    supplies its translation. When neither has an entry the neutral phrase
    is returned verbatim, or None when there is no phrase at all.
    """
    resolved = resolve(text, language)
    if resolved:
        return resolved
    if not neutral_key:
        return None
    return resolve(phrases.get(neutral_key), language) or neutral_key
