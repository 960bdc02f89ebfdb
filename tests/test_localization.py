import pytest

from agroplan.models.farming_plan import Language, LocalizedText
from agroplan.prompts.heuristic_phrases import NOTES_PHRASES, TITLE_PHRASES
from agroplan.services.localization import (
    normalize_language,
    resolve,
    resolve_with_heuristic_fallback,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("en", Language.EN),
        ("hi", Language.HI),
        ("hn", Language.HI),
        ("HI", Language.HI),
        ("bn", Language.BN),
        ("fr", Language.EN),
        ("", Language.EN),
        (None, Language.EN),
    ],
)
def test_normalize_language(code, expected):
    assert normalize_language(code) == expected


def test_resolve_prefers_requested_language():
    text = LocalizedText(en="Water", hi="पानी", bn="জল")
    assert resolve(text, "bn") == "জল"
    assert resolve(text, "hi") == "पानी"


def test_resolve_falls_back_to_english_then_any_entry():
    assert resolve(LocalizedText(en="Water", hi="  "), "hi") == "Water"
    assert resolve(LocalizedText(bn="জল"), "hi") == "জল"
    assert resolve(LocalizedText(), "en") is None
    assert resolve(None, "en") is None


def test_heuristic_fallback_uses_phrase_table():
    title = "Top dress nitrogen (tillering stage)"
    resolved = resolve_with_heuristic_fallback(None, title, "bn", TITLE_PHRASES)
    assert resolved == TITLE_PHRASES[title].bn
    assert resolved != title


def test_heuristic_fallback_returns_neutral_phrase_when_unknown():
    assert resolve_with_heuristic_fallback(None, "Repair fence", "hi", TITLE_PHRASES) == "Repair fence"


def test_heuristic_fallback_keeps_stored_translation():
    stored = LocalizedText(en="Spray neem", hi="नीम का छिड़काव")
    assert resolve_with_heuristic_fallback(stored, "Spray neem", "hi", NOTES_PHRASES) == "नीम का छिड़काव"


def test_heuristic_fallback_without_any_text():
    assert resolve_with_heuristic_fallback(None, None, "en", NOTES_PHRASES) is None
