from __future__ import annotations

import string
from types import MappingProxyType
from typing import Mapping

Language = Mapping[str, str]

_GREEK = {
    "α": "a", "β": "b", "ψ": "c", "δ": "d", "ε": "e",
    "φ": "f", "γ": "g", "η": "h", "ι": "i", "ξ": "j",
    "κ": "k", "λ": "l", "μ": "m", "ν": "n", "ο": "o",
    "π": "p", "ρ": "r", "σ": "s", "τ": "t", "θ": "u",
    "ω": "v", "ς": "w", "χ": "x", "υ": "y", "ζ": "z",
}

# Two-letter romaji only: no sequence is contained in another.
_HIRAGANA = {
    "か": "ka", "き": "ki", "く": "ku", "け": "ke", "こ": "ko",
    "さ": "sa", "す": "su", "せ": "se", "そ": "so",
    "た": "ta", "て": "te", "と": "to",
    "な": "na", "に": "ni", "ぬ": "nu", "ね": "ne", "の": "no",
    "は": "ha", "ひ": "hi", "ふ": "fu", "へ": "he", "ほ": "ho",
    "ま": "ma", "み": "mi", "む": "mu", "め": "me", "も": "mo",
    "や": "ya", "ゆ": "yu", "よ": "yo",
    "ら": "ra", "り": "ri", "る": "ru", "れ": "re", "ろ": "ro",
    "わ": "wa",
    "が": "ga", "ぎ": "gi", "ぐ": "gu", "げ": "ge", "ご": "go",
    "ざ": "za", "じ": "ji", "ず": "zu", "ぜ": "ze", "ぞ": "zo",
    "だ": "da", "で": "de", "ど": "do",
    "ば": "ba", "び": "bi", "ぶ": "bu", "べ": "be", "ぼ": "bo",
    "ぱ": "pa", "ぴ": "pi", "ぷ": "pu", "ぺ": "pe", "ぽ": "po",
}

LANGUAGES: Mapping[str, Language] = MappingProxyType(
    {
        "english_lower": MappingProxyType({c: c for c in string.ascii_lowercase}),
        "english_upper": MappingProxyType({c: c.lower() for c in string.ascii_uppercase}),
        "greek": MappingProxyType(dict(_GREEK)),
        "hiragana": MappingProxyType(dict(_HIRAGANA)),
    }
)


def get_language(name: str) -> Language:
    try:
        return LANGUAGES[name]
    except KeyError:
        raise ValueError(
            f"Unknown language {name!r}; expected one of {sorted(LANGUAGES)}"
        ) from None
