"""
Module: ordering.collation

Purpose:
    Locale-aware sort keys for resident names and apartment codes.
    Python's default string ordering compares code points, which puts
    "Ágúst" after "Örn" and "Þóra" before "Ásta". Names must sort the way
    a printed directory in the deployment locale expects.

Key Functions:
    - collation_key(): Sort key for a string in a given locale
    - supported_locales(): Locales with a dedicated alphabet

Algorithm:
    Three-level key, compared level by level:
    1. Primary: letter positions in the locale alphabet (accented letters
       that are separate letters in the locale get their own position;
       other accents fold onto the base letter)
    2. Secondary: accents folded at level 1
    3. Tertiary: case (lowercase first)

    Characters are classed as space < punctuation < digit < letter < other,
    so "Anna B" sorts before "Anna Björk" and digits before letters.

Dependencies:
    - unicodedata (std)

Used By:
    - ordering.sorting: sort_by_name, sort_by_priority, apartment_sort_key
"""

from __future__ import annotations

import unicodedata
from functools import lru_cache
from typing import Tuple

DEFAULT_LOCALE = "is"

# Icelandic alphabet including the foreign letters c, q, w, with the Nordic
# letters that follow z in Icelandic dictionaries.
_ALPHABETS: dict[str, str] = {
    "is": "aábcdðeéfghiíjklmnoópqrstuúvwxyýzþæäöøå",
    "da": "abcdefghijklmnopqrstuvwxyzæøå",
    "nb": "abcdefghijklmnopqrstuvwxyzæøå",
    "sv": "abcdefghijklmnopqrstuvwxyzåäö",
    "root": "abcdefghijklmnopqrstuvwxyz",
}

# Letters without a canonical decomposition that still need a base letter
_FOLDS: dict[str, str] = {
    "ð": "d",
    "þ": "th",
    "æ": "ae",
    "ø": "o",
    "ß": "ss",
    "đ": "d",
    "ł": "l",
}

_SPACE, _PUNCT, _DIGIT, _LETTER, _OTHER = range(5)

CollationKey = Tuple[tuple, tuple, tuple]


def supported_locales() -> tuple[str, ...]:
    """Locales with a dedicated alphabet; anything else uses ``root``."""
    return tuple(_ALPHABETS)


def _normalise_locale(locale: str) -> str:
    base = (locale or "").replace("-", "_").split("_")[0].lower()
    return base if base in _ALPHABETS else "root"


@lru_cache(maxsize=None)
def _alphabet_index(locale: str) -> dict[str, int]:
    return {ch: i for i, ch in enumerate(_ALPHABETS[locale])}


def _char_weights(ch: str, index: dict[str, int]) -> list[tuple[tuple[int, int], int]]:
    """
    Return (primary, secondary) weight pairs for one lowercase character.

    A character can expand to several primaries (``æ`` in ``root`` folds
    to ``a`` + ``e``).
    """
    if ch in index:
        return [((_LETTER, index[ch]), 0)]
    if ch.isspace():
        return [((_SPACE, 0), 0)]
    if ch.isdigit():
        return [((_DIGIT, unicodedata.digit(ch, 0)), 0)]

    folded = _FOLDS.get(ch)
    if folded is None:
        decomposed = unicodedata.normalize("NFKD", ch)
        folded = "".join(c for c in decomposed if not unicodedata.combining(c))
    if folded and folded != ch and all(c in index for c in folded):
        return [((_LETTER, index[c]), 1) for c in folded]

    if unicodedata.category(ch).startswith(("P", "S")):
        return [((_PUNCT, ord(ch)), 0)]
    return [((_OTHER, ord(ch)), 0)]


def collation_key(text: str, locale: str = DEFAULT_LOCALE) -> CollationKey:
    """
    Build a sort key for ``text`` in ``locale``.

    Args:
        text: String to sort (None-safe callers pass "" for missing values)
        locale: Locale tag such as "is", "is-IS" or "en"; unknown locales
            fall back to the ``root`` alphabet

    Returns:
        Tuple of (primary, secondary, tertiary) weight tuples

    Example:
        >>> sorted(["Jón", "Guðrún", "Anna"], key=collation_key)
        ['Anna', 'Guðrún', 'Jón']
    """
    index = _alphabet_index(_normalise_locale(locale))
    composed = unicodedata.normalize("NFC", text or "")

    primary: list[tuple[int, int]] = []
    secondary: list[int] = []
    tertiary: list[int] = []
    for ch in composed:
        lower = ch.lower()
        # lower() can expand ("İ" -> "i̇"); weigh each resulting character
        for lc in lower:
            for weight, accent in _char_weights(lc, index):
                primary.append(weight)
                secondary.append(accent)
                tertiary.append(0 if ch == lower else 1)
    return tuple(primary), tuple(secondary), tuple(tertiary)
