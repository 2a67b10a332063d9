"""
Document identifiers derived from human-entered names.

    >>> generate_identifier("Sıcak İçecekler")
    'sicak-icecekler'
    >>> generate_identifier("Tatlılar")
    'tatlilar'
"""

import re
from typing import Iterable

# Applied after lowercasing. U+0307 is the combining dot that "İ".lower() leaves behind.
_TRANSLITERATION = str.maketrans({
    "ş": "s",
    "ğ": "g",
    "ü": "u",
    "ç": "c",
    "ı": "i",
    "ö": "o",
    "â": "a",
    "î": "i",
    "û": "u",
    "\u0307": None,
})

_DISALLOWED = re.compile(r"[^a-z0-9]")


def generate_identifier(name: str) -> str:
    """
    Derive a lowercase, ASCII, hyphen-separated identifier from a display name.

    Consecutive hyphens are kept and nothing is trimmed, so the result is
    stable for a given name. May return an empty string for an empty name.
    """
    return _DISALLOWED.sub("-", name.lower().translate(_TRANSLITERATION))


def disambiguate(identifier: str, taken: Iterable[str]) -> str:
    """
    Return identifier, or the first free "identifier-N" (N >= 2) if it is taken.

    Args:
        identifier: Candidate produced by generate_identifier()
        taken: Identifiers already used in the same collection
    """
    taken = set(taken)
    if identifier not in taken:
        return identifier
    suffix = 2
    while f"{identifier}-{suffix}" in taken:
        suffix += 1
    return f"{identifier}-{suffix}"
