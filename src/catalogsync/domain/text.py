"""Text normalisation shared by slugs, artist matching and credit extraction."""

from __future__ import annotations

import re
import unicodedata

_THE_PREFIX = re.compile(r"^the\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(value: object) -> str:
    """Comparison key for artist names.

    ``"Ol' Dirty Bastard"`` and ``"OL DIRTY BASTARD"`` share a key, as do
    ``"The LOX"`` and ``"lox"``. The empty string means "no usable name".
    """

    text = strip_diacritics(str(value or "").lower().strip())
    text = _THE_PREFIX.sub("", text)
    text = text.replace("&", "and")
    text = _NON_ALNUM.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def slugify(value: str) -> str:
    """URL-safe slug: letters and digits of any script, hyphen separated."""

    decomposed = unicodedata.normalize("NFKD", value.lower())
    kept = "".join(
        ch
        for ch in decomposed
        if ch == "-" or ch.isspace() or unicodedata.category(ch)[0] in {"L", "N"}
    )
    return _WHITESPACE.sub("-", kept.strip())


def quoted_field(field: str, value: str) -> str:
    """Lucene field clause for provider search, e.g. ``artist:"Ma\\"$e"``."""

    escaped = value.strip().replace("\\", "\\\\").replace('"', '\\"')
    return f'{field}:"{escaped}"'
