"""
District slug normalization.

Free-text place names from geocoders or clients become topic-safe identifiers:
decompose Unicode, drop diacritics and any remaining non-ASCII, lowercase, collapse
every run of non-alphanumerics to a single `_`, trim `_` at both ends.

    >>> slugify("São Paulo!")
    'sao_paulo'

The pipeline is idempotent: `slugify(slugify(s)) == slugify(s)`.
"""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(value: str | None) -> str:
    """Return the district slug for `value` ("" when nothing usable remains)."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(value))
    ascii_only = decomposed.encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM_RUN.sub("_", ascii_only.lower()).strip("_")


def humanize(slug: str) -> str:
    """Turn a district slug back into a display label (`new_delhi` -> `New Delhi`)."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.replace("_", " ").split())
