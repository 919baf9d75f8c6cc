from __future__ import annotations

import re
import typing as t
import unicodedata

_diacritics_re = re.compile(r"[\u0300-\u036f]")


def normalize(value: t.Any) -> str:
    """Canonical form for answer comparison: trimmed, lowercase, no diacritics."""
    text = str(value).strip().lower()
    decomposed = unicodedata.normalize("NFD", text)
    return _diacritics_re.sub("", decomposed).strip()


def matches_any(answer: t.Any, candidates: t.Iterable[t.Any]) -> str | None:
    """First candidate equal to `answer` after normalization, else None."""
    target = normalize(answer)
    for candidate in candidates:
        if not candidate:
            continue
        if normalize(candidate) == target:
            return t.cast(str, candidate)
    return None
