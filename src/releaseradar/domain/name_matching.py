"""Name normalization and candidate matching across catalogs.

``find_best_match`` falls back to the first candidate when nothing matches
exactly, trusting the provider's relevance ordering. That fallback can attach
an unrelated artist whose name merely ranks first; callers that need precision
use ``find_exact_match``.

Names made only of non-Latin script or punctuation normalize to an empty
string; ``find_exact_match`` never treats two such names as equal.
"""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize_name(name: str) -> str:
    decomposed = unicodedata.normalize("NFD", name.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", stripped).strip()


def _default_key(candidate: object) -> str:
    return getattr(candidate, "name")  # noqa: B009


def find_exact_match[T](
    target: str,
    candidates: Sequence[T],
    *,
    key: Callable[[T], str] = _default_key,
) -> T | None:
    wanted = normalize_name(target)
    if not wanted:
        return None
    for candidate in candidates:
        if normalize_name(key(candidate)) == wanted:
            return candidate
    return None


def find_best_match[T](
    target: str,
    candidates: Sequence[T],
    *,
    key: Callable[[T], str] = _default_key,
) -> T | None:
    if not candidates:
        return None
    exact = find_exact_match(target, candidates, key=key)
    if exact is not None:
        return exact
    return candidates[0]


__all__ = ["find_best_match", "find_exact_match", "normalize_name"]
