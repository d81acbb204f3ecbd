"""Spotify adapter package."""

from __future__ import annotations

from .client import TOKEN_RENEWAL_MARGIN, AccessToken, SpotifyCatalog
from .translator import translate_album, translate_artist

__all__ = [
    "TOKEN_RENEWAL_MARGIN",
    "AccessToken",
    "SpotifyCatalog",
    "translate_album",
    "translate_artist",
]
