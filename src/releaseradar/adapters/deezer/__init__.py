"""Deezer adapter package."""

from __future__ import annotations

from .client import DeezerCatalog
from .translator import translate_album, translate_artist

__all__ = ["DeezerCatalog", "translate_album", "translate_artist"]
