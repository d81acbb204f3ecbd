"""Follow artists, collect their new releases, and mail them out."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("releaseradar")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0+local"
