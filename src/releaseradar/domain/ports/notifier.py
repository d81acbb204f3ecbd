"""Port for delivering release notifications to users."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from releaseradar.domain.model import Digest, ReleaseNotification


@runtime_checkable
class ReleaseNotifier(Protocol):
    """Delivers messages; returns ``False`` instead of raising when delivery fails."""

    async def send_new_release(self, notification: ReleaseNotification) -> bool: ...

    async def send_digest(self, digest: Digest) -> bool: ...
