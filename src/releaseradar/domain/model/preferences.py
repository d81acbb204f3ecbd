"""Per-user notification preferences."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from releaseradar.domain.model.entity import Entity, utcnow
from releaseradar.domain.model.enums import Frequency, ReleaseType


class NotificationTypes(BaseModel):
    """Which release types a user wants to hear about.

    Stored as JSON. Unknown keys are ignored and missing keys default to enabled.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, strict=True)

    new_album: bool = True
    new_single: bool = True
    new_compilation: bool = True

    def allows(self, release_type: ReleaseType) -> bool:
        key = NOTIFICATION_TYPE_KEYS.get(release_type)
        if key is None:
            return True
        return getattr(self, key) is not False


NOTIFICATION_TYPE_KEYS: dict[ReleaseType, str] = {
    ReleaseType.ALBUM: "new_album",
    ReleaseType.SINGLE: "new_single",
    ReleaseType.EP: "new_compilation",
}


@dataclass(eq=False, kw_only=True)
class NotificationPreference(Entity):
    user_id: UUID
    email_notifications: bool = True
    notification_types: NotificationTypes = field(default_factory=NotificationTypes)
    frequency: Frequency = Frequency.IMMEDIATE
    weekly_summary: bool = True
    updated_at: datetime = field(default_factory=utcnow)


def should_notify(preferences: NotificationPreference, release_type: ReleaseType) -> bool:
    return preferences.email_notifications and preferences.notification_types.allows(release_type)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NotificationTypeSettings(_CamelModel):
    new_album: bool = Field(default=True, alias="newAlbum")
    new_single: bool = Field(default=True, alias="newSingle")
    new_compilation: bool = Field(default=True, alias="newCompilation")


class NotificationSettings(_CamelModel):
    """Preference payload as exchanged with clients (camelCase on the wire)."""

    email_notifications: bool = Field(default=True, alias="emailNotifications")
    notification_types: NotificationTypeSettings = Field(
        default_factory=NotificationTypeSettings, alias="notificationTypes"
    )
    frequency: Frequency = Frequency.IMMEDIATE
    weekly_summary: bool = Field(default=True, alias="weeklySummary")

    @classmethod
    def from_preference(cls, preference: NotificationPreference) -> NotificationSettings:
        types = preference.notification_types
        return cls(
            email_notifications=preference.email_notifications,
            notification_types=NotificationTypeSettings(
                new_album=types.new_album,
                new_single=types.new_single,
                new_compilation=types.new_compilation,
            ),
            frequency=preference.frequency,
            weekly_summary=preference.weekly_summary,
        )

    def apply_to(self, preference: NotificationPreference) -> None:
        preference.email_notifications = self.email_notifications
        preference.notification_types = NotificationTypes(
            new_album=self.notification_types.new_album,
            new_single=self.notification_types.new_single,
            new_compilation=self.notification_types.new_compilation,
        )
        preference.frequency = self.frequency
        preference.weekly_summary = self.weekly_summary
        preference.updated_at = utcnow()

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)
