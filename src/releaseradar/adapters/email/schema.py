"""Pydantic models for the SendGrid v3 mail send payload."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SendGridBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EmailAddress(SendGridBaseModel):
    email: str
    name: str | None = None


class Personalization(SendGridBaseModel):
    to: list[EmailAddress]
    subject: str


class Content(SendGridBaseModel):
    type: Literal["text/plain", "text/html"]
    value: str


class MailPayload(SendGridBaseModel):
    personalizations: list[Personalization]
    from_: EmailAddress = Field(alias="from")
    content: list[Content]

    def to_request_json(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SendGridErrorItem(SendGridBaseModel):
    message: str | None = None
    field: str | None = None


class SendGridErrorResponse(SendGridBaseModel):
    errors: list[SendGridErrorItem] = Field(default_factory=list["SendGridErrorItem"])
