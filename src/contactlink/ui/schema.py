"""Pydantic models describing the identify request and response payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

if TYPE_CHECKING:
    from contactlink.domain.reconciliation import ContactView


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ContactLinkBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IdentifyRequest(ContactLinkBaseModel):
    email: EmailStr | None = None
    phone_number: int | str | None = Field(
        default=None,
        validation_alias=AliasChoices("phoneNumber", "phone", "phone_number"),
    )

    _normalize_email = field_validator("email", mode="before")(_blank_to_none)
    _normalize_phone = field_validator("phone_number", mode="before")(_blank_to_none)

    @field_validator("phone_number", mode="before")
    @classmethod
    def _reject_bool(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("phoneNumber must be a number or string")  # noqa: TRY004
        return value

    @model_validator(mode="after")
    def _require_contact_value(self) -> Self:
        if self.email is None and self.phone_number is None:
            raise ValueError("At least one of email or phoneNumber must be provided")
        return self


class ContactPayload(ContactLinkBaseModel):
    primary_contact_id: int = Field(serialization_alias="primaryContactId")
    emails: list[str]
    phone_numbers: list[str] = Field(serialization_alias="phoneNumbers")
    secondary_contact_ids: list[int] = Field(serialization_alias="secondaryContactIds")


class IdentifyResponse(ContactLinkBaseModel):
    contact: ContactPayload

    @classmethod
    def from_view(cls, view: ContactView) -> IdentifyResponse:
        return cls(
            contact=ContactPayload(
                primary_contact_id=view.primary_contact_id,
                emails=list(view.emails),
                phone_numbers=list(view.phone_numbers),
                secondary_contact_ids=list(view.secondary_contact_ids),
            )
        )

    def to_json(self, *, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
