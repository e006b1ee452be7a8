"""Domain primitives: scalar aliases + the incoming contact fragment."""

from __future__ import annotations

from dataclasses import dataclass

type ContactId = int
type Email = str
type PhoneNumber = str


def normalize_email(value: str | None) -> Email | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def normalize_phone_number(value: int | str | None) -> PhoneNumber | None:
    """Return the canonical string form of a phone number.

    Numeric input is rendered in decimal; strings are only stripped. Blank input
    means "absent".
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("phone number must be an int or str, not bool")
    if isinstance(value, int):
        return str(value)
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True, slots=True)
class ContactFragment:
    """The (email, phone) pair submitted for reconciliation."""

    email: Email | None = None
    phone_number: PhoneNumber | None = None

    @classmethod
    def from_input(cls, email: str | None, phone_number: int | str | None) -> ContactFragment:
        return cls(
            email=normalize_email(email),
            phone_number=normalize_phone_number(phone_number),
        )

    @property
    def is_empty(self) -> bool:
        return self.email is None and self.phone_number is None
