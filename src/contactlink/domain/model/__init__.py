"""Public domain model surface."""

from __future__ import annotations

from contactlink.domain.model.contact import Contact, utcnow
from contactlink.domain.model.enums import LinkPrecedence
from contactlink.domain.model.primitives import (
    ContactFragment,
    ContactId,
    Email,
    PhoneNumber,
    normalize_email,
    normalize_phone_number,
)

__all__ = [
    "Contact",
    "ContactFragment",
    "ContactId",
    "Email",
    "LinkPrecedence",
    "PhoneNumber",
    "normalize_email",
    "normalize_phone_number",
    "utcnow",
]
