from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from contactlink.domain.reconciliation import ContactView
from contactlink.ui.schema import IdentifyRequest, IdentifyResponse


def test_identify_request_accepts_camel_case_payload() -> None:
    request = IdentifyRequest.model_validate_json(
        '{"email": "mcfly@hillvalley.edu", "phoneNumber": 123456}'
    )

    assert request.email == "mcfly@hillvalley.edu"
    assert request.phone_number == 123456


def test_identify_request_accepts_phone_alias_and_ignores_extras() -> None:
    request = IdentifyRequest.model_validate({"phone": "123456", "source": "web"})

    assert request.email is None
    assert request.phone_number == "123456"


def test_identify_request_treats_blank_values_as_missing() -> None:
    request = IdentifyRequest.model_validate({"email": "  ", "phoneNumber": 42})

    assert request.email is None


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"email": None, "phoneNumber": None},
        {"email": "", "phoneNumber": " "},
    ],
)
def test_identify_request_requires_one_contact_value(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError, match="At least one of email or phoneNumber"):
        IdentifyRequest.model_validate(payload)


def test_identify_request_rejects_malformed_email() -> None:
    with pytest.raises(ValidationError, match="email"):
        IdentifyRequest.model_validate({"email": "not-an-email", "phoneNumber": None})


def test_identify_request_strips_email_before_validating() -> None:
    request = IdentifyRequest.model_validate({"email": "  doc@hillvalley.edu  "})

    assert request.email == "doc@hillvalley.edu"


def test_identify_request_rejects_boolean_phone() -> None:
    with pytest.raises(ValidationError):
        IdentifyRequest.model_validate({"phoneNumber": True})


def test_identify_response_uses_wire_field_names() -> None:
    view = ContactView(
        primary_contact_id=1,
        emails=("doc@hillvalley.edu", "mcfly@hillvalley.edu"),
        phone_numbers=("123456",),
        secondary_contact_ids=(23,),
    )

    payload = json.loads(IdentifyResponse.from_view(view).to_json())

    assert payload == {
        "contact": {
            "primaryContactId": 1,
            "emails": ["doc@hillvalley.edu", "mcfly@hillvalley.edu"],
            "phoneNumbers": ["123456"],
            "secondaryContactIds": [23],
        }
    }
