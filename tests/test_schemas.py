import pytest
from pydantic import ValidationError

from admin_portal.schemas.admin import AdminLoginRequest, AdminOnboardRequest, AdminPatch, AdminUpdateRequest


def _error_type(exc_info) -> str:
    return exc_info.value.errors()[0]["type"]


def test_onboard_request_normalizes_input(candidate_data):
    request = AdminOnboardRequest(**{
        **candidate_data,
        "email": "  John@Example.com ",
        "invitationCode": "invite2024abc",
        "fullName": "  John   Doe ",
    })

    assert request.email == "john@example.com"
    assert request.invitation_code == "INVITE2024ABC"
    assert request.full_name == "John Doe"


@pytest.mark.parametrize(
    "field, value, expected_type",
    [
        ("phone", "98765", "INVALID_PHONE"),
        ("phone", "12", "INVALID_PHONE"),
        ("phone", "919876543210", "INVALID_PHONE"),
        ("email", "not-an-email", "INVALID_EMAIL"),
        ("password", "alllowercase1!", "INVALID_PASSWORD"),
        ("password", "Short1!", "INVALID_PASSWORD"),
        ("password", "NoSpecial123", "INVALID_PASSWORD"),
        ("graduationYear", 2019, "INVALID_GRADUATION_YEAR"),
        ("graduationYear", 2036, "INVALID_GRADUATION_YEAR"),
        ("studentID", "CS-2024", "INVALID_INPUT"),
        ("invitationCode", "SHORT", "INVALID_INPUT"),
        ("roleID", 0, "INVALID_INPUT"),
    ],
)
def test_onboard_request_rejects_malformed_fields(candidate_data, field, value, expected_type):
    with pytest.raises(ValidationError) as exc_info:
        AdminOnboardRequest(**{**candidate_data, field: value})

    assert _error_type(exc_info) == expected_type


def test_onboard_request_reports_missing_field(candidate_data):
    data = dict(candidate_data)
    del data["invitationCode"]

    with pytest.raises(ValidationError) as exc_info:
        AdminOnboardRequest(**data)

    assert _error_type(exc_info) == "missing"


def test_login_requires_password():
    with pytest.raises(ValidationError) as exc_info:
        AdminLoginRequest(email="john@example.com", password="")

    assert _error_type(exc_info) == "MISSING_FIELD"


def test_update_password_without_old_password_is_missing_field():
    with pytest.raises(ValidationError) as exc_info:
        AdminUpdateRequest(password="NewSecure@456")

    assert _error_type(exc_info) == "MISSING_FIELD"


def test_empty_update_is_invalid_input():
    with pytest.raises(ValidationError) as exc_info:
        AdminUpdateRequest()

    assert _error_type(exc_info) == "INVALID_INPUT"


def test_update_request_maps_to_patch():
    patch = AdminUpdateRequest(fullName="Jane Doe", password="NewSecure@456", oldPassword="SecurePass@123").to_patch()

    assert patch.full_name == "Jane Doe"
    assert patch.phone is None
    assert patch.password == "NewSecure@456"
    assert patch.old_password == "SecurePass@123"


@pytest.mark.parametrize("phone", ["+919876543210", "+14155550123", "+4930123456"])
def test_onboard_request_accepts_international_phone(candidate_data, phone):
    assert AdminOnboardRequest(**{**candidate_data, "phone": phone}).phone == phone


def test_patch_is_immutable():
    patch = AdminPatch(full_name="Jane Doe")

    with pytest.raises(ValidationError):
        patch.full_name = "Someone Else"
    assert patch.is_empty() is False
    assert AdminPatch().is_empty() is True
