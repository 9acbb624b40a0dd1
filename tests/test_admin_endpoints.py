"""
HTTP surface of the admin router: envelopes, status codes and auth.
"""
import pytest

from admin_portal.core.error_handlers import STATUS_BY_CODE
from admin_portal.core.errors import ErrorCode


async def _onboard(client, payload):
    return await client.post("/admin/onboard", json=payload)


async def _token_for(client, email="john@example.com", password="SecurePass@123"):
    response = await client.post("/admin/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["data"]["token"]["token"]


def _error_code(response):
    return response.json()["error"]["code"]


async def test_onboard_then_reuse_code(client, candidate_data):
    first = await _onboard(client, candidate_data)

    assert first.status_code == 201
    body = first.json()
    assert body["success"] is True
    assert body["message"] == "Admin onboarded successfully"
    admin = body["data"]["admin"]
    assert admin["studentID"] == "CS2024001"
    assert admin["email"] == "john@example.com"
    assert admin["roleID"] == 1
    assert 1 <= admin["currentYear"] <= 4
    assert "password" not in str(admin).lower()
    token = body["data"]["token"]
    assert token["token"]
    assert token["type"] == "Bearer"
    assert token["expiresAt"]

    second = await _onboard(client, candidate_data)

    assert second.status_code == 409
    assert second.json()["success"] is False
    assert _error_code(second) in {"INVITATION_CODE_ALREADY_USED", "TRANSACTION_FAILED"}
    assert second.json()["error"]["timestamp"]


async def test_onboard_missing_field(client, candidate_data):
    payload = dict(candidate_data)
    del payload["studentID"]

    response = await _onboard(client, payload)

    assert response.status_code == 400
    assert _error_code(response) == "MISSING_FIELD"


async def test_onboard_malformed_phone(client, candidate_data):
    response = await _onboard(client, {**candidate_data, "phone": "12"})

    assert response.status_code == 400
    assert _error_code(response) == "INVALID_PHONE"


@pytest.mark.parametrize(
    "code, status_code, error_code",
    [
        ("NOSUCHCODE99", 404, "INVALID_INVITATION_CODE"),
        ("INACTIVE2024", 400, "INVITATION_CODE_INACTIVE"),
        ("EXPIRED2024", 400, "INVITATION_CODE_EXPIRED"),
        ("USED2024CODE", 409, "INVITATION_CODE_ALREADY_USED"),
    ],
)
async def test_onboard_ineligible_codes(client, candidate_data, code, status_code, error_code):
    response = await _onboard(client, {**candidate_data, "invitationCode": code})

    assert response.status_code == status_code
    assert _error_code(response) == error_code


async def test_onboard_role_mismatch(client, candidate_data):
    response = await _onboard(client, {**candidate_data, "roleID": 2})

    assert response.status_code == 400
    assert _error_code(response) == "INVALID_ROLE"


async def test_login_failures_are_indistinguishable(client, candidate_data):
    await _onboard(client, candidate_data)

    wrong_password = await client.post("/admin/login", json={"email": "john@example.com", "password": "Nope@1234"})
    unknown_email = await client.post("/admin/login", json={"email": "ghost@example.com", "password": "Nope@1234"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json()["error"]["code"] == unknown_email.json()["error"]["code"] == "UNAUTHORIZED"
    assert wrong_password.json()["error"]["message"] == unknown_email.json()["error"]["message"]


async def test_update_requires_token(client, candidate_data):
    admin_id = (await _onboard(client, candidate_data)).json()["data"]["admin"]["adminID"]

    response = await client.put(f"/admin/{admin_id}", json={"fullName": "John Q. Doe"})

    assert response.status_code == 401
    assert _error_code(response) == "UNAUTHORIZED"


async def test_update_rejects_bad_token(client, candidate_data):
    admin_id = (await _onboard(client, candidate_data)).json()["data"]["admin"]["adminID"]

    response = await client.put(
        f"/admin/{admin_id}",
        json={"fullName": "John Q. Doe"},
        headers={"Authorization": "Bearer not.a.token"},
    )

    assert response.status_code == 401


async def test_update_own_profile(client, candidate_data):
    admin_id = (await _onboard(client, candidate_data)).json()["data"]["admin"]["adminID"]
    token = await _token_for(client)

    response = await client.put(
        f"/admin/{admin_id}",
        json={"fullName": "John Q. Doe"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Admin details updated successfully"
    assert body["data"]["admin"]["fullName"] == "John Q. Doe"
    assert body["data"]["admin"]["updatedAt"]


async def test_non_super_admin_cannot_update_others(client, candidate_data):
    president_id = (await _onboard(client, candidate_data)).json()["data"]["admin"]["adminID"]
    member = await _onboard(client, {
        **candidate_data,
        "studentID": "CS2024002",
        "email": "jane@example.com",
        "roleID": 2,
        "invitationCode": "MEMBER2024XYZ",
    })
    assert member.status_code == 201
    member_token = member.json()["data"]["token"]["token"]

    response = await client.put(
        f"/admin/{president_id}",
        json={"fullName": "Hijacked Name"},
        headers={"Authorization": f"Bearer {member_token}"},
    )

    assert response.status_code == 403
    assert _error_code(response) == "FORBIDDEN"


async def test_super_admin_can_update_others(client, candidate_data):
    await _onboard(client, candidate_data)
    member = await _onboard(client, {
        **candidate_data,
        "studentID": "CS2024002",
        "email": "jane@example.com",
        "roleID": 2,
        "invitationCode": "MEMBER2024XYZ",
    })
    member_id = member.json()["data"]["admin"]["adminID"]
    president_token = await _token_for(client)

    response = await client.put(
        f"/admin/{member_id}",
        json={"phone": "+14155550123"},
        headers={"Authorization": f"Bearer {president_token}"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["admin"]["phone"] == "+14155550123"


async def test_update_password_without_old_password(client, candidate_data):
    admin_id = (await _onboard(client, candidate_data)).json()["data"]["admin"]["adminID"]
    token = await _token_for(client)

    response = await client.put(
        f"/admin/{admin_id}",
        json={"password": "NewSecure@456"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 400
    assert _error_code(response) == "MISSING_FIELD"


async def test_update_with_wrong_old_password_keeps_old_login(client, candidate_data):
    admin_id = (await _onboard(client, candidate_data)).json()["data"]["admin"]["adminID"]
    token = await _token_for(client)

    response = await client.put(
        f"/admin/{admin_id}",
        json={"password": "NewSecure@456", "oldPassword": "Wrong@1234"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 400
    assert _error_code(response) == "INVALID_INPUT"
    assert response.json()["error"]["message"] == "Current password is incorrect"
    assert await _token_for(client)


async def test_update_with_empty_body(client, candidate_data):
    admin_id = (await _onboard(client, candidate_data)).json()["data"]["admin"]["adminID"]
    token = await _token_for(client)

    response = await client.put(f"/admin/{admin_id}", json={}, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 400
    assert _error_code(response) == "INVALID_INPUT"


def test_every_error_code_has_a_status():
    assert set(STATUS_BY_CODE) == set(ErrorCode)
