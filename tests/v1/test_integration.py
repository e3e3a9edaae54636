"""End-to-end walk through issuance, verification, drafting and submission."""

from fastapi import status


def test_full_registration_flow(client, transports, clock) -> None:
    pair = {"email": "A@x.com", "mobile": "+1555"}

    assert client.post("/api/v1/otp/send-email", json=pair).status_code == status.HTTP_200_OK
    assert client.post("/api/v1/otp/send-phone", json=pair).status_code == status.HTTP_200_OK

    verify = client.post(
        "/api/v1/otp/verify",
        json={
            **pair,
            "emailOtp": transports.email.last_code,
            "mobileOtp": transports.mobile.last_code,
        },
    )
    assert verify.status_code == status.HTTP_200_OK
    headers = {"Authorization": f"Bearer {verify.json()['token']}"}

    draft = client.post(
        "/api/v1/register/draft",
        json={"formData": {"city": "Pune"}, "fullName": "A"},
        headers=headers,
    )
    assert draft.status_code == status.HTTP_200_OK
    registration_id = draft.json()["registrationId"]
    assert registration_id.startswith("AHV-")

    fetched = client.get("/api/v1/register/draft", headers=headers).json()["draft"]
    assert fetched["formData"] == {"city": "Pune"}
    assert fetched["fullName"] == "A"

    final = client.post(
        "/api/v1/register",
        json={"formData": {"city": "Pune", "course": "BSc"}, "fullName": "A"},
        headers=headers,
    )
    assert final.status_code == status.HTTP_200_OK
    assert final.json()["registrationId"] == registration_id
    assert client.get("/api/v1/register/draft", headers=headers).json()["draft"] is None

    # The finished identity cannot restart the flow on either channel.
    clock.advance(60)
    for path, body in (
        ("/api/v1/otp/send-email", pair),
        ("/api/v1/otp/send-phone", {"email": "new@x.com", "mobile": "+1555"}),
    ):
        response = client.post(path, json=body)
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "This Email or Mobile Number is already registered."
