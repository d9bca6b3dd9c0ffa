# test_contact.py
import pytest

FAN_IP = {"X-Forwarded-For": "8.8.8.8"}


def contact_form(**overrides):
    form = {"name": "Jamie Fan", "email": "Jamie@Example.com", "message": "Loved the show in Berlin!"}
    form.update(overrides)
    return form


async def test_valid_submission_is_stored(client, repositories):
    response = await client.post("/api/contact", data=contact_form(name="  Jamie Fan  "), headers=FAN_IP)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    [message] = repositories.messages.rows.values()
    assert message.name == "Jamie Fan"
    assert message.email == "jamie@example.com"
    assert message.country == "Germany" and message.country_code == "DE"
    assert message.ip_address == "8.8.8.8"


@pytest.mark.parametrize("field, value", [
    ("_honey", "http://spam.example"),
    ("website", "http://spam.example"),
    ("_honey", " "),
])
async def test_honeypot_pretends_success_and_discards(client, repositories, limiters, field, value):
    response = await client.post("/api/contact", data=contact_form(**{field: value}), headers=FAN_IP)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert repositories.messages.rows == {}
    assert len(limiters["contact"]) == 0


@pytest.mark.parametrize("overrides, code", [
    ({"name": " J "}, "invalid_name"),
    ({"name": "", "email": "nope"}, "invalid_name"),
    ({"email": "no-at-sign"}, "invalid_email"),
    ({"email": "a@" + "x" * 260}, "invalid_email"),
    ({"message": "   "}, "invalid_message"),
    ({"message": "x" * 5001}, "invalid_message"),
])
async def test_first_invalid_field_is_reported(client, repositories, overrides, code):
    response = await client.post("/api/contact", data=contact_form(**overrides), headers=FAN_IP)

    assert response.status_code == 400
    assert response.json()["error"] == code
    assert repositories.messages.rows == {}


async def test_fourth_message_in_window_is_rate_limited(client, repositories, clock):
    for _ in range(3):
        assert (await client.post("/api/contact", data=contact_form(), headers=FAN_IP)).status_code == 200

    response = await client.post("/api/contact", data=contact_form(), headers=FAN_IP)
    assert response.status_code == 429
    assert response.json()["error"] == "too_many_requests"
    assert len(repositories.messages.rows) == 3

    clock.advance(60)
    assert (await client.post("/api/contact", data=contact_form(), headers=FAN_IP)).status_code == 200


async def test_same_ip_with_different_emails_is_limited(client):
    for i in range(3):
        response = await client.post("/api/contact", data=contact_form(email=f"fan{i}@example.com"), headers=FAN_IP)
        assert response.status_code == 200

    response = await client.post("/api/contact", data=contact_form(email="fan9@example.com"), headers=FAN_IP)
    assert response.status_code == 429


async def test_degraded_geolocation_does_not_block_the_write(client, repositories, geolocation):
    from fanbase.models import GeoLocation
    geolocation.location = GeoLocation.unknown("timeout")

    response = await client.post("/api/contact", data=contact_form(), headers=FAN_IP)

    assert response.status_code == 200
    [message] = repositories.messages.rows.values()
    assert message.country is None and message.city is None and message.country_code is None


async def test_persistence_failure_is_a_generic_500(client, repositories):
    repositories.messages.fail_on_create = True

    response = await client.post("/api/contact", data=contact_form(), headers=FAN_IP)

    assert response.status_code == 500
    assert response.json() == {"error": "server_error", "message": "Internal server error"}
