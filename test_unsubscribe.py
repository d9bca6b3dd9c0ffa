# test_unsubscribe.py


def add_active(repositories, token="tok-123"):
    return repositories.subscribers.add(email="fan@example.com", unsubscribe_token=token)


async def test_token_status_page(client, repositories):
    add_active(repositories)

    assert (await client.get("/api/unsubscribe/tok-123")).json() == {"status": "valid"}

    response = await client.get("/api/unsubscribe/missing")
    assert response.status_code == 404
    assert response.json()["status"] == "invalid"


async def test_unsubscribe_stores_reason_and_timestamp(client, repositories):
    subscriber = add_active(repositories)

    response = await client.post("/api/unsubscribe/tok-123", data={"reason": "  Too many emails  "})

    assert response.status_code == 200
    assert response.json()["status"] == "success"
    stored = repositories.subscribers.rows[subscriber.id]
    assert stored.is_active is False
    assert stored.unsubscribe_reason == "Too many emails"
    assert stored.unsubscribed_at is not None


async def test_other_reason_uses_custom_text(client, repositories):
    subscriber = add_active(repositories)

    await client.post("/api/unsubscribe/tok-123", data={"reason": "Other", "customReason": "Moving abroad"})

    assert repositories.subscribers.rows[subscriber.id].unsubscribe_reason == "Moving abroad"


async def test_second_unsubscribe_is_already_unsubscribed(client, repositories):
    subscriber = add_active(repositories)
    await client.post("/api/unsubscribe/tok-123")
    first_stamp = repositories.subscribers.rows[subscriber.id].unsubscribed_at

    response = await client.post("/api/unsubscribe/tok-123", data={"reason": "again"})

    assert response.status_code == 200
    assert response.json()["status"] == "already_unsubscribed"
    assert response.json()["success"] is False
    stored = repositories.subscribers.rows[subscriber.id]
    assert stored.unsubscribed_at == first_stamp
    assert stored.unsubscribe_reason is None
    assert (await client.get("/api/unsubscribe/tok-123")).json() == {"status": "already_unsubscribed"}


async def test_unknown_token_is_invalid_not_an_error(client, repositories):
    add_active(repositories)

    response = await client.post("/api/unsubscribe/fan@example.com")

    assert response.status_code == 404
    assert response.json()["status"] == "invalid"
    assert response.json()["message"] == "Invalid or expired unsubscribe link."
    assert all(s.is_active for s in repositories.subscribers.rows.values())
