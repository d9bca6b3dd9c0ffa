# test_admin.py
from datetime import datetime, timezone

from fanbase.models import GeoLocation
from fanbase.models.audit import AuditAction


BERLIN = GeoLocation(country="Germany", city="Berlin", country_code="DE")


async def test_message_listing_flags_subscribers(client, admin_headers, repositories):
    repositories.subscribers.add(email="fan@example.com")
    await repositories.messages.create("Fan", "fan@example.com", "Love the new record", BERLIN, None)
    await repositories.messages.create("Stranger", "stranger@example.com", "Booking enquiry", BERLIN, None)

    response = await client.get("/api/admin/messages", headers=admin_headers)

    body = response.json()
    flags = {m["email"]: m["isSubscriber"] for m in body["messages"]}
    assert flags == {"fan@example.com": True, "stranger@example.com": False}
    assert body["pagination"]["total"] == 2
    assert body["stats"]["unanswered"] == 2
    assert body["availableCountries"] == ["Germany"]


async def test_toggle_read_flips_the_flag(client, admin_headers, repositories):
    message = await repositories.messages.create("Fan", "fan@example.com", "Hello", BERLIN, None)

    first = await client.post("/api/admin/messages/toggle-read", json={"id": message.id}, headers=admin_headers)
    second = await client.post("/api/admin/messages/toggle-read", json={"id": message.id}, headers=admin_headers)

    assert first.json() == {"success": True, "isRead": True}
    assert second.json() == {"success": True, "isRead": False}


async def test_mark_all_read(client, admin_headers, repositories):
    for name in ("A", "B"):
        await repositories.messages.create(name, f"{name}@example.com", "Hi", BERLIN, None)

    response = await client.post("/api/admin/messages/mark-all-read", headers=admin_headers)

    assert response.json()["updatedCount"] == 2
    assert all(m.is_read for m in repositories.messages.rows.values())


async def test_deleting_unknown_message_is_404(client, admin_headers):
    response = await client.delete("/api/admin/messages/nope", headers=admin_headers)
    assert response.status_code == 404


async def test_subscriber_listing_filters_by_status(client, admin_headers, repositories):
    repositories.subscribers.add(email="active@example.com", country="Germany")
    repositories.subscribers.add(email="gone@example.com", is_active=False, receive_event_alerts=False)

    response = await client.get("/api/admin/subscribers?status=unsubscribed", headers=admin_headers)

    body = response.json()
    assert [s["email"] for s in body["subscribers"]] == ["gone@example.com"]
    assert body["stats"]["total"] == 2
    assert body["stats"]["eventFans"] == 1
    assert body["stats"]["unsubscribed"] == 1


async def test_subscriber_export_is_csv_and_audited(client, admin_headers, repositories, audit):
    repositories.subscribers.add(
        email="fan@example.com",
        country="Germany",
        city="Berlin",
        joined_at=datetime(2026, 2, 1, tzinfo=timezone.utc),
    )

    response = await client.get("/api/admin/subscribers/export", headers=admin_headers)

    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0] == "Email,Event Alerts,Status,Country,City,Joined,Unsubscribed,Reason"
    assert lines[1] == "fan@example.com,Yes,Active,Germany,Berlin,2026-02-01,,"
    await audit.drain()
    assert repositories.logs.rows[-1].action is AuditAction.EXPORT_SUBSCRIBERS


async def test_visitor_summary_groups_by_hash(client, admin_headers, repositories):
    await repositories.visits.append("a" * 64, BERLIN, "Firefox", True, False)
    await repositories.visits.append("a" * 64, BERLIN, "Firefox", False, False)
    await repositories.visits.append("b" * 64, BERLIN, "Safari", False, True)

    response = await client.get("/api/admin/visitors?period=today", headers=admin_headers)

    body = response.json()
    assert body["stats"]["totalVisits"] == 3
    assert body["stats"]["uniqueVisitors"] == 2
    assert body["stats"]["conversionRate"] == "50.0"
    counts = {v["visitorHash"]: v["visitCount"] for v in body["visitors"]}
    assert counts == {"aaaaaaaaaaaa...": 2, "bbbbbbbbbbbb...": 1}


async def test_visitor_summary_rejects_unknown_period(client, admin_headers):
    response = await client.get("/api/admin/visitors?period=decade", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"


async def test_templates_update_keeps_untouched_templates(client, admin_headers, repositories):
    response = await client.put(
        "/api/admin/email-templates",
        json={"soldOutTemplate": "<p>Gone! {{event_title}}</p>"},
        headers=admin_headers,
    )

    templates = response.json()["templates"]
    assert templates["soldOutTemplate"] == "<p>Gone! {{event_title}}</p>"
    assert templates["announcementTemplate"].startswith("<h1>{{event_title}}</h1>")


async def test_test_email_goes_only_to_the_admin(client, admin_headers, repositories, email_service):
    repositories.subscribers.add(email="fan@example.com", unsubscribe_token="t")
    event = await repositories.events.create({
        "title": "Live at Tempodrom",
        "date": datetime(2026, 11, 14, 20, 30, tzinfo=timezone.utc),
        "venue": "Tempodrom",
        "city": "Berlin",
    })

    response = await client.post(
        "/api/admin/email-templates/test",
        json={"to": "admin@example.com", "kind": "announcement", "eventId": event.id},
        headers=admin_headers,
    )

    assert response.json()["success"] is True
    assert [e.to_email for e in email_service.sent] == ["admin@example.com"]
    assert email_service.sent[0].subject.startswith("[TEST] ")


async def test_signature_roundtrip_and_preview(client, admin_headers):
    saved = await client.put(
        "/api/admin/email-signature",
        json={"logoUrl": "https://cdn.example/logo.png", "content": "<p>Cheers</p>"},
        headers=admin_headers,
    )
    preview = await client.get("/api/admin/send-reply?email=fan@example", headers=admin_headers)

    assert saved.json()["signature"]["content"] == "<p>Cheers</p>"
    assert '<img src="https://cdn.example/logo.png"' in preview.json()["signature"]
    assert preview.json()["emailValid"] is False


async def test_reply_marks_message_answered(client, admin_headers, repositories, email_service, audit):
    message = await repositories.messages.create("Fan", "fan@example.com", "Any vinyl?", BERLIN, None)

    response = await client.post(
        "/api/admin/send-reply",
        json={"messageId": message.id, "to": "fan@example.com", "subject": "Re: vinyl", "body": "<p>Yes</p>"},
        headers=admin_headers,
    )

    assert response.json()["success"] is True
    assert response.json()["emailValid"] is True
    assert repositories.messages.rows[message.id].replied is True
    await audit.drain()
    assert repositories.logs.rows[-1].action is AuditAction.REPLY_MESSAGE


async def test_reply_needs_subject_and_body(client, admin_headers):
    response = await client.post(
        "/api/admin/send-reply",
        json={"messageId": "m", "to": "fan@example.com", "subject": " ", "body": "hi"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_reply"
