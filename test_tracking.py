# test_tracking.py
from fanbase.database.dependencies import get_optional_repositories
from fanbase.main import app
from fanbase.tracking.service import EngagementTracker, VisitOutcome
from fanbase.utils.hashing import hash_visitor_ip

VISITOR = {"X-Forwarded-For": "8.8.8.8", "User-Agent": "Mozilla/5.0 (X11; Linux x86_64)"}


async def test_visits_are_throttled_per_ip(client, repositories, clock):
    first = await client.post("/api/track-visit", headers=VISITOR)
    second = await client.post("/api/track-visit", headers=VISITOR)

    assert first.json() == {"success": True}
    assert second.status_code == 200
    assert second.json() == {"success": True, "cached": True}
    assert len(repositories.visits.rows) == 1

    clock.advance(300)
    third = await client.post("/api/track-visit", headers=VISITOR)
    assert third.json() == {"success": True}
    assert len(repositories.visits.rows) == 2


async def test_raw_ip_is_never_stored(client, repositories):
    await client.post("/api/track-visit", headers=VISITOR)

    [visit] = repositories.visits.rows
    assert visit.visitor_hash == hash_visitor_ip("8.8.8.8")
    assert all("8.8.8.8" not in str(value) for value in visit.model_dump().values())
    assert visit.country == "Germany"


async def test_engagement_snapshot_is_taken_at_visit_time(client, repositories, clock):
    await client.post("/api/track-visit", headers=VISITOR)
    repositories.subscribers.add(email="fan@example.com", ip_address="8.8.8.8")
    clock.advance(300)
    await client.post("/api/track-visit", headers=VISITOR)

    before, after = repositories.visits.rows
    assert (before.is_subscriber, before.has_messaged) == (False, False)
    assert (after.is_subscriber, after.has_messaged) == (True, False)


async def test_user_agent_is_truncated(client, repositories):
    await client.post("/api/track-visit", headers={**VISITOR, "User-Agent": "x" * 800})

    assert len(repositories.visits.rows[0].user_agent) == 500


async def test_database_outage_still_answers_ok(client):
    async def no_database():
        return None

    app.dependency_overrides[get_optional_repositories] = no_database

    response = await client.post("/api/track-visit", headers=VISITOR)

    assert response.status_code == 200
    assert response.json() == {"success": True}


async def test_failing_snapshot_records_visit_without_flags(client, repositories):
    async def broken(ip):
        raise ConnectionError("lost connection")

    repositories.messages.exists_with_ip = broken
    repositories.subscribers.add(email="fan@example.com", ip_address="8.8.8.8")

    response = await client.post("/api/track-visit", headers=VISITOR)

    assert response.json() == {"success": True}
    [visit] = repositories.visits.rows
    assert (visit.is_subscriber, visit.has_messaged) == (False, False)


async def test_unknown_address_is_skipped(repositories, geolocation, limiters):
    tracker = EngagementTracker(repositories, limiters["visit"], geolocation)

    assert await tracker.record_visit("unknown", "curl/8.0") is VisitOutcome.SKIPPED
    assert repositories.visits.rows == []
    assert geolocation.calls == []
