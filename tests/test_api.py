"""
HTTP endpoint tests.

The app runs against the in-memory test session; the lifespan (admin
bootstrap and scheduler) is not started.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from yeild.auth.jwt import COOKIE_NAME, create_access_token
from yeild.db import get_db
from yeild.main import app
from yeild.models import User, UserRole
from yeild.utils.password import hash_password


@pytest_asyncio.fixture
async def client(db_session):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin(db_session):
    user = User(
        username="root",
        password_hash=hash_password("secret"),
        role=UserRole.ADMIN,
        display_name="Admin",
    )
    db_session.add(user)
    await db_session.flush()
    return user


def _login(client, user_id, role):
    client.cookies.set(COOKIE_NAME, create_access_token(user_id, role))


# ── Health ────────────────────────────────────────────────


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready(self, client):
        response = await client.get("/api/health/ready")
        assert response.json() == {"status": "ready", "database": "connected"}

    @pytest.mark.asyncio
    async def test_live(self, client):
        response = await client.get("/api/health/live")
        assert response.json() == {"status": "alive"}


# ── Auth ──────────────────────────────────────────────────


class TestAuth:
    @pytest.mark.asyncio
    async def test_login_sets_cookie(self, client, admin):
        response = await client.post(
            "/api/auth/login", json={"username": "root", "password": "secret"}
        )
        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert COOKIE_NAME in response.cookies

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, admin):
        response = await client.post(
            "/api/auth/login", json={"username": "root", "password": "nope"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_register_with_referral_code(self, client, make_profile):
        referrer = await make_profile("alice")

        response = await client.post(
            "/api/auth/register",
            json={
                "username": "bobby",
                "password": "hunter22",
                "display_name": "Bob",
                "referral_code": referrer.referral_code,
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["referred_by"] == referrer.id
        assert body["referral_code"] != referrer.referral_code

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, client, make_profile):
        await make_profile("alice")
        response = await client.post(
            "/api/auth/register",
            json={"username": "alice", "password": "hunter22", "display_name": "A"},
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_register_invalid_referral_code(self, client):
        response = await client.post(
            "/api/auth/register",
            json={
                "username": "bobby",
                "password": "hunter22",
                "display_name": "Bob",
                "referral_code": "ZZZZZZZZ",
            },
        )
        assert response.status_code == 400


# ── Progress ──────────────────────────────────────────────


class TestProgressEndpoints:
    @pytest.mark.asyncio
    async def test_tiers_listed(self, client):
        response = await client.get("/api/tiers")
        tiers = response.json()
        assert [t["name"] for t in tiers] == ["Dove", "Sparrow", "Hawk", "Eagle", "Falcon", "Phoenix"]
        assert tiers[1]["earning_bonus_percent"] == 10

    @pytest.mark.asyncio
    async def test_preview(self, client):
        response = await client.post("/api/tiers/preview", json={"base_points": 100})
        assert response.json()["points_by_level"]["Sparrow"] == 110

    @pytest.mark.asyncio
    async def test_progress_requires_login(self, client):
        response = await client.get("/api/progress/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_my_progress(self, client, make_profile):
        profile = await make_profile(
            "alice", tasks_completed=5, points=150, active_referrals_count=3
        )
        _login(client, profile.id, "user")

        response = await client.get("/api/progress/me")

        assert response.status_code == 200
        body = response.json()
        assert body["current_tier"]["name"] == "Dove"
        assert body["next_tier"]["name"] == "Sparrow"
        # tasks 5/5 and points 150/250
        assert body["progress_percent"] == pytest.approx(100 * 0.6 + 60 * 0.4)
        assert body["referral_bonus_percent"] == 15
        assert body["level_up"] is False


# ── Admin ─────────────────────────────────────────────────


class TestAdminEndpoints:
    @pytest.mark.asyncio
    async def test_events_require_admin(self, client, make_profile):
        profile = await make_profile("alice")
        _login(client, profile.id, "user")

        response = await client.post(
            "/api/admin/events/points-earned",
            json={"event_id": "evt-1", "user_id": profile.id, "points": 10},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_points_earned_replay(self, client, admin, make_profile):
        profile = await make_profile("alice")
        _login(client, admin.id, "admin")
        payload = {"type": "points_earned", "event_id": "evt-1", "user_id": profile.id, "points": 10}

        first = await client.post("/api/admin/events/points-earned", json=payload)
        second = await client.post("/api/admin/events/points-earned", json=payload)

        assert first.status_code == 200
        assert first.json()["duplicate"] is False
        assert second.json()["duplicate"] is True
        assert second.json()["transaction_id"] == first.json()["transaction_id"]

    @pytest.mark.asyncio
    async def test_points_earned_unknown_user(self, client, admin):
        _login(client, admin.id, "admin")
        response = await client.post(
            "/api/admin/events/points-earned",
            json={"event_id": "evt-1", "user_id": 999, "points": 10},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_approve_task(self, client, admin, make_profile):
        profile = await make_profile("alice")
        _login(client, admin.id, "admin")

        response = await client.post(
            "/api/admin/tasks/approve",
            json={"submission_id": "sub-1", "user_id": profile.id, "base_points": 100},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["final_points"] == 100
        assert body["bird_level"] == "Dove"
        assert body["commission"] is None

    @pytest.mark.asyncio
    async def test_approve_task_twice(self, client, admin, make_profile):
        profile = await make_profile("alice")
        _login(client, admin.id, "admin")
        payload = {"submission_id": "sub-1", "user_id": profile.id, "base_points": 100}

        first = await client.post("/api/admin/tasks/approve", json=payload)
        second = await client.post("/api/admin/tasks/approve", json=payload)

        body = second.json()
        assert body["duplicate"] is True
        assert body["transaction_id"] == first.json()["transaction_id"]
        assert body["final_points"] == 100
        assert body["bird_level"] is None
        assert body["explanation"] == []
