"""Tests for free trials and the subscription gate."""

from datetime import date, timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.subscription import CompteGratuit
from edustats.models.user import User
from edustats.services import compte_gratuit as trial_service
from tests.conftest import auth_header, login, make_teacher


class TestTrialInfo:
    async def test_trial_info(self, client: AsyncClient, teacher_token: str):
        response = await client.get("/api/v1/trial/info", headers=auth_header(teacher_token))

        assert response.status_code == 200
        data = response.json()
        assert data["days_remaining"] == 14
        assert data["is_expired"] is False
        assert data["is_active"] is True
        assert data["date_fin"] == (date.today() + timedelta(days=14)).isoformat()

    async def test_trial_status_active(self, client: AsyncClient, teacher_token: str):
        response = await client.get("/api/v1/trial/status", headers=auth_header(teacher_token))

        assert response.status_code == 200
        assert response.json() == {"is_trial_active": True}

    async def test_expired_trial_is_deactivated(
        self, client: AsyncClient, db: AsyncSession, expired_teacher: User, expired_token: str
    ):
        response = await client.get("/api/v1/trial/status", headers=auth_header(expired_token))

        assert response.status_code == 200
        assert response.json() == {"is_trial_active": False}

        trial = await trial_service.get_trial(db, expired_teacher.id)
        await db.refresh(trial)
        assert trial.is_active is False

    async def test_expired_trial_info(self, client: AsyncClient, expired_token: str):
        response = await client.get("/api/v1/trial/info", headers=auth_header(expired_token))

        data = response.json()
        assert data["days_remaining"] == 0
        assert data["is_expired"] is True

    async def test_no_trial(self, client: AsyncClient, db: AsyncSession):
        await make_teacher(db, "notrial@example.com", trial_days_left=None)
        token = await login(client, "notrial@example.com")

        response = await client.get("/api/v1/trial/info", headers=auth_header(token))
        assert response.status_code == 404

        response = await client.get("/api/v1/trial/status", headers=auth_header(token))
        assert response.json() == {"is_trial_active": False}


class TestAccessGate:
    """Data endpoints need a running trial or a paid subscription."""

    async def test_active_trial_has_access(self, client: AsyncClient, teacher_token: str):
        response = await client.get("/api/v1/classes", headers=auth_header(teacher_token))

        assert response.status_code == 200

    async def test_expired_trial_is_refused(self, client: AsyncClient, expired_token: str):
        response = await client.get("/api/v1/classes", headers=auth_header(expired_token))

        assert response.status_code == 402
        assert "subscription" in response.json()["detail"]

    async def test_expired_trial_keeps_account_endpoints(
        self, client: AsyncClient, expired_token: str
    ):
        for url in ("/api/v1/auth/me", "/api/v1/trial/info", "/api/v1/payments/status"):
            response = await client.get(url, headers=auth_header(expired_token))
            assert response.status_code == 200, url


class TestTrialHelpers:
    def test_days_remaining_never_negative(self):
        today = date(2025, 3, 10)
        trial = CompteGratuit(date_debut=date(2025, 2, 1), date_fin=date(2025, 2, 15))

        assert trial_service.days_remaining(trial, today) == 0
        assert trial_service.is_expired(trial, today) is True

    def test_last_day_is_not_expired(self):
        trial = CompteGratuit(date_debut=date(2025, 3, 1), date_fin=date(2025, 3, 15))

        assert trial_service.is_expired(trial, date(2025, 3, 15)) is False
        assert trial_service.days_remaining(trial, date(2025, 3, 10)) == 5
