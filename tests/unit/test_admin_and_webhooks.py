"""HTTP tests for the admin reset route, the Clerk webhook and the admin dependency."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.enums import AssistantPersona, UserType
from app.middlewares.clerk_auth import get_admin_user, get_authenticated_user
from app.models import OnboardingProgress, User
from app.services.onboarding_service import OnboardingService


def _request_for(user) -> SimpleNamespace:
    return SimpleNamespace(state=SimpleNamespace(user=user))


class TestAdminDependency:
    @pytest.mark.asyncio
    async def test_admin_passes(self) -> None:
        admin = SimpleNamespace(type=UserType.ADMIN.value)
        assert await get_admin_user(_request_for(admin)) is admin

    @pytest.mark.asyncio
    async def test_regular_user_is_forbidden(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_admin_user(_request_for(SimpleNamespace(type=UserType.USER.value)))
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_user_is_unauthorized(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_authenticated_user(SimpleNamespace(state=SimpleNamespace()))
        assert exc_info.value.status_code == 401


class TestAdminReset:
    @pytest.mark.asyncio
    async def test_reset_completed_user(self, admin_client, db_session, test_user, assistants) -> None:
        await OnboardingService.select_assistant(db_session, test_user.id, assistants[0].id)
        await OnboardingService.select_persona(db_session, test_user.id, AssistantPersona.CALM)
        await OnboardingService.complete_onboarding(db_session, test_user.id)

        response = await admin_client.post(f"/api/v1/admin/users/{test_user.id}/onboarding/reset")

        assert response.status_code == 200
        assert response.json() == {"success": True, "redirect_to": "/onboarding/welcome"}

        progress = (await db_session.execute(
            select(OnboardingProgress)
            .where(OnboardingProgress.user_id == test_user.id)
            .execution_options(populate_existing=True)
        )).scalar_one()
        assert progress.current_step == "welcome"
        assert progress.completed_at is None

    @pytest.mark.asyncio
    async def test_reset_unknown_user(self, admin_client: AsyncClient) -> None:
        response = await admin_client.post("/api/v1/admin/users/missing/onboarding/reset")
        assert response.status_code == 404


class TestClerkWebhook:
    @pytest.mark.asyncio
    async def test_user_created_starts_onboarding(self, anonymous_client, db_session: AsyncSession) -> None:
        payload = {
            "type": "user.created",
            "data": {
                "id": "user_from_clerk",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "primary_email_address_id": "e2",
                "email_addresses": [
                    {"id": "e1", "email_address": "old@test.com"},
                    {"id": "e2", "email_address": "ada@test.com"},
                ],
            },
        }

        response = await anonymous_client.post("/api/v1/webhooks/clerk", json=payload)

        assert response.status_code == 200
        user = (await db_session.execute(
            select(User).where(User.clerk_id == "user_from_clerk")
        )).scalar_one()
        assert user.email == "ada@test.com"
        assert user.name == "Ada Lovelace"
        progress = (await db_session.execute(
            select(OnboardingProgress).where(OnboardingProgress.user_id == user.id)
        )).scalar_one()
        assert progress.current_step == "welcome"

    @pytest.mark.asyncio
    async def test_duplicate_user_created_is_ignored(self, anonymous_client, db_session, test_user) -> None:
        payload = {"type": "user.created", "data": {"id": test_user.clerk_id}}

        response = await anonymous_client.post("/api/v1/webhooks/clerk", json=payload)

        assert response.status_code == 200
        users = (await db_session.execute(select(User))).scalars().all()
        assert len(users) == 1

    @pytest.mark.asyncio
    async def test_missing_user_id(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.post("/api/v1/webhooks/clerk", json={"type": "user.created", "data": {}})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_events_are_acknowledged(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.post("/api/v1/webhooks/clerk", json={"type": "session.created"})
        assert response.status_code == 200
        assert response.json() == {"status": "success"}

    @pytest.mark.asyncio
    async def test_invalid_payload(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.post(
            "/api/v1/webhooks/clerk",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
