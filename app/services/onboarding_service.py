from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, List
from datetime import datetime

from app.models import User, OnboardingProgress, Assistant
from app.enums import OnboardingStep, AssistantPersona, SkillLevel, UserType
from app.exceptions.errors import (
    NotFoundError,
    PrerequisiteError,
    OnboardingAlreadyCompletedError,
)
from app.services.onboarding_guard import OnboardingSnapshot, default_resolver
from app.services.onboarding_steps import (
    DEFAULT_STEP_REGISTRY,
    calculate_progress,
    get_resume_step,
    is_new_user,
)
from app.core.logger import get_logger

logger = get_logger("onboarding_service")

registry = DEFAULT_STEP_REGISTRY


class OnboardingService:
    """Service for handling the user onboarding flow."""

    @staticmethod
    async def get_user(db: AsyncSession, user_id: str) -> User:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    async def create_user(
        db: AsyncSession,
        clerk_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        user_type: UserType = UserType.USER,
    ) -> User:
        """Create a user together with its onboarding progress at the first step."""
        user = User(
            clerk_id=clerk_id,
            email=email,
            name=name,
            type=user_type.value,
            is_active=True,
            is_deleted=False,
        )
        db.add(user)
        await db.flush()

        db.add(OnboardingProgress(user_id=user.id, current_step=registry.first.value))
        await db.commit()
        await db.refresh(user)

        logger.info(f"Created user {user.id} (Clerk ID: {clerk_id})")
        return user

    @staticmethod
    async def get_or_create_progress(db: AsyncSession, user_id: str) -> OnboardingProgress:
        """Get the user's onboarding progress, creating it for older accounts."""
        result = await db.execute(
            select(OnboardingProgress).where(OnboardingProgress.user_id == user_id)
        )
        progress = result.scalar_one_or_none()

        if not progress:
            progress = OnboardingProgress(
                user_id=user_id,
                current_step=registry.first.value,
            )
            db.add(progress)
            await db.flush()
            logger.info(f"Created onboarding progress for user {user_id}")

        return progress

    @staticmethod
    async def get_snapshot(db: AsyncSession, user_id: str) -> OnboardingSnapshot:
        user = await OnboardingService.get_user(db, user_id)
        progress = await OnboardingService.get_or_create_progress(db, user_id)
        return OnboardingSnapshot.from_records(user, progress)

    @staticmethod
    async def get_onboarding_status(db: AsyncSession, user_id: str) -> dict:
        """Get the derived onboarding status for a user."""
        snapshot = await OnboardingService.get_snapshot(db, user_id)
        await db.commit()

        current = default_resolver.resolve(snapshot)
        resume = get_resume_step(snapshot, default_resolver)

        return {
            "current_step": current,
            "current_href": registry.href_for(current),
            "current_title": registry.title_for(current),
            "progress_percent": calculate_progress(current, registry),
            "is_new_user": is_new_user(snapshot, registry),
            "is_completed": snapshot.completed_at is not None,
            "resume_step": resume,
            "resume_href": registry.href_for(resume),
            "assistant_id": snapshot.assistant_id,
            "assistant_persona": snapshot.assistant_persona,
            "skill_level": snapshot.skill_level,
            "completed_at": snapshot.completed_at,
        }

    @staticmethod
    async def list_assistants(db: AsyncSession) -> List[Assistant]:
        result = await db.execute(select(Assistant).order_by(Assistant.name))
        return list(result.scalars().all())

    @staticmethod
    async def _load_incomplete(db: AsyncSession, user_id: str):
        user = await OnboardingService.get_user(db, user_id)
        progress = await OnboardingService.get_or_create_progress(db, user_id)
        if progress.completed_at is not None:
            raise OnboardingAlreadyCompletedError()
        return user, progress

    @staticmethod
    def check_step_prerequisites(user: User, step: OnboardingStep) -> None:
        """Raise PrerequisiteError when the choices ``step`` builds on are missing."""
        if step == OnboardingStep.PERSONA and not user.assistant_id:
            raise PrerequisiteError("Please select an assistant first")
        if step == OnboardingStep.GUIDED_INTRO and (not user.assistant_id or not user.assistant_persona):
            raise PrerequisiteError("Please complete previous steps first")

    @staticmethod
    async def advance_step(
        db: AsyncSession,
        user_id: str,
        step: OnboardingStep,
        commit: bool = True,
    ) -> OnboardingProgress:
        """Persist a new current step. Completion goes through complete_onboarding."""
        step = registry.parse(step)
        if step == registry.terminal:
            raise PrerequisiteError("Use complete_onboarding to finish onboarding")

        _, progress = await OnboardingService._load_incomplete(db, user_id)
        progress.current_step = step.value
        progress.updated_at = datetime.utcnow()

        if commit:
            await db.commit()
            await db.refresh(progress)

        logger.info(f"User {user_id} onboarding step -> {step.value}")
        return progress

    @staticmethod
    async def select_assistant(db: AsyncSession, user_id: str, assistant_id: str) -> dict:
        user, progress = await OnboardingService._load_incomplete(db, user_id)

        result = await db.execute(select(Assistant).where(Assistant.id == assistant_id))
        if not result.scalar_one_or_none():
            raise NotFoundError("Assistant option not found")

        user.assistant_id = assistant_id
        progress.current_step = OnboardingStep.PERSONA.value
        progress.updated_at = datetime.utcnow()
        await db.commit()

        logger.info(f"User {user_id} selected assistant {assistant_id}")
        return {
            "next_step": OnboardingStep.PERSONA,
            "next_href": registry.href_for(OnboardingStep.PERSONA),
        }

    @staticmethod
    async def select_persona(db: AsyncSession, user_id: str, persona: AssistantPersona) -> dict:
        user, progress = await OnboardingService._load_incomplete(db, user_id)

        if not user.assistant_id:
            raise PrerequisiteError("Select an assistant before choosing a persona")

        user.assistant_persona = persona
        progress.current_step = OnboardingStep.GUIDED_INTRO.value
        progress.updated_at = datetime.utcnow()
        await db.commit()

        logger.info(f"User {user_id} selected persona {persona.value}")
        return {
            "next_step": OnboardingStep.GUIDED_INTRO,
            "next_href": registry.href_for(OnboardingStep.GUIDED_INTRO),
        }

    @staticmethod
    async def complete_onboarding(db: AsyncSession, user_id: str) -> dict:
        """Mark onboarding as completed. The state is frozen afterwards."""
        user, progress = await OnboardingService._load_incomplete(db, user_id)

        if not user.assistant_id or not user.assistant_persona:
            raise PrerequisiteError("Complete all onboarding steps before finishing")

        progress.completed_at = datetime.utcnow()
        progress.current_step = None
        progress.updated_at = progress.completed_at
        await db.commit()

        logger.info(f"User {user_id} completed onboarding")
        return {"completed": True, "redirect_to": registry.href_for(registry.terminal)}

    @staticmethod
    async def reset_onboarding(db: AsyncSession, user_id: str) -> dict:
        """Start over from assistant selection, dropping every onboarding choice."""
        user = await OnboardingService.get_user(db, user_id)
        progress = await OnboardingService.get_or_create_progress(db, user_id)

        user.assistant_id = None
        user.assistant_persona = None
        user.skill_level = SkillLevel.BEGINNER
        progress.current_step = OnboardingStep.GENDER.value
        progress.completed_at = None
        progress.updated_at = datetime.utcnow()
        await db.commit()

        logger.info(f"User {user_id} restarted onboarding")
        return {"success": True, "redirect_to": registry.href_for(OnboardingStep.GENDER)}

    @staticmethod
    async def admin_reset_onboarding(db: AsyncSession, user_id: str) -> dict:
        """Admin reset: back to the welcome page with every onboarding field cleared."""
        user = await OnboardingService.get_user(db, user_id)
        progress = await OnboardingService.get_or_create_progress(db, user_id)

        user.assistant_id = None
        user.assistant_persona = None
        user.skill_level = None
        progress.current_step = registry.first.value
        progress.completed_at = None
        progress.started_at = datetime.utcnow()
        progress.updated_at = progress.started_at
        await db.commit()

        logger.info(f"Admin reset onboarding for user {user_id}")
        return {"success": True, "redirect_to": registry.href_for(registry.first)}
