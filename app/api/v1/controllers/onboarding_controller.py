from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.config import settings
from app.enums import OnboardingStep
from app.exceptions.errors import NotFoundError, OnboardingAlreadyCompletedError, StepAccessDeniedError
from app.services.onboarding_service import OnboardingService
from app.services.onboarding_guard import GuardDecision, default_guard
from app.services.onboarding_steps import DEFAULT_STEP_REGISTRY
from app.services.skill_quiz_service import SkillQuizService, QuizAnswer
from app.schemas.onboarding_schemas import (
    AssistantOptionResponse,
    OnboardingCompletionResponse,
    OnboardingResetResponse,
    OnboardingStatusResponse,
    PersonaSelectionCreate,
    SkillQuizQuestionResponse,
    SkillQuizResultResponse,
    SkillQuizSubmitRequest,
    StepAccessResponse,
    StepDefinitionResponse,
    StepTransitionResponse,
)
from app.core.logger import get_logger

logger = get_logger("onboarding_controller")


class OnboardingController:
    """Controller for onboarding-related operations."""

    @staticmethod
    def list_steps() -> List[StepDefinitionResponse]:
        return [
            StepDefinitionResponse(
                step=definition.step,
                index=index,
                href=definition.href,
                title=definition.title,
            )
            for index, definition in enumerate(DEFAULT_STEP_REGISTRY)
        ]

    @staticmethod
    async def get_onboarding_status(db: AsyncSession, user_id: str) -> OnboardingStatusResponse:
        status = await OnboardingService.get_onboarding_status(db, user_id)
        return OnboardingStatusResponse(**status)

    @staticmethod
    async def check_step_access(db: AsyncSession, user_id: str, step: str) -> StepAccessResponse:
        """Decide whether the user may open the page for ``step``."""
        snapshot = await OnboardingService.get_snapshot(db, user_id)
        await db.commit()

        # Finished learners leave onboarding entirely
        if snapshot.completed_at is not None:
            return StepAccessResponse(
                decision=GuardDecision.REDIRECT,
                canonical_step=OnboardingStep.COMPLETED,
                redirect_to=settings.HOME_PATH,
            )

        decision = default_guard.check(snapshot, step)
        if decision.kind == GuardDecision.REJECT:
            raise NotFoundError(f"Unknown onboarding step: {step}")

        if decision.kind == GuardDecision.REDIRECT:
            logger.info(
                f"User {user_id} requested {decision.requested.value} from "
                f"{decision.canonical.value}, redirecting to {decision.redirect_to}"
            )

        return StepAccessResponse(
            decision=decision.kind,
            requested_step=decision.requested,
            canonical_step=decision.canonical,
            redirect_to=decision.redirect_to,
        )

    @staticmethod
    async def update_step(db: AsyncSession, user_id: str, step: OnboardingStep) -> StepTransitionResponse:
        """Handle client navigation to ``step``.

        Only moving to the next step is persisted. Revisiting the current or an
        earlier step leaves the stored step alone so no progress is lost.
        """
        snapshot = await OnboardingService.get_snapshot(db, user_id)
        if snapshot.completed_at is not None:
            await db.rollback()
            raise OnboardingAlreadyCompletedError()

        decision = default_guard.check(snapshot, step)
        if not decision.allowed:
            await db.rollback()
            raise StepAccessDeniedError("Cannot skip ahead in onboarding", redirect_to=decision.redirect_to)

        next_href = DEFAULT_STEP_REGISTRY.href_for(step)
        if DEFAULT_STEP_REGISTRY.index_of(step) <= DEFAULT_STEP_REGISTRY.index_of(decision.canonical):
            await db.commit()
            return StepTransitionResponse(next_step=step, next_href=next_href)

        user = await OnboardingService.get_user(db, user_id)
        OnboardingService.check_step_prerequisites(user, step)
        await OnboardingService.advance_step(db, user_id, step)
        return StepTransitionResponse(next_step=step, next_href=next_href)

    @staticmethod
    async def list_assistants(db: AsyncSession) -> List[AssistantOptionResponse]:
        assistants = await OnboardingService.list_assistants(db)
        return [AssistantOptionResponse.model_validate(assistant) for assistant in assistants]

    @staticmethod
    async def select_assistant(db: AsyncSession, user_id: str, assistant_id: str) -> StepTransitionResponse:
        result = await OnboardingService.select_assistant(db, user_id, assistant_id)
        return StepTransitionResponse(**result)

    @staticmethod
    async def select_persona(db: AsyncSession, user_id: str, data: PersonaSelectionCreate) -> StepTransitionResponse:
        result = await OnboardingService.select_persona(db, user_id, data.persona)
        return StepTransitionResponse(**result)

    @staticmethod
    async def complete_onboarding(db: AsyncSession, user_id: str) -> OnboardingCompletionResponse:
        result = await OnboardingService.complete_onboarding(db, user_id)
        return OnboardingCompletionResponse(**result)

    @staticmethod
    async def reset_onboarding(db: AsyncSession, user_id: str) -> OnboardingResetResponse:
        result = await OnboardingService.reset_onboarding(db, user_id)
        return OnboardingResetResponse(**result)

    @staticmethod
    async def get_skill_quiz_questions(db: AsyncSession) -> List[SkillQuizQuestionResponse]:
        questions = await SkillQuizService.get_questions(db)
        return [SkillQuizQuestionResponse.model_validate(question) for question in questions]

    @staticmethod
    async def submit_skill_quiz(
        db: AsyncSession,
        user_id: str,
        submission: SkillQuizSubmitRequest,
    ) -> SkillQuizResultResponse:
        answers = [QuizAnswer(a.question_id, a.option_id) for a in submission.answers]
        result = await SkillQuizService.submit(db, user_id, answers)
        return SkillQuizResultResponse(
            score=result.score,
            total=result.total,
            level=result.level,
            suggested_course=result.suggested_course,
            next_path=result.next_path,
        )
