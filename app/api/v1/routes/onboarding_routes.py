from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.config import settings
from app.database.connection import get_db
from app.middlewares.clerk_auth import get_authenticated_user
from app.api.v1.controllers.onboarding_controller import OnboardingController
from app.models.user import User
from app.schemas.onboarding_schemas import (
    AssistantOptionResponse,
    AssistantSelectionCreate,
    OnboardingCompletionResponse,
    OnboardingResetResponse,
    OnboardingStatusResponse,
    OnboardingStepUpdate,
    PersonaSelectionCreate,
    SkillQuizQuestionResponse,
    SkillQuizResultResponse,
    SkillQuizSubmitRequest,
    StepAccessResponse,
    StepDefinitionResponse,
    StepTransitionResponse,
)
from app.core.logger import get_logger

logger = get_logger("onboarding_routes")

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])


@router.get(
    "/health",
    summary="Health Check",
    description="Simple health check for onboarding service."
)
async def onboarding_health():
    """Health check for onboarding endpoints."""
    return {
        "status": "healthy",
        "service": "onboarding",
        "development_mode": settings.IS_DEVELOPMENT,
        "message": "Onboarding service is running"
    }


@router.get(
    "/steps",
    response_model=List[StepDefinitionResponse],
    summary="List Onboarding Steps",
    description="Ordered onboarding steps with their pages."
)
async def list_onboarding_steps():
    return OnboardingController.list_steps()


@router.get(
    "/status",
    response_model=OnboardingStatusResponse,
    summary="Get Onboarding Status",
    description="Canonical step, progress and choices made so far."
)
async def get_onboarding_status(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """Get onboarding status for the current user."""
    return await OnboardingController.get_onboarding_status(db, user.id)


@router.get(
    "/steps/{step}/access",
    response_model=StepAccessResponse,
    summary="Check Step Access",
    description="Whether the current user may open a step, or where to redirect instead."
)
async def check_step_access(
    step: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.check_step_access(db, user.id, step)


@router.put(
    "/step",
    response_model=StepTransitionResponse,
    summary="Persist Onboarding Step",
    description="Store the step the client navigated to. Skipping ahead is refused."
)
async def update_onboarding_step(
    data: OnboardingStepUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    logger.info(f"PUT /step - User: {user.id}, Step: {data.step.value}")
    return await OnboardingController.update_step(db, user.id, data.step)


@router.get(
    "/assistants",
    response_model=List[AssistantOptionResponse],
    summary="List Assistants",
    description="Assistant characters available for selection."
)
async def list_assistants(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.list_assistants(db)


@router.post(
    "/assistant",
    response_model=StepTransitionResponse,
    summary="Select Assistant",
    description="Choose the study assistant and move on to persona selection."
)
async def select_assistant(
    data: AssistantSelectionCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.select_assistant(db, user.id, data.assistant_id)


@router.post(
    "/persona",
    response_model=StepTransitionResponse,
    summary="Select Persona",
    description="Choose the assistant's personality and move on to the guided intro."
)
async def select_persona(
    data: PersonaSelectionCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.select_persona(db, user.id, data)


@router.post(
    "/complete",
    response_model=OnboardingCompletionResponse,
    summary="Complete Onboarding"
)
async def complete_onboarding(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.complete_onboarding(db, user.id)


@router.post(
    "/reset",
    response_model=OnboardingResetResponse,
    summary="Restart Onboarding",
    description="Clear assistant, persona and placement and start again from assistant selection."
)
async def reset_onboarding(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.reset_onboarding(db, user.id)


@router.get(
    "/skill-quiz/questions",
    response_model=List[SkillQuizQuestionResponse],
    summary="Get Skill Quiz Questions"
)
async def get_skill_quiz_questions(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.get_skill_quiz_questions(db)


@router.post(
    "/skill-quiz/submit",
    response_model=SkillQuizResultResponse,
    summary="Submit Skill Quiz",
    description="Grade the skill quiz, store the placement and advance to persona selection."
)
async def submit_skill_quiz(
    submission: SkillQuizSubmitRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    return await OnboardingController.submit_skill_quiz(db, user.id, submission)
