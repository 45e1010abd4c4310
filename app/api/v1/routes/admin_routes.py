from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.models.user import User
from app.middlewares.clerk_auth import get_admin_user
from app.schemas.onboarding_schemas import OnboardingResetResponse
from app.services.onboarding_service import OnboardingService
from app.core.logger import get_logger

logger = get_logger("admin_routes")
router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/users/{user_id}/onboarding/reset",
    response_model=OnboardingResetResponse,
    summary="Reset User Onboarding",
    description="Send a user back to the welcome step with all onboarding choices cleared."
)
async def admin_reset_onboarding(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    logger.info(f"Admin {admin.id} resetting onboarding for user {user_id}")
    result = await OnboardingService.admin_reset_onboarding(db, user_id)
    return OnboardingResetResponse(**result)
