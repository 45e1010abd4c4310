from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.models.user import User
from app.middlewares.clerk_auth import get_authenticated_user
from app.services.onboarding_service import OnboardingService
from app.core.logger import get_logger

logger = get_logger("user_routes")
router = APIRouter()

@router.get("/user/me", tags=["User"])
async def get_current_user(
    current_user: User = Depends(get_authenticated_user),
    db: AsyncSession = Depends(get_db)
):
    """Get current authenticated user's information"""
    user = await OnboardingService.get_user(db, current_user.id)
    progress = await OnboardingService.get_or_create_progress(db, user.id)
    await db.commit()

    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "clerk_id": user.clerk_id,
        "type": user.type,
        "is_active": user.is_active,
        "assistant_id": user.assistant_id,
        "assistant_persona": user.assistant_persona.value if user.assistant_persona else None,
        "skill_level": user.skill_level.value if user.skill_level else None,
        "onboarding_completed": progress.completed_at is not None,
        "created_at": user.created_at.isoformat() if user.created_at else None
    }
