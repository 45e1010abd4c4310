from fastapi import APIRouter, Depends, Request, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.models.user import User
from app.services.onboarding_service import OnboardingService
from app.core.logger import get_logger

logger = get_logger("webhook_routes")
router = APIRouter()

async def verify_clerk_webhook(request: Request) -> dict:
    """Parse the Clerk webhook payload"""
    # TODO: verify the svix signature headers against CLERK_WEBHOOK_SECRET
    try:
        return await request.json()
    except Exception as e:
        logger.error(f"Failed to parse webhook payload: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook payload"
        )


def _primary_email(data: dict):
    email_addresses = data.get("email_addresses") or []
    for email_obj in email_addresses:
        if email_obj.get("id") == data.get("primary_email_address_id"):
            return email_obj.get("email_address")
    if email_addresses:
        return email_addresses[0].get("email_address")
    return None


def _display_name(data: dict):
    parts = [data.get("first_name"), data.get("last_name")]
    name = " ".join(p for p in parts if p)
    return name or data.get("username")


@router.post("/webhooks/clerk", tags=["Webhooks"])
async def clerk_webhook(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Handle Clerk webhooks for user events.
    user.created creates the local user with onboarding at the first step.
    """
    payload = await verify_clerk_webhook(request)
    event_type = payload.get("type")
    data = payload.get("data") or {}

    logger.info(f"Received Clerk webhook: {event_type}")

    if event_type == "user.created":
        clerk_user_id = data.get("id")
        if not clerk_user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing user id in webhook payload"
            )

        result = await db.execute(select(User).where(User.clerk_id == clerk_user_id))
        if result.scalar_one_or_none():
            logger.info(f"User for Clerk ID {clerk_user_id} already exists; skipping.")
        else:
            await OnboardingService.create_user(
                db,
                clerk_id=clerk_user_id,
                email=_primary_email(data),
                name=_display_name(data),
            )
    else:
        logger.info(f"No handler for webhook event {event_type}; skipping.")

    return {"status": "success"}
