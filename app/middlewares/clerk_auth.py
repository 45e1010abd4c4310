from typing import List, Optional
from fastapi import Request, HTTPException, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from sqlalchemy.future import select
from clerk_backend_api import Clerk
from clerk_backend_api.security.types import AuthenticateRequestOptions
from httpx import Request as HttpxRequest
from app.core.config import settings
from app.database import AsyncSessionLocal
from app.enums import UserType
from app.models.user import User
from app.services.onboarding_service import OnboardingService
from app.core.logger import get_logger

logger = get_logger("clerk_auth_middleware")

whitelisted_routes = [
    "/docs", "/openapi.json", "/redoc", "/favicon.ico",
    "/api/v1/webhooks",
    "/api/v1/onboarding/health",
    "/api/v1/onboarding/steps",
]

class ClerkAuthMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, whitelisted_routes: Optional[List[str]] = None):
        super().__init__(app)
        self.clerk_sdk = Clerk(bearer_auth=settings.CLERK_SECRET_KEY)
        self.whitelisted_routes = whitelisted_routes or []

    def _is_whitelisted(self, path: str) -> bool:
        """Check if the route is whitelisted (public)"""
        for route in self.whitelisted_routes:
            if path == route or path.startswith(route + "/"):
                return True
        return False

    async def _resolve_user(self, db, clerk_user_id: str) -> User:
        """Load the local user for a Clerk ID, creating it on first sight."""
        result = await db.execute(
            select(User).where(User.clerk_id == clerk_user_id)
        )
        user = result.scalar_one_or_none()
        if user:
            return user

        clerk_user = self.clerk_sdk.users.get(user_id=clerk_user_id)
        email = clerk_user.email_addresses[0].email_address if clerk_user.email_addresses else None
        name = " ".join(p for p in [clerk_user.first_name, clerk_user.last_name] if p) or None

        if email:
            email_result = await db.execute(
                select(User).where(User.email == email)
            )
            existing_user = email_result.scalar_one_or_none()

            if existing_user:
                # User re-signed up after deleting their Clerk account
                existing_user.clerk_id = clerk_user_id
                existing_user.is_active = True
                existing_user.is_deleted = False
                await db.commit()
                await db.refresh(existing_user)
                logger.info(f"Updated existing user's Clerk ID: {existing_user.email} (New Clerk ID: {clerk_user_id})")
                return existing_user

        return await OnboardingService.create_user(
            db,
            clerk_id=clerk_user_id,
            email=email,
            name=name,
            user_type=UserType.USER,
        )

    async def dispatch(self, request: Request, call_next):
        """Verify the Clerk JWT and attach the local user to the request"""

        if self._is_whitelisted(request.url.path):
            logger.debug(f"Whitelisted route: {request.url.path}")
            return await call_next(request)

        # CORS preflight
        if request.method == "OPTIONS":
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            logger.warning(f"Missing or invalid Authorization header for: {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Missing or invalid authorization token"}
            )

        try:
            httpx_request = HttpxRequest(
                method=request.method,
                url=str(request.url),
                headers=dict(request.headers)
            )
            request_state = self.clerk_sdk.authenticate_request(
                httpx_request,
                AuthenticateRequestOptions()
            )

            if not request_state.is_signed_in:
                logger.warning(f"Invalid Clerk token: {request_state.reason}")
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": "Invalid authentication token"}
                )

            clerk_user_id = request_state.payload.get("sub") if request_state.payload else None
            if not clerk_user_id:
                logger.warning("No user_id in token payload")
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": "Invalid token payload"}
                )

            async with AsyncSessionLocal() as db:
                user = await self._resolve_user(db, clerk_user_id)

            request.state.user = user
            request.state.clerk_user_id = clerk_user_id
            logger.debug(f"Authenticated user: {user.id}")

        except Exception as e:
            logger.error(f"Authentication error: {e}")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Authentication failed"}
            )

        return await call_next(request)

def get_current_user_from_request(request: Request) -> User:
    """Extract authenticated user from request state"""
    if not hasattr(request.state, 'user'):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated"
        )
    return request.state.user


async def get_authenticated_user(request: Request) -> User:
    """FastAPI dependency to get authenticated user"""
    return get_current_user_from_request(request)


async def get_admin_user(request: Request) -> User:
    """FastAPI dependency that only lets admins through"""
    user = get_current_user_from_request(request)
    if user.type != UserType.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user
