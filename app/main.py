import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from fastapi.responses import JSONResponse
from app.exceptions.handlers import register_exception_handlers
from app.database.base import Base
from app.database.connection import engine
from app.core.config import settings

from app.api.v1.routes import user_router, onboarding_router, admin_router, webhook_router
from app.middlewares.clerk_auth import ClerkAuthMiddleware, whitelisted_routes

from app.core.logger import get_logger

logger = get_logger("sprite-backend")

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("FastAPI app is starting...")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Application database tables ensured.")
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise

    yield

    logger.info("FastAPI app is shutting down...")
    await engine.dispose()

swagger_ui_parameters = {
    "deepLinking": True,
    "displayRequestDuration": True,
    "tryItOutEnabled": True,
    "filter": True,
}

if settings.IS_DEVELOPMENT:
    swagger_ui_parameters["persistAuthorization"] = True

app = FastAPI(
    title="Sprite Learning Backend",
    version="1.0.0",
    lifespan=lifespan,
    description="""
    Backend API for the Sprite learning platform: onboarding flow and skill placement.

    ## Authentication

    Uses Clerk JWT tokens. Include your JWT token in the Authorization header:
    ```
    Authorization: Bearer <your-jwt-token>
    ```
    """,
    swagger_ui_parameters=swagger_ui_parameters,
)

# CORS configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]

app.add_middleware(
    ClerkAuthMiddleware,
    whitelisted_routes=whitelisted_routes
)

# Added last so it wraps auth and preflight responses carry CORS headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user_router, prefix="/api/v1")
app.include_router(onboarding_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(webhook_router, prefix="/api/v1")

@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "Sprite Learning Backend API",
        "docs": "/docs",
        "development_mode": settings.IS_DEVELOPMENT,
        "version": "1.0.0"
    }

@app.middleware("http")
async def catch_all_404_middleware(request: Request, call_next):
    response = await call_next(request)
    if response.status_code == 404 and request.scope.get("route") is None:
        return JSONResponse(
            status_code=404,
            content={"error": "Route not found", "path": str(request.url.path)}
        )
    return response

register_exception_handlers(app)

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        limit_concurrency=20,
        timeout_keep_alive=30,
        timeout_graceful_shutdown=30
    )
