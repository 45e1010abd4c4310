"""Shared test fixtures.

The app is exercised against an in-memory SQLite database (aiosqlite) and
the Clerk middleware is replaced by overriding the auth dependencies, so no
network access or Postgres instance is needed.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.routes import admin_router, onboarding_router, user_router, webhook_router
from app.database.base import Base
from app.database.connection import get_db
from app.enums import AssistantGender, UserType
from app.exceptions.handlers import register_exception_handlers
from app.middlewares.clerk_auth import get_admin_user, get_authenticated_user
from app.models import Assistant, Quiz, QuizOption, QuizQuestion, User
from app.services.onboarding_service import OnboardingService

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Index of the correct option for each seeded skill question
CORRECT_OPTION_INDEX = [0, 1, 2, 0, 1]


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await OnboardingService.create_user(
        db_session, clerk_id="user_test_1", email="learner@test.com", name="Test Learner"
    )


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await OnboardingService.create_user(
        db_session, clerk_id="user_admin_1", email="admin@test.com", user_type=UserType.ADMIN
    )


@pytest_asyncio.fixture
async def assistants(db_session: AsyncSession) -> list[Assistant]:
    rows = [
        Assistant(name="Nova", slug="nova-feminine", gender=AssistantGender.FEMININE,
                  tagline="Brilliant strategist with infectious enthusiasm."),
        Assistant(name="Atlas", slug="atlas-masculine", gender=AssistantGender.MASCULINE,
                  tagline="Steady mentor with years of wisdom."),
        Assistant(name="Sage", slug="sage-androgynous", gender=AssistantGender.ANDROGYNOUS,
                  tagline="Intuitive guide who reads between the lines."),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


@pytest_asyncio.fixture
async def skill_quiz(db_session: AsyncSession) -> dict:
    """Skill assessment with five questions of three options each.

    Returns the quiz, its questions in order and, per question, the correct
    and one wrong option id.
    """
    quiz = Quiz(title="Python Skill Check", topic="Skill Assessment")
    db_session.add(quiz)
    await db_session.flush()

    questions = []
    correct = {}
    wrong = {}
    for q_index, correct_index in enumerate(CORRECT_OPTION_INDEX):
        question = QuizQuestion(quiz_id=quiz.id, text=f"Question {q_index + 1}", order_index=q_index)
        db_session.add(question)
        await db_session.flush()
        for o_index in range(3):
            option = QuizOption(
                question_id=question.id,
                text=f"Option {o_index + 1}",
                is_correct=o_index == correct_index,
                order_index=o_index,
            )
            db_session.add(option)
            await db_session.flush()
            if o_index == correct_index:
                correct[question.id] = option.id
            else:
                wrong.setdefault(question.id, option.id)
        questions.append(question)

    await db_session.commit()
    return {"quiz": quiz, "questions": questions, "correct": correct, "wrong": wrong}


def build_test_app(session_factory, user=None, admin=None) -> FastAPI:
    app = FastAPI()
    app.include_router(user_router, prefix="/api/v1")
    app.include_router(onboarding_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")
    app.include_router(webhook_router, prefix="/api/v1")
    register_exception_handlers(app)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    if user is not None:
        app.dependency_overrides[get_authenticated_user] = lambda: user
    if admin is not None:
        app.dependency_overrides[get_admin_user] = lambda: admin
    return app


@pytest_asyncio.fixture
async def client(session_factory, test_user) -> AsyncGenerator[AsyncClient, None]:
    app = build_test_app(session_factory, user=test_user)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_client(session_factory, admin_user) -> AsyncGenerator[AsyncClient, None]:
    app = build_test_app(session_factory, user=admin_user, admin=admin_user)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def anonymous_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    app = build_test_app(session_factory)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
