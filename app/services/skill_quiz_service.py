"""
Skill assessment quiz: grading, placement and persistence.

``QuizScorer`` is pure and grades a submission against an option catalog
fetched by the caller. ``SkillQuizService`` does the database work around it:
loading questions and the catalog, recording the attempt, storing the level
and advancing onboarding.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.logger import get_logger
from app.enums import ActivityEventType, OnboardingStep, SkillLevel
from app.exceptions.errors import NotFoundError, ValidationError
from app.models import (
    ActivityEvent,
    Quiz,
    QuizAttempt,
    QuizAttemptAnswer,
    QuizOption,
    QuizQuestion,
    User,
)
from app.services.onboarding_service import OnboardingService
from app.services.onboarding_steps import DEFAULT_STEP_REGISTRY, StepRegistry

logger = get_logger("skill_quiz_service")

POINTS_PER_CORRECT_ANSWER = 10
PERFECT_SCORE_BONUS = 20

SUGGESTED_COURSES = {
    SkillLevel.BEGINNER: "Python Intro",
    SkillLevel.INTERMEDIATE: "Python Fundamentals + Projects",
    SkillLevel.ADVANCED: "Data Structures & Algorithms in Python",
}


@dataclass(frozen=True)
class QuizAnswer:
    question_id: str
    option_id: str


@dataclass(frozen=True)
class OptionKey:
    question_id: str
    is_correct: bool


class QuizCatalog:
    """Answer key for a set of options, keyed by option id."""

    def __init__(self, options: Optional[Mapping[str, OptionKey]] = None):
        self._options: Dict[str, OptionKey] = dict(options or {})

    @classmethod
    def from_rows(cls, rows: Iterable) -> "QuizCatalog":
        return cls({row.id: OptionKey(row.question_id, bool(row.is_correct)) for row in rows})

    def __len__(self):
        return len(self._options)

    def is_correct(self, answer: QuizAnswer) -> bool:
        key = self._options.get(answer.option_id)
        if key is None:
            return False
        return key.question_id == answer.question_id and key.is_correct


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int
    level: SkillLevel
    suggested_course: str
    next_path: str

    @property
    def is_perfect(self) -> bool:
        return self.total > 0 and self.score == self.total


def map_score_to_level(score: int) -> SkillLevel:
    # Raw score cutoffs, independent of how many questions were answered
    if score <= 1:
        return SkillLevel.BEGINNER
    if score <= 3:
        return SkillLevel.INTERMEDIATE
    return SkillLevel.ADVANCED


def suggested_course_for(level: SkillLevel) -> str:
    return SUGGESTED_COURSES[SkillLevel(level)]


def validate_answers(answers: Sequence[QuizAnswer]) -> None:
    if not answers:
        raise ValidationError("At least one answer is required")
    question_ids = [answer.question_id for answer in answers]
    if len(set(question_ids)) != len(question_ids):
        raise ValidationError("Each question may only be answered once")


class QuizScorer:
    """Grades a submission. Unknown or mismatched options are simply wrong."""

    def __init__(self, registry: StepRegistry = DEFAULT_STEP_REGISTRY):
        self.registry = registry

    def score(self, answers: Sequence[QuizAnswer], catalog: QuizCatalog) -> QuizResult:
        validate_answers(answers)

        score = sum(1 for answer in answers if catalog.is_correct(answer))
        level = map_score_to_level(score)
        return QuizResult(
            score=score,
            total=len(answers),
            level=level,
            suggested_course=suggested_course_for(level),
            next_path=self.registry.href_for(OnboardingStep.PERSONA),
        )


default_scorer = QuizScorer(DEFAULT_STEP_REGISTRY)


class SkillQuizService:
    """Service for the onboarding skill assessment."""

    @staticmethod
    async def get_skill_quiz(db: AsyncSession) -> Quiz:
        result = await db.execute(
            select(Quiz).where(Quiz.topic == settings.SKILL_QUIZ_TOPIC).order_by(Quiz.created_at).limit(1)
        )
        quiz = result.scalar_one_or_none()
        if not quiz:
            logger.error(f"Skill assessment quiz '{settings.SKILL_QUIZ_TOPIC}' not found")
            raise NotFoundError("Skill assessment quiz not found")
        return quiz

    @staticmethod
    async def get_questions(db: AsyncSession) -> List[QuizQuestion]:
        """Skill assessment questions with their options, in display order."""
        quiz = await SkillQuizService.get_skill_quiz(db)
        result = await db.execute(
            select(QuizQuestion)
            .where(QuizQuestion.quiz_id == quiz.id)
            .options(selectinload(QuizQuestion.options))
            .order_by(QuizQuestion.order_index)
            .limit(settings.SKILL_QUIZ_QUESTION_LIMIT)
        )
        return list(result.scalars().all())

    @staticmethod
    async def load_catalog(db: AsyncSession, answers: Sequence[QuizAnswer]) -> QuizCatalog:
        option_ids = {answer.option_id for answer in answers}
        if not option_ids:
            return QuizCatalog()
        result = await db.execute(
            select(QuizOption.id, QuizOption.question_id, QuizOption.is_correct)
            .where(QuizOption.id.in_(option_ids))
        )
        return QuizCatalog.from_rows(result.all())

    @staticmethod
    async def record_level(db: AsyncSession, user_id: str, level: SkillLevel, commit: bool = True) -> User:
        user = await OnboardingService.get_user(db, user_id)
        user.skill_level = level
        if commit:
            await db.commit()
        return user

    @staticmethod
    async def _record_attempt(
        db: AsyncSession,
        user_id: str,
        quiz_id: str,
        answers: Sequence[QuizAnswer],
        result: QuizResult,
    ) -> QuizAttempt:
        previous = await db.execute(
            select(func.max(QuizAttempt.attempt_number))
            .where(QuizAttempt.user_id == user_id, QuizAttempt.quiz_id == quiz_id)
        )
        last_number = previous.scalar_one_or_none() or 0

        attempt = QuizAttempt(
            user_id=user_id,
            quiz_id=quiz_id,
            attempt_number=last_number + 1,
            score=result.score,
            total=result.total,
        )
        db.add(attempt)
        await db.flush()

        for answer in answers:
            db.add(QuizAttemptAnswer(
                attempt_id=attempt.id,
                question_id=answer.question_id,
                selected_option_id=answer.option_id,
            ))

        db.add(ActivityEvent(
            user_id=user_id,
            event_type=ActivityEventType.QUIZ_SUBMITTED.value,
            points_delta=result.score * POINTS_PER_CORRECT_ANSWER,
            quiz_id=quiz_id,
            quiz_attempt_id=attempt.id,
        ))
        if result.is_perfect:
            db.add(ActivityEvent(
                user_id=user_id,
                event_type=ActivityEventType.QUIZ_PERFECT.value,
                points_delta=PERFECT_SCORE_BONUS,
                quiz_id=quiz_id,
                quiz_attempt_id=attempt.id,
            ))

        return attempt

    @staticmethod
    async def submit(db: AsyncSession, user_id: str, answers: Sequence[QuizAnswer]) -> QuizResult:
        """Grade a submission, store the placement and move onboarding on to persona."""
        validate_answers(answers)

        quiz = await SkillQuizService.get_skill_quiz(db)
        catalog = await SkillQuizService.load_catalog(db, answers)
        result = default_scorer.score(answers, catalog)

        try:
            attempt = await SkillQuizService._record_attempt(db, user_id, quiz.id, answers, result)
            await SkillQuizService.record_level(db, user_id, result.level, commit=False)
            await OnboardingService.advance_step(db, user_id, OnboardingStep.PERSONA, commit=False)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            f"User {user_id} skill quiz attempt {attempt.attempt_number}: "
            f"{result.score}/{result.total} -> {result.level.value}"
        )
        return result
