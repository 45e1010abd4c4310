from sqlalchemy import Column, String, ForeignKey, DateTime, Integer
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database.base import Base
import cuid


class QuizAttempt(Base):
    """One graded submission of a quiz by a user."""

    __tablename__ = "quiz_attempts"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    user_id = Column(String(25), ForeignKey("users.id"), nullable=False, index=True)
    quiz_id = Column(String(25), ForeignKey("quizzes.id"), nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False, default=1)
    score = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=0)

    started_at = Column(DateTime, default=datetime.utcnow)
    submitted_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="quiz_attempts")
    answers = relationship("QuizAttemptAnswer", back_populates="attempt", cascade="all, delete-orphan")


class QuizAttemptAnswer(Base):
    __tablename__ = "quiz_attempt_answers"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    attempt_id = Column(String(25), ForeignKey("quiz_attempts.id"), nullable=False, index=True)
    # Stored as submitted, not as foreign keys: unknown ids are graded, not rejected
    question_id = Column(String(25), nullable=False)
    selected_option_id = Column(String(25), nullable=False)

    attempt = relationship("QuizAttempt", back_populates="answers")
