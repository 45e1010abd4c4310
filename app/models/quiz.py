from sqlalchemy import Column, String, ForeignKey, DateTime, Integer, Boolean, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database.base import Base
import cuid


class Quiz(Base):
    """A quiz; the onboarding skill assessment is looked up by topic."""

    __tablename__ = "quizzes"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    title = Column(String(255), nullable=False)
    topic = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    questions = relationship("QuizQuestion", back_populates="quiz", cascade="all, delete-orphan")


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    quiz_id = Column(String(25), ForeignKey("quizzes.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)

    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "QuizOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuizOption.order_index",
    )


class QuizOption(Base):
    __tablename__ = "quiz_options"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    question_id = Column(String(25), ForeignKey("quiz_questions.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    order_index = Column(Integer, nullable=False, default=0)

    question = relationship("QuizQuestion", back_populates="options")
