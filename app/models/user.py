from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database.base import Base
from app.enums import AssistantPersona, SkillLevel
import cuid


class User(Base):
    """User model for authentication and learner preferences."""

    __tablename__ = "users"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    email = Column(String(255), unique=True, index=True, nullable=True)
    clerk_id = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)
    is_deleted = Column(Boolean, default=False)
    type = Column(String(50), nullable=False, default="user")  # admin, user only

    # Assistant preferences, chosen during onboarding and editable afterwards
    assistant_id = Column(String(25), ForeignKey("assistants.id"), nullable=True)
    assistant_persona = Column(SQLEnum(AssistantPersona, values_callable=lambda e: [m.value for m in e]), nullable=True)

    # Placement from the onboarding skill quiz
    skill_level = Column(SQLEnum(SkillLevel, values_callable=lambda e: [m.value for m in e]), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    assistant = relationship("Assistant", back_populates="users")
    onboarding_progress = relationship("OnboardingProgress", back_populates="user", uselist=False, cascade="all, delete-orphan")
    quiz_attempts = relationship("QuizAttempt", back_populates="user", cascade="all, delete-orphan")
    activity_events = relationship("ActivityEvent", back_populates="user", cascade="all, delete-orphan")
