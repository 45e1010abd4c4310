from sqlalchemy import Column, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database.base import Base
from app.enums import OnboardingStep
import cuid


class OnboardingProgress(Base):
    """Track user onboarding progress."""

    __tablename__ = "onboarding_progress"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    user_id = Column(String(25), ForeignKey("users.id"), nullable=False, unique=True, index=True)

    # Plain string so retired step names (e.g. "skill_quiz") still load
    current_step = Column(String(32), nullable=True, default=OnboardingStep.WELCOME.value)

    started_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="onboarding_progress")
