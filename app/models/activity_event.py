from sqlalchemy import Column, String, ForeignKey, DateTime, Integer
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database.base import Base
import cuid


class ActivityEvent(Base):
    """Point-earning events feeding the activity feed and leaderboards."""

    __tablename__ = "activity_events"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    user_id = Column(String(25), ForeignKey("users.id"), nullable=False, index=True)
    event_type = Column(String(50), nullable=False)
    points_delta = Column(Integer, nullable=False, default=0)
    quiz_id = Column(String(25), ForeignKey("quizzes.id"), nullable=True)
    quiz_attempt_id = Column(String(25), ForeignKey("quiz_attempts.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="activity_events")
