from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database.base import Base
from app.enums import AssistantGender
import cuid


class Assistant(Base):
    """Study assistant characters offered during onboarding."""

    __tablename__ = "assistants"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    gender = Column(SQLEnum(AssistantGender, values_callable=lambda e: [m.value for m in e]), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    tagline = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    users = relationship("User", back_populates="assistant")
