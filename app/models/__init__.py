"""
Models package for the application.
"""

from .user import User
from .assistant import Assistant
from .onboarding_progress import OnboardingProgress
from .quiz import Quiz, QuizQuestion, QuizOption
from .quiz_attempt import QuizAttempt, QuizAttemptAnswer
from .activity_event import ActivityEvent

__all__ = [
    "User",
    "Assistant",
    "OnboardingProgress",
    "Quiz",
    "QuizQuestion",
    "QuizOption",
    "QuizAttempt",
    "QuizAttemptAnswer",
    "ActivityEvent",
]
