"""
User-related enums for the application.
"""

from enum import Enum


class UserType(str, Enum):
    ADMIN = "admin"
    USER = "user"


class AssistantGender(str, Enum):
    FEMININE = "feminine"
    MASCULINE = "masculine"
    ANDROGYNOUS = "androgynous"


class AssistantPersona(str, Enum):
    CALM = "calm"
    KIND = "kind"
    DIRECT = "direct"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class OnboardingStep(str, Enum):
    WELCOME = "welcome"
    GENDER = "gender"
    PERSONA = "persona"
    GUIDED_INTRO = "guided_intro"
    COMPLETED = "completed"


class ActivityEventType(str, Enum):
    QUIZ_SUBMITTED = "quiz_submitted"
    QUIZ_PERFECT = "quiz_perfect"
