"""
Shared enums for the application.
"""

from .user_enums import (
    UserType,
    AssistantGender,
    AssistantPersona,
    SkillLevel,
    OnboardingStep,
    ActivityEventType,
)

__all__ = [
    "UserType",
    "AssistantGender",
    "AssistantPersona",
    "SkillLevel",
    "OnboardingStep",
    "ActivityEventType",
]
