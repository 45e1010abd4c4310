from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime

from app.enums import (
    AssistantGender,
    AssistantPersona,
    OnboardingStep,
    SkillLevel,
)


# Request schemas
class AssistantSelectionCreate(BaseModel):
    assistant_id: str = Field(..., min_length=1, max_length=25)


class PersonaSelectionCreate(BaseModel):
    persona: AssistantPersona


class OnboardingStepUpdate(BaseModel):
    step: OnboardingStep

    @validator('step')
    def validate_not_terminal(cls, v):
        if v == OnboardingStep.COMPLETED:
            raise ValueError('Use the complete endpoint to finish onboarding')
        return v


class QuizAnswerInput(BaseModel):
    question_id: str = Field(..., min_length=1, max_length=25)
    option_id: str = Field(..., min_length=1, max_length=25)


class SkillQuizSubmitRequest(BaseModel):
    answers: List[QuizAnswerInput] = Field(..., min_length=1)

    @validator('answers')
    def validate_unique_questions(cls, v):
        question_ids = [answer.question_id for answer in v]
        if len(question_ids) != len(set(question_ids)):
            raise ValueError('Each question may only be answered once')
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "answers": [
                    {"question_id": "ckq1", "option_id": "cko3"},
                    {"question_id": "ckq2", "option_id": "cko7"}
                ]
            }
        }


# Response schemas
class StepDefinitionResponse(BaseModel):
    step: OnboardingStep
    index: int
    href: str
    title: str


class OnboardingStatusResponse(BaseModel):
    current_step: OnboardingStep
    current_href: str
    current_title: str
    progress_percent: int
    is_new_user: bool
    is_completed: bool
    resume_step: OnboardingStep
    resume_href: str
    assistant_id: Optional[str] = None
    assistant_persona: Optional[AssistantPersona] = None
    skill_level: Optional[SkillLevel] = None
    completed_at: Optional[datetime] = None


class StepAccessResponse(BaseModel):
    decision: str
    requested_step: Optional[OnboardingStep] = None
    canonical_step: Optional[OnboardingStep] = None
    redirect_to: Optional[str] = None


class StepTransitionResponse(BaseModel):
    next_step: OnboardingStep
    next_href: str


class OnboardingCompletionResponse(BaseModel):
    completed: bool
    redirect_to: str


class OnboardingResetResponse(BaseModel):
    success: bool
    redirect_to: str


class AssistantOptionResponse(BaseModel):
    id: str
    name: str
    slug: str
    gender: Optional[AssistantGender] = None
    avatar_url: Optional[str] = None
    tagline: Optional[str] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True


class SkillQuizOptionResponse(BaseModel):
    id: str
    text: str
    order_index: int

    class Config:
        from_attributes = True


class SkillQuizQuestionResponse(BaseModel):
    id: str
    text: str
    order_index: int
    options: List[SkillQuizOptionResponse]

    class Config:
        from_attributes = True


class SkillQuizResultResponse(BaseModel):
    score: int
    total: int
    level: SkillLevel
    suggested_course: str
    next_path: str

    class Config:
        json_schema_extra = {
            "example": {
                "score": 2,
                "total": 3,
                "level": "intermediate",
                "suggested_course": "Python Fundamentals + Projects",
                "next_path": "/onboarding/persona"
            }
        }
