"""
Onboarding step resolution and access decisions.

Both classes are pure: they read an ``OnboardingSnapshot`` taken at the start
of a request and never touch the database. The route layer turns a
``GuardDecision`` into a render, a redirect or a 404.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from app.core.logger import get_logger
from app.enums import OnboardingStep
from app.exceptions.errors import StaleStateError, UnknownStepError
from app.services.onboarding_steps import DEFAULT_STEP_REGISTRY, StepRegistry

logger = get_logger("onboarding_guard")


@dataclass(frozen=True)
class OnboardingSnapshot:
    """Onboarding-related state of one user, read once per request."""

    current_step: Optional[str] = None
    assistant_id: Optional[str] = None
    assistant_persona: Optional[str] = None
    skill_level: Optional[str] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_records(cls, user, progress=None) -> "OnboardingSnapshot":
        persona = user.assistant_persona
        level = user.skill_level
        return cls(
            current_step=progress.current_step if progress is not None else None,
            assistant_id=user.assistant_id,
            assistant_persona=persona.value if hasattr(persona, "value") else persona,
            skill_level=level.value if hasattr(level, "value") else level,
            completed_at=progress.completed_at if progress is not None else None,
        )


class StepResolver:
    """Derives the canonical step a user should currently be on."""

    def __init__(self, registry: StepRegistry = DEFAULT_STEP_REGISTRY):
        self.registry = registry

    def resolve(self, snapshot: OnboardingSnapshot) -> OnboardingStep:
        if snapshot.completed_at is not None:
            return self.registry.terminal

        if snapshot.current_step is None:
            return self.registry.first

        try:
            return self._persisted_step(snapshot.current_step)
        except StaleStateError as exc:
            logger.warning(f"{exc}; falling back to {self.registry.first.value}")
            return self.registry.first

    def _persisted_step(self, value: str) -> OnboardingStep:
        try:
            step = self.registry.parse(value)
        except UnknownStepError:
            raise StaleStateError(value)
        # Only completed_at marks completion
        if step == self.registry.terminal:
            logger.info(f"Persisted step {value!r} without completed_at, clamping to {self.registry.last_real_step.value}")
            return self.registry.last_real_step
        return step


@dataclass(frozen=True)
class GuardDecision:
    ALLOW = "allow"
    REDIRECT = "redirect"
    REJECT = "reject"

    kind: str
    requested: Optional[OnboardingStep] = None
    canonical: Optional[OnboardingStep] = None
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.kind == self.ALLOW


class AccessGuard:
    """Decides whether a requested onboarding step may be served.

    Backward navigation and a single step ahead of the canonical step are
    always allowed, so a client that navigates before the server has stored
    the new step is not bounced back. Anything further ahead redirects to the
    canonical step's page.
    """

    def __init__(self, registry: StepRegistry = DEFAULT_STEP_REGISTRY, resolver: Optional[StepResolver] = None):
        self.registry = registry
        self.resolver = resolver or StepResolver(registry)

    def check(self, snapshot: OnboardingSnapshot, requested: Union[OnboardingStep, str]) -> GuardDecision:
        try:
            target = self.registry.parse(requested)
        except UnknownStepError as exc:
            logger.info(f"Rejecting onboarding request: {exc}")
            return GuardDecision(kind=GuardDecision.REJECT)

        canonical = self.resolver.resolve(snapshot)
        current_index = self.registry.index_of(canonical)
        target_index = self.registry.index_of(target)

        if target_index <= current_index + 1:
            return GuardDecision(kind=GuardDecision.ALLOW, requested=target, canonical=canonical)

        return GuardDecision(
            kind=GuardDecision.REDIRECT,
            requested=target,
            canonical=canonical,
            redirect_to=self.registry.href_for(canonical),
        )


default_resolver = StepResolver(DEFAULT_STEP_REGISTRY)
default_guard = AccessGuard(DEFAULT_STEP_REGISTRY, default_resolver)
