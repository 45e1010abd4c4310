"""
Onboarding step registry.

The registry is the single ordered definition of the onboarding flow: which
steps exist, the order a learner passes through them and the page each one
lives on. It is built once at import time and handed to the resolver and
guard, which only ever compare positions in it.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from app.core.config import settings
from app.enums import OnboardingStep
from app.exceptions.errors import UnknownStepError


@dataclass(frozen=True)
class StepDefinition:
    step: OnboardingStep
    href: str
    title: str


class StepRegistry:
    """Immutable ordered list of onboarding steps.

    The last definition is the terminal step; every definition before it is a
    real step a learner is shown.
    """

    def __init__(self, definitions: Iterable[StepDefinition]):
        self._definitions: Tuple[StepDefinition, ...] = tuple(definitions)
        if len(self._definitions) < 2:
            raise ValueError("A step registry needs at least one real step and a terminal step")

        self._index = {}
        hrefs = set()
        for position, definition in enumerate(self._definitions):
            if definition.step in self._index:
                raise ValueError(f"Duplicate onboarding step: {definition.step.value}")
            if definition.href in hrefs:
                raise ValueError(f"Duplicate onboarding href: {definition.href}")
            self._index[definition.step] = position
            hrefs.add(definition.href)

    def __len__(self):
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions)

    @property
    def steps(self) -> Tuple[OnboardingStep, ...]:
        return tuple(d.step for d in self._definitions)

    @property
    def real_steps(self) -> Tuple[OnboardingStep, ...]:
        return self.steps[:-1]

    @property
    def first(self) -> OnboardingStep:
        return self._definitions[0].step

    @property
    def terminal(self) -> OnboardingStep:
        return self._definitions[-1].step

    @property
    def last_real_step(self) -> OnboardingStep:
        return self._definitions[-2].step

    def parse(self, value: Union[OnboardingStep, str]) -> OnboardingStep:
        """Turn a raw value into a registered step or raise UnknownStepError."""
        try:
            step = OnboardingStep(value)
        except ValueError:
            raise UnknownStepError(value)
        if step not in self._index:
            raise UnknownStepError(value)
        return step

    def is_valid(self, value: Union[OnboardingStep, str, None]) -> bool:
        if value is None:
            return False
        try:
            self.parse(value)
        except UnknownStepError:
            return False
        return True

    def index_of(self, step: Union[OnboardingStep, str]) -> int:
        return self._index[self.parse(step)]

    def definition_for(self, step: Union[OnboardingStep, str]) -> StepDefinition:
        return self._definitions[self.index_of(step)]

    def href_for(self, step: Union[OnboardingStep, str]) -> str:
        return self.definition_for(step).href

    def title_for(self, step: Union[OnboardingStep, str]) -> str:
        return self.definition_for(step).title

    def step_at(self, index: int) -> OnboardingStep:
        if index < 0 or index >= len(self._definitions):
            raise UnknownStepError(index)
        return self._definitions[index].step

    def next_step(self, step: Union[OnboardingStep, str]) -> Optional[OnboardingStep]:
        position = self.index_of(step)
        if position + 1 >= len(self._definitions):
            return None
        return self._definitions[position + 1].step


DEFAULT_STEP_REGISTRY = StepRegistry((
    StepDefinition(OnboardingStep.WELCOME, "/onboarding/welcome", "Welcome"),
    StepDefinition(OnboardingStep.GENDER, "/onboarding/gender", "Choose Your Assistant"),
    StepDefinition(OnboardingStep.PERSONA, "/onboarding/persona", "Tune Their Personality"),
    StepDefinition(OnboardingStep.GUIDED_INTRO, "/onboarding/guided-intro", "Ready to Start"),
    StepDefinition(OnboardingStep.COMPLETED, settings.HOME_PATH, "Completed"),
))


def calculate_progress(step: Union[OnboardingStep, str], registry: StepRegistry = DEFAULT_STEP_REGISTRY) -> int:
    """Percent of the real steps already behind the learner."""
    real_count = len(registry.real_steps)
    return round(registry.index_of(step) * 100 / real_count)


def is_new_user(snapshot, registry: StepRegistry = DEFAULT_STEP_REGISTRY) -> bool:
    """True when the learner has not made a single onboarding choice yet."""
    at_start = snapshot.current_step is None or snapshot.current_step == registry.first.value
    return at_start and snapshot.assistant_id is None and snapshot.assistant_persona is None


def get_resume_step(snapshot, resolver) -> OnboardingStep:
    """Step a returning learner should be sent to from the welcome page."""
    step = resolver.resolve(snapshot)
    registry = resolver.registry
    if step == registry.first and not is_new_user(snapshot, registry):
        return registry.next_step(step)
    return step
