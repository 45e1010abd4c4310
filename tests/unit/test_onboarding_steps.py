"""Tests for the onboarding step registry and its helpers.

These tests verify:
- Ordering, index and href lookups
- Unknown steps fail with UnknownStepError
- Registry construction rejects duplicates
- Progress, new-user and resume helpers
"""

import pytest

from app.enums import OnboardingStep
from app.exceptions.errors import UnknownStepError
from app.services.onboarding_guard import OnboardingSnapshot, StepResolver
from app.services.onboarding_steps import (
    DEFAULT_STEP_REGISTRY,
    StepDefinition,
    StepRegistry,
    calculate_progress,
    get_resume_step,
    is_new_user,
)

registry = DEFAULT_STEP_REGISTRY


# =============================================================================
# Lookups
# =============================================================================


class TestRegistryLookups:
    """Tests for index_of, href_for and friends."""

    def test_steps_are_in_fixed_order(self) -> None:
        assert registry.steps == (
            OnboardingStep.WELCOME,
            OnboardingStep.GENDER,
            OnboardingStep.PERSONA,
            OnboardingStep.GUIDED_INTRO,
            OnboardingStep.COMPLETED,
        )

    def test_first_terminal_and_last_real_step(self) -> None:
        assert registry.first == OnboardingStep.WELCOME
        assert registry.terminal == OnboardingStep.COMPLETED
        assert registry.last_real_step == OnboardingStep.GUIDED_INTRO
        assert OnboardingStep.COMPLETED not in registry.real_steps

    def test_index_of_matches_position(self) -> None:
        for position, step in enumerate(registry.steps):
            assert registry.index_of(step) == position

    def test_index_of_accepts_raw_strings(self) -> None:
        assert registry.index_of("persona") == 2

    def test_href_is_unique_per_step(self) -> None:
        hrefs = [registry.href_for(step) for step in registry.steps]
        assert len(set(hrefs)) == len(hrefs)

    def test_href_for_guided_intro(self) -> None:
        assert registry.href_for(OnboardingStep.GUIDED_INTRO) == "/onboarding/guided-intro"

    def test_completed_maps_to_home(self) -> None:
        assert registry.href_for(OnboardingStep.COMPLETED) == "/home"

    @pytest.mark.parametrize("value", ["skill_quiz", "", "WELCOME", None])
    def test_unknown_step_raises(self, value) -> None:
        with pytest.raises(UnknownStepError):
            registry.index_of(value)
        with pytest.raises(UnknownStepError):
            registry.href_for(value)

    def test_is_valid(self) -> None:
        assert registry.is_valid("gender") is True
        assert registry.is_valid("skill_quiz") is False
        assert registry.is_valid(None) is False

    def test_next_step(self) -> None:
        assert registry.next_step(OnboardingStep.WELCOME) == OnboardingStep.GENDER
        assert registry.next_step(OnboardingStep.GUIDED_INTRO) == OnboardingStep.COMPLETED
        assert registry.next_step(OnboardingStep.COMPLETED) is None

    def test_step_at_out_of_range(self) -> None:
        with pytest.raises(UnknownStepError):
            registry.step_at(len(registry))

    def test_step_missing_from_custom_registry_is_unknown(self) -> None:
        short = StepRegistry((
            StepDefinition(OnboardingStep.WELCOME, "/a", "A"),
            StepDefinition(OnboardingStep.COMPLETED, "/b", "B"),
        ))
        with pytest.raises(UnknownStepError):
            short.index_of(OnboardingStep.PERSONA)


class TestRegistryConstruction:
    """Tests for registry validation."""

    def test_rejects_duplicate_steps(self) -> None:
        with pytest.raises(ValueError):
            StepRegistry((
                StepDefinition(OnboardingStep.WELCOME, "/a", "A"),
                StepDefinition(OnboardingStep.WELCOME, "/b", "B"),
            ))

    def test_rejects_duplicate_hrefs(self) -> None:
        with pytest.raises(ValueError):
            StepRegistry((
                StepDefinition(OnboardingStep.WELCOME, "/a", "A"),
                StepDefinition(OnboardingStep.COMPLETED, "/a", "B"),
            ))

    def test_rejects_registry_without_real_step(self) -> None:
        with pytest.raises(ValueError):
            StepRegistry((StepDefinition(OnboardingStep.COMPLETED, "/home", "Done"),))


# =============================================================================
# Helpers
# =============================================================================


class TestProgressHelpers:
    """Tests for calculate_progress, is_new_user and get_resume_step."""

    @pytest.mark.parametrize(
        ("step", "expected"),
        [
            (OnboardingStep.WELCOME, 0),
            (OnboardingStep.GENDER, 25),
            (OnboardingStep.PERSONA, 50),
            (OnboardingStep.GUIDED_INTRO, 75),
            (OnboardingStep.COMPLETED, 100),
        ],
    )
    def test_calculate_progress(self, step, expected) -> None:
        assert calculate_progress(step) == expected

    def test_fresh_user_is_new(self) -> None:
        assert is_new_user(OnboardingSnapshot()) is True
        assert is_new_user(OnboardingSnapshot(current_step="welcome")) is True

    def test_user_with_assistant_is_not_new(self) -> None:
        assert is_new_user(OnboardingSnapshot(current_step="welcome", assistant_id="a1")) is False

    def test_user_past_welcome_is_not_new(self) -> None:
        assert is_new_user(OnboardingSnapshot(current_step="gender")) is False

    def test_resume_step_for_new_user_is_welcome(self) -> None:
        assert get_resume_step(OnboardingSnapshot(), StepResolver()) == OnboardingStep.WELCOME

    def test_returning_user_on_welcome_resumes_at_gender(self) -> None:
        snapshot = OnboardingSnapshot(current_step="welcome", assistant_id="a1")
        assert get_resume_step(snapshot, StepResolver()) == OnboardingStep.GENDER

    def test_resume_step_follows_persisted_step(self) -> None:
        snapshot = OnboardingSnapshot(current_step="persona", assistant_id="a1")
        assert get_resume_step(snapshot, StepResolver()) == OnboardingStep.PERSONA
