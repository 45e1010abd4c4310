"""Tests for the step resolver and the access guard.

These tests verify:
- Completion always resolves to the terminal step
- Null and stale persisted steps fall back to the first step
- One-step-ahead and backward navigation are allowed
- Skipping two or more steps ahead redirects to the canonical step's page
- Unknown requested steps are rejected
"""

from datetime import datetime

import pytest

from app.enums import OnboardingStep
from app.services.onboarding_guard import (
    AccessGuard,
    GuardDecision,
    OnboardingSnapshot,
    StepResolver,
)
from app.services.onboarding_steps import DEFAULT_STEP_REGISTRY

registry = DEFAULT_STEP_REGISTRY
resolver = StepResolver(registry)
guard = AccessGuard(registry, resolver)

_DONE = datetime(2025, 1, 1, 12, 0, 0)


# =============================================================================
# Step Resolver
# =============================================================================


class TestStepResolver:
    """Tests for StepResolver.resolve."""

    @pytest.mark.parametrize("persisted", [None, "welcome", "persona", "guided_intro", "bogus"])
    def test_completed_at_wins_over_persisted_step(self, persisted) -> None:
        snapshot = OnboardingSnapshot(current_step=persisted, completed_at=_DONE)
        assert resolver.resolve(snapshot) == OnboardingStep.COMPLETED

    def test_null_step_resolves_to_first_step(self) -> None:
        assert resolver.resolve(OnboardingSnapshot()) == OnboardingStep.WELCOME

    def test_null_step_with_assistant_still_resolves_to_first_step(self) -> None:
        snapshot = OnboardingSnapshot(assistant_id="a1", assistant_persona="calm")
        assert resolver.resolve(snapshot) == OnboardingStep.WELCOME

    @pytest.mark.parametrize("step", ["welcome", "gender", "persona", "guided_intro"])
    def test_valid_persisted_step_is_returned(self, step) -> None:
        assert resolver.resolve(OnboardingSnapshot(current_step=step)) == OnboardingStep(step)

    @pytest.mark.parametrize("stale", ["skill_quiz", "", "PERSONA"])
    def test_stale_step_falls_back_to_first_step(self, stale) -> None:
        assert resolver.resolve(OnboardingSnapshot(current_step=stale)) == OnboardingStep.WELCOME

    def test_persisted_completed_without_timestamp_clamps_to_last_real_step(self) -> None:
        snapshot = OnboardingSnapshot(current_step="completed")
        assert resolver.resolve(snapshot) == OnboardingStep.GUIDED_INTRO


# =============================================================================
# Access Guard
# =============================================================================


def _snapshot_at(step: OnboardingStep) -> OnboardingSnapshot:
    if step == OnboardingStep.COMPLETED:
        return OnboardingSnapshot(completed_at=_DONE)
    return OnboardingSnapshot(current_step=step.value)


class TestAccessGuard:
    """Tests for AccessGuard.check."""

    @pytest.mark.parametrize("current", list(registry.steps))
    def test_neighbouring_steps_are_allowed(self, current) -> None:
        snapshot = _snapshot_at(current)
        c = registry.index_of(current)
        for r in (c - 1, c, c + 1):
            if 0 <= r < len(registry):
                decision = guard.check(snapshot, registry.step_at(r))
                assert decision.kind == GuardDecision.ALLOW, (current, r)

    @pytest.mark.parametrize("current", list(registry.steps))
    def test_all_earlier_steps_are_allowed(self, current) -> None:
        snapshot = _snapshot_at(current)
        for r in range(registry.index_of(current)):
            assert guard.check(snapshot, registry.step_at(r)).allowed

    @pytest.mark.parametrize("current", list(registry.real_steps))
    def test_skipping_ahead_redirects_to_canonical_page(self, current) -> None:
        snapshot = _snapshot_at(current)
        c = registry.index_of(current)
        for r in range(c + 2, len(registry)):
            decision = guard.check(snapshot, registry.step_at(r))
            assert decision.kind == GuardDecision.REDIRECT
            assert decision.redirect_to == registry.href_for(current)
            assert decision.canonical == current

    def test_welcome_user_cannot_jump_to_persona(self) -> None:
        decision = guard.check(OnboardingSnapshot(current_step="welcome"), "persona")
        assert decision.kind == GuardDecision.REDIRECT
        assert decision.redirect_to == "/onboarding/welcome"

    def test_completed_requested_from_last_real_step_is_allowed(self) -> None:
        decision = guard.check(OnboardingSnapshot(current_step="guided_intro"), OnboardingStep.COMPLETED)
        assert decision.allowed

    def test_completed_requested_early_is_redirected(self) -> None:
        decision = guard.check(OnboardingSnapshot(current_step="gender"), OnboardingStep.COMPLETED)
        assert decision.kind == GuardDecision.REDIRECT
        assert decision.redirect_to == "/onboarding/gender"

    def test_stale_state_is_guarded_from_first_step(self) -> None:
        snapshot = OnboardingSnapshot(current_step="skill_quiz")
        assert guard.check(snapshot, "gender").allowed
        assert guard.check(snapshot, "persona").kind == GuardDecision.REDIRECT

    @pytest.mark.parametrize("requested", ["skill_quiz", "nope", ""])
    def test_unknown_step_is_rejected(self, requested) -> None:
        decision = guard.check(OnboardingSnapshot(current_step="gender"), requested)
        assert decision.kind == GuardDecision.REJECT
        assert decision.redirect_to is None

    def test_guard_does_not_mutate_snapshot(self) -> None:
        snapshot = OnboardingSnapshot(current_step="welcome")
        guard.check(snapshot, "guided_intro")
        assert snapshot.current_step == "welcome"
