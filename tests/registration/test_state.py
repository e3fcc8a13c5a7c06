"""
Tests for wizard step sequencing.
"""

import pytest

from registration.draft import DraftAccumulator
from registration.state import (
    PRODUCER_STEPS,
    STANDARD_STEPS,
    AccountType,
    StepId,
    StepSequencer,
    WizardStatus,
    steps_for,
)


def walk_to(sequencer: StepSequencer, step: StepId) -> None:
    while sequencer.current != step:
        sequencer.advance({"placeholder": sequencer.current.value})


class TestStepsFor:

    def test_producer_includes_subscription(self):
        assert StepId.SUBSCRIPTION_REQUIREMENTS in steps_for("producer")
        assert steps_for(AccountType.PRODUCER) == PRODUCER_STEPS

    @pytest.mark.parametrize("account_type", ["wholesaler", "logistics", "customer", None])
    def test_other_types_skip_subscription(self, account_type):
        steps = steps_for(account_type)
        assert StepId.SUBSCRIPTION_REQUIREMENTS not in steps
        assert steps == STANDARD_STEPS

    def test_order(self):
        assert PRODUCER_STEPS[0] == StepId.USER_TYPE
        assert PRODUCER_STEPS[-1] == StepId.SUCCESS
        assert STANDARD_STEPS == (
            StepId.USER_TYPE,
            StepId.PERSONAL_INFO,
            StepId.PAYMENT,
            StepId.SUCCESS,
        )


class TestAdvance:

    def test_starts_at_user_type(self):
        sequencer = StepSequencer()
        assert sequencer.current == StepId.USER_TYPE
        assert sequencer.current_step == 0
        assert sequencer.status == WizardStatus.ACTIVE

    def test_advance_merges_payload_under_current_step(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "customer"})

        assert sequencer.current == StepId.PERSONAL_INFO
        assert sequencer.draft.get(StepId.USER_TYPE) == {"user_type": "customer"}

    def test_producer_type_switches_sequence(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "producer"})
        sequencer.advance({"full_name": "Ahmed"})

        assert sequencer.account_type == AccountType.PRODUCER
        assert sequencer.current == StepId.SUBSCRIPTION_REQUIREMENTS

    def test_customer_goes_straight_to_payment(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "customer"})
        sequencer.advance({"full_name": "Mona"})

        assert sequencer.current == StepId.PAYMENT

    def test_advance_at_success_is_noop(self):
        sequencer = StepSequencer(account_type="customer")
        walk_to(sequencer, StepId.SUCCESS)
        draft_before = {k: dict(v) for k, v in sequencer.draft.snapshot().items()}

        assert sequencer.advance({"extra": True}) is False
        assert sequencer.current == StepId.SUCCESS
        assert sequencer.status == WizardStatus.SUCCESS
        assert {k: dict(v) for k, v in sequencer.draft.snapshot().items()} == draft_before

    def test_non_producer_sequence_never_visits_subscription(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "wholesaler"})
        visited = [StepId.USER_TYPE]
        while not sequencer.is_terminal:
            visited.append(sequencer.current)
            sequencer.advance({})
        assert StepId.SUBSCRIPTION_REQUIREMENTS not in visited
        assert StepId.SUBSCRIPTION_REQUIREMENTS not in sequencer.steps


class TestRetreat:

    def test_retreat_at_first_step_is_noop(self):
        sequencer = StepSequencer()
        assert sequencer.retreat() is False
        assert sequencer.current == StepId.USER_TYPE

    def test_retreat_keeps_draft(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "producer"})
        sequencer.advance({"full_name": "Ahmed"})

        assert sequencer.retreat() is True
        assert sequencer.current == StepId.PERSONAL_INFO
        assert sequencer.draft.get(StepId.PERSONAL_INFO) == {"full_name": "Ahmed"}

    @pytest.mark.parametrize("step", [StepId.PERSONAL_INFO, StepId.SUBSCRIPTION_REQUIREMENTS, StepId.PAYMENT])
    def test_retreat_then_advance_restores_draft(self, step):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "producer"})
        walk_to(sequencer, step)
        before = {k: dict(v) for k, v in sequencer.draft.snapshot().items()}

        sequencer.retreat()
        previous = sequencer.current
        same_payload = sequencer.draft.get(previous)
        sequencer.advance(same_payload)

        assert sequencer.current == step
        assert {k: dict(v) for k, v in sequencer.draft.snapshot().items()} == before

    def test_retreat_at_success_is_noop(self):
        sequencer = StepSequencer(account_type="customer")
        walk_to(sequencer, StepId.SUCCESS)
        assert sequencer.retreat() is False
        assert sequencer.current == StepId.SUCCESS

    def test_changing_type_after_going_back(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "producer"})
        sequencer.retreat()
        sequencer.advance({"user_type": "customer"})

        assert sequencer.steps == STANDARD_STEPS
        assert sequencer.current == StepId.PERSONAL_INFO


class TestAbandonAndReset:

    def test_abandon_is_terminal(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "customer"})
        sequencer.abandon()

        assert sequencer.status == WizardStatus.ABANDONED
        assert sequencer.advance({"full_name": "x"}) is False
        assert sequencer.retreat() is False
        assert len(sequencer.draft) == 0

    def test_reset_clears_draft_and_returns_to_start(self):
        draft = DraftAccumulator()
        sequencer = StepSequencer(draft)
        sequencer.advance({"user_type": "producer"})
        sequencer.advance({"full_name": "Ahmed"})

        sequencer.reset()

        assert sequencer.current == StepId.USER_TYPE
        assert sequencer.account_type is None
        assert len(draft) == 0
        assert sequencer.status == WizardStatus.ACTIVE

    def test_reset_after_abandon(self):
        sequencer = StepSequencer()
        sequencer.abandon()
        sequencer.reset()
        assert sequencer.status == WizardStatus.ACTIVE
        assert sequencer.advance({"user_type": "customer"}) is True

    def test_to_dict(self):
        sequencer = StepSequencer()
        sequencer.advance({"user_type": "producer"})
        data = sequencer.to_dict()

        assert data["account_type"] == "producer"
        assert data["current"] == "personal_info"
        assert data["completed_steps"] == ["user_type"]
        assert "subscription_requirements" in data["steps"]
