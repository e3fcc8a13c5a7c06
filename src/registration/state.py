"""
Registration Wizard State.

Step ordering and forward/back movement through the sign-up wizard.

Flow:
    user_type -> personal_info -> [subscription_requirements] -> payment -> success

The subscription step exists only for fish producers; for every other account
type it is left out of the sequence entirely. Abandonment is a second terminal
state reachable from any non-terminal step.
"""

import logging
from enum import Enum
from typing import Any, Mapping

from .draft import DraftAccumulator

logger = logging.getLogger(__name__)


class StepId(str, Enum):
    """Wizard steps, in display order."""
    USER_TYPE = "user_type"
    PERSONAL_INFO = "personal_info"
    SUBSCRIPTION_REQUIREMENTS = "subscription_requirements"
    PAYMENT = "payment"
    SUCCESS = "success"


class AccountType(str, Enum):
    PRODUCER = "producer"
    WHOLESALER = "wholesaler"
    LOGISTICS = "logistics"
    CUSTOMER = "customer"


class WizardStatus(str, Enum):
    ACTIVE = "active"
    SUCCESS = "success"
    ABANDONED = "abandoned"


PRODUCER_STEPS: tuple[StepId, ...] = (
    StepId.USER_TYPE,
    StepId.PERSONAL_INFO,
    StepId.SUBSCRIPTION_REQUIREMENTS,
    StepId.PAYMENT,
    StepId.SUCCESS,
)

STANDARD_STEPS: tuple[StepId, ...] = tuple(
    s for s in PRODUCER_STEPS if s != StepId.SUBSCRIPTION_REQUIREMENTS
)


def steps_for(account_type: AccountType | str | None) -> tuple[StepId, ...]:
    """Step sequence for an account type. Unknown or unset types get the standard flow."""
    if account_type is not None and str(getattr(account_type, "value", account_type)) == AccountType.PRODUCER.value:
        return PRODUCER_STEPS
    return STANDARD_STEPS


class StepSequencer:
    """
    Tracks the active wizard step and gates forward movement.

    `advance()` must only be called with a payload that already passed the
    step's validation; the sequencer folds it into the draft and moves on.
    Boundary moves (advance at success, retreat at the first step) are no-ops.
    """

    def __init__(
        self,
        draft: DraftAccumulator | None = None,
        account_type: AccountType | str | None = None,
    ) -> None:
        self.draft = draft if draft is not None else DraftAccumulator()
        self.account_type: AccountType | None = AccountType(account_type) if account_type else None
        self.steps: tuple[StepId, ...] = steps_for(self.account_type)
        self.current_step = 0
        self._abandoned = False

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    @property
    def current(self) -> StepId:
        return self.steps[self.current_step]

    @property
    def is_first(self) -> bool:
        return self.current_step == 0

    @property
    def is_terminal(self) -> bool:
        return self.current_step == len(self.steps) - 1

    @property
    def status(self) -> WizardStatus:
        if self._abandoned:
            return WizardStatus.ABANDONED
        if self.is_terminal:
            return WizardStatus.SUCCESS
        return WizardStatus.ACTIVE

    @property
    def is_closed(self) -> bool:
        return self.status != WizardStatus.ACTIVE

    def completed_steps(self) -> list[StepId]:
        """Steps before the current one."""
        return list(self.steps[: self.current_step])

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance(self, validated_payload: Mapping[str, Any] | None = None) -> bool:
        """
        Merge the current step's payload and move one step forward.

        Returns True if the wizard moved, False on a boundary no-op.
        """
        if self.is_closed:
            logger.debug(f"Advance ignored, wizard is {self.status.value}")
            return False

        step = self.current
        if validated_payload is not None:
            self.draft.merge(step, validated_payload)
            if step == StepId.USER_TYPE and validated_payload.get("user_type"):
                self._set_account_type(validated_payload["user_type"])

        self.current_step = min(self.current_step + 1, len(self.steps) - 1)
        logger.info(f"Wizard advanced {step.value} -> {self.current.value}")
        return True

    def retreat(self) -> bool:
        """
        Move one step back without touching the draft.

        Data entered for later steps stays in the draft so moving forward
        again restores it. Returns False on a boundary no-op.
        """
        if self.is_closed or self.is_first:
            logger.debug(f"Retreat ignored at {self.current.value}")
            return False

        step = self.current
        self.current_step -= 1
        logger.info(f"Wizard retreated {step.value} -> {self.current.value}")
        return True

    def abandon(self) -> None:
        """End the session without completing it. The draft is discarded."""
        if self.is_closed:
            return
        logger.info(f"Wizard abandoned at {self.current.value}")
        self._abandoned = True
        self.draft.clear()

    def reset(self) -> None:
        """Clear the draft and return to the first step."""
        self.draft.clear()
        self.account_type = None
        self.steps = steps_for(None)
        self.current_step = 0
        self._abandoned = False
        logger.info("Wizard reset")

    def _set_account_type(self, account_type: AccountType | str) -> None:
        self.account_type = AccountType(account_type)
        self.steps = steps_for(self.account_type)
        # The type step is always first, so the index stays valid
        logger.debug(f"Step sequence for {self.account_type.value}: {[s.value for s in self.steps]}")

    def to_dict(self) -> dict:
        return {
            "account_type": self.account_type.value if self.account_type else None,
            "steps": [s.value for s in self.steps],
            "current_step": self.current_step,
            "current": self.current.value,
            "status": self.status.value,
            "completed_steps": [s.value for s in self.completed_steps()],
        }
