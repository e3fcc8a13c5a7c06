"""
Tests for the registration draft.
"""

import pytest

from registration.draft import DraftAccumulator
from registration.state import StepId


class TestMerge:

    def test_merge_namespaces_by_step(self):
        draft = DraftAccumulator()
        draft.merge(StepId.USER_TYPE, {"user_type": "producer"})
        draft.merge("personal_info", {"full_name": "Ahmed"})

        snapshot = draft.snapshot()
        assert dict(snapshot["user_type"]) == {"user_type": "producer"}
        assert dict(snapshot["personal_info"]) == {"full_name": "Ahmed"}

    def test_remerge_overwrites_whole_namespace(self):
        draft = DraftAccumulator()
        draft.merge("personal_info", {"full_name": "Ahmed", "company_name": "Hassan Co"})
        draft.merge("personal_info", {"full_name": "Ahmed Hassan"})

        assert draft.get("personal_info") == {"full_name": "Ahmed Hassan"}

    def test_merge_copies_payload(self):
        draft = DraftAccumulator()
        payload = {"boats": [{"capacity": 50}]}
        draft.merge("subscription_requirements", payload)

        payload["boats"].append({"capacity": 100})

        assert draft.get("subscription_requirements") == {"boats": [{"capacity": 50}]}

    def test_enum_and_string_keys_are_equivalent(self):
        draft = DraftAccumulator()
        draft.merge(StepId.PAYMENT, {"payment_method": "cash"})

        assert draft.has("payment")
        assert "payment" in draft
        assert StepId.PAYMENT in draft
        assert draft.get(StepId.PAYMENT) == {"payment_method": "cash"}

    def test_get_missing_returns_default(self):
        assert DraftAccumulator().get("payment", {}) == {}


class TestSnapshot:

    def test_snapshot_is_read_only(self):
        draft = DraftAccumulator()
        draft.merge("user_type", {"user_type": "customer"})
        snapshot = draft.snapshot()

        with pytest.raises(TypeError):
            snapshot["user_type"] = {}
        with pytest.raises(TypeError):
            snapshot["user_type"]["user_type"] = "producer"

    def test_snapshot_is_detached(self):
        draft = DraftAccumulator()
        draft.merge("subscription_requirements", {"boats": [{"capacity": 50}]})

        snapshot = draft.snapshot()
        snapshot["subscription_requirements"]["boats"].append({"capacity": 999})

        assert draft.get("subscription_requirements") == {"boats": [{"capacity": 50}]}

    def test_clear(self):
        draft = DraftAccumulator()
        draft.merge("user_type", {"user_type": "customer"})
        draft.clear()
        assert len(draft) == 0
        assert dict(draft.snapshot()) == {}
