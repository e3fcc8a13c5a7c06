"""
Registration Draft.

The draft is the single source of truth for validated step outputs. Each step
owns one namespace; re-submitting a step replaces its namespace wholesale
(last write wins, no deep merge).
"""

import copy
import logging
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class DraftAccumulator:
    """
    Accumulates validated step payloads for one wizard session.

    Only validated payloads reach `merge()`; the draft never holds partial or
    invalid step data. Values for steps ahead of the current one survive a
    retreat so they can be restored when the user moves forward again.
    """

    def __init__(self) -> None:
        self._draft: dict[str, dict[str, Any]] = {}

    def merge(self, step_id: str, payload: Mapping[str, Any]) -> None:
        """Replace the namespace for `step_id` with a copy of `payload`."""
        key = str(getattr(step_id, "value", step_id))
        self._draft[key] = copy.deepcopy(dict(payload))
        logger.debug(f"Draft merged step={key} fields={sorted(self._draft[key])}")

    def get(self, step_id: str, default: Any = None) -> Any:
        """Read a copy of one step's namespace."""
        key = str(getattr(step_id, "value", step_id))
        if key not in self._draft:
            return default
        return copy.deepcopy(self._draft[key])

    def has(self, step_id: str) -> bool:
        return str(getattr(step_id, "value", step_id)) in self._draft

    def snapshot(self) -> Mapping[str, Mapping[str, Any]]:
        """
        Read-only view of the whole draft.

        Copy-on-read: the returned mappings are detached from internal state,
        so mutating nested lists in the snapshot cannot corrupt the draft.
        """
        return MappingProxyType({
            step: MappingProxyType(copy.deepcopy(values))
            for step, values in self._draft.items()
        })

    def clear(self) -> None:
        self._draft.clear()

    def __len__(self) -> int:
        return len(self._draft)

    def __contains__(self, step_id: object) -> bool:
        return str(getattr(step_id, "value", step_id)) in self._draft
