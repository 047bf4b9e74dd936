from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PipelineState(str, Enum):
    PENDING = "pending"
    CLONED = "cloned"
    BRANCHED = "branched"
    CONFIG_RECONCILED = "config_reconciled"
    SKIPPED = "skipped"
    COMMITTED = "committed"
    PUSHED = "pushed"
    PUBLISHED = "published"
    CLEANED_UP = "cleaned_up"


ALLOWED_TRANSITIONS: dict[PipelineState, set[PipelineState]] = {
    PipelineState.PENDING: {PipelineState.CLONED},
    PipelineState.CLONED: {PipelineState.BRANCHED},
    PipelineState.BRANCHED: {PipelineState.CONFIG_RECONCILED},
    PipelineState.CONFIG_RECONCILED: {PipelineState.SKIPPED, PipelineState.COMMITTED},
    PipelineState.SKIPPED: {PipelineState.CLEANED_UP},
    PipelineState.COMMITTED: {PipelineState.PUSHED},
    PipelineState.PUSHED: {PipelineState.PUBLISHED},
    PipelineState.PUBLISHED: {PipelineState.CLEANED_UP},
    PipelineState.CLEANED_UP: set(),
}


class IllegalTransitionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class PipelineSnapshot:
    """Where one repository is in the pipeline, and how it got there."""

    repository: str
    state: PipelineState = PipelineState.PENDING
    history: tuple[PipelineState, ...] = (PipelineState.PENDING,)

    def to_json(self) -> dict[str, object]:
        return {
            "repository": self.repository,
            "state": self.state.value,
            "history": [s.value for s in self.history],
        }


def transition(*, current: PipelineSnapshot, to: PipelineState) -> PipelineSnapshot:
    allowed = ALLOWED_TRANSITIONS.get(current.state, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.state.value} -> {to.value}")
    return PipelineSnapshot(
        repository=current.repository, state=to, history=current.history + (to,)
    )
