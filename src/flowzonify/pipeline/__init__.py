"""Per-repository onboarding pipeline.

This package introduces first-class types for:
- the explicit state machine a repository moves through
- the change record used for commit and pull request text
- the runner sequencing clone, reconcile, commit, push, publish and cleanup
"""

from flowzonify.pipeline.runner import ChangeRecord, PipelineOutcome, RepositoryPipeline
from flowzonify.pipeline.state_machine import (
    IllegalTransitionError,
    PipelineSnapshot,
    PipelineState,
    transition,
)

__all__ = [
    "ChangeRecord",
    "IllegalTransitionError",
    "PipelineOutcome",
    "PipelineSnapshot",
    "PipelineState",
    "RepositoryPipeline",
    "transition",
]
