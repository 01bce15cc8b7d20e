"""Design IRL workflow engine: selection, taste synthesis and orchestration."""

from designirl.engine.orchestrator import WorkflowOrchestrator
from designirl.engine.selection import SelectionSet
from designirl.engine.taste import synthesize_profile

__all__ = [
    "WorkflowOrchestrator",
    "SelectionSet",
    "synthesize_profile",
]
