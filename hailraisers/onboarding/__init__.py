"""Find-join-or-create onboarding for the box directory."""

from .collaborators import Collaborators, local_collaborators
from .results import Failure, Success
from .steps import CreationStep, Step
from .workflow import OnboardingWorkflow, WorkflowSettings, WorkflowStateError

__all__ = [
    "Collaborators",
    "CreationStep",
    "Failure",
    "OnboardingWorkflow",
    "Step",
    "Success",
    "WorkflowSettings",
    "WorkflowStateError",
    "local_collaborators",
]
