"""The workflow's own mutable state and the read-only view handed out."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .steps import Step

if TYPE_CHECKING:
    from hailraisers.box.models import Group
    from hailraisers.hailraiser.models import Member, NewMember

    from .results import Failure


@dataclass
class WorkflowContext:
    """Shared selection state. Only :class:`OnboardingWorkflow` mutates it."""

    step: Step = Step.SEARCH
    search_text: str = ""
    selected_group: Group | None = None
    captured_member: NewMember | None = None
    created_member: Member | None = None
    member_draft: dict[str, str] = field(default_factory=dict)
    error: Failure | None = None

    def clear(self) -> None:
        """Forget everything captured so far and go back to searching."""
        self.step = Step.SEARCH
        self.search_text = ""
        self.selected_group = None
        self.captured_member = None
        self.created_member = None
        self.member_draft = {}
        self.error = None

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            step=self.step,
            search_text=self.search_text,
            selected_group=self.selected_group,
            captured_member=self.captured_member,
            created_member=self.created_member,
            member_draft=dict(self.member_draft),
            error=self.error,
        )


@dataclass(frozen=True)
class WorkflowSnapshot:
    step: Step
    search_text: str
    selected_group: Group | None
    captured_member: NewMember | None
    created_member: Member | None
    member_draft: dict[str, str]
    error: Failure | None

    @property
    def group_name(self) -> str:
        return self.selected_group.name if self.selected_group else ""
