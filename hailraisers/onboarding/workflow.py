"""The find-join-or-create flow behind the "find your box" search field.

States run Search -> CaptureMember -> (JoinGroup | CreateGroup) -> Success,
with Exit reachable by cancelling. All transitions happen synchronously in
response to user actions; collaborator calls are awaited and their results
are dropped if the workflow moved on (or was closed) in the meantime.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping

from hailraisers.constants import (
    DEBOUNCE_SECONDS,
    ERROR_RESET_SECONDS,
    EXIT_DELAY_SECONDS,
    MAX_SEARCH_RETRIES,
    MIN_SEARCH_LENGTH,
    RETRY_BASE_SECONDS,
)
from hailraisers.core.cancellation import CancellationToken
from hailraisers.core.debounce import SleepFunc
from hailraisers.errors import ErrorKind
from hailraisers.hailraiser.utils import DeviceProbe

from .boundary import ErrorBoundary
from .context import WorkflowContext, WorkflowSnapshot
from .creation import GroupCreationWizard
from .results import Failure
from .search import SearchController
from .steps import Step
from .subforms import check_member, render_member

if TYPE_CHECKING:
    from hailraisers.box.models import Group

    from .collaborators import Collaborators

logger = logging.getLogger(__name__)

TransitionListener = Callable[[Step, Step], None]


@dataclass(frozen=True)
class WorkflowSettings:
    """Timings for the workflow, in seconds."""

    debounce_delay: float = DEBOUNCE_SECONDS
    exit_delay: float = EXIT_DELAY_SECONDS
    retry_base: float = RETRY_BASE_SECONDS
    max_retries: int = MAX_SEARCH_RETRIES
    min_query_length: int = MIN_SEARCH_LENGTH
    error_reset: float = ERROR_RESET_SECONDS

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> WorkflowSettings:
        """Read the ``ONBOARDING_*`` keys of a Flask config."""
        return cls(
            debounce_delay=float(config.get("ONBOARDING_DEBOUNCE_SECONDS", DEBOUNCE_SECONDS)),
            exit_delay=float(config.get("ONBOARDING_EXIT_DELAY_SECONDS", EXIT_DELAY_SECONDS)),
            retry_base=float(config.get("ONBOARDING_RETRY_BASE_SECONDS", RETRY_BASE_SECONDS)),
            max_retries=int(config.get("ONBOARDING_MAX_RETRIES", MAX_SEARCH_RETRIES)),
            error_reset=float(config.get("ONBOARDING_ERROR_RESET_SECONDS", ERROR_RESET_SECONDS)),
        )


class WorkflowStateError(Exception):
    """Raised when an action is not available in the current step."""


class OnboardingWorkflow:
    """Owns the onboarding context and drives every transition.

    Sub-forms and views only ever receive snapshots and callbacks. The
    workflow must be driven from inside a running event loop.
    """

    def __init__(
        self,
        collaborators: Collaborators,
        *,
        settings: WorkflowSettings | None = None,
        probe: DeviceProbe | None = None,
        sleep: SleepFunc = asyncio.sleep,
        on_update: Callable[[], None] | None = None,
    ) -> None:
        self.collaborators = collaborators
        self.settings = settings or WorkflowSettings()
        self.probe = probe or DeviceProbe()
        self._sleep = sleep
        self._on_update = on_update
        self._context = WorkflowContext()
        self._token = CancellationToken()
        self._epoch = 0
        self._submitting_epoch: int | None = None
        self._exit_task: asyncio.Task | None = None
        self._listeners: list[TransitionListener] = []
        self.search = self._new_search(collaborators.persistence.find_groups_by_keyword)
        self.creation: GroupCreationWizard | None = None
        self._boundary = ErrorBoundary(
            self._render, reset_after=self.settings.error_reset, sleep=sleep
        )

    @property
    def step(self) -> Step:
        return self._context.step

    @property
    def closed(self) -> bool:
        return self._token.cancelled

    @property
    def submitting(self) -> bool:
        """Whether a submit started since the last transition is still outstanding."""
        return self._submitting_epoch == self._epoch

    def snapshot(self) -> WorkflowSnapshot:
        return self._context.snapshot()

    def subscribe(self, listener: TransitionListener) -> Callable[[], None]:
        """Call ``listener(old, new)`` on every transition, self-loops included."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # Search

    def set_search_text(self, text: str) -> None:
        self._require("search", Step.SEARCH)
        self._context.search_text = text
        self.search.set_query(text)

    def select_candidate(self, group: Group) -> None:
        """Join an existing box: remember it and ask for the member's details."""
        self._require("select a box", Step.SEARCH)
        self._context.selected_group = group
        self._context.search_text = group.name
        self.search.clear()
        self._enter_capture_member()

    def decline_candidates(self) -> None:
        """None of the results is the right box; a new one will be created."""
        self._require("add a new box", Step.SEARCH)
        self._context.selected_group = None
        self.search.clear()
        self._enter_capture_member()

    def cancel(self) -> None:
        """Leave the flow.

        From search or member capture this shows the exit message and returns
        to search after ``exit_delay``; from box creation it resets at once.
        """
        self._require("cancel", Step.SEARCH, Step.CAPTURE_MEMBER, Step.CREATE_GROUP)
        if self.step is Step.CREATE_GROUP:
            self._reset()
            return
        self.search.clear()
        self._transition(Step.EXIT)
        self._schedule_exit_return()

    # Member capture

    def change_member_field(self, field: str, value: str) -> None:
        self._require("edit member details", Step.CAPTURE_MEMBER)
        self._context.member_draft[field] = value
        self._context.error = None

    async def submit_member(self, values: Mapping[str, Any] | None = None) -> bool:
        """Validate the member and either join the selected box or move on to create one.

        A submit while another from the same step is outstanding is ignored.
        """
        self._require("submit member details", Step.CAPTURE_MEMBER)
        if self.submitting:
            logger.debug("Ignoring member submit while a request is outstanding")
            return False

        if values is not None:
            self._context.member_draft = dict(values)
        values = dict(self._context.member_draft)

        problems = check_member(values)
        if problems:
            self._fail(
                Failure(
                    ErrorKind.VALIDATION_REJECTED,
                    problems[0][1],
                    tuple(f"{field}: {message}" for field, message in problems),
                )
            )
            return False

        group = self._context.selected_group
        raw = {**values, "submitted_by": self.probe.channel()}
        if group is not None:
            raw.update(box_id=group.id, box_name=group.name)

        epoch = self._epoch
        self._submitting_epoch = epoch
        try:
            validated = await self.collaborators.validation.validate_member(raw, self._token)
            if self._is_stale(epoch):
                return False
            if not validated.ok:
                self._fail(validated)
                return False

            if group is None:
                self._context.captured_member = validated.value
                self._context.error = None
                self._enter_create_group()
                return True

            created = await self.collaborators.persistence.create_member(
                validated.value, self._token
            )
            if self._is_stale(epoch):
                return False
            if not created.ok:
                self._fail(
                    Failure(
                        created.kind,
                        f"Failed to add member to {group.name}. {created.message}",
                        created.fields,
                    )
                )
                return False

            self._context.created_member = created.value
            self._context.error = None
            self._transition(Step.JOIN_GROUP)
            self._transition(Step.SUCCESS)
            return True
        finally:
            if self._submitting_epoch == epoch:
                self._submitting_epoch = None

    # Box creation

    def group_creation(self) -> GroupCreationWizard:
        self._require("edit the new box", Step.CREATE_GROUP)
        return self.creation

    async def submit_group(self) -> bool:
        """Create the box, then add the held member to it.

        Before the last sub-step this only advances the form. If the box was
        created but adding the member failed, a re-submit reuses that box.
        """
        wizard = self.group_creation()
        if self.submitting:
            logger.debug("Ignoring box submit while a request is outstanding")
            return False
        if not wizard.is_final_step:
            wizard.next()
            return False

        epoch = self._epoch
        self._submitting_epoch = epoch
        try:
            group = self._context.selected_group
            if group is None:
                validated = await self.collaborators.validation.validate_group(
                    wizard.to_raw(), self._token
                )
                if self._is_stale(epoch):
                    return False
                if not validated.ok:
                    self._fail(validated)
                    return False

                created = await self.collaborators.persistence.create_group(
                    validated.value, self._token
                )
                if self._is_stale(epoch):
                    return False
                if not created.ok:
                    self._fail(created)
                    return False
                group = created.value
                self._context.selected_group = group

            member = self._context.captured_member.model_copy(
                update={"box_id": group.id, "box_name": group.name}
            )
            added = await self.collaborators.persistence.create_member(member, self._token)
            if self._is_stale(epoch):
                return False
            if not added.ok:
                self._fail(added)
                return False

            self._context.created_member = added.value
            self._context.error = None
            self._close_creation()
            self._transition(Step.SUCCESS)
            return True
        finally:
            if self._submitting_epoch == epoch:
                self._submitting_epoch = None

    # Terminal states

    def done(self) -> None:
        self._require("finish", Step.SUCCESS)
        self._reset()

    # Views

    def view(self) -> dict[str, Any]:
        """The view model for the current step, or a fallback if building it failed."""
        return self._boundary.render()

    def retry_view(self) -> None:
        self._boundary.retry()

    def _render(self) -> dict[str, Any]:
        ctx = self._context
        view: dict[str, Any] = {
            "step": ctx.step.value,
            "error": ctx.error.message if ctx.error else None,
            "error_kind": ctx.error.kind.value if ctx.error else None,
        }
        if ctx.step is Step.SEARCH:
            state = self.search.state()
            view.update(
                query=state.query,
                candidates=[
                    {"id": group.id, "name": group.name, "location": group.address}
                    for group in state.candidates
                ],
                loading=state.loading,
                search_error=state.error,
                show_create_option=state.show_create_option,
            )
        elif ctx.step is Step.CAPTURE_MEMBER:
            view.update(
                title=f"Join {ctx.selected_group.name}" if ctx.selected_group else "Add Your Details",
                fields=render_member(ctx.member_draft, self.change_member_field),
                submitting=self.submitting,
            )
        elif ctx.step is Step.CREATE_GROUP:
            view["form"] = self.creation.render()
            view["submitting"] = self.submitting
        elif ctx.step is Step.SUCCESS:
            view.update(
                title="Welcome to the Community!",
                message=f"You're now listed in the directory for {ctx.selected_group.name}.",
            )
        elif ctx.step is Step.EXIT:
            view["message"] = "Thank you! Returning to the main page..."
        return view

    # Lifecycle

    async def wait_idle(self) -> None:
        """Wait for pending searches and the exit timer to settle."""
        await self.search.wait_idle()
        if self.creation is not None and self.creation.place_search is not None:
            await self.creation.place_search.wait_idle()
        task = self._exit_task
        if task is not None and not task.done():
            await asyncio.wait([task])

    def close(self) -> None:
        """Dispose of the workflow; nothing in flight may change it afterwards."""
        if self.closed:
            return
        self._token.cancel()
        self.search.close()
        self._close_creation()
        self._cancel_exit()
        self._boundary.close()

    # Internals

    def _require(self, action: str, *steps: Step) -> None:
        if self.closed:
            raise WorkflowStateError("The onboarding workflow has been closed.")
        if self._context.step not in steps:
            raise WorkflowStateError(
                f"Cannot {action} during step '{self._context.step.value}'."
            )

    def _is_stale(self, epoch: int) -> bool:
        return self._token.cancelled or epoch != self._epoch

    def _transition(self, step: Step) -> None:
        old = self._context.step
        self._context.step = step
        self._epoch += 1
        logger.debug(f"Onboarding {old.value} -> {step.value}")
        self._emit(old, step)

    def _fail(self, failure: Failure) -> None:
        """Stay in the current step and surface the error."""
        self._context.error = failure
        self._emit(self._context.step, self._context.step)

    def _emit(self, old: Step, new: Step) -> None:
        for listener in list(self._listeners):
            listener(old, new)
        self._changed()

    def _changed(self) -> None:
        if self._on_update is not None:
            self._on_update()

    def _enter_capture_member(self) -> None:
        self._context.member_draft = {}
        self._context.error = None
        self._transition(Step.CAPTURE_MEMBER)

    def _enter_create_group(self) -> None:
        self.creation = GroupCreationWizard(
            name=self._context.search_text,
            place_search=self._new_search(self.collaborators.places.lookup),
        )
        self._transition(Step.CREATE_GROUP)

    def _new_search(self, lookup) -> SearchController:
        return SearchController(
            lookup,
            delay=self.settings.debounce_delay,
            retry_base=self.settings.retry_base,
            max_retries=self.settings.max_retries,
            min_length=self.settings.min_query_length,
            sleep=self._sleep,
            token=self._token,
            on_change=self._changed,
        )

    def _schedule_exit_return(self) -> None:
        self._cancel_exit()
        epoch = self._epoch
        loop = asyncio.get_running_loop()
        self._exit_task = loop.create_task(self._return_after_exit(epoch))

    async def _return_after_exit(self, epoch: int) -> None:
        await self._sleep(self.settings.exit_delay)
        self._exit_task = None
        if self._is_stale(epoch):
            return
        self._reset()

    def _cancel_exit(self) -> None:
        if self._exit_task is not None and not self._exit_task.done():
            self._exit_task.cancel()
        self._exit_task = None

    def _close_creation(self) -> None:
        if self.creation is not None:
            self.creation.close()
            self.creation = None

    def _reset(self) -> None:
        self._cancel_exit()
        self._close_creation()
        self.search.clear()
        old = self._context.step
        self._context.clear()
        self._epoch += 1
        self._emit(old, Step.SEARCH)
