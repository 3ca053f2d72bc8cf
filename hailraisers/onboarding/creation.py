"""State of the three-step "add your box" form."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from hailraisers.constants import DEFAULT_COUNTRY_CODE

from .progress import progress_markers, render_progress
from .steps import CREATION_STEPS, CREATION_TITLES, CreationStep
from .subforms import CREATION_RENDERERS

if TYPE_CHECKING:
    from hailraisers.box.models import CandidateRecord

    from .search import SearchController

ADDRESS_REQUIRED = "Please choose or enter an address for your box."

# Filled from a chosen place but never shown as inputs.
_PLACE_FIELDS = ("city", "state", "country", "lat", "lng")


def empty_values(name: str = "") -> dict[str, Any]:
    return {
        "name": name,
        "address": "",
        "country_code": DEFAULT_COUNTRY_CODE,
        "phone": "",
        "website": "",
        "contact_name": "",
        "contact_email": "",
        "city": "",
        "state": "",
        "country": "",
        "lat": None,
        "lng": None,
    }


class GroupCreationWizard:
    """Field values and sub-step position for a new box.

    Moving between sub-steps never touches the values. While the name is
    still being matched against place suggestions only the name can be
    edited, so a chosen suggestion is not silently overwritten.
    """

    def __init__(self, name: str = "", place_search: SearchController | None = None):
        self.step = CreationStep.ESSENTIALS
        self.values = empty_values(name)
        self.place_search = place_search
        self.suggestions_resolved = False
        self.error: str | None = None
        if place_search is not None and name:
            place_search.set_query(name)

    @property
    def steps(self) -> list[CreationStep]:
        return CREATION_STEPS

    @property
    def index(self) -> int:
        return CREATION_STEPS.index(self.step)

    @property
    def is_first_step(self) -> bool:
        return self.index == 0

    @property
    def is_final_step(self) -> bool:
        return self.index == len(CREATION_STEPS) - 1

    @property
    def title(self) -> str:
        return CREATION_TITLES[self.step]

    def is_field_editable(self, field: str) -> bool:
        if field == "name":
            return True
        return self.suggestions_resolved or self.step is not CreationStep.ESSENTIALS

    def change(self, field: str, value: Any) -> bool:
        """Apply an edit from a sub-form. Returns False if the field is locked."""
        if field not in self.values:
            raise KeyError(f"Unknown box field: {field}")
        if not self.is_field_editable(field):
            return False
        self.values[field] = value
        self.error = None
        if field == "name" and self.step is CreationStep.ESSENTIALS:
            self.suggestions_resolved = False
            if self.place_search is not None:
                self.place_search.set_query(value or "")
        return True

    def pick_suggestion(self, candidate: CandidateRecord) -> None:
        """Pre-fill the form from a place suggestion."""
        self.values.update(
            name=candidate.name,
            address=candidate.address,
            country_code=candidate.country_code or DEFAULT_COUNTRY_CODE,
            phone=candidate.phone,
            website=candidate.website,
            contact_name="",
            contact_email="",
        )
        for field in _PLACE_FIELDS:
            self.values[field] = getattr(candidate, field)
        self._resolve_suggestions()

    def dismiss_suggestions(self) -> None:
        """The person will type the details themselves."""
        self._resolve_suggestions()

    def can_advance(self) -> bool:
        if self.step is CreationStep.ESSENTIALS:
            return bool((self.values.get("address") or "").strip())
        return True

    def next(self) -> bool:
        if self.is_final_step:
            return False
        if not self.can_advance():
            self.error = ADDRESS_REQUIRED
            return False
        if self.step is CreationStep.ESSENTIALS:
            self._resolve_suggestions()
        self.error = None
        self.step = CREATION_STEPS[self.index + 1]
        return True

    def back(self) -> bool:
        if self.is_first_step:
            return False
        self.error = None
        self.step = CREATION_STEPS[self.index - 1]
        return True

    def to_raw(self) -> dict[str, Any]:
        """Values to send for validation, leaving out what was never filled in."""
        return {
            field: value.strip() if isinstance(value, str) else value
            for field, value in self.values.items()
            if value is not None and value != ""
        }

    def render(self) -> dict[str, Any]:
        renderer = CREATION_RENDERERS[self.step]
        view: dict[str, Any] = {
            "title": self.title,
            "sub_step": self.step.value,
            "progress": progress_markers(self.steps, self.step),
            "progress_html": render_progress(self.steps, self.step),
            "fields": renderer(self.values, self.change, self.is_field_editable),
            "can_go_back": not self.is_first_step,
            "is_final_step": self.is_final_step,
            "error": self.error,
        }
        if self.step is CreationStep.ESSENTIALS and self.place_search is not None:
            state = self.place_search.state()
            view["suggestions"] = [] if self.suggestions_resolved else list(state.candidates)
            view["suggestions_loading"] = state.loading
            view["suggestions_error"] = state.error
        return view

    def close(self) -> None:
        if self.place_search is not None:
            self.place_search.close()

    def _resolve_suggestions(self) -> None:
        self.suggestions_resolved = True
        if self.place_search is not None:
            self.place_search.clear()
