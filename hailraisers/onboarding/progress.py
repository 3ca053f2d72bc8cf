"""Progress indicator for multi-step forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from markupsafe import Markup, escape


@dataclass(frozen=True)
class StepMarker:
    label: str
    position: int
    active: bool
    complete: bool
    last: bool

    @property
    def css_class(self) -> str:
        if self.active:
            return "step active"
        if self.complete:
            return "step complete"
        return "step"


def progress_markers(steps: Sequence[str], current: str) -> list[StepMarker]:
    """Mark ``current`` as active and every step before it as complete.

    A ``current`` that is not one of ``steps`` leaves every step pending.
    """
    labels = [str(getattr(step, "value", step)) for step in steps]
    if not labels:
        raise ValueError("A progress indicator needs at least one step.")

    current_label = str(getattr(current, "value", current))
    current_index = labels.index(current_label) if current_label in labels else -1
    return [
        StepMarker(
            label=label,
            position=index + 1,
            active=index == current_index,
            complete=index < current_index,
            last=index == len(labels) - 1,
        )
        for index, label in enumerate(labels)
    ]


def render_progress(steps: Sequence[str], current: str) -> Markup:
    items = []
    for marker in progress_markers(steps, current):
        current_attr = ' aria-current="step"' if marker.active else ""
        items.append(
            f'<li class="{marker.css_class}"{current_attr}>{escape(marker.label)}</li>'
        )
    return Markup(f'<ol class="progress">{"".join(items)}</ol>')
