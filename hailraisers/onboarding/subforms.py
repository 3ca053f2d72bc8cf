"""Field renderers for each step of the onboarding forms.

A renderer takes the current field values, a change handler and an
editability predicate, and returns the fields to show. Renderers keep no
state between calls and never talk to a collaborator; edits go back up
through the change handler.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Mapping

from markupsafe import Markup
from wtforms import Form

from hailraisers.box.forms import ContactInfoForm, EssentialsForm, OwnerContactForm
from hailraisers.hailraiser.forms import MemberForm

from .steps import CreationStep

ChangeHandler = Callable[[str, str], Any]
EditablePredicate = Callable[[str], bool]


@dataclass(frozen=True)
class RenderedField:
    name: str
    label: str
    value: Any
    editable: bool
    html: Markup
    on_change: Callable[[str], Any]


def render_form(
    form_class: type[Form],
    values: Mapping[str, Any],
    on_change: ChangeHandler,
    is_editable: EditablePredicate,
) -> list[RenderedField]:
    form = form_class(data=dict(values))
    fields = []
    for field in form:
        editable = is_editable(field.name)
        html = field() if editable else field(disabled=True)
        fields.append(
            RenderedField(
                name=field.name,
                label=field.label.text,
                value=field.data,
                editable=editable,
                html=Markup(html),
                on_change=partial(on_change, field.name),
            )
        )
    return fields


def render_essentials(values, on_change, is_editable):
    return render_form(EssentialsForm, values, on_change, is_editable)


def render_contact_info(values, on_change, is_editable):
    return render_form(ContactInfoForm, values, on_change, is_editable)


def render_owner_contact(values, on_change, is_editable):
    return render_form(OwnerContactForm, values, on_change, is_editable)


def render_member(values, on_change, is_editable=lambda name: True):
    return render_form(MemberForm, values, on_change, is_editable)


CREATION_RENDERERS = {
    CreationStep.ESSENTIALS: render_essentials,
    CreationStep.CONTACT_INFO: render_contact_info,
    CreationStep.OWNER_CONTACT: render_owner_contact,
}


def check_member(values: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Run the required-field checks locally, in form field order.

    Returns ``(field, message)`` pairs; an empty list means the values may be
    sent for validation.
    """
    form = MemberForm(data=dict(values))
    if form.validate():
        return []
    return [(field.name, field.errors[0]) for field in form if field.errors]
