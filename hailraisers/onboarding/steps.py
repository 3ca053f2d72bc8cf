"""Step names for the onboarding flow."""

from enum import Enum


class Step(str, Enum):
    """Top-level states of the onboarding workflow."""

    SEARCH = "search"
    CAPTURE_MEMBER = "captureMember"
    CREATE_GROUP = "createGroup"
    JOIN_GROUP = "joinGroup"
    SUCCESS = "success"
    EXIT = "exit"


class CreationStep(str, Enum):
    """Ordered sub-steps of the new box form; values are the progress labels."""

    ESSENTIALS = "Box Location"
    CONTACT_INFO = "Box Contact"
    OWNER_CONTACT = "Owner Contact"


CREATION_STEPS = list(CreationStep)

CREATION_TITLES = {
    CreationStep.ESSENTIALS: "Add New Box",
    CreationStep.CONTACT_INFO: "Add Contact Info",
    CreationStep.OWNER_CONTACT: "Add Contact Person",
}
