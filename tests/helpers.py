"""Fakes shared by the onboarding tests."""

from __future__ import annotations

import asyncio
from typing import Any

from hailraisers.box.models import CandidateRecord, Group
from hailraisers.hailraiser.models import Member
from hailraisers.onboarding.collaborators import Collaborators, SchemaValidation
from hailraisers.onboarding.results import Success

VALID_MEMBER = {
    "first_name": "Dana",
    "last_name": "Reyes",
    "country": "USA",
    "email": "dana@example.com",
}


class RecordingSleep:
    """Stands in for ``asyncio.sleep``: records the delay and yields once."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
        await asyncio.sleep(0)


async def settle(rounds: int = 20) -> None:
    """Let every ready task run a few steps."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_group(name: str = "Iron Yard CrossFit", box_id: str = "box1", **kwargs: Any) -> Group:
    return Group(id=box_id, name=name, address="12 Forge Street, Austin, TX", **kwargs)


def make_candidate(name: str = "Iron Yard CrossFit", place_id: str = "place1") -> CandidateRecord:
    return CandidateRecord(
        id=place_id,
        name=name,
        address="12 Forge Street, Austin, TX 78701, USA",
        city="Austin",
        state="Texas",
        country="United States",
        country_code="US",
        lat=30.27,
        lng=-97.74,
        phone="(512) 555-0100",
        website="https://ironyard.example.com",
    )


class FakeLookup:
    """A lookup returning canned results, failures first.

    Setting ``gates[text]`` to an :class:`asyncio.Event` holds that lookup
    until the event is set.
    """

    def __init__(self, results=None, failures=()) -> None:
        self.results = dict(results or {})
        self.failures = list(failures)
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []

    async def lookup(self, text, token):
        self.calls.append(text)
        gate = self.gates.get(text)
        if gate is not None:
            await gate.wait()
        if self.failures:
            return self.failures.pop(0)
        return Success(list(self.results.get(text, [])))


class FakePersistence:
    """In-memory directory that records every call made to it."""

    def __init__(self, groups=()) -> None:
        self.groups = list(groups)
        self.calls: list[tuple[str, Any]] = []
        self.group_failures: list = []
        self.member_failures: list = []
        self.member_gate: asyncio.Event | None = None

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def find_groups_by_keyword(self, keyword, token):
        self.calls.append(("find_groups_by_keyword", keyword))
        words = keyword.lower().split()
        return Success(
            [group for group in self.groups if all(w in group.name.lower() for w in words)]
        )

    async def create_group(self, group, token):
        self.calls.append(("create_group", group))
        if self.group_failures:
            return self.group_failures.pop(0)
        created = Group(id=f"box{len(self.groups) + 1}", **group.model_dump())
        self.groups.append(created)
        return Success(created)

    async def create_member(self, member, token):
        self.calls.append(("create_member", member))
        if self.member_gate is not None:
            await self.member_gate.wait()
        if self.member_failures:
            return self.member_failures.pop(0)
        return Success(Member(id=f"member{len(self.calls)}", **member.model_dump()))


def make_collaborators(groups=(), place_results=None):
    places = FakeLookup(place_results)
    persistence = FakePersistence(groups)
    collaborators = Collaborators(
        places=places, persistence=persistence, validation=SchemaValidation()
    )
    return collaborators, persistence, places
