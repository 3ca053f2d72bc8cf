"""Tests for the in-process and HTTP collaborators."""

from __future__ import annotations

import functools
import json
import unittest
from unittest.mock import MagicMock

import httpx
from mockfirestore import MockFirestore

from hailraisers.box.models import NewGroup
from hailraisers.core import CancellationToken
from hailraisers.errors import ErrorKind, NotFoundError, TransientNetworkError
from hailraisers.hailraiser.models import NewMember
from hailraisers.onboarding.api_client import DirectoryApiClient, api_collaborators
from hailraisers.onboarding.collaborators import (
    FirestorePersistence,
    GooglePlaceLookup,
    SchemaValidation,
    run_blocking,
)
from tests.conftest import patch_mockfirestore
from tests.helpers import make_candidate

BOX_JSON = {
    "id": "box1",
    "name": "Iron Yard CrossFit",
    "address": "12 Forge Street",
    "approved": False,
}

MEMBER = {
    "box_id": "box1",
    "first_name": "Dana",
    "last_name": "Reyes",
    "country": "USA",
    "email": "dana@example.com",
    "submitted_by": "Webform",
}


class TestFirestorePersistence(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        patch_mockfirestore()
        self.db = MockFirestore()
        self.persistence = FirestorePersistence(self.db)
        self.token = CancellationToken()

    async def asyncTearDown(self):
        self.db.reset()

    async def test_create_then_find(self):
        created = await self.persistence.create_group(
            NewGroup(name="Iron Yard CrossFit", city="Austin", country="USA"), self.token
        )
        self.assertTrue(created.ok)

        found = await self.persistence.find_groups_by_keyword("iron", self.token)
        self.assertTrue(found.ok)
        self.assertEqual([g.id for g in found.value], [created.value.id])
        self.assertEqual(found.value[0].city, "Austin")

    async def test_duplicate_maps_to_failure(self):
        group = NewGroup(name="Iron Yard CrossFit")
        await self.persistence.create_group(group, self.token)
        result = await self.persistence.create_group(group, self.token)

        self.assertFalse(result.ok)
        self.assertEqual(result.kind, ErrorKind.DUPLICATE_NAME)

    async def test_member_for_missing_box(self):
        result = await self.persistence.create_member(
            NewMember(**{**MEMBER, "box_id": "missing"}), self.token
        )
        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)

    async def test_cancelled_token_skips_the_call(self):
        self.token.cancel()
        result = await self.persistence.create_group(NewGroup(name="Forge"), self.token)
        self.assertFalse(result.ok)
        self.assertEqual(list(self.db.collection("boxes").stream()), [])


class TestGooglePlaceLookup(unittest.IsolatedAsyncioTestCase):
    async def test_success(self):
        client = MagicMock()
        client.search.return_value = [make_candidate()]
        result = await GooglePlaceLookup(client).lookup("iron", CancellationToken())

        client.search.assert_called_once_with("iron")
        self.assertEqual(result.value[0].id, "place1")

    async def test_network_error_is_transient(self):
        client = MagicMock()
        client.search.side_effect = TransientNetworkError("Places request timeout: boom")
        result = await GooglePlaceLookup(client).lookup("iron", CancellationToken())

        self.assertEqual(result.kind, ErrorKind.TRANSIENT_NETWORK)
        self.assertTrue(result.transient)


class TestRunBlocking(unittest.IsolatedAsyncioTestCase):
    async def test_callables_without_a_name_are_wrapped(self):
        def explode(message):
            raise NotFoundError(message)

        callables = [
            functools.partial(explode, "Box not found."),
            MagicMock(side_effect=NotFoundError("Box not found.")),
        ]
        for func in callables:
            with self.subTest(func=func):
                with self.assertLogs("hailraisers.onboarding.collaborators", level="WARNING"):
                    result = await run_blocking(CancellationToken(), func)
                self.assertEqual(result.kind, ErrorKind.NOT_FOUND)

    async def test_success(self):
        result = await run_blocking(CancellationToken(), functools.partial(sum, [1, 2]))
        self.assertEqual(result.value, 3)


class TestSchemaValidation(unittest.IsolatedAsyncioTestCase):
    async def test_rejection(self):
        result = await SchemaValidation().validate_group({"name": "ab"}, CancellationToken())
        self.assertEqual(result.kind, ErrorKind.VALIDATION_REJECTED)
        self.assertTrue(result.fields[0].startswith("name:"))

    async def test_member(self):
        result = await SchemaValidation().validate_member(MEMBER, CancellationToken())
        self.assertEqual(result.value.box_id, "box1")


class TestDirectoryApiClient(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.requests = []
        self.handler = None
        self.client = DirectoryApiClient(
            "http://directory.test", transport=httpx.MockTransport(self._dispatch)
        )
        self.token = CancellationToken()

    async def asyncTearDown(self):
        await self.client.aclose()

    def _dispatch(self, request):
        self.requests.append(request)
        return self.handler(request)

    async def test_find_groups(self):
        self.handler = lambda request: httpx.Response(200, json={"results": [BOX_JSON]})
        result = await self.client.find_groups_by_keyword("iron", self.token)

        self.assertEqual(result.value[0].name, "Iron Yard CrossFit")
        self.assertEqual(self.requests[0].url.path, "/api/boxes/search")
        self.assertEqual(self.requests[0].url.params["q"], "iron")

    async def test_create_member_sends_camel_case(self):
        self.handler = lambda request: httpx.Response(
            201,
            json={"hailraiser": {**json.loads(request.content), "id": "member1"}},
        )
        result = await self.client.create_member(NewMember(**MEMBER), self.token)

        body = json.loads(self.requests[0].content)
        self.assertEqual(body["boxId"], "box1")
        self.assertEqual(body["submittedBy"], "Webform")
        self.assertEqual(result.value.id, "member1")

    async def test_error_body_is_mapped(self):
        self.handler = lambda request: httpx.Response(
            409,
            json={
                "error": "DuplicateName",
                "message": "A box with this name already exists.",
                "fields": ["A box with this name already exists."],
            },
        )
        result = await self.client.create_group(NewGroup(name="Iron Yard CrossFit"), self.token)

        self.assertEqual(result.kind, ErrorKind.DUPLICATE_NAME)
        self.assertEqual(result.message, "A box with this name already exists.")

    async def test_status_without_body(self):
        self.handler = lambda request: httpx.Response(503, text="unavailable")
        result = await self.client.lookup("iron", self.token)
        self.assertEqual(result.kind, ErrorKind.TRANSIENT_NETWORK)

    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        self.handler = handler
        result = await self.client.lookup("iron", self.token)
        self.assertTrue(result.transient)

    async def test_unreadable_body(self):
        self.handler = lambda request: httpx.Response(200, json={"unexpected": True})
        result = await self.client.lookup("iron", self.token)
        self.assertEqual(result.kind, ErrorKind.UNKNOWN)

    async def test_cancelled_token(self):
        self.token.cancel()
        result = await self.client.lookup("iron", self.token)
        self.assertFalse(result.ok)
        self.assertEqual(self.requests, [])

    async def test_api_collaborators(self):
        collaborators = api_collaborators(self.client)
        self.assertIs(collaborators.places, self.client)
        self.assertIs(collaborators.persistence, self.client)


if __name__ == "__main__":
    unittest.main()
