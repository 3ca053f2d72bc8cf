"""Tests for the debounced search controller."""

import asyncio
import unittest

from hailraisers.errors import ErrorKind
from hailraisers.onboarding.results import Failure
from hailraisers.onboarding.search import (
    CONNECTION_ERROR,
    GENERIC_ERROR,
    INVALID_QUERY_ERROR,
    SearchController,
    retry_message,
)
from tests.helpers import FakeLookup, RecordingSleep, make_group, settle

TIMEOUT = Failure(ErrorKind.TRANSIENT_NETWORK, "Request timeout.")


class TestSearchController(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.sleep = RecordingSleep()
        self.lookup = FakeLookup(
            {
                "iron": [make_group()],
                "iron yard": [make_group()],
            }
        )
        self.changes = 0
        self.search = SearchController(
            self.lookup.lookup, sleep=self.sleep, on_change=self._changed
        )

    async def asyncTearDown(self):
        self.search.close()

    def _changed(self):
        self.changes += 1

    async def test_short_queries_never_look_up(self):
        self.search.set_query("ir")
        await self.search.wait_idle()

        self.assertEqual(self.lookup.calls, [])
        self.assertEqual(self.search.candidates, ())
        self.assertFalse(self.search.show_create_option)

    async def test_rapid_edits_make_one_lookup(self):
        for text in ("i", "ir", "iro", "iron"):
            self.search.set_query(text)
        await self.search.wait_idle()

        self.assertEqual(self.lookup.calls, ["iron"])
        self.assertEqual([g.name for g in self.search.candidates], ["Iron Yard CrossFit"])
        self.assertFalse(self.search.loading)
        self.assertGreater(self.changes, 0)

    async def test_no_results_offers_create_option(self):
        self.search.set_query("forge")
        await self.search.wait_idle()

        self.assertEqual(self.lookup.calls, ["forge"])
        self.assertTrue(self.search.show_create_option)

    async def test_transient_failures_retry_with_backoff(self):
        self.lookup.failures = [TIMEOUT, TIMEOUT, TIMEOUT]
        self.search.set_query("iron")
        await self.search.wait_idle()

        self.assertEqual(self.lookup.calls, ["iron", "iron", "iron"])
        self.assertEqual(self.sleep.calls, [0.3, 1.0, 2.0])
        self.assertEqual(self.search.error, CONNECTION_ERROR)
        self.assertFalse(self.search.show_create_option)

    async def test_retry_recovers(self):
        self.lookup.failures = [TIMEOUT]
        self.search.set_query("iron")
        await self.search.wait_idle()

        self.assertEqual(len(self.lookup.calls), 2)
        self.assertIsNone(self.search.error)
        self.assertEqual(len(self.search.candidates), 1)

    async def test_other_failures_are_not_retried(self):
        self.lookup.failures = [Failure(ErrorKind.UNKNOWN, "boom")]
        self.search.set_query("iron")
        await self.search.wait_idle()

        self.assertEqual(self.lookup.calls, ["iron"])
        self.assertEqual(self.search.error, GENERIC_ERROR)

    async def test_rejected_query_message(self):
        self.lookup.failures = [Failure(ErrorKind.VALIDATION_REJECTED, "bad query")]
        self.search.set_query("iron")
        await self.search.wait_idle()
        self.assertEqual(self.search.error, INVALID_QUERY_ERROR)

    async def test_stale_results_are_discarded(self):
        self.lookup.gates["iro"] = asyncio.Event()
        self.search.set_query("iro")
        await settle()
        self.assertEqual(self.lookup.calls, ["iro"])
        self.assertTrue(self.search.loading)

        self.lookup.results["iro"] = [make_group(name="Iron Stale", box_id="stale")]
        self.search.set_query("iron")
        await self.search.wait_idle()
        self.assertEqual([g.id for g in self.search.candidates], ["box1"])

        self.lookup.gates["iro"].set()
        await settle()
        self.assertEqual([g.id for g in self.search.candidates], ["box1"])

    async def test_close_discards_in_flight_results(self):
        self.lookup.gates["iron"] = asyncio.Event()
        self.search.set_query("iron")
        await settle()
        self.search.close()

        self.lookup.gates["iron"].set()
        await settle()
        self.assertEqual(self.search.candidates, ())

        self.search.set_query("iron yard")
        await settle()
        self.assertEqual(self.lookup.calls, ["iron"])

    async def test_clear_resets_state(self):
        self.search.set_query("iron")
        await self.search.wait_idle()
        self.search.clear()

        self.assertEqual(self.search.query, "")
        self.assertEqual(self.search.debounced_query, "")
        self.assertEqual(self.search.candidates, ())


class TestRetryMessage(unittest.TestCase):
    def test_wording(self):
        self.assertEqual(
            retry_message(1.0, 1, 2),
            "Connection issue. Retrying in 1 second (attempt 1 of 2)...",
        )
        self.assertEqual(
            retry_message(2.0, 2, 2),
            "Connection issue. Retrying in 2 seconds (attempt 2 of 2)...",
        )


if __name__ == "__main__":
    unittest.main()
