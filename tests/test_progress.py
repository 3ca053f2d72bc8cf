"""Tests for the step progress indicator."""

import unittest

from hailraisers.onboarding.progress import progress_markers, render_progress
from hailraisers.onboarding.steps import CREATION_STEPS, CreationStep


class TestProgress(unittest.TestCase):
    def test_markers(self):
        markers = progress_markers(CREATION_STEPS, CreationStep.CONTACT_INFO)

        self.assertEqual([m.label for m in markers], ["Box Location", "Box Contact", "Owner Contact"])
        self.assertEqual([m.css_class for m in markers], ["step complete", "step active", "step"])
        self.assertEqual([m.position for m in markers], [1, 2, 3])
        self.assertTrue(markers[-1].last)

    def test_single_step(self):
        markers = progress_markers(["Only"], "Only")
        self.assertEqual(len(markers), 1)
        self.assertTrue(markers[0].active)
        self.assertTrue(markers[0].last)

    def test_unknown_current_step(self):
        markers = progress_markers(["One", "Two"], "Three")
        self.assertFalse(any(m.active or m.complete for m in markers))

    def test_no_steps(self):
        with self.assertRaises(ValueError):
            progress_markers([], "One")

    def test_render_escapes_labels(self):
        html = render_progress(["<b>One</b>", "Two"], "Two")
        self.assertIn("&lt;b&gt;One&lt;/b&gt;", html)
        self.assertIn('<li class="step active" aria-current="step">Two</li>', html)


if __name__ == "__main__":
    unittest.main()
