# accounting/tests/test_document_lifecycle.py

from types import SimpleNamespace

from django.db import models
from django.test import SimpleTestCase

from accounting.services.document_lifecycle import DocumentLifecycle
from accounting.services.exceptions import InvalidTransitionError


class Light(models.TextChoices):
    RED = "red", "Red"
    GREEN = "green", "Green"
    OFF = "off", "Off"


class DocumentLifecycleTests(SimpleTestCase):
    def setUp(self):
        self.lifecycle = DocumentLifecycle(
            name="Light",
            states=Light,
            transitions={
                Light.RED: {Light.GREEN, Light.OFF},
                Light.GREEN: {Light.RED, Light.OFF},
                Light.OFF: set(),
            },
            posting_states={Light.GREEN},
        )

    def test_table_must_be_exhaustive(self):
        with self.assertRaises(ValueError):
            DocumentLifecycle(
                name="Broken",
                states=Light,
                transitions={Light.RED: {Light.GREEN}, Light.GREEN: set()},
            )

    def test_unknown_target_rejected(self):
        with self.assertRaises(ValueError):
            DocumentLifecycle(
                name="Broken",
                states=Light,
                transitions={Light.RED: {"blue"}, Light.GREEN: set(), Light.OFF: set()},
            )

    def test_terminal_states(self):
        self.assertEqual(self.lifecycle.terminal_states, frozenset({"off"}))

    def test_apply_sets_status(self):
        obj = SimpleNamespace(pk=1, status=Light.RED)
        self.lifecycle.apply(obj, Light.GREEN)
        self.assertEqual(obj.status, Light.GREEN)
        self.assertTrue(self.lifecycle.is_posting_transition(to_status=Light.GREEN))

    def test_refuses_transition_out_of_terminal(self):
        obj = SimpleNamespace(pk=1, status=Light.OFF)
        with self.assertRaises(InvalidTransitionError):
            self.lifecycle.apply(obj, Light.RED)
        self.assertEqual(obj.status, Light.OFF)
