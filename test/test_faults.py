"""
Faults behavioral tests (trigger, rendering, recoverability, codes).

Scope
- Validate that trigger() raises, prints or warns depending on the flags.
- Validate the rendered header, message, location and hint.
- Validate option merging, cause preservation and the code helpers.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured by swapping the module console for a StringIO one.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from quill import faults
from quill.faults import (
    DeprecatedOptionWarning,
    FaultCode,
    InvalidValueError,
    ParserSyntaxError,
    UnexpectedCharacterError,
    UnknownCommandError,
    UnterminatedStringError,
    getdoc,
    trigger,
)


class TestTrigger(TestCase):
    """trigger() under the runtime flags."""

    def setUp(self):
        self.output = io.StringIO()
        patcher = mock.patch.object(faults, "console", Console(file=self.output, width=200))
        patcher.start()
        self.addCleanup(patcher.stop)

    def testRaisesOutsideShell(self):
        with self.assertRaises(InvalidValueError) as context:
            trigger(InvalidValueError("bad value", title="invalid value"), hint="use a number")
        self.assertEqual(context.exception.options["hint"], "use a number")
        self.assertEqual(context.exception.options["title"], "invalid value")

    def testPrintsInDeferredShell(self):
        trigger(
            InvalidValueError("bad value 'x'", hint="use a number", location="script, line 4"),
            shell=True,
            deferred=True,
            colorful=False,
        )
        rendered = self.output.getvalue()
        self.assertIn("bad value 'x'", rendered)
        self.assertIn("use a number", rendered)
        self.assertIn("at script, line 4", rendered)
        self.assertIn("20101", rendered)

    def testFancyShellUsesAPanel(self):
        trigger(UnknownCommandError("unknown command 'x'"), shell=True, deferred=True, fancy=True)
        self.assertIn("unknown command 'x'", self.output.getvalue())

    def testShellWithoutDeferredExits(self):
        with self.assertRaises(SystemExit):
            trigger(UnknownCommandError("unknown command 'x'"), shell=True)

    def testWarningsGoThroughTheWarningsModule(self):
        with self.assertWarns(DeprecatedOptionWarning):
            trigger(DeprecatedOptionWarning("option 'lw' is deprecated"))

    def testWarningsPrintInShell(self):
        trigger(DeprecatedOptionWarning("option 'lw' is deprecated"), shell=True, colorful=False)
        self.assertIn("option 'lw' is deprecated", self.output.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestFaultObjects(TestCase):
    """Fault classes and helpers."""

    def testStrIncludesLocation(self):
        self.assertEqual(str(InvalidValueError("bad", location="line 2")), "bad (at line 2)")
        self.assertEqual(str(InvalidValueError("bad")), "bad")

    def testReplaceMergesAndKeepsCause(self):
        fault = InvalidValueError("bad", hint="a")
        fault.__cause__ = ValueError("origin")
        copy = fault.__replace__(location="here")
        self.assertEqual(dict(copy.options), {"hint": "a", "location": "here"})
        self.assertIs(copy.__cause__, fault.__cause__)

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            InvalidValueError("bad").options["hint"] = "x"

    def testRecoverability(self):
        self.assertTrue(InvalidValueError.recoverable)
        self.assertTrue(UnknownCommandError.recoverable)
        self.assertFalse(UnterminatedStringError.recoverable)
        self.assertFalse(UnexpectedCharacterError.recoverable)
        self.assertTrue(issubclass(UnexpectedCharacterError, ParserSyntaxError))

    def testCodes(self):
        self.assertEqual(InvalidValueError.code, FaultCode.INVALID_VALUE)
        self.assertEqual(FaultCode.INVALID_VALUE.normalize(), "20101")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.INVALID_VALUE))
        with self.assertRaises(TypeError):
            getdoc(20101)


if __name__ == "__main__":
    unittest.main()
