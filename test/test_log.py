"""
Logging behavioral tests (levels, handlers, verbosity).

Scope
- Validate level parsing from names and verbosity digits.
- Validate the TRACE level and the stderr/stdout split of the rich handlers.
- Validate QUILL_VERBOSITY and the verbose/log-level built-in commands.

Conventions
- Test method names follow CamelCase per project convention.
- Handlers write to StringIO consoles; the quill logger's handlers and
  level are restored after each test.
"""

from __future__ import annotations

import io
import logging
import os
import unittest
from unittest import TestCase, mock

from rich.console import Console

from quill.builtins import default_registry
from quill.interpreter import Interpreter
from quill.log import TRACE, configure, logger, parse_level, trace
from quill.session import Session


class LoggerTestCase(TestCase):

    def setUp(self):
        patcher = mock.patch.object(logger, "handlers", [])
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(logger.setLevel, logger.level)


class TestParseLevel(TestCase):
    """parse_level."""

    def testNames(self):
        self.assertEqual(parse_level("debug"), logging.DEBUG)
        self.assertEqual(parse_level(" Warning "), logging.WARNING)
        self.assertEqual(parse_level("trace"), TRACE)

    def testVerbosityDigitsAreClamped(self):
        self.assertEqual(parse_level("3"), logging.DEBUG)
        self.assertEqual(parse_level(7), TRACE)
        self.assertEqual(parse_level(-2), logging.ERROR)

    def testUnknownNameRaises(self):
        with self.assertRaises(ValueError):
            parse_level("loud")

    def testTraceIsANamedLevel(self):
        self.assertEqual(logging.getLevelName(TRACE), "TRACE")
        self.assertLess(TRACE, logging.DEBUG)


class TestHandlers(LoggerTestCase):
    """Filtering and routing."""

    def setUp(self):
        super().setUp()
        self.out = io.StringIO()
        self.err = io.StringIO()
        configure(
            logging.WARNING,
            out=Console(file=self.out, width=200),
            err=Console(file=self.err, width=200),
        )

    def testFiltersByLevel(self):
        logger.info("hidden")
        logger.warning("shown")
        self.assertEqual(self.out.getvalue(), "")
        self.assertIn("shown", self.err.getvalue())
        self.assertIn("WARNING", self.err.getvalue())

    def testMessagesBelowWarningGoToStdout(self):
        logger.setLevel(logging.INFO)
        logger.info("now shown")
        self.assertIn("now shown", self.out.getvalue())
        self.assertEqual(self.err.getvalue(), "")

    def testErrorsGoToStderr(self):
        logger.error("broken")
        self.assertIn("broken", self.err.getvalue())
        self.assertEqual(self.out.getvalue(), "")

    def testTrace(self):
        trace("hidden %s", "word")
        logger.setLevel(TRACE)
        trace("shown %s", "word")
        self.assertNotIn("hidden", self.out.getvalue())
        self.assertIn("shown word", self.out.getvalue())

    def testEnvironmentSetsInitialLevel(self):
        with mock.patch.dict(os.environ, {"QUILL_VERBOSITY": "debug"}):
            configure()
        self.assertEqual(logger.level, logging.DEBUG)

    def testBadEnvironmentFallsBackToWarnings(self):
        with mock.patch.dict(os.environ, {"QUILL_VERBOSITY": "loud"}):
            configure()
        self.assertEqual(logger.level, logging.WARNING)


class TestLoggingCommands(LoggerTestCase):
    """verbose and log-level."""

    def setUp(self):
        super().setUp()
        logger.setLevel(logging.WARNING)
        self.interpreter = Interpreter(default_registry(), Session(), environment=False)

    def testVerbose(self):
        self.interpreter.run_commands("verbose")
        self.assertEqual(logger.level, logging.INFO)

    def testLogLevel(self):
        self.interpreter.run_commands("log-level trace")
        self.assertEqual(logger.level, TRACE)

    def testLogLevelDigit(self):
        self.interpreter.run_commands("log-level 3")
        self.assertEqual(logger.level, logging.DEBUG)

    def testRecordedFaultsAreLogged(self):
        with self.assertLogs("quill", logging.ERROR) as captured:
            self.interpreter.run_commands("nope")
        self.assertIn("nope", captured.output[0])


if __name__ == "__main__":
    unittest.main()
