"""
Built-in content and help listing tests.

Scope
- Validate the built-in types, commands and functions are registered.
- Validate the include/version/echo commands.
- Validate the python -m quill entry point and its exit status.
- Validate the grouped help listing (priority, blacklisting, ungrouped).

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured through StringIO consoles.
"""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import TestCase, mock

from rich.console import Console

import quill
from quill import faults, log
from quill.__main__ import main
from quill.builtins import default_registry
from quill.commands import Command
from quill.help import documented_commands, render
from quill.interpreter import Interpreter
from quill.registry import Registry
from quill.session import Session


class TestBuiltins(TestCase):
    """Registered content and a few commands."""

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        patcher = mock.patch.multiple(
            log,
            console=Console(file=self.out, width=200),
            stderr=Console(file=self.err, width=200),
        )
        patcher.start()
        self.addCleanup(patcher.stop)
        self.registry = default_registry()

    def testContent(self):
        for name in ("include", "eval", "set", "print", "verbose", "log-level", "version", "command-line-help", "echo"):
            self.assertTrue(self.registry.has_command(name), name)
        for name in ("strip", "words", "word", "join"):
            self.assertIsNotNone(self.registry.get_function(name), name)
        self.assertEqual(self.registry.get_type("float-list").string_to_type("1 2,3"), [1.0, 2.0, 3.0])

    def testDefaultRegistriesAreIndependent(self):
        default_registry().register_command(Command("extra", callback=print))
        self.assertFalse(default_registry().has_command("extra"))

    def testInclude(self):
        session = Session()
        interpreter = Interpreter(self.registry, session, environment=False)
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory, "inner.qs")
            path.write_text("set shared from-inner\n", encoding="utf-8")
            interpreter.run_commands('include "%s"\nprint $(shared)' % path)
        self.assertEqual(session.output, ["from-inner"])
        self.assertEqual(session.figure_name, "inner")

    def testVersion(self):
        Interpreter(self.registry, Session(), environment=False).run_commands("version")
        self.assertIn(quill.__version__, self.out.getvalue())

    def testEcho(self):
        session = Session(["--print", "a b"])
        Interpreter(self.registry, session, environment=False).run_commands("echo")
        self.assertIn("--print 'a b'", self.err.getvalue())

    def testSetRejectsBadNames(self):
        interpreter = Interpreter(self.registry, Session(), environment=False)
        interpreter.run_commands("set 'a b' c")
        self.assertEqual(len(interpreter.faults), 1)


class TestMain(TestCase):
    """python -m quill."""

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        for patcher in (
            mock.patch.multiple(
                log,
                console=Console(file=self.out, width=200),
                stderr=Console(file=self.err, width=200),
            ),
            mock.patch.object(faults, "console", Console(file=self.err, width=200)),
        ):
            patcher.start()
            self.addCleanup(patcher.stop)

    def testScriptsAndFlags(self):
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory, "plot.qs")
            path.write_text("print hello\n", encoding="utf-8")
            self.assertEqual(main([str(path), "--print", "world"]), 0)
        self.assertEqual(self.out.getvalue().split(), ["hello", "world"])

    def testFaultsSetTheExitStatus(self):
        self.assertEqual(main(["--no-such-flag"]), 1)
        self.assertIn("no-such-flag", self.err.getvalue())


class TestHelp(TestCase):
    """Grouped command-line help."""

    def setUp(self):
        self.registry = Registry()
        self.registry.register_group("late", "late group", priority=10)
        self.registry.register_group("early", "early group", priority=1)
        self.registry.register_group("hidden", blacklisted=True)
        for command in (
            Command("b-cmd", long="b-cmd", group="early", short_descr="second"),
            Command("a-cmd", "a", "a-cmd", group="early", short_descr="first"),
            Command("c-cmd", long="c-cmd", group="late"),
            Command("d-cmd", long="d-cmd", group="hidden"),
            Command("e-cmd", long="e-cmd"),
            Command("script-only", group="early"),
        ):
            self.registry.register_command(command)

    def testOrdering(self):
        listing = documented_commands(self.registry.commands.values())
        self.assertEqual(
            [(group and group.id, [command.name for command in commands]) for group, commands in listing],
            [("early", ["a-cmd", "b-cmd"]), ("late", ["c-cmd"]), (None, ["e-cmd"])],
        )

    def testRender(self):
        output = io.StringIO()
        Console(file=output, width=200).print(render(self.registry.commands.values()))
        text = output.getvalue()
        self.assertIn("-a, --a-cmd", text)
        self.assertIn("early group", text)
        self.assertNotIn("d-cmd", text)


if __name__ == "__main__":
    unittest.main()
