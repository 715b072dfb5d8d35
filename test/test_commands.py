"""
Command behavioral tests (metadata, conversion, options, dispatch).

Scope
- Validate sanitizing of names and command-line spellings.
- Validate argument count enforcement and the [True] sentinel.
- Validate option normalization, unknown options and deprecated aliases.
- Validate dispatch with and without declared options.

Conventions
- Test method names follow CamelCase per project convention.
- Commands are registered on a private registry so their types resolve.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from quill.arguments import Argument
from quill.commands import Command, make_alias_for_option
from quill.faults import (
    ArgumentNumberMismatchError,
    DeprecatedOptionWarning,
    InvalidValueError,
    UnknownOptionError,
)
from quill.registry import Registry


def make_registry():
    registry = Registry()
    registry.register_type("float", "float")
    registry.register_type("text", "string")
    registry.register_type("boolean", "boolean")
    registry.register_group("drawing", "drawing commands", priority=5)
    return registry


class TestCommandMetadata(TestCase):
    """Construction and description."""

    def testInvalidNameRejected(self):
        with self.assertRaises(ValueError):
            Command("Bad Name")

    def testShortNeedsLong(self):
        with self.assertRaises(ValueError):
            Command("width", "w")

    def testDashesAreStripped(self):
        command = Command("line-width", "-w", "--line-width")
        self.assertEqual((command.short, command.long), ("w", "line-width"))

    def testLongDescriptionDefaultsToShort(self):
        command = Command("width").describe("sets the width")
        self.assertEqual(command.long_descr, "sets the width")

    def testGroupIsResolvedAndAttached(self):
        registry = make_registry()
        command = registry.register_command(Command("width", arguments=["float"], group="drawing"))
        group = registry.get_group("drawing")
        self.assertIs(command.group, group)
        self.assertIn(command, group.commands)

    def testOptionStrings(self):
        registry = make_registry()
        width = registry.register_command(Command("line-width", "w", "line-width", ["float"]))
        grid = registry.register_command(Command("grid", long="grid", arguments=["boolean"]))
        self.assertEqual(width.option_strings(), "-w, --line-width")
        self.assertTrue(grid.boolean)
        self.assertEqual(grid.option_strings(), "--[no-]grid")

    def testUsage(self):
        self.assertEqual(Command("width", arguments=["float"]).usage(), "width FLOAT")


class TestConversion(TestCase):
    """convert_arguments and convert_options."""

    def setUp(self):
        self.registry = make_registry()
        self.command = self.registry.register_command(Command(
            "plot",
            arguments=["text", "float"],
            options={"line_width": "float", "title": "text"},
        ))

    def testArgumentsAreConverted(self):
        self.assertEqual(self.command.convert_arguments(["f", "2.5"]), ["f", 2.5])

    def testNonStringsPassThrough(self):
        self.assertEqual(self.command.convert_arguments(["f", 3]), ["f", 3])

    def testArgumentCountIsEnforced(self):
        with self.assertRaises(ArgumentNumberMismatchError) as context:
            self.command.convert_arguments(["f"])
        self.assertEqual(context.exception.options["expected"], 2)
        self.assertEqual(context.exception.options["given"], 1)
        self.assertIn("plot TEXT FLOAT", context.exception.options["hint"])

    def testTooManyArgumentsAreRejected(self):
        with self.assertRaises(ArgumentNumberMismatchError) as context:
            self.command.convert_arguments(["f", "2.5", "extra"])
        self.assertEqual(context.exception.options["given"], 3)
        self.assertIn("takes 2 arguments but 3 were given", str(context.exception))

    def testTrueSentinelForCommandsWithoutArguments(self):
        command = Command("verbose")
        self.assertEqual(command.convert_arguments([True]), [])
        with self.assertRaises(ArgumentNumberMismatchError):
            command.convert_arguments(["x"])

    def testBadValueRaises(self):
        with self.assertRaises(InvalidValueError) as context:
            self.command.convert_arguments(["f", "wide"])
        self.assertTrue(str(context.exception).startswith("second argument of 'plot'"))
        self.assertEqual(context.exception.options["position"], 2)

    def testOptionNamesAreNormalized(self):
        self.assertEqual(self.command.convert_options({"Line_Width": "2"}), {"line-width": 2.0})
        self.assertTrue(self.command.has_option("line_width"))

    def testUnknownOptionRaises(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.command.convert_options({"line-widht": "2"})
        self.assertEqual(context.exception.options["suggestions"], ["line-width"])

    def testDeprecatedAliasWarnsAndTargetsOriginal(self):
        make_alias_for_option(self.command, "line-width", "lw", deprecated=True)
        warnings = []
        converted = self.command.convert_options({"lw": "3"}, trigger=warnings.append)
        self.assertEqual(converted, {"line-width": 3.0})
        self.assertIsInstance(warnings[0], DeprecatedOptionWarning)
        self.assertIn("line-width", warnings[0].options["hint"])

    def testPlainAliasIsSilent(self):
        make_alias_for_option(self.command, "title", "label")
        warnings = []
        self.assertEqual(self.command.convert_options({"label": "x"}, trigger=warnings.append), {"title": "x"})
        self.assertEqual(warnings, [])

    def testAliasOfUnknownOptionRaises(self):
        with self.assertRaises(UnknownOptionError):
            make_alias_for_option(self.command, "color", "c")


class TestDispatch(TestCase):
    """Command.run and the options mapping."""

    def testOptionsOmittedWhenNoneDeclared(self):
        received = []
        command = Command("width", arguments=[Argument("float")], callback=lambda target, value: received.append(value))
        command.run("target", [2.0])
        self.assertEqual(received, [2.0])

    def testOptionsAlwaysPassedWhenDeclared(self):
        received = []
        command = Command(
            "plot",
            options={"title": "text"},
            callback=lambda target, options: received.append(options),
        )
        command.run("target")
        command.run("target", (), {"title": "t"})
        self.assertEqual(received, [{}, {"title": "t"}])

    def testRunWithoutCallbackRaises(self):
        with self.assertRaises(RuntimeError):
            Command("idle").run("target")

    def testBindReturnsCallback(self):
        command = Command("idle")

        @command.bind
        def idle(target):
            return "done"

        self.assertEqual(command.run("target"), "done")


if __name__ == "__main__":
    unittest.main()
