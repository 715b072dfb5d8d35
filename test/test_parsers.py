"""
Parser behavioral tests (script statements, option words, command-line flags).

Scope
- Validate statement kinds, names and line numbers of script files.
- Validate syntax faults for malformed lines.
- Validate option spellings after the compulsory arguments.
- Validate long, short, bundled and negated flags, stray words, warnings
  and conflicting spellings on the command line.

Conventions
- Test method names follow CamelCase per project convention.
- Commands are registered on a private registry so their types resolve.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from quill.commands import Command
from quill.faults import (
    IgnoredOptionWarning,
    OptionRedefinedError,
    ParserSyntaxError,
    UnexpectedCharacterError,
    UnknownCommandError,
    UnterminatedStringError,
)
from quill.parsers import CommandLineParser, Definition, FileParser, Invocation, split_words
from quill.registry import Registry


def make_registry():
    registry = Registry()
    registry.register_type("text", "string")
    registry.register_type("float", "float")
    registry.register_type("boolean", "boolean")
    for command in (
        Command("print", long="print", arguments=["text"]),
        Command("grid", "g", "grid", ["boolean"]),
        Command("verbose", "v", "verbose"),
        Command("plot", long="plot", arguments=["text"], options={"width": "float", "grid": "boolean"}),
    ):
        registry.register_command(command)
    return registry


class TestFileParser(TestCase):
    """Script statements."""

    def testStatementKinds(self):
        statements = list(FileParser("x := 1\ny = $(x)\nprint a b\n"))
        self.assertEqual([type(statement) for statement in statements], [Definition, Definition, Invocation])
        self.assertEqual([statement.name for statement in statements], ["x", "y", "print"])
        self.assertEqual([statement.line for statement in statements], [1, 2, 3])
        self.assertTrue(statements[0].immediate)
        self.assertFalse(statements[1].immediate)
        self.assertEqual(statements[2].text.references, ())

    def testCommentsAndBlankLinesAreSkipped(self):
        statements = list(FileParser("# header\n\n   print x # trailing\n"))
        self.assertEqual(len(statements), 1)
        self.assertEqual(statements[0].line, 3)

    def testQuotedValueMaySpanLines(self):
        statements = list(FileParser('print "a\nb"\nprint c'))
        self.assertEqual([statement.line for statement in statements], [1, 3])

    def testDefinitionWithoutSpaces(self):
        statement, = FileParser("x:=1")
        self.assertEqual((statement.name, statement.immediate), ("x", True))

    def testColonWithoutEqualsRaises(self):
        with self.assertRaises(ParserSyntaxError) as context:
            list(FileParser("x : 1"))
        self.assertEqual(context.exception.options["line"], 1)

    def testGluedCharacterRaises(self):
        with self.assertRaises(UnexpectedCharacterError):
            list(FileParser('print"x"'))

    def testBadFirstCharacterRaises(self):
        with self.assertRaises(UnexpectedCharacterError):
            list(FileParser("ok\n%x"))

    def testUnterminatedStringRaises(self):
        with self.assertRaises(UnterminatedStringError):
            list(FileParser('print "abc'))


class TestSplitWords(TestCase):
    """Arguments and options of one invocation."""

    def setUp(self):
        self.plot = make_registry().get_command("plot")

    def testOptionSpellings(self):
        for words in (
            ["f", "/width=2"],
            ["f", "/width", "=", "2"],
            ["f", "/width", "=2"],
            ["f", "/width", "2"],
        ):
            self.assertEqual(split_words(self.plot, words), (["f"], {"width": "2"}), words)

    def testBareBooleanOptionIsTrue(self):
        self.assertEqual(split_words(self.plot, ["f", "/grid", "/width=1"]), (["f"], {"grid": "true", "width": "1"}))

    def testExtraWordsStayWithArguments(self):
        self.assertEqual(split_words(self.plot, ["f", "g"]), (["f", "g"], {}))

    def testOptionsOnlyAfterArguments(self):
        self.assertEqual(split_words(self.plot, ["/width=2"]), (["/width=2"], {}))


class TestCommandLineParser(TestCase):
    """argv parsing."""

    def setUp(self):
        self.registry = make_registry()
        self.parser = CommandLineParser(self.registry.commands.values())

    def testFlags(self):
        calls = list(self.parser.parse(["--print", "hi", "-vg", "--no-grid", "--plot", "f", "/width=2", "x"]))
        self.assertEqual(
            [(call.command and call.command.name, call.arguments, call.options, call.number) for call in calls],
            [
                ("print", ["hi"], {}, 1),
                ("verbose", [], {}, 2),
                ("grid", [True], {}, 3),
                ("grid", [False], {}, 4),
                ("plot", ["f"], {"width": "2"}, 5),
                (None, ["x"], {}, 6),
            ],
        )

    def testOptionValueInNextWord(self):
        call, = self.parser.parse(["--plot", "f", "/width", "3"])
        self.assertEqual(call.options, {"width": "3"})

    def testBareBooleanOptionIsTrue(self):
        call, = self.parser.parse(["--plot", "f", "/grid"])
        self.assertEqual(call.options, {"grid": "true"})

    def testBareBooleanOptionLeavesNextWord(self):
        calls = list(self.parser.parse(["--plot", "f", "/grid", "x"]))
        self.assertEqual(calls[0].options, {"grid": "true"})
        self.assertEqual(calls[1].arguments, ["x"])

    def testOptionValueIsNeverAFlag(self):
        calls = list(self.parser.parse(["--plot", "f", "/width", "--print", "hi"]))
        self.assertEqual(calls[0].options, {"width": ""})
        self.assertEqual((calls[1].command.name, calls[1].arguments), ("print", ["hi"]))

    def testNegativeOptionValue(self):
        call, = self.parser.parse(["--plot", "f", "/width", "-3"])
        self.assertEqual(call.options, {"width": "-3"})

    def testUnknownFlagRaises(self):
        with self.assertRaises(UnknownCommandError) as context:
            list(self.parser.parse(["--prnit", "x"]))
        self.assertEqual(context.exception.options["suggestions"][0], "--print")

    def testUndeclaredOptionWarnsAndStops(self):
        warnings = []
        calls = list(self.parser.parse(["--print", "hi", "/nope", "x"], trigger=warnings.append))
        self.assertIsInstance(warnings[0], IgnoredOptionWarning)
        self.assertEqual([call.arguments for call in calls], [["hi"], ["/nope"], ["x"]])

    def testDefaultCommandTakesStrayWords(self):
        parser = CommandLineParser(self.registry.commands.values(), default=self.registry.get_command("print"))
        call, = parser.parse(["hello"])
        self.assertEqual((call.command.name, call.arguments), ("print", ["hello"]))

    def testConflictingSpellingsRaise(self):
        with self.assertRaises(OptionRedefinedError):
            CommandLineParser([Command("a", long="same"), Command("b", long="same")])


if __name__ == "__main__":
    unittest.main()
