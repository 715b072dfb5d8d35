"""
Variable engine behavioral tests (immediate vs recursive, cycles, functions).

Scope
- Validate make-style immediate and recursive definitions.
- Validate undefined names, quoting preservation and cycle detection.
- Validate the dispatch between variables and function calls.

Conventions
- Test method names follow CamelCase per project convention.
- Tests define variables directly on an interpreter's table.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from quill.faults import RecursiveExpansionError
from quill.interpreter import Interpreter
from quill.registry import Registry
from quill.strings import InterpreterString


def parse(text):
    return InterpreterString.parse(text)


class TestDefinitions(TestCase):
    """Immediate and recursive variables."""

    def setUp(self):
        self.interpreter = Interpreter(Registry(), environment=False)
        self.variables = self.interpreter.variables

    def testRecursiveSeesLaterDefinitions(self):
        self.variables.define("x", "1")
        self.variables.define("recursive", parse("$(x)"))
        self.variables.define("immediate", parse("$(x)"), self.interpreter)
        self.variables.define("x", "2")
        self.assertEqual(self.variables.expand("recursive", self.interpreter), "2")
        self.assertEqual(self.variables.expand("immediate", self.interpreter), "1")

    def testUndefinedExpandsToEmpty(self):
        self.assertEqual(self.variables.expand("missing", self.interpreter), "")
        self.assertFalse(self.variables.defined("missing"))

    def testImmediateKeepsQuoting(self):
        self.variables.define("q", parse('"a b"'), self.interpreter)
        words = parse("$(q) c").expand_and_split(r"\s+", self.interpreter)
        self.assertEqual(words, ["a b", "c"])

    def testPlainStringIsUnquoted(self):
        self.variables.define("q", "a b")
        self.assertEqual(parse("$(q)").expand_and_split(r"\s+", self.interpreter), ["a", "b"])

    def testUndefine(self):
        self.variables.define("x", "1")
        self.variables.undefine("x")
        self.assertNotIn("x", self.variables)
        self.assertEqual(self.variables.names(), [])

    def testRejectsOtherValues(self):
        with self.assertRaises(TypeError):
            self.variables.define("x", 3)


class TestCycles(TestCase):
    """Self references are reported, never recursed forever."""

    def setUp(self):
        self.interpreter = Interpreter(Registry(), environment=False)
        self.variables = self.interpreter.variables

    def testDirectCycle(self):
        self.variables.define("a", parse("$(a)"))
        with self.assertRaises(RecursiveExpansionError) as context:
            self.variables.expand("a", self.interpreter)
        self.assertEqual(context.exception.options["chain"], ("a", "a"))

    def testIndirectCycle(self):
        self.variables.define("a", parse("x $(b)"))
        self.variables.define("b", parse("$(a)"))
        with self.assertRaises(RecursiveExpansionError) as context:
            self.variables.expand("a", self.interpreter)
        self.assertEqual(context.exception.options["chain"], ("a", "b", "a"))

    def testStackIsCleanAfterACycle(self):
        self.variables.define("a", parse("$(a)"))
        with self.assertRaises(RecursiveExpansionError):
            self.variables.expand("a", self.interpreter)
        self.variables.define("a", "fine")
        self.assertEqual(self.variables.expand("a", self.interpreter), "fine")

    def testSharedReferenceIsNotACycle(self):
        self.variables.define("x", "1")
        self.variables.define("y", parse("$(x)$(x)"))
        self.assertEqual(self.variables.expand("y", self.interpreter), "11")

    def testLongChainIsBounded(self):
        for index in range(400):
            self.variables.define("v%d" % index, parse("$(v%d)" % (index + 1)))
        self.variables.define("v400", "end")
        with self.assertRaises(RecursiveExpansionError) as context:
            self.variables.expand("v0", self.interpreter)
        self.assertEqual(context.exception.options["depth"], self.variables.limit)
        self.assertEqual(self.variables.expand("v350", self.interpreter), "end")


class TestImmediateSelfReferences(TestCase):
    """':=' expands once against the table as it is, like make."""

    def setUp(self):
        self.interpreter = Interpreter(Registry(), environment=False)
        self.variables = self.interpreter.variables

    def testUndefinedSelfReferenceIsEmpty(self):
        self.variables.define("a", parse("$(a)"), self.interpreter)
        self.assertEqual(self.variables.expand("a", self.interpreter), "")

    def testSelfReferenceAppends(self):
        self.variables.define("a", "x")
        self.variables.define("a", parse("$(a) y"), self.interpreter)
        self.assertEqual(self.variables.expand("a", self.interpreter), "x y")

    def testMutualReferencesAreEmpty(self):
        self.variables.define("a", parse("$(b)"), self.interpreter)
        self.variables.define("b", parse("$(a)"), self.interpreter)
        self.assertEqual(self.variables.expand("a", self.interpreter), "")
        self.assertEqual(self.variables.expand("b", self.interpreter), "")


class TestFunctionReferences(TestCase):
    """$(name arguments) dispatch."""

    def setUp(self):
        registry = Registry()
        registry.register_function("twice", lambda target, text: text * 2)
        self.interpreter = Interpreter(registry, environment=False)

    def testFunctionCall(self):
        self.assertEqual(self.interpreter.expand("$(twice ab)"), "abab")

    def testVariableShadowsBareFunctionName(self):
        self.interpreter.variables.define("twice", "variable")
        self.assertEqual(self.interpreter.expand("$(twice)"), "variable")
        self.assertEqual(self.interpreter.expand("$(twice x)"), "xx")

    def testSnapshotIsIndependent(self):
        self.interpreter.variables.define("x", "1")
        copy = self.interpreter.variables.snapshot()
        self.interpreter.variables.define("x", "2")
        self.assertEqual(copy.get("x"), "1")


if __name__ == "__main__":
    unittest.main()
