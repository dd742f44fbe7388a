"""
Options module behavioral tests (execution options and format-option scanning).

Scope
- Validate the zero-valued Option and its construction checks.
- Validate free-form vs "(key=value ...)" classification in parse_params.
- Validate InvalidFormatOptionError, partial state on failure, and the empty-key warning.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Option, ExecType, faults).
"""

from __future__ import annotations

import unittest
import warnings
from datetime import timedelta
from unittest import TestCase

from rich.console import Console

from metacmd import options
from metacmd import Option, ExecType, InvalidFormatOptionError, EmptyFormatKeyWarning, FaultCode


class TestOption(TestCase):
    """Behavioral tests for the Option descriptor."""

    def testFreshOptionIsZeroValued(self):
        option = Option()
        self.assertIs(option.exec, ExecType.NONE)
        self.assertFalse(option.quit)
        self.assertEqual(option.params, {})
        self.assertEqual(option.crosstab, [])
        self.assertEqual(option.watch, timedelta())

    def testFreshOptionsDoNotShareState(self):
        one, two = Option(), Option()
        one.params["x"] = "1"
        one.crosstab.append("col")
        self.assertEqual(two.params, {})
        self.assertEqual(two.crosstab, [])

    def testIntervalOnlyWhenWatching(self):
        option = Option(exec=ExecType.PIPE, watch=timedelta(seconds=2))
        self.assertIsNone(option.interval)
        option.exec = ExecType.WATCH
        self.assertEqual(option.interval, timedelta(seconds=2))

    def testExecAcceptsIntegers(self):
        self.assertIs(Option(exec=5).exec, ExecType.CROSSTAB)

    def testNegativeWatchRejected(self):
        with self.assertRaises(ValueError):
            Option(watch=timedelta(seconds=-1))

    def testWatchMustBeTimedelta(self):
        with self.assertRaises(TypeError):
            Option(watch=2)

    def testQuitMustBeBoolean(self):
        with self.assertRaises(TypeError):
            Option(quit="yes")

    def testCrosstabKeepsOrder(self):
        option = Option(exec=ExecType.CROSSTAB, crosstab=("v", "h", "d", "sort"))
        self.assertEqual(option.crosstab, ["v", "h", "d", "sort"])

    def testEquality(self):
        self.assertEqual(Option(quit=True), Option(quit=True))
        self.assertNotEqual(Option(quit=True), Option())

    def testRepr(self):
        text = repr(Option(exec=ExecType.WATCH, watch=timedelta(seconds=1)))
        self.assertTrue(text.startswith("option("))
        self.assertIn("exec='watch'", text)

    def testRichPrettyPrint(self):
        console = Console(color_system=None, force_terminal=False, width=200)
        with console.capture() as capture:
            console.print(Option(quit=True))
        self.assertIn("quit=True", capture.get())

    def testModuleCompilesWithWarningsAsErrors(self):
        with open(options.__file__, encoding="utf-8") as file:
            source = file.read()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, options.__file__, "exec")


class TestParseParams(TestCase):
    """Behavioral tests for the format-option scanner."""

    def testFreeFormJoinsEverything(self):
        option = Option()
        option.parse_params(["|", "gzip", ">", "out.gz"], "pipe")
        self.assertEqual(option.params, {"pipe": "| gzip > out.gz"})

    def testKeyValueList(self):
        option = Option()
        option.parse_params(["(a=1", "b=2)"], "file")
        self.assertEqual(option.params, {"a": "1", "b": "2"})
        self.assertNotIn("file", option.params)

    def testUnparenthesizedPairIsFreeForm(self):
        option = Option()
        option.parse_params(["foo=bar"], "file")
        self.assertEqual(option.params, {"file": "foo=bar"})

    def testEntryWithoutEqualsFails(self):
        with self.assertRaises(InvalidFormatOptionError) as context:
            Option().parse_params(["(x)"], "file")
        fault = context.exception
        self.assertIs(fault.options["code"], FaultCode.INVALID_FORMAT_OPTION)
        self.assertEqual(fault.options["token"], "(x)")
        self.assertEqual(fault.options["index"], 1)
        self.assertIn("first position", str(fault))

    def testEmptyParenthesesRejected(self):
        with self.assertRaises(InvalidFormatOptionError):
            Option().parse_params(["()"], "file")

    def testFailureKeepsEarlierPairs(self):
        option = Option()
        with self.assertRaises(InvalidFormatOptionError) as context:
            option.parse_params(["(a=1", "b", "c=3)"], "file")
        self.assertEqual(option.params, {"a": "1"})
        self.assertEqual(context.exception.options["index"], 2)

    def testEmptyInput(self):
        option = Option()
        self.assertEqual(option.parse_params([], "file"), {})

    def testEmptyTokensSkipped(self):
        option = Option()
        option.parse_params(["", "(a=1)", ""], "file")
        self.assertEqual(option.params, {"a": "1"})

    def testOnlyEmptyTokens(self):
        option = Option()
        option.parse_params(["", ""], "file")
        self.assertEqual(option.params, {})

    def testFreeFormAfterClosedList(self):
        option = Option()
        option.parse_params(["(format=csv)", "out.csv", "(x=1)"], "file")
        self.assertEqual(option.params, {"format": "csv", "file": "out.csv (x=1)"})

    def testFreeFormJoinIncludesLaterEmptyTokens(self):
        option = Option()
        option.parse_params(["a", "", "b"], "file")
        self.assertEqual(option.params, {"file": "a  b"})

    def testSecondListAfterClose(self):
        option = Option()
        option.parse_params(["(a=1)", "(b=2)"], "file")
        self.assertEqual(option.params, {"a": "1", "b": "2"})

    def testUnclosedListStillStores(self):
        option = Option()
        option.parse_params(["(a=1", "b=2"], "file")
        self.assertEqual(option.params, {"a": "1", "b": "2"})

    def testSplitsAtFirstEquals(self):
        option = Option()
        option.parse_params(["(sep==", "expr=a=b)"], "file")
        self.assertEqual(option.params, {"sep": "=", "expr": "a=b"})

    def testStripsParenthesisRuns(self):
        option = Option()
        option.parse_params(["((a=1))"], "file")
        self.assertEqual(option.params, {"a": "1"})

    def testDuplicateKeysLastWriteWins(self):
        option = Option()
        option.parse_params(["(a=1", "a=2)"], "file")
        self.assertEqual(option.params, {"a": "2"})

    def testEmptyValueAllowed(self):
        option = Option()
        option.parse_params(["(null=)"], "file")
        self.assertEqual(option.params, {"null": ""})

    def testEmptyKeyWarnsAndStores(self):
        option = Option()
        with self.assertWarns(EmptyFormatKeyWarning):
            option.parse_params(["(=x)"], "file")
        self.assertEqual(option.params, {"": "x"})

    def testMergesIntoExistingParams(self):
        option = Option(params={"file": "old", "keep": "yes"})
        option.parse_params(["new.csv"], "file")
        self.assertEqual(option.params, {"file": "new.csv", "keep": "yes"})

    def testReturnsParamsMapping(self):
        option = Option()
        self.assertIs(option.parse_params(["(a=1)"], "file"), option.params)

    def testAcceptsAnyIterable(self):
        option = Option()
        option.parse_params(iter(["x", "y"]), "file")
        self.assertEqual(option.params, {"file": "x y"})

    def testFreeFormNeverSplitsPairs(self):
        samples = (
            ["a=1", "b=2"],
            ["plain"],
            ["x", "(y=1)"],
            ["-flag", "value=1)"],
        )
        for sample in samples:
            with self.subTest(sample=sample):
                option = Option()
                option.parse_params(sample, "default")
                self.assertEqual(option.params, {"default": " ".join(sample)})

    def testListNeverSetsDefaultKey(self):
        samples = (
            ["(a=1", "b=2)"],
            ["(a=1)", "(b=2", "c=3)"],
            ["(format=aligned", "border=2", "title=x)"],
        )
        for sample in samples:
            with self.subTest(sample=sample):
                option = Option()
                option.parse_params(sample, "default")
                self.assertNotIn("default", option.params)
                self.assertEqual(len(option.params), len(set(option.params)))


if __name__ == "__main__":
    unittest.main()
