"""
Fault tests (codes, payload, rendering and surfacing).

Scope
- Validate stable fault codes and host-provided code labels.
- Validate the read-only options payload and message handling.
- Validate trigger(): raising outside shell mode, printing and exiting inside it.
"""
import __main__
import contextlib
import io
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from flagship.faults import *


class TestFaults(TestCase):
    """Payload and rendering of parser faults."""

    def testCodes(self):
        self.assertEqual(UnknownFlagError("x").kind, FaultCode.UNKNOWN_FLAG)
        self.assertEqual(MissingValueError("x").kind, FaultCode.MISSING_VALUE)
        self.assertEqual(InvalidChoiceError("x").kind, FaultCode.INVALID_CHOICE)
        self.assertEqual(HelpRequested("x").kind, FaultCode.HELP_REQUESTED)
        self.assertEqual(int(FaultCode.DUPLICATE_DEFINITION), 11151)

    def testHierarchy(self):
        for cls in (
            UnknownFlagError,
            MissingValueError,
            InvalidValueError,
            UnexpectedPositionalError,
            RequiredMissingError,
            UnknownCommandError,
            CommandRequiredError,
            DuplicateDefinitionError,
            HelpRequested,
        ):
            with self.subTest(cls=cls.__name__):
                self.assertTrue(issubclass(cls, ParserError))
        self.assertTrue(issubclass(EmptyValueWarning, UserWarning))

    def testMessageAndOptions(self):
        fault = UnknownFlagError("unknown flag '--x'", input="--x", hint="did you mean --y?")
        self.assertEqual(str(fault), "unknown flag '--x'")
        self.assertEqual(fault.options["hint"], "did you mean --y?")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "changed"

    def testReplaceKeepsMessage(self):
        fault = UnknownFlagError("boom", input="--x")
        replaced = fault.__replace__(shell=True)
        self.assertIsInstance(replaced, UnknownFlagError)
        self.assertEqual(replaced.message, "boom")
        self.assertEqual(dict(replaced.options), {"input": "--x", "shell": True})

    def testRichRendering(self):
        console = Console(file=io.StringIO(), width=120, color_system=None)
        console.print(UnknownFlagError("unknown flag '--x'", prog="tool", hint="did you mean --y?"))
        self.assertEqual(console.file.getvalue(), (
            "[ tool - 11112 | Unknown Flag ]\n"
            "unknown flag '--x'\n"
            " -> did you mean --y?\n"
        ))

    def testHostCodeLabels(self):
        with mock.patch.object(__main__, "__codes__", {FaultCode.UNKNOWN_FLAG: "E-FLAG"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "E-FLAG")
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "11117")


class TestTrigger(TestCase):
    """Surfacing faults through trigger()."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(RequiredMissingError) as context:
            trigger(RequiredMissingError("missing"), prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")

    def testShellErrorExitsWithOne(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(UnknownCommandError("unknown command 'x'"), shell=True, prog="tool")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("unknown command 'x'", stderr.getvalue())

    def testShellHelpExitsWithZero(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
            trigger(HelpRequested("Usage:\n  tool\n"), shell=True)
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Usage:", stdout.getvalue())

    def testWarningsAreEmitted(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(EmptyValueWarning("empty inline value for flag '--x'"))
        self.assertEqual(len(caught), 1)
        self.assertIs(caught[0].category, EmptyValueWarning)

    def testRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
