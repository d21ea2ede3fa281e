"""
Flagship faults (errors, warnings, and the help short-circuit) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ParserError / ParserWarning: base types that carry a one-line message plus
  read-only options and know how to render and surface themselves.
- HelpRequested: not a failure; a control-flow outcome whose message is the
  fully rendered help text of the active command.
- trigger(): central entry point to surface any fault (raise, or print and exit
  when running in shell mode).

Integration
- The parser raises faults directly (non-shell mode). Parser.run() surfaces the
  same faults through trigger(..., shell=True) so that help goes to stdout with
  a zero exit status and errors go to stderr with status 1.
- DuplicateDefinitionError is raised while the schema is being built, before any
  parsing. It reports a programming error in the schema itself.
"""
import sys
import warnings
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - control flow (100xx)
      • HELP_REQUESTED
    - routing (111xx)
      • UNKNOWN_COMMAND, COMMAND_REQUIRED
    - flags (111xx)
      • UNKNOWN_FLAG, MISSING_VALUE, INVALID_VALUE, INVALID_CHOICE, REQUIRED_MISSING
    - positionals (1112x)
      • UNEXPECTED_POSITIONAL
    - schema (1115x)
      • DUPLICATE_DEFINITION
    - warnings (12xxx)
      • EMPTY_VALUE
    """
    # --- control flow (10xxx) ---
    HELP_REQUESTED          = 10100

    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND         = 11101
    COMMAND_REQUIRED        = 11102

    # --- flag errors (11xxx) ---
    UNKNOWN_FLAG            = 11112
    MISSING_VALUE           = 11117
    INVALID_VALUE           = 11123
    INVALID_CHOICE          = 11124
    REQUIRED_MISSING        = 11125

    # --- positional errors (11xxx) ---
    UNEXPECTED_POSITIONAL   = 11121

    # --- schema errors (11xxx) ---
    DUPLICATE_DEFINITION    = 11151

    # --- warnings (12xxx) ---
    EMPTY_VALUE             = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    return getattr(__import__("__main__"), "__prog__", options.get("prog") or "flagship")


class ParserError(Exception):
    """
    base class of every fault raised while building a schema or parsing argv.

    attributes
    - message: the one-line human message (names the offending token/option).
    - options: read-only mapping with rendering context (title, hint, input, ...).
    - kind: the FaultCode of this fault.
    """
    code = None
    title = "parse error"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def kind(self):
        return self.options.get("code", type(self).code)

    def __str__(self):
        return self.message

    def __rich__(self):
        header = Text.assemble(
            "[ ",
            _program(self.options),
            " - ",
            self.kind.normalize(),
            " | ",
            self.options.get("title", type(self).title).title(),
            " ]"
        )
        renders = [header, Text(self.message)]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(" -> ", hint))
        return Group(*renders)

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownFlagError(ParserError):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"


class MissingValueError(ParserError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class InvalidValueError(ParserError):
    code = FaultCode.INVALID_VALUE
    title = "invalid value"


class InvalidChoiceError(InvalidValueError):
    code = FaultCode.INVALID_CHOICE
    title = "invalid choice"


class UnexpectedPositionalError(ParserError):
    code = FaultCode.UNEXPECTED_POSITIONAL
    title = "unexpected positional"


class RequiredMissingError(ParserError):
    code = FaultCode.REQUIRED_MISSING
    title = "required value missing"


class UnknownCommandError(ParserError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"


class CommandRequiredError(ParserError):
    code = FaultCode.COMMAND_REQUIRED
    title = "command required"


class DuplicateDefinitionError(ParserError):
    code = FaultCode.DUPLICATE_DEFINITION
    title = "duplicate definition"


class HelpRequested(ParserError):
    """
    help was requested; message carries the rendered help text.

    in shell mode the help goes to stdout and the process exits with status 0.
    """
    code = FaultCode.HELP_REQUESTED
    title = "help"

    def __rich__(self):
        return Text(self.message)

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        Console().out(self.message, end="", highlight=False)
        sys.exit(0)


class ParserWarning(UserWarning):
    code = FaultCode.EMPTY_VALUE
    title = "warning"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        header = Text.assemble(
            "[ ",
            _program(self.options),
            " - ",
            self.code.normalize(),
            " | ",
            self.options.get("title", type(self).title).title(),
            " ]"
        )
        return Group(header, Text(self.message))

    def __trigger__(self):
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(ParserWarning):
    code = FaultCode.EMPTY_VALUE
    title = "empty inline value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ParserError",
    "UnknownFlagError",
    "MissingValueError",
    "InvalidValueError",
    "InvalidChoiceError",
    "UnexpectedPositionalError",
    "RequiredMissingError",
    "UnknownCommandError",
    "CommandRequiredError",
    "DuplicateDefinitionError",
    "HelpRequested",
    "ParserWarning",
    "EmptyValueWarning",
    "trigger",
)
