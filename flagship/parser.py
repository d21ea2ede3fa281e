"""
Flagship parser engine.

Parser walks the argument vector once, left to right, against a Command tree:

- "--" ends option processing; later tokens only fill positional slots, and
  whatever no slot takes is returned as remaining overflow.
- long options ("--name", "--name=value", "/name:value" on windows) are
  looked up by their qualified long name;
- short clusters ("-vc9995551234") are resolved one character at a time: flags
  may cluster, the first value-taking option consumes the rest of the cluster
  (or the next token when nothing is left);
- anything else fills the next free positional slot, or selects a subcommand
  once the slots are exhausted.

Options are matched against the active command first, then its ancestors.
When parsing is done, defaults and environment values are resolved for the
whole tree and required values are checked on the active chain.

Example
    >>> parser = Parser(root)
    >>> result = parser.parse(["-v", "command", "--extra-verbose"])
    >>> [command.name for command in result.chain]
    ['TestHelp', 'command']
"""
import logging
import os
import re
import sys
from typing import NamedTuple

from . import defaults
from .faults import *
from .help import render_help, render_usage
from .man import render_man, write_man
from .options import Kind
from .styles import default_style
from .utils import *

logger = logging.getLogger(__name__)


class ParseResult(NamedTuple):
    """
    outcome of a successful parse.

    - chain: the activated commands, from the root down to the deepest one.
    - remaining: unconsumed tokens (after "--", or any stray positional when
      the parser passes them through).
    """
    chain: tuple
    remaining: list

    @property
    def command(self):
        return self.chain[-1]


def _numeric(token, /):
    return re.fullmatch(r"-\d+(\.\d*)?([eE][-+]?\d+)?", token) is not None


def _listing(names, /):
    names = ["'%s'" % name for name in names]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


class Parser:
    """
    Stateful driver binding an argument vector to a Command tree.

    Parameters
    - root: Command
      the tree to parse against (the caller keeps ownership).
    - style: Style
      token conventions (POSIX or WINDOWS); picked from the platform when omitted.
    - help: bool
      handle the built-in help flags and list them under "Help Options".
    - environ: Mapping[str, str]
      environment probed by the resolver; os.environ when omitted.
    - passthrough: bool
      keep stray positional tokens in 'remaining' instead of failing.
    - width: int
      wrapping column of help text.
    - shell: bool
      surface faults the way a command-line program does (print and exit).

    Raises
    - DuplicateDefinitionError: an option of the tree clashes with the help flags.
    """

    def __init__(
            self,
            root,
            /,
            *,
            style=Unset,
            help=True,
            environ=Unset,
            passthrough=False,
            width=80,
            shell=False
    ):
        if not getattr(root, "invocable", False):
            raise TypeError("Parser() argument must be a command")
        if not isinstance(width, int) or width <= 0:
            raise ValueError("Parser() width must be a positive integer")

        self._root = root
        self._style = coalesce(style, default_style())
        self._help = bool(help)
        self._environ = environ
        self._passthrough = bool(passthrough)
        self._width = width
        self._shell = bool(shell)
        self._surface = {}

        if self._help:
            self._check_help_clash()

    @property
    def root(self):
        return self._root

    @property
    def style(self):
        return self._style

    @property
    def help(self):
        return self._help

    @property
    def width(self):
        return self._width

    def _check_help_clash(self):
        for command in self._root.traverse():
            for option in command.each_option():
                if (
                    (option.short is not None and self._style.is_help(option.short, False)) or
                    (option.long is not None and self._style.is_help(option.qualified, True))
                ):
                    raise DuplicateDefinitionError(
                        "flag %s clashes with the built-in help flags" % option,
                        input=str(option),
                        hint="rename the flag or create the parser with help=False"
                    )

    def format_help(self):
        return render_help(self)

    def format_usage(self):
        return render_usage(self)

    def format_man(self, *, date=None):
        return render_man(self, date=date)

    def write_man(self, stream, /, *, date=None):
        write_man(self, stream, date=date)

    def parse(self, argv=Unset, /):
        """
        Parse 'argv' (sys.argv[1:] by default) and return a ParseResult.

        Every parse starts from a clean tree: all values and active markers
        left by a previous parse are cleared first.

        Raises
        - HelpRequested: a help flag was given; str() is the rendered help.
        - ParserError: any parse failure (see flagship.faults).
        In shell mode faults are printed instead and the process exits.
        """
        return self._parse(argv, self._shell)

    def run(self, argv=Unset, /):
        """
        Parse in shell mode and call the deepest active command's callback.

        Help goes to stdout (exit status 0), faults go to stderr (exit status 1).
        The callback receives the remaining tokens and its return value is
        returned; without a callback the ParseResult is returned.
        """
        result = self._parse(argv, True)
        if (callback := result.command.callback) is not None:
            logger.debug("running callback of command %r", result.command.name)
            return callback(result.remaining)
        return result

    def _parse(self, argv, shell, /):
        argv = list(coalesce(argv, sys.argv[1:]))
        for token in argv:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be a sequence of strings")

        self._surface = {"shell": shell, "prog": self._root.name}
        self._root.reset()
        try:
            remaining = self._consume(argv)
            defaults.resolve(self._root, coalesce(self._environ, os.environ))
            self._check()
        except ParserError as fault:
            trigger(fault, shell=shell, prog=self._root.name)

        return ParseResult(self._root.chain, remaining)

    def _consume(self, argv, /):
        index = 0
        command = self._root
        remaining = []
        terminated = False

        try:
            while index < len(argv):
                token = argv[index]
                index += 1

                if not terminated and token == "--":
                    logger.debug("option terminator at position %d", index)
                    terminated = True
                elif not terminated and self._style.is_option(token):
                    prefix, name, islong = self._style.strip(token)
                    name, value = self._style.split(prefix, name, islong)
                    if islong:
                        index = self._long(command, prefix, name, value, argv, index)
                    else:
                        index = self._shorts(command, prefix, name, value, argv, index)
                else:
                    command = self._positional(command, token, terminated, remaining)
        except HelpRequested:
            raise
        except ParserError:
            if self._help and self._help_pending(argv[index:]):
                logger.debug("help flag pending after a parse error; showing help")
                raise HelpRequested(render_help(self)) from None
            raise
        return remaining

    def _help_pending(self, tokens, /):
        for token in tokens:
            if token == "--":
                return False
            if self._style.is_option(token):
                prefix, name, islong = self._style.strip(token)
                name, _ = self._style.split(prefix, name, islong)
                if self._style.is_help(name, islong):
                    return True
        return False

    def _lookup(self, command, name, islong, /):
        for node in reversed(command.path):
            option = node.resolve(name) if islong else node.resolve_short(name)
            if option is not None:
                return option
        return None

    def _unknown(self, command, prefix, name, islong, /):
        spelled = prefix + name
        candidates = []
        for node in command.path:
            for option in node.each_option():
                if islong and option.long is not None:
                    candidates.append(prefix + option.qualified)
                elif not islong and option.short is not None:
                    candidates.append(prefix + option.short)
        options = {"input": spelled}
        if match := suggest(spelled, candidates):
            options["hint"] = "did you mean %s?" % match
        return UnknownFlagError("unknown flag %r" % spelled, **options)

    def _value(self, option, spelled, argv, index, /):
        """
        bind 'option' from the next token; return the new index.
        """
        if option.optional:
            option.bind(None, input=spelled, **self._surface)
            return index
        if index >= len(argv):
            option.bind(None, input=spelled, **self._surface)
            return index

        token = argv[index]
        optionlike = token == "--" or self._style.is_option(token)
        numbers = option.kind is Kind.NUMBER or option.type in (int, float)
        if optionlike and not (numbers and _numeric(token)):
            option.bind(None, input=spelled, **self._surface)
            return index

        option.bind(token, input=spelled, **self._surface)
        return index + 1

    def _long(self, command, prefix, name, value, argv, index, /):
        if self._help and self._style.is_help(name, True):
            raise HelpRequested(render_help(self), input=prefix + name)

        if (option := self._lookup(command, name, True)) is None:
            raise self._unknown(command, prefix, name, True)

        spelled = prefix + name
        logger.debug("long option %s matched %s", spelled, option)
        if value is not None:
            option.bind(value, input=spelled, **self._surface)
        elif option.takes_value:
            index = self._value(option, spelled, argv, index)
        else:
            option.bind(None, input=spelled, **self._surface)
        return index

    def _shorts(self, command, prefix, cluster, value, argv, index, /):
        position = 0
        try:
            while position < len(cluster):
                char = cluster[position]
                position += 1

                if self._help and self._style.is_help(char, False):
                    raise HelpRequested(render_help(self), input=prefix + char)

                if (option := self._lookup(command, char, False)) is None:
                    raise self._unknown(command, prefix, char, False)

                spelled = prefix + char
                logger.debug("short option %s matched %s", spelled, option)
                if value is not None:
                    option.bind(value, input=spelled, **self._surface)
                elif not option.takes_value:
                    option.bind(None, input=spelled, **self._surface)
                elif rest := cluster[position:]:
                    # the rest of the cluster is a value, not more flags
                    position = len(cluster)
                    option.bind(rest, input=spelled, **self._surface)
                else:
                    index = self._value(option, spelled, argv, index)
        except HelpRequested:
            raise
        except ParserError:
            if self._help and any(self._style.is_help(char, False) for char in cluster[position:]):
                logger.debug("help flag pending in cluster %s%s; showing help", prefix, cluster)
                raise HelpRequested(render_help(self)) from None
            raise
        return index

    def _positional(self, command, token, terminated, remaining, /):
        for argument in command.arguments:
            if argument.remaining or not argument.isset:
                logger.debug("positional %r fills slot %r", token, argument.name)
                argument.bind(token)
                return command

        if not terminated and command.children:
            if (child := command.find(token)) is None:
                names = [name for child in command.listed() for name in (child.name, *child.aliases)]
                options = {"input": token}
                if match := suggest(token, names):
                    options["hint"] = "did you mean %r?" % match
                elif names:
                    options["hint"] = "available commands: %s" % ", ".join(sorted(names))
                raise UnknownCommandError("unknown command %r" % token, **options)
            logger.debug("activating command %r", child.name)
            command.active = child
            return child

        if terminated or self._passthrough:
            logger.debug("keeping %r as remaining", token)
            remaining.append(token)
            return command

        raise UnexpectedPositionalError(
            "unexpected positional argument %r" % token,
            input=token,
            hint="separate trailing arguments with '--' if they are meant for another program"
        )

    def _check(self):
        chain = self._root.chain

        if missing := [
            str(option)
            for command in chain
            for option in command.each_option()
            if option.required and not option.isset
        ]:
            raise RequiredMissingError(
                "the required flag%s %s %s not specified" % (
                    "s" if len(missing) > 1 else "", _listing(missing), "were" if len(missing) > 1 else "was"
                ),
                input=missing[0]
            )

        if missing := [
            argument.name
            for command in chain
            for argument in command.arguments
            if argument.required and not argument.isset
        ]:
            raise RequiredMissingError(
                "the required argument%s %s %s not provided" % (
                    "s" if len(missing) > 1 else "", _listing(missing), "were" if len(missing) > 1 else "was"
                ),
                input=missing[0]
            )

        deepest = chain[-1]
        if deepest.children and not deepest.subcommands_optional:
            names = sorted(child.name for child in deepest.listed())
            raise CommandRequiredError(
                "please specify a command of %r" % deepest.name,
                hint="one of: %s" % ", ".join(names) if names else "see --help"
            )


__all__ = (
    "Parser",
    "ParseResult",
)
