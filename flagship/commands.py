"""
Flagship command layer: invocable groups, positional slots and subcommands.

What this module provides
- Command: a Group that can be invoked on its own. On top of its option tree it
  carries a name, aliases, short/long descriptions, an ordered list of
  positional slots, ordered child commands (subcommands), and the 'active'
  marker the parser sets on the child selected by the most recent parse.
- Positional: one positional slot (name, description, converter, required,
  remaining). Only the last slot may consume all remaining values.

Core ideas
- A command tree is built once, before parsing, through the builder methods
  (add, group, argument, command, include). Schema errors (duplicate option
  names, duplicate positional names, clashing subcommand names or aliases)
  are raised as DuplicateDefinitionError at build time.
- During parsing only the value sinks (options, positionals) and the 'active'
  markers change. Rendering never mutates the tree.

Quick start
    from flagship import Command, Option, Parser

    root = Command("tool", "Do tool things")
    root.add(Option("-v", "--verbose", type=bool, descr="Be chatty"))
    root.argument("filename", "A filename")
    sync = root.command("sync", "Synchronize", aliases=("s",))
    sync.add(Option("--dry-run", type=bool))

    result = Parser(root).parse(["-v", "notes.txt", "sync", "--dry-run"])
"""
import builtins
import re

from .faults import DuplicateDefinitionError, InvalidValueError
from .groups import Group
from .utils import *


def _sanitize_name(cls, field, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field} must be a string")
    elif not re.fullmatch(r"[^\s\-/][^\s]*", name):
        raise ValueError(f"{cls.__typename__} {field} {name!r} must be a word that does not start with '-' or '/'")
    return name


def _sanitize_text(cls, field, text, /):
    if not isinstance(text, str | UnsetType):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    return coalesce(text)


class Positional(metaclass=SpecType):
    """
    Positional slot of a command.

    - name: shown in usage ("[filename]") and in the Arguments section.
    - descr: help description.
    - type: converter for the raw token (int for "num", ...).
    - required: the slot must be filled (usage shows it without brackets).
    - remaining: the slot absorbs every further positional token (a list).
    """

    __introspectable__ = (
        "name",
        "descr",
        "type",
        "required",
        "remaining",
    )

    __displayable__ = (
        "name",
        "descr",
        "value",
    )

    def __init__(self, name, /, descr=Unset, *, type=str, required=False, remaining=False):
        self._name = _sanitize_name(builtins.type(self), "name", name)
        self._descr = _sanitize_text(builtins.type(self), "descr", descr)
        if not callable(type):
            raise TypeError(f"{builtins.type(self).__typename__} 'type' must be callable")
        self._type = type
        self._required = bool(required)
        self._remaining = bool(remaining)
        self._value = Unset

    @property
    def isset(self):
        return self._value is not Unset

    @property
    def value(self):
        return coalesce(self._value, [] if self._remaining else None)

    def reset(self):
        self._value = Unset

    def bind(self, raw, /):
        """
        convert and store one token; a remaining slot appends instead.

        raises
        - InvalidValueError: the converter rejected the token.
        """
        try:
            value = self._type(raw)
        except (TypeError, ValueError) as exception:
            raise InvalidValueError(
                "invalid argument for positional %r (expected %s): %s" % (
                    self._name, getattr(self._type, "__name__", "value"), exception
                ),
                input=raw,
                hint="check the value given for %s" % self._name
            ) from None
        if self._remaining:
            self._value = [*coalesce(self._value, []), value]
        else:
            self._value = value


class Command(Group):
    """
    Invocable node of the schema tree.

    Properties
    - name / aliases: how the command is selected on the command line
      (case-sensitive, exact match).
    - descr / long_descr: first-line and long descriptions.
    - heading: title of the section holding the command's own options
      ("Application Options" by default).
    - arguments: ordered positional slots.
    - children: ordered subcommands; parent: the command this one belongs to.
    - active: the child selected by the most recent parse (None when none).
    - subcommands_optional: a command with children may run without one.
    - usage: replaces the generated "[OPTIONS]" marker in usage lines.
    - hidden: the command is parsed but never listed in help or man pages.
    - callback: called by Parser.run() with the remaining arguments when this
      is the deepest active command.
    """

    invocable = True

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
        "long_descr",
        "heading",
        "arguments",
        "children",
        "subcommands_optional",
        "usage",
        "hidden",
        "callback",
    )

    __displayable__ = (
        "name",
        "aliases",
        "descr",
        "arguments",
        "children",
        "active",
    )

    def __init__(
            self,
            name,
            /,
            descr=Unset,
            long_descr=Unset,
            *,
            aliases=(),
            heading="Application Options",
            hidden=False,
            subcommands_optional=False,
            usage=Unset,
            callback=Unset
    ):
        super().__init__(heading)
        cls = builtins.type(self)
        self._name = _sanitize_name(cls, "name", name)
        if isinstance(aliases, str):
            aliases = (aliases,)
        self._aliases = tuple(_sanitize_name(cls, "alias", alias) for alias in aliases)
        if len(set(self._aliases) | {self._name}) != len(self._aliases) + 1:
            raise DuplicateDefinitionError(
                "command %r repeats a name among its aliases" % self._name,
                input=self._name
            )
        self._descr = _sanitize_text(cls, "descr", descr)
        self._long_descr = _sanitize_text(cls, "long_descr", long_descr)
        self._usage = _sanitize_text(cls, "usage", usage)
        if callback is not Unset and not callable(callback):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")
        self._callback = coalesce(callback)
        self._hidden = bool(hidden)
        self._subcommands_optional = bool(subcommands_optional)
        self._arguments = []
        self._children = []
        self.parent = None
        self.active = None

    def _conceals(self):
        return False

    @property
    def root(self):
        """
        The topmost command of this hierarchy.
        """
        command = self
        while command.parent is not None:
            command = command.parent
        return command

    @property
    def path(self):
        """
        The ancestry from the root down to this command, as a tuple.
        """
        path = [command := self]
        while command.parent is not None:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def chain(self):
        """
        This command followed by the active descendants selected by the last parse.
        """
        chain = [command := self]
        while command.active is not None:
            chain.append(command := command.active)
        return tuple(chain)

    def argument(self, name, /, descr=Unset, **options):
        """
        Append a positional slot (see Positional) and return it.

        Raises
        - DuplicateDefinitionError: a slot with this name already exists.
        - ValueError: a slot follows one that consumes all remaining values.
        """
        argument = Positional(name, descr, **options)
        if any(existing.name == argument.name for existing in self._arguments):
            raise DuplicateDefinitionError(
                "positional %r is defined more than once in command %r" % (argument.name, self._name),
                input=argument.name
            )
        if self._arguments and self._arguments[-1].remaining:
            raise ValueError("positional %r cannot follow %r, which consumes all remaining values" % (
                argument.name, self._arguments[-1].name
            ))
        self._arguments.append(argument)
        return argument

    def command(self, name, /, *args, **kwargs):
        """
        Create a subcommand (see Command) under this command and return it.
        """
        return self.include(Command(name, *args, **kwargs))

    def include(self, node, /):
        """
        Attach a group (as the last child group) or a command (as the last subcommand).

        Subcommand names and aliases must be unique among siblings.
        """
        if not isinstance(node, Command):
            return super().include(node)
        if node.parent is not None or node is self.root:
            raise ValueError("command %r is already attached" % node.name)

        taken = {name for child in self._children for name in (child.name, *child.aliases)}
        for name in (node.name, *node.aliases):
            if name in taken:
                raise DuplicateDefinitionError(
                    "command name or alias %r is defined more than once under %r" % (name, self._name),
                    input=name,
                    hint="rename the command or drop the clashing alias"
                )
        node.parent = self
        self._children.append(node)
        return node

    def find(self, name, /):
        """
        Return the child command named or aliased 'name', or None.
        """
        for child in self._children:
            if name == child.name or name in child.aliases:
                return child
        return None

    def reset(self):
        """
        Clear every sink and 'active' marker of this command and its subcommands.
        """
        super().reset()
        for argument in self._arguments:
            argument.reset()
        self.active = None
        for child in self._children:
            child.reset()

    def traverse(self):
        """
        Yield this command and every subcommand below it, depth-first.
        """
        yield self
        for child in self._children:
            yield from child.traverse()

    def has_options(self):
        """
        Whether any option of this command's own tree is shown in help.
        """
        return any(group.visible() for group in self.walk())

    def listed(self):
        """
        Subcommands that are shown in help and man pages.
        """
        return [child for child in self._children if not child.hidden]


__all__ = (
    "Command",
    "Positional",
)
