r"""
Flagship option descriptors.

Overview
- Option: one bindable flag. It owns its identity (short and/or long name), its
  value kind, help metadata, declared defaults/environment names, and the value
  sink the parser writes into.
- Kind: the value kind of an option (boolean, string, number, sequence,
  mapping, callback).
- Source: where the bound value came from (unset, argv, default, env).
- @option(...): build a callback option whose handler receives each value.

Names
- Declared the POSIX way regardless of the platform convention used to match
  and display them: "-v" for the short name, "--verbose" for the long name.
  At most one of each; at least one overall.
- The long name is local to its group: enclosing groups prepend their
  namespaces (dot-joined) to form the qualified name used for matching.

Binding (see Option.bind)
- boolean: a bare occurrence sets True; an explicit literal is parsed
  ("true"/"false", "yes"/"no", "on"/"off", "1"/"0", "t"/"f").
- string/number: one value, overwritten by later occurrences.
- sequence: each occurrence appends one converted value. A sequence of bool
  takes no argument and counts occurrences (-vvv).
- mapping: each value holds "key:value" or "key=value"; later keys win.
- callback: the callback receives the converted value.

Example
    >>> verbose = Option("-v", "--verbose", kind=Kind.SEQUENCE, type=bool, descr="Show verbose debug information")
    >>> @option("-c", descr="Call phone number")
    ... def call(number): ...
"""
import builtins
import re
from collections.abc import Iterable
from enum import Enum

from .faults import InvalidValueError, InvalidChoiceError, MissingValueError, EmptyValueWarning, trigger
from .utils import *


class Kind(Enum):
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    CALLBACK = "callback"


class Source(Enum):
    UNSET = "unset"
    ARGV = "argv"
    DEFAULT = "default"
    ENV = "env"


_TRUTHS = frozenset(("1", "t", "true", "yes", "y", "on"))
_FALSEHOODS = frozenset(("0", "f", "false", "no", "n", "off"))


def boolean(literal, /):
    """
    Parse a boolean literal, case-insensitively.

    Raises ValueError for anything that is not a known truth or falsehood.
    """
    if (lowered := literal.strip().lower()) in _TRUTHS:
        return True
    if lowered in _FALSEHOODS:
        return False
    raise ValueError("invalid boolean literal %r" % literal)


def _literals(cls, field, object, /):
    """
    Internal: normalize a literal-or-literals field into a tuple of strings.
    """
    if isinstance(object, UnsetType):
        return ()
    if isinstance(object, str):
        object = (object,)
    if not isinstance(object, Iterable):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string or an iterable of strings")
    literals = tuple(object)
    for literal in literals:
        if not isinstance(literal, str):
            raise TypeError(f"{cls.__typename__} {field!r} must only contain strings")
    return literals


def _sanitize_names(cls, metadata, /):
    """
    Internal: split the declared names into a short character and a long name.

    Accepted forms
    - short: "-x" where x is any printable, non-space character except '-'
    - long:  "--name" where name contains no whitespace, '=' or ':' and does
      not start with '-'

    Raises
    - TypeError: no names at all, or non-string names.
    - ValueError: malformed names, or more than one short/long name.
    """
    short = long = None
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        if re.fullmatch(r"-[^\s\-=:]", name) and name[1].isprintable():
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot declare more than one short name")
            short = name[1]
        elif re.fullmatch(r"--[^\s\-=:][^\s=:]*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} cannot declare more than one long name")
            long = name[2:]
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} is not a valid '-x' or '--name' spelling")

    del metadata["names"]
    metadata["short"] = short
    metadata["long"] = long


def _sanitize_kind(cls, metadata, /):
    """
    Internal: infer the value kind and validate the kind-specific fields.

    Inference (when kind is Unset)
    - a callback → CALLBACK
    - type bool → BOOLEAN
    - type int/float → NUMBER
    - anything else → STRING
    """
    kind = metadata["kind"]
    callback = metadata["callback"]
    type = metadata["type"]

    if isinstance(kind, UnsetType):
        if callback is not Unset:
            kind = Kind.CALLBACK
        elif type is bool:
            kind = Kind.BOOLEAN
        elif type in (int, float):
            kind = Kind.NUMBER
        else:
            kind = Kind.STRING
    elif not isinstance(kind, Kind):
        kind = Kind(kind)

    if (kind is Kind.CALLBACK) != (callback is not Unset):
        raise TypeError(f"{cls.__typename__} 'callback' is required by, and only allowed for, callback kind")
    if callback is not Unset and not callable(callback):
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")

    if isinstance(type, UnsetType):
        type = {Kind.BOOLEAN: bool, Kind.NUMBER: int}.get(kind, str)
    if not callable(type):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")
    if kind is Kind.BOOLEAN and type is not bool:
        raise TypeError(f"boolean {cls.__typename__} cannot convert with {type!r}")

    if metadata["optional"] and (kind is Kind.BOOLEAN or (kind is Kind.SEQUENCE and type is bool)):
        raise TypeError(f"{cls.__typename__} without a value cannot be optional")
    if metadata["optional"] and not metadata["optional_value"]:
        raise TypeError(f"optional {cls.__typename__} must declare an 'optional_value'")

    metadata["kind"] = kind
    metadata["type"] = type


class Option(metaclass=SpecType):
    """
    Named flag specification and value sink.

    Highlights
    - Identity: short (single character) and/or long name; the long name is
      namespaced by the enclosing groups (see qualified).
    - Kind: one of Kind; 'type' converts each raw string (element type for
      sequences and mapping values).
    - Help/UX metadata: descr, metavar, hidden, required, choices,
      default_mask.
    - Multi-source defaults: declared literals (default) and environment
      variable names (env), applied by flagship.defaults.resolve after a parse.
    - Optional values: with optional=True a missing value binds the
      optional_value literals instead of consuming the next token.

    Sink
    - value: the bound value, or the zero value of the kind when unbound.
    - source: Source of the current value; isset tells whether anything is bound.
    """

    __introspectable__ = (
        "short",
        "long",
        "kind",
        "type",
        "descr",
        "metavar",
        "required",
        "hidden",
        "default",
        "env",
        "env_delim",
        "choices",
        "optional",
        "optional_value",
        "default_mask",
        "callback",
    )

    __displayable__ = (
        "short",
        "long",
        "kind",
        "descr",
        "source",
        "value",
    )

    def __init__(
            self,
            *names,
            kind=Unset,
            type=Unset,
            descr=Unset,
            metavar=Unset,
            required=False,
            hidden=False,
            default=Unset,
            env=Unset,
            env_delim=Unset,
            choices=(),
            optional=False,
            optional_value=Unset,
            default_mask=Unset,
            callback=Unset
    ):
        """
        Construct an Option spec with the provided metadata.

        Parameters
        - names: "-x" and/or "--name".
        - kind: Kind (inferred from 'callback' and 'type' when omitted).
        - type: converter for each raw value (element type for collections).
        - descr: help description.
        - metavar: placeholder shown after the name in help (e.g. "FILE").
        - required: the option must end up with a value.
        - hidden: suppress from help, man pages and column alignment.
        - default: literal or literals bound when nothing else was given.
        - env: environment variable name(s) probed when there is no default.
        - env_delim: split environment values of sequences/mappings on this.
        - choices: allowed raw values.
        - optional, optional_value: the value may be omitted, in which case the
          optional_value literal(s) are bound.
        - default_mask: text shown in help instead of the defaults ("-" hides them).
        - callback: handler of a callback option (see @option).
        """
        cls = builtins.type(self)
        metadata = {
            "names": names,
            "kind": kind,
            "type": type,
            "descr": descr,
            "metavar": metavar,
            "required": bool(required),
            "hidden": bool(hidden),
            "default": _literals(cls, "default", default),
            "env": _literals(cls, "env", env),
            "env_delim": env_delim,
            "choices": _literals(cls, "choices", choices),
            "optional": bool(optional),
            "optional_value": _literals(cls, "optional_value", optional_value),
            "default_mask": default_mask,
            "callback": callback,
        }
        _sanitize_names(cls, metadata)
        _sanitize_kind(cls, metadata)

        for field in ("descr", "metavar", "env_delim", "default_mask"):
            if not isinstance(metadata[field], str | UnsetType):
                raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        if isinstance(metadata["metavar"], str) and not metadata["metavar"].strip():
            raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
        if metadata["env_delim"] == "":
            raise ValueError(f"{cls.__typename__} 'env_delim' cannot be empty")

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))

        self.group = None
        self._value = Unset
        self._source = Source.UNSET

    @property
    def qualified(self):
        """
        Long name with every enclosing namespace prepended ("sip.sap.opt").
        """
        if self._long is None:
            return None
        prefix = self.group.prefix if self.group is not None else ""
        return prefix + "." + self._long if prefix else self._long

    @property
    def takes_value(self):
        """
        Whether an occurrence consumes a value (fused or the next token).
        """
        if self._kind is Kind.BOOLEAN:
            return False
        return not (self._kind is Kind.SEQUENCE and self._type is bool)

    @property
    def source(self):
        return self._source

    @property
    def isset(self):
        return self._source is not Source.UNSET

    @property
    def value(self):
        if self._value is not Unset:
            return self._value
        match self._kind:
            case Kind.BOOLEAN:
                return False
            case Kind.SEQUENCE:
                return []
            case Kind.MAPPING:
                return {}
            case _:
                return None

    def spell(self, style, /):
        """
        Render the option's names the way 'style' displays them ("-v, --verbose").
        """
        names = []
        if self._short is not None:
            names.append(style.spell(self._short, False))
        if self._long is not None:
            names.append(style.spell(self.qualified, True))
        return ", ".join(names)

    def __str__(self):
        if self._long is not None:
            return "--" + self.qualified
        return "-" + self._short

    def reset(self):
        """
        Forget any bound value (argv, default or env).
        """
        self._value = Unset
        self._source = Source.UNSET

    def bind(self, value=None, /, *, source=Source.ARGV, input=Unset, **options):
        """
        bind one occurrence of this option.

        parameters
        - value: str | None
          the raw value, or None for a bare occurrence.
        - source: Source
          where the value comes from. the first command-line occurrence discards
          a value previously bound from a default or the environment.
        - input: str
          the spelling the user typed, used in messages (defaults to str(self)).
        - **options:
          forwarded to trigger() when a warning is raised (shell, prog).

        raises
        - MissingValueError: a value-taking option got no value and is not optional.
        - InvalidValueError / InvalidChoiceError: the value cannot be converted,
          is not one of the choices, or a mapping value lacks its separator.
        """
        input = coalesce(input, str(self))

        if source is Source.ARGV and self._source is not Source.ARGV:
            self.reset()

        if value is None and self.takes_value:
            if not self._optional:
                raise MissingValueError(
                    "expected argument for flag %r" % input,
                    input=input,
                    hint="pass a value after a space or fused (for example: %s=<value>)" % input
                )
            for literal in self._optional_value:
                self.bind(literal, source=source, input=input, **options)
            return

        if value == "" and self.takes_value and source is Source.ARGV:
            trigger(EmptyValueWarning(
                "empty inline value for flag %r" % input,
                input=input,
                stacklevel=4
            ), **options)

        match self._kind:
            case Kind.BOOLEAN:
                self._value = True if value is None else self._convert(value, boolean, input)
            case Kind.STRING | Kind.NUMBER:
                self._value = self._convert(value, self._type, input)
            case Kind.SEQUENCE:
                if value is None:
                    item = True
                else:
                    item = self._convert(value, boolean if self._type is bool else self._type, input)
                self._value = [*coalesce(self._value, []), item]
            case Kind.MAPPING:
                key, item = self._split(value, input)
                self._value = {**coalesce(self._value, {}), key: self._convert(item, self._type, input)}
            case Kind.CALLBACK:
                self._value = self._convert(value, self._type, input)
                self._callback(self._value)

        self._source = source

    def _convert(self, raw, converter, input, /):
        if self._choices and raw not in self._choices:
            raise InvalidChoiceError(
                "invalid argument for flag %r: %r is not one of %s" % (input, raw, ", ".join(map(repr, self._choices))),
                input=input,
                hint="pick one of: %s" % ", ".join(self._choices)
            )
        try:
            return converter(raw)
        except (TypeError, ValueError) as exception:
            raise InvalidValueError(
                "invalid argument for flag %r (expected %s): %s" % (
                    input, getattr(converter, "__name__", "value"), exception
                ),
                input=input,
                hint="check the value given to %s" % input
            ) from None

    @staticmethod
    def _split(raw, input, /):
        indexes = [index for index in (raw.find(":"), raw.find("=")) if index >= 0]
        if not indexes:
            raise InvalidValueError(
                "invalid argument for flag %r: expected 'key:value' but got %r" % (input, raw),
                input=input,
                hint="separate key and value with ':' or '=' (for example: %s key:value)" % input
            )
        index = min(indexes)
        return raw[:index], raw[index + 1:]


def option(*args, **kwargs):
    """
    Decorator/factory for defining a callback option.

    Usage
        @option("-c", descr="Call phone number")
        def call(number): ...

    The decorated function becomes the handler; the decorator returns the
    configured Option (kind CALLBACK), which is then added to a group.

    Parameters
    - *args, **kwargs: forwarded to Option(...) (names, type, descr, metavar, ...).
    """
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        return Option(*args, callback=callback, **kwargs)
    return wrapper


__all__ = (
    # Classes (specifications)
    "Option",
    "Kind",
    "Source",

    # Decorators
    "option",

    # Converters
    "boolean",
)
