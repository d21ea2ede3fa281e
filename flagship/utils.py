"""
Flagship utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the option model, the parser engine and the
  renderers so that "not provided" and read-only state look the same everywhere.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with
    fresh container copies so public API state cannot be mutated by accident.

- suggest(input, candidates)
  • Closest known spelling for an unknown flag or command (difflib based).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> suggest("--verbos", ["--verbose", "--version"])
    '--verbose'
"""
import difflib
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    This returns the given object unless it is the Unset sentinel, in which case
    the provided default is returned. Falsey values like None, 0, "", or [] are
    preserved as-is; they are not treated as “unset”.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def _immortalize(object):
    """
    Recursively copy container values, processing nested items.

    - Sequence (non-string): a new list with each element processed.
    - Mapping: a new dict with the same keys and processed values.
    - Set: a new set with each element processed.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and hands out fresh
    copies of containers so callers never hold a live reference into the schema.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


class SpecType(type):
    """
    Metaclass that turns schema specs into introspectable descriptors.

    - Every name listed in __introspectable__ becomes a read-only property
      mirroring the private "_name" field (see mirror()).
    - __typename__ is derived from the class name and used in messages.
    - __repr__/__rich_repr__ show the fields listed in __displayable__ (or
      __introspectable__ when unset), so specs read well in rich.pretty.
    """
    __introspectable__ = ()
    __displayable__ = None

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        def __rich_repr__(self):
            for name in type(self).__displayable__ or type(self).__introspectable__:
                yield name, getattr(self, name)

        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            )

        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__
        if "__repr__" not in namespace:
            self.__repr__ = __repr__
        return self


def suggest(input, candidates, /):
    """
    Return the closest spelling of 'input' among 'candidates', or None.
    """
    matches = difflib.get_close_matches(input, list(candidates), 1)
    return matches[0] if matches else None


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Typical pattern: value = coalesce(user_value, default) to materialize a fallback
only when user_value is Unset (None and other falsey values are preserved).
"""


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "suggest",

    # Types
    "SpecType",
    "UnsetType",

    # Constants
    "Unset",
)
