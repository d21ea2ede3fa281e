"""
Flagship option groups.

A Group is an ordered collection of options plus ordered child groups. The
tree of groups is the static schema of one command:

- declaration order is display order (options first, then child groups,
  depth-first);
- a group may carry a namespace; namespaces are inherited and dot-joined
  down the tree and prefixed to every descendant long name;
- names are unique per command: no two options of the same tree may share a
  short name or a qualified long name. Violations raise
  DuplicateDefinitionError while the tree is being built, never while parsing.

Example
    >>> root = Group("Application Options")
    >>> sub = root.group("Subgroup", namespace="sip")
    >>> sub.add(Option("--opt", descr="This is a subgroup option")).qualified
    'sip.opt'
"""
import re

from .faults import DuplicateDefinitionError
from .options import Option
from .utils import *


class Group(metaclass=SpecType):
    """
    Ordered options and nested groups under a display heading.

    Properties
    - heading: section title in help output.
    - namespace: prefix for descendant long names (None when absent).
    - hidden: the whole group is left out of help and man pages (it still parses).
    - options / groups: the directly owned options and child groups, in order.
    - prefix: the dot-joined namespaces from the top of the tree down to here.
    """

    invocable = False

    __introspectable__ = (
        "heading",
        "namespace",
        "hidden",
        "options",
        "groups",
    )

    def __init__(self, heading, /, *, namespace=Unset, hidden=False):
        if not isinstance(heading, str):
            raise TypeError(f"{type(self).__typename__} heading must be a string")
        elif not (heading := heading.strip()):
            raise ValueError(f"{type(self).__typename__} heading cannot be empty")

        if not isinstance(namespace, str | UnsetType):
            raise TypeError(f"{type(self).__typename__} 'namespace' must be a string")
        elif isinstance(namespace, str) and not re.fullmatch(r"[^\s=:.]+(\.[^\s=:.]+)*", namespace):
            raise ValueError(f"{type(self).__typename__} 'namespace' must be a non-empty word without whitespace")

        self._heading = heading
        self._namespace = coalesce(namespace)
        self._hidden = bool(hidden)
        self._options = []
        self._groups = []
        self.container = None

    @property
    def top(self):
        """
        The outermost group of this tree (the owning command, once attached).
        """
        node = self
        while node.container is not None:
            node = node.container
        return node

    @property
    def prefix(self):
        namespaces = []
        node = self
        while node is not None:
            if node._namespace:
                namespaces.append(node._namespace)
            node = node.container
        return ".".join(reversed(namespaces))

    def add(self, option, /):
        """
        Append an option to this group and return it.

        Raises
        - TypeError: 'option' is not an Option.
        - ValueError: the option already belongs to a group.
        - DuplicateDefinitionError: its short or qualified long name is taken
          somewhere in the tree; the group is left unchanged.
        """
        if not isinstance(option, Option):
            raise TypeError("add() argument must be an option")
        if option.group is not None:
            raise ValueError("option %s already belongs to a group" % option)

        option.group = self
        self._options.append(option)
        try:
            self.top.validate()
        except DuplicateDefinitionError:
            self._options.pop()
            option.group = None
            raise
        return option

    def include(self, group, /):
        """
        Attach an existing group as the last child of this group and return it.
        """
        if not isinstance(group, Group) or group.invocable:
            raise TypeError("include() argument must be a group")
        if group.container is not None or group is self.top:
            raise ValueError("group %r is already attached" % group.heading)

        group.container = self
        self._groups.append(group)
        try:
            self.top.validate()
        except DuplicateDefinitionError:
            self._groups.pop()
            group.container = None
            raise
        return group

    def group(self, heading, /, **options):
        """
        Create a child group (see Group) and return it.
        """
        return self.include(Group(heading, **options))

    def walk(self):
        """
        Yield this group and every descendant group, depth-first, in declaration order.
        """
        yield self
        for group in self._groups:
            yield from group.walk()

    def each_option(self):
        for group in self.walk():
            yield from group._options

    def resolve(self, name, /):
        """
        Return the option whose qualified long name is 'name', or None.
        """
        for option in self.each_option():
            if option.long is not None and option.qualified == name:
                return option
        return None

    def resolve_short(self, char, /):
        """
        Return the option whose short name is 'char', or None.
        """
        for option in self.each_option():
            if option.short == char:
                return option
        return None

    def validate(self):
        """
        Check the name-uniqueness invariant over the whole tree below this group.
        """
        shorts = {}
        longs = {}
        for option in self.each_option():
            if option.short is not None:
                if option.short in shorts:
                    raise DuplicateDefinitionError(
                        "short flag '-%s' is defined more than once" % option.short,
                        input=option.short,
                        hint="rename one of the options sharing '-%s'" % option.short
                    )
                shorts[option.short] = option
            if option.long is not None:
                if (qualified := option.qualified) in longs:
                    raise DuplicateDefinitionError(
                        "long flag '--%s' is defined more than once" % qualified,
                        input=qualified,
                        hint="rename one of the options or give their groups distinct namespaces"
                    )
                longs[qualified] = option

    def reset(self):
        for option in self.each_option():
            option.reset()

    def _conceals(self):
        return self._hidden

    def visible(self):
        """
        Non-hidden options of this group (hidden groups and their children have none).
        """
        node = self
        while node is not None:
            if node._conceals():
                return []
            node = node.container
        return [option for option in self._options if not option.hidden]


__all__ = (
    "Group",
)
