"""
Platform option conventions.

A Style decides how raw tokens are classified (short cluster, long option,
positional), how a fused value is split off an option name, which spellings
request help, and how names are displayed in help output.

- POSIX:   -x, --long, --long=value, -x=value, -xvalue; help is -h/--help.
- WINDOWS: /x, /long, /long:value; the POSIX spellings are accepted as well,
  and help is also reachable through /? and -?.
"""
import os
from typing import NamedTuple


class Style(NamedTuple):
    name: str
    short: str
    long: str
    delimiter: str
    helps: tuple

    def is_option(self, token):
        if len(token) > 1 and token[0] == "/" and self.short == "/":
            return True
        if len(token) > 1 and token[0] == "-" and token[1] != "-":
            return True
        if len(token) > 2 and token.startswith("--") and token[2] != "-":
            return True
        return False

    def strip(self, token):
        """
        split an option token into (prefix, name, islong).
        """
        if token.startswith("--"):
            return "--", token[2:], True
        if token.startswith("-"):
            return "-", token[1:], False
        # windows: a single slash introduces both forms, length decides
        return "/", token[1:], len(token) > 2

    def split(self, prefix, name, islong):
        """
        split a fused value off an option name: (name, value-or-None).

        slash options take ':' and dash options take '='; the two are never mixed.
        short options only carry a fused value right after their single character.
        """
        separator = ":" if prefix == "/" else "="
        index = name.find(separator)
        if (islong and index >= 0) or (not islong and index == 1):
            return name[:index], name[index + 1:]
        return name, None

    def is_help(self, name, islong):
        for short, long in self.helps:
            if islong and long and name == long:
                return True
            if not islong and short and name == short:
                return True
        return False

    def spell(self, name, islong):
        return (self.long if islong else self.short) + name


POSIX = Style("posix", "-", "--", "=", (("h", "help"),))
WINDOWS = Style("windows", "/", "/", ":", (("?", ""), ("h", "help")))


def default_style():
    return WINDOWS if os.name == "nt" else POSIX


__all__ = (
    "Style",
    "POSIX",
    "WINDOWS",
    "default_style",
)
