"""
Plain-text usage and help rendering.

The layout is column aligned:

    Usage:
      tool [OPTIONS] [filename] [num] <command>

    Application Options:
      -v, --verbose            Show verbose debug information
          --default=           Test default value (Some value)

    Help Options:
      -h, --help               Show this help message

    Arguments:
      filename:                A filename

    Available commands:
      command  A command (aliases: cm, cmd)

Rendering only reads the command tree: the active chain left behind by the
last parse decides which subcommand sections and which usage line are shown.
"""
import textwrap
from typing import NamedTuple

from .options import Option

_PADDING_BEFORE = 2
_PADDING_BETWEEN = 2
_INDENT = 4

HELP_DESCRIPTION = "Show this help message"


class _Alignment(NamedTuple):
    longest: int
    shorts: bool
    metavars: bool

    @property
    def start(self):
        start = self.longest + _PADDING_BEFORE + _PADDING_BETWEEN
        if self.shorts:
            start += 2
        if self.longest:
            start += 4
        if self.metavars:
            start += 3
        return start


def help_options(style, /):
    """
    Display-only options standing for the built-in help flags of 'style'.
    """
    options = []
    for short, long in style.helps:
        names = ["-" + short] if short else []
        if long:
            names.append("--" + long)
        options.append(Option(*names, type=bool, descr=HELP_DESCRIPTION))
    return options


def _choices(option, /):
    return "[%s]" % "|".join(option.choices) if option.choices else ""


def _align(parser, chain, /):
    """
    Measure every entry shown for 'chain' (options, help flags, positional names).
    """
    extra = _INDENT if len(chain) > 1 else 0
    entries = []
    shorts = metavars = False

    options = [option for command in chain for group in command.walk() for option in group.visible()]
    if parser.help:
        options.extend(help_options(parser.style))
    for option in options:
        shorts = shorts or option.short is not None
        metavars = metavars or option.metavar is not None
        entries.append(len(option.qualified or "") + len(option.metavar or "") + len(_choices(option)))
    for command in chain:
        entries.extend(len(argument.name) for argument in command.arguments)

    return _Alignment(max((entry + extra for entry in entries), default=0), shorts, metavars)


def _wrap(text, width, indent, /):
    lines = []
    for paragraph in text.splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, max(width, 10)) or [""])
    return ("\n" + indent).join(lines)


def _annotation(option, /):
    text = option.descr
    if option.default_mask is not None:
        if option.default_mask != "-":
            text += " (%s)" % option.default_mask
    elif option.default:
        text += " (%s)" % ", ".join(option.default)
    if option.env:
        text += " [%s]" % ", ".join(option.env)
    return text


def _option_row(option, style, alignment, width, indent, /):
    line = " " * (_PADDING_BEFORE + indent)
    if option.short is None and alignment.shorts:
        line += "    "
    line += option.spell(style)

    if option.takes_value:
        line += style.delimiter + (option.metavar or "") + _choices(option)

    if not option.descr:
        return line
    start = alignment.start
    line += " " * max(start - len(line), 1)
    return line + _wrap(_annotation(option), width - start, " " * start)


def _positional_marker(argument, /):
    name = argument.name + ("..." if argument.remaining else "")
    return name if argument.required else "[%s]" % name


def render_usage(parser, /):
    """
    Render the invocation line for the active chain, without the "Usage:" header.

        >>> render_usage(parser)
        'TestHelp [OPTIONS] [filename] [num] <command>'
    """
    chain = parser.root.chain
    parts = []
    for command in chain:
        parts.append(command.name)
        if command.usage is not None:
            marker = command.usage
        elif command is parser.root:
            marker = "[OPTIONS]" if parser.help or command.has_options() else None
        else:
            marker = "[%s-OPTIONS]" % command.name if command.has_options() else None
        if marker:
            parts.append(marker)
        parts.extend(map(_positional_marker, command.arguments))

    deepest = chain[-1]
    if deepest.listed():
        parts.append("[command]" if deepest.subcommands_optional else "<command>")
    return " ".join(parts)


def render_help(parser, /):
    """
    Render the full help text for the command selected by the last parse.

    Sections, in order
    - Usage (plus the long description of the active command, wrapped);
    - the root's option groups, each under its heading;
    - for each active subcommand, "[name command options]" and its groups,
      indented;
    - Help Options (when the parser handles help flags);
    - Arguments of the active command ("[name command arguments]" below the
      root);
    - Available commands of the active command, sorted by name.

    Hidden options, hidden groups and hidden commands are left out, and do not
    take part in column alignment.
    """
    root = parser.root
    style = parser.style
    width = parser.width
    chain = root.chain
    deepest = chain[-1]
    alignment = _align(parser, chain)

    lines = ["Usage:", "  " + render_usage(parser)]
    if deepest.long_descr:
        lines += ["", _wrap(deepest.long_descr, width, "")]

    for command in chain:
        announced = False
        for group in command.walk():
            if not (options := group.visible()):
                continue
            if command is root:
                lines += ["", group.heading + ":"]
            else:
                if not announced:
                    lines += ["", "[%s command options]" % command.name]
                    announced = True
                if group is not command:
                    lines += ["", " " * _INDENT + group.heading + ":"]
            indent = 0 if command is root else _INDENT
            lines += [_option_row(option, style, alignment, width, indent) for option in options]

    if parser.help:
        lines += ["", "Help Options:"]
        lines += [_option_row(option, style, alignment, width, 0) for option in help_options(style)]

    if deepest.arguments:
        lines += ["", "Arguments:" if deepest is root else "[%s command arguments]" % deepest.name]
        start = alignment.start
        for argument in deepest.arguments:
            line = " " * _PADDING_BEFORE + argument.name
            if argument.descr:
                line += ":"
                line += " " * max(start - len(line), 1)
                line += _wrap(argument.descr, width - 1 - start, " " * start)
            lines.append(line)

    if commands := sorted(deepest.listed(), key=lambda command: command.name):
        longest = max(len(command.name) for command in commands)
        lines += ["", "Available commands:"]
        for command in commands:
            line = "  " + command.name
            if command.descr:
                line += " " * (longest - len(command.name)) + "  " + command.descr
                if command.aliases:
                    line += " (aliases: %s)" % ", ".join(command.aliases)
            lines.append(line)

    return "\n".join(lines) + "\n"


__all__ = (
    "render_help",
    "render_usage",
    "help_options",
)
