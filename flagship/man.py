r"""
roff man page rendering.

The page carries the sections NAME, SYNOPSIS, DESCRIPTION, OPTIONS and, when
the root has visible subcommands, COMMANDS (one .SS entry per subcommand,
sorted by name and nested by path). Each entry has its own usage line, built
like the help usage line but starting from the parent command. Options are
always spelled the POSIX way (-x, --name) regardless of the parser style, and
the built-in help flags are not listed.

Text conventions
- a backslash is escaped as '\\';
- `word' is typeset in bold as '\fBword\fP'.
"""
import datetime

from .help import _positional_marker

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _quote(text, /):
    return text.replace("\\", "\\\\")


def _format(text, /):
    """
    quote 'text' and turn every `word' into bold.
    """
    out = []
    while True:
        index = text.find("`")
        if index < 0:
            out.append(_quote(text))
            break
        out.append(_quote(text[:index]))
        text = text[index + 1:]
        index = text.find("'")
        if index < 0:
            out.append(_quote(text))
            break
        out.append("\\fB%s\\fP" % _quote(text[:index]))
        text = text[index + 1:]
    return "".join(out)


def _date(date, /):
    return "%d %s %d" % (date.day, _MONTHS[date.month - 1], date.year)


def _options(command, /):
    lines = []
    for group in command.walk():
        for option in group.visible():
            lines += [".TP", "\\fB%s\\fP" % _quote(_signature(option))]
            if option.descr:
                lines.append(_format(option.descr))
    return lines


def _signature(option, /):
    names = []
    if option.short is not None:
        names.append("-" + option.short)
    if option.long is not None:
        names.append("--" + option.qualified)
    return ", ".join(names)


def _has_options(parser, command, /):
    return command.has_options() or (parser.help and command is parser.root)


def _command(parser, command, path, /):
    lines = [".SS %s" % path, command.descr or ""]
    if command.long_descr:
        lines += ["", _format(command.long_descr)]

    parent = command.parent
    parts = [parent.name]
    if _has_options(parser, parent):
        parts.append("[OPTIONS]")
    parts.append(command.name)
    if command.usage is not None:
        parts.append(command.usage)
    elif command.has_options():
        parts.append("[%s-OPTIONS]" % command.name)
    parts.extend(map(_positional_marker, command.arguments))
    if command.listed():
        parts.append("[command]" if command.subcommands_optional else "<command>")
    lines += ["", "\\fBUsage\\fP: %s" % _quote(" ".join(parts)), ""]
    if command.aliases:
        lines += ["", "\\fBAliases\\fP: %s" % _quote(", ".join(command.aliases)), ""]

    lines += _options(command)
    for child in sorted(command.listed(), key=lambda child: child.name):
        lines += _command(parser, child, path + " " + child.name)
    return lines


def render_man(parser, /, *, date=None):
    """
    Render the man page of the parser's root command.

    parameters
    - parser: Parser
    - date: datetime.date | None
      date printed in the .TH line; today when None.
    """
    root = parser.root
    date = datetime.date.today() if date is None else date

    lines = [
        '.TH %s 1 "%s"' % (_quote(root.name), _date(date)),
        ".SH NAME",
        "%s \\- %s" % (_quote(root.name), _quote(root.descr or "")),
        ".SH SYNOPSIS",
        "\\fB%s\\fP %s" % (_quote(root.name), _quote(root.usage or "[OPTIONS]")),
        ".SH DESCRIPTION",
        _format(root.long_descr or ""),
        ".SH OPTIONS",
    ]
    lines += _options(root)

    if children := sorted(root.listed(), key=lambda child: child.name):
        lines.append(".SH COMMANDS")
        for child in children:
            lines += _command(parser, child, child.name)
    return "\n".join(lines) + "\n"


def write_man(parser, stream, /, *, date=None):
    """
    Write the man page of the parser's root command to a text stream.
    """
    stream.write(render_man(parser, date=date))


__all__ = (
    "render_man",
    "write_man",
)
