"""
Help and usage rendering tests.

Scope
- Validate the exact aligned layout for both option styles.
- Validate subcommand sections, argument sections and the command listing.
- Validate defaults/environment annotations, masks and wrapping.

Conventions
- Help text is obtained the way users get it: from the HelpRequested fault.
"""
import unittest
from unittest import TestCase

from flagship import Command, Option, Kind, Parser, POSIX, WINDOWS, render_help, render_usage
from flagship.faults import HelpRequested


def build(name):
    root = Command(name)
    root.add(Option("-v", "--verbose", kind=Kind.SEQUENCE, type=bool, descr="Show verbose debug information"))
    root.add(Option("-c", descr="Call phone number", callback=print))
    root.add(Option("--ptrslice", kind=Kind.SEQUENCE, descr="A slice of pointers to string"))
    root.add(Option("--empty-description", type=bool))
    root.add(Option("--default", default="Some value", descr="Test default value"))
    root.add(Option(
        "--default-array",
        kind=Kind.SEQUENCE,
        default=("Some value", "Another value"),
        descr="Test default array value"
    ))
    root.add(Option(
        "--default-map",
        kind=Kind.MAPPING,
        default=("some:value", "another:value"),
        descr="Testdefault map value"
    ))
    root.add(Option("--env-default1", default="Some value", env="ENV_DEFAULT", descr="Test env-default1 value"))
    root.add(Option("--env-default2", env="ENV_DEFAULT", descr="Test env-default2 value"))
    other = root.group("Other Options")
    other.add(Option("-s", kind=Kind.SEQUENCE, default=("some", "value"), descr="A slice of strings"))
    other.add(Option("--intmap", kind=Kind.MAPPING, type=int, default="a:1", descr="A map from string to int"))
    sub = root.group("Subgroup", namespace="sip")
    sub.add(Option("--opt", descr="This is a subgroup option"))
    subsub = sub.group("Subsubgroup", namespace="sap")
    subsub.add(Option("--opt", descr="This is a subsubgroup option"))
    command = root.command("command", "A command", aliases=("cm", "cmd"))
    command.add(Option("--extra-verbose", kind=Kind.SEQUENCE, type=bool, descr="Use for extra verbosity"))
    root.argument("filename", "A filename")
    root.argument("num", "A number", type=int)
    return root


POSIX_HELP = """\
Usage:
  TestHelp [OPTIONS] [filename] [num] <command>

Application Options:
  -v, --verbose            Show verbose debug information
  -c=                      Call phone number
      --ptrslice=          A slice of pointers to string
      --empty-description
      --default=           Test default value (Some value)
      --default-array=     Test default array value (Some value, Another value)
      --default-map=       Testdefault map value (some:value, another:value)
      --env-default1=      Test env-default1 value (Some value) [ENV_DEFAULT]
      --env-default2=      Test env-default2 value [ENV_DEFAULT]

Other Options:
  -s=                      A slice of strings (some, value)
      --intmap=            A map from string to int (a:1)

Subgroup:
      --sip.opt=           This is a subgroup option

Subsubgroup:
      --sip.sap.opt=       This is a subsubgroup option

Help Options:
  -h, --help               Show this help message

Arguments:
  filename:                A filename
  num:                     A number

Available commands:
  command  A command (aliases: cm, cmd)
"""

WINDOWS_HELP = """\
Usage:
  TestHelp [OPTIONS] [filename] [num] <command>

Application Options:
  /v, /verbose             Show verbose debug information
  /c:                      Call phone number
      /ptrslice:           A slice of pointers to string
      /empty-description
      /default:            Test default value (Some value)
      /default-array:      Test default array value (Some value, Another value)
      /default-map:        Testdefault map value (some:value, another:value)
      /env-default1:       Test env-default1 value (Some value) [ENV_DEFAULT]
      /env-default2:       Test env-default2 value [ENV_DEFAULT]

Other Options:
  /s:                      A slice of strings (some, value)
      /intmap:             A map from string to int (a:1)

Subgroup:
      /sip.opt:            This is a subgroup option

Subsubgroup:
      /sip.sap.opt:        This is a subsubgroup option

Help Options:
  /?                       Show this help message
  /h, /help                Show this help message

Arguments:
  filename:                A filename
  num:                     A number

Available commands:
  command  A command (aliases: cm, cmd)
"""


def requested(parser, argv):
    try:
        parser.parse(argv)
    except HelpRequested as fault:
        return fault.message
    raise AssertionError("help was not requested")


class TestHelpLayout(TestCase):
    """Full help layouts."""

    maxDiff = None

    def testPosixHelp(self):
        parser = Parser(build("TestHelp"), style=POSIX, environ={"ENV_DEFAULT": "env-def"})
        self.assertEqual(requested(parser, ["--help"]), POSIX_HELP)

    def testWindowsHelp(self):
        parser = Parser(build("TestHelp"), style=WINDOWS, environ={"ENV_DEFAULT": "env-def"})
        self.assertEqual(requested(parser, ["/?"]), WINDOWS_HELP)

    def testCommandWithoutOptions(self):
        root = Command("TestHelpCommand")
        root.command("command", "A command")
        parser = Parser(root, style=POSIX, environ={})
        self.assertEqual(requested(parser, ["command", "--help"]), (
            "Usage:\n"
            "  TestHelpCommand [OPTIONS] command\n"
            "\n"
            "Help Options:\n"
            "  -h, --help      Show this help message\n"
        ))

    def testCommandWithoutOptionsWindows(self):
        root = Command("TestHelpCommand")
        root.command("command", "A command")
        parser = Parser(root, style=WINDOWS, environ={})
        self.assertEqual(requested(parser, ["command", "/help"]), (
            "Usage:\n"
            "  TestHelpCommand [OPTIONS] command\n"
            "\n"
            "Help Options:\n"
            "  /?              Show this help message\n"
            "  /h, /help       Show this help message\n"
        ))

    def testSubcommandSections(self):
        root = Command("tool")
        root.add(Option("-v", "--verbose", type=bool, descr="Be chatty"))
        sync = root.command("sync", "Synchronize", "Synchronize the local tree with its remote.")
        sync.add(Option("--dry-run", type=bool, descr="Only print actions"))
        sync.group("Transfer Options").add(Option("--rate", metavar="KBPS", type=int, descr="Rate limit"))
        sync.argument("remote", "Remote name", required=True)
        parser = Parser(root, style=POSIX, environ={})
        self.assertEqual(requested(parser, ["sync", "-h"]), (
            "Usage:\n"
            "  tool [OPTIONS] sync [sync-OPTIONS] remote\n"
            "\n"
            "Synchronize the local tree with its remote.\n"
            "\n"
            "Application Options:\n"
            "  -v, --verbose          Be chatty\n"
            "\n"
            "[sync command options]\n"
            "          --dry-run      Only print actions\n"
            "\n"
            "    Transfer Options:\n"
            "          --rate=KBPS    Rate limit\n"
            "\n"
            "Help Options:\n"
            "  -h, --help             Show this help message\n"
            "\n"
            "[sync command arguments]\n"
            "  remote:                Remote name\n"
        ))


class TestHelpDetails(TestCase):
    """Annotations, visibility and the command listing."""

    def setUp(self):
        self.root = Command("tool", subcommands_optional=True)
        self.parser = Parser(self.root, style=POSIX, environ={})

    def testHelpFlagsTakeNoValue(self):
        text = render_help(self.parser)
        self.assertIn("\n  -h, --help  Show this help message\n", text)
        self.assertNotIn("--help=", text)
        windows = render_help(Parser(self.root, style=WINDOWS, environ={}))
        self.assertIn("\n  /h, /help   Show this help message\n", windows)
        self.assertNotIn("/help:", windows)

    def testHiddenOptionsAreLeftOut(self):
        self.root.add(Option("--visible", descr="Shown"))
        self.root.add(Option("--a-very-long-hidden-name", hidden=True, descr="Hidden"))
        text = render_help(self.parser)
        self.assertNotIn("hidden", text)
        self.assertIn("      --visible= Shown\n", text)

    def testHiddenGroupsAreLeftOut(self):
        self.root.add(Option("--visible", descr="Shown"))
        self.root.group("Internal", hidden=True).add(Option("--secret", descr="Hidden"))
        text = render_help(self.parser)
        self.assertNotIn("Internal", text)
        self.assertNotIn("secret", text)

    def testDefaultMask(self):
        self.root.add(Option("--token", default="s3cr3t", default_mask="****", descr="Access token"))
        self.root.add(Option("--salt", default="pepper", default_mask="-", descr="Salt"))
        text = render_help(self.parser)
        self.assertIn("Access token (****)\n", text)
        self.assertIn("Salt\n", text)
        self.assertNotIn("s3cr3t", text)
        self.assertNotIn("pepper", text)

    def testChoicesAreShown(self):
        self.root.add(Option("--color", choices=("red", "blue"), descr="Paint color"))
        self.assertIn("      --color=[red|blue] Paint color\n", render_help(self.parser))

    def testDescriptionsWrap(self):
        parser = Parser(self.root, style=POSIX, environ={}, width=40)
        self.root.add(Option("--name", descr="A rather long description that cannot fit on one line"))
        lines = render_help(parser).splitlines()
        start = lines.index("      --name= A rather long description")
        self.assertEqual(lines[start + 1], "              that cannot fit on one")
        self.assertEqual(lines[start + 2], "              line")

    def testCommandsAreSortedAndAligned(self):
        self.root.command("zeta", "Last command")
        self.root.command("add", "First command", aliases="a")
        self.root.command("secret", "Never listed", hidden=True)
        text = render_help(self.parser)
        self.assertTrue(text.endswith(
            "Available commands:\n"
            "  add   First command (aliases: a)\n"
            "  zeta  Last command\n"
        ))

    def testUsageMarkers(self):
        self.root.argument("source", required=True)
        self.root.argument("rest", remaining=True)
        self.root.command("sync")
        self.assertEqual(render_usage(self.parser), "tool [OPTIONS] source [rest...] [command]")

    def testUsageOverride(self):
        root = Command("tool", usage="[GLOBAL FLAGS]")
        root.command("sync", usage="[SYNC FLAGS]")
        root.active = root.find("sync")
        parser = Parser(root, style=POSIX, environ={})
        self.assertEqual(render_usage(parser), "tool [GLOBAL FLAGS] sync [SYNC FLAGS]")

    def testUsageWithoutHelp(self):
        parser = Parser(Command("bare"), style=POSIX, environ={}, help=False)
        self.assertEqual(render_help(parser), "Usage:\n  bare\n")


if __name__ == "__main__":
    unittest.main()
