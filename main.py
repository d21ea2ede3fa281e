import sys

from rich.pretty import pprint

from flagship import *

root = Command("main", "Example flagship program", "Shows how a `flagship' command tree is declared and run.")
root.add(Option("-v", "--verbose", kind=Kind.SEQUENCE, type=bool, descr="Show verbose debug information"))
root.add(Option("--name", metavar="NAME", default="world", env="MAIN_NAME", descr="Who to greet"))
root.argument("file", "Input file")


@option("-c", descr="Call phone number")
def call(number):
    print("calling", number)


root.add(call)

sync = root.command("sync", "Synchronize", aliases=("s",), callback=lambda remaining: pprint(sync))
sync.add(Option("--dry-run", type=bool, descr="Only print actions"))
sync.group("Transfer Options", namespace="transfer").add(Option("--rate", type=int, descr="Rate limit"))


if __name__ == '__main__':
    if sys.argv[1:2] == ["man"]:
        write_man(Parser(root), sys.stdout)
    else:
        Parser(root).run()
