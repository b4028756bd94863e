from rich.pretty import pprint

from commandeer import *

registry = Registry(prog="main", header="commandeer sample", footer="run 'main help NAME' for details")


@registry.command(descr="copy a file some number of times", category="Files")
class Copy:
    source = Positional("SRC", required=True, descr="file to read")
    targets = Positional("DEST", nargs="*")

    count = Option("-n", "--count", type=int, default="1", descr="copies per target")
    verbose = Option("-v", "--verbose", type=bool, descr="chatty output")
    help = Option("-h", "--help", type=bool, helper=True, descr="show this help")

    @option("--tag", multiple=True, metavar="TAG", descr="label attached to every copy")
    def set_tag(self, value):
        self.tags = [*getattr(self, "tags", ()), value]

    @main
    def run(self):
        pprint(vars(self))


@registry.command(experimental=True)
def echo(
        words=Positional("WORD", nargs="*"),
        /,
        upper=Option("-u", type=bool, descr="uppercase the output"),
):
    """print the words back"""
    line = " ".join(words)
    print(line.upper() if upper else line)


if __name__ == '__main__':
    raise SystemExit(registry.run())
