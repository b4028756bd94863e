"""
Commandeer command layer: declare, register, dispatch and run commands.

What this module provides
- Command: wraps a class (or a plain function) into an executable command with:
  • Descriptor discovery from class attributes (Option, Positional) or from
    function parameter defaults, done once at registration.
  • Lifecycle hooks on class commands: @setup (before binding, receives the
    registry), @main (the entry point; a method named `exec` also works),
    @cleanup (after a successful entry point), @catchall (unused occurrences).
  • resolve/bind/invoke steps that the registry strings together.

- Registry: an explicit, process-local command registry and dispatcher.
  • run(argv): "help", "help NAME", unknown-command handling, then execute.
  • execute(name, argv, start): run one command; faults are rendered followed
    by the command's help and a non-zero status is returned.
  • Rich renderers for the command listing and per-command help.

- Factories and helpers:
  • command(...): create a Command or a decorator that produces one.
  • invoke(object, prompt): convenience runner for registries, commands or callables.

Quick start
    from commandeer import Registry, Option, Positional, main

    registry = Registry(prog="tool")

    @registry.command(descr="copy things")
    class Copy:
        source = Positional("SRC", required=True)
        count = Option("-n", "--count", type=int, default="1")
        verbose = Option("-v", "--verbose", type=bool)

        @main
        def run(self):
            print(self.source, self.count, self.verbose)

    if __name__ == "__main__":
        raise SystemExit(registry.run())

Design notes
- One level of commands; no nested subcommands.
- Faults are grouped and shown once, then the command's help is printed.
- Resolution and binding never touch the registry, which stays read-only
  once commands are registered.
"""
import difflib
import functools
import inspect
import logging
import operator
import re
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable
from inspect import Parameter
from types import MappingProxyType, SimpleNamespace

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .arguments import Option, Positional
from .binder import bind
from .faults import *
from .resolver import resolve
from .utils import *

logger = logging.getLogger(__name__)


def _hook(kind):
    """
    Build a marker decorator tagging a method as a lifecycle hook of `kind`.
    """

    @rename(kind)
    def decorator(callback, /):
        if not callable(callback):
            raise TypeError(f"@{kind} must be applied to a callable")
        if getattr(callback, "__hook__", kind) != kind:
            raise TypeError(f"@{kind} cannot be combined with @{callback.__hook__}")
        callback.__hook__ = kind
        return callback

    return decorator


setup = _hook("setup")
setup.__doc__ = """
Mark a method run before option binding; it receives the registry.

    @setup
    def attach(self, registry): ...
"""

main = _hook("main")
main.__doc__ = """
Mark the command's entry point (a method named `exec` is used when none is marked).
"""

cleanup = _hook("cleanup")
cleanup.__doc__ = """
Mark a method run after the entry point returns successfully (never on failure).
"""

catchall = _hook("catchall")
catchall.__doc__ = """
Mark the catch-all receiving every unused option occurrence as (key, value).

    @catchall
    def extra(self, key, value): ...
"""


class CommandType(type):
    """
    Metaclass providing read-only mirrored properties and stable representations.

    - Every name in __introspectable__ becomes a property reading "_{name}".
    - __typename__ is derived from the class name for messages.
    - __rich_repr__ yields the __displayable__ fields for pretty printers.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_class(cls, metadata):
    """
    Discover descriptors and hooks on a class source.

    - Attributes are visited in MRO order (bases first) and resolved statically,
      so a subclass attribute replaces the base one of the same name.
    - Option/Positional attributes are collected in definition order.
    - Hook-marked methods are grouped by kind; `main` falls back to `exec`.
    """
    source = metadata["source"]
    names = {}
    for klass in reversed(source.__mro__):
        for name in vars(klass):
            names.setdefault(name, None)

    hooks = defaultdict(list)
    for name in names:
        object = inspect.getattr_static(source, name)
        if isinstance(object, Option):
            metadata["options"].append(object)
        elif isinstance(object, Positional):
            metadata["positionals"].append(object)
        elif kind := getattr(object, "__hook__", None):
            hooks[kind].append(object)

    if len(hooks["main"]) > 1:
        raise TypeError(f"{cls.__typename__} {source.__name__!r} has more than one @main")
    if len(hooks["catchall"]) > 1:
        raise TypeError(f"{cls.__typename__} {source.__name__!r} has more than one @catchall")

    if hooks["main"]:
        entry, = hooks["main"]
    elif callable(entry := inspect.getattr_static(source, "exec", None)):
        pass
    else:
        raise TypeError(f"{cls.__typename__} {source.__name__!r} has no @main method (or exec)")

    metadata["factory"] = source
    metadata["entry"] = entry
    metadata["setup"] = tuple(hooks["setup"])
    metadata["cleanup"] = tuple(hooks["cleanup"])
    metadata["catchall"] = hooks["catchall"][0] if hooks["catchall"] else None


def _process_function(cls, metadata):
    """
    Discover descriptors on a function source (parameter defaults are the specs).

    Every parameter must default to an Option or a Positional. Positional-only
    parameters are passed positionally, the rest by keyword. The target is a
    SimpleNamespace pre-filled with each field's untouched value.
    """
    callback = metadata["source"]
    try:
        signature = inspect.signature(callback)
    except ValueError:
        raise ValueError(f"{cls.__typename__} source must be an inspectable callable") from None

    specs = {}
    for name, parameter in signature.parameters.items():
        if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
            raise TypeError(f"{cls.__typename__} parameter {name!r} cannot be variadic")
        if not isinstance(spec := parameter.default, Option | Positional):
            raise TypeError(f"{cls.__typename__} parameter {name!r} must default to an Option or a Positional")
        spec._bind(name)
        specs[name] = spec
        if isinstance(spec, Option):
            metadata["options"].append(spec)
        else:
            metadata["positionals"].append(spec)

    def factory():
        return SimpleNamespace(**{name: spec._initial() for name, spec in specs.items()})

    def entry(target):
        args = []
        kwargs = {}
        for name, parameter in signature.parameters.items():
            if parameter.kind is Parameter.POSITIONAL_ONLY:
                args.append(getattr(target, name))
            else:
                kwargs[name] = getattr(target, name)
        return callback(*args, **kwargs)

    metadata["factory"] = factory
    metadata["entry"] = entry
    metadata["setup"] = ()
    metadata["cleanup"] = ()
    metadata["catchall"] = None


def _process_descriptors(cls, metadata):
    """
    Validate the descriptor table of one command.

    - Every occurrence key (short alias, long name, derived name) belongs to
      exactly one option.
    - At most one list positional, and it must be the last positional.
    """
    # occurrence keys drop their dashes, so short and long names share one table
    keys = {}
    for option in metadata["options"]:
        for key in option.keys:
            if keys.setdefault(key, option) is not option:
                raise TypeError(f"{cls.__typename__} name {key!r} is already in use by {keys[key].field!r}")

    for index, positional in enumerate(metadata["positionals"]):
        if positional.many and index != len(metadata["positionals"]) - 1:
            raise TypeError(f"{cls.__typename__} list positional {positional.name!r} must be the last positional")


def _process_strings(cls, metadata):
    """
    Normalize scalar string metadata: trimmed, non-empty, Unset becomes None.
    """
    for name in ("name", "descr", "doc", "category", "footer"):
        if not isinstance(object := metadata[name], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)


class Command(metaclass=CommandType):
    """
    One declared command: descriptor table, hooks, entry point and help metadata.

    Lifecycle of a run (driven by Registry.execute)
    1. resolve(): tokens -> ResolvedArguments (raises UnknownArgumentError).
    2. helped(): a helper option was given -> the registry prints help instead.
    3. bind(): fresh target, @setup hooks, option/positional binding, catch-all.
    4. invoke(): entry point, then @cleanup hooks.

    Notes
    - Descriptors are discovered once here and never mutated afterwards.
    - strict=True turns unused occurrences into UnknownArgumentError when the
      command has no catch-all; by default they are ignored (and logged).
    """

    __introspectable__ = (
        "name",
        "descr",
        "doc",
        "category",
        "footer",
        "experimental",
        "deprecated",
        "hidden",
        "strict",
        "options",
        "positionals",
    )

    __displayable__ = (
        "name",
        "descr",
        "category",
        "options",
        "positionals",
    )

    def __new__(
            cls,
            source,
            /,
            name=Unset,
            descr=Unset,
            doc=Unset,
            category=Unset,
            footer=Unset,
            experimental=False,
            deprecated=False,
            hidden=False,
            strict=False,
    ):
        """
        Build a command from a class or a function.

        Parameters
        - source: class (instantiated without arguments for every run) or function.
        - name: command name; defaults to the lowercased class name, or the
          function name with '_' replaced by '-'.
        - descr: one-line description (listing and help header).
        - doc: longer help paragraph.
        - category: listing category (the registry default when omitted).
        - footer: text printed at the end of the command's help.
        - experimental / deprecated / hidden: listing flags (hidden and
          deprecated commands are omitted from the listing but still runnable).
        - strict: fail on unused occurrences when there is no catch-all.
        """
        if not callable(source):
            raise TypeError(f"{cls.__typename__} source must be a class or a callable")

        if name is Unset:
            name = source.__name__.lower() if isinstance(source, type) else source.__name__.replace("_", "-")

        metadata = {
            "source": source,
            "name": name,
            "descr": descr,
            "doc": doc,
            "category": category,
            "footer": footer,
            "experimental": bool(experimental),
            "deprecated": bool(deprecated),
            "hidden": bool(hidden),
            "strict": bool(strict),
            "options": [],
            "positionals": [],
        }

        if isinstance(source, type):
            _process_class(cls, metadata)
        else:
            _process_function(cls, metadata)
        _process_descriptors(cls, metadata)
        _process_strings(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._options = tuple(self._options)
        self._positionals = tuple(self._positionals)
        return self

    def __call__(self, *args, **kwargs):
        """
        Call the wrapped source directly (instantiates a class source).
        """
        return self._source(*args, **kwargs)

    @property
    def source(self):
        return self._source

    def resolve(self, tokens, start=0):
        """
        Tokenize `tokens` against this command's options (see resolver.resolve).
        """
        return resolve(tokens, self._options, start)

    def helped(self, resolved):
        """
        True when any helper option occurs in the resolved arguments.
        """
        return any(
            resolved.contains(key)
            for option in self._options if option.helper
            for key in option.keys
        )

    def bind(self, resolved, *, registry=None):
        """
        Create a fresh target, run @setup hooks, then bind resolved arguments.

        Returns the BindingResult; InvalidValueError / UnsupportedTypeError
        propagate from the binder.
        """
        target = self._factory()
        for hook in self._setup:
            hook(target, registry)

        catchall = functools.partial(self._catchall, target) if self._catchall else None
        result = bind(resolved, self._options, self._positionals, target, unknown=catchall)

        if result.unknown and not catchall:
            if self._strict:
                for occurrence in result.unknown:
                    result.errors.append(UnknownArgumentError(
                        "option %r was given but not used" % occurrence.key,
                        title="unused option",
                        code=FaultCode.UNROUTED_ARGUMENT,
                        input=occurrence.key,
                        hint="pass each option through a single name",
                    ))
            else:
                logger.info("ignoring unused arguments: %s", ", ".join(o.key for o in result.unknown))
        if result.leftover:
            logger.debug("unconsumed positionals: %r", result.leftover)

        return result

    def invoke(self, result):
        """
        Run the entry point on a successfully bound target, then @cleanup hooks.

        Cleanup hooks do not run when the entry point raises.
        """
        if not result:
            raise ValueError(f"{type(self).__typename__} cannot invoke a failed binding")
        value = self._entry(result.target)
        for hook in self._cleanup:
            hook(result.target)
        return value

    def _helper(self, registry):
        """
        Build the help renderable for this command.

        Sections
        - "name - descr", then doc.
        - usage line: "Usage: [prog] name [options] REQ {OPT} {LIST...}".
        - "Required options" and "Options" tables: names, value label and the
          description (with "(default: …)" when a default exists).
        - command footer, then registry footer.
        """
        styles = defaultdict(str, {
            "command-name": "bold #FF4DA6",
            "description": "#E5E7EB",
            "doc": "#C8C8D0",
            "usage-label": "bold #00E5FF",
            "usage": "#E6E6F0",
            "section-label": "bold #00E5FF",
            "option-name": "bold #A78BFA",
            "metavar": "italic #7DD3FC",
            "option-description": "#C8C8D0",
            "default": "dim",
            "footer": "dim",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if registry.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        renders = []

        header = text(self.name, styler("command-name"))
        if self.descr:
            header.append(" - ").append(text(self.descr, styler("description")))
        renders.append(header)
        if self.doc:
            renders.append(text(self.doc, styler("doc")))
        renders.append(Text(""))

        visible = [option for option in self._options if not option.hidden]
        required = sorted((option for option in visible if option.required), key=lambda x: x.name.lstrip("-"))
        optional = sorted((option for option in visible if not option.required), key=lambda x: x.name.lstrip("-"))

        usage = Text()
        usage.append("Usage:", styler("usage-label"))
        if registry.prog:
            usage.append(" ").append(text(registry.prog, styler("usage")))
        usage.append(" ").append(text(self.name, styler("usage")))
        if optional:
            usage.append(" [options]", styler("usage"))
        for positional in self._positionals:
            if positional.hidden:
                continue
            label = positional.name + ("..." if positional.many else "")
            usage.append(" " + (label if positional.required else "{%s}" % label), styler("usage"))
        renders.append(usage)

        shorts = any(option.short for option in visible)

        def table(label, options):
            renders.append(Text(""))
            renders.append(Text(label, styler("section-label")).append(":"))
            grid = Table.grid(padding=(0, 2))
            grid.add_column(no_wrap=True)
            grid.add_column()
            for option in options:
                names = Text("  ")
                if option.short:
                    names.append("-" + option.short, styler("option-name"))
                    if option.long:
                        names.append(" ")
                elif shorts:
                    names.append("   ")
                if option.long or not option.short:
                    names.append("--" + (option.long or option.derived), styler("option-name"))
                if not option.boolean:
                    names.append(" ").append(option.metavar or ("N" if option.numeric else "val"), styler("metavar"))
                descr = text(option.descr, styler("option-description"))
                if option.default is not None:
                    descr.append(" (default: %s)" % option.default, styler("default"))
                grid.add_row(names, descr)
            renders.append(grid)

        if required:
            table("Required options", required)
        if optional:
            table("Options", optional)

        for footer in (self.footer, registry.footer):
            if footer:
                renders.append(Text(""))
                renders.append(text(footer, styler("footer")))

        renderable = Group(*renders)
        if registry.fancy:
            renderable = Panel(renderable, title=Text(f"{self.name} help".upper()), title_align="left")
        return renderable


class Registry:
    """
    Explicit command registry and dispatcher.

    Built once per process, read-only while commands resolve and bind.

    Configuration
    - prog: program name shown in usage lines and fault headers.
    - header / footer: text printed around listings and help.
    - usage: default usage text printed above the listing.
    - category: default listing category ("General").
    - order: explicit category order for the listing (only listed categories print).
    - shell: True renders faults and returns exit statuses; False raises
      CommandExit (useful when embedding or testing).
    - fancy / colorful: rendering options (panels, styles).
    - verbose: attach a DEBUG stderr handler to the "commandeer" logger.
    - console: rich Console used for all output (stderr by default).
    """

    def __init__(
            self,
            *,
            prog=Unset,
            header=Unset,
            footer=Unset,
            usage=Unset,
            category="General",
            order=Unset,
            shell=True,
            fancy=False,
            colorful=True,
            verbose=False,
            console=Unset,
    ):
        self._commands = {}
        self.prog = getattr(__import__("__main__"), "__prog__", coalesce(prog))
        self.header = coalesce(header)
        self.footer = coalesce(footer)
        self.usage = coalesce(usage)
        self.category = category
        self.order = tuple(order) if order is not Unset else None
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.verbose = bool(verbose)
        self.console = coalesce(console, Console(stderr=True))

        if self.verbose:
            package = logging.getLogger(__package__)
            if not package.handlers:
                package.addHandler(logging.StreamHandler(sys.stderr))
            package.setLevel(logging.DEBUG)

    @property
    def commands(self):
        return MappingProxyType(self._commands)

    def __contains__(self, name):
        return name in self._commands

    def __getitem__(self, name):
        return self._commands[name]

    def add(self, command, /):
        """
        Register a Command under its name (names are unique).
        """
        if not isinstance(command, Command):
            raise TypeError("add() argument must be a command")
        if self._commands.setdefault(command.name, command) is not command:
            raise ValueError(f"command name {command.name!r} is already in use")
        logger.debug("added command: %s => %s", command.name, getattr(command.source, "__qualname__", command.source))
        return command

    def command(self, source=Unset, /, **kwargs):
        """
        Create and register a command; usable directly or as a decorator.

            @registry.command(descr="...")
            class Tool: ...
        """
        @rename("command")
        def wrapper(source, /):
            if isinstance(source, Command):
                return self.add(source)
            return self.add(Command(source, **kwargs))

        return wrapper(source) if source is not Unset else wrapper

    def _options(self):
        return {
            "prog": self.prog,
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
            "console": self.console,
        }

    def _fail(self, faults, renderable=None):
        """
        Surface faults as one CommandExit, then the given help; returns status 1.

        In non-shell mode the CommandExit is raised instead.
        """
        trigger(CommandExit(faults), **self._options())
        if renderable is not None:
            self.console.print(renderable)
        return 1

    def _lister(self):
        """
        Build the command listing renderable.

        Layout
        - header, default usage, "Available commands:".
        - one "[category]" block per category (alphabetical unless `order` is
          set), commands sorted by name as "  name - descr"; experimental ones
          get a "*" and a footnote; hidden and deprecated ones are omitted.
        - footer.
        """
        styles = defaultdict(str, {
            "header": "bold #E6E6F0",
            "category": "bold #00E5FF",
            "command-name": "bold #36C5F0",
            "command-description": "#9CA3AF",
            "footnote": "dim",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        renders = []
        if self.header:
            renders.extend((Text(str(self.header), styler("header")), Text("")))
        if self.usage:
            renders.extend((Text(str(self.usage)), Text("")))
        renders.append(Text("Available commands:"))

        visible = [command for command in self._commands.values() if not command.hidden and not command.deprecated]
        width = max([4] + [len(command.name) + command.experimental for command in visible])

        categories = defaultdict(list)
        for command in visible:
            categories[command.category or self.category].append(command)

        experimental = False
        for category in (self.order if self.order is not None else sorted(categories)):
            renders.append(Text("[%s]" % category, styler("category")))
            for command in sorted(categories.get(category, ()), key=lambda x: x.name):
                experimental |= command.experimental
                line = Text("  ")
                line.append(command.name + "*" * command.experimental, styler("command-name"))
                descr = command.descr or (inspect.getdoc(command.source) or "").partition("\n")[0]
                if descr:
                    line.append(" " * (width - len(command.name) - command.experimental) + " - ")
                    line.append(str(descr), styler("command-description"))
                renders.append(line)
            renders.append(Text(""))

        if experimental:
            renders.extend((Text("* = experimental command", styler("footnote")), Text("")))
        if self.footer:
            renders.append(Text(str(self.footer)))

        renderable = Group(*renders)
        if self.fancy:
            renderable = Panel(renderable, title=Text(f"{self.prog or 'commands'}".upper()), title_align="left")
        return renderable

    def show(self, name=Unset, /):
        """
        Print the command listing, or one command's help when a name is given.
        """
        if name is Unset:
            self.console.print(self._lister())
        else:
            self.console.print(self[name]._helper(self))

    def _unknown(self, name):
        suggestions = difflib.get_close_matches(name, list(self._commands), 3)
        try:
            hint = "did you mean %r? run '%s help' to see available commands" % (suggestions[0], self.prog or "help")
        except IndexError:
            hint = "run '%s help' to see available commands" % (self.prog or "help")
        logger.info("unknown command: %s", name)
        return UnknownCommandError(
            "unknown command: %s" % name,
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            input=name,
            suggestions=suggestions,
            hint=hint,
        )

    def run(self, argv=Unset, /):
        """
        Dispatch an argv-like list whose first item is the command name.

        - [] or ["help"]: print the listing, status 0.
        - ["help", NAME]: print NAME's help (unknown NAME: fault + listing, status 1).
        - [NAME, ...]: execute NAME with the remaining tokens (unknown NAME:
          fault + listing, status 1).

        argv defaults to sys.argv[1:].
        """
        tokens = list(sys.argv[1:] if argv is Unset else argv)

        if not tokens:
            self.show()
            return 0

        if tokens[0] == "help":
            if len(tokens) == 1:
                self.show()
                return 0
            if tokens[1] not in self._commands:
                return self._fail([self._unknown(tokens[1])], self._lister())
            self.show(tokens[1])
            return 0

        if tokens[0] not in self._commands:
            return self._fail([self._unknown(tokens[0])], self._lister())

        return self.execute(tokens[0], tokens, 1)

    def execute(self, command, argv, start=0, /):
        """
        Run one command (by name or instance) over argv[start:].

        returns
        - 0 after the entry point and cleanup hooks ran.
        - 1 after printing help for a helper option.
        - 1 after rendering faults followed by the command's help, including
          faults raised by the entry point (cleanup hooks are then skipped).

        UnsupportedTypeError is a declaration defect and propagates.
        """
        if not isinstance(command, Command):
            command = self[command]
        logger.debug("executing %s with %r", command.name, list(argv[start:]))

        try:
            resolved = command.resolve(argv, start)
            if command.helped(resolved):
                self.console.print(command._helper(self))
                return 1
            result = command.bind(resolved, registry=self)
        except CommandException as fault:
            return self._fail([fault], command._helper(self))

        if not result:
            return self._fail(result.errors, command._helper(self))

        try:
            command.invoke(result)
        except CommandException as fault:
            return self._fail([fault], command._helper(self))
        return 0


def command(source=Unset, /, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct:    cmd = command(Tool, name="tool")
    - Decorator: @command(name="tool") / @command

    The command is not registered anywhere; pass it to Registry.add() or run it
    with invoke().
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a class or a callable")
        return Command(source, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


def invoke(object, prompt=Unset, /, **options):
    """
    Convenience runner for registries, commands or plain callables.

    Parameters
    - object: Registry (dispatches on the first token), Command (runs it
      directly from token 0), or a class/callable (wrapped with command()).
    - prompt: Unset (sys.argv[1:]), a shell-like str (split with shlex.split),
      or an iterable of str.
    - options: Registry configuration used when `object` is not a registry.

    Returns the exit status.
    """
    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() prompt must be a string or an iterable of strings")

    if isinstance(object, Registry):
        return object.run(tokens)
    if isinstance(object, Command):
        return Registry(**options).execute(object, tokens, 0)
    if callable(object):
        return invoke(command(object), tokens, **options)
    raise TypeError("invoke() first argument must be a registry, a command or a callable")


__all__ = (
    "Command",
    "Registry",
    "command",
    "invoke",
    "setup",
    "main",
    "cleanup",
    "catchall",
)

del CommandType
