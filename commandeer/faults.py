"""
Commandeer faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for user-facing issues.
- CommandException: base type that carries a message plus keyword context and
  knows how to render itself (rich) in a short, lowercased, actionable way.
- UnknownArgumentError / MissingArgumentError / InvalidValueError /
  UnknownCommandError: the user-facing kinds produced by resolution, binding
  and dispatch.
- UnsupportedTypeError: a declaration defect (a field type without a coercion
  rule). It derives from TypeError, not CommandException, so callers can tell
  programming errors apart from bad user input.
- CommandExit: the grouped failure of one run, rendered once.
- trigger(): surface a fault either by raising it or by printing it.

Integration
- The resolver raises UnknownArgumentError immediately.
- The binder collects MissingArgumentError values and raises InvalidValueError
  at the point of coercion.
- The registry groups whatever surfaced into a CommandExit and triggers it.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    Stable numeric identifiers for every user-facing fault.

    grouping
    - routing (1110x): UNKNOWN_COMMAND
    - options (1111x): UNKNOWN_ARGUMENT, UNROUTED_ARGUMENT, MISSING_VALUE
    - binding (1112x): MISSING_ARGUMENT, INVALID_VALUE

    normalize() allows host remapping to custom labels through a __codes__
    mapping in __main__ while keeping the numeric codes stable.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- option errors (11xxx) ---
    UNKNOWN_ARGUMENT            = 11112
    UNROUTED_ARGUMENT           = 11113
    MISSING_VALUE               = 11117

    # --- binding errors (11xxx) ---
    MISSING_ARGUMENT            = 11125
    INVALID_VALUE               = 11126

    def normalize(self):
        """
        Label shown in fault headers (host may remap through __main__.__codes__).
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _prog(options):
    return getattr(__import__("__main__"), "__prog__", options.get("prog") or "commandeer")


class CommandException(Exception):
    """
    Base class of every user-facing fault.

    The message is positional; everything else is keyword context exposed as a
    read-only mapping under `options`. Well-known keys:
    - code: FaultCode
    - title: short lowercased title for the header
    - hint: one actionable sentence
    - argument: the offending descriptor (when there is one)
    - input: the offending token or key as written
    - index: 1-based position of the offending token
    - prog, fancy, colorful, shell: rendering context (filled by trigger())
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def argument(self):
        return self.options.get("argument")

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # green arrow
            "hint": "italic #9CE19C",  # green hint text
        })
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text(code.normalize() if code else "error", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "__replace__ takes keyword arguments only"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownArgumentError(CommandException): ...
class MissingArgumentError(CommandException): ...
class InvalidValueError(CommandException): ...
class UnknownCommandError(CommandException): ...


class UnsupportedTypeError(TypeError):
    """
    A value had to be assigned to a field whose declared type has no coercion rule.

    This is a defect in the command declaration, never user-recoverable.
    """

    def __init__(self, message, /, *, field, value=Unset):
        super().__init__(message)
        self.field = field
        self.value = value


class CommandExit(ExceptionGroup[CommandException]):
    """
    Grouped failure of one command run.

    Rendered as a header naming the program followed by every fault in the order
    it was collected.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = _styles({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # group title (Bad Exit)
        })
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            return Text(str(fragment), style if colorful else "")

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styles["prog-name"]),
            " — ",
            text(self.message.title(), styles["title"]),
            " ]"
        )
        renders = [exception.__replace__(**self.options) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "__replace__ takes keyword arguments only"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    Print or raise a fault after merging runtime rendering options into it.

    contract
    - fault needs __trigger__ and __replace__ (CommandException and CommandExit have both).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is printed to the console; otherwise it is raised.

    typical options
    - prog, shell, fancy, colorful, console, title, code, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownArgumentError",
    "MissingArgumentError",
    "InvalidValueError",
    "UnknownCommandError",
    "UnsupportedTypeError",
    "CommandExit",
    "trigger",
)
