r"""
Commandeer argument specifications and decorators.

Overview
- Specs
  • Option[_T]: named option with an optional short alias and/or long name
    (e.g., -o/--output). Boolean options are flags: presence binds True.
  • Positional[_T]: unnamed argument identified by its order; single or list arity.

- Decorators
  • @option(...): build an Option whose target is a setter method.
  • @positional(...): build a Positional whose target is a setter method.

- Field identity
  • A spec assigned as a class attribute learns its field name through
    __set_name__; a spec used as a function parameter default is bound by the
    command layer. Either way the identity is fixed once and never changes.
  • On an instance, a field-style spec reads back the bound value (or the
    untouched initial value: False for flags, [] for multiple/list, else None).
    A setter-style spec reads back as the bound setter method.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields named in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- Shared
  • type: one of str, bool, int, float for coercion; other types are accepted
    at declaration time and fail with UnsupportedTypeError when a value has to
    be assigned.
  • default: Unset | str, coerced exactly like a command-line payload; an
    omitted default reads back as None.
  • required: bool.
  • descr / metavar: Unset | str, non-empty when provided.
  • hidden: bool (suppresses from help).
- Option only
  • names: at most one "-x" short alias and one "--long-name"; none at all is
    allowed, the derived name (from the field) is used instead.
  • multiple: every occurrence is assigned, in command-line order.
  • helper: presence requests the command's help instead of running it.
- Positional only
  • nargs: Unset (single) | "*" (list, consumes every remaining token).

Public API
- Classes: Option, Positional
- Decorators: option, positional
"""
import functools
import inspect
import operator
import re
from types import MethodType

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

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
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(long='verbose', short='v', type=<class 'bool'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _derive(field):
    """
    Derive the fallback option name from a field identifier.

    set_output_file -> output-file, verbose -> verbose
    """
    if field.startswith("set_") and len(field) > 4:
        field = field[4:]
    return field.lower().replace("_", "-")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by Option and Positional.

    - type: must be a class (coercion support is checked at binding time).
    - default: Unset or a string (it is coerced like a command-line payload).
      Flag options cannot declare one.
    - descr/metavar: Unset or a non-empty string after trimming; Unset becomes None.

    Mutates the metadata dict in place.
    """
    if not isinstance(metadata["type"], type):
        raise TypeError(f"{cls.__typename__} 'type' must be a class")

    if not isinstance(default := metadata["default"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")
    if metadata["type"] is bool and default is not Unset:
        raise TypeError(f"{cls.__typename__} flag cannot declare a default")
    metadata["default"] = coalesce(default)

    for name in ("descr", "metavar"):
        if not isinstance(object := metadata[name], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: split option names into the short alias and the long name.

    Accepted forms
    - short: "-x" (one letter or digit)
    - long:  "--name", "--long-name" (unicode letters allowed, no underscores)

    At most one of each; duplicates are rejected. Zero names is valid: the
    option is then reachable only through the name derived from its field.

    Mutates the metadata dict in place (removes 'names', sets 'short'/'long').
    """
    short = long = ""
    for name in metadata.pop("names"):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"-[^\W_]", name):
            if short:
                raise ValueError(f"{cls.__typename__} can have only one short alias")
            short = name[1:]
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long:
                raise ValueError(f"{cls.__typename__} can have only one long name")
            long = name[2:]
        else:
            raise ValueError(f"{cls.__typename__} names must be '-x' or '--long-name' shaped (unicodes are allowed)")

    metadata["short"] = short
    metadata["long"] = long

    if metadata["helper"] and metadata["type"] is not bool:
        raise TypeError(f"helper {cls.__typename__} must be a flag (type=bool)")


class _Field:
    """
    Shared field-identity plumbing for Option and Positional.

    A spec is bound to exactly one field name, optionally through a setter.
    """

    def __set_name__(self, owner, name):
        self._bind(name)

    def _bind(self, field, setter=Unset):
        if self._field is not None and self._field != field:
            raise TypeError(f"{type(self).__typename__} already bound to field {self._field!r}")
        self._field = field
        if setter is not Unset:
            self._setter = setter

    def _initial(self):
        return None

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        if self._setter is not Unset:
            return MethodType(self._setter, instance)
        try:
            return vars(instance)[self._field]
        except KeyError:
            return self._initial()

    def assign(self, target, value):
        """
        Store one coerced value on the target: call the setter, or write the field.
        """
        if self._field is None:
            raise TypeError(f"{type(self).__typename__} is not bound to a field")
        if self._setter is not Unset:
            if self._nullary:
                self._setter(target)
            else:
                self._setter(target, value)
        elif self._accumulates():
            vars(target).setdefault(self._field, []).append(value)
        else:
            setattr(target, self._field, value)

    def _accumulates(self):
        return False


class Option[_T](_Field, metaclass=ArgumentType):
    """
    Named option specification.

    Highlights
    - Names: optional "-x" short alias and optional "--name" long name; a name
      derived from the field identifier is always accepted as a long name too.
    - Flags: type=bool options never take a payload; presence binds True.
    - Numeric: type=int/float options always consume the next token as their
      value, so "--offset -5" works.
    - multiple: each occurrence is assigned in command-line order; otherwise
      only the first occurrence is applied.
    - default: a string coerced like a payload when the option is absent.
    - required: absence without a default is reported as MissingArgumentError.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "long",
        "short",
        "type",
        "default",
        "required",
        "multiple",
        "metavar",
        "descr",
        "helper",
        "hidden",
        "field",
    )

    def __new__(
            cls,
            *names,
            type=str,
            default=Unset,
            required=False,
            multiple=False,
            metavar=Unset,
            descr=Unset,
            helper=False,
            hidden=False,
    ):
        """
        Declare an option; every argument besides the names is keyword-only.

        Parameters
        - names: zero to two str, "-x" and/or "--long-name".
        - type: str | bool | int | float (others fail when a value is assigned).
        - default: Unset | str, coerced when the option is absent.
        - required: bool, report a missing argument when absent without default.
        - multiple: bool, assign every occurrence instead of only the first.
        - metavar: Unset | str, value label in help ("N" for numbers, "val" otherwise).
        - descr: Unset | str, short description for help.
        - helper: bool, presence prints the command's help (flags only).
        - hidden: bool, suppress from help output.
        """
        metadata = {
            "names": names,
            "type": type,
            "default": default,
            "required": bool(required),
            "multiple": bool(multiple),
            "metavar": metavar,
            "descr": descr,
            "helper": bool(helper),
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._field = None
        self._setter = Unset
        self._nullary = False

        if self.helper and self.hidden:
            raise TypeError(f"helper {cls.__typename__} cannot be hidden")

        return self

    @property
    def boolean(self):
        """
        True for flag-style options (no payload).
        """
        return self._type is bool

    @property
    def numeric(self):
        """
        True for options whose next token is always their value.
        """
        return self._type in (int, float)

    @property
    def derived(self):
        """
        Fallback long name computed from the field identifier (None while unbound).
        """
        if self._field is None:
            return None
        return _derive(self._field)

    @property
    def keys(self):
        """
        Occurrence keys accepted for this option, in lookup priority order:
        short alias, long name, derived name (empties and duplicates dropped).
        """
        keys = []
        for key in (self._short, self._long, self.derived):
            if key and key not in keys:
                keys.append(key)
        return tuple(keys)

    @property
    def name(self):
        """
        Display name as typed on the command line (e.g. '--output' or '-o').
        """
        if self._long:
            return "--" + self._long
        if self._short:
            return "-" + self._short
        return "--" + coalesce(self.derived, "?")

    def _initial(self):
        if self._multiple:
            return []
        return False if self.boolean else None

    def _accumulates(self):
        return self._multiple


class Positional[_T](_Field, metaclass=ArgumentType):
    """
    Positional argument specification.

    Highlights
    - Arity: single (default) takes the next unconsumed positional token;
      nargs="*" (list) takes every remaining positional token.
    - default: a string coerced like a token when no positional is available.
    - required: absence is reported as MissingArgumentError.
    - Ordering among positionals is the declaration order.
    """

    __introspectable__ = (
        "metavar",
        "type",
        "nargs",
        "default",
        "required",
        "descr",
        "hidden",
        "field",
    )

    def __new__(
            cls,
            metavar=Unset,
            /,
            *,
            type=str,
            nargs=Unset,
            default=Unset,
            required=False,
            descr=Unset,
            hidden=False,
    ):
        """
        Declare a positional; only the metavar may be passed positionally.

        Parameters
        - metavar: Unset | str, label in usage lines (defaults to the field name, uppercased).
        - type: str | int | float (bool positionals are not meaningful).
        - nargs: Unset | "*".
        - default: Unset | str.
        - required: bool.
        - descr: Unset | str.
        - hidden: bool.
        """
        metadata = {
            "metavar": metavar,
            "type": type,
            "nargs": nargs,
            "default": default,
            "required": bool(required),
            "descr": descr,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata)
        if metadata["type"] is bool:
            raise TypeError(f"{cls.__typename__} cannot be a flag")
        if metadata["nargs"] not in (Unset, "*"):
            raise ValueError(f"{cls.__typename__} 'nargs' must be '*' when provided")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._field = None
        self._setter = Unset
        self._nullary = False
        return self

    @property
    def many(self):
        """
        True for list arity (consumes every remaining positional token).
        """
        return self._nargs == "*"

    @property
    def name(self):
        if self._metavar:
            return str(self._metavar)
        return self._field.upper() if self._field else "ARG"

    def _initial(self):
        return [] if self.many else None


def _setter_arity(callback):
    try:
        parameters = inspect.signature(callback).parameters.values()
    except (TypeError, ValueError):
        return 2
    return sum(
        1 for parameter in parameters
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    )


def option(*args, **kwargs):
    """
    Decorator/factory for an option whose target is a setter method.

    Usage
        class Tool:
            @option("-v", "--verbose", type=bool)
            def set_verbose(self, value): ...

            @option("-q", type=bool)
            def set_quiet(self): ...   # flag setters may omit the value

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Binds the function name as the field identity (so the derived name of
      set_verbose is "verbose") and the function as the setter.
    """
    option = Option(*args, **kwargs)

    @rename("option")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        if option._setter is not Unset:
            raise TypeError("@option() must be applied only once")
        option._bind(callback.__name__, callback)
        option._nullary = option.boolean and _setter_arity(callback) < 2
        return option

    return wrapper


def positional(*args, **kwargs):
    """
    Decorator/factory for a positional whose target is a setter method.

    Usage
        class Tool:
            @positional("FILE", required=True)
            def set_file(self, value): ...
    """
    positional = Positional(*args, **kwargs)

    @rename("positional")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@positional() must be applied to a callable")
        if positional._setter is not Unset:
            raise TypeError("@positional() must be applied only once")
        positional._bind(callback.__name__, callback)
        return positional

    return wrapper


__all__ = (
    "Option",
    "Positional",
    "option",
    "positional",
)

del ArgumentType
