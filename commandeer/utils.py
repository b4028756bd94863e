"""
Commandeer utilities shared by the declaration, resolution and command layers.

Contents
- UnsetType / Unset
  • The "argument omitted" marker. Keyword defaults use it wherever None would
    be ambiguous (a spec default of None means "no default").
  • Falsy, repr "Unset", one instance per process, sealed against subclassing.

- coalesce(object, default=None)
  • Swap Unset for a fallback; every other value (None, 0, "", []) passes through.

- rename(callable, name) / @rename("name")
  • Give generated closures readable __name__/__qualname__ in tracebacks.

- mirror("attr")
  • Read-only property over self._attr; container values come back as
    tuple/dict/frozenset copies so descriptor tables cannot be mutated.

- ordinal(number)
  • "first".."tenth", then "11th", "22nd", ...; used in position messages.

Examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> ordinal(3)
    'third'
"""
import builtins
import functools
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    UnsetType() always returns the same object; subclassing raises TypeError.
    The marker also composes with types in unions, so `str | Unset` can be
    used directly as an isinstance() target.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, else `object` unchanged.

    coalesce(Unset, "x") -> "x"; coalesce(None, "x") -> None
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) renames in place and returns the callable;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")

        def decorator(callable):
            return rename(callable, name)

        return rename(decorator, "rename")

    if len(parameters) != 2:
        raise TypeError("rename() takes 1 or 2 arguments (%d given)" % len(parameters))

    callable, name = parameters
    if not builtins.callable(callable):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError(f"cannot rename {callable!r}") from None
    return callable


def _freeze(object):
    if isinstance(object, str):
        return object
    if isinstance(object, Mapping):
        return {key: _freeze(value) for key, value in object.items()}
    if isinstance(object, Sequence):
        return tuple(_freeze(value) for value in object)
    if isinstance(object, Set):
        return frozenset(_freeze(value) for value in object)
    return object


def mirror(name, /):
    """
    Property reading "_{name}" from the instance, with containers frozen.

        keys = mirror("keys")   # exposes self._keys as a tuple
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


_ORDINALS = (
    "first", "second", "third", "fourth", "fifth",
    "sixth", "seventh", "eighth", "ninth", "tenth",
)


@functools.cache
def ordinal(number, /):
    """
    English ordinal for a 1-based position: words up to ten, suffixes after.
    """
    if 1 <= number <= len(_ORDINALS):
        return _ORDINALS[number - 1]
    if number % 100 in (11, 12, 13):
        return f"{number}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
)
