"""
Commandeer binder: coerce resolved values and assign them to a target's fields.

Flow
- Options, in declaration order: select the occurrences of the first key that
  has any, trying the short alias, the long name, then the derived name; mark
  that key consumed, then either
  • assign each occurrence (a bare one binds True; only the first one unless
    the option allows multiple), or
  • assign the coerced default, or
  • record a MissingArgumentError when the option is required.
- Positionals, in declaration order: a single positional takes the next
  unconsumed token, a list positional takes every remaining token; when no
  token is available the default applies or a MissingArgumentError is recorded.
- Leftovers: occurrences nobody consumed are reported (and handed to the
  catch-all callable when one is given); positional tokens nobody consumed are
  reported as leftover.

Errors
- MissingArgumentError values are collected across every descriptor so they
  can be reported together; they come back inside the BindingResult.
- InvalidValueError and UnsupportedTypeError are raised at the point of
  coercion; nothing after them is bound.

Coercion (payload string -> declared type)
- str: verbatim.
- bool: only a bare occurrence binds (True); a payload is rejected.
- int: base 16 when the payload starts with "0x", base 10 otherwise.
- float: decimal or scientific notation only (no "inf", "nan" or "_" separators).
- anything else: UnsupportedTypeError (a declaration defect).
"""
import logging
import re

from .faults import FaultCode, InvalidValueError, MissingArgumentError, UnsupportedTypeError

logger = logging.getLogger(__name__)


class BindingResult:
    """
    Outcome of one binding pass.

    - target: the object whose fields were assigned.
    - errors: MissingArgumentError list (empty on success).
    - unknown: Occurrence list nobody consumed, in command-line order.
    - leftover: positional tokens no positional descriptor consumed.

    Truthy when there are no errors.
    """

    def __init__(self, target, errors=(), unknown=(), leftover=()):
        self.target = target
        self.errors = list(errors)
        self.unknown = list(unknown)
        self.leftover = list(leftover)

    @property
    def ok(self):
        return not self.errors

    def __bool__(self):
        return self.ok

    def __repr__(self):
        return f"binding-result(ok={self.ok!r}, errors={self.errors!r}, unknown={self.unknown!r}, leftover={self.leftover!r})"


def _invalid(descriptor, value, expected):
    return InvalidValueError(
        "invalid value %r for %s, expected %s" % (value, descriptor.name, expected),
        title="invalid value",
        code=FaultCode.INVALID_VALUE,
        argument=descriptor,
        input=value,
        hint="pass %s to %s" % (expected, descriptor.name),
    )


def _integer(value):
    if value.startswith("0x"):
        if not re.fullmatch(r"[+-]?[0-9a-fA-F]+", value[2:]):
            raise ValueError(value)
        return int(value[2:], 16)
    if not re.fullmatch(r"[+-]?[0-9]+", value):
        raise ValueError(value)
    return int(value)


def _float(value):
    if not re.fullmatch(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?", value):
        raise ValueError(value)
    return float(value)


def coerce(value, descriptor, /):
    """
    Convert one payload string to the descriptor's declared type.

    raises
    - InvalidValueError: the payload does not parse as the declared type, or a
      flag received a payload.
    - UnsupportedTypeError: the declared type has no coercion rule.
    """
    type = descriptor.type
    if type is str:
        return value
    if type is bool:
        raise InvalidValueError(
            "flag %s does not take a value (got %r)" % (descriptor.name, value),
            title="flag takes no value",
            code=FaultCode.INVALID_VALUE,
            argument=descriptor,
            input=value,
            hint="pass %s alone" % descriptor.name,
        )
    if type is int:
        try:
            return _integer(value)
        except ValueError:
            raise _invalid(descriptor, value, "an integer") from None
    if type is float:
        try:
            return _float(value)
        except ValueError:
            raise _invalid(descriptor, value, "a number") from None
    raise UnsupportedTypeError(
        "cannot assign %r to field %r: type %s has no coercion rule" % (
            value, descriptor.field, getattr(descriptor.type, "__name__", descriptor.type)
        ),
        field=descriptor.field,
        value=value,
    )


def _presence(descriptor):
    """
    Value bound by an occurrence without payload.
    """
    if descriptor.boolean:
        return True
    if descriptor.type not in (str, int, float):
        raise UnsupportedTypeError(
            "cannot assign a bare flag to field %r: type %s has no coercion rule" % (
                descriptor.field, getattr(descriptor.type, "__name__", descriptor.type)
            ),
            field=descriptor.field,
        )
    raise InvalidValueError(
        "option %s requires a value" % descriptor.name,
        title="missing value",
        code=FaultCode.MISSING_VALUE,
        argument=descriptor,
        input=descriptor.name,
        hint="pass a value after %s (for example: %s <%s>)" % (
            descriptor.name, descriptor.name, descriptor.metavar or "value"
        ),
    )


def _missing(descriptor, kind):
    return MissingArgumentError(
        "missing argument: %s" % descriptor.name,
        title="missing %s" % kind,
        code=FaultCode.MISSING_ARGUMENT,
        argument=descriptor,
        input=descriptor.name,
        hint="add %s, it is required" % descriptor.name,
    )


def _bind_option(resolved, descriptor, target, errors):
    # the first key with occurrences wins; the others stay unconsumed
    for key in descriptor.keys:
        if occurrences := resolved.get(key):
            resolved.mark(key)
            break
    else:
        occurrences = []

    if not occurrences:
        if descriptor.default is not None:
            value = coerce(descriptor.default, descriptor)
            logger.debug("%s => %r (default)", descriptor.name, value)
            descriptor.assign(target, value)
        elif descriptor.required:
            errors.append(_missing(descriptor, "option"))
        return

    for occurrence in occurrences:
        if occurrence.bare:
            value = _presence(descriptor)
        else:
            value = coerce(occurrence.value, descriptor)
        logger.debug("%s => %r", descriptor.name, value)
        descriptor.assign(target, value)
        if not descriptor.multiple:
            break


def _bind_positionals(resolved, descriptors, target, errors):
    tokens = resolved.positionals
    cursor = 0

    for descriptor in descriptors:
        if tokens is None or (not descriptor.many and cursor >= len(tokens)):
            if descriptor.required:
                errors.append(_missing(descriptor, "positional"))
            elif descriptor.default is not None:
                value = coerce(descriptor.default, descriptor)
                logger.debug("%s => %r (default)", descriptor.name, value)
                descriptor.assign(target, [value] if descriptor.many else value)
            continue

        if descriptor.many:
            value = [coerce(token, descriptor) for token in tokens[cursor:]]
            cursor = len(tokens)
        else:
            value = coerce(tokens[cursor], descriptor)
            cursor += 1
        logger.debug("%s => %r", descriptor.name, value)
        descriptor.assign(target, value)

    return list(tokens[cursor:]) if tokens else []


def bind(resolved, options, positionals, target, *, unknown=None):
    """
    Bind resolved arguments onto `target`.

    parameters
    - resolved: ResolvedArguments from resolve().
    - options: Iterable[Option], declaration order.
    - positionals: Iterable[Positional], declaration order.
    - target: object receiving the assignments.
    - unknown: optional catch-all callable(key, value) called once per unused
      occurrence, in command-line order.

    returns
    - BindingResult; its errors list holds every MissingArgumentError.

    raises
    - InvalidValueError / UnsupportedTypeError at the first failed coercion.
    """
    errors = []

    for descriptor in options:
        _bind_option(resolved, descriptor, target, errors)

    leftover = _bind_positionals(resolved, positionals, target, errors)

    unused = resolved.unused()
    if unused:
        logger.debug("unused => %r", unused)
    if unknown is not None:
        for occurrence in unused:
            unknown(occurrence.key, occurrence.value)

    return BindingResult(target, errors, unused, leftover)


__all__ = (
    "BindingResult",
    "coerce",
    "bind",
)
