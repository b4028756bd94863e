"""
Commandeer resolver: turn raw argv tokens into option occurrences and positionals.

What this module provides
- Occurrence: one resolved (key, value) pair. The key is the option as written,
  without dashes ("verbose" for --verbose, "v" for -v). The value is the payload
  or "" when the option was present without one.
- ResolvedArguments: the ordered occurrences, the positional tokens (None when
  no positional was seen at all, which is not the same as an empty list) and
  the set of keys a binding pass has consumed.
- resolve(tokens, descriptors, start=0): the single left-to-right pass.

Syntax accepted
- "--name value", "--name"; there is no "--name=value" form.
- "-c value", "-c", and clusters "-abc" where only the last character may take
  the following token as its value.
- "--" ends option parsing; every later token is positional verbatim.
- The first bare token (anything not starting with "-", or "-" itself) starts
  positional collection; from there on nothing is parsed as an option.

Value lookahead for the option that may take one, in order
1. numeric option (int/float): the next token is its value, even "-5".
2. next token is exactly "-" and the option is not a flag: the value is "-".
3. no next token, next token starts with "-", or the option is a flag: "".
4. otherwise the next token is the value.
"""
import difflib
import logging
from typing import NamedTuple

from .faults import FaultCode, UnknownArgumentError
from .utils import ordinal

logger = logging.getLogger(__name__)


class Occurrence(NamedTuple):
    """
    One option instance found on the command line.
    """
    key: str
    value: str

    @property
    def bare(self):
        """
        True when the option was present without a payload.
        """
        return self.value == ""


class ResolvedArguments:
    """
    Output of resolve(): occurrences in command-line order plus positional tokens.

    The consumed-key set is the only mutable part; the binder marks keys as it
    selects their occurrences, and unused() reports whatever nobody claimed.
    """

    def __init__(self, occurrences=(), positionals=None):
        self._occurrences = tuple(occurrences)
        self._positionals = None if positionals is None else tuple(positionals)
        self._consumed = set()

    @property
    def occurrences(self):
        return self._occurrences

    @property
    def positionals(self):
        """
        Positional tokens in order, or None when none were seen.
        """
        return self._positionals

    @property
    def consumed(self):
        return frozenset(self._consumed)

    def contains(self, key):
        return any(occurrence.key == key for occurrence in self._occurrences)

    def get(self, *keys):
        """
        Occurrences whose key is any of `keys`, in command-line order.
        """
        return [occurrence for occurrence in self._occurrences if occurrence.key in keys]

    def mark(self, *keys):
        self._consumed.update(keys)

    def unused(self):
        """
        Occurrences whose key was never marked consumed, in command-line order.
        """
        return [occurrence for occurrence in self._occurrences if occurrence.key not in self._consumed]

    def __repr__(self):
        return f"resolved-arguments(occurrences={list(self._occurrences)!r}, positionals={self._positionals!r})"


def _index(descriptors):
    """
    Build the long-name and short-alias lookup tables for one command.

    Long tokens match the long name or the derived name; short characters match
    the short alias only.
    """
    longs = {}
    shorts = {}
    for descriptor in descriptors:
        if descriptor.short:
            shorts.setdefault(descriptor.short, descriptor)
        for key in (descriptor.long, descriptor.derived):
            if key:
                longs.setdefault(key, descriptor)
    return longs, shorts


def _payload(descriptor, tokens, index):
    """
    Decide the value of the option at tokens[index].

    Returns (value, taken) where taken tells whether the next token was consumed.
    """
    if index + 1 >= len(tokens):
        return "", False
    following = tokens[index + 1]
    if descriptor.numeric:
        return following, True
    if following == "-" and not descriptor.boolean:
        return following, True
    if following.startswith("-") or descriptor.boolean:
        return "", False
    return following, True


def _unknown(input, token, position, candidates):
    suggestions = difflib.get_close_matches(input, list(candidates), 3)
    if suggestions:
        hint = "did you mean %r? run with --help to see all options" % suggestions[0]
    else:
        hint = "run with --help to see all available options"
    if input == token:
        message = "unknown option %r at %s position" % (token, ordinal(position))
    else:
        message = "unknown option %r in %r at %s position" % (input, token, ordinal(position))
    return UnknownArgumentError(
        message,
        title="unknown option",
        code=FaultCode.UNKNOWN_ARGUMENT,
        input=input,
        index=position,
        suggestions=suggestions,
        hint=hint,
    )


def resolve(tokens, descriptors, start=0):
    """
    Resolve argv-style tokens against one command's option descriptors.

    parameters
    - tokens: Sequence[str], already split by the host shell.
    - descriptors: Iterable[Option], the selected command's options.
    - start: int, index of the first token to parse (0, or 1 to skip the
      program or command name).

    returns
    - ResolvedArguments with occurrences (duplicates preserved) and positionals.

    raises
    - UnknownArgumentError as soon as a token names an undeclared option; no
      partial result is returned.
    """
    tokens = list(tokens)
    longs, shorts = _index(descriptors)

    occurrences = []
    positionals = None

    index = start
    while index < len(tokens):
        token = tokens[index]
        position = index - start + 1

        if positionals is not None:
            positionals.append(token)
        elif token == "--":
            positionals = []
        elif token.startswith("--"):
            name = token[2:]
            try:
                descriptor = longs[name]
            except KeyError:
                raise _unknown(token, token, position, ("--" + key for key in longs)) from None
            value, taken = _payload(descriptor, tokens, index)
            occurrences.append(Occurrence(name, value))
            index += taken
        elif token.startswith("-") and token != "-":
            cluster = token[1:]
            for offset, char in enumerate(cluster):
                try:
                    descriptor = shorts[char]
                except KeyError:
                    raise _unknown("-" + char, token, position, ("-" + key for key in shorts)) from None
                if offset < len(cluster) - 1:
                    occurrences.append(Occurrence(char, ""))
                    continue
                value, taken = _payload(descriptor, tokens, index)
                occurrences.append(Occurrence(char, value))
                index += taken
        else:
            positionals = [token]

        index += 1

    for occurrence in occurrences:
        logger.debug("[%s] => %r", occurrence.key, occurrence.value)
    logger.debug("positionals => %r", positionals)

    return ResolvedArguments(occurrences, positionals)


__all__ = (
    "Occurrence",
    "ResolvedArguments",
    "resolve",
)
