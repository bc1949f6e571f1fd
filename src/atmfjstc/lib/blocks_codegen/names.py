import re
import logging

from typing import Dict, Iterable, Set


LOG = logging.getLogger(__name__)


RUST_RESERVED_WORDS = frozenset((
    # Strict keywords
    'as', 'async', 'await', 'break', 'const', 'continue', 'crate', 'dyn', 'else', 'enum', 'extern', 'false', 'fn',
    'for', 'if', 'impl', 'in', 'let', 'loop', 'match', 'mod', 'move', 'mut', 'pub', 'ref', 'return', 'self', 'Self',
    'static', 'struct', 'super', 'trait', 'true', 'type', 'unsafe', 'use', 'where', 'while',
    # Reserved for future use
    'abstract', 'become', 'box', 'do', 'final', 'macro', 'override', 'priv', 'try', 'typeof', 'unsized', 'virtual',
    'yield',
    # Names used by the generated code itself
    'app', 'gpio', 'time', 'num', 'range_step_inclusive', 'on_start',
    # Not an identifier, only a pattern
    '_',
))
"""Identifiers that are never handed out as variable names."""


_UNSAFE_CHARS_RE = re.compile(r'[^\w]', re.ASCII)


def safe_name(name: str) -> str:
    """
    Converts an arbitrary string (e.g. a variable name typed by the user in the editor) into a legal identifier.
    """
    if name == '':
        return 'unnamed'

    name = _UNSAFE_CHARS_RE.sub('_', name.replace(' ', '_'))
    if name[0].isdigit():
        name = 'my_' + name

    return name


class NameScope:
    """
    Hands out identifiers for one code generation pass, guaranteeing that no two different requests are ever given
    the same identifier.

    There are two kinds of requests:

    - `declare` is for user variables: asking twice for the same variable name gives the same identifier
    - `fresh` is for temporaries synthesized by the generator: every call mints a new identifier, by appending a
      numeric suffix to the base name if needed (``count``, ``count2``, ``count3``, ...)

    A scope must not be shared between passes (or between concurrent passes). Create a new one for each program.
    """

    _reserved: Set[str] = None
    _taken: Set[str] = None
    _variables: Dict[str, str] = None

    def __init__(self, reserved_words: Iterable[str] = ()):
        self._reserved = set(RUST_RESERVED_WORDS) | set(reserved_words)
        self._taken = set()
        self._variables = dict()

    def declare(self, name: str) -> str:
        """
        Returns the identifier for a user variable, allocating it on the first request.
        """
        identifier = self._variables.get(name)
        if identifier is None:
            identifier = self.fresh(name)
            self._variables[name] = identifier

        return identifier

    def declare_all(self, names: Iterable[str]) -> 'NameScope':
        for name in names:
            self.declare(name)

        return self

    def fresh(self, base_name: str) -> str:
        """
        Mints a new identifier based on `base_name`, distinct from every identifier handed out so far.
        """
        base = safe_name(base_name)

        candidate = base
        index = 1
        while (candidate in self._taken) or (candidate in self._reserved):
            index += 1
            candidate = f"{base}{index}"

        self._taken.add(candidate)
        LOG.debug("Allocated name %r for %r", candidate, base_name)

        return candidate

    def is_taken(self, identifier: str) -> bool:
        return identifier in self._taken

    @property
    def declared_variables(self) -> Dict[str, str]:
        """A copy of the mapping from user variable names to identifiers"""
        return dict(self._variables)
