"""
Central point for registering the functions that generate code for each block type.

A handler receives the block and the `FragmentEmitter` for the current pass, and returns either:

- A `Fragment` (code + order), for blocks that produce a value
- A string, for statement blocks. The string should consist of complete lines, each terminated by a newline.

To register a handler, use::

    @registry.register('my_block_type')
    def _(block, emitter):
        ...generator code here...

Several type tags can share the same handler by listing them all in the `register` call.
"""

from typing import Any, Callable, Dict, Iterable, NamedTuple, Optional, Tuple, Union

from atmfjstc.lib.blocks_codegen.order import Fragment


Handler = Callable[[Any, Any], Union[Fragment, str]]


class RegistryEntry(NamedTuple):
    handler: Handler
    variable_fields: Tuple[str, ...] = ()


class DuplicateGeneratorError(ValueError):
    block_type = None

    def __init__(self, block_type: str):
        super().__init__(f"A generator is already registered for block type {block_type!r}")
        self.block_type = block_type


class GeneratorRegistry:
    """
    Maps block type tags to the handlers that generate code for them.

    Registration is checked: each type tag can only be registered once.
    """

    _entries: Dict[str, RegistryEntry] = None

    def __init__(self):
        self._entries = dict()

    def register(self, *block_types: str, variable_fields: Iterable[str] = ()) -> Callable[[Handler], Handler]:
        """
        Decorator for registering a handler for one or more block types.

        Args:
            block_types: The type tags the handler is responsible for
            variable_fields: The names of the fields that hold user variable names for these blocks (e.g. the loop
                variable of a for loop). The generator reserves these names before any temporaries are allocated.
        """
        if len(block_types) == 0:
            raise ValueError("At least one block type must be specified")

        variable_fields = tuple(variable_fields)

        def _decorator(handler: Handler) -> Handler:
            for block_type in block_types:
                self.add(block_type, handler, variable_fields)

            return handler

        return _decorator

    def add(self, block_type: str, handler: Handler, variable_fields: Tuple[str, ...] = ()):
        if block_type in self._entries:
            raise DuplicateGeneratorError(block_type)

        self._entries[block_type] = RegistryEntry(handler=handler, variable_fields=tuple(variable_fields))

    def lookup(self, block_type: str) -> Optional[Handler]:
        entry = self._entries.get(block_type)
        return None if entry is None else entry.handler

    def variable_fields(self, block_type: str) -> Tuple[str, ...]:
        entry = self._entries.get(block_type)
        return () if entry is None else entry.variable_fields

    def block_types(self) -> Tuple[str, ...]:
        return tuple(sorted(self._entries.keys()))

    def copy(self) -> 'GeneratorRegistry':
        """
        Returns an independent copy of this registry, e.g. for adding custom block types without affecting the
        default registry.
        """
        result = GeneratorRegistry()
        result._entries = dict(self._entries)

        return result

    def __contains__(self, block_type: str) -> bool:
        return block_type in self._entries

    def __len__(self) -> int:
        return len(self._entries)


registry = GeneratorRegistry()
"""The default registry. Importing `atmfjstc.lib.blocks_codegen.generators` populates it with the standard blocks."""
