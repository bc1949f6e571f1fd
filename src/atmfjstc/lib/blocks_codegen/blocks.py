"""
The in-memory model for a visual block program.

A program is a forest of `Block` trees. Each block has a type tag, literal field values, and named inputs. An input
can be either:

- A *value* slot, holding a single child block that produces an expression
- A *statement* slot, holding an ordered sequence of statement blocks. The sequence can be given either as an explicit
  tuple/list of blocks, or (as in the editor's own serialization) as the first block of a chain linked through
  `next_block`.

The code generator only ever talks to blocks through `get_field_value`, `value_input` and `statement_input`, so any
object offering these methods (plus `type`, `id` and `enabled` attributes) can stand in for a `Block`.
"""

import re

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union, Iterable, Sequence


_NUMBER_RE = re.compile(r'^\s*-?\d+(\.\d+)?\s*$')
_SIMPLE_NAME_RE = re.compile(r'^\w+$', re.ASCII)


@dataclass(frozen=True)
class Block:
    """
    A node in a visual block program.

    Attributes:
        type: The block type tag, e.g. ``'controls_repeat_ext'``. Selects the handler used for generating code.
        id: A stable identifier for the block (used e.g. by loop traps). May be None for blocks built in code.
        fields: The literal values of the block's fields (numbers, strings, dropdown selections)
        inputs: The block's connected inputs. Each entry is either a single `Block` or a sequence of blocks.
        next_block: The next block in a statement chain, if any
        extra_state: Any extra state associated with the block shape (e.g. the number of items in a list block)
        enabled: Disabled blocks are kept in the tree but do not generate any code
    """

    type: str
    id: Optional[str] = None
    fields: Mapping[str, Any] = field(default_factory=dict)
    inputs: Mapping[str, Union['Block', Sequence['Block']]] = field(default_factory=dict)
    next_block: Optional['Block'] = None
    extra_state: Mapping[str, Any] = field(default_factory=dict)
    enabled: bool = True

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get_field_value(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def value_input(self, name: str) -> Optional['Block']:
        """
        Returns the block connected to a value slot, or None if nothing is connected.
        """
        target = self.inputs.get(name)
        if target is None or isinstance(target, Block):
            return target

        raise TypeError(f"Input '{name}' of block '{self.type}' is a statement slot, not a value slot")

    def statement_input(self, name: str) -> Tuple['Block', ...]:
        """
        Returns the sequence of blocks connected to a statement slot (empty if nothing is connected).

        Any `next_block` chains are followed, including those hanging off the elements of an explicit sequence.
        """
        target = self.inputs.get(name)
        if target is None:
            return ()
        if isinstance(target, Block):
            return tuple(target.iter_chain())

        return tuple(chained for head in target for chained in head.iter_chain())

    def iter_chain(self) -> Iterable['Block']:
        """
        Iterates through this block and all the blocks that follow it via `next_block`.
        """
        block = self
        while block is not None:
            yield block
            block = block.next_block

    def iter_subtree(self) -> Iterable['Block']:
        """
        Iterates depth-first through this block and all the blocks nested in its inputs, as well as the blocks that
        follow it in its statement chain.
        """
        yield self

        for target in self.inputs.values():
            children = (target,) if isinstance(target, Block) else target
            for child in children:
                yield from child.iter_subtree()

        if self.next_block is not None:
            yield from self.next_block.iter_subtree()


def is_number(text: Any) -> bool:
    """
    Checks whether a bit of code is a plain numeric literal, like ``12``, ``-3`` or ``0.5``.
    """
    return isinstance(text, str) and (_NUMBER_RE.match(text) is not None)


def is_trivial(code: str) -> bool:
    """
    Checks whether a bit of code is cheap and side-effect free to evaluate repeatedly (a number or a plain name).
    """
    return is_number(code) or (_SIMPLE_NAME_RE.match(code) is not None)


def number_literal(value: Union[int, float, str]) -> str:
    """
    Renders a number in canonical form, e.g. ``5.0`` -> ``'5'``, ``' 007 '`` -> ``'7'``, ``2.50`` -> ``'2.5'``.

    Raises `ValueError` if the value does not represent a number.
    """
    if isinstance(value, str):
        if not is_number(value):
            raise ValueError(f"Not a number: {value!r}")
        value = value.strip()
        value = int(value) if '.' not in value else float(value)

    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")

    if isinstance(value, int):
        return str(value)
    if float(value).is_integer():
        return str(int(value))

    return repr(float(value))


def parse_number(code: str) -> float:
    return float(code.strip())


@dataclass(frozen=True)
class BlockDocument:
    """
    A complete visual program, as edited in one workspace.

    Attributes:
        blocks: The top-level blocks (each the head of a statement chain, or a lone expression block)
        variables: The names of the variables declared in the workspace, whether or not any block uses them
    """

    blocks: Tuple[Block, ...] = ()
    variables: Tuple[str, ...] = ()

    def iter_all_blocks(self) -> Iterable[Block]:
        for block in self.blocks:
            yield from block.iter_subtree()
