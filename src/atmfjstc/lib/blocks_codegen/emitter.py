"""
The core of the code generator: walks a block tree and asks each block's handler to render it.
"""

import logging

from typing import Dict, Iterable, List, Optional, Union

from atmfjstc.lib.blocks_codegen.blocks import Block, BlockDocument
from atmfjstc.lib.blocks_codegen.code_text import prefix_lines, inject_id, normalize_whitespace
from atmfjstc.lib.blocks_codegen.errors import UnsupportedBlockError, InvalidHandlerResultError
from atmfjstc.lib.blocks_codegen.EmitterOptions import EmitterOptions
from atmfjstc.lib.blocks_codegen.names import NameScope
from atmfjstc.lib.blocks_codegen.order import Order, Fragment, embed, needs_parens
from atmfjstc.lib.blocks_codegen.registry import GeneratorRegistry, registry as default_registry

import atmfjstc.lib.blocks_codegen.generators  # noqa: F401 (registers the standard blocks)


LOG = logging.getLogger(__name__)


class FragmentEmitter:
    """
    Generates code for the blocks of a single program.

    An emitter owns the state of one generation pass: the `NameScope` used for allocating identifiers, the table of
    definitions (``use`` lines etc.) the program will need, and the variables that must be declared at the top. Block
    handlers receive the emitter and use its methods for rendering their children.

    Don't create your own instances of this; `CodeGenerator.generate` makes a fresh one for each program.
    """

    registry: GeneratorRegistry = None
    options: EmitterOptions = None
    scope: NameScope = None

    _definitions: Dict[str, str] = None
    _mutable_variables: Dict[str, None] = None

    def __init__(self, registry: GeneratorRegistry, options: EmitterOptions, scope: NameScope):
        self.registry = registry
        self.options = options
        self.scope = scope

        self._definitions = dict()
        self._mutable_variables = dict()

    def emit(self, block: Block, required_order: Optional[Order] = None) -> Union[Fragment, str]:
        """
        Generates the code for a block.

        Args:
            block: The block to render
            required_order: For blocks in an expression position, the loosest order the position accepts. The
                returned fragment is parenthesized if needed. Leave as None for blocks in statement position.

        Returns:
            For value blocks, a `Fragment`. For statement blocks, a string of newline-terminated lines.
        """
        handler = self.registry.lookup(block.type)
        if handler is None:
            raise UnsupportedBlockError(
                f"Don't know how to generate code for block type {block.type!r}", block.type, block.id
            )

        result = handler(block, self)

        if isinstance(result, Fragment):
            if required_order is None:
                return result

            if needs_parens(result, required_order):
                return Fragment(embed(result, required_order), Order.ATOMIC)

            return result

        if not isinstance(result, str):
            raise InvalidHandlerResultError(
                f"Handler returned {result.__class__.__name__} instead of a fragment or statement code",
                block.type, block.id
            )

        if required_order is not None:
            raise InvalidHandlerResultError(
                "Statement block used where a value is expected", block.type, block.id
            )

        if self.options.statement_prefix is not None:
            result = inject_id(self.options.statement_prefix, block.id) + result

        return result

    def value_fragment(self, block: Block, name: str) -> Optional[Fragment]:
        """
        Generates the code for the block connected to a value slot, as a raw fragment.

        Returns None if nothing is connected to the slot (or the connected block is disabled).
        """
        target = block.value_input(name)
        if (target is None) or not target.enabled:
            return None

        result = self.emit(target)
        if not isinstance(result, Fragment):
            raise InvalidHandlerResultError(
                f"Statement block connected to value input {name!r}", target.type, target.id
            )

        return result

    def value_to_code(self, block: Block, name: str, order: Order) -> str:
        """
        Generates the code for the block connected to a value slot, parenthesized as needed for a position that
        accepts at most `order`.

        Returns an empty string if nothing is connected. Handlers are expected to substitute their own default in
        this case, e.g. ``emitter.value_to_code(block, 'TIMES', Order.ASSIGNMENT) or '0'``.
        """
        fragment = self.value_fragment(block, name)

        return '' if fragment is None else embed(fragment, order)

    def statements_to_code(self, blocks: Iterable[Block]) -> str:
        """
        Generates the code for a sequence of statement blocks (unindented).
        """
        parts = []

        for target in blocks:
            if not target.enabled:
                continue

            code = self.emit(target)
            if isinstance(code, Fragment):
                raise InvalidHandlerResultError(
                    "Value block used where a statement is expected", target.type, target.id
                )

            parts.append(code)

        return ''.join(parts)

    def statement_to_code(self, block: Block, name: str) -> str:
        """
        Generates the code for the blocks connected to a statement slot, indented by one level.
        """
        return prefix_lines(self.statements_to_code(block.statement_input(name)), self.options.indent)

    def add_loop_trap(self, branch: str, block: Block) -> str:
        """
        Adds the configured loop trap (if any) at the top of a loop body.
        """
        if self.options.loop_trap is not None:
            branch = prefix_lines(inject_id(self.options.loop_trap, block.id), self.options.indent) + branch

        return branch

    def loop_body(self, block: Block, name: str) -> str:
        """
        Generates the body of a loop, i.e. the indented code for a statement slot with the loop trap applied.

        All loop handlers should use this, so that the loop trap is applied uniformly.
        """
        return self.add_loop_trap(self.statement_to_code(block, name), block)

    def fresh_name(self, base_name: str) -> str:
        """
        Allocates a new identifier for a temporary variable. Never returns the same identifier twice in a pass.
        """
        return self.scope.fresh(base_name)

    def variable_name(self, name: str) -> str:
        """
        Returns the identifier for a user variable.
        """
        return self.scope.declare(name)

    def declare_variable(self, name: str) -> str:
        """
        Returns the identifier for a user variable and ensures it will be declared (as mutable) at the top of the
        program.
        """
        identifier = self.variable_name(name)
        self._mutable_variables[identifier] = None

        return identifier

    def provide_definition(self, key: str, code: str) -> str:
        """
        Ensures that a definition (``use`` line, helper function etc.) is emitted at the top of the program.

        Only the first definition registered for a given key is kept.
        """
        return self._definitions.setdefault(key, code)

    def scrub_naked_value(self, code: str) -> str:
        """
        Turns an expression at the top level of the program into a statement.
        """
        return code + ';\n'

    def finish(self, code: str) -> str:
        """
        Assembles the final program: definitions, then variable declarations, then the code.
        """
        header_parts = list(self._definitions.values())

        if len(self._mutable_variables) > 0:
            header_parts.append(''.join(
                f"let mut {identifier} = Default::default();\n" for identifier in self._mutable_variables
            ))

        header = '\n'.join(part if part.endswith('\n') else part + '\n' for part in header_parts)

        return normalize_whitespace(header + ('\n' if header != '' else '') + code)


class CodeGenerator:
    """
    Generates Rust code for complete block programs.

    A generator holds only configuration, so the same object can be reused for any number of programs (even
    concurrently). Each call to `generate` works with its own `FragmentEmitter`.
    """

    registry: GeneratorRegistry = None
    options: EmitterOptions = None

    def __init__(self, registry: Optional[GeneratorRegistry] = None, options: Optional[EmitterOptions] = None):
        self.registry = registry if registry is not None else default_registry
        self.options = options if options is not None else EmitterOptions()

    def new_emitter(self) -> FragmentEmitter:
        return FragmentEmitter(self.registry, self.options, NameScope(self.options.reserved_words))

    def generate(
        self, program: Union[BlockDocument, Block, Iterable[Block]], variables: Iterable[str] = ()
    ) -> str:
        """
        Generates the code for a program.

        Args:
            program: A `BlockDocument`, a single top-level block, or an iterable of top-level blocks
            variables: The names of any variables declared in the workspace (in addition to those in the document)

        Returns:
            The program text.
        """
        if isinstance(program, BlockDocument):
            top_blocks = program.blocks
            variables = tuple(program.variables) + tuple(variables)
        elif isinstance(program, Block):
            top_blocks = (program,)
        else:
            top_blocks = tuple(program)

        emitter = self.new_emitter()

        # Reserve all the user's names before any temporary gets allocated
        emitter.scope.declare_all(variables)
        emitter.scope.declare_all(self._iter_variable_names(top_blocks))

        LOG.debug("Generating code for %d top-level block(s)", len(top_blocks))

        parts = []
        for top_block in top_blocks:
            parts.append(self._top_level_code(emitter, top_block))

        code = emitter.finish('\n'.join(part for part in parts if part != ''))

        LOG.debug("Generated %d line(s) of code", code.count('\n'))

        return code

    def _top_level_code(self, emitter: FragmentEmitter, top_block: Block) -> str:
        result = ''

        if top_block.enabled:
            result = emitter.emit(top_block)
            if isinstance(result, Fragment):
                return emitter.scrub_naked_value(result.code)

        # A top-level statement block is the head of a chain, which continues even past a disabled block
        if top_block.next_block is not None:
            result += emitter.statements_to_code(top_block.next_block.iter_chain())

        return result

    def _iter_variable_names(self, top_blocks: Iterable[Block]) -> Iterable[str]:
        for top_block in top_blocks:
            for block in top_block.iter_subtree():
                for field_name in self.registry.variable_fields(block.type):
                    value = block.get_field_value(field_name)
                    if value is not None:
                        yield str(value)


def generate_code(
    program: Union[BlockDocument, Block, Iterable[Block]], options: Optional[EmitterOptions] = None,
    registry: Optional[GeneratorRegistry] = None
) -> str:
    """
    Convenience function for generating code with a one-off `CodeGenerator`.
    """
    return CodeGenerator(registry=registry, options=options).generate(program)
