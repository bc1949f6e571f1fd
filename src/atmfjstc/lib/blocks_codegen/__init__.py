"""
Generates Rust source code from visual block programs (as edited in a Blockly-style editor).

Overview
--------

A block program is a tree of typed blocks, each with named *value* slots (holding expression blocks) and *statement*
slots (holding sequences of statement blocks). For every block type there is a handler that renders the block to code,
recursively asking the emitter for the code of its children and gluing it together with the appropriate syntax.

Two problems make this more than simple string concatenation:

- Expressions must compose without missing (or redundant) parentheses. To this end, every expression is returned as a
  `Fragment`, i.e. the code plus the `Order` (precedence) of its outermost operator. The parent states the loosest
  order it accepts at each position, and the child gets parenthesized only if it binds looser than that. For instance,
  a subtraction placed in the right operand of another subtraction gets parentheses, while a multiplication does not.

- Some blocks cannot be translated literally. A "repeat N times" block whose count is an arbitrary expression must not
  re-evaluate it on every iteration, and a "count from A to B by C" block whose bounds are only known at runtime needs
  its direction determined before the loop starts. The loop handlers lower these into preparatory statements that bind
  fresh temporaries. Temporaries are allocated through a per-program `NameScope` that guarantees they never collide
  with each other or with the user's variables.

Usage
-----

::

    from atmfjstc.lib.blocks_codegen import CodeGenerator, EmitterOptions, load_document_file

    generator = CodeGenerator(options=EmitterOptions(indent='  '))
    print(generator.generate(load_document_file('program.json')))

Custom block types can be supported by registering handlers into a copy of the default registry::

    from atmfjstc.lib.blocks_codegen.registry import registry

    my_registry = registry.copy()

    @my_registry.register('beep')
    def _(block, emitter):
        return 'buzzer::beep();\\n'

    CodeGenerator(registry=my_registry).generate(...)
"""

from atmfjstc.lib.blocks_codegen.blocks import Block, BlockDocument
from atmfjstc.lib.blocks_codegen.document import load_document, load_document_file
from atmfjstc.lib.blocks_codegen.emitter import CodeGenerator, FragmentEmitter, generate_code
from atmfjstc.lib.blocks_codegen.EmitterOptions import EmitterOptions
from atmfjstc.lib.blocks_codegen.errors import GenerationError, UnsupportedBlockError, InvalidFieldValueError, \
    UnsupportedValueError
from atmfjstc.lib.blocks_codegen.names import NameScope
from atmfjstc.lib.blocks_codegen.order import Order, Fragment
from atmfjstc.lib.blocks_codegen.registry import GeneratorRegistry


__version__ = '1.0.0'
