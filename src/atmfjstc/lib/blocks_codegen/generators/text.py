"""
Generating Rust for text blocks.
"""

from atmfjstc.lib.blocks_codegen.code_text import quote_string
from atmfjstc.lib.blocks_codegen.order import Order, Fragment
from atmfjstc.lib.blocks_codegen.registry import registry


@registry.register('text')
def _text(block, _emitter):
    return Fragment(quote_string(str(block.get_field_value('TEXT', ''))), Order.ATOMIC)
