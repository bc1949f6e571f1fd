"""
Generating Rust for variable blocks.

Variables that are assigned anywhere in the program are declared once, at the top, with an inferred type.
"""

from atmfjstc.lib.blocks_codegen.order import Order, Fragment
from atmfjstc.lib.blocks_codegen.registry import registry


@registry.register('variables_get', variable_fields=('VAR',))
def _get(block, emitter):
    return Fragment(emitter.variable_name(block.get_field_value('VAR', '')), Order.ATOMIC)


@registry.register('variables_set', variable_fields=('VAR',))
def _set(block, emitter):
    argument0 = emitter.value_to_code(block, 'VALUE', Order.ASSIGNMENT) or '0'
    variable = emitter.declare_variable(block.get_field_value('VAR', ''))

    return f"{variable} = {argument0};\n"
