"""
Generating Rust for math blocks.
"""

from atmfjstc.lib.blocks_codegen.blocks import number_literal
from atmfjstc.lib.blocks_codegen.errors import InvalidFieldValueError
from atmfjstc.lib.blocks_codegen.order import Order, Fragment
from atmfjstc.lib.blocks_codegen.registry import registry


_ARITHMETIC_OPERATORS = {
    'ADD': (' + ', Order.ADDITIVE),
    'MINUS': (' - ', Order.ADDITIVE),
    'MULTIPLY': (' * ', Order.MULTIPLICATIVE),
    'DIVIDE': (' / ', Order.MULTIPLICATIVE),
}


@registry.register('math_number')
def _number(block, _emitter):
    value = block.get_field_value('NUM', 0)

    try:
        code = number_literal(value)
    except ValueError:
        # Not a number after all. Pass it through as an opaque expression.
        return Fragment(str(value).strip(), Order.NONE)

    return Fragment(code, Order.UNARY_PREFIX if code.startswith('-') else Order.ATOMIC)


@registry.register('math_arithmetic')
def _arithmetic(block, emitter):
    op = block.get_field_value('OP')

    if op == 'POWER':
        base = emitter.value_to_code(block, 'A', Order.UNARY_POSTFIX) or '0'
        exponent = emitter.value_to_code(block, 'B', Order.NONE) or '0'

        return Fragment(f"{base}.pow({exponent})", Order.UNARY_POSTFIX)

    if op not in _ARITHMETIC_OPERATORS:
        raise InvalidFieldValueError(f"Unknown arithmetic operator: {op!r}", block.type, block.id)

    operator, order = _ARITHMETIC_OPERATORS[op]

    # Left-associative: only the right operand needs parens at the same level, e.g. a - (b - c)
    argument0 = emitter.value_to_code(block, 'A', order) or '0'
    argument1 = emitter.value_to_code(block, 'B', order.tighter()) or '0'

    return Fragment(argument0 + operator + argument1, order)
