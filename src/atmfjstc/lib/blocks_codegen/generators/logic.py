"""
Generating Rust for logic blocks.
"""

import re

from atmfjstc.lib.blocks_codegen.errors import InvalidFieldValueError
from atmfjstc.lib.blocks_codegen.order import Order, Fragment
from atmfjstc.lib.blocks_codegen.registry import registry


_IF_INPUT_RE = re.compile(r'^IF(\d+)$')

_COMPARISON_OPERATORS = {
    'EQ': '==',
    'NEQ': '!=',
    'LT': '<',
    'LTE': '<=',
    'GT': '>',
    'GTE': '>=',
}

_LOGICAL_OPERATORS = {
    'AND': ('&&', Order.LOGICAL_AND),
    'OR': ('||', Order.LOGICAL_OR),
}


def _count_if_branches(block) -> int:
    count = 1 + int(block.extra_state.get('elseIfCount', 0))

    for name in block.inputs:
        match = _IF_INPUT_RE.match(name)
        if match is not None:
            count = max(count, int(match.group(1)) + 1)

    return count


@registry.register('controls_if')
def _if(block, emitter):
    code = ''

    for n in range(_count_if_branches(block)):
        condition = emitter.value_to_code(block, f"IF{n}", Order.NONE) or 'false'
        branch = emitter.statement_to_code(block, f"DO{n}")

        code += (' else ' if n > 0 else '') + f"if {condition} {{\n" + branch + '}'

    if block.extra_state.get('hasElse', False) or ('ELSE' in block.inputs):
        code += ' else {\n' + emitter.statement_to_code(block, 'ELSE') + '}'

    return code + '\n'


@registry.register('logic_compare')
def _compare(block, emitter):
    op = block.get_field_value('OP')

    operator = _COMPARISON_OPERATORS.get(op)
    if operator is None:
        raise InvalidFieldValueError(f"Unknown comparison operator: {op!r}", block.type, block.id)

    # Comparisons are non-associative in Rust, so a nested comparison on either side needs parens
    operand_order = Order.RELATIONAL.tighter()

    argument0 = emitter.value_to_code(block, 'A', operand_order) or '0'
    argument1 = emitter.value_to_code(block, 'B', operand_order) or '0'

    return Fragment(f"{argument0} {operator} {argument1}", Order.RELATIONAL)


@registry.register('logic_operation')
def _operation(block, emitter):
    op = block.get_field_value('OP')

    if op not in _LOGICAL_OPERATORS:
        raise InvalidFieldValueError(f"Unknown logical operator: {op!r}", block.type, block.id)

    operator, order = _LOGICAL_OPERATORS[op]

    argument0 = emitter.value_to_code(block, 'A', order)
    argument1 = emitter.value_to_code(block, 'B', order)

    if argument0 == '' and argument1 == '':
        argument0 = argument1 = 'false'
    else:
        # Single missing arguments have no effect on the result
        default = 'true' if op == 'AND' else 'false'
        argument0 = argument0 or default
        argument1 = argument1 or default

    return Fragment(f"{argument0} {operator} {argument1}", order)


@registry.register('logic_negate')
def _negate(block, emitter):
    argument0 = emitter.value_to_code(block, 'BOOL', Order.UNARY_PREFIX) or 'true'

    return Fragment('!' + argument0, Order.UNARY_PREFIX)


@registry.register('logic_boolean')
def _boolean(block, _emitter):
    value = block.get_field_value('BOOL')

    if value not in ('TRUE', 'FALSE'):
        raise InvalidFieldValueError(f"Unknown boolean value: {value!r}", block.type, block.id)

    return Fragment('true' if value == 'TRUE' else 'false', Order.ATOMIC)
