"""
Generating Rust for loop blocks.

Loops are not translated literally. Where the block semantics would have a bound re-evaluated on each iteration, or
the direction of a numeric range is only known at runtime, the handlers lower the loop into some preparatory
statements (binding fresh temporaries) followed by a plain Rust ``for``/``while`` loop.

Note that a Rust ``for`` evaluates its iterator expression exactly once, on entry. All the preparatory statements run
before that point, so the range sees their final values and nothing done in the loop body can change the bounds or
step of a loop that has already started.
"""

import logging

from atmfjstc.lib.blocks_codegen.blocks import is_number, is_trivial, number_literal, parse_number
from atmfjstc.lib.blocks_codegen.errors import InvalidFieldValueError, UnsupportedValueError
from atmfjstc.lib.blocks_codegen.order import Order, embed, negate, Fragment
from atmfjstc.lib.blocks_codegen.registry import registry


LOG = logging.getLogger(__name__)


RANGE_HELPER_USE = 'use num::range_step_inclusive;'


def field_number_code(value) -> str:
    """
    Code for a number typed directly into a block field. Text that is not a number is passed through as an
    expression.
    """
    try:
        return number_literal(value)
    except ValueError:
        return str(value).strip()


@registry.register('controls_repeat_ext', 'controls_repeat')
def _repeat(block, emitter):
    # Repeat n times
    if block.has_field('TIMES'):
        repeats = field_number_code(block.get_field_value('TIMES'))
    else:
        repeats = emitter.value_to_code(block, 'TIMES', Order.NONE) or '0'

    loop_var = emitter.fresh_name('count')
    branch = emitter.loop_body(block, 'DO')

    code = ''

    end_var = repeats
    if not is_trivial(repeats):
        end_var = emitter.fresh_name('repeat_end')
        code += f"let {end_var} = {repeats};\n"
        LOG.debug("Hoisted repeat count of block %r into %r", block.id, end_var)

    code += f"for {loop_var} in 0..{end_var} {{\n" + branch + "}\n"

    return code


@registry.register('controls_whileUntil')
def _while_until(block, emitter):
    until = block.get_field_value('MODE') == 'UNTIL'

    condition = emitter.value_fragment(block, 'BOOL') or Fragment('false', Order.ATOMIC)
    branch = emitter.loop_body(block, 'DO')

    condition_code = negate(condition) if until else embed(condition, Order.NONE)

    return f"while {condition_code} {{\n" + branch + "}\n"


@registry.register('controls_for', variable_fields=('VAR',))
def _for(block, emitter):
    variable = emitter.variable_name(block.get_field_value('VAR', ''))

    start = emitter.value_to_code(block, 'FROM', Order.NONE) or '0'
    end = emitter.value_to_code(block, 'TO', Order.NONE) or '0'
    increment_fragment = emitter.value_fragment(block, 'BY')
    increment = '1' if increment_fragment is None else embed(increment_fragment, Order.ASSIGNMENT)

    # Rust ranges only iterate over integers
    for code in (start, end, increment):
        if is_number(code) and not parse_number(code).is_integer():
            raise UnsupportedValueError(
                f"Counting loops only support whole numbers, got {code.strip()}", block.type, block.id
            )

    branch = emitter.loop_body(block, 'DO')

    # A zero step cannot be expressed with step_by(), so it goes through the runtime path
    if is_number(start) and is_number(end) and is_number(increment) and parse_number(increment) != 0:
        return f"for {variable} in {_literal_range(start, end, increment)} {{\n" + branch + "}\n"

    LOG.debug("Range of block %r is not literal, direction will be determined at runtime", block.id)

    code = ''

    # Cache non-trivial values to variables to prevent repeated evaluation
    start_var = start
    if not is_trivial(start):
        start_var = emitter.fresh_name(variable + '_start')
        code += f"let {start_var} = {start};\n"

    end_var = end
    if not is_trivial(end):
        end_var = emitter.fresh_name(variable + '_end')
        code += f"let {end_var} = {end};\n"

    # The direction can only be determined at runtime, once, before the loop starts
    inc_var = emitter.fresh_name(variable + '_inc')
    if is_number(increment):
        code += f"let mut {inc_var} = {number_literal(abs(parse_number(increment)))};\n"
    else:
        code += f"let mut {inc_var} = {embed(increment_fragment, Order.UNARY_POSTFIX)}.abs();\n"

    code += f"if {start_var} > {end_var} {{\n"
    code += emitter.options.indent + f"{inc_var} = -{inc_var};\n"
    code += "}\n"

    emitter.provide_definition('range_step_inclusive', RANGE_HELPER_USE)

    code += f"for {variable} in range_step_inclusive({start_var}, {end_var}, {inc_var}) {{\n" + branch + "}\n"

    return code


def _literal_range(start: str, end: str, increment: str) -> str:
    step = abs(parse_number(increment))
    step_code = number_literal(step)

    if parse_number(start) <= parse_number(end):
        code = f"{start}..={end}"
        if step != 1:
            code = f"({code}).step_by({step_code})"
    else:
        code = f"({end}..={start}).rev()"
        if step != 1:
            code += f".step_by({step_code})"

    return code


@registry.register('controls_forEach', variable_fields=('VAR',))
def _for_each(block, emitter):
    variable = emitter.variable_name(block.get_field_value('VAR', ''))
    collection = emitter.value_to_code(block, 'LIST', Order.ASSIGNMENT) or '[]'
    branch = emitter.loop_body(block, 'DO')

    return f"for {variable} in {collection} {{\n" + branch + "}\n"


@registry.register('controls_flow_statements')
def _flow_statements(block, emitter):
    flow = block.get_field_value('FLOW')

    if flow == 'BREAK':
        return 'break;\n'
    if flow == 'CONTINUE':
        return 'continue;\n'

    raise InvalidFieldValueError(f"Unknown flow statement: {flow!r}", block.type, block.id)
