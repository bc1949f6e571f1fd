"""
Generating Rust for the Mynewt device blocks (event handlers, timing and GPIO).
"""

from atmfjstc.lib.blocks_codegen.errors import InvalidFieldValueError
from atmfjstc.lib.blocks_codegen.generators.loops import field_number_code
from atmfjstc.lib.blocks_codegen.order import Order, Fragment
from atmfjstc.lib.blocks_codegen.registry import registry


def _required_field(block, name: str) -> str:
    value = block.get_field_value(name)
    if value is None or value == '':
        raise InvalidFieldValueError(f"Field {name!r} must be set", block.type, block.id)

    return str(value)


@registry.register('on_start')
def _on_start(block, emitter):
    branch = emitter.statement_to_code(block, 'STMTS')

    return 'fn on_start() {\n' + branch + '}\n'


@registry.register('forever')
def _forever(block, emitter):
    branch = emitter.loop_body(block, 'STMTS')

    return 'loop {\n' + branch + '}\n'


@registry.register('wait')
def _wait(block, _emitter):
    duration = field_number_code(block.get_field_value('DURATION', 0))

    return f"time::delay_secs({duration});\n"


@registry.register('digital_toggle_pin')
def _toggle_pin(block, _emitter):
    return f"gpio::toggle({_required_field(block, 'PIN')});\n"


@registry.register('digital_write_pin')
def _write_pin(block, _emitter):
    return f"gpio::write({_required_field(block, 'PIN')}, {_required_field(block, 'VALUE')});\n"


@registry.register('digital_read_pin')
def _read_pin(block, _emitter):
    return Fragment(f"gpio::read({_required_field(block, 'PIN')})", Order.UNARY_POSTFIX)
