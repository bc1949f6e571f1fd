"""
Generating Rust for app blocks, i.e. the CoAP message payload and its widgets.

The payload is assembled by the ``app!`` macro, e.g.::

    app!( @json {
        "device": &device_id,
        "temperature": temp,
    })
"""

import re

from atmfjstc.lib.blocks_codegen.code_text import prefix_lines, quote_string
from atmfjstc.lib.blocks_codegen.order import Order, Fragment
from atmfjstc.lib.blocks_codegen.registry import registry


_ITEM_INPUT_RE = re.compile(r'^ADD(\d+)$')


def _count_items(block) -> int:
    count = block.extra_state.get('itemCount')
    if count is not None:
        return int(count)

    indexes = [int(match.group(1)) for match in map(_ITEM_INPUT_RE.match, block.inputs) if match is not None]

    return 1 + max(indexes) if len(indexes) > 0 else 0


@registry.register('app')
def _app(block, emitter):
    elements = [
        emitter.value_to_code(block, f"ADD{i}", Order.NONE) or "''"
        for i in range(_count_items(block))
    ]

    code = '\n'.join([
        'app!( @json {',
        prefix_lines(',\n'.join(elements), emitter.options.indent),
        '})',
    ])

    return Fragment(code, Order.UNARY_POSTFIX)


@registry.register('field', 'label', 'button')
def _widget(block, emitter):
    # Each widget is a "name": value pair inside the payload
    name = quote_string(str(block.get_field_value('NAME', '')))
    value = emitter.value_to_code(block, 'name', Order.ATOMIC)

    return Fragment(f"{name}: {value}", Order.NONE)
