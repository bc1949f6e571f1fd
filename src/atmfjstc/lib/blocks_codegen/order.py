"""
Precedence-tagged code fragments.

Every expression emitted by a block handler is returned as a `Fragment`, i.e. the code text together with the `Order`
of its outermost operator. When a fragment is embedded in a parent expression, the parent states the loosest order it
can accept at that position, and the fragment gets parenthesized only if it binds looser than that.

Orders follow the Rust operator table, from the tightest binding (`ATOMIC`) to the loosest (`NONE`)::

    ATOMIC          literals, identifiers, parenthesized and macro-bracketed code
    UNARY_POSTFIX   method calls, field access, indexing, `?`
    UNARY_PREFIX    -x, !x, *x, &x
    CAST            x as T
    MULTIPLICATIVE  * / %
    ADDITIVE        + -
    SHIFT           << >>
    BITWISE_AND     &
    BITWISE_XOR     ^
    BITWISE_OR      |
    RELATIONAL      == != < > <= >=
    LOGICAL_AND     &&
    LOGICAL_OR      ||
    RANGE           .. ..=
    ASSIGNMENT      = += -= etc.
    NONE            anything (statement position, function arguments, etc.)
"""

from enum import IntEnum
from typing import NamedTuple


class Order(IntEnum):
    ATOMIC = 0
    UNARY_POSTFIX = 1
    UNARY_PREFIX = 2
    CAST = 3
    MULTIPLICATIVE = 4
    ADDITIVE = 5
    SHIFT = 6
    BITWISE_AND = 7
    BITWISE_XOR = 8
    BITWISE_OR = 9
    RELATIONAL = 10
    LOGICAL_AND = 11
    LOGICAL_OR = 12
    RANGE = 13
    ASSIGNMENT = 14
    NONE = 99

    def tighter(self) -> 'Order':
        """
        Returns the order that binds immediately tighter than this one (or ATOMIC, if this is already the tightest).

        Useful for the right-hand side of non-associative operators, e.g. in ``a - (b - c)`` the right operand of the
        subtraction must bind tighter than ADDITIVE.
        """
        if self == Order.NONE:
            return Order.ASSIGNMENT

        return Order(max(self.value - 1, Order.ATOMIC.value))


class Fragment(NamedTuple):
    """A bit of generated expression code, tagged with the order of its outermost operator."""
    code: str
    order: Order


def needs_parens(fragment: Fragment, required_order: Order) -> bool:
    """
    Checks whether a fragment must be parenthesized when placed in a position that accepts at most `required_order`.
    """
    return fragment.order > required_order


def embed(fragment: Fragment, required_order: Order) -> str:
    """
    Returns the code for a fragment as it should appear in a position accepting at most `required_order`.

    Parentheses are added if and only if the fragment binds strictly looser than the position allows.
    """
    if needs_parens(fragment, required_order):
        return '(' + fragment.code + ')'

    return fragment.code


def negate(fragment: Fragment) -> str:
    """
    Returns the logical negation of a boolean fragment, as code.

    A fragment that is itself a prefix negation (e.g. ``!done``) is un-negated instead of getting a second ``!``, so
    negating twice never produces ``!!done``.
    """
    if (fragment.order == Order.UNARY_PREFIX) and fragment.code.startswith('!') \
            and not fragment.code.startswith('!='):
        return fragment.code[1:]

    return '!' + embed(fragment, Order.UNARY_PREFIX)
