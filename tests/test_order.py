import unittest

from atmfjstc.lib.blocks_codegen.order import Order, Fragment, embed, negate, needs_parens

from block_builders import new_emitter, arith, compare, logic_op, negation, num, var, expr


class EmbedTest(unittest.TestCase):
    def test_looser_child_gets_parens(self):
        self.assertEqual(embed(Fragment('a + b', Order.ADDITIVE), Order.MULTIPLICATIVE), '(a + b)')

    def test_same_order_no_parens(self):
        self.assertEqual(embed(Fragment('a + b', Order.ADDITIVE), Order.ADDITIVE), 'a + b')

    def test_tighter_child_no_parens(self):
        self.assertEqual(embed(Fragment('a * b', Order.MULTIPLICATIVE), Order.ADDITIVE), 'a * b')

    def test_anything_goes_in_none_position(self):
        self.assertFalse(needs_parens(Fragment('x = y', Order.ASSIGNMENT), Order.NONE))

    def test_atomic_in_atomic_position(self):
        self.assertEqual(embed(Fragment('x', Order.ATOMIC), Order.ATOMIC), 'x')

    def test_tighter(self):
        self.assertEqual(Order.ADDITIVE.tighter(), Order.MULTIPLICATIVE)
        self.assertEqual(Order.ATOMIC.tighter(), Order.ATOMIC)
        self.assertEqual(Order.NONE.tighter(), Order.ASSIGNMENT)


class NegateTest(unittest.TestCase):
    def test_atomic(self):
        self.assertEqual(negate(Fragment('done', Order.ATOMIC)), '!done')

    def test_looser_expression_is_wrapped(self):
        self.assertEqual(negate(Fragment('a && b', Order.LOGICAL_AND)), '!(a && b)')

    def test_already_negated_is_not_negated_twice(self):
        self.assertEqual(negate(Fragment('!done', Order.UNARY_PREFIX)), 'done')

    def test_arithmetic_negation_is_not_mistaken_for_logical(self):
        self.assertEqual(negate(Fragment('-x', Order.UNARY_PREFIX)), '!-x')


class ExpressionCompositionTest(unittest.TestCase):
    def _code(self, block):
        return new_emitter().emit(block).code

    def test_right_nested_subtraction(self):
        self.assertEqual(self._code(arith('MINUS', var('a'), arith('MINUS', var('b'), var('c')))), 'a - (b - c)')

    def test_left_nested_subtraction(self):
        self.assertEqual(self._code(arith('MINUS', arith('MINUS', var('a'), var('b')), var('c'))), 'a - b - c')

    def test_sum_inside_product(self):
        self.assertEqual(self._code(arith('MULTIPLY', arith('ADD', var('a'), var('b')), var('c'))), '(a + b) * c')

    def test_product_inside_sum(self):
        self.assertEqual(self._code(arith('ADD', arith('MULTIPLY', var('a'), var('b')), var('c'))), 'a * b + c')

    def test_power_of_negative_number(self):
        self.assertEqual(self._code(arith('POWER', num(-2), num(3))), '(-2).pow(3)')

    def test_power_of_call(self):
        self.assertEqual(self._code(arith('POWER', expr('f()', 'UNARY_POSTFIX'), num(2))), 'f().pow(2)')

    def test_missing_operands_default_to_zero(self):
        self.assertEqual(self._code(arith('DIVIDE')), '0 / 0')

    def test_comparisons_do_not_chain(self):
        self.assertEqual(
            self._code(compare('EQ', compare('LT', var('a'), var('b')), var('t'))),
            '(a < b) == t'
        )

    def test_arithmetic_inside_comparison(self):
        self.assertEqual(self._code(compare('GTE', arith('ADD', var('a'), var('b')), num(3))), 'a + b >= 3')

    def test_or_inside_and(self):
        self.assertEqual(
            self._code(logic_op('AND', logic_op('OR', var('a'), var('b')), var('c'))),
            '(a || b) && c'
        )

    def test_and_inside_or(self):
        self.assertEqual(
            self._code(logic_op('OR', logic_op('AND', var('a'), var('b')), var('c'))),
            'a && b || c'
        )

    def test_negated_comparison(self):
        self.assertEqual(self._code(negation(compare('NEQ', var('a'), num(1)))), '!(a != 1)')

    def test_fragment_order_is_reported(self):
        fragment = new_emitter().emit(arith('ADD', var('a'), var('b')))
        self.assertEqual(fragment, Fragment('a + b', Order.ADDITIVE))

    def test_emit_with_required_order_parenthesizes(self):
        fragment = new_emitter().emit(arith('ADD', var('a'), var('b')), Order.MULTIPLICATIVE)
        self.assertEqual(fragment, Fragment('(a + b)', Order.ATOMIC))

    def test_emit_with_required_order_keeps_tight_fragments(self):
        fragment = new_emitter().emit(arith('MULTIPLY', var('a'), var('b')), Order.ADDITIVE)
        self.assertEqual(fragment, Fragment('a * b', Order.MULTIPLICATIVE))
