import pytest

from bitcalc.ast import Assign, Const, Expression, UnaryOp
from bitcalc.context import Context
from bitcalc.errors import EvalError
from bitcalc.evaluator import Evaluator, evaluate
from bitcalc.lexer import Operator
from bitcalc.parser import parse_source


def calc(source, context=None):
    if context is None:
        context = Context()
    return evaluate(context, parse_source(source))


@pytest.mark.parametrize('source, expected', [
    ('2 + 3 * 4', 14),
    ('(2 + 3) * 4', 20),
    ('8 - 3 - 2', 3),
    ('! 1 & 2', 2),
    ('!0', 65535),
    ('!!5', 5),
    ('6 & 3', 2),
    ('6 | 3', 7),
    ('6 ^ 3', 5),
    ('1 | 2 ^ 3 & 1', 3),
    ('1 << 15', 32768),
    ('2 << 15', 0),
    ('65535 >> 4', 4095),
    ('1 << 2 + 3', 32),
    ('7 / 2', 3),
    ('100 - 10 * 3 / 2', 85),
    ('256 * 255 + 255', 65535),
])
def test_evaluate(source, expected):
    assert calc(source) == expected


def test_every_literal_evaluates_to_itself():
    context = Context()
    for n in range(65536):
        assert calc(str(n), context) == n


def test_assignment_persists():
    context = Context()
    assert calc('let x = 5', context) == 5
    assert calc('x + 1', context) == 6
    assert context.lookup('x') == 5


def test_assignment_overwrites():
    context = Context()
    calc('let x = 5', context)
    assert calc('let x = x * 3', context) == 15
    assert context.lookup('x') == 15
    assert len(context) == 1


def test_expression_leaves_context_alone():
    context = Context()
    calc('let a = 1', context)
    calc('a + 1', context)
    assert list(context) == ['a']


def test_unbound_variable():
    with pytest.raises(EvalError, match="Variable 'y' not found."):
        calc('y')


@pytest.mark.parametrize('source, message', [
    ('1 / 0', 'division by zero'),
    ('65535 + 1', 'overflow'),
    ('256 * 256', 'overflow'),
    ('0 - 1', 'underflow'),
    ('1 << 16', 'shift'),
    ('1 >> 16', 'shift'),
])
def test_arithmetic_faults_raise(source, message):
    with pytest.raises(EvalError, match=message):
        calc(source)


def test_failed_assignment_keeps_old_value():
    context = Context()
    calc('let x = 7', context)
    with pytest.raises(EvalError):
        calc('let x = x / 0', context)
    with pytest.raises(EvalError):
        calc('let z = 1 / 0', context)
    assert context.lookup('x') == 7
    assert 'z' not in context


def test_evaluator_run():
    evaluator = Evaluator()
    assert evaluator.run(Context(), Expression(Const(9))) == 9


def test_deep_tree():
    node = Const(0)
    for _ in range(5000):
        node = UnaryOp(Operator.BIT_NEG, node)
    context = Context()
    with pytest.raises(EvalError, match='nested too deeply'):
        Evaluator().run(context, Assign('deep', node))
    assert 'deep' not in context
