'''
Stack machine tests
'''

from collections import deque
import math

from rpncalc.calculator import Calculator
from rpncalc.util import NotFound, Insufficient, Invalid, OutOfMemory

from pytest import raises, mark


def filled(*values):
    calc = Calculator(0)
    for value in values:
        calc.push(value)
    return calc


def contents(calc):
    return [calc.at(i) for i in range(calc.size())]


def test_empty():
    calc = Calculator(7)
    assert calc.handle == 7
    assert calc.size() == 0


def test_push_pop_inverse():
    calc = filled(1, 2)
    calc.push(4.25)
    assert calc.size() == 3
    assert calc.pop() == 4.25
    assert calc.size() == 2


def test_push_converts_to_float():
    calc = filled(3, '2.5')
    assert contents(calc) == [2.5, 3.0]
    assert all(type(value) is float for value in contents(calc))


@mark.parametrize('value', ['three', None, [1], 10 ** 400])
def test_push_unconvertible(value):
    calc = filled(1)
    with raises(Invalid, match='Cannot convert'):
        calc.push(value)
    assert contents(calc) == [1]


def test_at_ordering():
    calc = filled(1, 2, 3)
    assert calc.at(0) == 3
    assert calc.at(1) == 2
    assert calc.at(2) == 1
    with raises(Invalid):
        calc.at(3)
    assert calc.size() == 3


@mark.parametrize('index', [-1, 1, 'zero', 0.0])
def test_at_invalid(index):
    calc = filled(5)
    with raises(Invalid):
        calc.at(index)


def test_pop_empty():
    calc = Calculator(0)
    with raises(Insufficient, match='Less than 1'):
        calc.pop()
    assert calc.size() == 0


@mark.parametrize('symbol, expected', [
    ('+', 8),
    ('-', -2),
    ('*', 15),
    ('/', 0.6),
])
def test_apply_order(symbol, expected):
    calc = filled(3, 5)
    assert calc.apply(symbol) == expected
    assert contents(calc) == [expected]


def test_apply_leaves_rest_of_stack():
    calc = filled(10, 2, 3)
    assert calc.apply('*') == 6
    assert contents(calc) == [6, 10]
    assert calc.apply('-') == 4
    assert contents(calc) == [4]


@mark.parametrize('values', [(), (1,)])
def test_apply_insufficient(values):
    calc = filled(*values)
    with raises(Insufficient, match='Less than 2'):
        calc.apply('+')
    assert contents(calc) == list(reversed(values))


@mark.parametrize('symbol', ['%', '', '++', None, 43])
def test_apply_invalid_is_noop(symbol):
    calc = filled(1, 2)
    with raises(Invalid, match='No such operator'):
        calc.apply(symbol)
    assert contents(calc) == [2, 1]
    assert not calc.lock.locked()


def test_apply_invalid_checked_before_size():
    calc = Calculator(0)
    with raises(Invalid):
        calc.apply('%')


@mark.parametrize('left, right, expected', [
    (1, 0, math.inf),
    (-1, 0, -math.inf),
    (1, -0.0, -math.inf),
    (-1, -0.0, math.inf),
])
def test_divide_by_zero(left, right, expected):
    calc = filled(left, right)
    assert calc.apply('/') == expected
    assert calc.at(0) == expected


@mark.parametrize('left', [0, -0.0, math.nan])
def test_divide_zero_by_zero(left):
    calc = filled(left, 0)
    assert math.isnan(calc.apply('/'))


def test_overflow_is_infinite():
    calc = filled(1e308, 10)
    assert calc.apply('*') == math.inf


class FullDeque(deque):
    def append(self, value):
        raise MemoryError


def test_push_out_of_memory():
    calc = filled(1)
    calc.stack = FullDeque(calc.stack)
    with raises(OutOfMemory, match='Cannot push 2'):
        calc.push(2)
    assert contents(calc) == [1]
    assert not calc.lock.locked()


def test_apply_out_of_memory_restores_operands():
    calc = filled(1, 2)
    calc.stack = FullDeque(calc.stack)
    with raises(OutOfMemory, match="Cannot apply '\\+'"):
        calc.apply('+')
    assert contents(calc) == [2, 1]


def test_released():
    calc = filled(1, 2)
    calc.release()
    assert not calc.stack
    for call in [calc.size, calc.pop, lambda: calc.push(1),
                 lambda: calc.apply('+'), lambda: calc.at(0)]:
        with raises(NotFound, match='No calculator with handle 0'):
            call()
    assert not calc.lock.locked()
