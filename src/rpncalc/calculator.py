from collections import deque
from threading import Lock
import operator
import math

from .util import NotFound, Insufficient, Invalid, OutOfMemory, reraise


def _divide(left, right):
    '''
    IEEE-754 division. Python raises on a zero divisor; we don't.
    '''
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        # Sign of the infinity is the XOR of the operand signs, so -0.0
        # counts as negative.
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Calculator:
    '''
    Floating point stack machine (RPN calculator).

    One independent LIFO stack, guarded by its own lock. Every public method
    takes the lock for its whole duration, so calls on one calculator are
    serialized, and calls on different calculators never wait on each other.

    Instances are created and owned by a Registry; reach them through their
    handle rather than constructing them directly.
    '''

    # Binary arithmetic operators on the two topmost items.
    OPERATORS = {
        '+': operator.__add__,
        '-': operator.__sub__,
        '*': operator.__mul__,
        '/': _divide,
    }

    def __init__(self, handle):
        '''
        Create empty stack machine.

        :param handle: Registry-assigned identifier.
        '''
        self.handle = handle
        self.stack = deque()
        self.lock = Lock()
        self.released = False

    def __repr__(self):
        return '<{} handle={}>'.format(type(self).__name__, self.handle)

    def _check_live(self):
        # Lock must be held.
        if self.released:
            raise NotFound('No calculator with handle {}'.format(self.handle))

    @reraise((TypeError, ValueError, OverflowError), Invalid,
             'Cannot convert {1!r}')
    def _iconvert(self, value):
        '''
        Convert pushed value to internal representation.
        '''
        return float(value)

    def _pshstack(self, value):
        '''
        Push onto stack. Lock must be held.
        '''
        self.stack.append(value)

    def _popstack(self, n=1):
        '''
        Pop specified number of items from stack, topmost first.

        All or nothing: nothing is popped if there aren't enough.
        Lock must be held.
        '''
        if len(self.stack) < n:
            raise Insufficient('Less than {} element(s) on stack'.format(n))
        return [self.stack.pop() for _ in range(n)]

    @reraise(MemoryError, OutOfMemory, 'Cannot push {1!r}')
    def push(self, value):
        '''
        Push value on top of the stack.
        '''
        value = self._iconvert(value)
        with self.lock:
            self._check_live()
            self._pshstack(value)

    def pop(self):
        '''
        Pop and return the value on top of the stack.
        '''
        with self.lock:
            self._check_live()
            return self._popstack()[0]

    @reraise(MemoryError, OutOfMemory, 'Cannot apply {1!r}')
    def apply(self, symbol):
        '''
        Apply binary operator to the two topmost values, push the result.

        Returns the result, which is the new top of the stack. Operands are
        the top (right hand side) and the one beneath it (left hand side), so
        3 5 - is -2.
        '''
        try:
            f = type(self).OPERATORS[symbol]
        except (KeyError, TypeError):
            raise Invalid('No such operator {!r}'.format(symbol)) from None
        with self.lock:
            self._check_live()
            right, left = self._popstack(2)
            result = f(left, right)
            try:
                self._pshstack(result)
            except MemoryError:
                self.stack.extend((left, right))
                raise
            return result

    def size(self):
        '''
        Return number of values on the stack.
        '''
        with self.lock:
            self._check_live()
            return len(self.stack)

    def at(self, index):
        '''
        Return value index places down from the top, without popping it.
        '''
        try:
            index = operator.index(index)
        except TypeError:
            raise Invalid('Bad index {!r}'.format(index)) from None
        with self.lock:
            self._check_live()
            if not 0 <= index < len(self.stack):
                raise Invalid('Index {} out of range for stack of {}'
                              .format(index, len(self.stack)))
            # Top of stack is the right end.
            return self.stack[-1 - index]

    def release(self):
        '''
        Drop all stack entries, and refuse any further operation.

        Called by the owning Registry once the handle has been unlinked.
        Anyone still holding a reference from before then gets NotFound.
        '''
        with self.lock:
            self.released = True
            self.stack.clear()
