'''
RPN calculators.

Any number of independent stack calculators, each known by an integer handle,
all safe to use from several threads at once. Push floats, apply + - * /, and
look at the stack, one calculator never affecting another.

The core is Registry, which hands out handles and owns the calculators, and
Calculator, the stack machine itself. Session, Lexer, and CLI are a small text
front end on top.
'''

from .cli import CLI
from .lexer import Lexer
from .session import Session
from .registry import Registry
from .calculator import Calculator
from .util import RPNError, NotFound, Insufficient, Invalid, OutOfMemory


__all__ = 'Registry', 'Calculator', 'Session', 'Lexer', 'CLI', \
          'RPNError', 'NotFound', 'Insufficient', 'Invalid', 'OutOfMemory'
