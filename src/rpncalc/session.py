import sys

from .calculator import Calculator
from .util import reraise, Invalid


class Session:
    '''
    Feeds lexemes to calculators in a registry.

    Remembers which calculator is selected; numbers, operators, and commands
    all act on that one. Talks to the registry only through its handle based
    operations.
    '''

    DEFAULT_PRECISION = None

    def __init__(self, registry, precision=None, out=None):
        '''
        Create session, with a fresh calculator selected.

        :param registry: Registry to create calculators in.
        :param precision: Decimal places to round printed values to.
        :param out: Where to print to, stdout if None.
        '''
        self.registry = registry
        self.precision = (type(self).DEFAULT_PRECISION
                          if precision is None
                          else precision)
        self.out = out
        self.handle = registry.new()

    def feed(self, groups):
        '''
        Push number, select handle, or run operator or command.

        :param groups: Matched groups of one lexeme, from Lexer.matchedgroups.
        '''
        if 'number' in groups:
            self.registry.push(self.handle, self._iconvert(groups['number']))
        elif 'handle' in groups:
            self.handle = int(groups['__handle__'])
        elif 'operator' in groups:
            self.registry.op(self.handle, groups['operator'])
        elif 'command' in groups:
            type(self).COMMANDS[groups['command']](self)

    @reraise(ValueError, Invalid, 'Cannot convert {1}')
    def _iconvert(self, number):
        '''
        Convert number lexeme to float.
        '''
        return float(number.replace('_', ''))

    def _round(self, n):
        '''
        Round number to precision, if set.
        '''
        if self.precision is None:
            return n
        else:
            return round(n, self.precision)

    def print(self, *args, **kwargs):
        return print(*[self._round(arg) for arg in args],
                     file=self.out,
                     **kwargs)

    def newcalc(self):
        '''
        Create a new calculator, select it, and print its handle.
        '''
        self.handle = self.registry.new()
        print(self.handle, file=self.out)

    def delcalc(self):
        '''
        Delete selected calculator.
        '''
        handle, self.handle = self.handle, None
        self.registry.delete(handle)

    def printtop(self):
        '''
        Print the element on the top of the stack.
        '''
        self.print(self.registry.at(self.handle, 0))

    def popstack(self):
        '''
        Pop and print element at top of stack.
        '''
        self.print(self.registry.pop(self.handle))

    def printstack(self):
        '''
        Print all elements on the stack, top of the stack first.
        '''
        size = self.registry.size(self.handle)
        if not size:
            return
        self.print(*[self.registry.at(self.handle, i) for i in range(size)],
                   sep='\n')

    def printsize(self):
        '''
        Print number of elements on the stack.
        '''
        print(self.registry.size(self.handle), file=self.out)

    def printhelp(self):
        '''
        Print all possible commands.
        '''
        print('operators:', *sorted(Calculator.OPERATORS), file=sys.stderr)
        print('commands:', *sorted(type(self).COMMANDS), file=sys.stderr)
        print('handles: #<n>', file=sys.stderr)

    # Language mapping to registry operations.
    COMMANDS = {
        'n': newcalc,
        'x': delcalc,
        'p': printtop,
        'P': popstack,
        'f': printstack,
        'z': printsize,
        'h': printhelp,
    }
