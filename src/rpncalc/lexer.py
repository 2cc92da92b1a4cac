from functools import reduce
import operator

import regex

from .util import RPNError
from .calculator import Calculator
from .session import Session


def _alternatives(symbols):
    return r'(?:' + r'|'.join(map(regex.escape, symbols)) + r')'


class Lexer:
    '''
    Lexer for the calculator front end's *regular* grammar.

    Holds no internal state; the grammar is all class attributes.
    '''
    # Integral part of a number
    INTEGRAL = r'''
                (?:
                    # 1, 12, 1234, or the 1 in 1_200.
                    \d+
                    (?:
                        # Thousands separators
                        _\d{3}
                    )*
                )
                '''
    # Fractional part of a number
    FRACTIONAL = r'''
                  (?:
                      # 5, 25, or 200_2 in 0.200_2
                      \d+
                      (?:
                          _\d+
                      )*
                  )
                  '''
    EXPONENT = r'''
                (?:
                    [eE]
                    [+-]?
                    \d+
                )
                '''
    # Number, of any kind supported by grammar. No sign; 0 5 - for -5.
    NUMBER = r'''
              (?:
                  (?:
                      # 1, 1_200, 1_200. (notice trailing dot), 1.3
                      {INTEGRAL}
                      (?:
                          \.
                          {FRACTIONAL}?
                      )?
                  )|(?:
                      # .2, 0.2, 0.200_2
                      {INTEGRAL}?
                      \.
                      {FRACTIONAL}
                  )
              )
              # 1e3, 2.5E-4
              {EXPONENT}?
              '''.format(INTEGRAL=INTEGRAL,
                         FRACTIONAL=FRACTIONAL,
                         EXPONENT=EXPONENT)
    # Calculator selection, e.g. #3
    HANDLE = r'''
              \#
              (?<__handle__>
                  \d+
              )
              '''

    assert not [symbol
                for symbol
                in list(Calculator.OPERATORS) + list(Session.COMMANDS)
                if len(symbol) != 1]
    assert not Calculator.OPERATORS.keys() & Session.COMMANDS.keys()
    OPERATOR = _alternatives(Calculator.OPERATORS)
    COMMAND = _alternatives(Session.COMMANDS)
    SPACE = r'\s+'

    # Immediate, as in immediately complete lexeme
    IMMEDIATE = r'(?<operator>' + OPERATOR + r')|' \
                r'(?<command>' + COMMAND + r')|' \
                r'(?<space>' + SPACE + r')'
    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<handle>' + HANDLE + r')|' \
             r'(?<immediate>' + IMMEDIATE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Doesn't yield incomplete or incorrect lexemes, raising on first bad.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise RPNError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme can be fed to a session.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return matched groups of lexeme, by name.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value and key != 'immediate'}
