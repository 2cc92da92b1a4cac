from os import isatty
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging
import sys

from prompt_toolkit import PromptSession

from .util import RPNError
from .registry import Registry
from .session import Session
from .lexer import Lexer


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt, rprompt=None):
        self.prompt = prompt
        self.rprompt = rprompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=None,
                                    # Selected calculator, re-evaluated on
                                    # every prompt
                                    rprompt=self.rprompt,
                                    prompt_continuation=' ' * len(self.prompt),
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to a registry of RPN calculators.
    '''

    DEFAULT_PROMPT = '> '
    LOG_FORMAT = '%(name)s: %(levelname)s: %(message)s'

    def dumper(self):
        '''
        Dump all lexemes matches.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                matched = match.group(0)  # the lexeme text itself
                groups = lexer.matchedgroups(match)
                print(*groups.keys(),
                      repr(matched),
                      sep='\t')

    def executor(self):
        '''
        Run lines against a fresh registry of calculators.
        '''
        lexer = Lexer()
        with Registry() as registry:
            self.session = Session(registry, precision=self.args.precision)
            if self._interactive():
                self.args.expressions.rprompt = self._rprompt
            for line in self.args.expressions:
                try:
                    for match in lexer.lex(line):
                        if lexer.isfeedable(match):
                            self.session.feed(lexer.matchedgroups(match))
                # Abort entire rest of line, makes sense anyway
                except RPNError as e:
                    logger.debug('Failed on %r', line, exc_info=True)
                    print(e.args[0], file=sys.stderr)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _rprompt(self):
        return '#{}'.format(self.session.handle)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='RPN calculators')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='debug logging')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          default=Session.DEFAULT_PRECISION,
                                          help='round output to this many '
                                               'decimal places')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG
                                  if self.args.verbose
                                  else logging.WARNING,
                            format=self.LOG_FORMAT)
        # Only the executor reads its input
        if self.args.expressions is stdin and \
           self.args.action == self.executor:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
