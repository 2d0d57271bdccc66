"""Calculator sessions and the interactive loop.

A :class:`Session` owns the variable :class:`Context` for as long as the
user keeps typing, and runs each line through the pipeline
tokenize -> parse -> evaluate. :func:`repl` is the read loop around it.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .ast import Program
from .context import Context
from .errors import CalcError
from .evaluator import Evaluator
from .grammar import parse_with_grammar
from .lexer import WORD_BITS, tokenize, untokenize
from .parser import Parser

BANNER = (
    "Welcome to the bitshift calculator.\n"
    "Numbers are displayed as 16-bit unsigned integers.\n"
    "Assign to variables like so: 'let x = 15'.\n"
    "Type 'exit' when you're done."
)
PROMPT = '$ '
EXIT_COMMAND = 'exit'


def as_binary_string(value: int) -> str:
    """Produce the string of 1s and 0s representing this number in binary."""
    return format(value, f'0{WORD_BITS}b')


def format_result(value: int) -> str:
    return f"{as_binary_string(value)} ({value})"


class Session:
    """One calculator session: a context plus the pipeline that feeds it."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', use_grammar: bool = False):
        self.context = Context()
        self.evaluator = Evaluator(debug_level=debug_level, debug_file=debug_file)
        self.use_grammar = use_grammar

    @property
    def debug_level(self) -> int:
        return self.evaluator.debug_level

    def debug(self, msg: str):
        self.evaluator.debug(msg)

    def parse(self, line: str) -> Program:
        if self.use_grammar:
            program = parse_with_grammar(line)
        else:
            tokens = tokenize(line)
            if self.debug_level >= 2:
                self.debug(f"tokens: {tokens!r}")
            parser = Parser(tokens)
            program = parser.parse()
            if self.debug_level >= 2:
                self.debug(f"prefix: {untokenize(parser.prefix)}")
        if self.debug_level >= 3:
            try:
                text = str(program)
            except RecursionError:
                text = "<nested too deeply to show>"
            self.debug(f"tree: {text}")
        return program

    def run(self, program: Program) -> int:
        return self.evaluator.run(self.context, program)

    def execute(self, line: str) -> int:
        """Run one line of input against this session's context."""
        self.debug(f"input: {line}")
        try:
            value = self.run(self.parse(line))
        except CalcError as e:
            self.debug(f"error: {e.message}")
            raise
        self.debug(f"result: {value}")
        return value

    def close(self):
        self.context.clear()
        self.evaluator.close()

    def __enter__(self) -> 'Session':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def repl(session: Session, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
    """Read lines until 'exit' or end of input, printing each result."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    print(BANNER, file=stdout)
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            # End of input
            stdout.write('\n')
            break
        line = line.strip()
        if line == EXIT_COMMAND:
            break
        if not line:
            continue
        try:
            value = session.execute(line)
        except CalcError as e:
            print(f"Error: {e.message}", file=stdout)
            continue
        print(format_result(value), file=stdout)
