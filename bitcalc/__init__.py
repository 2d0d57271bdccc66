# bitcalc package
# This package provides a 16-bit unsigned integer calculator with bitwise operators.
from .errors import CalcError, LexError, ParseError, EvalError
from .lexer import tokenize, untokenize
from .parser import reorder, parse, parse_source
from .grammar import parse_with_grammar
from .context import Context
from .evaluator import evaluate
from .session import Session, repl

__all__ = [
    'CalcError',
    'LexError',
    'ParseError',
    'EvalError',
    'tokenize',
    'untokenize',
    'reorder',
    'parse',
    'parse_source',
    'parse_with_grammar',
    'Context',
    'evaluate',
    'Session',
    'repl',
]
