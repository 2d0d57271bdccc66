"""Error types raised by the bitcalc pipeline.

Each stage of the pipeline raises exactly one kind of error. All of them
derive from :class:`CalcError` so that the interactive loop can report any
failure and carry on with the next line.
"""


class CalcError(Exception):
    """Base class for every error the calculator reports to the user."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LexError(CalcError):
    """Raised when the input text cannot be split into tokens."""


class ParseError(CalcError):
    """Raised when the token stream does not form a valid program."""


class EvalError(CalcError):
    """Raised when a well-formed program cannot be evaluated."""
