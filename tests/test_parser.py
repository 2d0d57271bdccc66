import pytest

from bitcalc.ast import Assign, BinaryOp, Const, Expression, UnaryOp, Var
from bitcalc.errors import ParseError
from bitcalc.lexer import Operator, Token, TokenType, tokenize, untokenize
from bitcalc.parser import Parser, parse, parse_source


def test_parse_expression():
    program = parse_source('2 + 3 * 4')
    assert program == Expression(
        BinaryOp(Operator.PLUS, Const(2), BinaryOp(Operator.TIMES, Const(3), Const(4)))
    )


def test_parse_assignment():
    assert parse_source('let x = 5') == Assign('x', Const(5))


def test_parse_unary():
    program = parse_source('let y = !x + 1')
    assert program == Assign(
        'y', BinaryOp(Operator.PLUS, UnaryOp(Operator.BIT_NEG, Var('x')), Const(1))
    )
    assert str(program) == '(let y (+ (! x) 1))'


def test_parse_left_associative():
    assert str(parse_source('8 - 3 - 2')) == '(- (- 8 3) 2)'
    assert str(parse_source('a << 1 >> 2')) == '(>> (<< a 1) 2)'


def test_parse_takes_token_list():
    assert parse(tokenize('(x)')) == Expression(Var('x'))


def test_parser_keeps_prefix_stream():
    parser = Parser(tokenize('let z = (1 + 2) * 3'))
    parser.parse()
    assert untokenize(parser.prefix) == '* + 1 2 3'


def test_extra_token():
    with pytest.raises(ParseError, match='extra token'):
        parse_source('1 2')


def test_extra_token_after_assignment():
    with pytest.raises(ParseError, match='extra token'):
        parse_source('let x = 1 y')


def test_assignment_needs_identifier():
    with pytest.raises(ParseError, match='wanted identifier'):
        parse_source('let 5 = 1')


def test_assignment_needs_equals():
    with pytest.raises(ParseError, match="expected '='"):
        parse_source('let x 5')


def test_assignment_needs_expression():
    with pytest.raises(ParseError):
        parse_source('let x =')


def test_assignment_without_let():
    with pytest.raises(ParseError):
        parse_source('x = 5')


def test_nested_assignment():
    with pytest.raises(ParseError):
        parse_source('let x = let y = 1')


@pytest.mark.parametrize('source', ['', '1 +', '!', '()', '(1 + 2'])
def test_incomplete_input(source):
    with pytest.raises(ParseError):
        parse_source(source)


def test_bracket_in_prefix_stream():
    parser = Parser([Token(TokenType.LPAREN)])
    with pytest.raises(ParseError, match='bracket'):
        parser.parse_expr()


def test_illegal_token_in_expression():
    parser = Parser([Token(TokenType.EQUALS)])
    with pytest.raises(ParseError, match='illegal token'):
        parser.parse_expr()


@pytest.mark.parametrize('source', ['1' + ' + 1' * 5000, '!' * 5000 + '0'])
def test_deep_nesting(source):
    with pytest.raises(ParseError, match='nested too deeply'):
        parse_source(source)
