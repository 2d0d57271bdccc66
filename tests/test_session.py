import io

import pytest

from bitcalc.errors import EvalError, LexError
from bitcalc.session import BANNER, Session, as_binary_string, format_result, repl


def test_as_binary_string():
    assert as_binary_string(0) == '0' * 16
    assert as_binary_string(5) == '0000000000000101'
    assert as_binary_string(65535) == '1' * 16
    assert format_result(20) == '0000000000010100 (20)'


def test_session_keeps_variables():
    with Session() as session:
        assert session.execute('let x = 5') == 5
        assert session.execute('x + 1') == 6


def test_sessions_do_not_share_variables():
    first = Session()
    second = Session()
    first.execute('let x = 1')
    with pytest.raises(EvalError):
        second.execute('x')


def test_grammar_session():
    with Session(use_grammar=True) as session:
        session.execute('let mask = 255 << 8')
        assert session.execute('mask | 7') == 65287


def test_close_clears_context():
    session = Session()
    session.execute('let x = 5')
    session.close()
    assert len(session.context) == 0


def test_errors_propagate():
    with Session() as session:
        with pytest.raises(LexError):
            session.execute('1 < 2')


def test_no_debug_file_by_default(tmp_path):
    path = tmp_path / 'debug.txt'
    with Session(debug_file=str(path)) as session:
        session.execute('1 + 1')
    assert not path.exists()


def test_debug_log(tmp_path):
    path = tmp_path / 'debug.txt'
    with Session(debug_level=3, debug_file=str(path)) as session:
        session.execute('let x = (1 + 2) * 3')
        with pytest.raises(EvalError):
            session.execute('y')
    lines = path.read_text(encoding='utf-8').splitlines()
    assert 'input: let x = (1 + 2) * 3' in lines
    assert 'prefix: * + 1 2 3' in lines
    assert 'tree: (let x (* (+ 1 2) 3))' in lines
    assert 'bind x = 9' in lines
    assert 'result: 9' in lines
    assert "error: Variable 'y' not found." in lines


def test_debug_level_one_skips_details(tmp_path):
    path = tmp_path / 'debug.txt'
    with Session(debug_level=1, debug_file=str(path)) as session:
        session.execute('2 * 3')
    text = path.read_text(encoding='utf-8')
    assert 'result: 6' in text
    assert 'prefix:' not in text
    assert 'tree:' not in text


def test_repl():
    stdin = io.StringIO('let x = 5\nx + 1\ny\n\n1 <\nexit\n1\n')
    stdout = io.StringIO()
    repl(Session(), stdin, stdout)
    out = stdout.getvalue()
    assert out.startswith(BANNER)
    assert '$ 0000000000000101 (5)\n' in out
    assert '$ 0000000000000110 (6)\n' in out
    assert "$ Error: Variable 'y' not found.\n" in out
    assert "Error: error while lexing '<'" in out
    # nothing after 'exit' runs
    assert '(1)' not in out


def test_repl_stops_at_end_of_input():
    stdout = io.StringIO()
    repl(Session(), io.StringIO('7 ^ 2'), stdout)
    assert '0000000000000101 (5)' in stdout.getvalue()


@pytest.mark.parametrize('line', ['1' + ' + 1' * 5000, '!' * 5000 + '0'])
def test_repl_survives_deep_nesting(line):
    stdout = io.StringIO()
    repl(Session(), io.StringIO(line + '\n2\nexit\n'), stdout)
    out = stdout.getvalue()
    assert 'Error: expression nested too deeply' in out
    assert '0000000000000010 (2)' in out
