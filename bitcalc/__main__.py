"""CLI entry point for the bitshift calculator.

Usage:
    python -m bitcalc [-v|-vv|-vvv] [--grammar]
    python -m bitcalc [-v...] [--grammar] <script_file>
    python -m bitcalc --emit-ast <expression>
    python -m bitcalc --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --grammar     Parse input with the Lark grammar instead of the shunting yard
  --debug-file  Where debug output goes (default: debug.txt)
  --emit-ast    Parse the given line and print its AST as JSON
  --ast         Evaluate a previously emitted AST JSON file

Without a script file the interactive calculator starts. A script file is
run line by line in a single session; blank lines and lines starting with
'#' are skipped and the first error stops the run.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import CalcError
from .session import Session, format_result, repl


def run_script(session: Session, lines) -> int:
    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        try:
            value = session.execute(line)
        except CalcError as e:
            print(f"Error on line {number}: {e.message}", file=sys.stderr)
            return 1
        print(format_result(value))
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Bitshift calculator over 16-bit unsigned integers")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--grammar', action='store_true', help='parse input with the Lark grammar')
    parser.add_argument('--debug-file', default='debug.txt', help='file that receives debug output')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='EXPRESSION', help='print the AST JSON for the given line')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='evaluate an AST from a JSON file')
    parser.add_argument('script', nargs='?', help='file of calculator lines to run')
    args = parser.parse_args(argv)

    session = Session(debug_level=args.v, debug_file=args.debug_file, use_grammar=args.grammar)
    with session:
        # Emit AST mode
        if args.emit_ast is not None:
            try:
                program = session.parse(args.emit_ast)
            except CalcError as e:
                print(f"Error: {e.message}", file=sys.stderr)
                sys.exit(1)
            print(json.dumps(ast_to_obj(program), indent=2))
            return

        # Evaluate from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                sys.exit(1)
            try:
                with open(ast_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                program = ast_from_obj(data)
                value = session.run(program)
            except (CalcError, TypeError, ValueError, KeyError, RecursionError) as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)
            print(format_result(value))
            return

        # Run a script file
        if args.script:
            script_file = Path(args.script)
            if not script_file.exists():
                print(f"Error: file {script_file} not found", file=sys.stderr)
                sys.exit(1)
            with open(script_file, 'r', encoding='utf-8') as f:
                status = run_script(session, f)
            if status:
                sys.exit(status)
            return

        # Default: interactive session
        repl(session)


if __name__ == '__main__':
    main()
