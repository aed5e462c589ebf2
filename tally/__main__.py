"""CLI entry point for the Tally interpreter.

Usage:
    python -m tally [-v|-vv|-vvv] [--engine ENGINE] [--max-iterations N] <program_file>
    python -m tally [-v...] -e '<source>'
    python -m tally [-v...] --emit-ast <program_file>
    python -m tally [-v...] --ast <ast_json_file>

Options:
  -v                Increase debug verbosity (can be repeated)
  -e, --eval        Run the given source text instead of a file
  --emit-ast        Parse the given .tally file and emit an AST JSON file
  --ast             Execute a previously emitted AST JSON file
  --engine          Parser front end: descent (default) or lark
  --max-iterations  Abort when while loops run more than N iterations in total

The value of the program is printed unless it produced no value. Debug
information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast_json import ast_to_obj, ast_from_obj
from .errors import TallyError
from .interpreter import Interpreter
from .parser import ENGINES, parse_program
from .types import NO_VALUE, to_string


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program, args) -> None:
    interpreter = Interpreter(debug_level=args.v, debug_file='debug.txt',
                              max_iterations=args.max_iterations)
    try:
        result = interpreter.run(program)
    except TallyError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if result is not NO_VALUE:
        print(to_string(result))


def parse_or_exit(source: str, engine: str):
    try:
        return parse_program(source, engine=engine)
    except TallyError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Tally language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--engine', choices=ENGINES, default='descent', help='parser front end')
    parser.add_argument('--max-iterations', type=int, default=None, metavar='N',
                        help='abort after N while-loop iterations')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-e', '--eval', metavar='SOURCE', help='run SOURCE instead of a program file')
    group.add_argument('--emit-ast', metavar='TALLY_FILE', help='emit AST JSON for the given .tally file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Tally program file (.tally) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = parse_or_exit(read_source(program_file), args.engine)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        try:
            with open(ast_path, 'r', encoding='utf-8') as f:
                program = ast_from_obj(json.load(f))
        except (ValueError, KeyError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        execute(program, args)
        return

    if args.eval is not None:
        execute(parse_or_exit(args.eval, args.engine), args)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use -e/--emit-ast/--ast')
    source = read_source(Path(args.program))
    execute(parse_or_exit(source, args.engine), args)


if __name__ == '__main__':
    main()
