"""CLI entry point for the loxide interpreter.

Usage:
    python -m loxide [-v|-vv|-vvv] [--parser descent|lark] [program_file [args...]]
    python -m loxide [-v...] --emit-ast <program_file>
    python -m loxide [-v...] --ast <ast_json_file> [args...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --parser      Parser used for source input: the hand-written recursive
                descent parser (default) or the Lark grammar
  --emit-ast    Parse the given source file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file the interpreter starts an interactive session.
Extra arguments after the program are bound as ARG0, ARG1, ... with ARGC
holding their count. Debug information is written to `debug.txt` in the
current directory when verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .environment import Environment
from .errors import LoxideError
from .grammar import parse_with_grammar
from .interpreter import Interpreter
from .parser import parse
from .scanner import scan
from .shell import Shell


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_source(source: str, parser_name: str) -> Program:
    tokens = scan(source)
    if parser_name == 'lark':
        return parse_with_grammar(tokens)
    return parse(tokens)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='loxide', description="loxide language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--parser', choices=['descent', 'lark'], default='descent',
                        help='parser used for source input (default: descent)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given source file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file to execute; omit for interactive mode')
    parser.add_argument('args', nargs=argparse.REMAINDER, help='arguments exposed to the program as ARG0, ARG1, ...')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            program = parse_source(source, args.parser)
        except LoxideError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # With --ast every positional is a script argument
    script_args = list(args.args)
    if args.ast and args.program is not None:
        script_args.insert(0, args.program)
    interpreter = Interpreter(Environment.seeded(script_args), debug_level=args.v)

    with interpreter:
        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                sys.exit(1)
            with open(ast_path, 'r', encoding='utf-8') as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    print(f"Error: invalid AST JSON in {ast_path}: {e}", file=sys.stderr)
                    sys.exit(1)
            try:
                interpreter.run(ast_from_obj(data))
            except LoxideError as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)
            return

        # Interactive mode
        if not args.program:
            Shell(interpreter, use_grammar=args.parser == 'lark').cmdloop()
            return

        source = read_source(Path(args.program))
        try:
            interpreter.run(parse_source(source, args.parser))
        except LoxideError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    main()
