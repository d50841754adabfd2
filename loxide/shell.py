"""Interactive mode for the loxide interpreter. Uses cmd as backend."""

import cmd
import sys

from .errors import LoxideError
from .grammar import parse_with_grammar
from .interpreter import Interpreter
from .parser import parse
from .scanner import scan


class Shell(cmd.Cmd):
    """loxide REPL. Every line is scanned, parsed and run on one interpreter."""
    intro = "loxide interactive interpreter\nType a declaration such as 'x = 1 + 2;' or 'print x;'. Ctrl-D exits."
    prompt = "> "

    def __init__(self, interpreter: Interpreter, use_grammar: bool = False, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter
        self.use_grammar = use_grammar

    def onecmd(self, line):
        # no command words: only the EOF sentinel from cmdloop is special
        if line == 'EOF':
            return self.do_EOF('')
        if not line.strip():
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Runs an arbitrary line of source."""
        try:
            tokens = scan(line)
            program = parse_with_grammar(tokens) if self.use_grammar else parse(tokens)
            self.interpreter.run(program)
        except LoxideError as e:
            # a bad line does not end the session
            print(f"Error: {e}", file=sys.stderr)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True
