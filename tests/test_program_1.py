from pathlib import Path

from loxide.interpreter import Interpreter
from loxide.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1_hello_world(capsys):
    source = (EXAMPLES / 'program_1.lox').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'
