import re
from typing import Dict, Iterable, List

from .types import LiteralValue, Nil, Number, String

_NUMERIC_ARGUMENT = re.compile(r'-?\d+(\.\d+)?')


class Environment:
    """The single flat variable store of a run.

    There is no parent chain: blocks execute against the same mapping as
    the code around them. Resolving a name that was never assigned gives
    `Nil` instead of failing, and assigning a new name declares it.
    """
    def __init__(self, values: Dict[str, LiteralValue] = None):
        self.values: Dict[str, LiteralValue] = dict(values or {})

    @classmethod
    def seeded(cls, arguments: Iterable[str] = ()) -> 'Environment':
        """Environment pre-populated with host bindings.

        `VERSION` holds the package version, `ARGC` the number of script
        arguments and `ARG0`, `ARG1`, ... each argument, as a Number when
        it reads like one and as a String otherwise.
        """
        from . import __version__

        env = cls()
        env.assign('VERSION', String(__version__))
        arguments = list(arguments)
        env.assign('ARGC', Number(len(arguments)))
        for index, argument in enumerate(arguments):
            env.assign(f'ARG{index}', coerce_argument(argument))
        return env

    def resolve(self, name: str) -> LiteralValue:
        return self.values.get(name, Nil())

    def assign(self, name: str, value: LiteralValue):
        self.values[name] = value

    def names(self) -> List[str]:
        return list(self.values.keys())

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __repr__(self) -> str:
        return f"Environment({self.values!r})"


def coerce_argument(argument: str) -> LiteralValue:
    if _NUMERIC_ARGUMENT.fullmatch(argument):
        return Number(float(argument))
    return String(argument)
