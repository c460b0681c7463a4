## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Callable, NamedTuple

from .types import Cell, Word
from .errors import ForthError
from .machine import Machine, MachineConfig
from .dictionary import Dictionary
from .builtins import load_builtins_dictionary
from .interpreter import interpret, interpret_token, execute_word


class RunResult(NamedTuple):
    stack: str                  # Snapshot after the run, bottom to top.
    output: str                 # Text written during this run, ending with the error code on failure.
    error: ForthError | None

    @property
    def ok(self) -> bool:
        return self.error is None


class Runtime:
    """Minimal runtime facade focused on embedding; one instance owns one machine for its whole life."""

    def __init__(self, config: MachineConfig | None = None, dictionary: Dictionary | None = None, echo=None):
        self.config = config or MachineConfig()
        self.machine = Machine(dictionary or load_builtins_dictionary(), self.config, echo=echo)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, source: str, filename: str | None = None, verbosity: int = 0, stats: dict | None = None) -> RunResult:
        """Execute `source`, stopping at the first fatal error and reporting it instead of raising."""
        m = self.machine
        start, error = len(m.output), None
        try:
            interpret(m, source, filename=filename, verbosity=verbosity, stats=stats)
        except ForthError as exc:
            m.reset()
            m.write(exc.code)
            error = exc
        return RunResult(m.snapshot(), ''.join(m.output[start:]), error)

    def execute(self, source: str, filename: str | None = None, verbosity: int = 0) -> list[Cell]:
        """Like `run`, but let errors propagate to the caller."""
        try:
            interpret(self.machine, source, filename=filename, verbosity=verbosity)
        except ForthError:
            self.machine.reset()
            raise
        return self.from_stack()

    def do_step(self, token: str) -> list[Cell]:
        interpret_token(self.machine, token)
        return self.from_stack()

    def apply(self, name: str, values: list[Cell]) -> list[Cell]:
        self.machine.stack.push(*values)
        execute_word(self.machine, self.machine.dictionary.get_word(self.machine.normalize(name)))
        return self.from_stack()

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable) -> Word:
        return self.machine.dictionary.add_primitive(self.machine.normalize(name), func)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def lookup(self, name: str) -> Word | None:
        return self.machine.dictionary.lookup(self.machine.normalize(name))

    def snapshot(self) -> str:
        return self.machine.snapshot()

    def from_stack(self) -> list[Cell]:
        return list(self.machine.stack)

    @property
    def output(self) -> str:
        return ''.join(self.machine.output)
