## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass

from .types import Cell, Name, Stack, Memory, Word, to_cell
from .errors import ForthMalformedDefinition
from .parser import parse_literal, token_meta
from .formatting import format_stack


@dataclass(frozen=True)
class MachineConfig:
    max_depth: int | None = None
    cell_bits: int = 16
    max_call_depth: int = 1024
    ignore_case: bool = False


class Machine:
    """Execution context owning the data stack, memory, dictionary and current compile state.

    Everything a word can touch goes through one instance of this, passed explicitly into operators.
    """

    def __init__(self, dictionary, config: MachineConfig | None = None, echo=None):
        self.config = config or MachineConfig()
        self.dictionary = dictionary
        self.stack = Stack(max_depth=self.config.max_depth)
        self.memory = Memory()
        self.pending = None         # Definition being compiled, or None while interpreting.
        self.loops: list[list[Cell]] = []   # Control stack of [index, limit] for running DO loops.
        self.tokens = None          # Token stream currently being interpreted.
        self.filename = None
        self.output: list[str] = []
        self.echo = echo

    @property
    def compiling(self) -> bool:
        return self.pending is not None

    def cell(self, value: int) -> Cell:
        return to_cell(value, self.config.cell_bits)

    def normalize(self, name: str) -> str:
        return name.upper() if self.config.ignore_case else str(name)

    def write(self, text: str) -> None:
        self.output.append(text)
        if self.echo is not None:
            self.echo.write(text)
            self.echo.flush()

    def next_name(self, word: str) -> Name:
        """Read the name following a defining word from the input stream."""
        token = next(self.tokens, None) if self.tokens is not None else None
        if token is None:
            raise ForthMalformedDefinition(f"`{word}` must be followed by a name, but input ended.", forth_token=word)
        if parse_literal(token) is not None or getattr(token, 'type', 'WORD') != 'WORD':
            raise ForthMalformedDefinition(f"`{word}` cannot define a word named `{token}`.",
                                           forth_token=str(token), forth_meta=token_meta(token, self.filename))
        return Name(self.normalize(token))

    def define(self, kind, name: str, body, meta=None) -> Word:
        word = Word(kind, name, body, meta)
        self.dictionary.add_word(word)
        return word

    def reset(self) -> None:
        """Forget transient execution state after a fatal error, keeping stack, memory and dictionary."""
        self.pending = None
        self.loops.clear()
        self.tokens = None

    def snapshot(self) -> str:
        return format_stack(self.stack)
