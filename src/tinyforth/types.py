## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from collections import namedtuple

from .errors import ForthStackUnderflow, ForthStackOverflow, ForthInvalidAddress


# Cells are plain Python integers, kept inside the configured width by `to_cell`.
Cell = int

TRUE: Cell = -1
FALSE: Cell = 0


def to_cell(value: int, bits: int = 16) -> Cell:
    """Wrap an arbitrary integer into a signed two's-complement cell of `bits` width."""
    mask = (1 << bits) - 1
    value &= mask
    return value - (1 << bits) if value >> (bits - 1) else value

def to_flag(condition: bool) -> Cell:
    return TRUE if condition else FALSE


class Name(str):
    """Marker for operator parameters that read the next token from the input, e.g. `VARIABLE <name>`."""
    pass

class Text(str):
    """Literal text compiled from `." ..."`, printed verbatim when executed."""
    pass


class Stack:
    """Data stack of cells, bottom at index 0.  Unbounded unless `max_depth` is given."""

    __slots__ = ('items', 'max_depth')

    def __init__(self, items=(), max_depth: int | None = None):
        self.items: list[Cell] = list(items)
        self.max_depth = max_depth

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __repr__(self):
        return "< " + " ".join(str(i) for i in self.items) + " >" if self.items else "< nil >"

    def require(self, count: int, name: str = None) -> None:
        if len(self.items) < count:
            what = f"`{name}` needs" if name else "Operation needs"
            raise ForthStackUnderflow(f"{what} at least {count} item(s) on the stack, but {len(self.items)} available.", forth_token=name)

    def push(self, *values: Cell) -> None:
        for v in values:
            if self.max_depth is not None and len(self.items) >= self.max_depth:
                raise ForthStackOverflow(f"Stack is full at maximum depth {self.max_depth}.")
            self.items.append(v)

    def pop(self) -> Cell:
        self.require(1)
        return self.items.pop()

    def peekn(self, count: int) -> list[Cell]:
        """Copy of the top `count` cells, bottom-first so they line up with operator arguments."""
        self.require(count)
        return self.items[len(self.items) - count:]

    def popn(self, count: int) -> list[Cell]:
        values = self.peekn(count)
        del self.items[len(self.items) - count:]
        return values

    def peek(self, depth: int = 0) -> Cell:
        self.require(depth + 1)
        return self.items[-1 - depth]

    def clear(self) -> None:
        self.items.clear()


class Memory:
    """Growable array of cells; the next free address only ever moves forward."""

    __slots__ = ('cells',)

    def __init__(self):
        self.cells: list[Cell] = []

    def __len__(self):
        return len(self.cells)

    @property
    def next_free(self) -> int:
        return len(self.cells)

    def allocate(self, count: int = 1) -> int:
        if count < 0:
            raise ForthInvalidAddress(f"Cannot allocate a negative number of cells ({count}).")
        address = len(self.cells)
        self.cells.extend([0] * count)
        return address

    def check(self, address: int) -> int:
        if not (0 <= address < len(self.cells)):
            raise ForthInvalidAddress(f"Address {address} is outside of allocated memory [0, {len(self.cells)}).")
        return address

    def fetch(self, address: int) -> Cell:
        return self.cells[self.check(address)]

    def store(self, address: int, value: Cell) -> None:
        self.cells[self.check(address)] = value


class Word:
    """Dictionary entry, tagged by `kind`.  The meaning of `body` depends on it:

        PRIMITIVE   wrapped operator callable, invoked with the machine.
        DEFINED     tuple of instructions (literal cells, `Word` references, `Control`, `Text`).
        VARIABLE    memory address bound to the name.
        CONSTANT    literal cell bound to the name.
    """
    PRIMITIVE = 1
    DEFINED = 2
    VARIABLE = 3
    CONSTANT = 4

    __slots__ = ('kind', 'name', 'body', 'meta')

    def __init__(self, kind, name, body, meta=None):
        self.kind = kind
        self.name = name
        self.body = body
        self.meta = meta or {}

    def __repr__(self):
        return f"{self.name}"


# Control-flow instruction with an absolute `target` offset into the enclosing body.
class Control(namedtuple('Control', ['op', 'target'])):
    __slots__ = ()

    BRANCH = 'branch'      # jump to target
    BRANCH0 = 'branch0'    # pop flag, jump to target when zero
    DO = 'do'              # pop (limit, start), push loop frame; jump to target if nothing to do
    LOOP = 'loop'          # step index, jump back to target while index < limit
    INDEX = 'index'        # push index of loop frame `target` levels out (0 for `I`, 1 for `J`)

    def __repr__(self):
        return f"{self.op}:{self.target}"
