## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Cell, Name, Word, to_flag
from .errors import ForthDivisionByZero
from .machine import Machine


def _divmod(b: Cell, a: Cell) -> tuple[Cell, Cell]:
    # Symmetric division: quotient truncates toward zero, remainder takes the sign of the dividend.
    if a == 0: raise ForthDivisionByZero(f"Cannot divide {b} by zero.")
    q = abs(b) // abs(a)
    q = q if (b < 0) == (a < 0) else -q
    return q, b - a * q


# STACK OPERATIONS
def op_dup(x: Cell) -> tuple[Cell, Cell]: return (x, x)
def op_drop(_: Cell) -> None: return None
def op_swap(b: Cell, a: Cell) -> tuple[Cell, Cell]: return (a, b)
def op_over(b: Cell, a: Cell) -> tuple[Cell, Cell, Cell]: return (b, a, b)
def op_rot(c: Cell, b: Cell, a: Cell) -> tuple[Cell, Cell, Cell]: return (b, a, c)
## ARITHMETIC
def op_add(b: Cell, a: Cell) -> Cell: return b + a
def op_sub(b: Cell, a: Cell) -> Cell: return b - a
def op_mul(b: Cell, a: Cell) -> Cell: return b * a
def op_div(b: Cell, a: Cell) -> Cell: return _divmod(b, a)[0]
def op_mod(b: Cell, a: Cell) -> Cell: return _divmod(b, a)[1]
## BOOLEAN LOGIC
def op_lt(b: Cell, a: Cell) -> Cell: return to_flag(b < a)
def op_gt(b: Cell, a: Cell) -> Cell: return to_flag(b > a)
def op_equal(b: Cell, a: Cell) -> Cell: return to_flag(b == a)
def op_and(b: Cell, a: Cell) -> Cell: return b & a
def op_or(b: Cell, a: Cell) -> Cell: return b | a
def op_not(x: Cell) -> Cell: return to_flag(x == 0)
# MEMORY
def op_variable(m: Machine, name: Name) -> None:
    m.define(Word.VARIABLE, name, m.memory.allocate(1))
def op_constant(m: Machine, name: Name, value: Cell) -> None:
    m.define(Word.CONSTANT, name, value)
def op_store(m: Machine, value: Cell, address: Cell) -> None: m.memory.store(address, value)
def op_fetch(m: Machine, address: Cell) -> Cell: return m.memory.fetch(address)
def op_allot(m: Machine, count: Cell) -> None: m.memory.allocate(count)
# INPUT/OUTPUT
def op_dot(m: Machine, x: Cell) -> None: m.write(f"{x} ")
def op_emit(m: Machine, x: Cell) -> None: m.write(chr(x & 0xFF))
def op_cr(m: Machine) -> None: m.write("\n")
