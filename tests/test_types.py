## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tinyforth.types import Stack, Memory, Control, to_cell, to_flag, TRUE, FALSE
from tinyforth.errors import ForthStackUnderflow, ForthStackOverflow, ForthInvalidAddress
from tinyforth.formatting import format_stack, format_instruction, write_without_ansi


@pytest.mark.parametrize("value,expected", [
    (0, 0), (32767, 32767), (32768, -32768), (-32768, -32768),
    (-32769, 32767), (65535, -1), (65536, 0), (-1, -1),
])
def test_to_cell_wraps_16_bits(value, expected):
    assert to_cell(value) == expected

def test_to_cell_other_widths():
    assert to_cell(2**31, bits=32) == -2**31
    assert to_cell(255, bits=8) == -1
    assert to_cell(32768, bits=32) == 32768

def test_flags():
    assert to_flag(True) == TRUE == -1
    assert to_flag(False) == FALSE == 0


def test_stack_push_pop():
    s = Stack()
    s.push(1, 2, 3)
    assert list(s) == [1, 2, 3]
    assert s.pop() == 3
    assert s.peek() == 2 and s.peek(1) == 1
    assert len(s) == 2

def test_stack_popn_is_bottom_first():
    s = Stack([1, 2, 3, 4])
    assert s.peekn(2) == [3, 4]
    assert s.popn(2) == [3, 4]
    assert list(s) == [1, 2]
    assert s.popn(0) == []

def test_stack_underflow_leaves_items():
    s = Stack([1])
    with pytest.raises(ForthStackUnderflow) as exc:
        s.popn(2)
    assert list(s) == [1]
    assert isinstance(exc.value, IndexError)

def test_stack_underflow_names_word():
    with pytest.raises(ForthStackUnderflow) as exc:
        Stack().require(2, 'SWAP')
    assert exc.value.forth_token == 'SWAP'

def test_stack_overflow():
    s = Stack(max_depth=2)
    s.push(1, 2)
    with pytest.raises(ForthStackOverflow):
        s.push(3)
    assert list(s) == [1, 2]


def test_memory_allocate_is_sequential():
    mem = Memory()
    assert mem.allocate() == 0
    assert mem.allocate(3) == 1
    assert mem.allocate(0) == 4
    assert mem.next_free == 4

def test_memory_cells_start_at_zero():
    mem = Memory()
    a = mem.allocate(2)
    assert mem.fetch(a) == 0 and mem.fetch(a + 1) == 0
    mem.store(a + 1, 99)
    assert mem.fetch(a + 1) == 99

@pytest.mark.parametrize("address", [-1, 2, 1000])
def test_memory_invalid_address(address):
    mem = Memory()
    mem.allocate(2)
    with pytest.raises(ForthInvalidAddress):
        mem.fetch(address)
    with pytest.raises(ForthInvalidAddress):
        mem.store(address, 1)

def test_memory_negative_allocation():
    with pytest.raises(ForthInvalidAddress):
        Memory().allocate(-1)


def test_format_stack():
    assert format_stack(Stack([1, -2, 3])) == "1 -2 3"
    assert format_stack(Stack()) == ""

def test_format_instruction():
    assert format_instruction(Control(Control.BRANCH, 4)).endswith("→4")
    assert format_instruction(7) == "7"

def test_write_without_ansi():
    written = []
    write = write_without_ansi(written.append)
    write("\033[30;43m ERROR \033[0m plain")
    assert written == [" ERROR  plain"]
