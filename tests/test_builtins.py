## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tinyforth.runtime import Runtime
from tinyforth.errors import *


def stack_after(source):
    return Runtime().execute(source)

def output_of(source):
    result = Runtime().run(source)
    assert result.ok, result.error
    return result.output


@pytest.mark.parametrize("source,expected", [
    ("1 DUP", [1, 1]),
    ("1 2 DROP", [1]),
    ("1 2 SWAP", [2, 1]),
    ("1 2 OVER", [1, 2, 1]),
    ("1 2 3 ROT", [2, 3, 1]),
    ("9 1 2 3 ROT ROT ROT", [9, 1, 2, 3]),
])
def test_stack_words(source, expected):
    assert stack_after(source) == expected


@pytest.mark.parametrize("source,expected", [
    ("2 3 +", [5]),
    ("5 3 -", [2]),
    ("3 5 -", [-2]),
    ("6 7 *", [42]),
    ("7 2 /", [3]),
    ("-7 2 /", [-3]),
    ("7 -2 /", [-3]),
    ("7 2 MOD", [1]),
    ("-7 2 MOD", [-1]),
    ("7 -2 MOD", [1]),
    ("32767 1 +", [-32768]),
    ("-32768 1 -", [32767]),
    ("256 256 *", [0]),
    ("40000", [-25536]),
])
def test_arithmetic(source, expected):
    assert stack_after(source) == expected

@pytest.mark.parametrize("source", ["5 0 /", "5 0 MOD"])
def test_division_by_zero(source):
    rt = Runtime()
    with pytest.raises(ForthDivisionByZero):
        rt.execute(source)
    # The failing word leaves its operands in place.
    assert rt.from_stack() == [5, 0]


@pytest.mark.parametrize("source,expected", [
    ("3 4 <", [-1]), ("4 3 <", [0]), ("3 3 <", [0]),
    ("5 3 >", [-1]), ("3 5 >", [0]),
    ("3 3 =", [-1]), ("3 4 =", [0]),
    ("-1 0 AND", [0]), ("-1 -1 AND", [-1]), ("12 10 AND", [8]),
    ("-1 0 OR", [-1]), ("0 0 OR", [0]), ("12 10 OR", [14]),
    ("0 NOT", [-1]), ("-1 NOT", [0]), ("5 NOT", [0]),
])
def test_comparison_and_logic(source, expected):
    assert stack_after(source) == expected


def test_variable_store_fetch():
    assert stack_after("VARIABLE X 42 X ! X @") == [42]
    assert stack_after("VARIABLE X X @") == [0]

def test_variables_get_consecutive_addresses():
    assert stack_after("VARIABLE A VARIABLE B A B") == [0, 1]

def test_allot_extends_memory():
    assert stack_after("VARIABLE ARR 2 ALLOT 7 ARR 2 + ! ARR 2 + @ ARR 1 + @") == [7, 0]
    assert stack_after("VARIABLE A 3 ALLOT VARIABLE B B") == [4]

def test_constant():
    assert stack_after("10 CONSTANT TEN TEN TEN +") == [20]

@pytest.mark.parametrize("source", ["VARIABLE X X 1 + @", "5 @", "-1 @", "1 5 !", "-1 ALLOT"])
def test_invalid_address(source):
    with pytest.raises(ForthInvalidAddress):
        stack_after(source)

@pytest.mark.parametrize("source", ["VARIABLE", "VARIABLE 12", "1 CONSTANT"])
def test_defining_words_need_a_name(source):
    with pytest.raises(ForthMalformedDefinition):
        stack_after(source)

def test_constant_needs_a_value():
    with pytest.raises(ForthStackUnderflow):
        stack_after("CONSTANT X")


def test_dot_prints_with_trailing_space():
    assert output_of("1 2 . .") == "2 1 "
    assert output_of("-5 .") == "-5 "

def test_emit_and_cr():
    assert output_of("72 EMIT 105 EMIT CR") == "Hi\n"
    assert output_of("321 EMIT") == "A"

def test_dot_quote_prints_text():
    assert output_of('." hello world" CR') == "hello world\n"


@pytest.mark.parametrize("source,stack", [
    ("+", ""), ("1 +", "1"), ("1 SWAP", "1"), ("DROP", ""), ("1 2 ROT", "1 2"), (".", ""),
])
def test_underflow_keeps_stack(source, stack):
    result = Runtime().run(source)
    assert isinstance(result.error, ForthStackUnderflow)
    assert result.stack == stack
