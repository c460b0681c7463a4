## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from typing import Callable, get_origin, get_args

from .types import Cell, Name
from .machine import Machine
from .errors import ForthError


_SYMBOLS = {
    'add': '+', 'sub': '-', 'mul': '*', 'div': '/',
    'lt': '<', 'gt': '>', 'equal': '=',
    'store': '!', 'fetch': '@', 'dot': '.',
}


def get_forth_name(py_name: str) -> str:
    """Map a Python operator function name like `op_dup` or `op_add` to its Forth word `DUP` or `+`."""
    if not py_name.startswith("op_"):
        raise ForthError(f"Operator function `{py_name}` requires prefix `op_` by convention.", forth_token=py_name)
    name = py_name[3:]
    return _SYMBOLS.get(name) or name.upper().replace('_', '-')


def get_stack_effects(*, fn: Callable, name: str = None) -> dict:
    """Parse the type annotations from Python to determine the stack effects in Forth.

    Parameter conventions:
        Machine     receives the execution context, must come first.
        Name        receives the next token of input, e.g. the name after `VARIABLE`.
        Cell        popped from the data stack, bottom-most argument first.

    Valency (output) conventions:
        0: returns None, no changes to stack
        1: single cell pushed
        >1: tuple of cells pushed in order
    """
    sig = inspect.signature(fn)
    params = list(sig.parameters.values())
    op_name = name or getattr(fn, '__name__', '<unnamed>')

    wants_machine, names, arity = False, 0, 0
    for i, p in enumerate(params):
        if p.annotation is Machine and i == 0:
            wants_machine = True
        elif p.annotation is Name:
            names += 1
        elif p.annotation is Cell:
            arity += 1
        else:
            raise ForthError(f"Operator `{op_name}` has unsupported parameter `{p.name}: {p.annotation}`.", forth_token=op_name)

    ret_ann = sig.return_annotation
    if ret_ann is inspect.Signature.empty:
        raise ForthError(f"Operator `{op_name}` must declare a return annotation.", forth_token=op_name)
    if ret_ann is None or ret_ann is type(None):
        valency = 0
    elif ret_ann is tuple or get_origin(ret_ann) is tuple:
        valency = len(get_args(ret_ann))
    else:
        valency = 1

    return {
        'machine': wants_machine,
        'names': names,
        'arity': arity,
        'valency': valency,
    }
