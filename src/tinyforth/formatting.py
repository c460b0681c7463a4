## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Stack, Word, Control, Text


def format_stack(stack: Stack) -> str:
    """Snapshot of the stack as decimal cells, bottom to top, separated by single spaces."""
    return ' '.join(str(c) for c in stack)


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def format_instruction(ins) -> str:
    if isinstance(ins, Word): return ins.name
    if isinstance(ins, Control): return f"\033[36m{ins.op}\033[0m→{ins.target}"
    if isinstance(ins, Text): return '." ' + ins + '"'
    return str(ins)

def show_stack(stack, width=72, end='\n', file=None):
    stack_str = format_stack(stack) if len(stack) else '∅'
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)

def show_token_and_stack(step, token, stack, compiling=False, width=72):
    marker = '\033[33m:\033[0m' if compiling else ' '
    print(f"\033[90m{step:>3} :\033[0m{marker} ", end='')
    show_stack(stack, width=width, end='')
    print(f" \033[36m <=> \033[0m {token if token is not None else '∅'}")

def show_instruction_and_stack(depth, word, ins, stack, width=72):
    print(f"\033[90m{'':>3} {'»' * depth}\033[0m ", end='')
    show_stack(stack, width=width - depth, end='')
    print(f" \033[36m <=> \033[0m {word.name}: {format_instruction(ins)}")
