## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Cell, Word
from .errors import *
from .machine import MachineConfig
from .runtime import Runtime, RunResult


def run(source: str, max_depth: int | None = None, **options) -> RunResult:
    """Run `source` on a fresh machine and return `(stack snapshot, output, error or None)`."""
    return Runtime(MachineConfig(max_depth=max_depth, **options)).run(source)
