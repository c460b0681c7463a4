## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# tinyforth — A small batch interpreter for a Forth-family stack language.
#

import sys
import time
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import ForthError, ForthParseError, ForthCompileError, ForthUnknownWord
from .parser import needs_more_input, format_error_context
from .formatting import write_without_ansi, show_stack
from .machine import MachineConfig
from .runtime import Runtime


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    ignore: bool
    stats: bool
    plain: bool
    stack_size: int | None
    snapshot: Path | None
    ignore_case: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class ForthRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain
        self.snapshot_path = config.snapshot

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        machine_config = MachineConfig(max_depth=config.stack_size, ignore_case=config.ignore_case)
        self.runtime = Runtime(machine_config, echo=sys.stdout)
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        if not is_repl and not self.ignore: self._exit()

    def _handle_error(self, exc: ForthError, filename: str, source: str, is_repl: bool = False) -> None:
        context = format_error_context(exc, filename, source)
        context += f"\n\033[90m{str(exc)}\033[0m\n"
        if isinstance(exc, ForthParseError):
            self._maybe_fatal_error("SYNTAX ERROR.", f"Reading `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, ForthUnknownWord):
            detail = f"Word `\033[1;97m{exc.forth_token}\033[0m` from `\033[97m{filename}\033[0m` was not found in dictionary!"
            self._maybe_fatal_error("UNKNOWN WORD.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, ForthCompileError):
            detail = f"Compiling `\033[1;97m{exc.forth_token}\033[0m` from `\033[97m{filename}\033[0m` failed."
            self._maybe_fatal_error("COMPILE ERROR.", detail, type(exc).__name__, context, is_repl)
        else:
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Word \033[1;97m`{exc.forth_token}`\033[0m caused an error! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            print(context, file=sys.stderr)
            print(f'\033[1;33m  Stack content is\033[0;33m\n    ', end='', file=sys.stderr)
            show_stack(self.runtime.machine.stack, width=None, file=sys.stderr)
            print('\033[0m', file=sys.stderr)
            if not is_repl and not self.ignore: self._exit()

    def _exit(self) -> None:
        self.write_snapshot()
        sys.exit(1)

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False) -> bool:
        result = self.runtime.run(source, filename=filename, verbosity=self.verbose, stats=self.total_stats)
        if result.output and not result.output.endswith('\n'):
            print()
        if result.error is not None:
            if not is_repl: self.failure = True
            self._handle_error(result.error, filename, source, is_repl=is_repl)
            return False
        self.executed_items += 1
        return True

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('tinyforth - Forth stack language REPL; type Ctrl+C to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit', 'BYE'): break
                source += line + "\n"
                if needs_more_input(source): continue

                if self._execute_script(source, '<REPL>', is_repl=True):
                    print("\033[90m>>>\033[0m", self.runtime.snapshot() or '∅')
                source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def write_snapshot(self) -> None:
        if self.snapshot_path is not None:
            self.snapshot_path.write_text(self.runtime.snapshot() + '\n', encoding='utf-8')

    def finalize(self) -> int:
        self.write_snapshot()
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace interpreter execution; twice to trace inside definitions.')
@click.option('--stack-size', type=click.IntRange(min=1), default=None, help='Maximum number of cells on the data stack.')
@click.option('--snapshot', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Write the final stack to this file.')
@click.option('--ignore-case', is_flag=True, help='Treat word names case-insensitively.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, stack_size: int | None, snapshot: Path | None,
        ignore_case: bool, ignore: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, ignore=ignore, stats=stats, plain=plain,
                                      stack_size=stack_size, snapshot=snapshot, ignore_case=ignore_case)


@cli.command('run-file')
@click.argument('scripts', nargs=-1, type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, scripts) -> None:
    runner = ForthRunner(ctx.obj['config'])
    if not scripts:
        scripts = (click.open_file('-', encoding='utf-8'),)
    runner.execute_items([ExecutionItem(s.read(), s.name or '<STDIN>') for s in scripts])
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = ForthRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


_VALUE_OPTIONS = ('--stack-size', '--snapshot')
_FLAG_OPTIONS = ('--ignore-case', '--ignore', '--stats', '--plain', '-i', '-p')


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g, r, i = [], [], 0
    while i < len(a):
        t = a[i]
        if t in _VALUE_OPTIONS and i + 1 < len(a):
            g += [t, a[i+1]]; i += 2
            continue
        if t in _FLAG_OPTIONS or t.startswith(tuple(o + '=' for o in _VALUE_OPTIONS)) or t.startswith('-v') or t == '--verbose':
            g.append(t)
        else:
            r.append(t)
        i += 1

    if r and r[0] in cli.commands:
        cmd, tail = r[0], r[1:]
    elif '--repl' in r:
        cmd, tail = 'run-repl', []
    elif len(r) == 0:
        # No args: if stdin has data, treat as file '-', else REPL
        cmd, tail = ('run-file', ['-']) if not sys.stdin.isatty() else ('run-repl', [])
    else:
        cmd, tail = 'run-file', r

    cli.main(args=[*g, cmd, *tail], prog_name='tinyforth')


if __name__ == "__main__":
    main()
