## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Word, Control, Text
from .errors import ForthError, ForthUnterminatedDefinition, ForthMisplacedControlWord, ForthReturnStackOverflow
from .parser import tokenize, parse_literal, parse_text, token_meta
from .builtins import CONTROL_WORDS
from .compiler import begin_definition
from .formatting import show_token_and_stack, show_instruction_and_stack
from .machine import Machine


def execute_word(m: Machine, word: Word, verbosity=0, stats=None) -> None:
    match word.kind:
        case Word.PRIMITIVE:
            word.body(m)
        case Word.VARIABLE | Word.CONSTANT:
            m.stack.push(word.body)
        case Word.DEFINED:
            execute_body(m, word, verbosity=verbosity, stats=stats)


def execute_body(m: Machine, word: Word, verbosity=0, stats=None) -> None:
    """Run a defined word with an explicit instruction pointer per frame, instead of Python recursion."""
    frames = [[word, 0]]
    max_frames = m.config.max_call_depth
    step = 0

    while frames:
        frame = frames[-1]
        body = frame[0].body
        if frame[1] >= len(body):
            frames.pop()
            continue
        ins = body[frame[1]]
        frame[1] += 1
        step += 1

        if verbosity == 2:
            show_instruction_and_stack(len(frames), frame[0], ins, m.stack)

        if isinstance(ins, Word):
            if ins.kind != Word.DEFINED:
                execute_word(m, ins)
            elif len(frames) >= max_frames:
                raise ForthReturnStackOverflow(f"Calling `{ins.name}` exceeds the maximum call depth of {max_frames}.",
                                               forth_token=ins.name)
            else:
                frames.append([ins, 0])
        elif isinstance(ins, Control):
            match ins.op:
                case Control.BRANCH:
                    frame[1] = ins.target
                case Control.BRANCH0:
                    m.stack.require(1, 'IF')
                    if m.stack.pop() == 0: frame[1] = ins.target
                case Control.DO:
                    m.stack.require(2, 'DO')
                    limit, start = m.stack.popn(2)
                    if start < limit: m.loops.append([start, limit])
                    else: frame[1] = ins.target
                case Control.LOOP:
                    loop = m.loops[-1]
                    loop[0] += 1
                    if loop[0] < loop[1]: frame[1] = ins.target
                    else: m.loops.pop()
                case Control.INDEX:
                    m.stack.push(m.cell(m.loops[-1 - ins.target][0]))
        elif isinstance(ins, Text):
            m.write(ins)
        else:
            m.stack.push(ins)

    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step


def interpret_token(m: Machine, token, verbosity=0, stats=None) -> None:
    if m.compiling:
        m.pending.compile_token(m, token)
        return
    if (text := parse_text(token)) is not None:
        m.write(text)
        return
    if (value := parse_literal(token)) is not None:
        m.stack.push(m.cell(value))
        return

    name = m.normalize(token)
    if name == ':':
        begin_definition(m, token)
    elif name == ';' or name in CONTROL_WORDS:
        raise ForthMisplacedControlWord(f"Word `{name}` is only valid inside a definition.", forth_token=name)
    else:
        word = m.dictionary.get_word(name)
        execute_word(m, word, verbosity=verbosity, stats=stats)


def interpret(m: Machine, source: str, filename=None, verbosity=0, stats=None) -> None:
    """Pull one token at a time from `source`, and fully execute or compile it before pulling the next."""
    m.filename = filename
    m.tokens = tokenize(source, filename=filename)

    step = 0
    for token in m.tokens:
        if verbosity > 0:
            show_token_and_stack(step, token, m.stack, compiling=m.compiling)
        step += 1
        try:
            interpret_token(m, token, verbosity=verbosity, stats=stats)
        except ForthError as exc:
            if exc.forth_token is None: exc.forth_token = str(token)
            if exc.forth_meta is None: exc.forth_meta = token_meta(token, filename) | {'token': str(token)}
            raise

    m.tokens = None
    if m.compiling:
        name = m.pending.word.name
        raise ForthUnterminatedDefinition(f"Definition of `{name}` is missing its closing `;`.",
                                          forth_token=name, forth_meta=m.pending.word.meta)

    if verbosity > 0:
        show_token_and_stack(step, None, m.stack, compiling=False)
    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step
