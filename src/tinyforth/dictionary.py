## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .types import Word
from .errors import ForthUnknownWord
from .loader import get_stack_effects


@dataclass
class Dictionary:
    """Insertion-ordered word table.  Redefining a name shadows the previous entry without removing it,
    so bodies compiled earlier keep the `Word` instance they resolved at the time.
    """
    entries: list[Word] = field(default_factory=list)
    latest: dict[str, Word] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.latest

    def __len__(self) -> int:
        return len(self.entries)

    # Registration helpers
    def add_word(self, word: Word) -> None:
        self.entries.append(word)
        self.latest[word.name] = word

    def add_primitive(self, name: str, fn: Callable[..., Any]) -> Word:
        wrapper, meta = _make_wrapper(fn, name)
        word = Word(Word.PRIMITIVE, name, wrapper, {'effect': meta, 'doc': fn.__doc__})
        self.add_word(word)
        return word

    def lookup(self, name: str) -> Word | None:
        return self.latest.get(name)

    def get_word(self, name: str, *, meta: dict | None = None) -> Word:
        if (word := self.latest.get(name)) is not None:
            return word
        raise ForthUnknownWord(f"Word `{name}` not found in dictionary.", forth_token=name, forth_meta=meta)


def _make_wrapper(fn: Callable[..., Any], name: str) -> tuple[Callable, dict]:
    meta = get_stack_effects(fn=fn, name=name)
    arity, valency = meta['arity'], meta['valency']

    match valency:
        case 0:
            def push(m, _): pass
        case 1:
            def push(m, res): m.stack.push(m.cell(res))
        case _:
            def push(m, res): m.stack.push(*(m.cell(v) for v in res))

    def wrapper(m):
        # Arguments are only popped once the operator succeeded, so a failing word leaves the stack as it was.
        m.stack.require(arity, name)
        names = [m.next_name(name) for _ in range(meta['names'])]
        head = (m,) if meta['machine'] else ()
        result = fn(*head, *names, *m.stack.peekn(arity))
        m.stack.popn(arity)
        push(m, result)

    return wrapper, meta
