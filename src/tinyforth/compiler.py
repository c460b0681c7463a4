## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Word, Control
from .errors import ForthNestedDefinition, ForthMisplacedControlWord, ForthMalformedControlStructure
from .parser import parse_literal, parse_text, token_meta
from .builtins import CONTROL_WORDS


class Definition:
    """Word being compiled between `:` and `;`.

    Control-flow words leave markers on a compile-time stack, each remembering the body offset of the
    instruction whose target is still unknown.  Closing words pop their marker and patch that target, so
    a committed body only ever contains absolute offsets.
    """

    def __init__(self, word: Word):
        self.word = word
        self.body: list = []
        self.markers: list[tuple[str, int]] = []

    def __repr__(self):
        return f": {self.word.name} " + " ".join(repr(i) for i in self.body)

    def compile_token(self, m, token) -> None:
        meta = token_meta(token, m.filename)
        if (text := parse_text(token)) is not None:
            self.body.append(text)
            return
        if (value := parse_literal(token)) is not None:
            self.body.append(m.cell(value))
            return

        name = m.normalize(token)
        if name == ';':
            self.finish(m, meta)
        elif name == ':':
            raise ForthNestedDefinition(f"Cannot start a definition inside `{self.word.name}`; close it with `;` first.",
                                        forth_token=name, forth_meta=meta)
        elif name in CONTROL_WORDS:
            self.compile_control(name, meta)
        else:
            word = m.dictionary.get_word(name, meta=meta)
            if word.kind == Word.PRIMITIVE and word.meta['effect']['names'] > 0:
                raise ForthMisplacedControlWord(f"Parsing word `{name}` can only be used while interpreting.",
                                                forth_token=name, forth_meta=meta)
            self.body.append(word)

    def _open(self, kind: str, instruction: Control) -> None:
        self.markers.append((kind, len(self.body)))
        self.body.append(instruction)

    def _close(self, name: str, meta: dict, *kinds: str) -> tuple[str, int]:
        if not self.markers or self.markers[-1][0] not in kinds:
            expected = ' or '.join(f"`{k}`" for k in kinds)
            raise ForthMalformedControlStructure(f"`{name}` without a matching {expected} before it.",
                                                 forth_token=name, forth_meta=meta)
        return self.markers.pop()

    def _patch(self, index: int, target: int) -> None:
        self.body[index] = self.body[index]._replace(target=target)

    def compile_control(self, name: str, meta: dict) -> None:
        match name:
            case 'IF':
                self._open('IF', Control(Control.BRANCH0, None))
            case 'ELSE':
                _, index = self._close(name, meta, 'IF')
                self._open('ELSE', Control(Control.BRANCH, None))
                self._patch(index, len(self.body))
            case 'THEN':
                _, index = self._close(name, meta, 'IF', 'ELSE')
                self._patch(index, len(self.body))
            case 'DO':
                self._open('DO', Control(Control.DO, None))
            case 'LOOP':
                _, index = self._close(name, meta, 'DO')
                self.body.append(Control(Control.LOOP, index + 1))
                self._patch(index, len(self.body))
            case 'I' | 'J':
                depth = 0 if name == 'I' else 1
                if sum(1 for kind, _ in self.markers if kind == 'DO') <= depth:
                    raise ForthMalformedControlStructure(f"`{name}` used outside of {depth + 1} enclosing `DO` loop(s).",
                                                         forth_token=name, forth_meta=meta)
                self.body.append(Control(Control.INDEX, depth))
            case 'RECURSE':
                self.body.append(self.word)
            case _:
                raise NotImplementedError(name)

    def finish(self, m, meta: dict) -> Word:
        if self.markers:
            kind, _ = self.markers[-1]
            raise ForthMalformedControlStructure(f"Definition of `{self.word.name}` ends with `{kind}` still open.",
                                                 forth_token=';', forth_meta=meta)
        self.word.body = tuple(self.body)
        m.dictionary.add_word(self.word)
        m.pending = None
        return self.word


def begin_definition(m, token) -> Definition:
    meta = token_meta(token, m.filename)
    name = m.next_name(':')
    m.pending = Definition(Word(Word.DEFINED, name, None, meta))
    return m.pending
