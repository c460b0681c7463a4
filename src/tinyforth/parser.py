## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

import lark
from .types import Text
from .errors import ForthError, ForthUnclosedComment, ForthUnclosedString


GRAMMAR = r"""?start: item*
item: DOT_QUOTE | WORD

// COMMENTS
COMMENT.2: /\([^)]*\)/s

// TOKENS
DOT_QUOTE.3: /\."\s[^"]*"/
WORD: /[^\s()]+|\)/

// WHITESPACE
WS: /\s+/
%ignore WS
%ignore COMMENT
"""

_INTEGER = re.compile(r'-?[0-9]+')
_LEXER = None


def _get_lexer() -> lark.Lark:
    global _LEXER
    if _LEXER is None:
        _LEXER = lark.Lark(GRAMMAR, parser="lalr", lexer="basic")
    return _LEXER


def tokenize(source: str, filename=None):
    """Lazily yield the tokens of `source`; errors surface only once the lexer reaches them."""
    tokens = _get_lexer().lex(source)
    while True:
        try:
            token = next(tokens)
        except StopIteration:
            return
        except lark.exceptions.UnexpectedCharacters as exc:
            # Only an opening parenthesis without its closing one can fail to lex.
            raise ForthUnclosedComment("Comment opened with `(` is never closed.",
                                       filename=filename, line=exc.line, column=exc.column, token='(') from None
        if token.type == 'WORD' and token.value == '."':
            raise ForthUnclosedString('String opened with `."` is never closed.',
                                      filename=filename, line=token.line, column=token.column, token=token.value)
        yield token


def parse_literal(token: str) -> int | None:
    """Recognize an optionally-signed decimal integer, or return None when the token is a word name."""
    if _INTEGER.fullmatch(token):
        return int(token)
    return None


def parse_text(token: lark.Token) -> Text | None:
    if getattr(token, 'type', None) != 'DOT_QUOTE':
        return None
    # Skip the `."` prefix plus its single whitespace delimiter, and the closing quote.
    return Text(token.value[3:-1])


def token_meta(token, filename=None) -> dict:
    return {'filename': filename, 'line': getattr(token, 'line', None), 'column': getattr(token, 'column', None)}


def needs_more_input(source: str) -> bool:
    """Check if `source` stops inside a definition, a comment or a string, as used by the REPL."""
    compiling = False
    try:
        for token in tokenize(source):
            if token.value == ':': compiling = True
            elif token.value == ';': compiling = False
    except (ForthUnclosedComment, ForthUnclosedString):
        return True
    return compiling


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = source.splitlines(keepends=True) if source is not None else open(filename, 'r').readlines()
    if line is None or not lines: return ''
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    token_value = token_value or ''
    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column is not None and 0 < column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token_value)-1]}\033[0m" +
                    line_content[column+len(token_value)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'


def format_error_context(exc: ForthError, filename: str, source: str) -> str:
    meta = exc.forth_meta or {}
    return format_parse_error_context(filename, meta.get('line'), meta.get('column'), meta.get('token', exc.forth_token), source=source)
