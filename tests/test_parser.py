## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tinyforth.parser import tokenize, parse_literal, parse_text, needs_more_input, format_error_context
from tinyforth.errors import ForthUnclosedComment, ForthUnclosedString, ForthParseError


def values(source):
    return [t.value for t in tokenize(source)]


def test_whitespace_separates_tokens():
    assert values("1 2 +") == ['1', '2', '+']
    assert values("  DUP\n\tSWAP\r\n  ") == ['DUP', 'SWAP']
    assert values("") == []

def test_words_are_any_non_space_characters():
    assert values("2DUP +! .S <>") == ['2DUP', '+!', '.S', '<>']

def test_comments_are_skipped():
    assert values("1 ( push one ) 2") == ['1', '2']
    assert values("( multi\nline ) DUP") == ['DUP']
    # Comments end at the first closing parenthesis, there is no nesting.
    assert values("( a ( b ) 3") == ['3']

def test_stray_closing_parenthesis_is_a_word():
    assert values("1 ) 2") == ['1', ')', '2']

def test_unclosed_comment():
    with pytest.raises(ForthUnclosedComment) as exc:
        list(tokenize("1 ( never closed"))
    assert exc.value.line == 1 and exc.value.column == 3
    assert exc.value.code == "unclosed-comment"
    assert isinstance(exc.value, ForthParseError)

def test_tokenize_is_lazy():
    tokens = tokenize("1 2 ( oops")
    assert next(tokens) == '1'
    assert next(tokens) == '2'
    with pytest.raises(ForthUnclosedComment):
        next(tokens)

def test_token_positions():
    tokens = list(tokenize("1\n  DUP"))
    assert (tokens[1].line, tokens[1].column) == (2, 3)


def test_dot_quote_string():
    tokens = list(tokenize('." hello  world" CR'))
    assert len(tokens) == 2
    assert tokens[0].type == 'DOT_QUOTE'
    assert parse_text(tokens[0]) == 'hello  world'
    assert parse_text(tokens[1]) is None

def test_unclosed_string():
    with pytest.raises(ForthUnclosedString) as exc:
        list(tokenize('1 ." never closed'))
    assert exc.value.code == "unclosed-string"
    assert exc.value.column == 3


@pytest.mark.parametrize("token,expected", [
    ('0', 0), ('42', 42), ('-7', -7), ('007', 7), ('100000', 100000),
])
def test_parse_literal(token, expected):
    assert parse_literal(token) == expected

@pytest.mark.parametrize("token", ['-', '+5', '3a', 'DUP', '1.5', '0x10'])
def test_parse_literal_rejects_words(token):
    assert parse_literal(token) is None


def test_needs_more_input():
    assert needs_more_input(": SQUARE DUP")
    assert needs_more_input("1 ( comment")
    assert needs_more_input('." text')
    assert not needs_more_input(": SQUARE DUP * ;")
    assert not needs_more_input("1 2 +")


def test_error_context_highlights_line():
    source = "1 2\n3 ( oops\n"
    with pytest.raises(ForthUnclosedComment) as exc:
        list(tokenize(source))
    context = format_error_context(exc.value, "demo.fs", source)
    assert 'File "demo.fs", line 2' in context
    assert "    2 |" in context and "oops" in context
