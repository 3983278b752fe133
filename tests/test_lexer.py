"""Tokenizer tests."""

from typing import List, Tuple

import pytest

from dpp.core.errors import LexError, Stage, UnexpectedCharacter, UnterminatedString
from dpp.core.lexer import DppLexer, tokenize
from dpp.core.tokens import TokenKind

I = TokenKind.IDENTIFIER
K = TokenKind.KEYWORD
O = TokenKind.OPERATOR
L = TokenKind.LITERAL
S = TokenKind.SEPARATOR


def _kinds_and_texts(source: str) -> List[Tuple[TokenKind, str]]:
    return [(t.kind, t.text) for t in tokenize(source)]


def test_variable_declaration_tokens():
    assert _kinds_and_texts("x: int = 1 + 2;") == [
        (I, "x"),
        (S, ":"),
        (I, "int"),
        (O, "="),
        (L, "1"),
        (O, "+"),
        (L, "2"),
        (S, ";"),
        (S, "EOF"),
    ]


def test_stream_always_ends_with_eof():
    tokens = tokenize("")
    assert len(tokens) == 1
    assert tokens[0].is_eof
    assert str(tokens[0]) == "Separator(EOF)"


def test_eof_carries_final_position():
    tokens = tokenize("ab\ncd")
    eof = tokens[-1]
    assert (eof.line, eof.column) == (2, 3)


def test_keywords_and_identifiers():
    tokens = tokenize("fn let if else while return iffy _x9")
    assert [t.kind for t in tokens[:-1]] == [K, K, K, K, K, K, I, I]


def test_custom_keyword_set():
    tokens = DppLexer("var fn", keywords={"var"}).tokenize()
    assert [(t.kind, t.text) for t in tokens[:-1]] == [(K, "var"), (I, "fn")]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a == b", ["a", "==", "b"]),
        ("a != b", ["a", "!=", "b"]),
        ("a <= b", ["a", "<=", "b"]),
        ("a >= b", ["a", ">=", "b"]),
        ("a<b", ["a", "<", "b"]),
        ("a>b", ["a", ">", "b"]),
        ("!a", ["!", "a"]),
        ("a=b", ["a", "=", "b"]),
    ],
)
def test_comparison_operators_prefer_two_characters(source, expected):
    tokens = tokenize(source)
    assert [t.text for t in tokens[:-1]] == expected


def test_arrow_is_one_separator():
    tokens = tokenize("fn f() -> int")
    arrow = tokens[4]
    assert (arrow.kind, arrow.text) == (S, "->")


def test_arithmetic_operators_and_separators():
    assert _kinds_and_texts("(a+b)*c/d-e{},;:")[:-1] == [
        (S, "("), (I, "a"), (O, "+"), (I, "b"), (S, ")"), (O, "*"), (I, "c"),
        (O, "/"), (I, "d"), (O, "-"), (I, "e"), (S, "{"), (S, "}"), (S, ","),
        (S, ";"), (S, ":"),
    ]


def test_line_comment_produces_no_token():
    tokens = tokenize("x // the rest / is ignored\ny")
    assert [t.text for t in tokens] == ["x", "y", "EOF"]
    assert (tokens[1].line, tokens[1].column) == (2, 1)


def test_numbers():
    assert _kinds_and_texts("42 3.14")[:-1] == [(L, "42"), (L, "3.14")]


def test_dot_without_digit_is_not_part_of_number():
    with pytest.raises(UnexpectedCharacter) as exc:
        tokenize("7.foo")
    assert exc.value.char == "."


def test_string_literal_keeps_raw_text():
    tokens = tokenize('"hello world"')
    assert (tokens[0].kind, tokens[0].text) == (L, '"hello world"')


def test_escaped_quote_does_not_close_string():
    tokens = tokenize(r'"a\"b" x')
    assert tokens[0].text == r'"a\"b"'
    assert tokens[1].text == "x"


def test_string_spanning_lines_advances_line_counter():
    tokens = tokenize('"a\nb" c')
    assert tokens[1].line == 2


def test_unterminated_string():
    with pytest.raises(UnterminatedString) as exc:
        tokenize('"abc')
    assert exc.value.location.line == 1
    assert exc.value.location.column == 1
    assert exc.value.stage is Stage.LEX


def test_unexpected_character_reports_position():
    with pytest.raises(UnexpectedCharacter) as exc:
        tokenize("let x: int;\nx @ 1;")
    err = exc.value
    assert isinstance(err, LexError)
    assert err.char == "@"
    assert (err.location.line, err.location.column) == (2, 3)
    assert "x @ 1;" == err.location.raw_line


def test_positions_are_one_based_per_line():
    tokens = tokenize("x: int\n  y")
    assert [(t.text, t.line, t.column) for t in tokens[:-1]] == [
        ("x", 1, 1),
        (":", 1, 2),
        ("int", 1, 4),
        ("y", 2, 3),
    ]


def test_whitespace_is_skipped():
    assert [t.text for t in tokenize(" \t\r\n a \r\n")] == ["a", "EOF"]
