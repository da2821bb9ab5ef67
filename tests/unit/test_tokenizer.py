"""Unit tests for the JSX tokenizer."""

import pytest

from reminty.models import TokenKind
from reminty.parser.tokenizer import Tokenizer, tokenize


def significant(tokens):
    """Drop whitespace tokens."""
    return [t for t in tokens if t.kind != TokenKind.WHITESPACE]


class TestTokenizer:
    """Test cases for token classification."""

    def test_element_with_attribute(self):
        """Test tokenizing a simple element."""
        tokens = significant(tokenize('<div className="box">hi</div>'))

        assert [t.kind for t in tokens] == [
            TokenKind.TAG_OPEN,
            TokenKind.IDENTIFIER,
            TokenKind.IDENTIFIER,
            TokenKind.PUNCTUATION,
            TokenKind.STRING,
            TokenKind.TAG_CLOSE,
            TokenKind.IDENTIFIER,
            TokenKind.TAG_END,
            TokenKind.IDENTIFIER,
            TokenKind.TAG_CLOSE,
            TokenKind.EOF,
        ]
        assert tokens[4].text == '"box"'
        assert tokens[7].text == "</"

    def test_self_closing_tag(self):
        """Test that /> is a single token."""
        tokens = significant(tokenize("<br/>"))

        assert [t.kind for t in tokens] == [
            TokenKind.TAG_OPEN,
            TokenKind.IDENTIFIER,
            TokenKind.SELF_CLOSE,
            TokenKind.EOF,
        ]

    def test_expression_braces(self):
        """Test that braces open and close expressions."""
        tokens = significant(tokenize("{count}"))

        assert tokens[0].kind == TokenKind.EXPR_OPEN
        assert tokens[1].kind == TokenKind.IDENTIFIER
        assert tokens[2].kind == TokenKind.EXPR_CLOSE

    def test_multi_character_punctuation(self):
        """Test that arrows, logical operators and spreads stay whole."""
        tokens = significant(tokenize("a => b && c || d ...e"))
        punctuation = [t.text for t in tokens if t.kind == TokenKind.PUNCTUATION]

        assert punctuation == ["=>", "&&", "||", "..."]

    def test_keywords(self):
        """Test boolean and null-like keywords."""
        tokens = significant(tokenize("true false null undefined truthy"))

        assert [t.kind for t in tokens[:-1]] == [
            TokenKind.BOOLEAN,
            TokenKind.BOOLEAN,
            TokenKind.NULL,
            TokenKind.NULL,
            TokenKind.IDENTIFIER,
        ]

    def test_numbers(self):
        """Test integer and decimal numbers."""
        tokens = significant(tokenize("42 3.14"))

        assert [(t.kind, t.text) for t in tokens[:-1]] == [
            (TokenKind.NUMBER, "42"),
            (TokenKind.NUMBER, "3.14"),
        ]

    def test_number_followed_by_member_access(self):
        """Test that a dot without a digit after it ends the number."""
        tokens = significant(tokenize("1.toFixed"))

        assert [t.text for t in tokens[:-1]] == ["1", ".", "toFixed"]

    def test_hyphenated_identifier(self):
        """Test kebab-case attribute names."""
        tokens = significant(tokenize("aria-selected data-id"))

        assert [t.text for t in tokens[:-1]] == ["aria-selected", "data-id"]

    def test_escaped_quote_in_string(self):
        """Test that an escaped quote does not end the string."""
        tokens = tokenize(r'"say \"hi\""')

        assert tokens[0].kind == TokenKind.STRING
        assert tokens[0].text == r'"say \"hi\""'

    def test_unterminated_string_stops_at_line_end(self):
        """Test that an apostrophe in text yields one error token."""
        tokens = tokenize("<p>Don't</p>\n<b/>")

        errors = [t for t in tokens if t.kind == TokenKind.ERROR]
        assert len(errors) == 1
        assert errors[0].text == "'t</p>"

        # Scanning resumes on the next line
        tag_opens = [t for t in tokens if t.kind == TokenKind.TAG_OPEN]
        assert tag_opens[-1].line == 2

    def test_unterminated_template_literal_runs_to_end(self):
        """Test that template literals may span lines."""
        tokens = tokenize("`line one\nline two")

        assert tokens[0].kind == TokenKind.ERROR
        assert tokens[0].text == "`line one\nline two"
        assert tokens[1].kind == TokenKind.EOF

    def test_multiline_template_literal(self):
        """Test a closed template literal across lines."""
        tokens = tokenize("`a\nb` x")

        assert tokens[0].kind == TokenKind.STRING
        assert tokens[-2].line == 2

    def test_unknown_characters_become_text(self):
        """Test single-character fallback tokens."""
        tokens = significant(tokenize("a + b;"))

        assert [(t.kind, t.text) for t in tokens[:-1]] == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.TEXT, "+"),
            (TokenKind.IDENTIFIER, "b"),
            (TokenKind.TEXT, ";"),
        ]

    def test_exactly_one_eof(self):
        """Test that the token list ends with a single EOF."""
        for source in ("", "x", "<div>\n</div>\n"):
            tokens = tokenize(source)
            assert tokens[-1].kind == TokenKind.EOF
            assert sum(1 for t in tokens if t.kind == TokenKind.EOF) == 1


class TestPositions:
    """Test cases for line, column and offset tracking."""

    def test_line_and_column(self):
        """Test positions after a newline."""
        tokens = significant(tokenize("a\n  b"))

        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (2, 3)

    def test_start_line(self):
        """Test tokenizing text extracted from later in a file."""
        tokens = Tokenizer("<li/>\n<b/>", start_line=7).tokenize()

        assert tokens[0].line == 7
        assert significant(tokens)[-2].line == 8

    def test_offsets_index_source(self):
        """Test that every token's offset points at its own text."""
        source = '<Tab active={tab === "home"} onClick={() => setTab("home")} />'
        for token in tokenize(source):
            assert source[token.offset:token.offset + len(token.text)] == token.text


class TestRoundTrip:
    """Test that token texts reproduce the input."""

    @pytest.mark.parametrize("source", [
        "",
        "function C({x}){ return <div>{x}</div>; }",
        'import React, { useState } from "react";\n\nexport default App;\n',
        "<ul>\n  {items.map((item, i) => (\n    <li key={i}>{item}</li>\n  ))}\n</ul>",
        "<p>Don't stop</p>\n<p>café ☃ \t tabs</p>",
        "const n = 1.5e3 || -2; // comment with `tick",
        "<>\n  {open && <Modal {...props} />}\n</>",
    ])
    def test_concatenation_reconstructs_input(self, source):
        """Test lossless tokenization."""
        tokens = tokenize(source)

        assert "".join(t.text for t in tokens) == source
