"""
JSX tokenizer.

Single left-to-right scan over the source producing classified tokens. Every
token keeps the exact source slice it covers, so joining the token texts
reproduces the input.
"""

from typing import List

from reminty.models.tokens import Token, TokenKind

TWO_CHAR_PUNCTUATION = ("=>", "&&", "||")
ONE_CHAR_PUNCTUATION = "=.(),:?"
QUOTES = "\"'`"

KEYWORD_KINDS = {
    "true": TokenKind.BOOLEAN,
    "false": TokenKind.BOOLEAN,
    "null": TokenKind.NULL,
    "undefined": TokenKind.NULL,
}


def is_digit(ch: str) -> bool:
    return len(ch) == 1 and "0" <= ch <= "9"


def is_ident_start(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch in "_$"


def is_ident_char(ch: str) -> bool:
    # hyphen allowed for kebab-case attribute names
    return is_ident_start(ch) or ("0" <= ch <= "9") or ch == "-"


class Tokenizer:
    """Converts JSX source text into a flat token list."""

    def __init__(self, source: str, start_line: int = 1):
        """
        Initialize the tokenizer.

        Args:
            source: Text to scan
            start_line: Line number of the first character, for sub-parses
                of text extracted from a larger file
        """
        self.source = source
        self.pos = 0
        self.line = start_line
        self.column = 1
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Scan the whole source.

        Returns:
            Token list terminated by exactly one EOF token
        """
        while self.pos < len(self.source):
            self._scan_token()
        self.tokens.append(Token(
            kind=TokenKind.EOF,
            text="",
            line=self.line,
            column=self.column,
            offset=len(self.source),
        ))
        return self.tokens

    def _peek(self, n: int = 1) -> str:
        return self.source[self.pos:self.pos + n]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _consume(self, kind: TokenKind, length: int) -> None:
        start, line, column = self.pos, self.line, self.column
        for _ in range(length):
            self._advance()
        self._emit(kind, start, line, column)

    def _emit(self, kind: TokenKind, start: int, line: int, column: int) -> None:
        self.tokens.append(Token(
            kind=kind,
            text=self.source[start:self.pos],
            line=line,
            column=column,
            offset=start,
        ))

    def _scan_token(self) -> None:
        ch = self._peek()

        if ch.isspace():
            self._scan_while(TokenKind.WHITESPACE, str.isspace)
            return

        if ch == "{":
            self._consume(TokenKind.EXPR_OPEN, 1)
            return
        if ch == "}":
            self._consume(TokenKind.EXPR_CLOSE, 1)
            return

        if ch == "<":
            if self._peek(2) == "</":
                self._consume(TokenKind.TAG_END, 2)
            else:
                self._consume(TokenKind.TAG_OPEN, 1)
            return
        if self._peek(2) == "/>":
            self._consume(TokenKind.SELF_CLOSE, 2)
            return
        if ch == ">":
            self._consume(TokenKind.TAG_CLOSE, 1)
            return

        if self._peek(3) == "...":
            self._consume(TokenKind.PUNCTUATION, 3)
            return
        if self._peek(2) in TWO_CHAR_PUNCTUATION:
            self._consume(TokenKind.PUNCTUATION, 2)
            return
        if ch in ONE_CHAR_PUNCTUATION:
            self._consume(TokenKind.PUNCTUATION, 1)
            return

        if ch in QUOTES:
            self._scan_string(ch)
            return

        if "0" <= ch <= "9":
            self._scan_number()
            return

        if is_ident_start(ch):
            self._scan_identifier()
            return

        self._consume(TokenKind.TEXT, 1)

    def _scan_while(self, kind: TokenKind, predicate) -> None:
        start, line, column = self.pos, self.line, self.column
        while self.pos < len(self.source) and predicate(self._peek()):
            self._advance()
        self._emit(kind, start, line, column)

    def _scan_string(self, quote: str) -> None:
        start, line, column = self.pos, self.line, self.column
        self._advance()  # opening quote
        while self.pos < len(self.source):
            ch = self._peek()
            if ch == "\n" and quote != "`":
                break
            if ch == "\\":
                self._advance()
                if self.pos < len(self.source):
                    self._advance()
                continue
            self._advance()
            if ch == quote:
                self._emit(TokenKind.STRING, start, line, column)
                return
        # Unterminated: quoted strings stop at the line end, template
        # literals at the end of input; scanning resumes after the error token
        self._emit(TokenKind.ERROR, start, line, column)

    def _scan_number(self) -> None:
        start, line, column = self.pos, self.line, self.column
        seen_dot = False
        while self.pos < len(self.source):
            ch = self._peek()
            if "0" <= ch <= "9":
                self._advance()
            elif ch == "." and not seen_dot and is_digit(self.source[self.pos + 1:self.pos + 2]):
                seen_dot = True
                self._advance()
            else:
                break
        self._emit(TokenKind.NUMBER, start, line, column)

    def _scan_identifier(self) -> None:
        start, line, column = self.pos, self.line, self.column
        while self.pos < len(self.source) and is_ident_char(self._peek()):
            self._advance()
        value = self.source[start:self.pos]
        self._emit(KEYWORD_KINDS.get(value, TokenKind.IDENTIFIER), start, line, column)


def tokenize(source: str, start_line: int = 1) -> List[Token]:
    """Tokenize source text with a fresh tokenizer."""
    return Tokenizer(source, start_line).tokenize()
