"""Token data models."""

from enum import Enum

from pydantic import BaseModel


class TokenKind(str, Enum):
    """Lexical class of a token."""

    TAG_OPEN = "tag_open"          # <
    TAG_CLOSE = "tag_close"        # >
    SELF_CLOSE = "self_close"      # />
    TAG_END = "tag_end"            # </
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"                  # null, undefined
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"
    EXPR_OPEN = "expr_open"        # {
    EXPR_CLOSE = "expr_close"      # }
    TEXT = "text"
    ERROR = "error"
    EOF = "eof"


class Token(BaseModel):
    """A lexical unit with its exact source text and start position."""

    kind: TokenKind
    text: str
    line: int
    column: int
    offset: int

    def is_punct(self, value: str) -> bool:
        return self.kind == TokenKind.PUNCTUATION and self.text == value

    def is_ident(self, value: str) -> bool:
        return self.kind == TokenKind.IDENTIFIER and self.text == value
