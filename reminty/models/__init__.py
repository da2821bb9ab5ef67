"""Data models for the JSX component analyzer."""

from .ast_node import (
    Attribute,
    Component,
    Element,
    EventHandler,
    Expression,
    File,
    Fragment,
    Guard,
    HookKind,
    HookUsage,
    Import,
    Iteration,
    MarkupNode,
    Param,
    ParseResult,
    SyntaxNode,
    Ternary,
    TextNode,
)
from .diagnostics import ParseWarning, Suggestion
from .pattern import ConfidenceBand, DetectedPattern, IdiomKind
from .tokens import Token, TokenKind
from .variables import CollectionOperation, DerivedVariable, StateVariable, ValueKind

__all__ = [
    # Token models
    "Token",
    "TokenKind",
    # Syntax tree models
    "Attribute",
    "Component",
    "Element",
    "EventHandler",
    "Expression",
    "File",
    "Fragment",
    "Guard",
    "HookKind",
    "HookUsage",
    "Import",
    "Iteration",
    "MarkupNode",
    "Param",
    "ParseResult",
    "SyntaxNode",
    "Ternary",
    "TextNode",
    # Variable models
    "CollectionOperation",
    "DerivedVariable",
    "StateVariable",
    "ValueKind",
    # Diagnostic models
    "ParseWarning",
    "Suggestion",
    # Pattern models
    "ConfidenceBand",
    "DetectedPattern",
    "IdiomKind",
]
