"""JSX tokenizer, parser and variable extraction."""

from reminty.parser.extraction import (
    attach_variables,
    extract_derived_variables,
    extract_state_variables,
    infer_value_kind,
)
from reminty.parser.parser import Parser, parse_event_handler, parse_source
from reminty.parser.tokenizer import Tokenizer, tokenize

__all__ = [
    'Tokenizer',
    'tokenize',
    'Parser',
    'parse_source',
    'parse_event_handler',
    'extract_state_variables',
    'extract_derived_variables',
    'infer_value_kind',
    'attach_variables',
]
