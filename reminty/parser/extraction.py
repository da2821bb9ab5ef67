"""
Regex extraction of state and derived variables.

Works on the raw text, independently of the token stream. The heuristics are
deliberately shallow: they recognise the common declaration shapes and guess a
coarse value kind from the initializer text.
"""

import re
from typing import Iterable, List, Optional

from reminty.models import (
    CollectionOperation,
    DerivedVariable,
    File,
    StateVariable,
    ValueKind,
)
from reminty.parser.expressions import find_matching_paren

# ASCII only, matching the identifier shape StateVariable accepts
STATE_DECLARATION = re.compile(
    r"const\s+\[\s*([A-Za-z_$][\w$]*)\s*,\s*([A-Za-z_$][\w$]*)\s*\]\s*=\s*"
    r"(?:React\.)?useState(?:<[^>]+>)?\s*\(",
    re.ASCII,
)
DERIVED_DECLARATION = re.compile(
    r"const\s+(\w+)\s*=\s*(\w+)\.(filter|map|find|some|every|reduce|sort|slice)\s*\(",
    re.ASCII,
)
CHAINED_CALL = re.compile(r"\s*\.\s*\w+\s*\(")

INTEGER_LITERAL = re.compile(r"^[+-]?\d+$")
FLOAT_LITERAL = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")
SIMPLE_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

EMPTY_STRINGS = ("", '""', "''", "``")
COLLECTION_HINTS = ("items", "list", "data", "array")

# Window scanned for an unclosed "[" in front of a derived declaration
DESTRUCTURING_WINDOW = 20


def line_at(source: str, index: int) -> int:
    """1-based line of ``index`` in ``source``."""
    return 1 + source.count("\n", 0, index)


def infer_value_kind(init: str) -> ValueKind:
    """
    Guess the kind of a value from its initializer text.

    Rules are tried in order: empty or quoted text, booleans, integers,
    floats, array and object literals, null/undefined, then plural or
    collection-like identifiers.

    Args:
        init: Initializer text as written

    Returns:
        Inferred ValueKind
    """
    value = init.strip()

    if value in EMPTY_STRINGS:
        return ValueKind.STRING
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'`":
        return ValueKind.STRING
    if value in ("true", "false"):
        return ValueKind.BOOL
    if INTEGER_LITERAL.match(value):
        return ValueKind.INT
    if FLOAT_LITERAL.match(value):
        return ValueKind.FLOAT
    if value.startswith("["):
        return ValueKind.ARRAY_OF_ANY
    if value.startswith("{"):
        return ValueKind.OBJECT_OF_ANY
    if value in ("null", "undefined"):
        return ValueKind.UNKNOWN

    lowered = value.lower()
    if (
        lowered.endswith("s")
        and not lowered.endswith("ss")
        and len(lowered) > 3
        and SIMPLE_IDENTIFIER.match(value)
    ):
        return ValueKind.ARRAY_OF_ANY
    if any(hint in lowered for hint in COLLECTION_HINTS):
        return ValueKind.ARRAY_OF_ANY

    return ValueKind.UNKNOWN


def extract_state_variables(source: str) -> List[StateVariable]:
    """
    Find ``const [name, setName] = useState(init)`` declarations.

    Args:
        source: Raw file text

    Returns:
        State variables in source order
    """
    variables = []
    for match in STATE_DECLARATION.finditer(source):
        paren = match.end() - 1
        close = find_matching_paren(source, paren)
        if close == -1:
            line_end = source.find("\n", paren)
            init = source[paren + 1:line_end if line_end != -1 else len(source)]
        else:
            init = source[paren + 1:close]
        init = init.strip()

        variables.append(StateVariable(
            name=match.group(1),
            setter=match.group(2),
            initial_value=init,
            kind=infer_value_kind(init),
            line=line_at(source, match.start()),
        ))
    return variables


def _call_end(source: str, paren: int) -> int:
    """End index of a call expression, following chained method calls."""
    close = find_matching_paren(source, paren)
    if close == -1:
        line_end = source.find("\n", paren)
        return line_end if line_end != -1 else len(source)

    end = close + 1
    chained = CHAINED_CALL.match(source, end)
    while chained:
        close = find_matching_paren(source, chained.end() - 1)
        if close == -1:
            break
        end = close + 1
        chained = CHAINED_CALL.match(source, end)
    return end


def _inside_brackets(window: str) -> bool:
    return window.count("[") > window.count("]")


def extract_derived_variables(
    source: str,
    state_variables: Optional[Iterable[StateVariable]] = None,
) -> List[DerivedVariable]:
    """
    Find ``const name = source.op(...)`` declarations for the collection
    operations.

    Args:
        source: Raw file text
        state_variables: Already extracted state variables; extracted from
            ``source`` when omitted

    Returns:
        Derived variables in source order
    """
    if state_variables is None:
        state_variables = extract_state_variables(source)
    state_names = []
    for variable in state_variables:
        if variable.name not in state_names:
            state_names.append(variable.name)

    variables = []
    for match in DERIVED_DECLARATION.finditer(source):
        # Skip matches sitting inside a destructuring pattern
        window = source[max(0, match.start() - DESTRUCTURING_WINDOW):match.start()]
        if _inside_brackets(window):
            continue

        name, collection, operation_name = match.group(1), match.group(2), match.group(3)
        operation = CollectionOperation(operation_name)
        expression = source[match.start(2):_call_end(source, match.end() - 1)]

        dependencies = [state for state in state_names if state in expression]
        if collection in state_names and collection not in dependencies:
            dependencies.append(collection)

        variables.append(DerivedVariable(
            name=name,
            expression=expression,
            source=collection,
            operation=operation,
            result_kind=operation.result_kind,
            dependencies=dependencies,
            line=line_at(source, match.start()),
        ))
    return variables


def attach_variables(
    file: File,
    state_variables: List[StateVariable],
    derived_variables: List[DerivedVariable],
) -> None:
    """
    Distribute variables to components by line range.

    A component owns the lines from its declaration up to the next
    component's declaration, or to the end of the file for the last one.
    """
    components = file.components
    for index, component in enumerate(components):
        start = component.line
        end = components[index + 1].line if index + 1 < len(components) else None

        def owned(line: int) -> bool:
            return line >= start and (end is None or line < end)

        component.state_variables = [v for v in state_variables if owned(v.line)]
        component.derived_variables = [v for v in derived_variables if owned(v.line)]
