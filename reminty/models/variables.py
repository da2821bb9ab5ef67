"""
Data models for reactive state and derived values.

State variables come from `const [x, setX] = useState(init)` declarations;
derived variables are collection operations computed over other values.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ValueKind(str, Enum):
    """Coarse value kind inferred from source text."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    ARRAY_OF_ANY = "array"
    OBJECT_OF_ANY = "object"
    UNKNOWN = "unknown"

    @property
    def is_numeric(self) -> bool:
        return self in (ValueKind.INT, ValueKind.FLOAT)


class CollectionOperation(str, Enum):
    """Array method a derived value is computed with."""

    FILTER = "filter"
    MAP = "map"
    FIND = "find"
    SOME = "some"
    EVERY = "every"
    REDUCE = "reduce"
    SORT = "sort"
    SLICE = "slice"

    @property
    def result_kind(self) -> ValueKind:
        return _RESULT_KINDS[self]


_RESULT_KINDS = {
    CollectionOperation.FILTER: ValueKind.ARRAY_OF_ANY,
    CollectionOperation.MAP: ValueKind.ARRAY_OF_ANY,
    CollectionOperation.FIND: ValueKind.UNKNOWN,
    CollectionOperation.SOME: ValueKind.BOOL,
    CollectionOperation.EVERY: ValueKind.BOOL,
    CollectionOperation.REDUCE: ValueKind.UNKNOWN,
    CollectionOperation.SORT: ValueKind.ARRAY_OF_ANY,
    CollectionOperation.SLICE: ValueKind.ARRAY_OF_ANY,
}


class StateVariable(BaseModel):
    """A reactive binding declared with a paired setter."""

    name: str = Field(..., pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*$", description="Bound variable name")
    setter: str = Field(..., description="Setter function name")
    initial_value: str = Field("", description="Initializer text as written")
    kind: ValueKind = Field(ValueKind.UNKNOWN, description="Inferred value kind")
    line: int = Field(..., description="Declaration line (1-indexed)")


class DerivedVariable(BaseModel):
    """A value computed by a collection operation."""

    name: str = Field(..., description="Bound variable name")
    expression: str = Field("", description="Full right-hand side expression")
    source: str = Field(..., description="Identifier of the source collection")
    operation: CollectionOperation
    result_kind: ValueKind = ValueKind.UNKNOWN
    dependencies: List[str] = Field(default_factory=list, description="State variables referenced")
    line: int = Field(..., description="Declaration line (1-indexed)")
