"""
Syntax tree data models.

Markup nodes form a discriminated union on ``node_type`` so a parsed tree
can be dumped to JSON and validated back without losing variant types.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from reminty.models.diagnostics import ParseWarning, Suggestion
from reminty.models.variables import DerivedVariable, StateVariable


class HookKind(str, Enum):
    """Known hook functions; anything else named ``useX`` is CUSTOM."""

    STATE = "useState"
    EFFECT = "useEffect"
    LAYOUT_EFFECT = "useLayoutEffect"
    MEMO = "useMemo"
    CALLBACK = "useCallback"
    CONTEXT = "useContext"
    REF = "useRef"
    REDUCER = "useReducer"
    CUSTOM = "custom"

    @classmethod
    def from_name(cls, name: str) -> "HookKind":
        for kind in cls:
            if kind.value == name:
                return kind
        return cls.CUSTOM

    @property
    def is_side_effect(self) -> bool:
        return self in (HookKind.EFFECT, HookKind.LAYOUT_EFFECT)


class Param(BaseModel):
    """Component parameter (a destructured prop or the whole props object)."""

    name: str
    default_value: Optional[str] = None
    is_rest: bool = False


class HookUsage(BaseModel):
    """A hook call found in a component body."""

    hook: str = Field(..., description="Hook function name, e.g. useState")
    kind: HookKind = HookKind.CUSTOM
    binding: Optional[str] = Field(None, description="Name the result is bound to")
    setter: Optional[str] = Field(None, description="Second destructured name, if any")
    arguments: str = Field("", description="Raw argument text")
    dependencies: Optional[List[str]] = Field(None, description="Trailing dependency array entries")
    line: int


class EventHandler(BaseModel):
    """Body of an ``onX={...}`` attribute with the names it touches."""

    event: str
    body: str
    is_inline: bool = False
    setter_calls: List[str] = []
    referenced_names: List[str] = []
    line: int


class Expression(BaseModel):
    """Raw embedded expression that matched no known shape."""

    node_type: Literal["expression"] = "expression"
    raw: str
    line: int


class Attribute(BaseModel):
    """Element attribute; spread attributes carry only ``spread_expression``."""

    name: str = ""
    value: Optional[str] = None
    expression: Optional[Expression] = None
    is_spread: bool = False
    spread_expression: Optional[str] = None
    event_handler: Optional[EventHandler] = None


class TextNode(BaseModel):
    node_type: Literal["text"] = "text"
    content: str
    line: int


class Element(BaseModel):
    node_type: Literal["element"] = "element"
    tag: str
    attributes: List[Attribute] = []
    children: List["MarkupNode"] = []
    self_closing: bool = False
    line: int

    def attribute(self, name: str) -> Optional[Attribute]:
        for attr in self.attributes:
            if not attr.is_spread and attr.name == name:
                return attr
        return None


class Fragment(BaseModel):
    node_type: Literal["fragment"] = "fragment"
    children: List["MarkupNode"] = []
    line: int


class Iteration(BaseModel):
    """``collection.map((item, index) => body)``"""

    node_type: Literal["iteration"] = "iteration"
    collection: str
    item_name: str
    index_name: Optional[str] = None
    body: Optional["MarkupNode"] = None
    line: int


class Guard(BaseModel):
    """``condition && body``"""

    node_type: Literal["guard"] = "guard"
    condition: str
    body: Optional["MarkupNode"] = None
    line: int


class Ternary(BaseModel):
    """``condition ? consequent : alternate``"""

    node_type: Literal["ternary"] = "ternary"
    condition: str
    consequent: Optional["MarkupNode"] = None
    alternate: Optional["MarkupNode"] = None
    line: int


MarkupNode = Annotated[
    Union[Element, TextNode, Expression, Fragment, Iteration, Guard, Ternary],
    Field(discriminator="node_type"),
]


class Import(BaseModel):
    node_type: Literal["import"] = "import"
    default_binding: Optional[str] = None
    named: Dict[str, str] = Field(default_factory=dict, description="Imported name to local alias")
    namespace: Optional[str] = None
    source: Optional[str] = None
    line: int


class Component(BaseModel):
    """Component definition with its tree and attached variables."""

    node_type: Literal["component"] = "component"
    name: str
    params: List[Param] = []
    body: Optional[MarkupNode] = None
    hooks: List[HookUsage] = []
    state_variables: List[StateVariable] = []
    derived_variables: List[DerivedVariable] = []
    line: int


SyntaxNode = Union[Component, Import, Element, TextNode, Expression, Fragment, Iteration, Guard, Ternary]


class File(BaseModel):
    """A parsed source unit."""

    imports: List[Import] = []
    components: List[Component] = []
    exports: List[str] = []


class ParseResult(BaseModel):
    """Parsed file plus accumulated diagnostics."""

    file: File = Field(default_factory=File)
    warnings: List[ParseWarning] = []
    suggestions: List[Suggestion] = []


# Resolve the recursive markup references
for _model in (Element, Fragment, Iteration, Guard, Ternary, Component, File, ParseResult):
    _model.model_rebuild()
