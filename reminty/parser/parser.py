"""
Recursive-descent parser for JSX component files.

Builds a File (imports, components, exports) from the token stream. Embedded
expressions are matched against a few known shapes; their markup parts are
re-parsed by a fresh Tokenizer/Parser pair, so no parser instance ever shares
its cursor or token buffer with another.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from reminty.models import (
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
    ParseWarning,
    Suggestion,
    Ternary,
    TextNode,
    Token,
    TokenKind,
)
from reminty.parser.expressions import (
    GUARD_PATTERN,
    ITERATION_PATTERN,
    is_empty_branch,
    iteration_body,
    line_of,
    split_ternary,
    strip_outer_parens,
)
from reminty.parser.extraction import (
    attach_variables,
    extract_derived_variables,
    extract_state_variables,
)
from reminty.parser.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

# Identifiers that start a new top-level statement
STATEMENT_KEYWORDS = frozenset({"import", "export", "function", "const", "let", "var", "class"})
IMPORT_BOUNDARY = frozenset({"import", "export", "function", "const"})

HOOK_NAME = re.compile(r"^use[A-Z]")
EVENT_ATTRIBUTE = re.compile(r"^on[A-Z]")
SETTER_CALL = re.compile(r"(set[A-Z]\w*)\s*\(")
SETTER_NAME = re.compile(r"^set[A-Z]")
LOWER_IDENTIFIER = re.compile(r"\b([a-z][a-zA-Z0-9]*)\b")
STRING_LITERAL = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|`(?:\\.|[^`\\])*`")
DEPENDENCY_ARRAY = re.compile(r",\s*\[([^\[\]]*)\]\s*$")

# Names never reported as state references of an event handler
HANDLER_EXCLUDED_NAMES = frozenset({
    "true", "false", "null", "undefined", "return", "if", "else", "const",
    "let", "var", "function", "new", "this", "event", "e", "target", "value",
})

# Hint and category attached to each known hook usage
DEFAULT_HOOK_HINTS: Dict[HookKind, Tuple[str, str]] = {
    HookKind.STATE: ("Consider: server state, mintydyn State, or HTMX pattern", "useState"),
    HookKind.EFFECT: ("Consider: server-side logic, OnInit hook, or HTMX trigger", "useEffect"),
    HookKind.LAYOUT_EFFECT: ("Consider: server-side logic, OnInit hook, or HTMX trigger", "useEffect"),
    HookKind.MEMO: ("Consider: Go function or method - no memoization needed server-side", "memoization"),
    HookKind.CALLBACK: ("Consider: Go function or method - no memoization needed server-side", "memoization"),
    HookKind.CONTEXT: ("Consider: function parameters or Go context.Context", "useContext"),
    HookKind.REF: ("Consider: mi.ID() for DOM references in mintydyn hooks", "useRef"),
    HookKind.REDUCER: ("Consider: mintydyn Rules for state machines", "useReducer"),
}


def unquote(text: str) -> str:
    """Strip one pair of matching single or double quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def dependency_list(arguments: str) -> Optional[List[str]]:
    """Entries of a trailing ``[a, b]`` argument, or None when there is none."""
    match = DEPENDENCY_ARRAY.search(arguments)
    if not match:
        return None
    return [entry.strip() for entry in match.group(1).split(",") if entry.strip()]


def parse_event_handler(event: str, body: str, line: int) -> EventHandler:
    """
    Classify the body of an ``onX={...}`` attribute.

    Args:
        event: Attribute name, e.g. onClick
        body: Raw expression text
        line: Line of the expression

    Returns:
        EventHandler with setter calls and referenced lowercase names
    """
    scrubbed = STRING_LITERAL.sub(" ", body)

    setter_calls: List[str] = []
    for setter in SETTER_CALL.findall(scrubbed):
        if setter not in setter_calls:
            setter_calls.append(setter)

    referenced: List[str] = []
    for name in LOWER_IDENTIFIER.findall(scrubbed):
        if name in HANDLER_EXCLUDED_NAMES or SETTER_NAME.match(name) or name in referenced:
            continue
        referenced.append(name)

    return EventHandler(
        event=event,
        body=body,
        is_inline="=>" in body,
        setter_calls=setter_calls,
        referenced_names=referenced,
        line=line,
    )


class Parser:
    """Parser over one owned token list."""

    def __init__(
        self,
        tokens: List[Token],
        source: Optional[str] = None,
        hook_hints: Optional[Dict[HookKind, Tuple[str, str]]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token list, normally produced by Tokenizer
            source: Original text; when given, parse() also extracts state and
                derived variables and attaches them to components
            hook_hints: Overrides for the (hint, category) pair per hook kind
        """
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind != TokenKind.EOF:
            last = self.tokens[-1] if self.tokens else None
            self.tokens.append(Token(
                kind=TokenKind.EOF,
                text="",
                line=last.line if last else 1,
                column=last.column + len(last.text) if last else 1,
                offset=last.offset + len(last.text) if last else 0,
            ))
        self.source = source
        self.hook_hints = dict(DEFAULT_HOOK_HINTS)
        if hook_hints:
            self.hook_hints.update(hook_hints)
        self.pos = 0
        self.warnings: List[ParseWarning] = []
        self.suggestions: List[Suggestion] = []
        self.exports: List[str] = []

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self) -> ParseResult:
        """
        Parse a whole file.

        Returns:
            ParseResult with the file tree and accumulated diagnostics
        """
        imports: List[Import] = []
        components: List[Component] = []

        while not self.is_at_end():
            self.skip_whitespace()
            if self.is_at_end():
                break

            if self.check_ident("import"):
                imports.append(self.parse_import())
                continue

            if self.check_ident("export") and self.parse_export_clause():
                continue

            if self.check_ident("function") or self.check_ident("const") or self.check_ident("export"):
                start = self.pos
                component = self.parse_component()
                if component is not None:
                    components.append(component)
                if self.pos == start:
                    self.advance()
                continue

            # Anything else is skipped
            self.advance()

        file = File(imports=imports, components=components, exports=self.exports)

        if self.source is not None:
            state_variables = extract_state_variables(self.source)
            derived_variables = extract_derived_variables(self.source, state_variables)
            attach_variables(file, state_variables, derived_variables)

        logger.debug(
            f"Parsed {len(components)} components and {len(imports)} imports "
            f"with {len(self.warnings)} warnings"
        )

        return ParseResult(file=file, warnings=self.warnings, suggestions=self.suggestions)

    def parse_markup(self) -> Optional[MarkupNode]:
        """Parse a single tag tree (or text/expression) at the cursor."""
        self.skip_whitespace()
        return self.parse_node()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_import(self) -> Import:
        line = self.current().line
        self.match_ident("import")
        self.skip_whitespace()

        default_binding = None
        namespace = None
        named: Dict[str, str] = {}
        source = None

        # Default import
        if self.check(TokenKind.IDENTIFIER) and not self.check_ident("from"):
            default_binding = self.advance().text
            self.skip_whitespace()
            self.match_punct(",")
            self.skip_whitespace()

        # Namespace import: * as ns
        if self.check(TokenKind.TEXT) and self.current().text == "*":
            self.advance()
            self.skip_whitespace()
            if self.match_ident("as"):
                self.skip_whitespace()
                if self.check(TokenKind.IDENTIFIER):
                    namespace = self.advance().text
            self.skip_whitespace()

        # Named imports { a, b as c }
        if self.match(TokenKind.EXPR_OPEN):
            while not self.is_at_end() and not self.check(TokenKind.EXPR_CLOSE):
                self.skip_whitespace()
                if self.check(TokenKind.IDENTIFIER):
                    name = self.advance().text
                    alias = name
                    self.skip_whitespace()
                    if self.match_ident("as"):
                        self.skip_whitespace()
                        if self.check(TokenKind.IDENTIFIER):
                            alias = self.advance().text
                    named[name] = alias
                elif not self.check(TokenKind.EXPR_CLOSE) and not self.check_punct(","):
                    self.advance()
                self.skip_whitespace()
                self.match_punct(",")
            self.match(TokenKind.EXPR_CLOSE)

        # from 'module', or a bare side-effect import
        self.skip_whitespace()
        if self.match_ident("from"):
            self.skip_whitespace()
        if self.check(TokenKind.STRING):
            source = unquote(self.advance().text)

        # Skip to the end of the statement
        while not self.is_at_end():
            token = self.current()
            if token.kind == TokenKind.IDENTIFIER and token.text in IMPORT_BOUNDARY:
                break
            self.advance()

        return Import(
            default_binding=default_binding,
            named=named,
            namespace=namespace,
            source=source,
            line=line,
        )

    def parse_export_clause(self) -> bool:
        """
        Record ``export { A, B }`` and ``export default Name``.

        Returns:
            True when the statement was consumed; False leaves the cursor on
            ``export`` for the component parse
        """
        start = self.pos
        self.advance()
        self.skip_whitespace()

        if self.match(TokenKind.EXPR_OPEN):
            while not self.is_at_end() and not self.check(TokenKind.EXPR_CLOSE):
                self.skip_whitespace()
                if self.check(TokenKind.IDENTIFIER):
                    name = self.advance().text
                    self.skip_whitespace()
                    if self.match_ident("as"):
                        self.skip_whitespace()
                        if self.check(TokenKind.IDENTIFIER):
                            name = self.advance().text
                    self.exports.append(name)
                elif not self.check(TokenKind.EXPR_CLOSE):
                    self.advance()
            self.match(TokenKind.EXPR_CLOSE)
            return True

        if self.match_ident("default"):
            self.skip_whitespace()
            token = self.current()
            if token.kind == TokenKind.IDENTIFIER and token.text not in ("function", "const", "class", "async"):
                self.exports.append(token.text)
                self.advance()
                return True

        self.pos = start
        return False

    def parse_component(self) -> Optional[Component]:
        """
        Parse ``function Name(...) {...}`` or ``const Name = (...) => ...``.

        Returns:
            Component, or None when the statement does not define one
        """
        start_line = self.current().line

        exported = self.match_ident("export")
        if exported:
            self.skip_whitespace()
            self.match_ident("default")
            self.skip_whitespace()

        if self.match_ident("const"):
            is_arrow = True
        elif self.match_ident("function"):
            is_arrow = False
        else:
            return None

        self.skip_whitespace()
        if not self.check(TokenKind.IDENTIFIER):
            return None
        name = self.advance().text
        if exported:
            self.exports.append(name)

        # Lowercase names are plain bindings unless they are hooks
        if name[0].islower() and not name.startswith("use"):
            self.skip_to_next_statement()
            return None

        if is_arrow:
            self.skip_whitespace()
            if self.check_punct(":"):
                # const Name: React.FC<Props> = ...
                while not self.is_at_end() and not self.check_punct("="):
                    self.advance()
            if not self.match_punct("="):
                self.skip_to_next_statement()
                return None
            self.skip_whitespace()
            if not self.at_function_shape():
                self.skip_to_next_statement()
                return None
            self.match_ident("async")
            self.skip_whitespace()
            if self.match_ident("function"):
                is_arrow = False
                self.skip_whitespace()
                self.match(TokenKind.IDENTIFIER)

        component = Component(name=name, line=start_line)

        self.skip_whitespace()
        if self.match_punct("("):
            component.params = self.parse_params()
        elif is_arrow and self.check(TokenKind.IDENTIFIER):
            component.params = [Param(name=self.advance().text)]

        # Return type annotation
        self.skip_whitespace()
        if self.check_punct(":"):
            while not self.is_at_end() and not self.check(TokenKind.EXPR_OPEN) and not self.check_punct("=>"):
                self.advance()

        if is_arrow:
            self.skip_whitespace()
            self.match_punct("=>")

        component.body = self.parse_component_body(component)
        return component

    def at_function_shape(self) -> bool:
        """Whether the cursor sits on the start of a function expression."""
        token = self.current()
        if token.is_punct("("):
            return True
        if token.is_ident("function") or token.is_ident("async"):
            return True
        if token.kind == TokenKind.IDENTIFIER:
            following = self.next_significant(self.pos + 1)
            return self.tokens[following].is_punct("=>")
        return False

    def parse_params(self) -> List[Param]:
        """Parse a parameter list; the opening paren is already consumed."""
        params: List[Param] = []
        self.skip_whitespace()

        if self.match(TokenKind.EXPR_OPEN):
            while not self.is_at_end() and not self.check(TokenKind.EXPR_CLOSE):
                self.skip_whitespace()
                if self.match_punct("..."):
                    self.skip_whitespace()
                    if self.check(TokenKind.IDENTIFIER):
                        params.append(Param(name=self.advance().text, is_rest=True))
                elif self.check(TokenKind.IDENTIFIER):
                    param = Param(name=self.advance().text)
                    self.skip_whitespace()
                    if self.match_punct(":"):
                        # Renamed or nested pattern
                        self.read_value()
                    elif self.match_punct("="):
                        self.skip_whitespace()
                        if self.check(TokenKind.STRING):
                            param.default_value = self.advance().text
                        else:
                            param.default_value = self.read_value().strip()
                    params.append(param)
                elif not self.check(TokenKind.EXPR_CLOSE) and not self.check_punct(","):
                    self.advance()
                self.skip_whitespace()
                self.match_punct(",")
            self.match(TokenKind.EXPR_CLOSE)
        elif self.check(TokenKind.IDENTIFIER):
            params.append(Param(name=self.advance().text))

        # Type annotations and anything else up to the closing paren
        self.read_to_closing_paren()
        return params

    def parse_component_body(self, component: Component) -> Optional[MarkupNode]:
        """
        Scan a component body for hooks and the returned tag tree.

        Hook usages are appended to ``component.hooks``. Only a ``return`` at
        the component's own block depth counts.

        Returns:
            The returned tree, or None when the body returns no markup
        """
        self.skip_whitespace()

        # Arrow function with an implicit return
        if not self.check(TokenKind.EXPR_OPEN):
            if self.check(TokenKind.TAG_OPEN):
                return self.parse_node()
            if self.check_punct("("):
                start = self.pos
                self.advance()
                self.skip_whitespace()
                if self.check(TokenKind.TAG_OPEN):
                    node = self.parse_node()
                    self.read_to_closing_paren()
                    return node
                self.pos = start
            return None

        depth = 0
        body = None
        while not self.is_at_end():
            token = self.current()

            if token.kind == TokenKind.EXPR_OPEN:
                depth += 1
            elif token.kind == TokenKind.EXPR_CLOSE:
                depth -= 1
                if depth <= 0:
                    self.advance()
                    break
            elif token.kind == TokenKind.IDENTIFIER:
                if HOOK_NAME.match(token.text) and self.is_call(self.pos):
                    component.hooks.append(self.parse_hook())
                    continue
                if token.text == "return" and depth == 1 and body is None:
                    self.advance()
                    self.skip_whitespace()
                    if self.match_punct("("):
                        self.skip_whitespace()
                    if self.check(TokenKind.TAG_OPEN):
                        body = self.parse_node()
                    continue

            self.advance()

        return body

    def is_call(self, index: int) -> bool:
        """Whether the identifier at ``index`` is called, generics allowed."""
        following = self.next_significant(index + 1)
        token = self.tokens[following]
        if token.is_punct("("):
            return True
        if token.kind != TokenKind.TAG_OPEN:
            return False

        # useState<string>(...)
        for scan in range(following + 1, len(self.tokens)):
            kind = self.tokens[scan].kind
            if kind == TokenKind.TAG_CLOSE:
                return self.tokens[self.next_significant(scan + 1)].is_punct("(")
            if kind in (TokenKind.EOF, TokenKind.EXPR_OPEN, TokenKind.EXPR_CLOSE):
                return False
        return False

    def parse_hook(self) -> HookUsage:
        """Parse a hook call at the cursor and record its suggestion."""
        name_index = self.pos
        token = self.advance()
        kind = HookKind.from_name(token.text)
        binding, setter = self.hook_binding(name_index)

        self.skip_whitespace()
        if self.check(TokenKind.TAG_OPEN):
            while not self.is_at_end() and not self.match(TokenKind.TAG_CLOSE):
                self.advance()
            self.skip_whitespace()

        arguments = ""
        if self.match_punct("("):
            arguments = self.read_to_closing_paren().strip()

        hint = self.hook_hints.get(kind)
        if hint is not None:
            self.add_suggestion(token.line, token.text, hint[0], hint[1])

        return HookUsage(
            hook=token.text,
            kind=kind,
            binding=binding,
            setter=setter,
            arguments=arguments,
            dependencies=dependency_list(arguments),
            line=token.line,
        )

    def hook_binding(self, index: int) -> Tuple[Optional[str], Optional[str]]:
        """
        Walk back from a hook name to the names its result is bound to.

        Handles ``const x = useX(...)``, ``const [x, setX] = useX(...)`` and
        the ``React.useX`` spelling.
        """
        i = self.previous_significant(index - 1)
        if i >= 0 and self.tokens[i].is_punct("."):
            i = self.previous_significant(i - 1)
            i = self.previous_significant(i - 1)
        if i < 0 or not self.tokens[i].is_punct("="):
            return None, None

        i = self.previous_significant(i - 1)
        if i < 0:
            return None, None

        token = self.tokens[i]
        if token.kind == TokenKind.IDENTIFIER:
            return token.text, None

        if token.text == "]":
            names: List[str] = []
            i -= 1
            while i >= 0 and self.tokens[i].text != "[":
                if self.tokens[i].kind == TokenKind.IDENTIFIER:
                    names.insert(0, self.tokens[i].text)
                i -= 1
            if names:
                return names[0], names[1] if len(names) > 1 else None

        return None, None

    def skip_to_next_statement(self) -> None:
        depth = 0
        while not self.is_at_end():
            token = self.current()
            if token.kind == TokenKind.EXPR_OPEN:
                depth += 1
            elif token.kind == TokenKind.EXPR_CLOSE:
                depth -= 1
                if depth < 0:
                    return
            if depth == 0 and token.kind == TokenKind.IDENTIFIER and token.text in STATEMENT_KEYWORDS:
                return
            self.advance()

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------

    def parse_node(self) -> Optional[MarkupNode]:
        self.skip_whitespace()

        if self.is_at_end():
            return None
        if self.check(TokenKind.EXPR_OPEN):
            return self.parse_expression()
        if self.check(TokenKind.TAG_OPEN):
            return self.parse_element()
        return self.parse_text()

    def parse_element(self) -> Optional[MarkupNode]:
        """
        Parse an element or fragment starting at ``<``.

        Structural problems (missing tag name, missing ``>``, mismatched or
        missing end tag) are recorded as warnings and the partial element is
        returned.
        """
        open_token = self.advance()
        self.skip_whitespace()

        # Fragment <>
        if self.match(TokenKind.TAG_CLOSE):
            return self.parse_fragment(open_token.line)

        if not self.check(TokenKind.IDENTIFIER):
            self.add_warning("Expected tag name after <")
            return None

        tag_token = self.advance()
        tag = self.read_member_name(tag_token.text)

        # Attributes
        attributes: List[Attribute] = []
        while not self.is_at_end() and not self.check(TokenKind.TAG_CLOSE) and not self.check(TokenKind.SELF_CLOSE):
            self.skip_whitespace()
            if self.check(TokenKind.TAG_CLOSE) or self.check(TokenKind.SELF_CLOSE) or self.is_at_end():
                break

            start = self.pos
            attribute = self.parse_attribute()
            if attribute is not None:
                attributes.append(attribute)
            elif self.pos == start:
                self.add_warning(f"Unexpected {self.current().text!r} in <{tag}> attributes")
                self.advance()

        # Self-closing tag
        if self.match(TokenKind.SELF_CLOSE):
            return Element(tag=tag, attributes=attributes, self_closing=True, line=tag_token.line)

        if not self.match(TokenKind.TAG_CLOSE):
            self.add_warning("Expected > to close tag")
            return Element(tag=tag, attributes=attributes, line=tag_token.line)

        children = self.parse_children()

        # Closing tag
        if self.match(TokenKind.TAG_END):
            self.skip_whitespace()
            if self.check(TokenKind.IDENTIFIER):
                closing = self.read_member_name(self.advance().text)
                if closing != tag:
                    self.add_warning(f"Mismatched closing tag: expected </{tag}>, got </{closing}>")
            self.skip_whitespace()
            if not self.match(TokenKind.TAG_CLOSE):
                self.add_warning("Expected > to close tag")
        else:
            self.add_warning(f"Unclosed element <{tag}>")

        return Element(tag=tag, attributes=attributes, children=children, line=tag_token.line)

    def parse_fragment(self, line: int) -> Fragment:
        children = self.parse_children()

        if self.match(TokenKind.TAG_END):
            self.skip_whitespace()
            if self.check(TokenKind.IDENTIFIER):
                closing = self.read_member_name(self.advance().text)
                self.add_warning(f"Mismatched closing tag: expected </>, got </{closing}>")
            self.skip_whitespace()
            self.match(TokenKind.TAG_CLOSE)
        else:
            self.add_warning("Unclosed fragment <>")

        return Fragment(children=children, line=line)

    def parse_children(self) -> List[MarkupNode]:
        children: List[MarkupNode] = []
        while not self.is_at_end():
            self.skip_whitespace()
            if self.check(TokenKind.TAG_END):
                break
            child = self.parse_node()
            if child is None:
                break
            children.append(child)
        return children

    def parse_attribute(self) -> Optional[Attribute]:
        self.skip_whitespace()

        # Spread attribute {...props}
        if self.check(TokenKind.EXPR_OPEN):
            self.advance()
            self.skip_whitespace()
            if self.match_punct("..."):
                content = self.parse_expression_content()
                return Attribute(is_spread=True, spread_expression=content.raw)
            self.add_warning("Expected attribute name")
            self.parse_expression_content()
            return None

        if not self.check(TokenKind.IDENTIFIER):
            return None

        name = self.advance().text

        # Namespaced names such as xlink:href
        if self.check_punct(":") and self.tokens[self.pos + 1].kind == TokenKind.IDENTIFIER:
            self.advance()
            name = f"{name}:{self.advance().text}"

        self.skip_whitespace()

        # Boolean attribute
        if not self.match_punct("="):
            return Attribute(name=name)

        self.skip_whitespace()

        if self.check(TokenKind.STRING):
            return Attribute(name=name, value=unquote(self.advance().text))

        if self.match(TokenKind.EXPR_OPEN):
            expression = self.parse_expression_content()
            handler = None
            if EVENT_ATTRIBUTE.match(name):
                handler = parse_event_handler(name, expression.raw, expression.line)
            return Attribute(name=name, expression=expression, event_handler=handler)

        return Attribute(name=name)

    def parse_text(self) -> Optional[TextNode]:
        line = self.current().line
        parts: List[str] = []

        while not self.is_at_end():
            token = self.current()
            if token.kind in (TokenKind.TAG_OPEN, TokenKind.TAG_END, TokenKind.EXPR_OPEN):
                break
            parts.append(token.text)
            self.advance()

        content = "".join(parts).strip()
        if not content:
            return None
        return TextNode(content=content, line=line)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> MarkupNode:
        self.advance()  # {
        expression = self.parse_expression_content()
        node = self.analyze_expression(expression)
        return node if node is not None else expression

    def parse_expression_content(self) -> Expression:
        """Collect balanced-brace raw text; the opening brace is consumed."""
        depth = 1
        line = None
        parts: List[str] = []
        closed = False

        while not self.is_at_end():
            token = self.current()
            if token.kind == TokenKind.EXPR_OPEN:
                depth += 1
            elif token.kind == TokenKind.EXPR_CLOSE:
                depth -= 1
                if depth == 0:
                    self.advance()
                    closed = True
                    break
            if line is None and token.kind != TokenKind.WHITESPACE:
                line = token.line
            parts.append(token.text)
            self.advance()

        if not closed:
            self.add_warning("Unterminated expression, expected }")

        return Expression(raw="".join(parts).strip(), line=line if line is not None else self.current().line)

    def analyze_expression(self, expression: Expression) -> Optional[MarkupNode]:
        """
        Match iteration, guard and ternary shapes, in that order.

        Returns:
            Iteration, Guard or Ternary node, or None for unrecognised text
        """
        raw = expression.raw

        match = ITERATION_PATTERN.match(raw)
        if match:
            body_text, body_start = iteration_body(raw, match)
            body = self.parse_branch(body_text, line_of(raw, body_text.strip(), body_start, expression.line))
            return Iteration(
                collection=match.group(1),
                item_name=match.group(2),
                index_name=match.group(3),
                body=body,
                line=expression.line,
            )

        match = GUARD_PATTERN.match(raw)
        if match:
            body_text = strip_outer_parens(raw[match.end():])
            return Guard(
                condition=match.group(1).strip(),
                body=self.parse_branch(body_text, line_of(raw, body_text, match.end(), expression.line)),
                line=expression.line,
            )

        parts = split_ternary(raw)
        if parts:
            condition, consequent, alternate = parts
            consequent_text = strip_outer_parens(consequent)
            alternate_text = strip_outer_parens(alternate)
            consequent_line = line_of(raw, consequent_text, raw.index("?") + 1, expression.line)
            alternate_line = line_of(raw, alternate_text, raw.rfind(alternate), expression.line)
            return Ternary(
                condition=condition,
                consequent=self.parse_branch(consequent_text, consequent_line),
                alternate=self.parse_branch(alternate_text, alternate_line),
                line=expression.line,
            )

        return None

    def parse_branch(self, text: str, line: int) -> Optional[MarkupNode]:
        """
        Turn the markup part of an expression into a node.

        Markup is re-parsed by a fresh parser; nested iteration, guard and
        ternary shapes are recognised recursively; other text stays a raw
        expression. ``null``/``undefined`` branches are empty.
        """
        text = text.strip()
        if is_empty_branch(text):
            return None

        if text.startswith("<"):
            sub_parser = Parser(Tokenizer(text, start_line=line).tokenize(), hook_hints=self.hook_hints)
            node = sub_parser.parse_markup()
            self.warnings.extend(sub_parser.warnings)
            return node

        nested = self.analyze_expression(Expression(raw=text, line=line))
        if nested is not None:
            return nested
        return Expression(raw=text, line=line)

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def current(self) -> Token:
        if self.pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.current()
        if not self.is_at_end():
            self.pos += 1
        return token

    def is_at_end(self) -> bool:
        return self.current().kind == TokenKind.EOF

    def check(self, kind: TokenKind) -> bool:
        return self.current().kind == kind

    def check_ident(self, value: str) -> bool:
        return self.current().is_ident(value)

    def check_punct(self, value: str) -> bool:
        return self.current().is_punct(value)

    def match(self, kind: TokenKind) -> bool:
        if self.check(kind):
            self.advance()
            return True
        return False

    def match_ident(self, value: str) -> bool:
        if self.check_ident(value):
            self.advance()
            return True
        return False

    def match_punct(self, value: str) -> bool:
        if self.check_punct(value):
            self.advance()
            return True
        return False

    def skip_whitespace(self) -> None:
        while self.check(TokenKind.WHITESPACE):
            self.advance()

    def next_significant(self, index: int) -> int:
        """Index of the first non-whitespace token at or after ``index``."""
        last = len(self.tokens) - 1
        while index < last and self.tokens[index].kind == TokenKind.WHITESPACE:
            index += 1
        return min(index, last)

    def previous_significant(self, index: int) -> int:
        """Index of the first non-whitespace token at or before ``index``, or -1."""
        while index >= 0 and self.tokens[index].kind == TokenKind.WHITESPACE:
            index -= 1
        return index

    def read_value(self) -> str:
        """Read raw text up to a comma or closer at depth zero."""
        depth = 0
        parts: List[str] = []
        while not self.is_at_end():
            token = self.current()
            if token.kind == TokenKind.EXPR_OPEN or token.text in ("(", "["):
                depth += 1
            elif token.kind == TokenKind.EXPR_CLOSE or token.text in (")", "]"):
                if depth == 0:
                    break
                depth -= 1
            elif token.is_punct(",") and depth == 0:
                break
            parts.append(token.text)
            self.advance()
        return "".join(parts)

    def read_to_closing_paren(self) -> str:
        """Consume through the ``)`` closing an already consumed ``(``."""
        depth = 0
        parts: List[str] = []
        while not self.is_at_end():
            token = self.advance()
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                if depth == 0:
                    break
                depth -= 1
            parts.append(token.text)
        return "".join(parts)

    def read_member_name(self, name: str) -> str:
        """Extend ``name`` with ``.member`` parts, e.g. Foo.Bar."""
        while self.check_punct(".") and self.tokens[self.pos + 1].kind == TokenKind.IDENTIFIER:
            self.advance()
            name = f"{name}.{self.advance().text}"
        return name

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def add_warning(self, message: str) -> None:
        token = self.current()
        self.warnings.append(ParseWarning(line=token.line, column=token.column, message=message))

    def add_suggestion(self, line: int, original_text: str, hint: str, category: str) -> None:
        self.suggestions.append(Suggestion(
            line=line,
            original_text=original_text,
            hint=hint,
            category=category,
        ))


def parse_source(
    source: str,
    hook_hints: Optional[Dict[HookKind, Tuple[str, str]]] = None,
) -> ParseResult:
    """
    Tokenize and parse a file, attaching extracted variables to components.

    Args:
        source: File contents
        hook_hints: Optional overrides for hook suggestions

    Returns:
        ParseResult for the file
    """
    tokens = Tokenizer(source).tokenize()
    return Parser(tokens, source=source, hook_hints=hook_hints).parse()
