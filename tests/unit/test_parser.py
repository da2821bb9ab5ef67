"""Unit tests for the JSX structural parser."""

import pytest

from reminty.models import (
    Element,
    Expression,
    Fragment,
    Guard,
    HookKind,
    Iteration,
    Ternary,
    TextNode,
)
from reminty.parser.parser import Parser, parse_event_handler, parse_source
from reminty.parser.tokenizer import tokenize


def parse_markup(source):
    """Parse a standalone tag tree and return (node, parser)."""
    parser = Parser(tokenize(source))
    return parser.parse_markup(), parser


@pytest.fixture
def counter_source():
    """Component with state, an effect and an inline handler."""
    return """function Counter() {
  const [count, setCount] = useState(0);
  useEffect(() => {
    document.title = count;
  }, [count]);
  return <button onClick={() => setCount(count + 1)}>{count}</button>;
}
"""


class TestComponents:
    """Test cases for component recognition."""

    def test_function_component_end_to_end(self):
        """Test a function component with a destructured prop."""
        result = parse_source("function C({x}){ return <div>{x}</div>; }")

        assert len(result.file.components) == 1
        component = result.file.components[0]
        assert component.name == "C"
        assert [p.name for p in component.params] == ["x"]

        body = component.body
        assert isinstance(body, Element)
        assert body.tag == "div"
        assert len(body.children) == 1
        assert isinstance(body.children[0], Expression)
        assert body.children[0].raw == "x"
        assert result.warnings == []

    def test_arrow_component_with_implicit_return(self):
        """Test params with defaults and rest, and an implicit return."""
        result = parse_source('const Greeting = ({ name = "World", ...rest }) => <h1>Hello {name}</h1>;')

        component = result.file.components[0]
        assert component.name == "Greeting"
        assert component.params[0].name == "name"
        assert component.params[0].default_value == '"World"'
        assert component.params[1].name == "rest"
        assert component.params[1].is_rest

        body = component.body
        assert body.tag == "h1"
        assert isinstance(body.children[0], TextNode)
        assert body.children[0].content == "Hello"
        assert body.children[1].raw == "name"

    def test_arrow_component_with_parenthesized_return(self):
        """Test an implicit return wrapped in parentheses."""
        source = "const Card = (props) => (\n  <section>{props.title}</section>\n);"

        component = parse_source(source).file.components[0]

        assert [p.name for p in component.params] == ["props"]
        assert component.body.tag == "section"
        assert component.body.line == 2

    def test_lowercase_binding_is_not_a_component(self):
        """Test that plain lowercase constants are skipped."""
        source = "const helper = () => 1;\nfunction App() { return <div/>; }"

        components = parse_source(source).file.components

        assert [c.name for c in components] == ["App"]
        assert components[0].line == 2
        assert components[0].body.self_closing

    def test_non_function_constant_is_skipped(self):
        """Test that a capitalised constant without a function is skipped."""
        source = "const Config = { a: 1 };\nfunction App() { return <div/>; }"

        components = parse_source(source).file.components

        assert [c.name for c in components] == ["App"]

    def test_first_top_level_return_wins(self):
        """Test that returns in nested blocks are ignored."""
        source = """function Gate({ x }) {
  if (x) {
    return <span/>;
  }
  return <div/>;
}"""

        component = parse_source(source).file.components[0]

        assert component.body.tag == "div"

    def test_typed_arrow_component(self):
        """Test a type annotation before the initializer."""
        source = "const Panel: React.FC<Props> = ({ title }) => <div>{title}</div>;"

        component = parse_source(source).file.components[0]

        assert component.name == "Panel"
        assert [p.name for p in component.params] == ["title"]
        assert component.body.tag == "div"


class TestImportsAndExports:
    """Test cases for module statements."""

    def test_imports(self):
        """Test default, named, namespace and side-effect imports."""
        source = (
            "import React, { useState, useEffect as ue } from 'react';\n"
            "import * as utils from './utils';\n"
            "import './styles.css';\n"
        )

        imports = parse_source(source).file.imports

        assert len(imports) == 3
        assert imports[0].default_binding == "React"
        assert imports[0].named == {"useState": "useState", "useEffect": "ue"}
        assert imports[0].source == "react"
        assert imports[1].namespace == "utils"
        assert imports[1].source == "./utils"
        assert imports[2].default_binding is None
        assert imports[2].source == "./styles.css"
        assert [i.line for i in imports] == [1, 2, 3]

    def test_export_default_function(self):
        """Test an exported component declaration."""
        result = parse_source("export default function App() { return <div/>; }")

        assert result.file.exports == ["App"]
        assert result.file.components[0].name == "App"

    def test_export_clause_and_default_name(self):
        """Test export lists and default re-exports."""
        source = (
            "function A() { return <div/>; }\n"
            "export { A as Alpha, B };\n"
            "export default A;\n"
        )

        result = parse_source(source)

        assert result.file.exports == ["Alpha", "B", "A"]
        assert [c.name for c in result.file.components] == ["A"]


class TestHooks:
    """Test cases for hook usage recognition."""

    def test_hook_usages(self, counter_source):
        """Test state and effect hooks with bindings and dependencies."""
        component = parse_source(counter_source).file.components[0]

        state, effect = component.hooks
        assert state.hook == "useState"
        assert state.kind == HookKind.STATE
        assert state.binding == "count"
        assert state.setter == "setCount"
        assert state.arguments == "0"
        assert state.line == 2

        assert effect.kind == HookKind.EFFECT
        assert effect.binding is None
        assert effect.dependencies == ["count"]
        assert effect.line == 3

    def test_suggestions(self, counter_source):
        """Test that known hooks produce migration hints."""
        suggestions = parse_source(counter_source).suggestions

        assert [(s.line, s.original_text, s.category) for s in suggestions] == [
            (2, "useState", "useState"),
            (3, "useEffect", "useEffect"),
        ]
        assert suggestions[0].hint == "Consider: server state, mintydyn State, or HTMX pattern"

    def test_hook_hint_override(self, counter_source):
        """Test replacing the hint for one hook kind."""
        result = parse_source(counter_source, hook_hints={HookKind.STATE: ("Keep it on the server", "state")})

        assert result.suggestions[0].hint == "Keep it on the server"
        assert result.suggestions[0].category == "state"
        assert result.suggestions[1].category == "useEffect"

    def test_namespaced_and_generic_hooks(self):
        """Test React.useState and type arguments."""
        source = """function Form() {
  const [open, setOpen] = React.useState(false);
  const [name, setName] = useState<string>('');
  return <form/>;
}"""

        hooks = parse_source(source).file.components[0].hooks

        assert [(h.binding, h.setter) for h in hooks] == [("open", "setOpen"), ("name", "setName")]
        assert hooks[1].arguments == "''"

    def test_custom_hook(self):
        """Test that unknown hooks are recorded without a suggestion."""
        result = parse_source("function A() { const data = useFetch('/api'); return <div/>; }")

        hook = result.file.components[0].hooks[0]
        assert hook.kind == HookKind.CUSTOM
        assert hook.binding == "data"
        assert hook.arguments == "'/api'"
        assert hook.dependencies is None
        assert result.suggestions == []

    def test_event_handler_attribute(self, counter_source):
        """Test handler analysis on an onX attribute."""
        button = parse_source(counter_source).file.components[0].body

        handler = button.attribute("onClick").event_handler
        assert handler.event == "onClick"
        assert handler.is_inline
        assert handler.setter_calls == ["setCount"]
        assert handler.referenced_names == ["count"]
        assert handler.line == 6


class TestMarkup:
    """Test cases for tag trees."""

    def test_attributes(self):
        """Test string, expression, boolean, spread and namespaced attributes."""
        node, parser = parse_markup(
            '<input className="field" value={name} disabled {...rest} xlink:href="#icon" />'
        )

        assert node.tag == "input"
        assert node.self_closing
        assert node.attribute("className").value == "field"
        assert node.attribute("value").expression.raw == "name"
        assert node.attribute("disabled").value is None
        assert node.attribute("disabled").expression is None
        assert node.attributes[3].is_spread
        assert node.attributes[3].spread_expression == "rest"
        assert node.attribute("xlink:href").value == "#icon"
        assert parser.warnings == []

    def test_member_tag_name(self):
        """Test dotted component names."""
        node, _ = parse_markup("<Tabs.Panel id='a'></Tabs.Panel>")

        assert node.tag == "Tabs.Panel"
        assert node.attribute("id").value == "a"

    def test_fragment(self):
        """Test an empty-tag fragment."""
        node, parser = parse_markup("<>\n  <A/>\n  <B/>\n</>")

        assert isinstance(node, Fragment)
        assert [child.tag for child in node.children] == ["A", "B"]
        assert parser.warnings == []

    def test_mismatched_closing_tag(self):
        """Test that a wrong closing tag is a warning, not a failure."""
        node, parser = parse_markup("<div><span></div>")

        assert node.tag == "div"
        assert node.children[0].tag == "span"
        messages = [w.message for w in parser.warnings]
        assert "Mismatched closing tag: expected </span>, got </div>" in messages

    def test_missing_tag_name(self):
        """Test a tag opener without a name."""
        node, parser = parse_markup("<1>")

        assert node is None
        assert parser.warnings[0].message == "Expected tag name after <"

    def test_unterminated_expression(self):
        """Test an expression that never closes."""
        node, parser = parse_markup("<div>{value</div>")

        assert node.tag == "div"
        messages = [w.message for w in parser.warnings]
        assert "Unterminated expression, expected }" in messages

    def test_malformed_component_still_parses(self):
        """Test that broken markup degrades to warnings."""
        result = parse_source("function A() { return <div><span></div>; }")

        assert result.file.components[0].name == "A"
        assert result.warnings


class TestExpressions:
    """Test cases for embedded expression shapes."""

    def test_iteration(self):
        """Test a map call with item and index names."""
        source = """function List({ items }) {
  return (
    <ul>
      {items.map((item, i) => (
        <li key={i}>{item}</li>
      ))}
    </ul>
  );
}"""

        ul = parse_source(source).file.components[0].body

        iteration = ul.children[0]
        assert isinstance(iteration, Iteration)
        assert iteration.collection == "items"
        assert iteration.item_name == "item"
        assert iteration.index_name == "i"
        assert iteration.line == 4
        assert iteration.body.tag == "li"
        assert iteration.body.line == 5
        assert iteration.body.attribute("key").expression.raw == "i"

    def test_guard(self):
        """Test a logical-and guard."""
        node, _ = parse_markup("<div>{isOpen && <Modal onClose={() => setIsOpen(false)} />}</div>")

        guard = node.children[0]
        assert isinstance(guard, Guard)
        assert guard.condition == "isOpen"
        assert guard.body.tag == "Modal"
        assert guard.body.attribute("onClose").event_handler.setter_calls == ["setIsOpen"]

    def test_nested_ternary(self):
        """Test that ternaries chain through the alternate branch."""
        node, _ = parse_markup("<div>{a ? <X/> : b ? <Y/> : <Z/>}</div>")

        ternary = node.children[0]
        assert isinstance(ternary, Ternary)
        assert ternary.condition == "a"
        assert ternary.consequent.tag == "X"

        nested = ternary.alternate
        assert isinstance(nested, Ternary)
        assert nested.condition == "b"
        assert nested.consequent.tag == "Y"
        assert nested.alternate.tag == "Z"

    def test_ternary_with_null_branch(self):
        """Test that null branches are empty."""
        node, _ = parse_markup("<div>{loading ? <Spinner /> : null}</div>")

        ternary = node.children[0]
        assert ternary.consequent.tag == "Spinner"
        assert ternary.alternate is None

    def test_ternary_with_iteration_branch(self):
        """Test an iteration inside a ternary branch."""
        node, _ = parse_markup("<ul>{rows.length ? rows.map(r => <li>{r}</li>) : <Empty/>}</ul>")

        ternary = node.children[0]
        assert isinstance(ternary.consequent, Iteration)
        assert ternary.consequent.body.tag == "li"
        assert ternary.alternate.tag == "Empty"

    def test_unrecognised_expression(self):
        """Test that other expressions stay raw."""
        node, _ = parse_markup("<span>{count + 1}</span>")

        assert isinstance(node.children[0], Expression)
        assert node.children[0].raw == "count + 1"

    def test_branch_lines(self):
        """Test line numbers of re-parsed branches."""
        source = "<div>\n  {ok\n    ? <A/>\n    : <B/>}\n</div>"
        node, _ = parse_markup(source)

        ternary = node.children[0]
        assert ternary.line == 2
        assert ternary.consequent.line == 3
        assert ternary.alternate.line == 4

    def test_tree_survives_json_round_trip(self):
        """Test that markup variants validate back from JSON."""
        node, _ = parse_markup("<div>{a ? <X/> : items.map(i => <li>{i}</li>)}</div>")

        restored = Element.model_validate_json(node.model_dump_json())

        assert restored == node
        assert isinstance(restored.children[0].alternate, Iteration)


class TestEventHandlers:
    """Test cases for handler body classification."""

    def test_inline_handler(self):
        """Test setter calls and referenced names."""
        handler = parse_event_handler("onClick", "() => { setTab('home'); setOpen(!open); }", 3)

        assert handler.is_inline
        assert handler.setter_calls == ["setTab", "setOpen"]
        assert handler.referenced_names == ["open"]
        assert handler.line == 3

    def test_handler_reference(self):
        """Test a handler passed by name."""
        handler = parse_event_handler("onChange", "handleChange", 1)

        assert not handler.is_inline
        assert handler.setter_calls == []
        assert handler.referenced_names == ["handleChange"]

    def test_excluded_names(self):
        """Test that keywords and event plumbing are not references."""
        handler = parse_event_handler("onChange", "e => setQuery(e.target.value)", 1)

        assert handler.setter_calls == ["setQuery"]
        assert handler.referenced_names == []


def test_variables_attached_to_components():
    """Test that parse_source attaches extracted variables by line range."""
    source = """function Search() {
  const [query, setQuery] = useState('');
  const [items, setItems] = useState([]);
  const shown = items.filter(i => i.name.includes(query));
  return <ul>{shown.map(i => <li>{i.name}</li>)}</ul>;
}

function Pager() {
  const [page, setPage] = useState(1);
  return <div>{page}</div>;
}
"""

    search, pager = parse_source(source).file.components

    assert [v.name for v in search.state_variables] == ["query", "items"]
    assert [v.name for v in search.derived_variables] == ["shown"]
    assert [v.name for v in pager.state_variables] == ["page"]
    assert isinstance(search.body.children[0], Iteration)
