"""
Suggested minty/mintydyn replacements per idiom.

The text is an opaque payload for the report; nothing here parses or
validates it. ``$name`` is the state variable driving the idiom and
``$initial`` its initial value.
"""

from string import Template
from typing import Dict, Optional

from reminty.models import IdiomKind

REPLACEMENT_TEMPLATES: Dict[IdiomKind, Template] = {
    IdiomKind.TABS: Template('''mdy.Dyn("tabs").
    States([]mdy.ComponentState{
        mdy.ActiveState("$initial", "Tab 1", tab1Content),
        mdy.NewState("tab2", "Tab 2", tab2Content),
        mdy.NewState("tab3", "Tab 3", tab3Content),
    }).
    Theme(mdy.NewTailwindDynamicTheme()).
    Build()

// Handler for tab state:
// GET /tabs?$name=<value> -> returns updated component HTML'''),

    IdiomKind.FILTER: Template('''mdy.Dyn("filter").
    Data(mdy.FilterableDataset{
        Items: items,
        Schema: mdy.FilterSchema{
            Fields: []mdy.FilterableField{
                mdy.TextField("$name", "Search"),
            },
        },
        Options: mdy.FilterOptions{
            EnableSearch: true,
            Debounce:     300, // ms
        },
    }).
    Build()

// Handler:
// GET /filter?$name=<value> -> returns filtered results HTML'''),

    IdiomKind.FORM_DEPENDENCIES: Template('''mdy.Dyn("form").
    Rules([]mdy.DependencyRule{
        mdy.ShowWhen("field1", "equals", "value", "dependent-field"),
        mdy.EnableWhen("checkbox", "equals", true, "submit-btn"),
    }).
    Build()'''),

    IdiomKind.MODAL: Template('''// HTMX modal pattern (recommended):
b.Button(
    mi.HtmxGet("/modal-content"),
    mi.HtmxTarget("#modal-container"),
    mi.HtmxSwap("innerHTML"),
    "Open Modal",
)

// Modal container (in layout):
b.Div(mi.ID("modal-container"),
    mi.Class("fixed inset-0 z-50 hidden"),
)

// Close handler in modal content:
mi.HtmxDelete("/modal", mi.HtmxTarget("#modal-container"), mi.HtmxSwap("innerHTML"))'''),

    IdiomKind.DARK_MODE: Template('''// Tailwind dark mode:
darkMode := mi.DarkModeTailwind(
    mi.DarkModeDefault("system"),
    mi.DarkModeSVGIcons(),
)
// In <head> (before body renders):
darkMode.Script(b)
// Toggle button:
darkMode.Toggle(b, mi.Class("p-2 rounded-lg hover:bg-gray-200 dark:hover:bg-gray-700"))'''),

    IdiomKind.PAGINATION: Template('''mdy.Dyn("list").
    Data(mdy.FilterableDataset{
        Items: items,
        Options: mdy.FilterOptions{
            EnablePagination: true,
            ItemsPerPage:     20,
        },
    }).
    Build()

// Or HTMX pagination:
b.Div(mi.ID("pagination"),
    b.Button(
        mi.HtmxGet("/items?$name=1"),
        mi.HtmxTarget("#item-list"),
        "Previous",
    ),
    b.Button(
        mi.HtmxGet("/items?$name=2"),
        mi.HtmxTarget("#item-list"),
        "Next",
    ),
)'''),

    IdiomKind.ACCORDION: Template('''mdy.Dyn("accordion").
    States([]mdy.ComponentState{
        mdy.NewState("section1", "Section 1", section1Content),
        mdy.NewState("section2", "Section 2", section2Content),
    }).
    Options(mdy.AccordionOptions{
        AllowMultiple: false,
        DefaultOpen:   "",
    }).
    Build()

// Or with HTMX:
b.Div(mi.Class("accordion"),
    b.Button(
        mi.HtmxGet("/section/1"),
        mi.HtmxTarget("#section-1-content"),
        mi.HtmxSwap("innerHTML"),
        "Section 1",
    ),
    b.Div(mi.ID("section-1-content")),
)'''),

    IdiomKind.TOGGLE: Template('''// Simple HTMX toggle:
b.Button(
    mi.HtmxPost("/toggle-$name"),
    mi.HtmxSwap("outerHTML"),
    mi.Class("toggle-btn"),
    "Toggle",
)

// Handler returns updated button state:
// POST /toggle-$name -> returns button HTML with updated state'''),

    IdiomKind.SORTABLE_TABLE: Template('''mdy.Dyn("table").
    Data(mdy.FilterableDataset{
        Items: items,
        Schema: mdy.FilterSchema{
            SortableFields: []string{"name", "date", "status"},
        },
        Options: mdy.FilterOptions{
            EnableSort:       true,
            DefaultSortField: "name",
            DefaultSortDir:   mdy.SortAsc,
        },
    }).
    Build()

// Or HTMX sortable headers:
b.Th(
    mi.HtmxGet("/items?$name=name&dir=asc"),
    mi.HtmxTarget("#table-body"),
    "Name",
)'''),

    IdiomKind.EFFECT: Template("// Most useEffect logic belongs server-side in Go handlers"),
}

# Parameter values used when the idiom was found without a driving variable
DEFAULT_NAMES: Dict[IdiomKind, str] = {
    IdiomKind.TABS: "tab",
    IdiomKind.FILTER: "search",
    IdiomKind.PAGINATION: "page",
    IdiomKind.TOGGLE: "feature",
    IdiomKind.SORTABLE_TABLE: "sort",
}


def suggest_replacement(kind: IdiomKind, name: Optional[str] = None, initial: Optional[str] = None) -> str:
    """
    Render the replacement text for an idiom.

    Args:
        kind: Idiom kind
        name: Driving state variable name, if known
        initial: Initial value of that variable, quotes included or not

    Returns:
        Replacement text
    """
    template = REPLACEMENT_TEMPLATES[kind]
    if initial:
        initial = initial.strip().strip("\"'`")
    return template.safe_substitute(
        name=name or DEFAULT_NAMES.get(kind, kind.value),
        initial=initial or "tab1",
    )
