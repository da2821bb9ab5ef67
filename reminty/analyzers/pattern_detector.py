"""
UI idiom detection.

Two strategies feed one accumulator:
- a raw-text pass trying an ordered list of regular expressions per idiom,
- a semantic pass over each component's state variables, derived variables
  and hook usages.

The accumulator keeps at most one record per (kind, line).
"""

import re
from typing import List, NamedTuple, Optional, Pattern

from reminty.models import (
    CollectionOperation,
    Component,
    DetectedPattern,
    HookKind,
    HookUsage,
    IdiomKind,
    ParseResult,
    ValueKind,
)
from reminty.analyzers.templates import suggest_replacement
from reminty.parser.parser import parse_source
from reminty.utils.logging import get_logger


class SourceRule(NamedTuple):
    """Regular expressions signalling one idiom, tried in order."""

    kind: IdiomKind
    confidence: float
    description: str
    patterns: List[Pattern]


def _ci(pattern: str) -> Pattern:
    return re.compile(pattern, re.IGNORECASE)


SOURCE_RULES: List[SourceRule] = [
    SourceRule(IdiomKind.TABS, 0.8, "Tab UI pattern detected", [
        _ci(r"role=[\"']tablist[\"']"),
        _ci(r"role=[\"']tab[\"']"),
        _ci(r"aria-selected"),
        _ci(r"className=.*tab.*active"),
        _ci(r"activeTab|selectedTab|currentTab"),
    ]),
    SourceRule(IdiomKind.FILTER, 0.7, "Filter/search pattern detected", [
        re.compile(r"\.filter\s*\("),
        _ci(r"searchTerm|filterValue|query"),
        _ci(r"type=[\"']search[\"']"),
        _ci(r"onChange.*filter"),
    ]),
    SourceRule(IdiomKind.FORM_DEPENDENCIES, 0.6, "Form field dependency pattern detected", [
        _ci(r"disabled=\{.*\}"),
        _ci(r"hidden.*&&"),
        _ci(r"style=\{.*display.*none"),
        _ci(r"showIf|hideIf|visibleWhen"),
    ]),
    SourceRule(IdiomKind.MODAL, 0.7, "Modal/dialog pattern detected", [
        _ci(r"role=[\"']dialog[\"']"),
        _ci(r"aria-modal"),
        _ci(r"Modal|Dialog"),
        _ci(r"isOpen|showModal|modalOpen"),
    ]),
    SourceRule(IdiomKind.DARK_MODE, 0.9, "Dark mode pattern detected", [
        _ci(r"darkMode|darkTheme|isDark"),
        _ci(r"theme.*dark|dark.*theme"),
        _ci(r"prefers-color-scheme"),
        _ci(r"toggleTheme|toggleDark"),
    ]),
    SourceRule(IdiomKind.PAGINATION, 0.75, "Pagination pattern detected", [
        _ci(r"pagination|paginate"),
        _ci(r"pageNumber|currentPage|page\s*="),
        _ci(r"nextPage|prevPage|previousPage"),
        _ci(r"itemsPerPage|pageSize|limit"),
    ]),
    SourceRule(IdiomKind.ACCORDION, 0.75, "Accordion/collapsible pattern detected", [
        _ci(r"accordion"),
        _ci(r"collapsible"),
        _ci(r"expand.*collapse|collapse.*expand"),
        _ci(r"aria-expanded"),
    ]),
    SourceRule(IdiomKind.TOGGLE, 0.7, "Toggle/switch pattern detected", [
        _ci(r"toggle|switch"),
        _ci(r"setIs\w+\(!"),
        _ci(r"prev\s*=>\s*!prev"),
        _ci(r"type=[\"']checkbox[\"']"),
    ]),
    SourceRule(IdiomKind.SORTABLE_TABLE, 0.75, "Sortable table pattern detected", [
        _ci(r"sortColumn|sortBy|sortField"),
        _ci(r"sortDirection|sortOrder|ascending|descending"),
        _ci(r"\.sort\s*\("),
        _ci(r"onClick.*sort"),
    ]),
]


def _contains_any(name: str, *parts: str) -> bool:
    return any(part in name for part in parts)


class PatternDetector:
    """Detects UI idioms in source text and parsed components."""

    def __init__(
        self,
        snippet_max_length: int = 120,
        enable_source_detection: bool = True,
        enable_semantic_detection: bool = True,
    ):
        """
        Initialize the detector.

        Args:
            snippet_max_length: Longest source snippet kept on a record
            enable_source_detection: Run the raw-text pass in detect()
            enable_semantic_detection: Run the component pass in detect()
        """
        self.snippet_max_length = snippet_max_length
        self.enable_source_detection = enable_source_detection
        self.enable_semantic_detection = enable_semantic_detection
        self.logger = get_logger(__name__)
        self._patterns: List[DetectedPattern] = []

    def analyze_source(self, source: str) -> List[DetectedPattern]:
        """
        Run the raw-text strategy only.

        Args:
            source: File contents

        Returns:
            At most one record per idiom, at the line of the first match
        """
        self._patterns = []
        self._detect_source_patterns(source)
        return list(self._patterns)

    def analyze(self, result: ParseResult) -> List[DetectedPattern]:
        """
        Run the semantic strategy over every component of a parse result.

        Args:
            result: Parse result with variables attached to components

        Returns:
            Detected patterns tagged with their component
        """
        self._patterns = []
        for component in result.file.components:
            self._analyze_component(component)
        return list(self._patterns)

    def detect(self, source: str, result: Optional[ParseResult] = None) -> List[DetectedPattern]:
        """
        Run both strategies into one accumulator.

        The semantic pass goes first so its records, which carry variable
        names and parameterised replacements, win on a shared (kind, line).

        Args:
            source: File contents
            result: Parse result for ``source``; parsed here when omitted

        Returns:
            Deduplicated pattern list: semantic records first (component by
            component), then raw-text records not already present
        """
        self._patterns = []

        if self.enable_semantic_detection:
            if result is None:
                result = parse_source(source)
            for component in result.file.components:
                self._analyze_component(component)

        if self.enable_source_detection:
            self._detect_source_patterns(source)

        self.logger.debug(f"Detected {len(self._patterns)} patterns")
        return list(self._patterns)

    # ------------------------------------------------------------------
    # Accumulator
    # ------------------------------------------------------------------

    def _add_pattern(self, pattern: DetectedPattern) -> bool:
        for existing in self._patterns:
            if existing.key == pattern.key:
                return False
        self._patterns.append(pattern)
        return True

    def _has_pattern(self, component: Component, kind: IdiomKind) -> bool:
        return any(p.kind == kind and p.component == component.name for p in self._patterns)

    # ------------------------------------------------------------------
    # Raw-text strategy
    # ------------------------------------------------------------------

    def _detect_source_patterns(self, source: str) -> None:
        for rule in SOURCE_RULES:
            for pattern in rule.patterns:
                match = pattern.search(source)
                if match is None:
                    continue
                self._add_pattern(DetectedPattern(
                    kind=rule.kind,
                    line=1 + source.count("\n", 0, match.start()),
                    confidence=rule.confidence,
                    description=rule.description,
                    original_snippet=self._snippet(source, match.start()),
                    suggested_replacement=suggest_replacement(rule.kind),
                ))
                break

    def _snippet(self, source: str, index: int) -> str:
        """Source line containing ``index``, trimmed to the snippet length."""
        start = source.rfind("\n", 0, index) + 1
        end = source.find("\n", index)
        line = source[start:end if end != -1 else len(source)].strip()
        if len(line) > self.snippet_max_length:
            return line[:self.snippet_max_length] + "..."
        return line

    # ------------------------------------------------------------------
    # Semantic strategy
    # ------------------------------------------------------------------

    def _analyze_component(self, component: Component) -> None:
        self._analyze_state_variables(component)
        self._analyze_derived_variables(component)

        for hook in component.hooks:
            if hook.kind == HookKind.STATE:
                self._analyze_state_hook(hook, component)
            elif hook.kind.is_side_effect:
                self._add_pattern(DetectedPattern(
                    kind=IdiomKind.EFFECT,
                    line=hook.line,
                    confidence=0.5,
                    description=f"{hook.hook} detected - consider server-side alternative",
                    original_snippet=f"{hook.hook} for side effects",
                    suggested_replacement=suggest_replacement(IdiomKind.EFFECT),
                    component=component.name,
                ))

    def _analyze_state_variables(self, component: Component) -> None:
        variables = component.state_variables
        has_derived_filter = any(
            derived.operation == CollectionOperation.FILTER
            for derived in component.derived_variables
        )

        # Tabs: string selector
        for var in variables:
            name = var.name.lower()
            if _contains_any(name, "tab", "selected") and var.kind == ValueKind.STRING:
                self._add_pattern(DetectedPattern(
                    kind=IdiomKind.TABS,
                    line=var.line,
                    confidence=0.85,
                    description="Tab state with string selector",
                    original_snippet=f"useState({var.initial_value}) for tab selection",
                    suggested_replacement=suggest_replacement(IdiomKind.TABS, var.name, var.initial_value),
                    state_variables=[var.name],
                    component=component.name,
                ))

        # Filter: string query, stronger with a derived filtered list
        for var in variables:
            name = var.name.lower()
            if _contains_any(name, "filter", "search", "query") and var.kind == ValueKind.STRING:
                self._add_pattern(DetectedPattern(
                    kind=IdiomKind.FILTER,
                    line=var.line,
                    confidence=0.95 if has_derived_filter else 0.7,
                    description="Filter/search with derived filtered list",
                    original_snippet="useState for filter + .filter() derived state",
                    suggested_replacement=suggest_replacement(IdiomKind.FILTER, var.name),
                    state_variables=[var.name],
                    component=component.name,
                ))

        # Booleans: modal, accordion or plain toggle
        for var in variables:
            if var.kind != ValueKind.BOOL:
                continue
            name = var.name.lower()
            if _contains_any(name, "modal", "dialog"):
                kind, confidence, description, snippet = (
                    IdiomKind.MODAL, 0.85, "Modal visibility state", "useState(false) for modal")
            elif _contains_any(name, "open", "expanded", "collapsed"):
                kind, confidence, description, snippet = (
                    IdiomKind.ACCORDION, 0.75, "Accordion/collapsible state", "useState for expand/collapse")
            elif _contains_any(name, "active", "enabled", "show", "visible"):
                kind, confidence, description, snippet = (
                    IdiomKind.TOGGLE, 0.7, "Toggle/visibility state", "useState(boolean) for toggle")
            else:
                continue
            self._add_pattern(DetectedPattern(
                kind=kind,
                line=var.line,
                confidence=confidence,
                description=description,
                original_snippet=snippet,
                suggested_replacement=suggest_replacement(kind, var.name),
                state_variables=[var.name],
                component=component.name,
            ))

        # Pagination: numeric page/offset
        for var in variables:
            name = var.name.lower()
            if _contains_any(name, "page", "offset") and var.kind.is_numeric:
                self._add_pattern(DetectedPattern(
                    kind=IdiomKind.PAGINATION,
                    line=var.line,
                    confidence=0.8,
                    description="Pagination state",
                    original_snippet="useState for page number",
                    suggested_replacement=suggest_replacement(IdiomKind.PAGINATION, var.name),
                    state_variables=[var.name],
                    component=component.name,
                ))

        # Sortable table: any sort state
        for var in variables:
            if "sort" in var.name.lower():
                self._add_pattern(DetectedPattern(
                    kind=IdiomKind.SORTABLE_TABLE,
                    line=var.line,
                    confidence=0.8,
                    description="Sortable table state",
                    original_snippet="useState for sort column/direction",
                    suggested_replacement=suggest_replacement(IdiomKind.SORTABLE_TABLE, var.name),
                    state_variables=[var.name],
                    component=component.name,
                ))

    def _analyze_derived_variables(self, component: Component) -> None:
        for derived in component.derived_variables:
            if derived.operation == CollectionOperation.FILTER:
                kind, confidence, description = IdiomKind.FILTER, 0.65, "Client-side filtering detected"
            elif derived.operation == CollectionOperation.SORT:
                kind, confidence, description = IdiomKind.SORTABLE_TABLE, 0.75, "Client-side sorting detected"
            else:
                continue

            # Only standalone: a stronger record for the component takes precedence
            if self._has_pattern(component, kind):
                continue

            self._add_pattern(DetectedPattern(
                kind=kind,
                line=derived.line,
                confidence=confidence,
                description=description,
                original_snippet=f"{derived.name} = {derived.source}.{derived.operation.value}(...)",
                suggested_replacement=suggest_replacement(kind, derived.operation.value),
                derived_variables=[derived.name],
                component=component.name,
            ))

    def _analyze_state_hook(self, hook: HookUsage, component: Component) -> None:
        if not hook.binding:
            return
        name = hook.binding.lower()

        candidates = []
        if _contains_any(name, "tab", "active"):
            candidates.append((IdiomKind.TABS, 0.7, "Tab state management detected", "useState for active tab"))
        if _contains_any(name, "filter", "search", "query"):
            candidates.append((IdiomKind.FILTER, 0.8, "Filter/search state detected", "useState for filter/search value"))
        if _contains_any(name, "modal", "open", "show"):
            candidates.append((IdiomKind.MODAL, 0.6, "Modal/dialog state detected", "useState for modal visibility"))
        if _contains_any(name, "dark", "theme"):
            candidates.append((IdiomKind.DARK_MODE, 0.9, "Dark mode/theme state detected", "useState for theme"))
        if _contains_any(name, "page", "offset", "limit"):
            candidates.append((IdiomKind.PAGINATION, 0.7, "Pagination state detected", "useState for pagination"))

        for kind, confidence, description, snippet in candidates:
            self._add_pattern(DetectedPattern(
                kind=kind,
                line=hook.line,
                confidence=confidence,
                description=description,
                original_snippet=snippet,
                suggested_replacement=suggest_replacement(kind, hook.binding),
                state_variables=[hook.binding],
                component=component.name,
            ))
