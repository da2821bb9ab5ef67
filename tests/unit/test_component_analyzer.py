"""Unit tests for ComponentAnalyzer."""

from unittest.mock import patch

import pytest

from reminty.analyzers.component_analyzer import (
    AnalysisReport,
    ComponentAnalyzer,
    create_analyzer,
    rank_patterns,
)
from reminty.config import Settings
from reminty.models import DetectedPattern, IdiomKind
from reminty.plugins import PluginManager
from reminty.plugins.jsx import JSXPlugin


@pytest.fixture
def plugin_manager():
    """Plugin manager with the JSX plugin registered."""
    manager = PluginManager()
    manager.register_plugin(JSXPlugin(settings=Settings()))
    return manager


@pytest.fixture
def analyzer(plugin_manager):
    """Create an analyzer with default settings."""
    return ComponentAnalyzer(plugin_manager, settings=Settings())


@pytest.fixture
def app_source():
    return """import { useState } from 'react';
import Modal from './Modal';

function App() {
  const [isOpen, setIsOpen] = useState(false);
  const [query, setQuery] = useState('');
  return (
    <div>
      <input type="search" value={query} onChange={e => setQuery(e.target.value)} />
      {isOpen && <Modal />}
    </div>
  );
}
"""


def make_pattern(kind, line, confidence):
    return DetectedPattern(kind=kind, line=line, confidence=confidence, description="test")


def test_rank_patterns():
    """Test ordering by confidence, then line."""
    ranked = rank_patterns([
        make_pattern(IdiomKind.TOGGLE, 9, 0.7),
        make_pattern(IdiomKind.TABS, 4, 0.85),
        make_pattern(IdiomKind.FILTER, 2, 0.7),
        make_pattern(IdiomKind.EFFECT, 1, 0.5),
    ])

    assert [(p.kind, p.line) for p in ranked] == [
        (IdiomKind.TABS, 4),
        (IdiomKind.FILTER, 2),
        (IdiomKind.TOGGLE, 9),
        (IdiomKind.EFFECT, 1),
    ]


class TestComponentAnalyzer:
    """Test cases for file analysis."""

    def test_analyze_file(self, analyzer, app_source):
        """Test the full parse, detect and rank flow."""
        report = analyzer.analyze_file("src/App.jsx", app_source)

        assert isinstance(report, AnalysisReport)
        assert report.language == "jsx"
        assert [c.name for c in report.result.file.components] == ["App"]
        assert report.patterns

        confidences = [p.confidence for p in report.patterns]
        assert confidences == sorted(confidences, reverse=True)

        keys = [p.key for p in report.patterns]
        assert len(keys) == len(set(keys))

    def test_raw_patterns_tagged_with_component(self, analyzer, app_source):
        """Test that raw-text records get their enclosing component."""
        report = analyzer.analyze_file("src/App.jsx", app_source)

        for pattern in report.patterns:
            if pattern.line >= 4:
                assert pattern.component == "App"
            else:
                assert pattern.component is None

        # The Modal import on line 2 precedes every component
        assert any(p.kind == IdiomKind.MODAL and p.line == 2 for p in report.patterns)

    def test_min_confidence(self, plugin_manager, app_source):
        """Test dropping low-confidence records."""
        unfiltered = ComponentAnalyzer(plugin_manager, settings=Settings()).analyze_file("src/App.jsx", app_source)
        assert any(p.confidence < 0.7 for p in unfiltered.patterns)

        analyzer = ComponentAnalyzer(plugin_manager, settings=Settings(min_confidence=0.7))
        report = analyzer.analyze_file("src/App.jsx", app_source)

        assert report.patterns
        assert all(p.confidence >= 0.7 for p in report.patterns)

    def test_unsupported_file(self, analyzer):
        """Test that files without a plugin give an empty report."""
        report = analyzer.analyze_file("src/main.py", "print('hi')")

        assert report.language is None
        assert report.patterns == []
        assert report.result.file.components == []

    def test_parse_failure(self, analyzer, app_source):
        """Test that a failing plugin gives an empty report."""
        with patch.object(JSXPlugin, "parse_file", side_effect=ValueError("boom")):
            report = analyzer.analyze_file("src/App.jsx", app_source)

        assert report.language == "jsx"
        assert report.patterns == []

    def test_parse_file(self, analyzer):
        """Test parsing through the analyzer."""
        result = analyzer.parse_file("Card.tsx", "const Card = () => <div/>;")

        assert result.file.components[0].name == "Card"

    def test_parse_file_without_plugin(self, analyzer):
        """Test parsing a file no plugin handles."""
        with pytest.raises(ValueError, match="No plugin found"):
            analyzer.parse_file("styles.css", "body {}")

    def test_parse_failure_logged_with_context(self, analyzer, app_source):
        """Test that plugin errors are logged with the file context."""
        with patch.object(JSXPlugin, "parse_file", side_effect=ValueError("boom")), \
                patch("reminty.analyzers.component_analyzer.log_error_with_context") as log_error:
            with pytest.raises(ValueError, match="boom"):
                analyzer.parse_file("src/App.jsx", app_source)

        log_error.assert_called_once()
        _, message, error = log_error.call_args.args
        assert message == "Failed to parse src/App.jsx"
        assert str(error) == "boom"
        assert log_error.call_args.kwargs == {"file_path": "src/App.jsx", "language": "jsx"}


class TestCreateAnalyzer:
    """Test cases for the analyzer factory."""

    def test_bundled_plugins(self, app_source):
        """Test logging setup and registration of the bundled plugins."""
        with patch("reminty.analyzers.component_analyzer.setup_logging") as setup:
            analyzer = create_analyzer(settings=Settings(log_level="DEBUG"))

        setup.assert_called_once_with("DEBUG")
        assert analyzer.plugin_manager.list_supported_languages() == ["jsx"]

        report = analyzer.analyze_file("src/App.jsx", app_source)
        assert report.language == "jsx"
        assert report.patterns

    def test_custom_plugins_dir(self, tmp_path):
        """Test discovery from another directory."""
        jsx_dir = tmp_path / "react"
        jsx_dir.mkdir()
        (jsx_dir / "config.yaml").write_text("""
name: jsx
version: "2.0"
file_extensions:
  - .jsx
hook_hints:
  useState:
    hint: Keep state on the server
""")
        vue_dir = tmp_path / "vue"
        vue_dir.mkdir()
        (vue_dir / "config.yaml").write_text("name: vue\nversion: '1'\nfile_extensions: [.vue]\n")

        with patch("reminty.analyzers.component_analyzer.setup_logging") as setup:
            analyzer = create_analyzer(settings=Settings(), plugins_dir=tmp_path, configure_logging=False)

        setup.assert_not_called()
        manager = analyzer.plugin_manager
        assert manager.list_supported_languages() == ["jsx"]
        assert manager.get_plugin_for_file("App.tsx") is None

        result = analyzer.parse_file("App.jsx", "function App() { const [a, setA] = useState(1); return <div/>; }")
        assert result.suggestions[0].hint == "Keep state on the server"
