"""
JSX Language Plugin for component analysis.

This plugin parses React/JSX component files with the reminty parser and
detects UI idioms that have server-side minty/mintydyn equivalents.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import yaml
from pydantic import ValidationError

from reminty.analyzers.pattern_detector import PatternDetector
from reminty.config import Settings
from reminty.models import DetectedPattern, HookKind, ParseResult
from reminty.parser.parser import parse_source
from reminty.plugins.base import LanguagePlugin
from reminty.plugins.manager import validate_plugin_config

logger = logging.getLogger(__name__)


class JSXPlugin(LanguagePlugin):
    """React/JSX component analysis plugin."""

    def __init__(self, config_path: Optional[Path] = None, settings: Optional[Settings] = None):
        """
        Initialize the JSX plugin.

        Args:
            config_path: Path to config.yaml file. If None, uses default location.
            settings: Detection settings. If None, uses the global settings.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        with open(config_path, 'r') as f:
            self._config = yaml.safe_load(f)
        validate_plugin_config(self._config, config_path)

        if settings is None:
            from reminty.config import settings as app_settings
            settings = app_settings
        self._settings = settings

        self._hook_rules = self._load_hook_rules()

        logger.info("JSX plugin initialized successfully")

    @property
    def language_name(self) -> str:
        return self._config.get('name', 'jsx')

    @property
    def file_extensions(self) -> List[str]:
        return self._config.get('file_extensions', ['.jsx', '.tsx', '.js'])

    def _load_hook_rules(self) -> Dict[HookKind, Tuple[str, str]]:
        rules: Dict[HookKind, Tuple[str, str]] = {}
        for hook_name, entry in (self._config.get('hook_hints') or {}).items():
            kind = HookKind.from_name(hook_name)
            if kind == HookKind.CUSTOM:
                logger.warning(f"Ignoring hint for unknown hook '{hook_name}'")
                continue
            rules[kind] = (entry['hint'], entry.get('category', hook_name))
        return rules

    def get_hook_rules(self) -> Dict[HookKind, Tuple[str, str]]:
        return dict(self._hook_rules)

    def parse_file(self, file_path: str, content: str) -> ParseResult:
        """
        Parse a JSX file.

        Malformed markup never fails the parse; it shows up as warnings and
        raw expression nodes instead.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            ParseResult with components, imports, exports and diagnostics

        Raises:
            ValueError: If the parse result cannot be built
        """
        try:
            result = parse_source(content, hook_hints=self._hook_rules)
        except ValidationError as e:
            logger.error(f"Error building parse result for {file_path}: {e}")
            raise ValueError(f"Failed to parse JSX file {file_path}: {e}") from e

        logger.debug(
            f"Parsed JSX file {file_path}: {len(result.file.components)} components, "
            f"{len(result.warnings)} warnings"
        )
        return result

    def detect_patterns(self, content: str, result: Optional[ParseResult] = None) -> List[DetectedPattern]:
        """
        Detect UI idioms with both the raw-text and semantic strategies.

        Args:
            content: File content as string
            result: Parse result for the content, parsed on demand when omitted

        Returns:
            Deduplicated pattern list
        """
        if result is None:
            result = parse_source(content, hook_hints=self._hook_rules)

        detector = PatternDetector(
            snippet_max_length=self._settings.snippet_max_length,
            enable_source_detection=self._settings.enable_source_detection,
            enable_semantic_detection=self._settings.enable_semantic_detection,
        )
        return detector.detect(content, result)

    def find_enclosing_component(self, result: ParseResult, line_number: int) -> Optional[str]:
        """
        Find the component owning a line.

        A component owns the lines from its declaration up to the next
        component's declaration.

        Args:
            result: Parse result of the file
            line_number: Line number (1-indexed)

        Returns:
            Component name, or None for lines before the first component
        """
        enclosing = None
        for component in sorted(result.file.components, key=lambda c: c.line):
            if component.line > line_number:
                break
            enclosing = component.name
        return enclosing
