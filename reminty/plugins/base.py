"""
Base interface for language-specific analysis plugins.

This module defines the abstract base class that every component-language
plugin implements: parsing, hook hint rules, idiom detection and line to
component lookup.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from reminty.models import DetectedPattern, HookKind, ParseResult


class LanguagePlugin(ABC):
    """Base interface for language-specific analysis plugins."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'jsx')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.jsx', '.tsx'])."""
        pass

    @abstractmethod
    def parse_file(self, file_path: str, content: str) -> ParseResult:
        """
        Parse file content into a syntax tree with attached variables.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            ParseResult with the file tree, warnings and suggestions

        Raises:
            ValueError: If the parse result cannot be built
        """
        pass

    @abstractmethod
    def get_hook_rules(self) -> Dict[HookKind, Tuple[str, str]]:
        """
        Return the suggestion attached to each known hook kind.

        Returns:
            Mapping of hook kind to (hint, category)
        """
        pass

    @abstractmethod
    def detect_patterns(self, content: str, result: Optional[ParseResult] = None) -> List[DetectedPattern]:
        """
        Detect UI idioms in the file.

        Args:
            content: File content as string
            result: Parse result for the content, parsed on demand when omitted

        Returns:
            List of detected patterns
        """
        pass

    @abstractmethod
    def find_enclosing_component(self, result: ParseResult, line_number: int) -> Optional[str]:
        """
        Find the component a line belongs to.

        Args:
            result: Parse result of the file
            line_number: Line number (1-indexed)

        Returns:
            Component name, or None for lines before the first component
        """
        pass
