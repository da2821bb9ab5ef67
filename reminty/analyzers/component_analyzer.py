"""
Component Analyzer for UI idiom detection.

This module provides the ComponentAnalyzer class that uses language plugins to
parse a component file, detect UI idioms, and produce a ranked report.
"""

from pathlib import Path
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, Field

from reminty.config import Settings
from reminty.models import DetectedPattern, ParseResult
from reminty.plugins.base import LanguagePlugin
from reminty.plugins.manager import PluginManager
from reminty.utils.logging import (
    LogContext,
    get_logger,
    log_detection_summary,
    log_error_with_context,
    log_phase_transition,
    setup_logging,
)

logger = get_logger(__name__)


class AnalysisReport(BaseModel):
    """Outcome of analysing one file."""

    file_path: str = Field(..., description="Analysed file")
    language: Optional[str] = Field(None, description="Plugin that handled the file")
    result: ParseResult = Field(default_factory=ParseResult, description="Parsed tree and diagnostics")
    patterns: List[DetectedPattern] = Field(default_factory=list, description="Ranked idioms")


def rank_patterns(patterns: List[DetectedPattern]) -> List[DetectedPattern]:
    """Order patterns by confidence (highest first), then by line."""
    return sorted(patterns, key=lambda p: (-p.confidence, p.line))


class ComponentAnalyzer:
    """
    Analyzer for component files.

    Picks the plugin by file extension, parses the file, runs idiom
    detection, drops low-confidence records and ranks the rest.
    """

    def __init__(self, plugin_manager: PluginManager, settings: Optional[Settings] = None):
        """
        Initialize Component Analyzer.

        Args:
            plugin_manager: PluginManager instance for language-specific analysis
            settings: Optional Settings (global settings are used if not provided)
        """
        if settings is None:
            from reminty.config import settings as app_settings
            settings = app_settings

        self.plugin_manager = plugin_manager
        self.settings = settings

    def parse_file(
        self,
        file_path: str,
        content: str,
        plugin: Optional[LanguagePlugin] = None,
    ) -> ParseResult:
        """
        Parse file content into a syntax tree.

        Args:
            file_path: Path to the file
            content: File content as string
            plugin: Optional LanguagePlugin instance (auto-detected if not provided)

        Returns:
            ParseResult for the file

        Raises:
            ValueError: If no plugin found for file, or the plugin fails
        """
        if plugin is None:
            plugin = self.plugin_manager.get_plugin_for_file(file_path)
            if not plugin:
                raise ValueError(f"No plugin found for file: {file_path}")

        try:
            result = plugin.parse_file(file_path, content)
        except ValueError as e:
            log_error_with_context(
                logger,
                f"Failed to parse {file_path}",
                e,
                file_path=file_path,
                language=plugin.language_name,
            )
            raise

        logger.debug(f"Successfully parsed {file_path}")
        return result

    def analyze_file(self, file_path: str, content: str) -> AnalysisReport:
        """
        Analyze a single file and return its ranked idiom report.

        Args:
            file_path: Path to the file, used for plugin selection
            content: File content as string

        Returns:
            AnalysisReport; empty when no plugin handles the file or the
            parse fails
        """
        plugin = self.plugin_manager.get_plugin_for_file(file_path)
        if not plugin:
            logger.warning(f"No plugin found for {file_path}, skipping")
            return AnalysisReport(file_path=file_path)

        with LogContext(logger, file_path=file_path, language=plugin.language_name):
            log_phase_transition(logger, file_path, "parse", "started")
            try:
                result = self.parse_file(file_path, content, plugin)
            except ValueError:
                return AnalysisReport(file_path=file_path, language=plugin.language_name)
            log_phase_transition(logger, file_path, "parse", "completed")

            log_phase_transition(logger, file_path, "detect", "started")
            patterns = plugin.detect_patterns(content, result)
            log_phase_transition(logger, file_path, "detect", "completed")

            kept = []
            for pattern in patterns:
                if pattern.confidence < self.settings.min_confidence:
                    continue
                if pattern.component is None:
                    pattern = pattern.model_copy(update={
                        "component": plugin.find_enclosing_component(result, pattern.line),
                    })
                kept.append(pattern)

            ranked = rank_patterns(kept)

            log_detection_summary(
                logger,
                file_path,
                component_count=len(result.file.components),
                pattern_count=len(ranked),
                warning_count=len(result.warnings),
            )

        return AnalysisReport(
            file_path=file_path,
            language=plugin.language_name,
            result=result,
            patterns=ranked,
        )


def bundled_plugin_classes() -> Dict[str, Type[LanguagePlugin]]:
    """Plugin classes shipped with the package, keyed by config ``name``."""
    from reminty.plugins.jsx.plugin import JSXPlugin

    return {"jsx": JSXPlugin}


def create_analyzer(
    settings: Optional[Settings] = None,
    plugins_dir: Optional[Path] = None,
    configure_logging: bool = True,
) -> ComponentAnalyzer:
    """
    Build a ready-to-use analyzer.

    Configures JSON logging from ``settings.log_level``, discovers the plugin
    configurations under ``plugins_dir`` and registers a plugin for each one
    whose name has a bundled plugin class.

    Args:
        settings: Optional Settings (global settings are used if not provided)
        plugins_dir: Directory with one subdirectory per plugin; defaults to
            the bundled ``reminty/plugins``
        configure_logging: Install the JSON handler on the root logger

    Returns:
        ComponentAnalyzer over the registered plugins
    """
    if settings is None:
        from reminty.config import settings as app_settings
        settings = app_settings

    if configure_logging:
        setup_logging(settings.log_level)

    if plugins_dir is None:
        import reminty.plugins as plugins_package
        plugins_dir = Path(plugins_package.__file__).parent

    plugin_classes = bundled_plugin_classes()
    manager = PluginManager()
    for config in manager.discover_plugin_configs(plugins_dir):
        plugin_class = plugin_classes.get(config["name"])
        if plugin_class is None:
            logger.warning(f"No plugin class for configuration '{config['name']}', skipping")
            continue
        manager.register_plugin(
            plugin_class(config_path=config["plugin_dir"] / "config.yaml", settings=settings)
        )

    return ComponentAnalyzer(manager, settings)
