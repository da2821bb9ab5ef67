"""UI idiom detection and component analyzers package."""

from reminty.analyzers.component_analyzer import (
    AnalysisReport,
    ComponentAnalyzer,
    create_analyzer,
    rank_patterns,
)
from reminty.analyzers.pattern_detector import PatternDetector
from reminty.analyzers.templates import suggest_replacement

__all__ = [
    'AnalysisReport',
    'ComponentAnalyzer',
    'PatternDetector',
    'create_analyzer',
    'rank_patterns',
    'suggest_replacement',
]
