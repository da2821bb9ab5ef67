"""
Language plugin architecture for component analysis.

This package provides the plugin system for language-specific component
analysis, including the base plugin interface and plugin manager.
"""

from reminty.plugins.base import LanguagePlugin
from reminty.plugins.manager import PluginManager

__all__ = ['LanguagePlugin', 'PluginManager']
