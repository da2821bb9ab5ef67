"""
Plugin registry for component-language plugins.

Maps file extensions to plugins and loads the YAML configuration each plugin
directory carries.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from reminty.plugins.base import LanguagePlugin

logger = logging.getLogger(__name__)

REQUIRED_CONFIG_FIELDS = ('name', 'version', 'file_extensions')


class PluginManager:
    """Registry of language plugins keyed by language name and file extension."""

    def __init__(self):
        self._plugins: Dict[str, LanguagePlugin] = {}
        self._extension_map: Dict[str, str] = {}
        self._config_cache: Dict[str, Dict] = {}

    def register_plugin(self, plugin: LanguagePlugin) -> None:
        """
        Add a plugin, replacing any plugin already registered for its language.

        Extensions are stored lower-cased; an extension claimed by another
        language moves to the new plugin.

        Args:
            plugin: LanguagePlugin instance to register
        """
        language_name = plugin.language_name

        if self.unregister_plugin(language_name):
            logger.warning(f"Replaced existing plugin for language '{language_name}'")

        self._plugins[language_name] = plugin

        for ext in (e.lower() for e in plugin.file_extensions):
            previous = self._extension_map.get(ext)
            if previous is not None:
                logger.warning(f"Extension '{ext}' moves from '{previous}' to '{language_name}'")
            self._extension_map[ext] = language_name

        logger.info(f"Registered plugin '{language_name}' for {plugin.file_extensions}")

    def get_plugin_for_file(self, file_path: str) -> Optional[LanguagePlugin]:
        """
        Select the plugin that handles ``file_path`` by its extension.

        Returns:
            The matching plugin, or None when no plugin claims the extension
        """
        ext = Path(file_path).suffix.lower()
        language = self._extension_map.get(ext)
        if language is None:
            logger.debug(f"No plugin for extension '{ext}' ({file_path})")
            return None
        return self._plugins.get(language)

    def get_plugin(self, language_name: str) -> Optional[LanguagePlugin]:
        return self._plugins.get(language_name)

    def list_supported_languages(self) -> List[str]:
        return list(self._plugins)

    def list_supported_extensions(self) -> List[str]:
        return list(self._extension_map)

    def load_plugin_config(self, plugin_dir: Path) -> Dict[str, Any]:
        """
        Read and validate ``config.yaml`` from a plugin directory.

        Results are cached per path, so later edits to the file are not seen
        by the same manager.

        Raises:
            FileNotFoundError: No config.yaml in ``plugin_dir``
            ValueError: A required field is missing or malformed
            yaml.YAMLError: The file is not valid YAML
        """
        config_path = Path(plugin_dir) / "config.yaml"
        cache_key = str(config_path)
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        if not config_path.exists():
            raise FileNotFoundError(f"Plugin configuration not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {config_path}: {e}")
            raise

        validate_plugin_config(config, config_path)

        self._config_cache[cache_key] = config
        logger.info(f"Loaded plugin configuration {config['name']} from {config_path}")
        return config

    def discover_plugin_configs(self, plugins_dir: Path) -> List[Dict[str, Any]]:
        """
        Find and validate every plugin configuration under a directory.

        Subdirectories without a config.yaml are skipped; invalid
        configurations are logged and skipped.

        Args:
            plugins_dir: Directory holding one subdirectory per plugin

        Returns:
            Valid plugin configurations, each with a ``plugin_dir`` entry naming
            the directory it was loaded from
        """
        plugins_dir = Path(plugins_dir)
        if not plugins_dir.exists():
            logger.warning(f"Plugins directory not found: {plugins_dir}")
            return []

        logger.info(f"Discovering plugins in {plugins_dir}")

        configs = []
        for plugin_dir in sorted(plugins_dir.iterdir()):
            if not plugin_dir.is_dir():
                continue

            if not (plugin_dir / "config.yaml").exists():
                logger.debug(f"Skipping {plugin_dir.name}: no config.yaml found")
                continue

            try:
                config = self.load_plugin_config(plugin_dir)
            except (ValueError, yaml.YAMLError) as e:
                logger.error(f"Failed to load plugin from {plugin_dir}: {e}")
                continue

            logger.info(f"Found plugin configuration: {config['name']} v{config['version']}")
            configs.append({**config, "plugin_dir": plugin_dir})

        return configs

    def unregister_plugin(self, language_name: str) -> bool:
        """Remove a plugin and the extensions mapped to it; False when it was not registered."""
        plugin = self._plugins.pop(language_name, None)
        if plugin is None:
            return False

        self._extension_map = {
            ext: language for ext, language in self._extension_map.items() if language != language_name
        }
        logger.info(f"Unregistered plugin '{language_name}'")
        return True

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_plugins": len(self._plugins),
            "total_extensions": len(self._extension_map),
            "languages": self.list_supported_languages(),
        }


def validate_plugin_config(config: Any, config_path: Path) -> None:
    """
    Check the fields every plugin configuration needs.

    Raises:
        ValueError: If the configuration is not a mapping, a required field is
            missing, or ``file_extensions`` is not a list
    """
    if not isinstance(config, dict):
        raise ValueError(f"Plugin configuration must be a mapping: {config_path}")

    for field in REQUIRED_CONFIG_FIELDS:
        if field not in config:
            raise ValueError(f"Missing required field '{field}' in {config_path}")

    if not isinstance(config['file_extensions'], list):
        raise ValueError(f"'file_extensions' must be a list in {config_path}")

    hook_hints = config.get('hook_hints') or {}
    if not isinstance(hook_hints, dict):
        raise ValueError(f"'hook_hints' must be a mapping in {config_path}")
    for hook, entry in hook_hints.items():
        if not isinstance(entry, dict) or 'hint' not in entry:
            raise ValueError(f"Hook hint for '{hook}' needs a 'hint' in {config_path}")
