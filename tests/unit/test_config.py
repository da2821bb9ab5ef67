"""
Unit tests for configuration management.
"""

import pytest
from unittest.mock import patch
import os

from pydantic import ValidationError


def test_settings_loads_from_environment():
    """Test that settings can be loaded from environment variables."""
    with patch.dict(os.environ, {
        'REMINTY_LOG_LEVEL': 'DEBUG',
        'REMINTY_MIN_CONFIDENCE': '0.75',
        'REMINTY_SNIPPET_MAX_LENGTH': '80',
        'REMINTY_ENABLE_SOURCE_DETECTION': 'false',
    }):
        from reminty.config import Settings
        settings = Settings()

        assert settings.log_level == 'DEBUG'
        assert settings.min_confidence == 0.75
        assert settings.snippet_max_length == 80
        assert settings.enable_source_detection is False
        assert settings.enable_semantic_detection is True


def test_settings_has_default_values():
    """Test that settings have appropriate default values."""
    with patch.dict(os.environ, {}, clear=True):
        from reminty.config import Settings
        settings = Settings(_env_file=None)

        assert settings.log_level == 'INFO'
        assert settings.min_confidence == 0.0
        assert settings.snippet_max_length == 120
        assert settings.enable_source_detection is True
        assert settings.enable_semantic_detection is True


def test_settings_environment_is_case_insensitive():
    """Test lower-case environment variable names."""
    with patch.dict(os.environ, {'reminty_min_confidence': '0.5'}):
        from reminty.config import Settings
        settings = Settings()

        assert settings.min_confidence == 0.5


@pytest.mark.parametrize("variable,value", [
    ('REMINTY_MIN_CONFIDENCE', '1.5'),
    ('REMINTY_MIN_CONFIDENCE', '-0.1'),
    ('REMINTY_SNIPPET_MAX_LENGTH', '0'),
])
def test_settings_rejects_invalid_values(variable, value):
    """Test that out-of-range values fail validation."""
    with patch.dict(os.environ, {variable: value}):
        from reminty.config import Settings

        with pytest.raises(ValidationError):
            Settings()


def test_unrelated_environment_is_ignored():
    """Test that variables without the prefix are ignored."""
    with patch.dict(os.environ, {'MIN_CONFIDENCE': '0.9', 'REMINTY_UNKNOWN_OPTION': 'x'}):
        from reminty.config import Settings
        settings = Settings()

        assert settings.min_confidence == 0.0
