"""Configuration management for docvision."""

from .config_manager import ConfigManager
from .validators import ConfigValidator

__all__ = ['ConfigManager', 'ConfigValidator']
