"""Centralized configuration management."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..constants import (
    DEFAULT_CONCURRENCY, DEFAULT_OCR_TIMEOUT, DEFAULT_TESSERACT_CMD,
    PDF_MIN_TEXT_LENGTH, PDF_RENDER_SCALE,
)
from ..models import ExtractionSettings, RecognitionOptions
from .validators import ConfigValidator

ConfigDict = Dict[str, Any]


class ConfigManager:
    """Manages application configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file
        """
        self.config_path = config_path
        self._config: ConfigDict = {}
        self._validator = ConfigValidator()
        self.logger = logging.getLogger(__name__)

        self._apply_defaults()
        if config_path:
            self.load_config(config_path)

    def load_config(self, config_path: str) -> ConfigDict:
        """Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML is invalid
            ValueError: If configuration is invalid
        """
        config_path = Path(os.path.expanduser(config_path)).resolve()

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file: {e}")

        errors = self._validator.validate(config)
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        self._config = config
        self._config['__config_path__'] = str(config_path)
        self._apply_defaults()

        self.logger.info(f"Loaded configuration from {config_path}")
        return self._config

    def _apply_defaults(self) -> None:
        """Apply default values to configuration."""
        for section in ('recognition', 'ocr', 'pdf', 'batch', 'logging'):
            self._config.setdefault(section, {})

        self._config['ocr'].setdefault('tesseract_cmd', DEFAULT_TESSERACT_CMD)
        self._config['ocr'].setdefault('timeout', DEFAULT_OCR_TIMEOUT)
        self._config['pdf'].setdefault('min_text_length', PDF_MIN_TEXT_LENGTH)
        self._config['pdf'].setdefault('render_scale', PDF_RENDER_SCALE)
        self._config['batch'].setdefault('concurrency', DEFAULT_CONCURRENCY)
        self._config['logging'].setdefault('verbose', False)

    @property
    def config(self) -> ConfigDict:
        return self._config

    @property
    def log_file(self) -> Optional[str]:
        log_file = self._config['logging'].get('log_file')
        return os.path.expanduser(log_file) if log_file else None

    @property
    def verbose(self) -> bool:
        return bool(self._config['logging'].get('verbose', False))

    @property
    def recognition_defaults(self) -> RecognitionOptions:
        """Recognition options from the 'recognition' section."""
        section = self._config['recognition']
        languages = section.get('languages') or []
        if isinstance(languages, str):
            languages = [languages]
        return RecognitionOptions(
            languages=tuple(languages),
            mode=section.get('mode', 'accurate'),
            auto_detect_language=section.get('auto_detect_language'),
            use_language_correction=section.get('use_language_correction'),
        )

    @property
    def settings(self) -> ExtractionSettings:
        """Build ExtractionSettings from the loaded configuration."""
        return ExtractionSettings(
            recognition=self.recognition_defaults,
            tesseract_cmd=self._config['ocr']['tesseract_cmd'],
            ocr_timeout=self._config['ocr']['timeout'],
            pdf_min_text_length=self._config['pdf']['min_text_length'],
            pdf_render_scale=self._config['pdf']['render_scale'],
            concurrency=self._config['batch']['concurrency'],
        )
