"""Unit tests for configuration loading and validation."""

import pytest
import yaml

from docvision.config import ConfigManager, ConfigValidator
from docvision.models import RecognitionMode


@pytest.fixture
def write_config(tmp_path):
    def write(content):
        path = tmp_path / "docvision.yml"
        path.write_text(content, encoding='utf-8')
        return str(path)
    return write


class TestConfigValidator:

    @pytest.fixture
    def validator(self):
        return ConfigValidator()

    def test_empty_config_is_valid(self, validator):
        assert validator.validate({}) == []

    def test_full_config_is_valid(self, validator):
        config = {
            'recognition': {'languages': ['en-US'], 'mode': 'fast', 'auto_detect_language': False},
            'ocr': {'tesseract_cmd': '/opt/bin/tesseract', 'timeout': 30},
            'pdf': {'min_text_length': 50, 'render_scale': 3},
            'batch': {'concurrency': 8},
            'logging': {'log_file': '~/docvision.log', 'verbose': True},
        }
        assert validator.validate(config) == []

    def test_unknown_section(self, validator):
        assert validator.validate({'database': {}}) == ["Unknown section: 'database'"]

    def test_section_must_be_mapping(self, validator):
        assert validator.validate({'ocr': 'tesseract'}) == ["'ocr' must be a mapping"]

    def test_not_a_mapping(self, validator):
        assert validator.validate(['ocr']) == ["Configuration must be a mapping"]

    def test_invalid_values_collected(self, validator):
        config = {
            'recognition': {'mode': 'turbo', 'use_language_correction': 'yes'},
            'ocr': {'timeout': 0},
            'pdf': {'min_text_length': -1},
            'batch': {'concurrency': True},
        }
        errors = validator.validate(config)
        assert len(errors) == 5
        assert any('recognition.mode' in e for e in errors)
        assert any('batch.concurrency' in e for e in errors)

    def test_single_language_string_allowed(self, validator):
        assert validator.validate({'recognition': {'languages': 'ja'}}) == []


class TestConfigManager:

    def test_defaults_without_file(self):
        manager = ConfigManager()
        settings = manager.settings
        assert settings.tesseract_cmd == 'tesseract'
        assert settings.concurrency == 4
        assert manager.verbose is False
        assert manager.log_file is None
        assert manager.recognition_defaults.languages == ()

    def test_load_config(self, write_config):
        path = write_config(
            "recognition:\n"
            "  languages: [zh-Hans, en]\n"
            "  mode: fast\n"
            "ocr:\n"
            "  timeout: 15\n"
            "batch:\n"
            "  concurrency: 2\n"
        )
        manager = ConfigManager(path)
        settings = manager.settings

        assert settings.recognition.languages == ('zh-Hans', 'en')
        assert settings.recognition.mode == RecognitionMode.FAST
        assert settings.ocr_timeout == 15
        assert settings.concurrency == 2
        assert settings.pdf_min_text_length == 20
        assert manager.config['__config_path__'].endswith('docvision.yml')

    def test_empty_file_uses_defaults(self, write_config):
        assert ConfigManager(write_config("")).settings.pdf_render_scale == 2.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(str(tmp_path / "nope.yml"))

    def test_invalid_yaml(self, write_config):
        with pytest.raises(yaml.YAMLError):
            ConfigManager(write_config("recognition: [unclosed\n"))

    def test_invalid_values(self, write_config):
        with pytest.raises(ValueError) as exc_info:
            ConfigManager(write_config("batch:\n  concurrency: 0\n"))
        assert 'batch.concurrency' in str(exc_info.value)

    def test_log_file_expanded(self, write_config, monkeypatch, tmp_path):
        monkeypatch.setenv('HOME', str(tmp_path))
        manager = ConfigManager(write_config("logging:\n  log_file: ~/logs/dv.log\n"))
        assert manager.log_file == str(tmp_path / "logs" / "dv.log")
