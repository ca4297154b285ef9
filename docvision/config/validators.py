"""Configuration validators."""

from typing import Any, Dict, List

from ..models import RecognitionMode

KNOWN_SECTIONS = ('recognition', 'ocr', 'pdf', 'batch', 'logging')


class ConfigValidator:
    """Validates configuration structure and values."""

    def validate(self, config: Dict[str, Any]) -> List[str]:
        """Validate configuration and return list of errors.

        Args:
            config: Configuration dictionary

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not isinstance(config, dict):
            return ["Configuration must be a mapping"]

        for key in config:
            if str(key).startswith('__'):
                continue
            if key not in KNOWN_SECTIONS:
                errors.append(f"Unknown section: '{key}'")
            elif not isinstance(config[key], dict):
                errors.append(f"'{key}' must be a mapping")

        if errors:
            return errors

        errors.extend(self._validate_recognition(config.get('recognition', {})))
        errors.extend(self._validate_ocr(config.get('ocr', {})))
        errors.extend(self._validate_pdf(config.get('pdf', {})))
        errors.extend(self._validate_batch(config.get('batch', {})))
        errors.extend(self._validate_logging(config.get('logging', {})))
        return errors

    def _validate_recognition(self, section: Dict[str, Any]) -> List[str]:
        errors = []

        languages = section.get('languages') or []
        if isinstance(languages, str):
            languages = [languages]
        if not isinstance(languages, list) or not all(isinstance(l, str) and l for l in languages):
            errors.append("recognition.languages must be a list of language tags")

        mode = section.get('mode', RecognitionMode.ACCURATE.value)
        valid_modes = [m.value for m in RecognitionMode]
        if mode not in valid_modes:
            errors.append(f"recognition.mode must be one of {', '.join(valid_modes)}")

        for flag in ('auto_detect_language', 'use_language_correction'):
            value = section.get(flag)
            if value is not None and not isinstance(value, bool):
                errors.append(f"recognition.{flag} must be true or false")

        return errors

    def _validate_ocr(self, section: Dict[str, Any]) -> List[str]:
        errors = []
        cmd = section.get('tesseract_cmd')
        if cmd is not None and (not isinstance(cmd, str) or not cmd.strip()):
            errors.append("ocr.tesseract_cmd must be a non-empty string")
        errors.extend(self._validate_positive_number(section, 'timeout', 'ocr.timeout'))
        return errors

    def _validate_pdf(self, section: Dict[str, Any]) -> List[str]:
        errors = []
        min_length = section.get('min_text_length')
        if min_length is not None and (isinstance(min_length, bool) or not isinstance(min_length, int) or min_length < 0):
            errors.append("pdf.min_text_length must be a non-negative integer")
        errors.extend(self._validate_positive_number(section, 'render_scale', 'pdf.render_scale'))
        return errors

    def _validate_batch(self, section: Dict[str, Any]) -> List[str]:
        concurrency = section.get('concurrency')
        if concurrency is not None and (isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1):
            return ["batch.concurrency must be a positive integer"]
        return []

    def _validate_logging(self, section: Dict[str, Any]) -> List[str]:
        errors = []
        log_file = section.get('log_file')
        if log_file is not None and not isinstance(log_file, str):
            errors.append("logging.log_file must be a path string")
        verbose = section.get('verbose')
        if verbose is not None and not isinstance(verbose, bool):
            errors.append("logging.verbose must be true or false")
        return errors

    def _validate_positive_number(self, section: Dict[str, Any], key: str, label: str) -> List[str]:
        value = section.get(key)
        if value is None:
            return []
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            return [f"{label} must be a positive number"]
        return []
