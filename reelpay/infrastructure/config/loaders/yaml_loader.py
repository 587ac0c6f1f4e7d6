# reelpay/infrastructure/config/loaders/yaml_loader.py
import os
import json
import logging
from typing import Dict, Any, Optional

import yaml


class ConfigError(Exception):
    """Base class for errors raised while loading or validating configuration."""
    pass


class FileNotFoundConfigError(ConfigError):
    """A configuration file or directory does not exist."""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"Configuration file or directory not found: {path}"
        super().__init__(self.message)


class YamlParseError(ConfigError):
    """A YAML file could not be parsed."""
    def __init__(self, file_path, yaml_error):
        self.file_path = file_path
        self.yaml_error = yaml_error
        self.message = f"Error parsing YAML file {file_path}: {yaml_error}"
        super().__init__(self.message)


class SchemaValidationError(ConfigError):
    """A machine configuration does not satisfy its schema."""
    def __init__(self, file_path, errors):
        self.file_path = file_path
        self.errors = errors
        error_msg = "\n  - ".join([""] + errors)
        self.message = f"Configuration validation failed for {file_path}:{error_msg}"
        super().__init__(self.message)


class YamlConfigLoader:
    """
    Loads machine YAML files and optionally validates them against a JSON schema.

    In strict mode (the default) every failure raises; otherwise a caller-supplied
    default configuration is returned where one is available.
    """
    def __init__(self, schema_validator=None):
        """
        Initialize the loader.

        Args:
            schema_validator: Optional validator exposing validate_with_defaults(config, schema)
        """
        self.logger = logging.getLogger("infrastructure.config.loader")
        self.schema_validator = schema_validator
        self.strict_mode = True

    def set_strict_mode(self, strict: bool = True):
        self.strict_mode = strict
        return self

    def load_file(self, file_path: str, schema_path: Optional[str] = None,
                  default_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Load one YAML configuration file.

        Schema defaults are filled in before validation, so the returned
        configuration always carries them.

        Args:
            file_path: Path to the YAML file
            schema_path: Optional JSON schema to validate against
            default_config: Returned instead of raising when not in strict mode

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundConfigError: If the file does not exist
            YamlParseError: If the YAML cannot be parsed
            SchemaValidationError: If validation fails in strict mode
        """
        if not os.path.isfile(file_path):
            self.logger.error(f"Configuration file not found: {file_path}")

            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration instead of missing file: {file_path}")
                return default_config

            raise FileNotFoundConfigError(file_path)

        try:
            with open(file_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            error = YamlParseError(file_path, e)
            self.logger.error(error.message)

            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration due to parse error in {file_path}")
                return default_config

            raise error from e

        self.logger.debug(f"Loaded configuration from {file_path}")

        if config is None:
            self.logger.warning(f"Empty configuration file: {file_path}")
            config = default_config if default_config is not None else {}

        if schema_path and self.schema_validator:
            schema = self._load_schema(schema_path)
            is_valid, errors, config_with_defaults = self.schema_validator.validate_with_defaults(config, schema)

            if not is_valid:
                error = SchemaValidationError(file_path, errors)
                if self.strict_mode:
                    raise error
                self.logger.warning(f"{error.message}\nUsing unvalidated configuration.")
            else:
                config = config_with_defaults
                self.logger.debug(f"Validated {file_path} against schema: {schema_path}")

        return config

    def _load_schema(self, schema_path: str) -> Dict[str, Any]:
        if not os.path.isfile(schema_path):
            error_msg = f"Schema file not found: {schema_path}"
            self.logger.error(error_msg)
            raise FileNotFoundConfigError(schema_path, error_msg)

        try:
            with open(schema_path, 'r', encoding='utf-8') as file:
                return json.load(file)
        except json.JSONDecodeError as e:
            error_msg = f"Error parsing schema file {schema_path}: {e}"
            self.logger.error(error_msg)
            raise ConfigError(error_msg) from e
