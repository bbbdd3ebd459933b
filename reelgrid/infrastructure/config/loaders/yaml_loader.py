# reelgrid/infrastructure/config/loaders/yaml_loader.py
import os
import yaml
import json
import logging
from typing import Dict, Any, Optional


class ConfigError(Exception):
    """Base class for errors raised while loading or validating configuration."""
    pass


class FileNotFoundConfigError(ConfigError):
    """A configuration or schema file does not exist."""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"Configuration file not found: {path}"
        super().__init__(self.message)


class YamlParseError(ConfigError):
    """A configuration file is not valid YAML."""
    def __init__(self, file_path, yaml_error):
        self.file_path = file_path
        self.yaml_error = yaml_error
        self.message = f"Error parsing YAML file {file_path}: {str(yaml_error)}"
        super().__init__(self.message)


class SchemaValidationError(ConfigError):
    """A configuration file does not match its JSON schema."""
    def __init__(self, file_path, errors):
        self.file_path = file_path
        self.errors = errors
        error_msg = "\n  - ".join([""] + errors)
        self.message = f"Configuration validation failed for {file_path}:{error_msg}"
        super().__init__(self.message)


class YamlConfigLoader:
    """
    Loads YAML configuration files and optionally validates them against a
    JSON schema.

    In strict mode (the default) every problem raises. In non-strict mode a
    missing or unparsable file falls back to ``default_config`` when one is
    given, and a schema mismatch is only logged.
    """
    def __init__(self, schema_validator=None):
        """
        Args:
            schema_validator: Optional validator used when a schema path is passed
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
        Load a single YAML file and validate it if a schema is given.

        Args:
            file_path: Path to the YAML file
            schema_path: Optional path to a JSON schema
            default_config: Fallback used in non-strict mode

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundConfigError: File is missing (strict mode or no default)
            YamlParseError: File is not valid YAML (strict mode or no default)
            SchemaValidationError: Validation failed in strict mode
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

        # Empty file
        if config is None:
            self.logger.warning(f"Empty configuration file: {file_path}")
            config = default_config if default_config is not None else {}

        if schema_path and self.schema_validator:
            schema = self._load_schema(schema_path)
            is_valid, errors = self.schema_validator.validate(config, schema)

            if not is_valid:
                error = SchemaValidationError(file_path, errors)

                if self.strict_mode:
                    raise error

                self.logger.warning(f"{error.message}\nUsing unvalidated configuration.")
            else:
                self.logger.debug(f"Validated {file_path} against schema: {schema_path}")

        return config

    def _load_schema(self, schema_path: str) -> Dict[str, Any]:
        """
        Load a JSON schema file.

        Raises:
            FileNotFoundConfigError: If the schema file does not exist
            ConfigError: If the schema is not valid JSON
        """
        if not os.path.isfile(schema_path):
            error_msg = f"Schema file not found: {schema_path}"
            self.logger.error(error_msg)
            raise FileNotFoundConfigError(schema_path, error_msg)

        try:
            with open(schema_path, 'r', encoding='utf-8') as file:
                return json.load(file)
        except json.JSONDecodeError as e:
            error_msg = f"Error parsing schema file {schema_path}: {str(e)}"
            self.logger.error(error_msg)
            raise ConfigError(error_msg) from e
