"""
Configuration loader for the cell-site geotagger.

This module provides the ConfigLoader class that handles loading and validating
JSON configuration files for multi-environment deployments.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from functools import lru_cache

from ..exceptions import GeoTagConfigurationError, GeoTagValidationError
from ..geodata.layer_schema import LayerSchema


REQUIRED_LAYERS = ["regions", "provinces", "communes", "zones"]
REQUIRED_TABLES = ["emergency_contacts", "zone_mapping"]
DEFAULT_CHUNK_SIZE = 200


class ConfigLoader:
    """
    Configuration loader and validator for the geotagger.

    This class handles loading environment-specific configuration from JSON files,
    validating required fields, and providing type-safe access to configuration values
    such as reference data paths and per-layer property aliases.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing configuration files (defaults to 'config/')
        """
        self.logger = logging.getLogger(__name__)
        self.config_dir = Path(config_dir) if config_dir else Path("config")

    @lru_cache(maxsize=2)
    def load_environment_config(self, environment: str) -> Dict[str, Any]:
        """
        Load configuration for a specific environment.

        Args:
            environment: Environment name (development/production)

        Returns:
            Dictionary containing environment-specific configuration merged with shared config

        Raises:
            GeoTagConfigurationError: If configuration cannot be loaded or validated
        """
        try:
            env_config_path = self.config_dir / "environment_config.json"

            if not env_config_path.exists():
                raise GeoTagConfigurationError(
                    f"Environment configuration file not found: {env_config_path}"
                )

            with open(env_config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)

            self._validate_environment_config(config_data, environment)

            env_config = json.loads(json.dumps(config_data["environments"][environment]))

            # Environment-specific layers and tables override shared ones
            shared_config = config_data.get("shared", {})
            for section in ("layers", "tables"):
                merged = dict(shared_config.get(section, {}))
                merged.update(env_config.get(section, {}))
                env_config[section] = merged

            for key, value in shared_config.items():
                if key not in ("layers", "tables") and key not in env_config:
                    env_config[key] = value

            env_config.setdefault("processing", {}).setdefault("chunk_size", DEFAULT_CHUNK_SIZE)
            env_config["_validation"] = config_data.get("validation", {})

            self.logger.info(f"Loaded configuration for environment: {environment}")
            return env_config

        except json.JSONDecodeError as e:
            raise GeoTagConfigurationError(
                f"Invalid JSON in environment configuration: {str(e)}"
            )
        except GeoTagValidationError:
            raise
        except GeoTagConfigurationError:
            raise
        except Exception as e:
            raise GeoTagConfigurationError(
                f"Failed to load environment configuration: {str(e)}"
            )

    @lru_cache(maxsize=1)
    def load_field_mapping(self) -> Dict[str, Any]:
        """
        Load field mapping configuration (property aliases and table columns).

        Returns:
            Dictionary containing field mapping configuration

        Raises:
            GeoTagConfigurationError: If field mapping cannot be loaded or validated
        """
        try:
            field_mapping_path = self.config_dir / "field_mapping.json"

            if not field_mapping_path.exists():
                raise GeoTagConfigurationError(
                    f"Field mapping configuration file not found: {field_mapping_path}"
                )

            with open(field_mapping_path, 'r', encoding='utf-8') as f:
                mapping_data = json.load(f)

            self._validate_field_mapping(mapping_data)

            self.logger.info("Loaded field mapping configuration")
            return mapping_data

        except json.JSONDecodeError as e:
            raise GeoTagConfigurationError(
                f"Invalid JSON in field mapping configuration: {str(e)}"
            )
        except GeoTagValidationError:
            raise
        except GeoTagConfigurationError:
            raise
        except Exception as e:
            raise GeoTagConfigurationError(
                f"Failed to load field mapping configuration: {str(e)}"
            )

    def get_layer_schema(self, layer_name: str) -> LayerSchema:
        """
        Get the property schema for a boundary layer.

        Args:
            layer_name: Name of the layer (regions, provinces, communes, zones)

        Returns:
            LayerSchema with the ordered name and code aliases for the layer

        Raises:
            GeoTagConfigurationError: If layer configuration is not found
        """
        field_mapping = self.load_field_mapping()

        if layer_name not in field_mapping["layers"]:
            raise GeoTagConfigurationError(
                f"Layer '{layer_name}' not found in field mapping configuration"
            )

        return LayerSchema(level=layer_name, **field_mapping["layers"][layer_name])

    def get_table_config(self, table_name: str) -> Dict[str, Any]:
        """
        Get column configuration for a tabular reference dataset.

        Args:
            table_name: Name of the table (emergency_contacts, zone_mapping, sites)

        Returns:
            Dictionary containing the table's column settings

        Raises:
            GeoTagConfigurationError: If table configuration is not found
        """
        field_mapping = self.load_field_mapping()
        tables = field_mapping.get("tables", {})

        if table_name not in tables:
            raise GeoTagConfigurationError(
                f"Table '{table_name}' not found in field mapping configuration"
            )

        return tables[table_name]

    def resolve_data_path(self, environment: str, section: str, key: str) -> Path:
        """
        Resolve the on-disk path of a reference dataset.

        Relative paths are resolved against the environment's ``data_dir``.

        Args:
            environment: Environment name
            section: Either 'layers' or 'tables'
            key: Dataset key inside the section

        Returns:
            Path to the dataset

        Raises:
            GeoTagConfigurationError: If the dataset is not configured
        """
        env_config = self.load_environment_config(environment)
        entries = env_config.get(section, {})

        if key not in entries:
            raise GeoTagConfigurationError(
                f"Dataset '{key}' not configured in '{section}'",
                {"environment": environment}
            )

        path = Path(entries[key])
        if not path.is_absolute():
            path = Path(env_config["data_dir"]) / path
        return path

    def get_processing_config(self, environment: str) -> Dict[str, Any]:
        """Get the processing section of an environment."""
        return self.load_environment_config(environment)["processing"]

    def _validate_environment_config(self, config_data: Dict[str, Any], environment: str) -> None:
        """
        Validate environment configuration structure.

        Args:
            config_data: Configuration data to validate
            environment: Environment name to validate

        Raises:
            GeoTagValidationError: If configuration is invalid
        """
        if "environments" not in config_data:
            raise GeoTagValidationError("Missing 'environments' key in configuration")

        if environment not in config_data["environments"]:
            available_envs = list(config_data["environments"].keys())
            raise GeoTagValidationError(
                f"Environment '{environment}' not found. Available: {available_envs}"
            )

        env_config = config_data["environments"][environment]
        required_keys = ["data_dir", "layers", "logging", "processing"]

        for key in required_keys:
            if key not in env_config:
                raise GeoTagValidationError(
                    f"Missing required key '{key}' in {environment} configuration"
                )

        shared_config = config_data.get("shared", {})

        all_layers = set(env_config.get("layers", {})) | set(shared_config.get("layers", {}))
        missing_layers = [layer for layer in REQUIRED_LAYERS if layer not in all_layers]
        if missing_layers:
            raise GeoTagValidationError(
                f"Missing required layers in {environment} configuration (including shared): {missing_layers}"
            )

        all_tables = set(env_config.get("tables", {})) | set(shared_config.get("tables", {}))
        missing_tables = [table for table in REQUIRED_TABLES if table not in all_tables]
        if missing_tables:
            raise GeoTagValidationError(
                f"Missing required tables in {environment} configuration (including shared): {missing_tables}"
            )

        chunk_size = env_config["processing"].get("chunk_size", DEFAULT_CHUNK_SIZE)
        if not isinstance(chunk_size, int) or chunk_size < 1:
            raise GeoTagValidationError(
                f"Invalid chunk_size {chunk_size!r} in {environment} configuration"
            )

    def _validate_field_mapping(self, mapping_data: Dict[str, Any]) -> None:
        """
        Validate field mapping configuration structure.

        Args:
            mapping_data: Field mapping data to validate

        Raises:
            GeoTagValidationError: If field mapping is invalid
        """
        if "layers" not in mapping_data:
            raise GeoTagValidationError("Missing 'layers' key in field mapping")

        for layer_name, layer_config in mapping_data["layers"].items():
            aliases = layer_config.get("name_aliases")
            if not aliases or not isinstance(aliases, list):
                raise GeoTagValidationError(
                    f"Layer '{layer_name}' must declare a non-empty 'name_aliases' list"
                )

            if not isinstance(layer_config.get("code_aliases", []), list):
                raise GeoTagValidationError(
                    f"'code_aliases' of layer '{layer_name}' must be a list"
                )

    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self.load_environment_config.cache_clear()
        self.load_field_mapping.cache_clear()
        self.logger.info("Configuration cache cleared")
