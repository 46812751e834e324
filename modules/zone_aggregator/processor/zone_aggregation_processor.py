"""ZoneAggregationProcessor Implementation

This module implements the ZoneAggregationProcessor class that builds the DR
zone layer offline by implementing the ModuleProcessor interface. The written
GeoJSON is later loaded as the ``zones`` reference layer.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from src.interfaces.module_processor import ModuleProcessor, ProcessingResult, ModuleStatus
from src.config.config_loader import ConfigLoader
from src.geodata import load_feature_layer
from src.utils import PerformanceMonitor
from ..aggregation import ZoneAggregator, load_zone_mapping, write_zones
from ..models import ZoneAggregationResult, ZoneMapping

logger = logging.getLogger(__name__)

DEFAULT_MODULE_CONFIG = Path(__file__).resolve().parent.parent / "config" / "zone_aggregator_config.json"


class ZoneAggregationProcessor(ModuleProcessor):
    """Zone builder implementing ModuleProcessor interface.

    Loads the province and commune layers and the zone mapping spreadsheet of
    an environment, applies the reassignment rules of the module configuration
    and writes the resulting zone FeatureCollection.
    """

    def __init__(self, config_loader: ConfigLoader, environment: str = "development",
                 module_config_path: Union[str, Path, None] = None,
                 output_path: Union[str, Path, None] = None):
        """Initialize zone aggregation processor.

        Args:
            config_loader: ConfigLoader instance providing access to framework configuration
            environment: Configuration environment name
            module_config_path: Path to zone_aggregator_config.json
            output_path: Override of the zones GeoJSON output path
        """
        self.config_loader = config_loader
        self.environment = environment
        self.module_config_path = Path(module_config_path) if module_config_path else DEFAULT_MODULE_CONFIG
        self.output_path = Path(output_path) if output_path else None

        self.performance_monitor = PerformanceMonitor()
        self.last_result: Optional[ZoneAggregationResult] = None
        self._module_config: Optional[Dict[str, Any]] = None
        self._last_run: Optional[datetime] = None
        self._configuration_valid: Optional[bool] = None

        logger.info(f"ZoneAggregationProcessor initialized for environment '{environment}'")

    def _load_module_config(self) -> Dict[str, Any]:
        """Load module-specific configuration from zone_aggregator_config.json.

        Raises:
            FileNotFoundError: If configuration file is not found
            ValueError: If configuration file is invalid JSON
        """
        try:
            with open(self.module_config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)

            logger.debug(f"Loaded module configuration from {self.module_config_path}")
            return config_data

        except FileNotFoundError:
            logger.error(f"Module configuration file not found: {self.module_config_path}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in configuration file {self.module_config_path}: {e}")
            raise ValueError(f"Invalid JSON in configuration file: {e}")

    def _get_module_config(self) -> Dict[str, Any]:
        if self._module_config is None:
            self._module_config = self._load_module_config()
        return self._module_config

    def validate_configuration(self) -> bool:
        """Validate framework and module configuration.

        Returns:
            bool: True if configuration is valid and complete, False otherwise
        """
        if self._configuration_valid is not None:
            return self._configuration_valid

        try:
            self.config_loader.load_environment_config(self.environment)
            self.config_loader.get_layer_schema("provinces")
            self.config_loader.get_layer_schema("communes")
            self.config_loader.get_table_config("zone_mapping")

            module_config = self._get_module_config()
            rules = module_config.get("reassignment_rules", [])
            if not isinstance(rules, list):
                logger.error("'reassignment_rules' must be a list")
                self._configuration_valid = False
                return False

            # Rule conflicts are detected when the mapping model is built
            ZoneMapping(rules=rules)

            logger.info("Module configuration validation successful")
            self._configuration_valid = True
            return True

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            self._configuration_valid = False
            return False

    def build_zones(self) -> ZoneAggregationResult:
        """Load the input datasets and aggregate the zones."""
        provinces = load_feature_layer(
            self.config_loader.resolve_data_path(self.environment, "layers", "provinces"),
            self.config_loader.get_layer_schema("provinces"),
        )
        communes = load_feature_layer(
            self.config_loader.resolve_data_path(self.environment, "layers", "communes"),
            self.config_loader.get_layer_schema("communes"),
        )

        table_config = self.config_loader.get_table_config("zone_mapping")
        mapping = load_zone_mapping(
            self.config_loader.resolve_data_path(self.environment, "tables", "zone_mapping"),
            rules=self._get_module_config().get("reassignment_rules", []),
            zone_columns=table_config.get("zone_columns"),
            province_columns=table_config.get("province_columns"),
        )

        with self.performance_monitor.monitor_operation("aggregate_zones", len(mapping.zone_names())):
            return ZoneAggregator(provinces, communes).aggregate(mapping)

    def process(self, dry_run: bool = False) -> ProcessingResult:
        """Execute zone aggregation.

        Args:
            dry_run: If True, build the zones without writing the GeoJSON

        Returns:
            ProcessingResult: Standardized result object with success status, metrics, and errors
        """
        start_time = datetime.now()

        try:
            logger.info(f"Starting zone aggregation (dry_run={dry_run})")

            if not self.validate_configuration():
                return self.failure_result(["Configuration validation failed"], dry_run)

            result = self.build_zones()
            self.last_result = result

            output_path = self._resolve_output_path()
            outputs: Dict[str, str] = {}
            if dry_run:
                logger.info(f"Dry run: would write {len(result.zones)} zones to {output_path}")
            else:
                outputs["zones"] = str(write_zones(result, output_path))

            warnings = [
                f"Union failed for '{failure.feature_name}' in zone '{failure.zone}': {failure.error}"
                for failure in result.union_failures
            ]
            warnings.extend(f"Province '{name}' not found in province layer" for name in result.missing_provinces)
            warnings.extend(f"Zone '{name}' has no polygons and was not written" for name in result.empty_zones)

            self._last_run = datetime.now()
            execution_time = (datetime.now() - start_time).total_seconds()

            return ProcessingResult(
                success=True,
                records_processed=len(result.zones),
                warnings=warnings,
                outputs=outputs,
                metadata={
                    "dry_run": dry_run,
                    "environment": self.environment,
                    "output_path": str(output_path),
                    "aggregation": result.get_summary(),
                    "performance": self.performance_monitor.get_performance_summary(),
                },
                execution_time=execution_time
            )

        except Exception as e:
            logger.error(f"Processing failed: {e}")
            return self.failure_result([str(e)], dry_run, start_time)

    def get_status(self) -> ModuleStatus:
        """Get current module processing status.

        Returns:
            ModuleStatus: Current module status and health information
        """
        is_configured = self.validate_configuration()
        return self.build_status("zone_aggregator", is_configured,
                                 is_configured and self._health_check(), self._last_run)

    def _health_check(self) -> bool:
        """Check that the input datasets exist on disk."""
        try:
            inputs = [
                self.config_loader.resolve_data_path(self.environment, "layers", "provinces"),
                self.config_loader.resolve_data_path(self.environment, "layers", "communes"),
                self.config_loader.resolve_data_path(self.environment, "tables", "zone_mapping"),
            ]
            missing = [str(path) for path in inputs if not path.exists()]
            if missing:
                logger.debug(f"Health check failed: missing inputs {missing}")
                return False
            return True

        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    def _resolve_output_path(self) -> Path:
        """Output override, then module config path, then the environment's zones layer."""
        if self.output_path is not None:
            return self.output_path

        output_config = self._get_module_config().get("output", {})
        if output_config.get("path"):
            return Path(output_config["path"])

        layer = output_config.get("layer", "zones")
        return self.config_loader.resolve_data_path(self.environment, "layers", layer)
