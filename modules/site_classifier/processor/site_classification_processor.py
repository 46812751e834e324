"""SiteClassificationProcessor Implementation

This module implements the SiteClassificationProcessor class that geotags a
spreadsheet of cell sites by implementing the ModuleProcessor interface:
reference layers are loaded once, the sites are classified in chunks and the
enriched rows are exported.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from src.interfaces.module_processor import ModuleProcessor, ProcessingResult, ModuleStatus
from src.config.config_loader import ConfigLoader
from src.exceptions import GeoTagConfigurationError
from src.utils import PerformanceMonitor
from ..classification import ChunkedRunner, PointClassifier, load_point_batch
from ..export import export_results, export_geojson
from ..models import ClassificationResult, ClassificationSummary
from ..reference import ReferenceContext, ReferenceLoader

logger = logging.getLogger(__name__)


class SiteClassificationProcessor(ModuleProcessor):
    """Site classifier implementing ModuleProcessor interface.

    Attaches region, DR zone, province, commune and emergency contacts to every
    site of an input spreadsheet and writes the enriched table. The reference
    context is loaded on first use and reused for every later run of the same
    processor.
    """

    def __init__(self, config_loader: ConfigLoader, input_path: Union[str, Path, None] = None,
                 output_path: Union[str, Path, None] = None, environment: str = "development",
                 geojson_path: Union[str, Path, None] = None):
        """Initialize site classification processor.

        Args:
            config_loader: ConfigLoader instance providing access to framework configuration
            input_path: Site spreadsheet to classify
            output_path: Target .xlsx/.csv file (defaults to <output_dir>/<input>_geotagged.xlsx)
            environment: Configuration environment name
            geojson_path: Optional point GeoJSON output
        """
        self.config_loader = config_loader
        self.environment = environment
        self.input_path = Path(input_path) if input_path else None
        self.output_path = Path(output_path) if output_path else None
        self.geojson_path = Path(geojson_path) if geojson_path else None

        self.context: Optional[ReferenceContext] = None
        self.runner: Optional[ChunkedRunner] = None
        self.performance_monitor = PerformanceMonitor()
        self.last_summary: Optional[ClassificationSummary] = None
        self._last_run: Optional[datetime] = None
        self._configuration_valid: Optional[bool] = None

        logger.info(f"SiteClassificationProcessor initialized for environment '{environment}'")

    def validate_configuration(self) -> bool:
        """Validate environment, field mapping and input file settings.

        Returns:
            bool: True if configuration is valid and complete, False otherwise
        """
        if self._configuration_valid is not None:
            return self._configuration_valid

        try:
            self.config_loader.load_environment_config(self.environment)
            for layer in ("regions", "zones", "provinces", "communes"):
                self.config_loader.get_layer_schema(layer)
            self.config_loader.get_table_config("emergency_contacts")

            if self.input_path is None:
                logger.error("No input file configured")
                self._configuration_valid = False
                return False

            if not self.input_path.exists():
                logger.error(f"Input file not found: {self.input_path}")
                self._configuration_valid = False
                return False

            logger.info("Module configuration validation successful")
            self._configuration_valid = True
            return True

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            self._configuration_valid = False
            return False

    def load_reference_context(self) -> ReferenceContext:
        """Load the reference context if it is not loaded yet."""
        if self.context is None:
            self.context = ReferenceLoader(self.config_loader, self.environment).load()
        return self.context

    def classify_sites(self, points, chunk_size: Optional[int] = None) -> List[ClassificationResult]:
        """Classify sites through the chunked runner, logging progress per chunk."""
        context = self.load_reference_context()
        if chunk_size is None:
            chunk_size = self.config_loader.get_processing_config(self.environment)["chunk_size"]
        if self.runner is None or self.runner.chunk_size != chunk_size:
            self.runner = ChunkedRunner(chunk_size)

        collected: List[ClassificationResult] = []

        def on_progress(processed: int, total: int, matched: int, empty_safety: int) -> None:
            logger.info(f"Classified {processed}/{total} sites "
                        f"({matched} matched, {empty_safety} without emergency contacts)")

        self.runner.run(points, PointClassifier(context), on_progress=on_progress,
                        on_complete=collected.extend)
        return collected

    def process(self, dry_run: bool = False) -> ProcessingResult:
        """Execute site classification.

        Args:
            dry_run: If True, classify the sites without writing output files

        Returns:
            ProcessingResult: Standardized result object with success status, metrics, and errors
        """
        start_time = datetime.now()

        try:
            logger.info(f"Starting site classification of {self.input_path} (dry_run={dry_run})")

            if not self.validate_configuration():
                return self.failure_result(["Configuration validation failed"], dry_run)

            with self.performance_monitor.monitor_operation("load_reference_data"):
                context = self.load_reference_context()

            batch = load_point_batch(self.input_path, self._site_markers())

            with self.performance_monitor.monitor_operation("classify_sites", batch.valid_count):
                results = self.classify_sites(batch.points)

            summary = ClassificationSummary.from_results(
                batch.submitted_count, batch.valid_count, results
            )
            self.last_summary = summary
            logger.info(summary.get_summary_text())

            outputs: Dict[str, str] = {}
            if dry_run:
                logger.info(f"Dry run: would export {len(results)} classified sites")
            else:
                outputs["spreadsheet"] = str(export_results(results, self._resolve_output_path()))
                if self.geojson_path is not None:
                    outputs["geojson"] = str(export_geojson(results, self.geojson_path))

            self._last_run = datetime.now()
            execution_time = (datetime.now() - start_time).total_seconds()

            return ProcessingResult(
                success=True,
                records_processed=len(results),
                outputs=outputs,
                metadata={
                    "dry_run": dry_run,
                    "environment": self.environment,
                    "input_path": str(self.input_path),
                    "summary": summary.model_dump(),
                    "reference_data": context.describe(),
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
        return self.build_status("site_classifier", is_configured,
                                 is_configured and self._health_check(), self._last_run)

    def _health_check(self) -> bool:
        """Check that every configured reference dataset exists on disk."""
        try:
            for layer in ("regions", "zones", "provinces", "communes"):
                path = self.config_loader.resolve_data_path(self.environment, "layers", layer)
                if not path.exists():
                    logger.debug(f"Health check failed: missing layer {path}")
                    return False

            path = self.config_loader.resolve_data_path(self.environment, "tables", "emergency_contacts")
            if not path.exists():
                logger.debug(f"Health check failed: missing table {path}")
                return False

            return True

        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    def _site_markers(self) -> Dict[str, Any]:
        try:
            return self.config_loader.get_table_config("sites")
        except GeoTagConfigurationError:
            logger.debug("No site column settings configured, using default header markers")
            return {}

    def _resolve_output_path(self) -> Path:
        if self.output_path is not None:
            return self.output_path

        processing = self.config_loader.get_processing_config(self.environment)
        output_dir = Path(processing.get("output_dir", "output"))
        return output_dir / f"{self.input_path.stem}_geotagged.xlsx"
