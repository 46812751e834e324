"""Geotagger Module Processor Interface

This module defines the abstract base class and result models shared by the
geotagger's batch modules (zone aggregation, site classification). Both run
as one-shot jobs: validate the configuration, process a whole batch, report
the files they wrote.
"""

from abc import ABC, abstractmethod
from pydantic import BaseModel, Field
from typing import Literal, Optional, Dict, List, Any
from datetime import datetime


class ProcessingResult(BaseModel):
    """Result of one module run.

    ``errors`` holds the reasons a run failed. Problems that did not stop the
    run (a zone built without one of its polygons, for instance) are reported
    in ``warnings`` and leave ``success`` set.
    """

    success: bool = Field(..., description="Whether the processing completed successfully")
    records_processed: int = Field(ge=0, description="Number of sites classified or zones built")
    errors: List[str] = Field(default_factory=list, description="Fatal error messages")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal problems met during the run")
    outputs: Dict[str, str] = Field(default_factory=dict, description="Written files by output kind")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional processing metadata")
    execution_time: float = Field(ge=0.0, description="Processing execution time in seconds")


class ModuleStatus(BaseModel):
    """Status data model for module health and configuration reporting."""

    module_name: str = Field(..., description="Name of the processing module")
    is_configured: bool = Field(..., description="Whether the module is properly configured")
    last_run: Optional[datetime] = Field(None, description="Timestamp of the last successful processing run")
    status: Literal["ready", "error"] = Field(..., description="'ready' when configured and healthy")
    health_check: bool = Field(..., description="Whether every input dataset is present")


class ModuleProcessor(ABC):
    """Abstract base class for all geotagger processing modules.

    Subclasses implement configuration validation, the run itself and status
    reporting. ``failure_result`` and ``build_status`` give every module the
    same failure and status shapes.
    """

    @abstractmethod
    def __init__(self, config_loader):
        """Initialize module with shared configuration.

        Args:
            config_loader: ConfigLoader instance providing access to framework configuration
        """
        pass

    @abstractmethod
    def validate_configuration(self) -> bool:
        """Validate module-specific configuration.

        Returns:
            bool: True if configuration is valid and complete, False otherwise
        """
        pass

    @abstractmethod
    def process(self, dry_run: bool = False) -> ProcessingResult:
        """Run the module over its whole input batch.

        With ``dry_run`` set every step runs but no output file is written.

        Args:
            dry_run: If True, perform all processing logic without writing outputs

        Returns:
            ProcessingResult: Standardized result object with success status, metrics, and errors
        """
        pass

    @abstractmethod
    def get_status(self) -> ModuleStatus:
        """Get current module processing status.

        Returns:
            ModuleStatus: Current module status and health information
        """
        pass

    @staticmethod
    def failure_result(errors: List[str], dry_run: bool,
                       started_at: Optional[datetime] = None) -> ProcessingResult:
        """Build the result of a run that stopped early."""
        execution_time = (datetime.now() - started_at).total_seconds() if started_at else 0.0
        metadata: Dict[str, Any] = {"dry_run": dry_run}
        if started_at is not None:
            metadata["error_occurred_at"] = datetime.now().isoformat()

        return ProcessingResult(
            success=False,
            records_processed=0,
            errors=errors,
            metadata=metadata,
            execution_time=execution_time
        )

    @staticmethod
    def build_status(module_name: str, is_configured: bool, healthy: bool,
                     last_run: Optional[datetime] = None) -> ModuleStatus:
        """Build a ModuleStatus; the module is ready only when configured and healthy."""
        health_check = is_configured and healthy
        return ModuleStatus(
            module_name=module_name,
            is_configured=is_configured,
            last_run=last_run,
            status="ready" if health_check else "error",
            health_check=health_check
        )
