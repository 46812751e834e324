"""Reference data shared by every classification call.

The ReferenceContext bundles the four boundary indices and the emergency
table. It is built once at startup by ReferenceLoader and never mutated
afterwards; every classification run reads from the same instance.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.config.config_loader import ConfigLoader
from src.exceptions import GeoTagLoadError, GeoTagBaseException
from src.geodata import FeatureLayer, load_feature_layer, read_rows
from src.utils import log_performance
from ..boundary_index import BoundaryIndex
from .emergency_table import EmergencyTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceContext:
    """Immutable bundle of reference data for point classification."""
    region_index: BoundaryIndex
    zone_index: BoundaryIndex
    province_index: BoundaryIndex
    commune_index: BoundaryIndex
    emergency_table: EmergencyTable

    @classmethod
    def from_layers(cls, regions: FeatureLayer, zones: FeatureLayer,
                    provinces: FeatureLayer, communes: FeatureLayer,
                    emergency_table: Optional[EmergencyTable] = None,
                    use_spatial_index: bool = False) -> "ReferenceContext":
        """Index already-loaded layers."""
        return cls(
            region_index=BoundaryIndex(regions, use_spatial_index),
            zone_index=BoundaryIndex(zones, use_spatial_index),
            province_index=BoundaryIndex(provinces, use_spatial_index),
            commune_index=BoundaryIndex(communes, use_spatial_index),
            emergency_table=emergency_table or EmergencyTable({}),
        )

    def describe(self) -> dict:
        return {
            "regions": len(self.region_index),
            "zones": len(self.zone_index),
            "provinces": len(self.province_index),
            "communes": len(self.commune_index),
            "emergency_communes": len(self.emergency_table),
        }


class ReferenceLoader:
    """Loads every reference dataset of an environment into a ReferenceContext.

    All datasets must load; the first failure aborts initialization with a
    GeoTagLoadError and no context is returned.
    """

    def __init__(self, config_loader: ConfigLoader, environment: str = "development"):
        self.config_loader = config_loader
        self.environment = environment

    @log_performance
    def load(self) -> ReferenceContext:
        """Load all layers and tables.

        Returns:
            Fully populated ReferenceContext

        Raises:
            GeoTagLoadError: If any required dataset is missing or unreadable
        """
        processing = self.config_loader.get_processing_config(self.environment)
        use_spatial_index = bool(processing.get("use_spatial_index", False))

        layers = {
            name: self._load_layer(name)
            for name in ("regions", "zones", "provinces", "communes")
        }
        emergency_table = self._load_emergency_table()

        context = ReferenceContext.from_layers(
            regions=layers["regions"],
            zones=layers["zones"],
            provinces=layers["provinces"],
            communes=layers["communes"],
            emergency_table=emergency_table,
            use_spatial_index=use_spatial_index,
        )
        logger.info(f"Reference data ready: {context.describe()}")
        return context

    def _load_layer(self, name: str) -> FeatureLayer:
        try:
            path = self.config_loader.resolve_data_path(self.environment, "layers", name)
            schema = self.config_loader.get_layer_schema(name)
        except GeoTagBaseException as e:
            raise GeoTagLoadError(f"Cannot resolve reference layer '{name}': {e}")
        return load_feature_layer(path, schema)

    def _load_emergency_table(self) -> EmergencyTable:
        try:
            path = self.config_loader.resolve_data_path(self.environment, "tables", "emergency_contacts")
            table_config = self.config_loader.get_table_config("emergency_contacts")
        except GeoTagBaseException as e:
            raise GeoTagLoadError(f"Cannot resolve emergency contact table: {e}")

        try:
            rows = read_rows(path)
        except Exception as e:
            raise GeoTagLoadError(
                f"Cannot read emergency contact table {path}: {e}",
                {"table": "emergency_contacts"}
            )

        try:
            table = EmergencyTable.from_rows(
                rows,
                commune_columns=table_config.get("commune_columns"),
                contact_columns=table_config.get("contact_columns"),
            )
        except GeoTagBaseException as e:
            raise GeoTagLoadError(f"Invalid emergency contact table settings: {e}")

        logger.info(f"Loaded emergency contacts for {len(table)} communes from {path}")
        return table
