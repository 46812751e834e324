"""Point classification against the administrative reference layers."""

import logging

from src.utils import normalize
from ..models import (
    NOT_AVAILABLE,
    EMPTY_CONTACTS,
    ClassificationResult,
    SitePoint,
)
from ..reference import ReferenceContext

logger = logging.getLogger(__name__)


class PointClassifier:
    """Attaches region, zone, province, commune and emergency contacts to sites.

    Each layer is looked up independently: a site may resolve in one layer
    and fall outside another. Emergency contacts are looked up by the
    normalized commune name only when the commune resolved.
    """

    def __init__(self, context: ReferenceContext):
        """Initialize the classifier.

        Args:
            context: Shared, read-only reference data
        """
        self.context = context

    def classify(self, point: SitePoint) -> ClassificationResult:
        """Classify a single site."""
        lon, lat = point.longitude, point.latitude

        region = self.context.region_index.locate(lon, lat)
        zone = self.context.zone_index.locate(lon, lat)
        province = self.context.province_index.locate(lon, lat)
        commune = self.context.commune_index.locate(lon, lat)

        contacts = EMPTY_CONTACTS
        if commune != NOT_AVAILABLE:
            contacts = self.context.emergency_table.get(normalize(commune))

        result = ClassificationResult(
            point=point,
            region=region,
            province=province,
            commune=commune,
            zone=zone,
            contacts=contacts,
        )
        logger.debug(f"Site {point.site_id}: {result.get_assignment_status()}")
        return result

    __call__ = classify
