"""Emergency contact lookup keyed by commune name."""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from src.exceptions import GeoTagConfigurationError
from src.geodata import pick_value
from src.utils import normalize
from ..models import CONTACT_COLUMNS, EMPTY_CONTACTS, EmergencyContacts

logger = logging.getLogger(__name__)

DEFAULT_COMMUNE_COLUMNS = ["Commune SS", "Commune", "COMMUNE"]


class EmergencyTable:
    """Read-only map from normalized commune name to emergency contacts.

    When several rows name the same commune, the first row wins.
    """

    def __init__(self, entries: Mapping[str, EmergencyContacts]):
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]],
                  commune_columns: Optional[Sequence[str]] = None,
                  contact_columns: Optional[Sequence[str]] = None) -> "EmergencyTable":
        """Build the table from spreadsheet rows.

        Args:
            rows: Row dictionaries keyed by column header
            commune_columns: Columns holding the commune name, in priority order
            contact_columns: Headers of the six contact numbers, in the order
                141, 5757, 15, 19, 112, 177

        Returns:
            EmergencyTable

        Raises:
            GeoTagConfigurationError: If contact_columns does not list six headers
        """
        commune_columns = list(commune_columns or DEFAULT_COMMUNE_COLUMNS)
        contact_columns = list(contact_columns or CONTACT_COLUMNS)
        if len(contact_columns) != len(CONTACT_COLUMNS):
            raise GeoTagConfigurationError(
                f"Emergency table needs {len(CONTACT_COLUMNS)} contact columns, got {contact_columns}",
                {"expected_order": CONTACT_COLUMNS}
            )
        # Source header -> contact field, by position
        column_fields = list(zip(contact_columns, CONTACT_COLUMNS))

        entries: Dict[str, EmergencyContacts] = {}
        skipped = 0
        duplicates = 0
        for row in rows:
            key = normalize(pick_value(row, commune_columns))
            if not key:
                skipped += 1
                continue
            if key in entries:
                duplicates += 1
                continue
            entries[key] = EmergencyContacts(**{
                contact_field: row.get(column) for column, contact_field in column_fields
            })

        if skipped:
            logger.warning(f"Skipped {skipped} emergency rows without a commune name")
        if duplicates:
            logger.info(f"Ignored {duplicates} duplicate emergency rows (first row per commune kept)")

        return cls(entries)

    def get(self, normalized_commune: str) -> EmergencyContacts:
        """Return the contacts for a normalized commune name, empty on a miss."""
        return self._entries.get(normalized_commune, EMPTY_CONTACTS)

    def lookup(self, commune_name: Any) -> EmergencyContacts:
        """Return the contacts for a commune name in any spelling."""
        return self.get(normalize(commune_name))

    def __contains__(self, normalized_commune: str) -> bool:
        return normalized_commune in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def communes(self) -> List[str]:
        return list(self._entries)
