"""Unit tests for LayerSchema alias resolution."""

import pytest
from pydantic import ValidationError

from src.geodata import LayerSchema, UNKNOWN_NAME


class TestLayerSchema:
    """Test suite for LayerSchema class."""
    
    @pytest.fixture
    def province_schema(self):
        return LayerSchema(
            level="provinces",
            name_aliases=["Nom_Provin", "Nom_provin", "NAME"],
            code_aliases=["Code_Provi"],
        )
    
    def test_first_alias_wins(self, province_schema):
        """Test that aliases are tried in priority order."""
        properties = {"NAME": "Other", "Nom_provin": "Second", "Nom_Provin": "Benslimane"}
        
        assert province_schema.resolve_name(properties) == "Benslimane"
    
    def test_later_alias_used_when_earlier_missing(self, province_schema):
        """Test fallback to later aliases."""
        assert province_schema.resolve_name({"NAME": "Settat"}) == "Settat"
    
    def test_blank_values_skipped(self, province_schema):
        """Test that empty or blank values do not resolve."""
        properties = {"Nom_Provin": "  ", "Nom_provin": None, "NAME": "Berrechid"}
        
        assert province_schema.resolve_name(properties) == "Berrechid"
    
    def test_fallback_name(self, province_schema):
        """Test the sentinel name when nothing resolves."""
        assert province_schema.resolve_name({"OBJECTID": 3}) == UNKNOWN_NAME
    
    def test_resolve_code_as_text(self, province_schema):
        """Test codes are returned as strings."""
        assert province_schema.resolve_code({"Code_Provi": 141}) == "141"
        assert province_schema.resolve_code({"Code_Provi": " 141 "}) == "141"
    
    def test_resolve_code_missing(self, province_schema):
        assert province_schema.resolve_code({"Nom_Provin": "Benslimane"}) is None
    
    def test_name_aliases_required(self):
        """Test that a schema needs at least one name alias."""
        with pytest.raises(ValidationError):
            LayerSchema(level="regions", name_aliases=[])
    
    def test_schema_is_frozen(self, province_schema):
        with pytest.raises(ValidationError):
            province_schema.level = "communes"
