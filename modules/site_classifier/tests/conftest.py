"""Shared fixtures for site classifier tests.

The reference data is a small synthetic slice of Morocco built with shapely
boxes: one region, two provinces with their communes, one DR zone and an
emergency table covering the Casablanca commune only.
"""

import pytest
from shapely.geometry import box

from src.geodata import BoundaryFeature, FeatureLayer, LayerSchema
from modules.site_classifier.reference import EmergencyTable, ReferenceContext


def _layer(level, name_aliases, items):
    schema = LayerSchema(level=level, name_aliases=name_aliases, code_aliases=["Code_Provi"])
    return FeatureLayer(schema, [
        BoundaryFeature(name=name, code=code, geometry=geometry, properties={"NAME": name})
        for name, code, geometry in items
    ])

@pytest.fixture
def make_layer():
    """Factory building a FeatureLayer from (name, code, geometry) tuples."""
    def factory(items, level="test"):
        return _layer(level, ["NAME"], items)
    return factory

@pytest.fixture
def regions():
    return _layer("regions", ["Nom_Region", "NAME"], [
        ("Casablanca-Settat", None, box(-8.5, 32.5, -6.5, 34.0)),
    ])

@pytest.fixture
def provinces():
    return _layer("provinces", ["Nom_Provin", "NAME"], [
        ("Casablanca", "141", box(-7.8, 33.4, -7.4, 33.7)),
        ("Mediouna", "142", box(-7.4, 33.4, -7.2, 33.7)),
    ])

@pytest.fixture
def communes():
    return _layer("communes", ["Nom_Commun", "NAME"], [
        ("Casablanca", "141", box(-7.8, 33.5, -7.5, 33.7)),
        ("Aïn Harrouda", "141", box(-7.5, 33.5, -7.4, 33.7)),
        ("Médiouna", "142", box(-7.4, 33.4, -7.2, 33.7)),
    ])

@pytest.fixture
def zones():
    return _layer("zones", ["name", "NAME"], [
        ("DRC", None, box(-7.8, 33.4, -7.2, 33.7)),
    ])

@pytest.fixture
def emergency_table():
    return EmergencyTable.from_rows([
        {"Commune": "CASABLANCA", "141": "0522000141", "5757": "5757", "15": "15",
         "19": "19", "112": "112", "177": "177"},
    ])

@pytest.fixture
def reference_context(regions, zones, provinces, communes, emergency_table):
    return ReferenceContext.from_layers(regions, zones, provinces, communes, emergency_table)

@pytest.fixture
def casablanca():
    """(latitude, longitude) of central Casablanca."""
    return (33.5731, -7.5898)
