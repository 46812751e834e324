"""Shared fixtures for zone aggregator tests.

Synthetic layout along the coast, west to east:

    Casablanca (300) | Benslimane (111)                          | Rabat (200)
                     | El Mansouria | Bouznika | Charrate | Ben Slimane |

Every commune is a 1 x 2 box; provinces are the union of their communes.
"""

import pytest
from shapely.geometry import box

from src.geodata import BoundaryFeature, FeatureLayer, LayerSchema
from modules.zone_aggregator.models import ReassignmentRule


def _layer(level, name_aliases, items):
    schema = LayerSchema(level=level, name_aliases=name_aliases, code_aliases=["Code_Provi"])
    return FeatureLayer(schema, [
        BoundaryFeature(name=name, code=code, geometry=geometry,
                        properties={name_aliases[0]: name, "Code_Provi": code})
        for name, code, geometry in items
    ])


@pytest.fixture
def provinces():
    return _layer("provinces", ["Nom_Provin", "NAME"], [
        ("Casablanca", "300", box(-2, 0, 0, 2)),
        ("Benslimane", "111", box(0, 0, 4, 2)),
        ("Rabat", "200", box(4, 0, 6, 2)),
    ])


@pytest.fixture
def communes():
    return _layer("communes", ["Nom_Commun", "NAME"], [
        ("El Mansouria", "111", box(0, 0, 1, 2)),
        ("Bouznika", "111", box(1, 0, 2, 2)),
        ("Charrate", "111", box(2, 0, 3, 2)),
        ("Ben Slimane", "111", box(3, 0, 4, 2)),
        ("Rabat Hassan", "200", box(4, 0, 6, 2)),
        ("Anfa", "300", box(-2, 0, 0, 2)),
    ])


@pytest.fixture
def benslimane_rule():
    return ReassignmentRule(
        source_province="Benslimane",
        target_zone="DRR",
        communes=["El Mansouria", "Bouznika", "Charrate"],
    )
