"""Tests for site batch parsing."""

import pandas as pd
import pytest

from src.exceptions import GeoTagValidationError
from modules.site_classifier.classification import (
    detect_columns,
    load_point_batch,
    parse_coordinate,
    parse_points,
)


class TestDetectColumns:
    """Test cases for header detection."""
    
    def test_common_headers(self):
        columns = detect_columns(["Site ID", "Latitude", "Longitude", "Vendor"])
        
        assert columns.latitude == "Latitude"
        assert columns.longitude == "Longitude"
        assert columns.identifier == "Site ID"
    
    def test_case_insensitive_and_lng(self):
        columns = detect_columns(["CODE", "LAT_WGS84", "LNG_WGS84"])
        
        assert (columns.latitude, columns.longitude, columns.identifier) == ("LAT_WGS84", "LNG_WGS84", "CODE")
    
    def test_first_matching_header_wins(self):
        """Test that header order decides between several candidates."""
        columns = detect_columns(["Name", "lat", "lat_backup", "long", "Site"])
        
        assert columns.latitude == "lat"
        assert columns.identifier == "Name"
    
    def test_missing_identifier(self):
        columns = detect_columns(["lat", "long"])
        
        assert columns.identifier is None
        assert columns.has_coordinates


class TestParseCoordinate:
    """Test cases for coordinate parsing."""
    
    @pytest.mark.parametrize("value,expected", [
        (33.5, 33.5),
        (-7, -7.0),
        ("33.5731", 33.5731),
        (" -7.5898 ", -7.5898),
        ("33.57N", 33.57),
        ("1e1", 10.0),
        (".5", 0.5),
    ])
    def test_valid_values(self, value, expected):
        assert parse_coordinate(value) == pytest.approx(expected)
    
    @pytest.mark.parametrize("value", [None, "", "abc", "N33", float("nan"), float("inf"), True])
    def test_invalid_values(self, value):
        assert parse_coordinate(value) is None


class TestParsePoints:
    """Test cases for turning rows into sites."""
    
    def test_invalid_rows_dropped(self):
        """Test that rows without finite coordinates are dropped."""
        rows = [
            {"Site": "CAS001", "Lat": "33.5731", "Long": "-7.5898"},
            {"Site": "BAD001", "Lat": "", "Long": "-7.1"},
            {"Site": "BAD002", "Lat": "north", "Long": "-7.1"},
            {"Site": "RAB001", "Lat": 34.02, "Long": -6.83},
        ]
        
        batch = parse_points(rows)
        
        assert batch.submitted_count == 4
        assert batch.valid_count == 2
        assert batch.dropped_count == 2
        assert [p.site_id for p in batch.points] == ["CAS001", "RAB001"]
        assert batch.points[0].original == rows[0]
    
    def test_row_number_used_without_identifier(self):
        """Test the 1-based row number fallback for missing identifiers."""
        rows = [
            {"lat": 1, "long": 1},
            {"lat": 2, "long": 2},
        ]
        
        batch = parse_points(rows)
        
        assert [p.site_id for p in batch.points] == [1, 2]
    
    def test_row_number_used_for_blank_identifier(self):
        rows = [
            {"Site": "A", "lat": 1, "long": 1},
            {"Site": "  ", "lat": 2, "long": 2},
        ]
        
        assert [p.site_id for p in parse_points(rows).points] == ["A", 2]
    
    @pytest.mark.parametrize("cell,expected", [
        (12.5, "12.5"),
        (101.0, "101"),
        (float("nan"), 1),
        (pd.NaT, 1),
        (pd.Timestamp("2024-03-01"), "2024-03-01 00:00:00"),
        (" CAS001 ", "CAS001"),
    ])
    def test_identifier_cells_become_text(self, cell, expected):
        """Test that non-text identifier cells never reject the row."""
        batch = parse_points([{"site": cell, "lat": 33.5, "lng": -7.5}])
        
        assert batch.valid_count == 1
        assert batch.points[0].site_id == expected
    
    def test_no_coordinate_columns(self):
        batch = parse_points([{"Site": "A", "x": 1, "y": 2}])
        
        assert batch.valid_count == 0
        assert batch.submitted_count == 1
    
    def test_empty_rows(self):
        batch = parse_points([])
        
        assert batch.submitted_count == 0
        assert batch.points == []
    
    def test_custom_markers(self):
        rows = [{"ID": "X1", "northing": 33.1, "easting": -7.2}]
        
        batch = parse_points(rows, {
            "latitude_markers": ["north"],
            "longitude_markers": ["east"],
            "identifier_markers": ["id"],
        })
        
        assert batch.points[0].site_id == "X1"
        assert batch.points[0].latitude == 33.1


class TestLoadPointBatch:
    """Test cases for reading site files."""
    
    def test_load_xlsx(self, tmp_path):
        path = tmp_path / "sites.xlsx"
        pd.DataFrame({
            "Site Name": ["CAS001", "XXX"],
            "Latitude": [33.5731, None],
            "Longitude": [-7.5898, -7.0],
        }).to_excel(path, index=False)
        
        batch = load_point_batch(path)
        
        assert batch.submitted_count == 2
        assert batch.valid_count == 1
        assert batch.points[0].longitude == pytest.approx(-7.5898)
    
    def test_empty_file(self, tmp_path):
        """Test that a file without rows is rejected as a whole."""
        path = tmp_path / "sites.csv"
        path.write_text("Site,Lat,Long\n", encoding="utf-8")
        
        with pytest.raises(GeoTagValidationError) as exc_info:
            load_point_batch(path)
        
        assert "Site file is empty" in str(exc_info.value)
    
    def test_unreadable_file(self, tmp_path):
        with pytest.raises(GeoTagValidationError) as exc_info:
            load_point_batch(tmp_path / "missing.xlsx")
        
        assert "Error reading site file" in str(exc_info.value)
