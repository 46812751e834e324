"""Integration tests for reference loading and SiteClassificationProcessor."""

import json
import logging
import shutil
from pathlib import Path

import pandas as pd
import pytest

from src.config import ConfigLoader
from src.exceptions import GeoTagLoadError
from modules.site_classifier.main import main
from modules.site_classifier.processor import SiteClassificationProcessor
from modules.site_classifier.reference import ReferenceLoader

REPO_CONFIG = Path(__file__).resolve().parents[3] / "config"


def _write_layer(path, layer):
    path.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [feature.to_geojson() for feature in layer],
    }), encoding="utf-8")


@pytest.fixture
def workspace(tmp_path, regions, zones, provinces, communes):
    """A config directory and data directory with synthetic reference data."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()
    data_dir.mkdir()
    
    shutil.copy(REPO_CONFIG / "field_mapping.json", config_dir / "field_mapping.json")
    env_config = json.loads((REPO_CONFIG / "environment_config.json").read_text(encoding="utf-8"))
    env_config["environments"]["development"]["data_dir"] = str(data_dir)
    env_config["environments"]["development"]["processing"]["output_dir"] = str(tmp_path / "output")
    env_config["environments"]["development"]["processing"]["chunk_size"] = 2
    (config_dir / "environment_config.json").write_text(json.dumps(env_config), encoding="utf-8")
    
    _write_layer(data_dir / "regions.json", regions)
    _write_layer(data_dir / "zones.json", zones)
    _write_layer(data_dir / "provinces.json", provinces)
    _write_layer(data_dir / "communes.json", communes)
    pd.DataFrame([
        {"Commune SS": "Casablanca", "141": "0522000141", "5757": "", "15": "15",
         "19": "19", "112": "112", "177": "177"},
    ]).to_excel(data_dir / "emergency_numbers.xlsx", index=False)
    
    pd.DataFrame({
        "Site Code": ["CAS001", "SEA001", "BAD001", "AIN001"],
        "Latitude": ["33.5731", "0", "", "33.6"],
        "Longitude": ["-7.5898", "0", "-7.1", "-7.45"],
    }).to_csv(tmp_path / "sites.csv", index=False)
    
    return tmp_path


class TestReferenceLoader:
    """Test cases for loading the reference context."""
    
    def test_load_all_layers(self, workspace):
        loader = ReferenceLoader(ConfigLoader(str(workspace / "config")), "development")
        
        context = loader.load()
        
        assert context.describe() == {
            "regions": 1, "zones": 1, "provinces": 2, "communes": 3, "emergency_communes": 1,
        }
    
    def test_missing_layer_aborts(self, workspace):
        """Test that one missing dataset fails the whole load."""
        (workspace / "data" / "zones.json").unlink()
        loader = ReferenceLoader(ConfigLoader(str(workspace / "config")), "development")
        
        with pytest.raises(GeoTagLoadError) as exc_info:
            loader.load()
        
        assert "zones" in str(exc_info.value)
    
    def test_unreadable_emergency_table(self, workspace):
        (workspace / "data" / "emergency_numbers.xlsx").write_text("not a workbook", encoding="utf-8")
        loader = ReferenceLoader(ConfigLoader(str(workspace / "config")), "development")
        
        with pytest.raises(GeoTagLoadError) as exc_info:
            loader.load()
        
        assert "Cannot read emergency contact table" in str(exc_info.value)
    
    def test_invalid_contact_columns_abort(self, workspace):
        """Test that a contact column override of the wrong size fails the load."""
        mapping_path = workspace / "config" / "field_mapping.json"
        mapping = json.loads(mapping_path.read_text(encoding="utf-8"))
        mapping["tables"]["emergency_contacts"]["contact_columns"] = ["141", "15"]
        mapping_path.write_text(json.dumps(mapping), encoding="utf-8")
        loader = ReferenceLoader(ConfigLoader(str(workspace / "config")), "development")
        
        with pytest.raises(GeoTagLoadError) as exc_info:
            loader.load()
        
        assert "Invalid emergency contact table settings" in str(exc_info.value)


class TestSiteClassificationProcessor:
    """End-to-end test cases for the processor."""
    
    @pytest.fixture
    def processor(self, workspace):
        return SiteClassificationProcessor(
            ConfigLoader(str(workspace / "config")),
            input_path=workspace / "sites.csv",
            environment="development",
        )
    
    def test_process_exports_results(self, processor, workspace):
        result = processor.process()
        
        assert result.success, result.errors
        assert result.records_processed == 3
        
        output = workspace / "output" / "sites_geotagged.xlsx"
        assert result.outputs["spreadsheet"] == str(output)
        
        frame = pd.read_excel(output, sheet_name="Results", dtype=str, keep_default_na=False)
        assert list(frame["Site Code"]) == ["CAS001", "SEA001", "AIN001"]
        casablanca = frame.iloc[0]
        assert casablanca["Auto_Region"] == "Casablanca-Settat"
        assert casablanca["Auto_Province"] == "Casablanca"
        assert casablanca["Auto_Commune"] == "Casablanca"
        assert casablanca["Auto_Zone"] == "DRC"
        assert casablanca["Emergency_141"] == "0522000141"
        assert frame.iloc[1]["Auto_Commune"] == "N/A"
    
    def test_summary(self, processor):
        processor.process(dry_run=True)
        summary = processor.last_summary
        
        assert summary.submitted_count == 4
        assert summary.valid_count == 3
        assert summary.dropped_count == 1
        assert summary.matched_count == 2
        assert summary.missing_safety_count == 2
    
    def test_dry_run_writes_nothing(self, processor, workspace):
        result = processor.process(dry_run=True)
        
        assert result.success
        assert result.outputs == {}
        assert not (workspace / "output").exists()
    
    def test_geojson_output(self, workspace):
        processor = SiteClassificationProcessor(
            ConfigLoader(str(workspace / "config")),
            input_path=workspace / "sites.csv",
            output_path=workspace / "sites_out.csv",
            geojson_path=workspace / "sites.geojson",
        )
        
        result = processor.process()
        
        assert result.success
        document = json.loads((workspace / "sites.geojson").read_text(encoding="utf-8"))
        assert len(document["features"]) == 3
        assert (workspace / "sites_out.csv").exists()
    
    def test_reference_context_loaded_once(self, processor):
        processor.process(dry_run=True)
        context = processor.context
        
        processor.process(dry_run=True)
        
        assert processor.context is context
    
    def test_missing_input_fails_validation(self, workspace):
        processor = SiteClassificationProcessor(
            ConfigLoader(str(workspace / "config")),
            input_path=workspace / "missing.xlsx",
        )
        
        result = processor.process()
        
        assert not result.success
        assert result.errors == ["Configuration validation failed"]
    
    def test_empty_input_reported(self, workspace):
        (workspace / "empty.csv").write_text("Site,Lat,Long\n", encoding="utf-8")
        processor = SiteClassificationProcessor(
            ConfigLoader(str(workspace / "config")),
            input_path=workspace / "empty.csv",
        )
        
        result = processor.process()
        
        assert not result.success
        assert "Site file is empty" in result.errors[0]
    
    def test_get_status(self, processor):
        status = processor.get_status()
        
        assert status.module_name == "site_classifier"
        assert status.status == "ready"
        assert status.health_check is True
    
    def test_get_status_missing_data(self, processor, workspace):
        (workspace / "data" / "communes.json").unlink()
        
        status = processor.get_status()
        
        assert status.status == "error"
        assert status.health_check is False


class TestSiteClassifierCLI:
    """Test cases for the command-line entry point."""
    
    @pytest.fixture(autouse=True)
    def restore_logging(self):
        """Undo the root logger changes made by setup_logging."""
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)
    
    def test_main_dry_run(self, workspace, capsys):
        exit_code = main([
            str(workspace / "sites.csv"),
            "--config-dir", str(workspace / "config"),
            "--dry-run",
        ])
        
        assert exit_code == 0
        assert "Classified 3/4 rows (1 dropped)" in capsys.readouterr().out
    
    def test_main_failure_exit_code(self, workspace):
        exit_code = main([
            str(workspace / "missing.csv"),
            "--config-dir", str(workspace / "config"),
        ])
        
        assert exit_code == 1
    
    def test_main_bad_config_dir(self, tmp_path):
        assert main(["sites.csv", "--config-dir", str(tmp_path / "nowhere")]) == 2
