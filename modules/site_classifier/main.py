"""Site Classifier Module Entry Point

This module serves as the command-line interface for classifying a site
spreadsheet and exporting the geotagged result.
"""

import argparse
import json
import sys
from typing import Optional

from src.config.config_loader import ConfigLoader
from src.utils import configure_logging
from .processor import SiteClassificationProcessor


def main(args: Optional[list] = None) -> int:
    """Main entry point for the site classifier module.
    
    Args:
        args: Command line arguments (defaults to sys.argv)
        
    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="Cell-site geotagger - attach region, zone, province, commune and emergency contacts"
    )
    parser.add_argument(
        "input",
        help="Site spreadsheet (.xlsx/.xls/.csv) with latitude and longitude columns"
    )
    parser.add_argument(
        "--output",
        help="Output file (.xlsx or .csv); defaults to <output_dir>/<input>_geotagged.xlsx"
    )
    parser.add_argument(
        "--geojson",
        help="Also write the classified sites as a GeoJSON point layer"
    )
    parser.add_argument(
        "--environment",
        choices=["development", "production"],
        default="development",
        help="Environment to run against (default: development)"
    )
    parser.add_argument(
        "--config-dir",
        default="config",
        help="Directory holding environment_config.json and field_mapping.json"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Classify the sites without writing output files"
    )
    
    parsed_args = parser.parse_args(args)
    
    config_loader = ConfigLoader(parsed_args.config_dir)
    try:
        logging_config = config_loader.load_environment_config(parsed_args.environment)["logging"]
        configure_logging(logging_config, parsed_args.environment)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    
    processor = SiteClassificationProcessor(
        config_loader,
        input_path=parsed_args.input,
        output_path=parsed_args.output,
        environment=parsed_args.environment,
        geojson_path=parsed_args.geojson,
    )
    result = processor.process(dry_run=parsed_args.dry_run)
    
    if not result.success:
        print(f"Site classification failed: {'; '.join(result.errors)}", file=sys.stderr)
        return 1
    
    print(processor.last_summary.get_summary_text())
    print(json.dumps(result.outputs, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
