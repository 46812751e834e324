"""Zone Aggregator Module Entry Point

This module serves as the command-line interface for the offline DR zone
build.
"""

import argparse
import sys
from typing import Optional

from src.config.config_loader import ConfigLoader
from src.exceptions import GeoTagLoadError
from src.geodata import SOURCE_FILES, convert_boundary_sources
from src.utils import configure_logging
from .processor import ZoneAggregationProcessor


def main(args: Optional[list] = None) -> int:
    """Main entry point for the zone aggregator module.
    
    Args:
        args: Command line arguments (defaults to sys.argv)
        
    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="Cell-site geotagger - build DR zone polygons from provinces and communes"
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
        "--module-config",
        help="Path to zone_aggregator_config.json (defaults to the module's config/)"
    )
    parser.add_argument(
        "--output",
        help="Output GeoJSON path (defaults to the environment's zones layer)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the zones without writing the GeoJSON"
    )
    parser.add_argument(
        "--convert-sources",
        metavar="DIR",
        help="First convert the MapInfo region, province and commune tables in DIR to the configured GeoJSON layers"
    )
    parser.add_argument(
        "--source-crs",
        help="Coordinate system to assume for source tables that declare none (e.g. EPSG:26191)"
    )
    
    parsed_args = parser.parse_args(args)
    
    config_loader = ConfigLoader(parsed_args.config_dir)
    try:
        logging_config = config_loader.load_environment_config(parsed_args.environment)["logging"]
        configure_logging(logging_config, parsed_args.environment)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    
    if parsed_args.convert_sources:
        targets = {
            layer: config_loader.resolve_data_path(parsed_args.environment, "layers", layer)
            for layer in SOURCE_FILES
        }
        try:
            convert_boundary_sources(parsed_args.convert_sources, targets, parsed_args.source_crs)
        except GeoTagLoadError as e:
            print(f"Boundary conversion failed: {e}", file=sys.stderr)
            return 1
    
    processor = ZoneAggregationProcessor(
        config_loader,
        environment=parsed_args.environment,
        module_config_path=parsed_args.module_config,
        output_path=parsed_args.output,
    )
    result = processor.process(dry_run=parsed_args.dry_run)
    
    if not result.success:
        print(f"Zone aggregation failed: {'; '.join(result.errors)}", file=sys.stderr)
        return 1
    
    summary = result.metadata["aggregation"]
    print(f"Built {summary['zones_built']} zones -> {result.metadata['output_path']}")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
