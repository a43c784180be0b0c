#!/usr/bin/env python
"""
Records-to-Excel – CLI entry point.

Usage:
    python -m records_to_excel.main <records.json> [--config export.yaml] [--output out.xlsx]
                                    [--mode tagged|all|headers] [--sub-field NAME]
                                    [--log-level INFO]

The JSON file holds an array of objects.  Column annotations for the
tagged mode come from the ``tags`` / ``sub_tags`` mappings in the config.
"""

import argparse
import json
import logging
import os
import sys

from records_to_excel.config import ExportMode, export_config_from_dict, load_config
from records_to_excel.errors import ExportExcelError
from records_to_excel.exporter import export_excel_from_slice
from records_to_excel.loader import load_records


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="Export a JSON array of records to an Excel sheet"
    )
    parser.add_argument("records_file", help="Path to a JSON file holding an array of objects")
    parser.add_argument("--config", "-c", default=None, help="Path to export config YAML")
    parser.add_argument(
        "--output", "-o", default=None,
        help="Output workbook path (overrides config; default: ./output/records.xlsx)",
    )
    parser.add_argument(
        "--mode", "-m", default=None, choices=["tagged", "all", "headers"],
        help="Export mode (overrides config; default: tagged)",
    )
    parser.add_argument("--sub-field", default=None,
                        help="Name of the nested list field to flatten into extra rows")
    parser.add_argument("--log-level", default=None,
                        help="Logging level: DEBUG, INFO, WARNING, ERROR")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    settings = load_config(args.config)
    setup_logging(args.log_level or settings.get("log_level", "INFO"))
    logger = logging.getLogger(__name__)

    if not os.path.exists(args.records_file):
        logger.error(f"Records file not found: {args.records_file}")
        return 1

    if args.output:
        settings["output_path"] = args.output
    if not settings.get("output_path"):
        settings["output_path"] = os.path.join("output", "records.xlsx")
    if args.mode:
        settings["mode"] = args.mode
    if args.sub_field:
        settings["sub_slice_field_name"] = args.sub_field

    try:
        export_config = export_config_from_dict(settings)
        records = load_records(
            args.records_file,
            tags=settings.get("tags"),
            sub_field_name=export_config.sub_slice_field_name,
            sub_tags=settings.get("sub_tags"),
        )
        logger.info(f"Mode: {ExportMode(export_config.mode).name}")
        export_excel_from_slice(records, export_config)
    except ExportExcelError as exc:
        logger.error(f"Export failed: {exc}")
        return 1
    except json.JSONDecodeError as exc:
        logger.error(f"Records file is not valid JSON: {args.records_file}: {exc}")
        return 1
    except OSError as exc:
        logger.error(f"Could not write workbook: {exc}")
        return 1

    logger.info(f"Generated workbook: {export_config.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
