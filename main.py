#!/usr/bin/env python

"""
Visit Atlas - Location History Visit Summaries

Normalizes Google location-history exports (on-device Timeline exports, Takeout semantic
location history and Takeout Records.json) into visits and ranks the places, cities and
countries where the most time was spent.

Usage:
    main.py [command] [options]

    Default command is 'load' if none specified.

Commands:
    load: Extract visits from the input files (or URL) and write ranked summaries (default)
    detect: Print the detected export format of each input file

Options:
    --input: One or more JSON export files
    --url: Fetch a single JSON export instead of reading files
    --geo-cache: JSON file mapping "lat,lng" keys to {"city", "country"}
    --preview-limit: Number of visits kept in the preview (default: 500)
    --include-visits: Return every visit instead of the preview and summaries
    --csv: Also write places/cities/countries summaries as CSV
    --output-dir: Path to output directory (default: results)
    --verbose: Enable verbose logging output
"""

import argparse
import json
import logging
import sys
from config import DEFAULT_PREVIEW_LIMIT, LOAD_REQUEST_TYPE, OUTPUT_DIR
from core.detector import detect_data_type
from core.orchestrator import run_request
from pathlib import Path
from utils.export import write_results, write_summary_csvs

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Visit Atlas - Location History Visit Summaries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument('command', nargs='?', default='load', help='Command to execute (default: load)')
    parser.add_argument('--input', type=Path, nargs='+', default=[], help='JSON export file(s)')
    parser.add_argument('--url', type=str, help='URL of a JSON export to fetch')
    parser.add_argument('--geo-cache', type=Path, help='JSON file mapping "lat,lng" keys to city/country')
    parser.add_argument('--preview-limit', type=int, default=DEFAULT_PREVIEW_LIMIT, help='Number of visits in the preview')
    parser.add_argument('--include-visits', action='store_true', help='Return all visits instead of summaries')
    parser.add_argument('--csv', action='store_true', help='Also write summaries as CSV files')
    parser.add_argument('--output-dir', type=Path, default=OUTPUT_DIR, help='Path to output directory')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging output')

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity level"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s', force=True)


def load_geo_cache(path: Path | None) -> dict:
    """Load a locality cache file, empty when none is given"""
    if path is None:
        return {}
    with open(path) as f:
        geo_cache = json.load(f)
    logger.info(f"Loaded {len(geo_cache)} locality entries from {path}")
    return geo_cache


def build_request(args: argparse.Namespace) -> dict:
    """Translate CLI arguments into a load request"""
    source = {'url': args.url} if args.url else {'files': list(args.input)}
    return {
        'type': LOAD_REQUEST_TYPE,
        'source': source,
        'options': {
            'previewLimit': args.preview_limit,
            'includeVisits': args.include_visits,
            'geoCache': load_geo_cache(args.geo_cache),
        },
    }


def run_load(args: argparse.Namespace) -> bool:
    """Run a load request and write its results"""
    try:
        request = build_request(args)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not load geo cache {args.geo_cache}: {e}")
        return False

    messages = run_request(request)
    for message in messages:
        if message['type'] == 'progress':
            logger.info(message['message'])

    terminal = messages[-1]
    if terminal['type'] == 'error':
        logger.error(terminal['error'])
        return False

    data = terminal['data']
    write_results(data, args.output_dir)
    if args.csv and 'agg' in data:
        write_summary_csvs(data['agg'], args.output_dir)

    logger.info(f"Extracted {data['visitsCount']} visits ({data['dataType']})")
    if 'agg' in data and data['agg']['places']:
        top = data['agg']['places'][0]
        logger.info(f"Top place: {top['name']} ({top['visits']} visits, {top['seconds']:.0f} seconds)")
    return True


def run_detect(args: argparse.Namespace) -> bool:
    """Print the detected export format of each input file"""
    ok = True
    for path in args.input:
        try:
            with open(path) as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read {path}: {e}")
            ok = False
            continue
        print(f"{path}: {detect_data_type(document).value}")
    return ok


def main(argv=None):
    args = parse_arguments(argv)

    # Setup logging
    setup_logging(args.verbose)

    command = args.command

    if command == "load":
        success = run_load(args)
        sys.exit(0 if success else 1)

    elif command == "detect":
        success = run_detect(args)
        sys.exit(0 if success else 1)

    else:
        print(__doc__.strip())


if __name__ == "__main__":
    main()
