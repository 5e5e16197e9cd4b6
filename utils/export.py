import json
import logging
import pandas as pd
from config import CITIES_CSV_FILE, COUNTRIES_CSV_FILE, PLACES_CSV_FILE, RESULTS_FILE
from pathlib import Path

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = {
    PLACES_CSV_FILE: ('places', ['key', 'name', 'lat', 'lng', 'city', 'country', 'visits', 'seconds']),
    CITIES_CSV_FILE: ('cities', ['name', 'visits', 'seconds']),
    COUNTRIES_CSV_FILE: ('countries', ['name', 'visits', 'seconds']),
}


def write_results(data: dict, output_dir: Path) -> Path:
    """Write a 'done' payload as JSON"""
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / RESULTS_FILE
    with open(results_file, 'w') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info(f"Output written to {results_file}")
    return results_file


def write_summary_csvs(agg: dict, output_dir: Path) -> list[Path]:
    """Write the ranked place/city/country summaries as CSV files"""
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []

    for filename, (section, columns) in SUMMARY_COLUMNS.items():
        df = pd.DataFrame(agg.get(section, []), columns=columns)
        csv_path = output_dir / filename
        df.to_csv(csv_path, index=False)
        logger.info(f"Wrote {len(df)} {section} rows to {csv_path}")
        written.append(csv_path)

    return written
