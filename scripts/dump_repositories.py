#!/usr/bin/env python3
"""Script to dump the organization's repositories to CSV and JSON."""

import logging
import sys
import os
import csv
import json
from datetime import datetime
from typing import Any, Dict, List

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from repo_lister.config import Settings
from repo_lister.application.query_pipeline import RepositoryQuery
from repo_lister.application.repository_service import build_service

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def dump_to_csv(rows: List[Dict[str, Any]], output_file: str):
    """Dump projected repositories to CSV."""
    if not rows:
        logger.warning("No data to dump")
        return

    with open(output_file, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=rows[0].keys())
        writer.writeheader()
        writer.writerows(rows)

    logger.info(f"Dumped {len(rows)} repositories to {output_file}")


def dump_to_json(rows: List[Dict[str, Any]], output_file: str):
    """Dump projected repositories to JSON."""
    if not rows:
        logger.warning("No data to dump")
        return

    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(rows, f, indent=2, ensure_ascii=False)

    logger.info(f"Dumped {len(rows)} repositories to {output_file}")


def main():
    """Fetch repositories once and dump the filtered view to CSV and JSON."""
    try:
        settings = Settings.from_env()
        os.makedirs(settings.output_dir, exist_ok=True)

        # Same knobs as the filter endpoint
        limit = os.getenv("LIMIT")
        query = RepositoryQuery(
            language=os.getenv("LANGUAGE"),
            name=os.getenv("NAME"),
            sort_order=os.getenv("SORT_ORDER", "asc"),
            limit=int(limit) if limit else None,
        )
        rows = build_service(settings).filter_repositories(query)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_file = os.path.join(settings.output_dir, f"repositories_{timestamp}.csv")
        json_file = os.path.join(settings.output_dir, f"repositories_{timestamp}.json")

        dump_to_csv(rows, csv_file)
        dump_to_json(rows, json_file)

        logger.info(f"Repository dump completed. Files: {csv_file}, {json_file}")
        return 0
    except Exception as e:
        logger.error(f"Repository dump failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
