"""
Taxonomy Sync - Declare every facet value the tool data uses.
Version: 1.0

Reports types, tiers, complexity levels and functions that appear in
data.json but are missing from taxonomy.json, and optionally writes an
updated taxonomy.

Usage:
    python -m scripts.sync_taxonomy config/taxonomy.json config/data.json
    python -m scripts.sync_taxonomy config/taxonomy.json config/data.json --write
    python -m scripts.sync_taxonomy config/taxonomy.json config/data.json --write --dry-run
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.knowledge_base import read_tool_records
from services.taxonomy import TaxonomyLoader, TaxonomySynchronizer
from services.tool_store import ToolStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

USAGE = "Usage: python -m scripts.sync_taxonomy <taxonomy.json> <data.json> [--write] [--dry-run]"


async def sync(taxonomy_path: Path, data_path: Path, write: bool, dry_run: bool) -> int:
    result = await TaxonomyLoader().load(taxonomy_path)
    if not result.ok:
        logger.error(f"Cannot sync: {result.error.message}")
        return 1

    store = ToolStore()
    store.load(read_tool_records(str(data_path)))

    synchronizer = TaxonomySynchronizer(result.config)
    report = synchronizer.find_inconsistencies(store.list_tools())

    logger.info("=" * 60)
    logger.info(f"TAXONOMY CONSISTENCY ({store.count()} tools)")
    logger.info("=" * 60)
    logger.info(f"Undeclared types:      {report.undeclared_types or '-'}")
    logger.info(f"Undeclared tiers:      {report.undeclared_tiers or '-'}")
    logger.info(f"Undeclared complexity: {report.undeclared_complexity or '-'}")
    logger.info(f"Ungrouped functions:   {report.ungrouped_functions or '-'}")

    if report.is_consistent:
        logger.info("Taxonomy is consistent with the data")
        return 0

    if not write:
        logger.info(f"{report.issue_count} issue(s) found. Re-run with --write to update {taxonomy_path}")
        return 0

    updated = synchronizer.synchronize(store.list_tools())
    document = json.dumps(updated.to_document(), indent=2, ensure_ascii=False)

    if dry_run:
        logger.info("Dry run - taxonomy not written")
        print(document)
        return 0

    with open(taxonomy_path, "w", encoding="utf-8") as f:
        f.write(document + "\n")

    logger.info(f"Wrote updated taxonomy to {taxonomy_path}")
    return 0


def main() -> int:
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 2:
        print(USAGE)
        return 2

    return asyncio.run(sync(
        Path(args[0]),
        Path(args[1]),
        write="--write" in sys.argv,
        dry_run="--dry-run" in sys.argv
    ))


if __name__ == "__main__":
    sys.exit(main())
