"""Export crypto-related CFPB consumer complaints to a static JSON file.

Usage:
    PYTHONPATH=src python scripts/fetch_cfpb_complaints.py [output.json]

Pages through the complaint search API with the search_after cursor and
writes an Elasticsearch-shaped {"hits": {...}} document. When run in
GitHub Actions, complaint_count and file_size_mb are appended to
$GITHUB_OUTPUT.
"""

import asyncio
import json
import logging
import os
import sys
import time
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("fetch_cfpb_complaints")

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

DEFAULT_OUTPUT = Path(__file__).resolve().parent.parent / "data" / "complaints.json"


async def main(output: Path) -> int:
    from cryptodash.infra.cfpb.complaints_client import CRYPTO_COMPANIES, CFPBComplaintsClient, format_output
    from cryptodash.infra.http.rate_limited_client import RateLimitedClient

    start = time.monotonic()
    logger.info("Target companies: %d", len(CRYPTO_COMPANIES))

    try:
        async with RateLimitedClient(rate_per_second=2.0, timeout=60.0) as http_client:
            client = CFPBComplaintsClient(http_client)
            hits = await client.fetch_all()
    except Exception:
        logger.exception("Fatal error while fetching complaints")
        return 1

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(format_output(hits)), encoding="utf-8")

    size_mb = output.stat().st_size / (1024 * 1024)
    logger.info("Wrote %d complaints to %s (%.2f MB) in %.1fs", len(hits), output, size_mb, time.monotonic() - start)

    github_output = os.environ.get("GITHUB_OUTPUT")
    if github_output:
        with open(github_output, "a", encoding="utf-8") as fh:
            fh.write(f"complaint_count={len(hits)}\n")
            fh.write(f"file_size_mb={size_mb:.2f}\n")
    return 0


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUTPUT
    sys.exit(asyncio.run(main(target)))
