"""
Run web intelligence collection from the CLI.
"""

from __future__ import annotations

import argparse
import json
import os

from app.scraping.collector import WebIntelligenceCollector
from app.scraping.config import get_collector_settings
from app.scraping.logging_utils import configure_logging
from app.scraping.types import JOB_KINDS, to_plain


def main() -> int:
    parser = argparse.ArgumentParser(description="Collect competitor web intelligence.")
    parser.add_argument(
        "urls",
        nargs="+",
        help="Fully-qualified URLs to collect.",
    )
    parser.add_argument(
        "--job-type",
        dest="job_type",
        choices=JOB_KINDS,
        default="website",
        help="Which extraction to run for every URL.",
    )
    parser.add_argument(
        "--include-content",
        action="store_true",
        help="Keep raw page content in website results.",
    )
    args = parser.parse_args()

    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    with WebIntelligenceCollector(settings=get_collector_settings()) as collector:
        results = collector.run_batch([(args.job_type, url) for url in args.urls])

    payload = []
    for url, result in zip(args.urls, results):
        data = to_plain(result.data)
        if isinstance(data, dict) and not args.include_content:
            data.pop("content", None)
        payload.append(
            {
                "url": url,
                "success": result.success,
                "error": result.error,
                "retry_count": result.retry_count,
                "response_time": round(result.response_time, 3),
                "cached": result.cached,
                "data": data,
            }
        )
    print(json.dumps(payload, indent=2, default=str))
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
