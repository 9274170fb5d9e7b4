"""Standalone crawl script for cron / GitHub Actions.

Runs one crawl (fetch → load snapshot → diff → notify → save), then exits
with 0 on success or 1 on failure.
"""

import asyncio
import logging
import sys

from roomwatch.config import Settings
from roomwatch.errors import CrawlError
from roomwatch.pipeline.runner import CrawlPipeline, build_pipeline

EXIT_OK = 0
EXIT_ERROR = 1

logger = logging.getLogger("crawl")


async def run(pipeline: CrawlPipeline) -> int:
    try:
        await pipeline.run()
    except CrawlError as e:
        logger.error("Crawl failed: %s", e)
        unreported = await pipeline.report_failure(e)
        if unreported:
            print(unreported)
        return EXIT_ERROR
    return EXIT_OK


def main():
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(build_pipeline(settings))))


if __name__ == "__main__":
    main()
