"""HTTP trigger for a crawl run.

A scheduler (e.g. Cloud Scheduler) POSTs to the service to start one
crawl; the request returns once the run has finished. Any path is
accepted, only the method matters.
"""

import logging
from fastapi import APIRouter, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from roomwatch.errors import CrawlError

logger = logging.getLogger(__name__)
router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{path:path}", methods=ALL_METHODS)
async def trigger_crawl(request: Request, path: str = ""):
    """Run one crawl. 200 "ok" on success, 500 with the error text on failure."""
    if request.method != "POST":
        return Response(status_code=405)

    pipeline = request.app.state.pipeline
    try:
        await pipeline.run()
    except CrawlError as e:
        logger.error("Crawl failed: %s", e)
        unreported = await pipeline.report_failure(e)
        return PlainTextResponse(unreported or str(e), status_code=500)

    return PlainTextResponse("ok")


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """405 with an empty body for methods the router itself rejects (TRACE etc.)."""
    if exc.status_code == 405:
        return Response(status_code=405)
    return await http_exception_handler(request, exc)
