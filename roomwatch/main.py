"""roomwatch: rental listing change notifier.

FastAPI application entry point. Each POST runs one crawl.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from roomwatch.api.routes import method_not_allowed_handler, router
from roomwatch.config import Settings
from roomwatch.pipeline.runner import CrawlPipeline, build_pipeline

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def create_app(settings: Settings, pipeline: Optional[CrawlPipeline] = None) -> FastAPI:
    app = FastAPI(
        title="roomwatch",
        description="Scrapes rental listings and posts changes to Slack",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    if pipeline is None:
        pipeline = build_pipeline(settings)
    app.state.pipeline = pipeline
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)
    app.include_router(router)
    return app


def serve():
    settings = Settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger(__name__).info("Listening on port %d", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    serve()
