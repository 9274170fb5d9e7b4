"""Error taxonomy for a crawl run.

Collaborators wrap their library exceptions into one of these at the
boundary, so entry points only ever need to handle CrawlError.
"""


class CrawlError(Exception):
    """Base class for every failure surfaced by a crawl run."""


class FetchError(CrawlError):
    """The listings page could not be fetched."""


class StoreError(CrawlError):
    """The snapshot could not be read or written."""


class NotifyError(CrawlError):
    """The webhook rejected or never received a message."""


class PipelineError(CrawlError):
    """Notification and/or snapshot save failed after a diff was found."""

    def __init__(self, messages):
        self.messages = list(messages)
        super().__init__("\n".join(self.messages))
