class CrawlerError(Exception):
    """Base class for failures surfaced to the caller of a crawl."""


class PreconditionError(CrawlerError):
    """The run cannot start at all. No partial results exist."""


class MissingCredentialsError(PreconditionError):
    pass


class BrowserLaunchError(PreconditionError):
    pass


class AuthenticationError(CrawlerError):
    """Login could not be completed; nothing is scraped without a session."""

    def __init__(self, message: str, state: str = "rejected"):
        super().__init__(message)
        self.state = state
