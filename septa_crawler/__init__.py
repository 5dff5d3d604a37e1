from .crawler import SeptaCrawler, scrape_bids
from .errors import (
    AuthenticationError,
    BrowserLaunchError,
    CrawlerError,
    MissingCredentialsError,
    PreconditionError,
)
from .model import Credential, Document, ExtractedBid
