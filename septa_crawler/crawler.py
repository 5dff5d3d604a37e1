import logging
import time
from typing import List, Optional

from playwright.sync_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from .auth import Authenticator
from .config import (
    DEBUG,
    LISTING_LIST_URL,
    LISTING_SEARCH_URL,
    MAX_PAGES,
    MAX_RETRIES,
    NAVIGATION_TIMEOUT,
    PAGE_SETTLE_DELAY,
    REQUIRE_LOGIN,
    RETRY_DELAY,
    SELECTORS,
    SETTLE_TIMEOUT,
    VENDOR_HOME_URL,
)
from .debug import DebugRecorder
from .errors import AuthenticationError, MissingCredentialsError, PreconditionError
from .locators import first_visible
from .model import Credential, ExtractedBid
from .parser import ListingParser
from .session import BrowserSession

logger = logging.getLogger(__name__)


def is_real_pagination_href(href: Optional[str]) -> bool:
    """True for an href that actually leaves the current page."""
    if not href:
        return False
    href = href.strip()
    return bool(href) and not href.startswith('#')


class SeptaCrawler:
    def __init__(self, credentials: Optional[Credential] = None, debug: bool = DEBUG,
                 session: BrowserSession = None, parser: ListingParser = None,
                 require_login: bool = REQUIRE_LOGIN, settle_delay: float = PAGE_SETTLE_DELAY):
        self.credentials = credentials
        self.debug = debug
        self.session = session or BrowserSession(debug=debug)
        self.parser = parser or ListingParser()
        self.require_login = require_login
        self.settle_delay = settle_delay
        self.recorder = DebugRecorder(enabled=debug)
        self.results: List[ExtractedBid] = []
        self.pages_visited = 0

    def _retry(self, func, description, *args, **kwargs):
        """Retry a function with exponential backoff"""
        last_exception = None
        for attempt in range(MAX_RETRIES):
            try:
                return func(*args, **kwargs)
            except PlaywrightError as e:
                last_exception = e
                wait_time = RETRY_DELAY * (2 ** attempt)
                logger.warning(f"{description} failed (Attempt {attempt+1}/{MAX_RETRIES}): {e}. Retrying in {wait_time}s...")
                time.sleep(wait_time)

        logger.error(f"{description} failed after {MAX_RETRIES} attempts.")
        raise last_exception

    def _settle(self, page: Page, description: str):
        """Wait for network idle; a timeout here only means we go on with what loaded."""
        try:
            page.wait_for_load_state('networkidle', timeout=SETTLE_TIMEOUT)
        except PlaywrightTimeoutError:
            logger.warning(f"Timeout waiting for network idle after {description}, continuing")

    def run(self) -> List[ExtractedBid]:
        """
        Log in, walk every listing page and return the bids found.

        Raises:
            MissingCredentialsError: login required but no credentials given
            BrowserLaunchError: no browser could be started
            AuthenticationError: the portal did not accept the login
        """
        if self.require_login and not self.credentials:
            logger.error("No credentials provided for SEPTA vendor portal access")
            raise MissingCredentialsError("SEPTA credentials are required")

        self.results = []
        self.pages_visited = 0
        credentials, self.credentials = self.credentials, None
        with self.session as session:
            page = session.page
            self.recorder.page = page

            if credentials:
                Authenticator(page, self.recorder).login(credentials)
            del credentials

            try:
                if not self.open_listings(page):
                    logger.error("Could not reach the requisitions listing. Returning no bids.")
                    return self.results
                self.paginate(page)
            except PlaywrightError as e:
                logger.error(f"Error scraping SEPTA bids, keeping {len(self.results)} collected: {e}")
                self.recorder.capture('error-scraping-failed')
                return self.results

            self.recorder.capture('11-scraping-complete')

        logger.info(f"Scraped {len(self.results)} total bids from SEPTA requisitions across {self.pages_visited} pages")
        return self.results

    def open_listings(self, page: Page) -> bool:
        """Get from the vendor home page to a populated requisitions list."""
        logger.info("Navigating to SEPTA vendor dashboard")
        try:
            self._retry(lambda: page.goto(VENDOR_HOME_URL, wait_until='networkidle', timeout=NAVIGATION_TIMEOUT),
                        "Navigate to vendor dashboard")
            self.recorder.capture('05-vendor-dashboard')
        except PlaywrightError as e:
            logger.warning(f"Vendor dashboard unavailable: {e}")

        selector, listings_link = first_visible(page, SELECTORS['list']['entry_links'])
        opened = False
        if listings_link is not None:
            logger.info(f"Found quotes link with selector: {selector}")
            try:
                listings_link.click()
                self._settle(page, "quotes link click")
                self.recorder.capture('06-after-quotes-click')
                opened = True
            except PlaywrightError as e:
                logger.warning(f"Quotes link click failed: {e}")

        # Strategy 2/3: Direct navigation to known endpoints
        if not opened:
            for checkpoint, url in (('07-requisitions-search-direct', LISTING_SEARCH_URL),
                                    ('08-requisitions-list-direct', LISTING_LIST_URL)):
                logger.info(f"Direct navigation to {url}")
                try:
                    page.goto(url, wait_until='networkidle', timeout=NAVIGATION_TIMEOUT)
                    self.recorder.capture(checkpoint)
                    opened = True
                    break
                except PlaywrightError as e:
                    logger.warning(f"Direct navigation to {url} failed: {e}")

        if not opened:
            self.recorder.capture('error-no-listing')
            return False

        selector, search_button = first_visible(page, SELECTORS['list']['search_btn'])
        if search_button is not None:
            logger.info(f"Found search button with selector: {selector}")
            try:
                search_button.click()
                self._settle(page, "search")
                self.recorder.capture('09-search-results')
            except PlaywrightError as e:
                logger.warning(f"Search submit failed, using current page: {e}")

        logger.info("✓ Listing page reached")
        return True

    def find_next_page(self, page: Page):
        """First visible next-page control whose href is real navigation."""
        for selector in SELECTORS['list']['pagination']['next_btn']:
            try:
                candidate = page.locator(selector).first
                if candidate.count() == 0 or not candidate.is_visible():
                    continue
                if is_real_pagination_href(candidate.get_attribute('href')):
                    logger.info(f"Found next button with selector: {selector}")
                    return candidate
            except PlaywrightError as e:
                logger.debug(f"Next selector '{selector}' failed: {e}")
        return None

    def paginate(self, page: Page) -> List[ExtractedBid]:
        logger.info("Starting bid extraction with pagination")

        for page_num in range(1, MAX_PAGES + 1):
            logger.info(f"Processing page {page_num} of requisitions")
            self.pages_visited = page_num
            try:
                html = page.content()
                page_bids = self.parser.parse_page(html, page.url)
            except Exception as e:
                logger.error(f"Error extracting bids from page {page_num}: {e}", exc_info=True)
                break

            self.results.extend(page_bids)
            logger.info(f"Found {len(page_bids)} bids on page {page_num} (total: {len(self.results)})")
            if page_num == 1:
                self.recorder.capture(f'10-page-{page_num}-results')
                if not page_bids:
                    self.recorder.dump_html('debug-empty-listing', html)

            if page_num == MAX_PAGES:
                logger.warning(f"Reached maximum page limit ({MAX_PAGES}), stopping pagination")
                break

            next_button = self.find_next_page(page)
            if next_button is None:
                logger.info("No more pages found")
                break

            try:
                logger.info(f"Navigating to page {page_num + 1}")
                next_button.click()
                self._settle(page, f"page {page_num + 1}")
            except PlaywrightError as e:
                logger.warning(f"Error navigating to next page: {e}")
                self.recorder.capture('error-scraping-failed')
                break
            time.sleep(self.settle_delay)

        return self.results

    def test_connection(self) -> bool:
        """Log in once and report whether it worked. Never raises."""
        logger.info("Starting SEPTA connection test")
        credentials, self.credentials = self.credentials, None
        try:
            with self.session as session:
                self.recorder.page = session.page
                result = Authenticator(session.page, self.recorder).login(credentials)
        except (PreconditionError, AuthenticationError) as e:
            logger.error(f"SEPTA connection test failed: {e}")
            return False
        logger.info(f"SEPTA connection test completed: {'SUCCESS' if result else 'FAILED'}")
        return result


def scrape_bids(credentials: Optional[Credential] = None, debug: bool = DEBUG) -> List[ExtractedBid]:
    return SeptaCrawler(credentials=credentials, debug=debug).run()
