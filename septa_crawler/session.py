import logging

from playwright.sync_api import Error as PlaywrightError, sync_playwright

from .config import (
    FALLBACK_EXECUTABLE_PATH,
    HEADLESS,
    LAUNCH_ARGS,
    USER_AGENT,
    VIEWPORT,
)
from .errors import BrowserLaunchError

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    One browser, one context, one page, owned by a single crawl.

    Use as a context manager so stop() runs on every exit path:

        with BrowserSession() as session:
            session.page.goto(...)
    """

    def __init__(self, headless: bool = HEADLESS, debug: bool = False):
        self.headless = headless
        self.debug = debug
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    def _launch(self):
        launch_options = {'headless': self.headless, 'args': LAUNCH_ARGS}
        try:
            browser = self.playwright.chromium.launch(**launch_options)
            logger.info("Playwright Chromium launched successfully")
            return browser
        except PlaywrightError as e:
            logger.warning(f"Playwright Chromium failed, trying system Chrome: {e}")

        try:
            browser = self.playwright.chromium.launch(
                executable_path=FALLBACK_EXECUTABLE_PATH, **launch_options
            )
            logger.info("System Chrome launched successfully")
            return browser
        except PlaywrightError as e:
            raise BrowserLaunchError(f"Scraper initialization failed: {e}") from e

    def _new_context(self):
        try:
            return self.browser.new_context(user_agent=USER_AGENT)
        except PlaywrightError as e:
            logger.warning(f"Custom user agent context failed, using default context: {e}")
        context = self.browser.new_context()
        try:
            context.set_extra_http_headers({'User-Agent': USER_AGENT})
        except PlaywrightError as e:
            logger.warning(f"set_extra_http_headers also failed: {e}")
        return context

    def start(self) -> bool:
        logger.info("Initializing browser session...")
        try:
            self.playwright = sync_playwright().start()
            self.browser = self._launch()
            self.context = self._new_context()
            self.page = self.context.new_page()
        except BrowserLaunchError:
            self.stop()
            raise
        except PlaywrightError as e:
            self.stop()
            raise BrowserLaunchError(f"Scraper initialization failed: {e}") from e

        try:
            self.page.set_viewport_size(VIEWPORT)
        except PlaywrightError as e:
            logger.warning(f"set_viewport_size failed: {e}")

        if self.debug:
            try:
                self.page.on("request", lambda request: logger.debug(f"Request: {request.method} {request.url}"))
            except PlaywrightError as e:
                logger.warning(f"Failed to enable request logging: {e}")

        logger.info("✓ Browser session ready")
        return True

    def stop(self):
        """Release page, context, browser, then Playwright. Safe to call twice."""
        for name in ('page', 'context', 'browser'):
            resource = getattr(self, name)
            if resource is None:
                continue
            setattr(self, name, None)
            try:
                resource.close()
            except Exception as e:
                logger.error(f"Error closing {name}: {e}")

        if self.playwright is not None:
            playwright, self.playwright = self.playwright, None
            try:
                playwright.stop()
            except Exception as e:
                logger.error(f"Error stopping Playwright: {e}")
            logger.info("Browser session cleaned up")
