import logging
from enum import Enum
from typing import Callable, List, Optional

from playwright.sync_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from .config import (
    AUTHENTICATED_URL_PATTERN,
    ELEMENT_TIMEOUT,
    LOGIN_SETTLE_TIMEOUT,
    LOGIN_URL,
    LOGIN_URL_PATTERN,
    NAVIGATION_TIMEOUT,
    SELECTORS,
)
from .debug import DebugRecorder
from .errors import AuthenticationError, MissingCredentialsError
from .locators import first_present, first_visible
from .model import Credential

logger = logging.getLogger(__name__)

LOGIN = SELECTORS['login']
MARKERS = LOGIN['success_markers']


class AuthState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORM_LOCATED = "form_located"
    CREDENTIALS_FILLED = "credentials_filled"
    SUBMITTED = "submitted"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


# --- Login success signals ---
# Independent checks; any single one means we are past the login wall.

def _has(page: Page, selector: str) -> bool:
    try:
        return page.locator(selector).count() > 0
    except PlaywrightError:
        return False


def url_in_vendor_area(page: Page) -> bool:
    url = page.url
    return AUTHENTICATED_URL_PATTERN in url and LOGIN_URL_PATTERN not in url


def has_dashboard_text(page: Page) -> bool:
    return _has(page, MARKERS['dashboard_text'])


def has_vendor_portal_text(page: Page) -> bool:
    return _has(page, MARKERS['vendor_portal_text'])


def has_requisitions_link(page: Page) -> bool:
    return _has(page, MARKERS['requisitions_link'])


def has_quotes_text(page: Page) -> bool:
    return _has(page, MARKERS['quotes_text'])


SUCCESS_CHECKS: List[Callable[[Page], bool]] = [
    url_in_vendor_area,
    has_dashboard_text,
    has_vendor_portal_text,
    has_requisitions_link,
    has_quotes_text,
]


def is_authenticated(page: Page) -> bool:
    for check in SUCCESS_CHECKS:
        if check(page):
            logger.info(f"Login success signal: {check.__name__}")
            return True
    return False


def find_error_message(page: Page) -> str:
    selector, element = first_present(page, LOGIN['error'])
    if element is not None:
        try:
            message = (element.text_content() or "").strip()
            if message:
                return message
        except PlaywrightError as e:
            logger.debug(f"Could not read error element '{selector}': {e}")
    return "Unknown login error"


class Authenticator:
    """Drives the vendor portal login form and verifies the outcome."""

    def __init__(self, page: Page, recorder: DebugRecorder = None):
        self.page = page
        self.recorder = recorder or DebugRecorder()
        self.state = AuthState.UNAUTHENTICATED

    def _transition(self, state: AuthState):
        logger.debug(f"Auth state: {self.state.value} -> {state.value}")
        self.state = state

    def _reject(self, message: str, checkpoint: str) -> AuthenticationError:
        self._transition(AuthState.REJECTED)
        logger.error(message)
        self.recorder.capture(checkpoint)
        return AuthenticationError(message, state=self.state.value)

    def login(self, credential: Optional[Credential]) -> bool:
        if not credential:
            logger.error("No credentials provided for SEPTA vendor portal access")
            raise MissingCredentialsError("SEPTA credentials are required")

        logger.info("Starting SEPTA vendor portal login process")
        self.state = AuthState.UNAUTHENTICATED
        try:
            return self._login(credential)
        except AuthenticationError:
            raise
        except PlaywrightError as e:
            self._transition(AuthState.REJECTED)
            logger.error(f"SEPTA login process failed: {e}")
            self.recorder.capture('error-login-exception')
            raise AuthenticationError(f"Login failed: {e}", state=self.state.value) from e

    def _login(self, credential: Credential) -> bool:
        page = self.page

        logger.info(f"Navigating to login page: {LOGIN_URL}")
        page.goto(LOGIN_URL, wait_until='networkidle', timeout=NAVIGATION_TIMEOUT)
        self.recorder.capture('01-login-page')

        try:
            page.wait_for_selector(LOGIN['form'], timeout=ELEMENT_TIMEOUT)
        except PlaywrightTimeoutError:
            raise self._reject("Login form not found on SEPTA portal", 'error-no-login-form')

        username_selector, username_field = first_visible(page, LOGIN['username'])
        password_selector, password_field = first_visible(page, LOGIN['password'])
        if username_field is None or password_field is None:
            raise self._reject("Username or password field not found on login form", 'error-missing-fields')
        logger.info(f"Found username field with selector: {username_selector}")
        logger.info(f"Found password field with selector: {password_selector}")
        self._transition(AuthState.FORM_LOCATED)

        username_field.fill(credential.username)
        password_field.fill(credential.password)
        self._transition(AuthState.CREDENTIALS_FILLED)
        self.recorder.capture('02-credentials-filled', mask=[username_field, password_field])

        submit_selector, submit_button = first_visible(page, LOGIN['submit'])
        if submit_button is None:
            raise self._reject("Submit button not found on login form", 'error-no-submit-button')
        logger.info(f"Found submit button with selector: {submit_selector}")

        logger.info("Submitting login form")
        submit_button.click()
        self._transition(AuthState.SUBMITTED)
        try:
            page.wait_for_load_state('networkidle', timeout=LOGIN_SETTLE_TIMEOUT)
        except PlaywrightTimeoutError:
            logger.warning("Navigation timeout after login, checking current state")
        self.recorder.capture('03-after-login')

        logger.info(f"Current URL after login: {page.url}")
        if is_authenticated(page):
            self._transition(AuthState.AUTHENTICATED)
            logger.info("✓ SEPTA login successful")
            self.recorder.capture('04-login-success')
            return True

        message = find_error_message(page)
        raise self._reject(f"Login failed: {message}", 'error-login-failed')
