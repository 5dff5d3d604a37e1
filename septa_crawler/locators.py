import logging
from typing import Optional, Sequence, Tuple

from playwright.sync_api import Error as PlaywrightError, Locator

logger = logging.getLogger(__name__)


def first_visible(scope, selectors: Sequence[str]) -> Tuple[Optional[str], Optional[Locator]]:
    """
    Walk a selector fallback chain on a page (or frame) and return the first
    selector whose first match is visible, together with its locator.

    Selectors that error out (bad syntax for this engine, detached frame)
    are skipped like misses.
    """
    for selector in selectors:
        try:
            candidate = scope.locator(selector).first
            if candidate.count() > 0 and candidate.is_visible():
                return selector, candidate
        except PlaywrightError as e:
            logger.debug(f"Selector '{selector}' failed: {e}")
    return None, None


def first_present(scope, selectors: Sequence[str]) -> Tuple[Optional[str], Optional[Locator]]:
    """Like first_visible, but any attached match counts."""
    for selector in selectors:
        try:
            candidate = scope.locator(selector).first
            if candidate.count() > 0:
                return selector, candidate
        except PlaywrightError as e:
            logger.debug(f"Selector '{selector}' failed: {e}")
    return None, None
