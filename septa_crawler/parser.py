import logging
import re
from datetime import datetime, time
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from .classifier import is_bid_related
from .config import (
    MIN_TITLE_LENGTH,
    PORTAL,
    SELECTORS,
    TITLE_FALLBACK_MIN_WORDS,
    TITLE_FALLBACK_WORDS,
)
from .dates import find_dates
from .dedup import title_hash
from .model import Document, ExtractedBid

logger = logging.getLogger(__name__)

Strategy = Tuple[str, Callable[[Tag], Optional[str]]]

AMOUNT_PATTERNS = [
    re.compile(r"\$[\d,]+(?:\.\d{2})?"),
    re.compile(r"\$\s*[\d,]+(?:\.\d{2})?"),
    re.compile(r"USD\s*[\d,]+(?:\.\d{2})?", re.IGNORECASE),
    re.compile(r"Amount:\s*\$?[\d,]+(?:\.\d{2})?", re.IGNORECASE),
]

QUANTITY_PATTERNS = [
    re.compile(r"(?:qty|quantity)[\s:]*(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:each|units?|pieces?|items?)\b", re.IGNORECASE),
    re.compile(r"amount:\s*(\d+)", re.IGNORECASE),
]

# Captures must carry at least one digit so "Requisition for parts" is no ID
_ID_TOKEN = r"([A-Za-z0-9\-]*\d[A-Za-z0-9\-]*)"
EXTERNAL_ID_PATTERNS = [
    re.compile(r"\b(?:req|requisition)\b[\s#:\-]*" + _ID_TOKEN, re.IGNORECASE),
    re.compile(r"\b(?:bid|rfp|rfq)\b[\s#:\-]*" + _ID_TOKEN, re.IGNORECASE),
    re.compile(r"\bsolicitation\b[\s#:\-]*" + _ID_TOKEN, re.IGNORECASE),
    re.compile(r"#" + _ID_TOKEN),
]

_AMOUNT_NOISE = re.compile(r"[^\d,.$]")


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def select_text(selector: str) -> Strategy:
    def extract(row: Tag) -> Optional[str]:
        el = row.select_one(selector)
        if el is None:
            return None
        return el.get_text(" ", strip=True)
    return selector, extract


def select_href(selector: str) -> Strategy:
    def extract(row: Tag) -> Optional[str]:
        el = row.select_one(selector)
        if el is None:
            return None
        return (el.get("href") or "").strip() or None
    return selector, extract


def first_match(strategies: Sequence[Strategy], row: Tag,
                accept: Callable[[str], bool] = bool) -> Tuple[Optional[str], Optional[str]]:
    """
    Run an ordered strategy chain against a row.

    Args:
        strategies: (name, extractor) pairs in priority order
        row: Row element
        accept: Predicate a value must pass to win

    Returns:
        (name, value) of the first accepted strategy, or (None, None)
    """
    for name, extract in strategies:
        value = extract(row)
        if value and accept(value):
            return name, value
    return None, None


def first_capture(patterns: Sequence[re.Pattern], text: str, group: int = 1) -> str:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(group)
    return ""


TITLE_STRATEGIES: List[Strategy] = [select_text(sel) for sel in SELECTORS['row']['title']]
LINK_STRATEGIES: List[Strategy] = [select_href(sel) for sel in SELECTORS['row']['link']]


class ListingParser:
    """Turns listing page HTML into ExtractedBid records."""

    def __init__(self, portal: str = PORTAL):
        self.portal = portal

    def find_rows(self, soup: BeautifulSoup) -> List[Tag]:
        for selector in SELECTORS['list']['rows']:
            rows = soup.select(selector)
            if rows:
                logger.info(f"Found {len(rows)} bid elements with selector: {selector}")
                return rows
        return []

    def parse_page(self, html_content: str, base_url: str, now: datetime = None) -> List[ExtractedBid]:
        """
        Extract every bid on one listing page.

        Rows are processed in document order. A row that fails to parse is
        skipped; it never aborts the page.

        Args:
            html_content: HTML content of the listing page
            base_url: URL the page was served from, for resolving links
            now: Reference time for the expiry filter (defaults to now)

        Returns:
            List of ExtractedBid
        """
        soup = BeautifulSoup(html_content, 'lxml')
        rows = self.find_rows(soup)
        if not rows:
            logger.warning("No bid elements found on current page")
            return []

        now = now or datetime.now()
        bids = []
        for i, row in enumerate(rows):
            try:
                bid = self.parse_row(row, base_url, now)
            except Exception as e:
                logger.warning(f"Error extracting bid data from element {i}: {e}")
                continue
            if bid:
                bids.append(bid)
                logger.debug(f"Extracted bid: {bid.title}")

        logger.info(f"Successfully extracted {len(bids)} valid bids from page")
        return bids

    def parse_row(self, row: Tag, base_url: str, now: datetime = None) -> Optional[ExtractedBid]:
        """
        Build one bid from a listing row, or None when the row is not a
        current bid notice.
        """
        try:
            return self._parse_row(row, base_url, now or datetime.now())
        except Exception as e:
            logger.warning(f"Error extracting bid data from element: {e}")
            return None

    def _parse_row(self, row: Tag, base_url: str, now: datetime) -> Optional[ExtractedBid]:
        raw_text = row.get_text(" ")
        if not raw_text.strip():
            return None
        text = collapse_whitespace(raw_text)

        title = self.extract_title(row, text)
        if not title or not is_bid_related(title):
            return None

        bid = ExtractedBid(portal=self.portal, title=title)
        bid.link = self.extract_link(row, base_url)

        dates = find_dates(text)
        if dates:
            # Earliest is usually posted, latest usually due
            bid.posted_date = dates[0]
            if len(dates) > 1:
                bid.due_date = dates[-1]

        amount = first_capture(AMOUNT_PATTERNS, text, group=0)
        bid.amount = _AMOUNT_NOISE.sub("", amount)
        bid.quantity = first_capture(QUANTITY_PATTERNS, text)
        bid.external_id = first_capture(EXTERNAL_ID_PATTERNS, text)
        bid.description = text
        bid.documents = self.extract_documents(row, base_url)

        if bid.due_date and datetime.combine(bid.due_date, time.min) < now:
            logger.debug(f"Skipping expired bid: {bid.title} (due: {bid.due_date})")
            return None

        bid.title_hash = title_hash(bid.title)
        return bid

    def extract_title(self, row: Tag, text: str) -> str:
        _, title = first_match(TITLE_STRATEGIES, row, accept=lambda t: len(t) > MIN_TITLE_LENGTH)
        if title:
            return collapse_whitespace(title)

        # No structural title: first words of the row
        words = text.split()
        if len(words) >= TITLE_FALLBACK_MIN_WORDS:
            return " ".join(words[:TITLE_FALLBACK_WORDS])
        return ""

    def extract_link(self, row: Tag, base_url: str) -> str:
        _, href = first_match(LINK_STRATEGIES, row)
        return urljoin(base_url, href) if href else ""

    def extract_documents(self, row: Tag, base_url: str) -> List[Document]:
        documents = []
        for selector in SELECTORS['row']['documents']:
            documents.extend(self._documents_from(row.select(selector), base_url))

        for marker in SELECTORS['row']['document_texts']:
            anchors = [a for a in row.select("a[href]") if marker in a.get_text().lower()]
            documents.extend(self._documents_from(anchors, base_url))
        return documents

    def _documents_from(self, anchors: List[Tag], base_url: str) -> List[Document]:
        found = []
        for anchor in anchors:
            href = (anchor.get('href') or "").strip()
            name = anchor.get_text(" ", strip=True)
            if href and name:
                found.append(Document(name=name, url=urljoin(base_url, href)))
        return found
