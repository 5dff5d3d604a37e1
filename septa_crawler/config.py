import os

# URL Configuration
BASE_URL = "https://epsadmin.septa.org"
LOGIN_URL = f"{BASE_URL}/vendor/login"
VENDOR_HOME_URL = f"{BASE_URL}/vendor/"
LISTING_SEARCH_URL = f"{BASE_URL}/vendor/requisitions/search/"
LISTING_LIST_URL = f"{BASE_URL}/vendor/requisitions/list/"

# Post-login URL heuristics
AUTHENTICATED_URL_PATTERN = "epsadmin.septa.org/vendor"
LOGIN_URL_PATTERN = "/login"

PORTAL = "SEPTA"

# Selectors
# Every list is a fallback chain: order is priority, first hit wins.
SELECTORS = {
    "login": {
        "form": "form, input[type='text'], input[type='email'], input[name*='user']",
        "username": [
            "input[type='text']",
            "input[type='email']",
            "input[name*='user']",
            "input[id*='user']",
            "input[name*='email']",
            "input[name='username']",
            "input[name='login']",
            "input[placeholder*='user']",
            "input[placeholder*='email']",
        ],
        "password": [
            "input[type='password']",
            "input[name*='pass']",
            "input[id*='pass']",
            "input[name='password']",
            "input[placeholder*='pass']",
        ],
        "submit": [
            "button[type='submit']",
            "input[type='submit']",
            "button:has-text('Login')",
            "button:has-text('Sign In')",
            "button:has-text('Submit')",
            "input[value*='Login']",
            "input[value*='Sign In']",
            ".login-button",
            "#login-button",
            "[class*='submit']",
        ],
        "error": [
            ".error",
            ".alert",
            "[class*='error']",
            "[class*='alert']",
            "text=Invalid",
            "text=Error",
            "text=Failed",
        ],
        # Content markers only found behind the login wall
        "success_markers": {
            "dashboard_text": "text=Dashboard",
            "vendor_portal_text": "text=Vendor Portal",
            "requisitions_link": "a[href*='requisitions']",
            "quotes_text": "text=Quotes Under",
        },
    },
    "list": {
        "entry_links": [
            "a:has-text('Quotes Under $100,000')",
            "a[href*='requisitions']",
            "a[href*='quotes']",
            "a:has-text('Requisitions')",
            "a:has-text('Procurement')",
            "a:has-text('Bids')",
            "[href*='search']",
            "text=Quotes Under",
        ],
        "search_btn": [
            "button:has-text('Search')",
            "input[type='submit']",
            "button[type='submit']",
            "[value='Search']",
            ".search-button",
            "#search-button",
        ],
        # Evaluated with soupsieve against the page HTML snapshot
        "rows": [
            "table tbody tr",
            ".requisition-item",
            ".bid-row",
            ".list-item",
            ".procurement-item",
            "[class*='row']",
            "tr[class*='data']",
            "div[class*='item']",
        ],
        "pagination": {
            "next_btn": [
                "a:has-text('Next')",
                "a:has-text('→')",
                "a[href*='page=']",
                ".pagination a:last-child",
                "[class*='next']",
                "[aria-label*='Next']",
            ],
        },
    },
    "row": {
        "title": [
            "td:first-child a",
            "td:first-child",
            ".title",
            ".requisition-title",
            "h3",
            "h4",
            "a[href*='requisition']",
            "a[href*='bid']",
        ],
        "link": [
            "a[href*='requisition']",
            "a[href*='bid']",
            "a[href*='detail']",
            "a[href*='view']",
            "a[href]",
        ],
        "documents": [
            "a[href$='.pdf']",
            "a[href$='.doc']",
            "a[href$='.docx']",
            "a[href$='.xls']",
            "a[href$='.xlsx']",
            "a[href*='document']",
            "a[href*='attachment']",
        ],
        # Link text (case-insensitive) that marks an attachment
        "document_texts": ["download", "document"],
    },
}

# Field extraction
MIN_TITLE_LENGTH = 10
TITLE_FALLBACK_WORDS = 10
TITLE_FALLBACK_MIN_WORDS = 3

# Crawler Configuration
NAVIGATION_TIMEOUT = 30000  # 30 seconds
LOGIN_SETTLE_TIMEOUT = 20000
SETTLE_TIMEOUT = 15000
ELEMENT_TIMEOUT = 15000
PAGE_SETTLE_DELAY = 1.0  # Seconds between pages

# Hard stop against endless or cyclic "next" links
MAX_PAGES = 50

# Production Settings
MAX_RETRIES = 3
RETRY_DELAY = 2  # Seconds
REQUIRE_LOGIN = True


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Browser Configuration
HEADLESS = _env_flag("SEPTA_HEADLESS", True)
DEBUG = _env_flag("SEPTA_DEBUG", False)
LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-web-security',
    '--disable-features=VizDisplayCompositor',
    '--disable-background-timer-throttling',
    '--disable-backgrounding-occluded-windows',
    '--disable-renderer-backgrounding',
    '--disable-gpu',
]
FALLBACK_EXECUTABLE_PATH = "/usr/bin/google-chrome-stable"
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
VIEWPORT = {'width': 1366, 'height': 768}

# Output locations
SCREENSHOT_DIR = os.getenv("SEPTA_SCREENSHOT_DIR", "/tmp/septa-screenshots")
DATA_DIR = os.getenv("SEPTA_DATA_DIR", "data")
