"""In-memory stand-ins for the slice of the Playwright sync API the crawler uses."""
import pytest
from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError


class FakeElement:
    def __init__(self, text="", visible=True, href=None, on_click=None):
        self.text = text
        self.visible = visible
        self.attrs = {'href': href} if href is not None else {}
        self.on_click = on_click
        self.value = None
        self.clicks = 0

    def click(self):
        self.clicks += 1
        if self.on_click:
            self.on_click()


class FakeLocator:
    def __init__(self, elements):
        self.elements = list(elements)

    @property
    def first(self):
        return FakeLocator(self.elements[:1])

    def nth(self, index):
        return FakeLocator(self.elements[index:index + 1])

    def count(self):
        return len(self.elements)

    def _one(self):
        if not self.elements:
            raise PlaywrightError("Element not found")
        return self.elements[0]

    def is_visible(self):
        return bool(self.elements) and self.elements[0].visible

    def get_attribute(self, name):
        return self._one().attrs.get(name)

    def click(self, **kwargs):
        self._one().click()

    def fill(self, value):
        self._one().value = value

    def text_content(self):
        return self._one().text


class FakePage:
    def __init__(self, url="about:blank", elements=None, html="<html><body></body></html>"):
        self.url = url
        self.elements = elements or {}
        self.html = html
        self.visited = []
        self.failing_urls = set()
        self.load_state_error = None
        self.screenshots = []

    def locator(self, selector):
        return FakeLocator(self.elements.get(selector, []))

    def goto(self, url, **kwargs):
        self.visited.append(url)
        if url in self.failing_urls:
            raise PlaywrightError(f"net::ERR_CONNECTION_REFUSED at {url}")
        self.url = url

    def wait_for_selector(self, selector, timeout=None):
        for part in selector.split(","):
            if self.elements.get(part.strip()):
                return FakeLocator(self.elements[part.strip()]).first
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    def wait_for_load_state(self, state=None, timeout=None):
        if self.load_state_error:
            raise self.load_state_error

    def content(self):
        return self.html

    def screenshot(self, path=None, **kwargs):
        self.screenshots.append(path)
        with open(path, "wb") as f:
            f.write(b"\x89PNG")


class FakeSession:
    def __init__(self, page):
        self.page = page
        self.started = 0
        self.stopped = 0

    def __enter__(self):
        self.started += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stopped += 1
        return False


@pytest.fixture
def fake_page():
    return FakePage()
