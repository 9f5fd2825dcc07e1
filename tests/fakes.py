"""
Fake browser shared by the live validator and CLI tests.

The fake answers DOM queries from the real rendered HTML (via BeautifulSoup)
and lets each test inject what only a real engine would report: computed
styles, load timings, console errors, failed requests, image state.
"""

from collections import Counter
from contextlib import contextmanager

from bs4 import BeautifulSoup

from core.errors import NavigationTimeoutError
from core.interfaces.browser import ImageState


class FakePage:
    def __init__(self, html, viewport, *, driver):
        self.soup = BeautifulSoup(html, "html.parser")
        self.viewport = viewport
        self._driver = driver

    def goto(self, url, *, timeout_ms):
        self._driver.visited.append(url)
        if self.viewport.name in self._driver.timeouts:
            raise NavigationTimeoutError(url, timeout_ms)
        return self._driver.elapsed_ms

    def title(self):
        return self.soup.title.get_text()

    def count(self, selector):
        return len(self.soup.select(selector))

    def is_visible(self, selector):
        self._driver.visibility_queries[(self.viewport.name, selector)] += 1
        return self.soup.select_one(selector) is not None and selector not in self._driver.hidden

    def get_attribute(self, selector, name):
        node = self.soup.select_one(selector)
        return None if node is None else node.get(name)

    def inner_text(self, selector):
        node = self.soup.select_one(selector)
        if node is None:
            raise LookupError(selector)
        return node.get_text(" ")

    def computed_style(self, selector, prop):
        return self._driver.styles.get(prop, "")

    def box_width(self, selector):
        return self._driver.box_widths.get(selector, self.viewport.width)

    def images(self):
        return [
            ImageState(
                src=img.get("src"),
                alt=img.get("alt"),
                complete=img.get("src") not in self._driver.broken_images,
                natural_width=0 if img.get("src") in self._driver.broken_images else 1,
            )
            for img in self.soup.find_all("img")
        ]

    def console_errors(self):
        return list(self._driver.console)

    def failed_requests(self):
        return list(self._driver.failed)


class FakeDriver:
    """Same surface as `PlaywrightDriver`, minus the browser."""

    def __init__(self, html):
        self.html = html
        self.elapsed_ms = 120.0
        self.timeouts = set()
        self.crashes = set()
        self.hidden = set()
        self.styles = {"background-color": "rgb(253, 251, 245)", "color": "rgb(34, 34, 34)"}
        self.box_widths = {}
        self.broken_images = set()
        self.console = []
        self.failed = []
        self.opened = []
        self.visited = []
        self.visibility_queries = Counter()
        self.origin = None
        self.entered = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, *exc_info):
        self.entered = False

    def for_url(self, url):
        self.origin = url
        return self

    @contextmanager
    def open_page(self, viewport):
        if viewport.name in self.crashes:
            raise RuntimeError(f"browser context for {viewport.name} crashed")
        self.opened.append(viewport.name)
        yield FakePage(self.html, viewport, driver=self)
