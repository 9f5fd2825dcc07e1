"""Implementación Playwright (API síncrona) de la capacidad de navegador.

Por qué un adaptador:
- El validador en vivo no depende de Playwright; solo del contrato
  `BrowserDriver`/`BrowserPage`.
- Aquí se concentran los detalles: contextos aislados por escenario, escucha
  de consola/red y timeouts.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator
from urllib.parse import urlsplit

from playwright.sync_api import Browser, Page, Playwright, Route, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from core.errors import NavigationTimeoutError
from core.interfaces.browser import ImageState, Viewport

logger = logging.getLogger(__name__)

_IMAGES_JS = """
els => els.map(el => ({
  src: el.getAttribute('src') || '',
  alt: el.getAttribute('alt'),
  complete: el.complete,
  naturalWidth: el.naturalWidth,
}))
"""


class PlaywrightPage:
    def __init__(self, page: Page, viewport: Viewport, *, timeout_ms: int) -> None:
        self._page = page
        self.viewport = viewport
        self._console_errors: list[str] = []
        self._failed_requests: list[str] = []
        page.set_default_timeout(timeout_ms)
        page.on("console", self._on_console)
        page.on("pageerror", lambda exc: self._console_errors.append(str(exc)))
        page.on("requestfailed", lambda request: self._failed_requests.append(request.url))

    def _on_console(self, message) -> None:
        if message.type == "error":
            self._console_errors.append(message.text)

    def goto(self, url: str, *, timeout_ms: int) -> float:
        start = time.perf_counter()
        try:
            self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise NavigationTimeoutError(url, timeout_ms) from exc
        return (time.perf_counter() - start) * 1000

    def title(self) -> str:
        return self._page.title()

    def count(self, selector: str) -> int:
        return self._page.locator(selector).count()

    def is_visible(self, selector: str) -> bool:
        return self._page.locator(selector).first.is_visible()

    def get_attribute(self, selector: str, name: str) -> str | None:
        if not self.count(selector):
            return None
        return self._page.locator(selector).first.get_attribute(name)

    def inner_text(self, selector: str) -> str:
        if not self.count(selector):
            return ""
        return self._page.locator(selector).first.inner_text()

    def computed_style(self, selector: str, prop: str) -> str:
        return self._page.locator(selector).first.evaluate(
            "(el, prop) => window.getComputedStyle(el).getPropertyValue(prop)", prop
        )

    def box_width(self, selector: str) -> float | None:
        if not self.count(selector):
            return None
        box = self._page.locator(selector).first.bounding_box()
        return box["width"] if box else None

    def images(self) -> list[ImageState]:
        raw = self._page.eval_on_selector_all("img", _IMAGES_JS)
        return [
            ImageState(
                src=item["src"],
                alt=item["alt"],
                complete=bool(item["complete"]),
                natural_width=int(item["naturalWidth"]),
            )
            for item in raw
        ]

    def console_errors(self) -> list[str]:
        return list(self._console_errors)

    def failed_requests(self) -> list[str]:
        return list(self._failed_requests)


class PlaywrightDriver:
    """Lanza un navegador y abre un contexto nuevo por escenario.

    `stub_external=True` responde 204 a cualquier petición fuera del origen
    validado (p.ej. el iframe de mapas) para validar sin red.
    """

    def __init__(
        self,
        *,
        browser: str = "chromium",
        headless: bool = True,
        timeout_ms: int = 3000,
        stub_external: bool = False,
    ) -> None:
        self.browser_name = browser
        self.headless = headless
        self.timeout_ms = timeout_ms
        self.stub_external = stub_external
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self.origin: str | None = None

    def __enter__(self) -> "PlaywrightDriver":
        self._playwright = sync_playwright().start()
        launcher = getattr(self._playwright, self.browser_name)
        self._browser = launcher.launch(headless=self.headless)
        logger.debug("Launched %s (headless=%s)", self.browser_name, self.headless)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def _stub_route(self, route: Route) -> None:
        url = route.request.url
        if self.origin and not url.startswith(self.origin):
            route.fulfill(status=204, body="")
        else:
            route.continue_()

    @contextmanager
    def open_page(self, viewport: Viewport) -> Iterator[PlaywrightPage]:
        if self._browser is None:
            raise RuntimeError("PlaywrightDriver must be used as a context manager")
        options = {"viewport": {"width": viewport.width, "height": viewport.height}}
        # Firefox no soporta is_mobile.
        if viewport.is_mobile and self.browser_name != "firefox":
            options.update(is_mobile=True, has_touch=True, device_scale_factor=2)
        context = self._browser.new_context(**options)
        try:
            if self.stub_external:
                context.route("**/*", self._stub_route)
            page = context.new_page()
            yield PlaywrightPage(page, viewport, timeout_ms=self.timeout_ms)
        finally:
            context.close()

    def for_url(self, url: str) -> "PlaywrightDriver":
        """Fija el origen considerado "interno" para `stub_external`."""

        parts = urlsplit(url)
        self.origin = f"{parts.scheme}://{parts.netloc}"
        return self
