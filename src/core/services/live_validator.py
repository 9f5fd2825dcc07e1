"""Validación en vivo (motor de render real).

Comprueba lo que el marcado no deja ver: visibilidad computada, estilos,
carga de imágenes, errores de consola y de red, tiempos de carga.

Modelo de ejecución:
- Un escenario = un viewport = una página nueva sin estado compartido.
- Dentro del escenario, la navegación (hasta network-idle) termina antes de
  cualquier aserción y tiene timeout; si vence, el escenario falla y los
  demás siguen.
- Los grupos de aserciones son independientes entre sí.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from core.domain.checks import CheckCollector, ValidationReport
from core.domain.models import (
    AboutSection,
    ContactSection,
    ContentModel,
    MapSection,
    SubsidiesSection,
)
from core.errors import NavigationTimeoutError
from core.interfaces.browser import DESKTOP, MOBILE, BrowserDriver, BrowserPage, Viewport

logger = logging.getLogger(__name__)

DEFAULT_SCENARIOS: tuple[Viewport, ...] = (DESKTOP, MOBILE)


def _norm(value: str | None) -> str:
    return " ".join((value or "").split())


@dataclass(frozen=True)
class _Run:
    content: ContentModel
    viewport: Viewport
    elapsed_ms: float
    load_threshold_ms: int


def _check_title(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    c.equal("title", run.content.title, page.title())


def _check_visibility(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    selectors = ["header", "header img.cover", "main", "footer"]
    selectors += [f"#{s.id}" for s in run.content.main_sections]
    for selector in selectors:
        visible = page.is_visible(selector)
        c.check(f"visible:{selector}", visible, expected=True, actual=visible)


def _check_attributes(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    content = run.content
    cover = content.header.cover_image
    c.equal("cover-src", cover.public_path, page.get_attribute("header img.cover", "src"))
    c.equal("cover-alt", cover.alt_text, page.get_attribute("header img.cover", "alt"))

    for section in content.main_sections:
        if isinstance(section, SubsidiesSection):
            selector = f"#{section.id} img.subsidy"
            c.equal(f"{section.id}-src", section.image.public_path, page.get_attribute(selector, "src"))
            c.equal(f"{section.id}-alt", section.image.alt_text, page.get_attribute(selector, "alt"))
        elif isinstance(section, MapSection):
            selector = f"#{section.id} iframe"
            src = page.get_attribute(selector, "src")
            c.check(
                f"{section.id}-src",
                src is not None and "/maps/embed" in src,
                expected="contains /maps/embed",
                actual=src,
            )
            c.equal(f"{section.id}-width", section.width, page.get_attribute(selector, "width"))
            c.equal(f"{section.id}-height", section.height, page.get_attribute(selector, "height"))
            if section.lazy_load:
                c.equal(f"{section.id}-loading", "lazy", page.get_attribute(selector, "loading"))
            allow = page.get_attribute(selector, "allowfullscreen")
            c.check(f"{section.id}-allowfullscreen", allow is not None, expected="not null", actual=allow)


def _section_needles(section) -> list[str]:
    if isinstance(section, AboutSection):
        return section.paragraphs()
    if isinstance(section, ContactSection):
        needles = [*section.address_lines(), section.phone]
        for entry in section.hours:
            needles += [entry.label, entry.schedule]
        if section.email:
            needles.append(section.email)
        return needles
    if isinstance(section, SubsidiesSection):
        return [section.caption]
    return []


def _check_text(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    # Texto acotado al subárbol de cada sección, no a todo el documento.
    for section in run.content.main_sections:
        scope = f"#{section.id}"
        c.equal(f"{section.id}-h2", section.heading, _norm(page.inner_text(f"{scope} h2")))
        text = _norm(page.inner_text(scope))
        for i, needle in enumerate(_section_needles(section)):
            c.contains(f"{section.id}-text-{i}", _norm(needle), text)
        if isinstance(section, ContactSection):
            c.equal(f"{section.id}-h3", section.hours_heading, _norm(page.inner_text(f"{scope} h3")))

    footer = run.content.footer
    footer_text = _norm(page.inner_text("footer"))
    c.contains("footer-copyright", f"© {footer.copyright_year} {footer.owner_name}", footer_text)
    c.contains("footer-rights", footer.rights_notice, footer_text)


def _check_styles(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    background = page.computed_style("body", "background-color")
    color = page.computed_style("body", "color")
    c.check("body-background-set", bool(background), expected="non-empty", actual=background)
    c.check("body-color-set", bool(color), expected="non-empty", actual=color)
    c.check("contrast", background != color, expected=f"!= {color}", actual=background)


def _check_headings(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    c.equal("h2-count", run.content.expected_h2_count(), page.count("h2"))
    c.equal("h3-count", run.content.expected_h3_count(), page.count("h3"))


def _check_images(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    images = page.images()
    c.check("images-found", bool(images), expected="> 0", actual=len(images))
    for image in images:
        c.check(
            f"image-loaded:{image.src}",
            image.complete and image.natural_width > 0,
            expected="complete and naturalWidth > 0",
            actual={"complete": image.complete, "naturalWidth": image.natural_width},
        )


def _check_layout(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    if not run.viewport.is_mobile:
        return
    width = page.box_width("header img.cover")
    c.check(
        "cover-fits-viewport",
        width is not None and width <= run.viewport.width,
        expected=f"<= {run.viewport.width}",
        actual=width,
    )


def _check_performance(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    c.check(
        "load-time",
        run.elapsed_ms < run.load_threshold_ms,
        expected=f"< {run.load_threshold_ms} ms",
        actual=round(run.elapsed_ms, 1),
    )
    c.equal("console-errors", [], page.console_errors())
    c.equal("failed-requests", [], page.failed_requests())


def _check_accessibility(page: BrowserPage, run: _Run, c: CheckCollector) -> None:
    c.equal("html-lang", run.content.locale, page.get_attribute("html", "lang"))
    c.equal("img-without-alt", 0, page.count("img:not([alt])"))
    main_visible = page.is_visible("main")
    c.check("main-visible", main_visible, expected=True, actual=main_visible)


GROUPS: dict[str, Callable[[BrowserPage, _Run, CheckCollector], None]] = {
    "title": _check_title,
    "visibility": _check_visibility,
    "attributes": _check_attributes,
    "text": _check_text,
    "styles": _check_styles,
    "headings": _check_headings,
    "images": _check_images,
    "layout": _check_layout,
    "performance": _check_performance,
    "accessibility": _check_accessibility,
}


def _run_scenario(
    *,
    url: str,
    content: ContentModel,
    driver: BrowserDriver,
    viewport: Viewport,
    timeout_ms: int,
    load_threshold_ms: int,
) -> list:
    results = []
    nav = CheckCollector("navigation", scenario=viewport.name)
    with driver.open_page(viewport) as page:
        try:
            elapsed = page.goto(url, timeout_ms=timeout_ms)
        except NavigationTimeoutError as exc:
            nav.check("network-idle", False, expected=f"<= {timeout_ms} ms", actual="timeout", detail=str(exc))
            return nav.results
        nav.check("network-idle", True, expected=f"<= {timeout_ms} ms", actual=round(elapsed, 1))
        results.extend(nav.results)

        run = _Run(content=content, viewport=viewport, elapsed_ms=elapsed, load_threshold_ms=load_threshold_ms)
        for name, group in GROUPS.items():
            collector = CheckCollector(name, scenario=viewport.name)
            try:
                group(page, run, collector)
            except Exception as exc:
                logger.debug("Live group %s/%s raised %r", viewport.name, name, exc)
                collector.error(exc)
            results.extend(collector.results)
    return results


def validate_live(
    *,
    url: str,
    content: ContentModel,
    driver: BrowserDriver,
    scenarios: Sequence[Viewport] = DEFAULT_SCENARIOS,
    timeout_ms: int = 3000,
    load_threshold_ms: int = 3000,
) -> ValidationReport:
    """Ejecuta cada escenario de forma aislada y agrega los resultados."""

    report = ValidationReport(validator="live")
    for viewport in scenarios:
        logger.info("Live scenario %s (%dx%d) -> %s", viewport.name, viewport.width, viewport.height, url)
        try:
            report.results.extend(
                _run_scenario(
                    url=url,
                    content=content,
                    driver=driver,
                    viewport=viewport,
                    timeout_ms=timeout_ms,
                    load_threshold_ms=load_threshold_ms,
                )
            )
        except Exception as exc:
            logger.warning("Scenario %s aborted: %s", viewport.name, exc)
            collector = CheckCollector("navigation", scenario=viewport.name)
            collector.error(exc)
            report.results.extend(collector.results)

    failed = len(report.failures)
    logger.info("Live validation: %d/%d checks passed", len(report.results) - failed, len(report.results))
    return report
