"""Validación estática del artefacto (sin navegador).

Lee el HTML generado (y el listado del directorio de salida) y lo contrasta
con el `ContentModel`. Cada grupo de aserciones es independiente: un fallo o
una excepción en un grupo se reporta en ese grupo y el resto se evalúa igual.
"""

from __future__ import annotations

import logging
import re
from functools import cached_property
from typing import Callable

from bs4 import BeautifulSoup, Tag

from adapters.asset_resolver import collect_refs
from adapters.directories import LocalDirectory
from adapters.site_renderer import mask_tags
from core.domain.artifact import BuildArtifact, BuildMode
from core.domain.checks import CheckCollector, ValidationReport
from core.domain.models import (
    FAVICON,
    AboutSection,
    ContactSection,
    ContentModel,
    MapSection,
    SubsidiesSection,
)
from core.interfaces.storage import Directory

logger = logging.getLogger(__name__)

# En producción no debe haber "líneas en blanco" con espacios en el texto.
# Daría falso positivo con <pre> que contenga líneas vacías.
BLANK_RUN = re.compile(r"\n\s+\n")
COPYRIGHT_MARK = re.compile(r"(&copy;|©)\s*(\d{4})")


def normalize_text(value: str | None) -> str:
    return " ".join((value or "").split())


class _Context:
    def __init__(self, artifact: BuildArtifact, content: ContentModel, directory: Directory) -> None:
        self.artifact = artifact
        self.content = content
        self.directory = directory

    @cached_property
    def html(self) -> str:
        return self.directory.read_text(self.artifact.html_name)

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    def by_id(self, section_id: str) -> Tag:
        node = self.soup.find(id=section_id)
        if not isinstance(node, Tag):
            raise LookupError(f"#{section_id} not found")
        return node

    def text_of(self, node: Tag) -> str:
        return normalize_text(node.get_text(" "))


def _check_output_dir(ctx: _Context, c: CheckCollector) -> None:
    c.check("output-dir-exists", ctx.directory.exists(), expected=True, actual=ctx.directory.exists())


def _check_artifact(ctx: _Context, c: CheckCollector) -> None:
    present = ctx.directory.has_file(ctx.artifact.html_name)
    c.check("artifact-exists", present, expected=ctx.artifact.html_name, actual=present)
    if present:
        size = len(ctx.html)
        c.check("artifact-not-empty", size > 0, expected="> 0 chars", actual=size)


def _check_assets(ctx: _Context, c: CheckCollector) -> None:
    for ref in collect_refs(ctx.content.asset_refs()):
        present = ctx.directory.has_file(ref.relative_path)
        c.check(f"asset-present:{ref.logical_name}", present, expected=ref.public_path, actual=present)
        if ctx.artifact.assets:
            c.equal(
                f"asset-manifest:{ref.logical_name}",
                ref.public_path,
                ctx.artifact.assets.get(ref.logical_name),
            )


def _check_document(ctx: _Context, c: CheckCollector) -> None:
    html, soup = ctx.html, ctx.soup
    c.check(
        "doctype",
        html.lstrip().lower().startswith("<!doctype html>"),
        expected="<!DOCTYPE html>",
        actual=html.lstrip()[:15],
    )
    c.check("closing-html", html.rstrip().endswith("</html>"), expected="</html>", actual=html.rstrip()[-7:])
    for tag in ("html", "head", "body", "header", "main", "footer"):
        c.equal(f"single-{tag}", 1, len(soup.find_all(tag)))

    main = soup.find("main")
    children = [child.get("id") for child in main.find_all(recursive=False)] if isinstance(main, Tag) else []
    c.equal("main-children-order", [s.id for s in ctx.content.main_sections], children)

    header = soup.find("header")
    c.equal("header-id", ctx.content.header.id, header.get("id") if isinstance(header, Tag) else None)

    for section in ctx.content.sections:
        c.equal(f"unique-id:{section.id}", 1, len(soup.find_all(id=section.id)))


def _check_header(ctx: _Context, c: CheckCollector) -> None:
    header = ctx.content.header
    img = ctx.soup.select_one("header img.cover")
    c.check("cover-image", img is not None, expected="header img.cover", actual=img is not None)
    if img is not None:
        c.equal("cover-src", header.cover_image.public_path, img.get("src"))
        c.equal("cover-alt", header.alt_text, img.get("alt"))


def _check_about(ctx: _Context, c: CheckCollector, section: AboutSection) -> None:
    node = ctx.by_id(section.id)
    h2 = node.find("h2")
    c.equal(f"{section.id}-heading", section.heading, h2.get_text() if h2 else None)
    text = ctx.text_of(node)
    for i, paragraph in enumerate(section.paragraphs()):
        c.contains(f"{section.id}-paragraph-{i}", normalize_text(paragraph), text)


def _check_contact(ctx: _Context, c: CheckCollector, section: ContactSection) -> None:
    node = ctx.by_id(section.id)
    h2 = node.find("h2")
    c.equal(f"{section.id}-heading", section.heading, h2.get_text() if h2 else None)
    text = ctx.text_of(node)
    for i, line in enumerate(section.address_lines()):
        c.contains(f"{section.id}-address-{i}", normalize_text(line), text)
    c.contains(f"{section.id}-phone", normalize_text(section.phone), text)
    h3 = node.find("h3")
    c.equal(f"{section.id}-hours-heading", section.hours_heading, h3.get_text() if h3 else None)
    for i, entry in enumerate(section.hours):
        c.contains(f"{section.id}-hours-{i}-label", normalize_text(entry.label), text)
        c.contains(f"{section.id}-hours-{i}-schedule", normalize_text(entry.schedule), text)
    if section.email:
        c.contains(f"{section.id}-email", normalize_text(section.email), text)


def _check_map(ctx: _Context, c: CheckCollector, section: MapSection) -> None:
    node = ctx.by_id(section.id)
    h2 = node.find("h2")
    c.equal(f"{section.id}-heading", section.heading, h2.get_text() if h2 else None)
    iframe = node.find("iframe")
    c.check(f"{section.id}-iframe", iframe is not None, expected="iframe", actual=iframe is not None)
    if iframe is None:
        return
    c.equal(f"{section.id}-iframe-src", section.embed_url, iframe.get("src"))
    c.equal(f"{section.id}-iframe-width", section.width, iframe.get("width"))
    c.equal(f"{section.id}-iframe-height", section.height, iframe.get("height"))
    if section.lazy_load:
        c.equal(f"{section.id}-iframe-loading", "lazy", iframe.get("loading"))
    c.check(
        f"{section.id}-iframe-allowfullscreen",
        iframe.has_attr("allowfullscreen"),
        expected="attribute present",
        actual=iframe.get("allowfullscreen"),
    )


def _check_subsidies(ctx: _Context, c: CheckCollector, section: SubsidiesSection) -> None:
    node = ctx.by_id(section.id)
    h2 = node.find("h2")
    c.equal(f"{section.id}-heading", section.heading, h2.get_text() if h2 else None)
    img = node.select_one("img.subsidy")
    c.check(f"{section.id}-image", img is not None, expected="img.subsidy", actual=img is not None)
    if img is not None:
        c.equal(f"{section.id}-image-src", section.image.public_path, img.get("src"))
        c.equal(f"{section.id}-image-alt", section.image.alt_text, img.get("alt"))
    c.contains(f"{section.id}-caption", normalize_text(section.caption), ctx.text_of(node))


def _check_footer(ctx: _Context, c: CheckCollector) -> None:
    footer_info = ctx.content.footer
    footer = ctx.soup.find("footer")
    if not isinstance(footer, Tag):
        c.check("footer", False, expected="<footer>", actual=None)
        return
    raw = str(footer)
    mark = COPYRIGHT_MARK.search(raw)
    c.check(
        "footer-copyright-mark",
        mark is not None and mark.group(2) == str(footer_info.copyright_year),
        expected=f"&copy;|© {footer_info.copyright_year}",
        actual=mark.group(0) if mark else None,
    )
    text = ctx.text_of(footer)
    c.contains("footer-owner", f"© {footer_info.copyright_year} {footer_info.owner_name}", text)
    c.contains("footer-rights", footer_info.rights_notice, text)


def _check_sections(ctx: _Context, c: CheckCollector) -> None:
    # Cada sección se comprueba por separado: una sección rota no oculta las demás.
    handlers: dict[type, Callable] = {
        AboutSection: _check_about,
        ContactSection: _check_contact,
        MapSection: _check_map,
        SubsidiesSection: _check_subsidies,
    }
    runs: list[tuple[str, Callable[[], None]]] = [("header", lambda: _check_header(ctx, c))]
    for section in ctx.content.main_sections:
        handler = handlers[type(section)]
        runs.append((section.id, lambda h=handler, s=section: h(ctx, c, s)))
    runs.append(("footer", lambda: _check_footer(ctx, c)))

    for label, run in runs:
        try:
            run()
        except Exception as exc:
            c.check(f"{label}-error", False, expected="section renders", actual=type(exc).__name__, detail=str(exc))


def _check_accessibility(ctx: _Context, c: CheckCollector) -> None:
    soup, content = ctx.soup, ctx.content
    html_tag = soup.find("html")
    c.equal("html-lang", content.locale, html_tag.get("lang") if isinstance(html_tag, Tag) else None)

    images = soup.find_all("img")
    missing_alt = [img.get("src") for img in images if not (img.get("alt") or "").strip()]
    c.check("img-alt-present", not missing_alt, expected=[], actual=missing_alt)

    alts_by_src = {img.get("src"): img.get("alt") for img in images}
    for ref in content.asset_refs():
        c.equal(f"alt-matches:{ref.logical_name}", ref.alt_text, alts_by_src.get(ref.public_path))

    h2s = soup.find_all("h2")
    h3s = soup.find_all("h3")
    c.equal("h2-count", content.expected_h2_count(), len(h2s))
    c.equal("h3-count", content.expected_h3_count(), len(h3s))
    c.equal("h2-sequence", [s.heading for s in content.main_sections], [h.get_text() for h in h2s])

    contact_ids = [s.id for s in content.sections if isinstance(s, ContactSection)]
    h3_parents = []
    for h3 in h3s:
        parent = h3.find_parent("section")
        h3_parents.append(parent.get("id") if isinstance(parent, Tag) else None)
    c.equal("h3-nesting", contact_ids, h3_parents)

    c.check("main-landmark", soup.find("main") is not None, expected="<main>", actual=soup.find("main") is not None)


def _check_seo(ctx: _Context, c: CheckCollector) -> None:
    soup, content = ctx.soup, ctx.content
    charset = soup.find("meta", attrs={"charset": True})
    c.equal("meta-charset", "utf-8", charset.get("charset", "").lower() if isinstance(charset, Tag) else None)
    for name in ("viewport", "generator"):
        meta = soup.find("meta", attrs={"name": name})
        c.check(
            f"meta-{name}",
            isinstance(meta, Tag) and bool(meta.get("content")),
            expected="non-empty content",
            actual=meta.get("content") if isinstance(meta, Tag) else None,
        )
    if content.description:
        meta = soup.find("meta", attrs={"name": "description"})
        c.equal("meta-description", content.description, meta.get("content") if isinstance(meta, Tag) else None)

    titles = soup.find_all("title")
    c.equal("title-count", 1, len(titles))
    c.equal("title-text", content.title, titles[0].get_text() if titles else None)

    icon = soup.find("link", rel="icon")
    favicon_path = ctx.artifact.assets.get(FAVICON.logical_name, FAVICON.public_path)
    c.equal("favicon-link", favicon_path, icon.get("href") if isinstance(icon, Tag) else None)


def _check_minification(ctx: _Context, c: CheckCollector) -> None:
    if ctx.artifact.mode is not BuildMode.PRODUCTION:
        c.check("no-blank-runs", True, detail="not required in development builds")
        return
    # Solo texto entre etiquetas: un alt multilínea no es formato sobrante.
    runs = BLANK_RUN.findall(mask_tags(ctx.html))
    c.check("no-blank-runs", not runs, expected=0, actual=len(runs))


GROUPS: dict[str, Callable[[_Context, CheckCollector], None]] = {
    "output_dir": _check_output_dir,
    "artifact": _check_artifact,
    "assets": _check_assets,
    "document": _check_document,
    "sections": _check_sections,
    "accessibility": _check_accessibility,
    "seo": _check_seo,
    "minification": _check_minification,
}


def validate_static(
    *,
    artifact: BuildArtifact,
    content: ContentModel,
    directory: Directory | None = None,
    groups: list[str] | None = None,
) -> ValidationReport:
    """Ejecuta todos los grupos (o los indicados) y devuelve el reporte completo."""

    directory = directory if directory is not None else LocalDirectory(artifact.output_dir)
    ctx = _Context(artifact, content, directory)
    report = ValidationReport(validator="static")

    for name in groups or list(GROUPS):
        collector = CheckCollector(name)
        try:
            GROUPS[name](ctx, collector)
        except Exception as exc:
            logger.debug("Group %s raised %r", name, exc)
            collector.error(exc)
        report.results.extend(collector.results)

    failed = len(report.failures)
    logger.info("Static validation: %d/%d checks passed", len(report.results) - failed, len(report.results))
    return report
