"""Render del sitio a un único HTML.

Por qué está en adapters:
- El HTML es un detalle de infraestructura (Jinja2).
- El Core solo conoce el agregado `ContentModel` y el manifest de assets.

Contrato:
- Función pura del contenido: mismo input -> mismos bytes (sin timestamps).
- Cada tipo de sección tiene una plantilla; un tipo sin plantilla es un
  `UnhandledVariantError`, nunca una sección omitida en silencio.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from core.domain.artifact import BuildMode
from core.domain.models import FAVICON, AssetRef, ContentModel
from core.errors import RenderError, UnhandledVariantError
from core.interfaces.storage import Directory

logger = logging.getLogger(__name__)

GENERATOR = "escaparate 0.1.0"

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Los valores de atributo salen autoescapados, así que no contienen `<` ni `>`.
_TAG = re.compile(r"(<[^>]*>)")
_BLANK_LINES = re.compile(r"\n\s*\n")

SECTION_TEMPLATES: dict[str, str] = {
    "header": "sections/header.html",
    "about": "sections/about.html",
    "contact": "sections/contact.html",
    "map": "sections/map.html",
    "subsidies": "sections/subsidies.html",
}


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        keep_trailing_newline=False,
    )


def _asset_resolver(assets: Mapping[str, str]):
    def resolve(ref: AssetRef) -> str:
        path = assets.get(ref.logical_name)
        if not isinstance(path, str) or not path:
            raise RenderError(f"asset {ref.logical_name!r} has no resolved public path")
        return path

    return resolve


def render_section(env: Environment, section: Any, *, asset) -> Markup:
    kind = getattr(section, "kind", None)
    template_name = SECTION_TEMPLATES.get(kind) if isinstance(kind, str) else None
    if template_name is None:
        raise UnhandledVariantError(str(kind))
    return Markup(env.get_template(template_name).render(section=section, asset=asset))


def mask_tags(html: str) -> str:
    """Sustituye cada etiqueta por `<>`: deja solo el texto entre etiquetas."""

    return _TAG.sub("<>", html)


def _squeeze_text(text: str) -> str:
    if not text.strip():
        return "\n" if "\n" in text else text
    body = _BLANK_LINES.sub("\n", text.strip())
    lead = text[: len(text) - len(text.lstrip())]
    tail = text[len(text.rstrip()) :]
    return ("\n" if "\n" in lead else lead) + body + ("\n" if "\n" in tail else tail)


def _squeeze_css(css: str) -> str:
    lines = [line.strip() for line in css.splitlines() if line.strip()]
    return "\n" + "\n".join(lines) + "\n" if lines else css.strip()


def minify_html(html: str) -> str:
    """Quita sangría y líneas en blanco del texto entre etiquetas.

    Las etiquetas (y sus atributos: alt, content, title) se copian tal cual.
    Limitación conocida: el texto de un <pre> también se compactaría; la
    página no los usa.
    """

    parts = _TAG.split(html)
    out: list[str] = []
    for i, part in enumerate(parts):
        if i % 2:
            out.append(part)
        elif i and parts[i - 1].lower().startswith("<style"):
            out.append(_squeeze_css(part))
        else:
            out.append(_squeeze_text(part))
    return "".join(out).strip() + "\n"


def render_site_html(
    *,
    content: ContentModel,
    assets: Mapping[str, str],
    mode: BuildMode = BuildMode.PRODUCTION,
) -> str:
    """Renderiza el documento completo."""

    env = _get_env()
    asset = _asset_resolver(assets)

    header_html = render_section(env, content.header, asset=asset)
    section_blocks = [render_section(env, s, asset=asset) for s in content.main_sections]

    html = env.get_template("index.html").render(
        content=content,
        generator=GENERATOR,
        favicon_href=asset(FAVICON),
        header_html=header_html,
        section_blocks=section_blocks,
    )
    if mode is BuildMode.PRODUCTION:
        html = minify_html(html)
    return html


def export_site_html(
    *,
    content: ContentModel,
    assets: Mapping[str, str],
    directory: Directory,
    mode: BuildMode = BuildMode.PRODUCTION,
    filename: str = "index.html",
) -> str:
    """Renderiza y escribe el HTML en `directory/filename`. Devuelve el HTML."""

    html = render_site_html(content=content, assets=assets, mode=mode)
    directory.ensure()
    directory.write_text(filename, html)
    logger.info("Wrote %s (%d bytes, %s)", filename, len(html.encode("utf-8")), mode.value)
    return html
