"""Orquestación del build.

Resolver assets -> renderizar -> escribir. Devuelve el `BuildArtifact` que
consumen los validadores; si cualquier paso falla, el error se propaga y no
hay artefacto que validar.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

from adapters.asset_resolver import resolve_assets_sync
from adapters.directories import LocalDirectory
from adapters.site_renderer import export_site_html
from core.config import AppSettings
from core.domain.artifact import BuildArtifact, BuildMode
from core.domain.models import ContentModel
from core.interfaces.storage import Directory

logger = logging.getLogger(__name__)


@dataclass
class BuildRequest:
    """Parámetros de un build."""

    content: ContentModel
    output_dir: Path
    public_dir: Path | None = None
    mode: BuildMode = BuildMode.PRODUCTION
    html_name: str = "index.html"
    max_concurrency: int = 8

    @classmethod
    def from_settings(cls, content: ContentModel, settings: AppSettings) -> "BuildRequest":
        return cls(
            content=content,
            output_dir=settings.output_dir,
            public_dir=settings.public_dir,
            mode=settings.build_mode,
            html_name=settings.artifact_name,
            max_concurrency=settings.asset_max_concurrency,
        )


def build_site(
    request: BuildRequest,
    *,
    source: Directory | None = None,
    target: Directory | None = None,
) -> BuildArtifact:
    """Ejecuta el build completo.

    `source`/`target` permiten inyectar directorios virtuales; por defecto se
    usan `public_dir` y `output_dir` en disco.
    """

    if source is None and request.public_dir is not None:
        source = LocalDirectory(request.public_dir)
    if target is None:
        target = LocalDirectory(request.output_dir)

    logger.info("Building %s into %s", request.content.title, request.output_dir)
    assets = resolve_assets_sync(
        request.content.asset_refs(),
        source=source,
        target=target,
        copy=source is not None,
        max_concurrency=request.max_concurrency,
    )
    html = export_site_html(
        content=request.content,
        assets=assets,
        directory=target,
        mode=request.mode,
        filename=request.html_name,
    )
    return BuildArtifact(
        output_dir=request.output_dir,
        html_name=request.html_name,
        mode=request.mode,
        assets=assets,
        sha256=hashlib.sha256(html.encode("utf-8")).hexdigest(),
    )
