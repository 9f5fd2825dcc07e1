"""Cargador del contenido fuente.

Este módulo vive en `core/` porque:
- centraliza *de dónde* sale el `ContentModel` sin acoplarse a la CLI
- convierte errores de esquema en un único `ContentValidationError`.

El contenido es un JSON versionado en `data/content.json`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.domain.models import ContentModel
from core.errors import ContentValidationError


def project_root() -> Path:
    # core/content_loader.py -> core -> src -> <project_root>
    return Path(__file__).resolve().parents[2]


def resolve_project_path(path: Path) -> Path:
    """Rutas relativas: primero cwd, después el project root."""

    if path.is_absolute() or path.exists():
        return path
    candidate = project_root() / path
    return candidate if candidate.exists() else path


def parse_content(data: Any, *, source: Path | None = None) -> ContentModel:
    try:
        return ContentModel.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        summary = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in errors
        )
        raise ContentValidationError(f"invalid content ({summary})", source=source, errors=errors) from exc


def load_content(path: Path) -> ContentModel:
    """Lee y valida el JSON de contenido."""

    path = resolve_project_path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ContentValidationError("content file not found", source=path) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ContentValidationError(f"invalid JSON at line {exc.lineno}: {exc.msg}", source=path) from exc
    return parse_content(data, source=path)
