"""Taxonomía de errores del build.

Por qué una jerarquía propia:
- La CLI distingue "el build falló" (fatal, no se validan artefactos) de
  "una comprobación falló" (se reporta, no aborta nada).
- Ningún error se reintenta: se propaga tal cual a quien invoca.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence


class EscaparateError(Exception):
    """Raíz de todos los errores del proyecto."""


class ContentValidationError(EscaparateError, ValueError):
    """El contenido fuente no produce un `ContentModel` válido."""

    def __init__(self, message: str, *, source: Path | None = None, errors: Sequence[dict[str, Any]] = ()) -> None:
        self.source = source
        self.errors = list(errors)
        prefix = f"{source}: " if source is not None else ""
        super().__init__(prefix + message)


class MissingAssetError(EscaparateError):
    """Un asset referenciado no existe (error fatal de build)."""

    def __init__(self, missing: Sequence[tuple[str, str]]) -> None:
        self.missing = list(missing)
        names = ", ".join(f"{name} ({path})" for name, path in self.missing)
        super().__init__(f"Missing asset(s): {names}")

    @property
    def logical_names(self) -> list[str]:
        return [name for name, _ in self.missing]


class RenderError(EscaparateError):
    """El renderer no puede resolver una referencia a un path público."""


class UnhandledVariantError(RenderError):
    """Tipo de sección sin regla de render asociada."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"No render rule for section kind {kind!r}")


class NavigationTimeoutError(EscaparateError):
    """La navegación del navegador no alcanzó network-idle a tiempo."""

    def __init__(self, url: str, timeout_ms: int) -> None:
        self.url = url
        self.timeout_ms = timeout_ms
        super().__init__(f"Navigation to {url} did not settle within {timeout_ms} ms")
