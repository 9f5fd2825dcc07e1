"""Handle inmutable del artefacto generado.

Por qué un handle explícito:
- Los dos validadores leen el mismo build sin estado global compartido.
- Cada validador es reproducible de forma aislada (se le pasa el handle y,
  en tests, un directorio virtual).
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class BuildMode(str, Enum):
    """Modo de build: producción minifica, desarrollo conserva el formato."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @classmethod
    def from_bool(cls, dev: bool) -> "BuildMode":
        return cls.DEVELOPMENT if dev else cls.PRODUCTION


class BuildArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    output_dir: Path = Field(..., description="Directorio de salida del build.")
    html_name: str = Field(default="index.html", min_length=1, description="Nombre del HTML dentro de output_dir.")
    mode: BuildMode = Field(default=BuildMode.PRODUCTION)
    assets: dict[str, str] = Field(
        default_factory=dict,
        description="Manifest resuelto: nombre lógico -> ruta pública.",
    )
    sha256: str | None = Field(default=None, description="Hash del HTML escrito (trazabilidad).")

    @property
    def html_path(self) -> Path:
        return self.output_dir / self.html_name
