"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Build, validadores y doctor leen la misma configuración.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.artifact import BuildMode


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "escaparate"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "escaparate"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "escaparate"
    return Path.home() / ".config" / "escaparate"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="ESCAPARATE_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    content_path: Path = Field(
        default=Path("data/content.json"),
        description="JSON con el contenido de la página.",
    )
    public_dir: Path = Field(
        default=Path("public"),
        description="Directorio con los ficheros estáticos fuente (imágenes, favicon).",
    )
    output_dir: Path = Field(
        default=Path("dist"),
        description="Directorio de salida del build.",
    )
    artifact_name: str = Field(
        default="index.html",
        min_length=1,
        description="Nombre del HTML generado dentro de output_dir.",
    )
    build_mode: BuildMode = Field(
        default=BuildMode.PRODUCTION,
        description="production (minificado) o development.",
    )
    asset_max_concurrency: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Copias de assets simultáneas.",
    )

    # Validación en vivo
    live_url: str | None = Field(
        default=None,
        description="URL ya servida a validar. Si falta, se sirve output_dir en local.",
    )
    live_host: str = Field(default="127.0.0.1", min_length=1)
    live_port: int = Field(default=0, ge=0, le=65535, description="0 = puerto libre aleatorio.")
    browser: str = Field(default="chromium", pattern=r"^(chromium|firefox|webkit)$")
    headless: bool = Field(default=True)
    live_timeout_ms: int = Field(
        default=3000,
        gt=0,
        description="Timeout de navegación hasta network-idle, por escenario (ms).",
    )
    load_threshold_ms: int = Field(
        default=3000,
        gt=0,
        description="Tiempo de carga máximo aceptado (ms).",
    )

    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @property
    def artifact_path(self) -> Path:
        return self.output_dir / self.artifact_name
