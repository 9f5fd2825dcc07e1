"""Contrato de directorio (salida del build y fuente de assets).

Por qué Protocol:
- El build y el validador estático leen/escriben rutas relativas sin saber si
  detrás hay disco o memoria.
- Permite tests sin sistema de ficheros real.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Directory(Protocol):
    """Directorio raíz con rutas relativas estilo POSIX ('favicon.ico', 'img/a.png')."""

    def exists(self) -> bool:
        """¿Existe el directorio raíz?"""

        ...

    def ensure(self) -> None:
        """Crea el directorio raíz si no existe."""

        ...

    def has_file(self, relative: str) -> bool:
        ...

    def read_bytes(self, relative: str) -> bytes:
        ...

    def read_text(self, relative: str) -> str:
        ...

    def write_bytes(self, relative: str, data: bytes) -> None:
        ...

    def write_text(self, relative: str, text: str) -> None:
        ...

    def list_files(self) -> list[str]:
        """Rutas relativas de todos los ficheros, ordenadas."""

        ...
