"""Capacidad mínima de un motor de render real.

El validador en vivo solo necesita navegar, esperar a network-idle y
consultar atributos, texto y estilos computados. Todo lo demás (qué motor,
cómo se lanza) vive en adaptadores.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Viewport:
    name: str
    width: int
    height: int
    is_mobile: bool = False


DESKTOP = Viewport(name="desktop", width=1280, height=800)
MOBILE = Viewport(name="mobile", width=390, height=844, is_mobile=True)


@dataclass(frozen=True)
class ImageState:
    src: str
    alt: str | None
    complete: bool
    natural_width: int


@runtime_checkable
class BrowserPage(Protocol):
    """Una pestaña aislada (un escenario)."""

    viewport: Viewport

    def goto(self, url: str, *, timeout_ms: int) -> float:
        """Navega y espera a network-idle. Devuelve los ms transcurridos.

        Lanza `NavigationTimeoutError` si se supera `timeout_ms`.
        """

        ...

    def title(self) -> str:
        ...

    def count(self, selector: str) -> int:
        ...

    def is_visible(self, selector: str) -> bool:
        """Visibilidad computada (display/visibility/caja), no solo presencia en el DOM."""

        ...

    def get_attribute(self, selector: str, name: str) -> str | None:
        ...

    def inner_text(self, selector: str) -> str:
        ...

    def computed_style(self, selector: str, prop: str) -> str:
        ...

    def box_width(self, selector: str) -> float | None:
        ...

    def images(self) -> list[ImageState]:
        ...

    def console_errors(self) -> list[str]:
        ...

    def failed_requests(self) -> list[str]:
        ...


@runtime_checkable
class BrowserDriver(Protocol):
    def open_page(self, viewport: Viewport) -> AbstractContextManager[BrowserPage]:
        """Abre un contexto nuevo (sin estado compartido) para un escenario."""

        ...
