"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en la construcción: un `ContentModel` que existe es un
  contenido que se puede renderizar.
- Es la única fuente de verdad que ambos validadores (estático y en vivo)
  vuelven a comprobar sobre el artefacto.

Nota:
- Estos modelos describen *qué* contiene la página, no *cómo* se pinta.
"""

from __future__ import annotations

from collections import Counter
from typing import Annotated, Literal, Union

from pydantic import AfterValidator, BaseModel, Field, model_validator
from pydantic.config import ConfigDict


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty or whitespace")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]

_HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"
_SECTION_ID = r"^[A-Za-z][A-Za-z0-9_-]*$"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class AssetRef(_Frozen):
    """Referencia con nombre a un fichero estático (imagen, icono).

    Invariante de accesibilidad: `alt_text` nunca está vacío.
    """

    logical_name: NonBlankStr = Field(
        ...,
        max_length=64,
        description="Nombre lógico estable (p.ej. 'cover', 'subsidy', 'favicon').",
    )
    public_path: str = Field(
        ...,
        pattern=r"^/[^\s]+$",
        description="Ruta pública absoluta dentro del sitio (p.ej. '/portada.jpg').",
    )
    alt_text: NonBlankStr = Field(
        ...,
        description="Texto alternativo; se emite tal cual en el atributo alt.",
    )

    @model_validator(mode="after")
    def _no_parent_segments(self) -> "AssetRef":
        if ".." in self.public_path.split("/"):
            raise ValueError(f"public_path must not contain '..': {self.public_path}")
        return self

    @property
    def relative_path(self) -> str:
        """Ruta relativa al directorio de salida."""

        return self.public_path.lstrip("/")


FAVICON = AssetRef(logical_name="favicon", public_path="/favicon.ico", alt_text="Icono del sitio")


class HoursEntry(_Frozen):
    label: NonBlankStr = Field(..., description="Días a los que aplica (p.ej. 'Lunes a Viernes').")
    schedule: NonBlankStr = Field(..., description="Franja(s) horaria(s) tal cual se muestran.")


class HeaderSection(_Frozen):
    """Cabecera con la imagen de portada. No tiene h2."""

    kind: Literal["header"] = "header"
    id: str = Field(..., pattern=_SECTION_ID)
    cover_image: AssetRef

    @property
    def alt_text(self) -> str:
        return self.cover_image.alt_text


class AboutSection(_Frozen):
    kind: Literal["about"] = "about"
    id: str = Field(..., pattern=_SECTION_ID)
    heading: NonBlankStr
    body_text: NonBlankStr = Field(
        ...,
        description="Descripción de la empresa; párrafos separados por una línea en blanco.",
    )

    def paragraphs(self) -> list[str]:
        return [p.strip() for p in self.body_text.split("\n\n") if p.strip()]


class ContactSection(_Frozen):
    kind: Literal["contact"] = "contact"
    id: str = Field(..., pattern=_SECTION_ID)
    heading: NonBlankStr
    address: NonBlankStr = Field(..., description="Dirección postal, una línea por renglón.")
    phone: NonBlankStr
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    hours_heading: NonBlankStr = Field(..., description="Título del bloque de horario (h3).")
    hours: list[HoursEntry] = Field(..., min_length=1)

    def address_lines(self) -> list[str]:
        return [line.strip() for line in self.address.splitlines() if line.strip()]

    @property
    def phone_href(self) -> str:
        digits = "".join(ch for ch in self.phone if ch.isdigit() or ch == "+")
        return f"tel:{digits}"


class MapSection(_Frozen):
    kind: Literal["map"] = "map"
    id: str = Field(..., pattern=_SECTION_ID)
    heading: NonBlankStr
    embed_url: str = Field(..., pattern=r"^https://\S+/maps/embed\S*$")
    width: NonBlankStr = "100%"
    height: NonBlankStr = "450"
    lazy_load: bool = True
    title: str | None = Field(default=None, description="Título accesible del iframe.")

    @property
    def iframe_title(self) -> str:
        return self.title or self.heading


class SubsidiesSection(_Frozen):
    kind: Literal["subsidies"] = "subsidies"
    id: str = Field(..., pattern=_SECTION_ID)
    heading: NonBlankStr
    image: AssetRef
    caption: NonBlankStr


Section = Annotated[
    Union[HeaderSection, AboutSection, ContactSection, MapSection, SubsidiesSection],
    Field(discriminator="kind"),
]

SECTION_KINDS: tuple[str, ...] = ("header", "about", "contact", "map", "subsidies")

# (mínimo, máximo) de apariciones por tipo de sección.
_CARDINALITY: dict[str, tuple[int, int]] = {
    "header": (1, 1),
    "about": (1, 1),
    "contact": (1, 1),
    "map": (0, 1),
    "subsidies": (0, 1),
}


class FooterInfo(_Frozen):
    copyright_year: int = Field(..., ge=1900, le=9999)
    owner_name: NonBlankStr
    rights_notice: NonBlankStr


class Theme(_Frozen):
    """Paleta que se inyecta como custom properties CSS."""

    primary_color: str = Field(default="#2e7d32", pattern=_HEX_COLOR)
    secondary_color: str = Field(default="#8d6e63", pattern=_HEX_COLOR)
    text_color: str = Field(default="#222222", pattern=_HEX_COLOR)
    background_color: str = Field(default="#fdfbf5", pattern=_HEX_COLOR)

    @model_validator(mode="after")
    def _contrast(self) -> "Theme":
        if _expand_hex(self.text_color) == _expand_hex(self.background_color):
            raise ValueError("text_color and background_color must differ")
        return self


def _expand_hex(color: str) -> str:
    value = color.lower().lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return value


class ContentModel(_Frozen):
    """Agregado raíz: todo lo que aparece en la página.

    Se construye una vez desde datos estáticos y no cambia después; el
    renderer lo consume para producir el artefacto.
    """

    title: NonBlankStr = Field(..., max_length=200, description="Texto exacto del <title>.")
    locale: str = Field(..., pattern=r"^[a-z]{2,3}(-[A-Za-z0-9]{2,8})*$", description="Valor de html[lang].")
    description: str = Field(default="", max_length=300, description="Meta description (SEO).")
    sections: list[Section] = Field(..., min_length=1)
    footer: FooterInfo
    theme: Theme = Field(default_factory=Theme)

    @model_validator(mode="after")
    def _check_sections(self) -> "ContentModel":
        ids = Counter(section.id for section in self.sections)
        duplicated = sorted(i for i, n in ids.items() if n > 1)
        if duplicated:
            raise ValueError(f"duplicated section id(s): {', '.join(duplicated)}")

        kinds = Counter(section.kind for section in self.sections)
        for kind, (low, high) in _CARDINALITY.items():
            if not low <= kinds[kind] <= high:
                expected = str(low) if low == high else f"{low}..{high}"
                raise ValueError(f"expected {expected} '{kind}' section(s), got {kinds[kind]}")

        if self.sections[0].kind != "header":
            raise ValueError("the header section must come first")

        paths: dict[str, str] = {FAVICON.logical_name: FAVICON.public_path}
        for ref in self.asset_refs():
            known = paths.setdefault(ref.logical_name, ref.public_path)
            if known != ref.public_path:
                raise ValueError(
                    f"asset {ref.logical_name!r} points to both {known} and {ref.public_path}"
                )
        return self

    @property
    def header(self) -> HeaderSection:
        return next(s for s in self.sections if isinstance(s, HeaderSection))

    @property
    def main_sections(self) -> list[Section]:
        """Secciones que van dentro de <main>, en orden de documento."""

        return [s for s in self.sections if not isinstance(s, HeaderSection)]

    def section(self, section_id: str) -> Section:
        for s in self.sections:
            if s.id == section_id:
                return s
        raise KeyError(section_id)

    def asset_refs(self) -> list[AssetRef]:
        """Todos los `AssetRef` del contenido, en orden de documento."""

        refs: list[AssetRef] = []
        for s in self.sections:
            if isinstance(s, HeaderSection):
                refs.append(s.cover_image)
            elif isinstance(s, SubsidiesSection):
                refs.append(s.image)
        return refs

    def expected_h2_count(self) -> int:
        return len(self.main_sections)

    def expected_h3_count(self) -> int:
        return sum(1 for s in self.sections if isinstance(s, ContactSection))
