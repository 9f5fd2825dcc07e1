"""
Content model validation: every malformed model is rejected at construction,
before anything is rendered.
"""

import json

import pytest
from pydantic import ValidationError

from core.content_loader import load_content, parse_content
from core.domain.models import ContentModel, HeaderSection
from core.errors import ContentValidationError


def _section(data, kind):
    return next(s for s in data["sections"] if s["kind"] == kind)


def test_real_content_is_valid(content):
    assert content.title == "Arturo Soto SA - Patatas y Cebollas"
    assert content.locale == "es"
    assert [s.kind for s in content.sections] == ["header", "about", "contact", "map", "subsidies"]


def test_header_alt_text_comes_from_cover_image(content):
    assert isinstance(content.header, HeaderSection)
    assert content.header.alt_text == "Arturo Soto SA"


def test_asset_refs_in_document_order(content):
    assert [r.logical_name for r in content.asset_refs()] == ["cover", "subsidy"]
    assert [r.public_path for r in content.asset_refs()] == ["/portada.jpg", "/avalem.webp"]


def test_expected_heading_counts(content):
    assert content.expected_h2_count() == 4
    assert content.expected_h3_count() == 1


def test_contact_helpers(content):
    contact = content.section("contact")
    assert contact.address_lines() == ["Vía Camino, 51", "46229 Picassent, Valencia"]
    assert contact.phone_href == "tel:961272855"


def test_model_is_immutable(content):
    with pytest.raises(ValidationError):
        content.title = "Otro título"


def test_duplicated_section_id_is_rejected(content_data):
    _section(content_data, "map")["id"] = "contact"
    with pytest.raises(ValidationError, match="duplicated section id"):
        ContentModel.model_validate(content_data)


@pytest.mark.parametrize("alt", ["", "   "])
def test_empty_alt_text_is_rejected(content_data, alt):
    _section(content_data, "subsidies")["image"]["alt_text"] = alt
    with pytest.raises(ValidationError):
        ContentModel.model_validate(content_data)


def test_empty_required_field_is_rejected(content_data):
    _section(content_data, "contact")["phone"] = ""
    with pytest.raises(ValidationError):
        ContentModel.model_validate(content_data)


def test_missing_required_variant_is_rejected(content_data):
    content_data["sections"] = [s for s in content_data["sections"] if s["kind"] != "contact"]
    with pytest.raises(ValidationError, match="'contact'"):
        ContentModel.model_validate(content_data)


def test_optional_variants_may_be_absent(content_data):
    content_data["sections"] = [s for s in content_data["sections"] if s["kind"] not in ("map", "subsidies")]
    model = ContentModel.model_validate(content_data)
    assert model.expected_h2_count() == 2
    assert [r.logical_name for r in model.asset_refs()] == ["cover"]


def test_duplicated_variant_is_rejected(content_data):
    extra_map = dict(_section(content_data, "map"), id="map-2")
    content_data["sections"].append(extra_map)
    with pytest.raises(ValidationError, match="'map'"):
        ContentModel.model_validate(content_data)


def test_header_must_come_first(content_data):
    content_data["sections"].append(content_data["sections"].pop(0))
    with pytest.raises(ValidationError, match="header section must come first"):
        ContentModel.model_validate(content_data)


def test_empty_sections_are_rejected(content_data):
    content_data["sections"] = []
    with pytest.raises(ValidationError):
        ContentModel.model_validate(content_data)


def test_unknown_section_kind_is_rejected(content_data):
    content_data["sections"].append({"kind": "gallery", "id": "gallery", "heading": "Galería"})
    with pytest.raises(ValidationError):
        ContentModel.model_validate(content_data)


def test_map_must_use_an_embed_url(content_data):
    _section(content_data, "map")["embed_url"] = "https://www.google.com/maps/place/Picassent"
    with pytest.raises(ValidationError):
        ContentModel.model_validate(content_data)


@pytest.mark.parametrize("path", ["portada.jpg", "/../secret.jpg", "/with space.jpg"])
def test_public_path_must_be_absolute_and_safe(content_data, path):
    _section(content_data, "header")["cover_image"]["public_path"] = path
    with pytest.raises(ValidationError):
        ContentModel.model_validate(content_data)


def test_logical_name_must_map_to_a_single_path(content_data):
    _section(content_data, "subsidies")["image"]["logical_name"] = "cover"
    with pytest.raises(ValidationError, match="points to both"):
        ContentModel.model_validate(content_data)


def test_theme_requires_contrast(content_data):
    content_data["theme"]["background_color"] = "#222"
    with pytest.raises(ValidationError, match="must differ"):
        ContentModel.model_validate(content_data)


def test_invalid_section_id_is_rejected(content_data):
    _section(content_data, "about")["id"] = "sobre nosotros"
    with pytest.raises(ValidationError):
        ContentModel.model_validate(content_data)


def test_parse_content_wraps_schema_errors(content_data):
    _section(content_data, "subsidies")["image"]["alt_text"] = ""
    with pytest.raises(ContentValidationError) as excinfo:
        parse_content(content_data)
    assert excinfo.value.errors
    assert "alt_text" in str(excinfo.value)


def test_load_content_reports_invalid_json(tmp_path):
    path = tmp_path / "content.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ContentValidationError, match="invalid JSON"):
        load_content(path)


def test_load_content_reports_missing_file(tmp_path):
    with pytest.raises(ContentValidationError, match="not found"):
        load_content(tmp_path / "missing.json")


def test_load_content_roundtrips_source(tmp_path, content_data):
    path = tmp_path / "content.json"
    path.write_text(json.dumps(content_data, ensure_ascii=False), encoding="utf-8")
    model = load_content(path)
    assert model.footer.copyright_year == 2024
    assert model.footer.owner_name == "Arturo Soto SA"
