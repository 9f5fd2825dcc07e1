"""
Static validator: every assertion group runs and reports on its own.
"""

import json

import pytest

from adapters.directories import MemoryDirectory
from adapters.json_exporter import export_report_json
from adapters.site_renderer import render_site_html
from core.content_loader import parse_content
from core.domain.artifact import BuildArtifact, BuildMode
from core.services.site_builder import BuildRequest, build_site
from core.services.static_validator import GROUPS, validate_static

ALL_GROUPS = list(GROUPS)


def _tampered(memory_build, transform):
    artifact, target = memory_build
    target.write_text("index.html", transform(target.read_text("index.html")))
    return artifact, target


def _build_in_memory(model, public_files):
    target = MemoryDirectory(present=False)
    artifact = build_site(
        BuildRequest(content=model, output_dir="/virtual/dist"),
        source=MemoryDirectory(public_files),
        target=target,
    )
    return artifact, target


def test_real_build_passes_every_group(dist, content):
    report = validate_static(artifact=dist, content=content)
    assert report.ok, [r.model_dump() for r in report.failures]
    assert report.groups() == ALL_GROUPS


def test_memory_build_passes_every_group(memory_build, content):
    artifact, target = memory_build
    report = validate_static(artifact=artifact, content=content, directory=target)
    assert report.ok, [r.model_dump() for r in report.failures]


def test_scenario_d_missing_asset_fails_only_the_asset_group(memory_build, content):
    artifact, target = memory_build
    target.remove("avalem.webp")

    report = validate_static(artifact=artifact, content=content, directory=target)

    assert not report.ok
    assert not report.group_passed("assets")
    assert [r.name for r in report.failures] == ["asset-present:subsidy"]
    for group in ALL_GROUPS:
        if group != "assets":
            assert report.group_passed(group), group


def test_missing_output_dir_still_reports_every_group(content):
    artifact = BuildArtifact(output_dir="/nowhere")
    report = validate_static(artifact=artifact, content=content, directory=MemoryDirectory(present=False))

    assert report.groups() == ALL_GROUPS
    assert not report.group_passed("output_dir")
    assert not report.group_passed("artifact")
    assert not report.group_passed("document")
    assert report.get("unexpected-error").actual == "FileNotFoundError"


def test_failure_reports_expected_and_actual(memory_build, content):
    artifact, target = _tampered(
        memory_build, lambda html: html.replace("<title>Arturo Soto SA", "<title>Arturo Soto")
    )
    report = validate_static(artifact=artifact, content=content, directory=target)

    result = report.get("title-text")
    assert not result.passed
    assert result.expected == "Arturo Soto SA - Patatas y Cebollas"
    assert result.actual == "Arturo Soto - Patatas y Cebollas"
    assert report.group_passed("minification")


def test_heading_hierarchy_is_checked(memory_build, content):
    artifact, target = _tampered(
        memory_build, lambda html: html.replace("<h3>Horario Comercial</h3>", "<h2>Horario Comercial</h2>")
    )
    report = validate_static(artifact=artifact, content=content, directory=target)

    assert not report.get("h2-count").passed
    assert report.get("h2-count").actual == 5
    assert not report.get("h3-count").passed
    assert report.group_passed("assets")


def test_contact_text_is_checked_inside_the_section(memory_build, content):
    artifact, target = _tampered(memory_build, lambda html: html.replace("961 27 28 55", "000 00 00 00"))
    report = validate_static(artifact=artifact, content=content, directory=target)

    assert not report.get("contact-phone").passed
    assert report.get("contact-address-0").passed
    assert report.get("contact-address-1").passed


def test_missing_section_is_isolated(memory_build, content):
    artifact, target = _tampered(memory_build, lambda html: html.replace('id="map"', 'id="mapa"'))
    report = validate_static(artifact=artifact, content=content, directory=target)

    assert not report.get("map-error").passed
    assert report.get("subsidies-heading").passed
    assert report.get("footer-rights").passed


def test_unminified_production_output_fails(memory_build, content):
    artifact, target = memory_build
    target.write_text(
        "index.html",
        render_site_html(content=content, assets=artifact.assets, mode=BuildMode.DEVELOPMENT),
    )
    report = validate_static(artifact=artifact, content=content, directory=target)

    assert not report.group_passed("minification")
    assert report.get("no-blank-runs").actual > 0
    assert report.group_passed("sections")


def test_development_artifact_skips_minification(memory_build, content):
    artifact, target = memory_build
    target.write_text(
        "index.html",
        render_site_html(content=content, assets=artifact.assets, mode=BuildMode.DEVELOPMENT),
    )
    dev_artifact = artifact.model_copy(update={"mode": BuildMode.DEVELOPMENT})
    report = validate_static(artifact=dev_artifact, content=content, directory=target)

    assert report.ok, [r.model_dump() for r in report.failures]


@pytest.mark.parametrize("group", ALL_GROUPS)
def test_groups_can_run_alone(memory_build, content, group):
    artifact, target = memory_build
    report = validate_static(artifact=artifact, content=content, directory=target, groups=[group])
    assert report.groups() == [group]
    assert report.ok


def test_report_exports_to_json(memory_build, content, tmp_path):
    artifact, target = memory_build
    target.remove("favicon.ico")
    report = validate_static(artifact=artifact, content=content, directory=target)

    path = export_report_json(report=report, output_path=tmp_path / "reports" / "static.json")
    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload["validator"] == "static"
    assert payload["ok"] is False
    assert payload["failed"] == 1
    assert payload["total"] == len(report.results)
    failed = [r for r in payload["results"] if not r["passed"]]
    assert failed[0]["name"] == "asset-present:favicon"
    assert failed[0]["expected"] == "/favicon.ico"


def test_multiline_alt_survives_production_build(content_data, public_files):
    alt = "Programa de fomento de empleo AVALEM,\n        \n        LABORA Servei Valencià d'Ocupació"
    for section in content_data["sections"]:
        if section["kind"] == "subsidies":
            section["image"]["alt_text"] = alt
    model = parse_content(content_data)
    artifact, target = _build_in_memory(model, public_files)

    report = validate_static(artifact=artifact, content=model, directory=target)

    assert report.ok, [r.model_dump() for r in report.failures]
    assert report.get("alt-matches:subsidy").actual == alt
    assert report.get("no-blank-runs").actual == 0


def test_contact_text_ignores_source_spacing(content_data, public_files):
    for section in content_data["sections"]:
        if section["kind"] == "contact":
            section["address"] = "Vía  Camino,   51\n46229 Picassent, Valencia"
            section["hours"][0]["schedule"] = "7:00–14:00  y  16:00–18:00"
    model = parse_content(content_data)
    artifact, target = _build_in_memory(model, public_files)

    report = validate_static(artifact=artifact, content=model, directory=target)

    assert report.get("contact-address-0").passed
    assert report.get("contact-hours-0-schedule").passed
    assert report.ok, [r.model_dump() for r in report.failures]
