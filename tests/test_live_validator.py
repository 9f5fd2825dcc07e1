"""
Live validator against the fake browser in `fakes.py`.
"""

import pytest
from bs4 import BeautifulSoup

from core.interfaces.browser import DESKTOP, MOBILE, BrowserDriver, BrowserPage
from core.services.live_validator import GROUPS, validate_live
from fakes import FakeDriver

URL = "http://127.0.0.1:8000/"


@pytest.fixture
def driver(html):
    return FakeDriver(html)


def run(driver, content, **kwargs):
    return validate_live(url=URL, content=content, driver=driver, **kwargs)


def failed_names(report, scenario=None):
    return [r.name for r in report.failures if scenario is None or r.scenario == scenario]


def test_fakes_satisfy_the_protocols(driver):
    assert isinstance(driver, BrowserDriver)
    with driver.open_page(DESKTOP) as page:
        assert isinstance(page, BrowserPage)


def test_healthy_page_passes_in_every_scenario(driver, content):
    report = run(driver, content)

    assert report.ok, [r.model_dump() for r in report.failures]
    assert driver.opened == ["desktop", "mobile"]
    for scenario in ("desktop", "mobile"):
        assert report.group_passed("navigation", scenario=scenario)
        for group in GROUPS:
            if group != "layout":
                assert report.group_passed(group, scenario=scenario), (scenario, group)


def test_layout_is_only_checked_on_mobile(driver, content):
    report = run(driver, content)
    assert report.get("cover-fits-viewport", scenario="mobile").passed
    with pytest.raises(KeyError):
        report.get("cover-fits-viewport", scenario="desktop")


def test_section_text_is_scoped(driver, content):
    report = run(driver, content, scenarios=(DESKTOP,))
    assert report.get("about-h2").actual == "Sobre Nosotros"
    assert report.get("contact-h3").actual == "Horario Comercial"
    assert report.get("contact-text-2").passed
    assert report.get("footer-copyright").passed


def test_timeout_fails_only_that_scenario(driver, content):
    driver.timeouts.add("mobile")
    report = run(driver, content)

    mobile = [r for r in report.results if r.scenario == "mobile"]
    assert [(r.name, r.passed) for r in mobile] == [("network-idle", False)]
    assert failed_names(report) == ["network-idle"]
    assert report.group_passed("title", scenario="desktop")


def test_scenario_crash_does_not_stop_the_others(driver, content):
    driver.crashes.add("desktop")
    report = run(driver, content)

    assert failed_names(report, "desktop") == ["unexpected-error"]
    assert report.get("unexpected-error", scenario="desktop").actual == "RuntimeError"
    assert failed_names(report, "mobile") == []
    assert driver.opened == ["mobile"]


def test_console_errors_fail_performance(driver, content):
    driver.console.append("Uncaught TypeError: x is undefined")
    report = run(driver, content, scenarios=(DESKTOP,))

    assert failed_names(report) == ["console-errors"]
    assert report.get("console-errors").actual == ["Uncaught TypeError: x is undefined"]


def test_failed_requests_fail_performance(driver, content):
    driver.failed.append("GET http://127.0.0.1:8000/avalem.webp net::ERR_FAILED")
    report = run(driver, content, scenarios=(DESKTOP,))
    assert failed_names(report) == ["failed-requests"]


def test_slow_load_fails_load_time(driver, content):
    driver.elapsed_ms = 3500.0
    report = run(driver, content, scenarios=(DESKTOP,))

    assert failed_names(report) == ["load-time"]
    assert report.get("network-idle").passed


def test_load_threshold_is_configurable(driver, content):
    driver.elapsed_ms = 3500.0
    report = run(driver, content, scenarios=(DESKTOP,), load_threshold_ms=5000)
    assert report.ok


def test_hidden_section_fails_visibility(driver, content):
    driver.hidden.add("#subsidies")
    report = run(driver, content, scenarios=(DESKTOP,))

    assert failed_names(report) == ["visible:#subsidies"]
    assert report.group_passed("text")


def test_equal_colours_fail_contrast(driver, content):
    driver.styles = {"background-color": "rgb(0, 0, 0)", "color": "rgb(0, 0, 0)"}
    report = run(driver, content, scenarios=(DESKTOP,))
    assert failed_names(report) == ["contrast"]


def test_text_outside_its_section_does_not_count(content, html):
    soup = BeautifulSoup(html, "html.parser")
    phone = soup.select_one("#contact p.phone")
    soup.footer.append(phone.extract())
    report = run(FakeDriver(str(soup)), content, scenarios=(DESKTOP,))

    assert "contact-text-2" in failed_names(report)
    assert report.get("contact-text-0").passed


def test_wide_cover_fails_mobile_layout(driver, content):
    driver.box_widths["header img.cover"] = 1200
    report = run(driver, content)

    assert failed_names(report, "mobile") == ["cover-fits-viewport"]
    assert failed_names(report, "desktop") == []


def test_broken_image_is_reported_by_src(driver, content):
    driver.broken_images.add("/avalem.webp")
    report = run(driver, content, scenarios=(MOBILE,))

    assert failed_names(report) == ["image-loaded:/avalem.webp"]
    assert report.get("image-loaded:/portada.jpg").passed


def test_visibility_is_queried_once_per_check(driver, content):
    run(driver, content, scenarios=(DESKTOP,))

    assert driver.visibility_queries[("desktop", "#subsidies")] == 1
    assert driver.visibility_queries[("desktop", "header img.cover")] == 1
    # visibility group and accessibility group
    assert driver.visibility_queries[("desktop", "main")] == 2
