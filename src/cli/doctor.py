"""Doctor command for environment diagnostics."""

from __future__ import annotations


import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.asset_resolver import collect_refs
from adapters.directories import LocalDirectory
from adapters.site_renderer import SECTION_TEMPLATES, TEMPLATES_DIR
from core.config import AppSettings
from core.content_loader import load_content, resolve_project_path
from core.domain.models import SECTION_KINDS
from core.errors import EscaparateError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(url: str, timeout: float) -> tuple[bool, str]:
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        return response.status_code == 200, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc)


def _check_browser(name: str) -> tuple[bool, str]:
    """Attempt to launch the configured browser to detect missing installs."""

    try:
        from playwright.sync_api import Error as PlaywrightError  # noqa: PLC0415
        from playwright.sync_api import sync_playwright  # noqa: PLC0415
    except ImportError as exc:
        return False, str(exc)

    try:
        with sync_playwright() as p:
            browser = getattr(p, name).launch()
            version = browser.version
            browser.close()
        return True, f"{name} {version}"
    except PlaywrightError as exc:
        return False, str(exc).splitlines()[0]


@app.command()
def run(
    skip_browser: bool = typer.Option(False, "--skip-browser", help="Do not try to launch a browser."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Escaparate Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Content
    content_path = resolve_project_path(settings.content_path)
    model = None
    try:
        model = load_content(content_path)
        table.add_row("Content", "OK", f"{content_path} ({len(model.sections)} sections)")
    except EscaparateError as exc:
        table.add_row("Content", "FAIL", str(exc))

    # Source assets
    public_dir = resolve_project_path(settings.public_dir)
    if model is not None:
        source = LocalDirectory(public_dir)
        missing = [ref.public_path for ref in collect_refs(model.asset_refs()) if not source.has_file(ref.relative_path)]
        if missing:
            table.add_row("Assets", "FAIL", f"missing in {public_dir}: {', '.join(missing)}")
        else:
            table.add_row("Assets", "OK", str(public_dir))

    # Templates
    unhandled = [kind for kind in SECTION_KINDS if kind not in SECTION_TEMPLATES]
    missing_files = [name for name in SECTION_TEMPLATES.values() if not (TEMPLATES_DIR / name).is_file()]
    if unhandled or missing_files:
        table.add_row("Templates", "FAIL", ", ".join(unhandled + missing_files))
    else:
        table.add_row("Templates", "OK", str(TEMPLATES_DIR))

    # Build output
    artifact = settings.artifact_path
    table.add_row("Artifact", "OK" if artifact.is_file() else "MISSING", str(artifact))

    # Served site (optional)
    if settings.live_url:
        ok_http, detail_http = _check_http(settings.live_url, settings.live_timeout_ms / 1000)
        table.add_row("Live URL", "OK" if ok_http else "FAIL", f"{settings.live_url} -> {detail_http}")
    else:
        table.add_row("Live URL", "OPTIONAL", "Not set -> `live` serves the output directory locally")

    # Browser
    ok_browser = True
    if not skip_browser:
        ok_browser, detail_browser = _check_browser(settings.browser)
        table.add_row("Browser", "OK" if ok_browser else "FAIL", detail_browser)

    _console.print(table)

    if not ok_browser:
        _console.print(
            f"\n[yellow]Note:[/yellow] install the browser with `playwright install {settings.browser}` "
            "to enable `escaparate live`."
        )
