"""CLI principal (Typer).

Comandos:
- `build`: contenido -> dist/index.html + assets.
- `check`: validación estática del artefacto.
- `live`: validación en un navegador real (sirve dist/ en local si no hay URL).
- `doctor`: diagnóstico del entorno.

Un build fallido termina con código 1 antes de validar nada; una validación
con fallos también sale con 1, pero después de reportar todas las comprobaciones.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_report_json
from adapters.static_server import serve_directory
from cli.doctor import app as doctor_app
from cli.ui_components import build_artifact_panel, build_report_table, build_summary_panel, print_banner
from core.config import AppSettings
from core.content_loader import load_content, resolve_project_path
from core.domain.artifact import BuildArtifact, BuildMode
from core.domain.checks import ValidationReport
from core.errors import EscaparateError
from core.services.site_builder import BuildRequest, build_site
from core.services.static_validator import validate_static

app = typer.Typer(no_args_is_help=True, help="Static business page generator with static and live validation.")
app.add_typer(doctor_app, name="doctor")

_console = Console()
logger = logging.getLogger("escaparate")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _settings(
    *,
    content: Optional[Path] = None,
    public: Optional[Path] = None,
    out: Optional[Path] = None,
    dev: Optional[bool] = None,
) -> AppSettings:
    overrides: dict[str, object] = {}
    if content is not None:
        overrides["content_path"] = content
    if public is not None:
        overrides["public_dir"] = public
    if out is not None:
        overrides["output_dir"] = out
    if dev is not None:
        overrides["build_mode"] = BuildMode.from_bool(dev)
    settings = AppSettings(**overrides)
    _setup_logging(settings.log_level)
    return settings


def _artifact_for(settings: AppSettings) -> BuildArtifact:
    """Handle del artefacto ya construido (para validar sin reconstruir)."""

    return BuildArtifact(
        output_dir=settings.output_dir,
        html_name=settings.artifact_name,
        mode=settings.build_mode,
    )


def _report(report: ValidationReport, *, json_path: Optional[Path], verbose: bool) -> None:
    if verbose or not report.ok:
        _console.print(build_report_table(report, only_failures=not verbose))
    _console.print(build_summary_panel(report))
    if json_path is not None:
        export_report_json(report=report, output_path=json_path)
        _console.print(f"[green]Report saved to:[/green] {json_path}")
    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def build(
    content: Optional[Path] = typer.Option(None, "--content", "-c", help="Content JSON file."),
    public: Optional[Path] = typer.Option(None, "--public", "-p", help="Directory with source static assets."),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory."),
    dev: bool = typer.Option(False, "--dev", help="Development build (no minification)."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Skip the banner."),
) -> None:
    """Render the page and copy its assets into the output directory."""

    settings = _settings(content=content, public=public, out=out, dev=dev)
    if not quiet:
        print_banner(_console)
    try:
        model = load_content(settings.content_path)
        request = BuildRequest.from_settings(model, settings)
        request.public_dir = resolve_project_path(settings.public_dir)
        artifact = build_site(request)
    except EscaparateError as exc:
        _console.print(f"[bold red]Build failed:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    _console.print(build_artifact_panel(artifact))


@app.command()
def check(
    content: Optional[Path] = typer.Option(None, "--content", "-c", help="Content JSON file."),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory to inspect."),
    dev: bool = typer.Option(False, "--dev", help="Artifact was built in development mode."),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Also write the report as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show passing checks too."),
) -> None:
    """Static validation: inspect the built HTML and output directory."""

    settings = _settings(content=content, out=out, dev=dev)
    try:
        model = load_content(settings.content_path)
    except EscaparateError as exc:
        _console.print(f"[bold red]Invalid content:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    report = validate_static(artifact=_artifact_for(settings), content=model)
    _report(report, json_path=json_path, verbose=verbose)


@app.command()
def live(
    content: Optional[Path] = typer.Option(None, "--content", "-c", help="Content JSON file."),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory to serve."),
    url: Optional[str] = typer.Option(None, "--url", help="Validate an already served site instead."),
    browser: Optional[str] = typer.Option(None, "--browser", help="chromium, firefox or webkit."),
    offline: bool = typer.Option(False, "--offline", help="Stub requests to external origins."),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Also write the report as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show passing checks too."),
) -> None:
    """Live validation in a real browser (desktop and mobile scenarios)."""

    # Import diferido: Playwright solo hace falta para este comando.
    from adapters.playwright_browser import PlaywrightDriver  # noqa: PLC0415
    from core.services.live_validator import validate_live  # noqa: PLC0415

    settings = _settings(content=content, out=out)
    if browser is not None:
        settings = settings.model_copy(update={"browser": browser})
    try:
        model = load_content(settings.content_path)
    except EscaparateError as exc:
        _console.print(f"[bold red]Invalid content:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    target_url = url or settings.live_url
    server = nullcontext(target_url) if target_url else serve_directory(
        settings.output_dir, host=settings.live_host, port=settings.live_port
    )
    try:
        with server as base_url:
            response = httpx.get(base_url, timeout=settings.live_timeout_ms / 1000, follow_redirects=True)
            if response.status_code != 200 or "<html" not in response.text.lower():
                _console.print(f"[bold red]Root path did not return the artifact:[/bold red] HTTP {response.status_code}")
                raise typer.Exit(code=1)

            driver = PlaywrightDriver(
                browser=settings.browser,
                headless=settings.headless,
                timeout_ms=settings.live_timeout_ms,
                stub_external=offline,
            ).for_url(base_url)
            with driver:
                report = validate_live(
                    url=base_url,
                    content=model,
                    driver=driver,
                    timeout_ms=settings.live_timeout_ms,
                    load_threshold_ms=settings.load_threshold_ms,
                )
    except (FileNotFoundError, httpx.HTTPError) as exc:
        _console.print(f"[bold red]Cannot reach the site:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    _report(report, json_path=json_path, verbose=verbose)


def run() -> None:
    app()
