"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `check`, `live` y `doctor`.
"""

from __future__ import annotations

import json

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.artifact import BuildArtifact
from core.domain.checks import ValidationReport


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("ESCAPARATE", style="bold green")
    subtitle = Text("Contenido • Render • Validación", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="green", padding=(1, 4)))


def _fmt(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def build_report_table(report: ValidationReport, *, only_failures: bool = False) -> Table:
    """Tabla por comprobación: grupo, nombre, estado, esperado y real."""

    table = Table(title=f"{report.validator.capitalize()} validation")
    if any(r.scenario for r in report.results):
        table.add_column("Scenario", style="magenta", no_wrap=True)
    table.add_column("Group", style="cyan", no_wrap=True)
    table.add_column("Check", style="white")
    table.add_column("Status", no_wrap=True)
    table.add_column("Expected", style="dim")
    table.add_column("Actual", style="dim")

    with_scenario = len(table.columns) == 6
    for r in report.results:
        if only_failures and r.passed:
            continue
        status = Text("PASS", style="green") if r.passed else Text("FAIL", style="bold red")
        row = [r.group, r.name, status, _fmt(r.expected), _fmt(r.actual if r.detail is None else f"{_fmt(r.actual)} ({r.detail})")]
        if with_scenario:
            row.insert(0, r.scenario or "-")
        table.add_row(*row)
    return table


def build_summary_panel(report: ValidationReport) -> Panel:
    failed = len(report.failures)
    total = len(report.results)
    style = "green" if report.ok else "red"
    body = Text()
    body.append(f"{total - failed}/{total} checks passed\n", style=f"bold {style}")
    for group in report.groups():
        mark = "✔" if report.group_passed(group) else "✘"
        body.append(f"{mark} {group}\n", style="green" if report.group_passed(group) else "red")
    return Panel(body, title=f"{report.validator} validation", border_style=style)


def build_artifact_panel(artifact: BuildArtifact) -> Panel:
    body = Text()
    body.append(f"{artifact.html_path}\n", style="bold")
    body.append(f"mode: {artifact.mode.value}\n")
    for name, path in sorted(artifact.assets.items()):
        body.append(f"  {name}: {path}\n", style="dim")
    if artifact.sha256:
        body.append(f"sha256: {artifact.sha256[:16]}…", style="dim")
    return Panel(body, title="Build", border_style="green")
