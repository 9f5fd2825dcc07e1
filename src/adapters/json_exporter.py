"""Exportación JSON de reportes de validación.

Por qué JSON:
- Interoperabilidad con CI y otras herramientas.
- Conserva esperado/real de cada comprobación sin depender de la consola.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.checks import ValidationReport


def export_report_json(*, report: ValidationReport, output_path: Path) -> Path:
    """Exporta el reporte a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "validator": report.validator,
        "ok": report.ok,
        "total": len(report.results),
        "failed": len(report.failures),
        "results": [r.model_dump(mode="json") for r in report.results],
    }
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
