"""Ejecuta la CLI desde el checkout, sin `pip install -e .`.

    python main.py build
    python main.py check --json reports/static.json

El código vive en `src/`; se añade al path antes de importar la CLI.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Consolas Windows (cp1252) no pueden imprimir "©" ni los acentos del contenido.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
