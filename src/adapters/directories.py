"""Implementaciones del contrato `Directory`.

- `LocalDirectory`: disco real (build y CLI).
- `MemoryDirectory`: directorio virtual; los tests del validador estático y del
  resolver de assets lo usan para no tocar el sistema de ficheros.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath


def _normalize(relative: str) -> str:
    path = PurePosixPath(relative.lstrip("/"))
    if not path.parts or ".." in path.parts:
        raise ValueError(f"invalid relative path: {relative!r}")
    return path.as_posix()


class LocalDirectory:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"LocalDirectory({str(self.root)!r})"

    def _path(self, relative: str) -> Path:
        return self.root / _normalize(relative)

    def exists(self) -> bool:
        return self.root.is_dir()

    def ensure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def has_file(self, relative: str) -> bool:
        return self._path(relative).is_file()

    def read_bytes(self, relative: str) -> bytes:
        return self._path(relative).read_bytes()

    def read_text(self, relative: str) -> str:
        return self._path(relative).read_text(encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> None:
        target = self._path(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def write_text(self, relative: str, text: str) -> None:
        target = self._path(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")

    def list_files(self) -> list[str]:
        if not self.exists():
            return []
        return sorted(p.relative_to(self.root).as_posix() for p in self.root.rglob("*") if p.is_file())


class MemoryDirectory:
    """Directorio en memoria. `present=False` simula un directorio inexistente."""

    def __init__(self, files: dict[str, bytes | str] | None = None, *, present: bool = True) -> None:
        self._present = present
        self._files: dict[str, bytes] = {}
        for name, data in (files or {}).items():
            self._files[_normalize(name)] = data.encode("utf-8") if isinstance(data, str) else data

    def __repr__(self) -> str:
        return f"MemoryDirectory({len(self._files)} files)"

    def exists(self) -> bool:
        return self._present

    def ensure(self) -> None:
        self._present = True

    def has_file(self, relative: str) -> bool:
        return self._present and _normalize(relative) in self._files

    def read_bytes(self, relative: str) -> bytes:
        key = _normalize(relative)
        if not self._present or key not in self._files:
            raise FileNotFoundError(relative)
        return self._files[key]

    def read_text(self, relative: str) -> str:
        return self.read_bytes(relative).decode("utf-8")

    def write_bytes(self, relative: str, data: bytes) -> None:
        self._present = True
        self._files[_normalize(relative)] = bytes(data)

    def write_text(self, relative: str, text: str) -> None:
        self.write_bytes(relative, text.encode("utf-8"))

    def remove(self, relative: str) -> None:
        del self._files[_normalize(relative)]

    def list_files(self) -> list[str]:
        return sorted(self._files) if self._present else []
