"""Resultados de validación.

Cada comprobación se reporta por separado con su valor esperado y el real;
un fallo nunca impide evaluar el resto.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CheckResult(BaseModel):
    group: str = Field(..., min_length=1, description="Grupo de aserciones (p.ej. 'assets').")
    name: str = Field(..., min_length=1, description="Identificador de la comprobación.")
    passed: bool
    expected: Any = None
    actual: Any = None
    scenario: str | None = Field(default=None, description="Escenario del validador en vivo, si aplica.")
    detail: str | None = None


class ValidationReport(BaseModel):
    validator: str = Field(..., description="'static' o 'live'.")
    results: list[CheckResult] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[CheckResult]:
        return [r for r in self.results if not r.passed]

    def groups(self) -> list[str]:
        seen: dict[str, None] = {}
        for r in self.results:
            seen.setdefault(r.group, None)
        return list(seen)

    def group_passed(self, group: str, *, scenario: str | None = None) -> bool:
        selected = [
            r for r in self.results if r.group == group and (scenario is None or r.scenario == scenario)
        ]
        return bool(selected) and all(r.passed for r in selected)

    def get(self, name: str, *, scenario: str | None = None) -> CheckResult:
        for r in self.results:
            if r.name == name and (scenario is None or r.scenario == scenario):
                return r
        raise KeyError(name)


class CheckCollector:
    """Acumula resultados de un grupo de aserciones."""

    def __init__(self, group: str, *, scenario: str | None = None) -> None:
        self.group = group
        self.scenario = scenario
        self.results: list[CheckResult] = []

    def check(self, name: str, passed: bool, *, expected: Any = None, actual: Any = None, detail: str | None = None) -> bool:
        self.results.append(
            CheckResult(
                group=self.group,
                name=name,
                passed=bool(passed),
                expected=expected,
                actual=actual,
                scenario=self.scenario,
                detail=detail,
            )
        )
        return bool(passed)

    def equal(self, name: str, expected: Any, actual: Any) -> bool:
        return self.check(name, expected == actual, expected=expected, actual=actual)

    def contains(self, name: str, needle: str, haystack: str | None) -> bool:
        found = haystack is not None and needle in haystack
        return self.check(name, found, expected=f"contains {needle!r}", actual=_clip(haystack))

    def error(self, exc: BaseException) -> None:
        self.check(
            "unexpected-error",
            False,
            expected="no error",
            actual=type(exc).__name__,
            detail=str(exc),
        )


def _clip(value: str | None, limit: int = 120) -> str | None:
    if value is None or len(value) <= limit:
        return value
    return value[: limit - 1] + "…"
