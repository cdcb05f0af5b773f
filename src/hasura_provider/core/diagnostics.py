"""Diagnostics returned to the declarative engine instead of raised errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A (severity, summary, detail) message returned to the engine."""

    severity: Severity
    summary: str
    detail: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"severity": str(self.severity), "summary": self.summary, "detail": self.detail}


class Diagnostics(list[Diagnostic]):
    """Ordered diagnostics attached to a single provider call."""

    def add_error(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail))

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self if d.severity is Severity.WARNING]
