from __future__ import annotations

from pydantic import BaseModel, Field


class Violation(BaseModel):
    file: str
    rule: str
    message: str

    def render(self) -> str:
        return f"Error in {self.file}: {self.message}"


class ValidationReport(BaseModel):
    """Every problem found in one building source; empty means valid."""

    building: str
    violations: list[Violation] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def add(self, file: str, rule: str, message: str) -> None:
        self.violations.append(Violation(file=file, rule=rule, message=message))

    def extend(self, other: ValidationReport) -> None:
        self.violations.extend(other.violations)

    def render(self) -> str:
        if self.ok:
            return f"{self.building}: OK"
        lines = [f"{self.building}: {len(self.violations)} error(s)"]
        lines.extend(f"  {v.render()}" for v in self.violations)
        return "\n".join(lines)


class BatchSummary(BaseModel):
    reports: list[ValidationReport] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def ok_count(self) -> int:
        return sum(1 for r in self.reports if r.ok)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.reports if not r.ok) + len(self.failures)

    @property
    def ok(self) -> bool:
        return self.error_count == 0
