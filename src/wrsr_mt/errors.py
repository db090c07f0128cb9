"""Exception taxonomy for mod tooling.

Parsing and validation errors carry everything that was collected so callers
can report all problems in one pass.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wrsr_mt.ini.scanner import ParseFailure
    from wrsr_mt.models import ValidationReport


class ModToolError(Exception):
    """Base class for every error raised by wrsr-mt."""


class FileIOError(ModToolError):
    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Cannot access file {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class IniParseError(ModToolError):
    def __init__(self, failures: Sequence[ParseFailure], path: Path | None = None) -> None:
        self.failures = list(failures)
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"{len(self.failures)} directive(s) could not be parsed{where}")

    def with_path(self, path: Path) -> IniParseError:
        return IniParseError(self.failures, path)

    def details(self) -> str:
        return "\n".join(f"Error: {f.message}\nChunk: [{f.chunk}]" for f in self.failures)


class NmfFormatError(ModToolError):
    def __init__(self, message: str, offset: int | None = None) -> None:
        at = f" (at byte {offset})" if offset is not None else ""
        super().__init__(f"{message}{at}")
        self.offset = offset


class PatchError(ModToolError):
    """A model patch could not be applied."""


class ObjectNotFoundError(PatchError):
    def __init__(self, name: str) -> None:
        super().__init__(f"ModelPatch error: cannot find object to keep '{name}'")
        self.name = name


class RemoveCountMismatchError(PatchError):
    def __init__(self, expected: int, removed: int) -> None:
        super().__init__(
            f"ModelPatch error: {expected} object(s) listed for removal, but {removed} object(s) matched"
        )
        self.expected = expected
        self.removed = removed


class ReferenceResolutionError(ModToolError):
    """A render manifest reference could not be read or understood."""


class MissingFieldError(ModToolError):
    def __init__(self, field: str, path: Path | str) -> None:
        super().__init__(f"Render manifest {path} has no ${field} directive")
        self.field = field


class ValidationError(ModToolError):
    def __init__(self, reports: Sequence[ValidationReport]) -> None:
        self.reports = list(reports)
        count = sum(len(r.violations) for r in self.reports)
        super().__init__(f"Validation failed with {count} error(s)")

    def details(self) -> str:
        return "\n".join(r.render() for r in self.reports if not r.ok)


class InstallError(ModToolError):
    """Installation was refused or could not complete."""
