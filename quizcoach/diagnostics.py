"""Line-numbered parse diagnostics shared by the flat-file loaders."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParseDiagnostic:
    """A skipped input row and why it was skipped."""

    source: str
    line_number: int
    message: str

    def __str__(self) -> str:
        return f"{self.source}:{self.line_number}: {self.message}"
