from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

CommandRecord = Dict[str, Any]


@dataclass
class LoadResult:
    language: str
    source: str
    commands: List[CommandRecord] = field(default_factory=list)
    status: str = ""
    ok: bool = True


@dataclass
class FileValidation:
    path: str
    errors: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors


@dataclass
class ValidationReport:
    data_root: str
    files: List[FileValidation] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [error for item in self.files for error in item.errors]

    @property
    def passed(self) -> bool:
        return not self.errors
