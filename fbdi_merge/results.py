"""
Per-file outcomes of a merge run.

Every CSV file yields one FileResult; the run as a whole yields a
MergeReport that the CLI logs and can export as JSON.
"""

from dataclasses import dataclass, asdict, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class FileStatus(str, Enum):
    """Outcome of merging a single CSV file."""
    MERGED = "merged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileResult:
    """Result of merging one CSV file into its sheet."""
    csv_path: str
    sheet_name: str
    status: FileStatus
    rows_appended: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        result = asdict(self)
        result['status'] = self.status.value
        return result


@dataclass
class MergeReport:
    """Collected results of one merge run."""
    output_path: str
    results: List[FileResult] = field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.results.append(result)

    def _with_status(self, status: FileStatus) -> List[FileResult]:
        return [r for r in self.results if r.status == status]

    @property
    def merged(self) -> List[FileResult]:
        return self._with_status(FileStatus.MERGED)

    @property
    def skipped(self) -> List[FileResult]:
        return self._with_status(FileStatus.SKIPPED)

    @property
    def failed(self) -> List[FileResult]:
        return self._with_status(FileStatus.FAILED)

    @property
    def rows_appended(self) -> int:
        return sum(r.rows_appended for r in self.results)

    def to_dict(self) -> Dict:
        """Convert to a JSON-serializable summary."""
        return {
            'output': self.output_path,
            'merged': len(self.merged),
            'skipped': len(self.skipped),
            'failed': len(self.failed),
            'rows_appended': self.rows_appended,
            'files': [r.to_dict() for r in self.results],
        }

    @classmethod
    def for_output(cls, output_path: Path) -> 'MergeReport':
        return cls(output_path=str(output_path))
