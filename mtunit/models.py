"""Core data models shared across mtunit components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set

NO_CLASS = "NoClass"

TestSuiteMap = Dict[str, List[str]]


@dataclass
class ScanState:
    """Per-file state threaded through every line of a scan."""

    in_block_comment: bool = False
    brace_depth: int = 0
    current_class: str = NO_CLASS


@dataclass
class WatchSet:
    """Directory plus the test files currently observed inside it."""

    directory: Path
    files: Set[Path] = field(default_factory=set)

    def add(self, path: Path) -> bool:
        """Track ``path``; return False when it was already tracked."""
        if path in self.files:
            return False
        self.files.add(path)
        return True

    def __contains__(self, path: object) -> bool:
        return path in self.files


@dataclass
class CompileResult:
    """Outcome of one scan-and-generate pipeline run."""

    output_path: Path
    suites: TestSuiteMap
    test_files: List[str]
