"""Line-oriented scanning of MQL5 test files into test suites and test cases.

The scanner is deliberately lexical: it never builds a syntax tree. Each line
is stripped of comments, attributed to the enclosing class (tracked through
``class`` declarations, ``Type::method`` definitions and brace depth) and
then checked for a ``void name()`` test-case header.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from .errors import IOFailureError, MissingInputError
from .logging import get_logger, report_suite_map
from .models import NO_CLASS, ScanState, TestSuiteMap
from .textio import decode_text, split_lines

FIXTURE_HOOKS = frozenset({"setUp", "tearDown"})

_LINE_COMMENT = "//"
_BLOCK_START = "/*"
_BLOCK_END = "*/"
_SCOPE = "::"

logger = get_logger("scanner")


def strip_comments(line: str, in_block_comment: bool) -> Tuple[str, bool]:
    """Return ``line`` without comments and the updated block-comment flag."""
    was_in_block = in_block_comment

    if _LINE_COMMENT in line:
        line = line[: line.index(_LINE_COMMENT)]

    if _BLOCK_START in line and not in_block_comment:
        in_block_comment = True
        start = line.index(_BLOCK_START)
        end = len(line)
        close = line.find(_BLOCK_END, start + len(_BLOCK_START))
        if close != -1:
            in_block_comment = False
            end = close + len(_BLOCK_END)
        line = line[:start] + line[end:]

    if in_block_comment and _BLOCK_END in line:
        in_block_comment = False
        line = line[line.index(_BLOCK_END) + len(_BLOCK_END) :]

    if was_in_block and in_block_comment:
        # The whole line sits inside /* ... */.
        line = ""

    return line, in_block_comment


class ClassContextTracker:
    """Follows which class a line belongs to across a single file."""

    def update(self, line: str, state: ScanState) -> str:
        """Process one comment-free line and return the enclosing class name."""
        if not line.strip():
            return NO_CLASS

        scope = _scope_index(line)
        if line.strip().startswith("class"):
            name = self._declared_class_name(line)
            if any(char.isspace() for char in name):
                logger.warning("Possible class name contains spaces: %r", name)
                state.current_class = NO_CLASS
                return NO_CLASS
            state.current_class = name
        elif "void" in line and "()" in line and scope != -1:
            # Out-of-class definition: void Suite::testSomething()
            start = _after_void(line)
            name = line[start:scope].strip()
            if not name or any(char.isspace() for char in name):
                logger.warning("Ignoring malformed class qualifier in %r", line)
            else:
                state.current_class = name

        if "{" in line:
            state.brace_depth += 1
        if "}" in line:
            state.brace_depth -= 1
        if state.brace_depth < 0:
            logger.debug("Unbalanced closing brace in %r; resetting depth", line)
            state.brace_depth = 0

        if "class" not in line and _SCOPE not in line and state.brace_depth == 0:
            state.current_class = NO_CLASS

        return state.current_class

    @staticmethod
    def _declared_class_name(line: str) -> str:
        start = line.index("class") + len("class")
        if ":" in line:
            line = line[: line.index(":")]
        return line[start:].strip()


def classify_test_case(line: str) -> Tuple[str, bool]:
    """Return ``(name, is_test_case)`` for a comment-free line."""
    if "void" not in line:
        return "", False
    if "(" not in line or ")" not in line:
        return "", False

    start = _after_void(line)
    scope = _scope_index(line)
    if scope != -1:
        start = scope + len(_SCOPE)
    name = line[start : line.index("(")].strip()

    if not name or any(char.isspace() for char in name):
        logger.debug("Ignoring malformed test case candidate in %r", line)
        return name, False
    return name, name not in FIXTURE_HOOKS


def _after_void(line: str) -> int:
    index = line.find("void ")
    if index == -1:
        return line.index("void") + len("void")
    return index + len("void ")


def _scope_index(line: str) -> int:
    """Index of the ``::`` qualifying the method name, or -1.

    A ``::`` after the first ``(`` belongs to the body, as in
    ``void testNow() { t = Clock::now(); }``.
    """
    scope = line.find(_SCOPE)
    paren = line.find("(")
    if scope == -1 or (paren != -1 and paren < scope):
        return -1
    return scope


def find_test_files(directory: Path, pattern: str = "*.mqh") -> List[str]:
    """Return the sorted names of files in ``directory`` matching ``pattern``."""
    directory = Path(directory)
    if not directory.is_dir():
        raise MissingInputError(f"Test directory not found: {directory}")
    return sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and fnmatchcase(entry.name, pattern)
    )


class SuiteExtractor:
    """Builds the class -> test case map for a set of test files."""

    def __init__(self, tracker: ClassContextTracker | None = None) -> None:
        self.tracker = tracker or ClassContextTracker()

    def extract(self, paths: Iterable[Path]) -> TestSuiteMap:
        """Scan ``paths`` in order and return the deduplicated suite map."""
        collected: Dict[str, List[str]] = {}
        for path in paths:
            for class_name, test_case in self._scan_file(Path(path)):
                collected.setdefault(class_name, []).append(test_case)

        collected.pop(NO_CLASS, None)
        suites: TestSuiteMap = {
            name: list(dict.fromkeys(collected[name])) for name in sorted(collected)
        }
        report_suite_map(logger, suites)
        return suites

    def scan_lines(self, lines: Sequence[str]) -> List[Tuple[str, str]]:
        """Return ``(class, test_case)`` pairs found in one file's lines."""
        state = ScanState()
        found: List[Tuple[str, str]] = []
        for raw in lines:
            line, state.in_block_comment = strip_comments(raw, state.in_block_comment)
            if state.in_block_comment:
                continue
            current_class = self.tracker.update(line, state)
            name, is_test_case = classify_test_case(line)
            if is_test_case:
                found.append((current_class, name))
        return found

    def _scan_file(self, path: Path) -> List[Tuple[str, str]]:
        try:
            raw = path.read_bytes()
        except FileNotFoundError as exc:
            raise MissingInputError(f"Test file not found: {path}") from exc
        except OSError as exc:
            raise IOFailureError(f"Could not read test file {path}: {exc}") from exc
        return self.scan_lines(split_lines(decode_text(raw)))


__all__ = [
    "ClassContextTracker",
    "FIXTURE_HOOKS",
    "SuiteExtractor",
    "classify_test_case",
    "find_test_files",
    "strip_comments",
]
