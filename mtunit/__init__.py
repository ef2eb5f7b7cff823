"""MQL5 unit-test automation: test-suite compiler, watcher, EA linker and log colorizer."""

from .compiler import SuiteCompiler
from .errors import IOFailureError, MissingInputError, MTUnitError
from .generator import AggregateFileGenerator
from .models import NO_CLASS, CompileResult, ScanState, WatchSet
from .scanner import ClassContextTracker, SuiteExtractor, classify_test_case, strip_comments

__version__ = "1.0.0"

__all__ = [
    "AggregateFileGenerator",
    "ClassContextTracker",
    "CompileResult",
    "IOFailureError",
    "MTUnitError",
    "MissingInputError",
    "NO_CLASS",
    "ScanState",
    "SuiteCompiler",
    "SuiteExtractor",
    "WatchSet",
    "classify_test_case",
    "strip_comments",
]
