"""Scan the Test folder and write the MTUnitAllTests aggregate file."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable

from .config import MTUnitConfig, load_config
from .errors import IOFailureError, MissingInputError
from .generator import AggregateFileGenerator
from .logging import get_logger
from .models import CompileResult
from .scanner import SuiteExtractor, find_test_files


class SuiteCompiler:
    """Runs the scan -> generate -> write pipeline for one project root."""

    def __init__(
        self,
        extractor: SuiteExtractor | None = None,
        *,
        config_loader: Callable[[Path], MTUnitConfig] = load_config,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.extractor = extractor or SuiteExtractor()
        self._config_loader = config_loader
        self._clock = clock
        self.logger = get_logger("compiler")

    def run(self, root: str | Path, *, config: MTUnitConfig | None = None) -> CompileResult:
        """Regenerate the aggregate file for ``root`` and return what was written."""
        root_path = Path(root).expanduser().resolve()
        config = config or self._config_loader(root_path)

        test_dir = config.test_dir
        if not test_dir.is_dir():
            raise MissingInputError(f"Test directory not found: {test_dir}")
        if not config.include_dir.is_dir():
            raise MissingInputError(f"Include directory not found: {config.include_dir}")

        output_path = config.output_path
        self.logger.info("Creating %s file...", output_path.name)

        test_files = find_test_files(test_dir, config.paths.file_pattern)
        self.logger.debug("Found %d test files in %s", len(test_files), test_dir)
        suites = self.extractor.extract(test_dir / name for name in test_files)

        generator = AggregateFileGenerator(config.header, config.paths)
        content = generator.generate(suites, test_files, today=self._clock())

        try:
            with output_path.open("w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
        except OSError as exc:
            raise IOFailureError(f"Error creating {output_path.name} file: {exc}") from exc

        self.logger.info("%s generated successfully!", output_path.name)
        return CompileResult(output_path=output_path, suites=suites, test_files=test_files)


__all__ = ["SuiteCompiler"]
