"""Renders the aggregate MTUnitAllTests file from extracted test suites."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .config import HeaderConfig, PathsConfig

TEMPLATE_NAME = "MTUnitAllTests.mqh.j2"
DATE_FORMAT = "%d/%m/%Y"


@dataclass(frozen=True)
class SuiteView:
    """Template-facing view of one test suite."""

    name: str
    instance: str
    cases: List[str]


def instance_name(class_name: str) -> str:
    """Variable name bound to a suite instance: the class name, first letter lowered."""
    if not class_name:
        return class_name
    return class_name[0].lower() + class_name[1:]


class AggregateFileGenerator:
    """Produces the text of the file that runs every extracted test case."""

    def __init__(
        self,
        header: HeaderConfig | None = None,
        paths: PathsConfig | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        self.header = header or HeaderConfig()
        self.paths = paths or PathsConfig()
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def generate(
        self,
        suites: Mapping[str, Sequence[str]],
        test_files: Sequence[str],
        *,
        today: date | None = None,
    ) -> str:
        """Render the aggregate file; identical inputs on the same date give identical text."""
        stamp = (today or date.today()).strftime(DATE_FORMAT)
        views = [
            SuiteView(name=name, instance=instance_name(name), cases=list(cases))
            for name, cases in suites.items()
        ]
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(
            output_name=self.paths.output_name,
            test_dir=self.paths.test_dir,
            header=self.header,
            date=stamp,
            test_files=list(test_files),
            suites=views,
        )


__all__ = ["AggregateFileGenerator", "SuiteView", "instance_name"]
