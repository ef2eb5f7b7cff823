"""Tests for mtunit.compiler."""

from __future__ import annotations

import shutil
from datetime import date

import pytest

from mtunit.compiler import SuiteCompiler
from mtunit.errors import IOFailureError, MissingInputError

_DAY = date(2024, 3, 5)


def _compiler() -> SuiteCompiler:
    return SuiteCompiler(clock=lambda: _DAY)


def test_run_writes_single_suite_for_reopened_class(project) -> None:
    project.write_test(
        "A.mqh",
        """
        class Calc : public TestSuite
        {
        public:
           void setUp();
           void testAdd();
           void tearDown();
        };
        """,
    )
    project.write_test(
        "B.mqh",
        """
        class Calc
        {
           void testSub();
        };
        """,
    )

    result = _compiler().run(project.root)

    assert result.output_path == project.output_path
    assert result.test_files == ["A.mqh", "B.mqh"]
    assert result.suites == {"Calc": ["testAdd", "testSub"]}

    output = project.output()
    assert output.count('g_mtUnit.initTestSuite("Calc");') == 1
    assert output.count("g_mtUnit.endTestSuite();") == 1
    assert output.index('initTestCase("testAdd")') < output.index('initTestCase("testSub")')
    assert 'initTestCase("setUp")' not in output
    assert '#include "../Test/A.mqh"\n#include "../Test/B.mqh"\n' in output
    assert "* @date 05/03/2024\n" in output


def test_run_rewrites_output_identically(project) -> None:
    project.write_test("Calc.mqh", "class Calc\n{\n   void testAdd();\n};\n")
    compiler = _compiler()

    compiler.run(project.root)
    first = project.output_path.read_bytes()
    compiler.run(project.root)

    assert project.output_path.read_bytes() == first


def test_run_honours_config_overrides(project) -> None:
    project.write(
        {
            ".mtunit.yml": """
            paths:
              test_dir: Suites
              output_name: AllSuites.mqh
            header:
              author: Jane Doe
            """,
            "Suites/Io.mqh": "class Io\n{\n   void testRead();\n};\n",
        }
    )

    result = _compiler().run(project.root)

    assert result.output_path == project.root / "Include" / "AllSuites.mqh"
    output = result.output_path.read_text(encoding="utf-8")
    assert '#include "../Suites/Io.mqh"' in output
    assert "* @author Jane Doe" in output


def test_run_requires_test_directory(project) -> None:
    shutil.rmtree(project.test_dir)

    with pytest.raises(MissingInputError, match="Test directory not found"):
        _compiler().run(project.root)


def test_run_requires_include_directory(project) -> None:
    shutil.rmtree(project.root / "Include")

    with pytest.raises(MissingInputError, match="Include directory not found"):
        _compiler().run(project.root)


def test_run_reports_unwritable_output(project) -> None:
    project.output_path.mkdir()

    with pytest.raises(IOFailureError):
        _compiler().run(project.root)
