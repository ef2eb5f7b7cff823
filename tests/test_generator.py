"""Tests for mtunit.generator."""

from __future__ import annotations

from datetime import date

from mtunit.config import HeaderConfig, PathsConfig
from mtunit.generator import AggregateFileGenerator, instance_name

_DAY = date(2024, 3, 5)

_EXPECTED_CALC = """/**
* @file MTUnitAllTests.mqh
* @author MTUnit
* @date 05/03/2024
* @brief This file is auto generated. It contains all tests that the
* unit test will run.
*/

#property copyright "Copyright © 2018, MTUnit"
#property link      ""
#property version   "1.00"
#property strict

#include "../Include/MTUnit.mqh"
#include "../Include/MTUnitCfg.mqh"

//Includes will be added here automatically (from Test folder)
#include "../Test/A.mqh"
#include "../Test/B.mqh"

class MTUnitAllTests
{
public:
    MTUnitAllTests() {}
    ~MTUnitAllTests() {}
    void runAllTests()
    {
        g_mtUnit.initTests();

        //Auto generated tests for Calc Class:
        Calc* calc = new Calc();
        g_mtUnit.initTestSuite("Calc");
        g_mtUnit.initTestCase("testAdd"); calc.setUp(); calc.testAdd(); calc.tearDown(); g_mtUnit.endTestCase();
        g_mtUnit.initTestCase("testSub"); calc.setUp(); calc.testSub(); calc.tearDown(); g_mtUnit.endTestCase();
        g_mtUnit.endTestSuite();
        delete calc;
        g_mtUnit.endTests();

    }
};
//This file is auto generated!"""


def test_generate_renders_full_file() -> None:
    output = AggregateFileGenerator().generate(
        {"Calc": ["testAdd", "testSub"]}, ["A.mqh", "B.mqh"], today=_DAY
    )
    assert output == _EXPECTED_CALC


def test_generate_without_suites_has_no_lifecycle_calls() -> None:
    output = AggregateFileGenerator().generate({}, [], today=_DAY)

    assert "g_mtUnit" not in output
    assert output.endswith(
        "    void runAllTests()\n    {\n    }\n};\n//This file is auto generated!"
    )
    assert '#include "../Test/' not in output


def test_generate_keeps_suite_and_case_order() -> None:
    output = AggregateFileGenerator().generate(
        {"Alpha": ["testOne"], "Beta": ["testTwo", "testThree"]},
        ["Alpha.mqh", "Beta.mqh"],
        today=_DAY,
    )

    markers = [
        'initTestSuite("Alpha")',
        'initTestCase("testOne")',
        "delete alpha;",
        'initTestSuite("Beta")',
        'initTestCase("testTwo")',
        'initTestCase("testThree")',
        "delete beta;",
        "g_mtUnit.endTests();",
    ]
    positions = [output.index(marker) for marker in markers]
    assert positions == sorted(positions)
    assert output.count("g_mtUnit.initTests();") == 1


def test_generate_is_deterministic() -> None:
    generator = AggregateFileGenerator()
    suites = {"Calc": ["testAdd"], "Io": ["testRead"]}
    files = ["Calc.mqh", "Io.mqh"]

    first = generator.generate(suites, files, today=_DAY)
    second = generator.generate(suites, files, today=_DAY)

    assert first == second


def test_generate_uses_configured_header_and_paths() -> None:
    header = HeaderConfig(
        author="Jane Doe",
        copyright="Copyright 2024, Jane Doe",
        link="https://example.com",
        version="2.10",
        support_includes=["../Include/Only.mqh"],
    )
    paths = PathsConfig(test_dir="Suites", output_name="AllSuites.mqh")

    output = AggregateFileGenerator(header, paths).generate({}, ["X.mqh"], today=_DAY)

    assert "* @file AllSuites.mqh\n* @author Jane Doe\n" in output
    assert '#property link      "https://example.com"\n' in output
    assert '#property version   "2.10"\n' in output
    assert '#include "../Include/Only.mqh"\n\n//Includes' in output
    assert '#include "../Suites/X.mqh"\n' in output


def test_instance_name_lowers_first_character() -> None:
    assert instance_name("CalcTests") == "calcTests"
    assert instance_name("X") == "x"
