"""JUnit XML reporter for CI integration.

One ``testcase`` per property inside a single ``testsuite``. Falsified
properties get a ``failure`` element, gave-up properties an ``error``
element and aborted ones are marked ``skipped``.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from propcheck.core.result import Report, Verdict
from propcheck.reporters.base import BaseReporter


class JUnitReporter(BaseReporter):
    """Generate JUnit XML reports.

    Attributes:
        output_path: Optional default path for saving reports.
        suite_name: Value of the ``name`` attribute of the testsuite.
    """

    def __init__(self, output_path: str | Path | None = None, suite_name: str = "propcheck") -> None:
        super().__init__(output_path)
        self.suite_name = suite_name

    @property
    def file_extension(self) -> str:
        return ".xml"

    def generate(self, reports: list[Report]) -> str:
        root = self._build_xml(reports)
        ET.indent(root)
        return ET.tostring(root, encoding="unicode", xml_declaration=True)

    def _build_xml(self, reports: list[Report]) -> ET.Element:
        test_suites = ET.Element("testsuites")
        test_suite = ET.SubElement(test_suites, "testsuite")

        failures = sum(1 for r in reports if r.verdict is Verdict.FALSIFIED)
        errors = sum(1 for r in reports if r.verdict is Verdict.GAVE_UP)
        skipped = sum(1 for r in reports if r.verdict is Verdict.ABORTED)
        total_time = sum(r.duration_ms for r in reports) / 1000

        for element in (test_suites, test_suite):
            element.set("name", self.suite_name)
            element.set("tests", str(len(reports)))
            element.set("failures", str(failures))
            element.set("errors", str(errors))
            element.set("time", f"{total_time:.3f}")
        test_suite.set("skipped", str(skipped))

        for report in reports:
            test_suite.append(self._build_test_case(report))

        return test_suites

    def _build_test_case(self, report: Report) -> ET.Element:
        test_case = ET.Element("testcase")
        test_case.set("classname", self.suite_name)
        test_case.set("name", report.name)
        test_case.set("time", f"{report.duration_ms / 1000:.3f}")

        properties = ET.SubElement(test_case, "properties")
        self._add_property(properties, "seed", str(report.seed))
        self._add_property(properties, "tests_run", str(report.tests_run))
        self._add_property(properties, "discarded", str(report.discarded))

        if report.verdict is Verdict.FALSIFIED:
            failure = ET.SubElement(test_case, "failure")
            failure.set("message", report.summary())
            failure.set("type", "PropertyFalsified")
            failure.text = report.describe()
        elif report.verdict is Verdict.GAVE_UP:
            error = ET.SubElement(test_case, "error")
            error.set("message", report.summary())
            error.set("type", "PropertyGaveUp")
            error.text = report.describe()
        elif report.verdict is Verdict.ABORTED:
            skipped = ET.SubElement(test_case, "skipped")
            skipped.set("message", report.summary())

        system_out = ET.SubElement(test_case, "system-out")
        system_out.text = report.describe()
        return test_case

    def _add_property(self, parent: ET.Element, name: str, value: str) -> None:
        prop = ET.SubElement(parent, "property")
        prop.set("name", name)
        prop.set("value", value)
