"""Tests for run summary rendering."""

from __future__ import annotations

import unittest

from lazytest.commands import get_command
from lazytest.execution.engine import PackageOutcome, RunReport, aggregate_outcomes
from lazytest.results.summary import (
    NO_PACKAGES_MESSAGE,
    format_counts,
    format_coverage,
    format_exclusions,
    format_report,
    success_percent,
)
from lazytest.results.parser import parse_output


def _report(command_name: str, outcomes: list[PackageOutcome]) -> RunReport:
    command = get_command(command_name)
    return RunReport(command=command, outcomes=tuple(outcomes), result=aggregate_outcomes(command, outcomes))


class CountsTests(unittest.TestCase):
    def test_counts_line_rounds_percentage(self) -> None:
        self.assertEqual(format_counts(3, 2, 1), "3 run. 2 succeeded. 1 failed. [67% success]")
        self.assertEqual(format_counts(4, 4, 0), "4 run. 4 succeeded. 0 failed. [100% success]")

    def test_zero_packages_never_divides(self) -> None:
        self.assertIsNone(success_percent(0, 0))
        self.assertEqual(format_counts(0, 0, 0), NO_PACKAGES_MESSAGE)

    def test_empty_report_prints_no_packages_message(self) -> None:
        text = format_report(_report("test", []))

        self.assertIn(NO_PACKAGES_MESSAGE, text)
        self.assertNotIn("%", text)


class ReportTests(unittest.TestCase):
    def test_failures_list_passes_then_failures(self) -> None:
        report = _report(
            "test",
            [
                PackageOutcome("./a", "ok  \tex/a\t0.1s\n", 0, False),
                PackageOutcome("./b", "--- FAIL: TestB\nFAIL\nFAIL\tex/b\t0.1s\n", 1, True),
            ],
        )

        text = format_report(report)

        self.assertLess(text.index("Passed Packages:"), text.index("ok  \tex/a\t0.1s"))
        self.assertLess(text.index("Failed Packages:"), text.index("--- FAIL: TestB"))
        self.assertTrue(text.rstrip().endswith("2 run. 1 succeeded. 1 failed. [50% success]"))

    def test_all_passing_report_has_only_counts(self) -> None:
        report = _report("test", [PackageOutcome("./a", "ok  \tex/a\t0.1s\n", 0, False)])

        text = format_report(report)

        self.assertNotIn("Failed Packages:", text)
        self.assertIn("1 run. 1 succeeded. 0 failed. [100% success]", text)

    def test_raw_summary_prints_failing_output_verbatim(self) -> None:
        report = _report(
            "vet",
            [
                PackageOutcome("./a", "", 0, False),
                PackageOutcome("./b", "b.go:3: unreachable code\n", 0, True),
            ],
        )

        text = format_report(report)

        self.assertIn("b.go:3: unreachable code", text)
        self.assertIn("2 run. 1 succeeded. 1 failed.", text)

    def test_coverage_summary_marks_unknown_values(self) -> None:
        result = parse_output(
            "ok  \tex/a\t0.1s\tcoverage: 87.5% of statements\nFAIL\nFAIL\tex/b\t0.1s\n"
        )

        text = format_coverage(result)

        self.assertIn("ex/a: 87.5%", text)
        self.assertIn("ex/b: N/A (tests failed or no tests found)", text)


class ExclusionsFormatTests(unittest.TestCase):
    def test_exclusions_are_tab_indented(self) -> None:
        self.assertEqual(format_exclusions(["vendor", "gen"]), "Excluded Directories:\n\tvendor\n\tgen")


if __name__ == "__main__":
    unittest.main()
