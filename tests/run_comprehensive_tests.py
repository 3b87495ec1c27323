#!/usr/bin/env python3
"""
Comprehensive Test Runner for Token Scanner

Runs every test suite in this directory and prints a per-suite breakdown
with failure details.
"""

import sys
import os
import unittest
import time
from pathlib import Path

# Add project root to path to allow for `from token_scanner import ...`
sys.path.insert(0, str(Path(__file__).parent.parent))

# Color codes for output
RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
GREY = "\033[90m"

TEST_SUITES = [
    ("Token Matching", "test_token_matcher"),
    ("File Discovery", "test_file_discovery"),
    ("Usage Aggregation", "test_aggregation"),
    ("Token Categorization", "test_token_categorizer"),
    ("Diff Parsing", "test_diff_parsing"),
    ("Git Change Detection", "test_git_change_detector"),
    ("Scanner, Reports and CLI", "test_scanner"),
]


class ComprehensiveTestResult:
    """Tracks comprehensive test results."""

    def __init__(self):
        self.test_suites = []
        self.total_tests = 0
        self.failed_tests = 0
        self.error_tests = 0
        self.skipped_tests = 0
        self.failures = []

    def add_suite_result(self, suite_name, result):
        """Add results from a test suite."""
        self.test_suites.append({
            'name': suite_name,
            'tests_run': result.testsRun,
            'failures': len(result.failures),
            'errors': len(result.errors),
            'skipped': len(result.skipped),
        })
        self.total_tests += result.testsRun
        self.failed_tests += len(result.failures)
        self.error_tests += len(result.errors)
        self.skipped_tests += len(result.skipped)

        for test, traceback in result.failures + result.errors:
            self.failures.append((suite_name, str(test), traceback))

    @property
    def passed_tests(self):
        return self.total_tests - self.failed_tests - self.error_tests

    def print_summary(self, duration):
        """Print comprehensive test summary."""
        print(f"\n{BOLD}COMPREHENSIVE TEST RESULTS{RESET}")
        print("=" * 60)
        print(f"  Total Tests: {self.total_tests}")
        print(f"  {GREEN}Passed: {self.passed_tests}{RESET}")
        if self.failed_tests > 0:
            print(f"  {RED}Failed: {self.failed_tests}{RESET}")
        if self.error_tests > 0:
            print(f"  {RED}Errors: {self.error_tests}{RESET}")
        if self.skipped_tests > 0:
            print(f"  {YELLOW}Skipped: {self.skipped_tests}{RESET}")
        print(f"  Duration: {duration:.2f} seconds")

        print(f"\n{BOLD}Test Suite Breakdown:{RESET}")
        for suite in self.test_suites:
            status_icon = "PASS" if suite['failures'] == 0 and suite['errors'] == 0 else "FAIL"
            print(f"  {status_icon} {suite['name']}: {suite['tests_run']} tests")
            if suite['skipped'] > 0:
                print(f"      {YELLOW}Skipped: {suite['skipped']}{RESET}")

        for suite_name, test_name, traceback in self.failures:
            print(f"\n{RED}FAILURE in {suite_name}:{RESET}")
            print(f"  Test: {test_name}")
            print(f"  {GREY}{traceback[:500]}{'...' if len(traceback) > 500 else ''}{RESET}")

        return self.failed_tests == 0 and self.error_tests == 0


def run_test_suite(module_name, suite_name):
    """Run a single test suite and return results."""
    print(f"{BLUE}Running {suite_name}...{RESET}")
    suite = unittest.TestLoader().loadTestsFromName(module_name)
    with open(os.devnull, 'w') as devnull:
        result = unittest.TextTestRunner(stream=devnull, verbosity=0).run(suite)

    if result.wasSuccessful():
        print(f"  {GREEN}✅ {result.testsRun} tests passed{RESET}")
    else:
        print(f"  {RED}❌ {len(result.failures)} failures, {len(result.errors)} errors out of {result.testsRun} tests{RESET}")
    return result


def main():
    sys.path.insert(0, str(Path(__file__).parent))
    summary = ComprehensiveTestResult()
    start_time = time.time()

    for suite_name, module_name in TEST_SUITES:
        summary.add_suite_result(suite_name, run_test_suite(module_name, suite_name))

    success = summary.print_summary(time.time() - start_time)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
