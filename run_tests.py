#!/usr/bin/env python3
"""
Test runner script for the StayNest marketplace.
"""
import sys
import subprocess
import argparse

SOURCES = ["staynest/", "config/"]


def run_tests(test_type="all", coverage=True, verbose=False, keyword=None):
    """
    Run the test suite against the in-memory document database.

    Args:
        test_type: Type of tests to run ('all', 'unit', 'integration')
        coverage: Whether to run with coverage
        verbose: Whether to run with verbose output
        keyword: Optional pytest ``-k`` expression
    """
    cmd = [sys.executable, "-m", "pytest"]

    if test_type in ("unit", "integration"):
        cmd.extend(["-m", test_type])

    if coverage:
        cmd.extend(["--cov=staynest", "--cov=config", "--cov-report=term-missing"])

    if verbose:
        cmd.append("-v")

    if keyword:
        cmd.extend(["-k", keyword])

    cmd.append("tests/")

    print(f"Running tests: {' '.join(cmd)}")
    print("=" * 60)

    result = subprocess.run(cmd)
    print("\n" + "=" * 60)
    if result.returncode == 0:
        print("✅ All tests passed!")
    else:
        print(f"❌ Tests failed with exit code {result.returncode}")
    return result.returncode


def run_linting():
    """Run flake8 and the black formatting check."""
    print("Running code linting...")
    print("=" * 60)

    checks = (
        ("Flake8", ["flake8", *SOURCES, "tests/"]),
        ("Black formatting check", ["black", "--check", *SOURCES, "tests/"]),
    )
    for label, cmd in checks:
        if subprocess.run(cmd).returncode != 0:
            print(f"❌ {label} failed!")
            return 1
        print(f"✅ {label} passed!")
    return 0


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Test runner for the StayNest marketplace")
    parser.add_argument(
        "--type",
        choices=["all", "unit", "integration"],
        default="all",
        help="Type of tests to run"
    )
    parser.add_argument("--no-coverage", action="store_true", help="Run tests without coverage")
    parser.add_argument("--verbose", "-v", action="store_true", help="Run with verbose output")
    parser.add_argument("-k", dest="keyword", help="Only run tests matching this expression")
    parser.add_argument("--lint", action="store_true", help="Run linting checks before the tests")

    args = parser.parse_args()

    if args.lint:
        lint_result = run_linting()
        if lint_result != 0:
            print("\nLinting failed. Fix the issues before running tests.")
            return lint_result
        print()

    return run_tests(
        test_type=args.type,
        coverage=not args.no_coverage,
        verbose=args.verbose,
        keyword=args.keyword
    )


if __name__ == "__main__":
    sys.exit(main())
