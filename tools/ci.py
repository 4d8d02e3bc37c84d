#!/usr/bin/env python3
# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, tests, a CLI smoke run, and build."""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=ocl", "--cov-report=term-missing"]),
    ("CLI smoke", ["uv", "run", "ocl", "check", "tests/data/deployment.ocl"]),
    ("Build", ["uv", "build"]),
]

_SLOW_STEPS = frozenset({"Build"})


def main() -> int:
    """Run the CI steps and print a colored summary."""
    parser = argparse.ArgumentParser(description="Run the ocl-parser CI checks.")
    parser.add_argument("--fast", action="store_true", help="Skip the package build")
    args = parser.parse_args()

    steps = [(name, cmd) for name, cmd in STEPS if not (args.fast and name in _SLOW_STEPS)]
    results = [_run_step(name, cmd) for name, cmd in steps]
    return _print_summary(results)


# ################
# Implementation
# ################


def _run_step(name: str, cmd: list[str]) -> tuple[str, bool, float]:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue(name)}\n{sep}")
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=pathlib.Path(__file__).parent.parent)
    return name, proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[str, bool, float]]) -> int:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue('  Summary')}\n{sep}")
    for name, passed, elapsed in results:
        paint = chalk.green if passed else chalk.red
        status = "PASS" if passed else "FAIL"
        print(paint(f"  {status}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


if __name__ == "__main__":
    sys.exit(main())
