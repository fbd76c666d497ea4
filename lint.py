#!/usr/bin/env python3
"""
Lint and format the requestcore sources.

This script runs Black and Flake8 on the package and its tests.
"""

import os
import subprocess
import sys
from pathlib import Path

TARGETS = ["requestcore", "tests", "examples"]


def run_command(command, description):
    """Run a command and print its output."""
    print(f"\n{description}...")
    result = subprocess.run(command, capture_output=True, text=True)

    if result.stdout:
        print(result.stdout)

    if result.stderr:
        print(result.stderr, file=sys.stderr)

    if result.returncode != 0:
        print(f"{description} failed with exit code {result.returncode}")
    else:
        print(f"{description} completed successfully")

    return result.returncode


def main():
    """Run linting and formatting tools."""
    os.chdir(Path(__file__).parent.absolute())

    black_result = run_command(["black", *TARGETS], "Formatting code with Black")
    flake8_result = run_command(
        ["flake8", "--max-line-length", "110", *TARGETS], "Checking code with Flake8"
    )

    return black_result != 0 or flake8_result != 0


if __name__ == "__main__":
    sys.exit(main())
