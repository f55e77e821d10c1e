#!/usr/bin/env python3

import argparse
import re
import sys
from pathlib import Path

import semver

PYPROJECT = Path("pyproject.toml")
PACKAGE_INIT = Path("src/pyselect/__init__.py")

PYPROJECT_VERSION = re.compile(r'(\[project\].*?)version\s*=\s*"([^"]+)"', re.DOTALL)
INIT_VERSION = re.compile(r'__version__\s*=\s*"([^"]+)"')


def read_version(pyproject_path: Path) -> str:
    match = PYPROJECT_VERSION.search(pyproject_path.read_text())
    if not match:
        raise ValueError(f"Could not find version in {pyproject_path}")
    return match.group(2)


def write_versions(new_version: str) -> None:
    content = PYPROJECT.read_text()
    PYPROJECT.write_text(PYPROJECT_VERSION.sub(f'\\1version = "{new_version}"', content, count=1))

    content = PACKAGE_INIT.read_text()
    PACKAGE_INIT.write_text(INIT_VERSION.sub(f'__version__ = "{new_version}"', content, count=1))


def main() -> None:
    parser = argparse.ArgumentParser(description="Bump the pyselect version")
    parser.add_argument(
        "bump_type", choices=["patch", "minor", "major", "prerelease"], help="Type of version bump to perform"
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the new version only")
    args = parser.parse_args()

    if not PYPROJECT.exists() or not PACKAGE_INIT.exists():
        print("Error: run from the repository root", file=sys.stderr)
        sys.exit(1)

    current_version = read_version(PYPROJECT)
    new_version = str(semver.Version.parse(current_version).next_version(args.bump_type))
    print(f"Bumping version from {current_version} to {new_version}")

    if not args.dry_run:
        write_versions(new_version)
        print(f"Updated {PYPROJECT} and {PACKAGE_INIT}")


if __name__ == "__main__":
    main()
