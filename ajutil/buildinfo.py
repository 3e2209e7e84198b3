"""Build-time information about an application.

The packaging or release process sets :data:`APP_NAME`, :data:`VERSION` and
:data:`GIT_COMMIT_HASH` on this module. The functions read them at call time,
so values assigned later are picked up.
"""

from __future__ import annotations

import argparse
import sys

__all__ = [
    "APP_NAME",
    "GIT_COMMIT_HASH",
    "VERSION",
    "version_string",
    "usage_name",
    "usage_name_and_version",
    "main",
]

APP_NAME = ""
"""The name of the application (the executable)."""

GIT_COMMIT_HASH = ""
"""The hash of the last commit in the repository."""

VERSION = ""
"""The version of the application."""

_DEFAULT_VERSION = "v0.0.0"
_DEFAULT_APP_NAME = "unknown"


def version_string() -> str:
    """Return the version and commit hash as shown to a user."""
    version = VERSION or _DEFAULT_VERSION
    return f"{version} {GIT_COMMIT_HASH}"


def usage_name() -> str:
    """Return the name of the application."""
    return APP_NAME or _DEFAULT_APP_NAME


def usage_name_and_version() -> str:
    """Return the name and version as displayed in usage information."""
    return f"{usage_name()} version: {version_string()}"


def main(argv: list[str] | None = None) -> int:
    """Print the application's name and version line to standard output."""
    parser = argparse.ArgumentParser(
        prog=usage_name(),
        description="Show the application's name and version.",
    )
    parser.parse_args([] if argv is None else argv)
    line = usage_name_and_version()
    sys.stdout.write(line + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))