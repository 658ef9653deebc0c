"""Parsers for release and marker files.

Two shapes cover every text file the detectors read:
  - KEY=VALUE lines (os-release, lsb-release, build.prop, legacy SuSE files)
  - a single "<Name> [release|version] <version> [extra]" line (/etc/*-release)
"""

import re
from typing import Iterable, Optional

# Splits a KEY=VALUE line. The value may contain spaces but not tabs.
_KEY_VALUE_RE = re.compile(r"^\s*(\S+)\s*=\s*([\S ]+)\s*")

# Splits the first line of a Red Hat style release file.
_RELEASE_LINE_RE = re.compile(r"^(.+) (release|version)? (\S+)\s*(\S+)?")

UNKNOWN = "unknown"


def split_key_value(line: str) -> Optional[tuple]:
    """Split one KEY=VALUE line into (key, value).

    Returns None for blank lines, comments and lines without a delimiter.
    Trailing whitespace and one pair of enclosing double quotes are removed
    from the value.
    """
    if not line or line[0] == "#":
        return None

    m = _KEY_VALUE_RE.match(line)
    if not m:
        return None

    value = m.group(2).rstrip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    return m.group(1), value


def parse_properties(lines: Iterable[str]) -> dict:
    """Parse KEY=VALUE lines into a dict. The last duplicate key wins.

    Malformed lines are skipped. Errors raised while iterating `lines`
    (e.g. an OSError from a file handle) propagate to the caller.
    """
    properties = {}
    for line in lines:
        pair = split_key_value(line)
        if pair is None:
            continue
        key, value = pair
        properties[key] = value
    return properties


def parse_properties_text(text: str) -> dict:
    """Parse the full contents of a KEY=VALUE file."""
    return parse_properties(text.splitlines())


def parse_release_line(contents: str, expected_prefix: str) -> Optional[str]:
    """Extract the version from a release line naming `expected_prefix`.

    e.g. ("Red Hat Enterprise Linux Server release 7.6 (Maipo)", "Red Hat") -> "7.6"

    Returns None when the text has no release-line shape or names a
    different distribution.
    """
    m = _RELEASE_LINE_RE.match(contents)
    if m is None:
        return None
    if not m.group(0).startswith(expected_prefix):
        return None

    version = (m.group(3) or "").strip()
    return version or UNKNOWN
