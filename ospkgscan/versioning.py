"""
Version comparators for distribution package ecosystems.

The ordering rules themselves come from third-party libraries; this module
only adapts them to the small interface the scanners consume.
"""

from typing import Any, Protocol

from debian.debian_support import Version as DebianVersion
from univers.versions import AlpineLinuxVersion

from .errors import VersionParseFailure


class VersionComparator(Protocol):
    """Parses and orders version strings of a single ecosystem."""

    scheme: str

    def parse(self, raw: str) -> Any:
        """Parse a version string, raising VersionParseFailure if malformed."""
        ...

    def less_than(self, a: Any, b: Any) -> bool:
        """Check if version a orders strictly before version b."""
        ...


class ApkVersionComparator:
    """Alpine Linux apk version ordering (e.g. 1.1.1g-r0)."""

    scheme = "apk"

    def parse(self, raw: str) -> AlpineLinuxVersion:
        try:
            return AlpineLinuxVersion(raw)
        except (ValueError, TypeError) as e:
            raise VersionParseFailure(raw, self.scheme) from e

    def less_than(self, a: AlpineLinuxVersion, b: AlpineLinuxVersion) -> bool:
        return a < b


class DebianVersionComparator:
    """Debian/Ubuntu dpkg version ordering (e.g. 1:2.30-0ubuntu2)."""

    scheme = "deb"

    def parse(self, raw: str) -> DebianVersion:
        try:
            return DebianVersion(raw)
        except (ValueError, TypeError) as e:
            raise VersionParseFailure(raw, self.scheme) from e

    def less_than(self, a: DebianVersion, b: DebianVersion) -> bool:
        return a < b
