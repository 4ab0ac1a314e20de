"""
Scanner interface shared by the per-family distro matchers.
"""

from datetime import datetime, timezone
from typing import List, Optional, Protocol, Sequence

from ..eol import EOLTable
from ..models import DetectedVulnerability, Package


class Scanner(Protocol):
    """Detects vulnerable packages and support status for one OS family."""

    family: str
    eol_table: EOLTable

    def detect(self, os_version: str, packages: Sequence[Package]) -> List[DetectedVulnerability]:
        """
        Match installed packages against the family's advisories.

        Raises:
            LookupFailure: If an advisory lookup fails for any package.
            VersionParseFailure: If a version is malformed and the family
                does not tolerate it.
        """
        ...

    def is_supported_version(
        self,
        os_family: str,
        os_version: str,
        now: Optional[datetime] = None
    ) -> bool:
        """Check if the release still receives security fixes."""
        ...


def utc_now() -> datetime:
    """Current instant, timezone-aware in UTC."""
    return datetime.now(timezone.utc)
