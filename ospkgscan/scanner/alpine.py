"""
Alpine Linux scanner.

Alpine advisories are indexed by major.minor release and by binary package
name. Any malformed version aborts the scan.
"""

from datetime import datetime
from typing import List, Optional, Sequence

import structlog

from ..advisory.store import AdvisoryStore
from ..eol import ALPINE_EOL, EOLTable
from ..errors import AdvisoryStoreError, LookupFailure, VersionParseFailure
from ..models import DetectedVulnerability, Package
from ..utils import format_pkg_version, normalize_release
from ..versioning import ApkVersionComparator, VersionComparator
from .base import utc_now

logger = structlog.get_logger(__name__)


class AlpineScanner:
    """Strict, release-truncating scanner for Alpine Linux."""

    family = "alpine"

    def __init__(
        self,
        store: AdvisoryStore,
        comparator: Optional[VersionComparator] = None,
        eol_table: Optional[EOLTable] = None
    ):
        self.store = store
        self.comparator = comparator if comparator is not None else ApkVersionComparator()
        self.eol_table = eol_table if eol_table is not None else ALPINE_EOL

    def detect(self, os_version: str, packages: Sequence[Package]) -> List[DetectedVulnerability]:
        """
        Detect vulnerable packages in an Alpine image.

        Args:
            os_version: Alpine release (e.g. "3.10.2").
            packages: Installed packages.

        Returns:
            Detected vulnerabilities, one per vulnerable (package, advisory) pair.

        Raises:
            LookupFailure: If the advisory store fails for any package.
            VersionParseFailure: If an installed or fixed version is malformed.
        """
        logger.info("detecting_vulnerabilities", family=self.family)
        os_version = normalize_release(os_version)
        logger.debug("os_version", family=self.family, os_version=os_version)
        logger.debug("package_count", family=self.family, count=len(packages))

        vulns: List[DetectedVulnerability] = []
        for pkg in packages:
            try:
                advisories = self.store.get(os_version, pkg.name)
            except AdvisoryStoreError as e:
                raise LookupFailure(self.family, os_version, pkg.name, str(e)) from e

            installed = format_pkg_version(pkg)
            try:
                installed_version = self.comparator.parse(installed)
            except VersionParseFailure as e:
                raise VersionParseFailure(installed, e.scheme, pkg.name) from e

            for adv in advisories:
                vuln = DetectedVulnerability(
                    vulnerability_id=adv.vulnerability_id,
                    pkg_name=pkg.name,
                    installed_version=installed,
                    fixed_version=adv.fixed_version,
                )

                if not adv.fixed_version:
                    vulns.append(vuln)
                    continue

                try:
                    fixed_version = self.comparator.parse(adv.fixed_version)
                except VersionParseFailure as e:
                    raise VersionParseFailure(adv.fixed_version, e.scheme, pkg.name) from e

                if self.comparator.less_than(installed_version, fixed_version):
                    vulns.append(vuln)

        return vulns

    def is_supported_version(
        self,
        os_family: str,
        os_version: str,
        now: Optional[datetime] = None
    ) -> bool:
        if now is None:
            now = utc_now()
        return self.eol_table.is_supported(os_family, normalize_release(os_version), now)
