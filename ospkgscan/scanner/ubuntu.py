"""
Ubuntu scanner.

Ubuntu advisories are indexed by the full release string and by source
package name. Malformed versions are logged and skipped.
"""

from datetime import datetime
from typing import List, Optional, Sequence

import structlog

from ..advisory.store import AdvisoryStore
from ..eol import UBUNTU_EOL, EOLTable
from ..errors import AdvisoryStoreError, LookupFailure, VersionParseFailure
from ..models import DetectedVulnerability, Package
from ..utils import format_src_version, normalize_release
from ..versioning import DebianVersionComparator, VersionComparator
from .base import utc_now

logger = structlog.get_logger(__name__)


class UbuntuScanner:
    """Lenient, full-release scanner for Ubuntu."""

    family = "ubuntu"

    def __init__(
        self,
        store: AdvisoryStore,
        comparator: Optional[VersionComparator] = None,
        eol_table: Optional[EOLTable] = None
    ):
        self.store = store
        self.comparator = comparator if comparator is not None else DebianVersionComparator()
        self.eol_table = eol_table if eol_table is not None else UBUNTU_EOL

    def detect(self, os_version: str, packages: Sequence[Package]) -> List[DetectedVulnerability]:
        """
        Detect vulnerable packages in an Ubuntu image.

        Packages whose installed version cannot be parsed are skipped, as are
        advisories whose fixed version cannot be parsed.

        Raises:
            LookupFailure: If the advisory store fails for any package.
        """
        logger.info("detecting_vulnerabilities", family=self.family)
        os_version = normalize_release(os_version, truncate=False)
        logger.debug("os_version", family=self.family, os_version=os_version)
        logger.debug("package_count", family=self.family, count=len(packages))

        vulns: List[DetectedVulnerability] = []
        for pkg in packages:
            try:
                advisories = self.store.get(os_version, pkg.source_name)
            except AdvisoryStoreError as e:
                raise LookupFailure(self.family, os_version, pkg.source_name, str(e)) from e

            installed = format_src_version(pkg)
            try:
                installed_version = self.comparator.parse(installed)
            except VersionParseFailure as e:
                logger.debug(
                    "installed_version_parse_failed",
                    package=pkg.name,
                    version=installed,
                    error=str(e)
                )
                continue

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
                    logger.debug(
                        "fixed_version_parse_failed",
                        package=pkg.name,
                        vulnerability_id=adv.vulnerability_id,
                        version=adv.fixed_version,
                        error=str(e)
                    )
                    continue

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
        return self.eol_table.is_supported(
            os_family, normalize_release(os_version, truncate=False), now
        )
