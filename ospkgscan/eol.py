"""
End-of-life dates for supported distribution releases.

Each table maps a normalized release identifier to the UTC instant after
which the release no longer receives security fixes. Tables are built once
at import time and never mutated; overrides produce a new table.
"""

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)


def _eol(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 23, 59, 59, tzinfo=timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class EOLTable:
    """Read-only mapping of release identifier to end-of-life instant."""

    def __init__(self, family: str, dates: Mapping[str, datetime]):
        self.family = family
        self._dates = MappingProxyType({k: _as_utc(v) for k, v in dates.items()})

    def __contains__(self, release: object) -> bool:
        return release in self._dates

    def __iter__(self) -> Iterator[str]:
        return iter(self._dates)

    def __len__(self) -> int:
        return len(self._dates)

    def get(self, release: str) -> Optional[datetime]:
        return self._dates.get(release)

    def with_overrides(self, overrides: Mapping[str, datetime]) -> "EOLTable":
        """Return a new table with the given entries added or replaced."""
        if not overrides:
            return self
        merged = dict(self._dates)
        merged.update(overrides)
        return EOLTable(self.family, merged)

    def is_supported(self, os_family: str, release: str, now: datetime) -> bool:
        """
        Check if a release is still inside its support window at `now`.

        Releases missing from the table are reported as unsupported.

        Args:
            os_family: Family tag, used for diagnostics only.
            release: Normalized release identifier.
            now: Instant to evaluate against.

        Returns:
            True iff now is strictly before the release's end-of-life.
        """
        eol = self._dates.get(release)
        if eol is None:
            logger.warning(
                "os_version_not_in_eol_list",
                os_family=os_family,
                os_version=release
            )
            return False
        return _as_utc(now) < eol


_ALPINE_EOL_DATES: Dict[str, datetime] = {
    "2.0": _eol(2012, 4, 1),
    "2.1": _eol(2012, 11, 1),
    "2.2": _eol(2013, 5, 1),
    "2.3": _eol(2013, 11, 1),
    "2.4": _eol(2014, 5, 1),
    "2.5": _eol(2014, 11, 1),
    "2.6": _eol(2015, 5, 1),
    "2.7": _eol(2015, 11, 1),
    "3.0": _eol(2016, 5, 1),
    "3.1": _eol(2016, 11, 1),
    "3.2": _eol(2017, 5, 1),
    "3.3": _eol(2017, 11, 1),
    "3.4": _eol(2018, 5, 1),
    "3.5": _eol(2018, 11, 1),
    "3.6": _eol(2019, 5, 1),
    "3.7": _eol(2019, 11, 1),
    "3.8": _eol(2020, 5, 1),
    "3.9": _eol(2020, 11, 1),
    "3.10": _eol(2021, 5, 1),
}

_UBUNTU_EOL_DATES: Dict[str, datetime] = {
    "4.10": _eol(2006, 4, 30),
    "5.04": _eol(2006, 10, 31),
    "5.10": _eol(2007, 4, 13),
    "6.06": _eol(2011, 6, 1),
    "6.10": _eol(2008, 4, 25),
    "7.04": _eol(2008, 10, 19),
    "7.10": _eol(2009, 4, 18),
    "8.04": _eol(2013, 5, 9),
    "8.10": _eol(2010, 4, 30),
    "9.04": _eol(2010, 10, 23),
    "9.10": _eol(2011, 4, 29),
    "10.04": _eol(2015, 4, 29),
    "10.10": _eol(2012, 4, 10),
    "11.04": _eol(2012, 10, 28),
    "11.10": _eol(2013, 5, 9),
    "12.04": _eol(2019, 4, 26),
    "12.10": _eol(2014, 5, 16),
    "13.04": _eol(2014, 1, 27),
    "13.10": _eol(2014, 7, 17),
    "14.04": _eol(2022, 4, 25),
    "14.10": _eol(2015, 7, 23),
    "15.04": _eol(2016, 1, 23),
    "15.10": _eol(2016, 7, 22),
    "16.04": _eol(2024, 4, 21),
    "16.10": _eol(2017, 7, 20),
    "17.04": _eol(2018, 1, 13),
    "17.10": _eol(2018, 7, 19),
    "18.04": _eol(2028, 4, 26),
    "18.10": _eol(2019, 7, 18),
    "19.04": _eol(2020, 1, 18),
    "19.10": _eol(2020, 7, 17),
}

ALPINE_EOL = EOLTable("alpine", _ALPINE_EOL_DATES)
UBUNTU_EOL = EOLTable("ubuntu", _UBUNTU_EOL_DATES)
