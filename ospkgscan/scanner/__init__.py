"""
Distro scanners and the registry that selects one per OS family.

New families are added with `register_scanner`; `new_scanner` dispatches
on the family tag alone.
"""

from typing import Callable, Dict, List, Optional

from ..advisory.store import AdvisoryStore
from ..eol import EOLTable
from ..errors import UnsupportedFamilyError
from ..versioning import VersionComparator
from .alpine import AlpineScanner
from .base import Scanner
from .ubuntu import UbuntuScanner

ScannerFactory = Callable[..., Scanner]

_SCANNERS: Dict[str, ScannerFactory] = {}


def register_scanner(family: str, factory: ScannerFactory):
    """
    Register a scanner factory for an OS family.

    The factory is called as factory(store, comparator=..., eol_table=...).
    Registering an existing family replaces its factory.
    """
    _SCANNERS[family.lower()] = factory


def supported_families() -> List[str]:
    return sorted(_SCANNERS)


def new_scanner(
    family: str,
    store: AdvisoryStore,
    comparator: Optional[VersionComparator] = None,
    eol_table: Optional[EOLTable] = None
) -> Scanner:
    """
    Build the scanner registered for an OS family.

    Args:
        family: OS family tag (e.g. "alpine").
        store: Advisory store for that family.
        comparator: Optional comparator replacing the family default.
        eol_table: Optional EOL table replacing the family default.

    Raises:
        UnsupportedFamilyError: If no scanner is registered for the family.
    """
    factory = _SCANNERS.get(family.lower())
    if factory is None:
        raise UnsupportedFamilyError(family)
    return factory(store, comparator=comparator, eol_table=eol_table)


register_scanner(AlpineScanner.family, AlpineScanner)
register_scanner(UbuntuScanner.family, UbuntuScanner)

__all__ = [
    "AlpineScanner",
    "Scanner",
    "ScannerFactory",
    "UbuntuScanner",
    "new_scanner",
    "register_scanner",
    "supported_families",
]
