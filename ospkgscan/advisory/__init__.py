"""Advisory stores for OS package scanning."""

from .store import AdvisoryStore, FamilyAdvisories, MemoryAdvisoryStore, SQLiteAdvisoryDB

__all__ = [
    "AdvisoryStore",
    "FamilyAdvisories",
    "MemoryAdvisoryStore",
    "SQLiteAdvisoryDB",
]
