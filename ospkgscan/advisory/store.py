"""
Advisory stores consumed by the distro scanners.

A store answers one question: which advisories are known for a package
identifier in a given release of an OS family. The SQLite database keeps
advisories for several families side by side; `for_family` binds it to
one of them.
"""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import structlog

from ..errors import AdvisoryStoreError
from ..models import Advisory

logger = structlog.get_logger(__name__)


class AdvisoryStore(Protocol):
    """Source of advisories for one OS family."""

    def get(self, release: str, package_identifier: str) -> List[Advisory]:
        """
        Get advisories for a package in a release.

        Raises:
            AdvisoryStoreError: If the lookup cannot be served.
        """
        ...


class MemoryAdvisoryStore:
    """Advisory store backed by an in-memory dictionary."""

    def __init__(self, advisories: Optional[Mapping[Tuple[str, str], Iterable[Advisory]]] = None):
        self._advisories: Dict[Tuple[str, str], List[Advisory]] = {
            key: list(values) for key, values in (advisories or {}).items()
        }

    def add(self, release: str, package_identifier: str, advisory: Advisory):
        self._advisories.setdefault((release, package_identifier), []).append(advisory)

    def get(self, release: str, package_identifier: str) -> List[Advisory]:
        return list(self._advisories.get((release, package_identifier), []))


class SQLiteAdvisoryDB:
    """
    SQLite-based advisory database.

    Rows are keyed by (family, os_release, package, vulnerability_id) so
    re-importing an advisory replaces its fixed version rather than
    duplicating it.
    """

    SCHEMA = """
    CREATE TABLE IF NOT EXISTS advisories (
        family TEXT NOT NULL,
        os_release TEXT NOT NULL,
        package TEXT NOT NULL,
        vulnerability_id TEXT NOT NULL,
        fixed_version TEXT NOT NULL DEFAULT '',
        PRIMARY KEY (family, os_release, package, vulnerability_id)
    );

    CREATE INDEX IF NOT EXISTS idx_advisory_lookup ON advisories(family, os_release, package);
    """

    def __init__(self, db_path: str):
        """
        Initialize the advisory database.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._local = threading.local()

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("advisory_db_initialized", db_path=str(self.db_path))

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'connection') or self._local.connection is None:
            self._local.connection = sqlite3.connect(str(self.db_path), timeout=30.0)
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def _transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _init_schema(self):
        with self._transaction() as conn:
            conn.executescript(self.SCHEMA)

    def put_advisory(self, family: str, release: str, package: str, advisory: Advisory):
        """
        Insert or replace a single advisory.

        Args:
            family: OS family tag (e.g. "alpine").
            release: Normalized release identifier (e.g. "3.10").
            package: Package identifier the family tracks advisories by.
            advisory: Advisory to store.
        """
        self.put_advisories(family, release, package, [advisory])

    def put_advisories(
        self,
        family: str,
        release: str,
        package: str,
        advisories: Iterable[Advisory]
    ) -> int:
        """
        Insert or replace advisories for one package.

        Returns:
            Number of advisories written.
        """
        rows = [
            (family, release, package, adv.vulnerability_id, adv.fixed_version)
            for adv in advisories
        ]
        with self._transaction() as conn:
            conn.executemany(
                """
                INSERT INTO advisories (family, os_release, package, vulnerability_id, fixed_version)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(family, os_release, package, vulnerability_id) DO UPDATE SET
                    fixed_version = excluded.fixed_version
                """,
                rows
            )
        logger.debug(
            "advisories_stored",
            family=family,
            release=release,
            package=package,
            count=len(rows)
        )
        return len(rows)

    def get_advisories(self, family: str, release: str, package: str) -> List[Advisory]:
        """
        Get advisories for a package.

        Raises:
            AdvisoryStoreError: If the database cannot be queried.
        """
        try:
            conn = self._get_connection()
            cursor = conn.execute(
                """
                SELECT vulnerability_id, fixed_version FROM advisories
                WHERE family = ? AND os_release = ? AND package = ?
                ORDER BY vulnerability_id
                """,
                (family, release, package)
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise AdvisoryStoreError(
                f"advisory query failed for {family} {release} {package}: {e}"
            ) from e

        return [
            Advisory(vulnerability_id=row["vulnerability_id"], fixed_version=row["fixed_version"])
            for row in rows
        ]

    def for_family(self, family: str) -> "FamilyAdvisories":
        """Bind the database to one OS family."""
        return FamilyAdvisories(self, family)

    def get_stats(self) -> Dict[str, int]:
        """
        Get advisory counts per family.

        Returns:
            Dict mapping family tag to number of stored advisories.
        """
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT family, COUNT(*) AS total FROM advisories GROUP BY family ORDER BY family"
        )
        return {row["family"]: row["total"] for row in cursor.fetchall()}

    def close(self):
        """Close the database connection."""
        if hasattr(self._local, 'connection') and self._local.connection:
            self._local.connection.close()
            self._local.connection = None


class FamilyAdvisories:
    """AdvisoryStore view of the SQLite database for a single family."""

    def __init__(self, db: SQLiteAdvisoryDB, family: str):
        self.db = db
        self.family = family

    def get(self, release: str, package_identifier: str) -> List[Advisory]:
        return self.db.get_advisories(self.family, release, package_identifier)
