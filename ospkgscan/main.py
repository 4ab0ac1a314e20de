"""
OS package scanner - Main Entry Point

Scans one image inventory against the local advisory database and
prints the result as JSON.

Usage:
    python -m ospkgscan.main inventory.json

The inventory file holds {"family": ..., "release": ..., "packages": [...]}
where each package follows the Package model.
"""

import json
import sys
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from pydantic import ValidationError

from .config import Config, load_config, validate_config
from .advisory.store import SQLiteAdvisoryDB
from .errors import ScanError
from .models import Package, ScanResult
from .scanner import Scanner, new_scanner


def configure_logging(config: Config) -> structlog.BoundLogger:
    """
    Configure structured logging.

    Args:
        config: Application configuration.

    Returns:
        Configured logger.
    """
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Results go to stdout, so logs stay on stderr
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers
    )

    return structlog.get_logger("ospkgscan")


class ScanOrchestrator:
    """
    Runs scans against the configured advisory database.

    Each scan builds its own scanner, so independent images share nothing
    but the read-only database connection.
    """

    def __init__(self, config: Config, logger: structlog.BoundLogger):
        """
        Initialize the orchestrator.

        Args:
            config: Application configuration.
            logger: Configured logger instance.
        """
        self.config = config
        self.logger = logger
        self.db = SQLiteAdvisoryDB(config.advisory_db_path)

        self.logger.info("orchestrator_initialized", advisory_db=config.advisory_db_path)

    def _new_scanner(self, family: str) -> Scanner:
        store = self.db.for_family(family.lower())
        scanner = new_scanner(family, store)

        overrides = self.config.eol_overrides.get(family.lower())
        if overrides:
            eol_table = scanner.eol_table.with_overrides(overrides)
            scanner = new_scanner(family, store, eol_table=eol_table)
        return scanner

    def scan(
        self,
        family: str,
        release: str,
        packages: Sequence[Package],
        now: Optional[datetime] = None
    ) -> ScanResult:
        """
        Scan one image inventory.

        Args:
            family: OS family tag.
            release: OS release string as found in the image.
            packages: Installed packages.
            now: Instant used for the support-window check.

        Returns:
            ScanResult with support status and detected vulnerabilities.

        Raises:
            ScanError: If the family is unsupported or detection fails.
        """
        scanner = self._new_scanner(family)

        self.logger.info("scan_started", family=family, release=release, packages=len(packages))

        supported = scanner.is_supported_version(family, release, now=now)
        if not supported:
            self.logger.warning("os_release_not_supported", family=family, release=release)

        vulns = scanner.detect(release, packages)

        self.logger.info("scan_completed", family=family, release=release, vulnerabilities=len(vulns))

        return ScanResult(
            family=family,
            release=release,
            supported=supported,
            vulnerabilities=vulns
        )

    def cleanup(self):
        """Release the database connection."""
        self.db.close()


def load_inventory(path: str) -> Tuple[str, str, List[Package]]:
    """
    Load an image inventory from a JSON file.

    Returns:
        Tuple of (family, release, packages).

    Raises:
        ValueError: If the file is not a valid inventory.
    """
    with open(path, encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    try:
        family = data["family"]
        release = data["release"]
        packages = [Package.model_validate(p) for p in data.get("packages", [])]
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ValueError(f"invalid inventory {path}: {e}") from e

    if not isinstance(family, str) or not isinstance(release, str):
        raise ValueError(f"invalid inventory {path}: family and release must be strings")

    return family, release, packages


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python -m ospkgscan.main <inventory.json>", file=sys.stderr)
        return 2

    config = load_config()

    errors = validate_config(config)
    if errors:
        print("Configuration errors:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        return 1

    logger = configure_logging(config)

    orchestrator = None
    try:
        family, release, packages = load_inventory(args[0])

        orchestrator = ScanOrchestrator(config, logger)
        result = orchestrator.scan(family, release, packages)

        print(result.model_dump_json(indent=2))
        return 0

    except (ScanError, ValueError, OSError) as e:
        logger.error("scan_failed", error=str(e), exc_info=True)
        return 1

    finally:
        if orchestrator is not None:
            orchestrator.cleanup()


if __name__ == "__main__":
    sys.exit(main())
